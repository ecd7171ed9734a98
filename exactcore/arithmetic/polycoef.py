"""Coefficient interface used by polynomial arithmetic.

A polynomial stores its coefficients as a list of elements together with a
single divisor shared by all of them. For coefficient types that are closed
under division, such as modular integers, the divisor is always
`DivisorIsOne()` and the elements are simply the coefficients.
"""

import abc

from ..numeric import gmpmath
from . import modular


class DivisorIsOne(object):
    """The trivial divisor. All instances are equal."""

    def __eq__(self, other):
        return isinstance(other, DivisorIsOne)

    def __hash__(self):
        return hash(DivisorIsOne)

    def __mul__(self, other):
        if isinstance(other, DivisorIsOne):
            return self
        return NotImplemented

    def __pow__(self, exponent):
        return self

    def is_one(self):
        return True

    def __repr__(self):
        return 'DivisorIsOne()'


class PolynomialCoefficient(abc.ABC):
    """Operations a polynomial needs from its coefficient type.

    All of these are classmethods; element and coefficient values are never
    mutated, so the set_* operations return the new value.
    """

    @classmethod
    @abc.abstractmethod
    def is_element_zero(cls, element): ...

    @classmethod
    @abc.abstractmethod
    def is_element_one(cls, element): ...

    @classmethod
    @abc.abstractmethod
    def is_coefficient_zero(cls, coefficient): ...

    @classmethod
    @abc.abstractmethod
    def is_coefficient_one(cls, coefficient): ...

    @classmethod
    @abc.abstractmethod
    def set_element_zero(cls, element): ...

    @classmethod
    @abc.abstractmethod
    def set_element_one(cls, element): ...

    @classmethod
    def set_coefficient_zero(cls, coefficient):
        return cls.set_element_zero(coefficient)

    @classmethod
    def set_coefficient_one(cls, coefficient):
        return cls.set_element_one(coefficient)

    @classmethod
    @abc.abstractmethod
    def make_zero_element(cls, element): ...

    @classmethod
    @abc.abstractmethod
    def make_one_element(cls, element): ...

    @classmethod
    @abc.abstractmethod
    def make_zero_coefficient_from_element(cls, element): ...

    @classmethod
    @abc.abstractmethod
    def make_one_coefficient_from_element(cls, element): ...

    @classmethod
    @abc.abstractmethod
    def make_zero_coefficient_from_coefficient(cls, coefficient): ...

    @classmethod
    @abc.abstractmethod
    def make_one_coefficient_from_coefficient(cls, coefficient): ...

    @classmethod
    @abc.abstractmethod
    def negate_element(cls, element): ...

    @classmethod
    @abc.abstractmethod
    def mul_element_by_usize(cls, element, multiplier): ...

    @classmethod
    @abc.abstractmethod
    def divisor_to_element(cls, divisor, other_element): ...

    @classmethod
    @abc.abstractmethod
    def coefficients_to_elements(cls, coefficients): ...

    @classmethod
    @abc.abstractmethod
    def make_coefficient(cls, element, divisor): ...

    @classmethod
    @abc.abstractmethod
    def reduce_divisor(cls, elements, divisor): ...

    @classmethod
    @abc.abstractmethod
    def get_reduced_divisor(cls, elements, divisor): ...

    @classmethod
    @abc.abstractmethod
    def coefficient_to_element(cls, coefficient): ...

    @classmethod
    @abc.abstractmethod
    def divisor_pow_usize(cls, base, exponent): ...

    @classmethod
    @abc.abstractmethod
    def element_pow_usize(cls, base, exponent): ...


class PolynomialReducingFactorSupported(PolynomialCoefficient):
    """Coefficient types that can pick a factor to make a polynomial monic."""

    @classmethod
    @abc.abstractmethod
    def get_nonzero_reducing_factor(cls, elements, divisor): ...


def _check_usize(n):
    if not gmpmath.is_integer(n) or n < 0:
        raise ValueError('expected a non-negative integer, got {}'.format(repr(n)))
    return int(n)


class ModularCoefficient(PolynomialReducingFactorSupported):
    """Coefficient operations for modular integers.

    Elements are the modular integers themselves, and the divisor is always one.
    """

    @classmethod
    def is_element_zero(cls, element):
        return element.value == 0

    @classmethod
    def is_element_one(cls, element):
        return element.value == 1

    @classmethod
    def is_coefficient_zero(cls, coefficient):
        return cls.is_element_zero(coefficient)

    @classmethod
    def is_coefficient_one(cls, coefficient):
        return cls.is_element_one(coefficient)

    @classmethod
    def set_element_zero(cls, element):
        return cls.make_zero_element(element)

    @classmethod
    def set_element_one(cls, element):
        return cls.make_one_element(element)

    @classmethod
    def make_zero_element(cls, element):
        return type(element)(0, element.modulus)

    @classmethod
    def make_one_element(cls, element):
        # reduced, so this is zero modulo one
        return type(element)(1, element.modulus)

    @classmethod
    def make_zero_coefficient_from_element(cls, element):
        return cls.make_zero_element(element)

    @classmethod
    def make_one_coefficient_from_element(cls, element):
        return cls.make_one_element(element)

    @classmethod
    def make_zero_coefficient_from_coefficient(cls, coefficient):
        return cls.make_zero_element(coefficient)

    @classmethod
    def make_one_coefficient_from_coefficient(cls, coefficient):
        return cls.make_one_element(coefficient)

    @classmethod
    def negate_element(cls, element):
        return -element

    @classmethod
    def mul_element_by_usize(cls, element, multiplier):
        multiplier = modular.modular_reduce_from_integer(_check_usize(multiplier), element.modulus)
        value = modular.modular_mul(element.value, multiplier, element.modulus)
        return type(element)(value, element.modulus)

    @classmethod
    def divisor_to_element(cls, divisor, other_element):
        return cls.make_one_element(other_element)

    @classmethod
    def coefficients_to_elements(cls, coefficients):
        return list(coefficients), DivisorIsOne()

    @classmethod
    def make_coefficient(cls, element, divisor):
        return element

    @classmethod
    def reduce_divisor(cls, elements, divisor):
        pass

    @classmethod
    def get_reduced_divisor(cls, elements, divisor):
        return list(elements), DivisorIsOne()

    @classmethod
    def coefficient_to_element(cls, coefficient):
        return coefficient, DivisorIsOne()

    @classmethod
    def divisor_pow_usize(cls, base, exponent):
        return DivisorIsOne()

    @classmethod
    def element_pow_usize(cls, base, exponent):
        return base.pow(_check_usize(exponent))

    @classmethod
    def get_nonzero_reducing_factor(cls, elements, divisor):
        """The leading (last) element, or None for an empty polynomial.
        Only valid when the modulus is prime, so that the factor is invertible.
        """
        if len(elements) == 0:
            return None
        element = elements[-1]
        if not isinstance(element.modulus, modular.PrimeModulus):
            raise TypeError('reducing factor requires a PrimeModulus, got {}'.format(repr(element.modulus)))
        return element
