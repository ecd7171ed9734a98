"""Integers modulo some modulus.

>>> a = ModularInteger(3, 7)
>>> b = ModularInteger(5, 7)
>>> print(a + b, a * b, a / b)
1 (mod 7) 1 (mod 7) 2 (mod 7)
>>> ModularInteger(2, 4).checked_inverse() is None
True
"""

from ..numeric import gmpmath, utils
from ..numeric.ops import OP
from . import modular
from .polycoef import ModularCoefficient


_ring_ops = {
    OP.add: modular.ModularRing.add,
    OP.sub: modular.ModularRing.sub,
    OP.mul: modular.ModularRing.mul,
}


class ModularInteger(ModularCoefficient):
    """An immutable residue together with its modulus.

    The modulus can be a plain integer, or a Modulus instance. The value is
    always stored reduced, in the integer type of the modulus. A zero modulus
    means plain (unreduced) integer arithmetic in that type.
    """

    # numpy scalars should defer to our reflected operators
    __array_ufunc__ = None

    _value = 0
    _modulus = 0
    _ring = None

    @property
    def value(self):
        return self._value

    @property
    def modulus(self):
        return self._modulus

    def __init__(self, value, modulus):
        m = modular.to_modulus(modulus)
        if m < 0:
            raise ValueError('modulus must be non-negative, got {}'.format(repr(m)))
        self._ring = modular.ring_for(m)
        self._value = self._ring.reduce(value, modulus)
        self._modulus = modulus

    @classmethod
    def _from_reduced(cls, value, modulus, ring):
        new = cls.__new__(cls)
        new._value = value
        new._modulus = modulus
        new._ring = ring
        return new

    @classmethod
    def from_integer(cls, value, modulus):
        """Reduce an integer of any type or size modulo modulus.

        >>> print(ModularInteger.from_integer(-1, 7))
        6 (mod 7)
        """
        return cls(modular.modular_reduce_from_integer(value, modulus), modulus)

    @classmethod
    def from_tuple(cls, t):
        value, modulus = t
        return cls(value, modulus)

    def to_tuple(self):
        return self._value, self._modulus

    def has_matching_moduli(self, rhs):
        """Same modulus value, held in the same integer type."""
        return self._ring is rhs._ring and bool(self._modulus == rhs._modulus)

    def _require_matching_moduli(self, rhs):
        if not self.has_matching_moduli(rhs):
            raise utils.ModulusMismatchError("moduli don't match")

    def _apply(self, op, rhs):
        value = _ring_ops[op](self._ring, self._value, rhs._value, self._modulus)
        return self._from_reduced(value, self._modulus, self._ring)

    # checked forms return None instead of raising

    def checked_add(self, rhs):
        if not self.has_matching_moduli(rhs):
            return None
        return self._apply(OP.add, rhs)

    def checked_sub(self, rhs):
        if not self.has_matching_moduli(rhs):
            return None
        return self._apply(OP.sub, rhs)

    def checked_mul(self, rhs):
        if not self.has_matching_moduli(rhs):
            return None
        return self._apply(OP.mul, rhs)

    def checked_inverse(self):
        """The multiplicative inverse, or None if there isn't one."""
        if self._ring.is_zero(self._value):
            return None
        gcd, x, _ = self._ring.extended_gcd(self._value, modular.to_modulus(self._modulus))
        if gcd == 1:
            return self.from_integer(x, self._modulus)
        else:
            return None

    def checked_div(self, rhs):
        if not self.has_matching_moduli(rhs):
            return None
        inverse = rhs.checked_inverse()
        if inverse is None:
            return None
        return self._apply(OP.mul, inverse)

    def inverse(self):
        inverse = self.checked_inverse()
        if inverse is None:
            raise utils.NotInvertibleError('value has no modular inverse')
        return inverse

    def exact_div(self, rhs):
        return self / rhs

    def checked_exact_div(self, rhs):
        return self.checked_div(rhs)

    def always_exact_div(self, rhs):
        """Division that always succeeds for nonzero divisors, because the modulus is prime."""
        if not isinstance(self._modulus, modular.PrimeModulus):
            raise TypeError('always_exact_div requires a PrimeModulus, got {}'.format(repr(self._modulus)))
        return self / rhs

    def pow(self, exponent):
        """Raise to an integer power. Negative powers use the inverse."""
        if exponent < 0:
            return self.inverse().pow(-exponent)
        value = modular.pow_modular_reduce(self._value, exponent, self._modulus)
        return self._from_reduced(value, self._modulus, self._ring)

    # operators

    def __add__(self, other):
        if not isinstance(other, ModularInteger):
            return NotImplemented
        self._require_matching_moduli(other)
        return self._apply(OP.add, other)

    def __sub__(self, other):
        if not isinstance(other, ModularInteger):
            return NotImplemented
        self._require_matching_moduli(other)
        return self._apply(OP.sub, other)

    def __mul__(self, other):
        if not isinstance(other, ModularInteger):
            return NotImplemented
        self._require_matching_moduli(other)
        return self._apply(OP.mul, other)

    def __truediv__(self, other):
        if not isinstance(other, ModularInteger):
            return NotImplemented
        self._require_matching_moduli(other)
        return self._apply(OP.mul, other.inverse())

    def __neg__(self):
        value = self._ring.neg(self._value, self._modulus)
        return self._from_reduced(value, self._modulus, self._ring)

    def __pow__(self, exponent, modulo=None):
        if modulo is not None or not gmpmath.is_integer(exponent):
            return NotImplemented
        return self.pow(exponent)

    def __eq__(self, other):
        if isinstance(other, ModularInteger):
            return bool(self._value == other._value) and self.has_matching_moduli(other)
        return NotImplemented

    def __hash__(self):
        return hash((int(self._value), self._modulus))

    def __int__(self):
        return int(self._value)

    def __bool__(self):
        return not self._ring.is_zero(self._value)

    def __repr__(self):
        return '{}(value={}, modulus={})'.format(type(self).__name__, int(self._value), repr(self._modulus))

    def __str__(self):
        return '{} (mod {})'.format(int(self._value), int(modular.to_modulus(self._modulus)))
