"""Moduli and overflow-free modular reduction for each supported integer width.

A modulus is either a plain integer, which is its own modulus, or an
instance of a `Modulus` subclass. The capability classes below carry no
runtime data; they are checked with isinstance.

Each supported value type gets one `ModularRing`, which does all of its
arithmetic in a wider type and range-checks the result on the way back,
so operations on residues can never silently wrap around.
"""

import abc
import collections
import logging

import gmpy2 as gmp
import numpy as np

from ..numeric import gmpmath
from . import evalctx


logger = logging.getLogger(__name__)


class Modulus(abc.ABC):
    """Something that can supply a modulus value."""

    @abc.abstractmethod
    def to_modulus(self):
        """The integer value of this modulus."""

    def into_modulus(self):
        return self.to_modulus()


class StaticModulus(Modulus):
    """Modulus fixed by the class, in the MODULUS class attribute.

    All instances of a given subclass are interchangeable.

    >>> class Mod7(StaticModulus):
    ...     MODULUS = 7
    >>> Mod7.get_modulus(), Mod7().to_modulus(), Mod7() == Mod7()
    (7, 7, True)
    """

    MODULUS = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.MODULUS is not None and not gmpmath.is_integer(cls.MODULUS):
            raise TypeError('MODULUS must be an integer, got {}'.format(repr(cls.MODULUS)))

    @classmethod
    def get_modulus(cls):
        if cls.MODULUS is None:
            raise TypeError('{} does not define MODULUS'.format(cls.__name__))
        return cls.MODULUS

    def to_modulus(self):
        return type(self).get_modulus()

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(type(self))

    def __repr__(self):
        return '{}()'.format(type(self).__name__)


BaseAndExponent = collections.namedtuple('BaseAndExponent', ['base', 'exponent'])


class PrimePowerModulus(Modulus):
    """Modulus known to be a power of a prime."""

    @abc.abstractmethod
    def base_and_exponent(self):
        """The prime and exponent, as a BaseAndExponent."""


class PrimeModulus(PrimePowerModulus):
    """Modulus known to be prime. Primality is never checked."""

    def base_and_exponent(self):
        return BaseAndExponent(self.to_modulus(), 1)


def to_modulus(modulus):
    """The modulus value of a plain integer or a Modulus instance."""
    if isinstance(modulus, Modulus):
        return modulus.to_modulus()
    elif gmpmath.is_integer(modulus):
        return modulus
    else:
        raise TypeError('expected an integer or Modulus, got {}'.format(repr(modulus)))


class ModularRing(object):
    """Modular arithmetic on values of one integer type.

    Every operation widens its operands to the wide type, computes and reduces
    there, and narrows the result back with a range check. A zero modulus means
    no reduction at all; results that don't fit the narrow type then raise
    OverflowError instead of wrapping.
    """

    def __init__(self, name, narrow, wide):
        self._name = name
        self._narrow = narrow
        self._wide = wide
        if narrow is gmpmath.mpz_type:
            self._min = None
            self._max = None
        else:
            info = np.iinfo(narrow)
            self._min = info.min
            self._max = info.max

    @property
    def name(self):
        return self._name

    @property
    def narrow_type(self):
        return self._narrow

    @property
    def wide_type(self):
        return self._wide

    def __repr__(self):
        return '{}(name={}, narrow={}, wide={})'.format(
            type(self).__name__, repr(self._name), self._narrow.__name__, self._wide.__name__)

    def widen(self, value):
        if self._wide is gmpmath.mpz_type:
            return gmp.mpz(int(value))
        else:
            return self._wide(int(value))

    def narrow(self, value):
        """Convert value back into the narrow type, raising OverflowError if it doesn't fit."""
        i = int(value)
        if self._min is not None and not self._min <= i <= self._max:
            raise OverflowError('{} does not fit in {}'.format(i, self._name))
        if self._narrow is gmpmath.mpz_type:
            return gmp.mpz(i)
        else:
            return self._narrow(i)

    def coerce(self, value):
        """Losslessly convert any integer into the narrow type."""
        if not gmpmath.is_integer(value):
            raise TypeError('expected an integer, got {}'.format(repr(value)))
        return self.narrow(value)

    def _wide_modulus(self, modulus):
        return self.widen(self.coerce(to_modulus(modulus)))

    def reduce(self, value, modulus):
        m = self._wide_modulus(modulus)
        if m == 0:
            return self.coerce(value)
        return self.narrow(self.widen(self.coerce(value)) % m)

    def add(self, lhs, rhs, modulus):
        m = self._wide_modulus(modulus)
        wide = self.widen(lhs) + self.widen(rhs)
        if m != 0:
            wide %= m
        return self.narrow(wide)

    def neg(self, value, modulus):
        m = self._wide_modulus(modulus)
        v = self.widen(value)
        if v == 0:
            return self.zero()
        if m == 0:
            # plain integers; unsigned types can't hold the result
            return self.narrow(-gmp.mpz(int(v)))
        return self.narrow(m - v)

    def sub(self, lhs, rhs, modulus):
        m = self._wide_modulus(modulus)
        if m == 0:
            # plain integers; only the difference itself has to fit
            return self.narrow(gmp.mpz(int(lhs)) - gmp.mpz(int(rhs)))
        return self.add(lhs, self.neg(rhs, modulus), modulus)

    def mul(self, lhs, rhs, modulus):
        m = self._wide_modulus(modulus)
        wide = self.widen(lhs) * self.widen(rhs)
        if m != 0:
            wide %= m
        return self.narrow(wide)

    def reduce_from_integer(self, value, modulus):
        """Reduce an integer of any type and size into this ring."""
        v = gmpmath.to_mpz(value)
        m = gmp.mpz(int(to_modulus(modulus)))
        if m != 0:
            v %= m
        return self.narrow(v)

    def pow(self, base, exponent, modulus):
        """base ** exponent, reduced after every multiply."""
        if not gmpmath.is_integer(exponent) or exponent < 0:
            raise ValueError('exponent must be a non-negative integer, got {}'.format(repr(exponent)))
        exponent = int(exponent)

        if exponent == 0:
            return self.reduce(self.one(), modulus)
        if self._narrow is gmpmath.mpz_type:
            return self.narrow(gmpmath.powmod(base, exponent, to_modulus(modulus)))

        base = self.reduce(base, modulus)
        result = None
        while True:
            if exponent & 1:
                if result is None:
                    result = base
                else:
                    result = self.mul(result, base, modulus)
            exponent >>= 1
            if exponent == 0:
                break
            base = self.mul(base, base, modulus)
        return result

    def extended_gcd(self, lhs, rhs):
        """(gcd, x, y) with lhs*x + rhs*y == gcd, as mpz values."""
        return gmpmath.extended_gcd(lhs, rhs)

    def is_zero(self, value):
        return value == 0

    def is_one(self, value):
        return value == 1

    def zero(self):
        return self.narrow(0)

    def one(self):
        return self.narrow(1)


# (name, narrow type, wide type)
_ring_table = [
    ('int8', np.int8, np.int16),
    ('uint8', np.uint8, np.uint16),
    ('int16', np.int16, np.int32),
    ('uint16', np.uint16, np.uint32),
    ('int32', np.int32, np.int64),
    ('uint32', np.uint32, np.uint64),
    ('int64', np.int64, gmpmath.mpz_type),
    ('uint64', np.uint64, gmpmath.mpz_type),
    ('bigint', gmpmath.mpz_type, gmpmath.mpz_type),
]

def _ring_key(t):
    if issubclass(t, np.integer):
        # platform aliases like np.longlong are distinct classes with the same layout
        dtype = np.dtype(t)
        return (dtype.kind, dtype.itemsize)
    elif t is int:
        # python ints are handled as arbitrary precision
        return gmpmath.mpz_type
    else:
        return t

rings = {}
for name, narrow, wide in _ring_table:
    rings[_ring_key(narrow)] = ModularRing(name, narrow, wide)
logger.debug('built modular rings: %s', ', '.join(ring.name for ring in rings.values()))


def ring_for(value):
    """The ring handling values (or moduli) of the same type as value."""
    if isinstance(value, Modulus):
        value = value.to_modulus()
    if isinstance(value, bool):
        raise TypeError('unsupported integer type bool')
    try:
        return rings[_ring_key(type(value))]
    except KeyError:
        raise TypeError('unsupported integer type {}'.format(type(value).__name__))


def ring_for_name(name):
    """The ring for a C-style type name, such as 'int32', 'uint8_t' or 'bigint'."""
    return rings[_ring_key(evalctx.integer_type(name))]


# module-level forms, dispatching on the type of the modulus

def modular_reduce(value, modulus):
    return ring_for(modulus).reduce(value, modulus)

def modular_add(lhs, rhs, modulus):
    return ring_for(modulus).add(lhs, rhs, modulus)

def modular_sub(lhs, rhs, modulus):
    return ring_for(modulus).sub(lhs, rhs, modulus)

def modular_neg(value, modulus):
    return ring_for(modulus).neg(value, modulus)

def modular_mul(lhs, rhs, modulus):
    return ring_for(modulus).mul(lhs, rhs, modulus)

def modular_reduce_from_integer(value, modulus):
    return ring_for(modulus).reduce_from_integer(value, modulus)

def pow_modular_reduce(base, exponent, modulus):
    return ring_for(modulus).pow(base, exponent, modulus)
