"""Dyadic fraction intervals.

A `DyadicFractionInterval` is the closed interval [a / 2**n, b / 2**n]
where a and b are integers and n is a non-negative integer shared by
both bounds. Arithmetic is rigorous: every operation produces an
interval containing all possible results for all points of its inputs.
Whenever a bound cannot be represented exactly, the lower bound is
rounded toward negative infinity and the upper bound toward positive
infinity, so results are never smaller than the truth.

Operands can be other intervals, any integer (Python, GMP or numpy
fixed-width) or any rational (fractions.Fraction or gmpy2.mpq); integers
and rationals are promoted losslessly before use.
"""

import gmpy2 as gmp

from ..numeric import gmpmath, utils
from ..numeric.gmpmath import div_2exp
from ..numeric.ops import RM
from . import evalctx


_mpz_0 = gmp.mpz(0)
_mpz_1 = gmp.mpz(1)


def _select_log2_denom(log2_denom, ctx):
    if log2_denom is not None:
        return evalctx.check_log2_denom(log2_denom)
    elif ctx is not None:
        return ctx.log2_denom
    else:
        return evalctx.dyadic_ctx().log2_denom


def _is_operand(x):
    return isinstance(x, DyadicFractionInterval) or gmpmath.is_rational(x)


def _pow_numer(base, exponent, log2_denom, rm):
    """Raise the non-negative dyadic fraction base / 2**log2_denom to a positive
    integer power by square-and-multiply, rounding every intermediate product
    in direction rm. Returns the numerator of the result.
    """
    result = _mpz_1 << log2_denom
    while True:
        if exponent & 1:
            result = div_2exp(result * base, log2_denom, rm)
        exponent >>= 1
        if exponent == 0:
            break
        base = div_2exp(base * base, log2_denom, rm)
    return result


class DyadicFractionInterval(object):
    """Inclusive interval of the form [a / 2**n, b / 2**n]."""

    # numpy scalars should defer to our reflected operators
    __array_ufunc__ = None

    _lower_bound_numer = _mpz_0
    _upper_bound_numer = _mpz_0
    _log2_denom = 0

    @property
    def lower_bound_numer(self):
        """Numerator of the lower bound."""
        return self._lower_bound_numer

    @property
    def upper_bound_numer(self):
        """Numerator of the upper bound."""
        return self._upper_bound_numer

    @property
    def log2_denom(self):
        """Both bounds share the denominator 2**log2_denom."""
        return self._log2_denom

    @property
    def lower_bound(self):
        """The lower bound, as an exact rational."""
        return gmp.mpq(self._lower_bound_numer, _mpz_1 << self._log2_denom)

    @property
    def upper_bound(self):
        """The upper bound, as an exact rational."""
        return gmp.mpq(self._upper_bound_numer, _mpz_1 << self._log2_denom)

    def __init__(self, lower_bound_numer, upper_bound_numer, log2_denom=None, ctx=None):
        """Create the interval [lower_bound_numer / 2**log2_denom, upper_bound_numer / 2**log2_denom].
        If log2_denom is not given, it is taken from ctx, or from the default context.
        """
        self._lower_bound_numer = gmpmath.to_mpz(lower_bound_numer)
        self._upper_bound_numer = gmpmath.to_mpz(upper_bound_numer)
        self._log2_denom = _select_log2_denom(log2_denom, ctx)

        if self._lower_bound_numer > self._upper_bound_numer:
            raise ValueError('invalid interval: lower_bound_numer={}, upper_bound_numer={}'
                             .format(self._lower_bound_numer, self._upper_bound_numer))

    @classmethod
    def _from_numers(cls, lower_bound_numer, upper_bound_numer, log2_denom):
        new = cls.__new__(cls)
        new._lower_bound_numer = lower_bound_numer
        new._upper_bound_numer = upper_bound_numer
        new._log2_denom = log2_denom
        return new

    @classmethod
    def from_ratio_range(cls, lower_bound, upper_bound, log2_denom=None, ctx=None):
        """Tightest interval with denominator 2**log2_denom containing
        every value between the rationals lower_bound and upper_bound.
        """
        lower_bound = gmpmath.to_mpq(lower_bound)
        upper_bound = gmpmath.to_mpq(upper_bound)
        if lower_bound > upper_bound:
            raise ValueError('invalid range: lower_bound={}, upper_bound={}'
                             .format(lower_bound, upper_bound))
        log2_denom = _select_log2_denom(log2_denom, ctx)
        denom = _mpz_1 << log2_denom
        return cls._from_numers(
            gmpmath.round_mpq(lower_bound * denom, RM.RTN),
            gmpmath.round_mpq(upper_bound * denom, RM.RTP),
            log2_denom,
        )

    @classmethod
    def from_ratio(cls, ratio, log2_denom=None, ctx=None):
        """Tightest interval with denominator 2**log2_denom containing the rational ratio.
        This is a single point if ratio is exactly representable.
        """
        ratio = gmpmath.to_mpq(ratio)
        log2_denom = _select_log2_denom(log2_denom, ctx)
        scaled = gmp.mpq(ratio.numerator << log2_denom, ratio.denominator)
        return cls._from_numers(
            gmpmath.round_mpq(scaled, RM.RTN),
            gmpmath.round_mpq(scaled, RM.RTP),
            log2_denom,
        )

    @classmethod
    def from_dyadic_fraction(cls, numer, log2_denom=None, ctx=None):
        """The single point numer / 2**log2_denom."""
        numer = gmpmath.to_mpz(numer)
        return cls._from_numers(numer, numer, _select_log2_denom(log2_denom, ctx))

    @classmethod
    def zero(cls, log2_denom=None, ctx=None):
        return cls.from_dyadic_fraction(_mpz_0, log2_denom=log2_denom, ctx=ctx)

    @classmethod
    def one(cls, log2_denom=None, ctx=None):
        log2_denom = _select_log2_denom(log2_denom, ctx)
        return cls.from_dyadic_fraction(_mpz_1 << log2_denom, log2_denom=log2_denom)

    @classmethod
    def negative_one(cls, log2_denom=None, ctx=None):
        log2_denom = _select_log2_denom(log2_denom, ctx)
        return cls.from_dyadic_fraction(-(_mpz_1 << log2_denom), log2_denom=log2_denom)

    def set_zero(self):
        self._lower_bound_numer = _mpz_0
        self._upper_bound_numer = _mpz_0

    def set_one(self):
        self._lower_bound_numer = _mpz_1 << self._log2_denom
        self._upper_bound_numer = self._lower_bound_numer

    def set_negative_one(self):
        self._lower_bound_numer = -(_mpz_1 << self._log2_denom)
        self._upper_bound_numer = self._lower_bound_numer

    def copy(self):
        return self._from_numers(self._lower_bound_numer, self._upper_bound_numer, self._log2_denom)

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo):
        # the bounds are immutable
        return self.copy()

    def to_ratio_range(self):
        """The bounds of this interval as a pair of exact rationals."""
        return self.lower_bound, self.upper_bound

    def convert_log2_denom(self, log2_denom):
        """Re-express this interval with the denominator 2**log2_denom, in place.
        Increasing the denominator is exact; decreasing it rounds the lower bound
        down and the upper bound up, so the interval can only grow.
        """
        log2_denom = evalctx.check_log2_denom(log2_denom)
        self._lower_bound_numer = gmpmath.rescale(self._lower_bound_numer, self._log2_denom, log2_denom, RM.RTN)
        self._upper_bound_numer = gmpmath.rescale(self._upper_bound_numer, self._log2_denom, log2_denom, RM.RTP)
        self._log2_denom = log2_denom

    def to_converted_log2_denom(self, log2_denom):
        result = self.copy()
        result.convert_log2_denom(log2_denom)
        return result

    def contains_zero(self):
        return self._lower_bound_numer <= 0 and self._upper_bound_numer >= 0

    def contains(self, x):
        """Does this interval contain the rational x, or every point of the interval x?"""
        if isinstance(x, DyadicFractionInterval):
            return self.lower_bound <= x.lower_bound and x.upper_bound <= self.upper_bound
        q = gmpmath.to_mpq(x)
        return self.lower_bound <= q <= self.upper_bound

    def is_identical_to(self, other):
        """Is this interval encoded identically to some other interval?
        This is a structural property: [1/2, 1/2] and [2/4, 2/4] are not identical.
        """
        return (
            self._lower_bound_numer == other._lower_bound_numer
            and self._upper_bound_numer == other._upper_bound_numer
            and self._log2_denom == other._log2_denom
        )

    def __eq__(self, other):
        if isinstance(other, DyadicFractionInterval):
            return self.is_identical_to(other)
        return NotImplemented

    # intervals are mutated in place by the assignment operators
    __hash__ = None

    def __repr__(self):
        return '{}(lower_bound_numer={}, upper_bound_numer={}, log2_denom={})'.format(
            type(self).__name__, int(self._lower_bound_numer), int(self._upper_bound_numer), self._log2_denom
        )

    def __str__(self):
        return '[{} / 2^{}, {} / 2^{}]'.format(
            self._lower_bound_numer, self._log2_denom, self._upper_bound_numer, self._log2_denom
        )

    # arithmetic

    def _align(self, rhs):
        """Bring self and rhs to the larger of their two denominators.
        Self is shifted in place; the (possibly shifted) numerators of rhs are returned.
        Both shifts are exact.
        """
        rhs_lower_bound_numer = rhs._lower_bound_numer
        rhs_upper_bound_numer = rhs._upper_bound_numer
        if rhs._log2_denom >= self._log2_denom:
            shift = rhs._log2_denom - self._log2_denom
            self._lower_bound_numer <<= shift
            self._upper_bound_numer <<= shift
            self._log2_denom = rhs._log2_denom
            return rhs_lower_bound_numer, rhs_upper_bound_numer
        else:
            shift = self._log2_denom - rhs._log2_denom
            return rhs_lower_bound_numer << shift, rhs_upper_bound_numer << shift

    def _scale_by_ratio(self, ratio):
        if ratio < 0:
            # negative scaling reverses the orientation of the interval
            self._lower_bound_numer, self._upper_bound_numer = self._upper_bound_numer, self._lower_bound_numer
        self._lower_bound_numer = gmpmath.round_mpq(ratio * self._lower_bound_numer, RM.RTN)
        self._upper_bound_numer = gmpmath.round_mpq(ratio * self._upper_bound_numer, RM.RTP)

    def add_assign(self, other):
        if isinstance(other, DyadicFractionInterval):
            rhs_lower_bound_numer, rhs_upper_bound_numer = self._align(other)
            self._lower_bound_numer += rhs_lower_bound_numer
            self._upper_bound_numer += rhs_upper_bound_numer
        elif gmpmath.is_integer(other):
            rhs = gmpmath.to_mpz(other) << self._log2_denom
            self._lower_bound_numer += rhs
            self._upper_bound_numer += rhs
        elif gmpmath.is_rational(other):
            self.add_assign(DyadicFractionInterval.from_ratio(other, self._log2_denom))
        else:
            raise TypeError('cannot add {} to an interval'.format(repr(other)))

    def sub_assign(self, other):
        if isinstance(other, DyadicFractionInterval):
            rhs_lower_bound_numer, rhs_upper_bound_numer = self._align(other)
            # rhs swapped and subtracted
            self._lower_bound_numer -= rhs_upper_bound_numer
            self._upper_bound_numer -= rhs_lower_bound_numer
        elif gmpmath.is_integer(other):
            rhs = gmpmath.to_mpz(other) << self._log2_denom
            self._lower_bound_numer -= rhs
            self._upper_bound_numer -= rhs
        elif gmpmath.is_rational(other):
            self.sub_assign(DyadicFractionInterval.from_ratio(other, self._log2_denom))
        else:
            raise TypeError('cannot subtract {} from an interval'.format(repr(other)))

    def mul_assign(self, other):
        if isinstance(other, DyadicFractionInterval):
            rhs_lower_bound_numer, rhs_upper_bound_numer = self._align(other)
            products = [
                self._lower_bound_numer * rhs_lower_bound_numer,
                self._lower_bound_numer * rhs_upper_bound_numer,
                self._upper_bound_numer * rhs_lower_bound_numer,
                self._upper_bound_numer * rhs_upper_bound_numer,
            ]
            self._lower_bound_numer = div_2exp(min(products), self._log2_denom, RM.RTN)
            self._upper_bound_numer = div_2exp(max(products), self._log2_denom, RM.RTP)
        elif gmpmath.is_integer(other):
            rhs = gmpmath.to_mpz(other)
            if rhs < 0:
                self._lower_bound_numer, self._upper_bound_numer = self._upper_bound_numer, self._lower_bound_numer
            self._lower_bound_numer *= rhs
            self._upper_bound_numer *= rhs
        elif gmpmath.is_rational(other):
            self._scale_by_ratio(gmpmath.to_mpq(other))
        else:
            raise TypeError('cannot multiply an interval by {}'.format(repr(other)))

    def div_assign(self, other):
        """Divide by an integer or rational, i.e. multiply by its reciprocal.
        Division by a variable interval is not supported.
        """
        if isinstance(other, DyadicFractionInterval):
            raise TypeError('division by an interval is not supported')
        elif gmpmath.is_rational(other):
            rhs = gmpmath.to_mpq(other)
            if rhs == 0:
                raise ZeroDivisionError('interval division by zero')
            self._scale_by_ratio(1 / rhs)
        else:
            raise TypeError('cannot divide an interval by {}'.format(repr(other)))

    def neg_assign(self):
        self._lower_bound_numer, self._upper_bound_numer = -self._upper_bound_numer, -self._lower_bound_numer

    def square_assign(self):
        """Replace this interval with a sound enclosure of {x**2 for x in self}."""
        contains_zero = self.contains_zero()
        min_numer = abs(self._lower_bound_numer)
        max_numer = abs(self._upper_bound_numer)
        if min_numer > max_numer:
            min_numer, max_numer = max_numer, min_numer
        if contains_zero:
            # the minimum of x**2 is exactly 0, whatever the endpoints are
            self._lower_bound_numer = _mpz_0
        else:
            self._lower_bound_numer = div_2exp(min_numer * min_numer, self._log2_denom, RM.RTN)
        self._upper_bound_numer = div_2exp(max_numer * max_numer, self._log2_denom, RM.RTP)

    def sqrt_assign(self):
        """Replace this interval with a sound enclosure of {sqrt(x) for x in self}.
        The negative part of an interval that straddles zero is ignored;
        an interval entirely below zero has no square root and raises DomainError.
        """
        if self._upper_bound_numer < 0:
            raise utils.DomainError('square root of negative interval {}'.format(str(self)))
        log2_denom = self._log2_denom
        scaled_lower_bound_numer = max(self._lower_bound_numer, _mpz_0) << log2_denom
        scaled_upper_bound_numer = self._upper_bound_numer << log2_denom
        self._lower_bound_numer = gmpmath.isqrt(scaled_lower_bound_numer, RM.RTN)
        self._upper_bound_numer = gmpmath.isqrt(scaled_upper_bound_numer, RM.RTP)

    def pow_assign(self, exponent):
        """Replace this interval with a sound enclosure of {x**exponent for x in self},
        for a non-negative integer exponent.
        """
        if not gmpmath.is_integer(exponent) or exponent < 0:
            raise ValueError('exponent must be a non-negative integer, got {}'.format(repr(exponent)))
        exponent = int(exponent)

        if exponent == 0:
            self.set_one()
            return
        elif exponent == 1:
            return

        log2_denom = self._log2_denom
        contains_zero = self.contains_zero()
        lower_bound_is_negative = self._lower_bound_numer < 0
        upper_bound_is_negative = self._upper_bound_numer < 0
        lower_magnitude = abs(self._lower_bound_numer)
        upper_magnitude = abs(self._upper_bound_numer)

        if exponent % 2 == 0:
            # the sign doesn't matter, so the result is bounded by the
            # smallest and largest magnitudes
            if lower_magnitude > upper_magnitude:
                lower_magnitude, upper_magnitude = upper_magnitude, lower_magnitude
            if contains_zero:
                lower_magnitude = _mpz_0
            self._lower_bound_numer = _pow_numer(lower_magnitude, exponent, log2_denom, RM.RTN)
            self._upper_bound_numer = _pow_numer(upper_magnitude, exponent, log2_denom, RM.RTP)
        else:
            # odd powers are monotonic; a negative bound is rounded by
            # rounding its magnitude the other way
            if lower_bound_is_negative:
                self._lower_bound_numer = -_pow_numer(lower_magnitude, exponent, log2_denom, RM.RTP)
            else:
                self._lower_bound_numer = _pow_numer(lower_magnitude, exponent, log2_denom, RM.RTN)
            if upper_bound_is_negative:
                self._upper_bound_numer = -_pow_numer(upper_magnitude, exponent, log2_denom, RM.RTN)
            else:
                self._upper_bound_numer = _pow_numer(upper_magnitude, exponent, log2_denom, RM.RTP)

    def square(self):
        result = self.copy()
        result.square_assign()
        return result

    def sqrt(self):
        result = self.copy()
        result.sqrt_assign()
        return result

    def pow(self, exponent):
        result = self.copy()
        result.pow_assign(exponent)
        return result

    def __neg__(self):
        result = self.copy()
        result.neg_assign()
        return result

    def __add__(self, other):
        if not _is_operand(other):
            return NotImplemented
        result = self.copy()
        result.add_assign(other)
        return result

    def __radd__(self, other):
        if not _is_operand(other):
            return NotImplemented
        result = self.copy()
        result.add_assign(other)
        return result

    def __iadd__(self, other):
        if not _is_operand(other):
            return NotImplemented
        self.add_assign(other)
        return self

    def __sub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        result = self.copy()
        result.sub_assign(other)
        return result

    def __rsub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        result = -self
        result.add_assign(other)
        return result

    def __isub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        self.sub_assign(other)
        return self

    def __mul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        result = self.copy()
        result.mul_assign(other)
        return result

    def __rmul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        result = self.copy()
        result.mul_assign(other)
        return result

    def __imul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        self.mul_assign(other)
        return self

    def __truediv__(self, other):
        if isinstance(other, DyadicFractionInterval) or not _is_operand(other):
            return NotImplemented
        result = self.copy()
        result.div_assign(other)
        return result

    def __itruediv__(self, other):
        if isinstance(other, DyadicFractionInterval) or not _is_operand(other):
            return NotImplemented
        self.div_assign(other)
        return self

    def __pow__(self, exponent, modulo=None):
        if modulo is not None or not gmpmath.is_integer(exponent):
            return NotImplemented
        return self.pow(exponent)

    def __ipow__(self, exponent):
        if not gmpmath.is_integer(exponent):
            return NotImplemented
        self.pow_assign(exponent)
        return self
