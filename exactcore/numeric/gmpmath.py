"""Exact integer and rational helpers, implemented with GMP as a backend.

These are the directed rounding primitives shared by the dyadic interval
engine, and the bits of number theory used by the modular arithmetic.
Everything here is exact: rounding only ever happens where a rounding
direction is given explicitly.
"""


import numbers

import gmpy2 as gmp

from .ops import RM


mpz_type = type(gmp.mpz(0))
mpq_type = type(gmp.mpq(0))


def is_integer(x):
    """Is x an integer type we can promote losslessly? bool doesn't count.

    >>> is_integer(3), is_integer(True), is_integer(0.5)
    (True, False, False)
    """
    return isinstance(x, (numbers.Integral, mpz_type)) and not isinstance(x, bool)


def is_rational(x):
    """Is x a rational (but possibly integral) type we can promote losslessly?"""
    return isinstance(x, (numbers.Rational, mpq_type, mpz_type)) and not isinstance(x, bool)


def to_mpz(x):
    """Losslessly promote any integer (Python, GMP or numpy) to an mpz."""
    if not is_integer(x):
        raise TypeError('expected an integer, got {}'.format(repr(x)))
    return gmp.mpz(int(x))


def to_mpq(x):
    """Losslessly promote any integer or rational to an mpq."""
    if is_integer(x):
        return gmp.mpq(int(x))
    elif is_rational(x):
        return gmp.mpq(int(x.numerator), int(x.denominator))
    else:
        raise TypeError('expected an integer or rational, got {}'.format(repr(x)))


def round_mpq(q, rm):
    """Round the rational q to an integer, toward negative infinity
    for RM.RTN, or toward positive infinity for RM.RTP.

    >>> int(round_mpq(gmp.mpq(-7, 2), RM.RTN)), int(round_mpq(gmp.mpq(-7, 2), RM.RTP))
    (-4, -3)
    """
    q = to_mpq(q)
    if rm == RM.RTN:
        return gmp.f_div(q.numerator, q.denominator)
    elif rm == RM.RTP:
        return gmp.c_div(q.numerator, q.denominator)
    else:
        raise ValueError('unsupported rounding direction {}'.format(repr(rm)))


def div_2exp(x, k, rm):
    """Divide the integer x by 2**k, rounding in direction rm.
    Rounding down is an arithmetic right shift; rounding up negates,
    shifts, and negates again.

    >>> int(div_2exp(7, 1, RM.RTN)), int(div_2exp(7, 1, RM.RTP))
    (3, 4)
    >>> int(div_2exp(-7, 1, RM.RTN)), int(div_2exp(-7, 1, RM.RTP))
    (-4, -3)
    """
    if k < 0:
        raise ValueError('shift amount must be non-negative, got {}'.format(repr(k)))
    x = gmp.mpz(x)
    if rm == RM.RTN:
        return x >> k
    elif rm == RM.RTP:
        return -((-x) >> k)
    else:
        raise ValueError('unsupported rounding direction {}'.format(repr(rm)))


def rescale(numer, old_log2_denom, new_log2_denom, rm):
    """Re-express numer / 2**old_log2_denom with the denominator 2**new_log2_denom.
    Increasing the denominator is an exact left shift; decreasing it rounds
    in direction rm.

    >>> int(rescale(5, 2, 4, RM.RTN))
    20
    >>> int(rescale(5, 2, 0, RM.RTN)), int(rescale(5, 2, 0, RM.RTP))
    (1, 2)
    """
    if new_log2_denom >= old_log2_denom:
        return gmp.mpz(numer) << (new_log2_denom - old_log2_denom)
    else:
        return div_2exp(numer, old_log2_denom - new_log2_denom, rm)


def isqrt(x, rm):
    """Integer square root of the non-negative integer x,
    rounded down (RM.RTN) or up (RM.RTP).

    >>> int(isqrt(10, RM.RTN)), int(isqrt(10, RM.RTP)), int(isqrt(9, RM.RTP))
    (3, 4, 3)
    """
    x = gmp.mpz(x)
    if x < 0:
        raise ValueError('isqrt of negative number {}'.format(int(x)))
    root = gmp.isqrt(x)
    if rm == RM.RTN:
        return root
    elif rm == RM.RTP:
        if root * root == x:
            return root
        else:
            return root + 1
    else:
        raise ValueError('unsupported rounding direction {}'.format(repr(rm)))


def extended_gcd(a, b):
    """Extended Euclidean algorithm: returns (g, x, y) with a*x + b*y == g,
    where g is the non-negative gcd of a and b.

    >>> tuple(int(v) for v in extended_gcd(4, 9))
    (1, -2, 1)
    """
    g, x, y = gmp.gcdext(to_mpz(a), to_mpz(b))
    return g, x, y


def powmod(base, exponent, modulus):
    """base ** exponent mod modulus, with a zero modulus meaning no reduction at all."""
    base = to_mpz(base)
    exponent = to_mpz(exponent)
    modulus = to_mpz(modulus)
    if exponent < 0:
        raise ValueError('exponent must be non-negative, got {}'.format(int(exponent)))
    if modulus == 0:
        return base ** exponent
    else:
        return gmp.powmod(base, exponent, modulus)
