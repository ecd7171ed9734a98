import copy
import random
from fractions import Fraction

import gmpy2 as gmp
import numpy as np
import pytest

from exactcore.arithmetic.evalctx import DyadicCtx
from exactcore.arithmetic.interval import DyadicFractionInterval
from exactcore.numeric import utils


def dfi(lower, upper, log2_denom):
    return DyadicFractionInterval(lower, upper, log2_denom)


def assert_same(actual, lower, upper, log2_denom):
    assert (int(actual.lower_bound_numer), int(actual.upper_bound_numer), actual.log2_denom) == (lower, upper, log2_denom)


def random_interval(rng, log2_denom):
    a = rng.randint(-40, 40)
    b = rng.randint(-40, 40)
    return dfi(min(a, b), max(a, b), log2_denom)


def as_fraction(q):
    return Fraction(int(q.numerator), int(q.denominator))


def random_point(rng, interval):
    lower, upper = interval.to_ratio_range()
    t = Fraction(rng.randint(0, 16), 16)
    return as_fraction(lower) * (1 - t) + as_fraction(upper) * t


class TestConstruction(object):
    def test_from_ratio_range(self):
        assert_same(DyadicFractionInterval.from_ratio_range(Fraction(2, 3), Fraction(5, 7), 8), 170, 183, 8)
        assert_same(DyadicFractionInterval.from_ratio_range(-1, Fraction(-5, 7), 8), -256, -182, 8)
        assert_same(DyadicFractionInterval.from_ratio_range(Fraction(5, 32), Fraction(45, 32), 5), 5, 45, 5)
        assert_same(DyadicFractionInterval.from_ratio_range(Fraction(7, 32), Fraction(8, 32), 5), 7, 8, 5)

    def test_from_ratio_range_rejects_inverted(self):
        with pytest.raises(ValueError):
            DyadicFractionInterval.from_ratio_range(1, 0, 4)

    def test_from_ratio(self):
        assert_same(DyadicFractionInterval.from_ratio(Fraction(2, 3), 8), 170, 171, 8)
        assert_same(DyadicFractionInterval.from_ratio(Fraction(-2, 3), 8), -171, -170, 8)
        assert_same(DyadicFractionInterval.from_ratio(Fraction(1, 8), 8), 32, 32, 8)
        assert_same(DyadicFractionInterval.from_ratio(gmp.mpq(1, 8), 8), 32, 32, 8)

    def test_points(self):
        assert_same(DyadicFractionInterval.from_dyadic_fraction(3, 2), 3, 3, 2)
        assert_same(DyadicFractionInterval.zero(4), 0, 0, 4)
        assert_same(DyadicFractionInterval.one(4), 16, 16, 4)
        assert_same(DyadicFractionInterval.negative_one(4), -16, -16, 4)

    def test_set_points(self):
        x = dfi(-3, 5, 2)
        x.set_one()
        assert_same(x, 4, 4, 2)
        x.set_negative_one()
        assert_same(x, -4, -4, 2)
        x.set_zero()
        assert_same(x, 0, 0, 2)

    def test_invalid(self):
        with pytest.raises(ValueError):
            dfi(2, 1, 0)
        with pytest.raises(ValueError):
            dfi(1, 2, -1)
        with pytest.raises(TypeError):
            dfi(0.5, 1, 0)

    def test_default_log2_denom(self):
        assert dfi(1, 2, None).log2_denom == DyadicCtx.log2_denom
        assert DyadicFractionInterval(1, 2, ctx=DyadicCtx(log2_denom=3)).log2_denom == 3
        assert DyadicFractionInterval.from_ratio(Fraction(1, 2), ctx=DyadicCtx(props={'precision': 1})).log2_denom == 1
        # an explicit denominator wins over the context
        assert DyadicFractionInterval.one(2, ctx=DyadicCtx(log2_denom=3)).log2_denom == 2

    def test_numpy_bounds(self):
        assert_same(dfi(np.int8(-3), np.uint64(5), np.int32(2)), -3, 5, 2)


class TestQueries(object):
    def test_to_ratio_range(self):
        lower, upper = dfi(1, 3, 2).to_ratio_range()
        assert lower == gmp.mpq(1, 4)
        assert upper == gmp.mpq(3, 4)

    def test_convert_log2_denom(self):
        x = dfi(5, 5, 2)
        assert_same(x.to_converted_log2_denom(4), 20, 20, 4)
        assert_same(x.to_converted_log2_denom(0), 1, 2, 0)
        assert_same(dfi(-5, -5, 2).to_converted_log2_denom(0), -2, -1, 0)
        assert_same(x, 5, 5, 2)
        x.convert_log2_denom(1)
        assert_same(x, 2, 3, 1)

    def test_contains(self):
        x = dfi(-1, 3, 2)
        assert x.contains_zero()
        assert not dfi(1, 3, 2).contains_zero()
        assert x.contains(Fraction(3, 4))
        assert not x.contains(1)
        assert x.contains(dfi(0, 1, 2))
        assert not x.contains(dfi(0, 1, 0))

    def test_identity(self):
        assert dfi(1, 1, 1) == dfi(1, 1, 1)
        assert dfi(1, 1, 1) != dfi(2, 2, 2)
        assert not dfi(1, 1, 1).is_identical_to(dfi(2, 2, 2))

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(dfi(1, 1, 1))

    def test_str_repr(self):
        assert str(dfi(1, 3, 2)) == '[1 / 2^2, 3 / 2^2]'
        assert repr(dfi(-1, 3, 2)) == 'DyadicFractionInterval(lower_bound_numer=-1, upper_bound_numer=3, log2_denom=2)'

    def test_copy(self):
        x = dfi(1, 3, 2)
        for y in [x.copy(), copy.copy(x), copy.deepcopy(x)]:
            assert y == x
            y += 1
            assert_same(x, 1, 3, 2)


class TestArithmetic(object):
    def test_add(self):
        assert_same(dfi(1, 2, 2) + dfi(3, 5, 3), 5, 9, 3)
        assert_same(dfi(3, 5, 3) + dfi(1, 2, 2), 5, 9, 3)
        assert_same(dfi(1, 2, 2) + 1, 5, 6, 2)
        assert_same(1 + dfi(1, 2, 2), 5, 6, 2)
        assert_same(dfi(0, 0, 2) + Fraction(1, 3), 1, 2, 2)

    def test_sub(self):
        assert_same(dfi(2, 4, 3) - dfi(3, 5, 3), -3, 1, 3)
        assert_same(dfi(1, 2, 2) - 1, -3, -2, 2)
        assert_same(1 - dfi(1, 2, 2), 2, 3, 2)
        assert_same(dfi(0, 0, 2) - Fraction(1, 3), -2, -1, 2)

    def test_neg(self):
        assert_same(-dfi(1, 3, 2), -3, -1, 2)

    def test_mul(self):
        assert_same(dfi(-1, 2, 1) * dfi(3, 4, 1), -2, 4, 1)
        assert_same(dfi(1, 3, 1) * dfi(1, 1, 1), 0, 2, 1)
        assert_same(dfi(1, 3, 1) * -2, -6, -2, 1)
        assert_same(-2 * dfi(1, 3, 1), -6, -2, 1)
        assert_same(dfi(1, 2, 0) * Fraction(1, 3), 0, 1, 0)
        assert_same(dfi(1, 2, 0) * Fraction(-1, 3), -1, 0, 0)

    def test_div(self):
        assert_same(dfi(1, 2, 0) / 3, 0, 1, 0)
        assert_same(dfi(4, 8, 0) / Fraction(-4, 1), -2, -1, 0)
        with pytest.raises(ZeroDivisionError):
            dfi(1, 2, 0) / 0
        with pytest.raises(TypeError):
            dfi(1, 2, 0) / dfi(1, 2, 0)
        with pytest.raises(TypeError):
            dfi(1, 2, 0).div_assign(dfi(1, 2, 0))

    def test_in_place(self):
        x = dfi(1, 2, 2)
        y = x
        x += 1
        x -= dfi(0, 1, 2)
        x *= 2
        x /= 2
        assert x is y
        assert_same(x, 4, 6, 2)
        assert x.add_assign(1) is None

    def test_numpy_operands(self):
        assert_same(dfi(1, 2, 0) + np.int8(3), 4, 5, 0)
        assert_same(np.int8(3) + dfi(1, 2, 0), 4, 5, 0)
        assert_same(np.uint64(3) * dfi(1, 2, 0), 3, 6, 0)

    def test_rejected_operands(self):
        with pytest.raises(TypeError):
            dfi(1, 2, 0) + True
        with pytest.raises(TypeError):
            dfi(1, 2, 0) * 0.5
        with pytest.raises(TypeError):
            dfi(1, 2, 0).mul_assign('2')


class TestFunctions(object):
    def test_square(self):
        assert_same(dfi(-3, 2, 0).square(), 0, 9, 0)
        assert_same(dfi(-3, -2, 0).square(), 4, 9, 0)
        assert_same(dfi(1, 3, 1).square(), 0, 5, 1)
        x = dfi(2, 3, 0)
        x.square_assign()
        assert_same(x, 4, 9, 0)

    def test_sqrt(self):
        assert_same(dfi(4, 9, 0).sqrt(), 2, 3, 0)
        assert_same(dfi(2, 2, 0).sqrt(), 1, 2, 0)
        assert_same(dfi(1, 1, 2).sqrt(), 2, 2, 2)
        assert_same(dfi(-4, 9, 0).sqrt(), 0, 3, 0)
        with pytest.raises(utils.DomainError):
            dfi(-4, -1, 0).sqrt()
        with pytest.raises(ValueError):
            dfi(-4, -1, 0).sqrt_assign()

    def test_pow(self):
        assert_same(dfi(-3, -2, 0) ** 2, 4, 9, 0)
        assert_same(dfi(-3, -2, 0) ** 3, -27, -8, 0)
        assert_same(dfi(-1, 2, 0) ** 2, 0, 4, 0)
        assert_same(dfi(-1, 2, 0) ** 3, -1, 8, 0)
        assert_same(dfi(-3, 5, 2) ** 0, 4, 4, 2)
        assert_same(dfi(-3, 5, 2) ** 1, -3, 5, 2)
        assert_same(dfi(1, 1, 1) ** 3, 0, 1, 1)
        with pytest.raises(ValueError):
            dfi(1, 2, 0).pow(-1)

    def test_pow_in_place(self):
        x = dfi(2, 3, 0)
        y = x
        x **= 2
        assert x is y
        assert_same(x, 4, 9, 0)


class TestEnclosure(object):
    """Every result must contain the exact result for every point of the inputs."""

    samples = 200

    def test_binary(self):
        rng = random.Random(0)
        for _ in range(self.samples):
            log2_denom = rng.randint(0, 4)
            a = random_interval(rng, log2_denom)
            b = random_interval(rng, rng.randint(0, 4))
            x = random_point(rng, a)
            y = random_point(rng, b)
            assert (a + b).contains(x + y)
            assert (a - b).contains(x - y)
            assert (a * b).contains(x * y)
            k = Fraction(rng.randint(-20, 20), rng.randint(1, 7))
            assert (a * k).contains(x * k)
            assert (a + k).contains(x + k)
            if k != 0:
                assert (a / k).contains(x / k)

    def test_unary(self):
        rng = random.Random(1)
        for _ in range(self.samples):
            a = random_interval(rng, rng.randint(0, 4))
            x = random_point(rng, a)
            assert a.square().contains(x * x)
            for e in range(5):
                assert a.pow(e).contains(x ** e)
            if x >= 0:
                lower, upper = map(as_fraction, a.sqrt().to_ratio_range())
                assert lower * lower <= x <= upper * upper

    def test_from_ratio_range_encloses(self):
        rng = random.Random(2)
        for _ in range(self.samples):
            a = Fraction(rng.randint(-1000, 1000), rng.randint(1, 97))
            b = Fraction(rng.randint(-1000, 1000), rng.randint(1, 97))
            lo, hi = min(a, b), max(a, b)
            log2_denom = rng.randint(0, 12)
            x = DyadicFractionInterval.from_ratio_range(lo, hi, log2_denom)
            lower, upper = map(as_fraction, x.to_ratio_range())
            assert lower <= lo
            assert hi <= upper
            # tightest: one more step inward would exclude the range
            step = Fraction(1, 2 ** log2_denom)
            assert lower + step > lo
            assert upper - step < hi

    def test_convert_log2_denom_round_trip(self):
        rng = random.Random(3)
        for _ in range(self.samples):
            n1 = rng.randint(0, 8)
            n2 = rng.randint(0, 8)
            a = random_interval(rng, n1)
            there = a.to_converted_log2_denom(n2)
            assert there.contains(a)
            back = there.to_converted_log2_denom(n1)
            assert back.log2_denom == n1
            assert back.contains(a)
            if n2 >= n1:
                # widening is exact
                assert back == a
