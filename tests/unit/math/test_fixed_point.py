"""Tests for 18-decimal fixed-point helpers."""

from decimal import Decimal

import pytest

from stableswap.math.fixed_point import ONE_18, Bfp, multiply_decimal


class TestDecimalHelpers:
    def test_multiply_decimal_rounds_down(self):
        assert multiply_decimal(3 * ONE_18, ONE_18 // 2) == 3 * ONE_18 // 2
        assert multiply_decimal(1, ONE_18 - 1) == 0


class TestBfp:
    """Tests for Bfp construction and rounding."""

    def test_from_decimal(self):
        assert Bfp.from_decimal(Decimal("0.03")).value == 3 * 10**16
        assert Bfp.from_decimal(Decimal("1")).value == ONE_18

    def test_from_decimal_rounds_half_up(self):
        assert Bfp.from_decimal(Decimal("0.0000000000000000005")).value == 1

    def test_from_decimal_negative_raises(self):
        with pytest.raises(ValueError):
            Bfp.from_decimal(Decimal("-0.01"))

    def test_mul_down(self):
        third = Bfp(ONE_18 // 3)
        assert third.mul_down(Bfp(10)).value == 3

    def test_div_up(self):
        three = Bfp(3 * ONE_18)
        assert Bfp(10).div_up(three).value == 4
        assert Bfp(0).div_up(three).value == 0

    def test_div_by_zero_raises(self):
        with pytest.raises(ZeroDivisionError):
            Bfp(1).div_up(Bfp(0))

    def test_complement(self):
        assert Bfp(3 * 10**16).complement().value == 97 * 10**16
        assert Bfp(2 * ONE_18).complement().value == 0

    def test_equality(self):
        assert Bfp(5) == Bfp(5)
        assert Bfp(5) != 5
