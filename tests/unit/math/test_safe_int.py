"""Tests for SafeInt checked arithmetic wrapper."""

import pytest

from stableswap.safe_int import DivisionByZero, S, SafeInt, SafeIntError, Underflow


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_from_invalid_type_raises(self):
        """SafeInt rejects floats, strings and bools."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_alias_s(self):
        """S is an alias for SafeInt."""
        assert S is SafeInt


class TestSafeIntArithmetic:
    """Tests for SafeInt arithmetic operations."""

    def test_add(self):
        assert (S(10) + S(5)).value == 15
        assert (S(10) + 5).value == 15
        assert (5 + S(10)).value == 15

    def test_sub_positive_result(self):
        assert (S(10) - S(3)).value == 7
        assert (S(10) - 3).value == 7
        assert (10 - S(3)).value == 7

    def test_sub_zero_result(self):
        assert (S(5) - S(5)).value == 0

    def test_sub_underflow_raises(self):
        """Subtraction underflow raises Underflow."""
        with pytest.raises(Underflow) as exc_info:
            S(5) - S(10)
        assert "5 - 10" in str(exc_info.value)

    def test_rsub_underflow_raises(self):
        with pytest.raises(Underflow):
            5 - S(10)

    def test_mul_large(self):
        """Multiplication beyond 256 bits is exact."""
        big = 10**60
        assert (S(big) * big).value == big * big

    def test_floordiv(self):
        assert (S(10) // S(3)).value == 3
        assert (S(10) // 3).value == 3
        assert (10 // S(3)).value == 3

    def test_floordiv_by_zero_raises(self):
        with pytest.raises(DivisionByZero) as exc_info:
            S(10) // S(0)
        assert "Division by zero" in str(exc_info.value)

    def test_rfloordiv_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            10 // S(0)

    def test_errors_are_arithmetic_errors(self):
        """SafeInt errors can be caught as ArithmeticError."""
        assert issubclass(Underflow, SafeIntError)
        assert issubclass(DivisionByZero, SafeIntError)
        assert issubclass(SafeIntError, ArithmeticError)


class TestSafeIntHelpers:
    """Tests for absolute difference."""

    def test_abs_diff(self):
        """abs_diff never underflows."""
        assert S(3).abs_diff(10).value == 7
        assert S(10).abs_diff(S(3)).value == 7
        assert S(4).abs_diff(4).value == 0


class TestSafeIntComparison:
    """Tests for SafeInt comparison operations."""

    def test_eq(self):
        assert S(5) == S(5)
        assert S(5) == 5
        assert S(5) != 6

    def test_ordering(self):
        assert S(5) < S(6)
        assert S(5) <= 5
        assert S(7) > 6
        assert S(7) >= S(7)

    def test_bool_and_int(self):
        assert not S(0)
        assert S(1)
        assert int(S(42)) == 42

    def test_hash_matches_int(self):
        assert hash(S(42)) == hash(42)
