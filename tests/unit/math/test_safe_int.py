"""Tests for SafeInt, the checked uint256 integer used by pool math."""

import pytest

from dex.errors import ArithmeticOverflow, DexError
from dex.safe_int import (
    UINT256_MAX,
    DivisionByZero,
    S,
    SafeInt,
    SafeIntError,
    Underflow,
    is_uint256,
)


class TestConstruction:
    @pytest.mark.parametrize("raw", [0, 1, 10**18, UINT256_MAX])
    def test_accepts_uint256(self, raw):
        assert S(raw).value == raw
        assert S(S(raw)).value == raw

    @pytest.mark.parametrize(
        "raw,error",
        [(-1, Underflow), (UINT256_MAX + 1, ArithmeticOverflow)],
    )
    def test_rejects_out_of_range(self, raw, error):
        with pytest.raises(error):
            S(raw)

    @pytest.mark.parametrize("raw", ["42", 3.0, True, None])
    def test_rejects_non_int(self, raw):
        with pytest.raises(TypeError):
            SafeInt(raw)  # type: ignore[arg-type]


class TestCheckedOperators:
    @pytest.mark.parametrize(
        "expr,expected",
        [
            (lambda: S(997) * S(10), 9970),
            (lambda: 1000 * S(100) + S(9970), 109970),
            (lambda: S(997000) // 109970, 9),
            (lambda: 997000 // S(109970), 9),
            (lambda: S(100) - 9, 91),
            (lambda: 110 - S(10), 100),
        ],
    )
    def test_pricing_steps(self, expr, expected):
        assert expr() == expected

    def test_product_that_fits_a_word(self):
        assert (S(2**128 - 1) * S(2**128 + 1)).value == UINT256_MAX

    def test_product_that_wraps_a_word_raises(self):
        with pytest.raises(ArithmeticOverflow):
            S(2**128) * S(2**128)

    def test_sum_past_max_raises(self):
        with pytest.raises(ArithmeticOverflow):
            S(UINT256_MAX) + 1

    def test_reserve_below_zero_raises(self):
        with pytest.raises(Underflow, match="5 - 10"):
            S(5) - 10
        with pytest.raises(Underflow):
            5 - S(10)

    def test_division_by_empty_reserve_raises(self):
        with pytest.raises(DivisionByZero, match="Division by zero"):
            S(10) // S(0)
        with pytest.raises(DivisionByZero):
            10 // S(0)

    def test_true_division_is_refused(self):
        with pytest.raises(TypeError, match="floor division"):
            S(10) / 3
        with pytest.raises(TypeError):
            10 / S(3)

    def test_floats_do_not_mix(self):
        with pytest.raises(TypeError):
            S(1) + 1.5  # type: ignore[operator]


class TestHelpers:
    @pytest.mark.parametrize("raw,root", [(0, 0), (4, 2), (99, 9), (10**36, 10**18)])
    def test_isqrt_floors(self, raw, root):
        assert S(raw).isqrt() == root

    def test_min(self):
        assert S(50).min(49) == 49
        assert S(49).min(S(50)) == 49

    def test_int_protocols(self):
        assert int(S(7)) == 7
        assert [0, 1, 2][S(1)] == 1
        assert hash(S(7)) == hash(7)
        assert not S(0)
        assert S(3) < 4 <= S(4) < S(5)
        assert S(5) != 6

    @pytest.mark.parametrize(
        "value,expected",
        [(0, True), (UINT256_MAX, True), (-1, False), (UINT256_MAX + 1, False)],
    )
    def test_is_uint256(self, value, expected):
        assert is_uint256(value) is expected


class TestErrorHierarchy:
    def test_overflow_is_a_pool_error_and_arithmetic(self):
        assert issubclass(ArithmeticOverflow, DexError)
        assert issubclass(ArithmeticOverflow, ArithmeticError)

    def test_other_errors_are_arithmetic(self):
        assert issubclass(Underflow, SafeIntError)
        assert issubclass(DivisionByZero, ArithmeticError)
