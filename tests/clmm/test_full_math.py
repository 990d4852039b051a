import pytest

from python_clmm.exceptions import ErrorCode, FullMathRevert
from python_clmm.math import U256, FullMathModule, mul_u256

from ..utils import uint_max

U64_MAX = uint_max(64)
U128_MAX = uint_max(128)
U256_MAX = uint_max(256)


class TestU256:
    def test_rejects_values_outside_range(self):
        with pytest.raises(FullMathRevert) as exc:
            U256(-1)
        assert exc.value.error_code == ErrorCode.U256Overflow

        with pytest.raises(FullMathRevert):
            U256(U256_MAX + 1)

    def test_add_and_sub_do_not_wrap(self):
        assert U256(5).add(U256(7)) == U256(12)
        assert U256(7).sub(U256(5)) == U256(2)

        with pytest.raises(FullMathRevert):
            U256(U256_MAX).add(U256(1))
        with pytest.raises(FullMathRevert):
            U256(0).sub(U256(1))

    def test_comparisons(self):
        assert U256(1).lt(U256(2))
        assert U256(2).lte(U256(2))
        assert U256(3).gt(U256(2))
        assert U256(2).gte(U256(2))
        assert U256(2).eq(U256(2))
        assert U256(0).is_zero()
        assert not U256(1).is_zero()

    def test_shift_word_left_discards_high_word(self):
        assert U256(1).shift_word_left() == U256(2**64)
        assert U256(2**200).shift_word_left() == U256(0)

    def test_checked_shift_word_left(self):
        assert U256(2**191).checked_shift_word_left() == U256(2**255)
        assert U256(2**192).checked_shift_word_left() is None

    def test_shift_word_right(self):
        assert U256(2**64 + 5).shift_word_right() == U256(1)

    def test_div_returns_quotient_and_remainder(self):
        assert U256(7).div(U256(2)) == (U256(3), U256(1))
        assert U256(8).div(U256(2)) == (U256(4), U256(0))

    def test_div_by_zero(self):
        with pytest.raises(FullMathRevert) as exc:
            U256(7).div(U256(0))
        assert exc.value.error_code == ErrorCode.DivideByZero

    def test_try_into_u128(self):
        assert U256(U128_MAX).try_into_u128() == U128_MAX
        with pytest.raises(FullMathRevert) as exc:
            U256(U128_MAX + 1).try_into_u128()
        assert exc.value.error_code == ErrorCode.NumberDownCastError

    def test_mul_u256_is_full_width(self):
        assert mul_u256(U128_MAX, U128_MAX) == U256(U128_MAX * U128_MAX)

    def test_mul_u256_rejects_wide_inputs(self):
        with pytest.raises(FullMathRevert) as exc:
            mul_u256(U128_MAX + 1, 1)
        assert exc.value.error_code == ErrorCode.MultiplicationOverflow


class TestMulDiv:
    def test_exact_division(self):
        assert FullMathModule.mul_div(6, 4, 3) == 8
        assert FullMathModule.mul_div(6, 4, 3, round_up=True) == 8

    def test_rounding_direction(self):
        assert FullMathModule.mul_div(7, 3, 2) == 10
        assert FullMathModule.mul_div(7, 3, 2, round_up=True) == 11

    def test_uses_wide_intermediate_product(self):
        assert FullMathModule.mul_div(U128_MAX, U128_MAX, U128_MAX) == U128_MAX
        assert FullMathModule.mul_div(2**100, 2**100, 2**100) == 2**100

    @pytest.mark.parametrize(
        "n0, n1, d",
        [(1, 1, 3), (2**64, 3, 7), (U128_MAX, 2**60, 2**70 + 1), (12, 12, 4)],
    )
    def test_round_up_is_at_least_round_down(self, n0, n1, d):
        down = FullMathModule.mul_div(n0, n1, d)
        up = FullMathModule.mul_div(n0, n1, d, round_up=True)

        assert up >= down
        assert (up == down) == ((n0 * n1) % d == 0)

    def test_divide_by_zero(self):
        with pytest.raises(FullMathRevert) as exc:
            FullMathModule.mul_div(1, 1, 0)
        assert exc.value.error_code == ErrorCode.DivideByZero

        with pytest.raises(FullMathRevert) as exc:
            FullMathModule.mul_div(1, 1, 0, round_up=True)
        assert exc.value.error_code == ErrorCode.DivideByZero

    def test_result_overflow(self):
        with pytest.raises(FullMathRevert) as exc:
            FullMathModule.mul_div(U128_MAX, 2, 1)
        assert exc.value.error_code == ErrorCode.MulDivOverflow

        with pytest.raises(FullMathRevert):
            FullMathModule.mul_div(U128_MAX, U128_MAX, U128_MAX - 1)

    def test_input_overflow(self):
        with pytest.raises(FullMathRevert) as exc:
            FullMathModule.mul_div(U128_MAX + 1, 1, 1)
        assert exc.value.error_code == ErrorCode.MulDivOverflow


class TestMulShiftRight:
    def test_multiplies_by_q64_fraction(self):
        assert FullMathModule.mul_shift_right(2**64, 5) == 5
        assert FullMathModule.mul_shift_right(5, 2**64) == 5

    def test_rounding_direction(self):
        assert FullMathModule.mul_shift_right(3, 2**63) == 1
        assert FullMathModule.mul_shift_right(3, 2**63, round_up=True) == 2
        assert FullMathModule.mul_shift_right(4, 2**63, round_up=True) == 2

    def test_zero_operands(self):
        assert FullMathModule.mul_shift_right(0, U128_MAX) == 0
        assert FullMathModule.mul_shift_right(U128_MAX, 0, round_up=True) == 0

    def test_product_overflow(self):
        with pytest.raises(FullMathRevert) as exc:
            FullMathModule.mul_shift_right(2**64, 2**64)
        assert exc.value.error_code == ErrorCode.MultiplicationShiftRightOverflow

    def test_round_up_overflows_u64(self):
        # (2**64 - 1) * (2**64 + 1) == U128_MAX
        assert FullMathModule.mul_shift_right(U64_MAX, 2**64 + 1) == U64_MAX

        with pytest.raises(FullMathRevert) as exc:
            FullMathModule.mul_shift_right(U64_MAX, 2**64 + 1, round_up=True)
        assert exc.value.error_code == ErrorCode.MultiplicationOverflow


class TestDivRoundUp:
    def test_rounding_direction(self):
        assert FullMathModule.div_round_up(7, 2) == 4
        assert FullMathModule.div_round_up(7, 2, round_up=False) == 3
        assert FullMathModule.div_round_up(8, 2) == 4

    def test_divide_by_zero(self):
        with pytest.raises(FullMathRevert) as exc:
            FullMathModule.div_round_up(1, 0)
        assert exc.value.error_code == ErrorCode.DivideByZero

    @pytest.mark.parametrize("n, d", [(U128_MAX + 1, 1), (1, U128_MAX + 1)])
    def test_rejects_inputs_wider_than_u128(self, n, d):
        with pytest.raises(FullMathRevert) as exc:
            FullMathModule.div_round_up(n, d)
        assert exc.value.error_code == ErrorCode.MulDivOverflow

    def test_accepts_u128_bounds(self):
        assert FullMathModule.div_round_up(U128_MAX, U128_MAX) == 1
        assert FullMathModule.div_round_up(U128_MAX, 2, round_up=False) == U128_MAX // 2

    def test_u256_division_narrows_to_u128(self):
        assert FullMathModule.div_round_up_u256(U256(2 * U128_MAX - 1), U256(2)) == U128_MAX
        assert FullMathModule.div_round_up_u256(U256(2 * U128_MAX - 1), U256(2), round_up=False) == U128_MAX - 1
        with pytest.raises(FullMathRevert) as exc:
            FullMathModule.div_round_up_u256(U256(2**200), U256(1))
        assert exc.value.error_code == ErrorCode.NumberDownCastError
