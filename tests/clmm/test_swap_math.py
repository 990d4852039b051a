from python_clmm.math import ClmmMath, SqrtPriceMathModule

Q64 = 2**64
LIQUIDITY = 10**9


class TestComputeSwapStep:
    def test_exact_input_capped_at_price_target(self):
        swap_step = ClmmMath.compute_swap_step(2 * LIQUIDITY, 3000, LIQUIDITY, Q64, Q64 // 2, True, True)

        assert swap_step.next_price == Q64 // 2
        assert swap_step.amount_in == LIQUIDITY
        assert swap_step.amount_out == LIQUIDITY // 2
        # ceil(10**9 * 3000 / 997000)
        assert swap_step.fee_amount == 3009028
        assert swap_step.amount_in + swap_step.fee_amount < 2 * LIQUIDITY

    def test_exact_input_fully_consumed_before_target(self):
        amount = 10**6
        swap_step = ClmmMath.compute_swap_step(amount, 3000, LIQUIDITY, Q64, Q64 // 2, True, True)

        assert Q64 // 2 < swap_step.next_price < Q64
        assert swap_step.amount_in == 997_000
        assert swap_step.fee_amount == 3_000
        assert swap_step.amount_in + swap_step.fee_amount == amount
        assert swap_step.next_price == SqrtPriceMathModule.get_next_sqrt_price(
            Q64, LIQUIDITY, 997_000, True, True
        )
        assert swap_step.amount_out < swap_step.amount_in

    def test_exact_output_capped_at_price_target(self):
        swap_step = ClmmMath.compute_swap_step(LIQUIDITY, 3000, LIQUIDITY, Q64, Q64 // 2, False, True)

        assert swap_step.next_price == Q64 // 2
        assert swap_step.amount_out == LIQUIDITY // 2
        assert swap_step.amount_in == LIQUIDITY
        assert swap_step.fee_amount == 3009028

    def test_exact_output_fully_filled_before_target(self):
        amount = 10**8
        swap_step = ClmmMath.compute_swap_step(amount, 3000, LIQUIDITY, Q64, Q64 // 2, False, True)

        assert swap_step.amount_out == amount
        assert swap_step.next_price == SqrtPriceMathModule.get_next_sqrt_price(Q64, LIQUIDITY, amount, False, True)
        # 10**9 * (1 / 0.9 - 1), rounded up
        assert swap_step.amount_in == 111_111_112
        assert swap_step.fee_amount == 334_337

    def test_exact_input_b_to_a(self):
        swap_step = ClmmMath.compute_swap_step(1000, 3000, LIQUIDITY, Q64, Q64 * 2, True, False)

        expected_price = SqrtPriceMathModule.get_next_sqrt_price(Q64, LIQUIDITY, 997, True, False)
        assert swap_step.next_price == expected_price
        assert swap_step.amount_in == 997
        assert swap_step.fee_amount == 3
        assert swap_step.amount_out == SqrtPriceMathModule.get_amount_delta_a(Q64, expected_price, LIQUIDITY, False)

    def test_zero_fee_rate(self):
        swap_step = ClmmMath.compute_swap_step(2 * LIQUIDITY, 0, LIQUIDITY, Q64, Q64 // 2, True, True)
        assert swap_step.fee_amount == 0
        assert swap_step.amount_in == LIQUIDITY

    def test_zero_liquidity_moves_to_target(self):
        swap_step = ClmmMath.compute_swap_step(1000, 3000, 0, Q64, Q64 // 2, True, True)

        assert swap_step.next_price == Q64 // 2
        assert swap_step.amount_in == 0
        assert swap_step.amount_out == 0
        assert swap_step.fee_amount == 0

    def test_target_beyond_u64_amount_is_not_reached(self):
        # Reaching the min price from 1.0 requires more than a u64 of token A
        swap_step = ClmmMath.compute_swap_step(
            10**6, 3000, Q64, Q64, ClmmMath.MIN_SQRT_PRICE_X64, True, True
        )

        assert swap_step.next_price > ClmmMath.MIN_SQRT_PRICE_X64
        assert swap_step.amount_in + swap_step.fee_amount == 10**6
