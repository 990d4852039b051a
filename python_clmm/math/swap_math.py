from .full_math import FullMathModule
from .shared import FEE_RATE_MUL_VALUE, SwapStepComputation
from .sqrt_price_math import SqrtPriceMathModule


def _try_get_amount_fixed_delta(
    sqrt_price_current: int,
    sqrt_price_target: int,
    liquidity: int,
    amount_specified_is_input: bool,
    a_to_b: bool,
) -> int | None:
    if a_to_b == amount_specified_is_input:
        return SqrtPriceMathModule.try_get_amount_delta_a(
            sqrt_price_current, sqrt_price_target, liquidity, amount_specified_is_input
        )
    return SqrtPriceMathModule.try_get_amount_delta_b(
        sqrt_price_current, sqrt_price_target, liquidity, amount_specified_is_input
    )


def _get_amount_fixed_delta(
    sqrt_price_current: int,
    sqrt_price_next: int,
    liquidity: int,
    amount_specified_is_input: bool,
    a_to_b: bool,
) -> int:
    if a_to_b == amount_specified_is_input:
        return SqrtPriceMathModule.get_amount_delta_a(
            sqrt_price_current, sqrt_price_next, liquidity, amount_specified_is_input
        )
    return SqrtPriceMathModule.get_amount_delta_b(
        sqrt_price_current, sqrt_price_next, liquidity, amount_specified_is_input
    )


def _get_amount_unfixed_delta(
    sqrt_price_current: int,
    sqrt_price_next: int,
    liquidity: int,
    amount_specified_is_input: bool,
    a_to_b: bool,
) -> int:
    if a_to_b == amount_specified_is_input:
        return SqrtPriceMathModule.get_amount_delta_b(
            sqrt_price_current, sqrt_price_next, liquidity, not amount_specified_is_input
        )
    return SqrtPriceMathModule.get_amount_delta_a(
        sqrt_price_current, sqrt_price_next, liquidity, not amount_specified_is_input
    )


# pylint: disable=too-many-arguments
def compute_swap_step(
    amount_remaining: int,
    fee_rate: int,
    liquidity: int,
    sqrt_price_current: int,
    sqrt_price_target: int,
    amount_specified_is_input: bool,
    a_to_b: bool,
) -> SwapStepComputation:
    """
    Computes a single step of a swap between the current sqrt price and a target sqrt price, where liquidity is
    constant.  The fixed token is the token the caller specified the amount in, and the unfixed token is the
    other side of the trade.

    For exact input swaps, the fee is taken out of the remaining amount before computing the price impact.  If the
    remaining amount is not sufficient to reach the target, the exact next price is solved for and the entire
    remaining amount is consumed.

    :param amount_remaining: u64 amount of the fixed token left to swap
    :param fee_rate: fee rate in hundredths of a basis point
    :param liquidity: active liquidity for this step
    :param sqrt_price_current: Q64.64 sqrt price at the start of the step
    :param sqrt_price_target: Q64.64 sqrt price the step cannot move past
    :param amount_specified_is_input: True for exact input swaps
    :param a_to_b: swap direction
    :return: SwapStepComputation
    """
    initial_amount_fixed_delta = _try_get_amount_fixed_delta(
        sqrt_price_current, sqrt_price_target, liquidity, amount_specified_is_input, a_to_b
    )

    amount_calc = amount_remaining
    if amount_specified_is_input:
        amount_calc = FullMathModule.mul_div(amount_remaining, FEE_RATE_MUL_VALUE - fee_rate, FEE_RATE_MUL_VALUE)

    if initial_amount_fixed_delta is not None and amount_calc >= initial_amount_fixed_delta:
        next_sqrt_price = sqrt_price_target
    else:
        next_sqrt_price = SqrtPriceMathModule.get_next_sqrt_price(
            sqrt_price_current, liquidity, amount_calc, amount_specified_is_input, a_to_b
        )

    is_max_swap = next_sqrt_price == sqrt_price_target

    amount_unfixed_delta = _get_amount_unfixed_delta(
        sqrt_price_current, next_sqrt_price, liquidity, amount_specified_is_input, a_to_b
    )

    if is_max_swap and initial_amount_fixed_delta is not None:
        amount_fixed_delta = initial_amount_fixed_delta
    else:
        amount_fixed_delta = _get_amount_fixed_delta(
            sqrt_price_current, next_sqrt_price, liquidity, amount_specified_is_input, a_to_b
        )

    if amount_specified_is_input:
        amount_in, amount_out = amount_fixed_delta, amount_unfixed_delta
    else:
        amount_in, amount_out = amount_unfixed_delta, amount_fixed_delta
        amount_out = min(amount_out, amount_remaining)

    if amount_specified_is_input and not is_max_swap:
        fee_amount = amount_remaining - amount_in
    else:
        fee_amount = FullMathModule.mul_div(amount_in, fee_rate, FEE_RATE_MUL_VALUE - fee_rate, round_up=True)

    return SwapStepComputation(
        amount_in=amount_in,
        amount_out=amount_out,
        next_price=next_sqrt_price,
        fee_amount=fee_amount,
    )
