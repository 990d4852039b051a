import logging
from dataclasses import asdict, dataclass

from python_clmm.exceptions import ErrorCode, SwapRevert, TickArrayRevert
from python_clmm.math import ClmmMath
from python_clmm.math.shared import PROTOCOL_FEE_RATE_MUL_VALUE, Q64_RESOLUTION, TICK_ARRAY_SIZE, U64_MAX
from python_clmm.types import PoolState, PostSwapUpdate, RewardInfo, Tick
from python_clmm.utils import uint_over_under_flow

from .accrual import add_liquidity_delta, next_pool_reward_infos, next_tick_cross_update
from .tick_sequence import SwapTickSequence

package_logger = logging.getLogger("python_clmm")
logger = package_logger.getChild("clmm").getChild("swap")


@dataclass(slots=True)
class SwapState:
    """Running state of a swap, advanced one initialized tick at a time by :func:`swap_step`"""

    amount_remaining: int
    amount_calculated: int
    sqrt_price: int
    tick_index: int
    liquidity: int
    array_index: int
    protocol_fee: int
    fee_growth_global_input: int


def calculate_fees(
    fee_amount: int,
    protocol_fee_rate: int,
    liquidity: int,
    protocol_fee: int,
    fee_growth_global_input: int,
) -> tuple[int, int]:
    """
    Splits a step fee between the protocol and liquidity providers.  The protocol's share is taken first, and the
    rest is added to fee growth per unit of active liquidity.

    :return: (next_protocol_fee, next_fee_growth_global_input)
    """
    global_fee = fee_amount
    if protocol_fee_rate > 0:
        delta = fee_amount * protocol_fee_rate // PROTOCOL_FEE_RATE_MUL_VALUE
        global_fee -= delta
        protocol_fee = uint_over_under_flow(protocol_fee + delta, 64)

    if liquidity > 0:
        fee_growth_global_input = uint_over_under_flow(
            fee_growth_global_input + (global_fee << Q64_RESOLUTION) // liquidity, 128
        )

    return protocol_fee, fee_growth_global_input


def _get_tick_if_initialized(
    tick_sequence: SwapTickSequence, array_index: int, tick_index: int, tick_spacing: int
) -> Tick | None:
    try:
        tick = tick_sequence.get_tick(array_index, tick_index, tick_spacing)
    except TickArrayRevert:
        # Array boundaries & MIN/MAX_TICK_INDEX are stopping points that are not usable ticks
        return None
    return tick if tick.initialized else None


# pylint: disable=too-many-arguments
def swap_step(
    state: SwapState,
    pool: PoolState,
    tick_sequence: SwapTickSequence,
    reward_infos: list[RewardInfo],
    sqrt_price_limit: int,
    amount_specified_is_input: bool,
    a_to_b: bool,
) -> bool:
    """
    Advances the swap state to the next initialized tick, or until the amount or price limit is exhausted.
    Ticks crossed during the step are updated in the tick sequence.

    :return: True if the swap should continue, False once the swap is complete
    """
    tick_spacing = pool.tick_spacing

    next_array_index, next_tick_index = tick_sequence.get_next_initialized_tick_index(
        state.tick_index, tick_spacing, a_to_b, state.array_index
    )

    next_tick_sqrt_price = ClmmMath.tick_math.sqrt_price_from_tick_index(next_tick_index)
    if a_to_b:
        sqrt_price_target = max(sqrt_price_limit, next_tick_sqrt_price)
    else:
        sqrt_price_target = min(sqrt_price_limit, next_tick_sqrt_price)

    computation = ClmmMath.compute_swap_step(
        state.amount_remaining,
        pool.fee_rate,
        state.liquidity,
        state.sqrt_price,
        sqrt_price_target,
        amount_specified_is_input,
        a_to_b,
    )
    logger.debug(f"Swap step from tick {state.tick_index} towards {next_tick_index}: {asdict(computation)}")

    if amount_specified_is_input:
        state.amount_remaining -= computation.amount_in + computation.fee_amount
        state.amount_calculated += computation.amount_out
    else:
        state.amount_remaining -= computation.amount_out
        state.amount_calculated += computation.amount_in + computation.fee_amount

    if state.amount_remaining < 0:
        raise SwapRevert(ErrorCode.AmountRemainingOverflow)
    if state.amount_calculated > U64_MAX:
        raise SwapRevert(ErrorCode.AmountCalcOverflow)

    state.protocol_fee, state.fee_growth_global_input = calculate_fees(
        computation.fee_amount,
        pool.protocol_fee_rate,
        state.liquidity,
        state.protocol_fee,
        state.fee_growth_global_input,
    )

    if computation.next_price == next_tick_sqrt_price:
        next_tick = _get_tick_if_initialized(tick_sequence, next_array_index, next_tick_index, tick_spacing)

        if next_tick is not None:
            if a_to_b:
                fee_growth_global_a, fee_growth_global_b = state.fee_growth_global_input, pool.fee_growth_global_b
            else:
                fee_growth_global_a, fee_growth_global_b = pool.fee_growth_global_a, state.fee_growth_global_input

            update = next_tick_cross_update(next_tick, fee_growth_global_a, fee_growth_global_b, reward_infos)
            signed_liquidity_net = -next_tick.liquidity_net if a_to_b else next_tick.liquidity_net
            state.liquidity = add_liquidity_delta(state.liquidity, signed_liquidity_net)
            tick_sequence.update_tick(next_array_index, next_tick_index, tick_spacing, update)
            logger.debug(f"Crossed tick {next_tick_index}.  Active liquidity: {state.liquidity}")

        tick_offset = tick_sequence.get_tick_offset(next_array_index, next_tick_index, tick_spacing)
        # Leaving the near edge of an array moves the swap into the next array of the sequence
        if (a_to_b and tick_offset == 0) or (not a_to_b and tick_offset == TICK_ARRAY_SIZE - 1):
            state.array_index = next_array_index + 1
        else:
            state.array_index = next_array_index

        # Searches towards lower ticks include the starting tick, so step past the crossed tick
        state.tick_index = next_tick_index - 1 if a_to_b else next_tick_index

    elif computation.next_price != state.sqrt_price:
        state.tick_index = ClmmMath.tick_math.tick_index_from_sqrt_price(computation.next_price)

    state.sqrt_price = computation.next_price

    return state.amount_remaining > 0 and state.sqrt_price != sqrt_price_limit


# pylint: disable=too-many-arguments
def swap(
    pool: PoolState,
    tick_sequence: SwapTickSequence,
    amount: int,
    sqrt_price_limit: int,
    amount_specified_is_input: bool,
    a_to_b: bool,
    timestamp: int,
) -> PostSwapUpdate:
    """
    Executes a swap against the pool, crossing initialized ticks in the tick sequence until the amount is
    filled or the sqrt price limit is reached.  The pool itself is not modified, and crossed ticks are only
    modified within the tick sequence.

    :param pool: current pool state
    :param tick_sequence: tick arrays covering the price range the swap may traverse
    :param amount: u64 amount of the specified token
    :param sqrt_price_limit: Q64.64 sqrt price the swap cannot move past
    :param amount_specified_is_input: if True, amount is the exact input.  If False, amount is the exact output
    :param a_to_b: if True, sell token A for token B, moving the price down
    :param timestamp: current timestamp, used to accumulate rewards
    :return: PostSwapUpdate
    """
    if sqrt_price_limit < ClmmMath.MIN_SQRT_PRICE_X64 or sqrt_price_limit > ClmmMath.MAX_SQRT_PRICE_X64:
        raise SwapRevert(ErrorCode.SqrtPriceOutOfBounds, f"Sqrt price limit {sqrt_price_limit} out of bounds")

    if (a_to_b and sqrt_price_limit > pool.sqrt_price) or (not a_to_b and sqrt_price_limit < pool.sqrt_price):
        raise SwapRevert(
            ErrorCode.InvalidSqrtPriceLimitDirection,
            f"Sqrt price limit {sqrt_price_limit} is on the wrong side of {pool.sqrt_price}",
        )

    if amount == 0:
        raise SwapRevert(ErrorCode.ZeroTradableAmount)
    if amount < 0 or amount > U64_MAX:
        raise SwapRevert(ErrorCode.AmountRemainingOverflow, f"Swap amount {amount} is not a u64")

    if pool.tick_spacing <= 0:
        raise SwapRevert(ErrorCode.InvalidTickSpacing)

    next_reward_infos = next_pool_reward_infos(pool, timestamp)

    state = SwapState(
        amount_remaining=amount,
        amount_calculated=0,
        sqrt_price=pool.sqrt_price,
        tick_index=pool.tick_current_index,
        liquidity=pool.liquidity,
        array_index=0,
        protocol_fee=0,
        fee_growth_global_input=pool.fee_growth_global_a if a_to_b else pool.fee_growth_global_b,
    )

    logger.debug(
        f"Swapping {amount} {'exact input' if amount_specified_is_input else 'exact output'} "
        f"{'A -> B' if a_to_b else 'B -> A'} from sqrt price {pool.sqrt_price}"
    )

    should_continue = state.amount_remaining > 0 and state.sqrt_price != sqrt_price_limit
    while should_continue:
        should_continue = swap_step(
            state, pool, tick_sequence, next_reward_infos, sqrt_price_limit, amount_specified_is_input, a_to_b
        )

    if a_to_b == amount_specified_is_input:
        amount_a, amount_b = amount - state.amount_remaining, state.amount_calculated
    else:
        amount_a, amount_b = state.amount_calculated, amount - state.amount_remaining

    return PostSwapUpdate(
        amount_a=amount_a,
        amount_b=amount_b,
        next_liquidity=state.liquidity,
        next_tick_index=state.tick_index,
        next_sqrt_price=state.sqrt_price,
        next_fee_growth_global=state.fee_growth_global_input,
        next_reward_infos=next_reward_infos,
        next_protocol_fee=state.protocol_fee,
    )
