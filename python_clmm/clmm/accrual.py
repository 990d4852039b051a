"""
Fee, reward & liquidity bookkeeping for pools, ticks and positions.

Every function here is pure: it reads the current records and returns the next state, leaving the caller to apply
the updates once the whole operation has succeeded.  Growth accumulators are Q64.64 values that wrap around on
overflow, and owed balances are u64 values that wrap around on overflow.
"""
import logging

from python_clmm.exceptions import ErrorCode, FullMathRevert, LiquidityRevert, PoolRevert
from python_clmm.math import FullMathModule
from python_clmm.math.shared import I128_MAX, I128_MIN, NUM_REWARDS, U128_MAX
from python_clmm.types import (
    PoolState,
    Position,
    PositionRewardInfo,
    PositionUpdate,
    RewardInfo,
    Tick,
    TickUpdate,
)
from python_clmm.utils import uint_over_under_flow

package_logger = logging.getLogger("python_clmm")
logger = package_logger.getChild("clmm").getChild("accrual")


def add_liquidity_delta(liquidity: int, delta: int) -> int:
    """
    Applies a signed liquidity delta to an unsigned liquidity value.

    :raises LiquidityRevert: LiquidityOverflow if the result exceeds a u128, LiquidityUnderflow if it is negative
    """
    if delta == 0:
        return liquidity
    next_liquidity = liquidity + delta
    if next_liquidity > U128_MAX:
        raise LiquidityRevert(ErrorCode.LiquidityOverflow, f"{liquidity} + {delta} overflows u128")
    if next_liquidity < 0:
        raise LiquidityRevert(ErrorCode.LiquidityUnderflow, f"{liquidity} + {delta} underflows")
    return next_liquidity


def next_pool_reward_infos(pool: PoolState, next_timestamp: int) -> list[RewardInfo]:
    """
    Accumulates reward growth between the last reward update and next_timestamp.  Each initialized reward grows
    by :math:`\\frac{\\Delta t * emissions\\_per\\_second}{liquidity}`

    :param pool: current pool state
    :param next_timestamp: timestamp to accumulate rewards up to
    :return: copies of the pool reward infos with updated growth
    """
    curr_timestamp = pool.reward_last_updated_timestamp
    if next_timestamp < curr_timestamp:
        raise PoolRevert(
            ErrorCode.InvalidTimestamp, f"Timestamp {next_timestamp} is before last update {curr_timestamp}"
        )

    next_reward_infos = [reward.model_copy() for reward in pool.reward_infos]

    if pool.liquidity == 0 or next_timestamp == curr_timestamp:
        return next_reward_infos

    time_delta = next_timestamp - curr_timestamp
    for reward_info in next_reward_infos:
        if not reward_info.initialized:
            continue

        try:
            growth_delta = FullMathModule.mul_div(time_delta, reward_info.emissions_per_second_x64, pool.liquidity)
        except FullMathRevert:
            growth_delta = 0
        reward_info.growth_global_x64 = uint_over_under_flow(reward_info.growth_global_x64 + growth_delta, 128)

    return next_reward_infos


def next_pool_liquidity(pool: PoolState, tick_lower_index: int, tick_upper_index: int, liquidity_delta: int) -> int:
    """Returns the active liquidity after modifying a position.  Only ranges containing the current tick count"""
    if tick_lower_index <= pool.tick_current_index < tick_upper_index:
        return add_liquidity_delta(pool.liquidity, liquidity_delta)
    return pool.liquidity


def next_tick_cross_update(
    tick: Tick,
    fee_growth_global_a: int,
    fee_growth_global_b: int,
    reward_infos: list[RewardInfo],
) -> TickUpdate:
    """Flips the growth outside checkpoints of a tick when the price crosses it"""
    update = TickUpdate.from_tick(tick)

    update.fee_growth_outside_a = uint_over_under_flow(fee_growth_global_a - tick.fee_growth_outside_a, 128)
    update.fee_growth_outside_b = uint_over_under_flow(fee_growth_global_b - tick.fee_growth_outside_b, 128)

    for i, reward_info in enumerate(reward_infos):
        if not reward_info.initialized:
            continue
        update.reward_growths_outside[i] = uint_over_under_flow(
            reward_info.growth_global_x64 - tick.reward_growths_outside[i], 128
        )

    return update


# pylint: disable=too-many-arguments
def next_tick_modify_liquidity_update(
    tick: Tick,
    tick_index: int,
    tick_current_index: int,
    fee_growth_global_a: int,
    fee_growth_global_b: int,
    reward_infos: list[RewardInfo],
    liquidity_delta: int,
    is_upper_tick: bool,
) -> TickUpdate:
    """
    Computes the next state of a position's boundary tick after modifying the position liquidity.

    When a tick is first initialized, all growth to date is assumed to have happened below the tick, so growth
    outside is seeded with global growth if the current tick is at or above the tick.  When liquidity_gross
    returns to zero, the tick is reset.

    :param tick: current tick state
    :param tick_index: index of the tick
    :param tick_current_index: current tick of the pool
    :param fee_growth_global_a:
    :param fee_growth_global_b:
    :param reward_infos: reward infos accumulated up to the current timestamp
    :param liquidity_delta: signed change in position liquidity
    :param is_upper_tick: True if the tick is the upper bound of the position
    """
    if liquidity_delta == 0:
        return TickUpdate.from_tick(tick)

    liquidity_gross = add_liquidity_delta(tick.liquidity_gross, liquidity_delta)

    if liquidity_gross == 0:
        return TickUpdate()

    if tick.liquidity_gross == 0:
        if tick_current_index >= tick_index:
            fee_growth_outside_a, fee_growth_outside_b = fee_growth_global_a, fee_growth_global_b
            reward_growths_outside = [
                reward.growth_global_x64 if reward.initialized else 0 for reward in reward_infos
            ]
        else:
            fee_growth_outside_a, fee_growth_outside_b = 0, 0
            reward_growths_outside = [0] * NUM_REWARDS
    else:
        fee_growth_outside_a, fee_growth_outside_b = tick.fee_growth_outside_a, tick.fee_growth_outside_b
        reward_growths_outside = list(tick.reward_growths_outside)

    liquidity_net = tick.liquidity_net - liquidity_delta if is_upper_tick else tick.liquidity_net + liquidity_delta
    if not I128_MIN <= liquidity_net <= I128_MAX:
        raise LiquidityRevert(ErrorCode.LiquidityNetError, f"Liquidity net {liquidity_net} overflows i128")

    return TickUpdate(
        initialized=True,
        liquidity_net=liquidity_net,
        liquidity_gross=liquidity_gross,
        fee_growth_outside_a=fee_growth_outside_a,
        fee_growth_outside_b=fee_growth_outside_b,
        reward_growths_outside=reward_growths_outside,
    )


def next_fee_growths_inside(
    tick_current_index: int,
    tick_lower: Tick,
    tick_lower_index: int,
    tick_upper: Tick,
    tick_upper_index: int,
    fee_growth_global_a: int,
    fee_growth_global_b: int,
) -> tuple[int, int]:
    """
    Computes the fee growth inside a tick range as global growth minus growth below the lower tick and
    growth above the upper tick.  An uninitialized lower tick has all growth below it, and an uninitialized
    upper tick has no growth above it.
    """
    if not tick_lower.initialized:
        below_a, below_b = fee_growth_global_a, fee_growth_global_b
    elif tick_current_index < tick_lower_index:
        below_a = uint_over_under_flow(fee_growth_global_a - tick_lower.fee_growth_outside_a, 128)
        below_b = uint_over_under_flow(fee_growth_global_b - tick_lower.fee_growth_outside_b, 128)
    else:
        below_a, below_b = tick_lower.fee_growth_outside_a, tick_lower.fee_growth_outside_b

    if not tick_upper.initialized:
        above_a, above_b = 0, 0
    elif tick_current_index < tick_upper_index:
        above_a, above_b = tick_upper.fee_growth_outside_a, tick_upper.fee_growth_outside_b
    else:
        above_a = uint_over_under_flow(fee_growth_global_a - tick_upper.fee_growth_outside_a, 128)
        above_b = uint_over_under_flow(fee_growth_global_b - tick_upper.fee_growth_outside_b, 128)

    return (
        uint_over_under_flow(fee_growth_global_a - below_a - above_a, 128),
        uint_over_under_flow(fee_growth_global_b - below_b - above_b, 128),
    )


def next_reward_growths_inside(
    tick_current_index: int,
    tick_lower: Tick,
    tick_lower_index: int,
    tick_upper: Tick,
    tick_upper_index: int,
    reward_infos: list[RewardInfo],
) -> list[int | None]:
    """Computes reward growth inside a tick range.  Uninitialized rewards are returned as None"""
    reward_growths_inside: list[int | None] = [None] * NUM_REWARDS

    for i, reward_info in enumerate(reward_infos):
        if not reward_info.initialized:
            continue

        if not tick_lower.initialized:
            below = reward_info.growth_global_x64
        elif tick_current_index < tick_lower_index:
            below = uint_over_under_flow(reward_info.growth_global_x64 - tick_lower.reward_growths_outside[i], 128)
        else:
            below = tick_lower.reward_growths_outside[i]

        if not tick_upper.initialized:
            above = 0
        elif tick_current_index < tick_upper_index:
            above = tick_upper.reward_growths_outside[i]
        else:
            above = uint_over_under_flow(reward_info.growth_global_x64 - tick_upper.reward_growths_outside[i], 128)

        reward_growths_inside[i] = uint_over_under_flow(reward_info.growth_global_x64 - below - above, 128)

    return reward_growths_inside


def _owed_delta(liquidity: int, growth_delta: int) -> int:
    try:
        return FullMathModule.mul_shift_right(liquidity, growth_delta)
    except FullMathRevert:
        return 0


def next_position_modify_liquidity_update(
    position: Position,
    liquidity_delta: int,
    fee_growth_inside_a: int,
    fee_growth_inside_b: int,
    reward_growths_inside: list[int | None],
) -> PositionUpdate:
    """
    Settles fees & rewards earned by the position since its last checkpoint, using the liquidity the position
    held before this change, then applies the liquidity delta.
    """
    fee_delta_a = _owed_delta(
        position.liquidity, uint_over_under_flow(fee_growth_inside_a - position.fee_growth_checkpoint_a, 128)
    )
    fee_delta_b = _owed_delta(
        position.liquidity, uint_over_under_flow(fee_growth_inside_b - position.fee_growth_checkpoint_b, 128)
    )

    reward_infos = [reward.model_copy() for reward in position.reward_infos]
    for i, growth_inside in enumerate(reward_growths_inside):
        if growth_inside is None:
            continue
        curr_reward = reward_infos[i]
        amount_owed_delta = _owed_delta(
            position.liquidity, uint_over_under_flow(growth_inside - curr_reward.growth_inside_checkpoint, 128)
        )
        reward_infos[i] = PositionRewardInfo(
            growth_inside_checkpoint=growth_inside,
            amount_owed=uint_over_under_flow(curr_reward.amount_owed + amount_owed_delta, 64),
        )

    if fee_delta_a or fee_delta_b:
        logger.debug(
            f"Settled fees for position {position.position_mint}.  Token A: {fee_delta_a}, Token B: {fee_delta_b}"
        )

    return PositionUpdate(
        liquidity=add_liquidity_delta(position.liquidity, liquidity_delta),
        fee_growth_checkpoint_a=fee_growth_inside_a,
        fee_owed_a=uint_over_under_flow(position.fee_owed_a + fee_delta_a, 64),
        fee_growth_checkpoint_b=fee_growth_inside_b,
        fee_owed_b=uint_over_under_flow(position.fee_owed_b + fee_delta_b, 64),
        reward_infos=reward_infos,
    )
