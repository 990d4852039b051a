from python_clmm.exceptions import ErrorCode, LiquidityRevert
from python_clmm.math import SqrtPriceMathModule, TickMathModule
from python_clmm.math.shared import I128_MAX
from python_clmm.types import ModifyLiquidityUpdate, PoolState, Position, PositionUpdate, RewardInfo, Tick

from .accrual import (
    next_fee_growths_inside,
    next_pool_liquidity,
    next_pool_reward_infos,
    next_position_modify_liquidity_update,
    next_reward_growths_inside,
    next_tick_modify_liquidity_update,
)
from .tick_array import TickArray


def convert_to_liquidity_delta(liquidity_amount: int, positive: bool) -> int:
    """
    Converts an unsigned liquidity amount to a signed liquidity delta.  Amounts above the i128 max are rejected,
    since the delta is applied to the signed liquidity_net of the position ticks.
    """
    if liquidity_amount > I128_MAX:
        raise LiquidityRevert(ErrorCode.LiquidityTooHigh, f"Liquidity amount {liquidity_amount} exceeds i128 max")
    return liquidity_amount if positive else -liquidity_amount


# pylint: disable=too-many-arguments
def _calculate_modify_liquidity(
    pool: PoolState,
    position: Position,
    tick_lower: Tick,
    tick_upper: Tick,
    liquidity_delta: int,
    timestamp: int,
) -> ModifyLiquidityUpdate:
    # Refreshing fees & rewards of a position without liquidity is rejected
    if liquidity_delta == 0 and position.liquidity == 0:
        raise LiquidityRevert(ErrorCode.LiquidityZero, "Position has no liquidity to update")

    next_reward_infos = next_pool_reward_infos(pool, timestamp)

    next_global_liquidity = next_pool_liquidity(
        pool, position.tick_lower_index, position.tick_upper_index, liquidity_delta
    )

    tick_lower_update = next_tick_modify_liquidity_update(
        tick_lower,
        position.tick_lower_index,
        pool.tick_current_index,
        pool.fee_growth_global_a,
        pool.fee_growth_global_b,
        next_reward_infos,
        liquidity_delta,
        False,
    )
    tick_upper_update = next_tick_modify_liquidity_update(
        tick_upper,
        position.tick_upper_index,
        pool.tick_current_index,
        pool.fee_growth_global_a,
        pool.fee_growth_global_b,
        next_reward_infos,
        liquidity_delta,
        True,
    )

    fee_growth_inside_a, fee_growth_inside_b = next_fee_growths_inside(
        pool.tick_current_index,
        tick_lower,
        position.tick_lower_index,
        tick_upper,
        position.tick_upper_index,
        pool.fee_growth_global_a,
        pool.fee_growth_global_b,
    )
    reward_growths_inside = next_reward_growths_inside(
        pool.tick_current_index,
        tick_lower,
        position.tick_lower_index,
        tick_upper,
        position.tick_upper_index,
        next_reward_infos,
    )

    position_update = next_position_modify_liquidity_update(
        position, liquidity_delta, fee_growth_inside_a, fee_growth_inside_b, reward_growths_inside
    )

    return ModifyLiquidityUpdate(
        pool_liquidity=next_global_liquidity,
        tick_lower_update=tick_lower_update,
        tick_upper_update=tick_upper_update,
        reward_infos=next_reward_infos,
        position_update=position_update,
    )


def calculate_modify_liquidity(
    pool: PoolState,
    position: Position,
    tick_array_lower: TickArray,
    tick_array_upper: TickArray,
    liquidity_delta: int,
    timestamp: int,
) -> ModifyLiquidityUpdate:
    """
    Computes every state change caused by changing the liquidity of a position, without applying any of them.

    :param pool: current pool state
    :param position: position being modified
    :param tick_array_lower: tick array containing the lower tick of the position
    :param tick_array_upper: tick array containing the upper tick of the position
    :param liquidity_delta: signed liquidity change.  Zero only refreshes fees & rewards
    :param timestamp: current timestamp, used to accumulate rewards
    """
    tick_lower = tick_array_lower.get_tick(position.tick_lower_index, pool.tick_spacing)
    tick_upper = tick_array_upper.get_tick(position.tick_upper_index, pool.tick_spacing)

    return _calculate_modify_liquidity(pool, position, tick_lower, tick_upper, liquidity_delta, timestamp)


def calculate_fee_and_reward_growths(
    pool: PoolState,
    position: Position,
    tick_array_lower: TickArray,
    tick_array_upper: TickArray,
    timestamp: int,
) -> tuple[PositionUpdate, list[RewardInfo]]:
    """Settles the fees & rewards of a position without changing its liquidity"""
    update = calculate_modify_liquidity(pool, position, tick_array_lower, tick_array_upper, 0, timestamp)
    return update.position_update, update.reward_infos


def sync_modify_liquidity_values(
    pool: PoolState,
    position: Position,
    tick_array_lower: TickArray,
    tick_array_upper: TickArray,
    update: ModifyLiquidityUpdate,
    timestamp: int,
):
    """Applies a ModifyLiquidityUpdate to the pool, position and tick arrays"""
    pool.liquidity = update.pool_liquidity
    pool.reward_infos = update.reward_infos
    pool.reward_last_updated_timestamp = timestamp

    position.apply_update(update.position_update)

    tick_array_lower.update_tick(position.tick_lower_index, pool.tick_spacing, update.tick_lower_update)
    tick_array_upper.update_tick(position.tick_upper_index, pool.tick_spacing, update.tick_upper_update)


def calculate_liquidity_token_deltas(
    tick_current_index: int,
    sqrt_price: int,
    position: Position,
    liquidity_delta: int,
) -> tuple[int, int]:
    """
    Computes the token amounts deposited into (positive delta) or withdrawn from (negative delta) a position.
    Deposits are rounded up and withdrawals are rounded down.

    If the current tick is below the position range, the position is entirely token A.  If the current tick is at
    or above the upper tick, the position is entirely token B.  Otherwise, the position holds both tokens.

    :return: (delta_a, delta_b)
    """
    if liquidity_delta == 0:
        raise LiquidityRevert(ErrorCode.LiquidityZero, "Liquidity delta cannot be zero")

    liquidity = abs(liquidity_delta)
    round_up = liquidity_delta > 0

    lower_price = TickMathModule.sqrt_price_from_tick_index(position.tick_lower_index)
    upper_price = TickMathModule.sqrt_price_from_tick_index(position.tick_upper_index)

    delta_a, delta_b = 0, 0
    if tick_current_index < position.tick_lower_index:
        delta_a = SqrtPriceMathModule.get_amount_delta_a(lower_price, upper_price, liquidity, round_up)
    elif tick_current_index < position.tick_upper_index:
        delta_a = SqrtPriceMathModule.get_amount_delta_a(sqrt_price, upper_price, liquidity, round_up)
        delta_b = SqrtPriceMathModule.get_amount_delta_b(lower_price, sqrt_price, liquidity, round_up)
    else:
        delta_b = SqrtPriceMathModule.get_amount_delta_b(lower_price, upper_price, liquidity, round_up)

    return delta_a, delta_b
