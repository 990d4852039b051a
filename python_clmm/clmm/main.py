import datetime
import json
import logging
from typing import Any

import numpy as np
from pandas import DataFrame

from python_clmm.exceptions import (
    ErrorCode,
    LiquidityRevert,
    PoolRevert,
    PositionRevert,
    SwapRevert,
    TickArrayRevert,
)
from python_clmm.math import ClmmMath
from python_clmm.math.shared import MAX_TICK_INDEX, MIN_TICK_INDEX, NUM_REWARDS
from python_clmm.types import NULL_TOKEN, PoolState, Position, Token
from python_clmm.utils import random_position_mint

from .accrual import next_pool_reward_infos
from .liquidity import (
    calculate_fee_and_reward_growths,
    calculate_liquidity_token_deltas,
    calculate_modify_liquidity,
    convert_to_liquidity_delta,
    sync_modify_liquidity_values,
)
from .swap import swap
from .tick_array import TickArray, get_start_tick_index
from .tick_sequence import SwapTickSequence

package_logger = logging.getLogger("python_clmm")
logger = package_logger.getChild("clmm")


# pylint: disable=too-many-instance-attributes, too-many-public-methods
class ClmmPool:
    """
    Class to simulate a concentrated liquidity pool in python.  Reproduces the integer rounding behavior of the
    on-chain program exactly.

    Every operation computes its result against copies of the records it touches, and only writes the copies back
    once the whole operation has succeeded.  If a :class:`python_clmm.exceptions.ClmmRevert` is raised, the pool,
    its tick arrays and positions are left untouched.
    """

    math = ClmmMath

    state: PoolState
    """
    PoolState object containing the current price, tick, liquidity, fee growths & rewards of the pool
    """

    token_a: Token
    token_b: Token

    timestamp: int
    """
    Current timestamp of the pool in seconds.  Used to accumulate reward emissions, and can be moved forward
    through the advance_time() method.
    """

    tick_arrays: dict[int, TickArray]
    """
    Dictionary of initialized tick arrays, keyed by start tick index.  Tick arrays are created when a position is
    opened, or through initialize_tick_array().  Swaps load up to three adjacent arrays from this dictionary.
    """

    positions: dict[str, Position]
    """
    Dictionary of open positions, keyed by position mint
    """

    vault_a: int = 0
    """
    Amount of Token A held by the pool.  Covers liquidity, uncollected fees & protocol fees
    """
    vault_b: int = 0

    def __init__(self, **kwargs) -> None:
        """
        Initializes an empty pool

        :key int tick_spacing: Tick spacing of the pool.  Defaults to the spacing of the fee tier
        :key int fee_rate: Fee rate in hundredths of a basis point.  Defaults to the fee of the tick spacing
        :key int protocol_fee_rate: Share of fees kept by the protocol, in basis points.  Defaults to 0
        :key int initial_sqrt_price: Q64.64 starting sqrt price
        :key int initial_tick: Starting tick, used if initial_sqrt_price is not provided.  Defaults to 0
        :key int initial_timestamp: Starting timestamp.  Defaults to the current time
        :key int liquidity: Starting active liquidity that is not owned by any position.  Defaults to 0
        :key Token token_a:
        :key Token token_b:
        """
        self.tick_arrays = kwargs.get("tick_arrays", {})
        self.positions = kwargs.get("positions", {})
        self.vault_a = kwargs.get("vault_a", 0)
        self.vault_b = kwargs.get("vault_b", 0)

        self.token_a = kwargs.get("token_a", NULL_TOKEN)
        self.token_b = kwargs.get("token_b", NULL_TOKEN)

        self.timestamp = kwargs.get("initial_timestamp", int(datetime.datetime.now().timestamp()))

        if "state" in kwargs:
            self.state = kwargs["state"]
            return

        fee_rate, tick_spacing = self.math.get_fee_and_spacing(kwargs)
        protocol_fee_rate = kwargs.get("protocol_fee_rate", 0)
        self.math.check_pool_config(fee_rate, protocol_fee_rate, tick_spacing)

        if "initial_sqrt_price" in kwargs:
            sqrt_price = kwargs["initial_sqrt_price"]
            if not self.math.MIN_SQRT_PRICE_X64 <= sqrt_price <= self.math.MAX_SQRT_PRICE_X64:
                raise PoolRevert(ErrorCode.SqrtPriceOutOfBounds, f"Initial sqrt price {sqrt_price} out of bounds")
        else:
            sqrt_price = self.math.tick_math.sqrt_price_from_tick_index(kwargs.get("initial_tick", 0))

        self.state = PoolState(
            sqrt_price=sqrt_price,
            tick_current_index=self.math.tick_math.tick_index_from_sqrt_price(sqrt_price),
            tick_spacing=tick_spacing,
            fee_rate=fee_rate,
            protocol_fee_rate=protocol_fee_rate,
            liquidity=kwargs.get("liquidity", 0),
            reward_last_updated_timestamp=self.timestamp,
        )

    def __repr__(self):
        return f"{self.token_a.symbol} <-> {self.token_b.symbol} @ {self.state.fee_rate / 100} bips"

    # -----------------------------------------------------------------------------------------------------------
    #  Caching Pool State
    # -----------------------------------------------------------------------------------------------------------

    def save_pool(self, file_path):
        """
        Saves pool state, tick arrays & positions to a JSON file.  This file can later be used to re-initialize
        a pool instance through load_pool()

        :param file_path: Writable file object for JSON save location
        """
        logger.info("Json Encoding Pool State")

        pool_state_dict = {
            "timestamp": self.timestamp,
            "vault_a": self.vault_a,
            "vault_b": self.vault_b,
            "token_a": self.token_a.model_dump(),
            "token_b": self.token_b.model_dump(),
            "state": self.state.model_dump(),
            "tick_arrays": {
                str(start): tick_array.model_dump() for start, tick_array in sorted(self.tick_arrays.items())
            },
            "positions": {mint: position.model_dump() for mint, position in self.positions.items()},
        }
        json.dump(pool_state_dict, file_path)
        logger.info("Pool State Saved")

    @classmethod
    def load_pool(cls, file_path) -> "ClmmPool":
        """
        Loads a pool from a JSON File generated by the save_pool() method
        :param file_path: Readable file object
        :return:
        """
        pool_params = json.load(file_path)

        return ClmmPool(
            initial_timestamp=pool_params["timestamp"],
            vault_a=pool_params["vault_a"],
            vault_b=pool_params["vault_b"],
            token_a=Token.model_validate(pool_params["token_a"]),
            token_b=Token.model_validate(pool_params["token_b"]),
            state=PoolState.model_validate(pool_params["state"]),
            tick_arrays={
                int(start): TickArray.model_validate(tick_array)
                for start, tick_array in pool_params["tick_arrays"].items()
            },
            positions={
                mint: Position.model_validate(position) for mint, position in pool_params["positions"].items()
            },
        )

    # -----------------------------------------------------------------------------------------------------------
    #  Research & Simulation Functionality
    # -----------------------------------------------------------------------------------------------------------

    def advance_time(self, seconds: int = 1):
        """
        Moves the pool timestamp forward by `seconds`.  Rewards accumulate over the elapsed time on the next
        operation that touches the pool

        :param seconds: Number of seconds to advance.  Defaults to 1
        """
        if seconds < 0:
            raise PoolRevert(ErrorCode.InvalidTimestamp, "Pool time cannot be moved backwards")
        self.timestamp += seconds

    def set_reward_emissions(self, reward_index: int, emissions_per_second_x64: int, mint: str | None = None):
        """
        Sets the emission rate of a pool reward, initializing the reward slot if it is empty.  Reward growth is
        settled up to the current timestamp at the old emission rate first.

        :param reward_index: reward slot between 0 and 2
        :param emissions_per_second_x64: Q64.64 reward tokens emitted per second
        :param mint: mint of the reward token.  Defaults to `reward_{index}` for uninitialized slots
        """
        if not 0 <= reward_index < NUM_REWARDS:
            raise PoolRevert(ErrorCode.InvalidRewardIndex, f"Reward index {reward_index} out of range")

        reward_infos = next_pool_reward_infos(self.state, self.timestamp)
        reward_info = reward_infos[reward_index]
        if mint is not None or not reward_info.initialized:
            reward_info.mint = mint or f"reward_{reward_index}"
        reward_info.emissions_per_second_x64 = emissions_per_second_x64

        self.state.reward_infos = reward_infos
        self.state.reward_last_updated_timestamp = self.timestamp

    def get_price_at_sqrt_price(self, sqrt_price: int, reverse_tokens: bool = False) -> float:
        """
        Converts a sqrt_price to a human-readable price.

        :param sqrt_price:
            sqrt_price encoded as fixed point Q64.64
        :param reverse_tokens:
            Whether to reverse the tokens in the price.  The sqrt_price represents the
            :math:`\\frac{ Token B }{ Token A}`.  If reverse_tokens is True, the price will be represented as
            :math:`\\frac{ Token A }{ Token B}`.
        """
        raw_price_float = (sqrt_price / self.math.Q64) ** 2
        adjusted_price = raw_price_float * (10 ** (self.token_a.decimals - self.token_b.decimals))

        if reverse_tokens:
            adjusted_price = 1 / adjusted_price

        return adjusted_price

    def get_formatted_price_at_sqrt_price(self, sqrt_price: int, reverse_tokens: bool = False) -> str:
        """
        Converts a sqrt_price to a formatted price string rounded to 6 significant figures, listing the
        Reference Asset, ie SOL: 21.4532 USDC.
        """
        rounded_price = np.format_float_positional(
            float(f"{self.get_price_at_sqrt_price(sqrt_price, reverse_tokens):.6g}")
        )
        return (
            f"{self.token_b.symbol}: {rounded_price} {self.token_a.symbol}"
            if reverse_tokens
            else f"{self.token_a.symbol}: {rounded_price} {self.token_b.symbol}"
        )

    def get_price_at_tick(self, tick: int, reverse_tokens: bool = False) -> float:
        """Converts a tick to a human-readable price"""
        return self.get_price_at_sqrt_price(self.math.tick_math.sqrt_price_from_tick_index(tick), reverse_tokens)

    def get_initialized_ticks(self) -> dict[int, Any]:
        """Returns all initialized ticks across every tick array, sorted by tick index"""
        ticks = {}
        for start in sorted(self.tick_arrays):
            ticks.update(self.tick_arrays[start].initialized_ticks(self.state.tick_spacing))
        return ticks

    def compute_liquidity_at_price(self, reverse_tokens: bool = False, compress: bool = False) -> DataFrame:
        """
        Computes the active liquidity at each initialized tick in the pool.

        :param reverse_tokens:
            Reverses the reference token in the price.
        :param compress:
            Compresses the output to only include price points where the liquidity changes by more than 10%.
        :return:
            Dataframe with the current token/token price and the active liquidity at that price.
        """
        current_liquidity = 0
        last_liquidity = 1
        liquidity: dict[str, list] = {"tick": [], "price": [], "active_liquidity": []}
        for tick_index, tick in self.get_initialized_ticks().items():
            current_liquidity += tick.liquidity_net
            if compress and abs((current_liquidity - last_liquidity) / last_liquidity) <= 0.1:
                continue

            liquidity["tick"].append(tick_index)
            liquidity["price"].append(self.get_price_at_tick(tick_index, reverse_tokens))
            liquidity["active_liquidity"].append(current_liquidity)
            last_liquidity = current_liquidity or 1

        return DataFrame(liquidity).astype({"tick": int, "price": float, "active_liquidity": float})

    def get_position_value(self, position_mint: str) -> tuple[int, int]:
        """Returns the token amounts that would be withdrawn by removing all liquidity from a position"""
        position = self.get_position(position_mint)
        if position.liquidity == 0:
            return 0, 0
        return calculate_liquidity_token_deltas(
            self.state.tick_current_index, self.state.sqrt_price, position, -position.liquidity
        )

    # -----------------------------------------------------------------------------------------------------------
    #  Tick Arrays & Positions
    # -----------------------------------------------------------------------------------------------------------

    def initialize_tick_array(self, start_tick_index: int) -> TickArray:
        """
        Creates an empty tick array.  Returns the existing array if it is already initialized

        :param start_tick_index: start index, aligned to 88 * tick_spacing
        """
        if start_tick_index in self.tick_arrays:
            return self.tick_arrays[start_tick_index]

        tick_array = TickArray.new(start_tick_index, self.state.tick_spacing)
        self.tick_arrays[start_tick_index] = tick_array
        logger.info(f"Initialized tick array starting at {start_tick_index}")
        return tick_array

    def get_tick_array(self, tick_index: int) -> TickArray:
        """Returns the tick array containing tick_index.  Raises TickNotFound if it is not initialized"""
        start = get_start_tick_index(tick_index, self.state.tick_spacing)
        try:
            return self.tick_arrays[start]
        except KeyError as exc:
            raise TickArrayRevert(
                ErrorCode.TickNotFound, f"Tick array starting at {start} for tick {tick_index} is not initialized"
            ) from exc

    def get_swap_tick_arrays(self, a_to_b: bool) -> list[TickArray]:
        """
        Returns working copies of the (up to three) tick arrays a swap from the current tick traverses.  Swaps
        towards higher ticks start searching one tick spacing above the current tick.  Arrays that are not
        initialized are returned empty, and are discarded after the swap.
        """
        tick_spacing = self.state.tick_spacing
        min_start = get_start_tick_index(MIN_TICK_INDEX, tick_spacing)
        max_start = get_start_tick_index(MAX_TICK_INDEX, tick_spacing)

        shift = 0 if a_to_b else tick_spacing
        start = get_start_tick_index(self.state.tick_current_index + shift, tick_spacing)
        start = min(max(start, min_start), max_start)

        starts = [start]
        while len(starts) < 3:
            next_start = get_start_tick_index(starts[-1], tick_spacing, -1 if a_to_b else 1)
            if next_start < min_start or next_start > max_start:
                break
            starts.append(next_start)

        return [
            self.tick_arrays[start].model_copy(deep=True)
            if start in self.tick_arrays
            else TickArray.new(start, tick_spacing)
            for start in starts
        ]

    def get_position(self, position_mint: str) -> Position:
        try:
            return self.positions[position_mint]
        except KeyError as exc:
            raise PositionRevert(ErrorCode.PositionNotFound, f"Position {position_mint} does not exist") from exc

    def _copy_position_tick_arrays(self, position: Position) -> tuple[TickArray, TickArray]:
        lower = self.get_tick_array(position.tick_lower_index).model_copy(deep=True)
        upper_start = get_start_tick_index(position.tick_upper_index, self.state.tick_spacing)
        if upper_start == lower.start_tick_index:
            return lower, lower
        return lower, self.get_tick_array(position.tick_upper_index).model_copy(deep=True)

    def _commit_position(self, position: Position):
        stored = self.positions[position.position_mint]
        for field_name in Position.model_fields:
            setattr(stored, field_name, getattr(position, field_name))

    def _commit_tick_arrays(self, *tick_arrays: TickArray):
        for tick_array in tick_arrays:
            self.tick_arrays[tick_array.start_tick_index] = tick_array

    # -----------------------------------------------------------------------------------------------------------
    #  Publicly Exposed Pool Methods
    # -----------------------------------------------------------------------------------------------------------

    def open_position(
        self,
        tick_lower_index: int,
        tick_upper_index: int,
        owner: str | None = None,
        initialize_tick_arrays: bool = True,
    ) -> Position:
        """
        Opens an empty position over a tick range.

        :param tick_lower_index: lower bound of the position, aligned to the tick spacing
        :param tick_upper_index: upper bound of the position, aligned to the tick spacing
        :param owner: optional owner identifier
        :param initialize_tick_arrays: create the tick arrays containing the bounds if they do not exist
        :return: the new Position.  The returned object stays in sync with the pool as the position is modified
        """
        tick_spacing = self.state.tick_spacing
        if (
            not self.math.check_is_usable_tick(tick_lower_index, tick_spacing)
            or not self.math.check_is_usable_tick(tick_upper_index, tick_spacing)
            or tick_lower_index >= tick_upper_index
        ):
            raise PositionRevert(
                ErrorCode.InvalidTickIndex,
                f"Invalid position range [{tick_lower_index}, {tick_upper_index}] for tick spacing {tick_spacing}",
            )

        if initialize_tick_arrays:
            self.initialize_tick_array(get_start_tick_index(tick_lower_index, tick_spacing))
            self.initialize_tick_array(get_start_tick_index(tick_upper_index, tick_spacing))

        position = Position(
            position_mint=random_position_mint(),
            owner=owner,
            tick_lower_index=tick_lower_index,
            tick_upper_index=tick_upper_index,
        )
        self.positions[position.position_mint] = position
        logger.info(f"Opened position {position.position_mint} over [{tick_lower_index}, {tick_upper_index}]")
        return position

    def _modify_liquidity(self, position_mint: str, liquidity_delta: int) -> tuple[PoolState, Position, tuple]:
        pool = self.state.model_copy(deep=True)
        position = self.get_position(position_mint).model_copy(deep=True)
        tick_array_lower, tick_array_upper = self._copy_position_tick_arrays(position)

        update = calculate_modify_liquidity(
            pool, position, tick_array_lower, tick_array_upper, liquidity_delta, self.timestamp
        )
        sync_modify_liquidity_values(pool, position, tick_array_lower, tick_array_upper, update, self.timestamp)

        return pool, position, (tick_array_lower, tick_array_upper)

    def increase_liquidity(
        self,
        position_mint: str,
        liquidity_amount: int,
        token_max_a: int,
        token_max_b: int,
    ) -> tuple[int, int]:
        """
        Adds liquidity to a position.  Fees & rewards earned by the position are settled first.

        :param position_mint: position to add liquidity to
        :param liquidity_amount: amount of liquidity to add
        :param token_max_a: maximum amount of token A to deposit
        :param token_max_b: maximum amount of token B to deposit
        :return: (amount_a, amount_b) deposited into the pool
        """
        if liquidity_amount == 0:
            raise LiquidityRevert(ErrorCode.LiquidityZero, "Cannot add zero liquidity")
        liquidity_delta = convert_to_liquidity_delta(liquidity_amount, True)

        pool, position, tick_arrays = self._modify_liquidity(position_mint, liquidity_delta)

        delta_a, delta_b = calculate_liquidity_token_deltas(
            pool.tick_current_index, pool.sqrt_price, position, liquidity_delta
        )
        if delta_a > token_max_a or delta_b > token_max_b:
            raise LiquidityRevert(
                ErrorCode.TokenMaxExceeded,
                f"Deposit of ({delta_a}, {delta_b}) exceeds maximum of ({token_max_a}, {token_max_b})",
            )

        self.state = pool
        self._commit_position(position)
        self._commit_tick_arrays(*tick_arrays)
        self.vault_a += delta_a
        self.vault_b += delta_b

        logger.info(f"Added {liquidity_amount} liquidity to {position_mint} for {delta_a} A & {delta_b} B")
        return delta_a, delta_b

    def decrease_liquidity(
        self,
        position_mint: str,
        liquidity_amount: int,
        token_min_a: int,
        token_min_b: int,
    ) -> tuple[int, int]:
        """
        Removes liquidity from a position.  Fees & rewards earned by the position are settled first, and stay
        in the position until collected.

        :param position_mint: position to remove liquidity from
        :param liquidity_amount: amount of liquidity to remove
        :param token_min_a: minimum amount of token A to withdraw
        :param token_min_b: minimum amount of token B to withdraw
        :return: (amount_a, amount_b) withdrawn from the pool
        """
        if liquidity_amount == 0:
            raise LiquidityRevert(ErrorCode.LiquidityZero, "Cannot remove zero liquidity")
        liquidity_delta = convert_to_liquidity_delta(liquidity_amount, False)

        pool, position, tick_arrays = self._modify_liquidity(position_mint, liquidity_delta)

        delta_a, delta_b = calculate_liquidity_token_deltas(
            pool.tick_current_index, pool.sqrt_price, position, liquidity_delta
        )
        if delta_a < token_min_a or delta_b < token_min_b:
            raise LiquidityRevert(
                ErrorCode.TokenMinSubceeded,
                f"Withdrawal of ({delta_a}, {delta_b}) is below minimum of ({token_min_a}, {token_min_b})",
            )

        self.state = pool
        self._commit_position(position)
        self._commit_tick_arrays(*tick_arrays)
        self.vault_a -= delta_a
        self.vault_b -= delta_b

        logger.info(f"Removed {liquidity_amount} liquidity from {position_mint} for {delta_a} A & {delta_b} B")
        return delta_a, delta_b

    def update_fees_and_rewards(self, position_mint: str):
        """
        Settles the fees & rewards earned by a position into its owed balances without changing its liquidity.
        Raises LiquidityZero if the position has no liquidity.
        """
        pool = self.state.model_copy(deep=True)
        position = self.get_position(position_mint).model_copy(deep=True)
        tick_array_lower, tick_array_upper = self._copy_position_tick_arrays(position)

        position_update, reward_infos = calculate_fee_and_reward_growths(
            pool, position, tick_array_lower, tick_array_upper, self.timestamp
        )

        pool.reward_infos = reward_infos
        pool.reward_last_updated_timestamp = self.timestamp
        position.apply_update(position_update)

        self.state = pool
        self._commit_position(position)

    def collect_fees(self, position_mint: str) -> tuple[int, int]:
        """
        Transfers the fees owed to a position out of the pool.  Call update_fees_and_rewards() first to settle
        fees earned since the last liquidity change.

        :return: (fee_a, fee_b) collected
        """
        position = self.get_position(position_mint)
        fee_a, fee_b = position.fee_owed_a, position.fee_owed_b

        position.fee_owed_a, position.fee_owed_b = 0, 0
        self.vault_a -= fee_a
        self.vault_b -= fee_b

        logger.info(f"Collected {fee_a} A & {fee_b} B fees from {position_mint}")
        return fee_a, fee_b

    def collect_reward(self, position_mint: str, reward_index: int) -> int:
        """
        Transfers the rewards owed to a position for a single reward slot

        :return: amount of the reward collected
        """
        if not 0 <= reward_index < NUM_REWARDS:
            raise PositionRevert(ErrorCode.InvalidRewardIndex, f"Reward index {reward_index} out of range")

        position = self.get_position(position_mint)
        amount = position.reward_infos[reward_index].amount_owed
        position.reward_infos[reward_index].amount_owed = 0

        logger.info(f"Collected {amount} of reward {reward_index} from {position_mint}")
        return amount

    def close_position(self, position_mint: str):
        """Closes a position.  The position must have no liquidity and no uncollected fees or rewards"""
        position = self.get_position(position_mint)
        if not position.is_empty():
            raise PositionRevert(
                ErrorCode.ClosePositionNotEmpty, f"Position {position_mint} still holds liquidity, fees or rewards"
            )
        del self.positions[position_mint]
        logger.info(f"Closed position {position_mint}")

    # pylint: disable=too-many-arguments,too-many-locals
    def swap(
        self,
        amount: int,
        other_amount_threshold: int,
        sqrt_price_limit: int | None = None,
        amount_specified_is_input: bool = True,
        a_to_b: bool = True,
        tick_arrays: list[TickArray] | None = None,
        committing: bool = True,
    ) -> tuple[int, int]:
        """
        Swaps tokens in the pool.

        :param amount:
            Raw token amount to swap.  If amount_specified_is_input, this is the exact amount of the input token
            to sell.  Otherwise, this is the exact amount of the output token to buy.
        :param other_amount_threshold:
            Slippage bound on the other side of the trade.  For exact input swaps, the minimum output.  For exact
            output swaps, the maximum input.
        :param sqrt_price_limit:
            The minimum (a_to_b) or maximum (b_to_a) price the swap can move to.  Defaults to the price bound.
        :param amount_specified_is_input:
            Whether amount is the exact input or exact output of the swap.  Default: True
        :param a_to_b:
            If True, sell Token A and buy Token B, moving the price down.  Default: True
        :param tick_arrays:
            Tick arrays the swap may traverse, ordered in the direction of the trade.  Defaults to the three
            arrays starting at the current tick from get_swap_tick_arrays().  Only arrays initialized in the pool
            are written back.
        :param committing:
            If True, the swap results are saved into the pool state.  If False, the swap is only quoted.
            Default: True
        :return: (amount_a, amount_b) exchanged
        """
        if sqrt_price_limit is None:
            sqrt_price_limit = self.math.MIN_SQRT_PRICE_X64 if a_to_b else self.math.MAX_SQRT_PRICE_X64

        if tick_arrays:
            tick_arrays = [tick_array.model_copy(deep=True) for tick_array in tick_arrays]
        else:
            tick_arrays = self.get_swap_tick_arrays(a_to_b)

        swap_update = swap(
            self.state,
            SwapTickSequence(*tick_arrays),
            amount,
            sqrt_price_limit,
            amount_specified_is_input,
            a_to_b,
            self.timestamp,
        )

        if amount_specified_is_input:
            amount_out = swap_update.amount_b if a_to_b else swap_update.amount_a
            if amount_out < other_amount_threshold:
                raise SwapRevert(
                    ErrorCode.TokenMinSubceeded, f"Output {amount_out} below minimum {other_amount_threshold}"
                )
        else:
            amount_in = swap_update.amount_a if a_to_b else swap_update.amount_b
            if amount_in > other_amount_threshold:
                raise SwapRevert(
                    ErrorCode.TokenMaxExceeded, f"Input {amount_in} above maximum {other_amount_threshold}"
                )

        if not committing:
            return swap_update.amount_a, swap_update.amount_b

        self.state.liquidity = swap_update.next_liquidity
        self.state.tick_current_index = swap_update.next_tick_index
        self.state.sqrt_price = swap_update.next_sqrt_price
        self.state.reward_infos = swap_update.next_reward_infos
        self.state.reward_last_updated_timestamp = self.timestamp
        if a_to_b:
            self.state.fee_growth_global_a = swap_update.next_fee_growth_global
            self.state.protocol_fee_owed_a += swap_update.next_protocol_fee
            self.vault_a += swap_update.amount_a
            self.vault_b -= swap_update.amount_b
        else:
            self.state.fee_growth_global_b = swap_update.next_fee_growth_global
            self.state.protocol_fee_owed_b += swap_update.next_protocol_fee
            self.vault_a -= swap_update.amount_a
            self.vault_b += swap_update.amount_b

        self._commit_tick_arrays(*(array for array in tick_arrays if array.start_tick_index in self.tick_arrays))

        logger.info(
            f"Swapped {swap_update.amount_a} A {'->' if a_to_b else '<-'} {swap_update.amount_b} B.  "
            f"Price: {self.get_formatted_price_at_sqrt_price(self.state.sqrt_price)}"
        )
        return swap_update.amount_a, swap_update.amount_b
