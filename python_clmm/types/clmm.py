from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from python_clmm.math.shared import NUM_REWARDS


class Token(BaseModel):
    """Token traded by a pool.  Only used for formatting human readable prices & amounts"""

    mint: str = ""
    """Unique identifier of the token"""
    symbol: str = "NULL"
    decimals: int = 0


NULL_TOKEN = Token()


class RewardInfo(BaseModel):
    """Stores the emission rate & accumulated growth of a pool reward"""

    mint: str | None = None
    """
    Mint of the reward token.  Reward slots without a mint are uninitialized, and are skipped when accumulating
    reward growth
    """
    emissions_per_second_x64: int = 0
    """
    Q64.64 number of reward tokens emitted to the pool every second.  Emissions are shared between all liquidity
    that is active at the current price
    """
    growth_global_x64: int = 0
    """
    Q64.64 number of reward tokens emitted per unit of active liquidity since the reward was initialized.  This
    accumulator wraps around on overflow
    """

    @property
    def initialized(self) -> bool:
        return self.mint is not None


class PoolState(BaseModel):
    """Stores the current price, liquidity, fee growths & rewards of a pool"""

    sqrt_price: int
    """
        Current Exchange rate between token_a and token_b.

        This value is represented as the square root of the token_b / token_a ratio, in a
        fixed point Q64.64 Number (64 bits of integer precision & 64 bits of fractional precision).
    """
    tick_current_index: int
    """
        Current Tick of the Pool.  This is the greatest tick whose sqrt price is less than or equal to the
        current sqrt_price.

        The Token A to Token B exchange rate at a tick can be calculated by the following formula:
        1.0001 ** tick
    """
    tick_spacing: int
    """
        Minimum gap between initializable ticks.  Tick arrays cover 88 * tick_spacing ticks
    """
    liquidity: int = 0
    """
        Amount of active liquidity.  This parameter remains constant during swaps where the price does not cross
        an initialized tick.  When crossing a tick, this value is increased or reduced by the tick's liquidity_net
    """
    fee_rate: int
    """
        Swap fee in hundredths of a basis point.  A fee_rate of 3000 is a 0.3% fee
    """
    protocol_fee_rate: int = 0
    """
        Share of the swap fee kept by the protocol, in basis points of the fee
    """
    fee_growth_global_a: int = 0
    """
        Q64.64 fees of token_a earned per unit of liquidity over the lifetime of the pool.  Wraps on overflow
    """
    fee_growth_global_b: int = 0
    protocol_fee_owed_a: int = 0
    protocol_fee_owed_b: int = 0
    reward_last_updated_timestamp: int = 0
    """
        Timestamp when reward growth was last accumulated
    """
    reward_infos: list[RewardInfo] = Field(default_factory=lambda: [RewardInfo() for _ in range(NUM_REWARDS)])


class Tick(BaseModel):
    """Stores liquidity deltas & growth checkpoints of an initializable price point"""

    initialized: bool = False
    liquidity_net: int = 0
    """
        Signed amount of liquidity added to the active liquidity when the price crosses this tick moving up.
        When crossing the tick moving down, the liquidity_net is subtracted.
    """
    liquidity_gross: int = 0
    """
        Total liquidity of all positions that use this tick as a bound.  When liquidity_gross returns to zero,
        the tick is cleared
    """
    fee_growth_outside_a: int = 0
    """
        Fee growth on the other side of this tick from the current tick.  Flipped every time the tick is crossed
    """
    fee_growth_outside_b: int = 0
    reward_growths_outside: list[int] = Field(default_factory=lambda: [0] * NUM_REWARDS)

    @classmethod
    def uninitialized(cls) -> "Tick":
        """Returns an empty tick"""
        return Tick()

    def apply_update(self, update: "TickUpdate"):
        self.initialized = update.initialized
        self.liquidity_net = update.liquidity_net
        self.liquidity_gross = update.liquidity_gross
        self.fee_growth_outside_a = update.fee_growth_outside_a
        self.fee_growth_outside_b = update.fee_growth_outside_b
        self.reward_growths_outside = list(update.reward_growths_outside)


class PositionRewardInfo(BaseModel):
    """Reward accrual state of a single reward for a position"""

    growth_inside_checkpoint: int = 0
    """Reward growth inside the position range when the position was last updated"""
    amount_owed: int = 0
    """Rewards owed to the position owner that have not been collected"""


class Position(BaseModel):
    """Stores the liquidity, fee & reward state of a liquidity position"""

    position_mint: str
    """Unique identifier of the position"""
    owner: str | None = None
    tick_lower_index: int
    tick_upper_index: int
    liquidity: int = 0
    fee_growth_checkpoint_a: int = 0
    """Fee growth inside the position range for token_a when the position was last updated"""
    fee_growth_checkpoint_b: int = 0
    fee_owed_a: int = 0
    """Fees owed to the position owner that have not been collected"""
    fee_owed_b: int = 0
    reward_infos: list[PositionRewardInfo] = Field(
        default_factory=lambda: [PositionRewardInfo() for _ in range(NUM_REWARDS)]
    )

    def is_empty(self) -> bool:
        """Returns True if the position holds no liquidity, fees or rewards"""
        fees_not_owed = self.fee_owed_a == 0 and self.fee_owed_b == 0
        rewards_not_owed = all(reward.amount_owed == 0 for reward in self.reward_infos)
        return self.liquidity == 0 and fees_not_owed and rewards_not_owed

    def apply_update(self, update: "PositionUpdate"):
        self.liquidity = update.liquidity
        self.fee_growth_checkpoint_a = update.fee_growth_checkpoint_a
        self.fee_owed_a = update.fee_owed_a
        self.fee_growth_checkpoint_b = update.fee_growth_checkpoint_b
        self.fee_owed_b = update.fee_owed_b
        self.reward_infos = [reward.model_copy() for reward in update.reward_infos]


@dataclass(slots=True)
class TickUpdate:
    """Computed next state of a tick, applied once the whole operation succeeds"""

    initialized: bool = False
    liquidity_net: int = 0
    liquidity_gross: int = 0
    fee_growth_outside_a: int = 0
    fee_growth_outside_b: int = 0
    reward_growths_outside: list[int] = field(default_factory=lambda: [0] * NUM_REWARDS)

    @classmethod
    def from_tick(cls, tick: Tick) -> "TickUpdate":
        return cls(
            initialized=tick.initialized,
            liquidity_net=tick.liquidity_net,
            liquidity_gross=tick.liquidity_gross,
            fee_growth_outside_a=tick.fee_growth_outside_a,
            fee_growth_outside_b=tick.fee_growth_outside_b,
            reward_growths_outside=list(tick.reward_growths_outside),
        )


@dataclass(slots=True)
class PositionUpdate:
    """Computed next state of a position"""

    liquidity: int
    fee_growth_checkpoint_a: int
    fee_owed_a: int
    fee_growth_checkpoint_b: int
    fee_owed_b: int
    reward_infos: list[PositionRewardInfo]


@dataclass(slots=True)
class ModifyLiquidityUpdate:
    """All state changes caused by modifying the liquidity of a position"""

    pool_liquidity: int
    tick_lower_update: TickUpdate
    tick_upper_update: TickUpdate
    reward_infos: list[RewardInfo]
    position_update: PositionUpdate


@dataclass(slots=True)
class PostSwapUpdate:
    """Result of a swap, applied to the pool once the slippage threshold has been checked"""

    amount_a: int
    amount_b: int
    next_liquidity: int
    next_tick_index: int
    next_sqrt_price: int
    next_fee_growth_global: int
    next_reward_infos: list[RewardInfo]
    next_protocol_fee: int
