from .clmm import (
    NULL_TOKEN,
    ModifyLiquidityUpdate,
    PoolState,
    Position,
    PositionRewardInfo,
    PositionUpdate,
    PostSwapUpdate,
    RewardInfo,
    Tick,
    TickUpdate,
    Token,
)
