from python_clmm.clmm import ClmmPool
from python_clmm.math import U64_MAX

# Aligned to tick spacing 64, two tick arrays away from tick 0
WIDE_TICK_LOWER = -11264
WIDE_TICK_UPPER = 11264


def deposit(pool: ClmmPool, tick_lower: int, tick_upper: int, liquidity: int) -> str:
    """Opens a position & deposits liquidity without slippage limits, returning the position mint"""
    position = pool.open_position(tick_lower, tick_upper)
    pool.increase_liquidity(position.position_mint, liquidity, U64_MAX, U64_MAX)
    return position.position_mint


def pool_snapshot(pool: ClmmPool) -> dict:
    return {
        "state": pool.state.model_dump(),
        "tick_arrays": {start: array.model_dump() for start, array in pool.tick_arrays.items()},
        "positions": {mint: position.model_dump() for mint, position in pool.positions.items()},
        "vaults": (pool.vault_a, pool.vault_b),
    }
