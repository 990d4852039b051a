from typing import Optional, Tuple

import pytest

from python_clmm.clmm import ClmmPool

from .utils import WIDE_TICK_LOWER, WIDE_TICK_UPPER, deposit


@pytest.fixture(name="initialize_empty_pool")
def fixture_initialize_empty_pool():
    def _initialize_empty_pool(
        tick_spacing: Optional[int] = 64,
        fee_rate: Optional[int] = 3_000,
        **kwargs,
    ) -> ClmmPool:
        kwargs.setdefault("initial_timestamp", 0)
        return ClmmPool(tick_spacing=tick_spacing, fee_rate=fee_rate, **kwargs)

    return _initialize_empty_pool


@pytest.fixture(name="initialize_liquid_pool")
def fixture_initialize_liquid_pool(initialize_empty_pool):
    def _initialize_liquid_pool(liquidity: int = 10**9, **kwargs) -> Tuple[ClmmPool, str]:
        pool = initialize_empty_pool(**kwargs)
        position_mint = deposit(pool, WIDE_TICK_LOWER, WIDE_TICK_UPPER, liquidity)
        return pool, position_mint

    return _initialize_liquid_pool
