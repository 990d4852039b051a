import logging

from python_clmm.exceptions import ErrorCode, PoolRevert

from .full_math import U256, FullMathModule, mul_u256
from .shared import (
    FEE_RATE_MUL_VALUE,
    FEE_RATES_TO_TICK_SPACINGS,
    MAX_FEE_RATE,
    MAX_PROTOCOL_FEE_RATE,
    MAX_TICK_INDEX,
    MIN_TICK_INDEX,
    NUM_REWARDS,
    PROTOCOL_FEE_RATE_MUL_VALUE,
    Q64,
    TICK_ARRAY_SIZE,
    TICK_SPACINGS_TO_FEE_RATES,
    U64_MAX,
    U128_MAX,
    SwapStepComputation,
    check_is_usable_tick,
    check_is_valid_tick,
)
from .sqrt_price_math import SqrtPriceMathModule
from .swap_math import compute_swap_step
from .tick_math import MAX_SQRT_PRICE_X64, MIN_SQRT_PRICE_X64, TickMathModule

package_logger = logging.getLogger("python_clmm")
logger = package_logger.getChild("math")


class ClmmMath:
    """
    Class grouping the fixed point, tick & price math used by concentrated liquidity pools
    """

    MAX_SQRT_PRICE_X64 = MAX_SQRT_PRICE_X64
    MIN_SQRT_PRICE_X64 = MIN_SQRT_PRICE_X64

    MAX_TICK_INDEX = MAX_TICK_INDEX
    MIN_TICK_INDEX = MIN_TICK_INDEX

    TICK_ARRAY_SIZE = TICK_ARRAY_SIZE
    NUM_REWARDS = NUM_REWARDS
    Q64 = Q64

    # Math Modules

    full_math = FullMathModule
    sqrt_price_math = SqrtPriceMathModule
    tick_math = TickMathModule

    # Swap Math Methods

    compute_swap_step = staticmethod(compute_swap_step)

    # Safety Methods
    check_is_valid_tick = staticmethod(check_is_valid_tick)
    check_is_usable_tick = staticmethod(check_is_usable_tick)

    @classmethod
    def get_fee_and_spacing(cls, init_kwargs: dict) -> tuple[int, int]:
        """
        Returns the fee rate and tick spacing for a pool.  If neither is provided, the default values
        of 3000 and 64 are returned.  Fee rates are denominated in hundredths of a basis point.

        :param init_kwargs:
        :return:
        """
        provided_fee = init_kwargs.get("fee_rate")
        provided_spacing = init_kwargs.get("tick_spacing")

        if provided_fee is None and provided_spacing is None:
            return 3000, 64

        if provided_fee is None and TICK_SPACINGS_TO_FEE_RATES.get(provided_spacing) is not None:
            return TICK_SPACINGS_TO_FEE_RATES[provided_spacing], provided_spacing

        if provided_spacing is None and FEE_RATES_TO_TICK_SPACINGS.get(provided_fee) is not None:
            return provided_fee, FEE_RATES_TO_TICK_SPACINGS[provided_fee]

        if provided_fee is not None and provided_spacing is not None:
            if FEE_RATES_TO_TICK_SPACINGS.get(provided_fee) != provided_spacing:
                logger.warning(
                    f"Tick spacing & Fee Rate were both specified, but do not match typical values"
                    f"\tFee Rate: {provided_fee}, Tick Spacing: {provided_spacing}"
                )
            return provided_fee, provided_spacing

        raise PoolRevert(
            ErrorCode.InvalidTickSpacing,
            "Nonstandard tick spacing or fee rate provided. Please provide a standard value, "
            "or both tick_spacing and fee_rate when using nonstandard values",
        )

    @classmethod
    def check_pool_config(cls, fee_rate: int, protocol_fee_rate: int, tick_spacing: int):
        """
        Checks the fee rate, protocol fee rate and tick spacing of a pool.  Raises PoolRevert on invalid values

        :param fee_rate:
        :param protocol_fee_rate:
        :param tick_spacing:
        """
        if tick_spacing <= 0:
            raise PoolRevert(ErrorCode.InvalidTickSpacing, f"Tick spacing must be positive: {tick_spacing}")
        if not 0 <= fee_rate <= MAX_FEE_RATE:
            raise PoolRevert(ErrorCode.FeeRateMaxExceeded, f"Fee rate {fee_rate} exceeds {MAX_FEE_RATE}")
        if not 0 <= protocol_fee_rate <= MAX_PROTOCOL_FEE_RATE:
            raise PoolRevert(
                ErrorCode.ProtocolFeeRateMaxExceeded,
                f"Protocol fee rate {protocol_fee_rate} exceeds {MAX_PROTOCOL_FEE_RATE}",
            )


__all__ = [
    "ClmmMath",
    "U256",
    "mul_u256",
    "FullMathModule",
    "SqrtPriceMathModule",
    "TickMathModule",
    "SwapStepComputation",
    "compute_swap_step",
    "FEE_RATE_MUL_VALUE",
    "PROTOCOL_FEE_RATE_MUL_VALUE",
    "MAX_FEE_RATE",
    "MAX_PROTOCOL_FEE_RATE",
    "MAX_SQRT_PRICE_X64",
    "MIN_SQRT_PRICE_X64",
    "MAX_TICK_INDEX",
    "MIN_TICK_INDEX",
    "NUM_REWARDS",
    "TICK_ARRAY_SIZE",
    "U64_MAX",
    "U128_MAX",
]
