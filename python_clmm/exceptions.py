from enum import Enum


class ErrorCode(Enum):
    """Error kinds raised by the pool engine.  Every :class:`ClmmRevert` carries one of these codes"""

    # Input validation
    InvalidTickIndex = "InvalidTickIndex"
    InvalidTickSpacing = "InvalidTickSpacing"
    InvalidStartTick = "InvalidStartTick"
    ZeroTradableAmount = "ZeroTradableAmount"
    InvalidSqrtPriceLimitDirection = "InvalidSqrtPriceLimitDirection"
    SqrtPriceOutOfBounds = "SqrtPriceOutOfBounds"
    InvalidRewardIndex = "InvalidRewardIndex"
    InvalidTimestamp = "InvalidTimestamp"
    FeeRateMaxExceeded = "FeeRateMaxExceeded"
    ProtocolFeeRateMaxExceeded = "ProtocolFeeRateMaxExceeded"

    # Arithmetic safety
    DivideByZero = "DivideByZero"
    MulDivOverflow = "MulDivOverflow"
    MultiplicationOverflow = "MultiplicationOverflow"
    MultiplicationShiftRightOverflow = "MultiplicationShiftRightOverflow"
    NumberDownCastError = "NumberDownCastError"
    U256Overflow = "U256Overflow"
    AmountRemainingOverflow = "AmountRemainingOverflow"
    AmountCalcOverflow = "AmountCalcOverflow"

    # Liquidity
    LiquidityZero = "LiquidityZero"
    LiquidityTooHigh = "LiquidityTooHigh"
    LiquidityOverflow = "LiquidityOverflow"
    LiquidityUnderflow = "LiquidityUnderflow"
    LiquidityNetError = "LiquidityNetError"

    # Economic thresholds
    TokenMaxExceeded = "TokenMaxExceeded"
    TokenMinSubceeded = "TokenMinSubceeded"

    # Structural traversal & state preconditions
    TickNotFound = "TickNotFound"
    TickArrayIndexOutOfBounds = "TickArrayIndexOutOfBounds"
    TickArraySequenceInvalidIndex = "TickArraySequenceInvalidIndex"
    InvalidTickArraySequence = "InvalidTickArraySequence"
    ClosePositionNotEmpty = "ClosePositionNotEmpty"
    PositionNotFound = "PositionNotFound"


class ClmmRevert(Exception):
    """
    Base exception raised when a pool action would be rejected by the on-chain program.  Every revert carries an
    :class:`ErrorCode` identifying the failure, and no pool, tick or position state is modified when one is raised.

    The following conditions will result in this error being raised:

        * Ticks outside of the -443636 to 443636 range, or not aligned to the pool tick spacing
        * Fixed point values that overflow their u64, u128 or u256 representation
        * Modifying positions with zero liquidity, or closing positions that still hold tokens
        * Executing swaps with invalid sqrt_price limits, zero input, or unmet slippage thresholds
        * Supplying tick arrays that do not cover the range a swap traverses

    """

    def __init__(self, error_code: ErrorCode, message: str | None = None):
        self.error_code = error_code
        super().__init__(f"{error_code.value}: {message}" if message else error_code.value)


class FullMathRevert(ClmmRevert):
    """
    Raised when a fixed point multiplication, division or narrowing conversion overflows its representation,
    or when dividing by zero.
    """


class TickMathRevert(ClmmRevert):
    """
    Raised when a tick value is out of bounds, or a sqrt_price exceeds the minimum or maximum sqrt_price
    """


class SqrtPriceMathRevert(ClmmRevert):
    """
    Raised when a token amount or next sqrt_price cannot be represented, ie an amount that exceeds a u64, or a
    price movement that pushes the sqrt_price out of bounds
    """


class TickArrayRevert(ClmmRevert):
    """
    Raised when a tick cannot be found within a tick array, or when the tick arrays supplied to an operation do not
    form a contiguous sequence in the direction of the trade
    """


class SwapRevert(ClmmRevert):
    """
    Raised when swap inputs are invalid (zero amount, sqrt_price limit on the wrong side of the current price), or
    when the executed amounts do not satisfy the caller's slippage threshold
    """


class LiquidityRevert(ClmmRevert):
    """
    Raised when a liquidity change is zero, exceeds the signed 128 bit range, over/underflows the liquidity held by a
    tick, position or pool, or requires more (or returns fewer) tokens than the caller allowed
    """


class PositionRevert(ClmmRevert):
    """
    Raised for invalid position ranges, unknown positions, invalid reward indexes, and when closing a position that
    still holds liquidity or owed tokens
    """


class PoolRevert(ClmmRevert):
    """
    Raised when a pool is configured with invalid parameters, or when pool time is moved backwards
    """
