from dataclasses import dataclass

MAX_TICK_INDEX = 443636
MIN_TICK_INDEX = -MAX_TICK_INDEX

TICK_ARRAY_SIZE = 88
NUM_REWARDS = 3

Q64_RESOLUTION = 64
Q64 = 2**64
Q64_MASK = 0xFFFF_FFFF_FFFF_FFFF

U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1
U256_MAX = 2**256 - 1
I128_MAX = 2**127 - 1
I128_MIN = -(2**127)

# Fee rate is stored in hundredths of a basis point
FEE_RATE_MUL_VALUE = 1_000_000
MAX_FEE_RATE = 10_000

# Protocol fee rate is stored in basis points of the swap fee
PROTOCOL_FEE_RATE_MUL_VALUE = 10_000
MAX_PROTOCOL_FEE_RATE = 2_500

FEE_RATES_TO_TICK_SPACINGS = {
    100: 1,
    500: 8,
    3000: 64,
    10000: 128,
}

TICK_SPACINGS_TO_FEE_RATES = {v: k for k, v in FEE_RATES_TO_TICK_SPACINGS.items()}


@dataclass(slots=True)
class SwapStepComputation:
    """Model to store the results of a single swap step"""

    amount_in: int
    amount_out: int
    next_price: int
    fee_amount: int


def check_is_valid_tick(tick_index: int) -> bool:
    """Returns True if tick_index is within MIN_TICK_INDEX and MAX_TICK_INDEX"""
    return MIN_TICK_INDEX <= tick_index <= MAX_TICK_INDEX


def check_is_usable_tick(tick_index: int, tick_spacing: int) -> bool:
    """
    Checks whether a tick can be initialized in a pool with the given tick spacing.  The tick must be within the
    tick bounds, and be an exact multiple of the tick spacing.

    :param tick_index:
    :param tick_spacing:
    :return:
    """
    if not check_is_valid_tick(tick_index):
        return False
    return tick_index % tick_spacing == 0