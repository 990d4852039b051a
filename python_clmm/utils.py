from typing import Literal
from uuid import uuid4


def random_position_mint() -> str:
    """
    Generate a random 32 byte hex identifier used as the mint of a position
    :return: hex string
    """
    return uuid4().hex + uuid4().hex


def uint_over_under_flow(value: int, precision: Literal[64, 128, 256]) -> int:
    """
    Handle uint over/underflow.  If value exceeds the max size of the uint, the value will overflow
    and start back at 0.  If value is less than 0, the value will underflow and start back at the max
    :param value: Number to check
    :param precision: bits of precision
    :return: within range uint
    """
    return value % (2**precision)
