from .main import ClmmPool
from .tick_array import TickArray, get_start_tick_index
from .tick_sequence import SwapTickSequence

__all__ = ["ClmmPool", "TickArray", "SwapTickSequence", "get_start_tick_index"]
