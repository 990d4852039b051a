from pydantic import BaseModel, Field

from python_clmm.exceptions import ErrorCode, TickArrayRevert
from python_clmm.math.shared import (
    MAX_TICK_INDEX,
    MIN_TICK_INDEX,
    TICK_ARRAY_SIZE,
    check_is_usable_tick,
    check_is_valid_tick,
)
from python_clmm.types import Tick, TickUpdate


def get_start_tick_index(tick_index: int, tick_spacing: int, offset: int = 0) -> int:
    """
    Returns the start index of the tick array containing tick_index, shifted by `offset` arrays.

    :param tick_index:
    :param tick_spacing:
    :param offset: number of arrays to shift the result by.  Negative values move towards lower ticks
    :return: start tick index
    """
    ticks_in_array = TICK_ARRAY_SIZE * tick_spacing
    return (tick_index // ticks_in_array + offset) * ticks_in_array


def check_is_valid_start_tick(start_tick_index: int, tick_spacing: int) -> bool:
    """
    Checks that a start tick index is aligned to the array size.  The array covering MIN_TICK_INDEX is the only
    array allowed to start below the tick bounds
    """
    ticks_in_array = TICK_ARRAY_SIZE * tick_spacing

    if not check_is_valid_tick(start_tick_index):
        if start_tick_index > MIN_TICK_INDEX:
            return False
        return start_tick_index == get_start_tick_index(MIN_TICK_INDEX, tick_spacing)

    return start_tick_index % ticks_in_array == 0


class TickArray(BaseModel):
    """
    Fixed size page of 88 ticks covering the range [start_tick_index, start_tick_index + 88 * tick_spacing).

    Tick arrays are stored in the pool keyed by their start index, and a swap walks through up to three adjacent
    arrays in the direction of the trade.
    """

    start_tick_index: int
    ticks: list[Tick] = Field(default_factory=lambda: [Tick() for _ in range(TICK_ARRAY_SIZE)])

    @classmethod
    def new(cls, start_tick_index: int, tick_spacing: int) -> "TickArray":
        """
        Creates an empty tick array.  Raises TickArrayRevert if the start index is not aligned to the array size

        :param start_tick_index:
        :param tick_spacing:
        """
        if tick_spacing <= 0:
            raise TickArrayRevert(ErrorCode.InvalidTickSpacing)
        if not check_is_valid_start_tick(start_tick_index, tick_spacing):
            raise TickArrayRevert(
                ErrorCode.InvalidStartTick,
                f"{start_tick_index} is not a valid start index for tick spacing {tick_spacing}",
            )
        return cls(start_tick_index=start_tick_index)

    def is_min_tick_array(self) -> bool:
        return self.start_tick_index <= MIN_TICK_INDEX

    def is_max_tick_array(self, tick_spacing: int) -> bool:
        return self.start_tick_index + TICK_ARRAY_SIZE * tick_spacing > MAX_TICK_INDEX

    def tick_offset(self, tick_index: int, tick_spacing: int) -> int:
        """Returns the floored offset of tick_index from the start of the array, in units of tick_spacing"""
        if tick_spacing == 0:
            raise TickArrayRevert(ErrorCode.InvalidTickSpacing)
        return (tick_index - self.start_tick_index) // tick_spacing

    def check_in_array_bounds(self, tick_index: int, tick_spacing: int) -> bool:
        lower = self.start_tick_index
        upper = self.start_tick_index + TICK_ARRAY_SIZE * tick_spacing
        return lower <= tick_index < upper

    def in_search_range(self, tick_index: int, tick_spacing: int, shifted: bool) -> bool:
        """
        Checks whether a search can start from tick_index in this array.  When searching towards higher ticks,
        the search starts one tick after tick_index, so the range is shifted down by one tick spacing
        """
        lower = self.start_tick_index
        upper = self.start_tick_index + TICK_ARRAY_SIZE * tick_spacing
        if shifted:
            lower -= tick_spacing
            upper -= tick_spacing
        return lower <= tick_index < upper

    def _checked_offset(self, tick_index: int, tick_spacing: int) -> int:
        if not self.check_in_array_bounds(tick_index, tick_spacing) or not check_is_usable_tick(
            tick_index, tick_spacing
        ):
            raise TickArrayRevert(
                ErrorCode.TickNotFound,
                f"Tick {tick_index} is not a usable tick in array starting at {self.start_tick_index}",
            )
        return self.tick_offset(tick_index, tick_spacing)

    def get_tick(self, tick_index: int, tick_spacing: int) -> Tick:
        return self.ticks[self._checked_offset(tick_index, tick_spacing)]

    def update_tick(self, tick_index: int, tick_spacing: int, update: TickUpdate):
        self.ticks[self._checked_offset(tick_index, tick_spacing)].apply_update(update)

    def get_next_init_tick_index(self, tick_index: int, tick_spacing: int, a_to_b: bool) -> int | None:
        """
        Searches the array for the next initialized tick.

        :param tick_index: tick to start the search from.  For a_to_b searches, the search moves towards lower
            ticks and the starting tick is inclusive.  For b_to_a searches, the search moves towards higher ticks
            and the starting tick is exclusive.
        :param tick_spacing:
        :param a_to_b: search direction
        :return: index of the next initialized tick, or None if the array has no initialized ticks in the
            direction of the search
        """
        if not self.in_search_range(tick_index, tick_spacing, not a_to_b):
            raise TickArrayRevert(
                ErrorCode.InvalidTickArraySequence,
                f"Tick {tick_index} is outside of the search range of array {self.start_tick_index}",
            )

        curr_offset = self.tick_offset(tick_index, tick_spacing)
        if not a_to_b:
            curr_offset += 1

        while 0 <= curr_offset < TICK_ARRAY_SIZE:
            if self.ticks[curr_offset].initialized:
                return self.start_tick_index + curr_offset * tick_spacing
            curr_offset = curr_offset - 1 if a_to_b else curr_offset + 1

        return None

    def initialized_ticks(self, tick_spacing: int) -> dict[int, Tick]:
        """Returns all initialized ticks in the array, keyed by tick index"""
        return {
            self.start_tick_index + offset * tick_spacing: tick
            for offset, tick in enumerate(self.ticks)
            if tick.initialized
        }
