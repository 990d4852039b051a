from python_clmm.exceptions import ErrorCode, TickArrayRevert
from python_clmm.math.shared import MAX_TICK_INDEX, MIN_TICK_INDEX, TICK_ARRAY_SIZE
from python_clmm.types import Tick, TickUpdate

from .tick_array import TickArray


class SwapTickSequence:
    """
    Ordered window of one to three adjacent tick arrays used by a single swap.  Array 0 contains the current tick,
    and subsequent arrays continue in the direction of the trade.
    """

    def __init__(self, *tick_arrays: TickArray):
        if not 1 <= len(tick_arrays) <= 3:
            raise TickArrayRevert(
                ErrorCode.InvalidTickArraySequence, f"Expected 1 to 3 tick arrays, got {len(tick_arrays)}"
            )
        self.arrays: list[TickArray] = list(tick_arrays)

    def __len__(self):
        return len(self.arrays)

    def _get_array(self, array_index: int) -> TickArray:
        if not 0 <= array_index < len(self.arrays):
            raise TickArrayRevert(ErrorCode.TickArrayIndexOutOfBounds, f"No tick array at index {array_index}")
        return self.arrays[array_index]

    def get_tick(self, array_index: int, tick_index: int, tick_spacing: int) -> Tick:
        return self._get_array(array_index).get_tick(tick_index, tick_spacing)

    def update_tick(self, array_index: int, tick_index: int, tick_spacing: int, update: TickUpdate):
        self._get_array(array_index).update_tick(tick_index, tick_spacing, update)

    def get_tick_offset(self, array_index: int, tick_index: int, tick_spacing: int) -> int:
        return self._get_array(array_index).tick_offset(tick_index, tick_spacing)

    def get_next_initialized_tick_index(
        self,
        tick_index: int,
        tick_spacing: int,
        a_to_b: bool,
        start_array_index: int,
    ) -> tuple[int, int]:
        """
        Walks the tick arrays in the direction of the trade until an initialized tick is found.

        If the arrays run out without finding an initialized tick, the boundary of the last array is returned as a
        stopping point for the swap step, or MIN_TICK_INDEX / MAX_TICK_INDEX when the last array covers the
        global tick bound.

        :param tick_index: tick to start searching from
        :param tick_spacing:
        :param a_to_b: if True, search towards lower ticks (inclusive of tick_index), else towards higher ticks
        :param start_array_index: index of the array containing tick_index
        :return: (array_index, tick_index) of the next initialized tick or stopping point
        """
        ticks_in_array = TICK_ARRAY_SIZE * tick_spacing
        search_index = tick_index
        array_index = start_array_index

        while True:
            if not 0 <= array_index < len(self.arrays):
                raise TickArrayRevert(
                    ErrorCode.TickArraySequenceInvalidIndex,
                    f"Swap traversed past the last supplied tick array (index {array_index})",
                )
            next_array = self.arrays[array_index]

            next_index = next_array.get_next_init_tick_index(search_index, tick_spacing, a_to_b)
            if next_index is not None:
                return array_index, next_index

            if a_to_b and next_array.is_min_tick_array():
                return array_index, MIN_TICK_INDEX
            if not a_to_b and next_array.is_max_tick_array(tick_spacing):
                return array_index, MAX_TICK_INDEX

            if array_index + 1 == len(self.arrays):
                if a_to_b:
                    return array_index, next_array.start_tick_index
                return array_index, next_array.start_tick_index + ticks_in_array - 1

            # Move the search to the edge of the current array so the next array is searched from its near end
            if a_to_b:
                search_index = next_array.start_tick_index - 1
            else:
                search_index = next_array.start_tick_index + ticks_in_array - 1

            array_index += 1
