import pytest

from python_clmm.clmm import TickArray, get_start_tick_index
from python_clmm.clmm.tick_array import check_is_valid_start_tick
from python_clmm.exceptions import ErrorCode, TickArrayRevert
from python_clmm.math import MAX_TICK_INDEX, MIN_TICK_INDEX
from python_clmm.types import TickUpdate

TICK_SPACING = 64
TICKS_IN_ARRAY = 88 * TICK_SPACING
MIN_ARRAY_START = -444928
MAX_ARRAY_START = 439296


def initialized_update(liquidity_net: int = 1000) -> TickUpdate:
    return TickUpdate(initialized=True, liquidity_net=liquidity_net, liquidity_gross=abs(liquidity_net))


class TestStartTickIndex:
    @pytest.mark.parametrize(
        "tick_index, tick_spacing, expected",
        [
            (0, 64, 0),
            (5631, 64, 0),
            (5632, 64, 5632),
            (-1, 64, -5632),
            (-5632, 64, -5632),
            (-5633, 64, -11264),
            (100, 1, 88),
            (-88, 1, -88),
            (-89, 1, -176),
            (MIN_TICK_INDEX, 64, MIN_ARRAY_START),
            (MAX_TICK_INDEX, 64, MAX_ARRAY_START),
        ],
    )
    def test_floors_to_array_start(self, tick_index, tick_spacing, expected):
        assert get_start_tick_index(tick_index, tick_spacing) == expected

    def test_offset_shifts_by_whole_arrays(self):
        assert get_start_tick_index(0, TICK_SPACING, 1) == TICKS_IN_ARRAY
        assert get_start_tick_index(0, TICK_SPACING, -1) == -TICKS_IN_ARRAY
        assert get_start_tick_index(100, TICK_SPACING, 2) == 2 * TICKS_IN_ARRAY

    def test_valid_start_ticks(self):
        assert check_is_valid_start_tick(0, TICK_SPACING)
        assert check_is_valid_start_tick(-TICKS_IN_ARRAY, TICK_SPACING)
        assert check_is_valid_start_tick(MIN_ARRAY_START, TICK_SPACING)
        assert not check_is_valid_start_tick(MIN_ARRAY_START - TICKS_IN_ARRAY, TICK_SPACING)
        assert not check_is_valid_start_tick(64, TICK_SPACING)
        assert not check_is_valid_start_tick(MAX_ARRAY_START + TICKS_IN_ARRAY, TICK_SPACING)


class TestTickArrayInit:
    def test_new_array_is_empty(self):
        tick_array = TickArray.new(0, TICK_SPACING)

        assert len(tick_array.ticks) == 88
        assert not any(tick.initialized for tick in tick_array.ticks)
        assert tick_array.initialized_ticks(TICK_SPACING) == {}

    def test_rejects_misaligned_start(self):
        with pytest.raises(TickArrayRevert) as exc:
            TickArray.new(100, TICK_SPACING)
        assert exc.value.error_code == ErrorCode.InvalidStartTick

    def test_rejects_zero_tick_spacing(self):
        with pytest.raises(TickArrayRevert) as exc:
            TickArray.new(0, 0)
        assert exc.value.error_code == ErrorCode.InvalidTickSpacing

    def test_min_and_max_arrays(self):
        min_array = TickArray.new(MIN_ARRAY_START, TICK_SPACING)
        max_array = TickArray.new(MAX_ARRAY_START, TICK_SPACING)

        assert min_array.is_min_tick_array()
        assert not min_array.is_max_tick_array(TICK_SPACING)
        assert max_array.is_max_tick_array(TICK_SPACING)
        assert not max_array.is_min_tick_array()


class TestTickAccess:
    def test_get_and_update_tick(self):
        tick_array = TickArray.new(0, TICK_SPACING)
        tick_array.update_tick(640, TICK_SPACING, initialized_update(-500))

        tick = tick_array.get_tick(640, TICK_SPACING)
        assert tick.initialized
        assert tick.liquidity_net == -500
        assert tick.liquidity_gross == 500
        assert tick_array.ticks[10] is tick
        assert list(tick_array.initialized_ticks(TICK_SPACING)) == [640]

    def test_tick_offset_is_floored(self):
        tick_array = TickArray.new(-TICKS_IN_ARRAY, TICK_SPACING)
        assert tick_array.tick_offset(-TICKS_IN_ARRAY, TICK_SPACING) == 0
        assert tick_array.tick_offset(-1, TICK_SPACING) == 87
        assert tick_array.tick_offset(-TICKS_IN_ARRAY - 1, TICK_SPACING) == -1

    @pytest.mark.parametrize("tick_index", [65, TICKS_IN_ARRAY, -64])
    def test_unusable_or_out_of_range_ticks(self, tick_index):
        tick_array = TickArray.new(0, TICK_SPACING)
        with pytest.raises(TickArrayRevert) as exc:
            tick_array.get_tick(tick_index, TICK_SPACING)
        assert exc.value.error_code == ErrorCode.TickNotFound

    def test_min_array_ticks_below_bound_are_not_usable(self):
        tick_array = TickArray.new(MIN_ARRAY_START, TICK_SPACING)
        with pytest.raises(TickArrayRevert):
            tick_array.get_tick(MIN_ARRAY_START, TICK_SPACING)


class TestNextInitializedTick:
    @pytest.fixture(name="tick_array")
    def fixture_tick_array(self):
        tick_array = TickArray.new(0, TICK_SPACING)
        tick_array.update_tick(640, TICK_SPACING, initialized_update())
        return tick_array

    def test_search_down_includes_start_tick(self, tick_array):
        assert tick_array.get_next_init_tick_index(640, TICK_SPACING, True) == 640
        assert tick_array.get_next_init_tick_index(700, TICK_SPACING, True) == 640
        assert tick_array.get_next_init_tick_index(639, TICK_SPACING, True) is None

    def test_search_up_excludes_start_tick(self, tick_array):
        assert tick_array.get_next_init_tick_index(640, TICK_SPACING, False) is None
        assert tick_array.get_next_init_tick_index(576, TICK_SPACING, False) == 640
        assert tick_array.get_next_init_tick_index(600, TICK_SPACING, False) == 640

    def test_search_up_can_start_one_spacing_before_array(self, tick_array):
        assert tick_array.get_next_init_tick_index(-64, TICK_SPACING, False) == 640

        with pytest.raises(TickArrayRevert) as exc:
            tick_array.get_next_init_tick_index(-65, TICK_SPACING, False)
        assert exc.value.error_code == ErrorCode.InvalidTickArraySequence

    def test_search_outside_array(self, tick_array):
        with pytest.raises(TickArrayRevert) as exc:
            tick_array.get_next_init_tick_index(TICKS_IN_ARRAY, TICK_SPACING, True)
        assert exc.value.error_code == ErrorCode.InvalidTickArraySequence

        with pytest.raises(TickArrayRevert):
            tick_array.get_next_init_tick_index(-1, TICK_SPACING, True)
