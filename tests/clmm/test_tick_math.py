import math

import pytest

from python_clmm.exceptions import ErrorCode, TickMathRevert
from python_clmm.math import (
    MAX_SQRT_PRICE_X64,
    MAX_TICK_INDEX,
    MIN_SQRT_PRICE_X64,
    MIN_TICK_INDEX,
    TickMathModule,
)

SAMPLE_TICKS = [MIN_TICK_INDEX, -300_000, -50_000, -64, -1, 0, 1, 64, 50_000, 300_000, MAX_TICK_INDEX]


class TestSqrtPriceFromTickIndex:
    def test_tick_zero_is_one(self):
        assert TickMathModule.sqrt_price_from_tick_index(0) == 2**64

    def test_bounds_match_constants(self):
        assert TickMathModule.sqrt_price_from_tick_index(MIN_TICK_INDEX) == MIN_SQRT_PRICE_X64
        assert TickMathModule.sqrt_price_from_tick_index(MAX_TICK_INDEX) == MAX_SQRT_PRICE_X64

    def test_bounds_match_known_values(self):
        assert MIN_SQRT_PRICE_X64 == 4295048016
        assert MAX_SQRT_PRICE_X64 == 79226673515401279992447579055

    @pytest.mark.parametrize(
        "tick, sqrt_price",
        [
            (-443635, 4295262763),
            (-300_000, 5647135299341),
            (-50_000, 1514390236237315695),
            (-64, 18387811781193591352),
            (-1, 18445821805675392311),
            (1, 18447666387855959850),
            (64, 18505865242158250041),
            (50_000, 224699260982037790824),
            (300_000, 60257519765924248467716150),
            (443635, 79222712478800779441888593664),
        ],
    )
    def test_exact_sqrt_prices(self, tick, sqrt_price):
        assert TickMathModule.sqrt_price_from_tick_index(tick) == sqrt_price

    def test_raises_outside_tick_bounds(self):
        with pytest.raises(TickMathRevert) as exc:
            TickMathModule.sqrt_price_from_tick_index(MIN_TICK_INDEX - 1)
        assert exc.value.error_code == ErrorCode.InvalidTickIndex

        with pytest.raises(TickMathRevert) as exc:
            TickMathModule.sqrt_price_from_tick_index(MAX_TICK_INDEX + 1)
        assert exc.value.error_code == ErrorCode.InvalidTickIndex

    @pytest.mark.parametrize("tick", [-100_000, -1_000, -1, 1, 1_000, 100_000])
    def test_matches_float_approximation(self, tick):
        sqrt_price = TickMathModule.sqrt_price_from_tick_index(tick)
        assert math.isclose(sqrt_price / 2**64, 1.0001 ** (tick / 2), rel_tol=1e-9)

    def test_strictly_increasing(self):
        for tick in SAMPLE_TICKS[:-1]:
            assert TickMathModule.sqrt_price_from_tick_index(tick) < TickMathModule.sqrt_price_from_tick_index(
                tick + 1
            )


class TestTickIndexFromSqrtPrice:
    @pytest.mark.parametrize("tick", SAMPLE_TICKS)
    def test_round_trips_exact_tick_prices(self, tick):
        sqrt_price = TickMathModule.sqrt_price_from_tick_index(tick)
        assert TickMathModule.tick_index_from_sqrt_price(sqrt_price) == tick

    @pytest.mark.parametrize("tick", [-300_000, -64, 0, 1, 64, 300_000, MAX_TICK_INDEX])
    def test_price_below_tick_rounds_down(self, tick):
        sqrt_price = TickMathModule.sqrt_price_from_tick_index(tick)
        assert TickMathModule.tick_index_from_sqrt_price(sqrt_price - 1) == tick - 1

    @pytest.mark.parametrize("tick", [-300_000, -1, 0, 64, 300_000])
    def test_price_above_tick_stays_in_tick(self, tick):
        sqrt_price = TickMathModule.sqrt_price_from_tick_index(tick)
        assert TickMathModule.tick_index_from_sqrt_price(sqrt_price + 1) == tick

    def test_raises_outside_price_bounds(self):
        with pytest.raises(TickMathRevert) as exc:
            TickMathModule.tick_index_from_sqrt_price(MIN_SQRT_PRICE_X64 - 1)
        assert exc.value.error_code == ErrorCode.SqrtPriceOutOfBounds

        with pytest.raises(TickMathRevert) as exc:
            TickMathModule.tick_index_from_sqrt_price(MAX_SQRT_PRICE_X64 + 1)
        assert exc.value.error_code == ErrorCode.SqrtPriceOutOfBounds
