import math

from python_clmm.exceptions import ErrorCode, TickMathRevert

from .shared import MAX_TICK_INDEX, MIN_TICK_INDEX

# Q32.96 values of sqrt(1.0001 ** (2 ** i)), applied for bit i of a positive tick
POSITIVE_TICK_FACTORS_X96 = (
    79232123823359799118286999567,
    79236085330515764027303304731,
    79244008939048815603706035061,
    79259858533276714757314932305,
    79291567232598584799939703904,
    79355022692464371645785046466,
    79482085999252804386437311141,
    79736823300114093921829183326,
    80248749790819932309965073892,
    81282483887344747381513967011,
    83390072131320151908154831281,
    87770609709833776024991924138,
    97234110755111693312479820773,
    119332217159966728226237229890,
    179736315981702064433883588727,
    407748233172238350107850275304,
    2098478828474011932436660412517,
    55581415166113811149459800483533,
    38992368544603139932233054999993551,
)

# Q64.64 values of 1 / sqrt(1.0001 ** (2 ** i)), applied for bit i of the absolute value of a negative tick
NEGATIVE_TICK_FACTORS_X64 = (
    18445821805675392311,
    18444899583751176498,
    18443055278223354162,
    18439367220385604838,
    18431993317065449817,
    18417254355718160513,
    18387811781193591352,
    18329067761203520168,
    18212142134806087854,
    17980523815641551639,
    17526086738831147013,
    16651378430235024244,
    15030750278693429944,
    12247334978882834399,
    8131365268884726200,
    3584323654723342297,
    696457651847595233,
    26294789957452057,
    37481735321082,
)

LOG_SQRT_10001 = math.log(1.0001) / 2
LOG_Q64 = 64 * math.log(2)


def _sqrt_price_positive_tick(tick_index: int) -> int:
    ratio = POSITIVE_TICK_FACTORS_X96[0] if tick_index & 1 else 1 << 96
    for bit in range(1, len(POSITIVE_TICK_FACTORS_X96)):
        if tick_index & (1 << bit):
            ratio = (ratio * POSITIVE_TICK_FACTORS_X96[bit]) >> 96

    # Q32.96 -> Q64.64
    return ratio >> 32


def _sqrt_price_negative_tick(tick_index: int) -> int:
    abs_tick = abs(tick_index)

    ratio = NEGATIVE_TICK_FACTORS_X64[0] if abs_tick & 1 else 1 << 64
    for bit in range(1, len(NEGATIVE_TICK_FACTORS_X64)):
        if abs_tick & (1 << bit):
            ratio = (ratio * NEGATIVE_TICK_FACTORS_X64[bit]) >> 64

    return ratio


def _sqrt_price_from_tick_index(tick_index: int) -> int:
    if tick_index >= 0:
        return _sqrt_price_positive_tick(tick_index)
    return _sqrt_price_negative_tick(tick_index)


MIN_SQRT_PRICE_X64 = _sqrt_price_from_tick_index(MIN_TICK_INDEX)
MAX_SQRT_PRICE_X64 = _sqrt_price_from_tick_index(MAX_TICK_INDEX)


class TickMathModule:
    """
    Module for converting between tick indexes & Q64.64 sqrt prices.

    The sqrt price at a tick is :math:`\\sqrt{1.0001^{tick}} * 2^{64}`.  Prices are computed exactly by multiplying
    together the precomputed factor of each set bit of the absolute tick, so the mapping is strictly increasing
    and identical across platforms.
    """

    MIN_SQRT_PRICE_X64 = MIN_SQRT_PRICE_X64
    MAX_SQRT_PRICE_X64 = MAX_SQRT_PRICE_X64

    @classmethod
    def sqrt_price_from_tick_index(cls, tick_index: int) -> int:
        """
        Returns the Q64.64 sqrt price at a tick index

        :param tick_index: tick between MIN_TICK_INDEX and MAX_TICK_INDEX
        :return: Q64.64 sqrt price
        """
        if tick_index < MIN_TICK_INDEX or tick_index > MAX_TICK_INDEX:
            raise TickMathRevert(ErrorCode.InvalidTickIndex, f"Tick {tick_index} out of bounds")

        return _sqrt_price_from_tick_index(tick_index)

    @classmethod
    def tick_index_from_sqrt_price(cls, sqrt_price: int) -> int:
        """
        Returns the greatest tick whose sqrt price is less than or equal to sqrt_price.

        :param sqrt_price: Q64.64 sqrt price between MIN_SQRT_PRICE_X64 and MAX_SQRT_PRICE_X64
        :return: tick index
        """
        if sqrt_price < MIN_SQRT_PRICE_X64 or sqrt_price > MAX_SQRT_PRICE_X64:
            raise TickMathRevert(ErrorCode.SqrtPriceOutOfBounds, f"Sqrt Price {sqrt_price} out of bounds")

        estimate = math.floor((math.log(sqrt_price) - LOG_Q64) / LOG_SQRT_10001)
        tick_index = min(max(estimate, MIN_TICK_INDEX), MAX_TICK_INDEX)

        # Float estimate can be off by a tick in either direction
        while tick_index > MIN_TICK_INDEX and _sqrt_price_from_tick_index(tick_index) > sqrt_price:
            tick_index -= 1
        while tick_index < MAX_TICK_INDEX and _sqrt_price_from_tick_index(tick_index + 1) <= sqrt_price:
            tick_index += 1

        return tick_index
