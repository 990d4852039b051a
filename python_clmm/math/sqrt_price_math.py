from python_clmm.exceptions import ErrorCode, FullMathRevert, SqrtPriceMathRevert

from .full_math import U256, FullMathModule, mul_u256
from .shared import Q64_MASK, Q64_RESOLUTION, U64_MAX, U128_MAX
from .tick_math import MAX_SQRT_PRICE_X64, MIN_SQRT_PRICE_X64


def increasing_price_order(sqrt_price_0: int, sqrt_price_1: int) -> tuple[int, int]:
    """Returns the two sqrt prices as (lower, upper)"""
    if sqrt_price_0 > sqrt_price_1:
        return sqrt_price_1, sqrt_price_0
    return sqrt_price_0, sqrt_price_1


class SqrtPriceMathModule:
    """
    Math module for converting between liquidity, Q64.64 sqrt prices & token amounts.

    Every method takes an explicit rounding direction.  Amounts the pool receives are rounded up, and amounts the
    pool pays out are rounded down, so the pool never gives a trader more than the curve allows.
    """

    full_math = FullMathModule

    @classmethod
    def _amount_delta_a_u128(cls, sqrt_price_0: int, sqrt_price_1: int, liquidity: int, round_up: bool) -> int:
        sqrt_price_lower, sqrt_price_upper = increasing_price_order(sqrt_price_0, sqrt_price_1)

        numerator = mul_u256(liquidity, sqrt_price_upper - sqrt_price_lower).checked_shift_word_left()
        if numerator is None:
            raise SqrtPriceMathRevert(ErrorCode.MultiplicationOverflow, "liquidity * price delta overflows u256")

        denominator = mul_u256(sqrt_price_upper, sqrt_price_lower)
        try:
            return cls.full_math.div_round_up_u256(numerator, denominator, round_up)
        except FullMathRevert as exc:
            raise SqrtPriceMathRevert(exc.error_code, "Token A delta cannot be represented") from exc

    @classmethod
    def get_amount_delta_a(cls, sqrt_price_0: int, sqrt_price_1: int, liquidity: int, round_up: bool) -> int:
        """
        Returns the amount of token A backing liquidity between two sqrt prices:
        :math:`\\Delta A = \\frac{L * (\\sqrt{P_{upper}} - \\sqrt{P_{lower}})}{\\sqrt{P_{upper}} * \\sqrt{P_{lower}}}`

        :param sqrt_price_0: Q64.64 sqrt price.  Prices can be passed in either order
        :param sqrt_price_1: Q64.64 sqrt price
        :param liquidity: u128 liquidity
        :param round_up: rounding direction of the result
        :return: u64 token A amount
        """
        result = cls._amount_delta_a_u128(sqrt_price_0, sqrt_price_1, liquidity, round_up)
        if result > U64_MAX:
            raise SqrtPriceMathRevert(ErrorCode.TokenMaxExceeded, f"Token A delta {result} exceeds u64")
        return result

    @classmethod
    def get_amount_delta_b(cls, sqrt_price_0: int, sqrt_price_1: int, liquidity: int, round_up: bool) -> int:
        """
        Returns the amount of token B backing liquidity between two sqrt prices:
        :math:`\\Delta B = L * (\\sqrt{P_{upper}} - \\sqrt{P_{lower}})`

        :param sqrt_price_0: Q64.64 sqrt price.  Prices can be passed in either order
        :param sqrt_price_1: Q64.64 sqrt price
        :param liquidity: u128 liquidity
        :param round_up: rounding direction of the result
        :return: u64 token B amount
        """
        sqrt_price_lower, sqrt_price_upper = increasing_price_order(sqrt_price_0, sqrt_price_1)
        try:
            return cls.full_math.mul_shift_right(liquidity, sqrt_price_upper - sqrt_price_lower, round_up)
        except FullMathRevert as exc:
            raise SqrtPriceMathRevert(exc.error_code, "Token B delta cannot be represented") from exc

    @classmethod
    def try_get_amount_delta_a(
        cls, sqrt_price_0: int, sqrt_price_1: int, liquidity: int, round_up: bool
    ) -> int | None:
        """Same as get_amount_delta_a, but returns None when the amount does not fit in a u64"""
        try:
            result = cls._amount_delta_a_u128(sqrt_price_0, sqrt_price_1, liquidity, round_up)
        except SqrtPriceMathRevert as exc:
            if exc.error_code == ErrorCode.NumberDownCastError:
                return None
            raise
        return result if result <= U64_MAX else None

    @classmethod
    def try_get_amount_delta_b(
        cls, sqrt_price_0: int, sqrt_price_1: int, liquidity: int, round_up: bool
    ) -> int | None:
        """Same as get_amount_delta_b, but returns None when the amount does not fit in a u64"""
        sqrt_price_lower, sqrt_price_upper = increasing_price_order(sqrt_price_0, sqrt_price_1)
        product = liquidity * (sqrt_price_upper - sqrt_price_lower)
        result = product >> Q64_RESOLUTION
        if round_up and product & Q64_MASK:
            result += 1
        return result if result <= U64_MAX else None

    @classmethod
    def get_next_sqrt_price_from_a_round_up(
        cls,
        sqrt_price: int,
        liquidity: int,
        amount: int,
        amount_specified_is_input: bool,
    ) -> int:
        """
        Returns the sqrt price after adding (input) or removing (output) an amount of token A.
        :math:`\\sqrt{P'} = \\frac{L * \\sqrt{P}}{L \\pm amount * \\sqrt{P}}`, always rounded up.
        """
        if amount == 0:
            return sqrt_price

        product = mul_u256(sqrt_price, amount)
        numerator = mul_u256(liquidity, sqrt_price).checked_shift_word_left()
        if numerator is None:
            raise SqrtPriceMathRevert(ErrorCode.MultiplicationOverflow, "liquidity * sqrt_price overflows u256")

        liquidity_shift_left = U256(liquidity).shift_word_left()
        if amount_specified_is_input:
            denominator = liquidity_shift_left.add(product)
        else:
            # Removing more token A than the liquidity holds
            if liquidity_shift_left.lte(product):
                raise SqrtPriceMathRevert(ErrorCode.DivideByZero, "Output amount exceeds available liquidity")
            denominator = liquidity_shift_left.sub(product)

        try:
            price = cls.full_math.div_round_up_u256(numerator, denominator, True)
        except FullMathRevert as exc:
            raise SqrtPriceMathRevert(exc.error_code) from exc

        if price < MIN_SQRT_PRICE_X64:
            raise SqrtPriceMathRevert(ErrorCode.TokenMinSubceeded, f"Next sqrt price {price} below minimum")
        if price > MAX_SQRT_PRICE_X64:
            raise SqrtPriceMathRevert(ErrorCode.TokenMaxExceeded, f"Next sqrt price {price} above maximum")

        return price

    @classmethod
    def get_next_sqrt_price_from_b_round_down(
        cls,
        sqrt_price: int,
        liquidity: int,
        amount: int,
        amount_specified_is_input: bool,
    ) -> int:
        """
        Returns the sqrt price after adding (input) or removing (output) an amount of token B.
        :math:`\\sqrt{P'} = \\sqrt{P} \\pm \\frac{amount}{L}`.  The delta is floored when adding and ceiled when
        removing, so the resulting price is always rounded down.
        """
        amount_x64 = amount << Q64_RESOLUTION
        try:
            delta = cls.full_math.div_round_up(amount_x64, liquidity, not amount_specified_is_input)
        except FullMathRevert as exc:
            raise SqrtPriceMathRevert(exc.error_code) from exc

        if amount_specified_is_input:
            next_price = sqrt_price + delta
            if next_price > U128_MAX:
                raise SqrtPriceMathRevert(ErrorCode.SqrtPriceOutOfBounds, "Next sqrt price overflows u128")
        else:
            next_price = sqrt_price - delta
            if next_price < 0:
                raise SqrtPriceMathRevert(ErrorCode.SqrtPriceOutOfBounds, "Next sqrt price underflows")

        return next_price

    @classmethod
    def get_next_sqrt_price(
        cls,
        sqrt_price: int,
        liquidity: int,
        amount: int,
        amount_specified_is_input: bool,
        a_to_b: bool,
    ) -> int:
        """
        Returns the next sqrt price given a fixed amount of one token.  Token A is fixed when
        amount_specified_is_input == a_to_b (selling A exact in, or buying A exact out), otherwise token B is fixed.

        :param sqrt_price: current Q64.64 sqrt price
        :param liquidity: active liquidity
        :param amount: u64 amount of the fixed token
        :param amount_specified_is_input: whether amount is being added to the pool
        :param a_to_b: swap direction
        """
        if amount_specified_is_input == a_to_b:
            return cls.get_next_sqrt_price_from_a_round_up(sqrt_price, liquidity, amount, amount_specified_is_input)
        return cls.get_next_sqrt_price_from_b_round_down(sqrt_price, liquidity, amount, amount_specified_is_input)
