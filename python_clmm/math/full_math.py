from python_clmm.exceptions import ErrorCode, FullMathRevert

from .shared import Q64_MASK, Q64_RESOLUTION, U64_MAX, U128_MAX, U256_MAX


class U256:
    """
    Unsigned 256 bit integer used as the intermediate representation of 128 x 128 bit products.
    Operations fail instead of silently wrapping, except for the explicit word shifts
    """

    __slots__ = ("value",)

    def __init__(self, value: int = 0):
        if value < 0 or value > U256_MAX:
            raise FullMathRevert(ErrorCode.U256Overflow, f"{value} is outside of the u256 range")
        self.value = value

    def __repr__(self):
        return f"U256({self.value})"

    def __eq__(self, other):
        if isinstance(other, U256):
            return self.value == other.value
        return NotImplemented

    def __hash__(self):
        return hash(self.value)

    def add(self, other: "U256") -> "U256":
        return U256(self.value + other.value)

    def sub(self, other: "U256") -> "U256":
        return U256(self.value - other.value)

    def lt(self, other: "U256") -> bool:
        return self.value < other.value

    def lte(self, other: "U256") -> bool:
        return self.value <= other.value

    def gt(self, other: "U256") -> bool:
        return self.value > other.value

    def gte(self, other: "U256") -> bool:
        return self.value >= other.value

    def eq(self, other: "U256") -> bool:
        return self.value == other.value

    def is_zero(self) -> bool:
        return self.value == 0

    def shift_word_left(self) -> "U256":
        """Shifts the value one word (64 bits) to the left, discarding the most significant word"""
        return U256((self.value << Q64_RESOLUTION) & U256_MAX)

    def checked_shift_word_left(self) -> "U256 | None":
        """Shifts the value one word to the left.  Returns None if the most significant word is non-zero"""
        if self.value >> 192:
            return None
        return U256(self.value << Q64_RESOLUTION)

    def shift_word_right(self) -> "U256":
        return U256(self.value >> Q64_RESOLUTION)

    def div(self, divisor: "U256") -> tuple["U256", "U256"]:
        """
        Divides the value by divisor, returning the floored quotient and the remainder.  Callers that round up
        add one to the quotient when the remainder is non-zero.

        :param divisor: U256 divisor
        :return: (quotient, remainder)
        """
        if divisor.is_zero():
            raise FullMathRevert(ErrorCode.DivideByZero)

        quotient, remainder = divmod(self.value, divisor.value)
        return U256(quotient), U256(remainder)

    def try_into_u128(self) -> int:
        if self.value > U128_MAX:
            raise FullMathRevert(ErrorCode.NumberDownCastError, f"{self.value} does not fit in a u128")
        return self.value


def mul_u256(n0: int, n1: int) -> U256:
    """Multiplies two u128 values, returning the full 256 bit product"""
    if n0 > U128_MAX or n1 > U128_MAX:
        raise FullMathRevert(ErrorCode.MultiplicationOverflow, "mul_u256 inputs must fit in a u128")
    return U256(n0 * n1)


class FullMathModule:
    """Math Module for fixed point multiplication & division with explicit rounding direction"""

    @classmethod
    def mul_div(cls, n0: int, n1: int, d: int, round_up: bool = False) -> int:
        """
        Computes (n0 * n1) / d using a 256 bit intermediate product.  Returns a u128,
        rounded up if round_up is True and the division is inexact, rounded down otherwise.

        :param n0: u128 multiplicand
        :param n1: u128 multiplier
        :param d: u128 denominator
        :param round_up: rounding direction of the result
        """
        if d == 0:
            raise FullMathRevert(ErrorCode.DivideByZero)
        if n0 > U128_MAX or n1 > U128_MAX or d > U128_MAX:
            raise FullMathRevert(ErrorCode.MulDivOverflow, "mul_div inputs must fit in a u128")

        quotient, remainder = mul_u256(n0, n1).div(U256(d))
        if round_up and not remainder.is_zero():
            quotient = quotient.add(U256(1))

        if quotient.value > U128_MAX:
            raise FullMathRevert(ErrorCode.MulDivOverflow, f"mul_div result {quotient.value} overflows u128")
        return quotient.value

    @classmethod
    def mul_shift_right(cls, n0: int, n1: int, round_up: bool = False) -> int:
        """
        Multiplies an integer by a Q64.64 fixed point number, truncating the product back to a u64 integer.
        When round_up is True, the result is rounded up if any of the 64 discarded bits are set.

        :param n0: u128 integer
        :param n1: u128 Q64.64 fixed point value
        :param round_up: rounding direction of the result
        :return: u64 result
        """
        if n0 == 0 or n1 == 0:
            return 0

        product = n0 * n1
        if product > U128_MAX:
            raise FullMathRevert(ErrorCode.MultiplicationShiftRightOverflow)

        result = product >> Q64_RESOLUTION
        should_round = round_up and (product & Q64_MASK) > 0
        if should_round and result == U64_MAX:
            raise FullMathRevert(ErrorCode.MultiplicationOverflow, "Rounding up overflows u64")

        return result + 1 if should_round else result

    @classmethod
    def div_round_up(cls, n: int, d: int, round_up: bool = True) -> int:
        """Integer division of u128 values with explicit rounding direction"""
        if d == 0:
            raise FullMathRevert(ErrorCode.DivideByZero)
        if n > U128_MAX or d > U128_MAX:
            raise FullMathRevert(ErrorCode.MulDivOverflow, "div_round_up inputs must fit in a u128")

        quotient = n // d
        return quotient + 1 if round_up and n % d > 0 else quotient

    @classmethod
    def div_round_up_u256(cls, n: U256, d: U256, round_up: bool = True) -> int:
        """Divides two U256 values with explicit rounding direction, narrowing the quotient to a u128"""
        quotient, remainder = n.div(d)
        if round_up and not remainder.is_zero():
            quotient = quotient.add(U256(1))
        return quotient.try_into_u128()
