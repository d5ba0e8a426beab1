"""Checked uint256 arithmetic for reserves, claims and intermediate products.

Pool math is written with plain operators on SafeInt values. Any step
whose result could not be stored in a 256-bit unsigned word raises
instead of wrapping or going negative:

    reserve_b * PRICE_SCALE // reserve_a     ->  S(rb) * S(scale) // S(ra)

Wrap inputs with S(...) and read the result back with .value.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from math import isqrt as _isqrt
from typing import Any

from dex.errors import ArithmeticOverflow

UINT256_MAX = 2**256 - 1


class SafeIntError(ArithmeticError):
    """Arithmetic without a uint256 result, other than overflow."""


class DivisionByZero(SafeIntError):
    pass


class Underflow(SafeIntError):
    """A result or input is below zero."""


def is_uint256(value: int) -> bool:
    """Check if value fits in uint256 without raising."""
    return 0 <= value <= UINT256_MAX


def _operand(other: Any) -> int | None:
    if isinstance(other, SafeInt):
        return other.value
    if isinstance(other, int) and not isinstance(other, bool):
        return other
    return None


def _bounded(result: int, expr: str) -> int:
    if result < 0:
        raise Underflow(f"Underflow: {expr} = {result}")
    if result > UINT256_MAX:
        raise ArithmeticOverflow(f"Overflow: {expr} exceeds 2^256-1")
    return result


def _checked(
    op: Callable[[int, int], int], symbol: str, reflected: bool = False
) -> Callable[[SafeInt, Any], SafeInt]:
    """Build a binary operator method that range checks its result."""

    def method(self: SafeInt, other: Any) -> SafeInt:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        left, right = (rhs, self.value) if reflected else (self.value, rhs)
        if symbol == "//" and right == 0:
            raise DivisionByZero(f"Division by zero: {left} // 0")
        return SafeInt(_bounded(op(left, right), f"{left} {symbol} {right}"))

    return method


def _compare(op: Callable[[int, int], bool]) -> Callable[[SafeInt, Any], bool]:
    def method(self: SafeInt, other: Any) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return op(self.value, rhs)

    return method


class SafeInt:
    """Non-negative integer bounded by uint256.

    Supports +, -, *, // (in either operand order) and comparisons with
    ints or other SafeInts. True division is rejected: pool math floors.

    Raises:
        TypeError: On construction from anything but int or SafeInt
            (bool included)
        Underflow: On construction from a negative int
        ArithmeticOverflow: On construction above UINT256_MAX
    """

    __slots__ = ("_value",)

    def __init__(self, value: int | SafeInt) -> None:
        raw = _operand(value)
        if raw is None:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        if raw < 0:
            raise Underflow(f"Negative value is not a uint256: {raw}")
        if raw > UINT256_MAX:
            raise ArithmeticOverflow(f"Value exceeds uint256 max: {raw}")
        self._value = raw

    @property
    def value(self) -> int:
        return self._value

    __add__ = _checked(operator.add, "+")
    __radd__ = _checked(operator.add, "+", reflected=True)
    __sub__ = _checked(operator.sub, "-")
    __rsub__ = _checked(operator.sub, "-", reflected=True)
    __mul__ = _checked(operator.mul, "*")
    __rmul__ = _checked(operator.mul, "*", reflected=True)
    __floordiv__ = _checked(operator.floordiv, "//")
    __rfloordiv__ = _checked(operator.floordiv, "//", reflected=True)

    def __truediv__(self, other: Any) -> SafeInt:
        raise TypeError("SafeInt only supports floor division (//)")

    __rtruediv__ = __truediv__

    __eq__ = _compare(operator.eq)
    __lt__ = _compare(operator.lt)
    __le__ = _compare(operator.le)
    __gt__ = _compare(operator.gt)
    __ge__ = _compare(operator.ge)

    def __hash__(self) -> int:
        return hash(self._value)

    def __int__(self) -> int:
        return self._value

    __index__ = __int__

    def __bool__(self) -> bool:
        return self._value != 0

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def min(self, other: SafeInt | int) -> SafeInt:
        other = SafeInt(other)
        return other if other < self else self

    def isqrt(self) -> SafeInt:
        """Floor of the square root."""
        return SafeInt(_isqrt(self._value))


# Short alias used throughout the pool math
S = SafeInt
