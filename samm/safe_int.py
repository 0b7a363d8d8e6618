"""Checked integer arithmetic for reserve and fee math.

Every amount a pool settles is a non-negative integer that must fit in a
uint256. Wrapping intermediate values in S() turns the silent failure
modes of plain ints into SAMM errors:

    new_source = (S(source) * S(destination)).ceiling_div(S(destination) - out)

raises Underflow if ``out`` exceeds the reserve and DivisionByZero if it
drains it.
"""

from __future__ import annotations

from functools import total_ordering

from samm.errors import DivisionByZero, Uint256Overflow, Underflow

UINT256_MAX = 2**256 - 1


def _raw(operand: SafeInt | int) -> int:
    return operand.value if isinstance(operand, SafeInt) else operand


@total_ordering
class SafeInt:
    """Integer whose subtraction and division are checked.

    Addition and multiplication are exact (Python ints do not overflow);
    range is checked once, at the boundary, by to_uint256().
    """

    __slots__ = ("value",)

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            value = value.value
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        self.value: int = value

    def __repr__(self) -> str:
        return f"S({self.value})"

    def __int__(self) -> int:
        return self.value

    def __bool__(self) -> bool:
        return bool(self.value)

    def __hash__(self) -> int:
        return hash(self.value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (SafeInt, int)):
            return self.value == _raw(other)
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self.value < _raw(other)

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self.value + _raw(other))

    __radd__ = __add__

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self.value * _raw(other))

    __rmul__ = __mul__

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Raises Underflow when the difference would be negative."""
        rhs = _raw(other)
        if rhs > self.value:
            raise Underflow(f"Underflow: {self.value} - {rhs}")
        return SafeInt(self.value - rhs)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Truncating division. Raises DivisionByZero on a zero divisor."""
        return SafeInt(self.value // self._divisor(other))

    def ceiling_div(self, other: SafeInt | int) -> SafeInt:
        """Division rounded toward positive infinity.

        Used wherever rounding must favor the pool (required input amounts).
        """
        return SafeInt(-(-self.value // self._divisor(other)))

    def to_uint256(self) -> int:
        """Return the value, checking it fits in a uint256.

        Raises:
            Uint256Overflow: If the value is negative or above 2^256-1
        """
        if not 0 <= self.value <= UINT256_MAX:
            raise Uint256Overflow(f"Value out of uint256 range: {self.value}")
        return self.value

    def _divisor(self, other: SafeInt | int) -> int:
        rhs = _raw(other)
        if rhs == 0:
            raise DivisionByZero(f"Division by zero: {self.value} / 0")
        return rhs


S = SafeInt

__all__ = ["UINT256_MAX", "SafeInt", "S"]
