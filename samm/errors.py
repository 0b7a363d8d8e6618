"""SAMM error classes.

Every failure raised by the quote engine and the router derives from
SAMMError, so callers at the request boundary can catch one type.
"""

from __future__ import annotations


class SAMMError(Exception):
    """Base error for SAMM quoting and routing."""

    pass


class InvalidSwapAmount(SAMMError, ValueError):
    """Requested amount must be a positive integer."""

    pass


class InsufficientLiquidity(SAMMError):
    """Destination reserve cannot cover the requested output."""

    pass


class DivisionByZero(InsufficientLiquidity, ArithmeticError):
    """Swap would drain a reserve exactly to zero, or a denominator is zero."""

    pass


class Underflow(SAMMError, ArithmeticError):
    """Subtraction would produce a negative amount."""

    pass


class Uint256Overflow(SAMMError, ArithmeticError):
    """Value does not fit in a uint256."""

    pass


class ExceedsCThreshold(SAMMError):
    """Trade is too large relative to the shard's reserve."""

    def __init__(self, output_amount: int, reserve: int, c: int) -> None:
        self.output_amount = output_amount
        self.reserve = reserve
        self.c = c
        super().__init__(
            f"Output {output_amount} exceeds c-threshold {c} of reserve {reserve}"
        )


class NoShardsAvailable(SAMMError):
    """No shard of the pair can quote the trade."""

    pass


class NoRouteFound(SAMMError):
    """No direct pair and no single intermediate token connects the tokens."""

    pass


class ExcessiveInputAmount(SAMMError):
    """Required input exceeds the caller's ceiling at execution time."""

    def __init__(self, total_input: int, maximal_input_amount: int) -> None:
        self.total_input = total_input
        self.maximal_input_amount = maximal_input_amount
        super().__init__(
            f"Required input {total_input} exceeds maximum {maximal_input_amount}"
        )


class InvalidTokenPair(SAMMError):
    """No configuration exists for the requested tokens."""

    pass


class SourceUnavailable(SAMMError):
    """A reserve or parameter read failed."""

    pass


class ConfigurationError(SAMMError, ValueError):
    """Deployment configuration is malformed."""

    pass


__all__ = [
    "SAMMError",
    "InvalidSwapAmount",
    "InsufficientLiquidity",
    "DivisionByZero",
    "Underflow",
    "Uint256Overflow",
    "ExceedsCThreshold",
    "NoShardsAvailable",
    "NoRouteFound",
    "ExcessiveInputAmount",
    "InvalidTokenPair",
    "SourceUnavailable",
    "ConfigurationError",
]
