"""Token decimal-scale conversions.

Raw amounts of tokens with different decimals are never added together
directly: they are first rescaled to a common number of decimals.
Human-unit values use a high-precision Decimal context so uint256-sized
amounts convert exactly.
"""

from __future__ import annotations

import decimal
from decimal import Decimal

# 78 digits of precision, enough for uint256 values (up to ~10^77)
DECIMAL_HIGH_PREC_CONTEXT = decimal.Context(prec=78)


def scale_amount(amount: int, from_decimals: int, to_decimals: int) -> int:
    """Rescale a raw amount between decimal bases (truncating when shrinking).

    >>> scale_amount(1_500_000, 6, 18)
    1500000000000000000
    """
    if from_decimals == to_decimals:
        return amount
    if to_decimals > from_decimals:
        return amount * 10 ** (to_decimals - from_decimals)
    return amount // 10 ** (from_decimals - to_decimals)


def to_units(amount: int, decimals: int) -> Decimal:
    """Convert a raw amount to whole-token units."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return Decimal(amount) / (Decimal(10) ** decimals)


def exchange_rate(amount_in: int, decimals_in: int, amount_out: int, decimals_out: int) -> Decimal:
    """Output tokens received per input token, in whole-token units."""
    if amount_in <= 0:
        raise ValueError(f"Input amount must be positive, got {amount_in}")
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return to_units(amount_out, decimals_out) / to_units(amount_in, decimals_in)


__all__ = ["DECIMAL_HIGH_PREC_CONTEXT", "scale_amount", "to_units", "exchange_rate"]
