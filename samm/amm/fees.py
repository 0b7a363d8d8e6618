"""SAMM trade and owner fees.

The trade fee is charged on the output amount and expressed in source-token
units. Its rate depends on the trade's share of the destination reserve:

    rate = max(f, 5f - 1.2 * OA / RB)      with f = fee_numerator / fee_denominator

Small trades pay up to 5f ("adaptive" branch); once the 1.2 * OA / RB term
eats four base rates the rate floors at f ("minimal" branch). Both branches
agree at the boundary, so the rate is continuous and non-increasing in the
trade size.

All arithmetic is integer with truncating division, in the exact order the
deployed contracts use.
"""

from __future__ import annotations

from samm.constants import (
    ADAPTIVE_SLOPE_DENOMINATOR,
    ADAPTIVE_SLOPE_NUMERATOR,
    BPS,
    MAX_FEE_MULTIPLIER,
)
from samm.errors import DivisionByZero
from samm.safe_int import S


def trade_fee(
    output_amount: int,
    output_reserve: int,
    input_reserve: int,
    fee_numerator: int,
    fee_denominator: int,
) -> int:
    """Calculate the dynamic trade fee for an output-specified swap.

    Args:
        output_amount: Exact destination amount requested
        output_reserve: Pre-trade destination reserve
        input_reserve: Pre-trade source reserve
        fee_numerator: Base (minimal) fee numerator
        fee_denominator: Base fee denominator

    Returns:
        Fee in source-token units (0 if the fee or the output is zero)

    Raises:
        DivisionByZero: If output_reserve or fee_denominator is zero
    """
    if fee_numerator == 0 or output_amount == 0:
        return 0

    max_fee_numerator = S(fee_numerator) * MAX_FEE_MULTIPLIER
    tmp = (S(output_amount) * ADAPTIVE_SLOPE_NUMERATOR * S(fee_denominator)) // (
        S(ADAPTIVE_SLOPE_DENOMINATOR) * S(output_reserve)
    )
    denominator = S(output_reserve) * S(fee_denominator)

    if tmp + fee_numerator > max_fee_numerator:
        # Minimal branch: trade is large relative to the pool
        numerator = S(output_amount) * S(fee_numerator) * S(input_reserve)
    else:
        numerator = S(output_amount) * (max_fee_numerator - tmp) * S(input_reserve)

    return (numerator // denominator).value


def is_adaptive(
    output_amount: int,
    output_reserve: int,
    fee_numerator: int,
    fee_denominator: int,
) -> bool:
    """Whether the adaptive (above-floor) branch applies to this trade."""
    if fee_numerator == 0 or output_amount == 0:
        return False
    if output_reserve == 0:
        raise DivisionByZero("Output reserve is zero")
    tmp = (output_amount * ADAPTIVE_SLOPE_NUMERATOR * fee_denominator) // (
        ADAPTIVE_SLOPE_DENOMINATOR * output_reserve
    )
    return tmp + fee_numerator <= fee_numerator * MAX_FEE_MULTIPLIER


def owner_fee(output_amount: int, owner_fee_numerator: int, owner_fee_denominator: int) -> int:
    """Flat protocol fee on the output amount; may truncate to zero.

    Raises:
        DivisionByZero: If owner_fee_denominator is zero
    """
    return ((S(output_amount) * S(owner_fee_numerator)) // S(owner_fee_denominator)).value


def fee_rate_bps(fee: int, output_amount: int) -> int:
    """Fee as basis points of the output amount (truncated)."""
    if output_amount <= 0:
        return 0
    return fee * BPS // output_amount


__all__ = ["trade_fee", "is_adaptive", "owner_fee", "fee_rate_bps"]
