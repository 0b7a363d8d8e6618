"""Constant-product curve for output-specified swaps.

The trader fixes the destination amount; the curve returns the source
amount that keeps reserve_source * reserve_destination from decreasing.
The new source reserve is rounded up, so rounding never favors the trader.
"""

from __future__ import annotations

from samm.errors import DivisionByZero, InsufficientLiquidity, InvalidSwapAmount
from samm.safe_int import S


def source_amount_swapped(
    output_amount: int,
    source_reserve: int,
    destination_reserve: int,
) -> int:
    """Calculate the source amount needed to take ``output_amount`` out.

    Formula:
        invariant = source_reserve * destination_reserve
        new_destination = destination_reserve - output_amount
        new_source = ceil(invariant / new_destination)
        result = new_source - source_reserve

    Args:
        output_amount: Exact destination amount requested
        source_reserve: Pre-trade reserve of the token paid in
        destination_reserve: Pre-trade reserve of the token paid out

    Returns:
        Source amount to add to the pool, before fees

    Raises:
        InvalidSwapAmount: If output_amount is not positive
        InsufficientLiquidity: If a reserve is empty or smaller than the output
        DivisionByZero: If the output equals the destination reserve
    """
    if output_amount <= 0:
        raise InvalidSwapAmount(f"Output amount must be positive, got {output_amount}")
    if source_reserve <= 0 or destination_reserve <= 0:
        raise InsufficientLiquidity(
            f"Empty reserves: source={source_reserve} destination={destination_reserve}"
        )
    if output_amount > destination_reserve:
        raise InsufficientLiquidity(
            f"Output {output_amount} exceeds destination reserve {destination_reserve}"
        )
    if output_amount == destination_reserve:
        raise DivisionByZero(
            f"Output {output_amount} would drain destination reserve to zero"
        )

    invariant = S(source_reserve) * S(destination_reserve)
    new_destination = S(destination_reserve) - S(output_amount)
    new_source = invariant.ceiling_div(new_destination)

    return (new_source - S(source_reserve)).value


def invariant_holds(
    output_amount: int,
    source_amount: int,
    source_reserve: int,
    destination_reserve: int,
) -> bool:
    """Check that the post-trade product is not below the pre-trade product."""
    before = source_reserve * destination_reserve
    after = (source_reserve + source_amount) * (destination_reserve - output_amount)
    return after >= before


__all__ = ["source_amount_swapped", "invariant_holds"]
