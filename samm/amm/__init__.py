"""SAMM swap math: constant-product curve, dynamic fees and quotes."""

from samm.amm.curve import invariant_holds, source_amount_swapped
from samm.amm.fees import fee_rate_bps, is_adaptive, owner_fee, trade_fee
from samm.amm.quoter import (
    SAMMPoolEncoder,
    calculate_swap,
    execute_swap,
    max_output_for_input,
    samm_encoder,
)

__all__ = [
    # Curve
    "source_amount_swapped",
    "invariant_holds",
    # Fees
    "trade_fee",
    "owner_fee",
    "is_adaptive",
    "fee_rate_bps",
    # Quotes
    "calculate_swap",
    "execute_swap",
    "max_output_for_input",
    "SAMMPoolEncoder",
    "samm_encoder",
]
