"""Swap quote result type."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SwapQuote:
    """Result of quoting an output-specified swap.

    A quote is a snapshot: it is valid only until the reserves it was
    computed from change.

    Attributes:
        output_amount: Exact amount the trader receives
        required_input_amount: Curve input before fees
        trade_fee: Dynamic trade fee, in source-token units
        owner_fee: Flat protocol fee, in source-token units
    """

    output_amount: int
    required_input_amount: int
    trade_fee: int
    owner_fee: int

    @property
    def total_input(self) -> int:
        """Everything the trader pays: curve input plus both fees."""
        return self.required_input_amount + self.trade_fee + self.owner_fee

    @property
    def total_fee(self) -> int:
        return self.trade_fee + self.owner_fee


__all__ = ["SwapQuote"]
