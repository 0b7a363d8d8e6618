"""Output-specified SAMM quotes and execution pre-checks.

A quote combines the curve input with the trade fee and the owner fee, all
computed from the same pre-trade snapshot. Fees are not folded into the
curve: they are extra input the trader supplies on top.
"""

from __future__ import annotations

from typing import ClassVar

import structlog
from eth_abi import encode  # type: ignore[attr-defined]
from eth_utils import function_signature_to_4byte_selector

from samm.amm.curve import source_amount_swapped
from samm.amm.fees import owner_fee, trade_fee
from samm.constants import (
    ADAPTIVE_SLOPE_DENOMINATOR,
    ADAPTIVE_SLOPE_NUMERATOR,
    MAX_FEE_MULTIPLIER,
    SWAP_SAMM_SIGNATURE,
)
from samm.errors import ExcessiveInputAmount, InsufficientLiquidity, InvalidSwapAmount
from samm.models.pool import PoolState
from samm.models.quote import SwapQuote
from samm.models.types import is_valid_address
from samm.safe_int import S

logger = structlog.get_logger()


def calculate_swap(output_amount: int, pool: PoolState) -> SwapQuote:
    """Quote an output-specified swap against a pool snapshot.

    Args:
        output_amount: Exact destination amount the trader wants
        pool: Pre-trade pool snapshot, oriented source -> destination

    Returns:
        SwapQuote with curve input, trade fee and owner fee

    Raises:
        InvalidSwapAmount: If output_amount is not positive
        InsufficientLiquidity: If the pool cannot pay out output_amount
        DivisionByZero: If the trade would drain the pool or a fee denominator is zero
    """
    required_input = source_amount_swapped(
        output_amount, pool.reserve_source, pool.reserve_destination
    )
    fee = trade_fee(
        output_amount,
        pool.reserve_destination,
        pool.reserve_source,
        pool.trade_fee_numerator,
        pool.trade_fee_denominator,
    )
    protocol_fee = owner_fee(output_amount, pool.owner_fee_numerator, pool.owner_fee_denominator)

    return SwapQuote(
        output_amount=output_amount,
        required_input_amount=required_input,
        trade_fee=fee,
        owner_fee=protocol_fee,
    )


def execute_swap(output_amount: int, maximal_input_amount: int, pool: PoolState) -> SwapQuote:
    """Re-quote against current reserves and enforce the caller's input ceiling.

    This is the pre-check a settlement executor runs before moving balances.
    A failure is surfaced as-is; re-quoting with a higher ceiling is the
    caller's decision.

    Raises:
        ExcessiveInputAmount: If the fresh quote's total input exceeds the ceiling
    """
    quote = calculate_swap(output_amount, pool)
    if quote.total_input > maximal_input_amount:
        logger.warning(
            "swap_input_exceeds_maximum",
            output_amount=output_amount,
            total_input=quote.total_input,
            maximal_input_amount=maximal_input_amount,
        )
        raise ExcessiveInputAmount(quote.total_input, maximal_input_amount)
    return quote


def _fee_segment_starts(pool: PoolState) -> list[int]:
    """First output of each adaptive-fee step, highest first.

    The adaptive fee keys on tmp = out * 12 * fd // (10 * R_out). Step t
    starts at ceil(t * 10 * R_out / (12 * fd)); past step 4 * fee_numerator
    the minimal branch applies and the fee no longer steps down. Within a
    step total input grows with the output, across a step it can drop.
    """
    if pool.trade_fee_numerator == 0:
        return [1]
    numerator = ADAPTIVE_SLOPE_DENOMINATOR * pool.reserve_destination
    denominator = ADAPTIVE_SLOPE_NUMERATOR * pool.trade_fee_denominator
    last_step = (MAX_FEE_MULTIPLIER - 1) * pool.trade_fee_numerator + 1
    starts = [S(t * numerator).ceiling_div(denominator).value for t in range(last_step, 0, -1)]
    return [max(start, 1) for start in starts] + [1]


def _largest_in_segment(lo: int, hi: int, amount_in: int, pool: PoolState) -> SwapQuote | None:
    """Binary search [lo, hi], where total input grows with the output."""
    best = calculate_swap(lo, pool)
    if best.total_input > amount_in:
        return None
    while lo < hi:
        mid = (lo + hi + 1) // 2
        quote = calculate_swap(mid, pool)
        if quote.total_input <= amount_in:
            lo = mid
            best = quote
        else:
            hi = mid - 1
    return best


def max_output_for_input(amount_in: int, pool: PoolState) -> SwapQuote:
    """Find the largest output whose total input fits in ``amount_in``.

    Exact-input counterpart of calculate_swap, used for input-specified
    routes. Total input is not monotone in the output: each step of the
    adaptive fee can make a larger output cheaper. Segments between steps
    are searched from the top down, and the first one whose smallest
    output is affordable holds the answer.

    Args:
        amount_in: Source amount the trader is willing to spend
        pool: Pre-trade pool snapshot

    Returns:
        SwapQuote for the chosen output; its total_input is <= amount_in

    Raises:
        InvalidSwapAmount: If amount_in is not positive
        InsufficientLiquidity: If amount_in cannot buy a single unit
    """
    if amount_in <= 0:
        raise InvalidSwapAmount(f"Input amount must be positive, got {amount_in}")
    if pool.reserve_destination <= 1:
        raise InsufficientLiquidity(
            f"Destination reserve {pool.reserve_destination} cannot pay out"
        )

    hi = pool.reserve_destination - 1
    for lo in _fee_segment_starts(pool):
        if lo > hi:
            continue
        quote = _largest_in_segment(lo, hi, amount_in, pool)
        if quote is not None:
            return quote
        hi = lo - 1

    raise InsufficientLiquidity(
        f"Input {amount_in} cannot buy one unit (needs {calculate_swap(1, pool).total_input})"
    )


class SAMMPoolEncoder:
    """Calldata encoding for the settlement executor's swapSAMM entry point.

    swapSAMM(uint256 amountOut, uint256 maximalAmountIn, address tokenIn,
             address tokenOut, address recipient)
    """

    SWAP_SAMM_SELECTOR: ClassVar[str] = "0x" + function_signature_to_4byte_selector(
        SWAP_SAMM_SIGNATURE
    ).hex()

    def encode_swap_samm(
        self,
        pool_address: str,
        token_in: str,
        token_out: str,
        amount_out: int,
        maximal_amount_in: int,
        recipient: str,
    ) -> tuple[str, str]:
        """Encode an output-specified swap as calldata.

        Args:
            pool_address: Shard contract that executes the swap
            token_in: Input token address (0x-prefixed hex)
            token_out: Output token address (0x-prefixed hex)
            amount_out: Exact output amount
            maximal_amount_in: Input ceiling (slippage protection)
            recipient: Address to receive the output

        Returns:
            Tuple of (pool_address, calldata)

        Raises:
            ValueError: If any address is invalid
            Uint256Overflow: If an amount does not fit in uint256
        """
        for name, addr in (
            ("pool", pool_address),
            ("token_in", token_in),
            ("token_out", token_out),
            ("recipient", recipient),
        ):
            if not is_valid_address(addr):
                raise ValueError(f"Invalid {name} address: {addr}")

        encoded_args = encode(
            ["uint256", "uint256", "address", "address", "address"],
            [
                S(amount_out).to_uint256(),
                S(maximal_amount_in).to_uint256(),
                bytes.fromhex(token_in[2:]),
                bytes.fromhex(token_out[2:]),
                bytes.fromhex(recipient[2:]),
            ],
        )
        return pool_address.lower(), self.SWAP_SAMM_SELECTOR + encoded_args.hex()


# Singleton instance
samm_encoder = SAMMPoolEncoder()


__all__ = [
    "calculate_swap",
    "execute_swap",
    "max_output_for_input",
    "SAMMPoolEncoder",
    "samm_encoder",
]
