"""Type definitions for routing module."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from samm.constants import NORMALIZED_DECIMALS
from samm.models.pool import ShardDescriptor, Token
from samm.models.quote import SwapQuote
from samm.units import exchange_rate, scale_amount


@dataclass(frozen=True)
class HopQuote:
    """Quote for a single hop of a route."""

    shard: ShardDescriptor
    token_in: Token
    token_out: Token
    quote: SwapQuote

    @property
    def amount_in(self) -> int:
        return self.quote.total_input

    @property
    def amount_out(self) -> int:
        return self.quote.output_amount

    @property
    def trade_fee_normalized(self) -> int:
        """Trade fee rescaled from the hop's input token to NORMALIZED_DECIMALS."""
        return scale_amount(self.quote.trade_fee, self.token_in.decimals, NORMALIZED_DECIMALS)

    @property
    def total_fee_normalized(self) -> int:
        return scale_amount(self.quote.total_fee, self.token_in.decimals, NORMALIZED_DECIMALS)


@dataclass(frozen=True)
class ShardCandidate:
    """One shard's quote during best-shard selection."""

    shard: ShardDescriptor
    quote: SwapQuote


@dataclass(frozen=True)
class ShardSelection:
    """Result of ranking the shards of one pair for one trade.

    ``candidates`` holds every admissible shard in rank order; the first is
    the selected one. ``skipped`` maps shard addresses to the reason they
    were left out.
    """

    candidates: tuple[ShardCandidate, ...]
    skipped: tuple[tuple[str, str], ...] = ()

    @property
    def best(self) -> ShardCandidate:
        return self.candidates[0]

    @property
    def shard(self) -> ShardDescriptor:
        return self.candidates[0].shard

    @property
    def quote(self) -> SwapQuote:
        return self.candidates[0].quote


@dataclass(frozen=True)
class Route:
    """An ordered path of hops from token_in to token_out.

    Built once per routing request. Hop ``i``'s output token is hop
    ``i + 1``'s input token and its output amount is what hop ``i + 1``
    consumes.
    """

    token_in: Token
    token_out: Token
    hops: tuple[HopQuote, ...]

    @property
    def amount_in(self) -> int:
        return self.hops[0].amount_in

    @property
    def amount_out(self) -> int:
        return self.hops[-1].amount_out

    @property
    def path(self) -> list[str]:
        """Token addresses along the route, input first."""
        return [self.hops[0].token_in.address] + [hop.token_out.address for hop in self.hops]

    @property
    def symbols(self) -> list[str]:
        return [self.hops[0].token_in.symbol] + [hop.token_out.symbol for hop in self.hops]

    @property
    def is_multihop(self) -> bool:
        return len(self.hops) > 1

    @property
    def total_trade_fee_normalized(self) -> int:
        """Sum of hop trade fees, each rescaled to NORMALIZED_DECIMALS first."""
        return sum(hop.trade_fee_normalized for hop in self.hops)

    @property
    def total_fee_normalized(self) -> int:
        return sum(hop.total_fee_normalized for hop in self.hops)

    @property
    def rate(self) -> Decimal:
        """Whole output tokens per whole input token."""
        return exchange_rate(
            self.amount_in, self.token_in.decimals, self.amount_out, self.token_out.decimals
        )


__all__ = ["HopQuote", "ShardCandidate", "ShardSelection", "Route"]
