"""Shard router facade.

ShardRouter ties a reserve source, the routing configuration and an
optional settlement executor together. Every call takes a fresh snapshot
from the source, so quotes always reflect the latest known reserves.
"""

from __future__ import annotations

import structlog

from samm.amm.quoter import calculate_swap
from samm.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from samm.errors import ConfigurationError, InvalidTokenPair
from samm.models.pool import PoolState, ShardDescriptor
from samm.models.quote import SwapQuote
from samm.routing.multihop import MultiHopRouter
from samm.routing.pathfinding import PairGraph
from samm.routing.shards import (
    ShardSizeStatistics,
    best_shard,
    best_shard_for_input,
    require_c_threshold,
    shard_size_statistics,
    sort_shards_by_size,
)
from samm.routing.types import Route, ShardSelection
from samm.sources import ReserveSource, SettlementExecutor

logger = structlog.get_logger()


class ShardRouter:
    """Routes trades across the shards of a deployment.

    Args:
        source: Where shard reserves are read from
        config: Routing settings. Defaults to DEFAULT_ROUTER_CONFIG.
        executor: Settlement executor for execute(). Optional for
                  quote-only use.
    """

    def __init__(
        self,
        source: ReserveSource,
        config: RouterConfig | None = None,
        executor: SettlementExecutor | None = None,
    ) -> None:
        self.source = source
        self.config = config if config is not None else DEFAULT_ROUTER_CONFIG
        self.executor = executor

    def graph(self) -> PairGraph:
        """Build the pair graph from the source's current snapshot."""
        return PairGraph(self.source.shards())

    def _pair_shards(
        self, graph: PairGraph, token_in: str, token_out: str
    ) -> list[ShardDescriptor]:
        source = graph.get_token(token_in)
        destination = graph.get_token(token_out)
        shards = graph.shards_for(source.address, destination.address)
        if not shards:
            raise InvalidTokenPair(f"No pair configured for {source.symbol}/{destination.symbol}")
        return shards

    def _admissible_pool(
        self, shard: ShardDescriptor, token_in: str, output_amount: int
    ) -> PoolState:
        pool = shard.pool_state(token_in)
        require_c_threshold(
            output_amount, pool.reserve_destination, shard.params.c, self.config.c_scale
        )
        return pool

    def quote(
        self, output_amount: int, token_in: str, shard_address: str
    ) -> tuple[ShardDescriptor, SwapQuote]:
        """Quote an output-specified swap on one named shard.

        Raises:
            SourceUnavailable: If the shard cannot be read
            InvalidTokenPair: If the shard does not trade token_in
            ExceedsCThreshold: If the trade is too large for the shard
        """
        shard = self.source.read(shard_address)
        token_in = self.graph().get_token(token_in).address
        pool = self._admissible_pool(shard, token_in, output_amount)
        return shard, calculate_swap(output_amount, pool)

    def best_shard(self, output_amount: int, token_in: str, token_out: str) -> ShardSelection:
        """Pick the shard with the lowest total input for an exact output."""
        graph = self.graph()
        shards = self._pair_shards(graph, token_in, token_out)
        selection = best_shard(
            output_amount,
            shards,
            graph.get_token(token_in).address,
            c_scale=self.config.c_scale,
        )
        logger.info(
            "best_shard_selected",
            shard=selection.shard.label,
            output_amount=output_amount,
            total_input=selection.quote.total_input,
            candidates=len(selection.candidates),
            skipped=len(selection.skipped),
        )
        return selection

    def best_shard_for_input(self, amount_in: int, token_in: str, token_out: str) -> ShardSelection:
        """Pick the shard with the highest output for an exact input."""
        graph = self.graph()
        shards = self._pair_shards(graph, token_in, token_out)
        return best_shard_for_input(
            amount_in,
            shards,
            graph.get_token(token_in).address,
            c_scale=self.config.c_scale,
        )

    def _multihop_router(self) -> MultiHopRouter:
        return MultiHopRouter(
            self.graph(), max_hops=self.config.max_hops, c_scale=self.config.c_scale
        )

    def multi_hop(self, amount_in: int, token_in: str, token_out: str) -> Route:
        """Exact-input route, direct or through one intermediate token."""
        return self._multihop_router().route_exact_input(amount_in, token_in, token_out)

    def multi_hop_exact_output(self, amount_out: int, token_in: str, token_out: str) -> Route:
        """Exact-output route, direct or through one intermediate token."""
        return self._multihop_router().route_exact_output(amount_out, token_in, token_out)

    def execute(
        self,
        output_amount: int,
        maximal_input_amount: int,
        token_in: str,
        token_out: str,
        recipient: str,
        shard_address: str | None = None,
    ) -> tuple[ShardDescriptor, SwapQuote]:
        """Settle a single-hop swap through the executor.

        Without ``shard_address`` the best shard is selected first. The
        executor re-quotes and enforces ``maximal_input_amount`` itself.

        Returns:
            The shard used (pre-trade snapshot) and the executed quote

        Raises:
            ConfigurationError: If the router has no executor
            ExcessiveInputAmount: If the executed quote exceeds the ceiling
        """
        if self.executor is None:
            raise ConfigurationError("Router has no settlement executor")

        graph = self.graph()
        token_in = graph.get_token(token_in).address
        token_out = graph.get_token(token_out).address

        if shard_address is None:
            shard = self.best_shard(output_amount, token_in, token_out).shard
        else:
            shard = self.source.read(shard_address)
            self._admissible_pool(shard, token_in, output_amount)

        quote = self.executor.settle(
            output_amount,
            maximal_input_amount,
            token_in,
            token_out,
            shard.address,
            recipient,
        )
        return shard, quote

    def pair_shards(self, pair_name: str) -> list[ShardDescriptor]:
        """Shards of a pair, smallest first by the pair's first token."""
        shards = self.graph().shards_by_name(pair_name)
        return sort_shards_by_size(shards, shards[0].token_a.address)

    def shard_statistics(self, pair_name: str) -> ShardSizeStatistics:
        """Reserve-size statistics of a pair, measured on its first token."""
        shards = self.graph().shards_by_name(pair_name)
        return shard_size_statistics(shards, shards[0].token_a.address)


__all__ = ["ShardRouter"]
