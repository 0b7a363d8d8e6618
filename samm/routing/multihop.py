"""Multi-hop routing across SAMM pairs.

A route is either direct or passes through exactly one intermediate
token. Each hop picks its best shard on its own; the choice is not
optimized jointly across hops.
"""

from __future__ import annotations

import structlog

from samm.constants import C_SCALE
from samm.errors import InvalidSwapAmount, InvalidTokenPair, NoRouteFound
from samm.models.pool import Token
from samm.routing.pathfinding import PairGraph
from samm.routing.shards import best_shard, best_shard_for_input
from samm.routing.types import HopQuote, Route

logger = structlog.get_logger()


class MultiHopRouter:
    """Compose per-hop shard selections into a route.

    Supports exact-input routes (the trader fixes what they pay) and
    exact-output routes (the trader fixes what they receive).
    """

    def __init__(self, graph: PairGraph, *, max_hops: int = 2, c_scale: int = C_SCALE) -> None:
        """Initialize the router.

        Args:
            graph: Pairs and shards to route through
            max_hops: 1 for direct routes only, 2 to allow one intermediate
            c_scale: Fixed-point scale of the shards' ``c`` parameter
        """
        if max_hops not in (1, 2):
            raise ValueError(f"max_hops must be 1 or 2, got {max_hops}")
        self.graph = graph
        self.max_hops = max_hops
        self.c_scale = c_scale

    def _resolve(self, token_in: str, token_out: str) -> tuple[Token, Token, list[str]]:
        source = self.graph.get_token(token_in)
        destination = self.graph.get_token(token_out)
        if source.address == destination.address:
            raise InvalidTokenPair(f"Cannot route {source.symbol} to itself")

        path = self.graph.find_path(source.address, destination.address, self.max_hops)
        if path is None:
            raise NoRouteFound(
                f"No direct pair or single intermediate between "
                f"{source.symbol} and {destination.symbol}"
            )
        return source, destination, path

    def route_exact_input(self, amount_in: int, token_in: str, token_out: str) -> Route:
        """Route a trade that spends at most ``amount_in`` of ``token_in``.

        Hop 1 takes ``amount_in``; each later hop takes the previous hop's
        output. Amounts are handed over in the intermediate token's own
        decimals, since both hops trade that same token. A hop may leave a
        few units of its input unspent when no larger output fits.

        Raises:
            InvalidSwapAmount: If amount_in is not positive
            InvalidTokenPair: If either token is unknown
            NoRouteFound: If the tokens are not connected
            NoShardsAvailable: If a hop has no admissible shard
        """
        if amount_in <= 0:
            raise InvalidSwapAmount(f"Input amount must be positive, got {amount_in}")
        source, destination, path = self._resolve(token_in, token_out)

        hops: list[HopQuote] = []
        current_amount = amount_in
        for i in range(len(path) - 1):
            selection = best_shard_for_input(
                current_amount,
                self.graph.shards_for(path[i], path[i + 1]),
                path[i],
                c_scale=self.c_scale,
            )
            shard = selection.shard
            hops.append(
                HopQuote(
                    shard=shard,
                    token_in=shard.get_token(path[i]),
                    token_out=shard.get_token(path[i + 1]),
                    quote=selection.quote,
                )
            )
            current_amount = selection.quote.output_amount

        route = Route(token_in=source, token_out=destination, hops=tuple(hops))
        self._log_route(route, "exact_input")
        return route

    def route_exact_output(self, amount_out: int, token_in: str, token_out: str) -> Route:
        """Route a trade that delivers exactly ``amount_out`` of ``token_out``.

        Works backwards: the last hop is quoted for ``amount_out`` and its
        total input becomes the output the previous hop must deliver.

        Raises:
            InvalidSwapAmount: If amount_out is not positive
            InvalidTokenPair: If either token is unknown
            NoRouteFound: If the tokens are not connected
            NoShardsAvailable: If a hop has no admissible shard
        """
        if amount_out <= 0:
            raise InvalidSwapAmount(f"Output amount must be positive, got {amount_out}")
        source, destination, path = self._resolve(token_in, token_out)

        hops: list[HopQuote] = []
        needed = amount_out
        for i in range(len(path) - 2, -1, -1):
            selection = best_shard(
                needed,
                self.graph.shards_for(path[i], path[i + 1]),
                path[i],
                c_scale=self.c_scale,
            )
            shard = selection.shard
            hops.append(
                HopQuote(
                    shard=shard,
                    token_in=shard.get_token(path[i]),
                    token_out=shard.get_token(path[i + 1]),
                    quote=selection.quote,
                )
            )
            needed = selection.quote.total_input

        hops.reverse()
        route = Route(token_in=source, token_out=destination, hops=tuple(hops))
        self._log_route(route, "exact_output")
        return route

    @staticmethod
    def _log_route(route: Route, kind: str) -> None:
        logger.info(
            "route_selected",
            kind=kind,
            path="->".join(route.symbols),
            shards=[hop.shard.label for hop in route.hops],
            amount_in=route.amount_in,
            amount_out=route.amount_out,
            total_fee_normalized=route.total_fee_normalized,
        )


def multi_hop(amount_in: int, token_in: str, token_out: str, graph: PairGraph) -> Route:
    """Exact-input route with default settings."""
    return MultiHopRouter(graph).route_exact_input(amount_in, token_in, token_out)


def multi_hop_exact_output(
    amount_out: int, token_in: str, token_out: str, graph: PairGraph
) -> Route:
    """Exact-output route with default settings."""
    return MultiHopRouter(graph).route_exact_output(amount_out, token_in, token_out)


__all__ = ["MultiHopRouter", "multi_hop", "multi_hop_exact_output"]
