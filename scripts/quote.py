"""Quote SAMM trades from the command line.

Amounts are given in whole tokens (e.g. ``100`` or ``0.5``) and converted
with the token's decimals from the deployment.

Usage:
    python -m scripts.quote shards
    python -m scripts.quote best-shard --token-in USDC --token-out USDT --amount-out 100
    python -m scripts.quote multi-hop --token-in USDC --token-out DAI --amount-in 100
    python -m scripts.quote multi-hop --token-in USDC --token-out DAI --amount-out 50
"""

import argparse
import decimal
import sys
from decimal import Decimal
from pathlib import Path

import structlog

from samm.config import Deployment, get_default_deployment, load_deployment
from samm.errors import SAMMError
from samm.models.pool import Token
from samm.routing.router import ShardRouter
from samm.routing.types import Route
from samm.sources import StaticReserveSource
from samm.units import DECIMAL_HIGH_PREC_CONTEXT, to_units

logger = structlog.get_logger()


def parse_amount(text: str, token: Token) -> int:
    """Convert a whole-token amount to raw units, rejecting excess precision."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        try:
            raw = Decimal(text) * (Decimal(10) ** token.decimals)
        except decimal.InvalidOperation as err:
            raise ValueError(f"Not a number: {text}") from err
        if raw != raw.to_integral_value():
            raise ValueError(f"{text} has more than {token.decimals} decimals for {token.symbol}")
        if raw <= 0:
            raise ValueError(f"Amount must be positive, got {text}")
        return int(raw)


def print_route(route: Route) -> None:
    print(f"Route: {' -> '.join(route.symbols)}")
    for i, hop in enumerate(route.hops, start=1):
        print(
            f"  hop {i}: {hop.shard.label} "
            f"{to_units(hop.amount_in, hop.token_in.decimals)} {hop.token_in.symbol} -> "
            f"{to_units(hop.amount_out, hop.token_out.decimals)} {hop.token_out.symbol} "
            f"(trade fee {to_units(hop.quote.trade_fee, hop.token_in.decimals)})"
        )
    print(f"  in:   {to_units(route.amount_in, route.token_in.decimals)} {route.token_in.symbol}")
    print(f"  out:  {to_units(route.amount_out, route.token_out.decimals)} {route.token_out.symbol}")
    print(f"  rate: {route.rate}")
    print(f"  fees (18 decimals): {route.total_fee_normalized}")


def run_command(args: argparse.Namespace, deployment: Deployment) -> None:
    router = ShardRouter(StaticReserveSource(deployment))
    graph = router.graph()

    if args.command == "shards":
        for pair_name in graph.pair_names:
            stats = router.shard_statistics(pair_name)
            print(f"{pair_name}: {stats.total_shards} shards, median reserve {stats.median_reserve}")
            for shard in router.pair_shards(pair_name):
                print(f"  {shard.label} {shard.address} {shard.reserve_a}/{shard.reserve_b}")
        return

    token_in = graph.get_token(args.token_in)
    token_out = graph.get_token(args.token_out)

    if args.command == "best-shard":
        amount_out = parse_amount(args.amount_out, token_out)
        selection = router.best_shard(amount_out, token_in.address, token_out.address)
        for rank, candidate in enumerate(selection.candidates, start=1):
            print(
                f"{rank}. {candidate.shard.label}: pay "
                f"{to_units(candidate.quote.total_input, token_in.decimals)} {token_in.symbol} "
                f"(fee {to_units(candidate.quote.trade_fee, token_in.decimals)})"
            )
        for address, reason in selection.skipped:
            print(f"   skipped {address}: {reason}")
        return

    if args.amount_in is not None:
        route = router.multi_hop(
            parse_amount(args.amount_in, token_in), token_in.address, token_out.address
        )
    else:
        route = router.multi_hop_exact_output(
            parse_amount(args.amount_out, token_out), token_in.address, token_out.address
        )
    print_route(route)


def main() -> None:
    """Entry point for the quote script."""
    parser = argparse.ArgumentParser(description="Quote trades against a SAMM deployment")
    parser.add_argument(
        "--deployment",
        type=Path,
        default=None,
        help="Deployment JSON file (default: SAMM_DEPLOYMENT_FILE or the built-in deployment)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("shards", help="List shards and size statistics")

    best = subparsers.add_parser("best-shard", help="Rank shards for an exact output")
    best.add_argument("--token-in", required=True, help="Input token symbol or address")
    best.add_argument("--token-out", required=True, help="Output token symbol or address")
    best.add_argument("--amount-out", required=True, help="Output amount in whole tokens")

    hop = subparsers.add_parser("multi-hop", help="Route through at most one intermediate")
    hop.add_argument("--token-in", required=True, help="Input token symbol or address")
    hop.add_argument("--token-out", required=True, help="Output token symbol or address")
    amounts = hop.add_mutually_exclusive_group(required=True)
    amounts.add_argument("--amount-in", help="Input amount in whole tokens")
    amounts.add_argument("--amount-out", help="Output amount in whole tokens")

    args = parser.parse_args()

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ]
    )

    try:
        deployment = (
            load_deployment(args.deployment) if args.deployment else get_default_deployment()
        )
        run_command(args, deployment)
    except (SAMMError, ValueError) as err:
        logger.error("quote_failed", error=type(err).__name__, detail=str(err))
        sys.exit(1)


if __name__ == "__main__":
    main()
