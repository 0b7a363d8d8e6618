"""API endpoints for the SAMM quote service."""

import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

import structlog
from fastapi import APIRouter, Depends, HTTPException

from samm.amm.quoter import samm_encoder
from samm.config import Deployment, get_default_deployment
from samm.errors import SAMMError
from samm.models.api import (
    BestShardRequest,
    BestShardResponse,
    Calldata,
    ExecuteRequest,
    ExecuteResponse,
    MultiHopRequest,
    PairShards,
    QuoteModel,
    QuoteRequest,
    QuoteResponse,
    RouteResponse,
    ShardInfo,
    ShardsResponse,
    ShardStatisticsModel,
)
from samm.routing.router import ShardRouter
from samm.sources import InMemoryLedger

logger = structlog.get_logger()

router = APIRouter(prefix="/api")

T = TypeVar("T")


def _create_default_router() -> tuple[Deployment, ShardRouter]:
    """Build the deployment and a router backed by an in-memory ledger.

    The deployment comes from SAMM_DEPLOYMENT_FILE when set, otherwise the
    built-in testnet deployment is used.
    """
    deployment = get_default_deployment()
    ledger = InMemoryLedger.from_deployment(deployment)
    logger.info(
        "router_initialized",
        network=deployment.network,
        pairs=len(deployment.pair_names),
        shards=len(deployment.shards),
    )
    return deployment, ShardRouter(ledger, executor=ledger)


default_deployment, default_router = _create_default_router()


def get_router() -> ShardRouter:
    """Dependency provider for the shard router.

    Override this in tests to inject a router over a custom ledger:
        app.dependency_overrides[get_router] = lambda: test_router
    """
    return default_router


def get_deployment() -> Deployment:
    """Dependency provider for the deployment metadata."""
    return default_deployment


async def _run_routing(operation: str, func: Callable[..., T], *args: Any) -> T:
    """Run a blocking routing call in the default executor.

    SAMMError propagates to the app's error handler; anything else is
    logged with its traceback and re-raised.
    """
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, func, *args)
    except SAMMError as err:
        logger.warning(
            "routing_failed",
            operation=operation,
            error=type(err).__name__,
            detail=str(err),
        )
        raise
    except Exception:
        logger.exception("routing_error", operation=operation)
        raise


@router.get("/deployment")
async def deployment_info(deployment: Deployment = Depends(get_deployment)) -> dict[str, Any]:
    """Deployment configuration: network, tokens and shards by pair."""
    return deployment.to_dict()


@router.get("/shards")
async def list_shards(shard_router: ShardRouter = Depends(get_router)) -> ShardsResponse:
    """Current shards of every pair, smallest first, with size statistics."""
    graph = shard_router.graph()
    pairs = {
        pair_name: PairShards(
            shards=[ShardInfo.from_shard(s) for s in shard_router.pair_shards(pair_name)],
            statistics=ShardStatisticsModel.from_statistics(
                shard_router.shard_statistics(pair_name)
            ),
        )
        for pair_name in graph.pair_names
    }
    return ShardsResponse(pairs=pairs, total_shards=len(graph.shards))


@router.get("/shard/{address}")
async def shard_info(address: str, shard_router: ShardRouter = Depends(get_router)) -> ShardInfo:
    """Current state of one shard."""
    shard = shard_router.graph().find_shard(address)
    if shard is None:
        raise HTTPException(status_code=404, detail=f"Shard not found: {address}")
    return ShardInfo.from_shard(shard)


@router.post("/swap/quote")
async def quote_swap(
    request: QuoteRequest, shard_router: ShardRouter = Depends(get_router)
) -> QuoteResponse:
    """Quote an exact output on one shard."""
    shard, quote = await _run_routing(
        "quote",
        shard_router.quote,
        int(request.amount_out),
        request.token_in,
        request.shard_address,
    )
    return QuoteResponse.from_quote(shard, quote)


@router.post("/swap/best-shard")
async def best_shard(
    request: BestShardRequest, shard_router: ShardRouter = Depends(get_router)
) -> BestShardResponse:
    """Rank the shards of a pair for an exact output."""
    selection = await _run_routing(
        "best_shard",
        shard_router.best_shard,
        int(request.amount_out),
        request.token_in,
        request.token_out,
    )
    return BestShardResponse.from_selection(selection)


@router.post("/swap/multi-hop")
async def multi_hop(
    request: MultiHopRequest, shard_router: ShardRouter = Depends(get_router)
) -> RouteResponse:
    """Route between two tokens, directly or through one intermediate token."""
    if request.amount_out is not None:
        route = await _run_routing(
            "multi_hop_exact_output",
            shard_router.multi_hop_exact_output,
            int(request.amount_out),
            request.token_in,
            request.token_out,
        )
    else:
        route = await _run_routing(
            "multi_hop",
            shard_router.multi_hop,
            int(request.amount_in or 0),
            request.token_in,
            request.token_out,
        )
    return RouteResponse.from_route(route)


@router.post("/swap/execute")
async def execute_swap(
    request: ExecuteRequest, shard_router: ShardRouter = Depends(get_router)
) -> ExecuteResponse:
    """Settle an exact-output swap and return the matching swapSAMM calldata."""
    shard, quote = await _run_routing(
        "execute",
        shard_router.execute,
        int(request.amount_out),
        int(request.maximal_amount_in),
        request.token_in,
        request.token_out,
        request.recipient,
        request.shard_address,
    )

    token_in = shard.get_token(shard_router.graph().get_token(request.token_in).address)
    token_out = shard.get_token_out(token_in.address)
    to, data = samm_encoder.encode_swap_samm(
        shard.address,
        token_in.address,
        token_out.address,
        quote.output_amount,
        int(request.maximal_amount_in),
        request.recipient,
    )
    logger.info(
        "swap_executed",
        shard=shard.label,
        output_amount=quote.output_amount,
        total_input=quote.total_input,
    )
    return ExecuteResponse(
        shard_address=shard.address,
        quote=QuoteModel.from_quote(quote),
        calldata=Calldata(to=to, data=data),
    )
