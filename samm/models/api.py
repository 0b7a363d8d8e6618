"""Pydantic models for the quote API requests and responses.

Amounts travel as decimal strings (uint256 can exceed JSON number
precision). Tokens may be given by address or by deployment symbol.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from samm.amm import fees
from samm.models.pool import ShardDescriptor
from samm.models.quote import SwapQuote
from samm.models.types import Address, Uint256
from samm.routing.shards import ShardSizeStatistics
from samm.routing.types import HopQuote, Route, ShardCandidate, ShardSelection


# --- Requests ---


class QuoteRequest(BaseModel):
    """Quote an exact output on one shard."""

    shard_address: Address = Field(alias="shardAddress")
    token_in: str = Field(alias="tokenIn", min_length=1)
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class BestShardRequest(BaseModel):
    """Find the cheapest shard for an exact output."""

    token_in: str = Field(alias="tokenIn", min_length=1)
    token_out: str = Field(alias="tokenOut", min_length=1)
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class MultiHopRequest(BaseModel):
    """Route between two tokens, fixing either the input or the output."""

    token_in: str = Field(alias="tokenIn", min_length=1)
    token_out: str = Field(alias="tokenOut", min_length=1)
    amount_in: Uint256 | None = Field(default=None, alias="amountIn")
    amount_out: Uint256 | None = Field(default=None, alias="amountOut")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def exactly_one_amount(self) -> MultiHopRequest:
        if (self.amount_in is None) == (self.amount_out is None):
            raise ValueError("Provide exactly one of amountIn or amountOut")
        return self


class ExecuteRequest(BaseModel):
    """Settle an exact-output swap with a slippage ceiling."""

    token_in: str = Field(alias="tokenIn", min_length=1)
    token_out: str = Field(alias="tokenOut", min_length=1)
    amount_out: Uint256 = Field(alias="amountOut")
    maximal_amount_in: Uint256 = Field(alias="maximalAmountIn")
    recipient: Address
    shard_address: Address | None = Field(default=None, alias="shardAddress")

    model_config = {"populate_by_name": True}


# --- Responses ---


class QuoteModel(BaseModel):
    """Breakdown of one output-specified quote, amounts in source-token units."""

    output_amount: Uint256 = Field(alias="outputAmount")
    required_input_amount: Uint256 = Field(alias="requiredInputAmount")
    trade_fee: Uint256 = Field(alias="tradeFee")
    owner_fee: Uint256 = Field(alias="ownerFee")
    total_input: Uint256 = Field(alias="totalInput")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_quote(cls, quote: SwapQuote) -> QuoteModel:
        return cls(
            output_amount=quote.output_amount,
            required_input_amount=quote.required_input_amount,
            trade_fee=quote.trade_fee,
            owner_fee=quote.owner_fee,
            total_input=quote.total_input,
        )


class ShardInfo(BaseModel):
    """Public view of one shard."""

    address: Address
    name: str
    pair: str
    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")
    reserve_a: Uint256 = Field(alias="reserveA")
    reserve_b: Uint256 = Field(alias="reserveB")
    liquidity: int
    trade_fee_numerator: int = Field(alias="tradeFeeNumerator")
    trade_fee_denominator: int = Field(alias="tradeFeeDenominator")
    owner_fee_numerator: int = Field(alias="ownerFeeNumerator")
    owner_fee_denominator: int = Field(alias="ownerFeeDenominator")
    params: dict[str, int]

    model_config = {"populate_by_name": True}

    @classmethod
    def from_shard(cls, shard: ShardDescriptor) -> ShardInfo:
        return cls(
            address=shard.address,
            name=shard.label,
            pair=shard.pair_name,
            token_a=shard.token_a.address,
            token_b=shard.token_b.address,
            reserve_a=shard.reserve_a,
            reserve_b=shard.reserve_b,
            liquidity=shard.size_metric,
            trade_fee_numerator=shard.trade_fee_numerator,
            trade_fee_denominator=shard.trade_fee_denominator,
            owner_fee_numerator=shard.owner_fee_numerator,
            owner_fee_denominator=shard.owner_fee_denominator,
            params={
                "beta1": shard.params.beta1,
                "rmin": shard.params.rmin,
                "rmax": shard.params.rmax,
                "c": shard.params.c,
            },
        )


class ShardStatisticsModel(BaseModel):
    total_shards: int = Field(alias="totalShards")
    min_reserve: Uint256 = Field(alias="minReserve")
    max_reserve: Uint256 = Field(alias="maxReserve")
    avg_reserve: Uint256 = Field(alias="avgReserve")
    median_reserve: Uint256 = Field(alias="medianReserve")
    smallest_shards_count: int = Field(alias="smallestShardsCount")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_statistics(cls, stats: ShardSizeStatistics) -> ShardStatisticsModel:
        return cls(
            total_shards=stats.total_shards,
            min_reserve=stats.min_reserve,
            max_reserve=stats.max_reserve,
            avg_reserve=stats.avg_reserve,
            median_reserve=stats.median_reserve,
            smallest_shards_count=stats.smallest_shards_count,
        )


class PairShards(BaseModel):
    """Shards of one pair, smallest first, with their size statistics."""

    shards: list[ShardInfo]
    statistics: ShardStatisticsModel


class ShardsResponse(BaseModel):
    pairs: dict[str, PairShards]
    total_shards: int = Field(alias="totalShards")

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    shard: ShardInfo
    quote: QuoteModel
    fee_rate_bps: int = Field(alias="feeRateBps")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_quote(cls, shard: ShardDescriptor, quote: SwapQuote) -> QuoteResponse:
        return cls(
            shard=ShardInfo.from_shard(shard),
            quote=QuoteModel.from_quote(quote),
            fee_rate_bps=fees.fee_rate_bps(quote.trade_fee, quote.output_amount),
        )


class ShardQuote(BaseModel):
    """One ranked candidate of a best-shard selection."""

    address: Address
    name: str
    quote: QuoteModel

    @classmethod
    def from_candidate(cls, candidate: ShardCandidate) -> ShardQuote:
        return cls(
            address=candidate.shard.address,
            name=candidate.shard.label,
            quote=QuoteModel.from_quote(candidate.quote),
        )


class SkippedShard(BaseModel):
    address: Address
    reason: str


class BestShardResponse(BaseModel):
    best_shard: ShardQuote = Field(alias="bestShard")
    candidates: list[ShardQuote]
    skipped: list[SkippedShard]

    model_config = {"populate_by_name": True}

    @classmethod
    def from_selection(cls, selection: ShardSelection) -> BestShardResponse:
        candidates = [ShardQuote.from_candidate(c) for c in selection.candidates]
        return cls(
            best_shard=candidates[0],
            candidates=candidates,
            skipped=[SkippedShard(address=a, reason=r) for a, r in selection.skipped],
        )


class HopModel(BaseModel):
    shard_address: Address = Field(alias="shardAddress")
    shard_name: str = Field(alias="shardName")
    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")
    trade_fee: Uint256 = Field(alias="tradeFee")
    owner_fee: Uint256 = Field(alias="ownerFee")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_hop(cls, hop: HopQuote) -> HopModel:
        return cls(
            shard_address=hop.shard.address,
            shard_name=hop.shard.label,
            token_in=hop.token_in.address,
            token_out=hop.token_out.address,
            amount_in=hop.amount_in,
            amount_out=hop.amount_out,
            trade_fee=hop.quote.trade_fee,
            owner_fee=hop.quote.owner_fee,
        )


class RouteResponse(BaseModel):
    path: list[Address]
    symbols: list[str]
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")
    is_multi_hop: bool = Field(alias="isMultiHop")
    hops: list[HopModel]
    total_trade_fee_normalized: Uint256 = Field(
        alias="totalTradeFeeNormalized",
        description="Sum of hop trade fees, each rescaled to 18 decimals",
    )
    total_fee_normalized: Uint256 = Field(alias="totalFeeNormalized")
    rate: str = Field(description="Output tokens per input token, in whole-token units")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_route(cls, route: Route) -> RouteResponse:
        return cls(
            path=route.path,
            symbols=route.symbols,
            amount_in=route.amount_in,
            amount_out=route.amount_out,
            is_multi_hop=route.is_multihop,
            hops=[HopModel.from_hop(hop) for hop in route.hops],
            total_trade_fee_normalized=route.total_trade_fee_normalized,
            total_fee_normalized=route.total_fee_normalized,
            rate=str(route.rate),
        )


class Calldata(BaseModel):
    """swapSAMM call for the shard contract."""

    to: Address
    data: str


class ExecuteResponse(BaseModel):
    shard_address: Address = Field(alias="shardAddress")
    quote: QuoteModel
    calldata: Calldata

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    error: str
    detail: Any = None


__all__ = [
    "QuoteRequest",
    "BestShardRequest",
    "MultiHopRequest",
    "ExecuteRequest",
    "QuoteModel",
    "ShardInfo",
    "ShardStatisticsModel",
    "PairShards",
    "ShardsResponse",
    "QuoteResponse",
    "ShardQuote",
    "SkippedShard",
    "BestShardResponse",
    "HopModel",
    "RouteResponse",
    "Calldata",
    "ExecuteResponse",
    "ErrorResponse",
]
