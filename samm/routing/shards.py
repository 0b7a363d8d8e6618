"""Shard admission and best-shard selection.

Shards of one pair are independent reserve pairs. A trade may only be
quoted on a shard when its output is at most ``c`` times the shard's
destination reserve (the c-threshold). Among admissible shards, the one
with the lowest total input wins; within the threshold this is the
smallest shard ("c-smaller-better"), and a whole trade on one shard
beats the same trade split over two ("c-non-splitting").
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import structlog

from samm.amm.quoter import calculate_swap, max_output_for_input
from samm.constants import C_SCALE
from samm.errors import ExceedsCThreshold, NoShardsAvailable, SAMMError
from samm.models.pool import ShardDescriptor
from samm.routing.types import ShardCandidate, ShardSelection

logger = structlog.get_logger()


def validate_c_threshold(output_amount: int, reserve: int, c: int, scale: int = C_SCALE) -> bool:
    """Check ``output_amount / reserve <= c / scale`` without division.

    A trade exactly at the threshold is admissible.
    """
    return output_amount * scale <= reserve * c


def require_c_threshold(output_amount: int, reserve: int, c: int, scale: int = C_SCALE) -> None:
    """Raise ExceedsCThreshold unless the trade is admissible."""
    if not validate_c_threshold(output_amount, reserve, c, scale):
        raise ExceedsCThreshold(output_amount, reserve, c)


def _rejection_reason(err: SAMMError) -> str:
    return f"{type(err).__name__}: {err}"


def best_shard(
    output_amount: int,
    shards: Sequence[ShardDescriptor],
    token_in: str,
    *,
    c_scale: int = C_SCALE,
) -> ShardSelection:
    """Pick the shard that delivers ``output_amount`` for the least input.

    Shards over the c-threshold or failing to quote are skipped; the rest
    are ranked by ascending total input. The sort is stable, so on an exact
    tie the shard listed first wins.

    Args:
        output_amount: Exact output requested
        shards: Shards of one pair
        token_in: Token the trader pays with
        c_scale: Fixed-point scale of the shards' ``c`` parameter

    Returns:
        ShardSelection with every admissible shard in rank order

    Raises:
        NoShardsAvailable: If no shard can quote the trade
    """
    candidates: list[ShardCandidate] = []
    skipped: list[tuple[str, str]] = []

    for shard in shards:
        try:
            pool = shard.pool_state(token_in)
            require_c_threshold(output_amount, pool.reserve_destination, shard.params.c, c_scale)
            quote = calculate_swap(output_amount, pool)
        except SAMMError as err:
            logger.debug(
                "shard_skipped",
                shard=shard.label,
                output_amount=output_amount,
                reason=type(err).__name__,
            )
            skipped.append((shard.address, _rejection_reason(err)))
            continue
        candidates.append(ShardCandidate(shard=shard, quote=quote))

    if not candidates:
        raise NoShardsAvailable(
            f"No shard can deliver {output_amount} (tried {len(skipped)}): "
            + "; ".join(reason for _, reason in skipped)
        )

    candidates.sort(key=lambda candidate: candidate.quote.total_input)
    return ShardSelection(candidates=tuple(candidates), skipped=tuple(skipped))


def best_shard_for_input(
    amount_in: int,
    shards: Sequence[ShardDescriptor],
    token_in: str,
    *,
    c_scale: int = C_SCALE,
) -> ShardSelection:
    """Pick the shard that gives the most output for ``amount_in``.

    Exact-input counterpart of best_shard. The c-threshold is checked on
    the output each shard would pay. Ranked by descending output, stable.

    Raises:
        NoShardsAvailable: If no shard can quote the trade
    """
    candidates: list[ShardCandidate] = []
    skipped: list[tuple[str, str]] = []

    for shard in shards:
        try:
            pool = shard.pool_state(token_in)
            quote = max_output_for_input(amount_in, pool)
            require_c_threshold(
                quote.output_amount, pool.reserve_destination, shard.params.c, c_scale
            )
        except SAMMError as err:
            logger.debug(
                "shard_skipped",
                shard=shard.label,
                amount_in=amount_in,
                reason=type(err).__name__,
            )
            skipped.append((shard.address, _rejection_reason(err)))
            continue
        candidates.append(ShardCandidate(shard=shard, quote=quote))

    if not candidates:
        raise NoShardsAvailable(
            f"No shard can take input {amount_in} (tried {len(skipped)}): "
            + "; ".join(reason for _, reason in skipped)
        )

    candidates.sort(key=lambda candidate: -candidate.quote.output_amount)
    return ShardSelection(candidates=tuple(candidates), skipped=tuple(skipped))


def sort_shards_by_size(shards: Iterable[ShardDescriptor], token: str) -> list[ShardDescriptor]:
    """Sort shards by their reserve of ``token``, smallest first (stable)."""
    return sorted(shards, key=lambda shard: _reserve_of(shard, token))


@dataclass(frozen=True)
class ShardSizeStatistics:
    """Distribution of one token's reserves across a pair's shards."""

    total_shards: int
    min_reserve: int
    max_reserve: int
    avg_reserve: int
    median_reserve: int
    smallest_shards_count: int


def shard_size_statistics(shards: Sequence[ShardDescriptor], token: str) -> ShardSizeStatistics:
    """Summarize the reserve sizes of ``token`` across shards.

    The median is the upper median for an even shard count.
    """
    if not shards:
        return ShardSizeStatistics(0, 0, 0, 0, 0, 0)

    reserves = sorted(_reserve_of(shard, token) for shard in shards)
    min_reserve = reserves[0]
    return ShardSizeStatistics(
        total_shards=len(reserves),
        min_reserve=min_reserve,
        max_reserve=reserves[-1],
        avg_reserve=sum(reserves) // len(reserves),
        median_reserve=reserves[len(reserves) // 2],
        smallest_shards_count=sum(1 for reserve in reserves if reserve == min_reserve),
    )


def _reserve_of(shard: ShardDescriptor, token: str) -> int:
    reserve_token, _ = shard.get_reserves(token)
    return reserve_token


__all__ = [
    "validate_c_threshold",
    "require_c_threshold",
    "best_shard",
    "best_shard_for_input",
    "sort_shards_by_size",
    "ShardSizeStatistics",
    "shard_size_statistics",
]
