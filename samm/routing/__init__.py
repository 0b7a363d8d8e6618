"""Shard selection and multi-hop routing.

Module structure:
- shards.py: c-threshold checks, best-shard selection, shard statistics
- pathfinding.py: PairGraph of tokens, pairs and shards
- multihop.py: MultiHopRouter composing per-hop selections into routes
- router.py: ShardRouter facade over a reserve source
- types.py: HopQuote, ShardSelection and Route dataclasses
"""

from samm.routing.multihop import MultiHopRouter, multi_hop, multi_hop_exact_output
from samm.routing.pathfinding import PairGraph
from samm.routing.router import ShardRouter
from samm.routing.shards import (
    ShardSizeStatistics,
    best_shard,
    best_shard_for_input,
    require_c_threshold,
    shard_size_statistics,
    sort_shards_by_size,
    validate_c_threshold,
)
from samm.routing.types import HopQuote, Route, ShardCandidate, ShardSelection

__all__ = [
    "HopQuote",
    "MultiHopRouter",
    "PairGraph",
    "Route",
    "ShardCandidate",
    "ShardRouter",
    "ShardSelection",
    "ShardSizeStatistics",
    "best_shard",
    "best_shard_for_input",
    "multi_hop",
    "multi_hop_exact_output",
    "require_c_threshold",
    "shard_size_statistics",
    "sort_shards_by_size",
    "validate_c_threshold",
]
