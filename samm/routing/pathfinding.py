"""Pair graph and path discovery for multi-hop routing.

The graph maps each token pair to its shards and keeps an adjacency list
of tokens connected by at least one shard. Paths are either direct or go
through exactly one intermediate token.
"""

from __future__ import annotations

from collections.abc import Iterable

from samm.errors import InvalidTokenPair
from samm.models.pool import ShardDescriptor, Token
from samm.models.types import is_valid_address, normalize_address


class PairGraph:
    """Graph of tokens connected by SAMM shards.

    Shards of a pair keep the order they were added in; that order is the
    tie-break when two shards quote identically. Intermediate tokens are
    tried in the order their tokens were first seen.
    """

    def __init__(self, shards: Iterable[ShardDescriptor] = ()) -> None:
        self._tokens: dict[str, Token] = {}
        self._symbols: dict[str, str] = {}
        self._pairs: dict[frozenset[str], list[ShardDescriptor]] = {}
        self._pair_names: dict[str, frozenset[str]] = {}
        self._shards: dict[str, ShardDescriptor] = {}
        self._adjacency: dict[str, set[str]] = {}
        # (token_in, token_out, max_hops) -> path or None
        self._path_cache: dict[tuple[str, str, int], list[str] | None] = {}
        for shard in shards:
            self.add_shard(shard)

    def add_shard(self, shard: ShardDescriptor) -> None:
        """Register a shard, replacing any shard with the same address."""
        if shard.address in self._shards:
            self._replace_shard(shard)
            return

        for token in (shard.token_a, shard.token_b):
            known = self._tokens.get(token.address)
            if known is not None and known.decimals != token.decimals:
                raise InvalidTokenPair(
                    f"Token {token.address} registered with {known.decimals} decimals, "
                    f"shard {shard.label} says {token.decimals}"
                )
            if known is None:
                self._tokens[token.address] = token
                self._symbols.setdefault(token.symbol.upper(), token.address)

        key = frozenset((shard.token_a.address, shard.token_b.address))
        self._pairs.setdefault(key, []).append(shard)
        self._pair_names.setdefault(shard.pair_name, key)
        self._shards[shard.address] = shard
        self._add_edge(shard.token_a.address, shard.token_b.address)
        self._path_cache.clear()

    def _replace_shard(self, shard: ShardDescriptor) -> None:
        old = self._shards[shard.address]
        key = frozenset((old.token_a.address, old.token_b.address))
        if key != frozenset((shard.token_a.address, shard.token_b.address)):
            raise InvalidTokenPair(f"Shard {shard.label} cannot change its token pair")
        self._pairs[key] = [shard if s.address == shard.address else s for s in self._pairs[key]]
        self._shards[shard.address] = shard

    def _add_edge(self, token_a: str, token_b: str) -> None:
        """Add a bidirectional edge between two tokens."""
        self._adjacency.setdefault(token_a, set()).add(token_b)
        self._adjacency.setdefault(token_b, set()).add(token_a)

    @property
    def tokens(self) -> list[Token]:
        return list(self._tokens.values())

    @property
    def pair_names(self) -> list[str]:
        return list(self._pair_names)

    @property
    def shards(self) -> list[ShardDescriptor]:
        """All shards, grouped by pair in registration order."""
        return [shard for pair in self._pairs.values() for shard in pair]

    @property
    def token_count(self) -> int:
        return len(self._tokens)

    def has_token(self, token: str) -> bool:
        return normalize_address(token) in self._tokens

    def get_token(self, token: str) -> Token:
        """Look up a token by address or symbol.

        Raises:
            InvalidTokenPair: If the token is unknown
        """
        key = normalize_address(token) if is_valid_address(token) else None
        if key is None:
            key = self._symbols.get(token.upper())
        if key is None or key not in self._tokens:
            raise InvalidTokenPair(f"Unknown token: {token}")
        return self._tokens[key]

    def get_neighbors(self, token: str) -> set[str]:
        """Tokens directly tradeable with ``token``."""
        return self._adjacency.get(normalize_address(token), set())

    def has_pair(self, token_a: str, token_b: str) -> bool:
        return frozenset((normalize_address(token_a), normalize_address(token_b))) in self._pairs

    def shards_for(self, token_a: str, token_b: str) -> list[ShardDescriptor]:
        """Shards trading ``token_a`` against ``token_b`` (empty if none)."""
        key = frozenset((normalize_address(token_a), normalize_address(token_b)))
        return list(self._pairs.get(key, ()))

    def shards_by_name(self, pair_name: str) -> list[ShardDescriptor]:
        """Shards of a pair by its configured name, e.g. ``"USDC/USDT"``."""
        key = self._pair_names.get(pair_name)
        if key is None:
            raise InvalidTokenPair(f"Unknown pair: {pair_name}")
        return list(self._pairs[key])

    def find_shard(self, address: str) -> ShardDescriptor | None:
        return self._shards.get(normalize_address(address))

    def find_intermediates(self, token_in: str, token_out: str) -> list[str]:
        """Tokens paired with both ``token_in`` and ``token_out``."""
        token_in_norm = normalize_address(token_in)
        token_out_norm = normalize_address(token_out)
        common = self.get_neighbors(token_in_norm) & self.get_neighbors(token_out_norm)
        common.discard(token_in_norm)
        common.discard(token_out_norm)
        # Registration order keeps the choice deterministic
        return [token for token in self._tokens if token in common]

    def find_path(self, token_in: str, token_out: str, max_hops: int = 2) -> list[str] | None:
        """Find the shortest path, direct or through one intermediate.

        Args:
            token_in: Starting token address
            token_out: Target token address
            max_hops: 1 for direct only, 2 to allow one intermediate

        Returns:
            Token addresses along the path, or None if not connected
        """
        token_in_norm = normalize_address(token_in)
        token_out_norm = normalize_address(token_out)

        cache_key = (token_in_norm, token_out_norm, max_hops)
        if cache_key in self._path_cache:
            return self._path_cache[cache_key]

        path: list[str] | None = None
        if self.has_pair(token_in_norm, token_out_norm):
            path = [token_in_norm, token_out_norm]
        elif max_hops >= 2:
            intermediates = self.find_intermediates(token_in_norm, token_out_norm)
            if intermediates:
                path = [token_in_norm, intermediates[0], token_out_norm]

        self._path_cache[cache_key] = path
        return path


__all__ = ["PairGraph"]
