"""Reserve sources and settlement executors.

The quote engine itself does no I/O. It reads shard snapshots from a
ReserveSource and hands executions to a SettlementExecutor. Both are
protocols; the in-memory implementations here back the API and the tests.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from collections.abc import Iterable
from typing import Protocol

import structlog

from samm.amm.quoter import execute_swap
from samm.config import Deployment
from samm.errors import InvalidTokenPair, SourceUnavailable
from samm.models.pool import ShardDescriptor
from samm.models.quote import SwapQuote
from samm.models.types import normalize_address

logger = structlog.get_logger()


class ReserveSource(Protocol):
    """Read access to shard reserves and parameters.

    Snapshots may be stale. A failed read raises SourceUnavailable rather
    than returning defaults.
    """

    def read(self, address: str) -> ShardDescriptor: ...

    def shards(self) -> list[ShardDescriptor]: ...


class SettlementExecutor(Protocol):
    """Executes an output-specified swap on the ledger atomically."""

    def settle(
        self,
        output_amount: int,
        maximal_input_amount: int,
        token_in: str,
        token_out: str,
        shard_address: str,
        recipient: str,
    ) -> SwapQuote: ...


class StaticReserveSource:
    """Serves the reserves of a fixed deployment snapshot."""

    def __init__(self, deployment: Deployment) -> None:
        self._deployment = deployment
        self._by_address = {shard.address: shard for shard in deployment.shards}

    def read(self, address: str) -> ShardDescriptor:
        """Get one shard's snapshot.

        Raises:
            SourceUnavailable: If the address is not a known shard
        """
        shard = self._by_address.get(normalize_address(address))
        if shard is None:
            raise SourceUnavailable(f"No reserves for shard {address}")
        return shard

    def shards(self) -> list[ShardDescriptor]:
        return list(self._deployment.shards)


class InMemoryLedger:
    """Mutable ledger of shard reserves and recipient balances.

    Settlements are serialized by a lock, so each one re-quotes against the
    reserves left by the previous one. A quote obtained earlier is only
    advisory: the slippage ceiling passed to settle() is what protects the
    trader.
    """

    def __init__(self, shards: Iterable[ShardDescriptor]) -> None:
        self._shards: dict[str, ShardDescriptor] = {shard.address: shard for shard in shards}
        self._balances: defaultdict[tuple[str, str], int] = defaultdict(int)
        self._lock = threading.Lock()

    @classmethod
    def from_deployment(cls, deployment: Deployment) -> InMemoryLedger:
        return cls(deployment.shards)

    def read(self, address: str) -> ShardDescriptor:
        """Get one shard's current reserves.

        Raises:
            SourceUnavailable: If the address is not a known shard
        """
        with self._lock:
            return self._read_locked(address)

    def _read_locked(self, address: str) -> ShardDescriptor:
        shard = self._shards.get(normalize_address(address))
        if shard is None:
            raise SourceUnavailable(f"No reserves for shard {address}")
        return shard

    def shards(self) -> list[ShardDescriptor]:
        with self._lock:
            return list(self._shards.values())

    def balance_of(self, holder: str, token: str) -> int:
        """Amount of ``token`` credited to ``holder`` by settlements."""
        with self._lock:
            return self._balances[(normalize_address(holder), normalize_address(token))]

    def settle(
        self,
        output_amount: int,
        maximal_input_amount: int,
        token_in: str,
        token_out: str,
        shard_address: str,
        recipient: str,
    ) -> SwapQuote:
        """Execute a swap: re-quote, check the ceiling, then move balances.

        On success the destination reserve drops by exactly
        ``output_amount``, the source reserve grows by exactly the quote's
        total input, and the recipient is credited exactly ``output_amount``.
        On failure nothing changes.

        Raises:
            SourceUnavailable: If the shard is unknown
            InvalidTokenPair: If the tokens do not match the shard
            ExcessiveInputAmount: If the fresh quote exceeds maximal_input_amount
        """
        token_out_norm = normalize_address(token_out)
        recipient_norm = normalize_address(recipient)

        with self._lock:
            shard = self._read_locked(shard_address)
            if shard.get_token_out(token_in).address != token_out_norm:
                raise InvalidTokenPair(
                    f"Shard {shard.label} does not trade {token_in} for {token_out}"
                )

            pool = shard.pool_state(token_in)
            quote = execute_swap(output_amount, maximal_input_amount, pool)

            settled = pool.after_swap(quote)
            self._shards[shard.address] = shard.with_reserves(
                token_in, settled.reserve_source, settled.reserve_destination
            )
            self._balances[(recipient_norm, token_out_norm)] += output_amount

        logger.info(
            "swap_settled",
            shard=shard.label,
            output_amount=output_amount,
            total_input=quote.total_input,
            recipient=recipient_norm,
        )
        return quote


__all__ = [
    "ReserveSource",
    "SettlementExecutor",
    "StaticReserveSource",
    "InMemoryLedger",
]
