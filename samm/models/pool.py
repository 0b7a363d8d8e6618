"""Pool snapshot types.

PoolState is the oriented view of one pool for one trade direction:
"source" is the side the trader pays into, "destination" the side the
trader receives from. ShardDescriptor is the unoriented record of one
shard as the ledger reports it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from samm.constants import (
    DEFAULT_BETA1,
    DEFAULT_C,
    DEFAULT_OWNER_FEE_DENOMINATOR,
    DEFAULT_OWNER_FEE_NUMERATOR,
    DEFAULT_RMAX,
    DEFAULT_RMIN,
    DEFAULT_TRADE_FEE_DENOMINATOR,
    DEFAULT_TRADE_FEE_NUMERATOR,
)
from samm.errors import InvalidTokenPair
from samm.models.quote import SwapQuote
from samm.models.types import normalize_address
from samm.safe_int import S


@dataclass(frozen=True)
class Token:
    """Token metadata."""

    address: str
    symbol: str
    decimals: int = 18

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", normalize_address(self.address))
        if not 0 <= self.decimals <= 77:
            raise ValueError(f"Token decimals out of range: {self.decimals}")


@dataclass(frozen=True)
class SAMMParameters:
    """Per-pool fee-curve configuration, scaled by C_SCALE.

    Only ``c`` is consulted by the router; the fee actually charged uses
    the pool's trade fee numerator/denominator (see samm.amm.fees).
    """

    beta1: int = DEFAULT_BETA1
    rmin: int = DEFAULT_RMIN
    rmax: int = DEFAULT_RMAX
    c: int = DEFAULT_C

    def __post_init__(self) -> None:
        if self.beta1 >= 0:
            raise ValueError(f"beta1 must be negative, got {self.beta1}")
        if self.rmin < 0 or self.rmax < self.rmin:
            raise ValueError(f"Invalid fee-rate bounds: rmin={self.rmin} rmax={self.rmax}")
        if self.c <= 0:
            raise ValueError(f"c must be positive, got {self.c}")


@dataclass(frozen=True)
class PoolState:
    """Pre-trade snapshot of one pool, oriented for a trade direction."""

    reserve_source: int
    reserve_destination: int
    trade_fee_numerator: int = DEFAULT_TRADE_FEE_NUMERATOR
    trade_fee_denominator: int = DEFAULT_TRADE_FEE_DENOMINATOR
    owner_fee_numerator: int = DEFAULT_OWNER_FEE_NUMERATOR
    owner_fee_denominator: int = DEFAULT_OWNER_FEE_DENOMINATOR

    @property
    def invariant(self) -> int:
        """Constant-product invariant K."""
        return self.reserve_source * self.reserve_destination

    def after_swap(self, quote: SwapQuote) -> PoolState:
        """Snapshot after ``quote`` settles: all input in, exact output out."""
        return replace(
            self,
            reserve_source=self.reserve_source + quote.total_input,
            reserve_destination=(S(self.reserve_destination) - quote.output_amount).value,
        )


@dataclass(frozen=True)
class ShardDescriptor:
    """One shard: an independent reserve pair for a token pair.

    Several shards may share a ``pair_name``. ``size_metric`` is only a
    comparison key (larger means a bigger shard).
    """

    address: str
    pair_name: str
    token_a: Token
    token_b: Token
    reserve_a: int
    reserve_b: int
    trade_fee_numerator: int = DEFAULT_TRADE_FEE_NUMERATOR
    trade_fee_denominator: int = DEFAULT_TRADE_FEE_DENOMINATOR
    owner_fee_numerator: int = DEFAULT_OWNER_FEE_NUMERATOR
    owner_fee_denominator: int = DEFAULT_OWNER_FEE_DENOMINATOR
    params: SAMMParameters = field(default_factory=SAMMParameters)
    size_metric: int = 0
    name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", normalize_address(self.address))
        if self.token_a.address == self.token_b.address:
            raise ValueError(f"Shard {self.address} pairs a token with itself")

    @property
    def label(self) -> str:
        """Human-readable shard name, falling back to the address."""
        return self.name or self.address

    def has_token(self, token: str) -> bool:
        token_norm = normalize_address(token)
        return token_norm in (self.token_a.address, self.token_b.address)

    def get_reserves(self, token_in: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        token_in_norm = normalize_address(token_in)
        if token_in_norm == self.token_a.address:
            return self.reserve_a, self.reserve_b
        if token_in_norm == self.token_b.address:
            return self.reserve_b, self.reserve_a
        raise InvalidTokenPair(f"Token {token_in} not in shard {self.label}")

    def get_token(self, address: str) -> Token:
        address_norm = normalize_address(address)
        if address_norm == self.token_a.address:
            return self.token_a
        if address_norm == self.token_b.address:
            return self.token_b
        raise InvalidTokenPair(f"Token {address} not in shard {self.label}")

    def get_token_out(self, token_in: str) -> Token:
        """Get the output token for a given input token."""
        token_in_norm = normalize_address(token_in)
        if token_in_norm == self.token_a.address:
            return self.token_b
        if token_in_norm == self.token_b.address:
            return self.token_a
        raise InvalidTokenPair(f"Token {token_in} not in shard {self.label}")

    def pool_state(self, token_in: str) -> PoolState:
        """Orient this shard's reserves for a trade paying ``token_in``."""
        reserve_in, reserve_out = self.get_reserves(token_in)
        return PoolState(
            reserve_source=reserve_in,
            reserve_destination=reserve_out,
            trade_fee_numerator=self.trade_fee_numerator,
            trade_fee_denominator=self.trade_fee_denominator,
            owner_fee_numerator=self.owner_fee_numerator,
            owner_fee_denominator=self.owner_fee_denominator,
        )

    def with_reserves(self, token_in: str, reserve_in: int, reserve_out: int) -> ShardDescriptor:
        """Return a copy with reserves replaced, given in trade orientation."""
        if normalize_address(token_in) == self.token_a.address:
            return replace(self, reserve_a=reserve_in, reserve_b=reserve_out)
        if normalize_address(token_in) == self.token_b.address:
            return replace(self, reserve_a=reserve_out, reserve_b=reserve_in)
        raise InvalidTokenPair(f"Token {token_in} not in shard {self.label}")


__all__ = ["Token", "SAMMParameters", "PoolState", "ShardDescriptor"]
