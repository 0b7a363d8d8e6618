"""Factory functions for creating test objects.

Usage:
    from tests.helpers import make_shard
    # or
    from tests.helpers.factories import make_shard, make_pool

    shard = make_shard(reserve_a=1_000_000, reserve_b=1_000_000)
"""

from samm.constants import DEFAULT_C
from samm.models.pool import PoolState, SAMMParameters, ShardDescriptor, Token
from tests.helpers.constants import (
    DAI,
    TOKEN_A,
    TOKEN_B,
    TOKEN_DECIMALS,
    TOKEN_SYMBOLS,
    USDC,
    USDT,
)

# Global counter for unique shard addresses
_shard_counter = 0


def make_token(
    address: str = TOKEN_A, symbol: str | None = None, decimals: int | None = None
) -> Token:
    """Create a token, looking up known symbols and decimals."""
    address = address.lower()
    if symbol is None:
        symbol = TOKEN_SYMBOLS.get(address, address[2:6].upper())
    if decimals is None:
        decimals = TOKEN_DECIMALS.get(address, 18)
    return Token(address=address, symbol=symbol, decimals=decimals)


def make_shard(
    reserve_a: int = 1_000_000,
    reserve_b: int | None = None,
    token_a: str = TOKEN_A,
    token_b: str = TOKEN_B,
    address: str | None = None,
    name: str = "",
    c: int = DEFAULT_C,
    trade_fee_numerator: int = 25,
    trade_fee_denominator: int = 10_000,
    owner_fee_numerator: int = 0,
    owner_fee_denominator: int = 1,
) -> ShardDescriptor:
    """Create a test shard with sensible defaults.

    Args:
        reserve_a: Reserve of token_a (raw units)
        reserve_b: Reserve of token_b (default: same as reserve_a)
        token_a: First token address (default: TOKEN_A)
        token_b: Second token address (default: TOKEN_B)
        address: Shard address (default: auto-generated, unique)
        name: Shard name
        c: c-threshold parameter, scaled by 1e6

    Returns:
        ShardDescriptor ready for testing
    """
    global _shard_counter
    if address is None:
        _shard_counter += 1
        address = f"0x{_shard_counter:040x}"
    if reserve_b is None:
        reserve_b = reserve_a

    first = make_token(token_a)
    second = make_token(token_b)
    return ShardDescriptor(
        address=address,
        pair_name=f"{first.symbol}/{second.symbol}",
        token_a=first,
        token_b=second,
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        trade_fee_numerator=trade_fee_numerator,
        trade_fee_denominator=trade_fee_denominator,
        owner_fee_numerator=owner_fee_numerator,
        owner_fee_denominator=owner_fee_denominator,
        params=SAMMParameters(c=c),
        name=name,
    )


def make_pool(
    reserve_source: int = 1_000_000,
    reserve_destination: int | None = None,
    trade_fee_numerator: int = 25,
    trade_fee_denominator: int = 10_000,
    owner_fee_numerator: int = 0,
    owner_fee_denominator: int = 1,
) -> PoolState:
    """Create an oriented pool snapshot (destination defaults to the source reserve)."""
    if reserve_destination is None:
        reserve_destination = reserve_source
    return PoolState(
        reserve_source=reserve_source,
        reserve_destination=reserve_destination,
        trade_fee_numerator=trade_fee_numerator,
        trade_fee_denominator=trade_fee_denominator,
        owner_fee_numerator=owner_fee_numerator,
        owner_fee_denominator=owner_fee_denominator,
    )


def make_stablecoin_shards(whole_tokens: int = 1_000_000) -> list[ShardDescriptor]:
    """One USDC/USDT shard and one USDT/DAI shard, each side holding ``whole_tokens``.

    Reserves are scaled by each token's own decimals, so USDC -> USDT -> DAI
    exercises a 6 -> 6 -> 18 decimal route.
    """
    return [
        make_shard(
            reserve_a=whole_tokens * 10**6,
            reserve_b=whole_tokens * 10**6,
            token_a=USDC,
            token_b=USDT,
            name="USDC/USDT-1",
        ),
        make_shard(
            reserve_a=whole_tokens * 10**6,
            reserve_b=whole_tokens * 10**18,
            token_a=USDT,
            token_b=DAI,
            name="USDT/DAI-1",
        ),
    ]
