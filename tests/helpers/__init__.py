"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Token addresses and common amounts
- factories: Token, shard and pool factory functions
"""

from tests.helpers.constants import (
    DAI,
    ONE,
    RECIPIENT,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    TOKEN_D,
    TOKEN_DECIMALS,
    USDC,
    USDT,
)
from tests.helpers.factories import make_pool, make_shard, make_stablecoin_shards, make_token

__all__ = [
    # Constants
    "USDC",
    "USDT",
    "DAI",
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "TOKEN_D",
    "TOKEN_DECIMALS",
    "RECIPIENT",
    "ONE",
    # Factories
    "make_token",
    "make_shard",
    "make_pool",
    "make_stablecoin_shards",
]
