"""Data models for SAMM pools, quotes and API payloads."""

from samm.models.pool import PoolState, SAMMParameters, ShardDescriptor, Token
from samm.models.quote import SwapQuote
from samm.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    "Address",
    "PoolState",
    "SAMMParameters",
    "ShardDescriptor",
    "SwapQuote",
    "Token",
    "Uint256",
    "is_valid_address",
    "normalize_address",
]
