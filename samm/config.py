"""Deployment and router configuration.

A deployment (tokens, pairs and their shards) is loaded once into an
immutable Deployment and handed to the router at construction. The JSON
layout mirrors what the API's /api/deployment endpoint returns.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel, Field, ValidationError

from samm.constants import (
    C_SCALE,
    DEFAULT_BETA1,
    DEFAULT_C,
    DEFAULT_OWNER_FEE_DENOMINATOR,
    DEFAULT_OWNER_FEE_NUMERATOR,
    DEFAULT_RMAX,
    DEFAULT_RMIN,
    DEFAULT_TRADE_FEE_DENOMINATOR,
    DEFAULT_TRADE_FEE_NUMERATOR,
)
from samm.errors import ConfigurationError
from samm.models.pool import SAMMParameters, ShardDescriptor, Token
from samm.models.types import Address, Uint256

if TYPE_CHECKING:
    from samm.routing.pathfinding import PairGraph

logger = structlog.get_logger()

# Path to a deployment JSON file; the built-in deployment is used when unset
DEPLOYMENT_FILE_ENV = "SAMM_DEPLOYMENT_FILE"


@dataclass(frozen=True)
class RouterConfig:
    """Routing behavior settings.

    Attributes:
        c_scale: Fixed-point scale of the shards' ``c`` parameter (1e6 == 1.0)
        max_hops: 1 for direct routes only, 2 to allow one intermediate token
    """

    c_scale: int = C_SCALE
    max_hops: int = 2

    def __post_init__(self) -> None:
        if self.c_scale <= 0:
            raise ConfigurationError(f"c_scale must be positive, got {self.c_scale}")
        if self.max_hops not in (1, 2):
            raise ConfigurationError(f"max_hops must be 1 or 2, got {self.max_hops}")


DEFAULT_ROUTER_CONFIG = RouterConfig()


# --- JSON schema ---


class TokenModel(BaseModel):
    """Token entry of a deployment file."""

    address: Address
    decimals: int = Field(default=18, ge=0, le=77)


class SAMMParametersModel(BaseModel):
    """Fee-curve parameters of a shard, scaled by 1e6."""

    beta1: int = DEFAULT_BETA1
    rmin: int = DEFAULT_RMIN
    rmax: int = DEFAULT_RMAX
    c: int = DEFAULT_C


class ShardModel(BaseModel):
    """Shard entry of a deployment file.

    ``liquidity`` is in whole tokens and doubles as the size metric. When
    the raw reserves are omitted, each side holds ``liquidity`` whole
    tokens at that token's decimals.
    """

    model_config = {"populate_by_name": True}

    name: str = ""
    address: Address
    liquidity: int = Field(default=0, ge=0)
    reserve_a: Uint256 | None = Field(default=None, alias="reserveA")
    reserve_b: Uint256 | None = Field(default=None, alias="reserveB")
    trade_fee_numerator: int = Field(
        default=DEFAULT_TRADE_FEE_NUMERATOR, ge=0, alias="tradeFeeNumerator"
    )
    trade_fee_denominator: int = Field(
        default=DEFAULT_TRADE_FEE_DENOMINATOR, gt=0, alias="tradeFeeDenominator"
    )
    owner_fee_numerator: int = Field(
        default=DEFAULT_OWNER_FEE_NUMERATOR, ge=0, alias="ownerFeeNumerator"
    )
    owner_fee_denominator: int = Field(
        default=DEFAULT_OWNER_FEE_DENOMINATOR, gt=0, alias="ownerFeeDenominator"
    )
    params: SAMMParametersModel = Field(default_factory=SAMMParametersModel)


class DeploymentModel(BaseModel):
    """Deployment file: tokens by symbol and shards by pair name ("A/B")."""

    model_config = {"populate_by_name": True}

    network: str = "local"
    chain_id: int | None = Field(default=None, alias="chainId")
    factory: Address | None = None
    tokens: dict[str, TokenModel]
    pools: dict[str, list[ShardModel]]


# --- Immutable deployment ---


@dataclass(frozen=True)
class Deployment:
    """Immutable snapshot of a SAMM deployment."""

    network: str
    chain_id: int | None
    factory: str | None
    tokens: tuple[Token, ...]
    shards: tuple[ShardDescriptor, ...]

    @property
    def pair_names(self) -> list[str]:
        return list(dict.fromkeys(shard.pair_name for shard in self.shards))

    def shards_by_pair(self) -> dict[str, list[ShardDescriptor]]:
        pairs: dict[str, list[ShardDescriptor]] = {}
        for shard in self.shards:
            pairs.setdefault(shard.pair_name, []).append(shard)
        return pairs

    def graph(self) -> PairGraph:
        """Build the pair graph for routing."""
        from samm.routing.pathfinding import PairGraph

        return PairGraph(self.shards)

    @classmethod
    def from_model(cls, model: DeploymentModel) -> Deployment:
        """Convert a validated deployment file into a Deployment.

        Raises:
            ConfigurationError: If a pair names an unknown token or a shard is invalid
        """
        tokens = {
            symbol: Token(address=entry.address, symbol=symbol, decimals=entry.decimals)
            for symbol, entry in model.tokens.items()
        }

        shards: list[ShardDescriptor] = []
        for pair_name, entries in model.pools.items():
            token_a, token_b = _pair_tokens(pair_name, tokens)
            for entry in entries:
                try:
                    shards.append(_build_shard(pair_name, token_a, token_b, entry))
                except ValueError as err:
                    raise ConfigurationError(
                        f"Invalid shard {entry.name or entry.address} in {pair_name}: {err}"
                    ) from err

        return cls(
            network=model.network,
            chain_id=model.chain_id,
            factory=model.factory.lower() if model.factory else None,
            tokens=tuple(tokens.values()),
            shards=tuple(shards),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the deployment file layout (raw reserves included)."""
        pools: dict[str, list[dict[str, Any]]] = {}
        for shard in self.shards:
            pools.setdefault(shard.pair_name, []).append(
                {
                    "name": shard.name,
                    "address": shard.address,
                    "liquidity": shard.size_metric,
                    "reserveA": str(shard.reserve_a),
                    "reserveB": str(shard.reserve_b),
                    "tradeFeeNumerator": shard.trade_fee_numerator,
                    "tradeFeeDenominator": shard.trade_fee_denominator,
                    "ownerFeeNumerator": shard.owner_fee_numerator,
                    "ownerFeeDenominator": shard.owner_fee_denominator,
                    "params": {
                        "beta1": shard.params.beta1,
                        "rmin": shard.params.rmin,
                        "rmax": shard.params.rmax,
                        "c": shard.params.c,
                    },
                }
            )
        return {
            "network": self.network,
            "chainId": self.chain_id,
            "factory": self.factory,
            "tokens": {
                token.symbol: {"address": token.address, "decimals": token.decimals}
                for token in self.tokens
            },
            "pools": pools,
        }


def _pair_tokens(pair_name: str, tokens: dict[str, Token]) -> tuple[Token, Token]:
    parts = pair_name.split("/")
    if len(parts) != 2:
        raise ConfigurationError(f"Pair name must look like 'A/B', got '{pair_name}'")
    missing = [symbol for symbol in parts if symbol not in tokens]
    if missing:
        raise ConfigurationError(f"Pair {pair_name} references unknown tokens: {missing}")
    return tokens[parts[0]], tokens[parts[1]]


def _build_shard(
    pair_name: str, token_a: Token, token_b: Token, entry: ShardModel
) -> ShardDescriptor:
    reserve_a = (
        int(entry.reserve_a)
        if entry.reserve_a is not None
        else entry.liquidity * 10**token_a.decimals
    )
    reserve_b = (
        int(entry.reserve_b)
        if entry.reserve_b is not None
        else entry.liquidity * 10**token_b.decimals
    )
    return ShardDescriptor(
        address=entry.address,
        pair_name=pair_name,
        token_a=token_a,
        token_b=token_b,
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        trade_fee_numerator=entry.trade_fee_numerator,
        trade_fee_denominator=entry.trade_fee_denominator,
        owner_fee_numerator=entry.owner_fee_numerator,
        owner_fee_denominator=entry.owner_fee_denominator,
        params=SAMMParameters(
            beta1=entry.params.beta1,
            rmin=entry.params.rmin,
            rmax=entry.params.rmax,
            c=entry.params.c,
        ),
        size_metric=entry.liquidity,
        name=entry.name,
    )


def parse_deployment(data: dict[str, Any]) -> Deployment:
    """Validate a deployment dict.

    Raises:
        ConfigurationError: If the data does not describe a valid deployment
    """
    try:
        model = DeploymentModel.model_validate(data)
    except ValidationError as err:
        raise ConfigurationError(f"Invalid deployment: {err}") from err
    return Deployment.from_model(model)


def load_deployment(path: str | Path) -> Deployment:
    """Load a deployment from a JSON file.

    Raises:
        ConfigurationError: If the file cannot be read or is invalid
    """
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as err:
        raise ConfigurationError(f"Cannot load deployment from {path}: {err}") from err

    deployment = parse_deployment(data)
    logger.info(
        "deployment_loaded",
        path=str(path),
        network=deployment.network,
        pairs=len(deployment.pair_names),
        shards=len(deployment.shards),
    )
    return deployment


# Three-token testnet deployment: two stablecoin pairs with three shards each
DEFAULT_DEPLOYMENT_DATA: dict[str, Any] = {
    "network": "Monad Testnet",
    "chainId": 10143,
    "factory": "0x8ab2De0CD1C3bcAe3cB9a8028E28D60301dBf336",
    "tokens": {
        "USDC": {"address": "0x9153bc242a5FD22b149B1cb252e3eE6314C37366", "decimals": 6},
        "USDT": {"address": "0x39f0B52190CeA4B3569D5D501f0c637892F52379", "decimals": 6},
        "DAI": {"address": "0xccA96CacCd9785f32C1ea02D688bc013D43D9f46", "decimals": 18},
    },
    "pools": {
        "USDC/USDT": [
            {
                "name": "USDC/USDT-1",
                "address": "0x986e6AA143Ecf491FbB9FFbcFB1A61424af1BC1e",
                "liquidity": 5_000_000,
            },
            {
                "name": "USDC/USDT-2",
                "address": "0xA68065D56C003D6982a6215Bd1C765726b2fCa13",
                "liquidity": 3_000_000,
            },
            {
                "name": "USDC/USDT-3",
                "address": "0x58136Bb18639C7C3f2C552Bb734dA6D65Ff7D653",
                "liquidity": 2_000_000,
            },
        ],
        "USDT/DAI": [
            {
                "name": "USDT/DAI-1",
                "address": "0x179e0308524c916a6F0452FF0ce999cEC88588e8",
                "liquidity": 10_000,
            },
            {
                "name": "USDT/DAI-2",
                "address": "0x40767849365ff64F9EB341eD2Cf3E40590578749",
                "liquidity": 20_000,
            },
            {
                "name": "USDT/DAI-3",
                "address": "0x302bB8B9Cf5722a2C69B19D98393041E007085Eb",
                "liquidity": 30_000,
            },
        ],
    },
}


def get_default_deployment() -> Deployment:
    """Load the deployment named by SAMM_DEPLOYMENT_FILE, or the built-in one."""
    path = os.environ.get(DEPLOYMENT_FILE_ENV)
    if path:
        return load_deployment(path)
    return parse_deployment(DEFAULT_DEPLOYMENT_DATA)


__all__ = [
    "RouterConfig",
    "DEFAULT_ROUTER_CONFIG",
    "DeploymentModel",
    "Deployment",
    "parse_deployment",
    "load_deployment",
    "get_default_deployment",
    "DEFAULT_DEPLOYMENT_DATA",
]
