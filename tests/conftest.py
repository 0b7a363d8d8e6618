"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest
from hypothesis import HealthCheck, settings

from samm.config import DEFAULT_DEPLOYMENT_DATA, Deployment, parse_deployment
from samm.models.pool import ShardDescriptor
from samm.routing.pathfinding import PairGraph
from samm.routing.router import ShardRouter
from samm.sources import InMemoryLedger
from tests.helpers import make_stablecoin_shards

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Property tests do big-integer math only; keep them deterministic in CI
settings.register_profile(
    "ci",
    max_examples=200,
    derandomize=True,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.register_profile("dev", max_examples=100)
settings.load_profile("dev")


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return FIXTURES_DIR


@pytest.fixture
def deployment() -> Deployment:
    """The built-in three-token deployment."""
    return parse_deployment(DEFAULT_DEPLOYMENT_DATA)


@pytest.fixture
def ledger(deployment: Deployment) -> InMemoryLedger:
    """A fresh in-memory ledger over the built-in deployment."""
    return InMemoryLedger.from_deployment(deployment)


@pytest.fixture
def shard_router(ledger: InMemoryLedger) -> ShardRouter:
    """Router reading from and settling on the fresh ledger."""
    return ShardRouter(ledger, executor=ledger)


@pytest.fixture
def stablecoin_shards() -> list[ShardDescriptor]:
    """USDC/USDT and USDT/DAI shards with 1M whole tokens per side."""
    return make_stablecoin_shards()


@pytest.fixture
def stablecoin_graph(stablecoin_shards: list[ShardDescriptor]) -> PairGraph:
    return PairGraph(stablecoin_shards)
