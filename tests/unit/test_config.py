"""Tests for deployment loading and router configuration."""

import copy
import json

import pytest

from samm.config import (
    DEFAULT_DEPLOYMENT_DATA,
    DEPLOYMENT_FILE_ENV,
    RouterConfig,
    get_default_deployment,
    load_deployment,
    parse_deployment,
)
from samm.errors import ConfigurationError
from tests.helpers import DAI, USDC, USDT


def deployment_data() -> dict:
    return copy.deepcopy(DEFAULT_DEPLOYMENT_DATA)


class TestParseDeployment:
    """Tests for the built-in deployment and deployment validation."""

    def test_default_deployment(self, deployment):
        assert deployment.network == "Monad Testnet"
        assert deployment.chain_id == 10143
        assert deployment.factory == "0x8ab2de0cd1c3bcae3cb9a8028e28d60301dbf336"
        assert [t.symbol for t in deployment.tokens] == ["USDC", "USDT", "DAI"]
        assert len(deployment.shards) == 6
        assert deployment.pair_names == ["USDC/USDT", "USDT/DAI"]

    def test_reserves_default_to_liquidity_at_token_decimals(self, deployment):
        shard = deployment.shards_by_pair()["USDT/DAI"][0]

        assert shard.name == "USDT/DAI-1"
        assert shard.token_a.address == USDT
        assert shard.token_b.address == DAI
        assert shard.reserve_a == 10_000 * 10**6
        assert shard.reserve_b == 10_000 * 10**18
        assert shard.size_metric == 10_000

    def test_addresses_normalized(self, deployment):
        tokens = {t.symbol: t.address for t in deployment.tokens}
        assert tokens["USDC"] == USDC
        assert all(s.address == s.address.lower() for s in deployment.shards)

    def test_explicit_reserves_and_fees(self):
        data = deployment_data()
        entry = data["pools"]["USDC/USDT"][0]
        entry.update(
            {
                "reserveA": "123456789",
                "reserveB": 987654321,
                "tradeFeeNumerator": 30,
                "ownerFeeNumerator": 1,
                "ownerFeeDenominator": 1_000,
                "params": {"c": 20_000},
            }
        )

        shard = parse_deployment(data).shards[0]

        assert shard.reserve_a == 123_456_789
        assert shard.reserve_b == 987_654_321
        assert shard.trade_fee_numerator == 30
        assert shard.owner_fee_denominator == 1_000
        assert shard.params.c == 20_000
        assert shard.params.beta1 == -1_050_000

    def test_round_trip_through_dict(self, deployment):
        assert parse_deployment(deployment.to_dict()) == deployment

    def test_missing_tokens_rejected(self):
        data = deployment_data()
        del data["tokens"]
        with pytest.raises(ConfigurationError):
            parse_deployment(data)

    def test_bad_pair_name_rejected(self):
        data = deployment_data()
        data["pools"]["USDC-USDT"] = data["pools"].pop("USDC/USDT")
        with pytest.raises(ConfigurationError, match="A/B"):
            parse_deployment(data)

    def test_unknown_token_in_pair_rejected(self):
        data = deployment_data()
        data["pools"]["USDC/WETH"] = data["pools"].pop("USDC/USDT")
        with pytest.raises(ConfigurationError, match="WETH"):
            parse_deployment(data)

    def test_bad_address_rejected(self):
        data = deployment_data()
        data["pools"]["USDC/USDT"][0]["address"] = "0x1234"
        with pytest.raises(ConfigurationError):
            parse_deployment(data)

    def test_invalid_parameters_rejected(self):
        data = deployment_data()
        data["pools"]["USDC/USDT"][0]["params"] = {"c": 0}
        with pytest.raises(ConfigurationError, match="USDC/USDT-1"):
            parse_deployment(data)

    def test_zero_fee_denominator_rejected(self):
        data = deployment_data()
        data["pools"]["USDC/USDT"][0]["tradeFeeDenominator"] = 0
        with pytest.raises(ConfigurationError):
            parse_deployment(data)

    def test_graph(self, deployment):
        graph = deployment.graph()
        assert graph.token_count == 3
        assert graph.find_path(USDC, DAI) == [USDC, USDT, DAI]


class TestLoadDeployment:
    def test_load_from_file(self, tmp_path, deployment):
        path = tmp_path / "deployment.json"
        path.write_text(json.dumps(deployment.to_dict()))

        assert load_deployment(path) == deployment

    def test_fixture_file(self, fixtures_dir):
        loaded = load_deployment(fixtures_dir / "deployment.json")
        assert loaded.network == "local"
        assert loaded.pair_names == ["AAA/BBB"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot load"):
            load_deployment(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError, match="Cannot load"):
            load_deployment(path)

    def test_env_var_selects_file(self, tmp_path, monkeypatch, fixtures_dir):
        monkeypatch.setenv(DEPLOYMENT_FILE_ENV, str(fixtures_dir / "deployment.json"))
        assert get_default_deployment().network == "local"

    def test_builtin_without_env_var(self, monkeypatch):
        monkeypatch.delenv(DEPLOYMENT_FILE_ENV, raising=False)
        assert get_default_deployment().network == "Monad Testnet"


class TestRouterConfig:
    def test_defaults(self):
        config = RouterConfig()
        assert config.c_scale == 1_000_000
        assert config.max_hops == 2

    def test_invalid_max_hops(self):
        with pytest.raises(ConfigurationError):
            RouterConfig(max_hops=3)

    def test_invalid_scale(self):
        with pytest.raises(ConfigurationError):
            RouterConfig(c_scale=0)
