"""Tests for shared model types and the API request models."""

import pytest
from pydantic import ValidationError

from samm.models.api import ExecuteRequest, MultiHopRequest, QuoteRequest
from samm.models.types import is_valid_address, normalize_address, validate_uint256
from samm.safe_int import UINT256_MAX
from samm.units import exchange_rate, scale_amount, to_units
from tests.helpers import RECIPIENT, USDC, USDT


class TestUint256:
    def test_accepts_string_and_int(self):
        assert validate_uint256("42") == "42"
        assert validate_uint256(42) == "42"
        assert validate_uint256(UINT256_MAX) == str(UINT256_MAX)

    @pytest.mark.parametrize("value", [-1, UINT256_MAX + 1, "1.5", "abc", True, 1.0])
    def test_rejects(self, value):
        with pytest.raises(ValueError):
            validate_uint256(value)


class TestAddresses:
    def test_normalize(self):
        assert normalize_address("AbCd") == "0xabcd"
        assert normalize_address(USDC.upper().replace("0X", "0x")) == USDC

    def test_normalize_with_validation(self):
        with pytest.raises(ValueError):
            normalize_address("0x1234", validate=True)

    def test_is_valid_address(self):
        assert is_valid_address(USDC)
        assert not is_valid_address(USDC[2:])
        assert not is_valid_address("0x" + "zz" * 20)


class TestRequestModels:
    def test_quote_request_aliases(self):
        request = QuoteRequest.model_validate(
            {"shardAddress": "0x" + "11" * 20, "tokenIn": "USDC", "amountOut": 1000}
        )
        assert request.amount_out == "1000"
        assert request.token_in == "USDC"

    def test_multi_hop_needs_exactly_one_amount(self):
        with pytest.raises(ValidationError):
            MultiHopRequest.model_validate({"tokenIn": USDC, "tokenOut": USDT})
        request = MultiHopRequest.model_validate(
            {"tokenIn": USDC, "tokenOut": USDT, "amountOut": "5"}
        )
        assert request.amount_in is None

    def test_execute_request_optional_shard(self):
        request = ExecuteRequest.model_validate(
            {
                "tokenIn": USDC,
                "tokenOut": USDT,
                "amountOut": "1",
                "maximalAmountIn": "2",
                "recipient": RECIPIENT,
            }
        )
        assert request.shard_address is None


class TestUnits:
    def test_scale_amount(self):
        assert scale_amount(1_500_000, 6, 18) == 1_500_000 * 10**12
        assert scale_amount(1_500_000 * 10**12 + 7, 18, 6) == 1_500_000
        assert scale_amount(5, 6, 6) == 5

    def test_to_units(self):
        assert str(to_units(1_500_000, 6)) == "1.5"

    def test_exchange_rate_across_decimals(self):
        assert exchange_rate(10**6, 6, 99 * 10**16, 18) == to_units(99, 2)

    def test_exchange_rate_rejects_zero_input(self):
        with pytest.raises(ValueError):
            exchange_rate(0, 6, 1, 18)
