"""Tests for the dynamic trade fee and the owner fee."""

import pytest

from samm.amm.fees import fee_rate_bps, is_adaptive, owner_fee, trade_fee
from samm.errors import DivisionByZero

R = 1_000_000  # 1M units per side


class TestTradeFeeZeroCases:
    def test_zero_output(self):
        assert trade_fee(0, R, R, 25, 10_000) == 0

    def test_zero_fee_numerator(self):
        assert trade_fee(1_000, R, R, 0, 10_000) == 0

    def test_zero_output_reserve_raises(self):
        with pytest.raises(DivisionByZero):
            trade_fee(1_000, 0, R, 25, 10_000)

    def test_zero_fee_denominator_raises(self):
        with pytest.raises(DivisionByZero):
            trade_fee(1_000, R, R, 25, 0)


class TestTradeFeeBranches:
    """Adaptive branch for small trades, minimal floor for large ones."""

    def test_adaptive_branch(self):
        """0.1% of the pool: tmp = 12, rate = (125 - 12) / 10000."""
        # 1000 * 113 * 1e6 / (1e6 * 1e4) = 11.3 -> 11
        assert trade_fee(1_000, R, R, 25, 10_000) == 11
        assert is_adaptive(1_000, R, 25, 10_000)

    def test_minimal_branch(self):
        """10% of the pool: tmp = 1200 exceeds the ceiling, rate floors at 25 / 10000."""
        # 100000 * 25 * 1e6 / (1e6 * 1e4) = 250
        assert trade_fee(100_000, R, R, 25, 10_000) == 250
        assert not is_adaptive(100_000, R, 25, 10_000)

    def test_branches_agree_at_boundary(self):
        """At tmp = 100 the adaptive rate equals the floor rate."""
        # tmp = 8334 * 120000 // 10_000_000 = 100
        assert is_adaptive(8_334, R, 25, 10_000)
        minimal = 8_334 * 25 * R // (R * 10_000)
        assert trade_fee(8_334, R, R, 25, 10_000) == minimal == 20

    def test_just_past_boundary_is_minimal(self):
        # tmp = 8500 * 120000 // 10_000_000 = 102
        assert not is_adaptive(8_500, R, 25, 10_000)
        assert trade_fee(8_500, R, R, 25, 10_000) == 8_500 * 25 // 10_000

    def test_fee_scales_with_price(self):
        """Fee is in source units: a source reserve twice as deep doubles it."""
        single = trade_fee(100_000, R, R, 25, 10_000)
        double = trade_fee(100_000, R, 2 * R, 25, 10_000)
        assert double == 2 * single

    def test_small_trade_pays_higher_rate(self):
        """A 0.1%-of-pool trade pays more basis points than a 10%-of-pool trade."""
        reserve = 1_000 * 10**18
        small = 10**18
        large = 100 * 10**18

        small_bps = fee_rate_bps(trade_fee(small, reserve, reserve, 25, 10_000), small)
        large_bps = fee_rate_bps(trade_fee(large, reserve, reserve, 25, 10_000), large)

        assert small_bps == 113
        assert large_bps == 25
        assert small_bps > large_bps


class TestOwnerFee:
    def test_flat_rate(self):
        assert owner_fee(1_000_000, 5, 10_000) == 500

    def test_truncates_to_zero(self):
        assert owner_fee(1_000, 5, 10_000) == 0

    def test_disabled(self):
        assert owner_fee(1_000_000, 0, 1) == 0

    def test_zero_denominator_raises(self):
        with pytest.raises(DivisionByZero):
            owner_fee(1_000, 1, 0)


class TestFeeRateBps:
    def test_basic(self):
        assert fee_rate_bps(25, 10_000) == 25

    def test_zero_output(self):
        assert fee_rate_bps(10, 0) == 0
