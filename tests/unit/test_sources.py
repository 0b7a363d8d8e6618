"""Tests for reserve sources and the in-memory settlement ledger."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from samm.errors import ExcessiveInputAmount, InvalidTokenPair, SourceUnavailable
from samm.sources import InMemoryLedger, StaticReserveSource
from tests.helpers import RECIPIENT, TOKEN_A, TOKEN_B, TOKEN_C, make_shard

SHARD_ADDRESS = "0x" + "5a" * 20


@pytest.fixture
def shard():
    return make_shard(1_000_000, address=SHARD_ADDRESS)


class TestStaticReserveSource:
    def test_read_by_any_case(self, deployment):
        source = StaticReserveSource(deployment)
        shard = deployment.shards[0]

        assert source.read(shard.address.upper().replace("0X", "0x")) == shard
        assert source.shards() == list(deployment.shards)

    def test_unknown_shard(self, deployment):
        with pytest.raises(SourceUnavailable):
            StaticReserveSource(deployment).read("0x" + "00" * 20)


class TestInMemoryLedger:
    """Tests for settle()."""

    def test_settle_moves_exact_amounts(self, shard):
        ledger = InMemoryLedger([shard])

        quote = ledger.settle(1_000, 1_013, TOKEN_A, TOKEN_B, SHARD_ADDRESS, RECIPIENT)

        after = ledger.read(SHARD_ADDRESS)
        assert quote.total_input == 1_013
        assert after.reserve_a == 1_000_000 + 1_013
        assert after.reserve_b == 1_000_000 - 1_000
        assert ledger.balance_of(RECIPIENT, TOKEN_B) == 1_000
        assert ledger.balance_of(RECIPIENT, TOKEN_A) == 0

    def test_reverse_direction(self, shard):
        ledger = InMemoryLedger([shard])
        ledger.settle(1_000, 1_013, TOKEN_B, TOKEN_A, SHARD_ADDRESS, RECIPIENT)

        after = ledger.read(SHARD_ADDRESS)
        assert after.reserve_a == 999_000
        assert after.reserve_b == 1_001_013

    def test_invariant_never_decreases(self, shard):
        ledger = InMemoryLedger([shard])
        k_before = shard.reserve_a * shard.reserve_b

        ledger.settle(5_000, 10**9, TOKEN_A, TOKEN_B, SHARD_ADDRESS, RECIPIENT)

        after = ledger.read(SHARD_ADDRESS)
        assert after.reserve_a * after.reserve_b >= k_before

    def test_ceiling_exceeded_changes_nothing(self, shard):
        ledger = InMemoryLedger([shard])

        with pytest.raises(ExcessiveInputAmount):
            ledger.settle(1_000, 1_012, TOKEN_A, TOKEN_B, SHARD_ADDRESS, RECIPIENT)

        assert ledger.read(SHARD_ADDRESS) == shard
        assert ledger.balance_of(RECIPIENT, TOKEN_B) == 0

    def test_wrong_output_token(self, shard):
        ledger = InMemoryLedger([shard])
        with pytest.raises(InvalidTokenPair):
            ledger.settle(1_000, 2_000, TOKEN_A, TOKEN_C, SHARD_ADDRESS, RECIPIENT)

    def test_unknown_shard(self, shard):
        ledger = InMemoryLedger([shard])
        with pytest.raises(SourceUnavailable):
            ledger.settle(1_000, 2_000, TOKEN_A, TOKEN_B, "0x" + "00" * 20, RECIPIENT)

    def test_second_settlement_requotes(self, shard):
        """A ceiling that covered the first trade no longer covers the same trade."""
        ledger = InMemoryLedger([shard])
        ledger.settle(1_000, 1_013, TOKEN_A, TOKEN_B, SHARD_ADDRESS, RECIPIENT)

        with pytest.raises(ExcessiveInputAmount):
            ledger.settle(1_000, 1_013, TOKEN_A, TOKEN_B, SHARD_ADDRESS, RECIPIENT)

    def test_concurrent_settlements_serialize(self):
        """Every settlement sees the reserves the previous one left."""
        big = make_shard(10**12, address=SHARD_ADDRESS)
        ledger = InMemoryLedger([big])
        trades = 25

        def trade(_: int) -> int:
            return ledger.settle(
                10**6, 2 * 10**6, TOKEN_A, TOKEN_B, SHARD_ADDRESS, RECIPIENT
            ).total_input

        with ThreadPoolExecutor(max_workers=8) as pool:
            paid = list(pool.map(trade, range(trades)))

        after = ledger.read(SHARD_ADDRESS)
        assert after.reserve_b == 10**12 - trades * 10**6
        assert after.reserve_a == 10**12 + sum(paid)
        assert ledger.balance_of(RECIPIENT, TOKEN_B) == trades * 10**6
