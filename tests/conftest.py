"""
Pytest fixtures for Airdrop Finder tests. Fixed clock and builders for raw chain records.
"""

from __future__ import annotations

import itertools

import pytest

# 2026-01-01T00:00:00Z
NOW = 1767225600
DAY = 86400

WALLET = "0x1111111111111111111111111111111111111111"

_hash_counter = itertools.count(1)


class FakeClock:
    """Manually advanced clock for cache TTL tests."""

    def __init__(self, start: float = NOW) -> None:
        self.now = float(start)

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def now_ts():
    return NOW


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def wallet():
    return WALLET


@pytest.fixture
def make_tx():
    """Builder for ChainTransaction with unique hashes unless one is given."""
    from airdrop_finder.eligibility.models import ChainTransaction

    def _make(chain_id: int = 1, **overrides):
        fields = {
            "chain_id": chain_id,
            "hash": f"0x{next(_hash_counter):064x}",
            "from_address": WALLET,
            "to_address": "0x2222222222222222222222222222222222222222",
            "value_usd": 10.0,
            "gas_usd": 0.5,
            "timestamp_unix": NOW - 10 * DAY,
        }
        fields.update(overrides)
        return ChainTransaction(**fields)

    return _make


@pytest.fixture
def make_nft():
    from airdrop_finder.eligibility.models import ChainNFT

    def _make(chain_id: int = 1, contract_address: str = "0xabc0000000000000000000000000000000000001", **overrides):
        fields = {
            "chain_id": chain_id,
            "contract_address": contract_address,
            "token_id": "1",
            "acquired_at_unix": NOW - 30 * DAY,
        }
        fields.update(overrides)
        return ChainNFT(**fields)

    return _make


@pytest.fixture
def make_activity():
    """Builder for UserActivity with consistent per-chain counts."""
    from airdrop_finder.eligibility.models import UserActivity

    def _make(per_chain: dict[int, int] | None = None, **overrides):
        per_chain = dict(per_chain or {})
        fields = {
            "address": WALLET,
            "chains_used": frozenset(c for c, n in per_chain.items() if n > 0),
            "total_transaction_count": sum(per_chain.values()),
            "per_chain_transaction_count": per_chain,
        }
        fields.update(overrides)
        return UserActivity(**fields)

    return _make
