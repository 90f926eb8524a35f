"""
Pytest tests for the per-chain fan-out collector. Fetchers are fakes; no network.
"""

from __future__ import annotations

import asyncio


def test_collects_every_chain(wallet, make_tx, make_nft):
    """Each configured chain is fetched once; results are keyed by chain id."""
    from airdrop_finder.ingestion.collector import FanOutCollector

    seen = []

    async def fetch_txs(address, chain_id):
        seen.append(("tx", address, chain_id))
        return [make_tx(chain_id)] * (2 if chain_id == 1 else 1)

    async def fetch_nfts(address, chain_id):
        return [make_nft(chain_id)] if chain_id == 8453 else []

    collector = FanOutCollector([1, 8453, 1], fetch_txs, fetch_nfts, timeout_sec=2)
    data = collector.collect(wallet)

    assert sorted(c for _, _, c in seen) == [1, 8453]
    assert {c: len(v) for c, v in data.transactions.items()} == {1: 2, 8453: 1}
    assert len(data.nfts[8453]) == 1
    assert data.unavailable_chains == ()
    assert data.warning() is None


def test_failed_and_slow_chains_are_isolated(wallet, make_tx):
    """A raising chain and a timed-out chain get empty lists and are listed as unavailable."""
    from airdrop_finder.core.exceptions import PartialDataWarning
    from airdrop_finder.ingestion.collector import FanOutCollector

    async def fetch_txs(address, chain_id):
        if chain_id == 10:
            raise ConnectionError("rpc 503")
        if chain_id == 137:
            await asyncio.sleep(5)
        return [make_tx(chain_id)]

    collector = FanOutCollector([1, 10, 137], fetch_txs, timeout_sec=0.05)
    data = asyncio.run(collector.gather(wallet))

    assert len(data.transactions[1]) == 1
    assert data.transactions[10] == []
    assert data.transactions[137] == []
    assert data.unavailable_chains == (10, 137)

    warning = data.warning()
    assert isinstance(warning, PartialDataWarning)
    assert warning.unavailable_chains == (10, 137)


def test_nft_fetcher_optional(wallet, make_tx):
    from airdrop_finder.ingestion.collector import FanOutCollector

    async def fetch_txs(address, chain_id):
        return [make_tx(chain_id)]

    data = FanOutCollector([324], fetch_txs).collect(wallet)
    assert data.nfts == {324: []}


def test_static_collector_returns_given_data(wallet):
    from airdrop_finder.ingestion.collector import CollectedChainData, StaticCollector

    data = CollectedChainData(unavailable_chains=(59144,))
    assert StaticCollector(data).collect(wallet) is data


def test_from_settings_uses_configured_chains(monkeypatch):
    """Chains and timeout come from AIRDROP_SUPPORTED_CHAINS / AIRDROP_COLLECTOR_TIMEOUT_SEC."""
    from airdrop_finder.ingestion.collector import FanOutCollector

    monkeypatch.setenv("AIRDROP_SUPPORTED_CHAINS", "1,8453")
    monkeypatch.setenv("AIRDROP_COLLECTOR_TIMEOUT_SEC", "3")

    async def fetch_txs(address, chain_id):
        return []

    collector = FanOutCollector.from_settings(fetch_txs)
    assert collector.chain_ids == (1, 8453)
    assert collector.timeout_sec == 3.0
