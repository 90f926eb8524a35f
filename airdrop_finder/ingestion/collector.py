"""
Per-chain data collection fan-out.

The blockchain-data fetch layer is an external collaborator: callers inject
async fetchers `fetch(address, chain_id) -> list`. FanOutCollector issues one
transaction request and one NFT request per chain concurrently, each bounded by
a timeout. A chain whose fetch fails or times out contributes empty lists and
is reported in unavailable_chains; it never aborts the other chains.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, Protocol, Sequence

from airdrop_finder.config import Settings, get_settings
from airdrop_finder.core.exceptions import PartialDataWarning
from airdrop_finder.eligibility.models import ChainNFT, ChainTransaction
from airdrop_finder.finder_logging import get_logger, short_address

logger = get_logger(__name__)

TransactionFetcher = Callable[[str, int], Awaitable[Sequence[ChainTransaction]]]
NFTFetcher = Callable[[str, int], Awaitable[Sequence[ChainNFT]]]


@dataclass
class CollectedChainData:
    """Raw per-chain lists for one address plus the chains that could not be fetched."""

    transactions: dict[int, list[ChainTransaction]] = field(default_factory=dict)
    nfts: dict[int, list[ChainNFT]] = field(default_factory=dict)
    unavailable_chains: tuple[int, ...] = ()

    def warning(self) -> PartialDataWarning | None:
        if not self.unavailable_chains:
            return None
        return PartialDataWarning(self.unavailable_chains)


class ChainDataCollector(Protocol):
    def collect(self, address: str) -> CollectedChainData: ...


async def _no_nfts(address: str, chain_id: int) -> list[ChainNFT]:
    return []


class FanOutCollector:
    """Concurrent per-chain collection with per-request timeout and failure isolation."""

    def __init__(
        self,
        chain_ids: Iterable[int],
        fetch_transactions: TransactionFetcher,
        fetch_nfts: NFTFetcher | None = None,
        timeout_sec: float = 15.0,
    ) -> None:
        self.chain_ids = tuple(dict.fromkeys(int(c) for c in chain_ids))
        self._fetch_transactions = fetch_transactions
        self._fetch_nfts = fetch_nfts or _no_nfts
        self.timeout_sec = timeout_sec

    @classmethod
    def from_settings(
        cls,
        fetch_transactions: TransactionFetcher,
        fetch_nfts: NFTFetcher | None = None,
        settings: Settings | None = None,
    ) -> FanOutCollector:
        """Collector over AIRDROP_SUPPORTED_CHAINS with AIRDROP_COLLECTOR_TIMEOUT_SEC."""
        settings = settings or get_settings()
        return cls(
            settings.supported_chains,
            fetch_transactions,
            fetch_nfts,
            timeout_sec=settings.collector_timeout_sec,
        )

    async def _fetch_chain(
        self, address: str, chain_id: int
    ) -> tuple[int, list[ChainTransaction], list[ChainNFT], bool]:
        try:
            txs, nfts = await asyncio.wait_for(
                asyncio.gather(
                    self._fetch_transactions(address, chain_id),
                    self._fetch_nfts(address, chain_id),
                ),
                timeout=self.timeout_sec,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "chain_fetch_timeout",
                address=short_address(address),
                chain_id=chain_id,
                timeout_sec=self.timeout_sec,
            )
            return chain_id, [], [], False
        except Exception as e:
            logger.warning(
                "chain_fetch_failed",
                address=short_address(address),
                chain_id=chain_id,
                error=str(e),
            )
            return chain_id, [], [], False
        return chain_id, list(txs or []), list(nfts or []), True

    async def gather(self, address: str) -> CollectedChainData:
        """Fetch every chain concurrently. Results are keyed by chain id."""
        results = await asyncio.gather(*(self._fetch_chain(address, c) for c in self.chain_ids))
        data = CollectedChainData()
        unavailable: list[int] = []
        for chain_id, txs, nfts, ok in results:
            data.transactions[chain_id] = txs
            data.nfts[chain_id] = nfts
            if not ok:
                unavailable.append(chain_id)
        data.unavailable_chains = tuple(sorted(unavailable))
        logger.info(
            "chain_data_collected",
            address=short_address(address),
            chains=len(self.chain_ids),
            transactions=sum(len(v) for v in data.transactions.values()),
            nfts=sum(len(v) for v in data.nfts.values()),
            unavailable_chains=list(data.unavailable_chains),
        )
        return data

    def collect(self, address: str) -> CollectedChainData:
        """Blocking entry point for synchronous callers (not from inside a running loop)."""
        return asyncio.run(self.gather(address))


@dataclass
class StaticCollector:
    """Collector over data already in hand (fixtures, callers that fetched elsewhere)."""

    data: CollectedChainData

    def collect(self, address: str) -> CollectedChainData:
        return self.data
