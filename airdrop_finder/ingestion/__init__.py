"""Chain data collection: concurrent per-chain fan-out over injected fetchers."""

from airdrop_finder.ingestion.collector import (
    ChainDataCollector,
    CollectedChainData,
    FanOutCollector,
    StaticCollector,
)

__all__ = ["ChainDataCollector", "CollectedChainData", "FanOutCollector", "StaticCollector"]
