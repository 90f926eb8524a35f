"""
Environment variable loading for Airdrop Finder.

- AIRDROP_CACHE_TTL_SEC: TTL for cached eligibility/opportunity results (default: 300)
- AIRDROP_SUPPORTED_CHAINS: comma-separated EVM chain ids to fan out over
- AIRDROP_COLLECTOR_TIMEOUT_SEC: per-chain fetch timeout (default: 15)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is airdrop_finder/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

# Ethereum, Optimism, Polygon, Base, Arbitrum, zkSync Era, Linea, Scroll
DEFAULT_SUPPORTED_CHAINS = (1, 10, 137, 8453, 42161, 324, 59144, 534352)
# On-chain state moves quickly; minutes, not hours
DEFAULT_CACHE_TTL_SEC = 300
DEFAULT_COLLECTOR_TIMEOUT_SEC = 15.0


def load_finder_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides real env."""
    load_dotenv(_ENV_PATH, override=False)


def get_cache_ttl_sec() -> int:
    """Return AIRDROP_CACHE_TTL_SEC as a positive int; falls back to default on bad input."""
    load_finder_env()
    raw = (os.getenv("AIRDROP_CACHE_TTL_SEC") or "").strip()
    if not raw:
        return DEFAULT_CACHE_TTL_SEC
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_CACHE_TTL_SEC
    return value if value > 0 else DEFAULT_CACHE_TTL_SEC


def get_supported_chains() -> tuple[int, ...]:
    """
    Return AIRDROP_SUPPORTED_CHAINS as a tuple of chain ids, order preserved, duplicates dropped.
    Non-numeric entries are skipped. Empty -> DEFAULT_SUPPORTED_CHAINS.
    """
    load_finder_env()
    raw = (os.getenv("AIRDROP_SUPPORTED_CHAINS") or "").strip()
    if not raw:
        return DEFAULT_SUPPORTED_CHAINS
    chains: list[int] = []
    for part in raw.split(","):
        part = part.strip()
        if not part.isdigit():
            continue
        chain_id = int(part)
        if chain_id not in chains:
            chains.append(chain_id)
    return tuple(chains) or DEFAULT_SUPPORTED_CHAINS


def get_collector_timeout_sec() -> float:
    """Return AIRDROP_COLLECTOR_TIMEOUT_SEC as a positive float."""
    load_finder_env()
    raw = (os.getenv("AIRDROP_COLLECTOR_TIMEOUT_SEC") or "").strip()
    if not raw:
        return DEFAULT_COLLECTOR_TIMEOUT_SEC
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_COLLECTOR_TIMEOUT_SEC
    return value if value > 0 else DEFAULT_COLLECTOR_TIMEOUT_SEC
