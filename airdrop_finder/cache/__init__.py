"""
Result cache for eligibility and opportunity reports.

TTL-bounded, single-flight per key, with pluggable backing store.
"""

from airdrop_finder.cache.result_cache import (
    CacheBackend,
    CacheEntry,
    InMemoryCacheBackend,
    ResultCache,
    build_cache_key,
)

__all__ = [
    "CacheBackend",
    "CacheEntry",
    "InMemoryCacheBackend",
    "ResultCache",
    "build_cache_key",
]
