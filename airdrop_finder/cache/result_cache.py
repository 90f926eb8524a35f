"""
Result cache: TTL-keyed memo in front of the eligibility pipeline.

Keys are built by callers with build_cache_key(); the cache itself is
namespace-agnostic. Concurrent misses on the same key share one in-flight
computation (single-flight): the first caller computes, the rest wait on the
same Future and receive the same value or the same exception.

Backends signal an unreachable store with CacheUnavailableError. The cache
logs it and degrades to direct computation; cache errors never reach callers.
"""

from __future__ import annotations

import hashlib
import json
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Protocol, TypeVar

from airdrop_finder.core.exceptions import CacheUnavailableError
from airdrop_finder.finder_logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

FILTER_HASH_LENGTH = 16


@dataclass(frozen=True)
class CacheEntry:
    """Stored value with absolute expiry. Replaced on refresh, never mutated."""

    key: str
    value: Any
    expires_at_unix: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at_unix


class CacheBackend(Protocol):
    """Backing store. Implementations raise CacheUnavailableError when unreachable."""

    def get_entry(self, key: str) -> CacheEntry | None: ...

    def put_entry(self, entry: CacheEntry) -> None: ...

    def delete(self, key: str) -> None: ...

    def purge(self, now: float) -> int: ...

    def __len__(self) -> int: ...


class InMemoryCacheBackend:
    """Process-local dict store guarded by a lock."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get_entry(self, key: str) -> CacheEntry | None:
        with self._lock:
            return self._entries.get(key)

    def put_entry(self, entry: CacheEntry) -> None:
        with self._lock:
            self._entries[entry.key] = entry

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def purge(self, now: float) -> int:
        with self._lock:
            expired = [k for k, e in self._entries.items() if e.is_expired(now)]
            for k in expired:
                del self._entries[k]
            return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def build_cache_key(namespace: str, address: str, filters: Mapping[str, Any] | None = None) -> str:
    """
    "<namespace>:<address>:<filterHash>" where filterHash is a short sha256 of
    the filters as canonical JSON (sorted keys), so equal filters give equal keys.
    """
    canonical = json.dumps(filters or {}, sort_keys=True, separators=(",", ":"), default=str)
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:FILTER_HASH_LENGTH]
    return f"{namespace}:{address.strip().lower()}:{digest}"


class ResultCache:
    """TTL cache with single-flight get_or_compute and backend failure fallback."""

    def __init__(
        self,
        backend: CacheBackend | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._backend: CacheBackend = backend if backend is not None else InMemoryCacheBackend()
        self._clock = clock
        self._lock = threading.Lock()
        self._in_flight: dict[str, Future] = {}
        self._stats = {"hits": 0, "misses": 0, "coalesced": 0, "errors": 0}

    def _count(self, name: str) -> None:
        with self._lock:
            self._stats[name] += 1

    def _backend_failed(self, op: str, key: str, e: CacheUnavailableError) -> None:
        self._count("errors")
        logger.warning("cache_backend_unavailable", op=op, key=key, error=str(e))

    def _lookup(self, key: str) -> CacheEntry | None:
        try:
            entry = self._backend.get_entry(key)
        except CacheUnavailableError as e:
            self._backend_failed("get", key, e)
            return None
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            try:
                self._backend.delete(key)
            except CacheUnavailableError as e:
                self._backend_failed("delete", key, e)
            return None
        return entry

    def get(self, key: str) -> Any | None:
        """Cached value, or None on miss or expiry (expired entries are evicted)."""
        entry = self._lookup(key)
        self._count("hits" if entry is not None else "misses")
        return entry.value if entry is not None else None

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        entry = CacheEntry(key=key, value=value, expires_at_unix=self._clock() + ttl_seconds)
        try:
            self._backend.put_entry(entry)
        except CacheUnavailableError as e:
            self._backend_failed("set", key, e)

    def delete(self, key: str) -> None:
        try:
            self._backend.delete(key)
        except CacheUnavailableError as e:
            self._backend_failed("delete", key, e)

    def purge_expired(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        try:
            removed = self._backend.purge(self._clock())
        except CacheUnavailableError as e:
            self._backend_failed("purge", "*", e)
            return 0
        if removed:
            logger.debug("cache_purged", removed=removed)
        return removed

    def get_or_compute(self, key: str, ttl_seconds: float, compute_fn: Callable[[], T]) -> T:
        """
        Return the cached value for key, computing and storing it on miss.

        Only one compute_fn runs per key at a time; concurrent callers wait for
        it. An exception from compute_fn propagates to every waiter and nothing
        is cached.
        """
        entry = self._lookup(key)
        if entry is not None:
            self._count("hits")
            return entry.value

        with self._lock:
            future = self._in_flight.get(key)
            leader = future is None
            if leader:
                future = Future()
                self._in_flight[key] = future
            else:
                self._stats["coalesced"] += 1

        if not leader:
            logger.debug("cache_coalesced", key=key)
            return future.result()

        try:
            # an earlier leader may have stored it since the first lookup
            entry = self._lookup(key)
            if entry is not None:
                self._count("hits")
                future.set_result(entry.value)
                return entry.value
            self._count("misses")
            value = compute_fn()
        except BaseException as e:
            if not future.done():
                future.set_exception(e)
            raise
        else:
            self.set(key, value, ttl_seconds)
            future.set_result(value)
            return value
        finally:
            with self._lock:
                self._in_flight.pop(key, None)

    def stats(self) -> dict[str, int]:
        with self._lock:
            snapshot = dict(self._stats)
        try:
            snapshot["entries"] = len(self._backend)
        except CacheUnavailableError:
            snapshot["entries"] = 0
        return snapshot
