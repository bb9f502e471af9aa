"""
app/cache/business_cache.py

In-process TTL cache for expensive business read queries.

One instance is owned by the application (see ``create_app``); the periodic
sweep is an APScheduler job registered in ``app.scheduler.jobs``. All entry
access goes through a single lock because FastAPI runs sync endpoints on a
worker thread pool.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

FEATURED_PREFIX = "featured_businesses_"
RANDOM_PREFIX = "random_businesses_"
STATS_KEY = "business_stats"

BUSINESS_CACHE_PREFIXES: tuple[str, ...] = (FEATURED_PREFIX, RANDOM_PREFIX, STATS_KEY)

_MISS = object()


def featured_businesses_key(limit: int) -> str:
    return f"{FEATURED_PREFIX}{limit}"


def random_businesses_key(limit: int) -> str:
    return f"{RANDOM_PREFIX}{limit}"


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass
class _CacheEntry:
    data: Any
    stored_at: float
    ttl_ms: float

    def is_expired(self, now_ms: float) -> bool:
        return now_ms - self.stored_at > self.ttl_ms


class BusinessCache:
    """
    Key/value store with per-entry expiry measured in milliseconds.
    """

    def __init__(self, *, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or _monotonic_ms
        self._entries: dict[str, _CacheEntry] = {}
        self._lock = threading.Lock()
        self._load_locks: dict[str, threading.Lock] = {}
        # Bumped by every eviction that is not a TTL expiry; a load that
        # started under an older generation must not store its result.
        self._generation = 0

    def set(self, key: str, data: Any, ttl_ms: float) -> None:
        with self._lock:
            self._store_locked(key, data, ttl_ms)

    def get(self, key: str) -> Any:
        """
        Return the cached value, or None when absent or expired.
        """

        with self._lock:
            value = self._lookup_locked(key)
        return None if value is _MISS else value

    def has(self, key: str) -> bool:
        with self._lock:
            return self._lookup_locked(key) is not _MISS

    def delete(self, key: str) -> bool:
        with self._lock:
            self._generation += 1
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            self._entries.clear()

    def cleanup(self) -> int:
        """
        Evict every expired entry and return how many were removed.
        """

        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Business cache sweep evicted=%s", len(expired))
        return len(expired)

    def invalidate_business_caches(self) -> int:
        """
        Drop featured, random and stats entries after any business mutation.
        """

        with self._lock:
            self._generation += 1
            doomed = [
                key
                for key in self._entries
                if any(key.startswith(prefix) for prefix in BUSINESS_CACHE_PREFIXES)
            ]
            for key in doomed:
                del self._entries[key]
        logger.info("Business caches invalidated evicted=%s", len(doomed))
        return len(doomed)

    def get_or_load(self, key: str, ttl_ms: float, loader: Callable[[], T]) -> T:
        """
        Return the cached value for ``key`` or compute it with ``loader``.

        Concurrent misses on the same key share one loader call. Exceptions
        from the loader propagate and nothing is stored.
        """

        with self._lock:
            value = self._lookup_locked(key)
            if value is not _MISS:
                return value
            load_lock = self._load_locks.setdefault(key, threading.Lock())

        try:
            with load_lock:
                with self._lock:
                    value = self._lookup_locked(key)
                    if value is not _MISS:
                        return value
                    generation = self._generation

                loaded = loader()

                with self._lock:
                    if self._generation == generation:
                        self._store_locked(key, loaded, ttl_ms)
                    else:
                        logger.debug("Business cache load discarded after invalidation key=%s", key)
                return loaded
        finally:
            # Waiting threads keep their reference and re-check the entry;
            # later callers start a fresh lock.
            with self._lock:
                if self._load_locks.get(key) is load_lock:
                    del self._load_locks[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __bool__(self) -> bool:
        # Truthy even when empty, unlike a plain container.
        return True

    def _lookup_locked(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return _MISS
        if entry.is_expired(self._clock()):
            del self._entries[key]
            return _MISS
        return entry.data

    def _store_locked(self, key: str, data: Any, ttl_ms: float) -> None:
        self._entries[key] = _CacheEntry(data=data, stored_at=self._clock(), ttl_ms=ttl_ms)
