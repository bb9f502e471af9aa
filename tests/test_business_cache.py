"""
tests/test_business_cache.py

Pytest unit tests for BusinessCache with an injectable millisecond clock.
"""

from __future__ import annotations

import threading
import time

import pytest

from app.cache.business_cache import (
    STATS_KEY,
    BusinessCache,
    featured_businesses_key,
    random_businesses_key,
)


class FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(clock: FakeClock) -> BusinessCache:
    return BusinessCache(clock=clock)


class TestTtl:
    def test_get_within_ttl_returns_data(self, cache: BusinessCache, clock: FakeClock) -> None:
        cache.set("k", {"a": 1}, 1000)
        clock.advance(1000)

        assert cache.get("k") == {"a": 1}

    def test_get_after_ttl_is_miss_and_evicts(self, cache: BusinessCache, clock: FakeClock) -> None:
        cache.set("k", "data", 1000)
        clock.advance(1001)

        assert cache.get("k") is None
        assert len(cache) == 0

    def test_has_respects_expiry(self, cache: BusinessCache, clock: FakeClock) -> None:
        cache.set("k", "data", 10)
        assert cache.has("k")

        clock.advance(11)

        assert not cache.has("k")

    def test_set_overwrites_and_restarts_ttl(self, cache: BusinessCache, clock: FakeClock) -> None:
        cache.set("k", "old", 100)
        clock.advance(90)
        cache.set("k", "new", 100)
        clock.advance(90)

        assert cache.get("k") == "new"

    def test_empty_cache_is_truthy(self, cache: BusinessCache) -> None:
        assert len(cache) == 0
        assert bool(cache) is True

    def test_real_clock_default(self) -> None:
        cache = BusinessCache()
        cache.set("k", "v", 60_000)

        assert cache.get("k") == "v"


class TestEviction:
    def test_delete_and_clear(self, cache: BusinessCache) -> None:
        cache.set("a", 1, 1000)
        cache.set("b", 2, 1000)

        assert cache.delete("a") is True
        assert cache.delete("a") is False
        cache.clear()

        assert len(cache) == 0

    def test_cleanup_removes_only_expired(self, cache: BusinessCache, clock: FakeClock) -> None:
        cache.set("short", 1, 10)
        cache.set("long", 2, 10_000)
        clock.advance(50)

        assert cache.cleanup() == 1
        assert cache.get("long") == 2
        assert cache.cleanup() == 0

    def test_invalidate_business_caches(self, cache: BusinessCache) -> None:
        cache.set(featured_businesses_key(6), [], 1000)
        cache.set(random_businesses_key(9), [], 1000)
        cache.set(STATS_KEY, {}, 1000)
        cache.set("categories", [], 1000)

        evicted = cache.invalidate_business_caches()

        assert evicted == 3
        assert cache.has("categories")
        assert not cache.has(featured_businesses_key(6))

    def test_keys_encode_parameters(self) -> None:
        assert featured_businesses_key(6) != featured_businesses_key(12)
        assert random_businesses_key(9) == "random_businesses_9"


class TestGetOrLoad:
    def test_miss_loads_and_stores(self, cache: BusinessCache) -> None:
        calls: list[int] = []

        def loader() -> str:
            calls.append(1)
            return "value"

        assert cache.get_or_load("k", 1000, loader) == "value"
        assert cache.get_or_load("k", 1000, loader) == "value"
        assert len(calls) == 1

    def test_reloads_after_expiry(self, cache: BusinessCache, clock: FakeClock) -> None:
        values = iter(["first", "second"])

        cache.get_or_load("k", 100, lambda: next(values))
        clock.advance(101)

        assert cache.get_or_load("k", 100, lambda: next(values)) == "second"

    def test_loader_exception_propagates_and_stores_nothing(self, cache: BusinessCache) -> None:
        def loader() -> str:
            raise RuntimeError("db down")

        with pytest.raises(RuntimeError):
            cache.get_or_load("k", 1000, loader)

        assert not cache.has("k")

    def test_invalidation_during_load_discards_result(self, cache: BusinessCache) -> None:
        def loader() -> str:
            cache.invalidate_business_caches()
            return "stale"

        assert cache.get_or_load(featured_businesses_key(6), 1000, loader) == "stale"
        assert not cache.has(featured_businesses_key(6))

    def test_none_results_are_cached(self, cache: BusinessCache) -> None:
        calls: list[int] = []

        def loader() -> None:
            calls.append(1)
            return None

        cache.get_or_load("k", 1000, loader)
        cache.get_or_load("k", 1000, loader)

        assert len(calls) == 1

    def test_concurrent_misses_share_one_load(self) -> None:
        cache = BusinessCache()
        calls: list[int] = []
        results: list[str] = []

        def loader() -> str:
            calls.append(1)
            time.sleep(0.05)
            return "value"

        def worker() -> None:
            results.append(cache.get_or_load("k", 60_000, loader))

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert results == ["value"] * 5
        assert len(calls) == 1

    def test_load_locks_are_released_after_load(self, cache: BusinessCache) -> None:
        cache.get_or_load("k", 1000, lambda: "value")

        assert cache._load_locks == {}

    def test_load_locks_are_released_after_loader_error(self, cache: BusinessCache) -> None:
        def loader() -> str:
            raise RuntimeError("db down")

        for key in ("a", "b", "c"):
            with pytest.raises(RuntimeError):
                cache.get_or_load(key, 1000, loader)

        assert cache._load_locks == {}

    def test_concurrent_load_leaves_no_locks_behind(self) -> None:
        cache = BusinessCache()

        def loader() -> str:
            time.sleep(0.02)
            return "value"

        threads = [
            threading.Thread(target=cache.get_or_load, args=(f"k{i % 2}", 60_000, loader)) for i in range(6)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert cache._load_locks == {}
        assert cache.get("k0") == cache.get("k1") == "value"
