"""
Tests for the snapshot cache lifecycle.
"""

import pytest

from kgdash.shared import CacheError, SnapshotCache, get_snapshot_cache
from kgdash.shared.infrastructure.cache import cache_manager
from kgdash.shared.infrastructure.cache.cache_manager import MemoryCache, CacheEntry


@pytest.fixture
def cache():
    cache = SnapshotCache(max_size=2, ttl_seconds=60)
    cache.initialize()
    yield cache
    cache.clear()


class TestLifecycle:

    def test_use_before_initialize_raises(self):
        cache = SnapshotCache()
        assert not cache.is_initialized
        with pytest.raises(CacheError):
            cache.get("snapshot:all")
        with pytest.raises(CacheError):
            cache.set("snapshot:all", object())
        with pytest.raises(CacheError):
            cache.invalidate()

    def test_clear_returns_to_uninitialized(self, cache):
        cache.set("k", 1)
        cache.clear()

        assert not cache.is_initialized
        assert cache.size() == 0
        with pytest.raises(CacheError):
            cache.get("k")

    def test_initialize_twice_keeps_entries(self, cache):
        cache.set("k", 1)
        cache.initialize()
        assert cache.get("k") == 1

    def test_defaults_from_settings(self):
        cache = SnapshotCache()
        assert cache.max_size == 32
        assert cache.ttl_seconds == 300

    def test_process_wide_instance(self):
        assert get_snapshot_cache() is get_snapshot_cache()


class TestEntries:

    def test_get_set_invalidate(self, cache):
        cache.set("a", "first")
        cache.set("b", "second")
        assert cache.get("a") == "first"

        cache.invalidate("a")
        assert cache.get("a") is None
        assert cache.get("b") == "second"

        cache.invalidate()
        assert cache.size() == 0

    def test_lru_eviction(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        cache.set("c", 3)

        assert cache.get("b") is None
        assert cache.get("a") == 1
        assert cache.get("c") == 3

    def test_entries_expire(self, cache, mocker):
        clock = mocker.patch.object(cache_manager, "time")
        clock.time.return_value = 1000.0
        cache.set("a", 1)

        clock.time.return_value = 1059.0
        assert cache.get("a") == 1

        clock.time.return_value = 1061.0
        assert cache.get("a") is None
        assert cache.size() == 0


class TestMemoryCache:

    def test_touch_counts_access(self):
        backend = MemoryCache(max_size=3)
        backend.set("k", CacheEntry(value=1, created_at=0.0, accessed_at=0.0))
        backend.get("k")
        backend.get("k")

        assert backend.get("k").access_count == 3
        assert backend.keys() == ["k"]
        assert backend.delete("k") is True
        assert backend.delete("k") is False
