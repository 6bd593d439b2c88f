"""
Cache management for kg-dashboard.

Snapshots fetched from the graph store are cached in an explicit cache object
with a process-wide lifecycle (``initialize()`` / ``clear()``) instead of a
module-level dictionary, so callers pass the cache into the boundary that uses it.
"""

import threading
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional, List

from ...config.settings import get_settings
from ...exceptions import CacheError


@dataclass
class CacheEntry:
    """Represents a cached item with metadata."""

    value: Any
    created_at: float
    accessed_at: float
    access_count: int = 0
    ttl_seconds: Optional[float] = None

    @property
    def is_expired(self) -> bool:
        """Check if entry has expired."""
        if self.ttl_seconds is None:
            return False
        return time.time() - self.created_at > self.ttl_seconds

    def touch(self):
        """Update access timestamp and count."""
        self.accessed_at = time.time()
        self.access_count += 1


class MemoryCache:
    """In-memory cache backend with LRU eviction."""

    def __init__(self, max_size: int = 1000):
        self.max_size = max_size
        self._cache: Dict[str, CacheEntry] = {}
        self._access_order: List[str] = []
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[CacheEntry]:
        """Get cached entry by key, dropping it if expired."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            if entry.is_expired:
                self.delete(key)
                return None

            entry.touch()
            # Move to end for LRU
            if key in self._access_order:
                self._access_order.remove(key)
            self._access_order.append(key)

            return entry

    def set(self, key: str, entry: CacheEntry) -> None:
        """Set cached entry."""
        with self._lock:
            while len(self._cache) >= self.max_size and key not in self._cache:
                self._evict_lru()

            self._cache[key] = entry
            if key in self._access_order:
                self._access_order.remove(key)
            self._access_order.append(key)

    def delete(self, key: str) -> bool:
        """Delete cached entry."""
        with self._lock:
            if key in self._cache:
                del self._cache[key]
                if key in self._access_order:
                    self._access_order.remove(key)
                return True
            return False

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            self._cache.clear()
            self._access_order.clear()

    def keys(self) -> List[str]:
        """Get all cache keys."""
        with self._lock:
            return list(self._cache.keys())

    def size(self) -> int:
        """Get cache size."""
        return len(self._cache)

    def _evict_lru(self):
        """Evict least recently used item."""
        if self._access_order:
            lru_key = self._access_order.pop(0)
            del self._cache[lru_key]


class SnapshotCache:
    """
    Explicit cache for graph snapshots.

    Must be initialized before use; ``clear()`` tears the backend down again.
    Keys are snapshot query descriptors such as ``"snapshot:all"``.
    """

    def __init__(self, max_size: Optional[int] = None, ttl_seconds: Optional[float] = None):
        settings = get_settings()
        self.max_size = max_size if max_size is not None else settings.cache_config['memory_size']
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.cache_config['ttl']
        self._backend: Optional[MemoryCache] = None
        self._lock = threading.RLock()

    @property
    def is_initialized(self) -> bool:
        return self._backend is not None

    def initialize(self) -> None:
        """Create the backing store. Calling it twice keeps existing entries."""
        with self._lock:
            if self._backend is None:
                self._backend = MemoryCache(max_size=self.max_size)

    def clear(self) -> None:
        """Drop all entries and return to the uninitialized state."""
        with self._lock:
            if self._backend is not None:
                self._backend.clear()
            self._backend = None

    def _require_backend(self) -> MemoryCache:
        if self._backend is None:
            raise CacheError("Snapshot cache used before initialize()")
        return self._backend

    def get(self, key: str) -> Any:
        """Get a cached value or None."""
        with self._lock:
            entry = self._require_backend().get(key)
            return entry.value if entry else None

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        """Cache a value under ``key``."""
        with self._lock:
            now = time.time()
            entry = CacheEntry(
                value=value,
                created_at=now,
                accessed_at=now,
                ttl_seconds=self.ttl_seconds if ttl_seconds is None else ttl_seconds
            )
            self._require_backend().set(key, entry)

    def invalidate(self, key: Optional[str] = None) -> None:
        """Drop one key, or every key when none is given."""
        with self._lock:
            backend = self._require_backend()
            if key is None:
                backend.clear()
            else:
                backend.delete(key)

    def size(self) -> int:
        with self._lock:
            return self._backend.size() if self._backend is not None else 0


@lru_cache()
def get_snapshot_cache() -> SnapshotCache:
    """
    Get the process-wide snapshot cache.

    The returned cache still has to be initialized by the application.
    """
    return SnapshotCache()
