"""
Cache infrastructure for kg-dashboard.
"""

from .cache_manager import CacheEntry, MemoryCache, SnapshotCache, get_snapshot_cache

__all__ = [
    "CacheEntry",
    "MemoryCache",
    "SnapshotCache",
    "get_snapshot_cache",
]
