"""
Snapshot loading service.

Fetches snapshots through the repository, caches them in an explicit
``SnapshotCache`` and hands them to layout engines.
"""

from typing import Optional

from ...shared import get_logger, get_snapshot_cache, GraphSnapshot, SnapshotCache
from ..layout.engine import ForceLayoutEngine
from .repository import GraphSnapshotRepository


class SnapshotService:
    """
    Service for loading graph snapshots.

    The cache is only consulted once the application has initialized it.
    """

    def __init__(self,
                 repository: Optional[GraphSnapshotRepository] = None,
                 cache: Optional[SnapshotCache] = None):
        self.logger = get_logger(__name__)
        self.repository = repository or GraphSnapshotRepository()
        self.cache = cache or get_snapshot_cache()

    @staticmethod
    def cache_key(limit: Optional[int] = None) -> str:
        return f"snapshot:{limit if limit is not None else 'all'}"

    def load(self, limit: Optional[int] = None, use_cache: bool = True) -> GraphSnapshot:
        """
        Load a snapshot, from cache when possible.

        Args:
            limit: Optional cap on start nodes
            use_cache: Whether to read and fill the cache

        Returns:
            Graph snapshot
        """
        key = self.cache_key(limit)
        caching = use_cache and self.cache.is_initialized

        if caching:
            cached = self.cache.get(key)
            if cached is not None:
                self.logger.debug(f"Snapshot cache hit for {key}")
                return cached

        snapshot = self.repository.fetch_snapshot(limit)

        if caching:
            self.cache.set(key, snapshot)
        return snapshot

    def load_into(self,
                  engine: ForceLayoutEngine,
                  limit: Optional[int] = None,
                  use_cache: bool = True) -> GraphSnapshot:
        """Load a snapshot and replace the engine's working set with it."""
        snapshot = self.load(limit=limit, use_cache=use_cache)
        engine.load(snapshot)
        return snapshot

    def invalidate(self, limit: Optional[int] = None) -> None:
        """Forget a cached snapshot."""
        if self.cache.is_initialized:
            self.cache.invalidate(self.cache_key(limit))
