"""
Shared infrastructure components for kg-dashboard.

Provides centralized infrastructure services including:
- Neo4j connection management
- Snapshot caching with an explicit lifecycle
- Logging
"""

from .database.connection_manager import DatabaseManager, get_database
from .cache.cache_manager import SnapshotCache, get_snapshot_cache
from .monitoring.logger import get_logger, setup_logging

__all__ = [
    # Database
    "DatabaseManager",
    "get_database",

    # Cache
    "SnapshotCache",
    "get_snapshot_cache",

    # Monitoring
    "get_logger",
    "setup_logging",
]
