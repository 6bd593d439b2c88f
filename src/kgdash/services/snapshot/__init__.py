"""
Snapshot source for kg-dashboard.

Reads node/relationship snapshots from Neo4j and caches them.
"""

from .repository import GraphSnapshotRepository
from .service import SnapshotService

__all__ = [
    "GraphSnapshotRepository",
    "SnapshotService",
]
