"""
Shared components for kg-dashboard.

Contains common models, configuration, exceptions and infrastructure used by
the layout, analytics, snapshot and visualization services.
"""

from .models import *
from .config import *
from .exceptions import *
from .infrastructure import *

__all__ = [
    # From models
    "BaseModel", "GraphNode", "GraphRelationship", "GraphSnapshot", "GENERIC_CATEGORY",

    # From config
    "Settings", "get_settings",

    # From exceptions
    "KGDashError", "ConfigurationError", "DatabaseError",
    "CacheError", "ValidationError", "SnapshotError",

    # From infrastructure
    "DatabaseManager", "get_database",
    "SnapshotCache", "get_snapshot_cache",
    "get_logger", "setup_logging",
]
