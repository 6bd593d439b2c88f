"""
kg-dashboard - force-directed layout and analytics for knowledge-graph snapshots.
"""

__version__ = "1.0.0"

# Re-export main components for easy access
from .shared.config.settings import get_settings
from .shared.models.graph import GraphNode, GraphRelationship, GraphSnapshot
from .shared.exceptions import KGDashError
from .services.layout import ForceLayoutEngine, FrameScheduler
from .services.analytics import GraphAnalyticsService, compute_analytics

__all__ = [
    "get_settings",
    "GraphNode",
    "GraphRelationship",
    "GraphSnapshot",
    "KGDashError",
    "ForceLayoutEngine",
    "FrameScheduler",
    "GraphAnalyticsService",
    "compute_analytics",
]
