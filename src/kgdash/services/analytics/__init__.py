"""
Graph analytics service for kg-dashboard.

Degree statistics, density and a community partition over the current
node/edge snapshot, computed on demand.
"""

from .models import AnalyticsSnapshot, CentralNode, Community, CommunityStrategy, NodeInsight, NodeConnection
from .service import (
    GraphAnalyticsService, NodeRecord, compute_analytics, describe_node,
    highlight_top, highlight_community, records_from_snapshot
)

__all__ = [
    "AnalyticsSnapshot",
    "CentralNode",
    "Community",
    "CommunityStrategy",
    "NodeInsight",
    "NodeConnection",
    "GraphAnalyticsService",
    "NodeRecord",
    "compute_analytics",
    "describe_node",
    "highlight_top",
    "highlight_community",
    "records_from_snapshot",
]
