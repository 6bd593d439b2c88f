"""
Service models for graph analytics.
"""

from enum import Enum
from typing import Dict, List, Optional
from pydantic import Field

from ...shared.models.base import BaseModel


class CommunityStrategy(str, Enum):
    """Available community partition strategies."""
    POSITIONAL = "positional"
    LABEL_PROPAGATION = "label_propagation"


class CentralNode(BaseModel):
    """A node of the top-by-degree ranking."""

    id: str = Field(..., description="Node ID")
    label: str = Field(..., description="Display name")
    degree: int = Field(..., ge=0, description="In-plus-out degree")


class Community(BaseModel):
    """A group of node ids produced by the partition step."""

    id: int = Field(..., description="Community number, starting at 1")
    node_ids: List[str] = Field(default_factory=list, description="Member node ids")

    @property
    def size(self) -> int:
        return len(self.node_ids)


class AnalyticsSnapshot(BaseModel):
    """
    Read-only summary of a node/edge snapshot.

    ``degree`` only lists nodes with at least one incident edge; use
    ``degree_of`` to read zero for the rest.
    """

    node_count: int = Field(default=0, description="Number of nodes")
    edge_count: int = Field(default=0, description="Number of edges")
    type_counts: Dict[str, int] = Field(default_factory=dict, description="Nodes per category")
    relationship_type_counts: Dict[str, int] = Field(default_factory=dict, description="Edges per relationship label")
    degree: Dict[str, int] = Field(default_factory=dict, description="Degree per node id")
    top_by_degree: List[CentralNode] = Field(default_factory=list, description="Highest-degree nodes")
    density: float = Field(default=0.0, description="Edges over the maximum possible undirected edges")
    avg_degree: float = Field(default=0.0, description="Average degree")
    partition: List[Community] = Field(default_factory=list, description="Community partition")
    strategy: CommunityStrategy = Field(default=CommunityStrategy.POSITIONAL, description="Partition strategy used")

    def degree_of(self, node_id: str) -> int:
        return self.degree.get(node_id, 0)

    def get_community(self, community_id: int) -> Optional[Community]:
        return next((c for c in self.partition if c.id == community_id), None)


class NodeConnection(BaseModel):
    """A neighbour of an inspected node."""

    node_id: str = Field(..., description="Neighbour node ID")
    label: str = Field(..., description="Neighbour display name")
    category: str = Field(..., description="Neighbour category")
    relationship: str = Field(..., description="Label of the connecting edge")


class NodeInsight(BaseModel):
    """Structured description of one node and its neighbourhood."""

    node_id: str = Field(..., description="Inspected node ID")
    label: str = Field(..., description="Inspected node name")
    category: str = Field(..., description="Inspected node category")
    connections: List[NodeConnection] = Field(default_factory=list, description="Direct neighbours")
    total_connections: int = Field(default=0, description="Number of incident edges")
    connectivity_pct: float = Field(default=0.0, description="Share of other nodes reached directly")
    summary: str = Field(default="", description="Category-specific summary sentence")
