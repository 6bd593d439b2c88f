"""
Graph analytics over a node/edge snapshot.

``compute_analytics`` is a pure function of its inputs; ``GraphAnalyticsService``
wraps it with the artificial delay the dashboard uses to emulate asynchronous
computation and always works on copies of what it is given.
"""

import asyncio
import math
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

import networkx as nx
from networkx.algorithms import community as nx_community

from ...shared import get_logger, get_settings, GraphSnapshot, ValidationError
from ..layout.engine import ForceLayoutEngine
from ..layout.models import Edge
from .models import (
    AnalyticsSnapshot, CentralNode, Community, CommunityStrategy,
    NodeConnection, NodeInsight
)

# Positional partition boundaries (fractions of the node list)
FIRST_SPLIT = 0.4
SECOND_SPLIT = 0.7
# Nominal share of each slice; a slice with a zero share is dropped
SLICE_SHARES = (0.4, 0.3, 0.3)


@dataclass(frozen=True)
class NodeRecord:
    """Minimal node view analytics needs."""
    id: str
    label: str
    category: str


def records_from_snapshot(snapshot: GraphSnapshot) -> Tuple[List[NodeRecord], List[Edge]]:
    """Convert a host snapshot into analytics records."""
    nodes = [NodeRecord(id=n.id, label=n.name, category=n.category) for n in snapshot.nodes]
    edges = [
        Edge(id=r.id, source_id=r.start_node_id, target_id=r.end_node_id, label=r.type)
        for r in snapshot.relationships
    ]
    return nodes, edges


def degree_map(edges: Sequence[Any]) -> Dict[str, int]:
    """In-plus-out degree per node id, one increment per endpoint."""
    degree: Dict[str, int] = {}
    for edge in edges:
        degree[edge.source_id] = degree.get(edge.source_id, 0) + 1
        degree[edge.target_id] = degree.get(edge.target_id, 0) + 1
    return degree


def top_by_degree(nodes: Sequence[Any], degree: Dict[str, int], top_k: int = 5) -> List[CentralNode]:
    """Highest-degree nodes; ties keep node order."""
    ranked = sorted(nodes, key=lambda n: degree.get(n.id, 0), reverse=True)
    return [
        CentralNode(id=n.id, label=n.label, degree=degree.get(n.id, 0))
        for n in ranked[:top_k]
    ]


def positional_partition(node_ids: Sequence[str]) -> List[Community]:
    """
    Split node ids into three contiguous slices (about 40/30/30 percent).

    The split follows list order only, not graph structure. A slice is kept
    only when its nominal share ``floor(N * fraction)`` is positive, so graphs
    of one or two nodes have no communities and three nodes give a single
    one-node community. Community sizes are the slice lengths.
    """
    count = len(node_ids)
    first = math.floor(count * FIRST_SPLIT)
    second = math.floor(count * SECOND_SPLIT)
    slices = [node_ids[:first], node_ids[first:second], node_ids[second:]]

    return [
        Community(id=number, node_ids=list(members))
        for number, (members, share) in enumerate(zip(slices, SLICE_SHARES), start=1)
        if math.floor(count * share) > 0
    ]


def label_propagation_partition(node_ids: Sequence[str], edges: Sequence[Any]) -> List[Community]:
    """
    Structural communities via label propagation on the undirected graph.

    Communities are numbered by the position of their first member.
    """
    if not node_ids:
        return []

    order = {node_id: i for i, node_id in enumerate(node_ids)}
    graph = nx.Graph()
    graph.add_nodes_from(node_ids)
    graph.add_edges_from(
        (e.source_id, e.target_id) for e in edges
        if e.source_id in order and e.target_id in order
    )

    groups = [sorted(group, key=order.__getitem__) for group in nx_community.label_propagation_communities(graph)]
    groups.sort(key=lambda members: order[members[0]])

    return [Community(id=number, node_ids=members) for number, members in enumerate(groups, start=1)]


def compute_analytics(nodes: Sequence[Any],
                      edges: Sequence[Any],
                      top_k: int = 5,
                      strategy: Union[CommunityStrategy, str] = CommunityStrategy.POSITIONAL) -> AnalyticsSnapshot:
    """
    Summarize a node/edge snapshot.

    Args:
        nodes: Objects with ``id``, ``label`` and ``category``
        edges: Objects with ``source_id``, ``target_id`` and ``label``
        top_k: Length of the degree ranking
        strategy: Community partition strategy

    Returns:
        Analytics snapshot; an empty graph yields zero counts and empty maps

    Raises:
        ValidationError: If ``top_k`` is negative
    """
    if top_k < 0:
        raise ValidationError(f"top_k must not be negative, got {top_k}")

    strategy = CommunityStrategy(strategy)
    node_count = len(nodes)
    edge_count = len(edges)

    degree = degree_map(edges)

    max_possible_edges = node_count * (node_count - 1) / 2
    density = edge_count / max_possible_edges if node_count >= 2 else 0.0
    avg_degree = (edge_count * 2) / node_count if node_count > 0 else 0.0

    node_ids = [n.id for n in nodes]
    if strategy == CommunityStrategy.LABEL_PROPAGATION:
        partition = label_propagation_partition(node_ids, edges)
    else:
        partition = positional_partition(node_ids)

    return AnalyticsSnapshot(
        node_count=node_count,
        edge_count=edge_count,
        type_counts=dict(Counter(n.category for n in nodes)),
        relationship_type_counts=dict(Counter(e.label for e in edges)),
        degree=degree,
        top_by_degree=top_by_degree(nodes, degree, top_k),
        density=density,
        avg_degree=avg_degree,
        partition=partition,
        strategy=strategy,
    )


# ========== Highlighting ==========

def highlight_top(snapshot: AnalyticsSnapshot) -> FrozenSet[str]:
    """Node ids of the top-by-degree ranking."""
    return frozenset(node.id for node in snapshot.top_by_degree)


def highlight_community(snapshot: AnalyticsSnapshot, community_id: int) -> FrozenSet[str]:
    """Node ids of one community; unknown ids give an empty set."""
    community = snapshot.get_community(community_id)
    return frozenset(community.node_ids) if community else frozenset()


# ========== Node insight ==========

def _summary_for(category: str, total: int, node_count: int) -> str:
    if category == 'Person':
        if total > 5:
            reach = 'highly connected'
        elif total > 2:
            reach = 'moderately connected'
        else:
            reach = 'relatively isolated'
        text = f"This person appears to be {reach} within the network."
        if total > 5:
            text += " They may play a central role as a connector or influencer."
        return text

    if category == 'Organization':
        if total > 8:
            role = 'a major institutional player'
        elif total > 3:
            role = 'an active entity'
        else:
            role = 'a smaller organization'
        return f"This organization has {total} relationships, suggesting it's {role} in this network."

    if category == 'Location':
        role = 'major hub' if total > 6 else 'connection point'
        return f"This location serves as a {role} with {total} associated entities."

    if category == 'Event':
        impact = 'significant' if total > 4 else 'moderate'
        return f"This event connects {total} different entities, indicating its {impact} impact on the network."

    if category == 'Product':
        reach = 'broad market relevance' if total > 3 else 'focused application'
        return f"This product is associated with {total} entities, suggesting {reach}."

    return f"This entity has {total} connections within the broader network of {node_count} nodes."


def describe_node(node_id: str, nodes: Sequence[Any], edges: Sequence[Any]) -> Optional[NodeInsight]:
    """
    Describe a node's neighbourhood.

    Returns:
        The insight, or None for an unknown node id
    """
    by_id = {n.id: n for n in nodes}
    node = by_id.get(node_id)
    if node is None:
        return None

    connections = []
    for edge in edges:
        if edge.source_id == node_id:
            neighbour = by_id.get(edge.target_id)
        elif edge.target_id == node_id:
            neighbour = by_id.get(edge.source_id)
        else:
            continue
        if neighbour is None:
            continue
        connections.append(NodeConnection(
            node_id=neighbour.id,
            label=neighbour.label,
            category=neighbour.category,
            relationship=edge.label,
        ))

    total = len(connections)
    return NodeInsight(
        node_id=node.id,
        label=node.label,
        category=node.category,
        connections=connections,
        total_connections=total,
        connectivity_pct=total / max(len(nodes) - 1, 1) * 100,
        summary=_summary_for(node.category, total, len(nodes)),
    )


class GraphAnalyticsService:
    """
    On-demand analytics with an artificial delay.

    Inputs are copied before the delay so later edits to the working set
    cannot leak into a running analysis.
    """

    def __init__(self,
                 delay_seconds: Optional[float] = None,
                 insight_delay_seconds: Optional[float] = None,
                 top_k: Optional[int] = None,
                 strategy: Optional[Union[CommunityStrategy, str]] = None):
        """Initialize the analytics service from settings, overridable per argument."""
        self.logger = get_logger(__name__)
        config = get_settings().analytics_config

        self.delay_seconds = config['delay_seconds'] if delay_seconds is None else delay_seconds
        self.insight_delay_seconds = (
            config['insight_delay_seconds'] if insight_delay_seconds is None else insight_delay_seconds
        )
        self.top_k = config['top_k'] if top_k is None else top_k
        self.strategy = CommunityStrategy(strategy or config['strategy'])

    async def analyze(self,
                      nodes: Sequence[Any],
                      edges: Sequence[Any],
                      strategy: Optional[Union[CommunityStrategy, str]] = None) -> AnalyticsSnapshot:
        """
        Analyze a node/edge snapshot after the configured delay.

        Args:
            nodes: Node records
            edges: Edge records
            strategy: Partition strategy override

        Returns:
            Analytics snapshot
        """
        nodes, edges = list(nodes), list(edges)
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        result = compute_analytics(nodes, edges, top_k=self.top_k, strategy=strategy or self.strategy)
        self.logger.info(
            f"Analyzed graph: {result.node_count} nodes, {result.edge_count} edges, "
            f"density {result.density:.3f}"
        )
        return result

    async def analyze_engine(self,
                             engine: ForceLayoutEngine,
                             strategy: Optional[Union[CommunityStrategy, str]] = None) -> AnalyticsSnapshot:
        """Analyze a copy of the engine's current working set."""
        nodes, edges = engine.snapshot()
        return await self.analyze(nodes, edges, strategy=strategy)

    async def analyze_snapshot(self,
                               snapshot: GraphSnapshot,
                               strategy: Optional[Union[CommunityStrategy, str]] = None) -> AnalyticsSnapshot:
        """Analyze a host snapshot directly."""
        nodes, edges = records_from_snapshot(snapshot)
        return await self.analyze(nodes, edges, strategy=strategy)

    async def describe(self, node_id: str, nodes: Sequence[Any], edges: Sequence[Any]) -> Optional[NodeInsight]:
        """Describe one node after the configured insight delay."""
        nodes, edges = list(nodes), list(edges)
        if self.insight_delay_seconds > 0:
            await asyncio.sleep(self.insight_delay_seconds)

        insight = describe_node(node_id, nodes, edges)
        if insight is None:
            self.logger.debug(f"No insight for unknown node {node_id}")
        return insight
