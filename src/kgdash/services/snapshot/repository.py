"""
Repository layer for graph snapshots.

Reads the whole entity graph (or its first ``limit`` nodes) from Neo4j and
folds the records into a ``GraphSnapshot``.
"""

from typing import Any, Dict, List, Optional

from ...shared import (
    get_logger, get_database, DatabaseManager, DatabaseError,
    GraphNode, GraphRelationship, GraphSnapshot
)


class GraphSnapshotRepository:
    """
    Repository for snapshot reads from the graph store.
    """

    SNAPSHOT_QUERY = """
    MATCH (n)
    OPTIONAL MATCH (n)-[r]->(m)
    RETURN n, r, m
    """

    LIMITED_SNAPSHOT_QUERY = """
    MATCH (n)
    WITH n LIMIT $limit
    OPTIONAL MATCH (n)-[r]->(m)
    RETURN n, r, m
    """

    def __init__(self, db: Optional[DatabaseManager] = None, connection_name: str = "default"):
        """
        Initialize repository with database connection.

        Args:
            db: Database manager (defaults to the process-wide manager)
            connection_name: Database connection to use
        """
        self.db = db or get_database()
        self.connection_name = connection_name
        self.logger = get_logger(__name__)

    def fetch_snapshot(self, limit: Optional[int] = None) -> GraphSnapshot:
        """
        Fetch nodes and relationships.

        Args:
            limit: Optional cap on start nodes

        Returns:
            Snapshot with deduplicated nodes in first-seen order
        """
        if limit is not None:
            records = self.db.execute_query(self.LIMITED_SNAPSHOT_QUERY, {'limit': limit}, self.connection_name)
        else:
            records = self.db.execute_query(self.SNAPSHOT_QUERY, {}, self.connection_name)

        try:
            snapshot = self._snapshot_from_records(records)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise DatabaseError(f"Unexpected snapshot record shape: {e}")

        self.logger.info(
            f"Fetched snapshot: {snapshot.node_count} nodes, "
            f"{snapshot.relationship_count} relationships"
        )
        return snapshot

    def _snapshot_from_records(self, records: List[Any]) -> GraphSnapshot:
        nodes: Dict[str, GraphNode] = {}
        relationships: Dict[str, GraphRelationship] = {}

        for record in records:
            for key in ('n', 'm'):
                node = record[key]
                if node is not None and node.element_id not in nodes:
                    nodes[node.element_id] = self._node_from_db(node)

            rel = record['r']
            if rel is not None and rel.element_id not in relationships:
                relationships[rel.element_id] = self._relationship_from_db(rel)

        return GraphSnapshot(nodes=list(nodes.values()), relationships=list(relationships.values()))

    def _node_from_db(self, node: Any) -> GraphNode:
        """Convert a driver node into a snapshot node."""
        return GraphNode(
            id=node.element_id,
            labels=sorted(node.labels),
            properties=dict(node.items()),
        )

    def _relationship_from_db(self, rel: Any) -> GraphRelationship:
        """Convert a driver relationship into a snapshot relationship."""
        return GraphRelationship(
            id=rel.element_id,
            type=rel.type,
            start_node_id=rel.start_node.element_id,
            end_node_id=rel.end_node.element_id,
            properties=dict(rel.items()),
        )
