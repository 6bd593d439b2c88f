"""
Graph snapshot models for kg-dashboard.

These models describe the node/relationship snapshot the hosting application
hands over (the shape returned by the graph store). They are consumed by:
- layout: builds positioned nodes and edges from a snapshot
- analytics: reads categories and relationship types
- snapshot: produced from Neo4j records and cached JSON files
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional, List, Union
from pydantic import Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .base import BaseModel
from ..exceptions import SnapshotError

GENERIC_CATEGORY = "Entity"


class GraphNode(BaseModel):
    """
    Represents an entity node in the knowledge graph snapshot.

    ``labels`` carries the graph-store labels (e.g. ``["Entity", "Person"]``);
    the display name and category are read from the property bag.
    """

    model_config = {"extra": "ignore"}

    id: str = Field(..., description="Unique identifier for the node")
    labels: List[str] = Field(default_factory=list, description="Graph-store labels")
    properties: Dict[str, Any] = Field(default_factory=dict, description="Node properties")

    @field_validator('id', mode='before')
    @classmethod
    def validate_id(cls, v):
        """Accept integer identities from older graph stores."""
        if v is None or str(v).strip() == "":
            raise ValueError("Node id cannot be empty")
        return str(v)

    @property
    def name(self) -> str:
        """Display name, falling back to the node id."""
        return self.properties.get('name') or f"Node {self.id}"

    @property
    def category(self) -> str:
        """Classification tag used for colouring and type counts."""
        declared = self.properties.get('type')
        if declared:
            return str(declared)
        for label in self.labels:
            if label and label != GENERIC_CATEGORY:
                return label
        return GENERIC_CATEGORY


class GraphRelationship(BaseModel):
    """
    Represents a directed, typed relationship between two node ids.
    """

    model_config = {"extra": "ignore"}

    id: str = Field(..., description="Unique identifier for the relationship")
    type: str = Field(..., description="Relationship type (e.g. 'WORKS_FOR')")
    start_node_id: str = Field(..., alias="startNodeId", description="ID of the source node")
    end_node_id: str = Field(..., alias="endNodeId", description="ID of the target node")
    properties: Dict[str, Any] = Field(default_factory=dict, description="Relationship properties")

    @field_validator('id', 'start_node_id', 'end_node_id', mode='before')
    @classmethod
    def validate_ids(cls, v):
        if v is None or str(v).strip() == "":
            raise ValueError("Relationship ids cannot be empty")
        return str(v)

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        """Trim surrounding whitespace; the label itself is kept as observed."""
        return v.strip() if v else v


class GraphSnapshot(BaseModel):
    """
    A complete node/relationship snapshot as delivered by the graph store.
    """

    model_config = {"extra": "ignore"}

    nodes: List[GraphNode] = Field(default_factory=list, description="Snapshot nodes")
    relationships: List[GraphRelationship] = Field(default_factory=list, description="Snapshot relationships")

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def relationship_count(self) -> int:
        return len(self.relationships)

    def get_node_by_id(self, node_id: str) -> Optional[GraphNode]:
        """Get a node by its ID."""
        return next((n for n in self.nodes if n.id == node_id), None)

    def get_relationships_for_node(self, node_id: str) -> List[GraphRelationship]:
        """Get all relationships involving a specific node."""
        return [
            r for r in self.relationships
            if r.start_node_id == node_id or r.end_node_id == node_id
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the host's camelCase field names."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphSnapshot":
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise SnapshotError(f"Invalid graph snapshot: {e}")

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "GraphSnapshot":
        """Load a snapshot from a JSON file."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SnapshotError(f"Failed to read snapshot {path}: {e}")
        return cls.from_dict(data)

    def to_json_file(self, path: Union[str, Path]) -> Path:
        """Write the snapshot to a JSON file."""
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(self.to_dict(), f, indent=2, default=str)
        except OSError as e:
            raise SnapshotError(f"Failed to write snapshot {path}: {e}")
        return path
