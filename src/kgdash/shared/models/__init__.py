"""
Shared data models for kg-dashboard.
"""

from .graph import GraphNode, GraphRelationship, GraphSnapshot, GENERIC_CATEGORY
from .base import BaseModel

__all__ = [
    # Graph models
    "GraphNode",
    "GraphRelationship",
    "GraphSnapshot",
    "GENERIC_CATEGORY",
    # Base models
    "BaseModel",
]
