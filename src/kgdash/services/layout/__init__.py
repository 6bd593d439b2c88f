"""
Force layout service for kg-dashboard.

Positions knowledge-graph nodes with a small force-directed simulation and
handles live editing and drag pinning.
"""

from .models import PositionedNode, Edge, LayoutParameters, CATEGORY_COLORS, category_color
from .engine import ForceLayoutEngine
from .scheduler import FrameScheduler

__all__ = [
    "PositionedNode",
    "Edge",
    "LayoutParameters",
    "CATEGORY_COLORS",
    "category_color",
    "ForceLayoutEngine",
    "FrameScheduler",
]
