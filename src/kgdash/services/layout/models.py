"""
Working-set models for the force layout engine.

Nodes and edges here are plain mutable dataclasses: the engine rewrites
positions and velocities every tick, so they stay out of pydantic validation.
"""

from dataclasses import dataclass, fields
from typing import Dict, Any, Optional

from ...shared.config.settings import get_settings
from ...shared.models.graph import GENERIC_CATEGORY

CATEGORY_COLORS = {
    'Person': '#3b82f6',
    'Organization': '#ef4444',
    'Location': '#f59e0b',
    'Event': '#10b981',
    'Product': '#8b5cf6',
    GENERIC_CATEGORY: '#6b7280',
}

DEFAULT_COLOR = CATEGORY_COLORS[GENERIC_CATEGORY]


def category_color(category: Optional[str]) -> str:
    """Rendering colour for a category, falling back to the generic colour."""
    return CATEGORY_COLORS.get(category or GENERIC_CATEGORY, DEFAULT_COLOR)


@dataclass
class PositionedNode:
    """A node of the live layout with position, velocity and optional pin."""
    id: str
    label: str
    category: str
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    radius: float = 20.0
    pinned_x: Optional[float] = None
    pinned_y: Optional[float] = None

    @property
    def color(self) -> str:
        return category_color(self.category)

    @property
    def is_pinned(self) -> bool:
        return self.pinned_x is not None or self.pinned_y is not None


@dataclass
class Edge:
    """A directed, labeled connection between two node ids."""
    id: str
    source_id: str
    target_id: str
    label: str


@dataclass(frozen=True)
class LayoutParameters:
    """Physics and placement constants of the layout engine."""
    width: float = 800.0
    height: float = 500.0
    center_strength: float = 0.008
    link_distance: float = 120.0
    link_strength: float = 0.1
    repel_strength: float = 400.0
    min_separation: float = 60.0
    separation_margin: float = 15.0
    max_repulsion_distance: float = 200.0
    damping: float = 0.9
    alpha: float = 0.3
    boundary_margin: float = 10.0
    settle_threshold: float = 0.03
    max_iterations: int = 100
    target_fps: float = 30.0
    padding: float = 80.0
    jitter: float = 40.0
    initial_speed: float = 5.0
    add_node_spread: float = 100.0
    radius_min: float = 18.0
    radius_range: float = 8.0
    added_node_radius: float = 20.0

    @property
    def center(self):
        return self.width / 2, self.height / 2

    @property
    def frame_interval(self) -> float:
        """Seconds between two ticks at the target frame rate."""
        return 1.0 / self.target_fps

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "LayoutParameters":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in config.items() if k in known})

    @classmethod
    def from_settings(cls) -> "LayoutParameters":
        return cls.from_config(get_settings().layout_config)
