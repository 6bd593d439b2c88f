"""
One integration step of the force-directed layout.

Forces depend on positions only, so every pair and every edge is evaluated
against the positions at the start of the tick. That makes the pairwise
repulsion a plain numpy matrix computation instead of a nested loop.
"""

from typing import Dict, List, Sequence, Tuple

import numpy as np

from .models import PositionedNode, Edge, LayoutParameters


def index_nodes(nodes: Sequence[PositionedNode]) -> Dict[str, int]:
    """Map node ids to their position in the working list."""
    return {node.id: i for i, node in enumerate(nodes)}


def resolve_edges(edges: Sequence[Edge], index: Dict[str, int]) -> List[Tuple[int, int]]:
    """Endpoint indices of every edge whose source and target both exist."""
    return [
        (index[edge.source_id], index[edge.target_id])
        for edge in edges
        if edge.source_id in index and edge.target_id in index
    ]


def repulsion(x: np.ndarray,
              y: np.ndarray,
              radius: np.ndarray,
              params: LayoutParameters) -> Tuple[np.ndarray, np.ndarray]:
    """
    Velocity change from pairwise repulsion.

    Pairs at distance zero or beyond the culling distance contribute nothing.
    Pairs closer than ``max(min_separation, rA + rB + margin)`` repel twice as hard.
    """
    # dx[i, j] points from node i to node j
    dx = x[np.newaxis, :] - x[:, np.newaxis]
    dy = y[np.newaxis, :] - y[:, np.newaxis]
    d2 = dx * dx + dy * dy
    d = np.sqrt(d2)

    active = (d > 0) & (d < params.max_repulsion_distance)
    safe_d2 = np.where(active, d2, 1.0)
    safe_d = np.where(active, d, 1.0)

    force = np.where(active, params.repel_strength / safe_d2, 0.0)
    target = np.maximum(
        params.min_separation,
        radius[:, np.newaxis] + radius[np.newaxis, :] + params.separation_margin
    )
    force = np.where(active & (d < target), force * 2, force)

    fx = dx / safe_d * force
    fy = dy / safe_d * force

    # Each node is pushed away from every active partner
    return -fx.sum(axis=1), -fy.sum(axis=1)


def springs(x: np.ndarray,
            y: np.ndarray,
            pairs: List[Tuple[int, int]],
            params: LayoutParameters) -> Tuple[np.ndarray, np.ndarray]:
    """Velocity change from edge springs towards ``link_distance``."""
    dvx = np.zeros_like(x)
    dvy = np.zeros_like(y)
    if not pairs:
        return dvx, dvy

    src, tgt = np.array(pairs, dtype=int).T
    ex = x[tgt] - x[src]
    ey = y[tgt] - y[src]
    dist = np.hypot(ex, ey)

    stretched = dist > 0
    safe_dist = np.where(stretched, dist, 1.0)
    force = np.where(stretched, (dist - params.link_distance) * params.link_strength, 0.0)

    fx = ex / safe_dist * force
    fy = ey / safe_dist * force

    np.add.at(dvx, src, fx)
    np.add.at(dvy, src, fy)
    np.add.at(dvx, tgt, -fx)
    np.add.at(dvy, tgt, -fy)
    return dvx, dvy


def apply_tick(nodes: Sequence[PositionedNode],
               edges: Sequence[Edge],
               params: LayoutParameters) -> float:
    """
    Advance the layout by one tick, mutating ``nodes`` in place.

    Args:
        nodes: Live working set
        edges: Live edges, resolved by id on every call
        params: Physics constants

    Returns:
        Summed absolute velocity after the tick
    """
    if not nodes:
        return 0.0

    x = np.array([n.x for n in nodes], dtype=float)
    y = np.array([n.y for n in nodes], dtype=float)
    vx = np.array([n.vx for n in nodes], dtype=float)
    vy = np.array([n.vy for n in nodes], dtype=float)
    radius = np.array([n.radius for n in nodes], dtype=float)

    pinned_x = np.array([n.pinned_x is not None for n in nodes])
    pinned_y = np.array([n.pinned_y is not None for n in nodes])
    pin_x = np.array([n.pinned_x if n.pinned_x is not None else n.x for n in nodes], dtype=float)
    pin_y = np.array([n.pinned_y if n.pinned_y is not None else n.y for n in nodes], dtype=float)

    # Pinned axes take their pinned value before any force is measured
    x = np.where(pinned_x, pin_x, x)
    y = np.where(pinned_y, pin_y, y)

    center_x, center_y = params.center
    vx = vx + np.where(pinned_x, 0.0, (center_x - x) * params.center_strength)
    vy = vy + np.where(pinned_y, 0.0, (center_y - y) * params.center_strength)

    rvx, rvy = repulsion(x, y, radius, params)
    svx, svy = springs(x, y, resolve_edges(edges, index_nodes(nodes)), params)
    vx = vx + rvx + svx
    vy = vy + rvy + svy

    vx = np.where(pinned_x, 0.0, vx * params.damping)
    vy = np.where(pinned_y, 0.0, vy * params.damping)

    x = x + vx * params.alpha
    y = y + vy * params.alpha

    margin = radius + params.boundary_margin
    x = np.where(pinned_x, pin_x, np.clip(x, margin, params.width - margin))
    y = np.where(pinned_y, pin_y, np.clip(y, margin, params.height - margin))

    for i, node in enumerate(nodes):
        node.x = float(x[i])
        node.y = float(y[i])
        node.vx = float(vx[i])
        node.vy = float(vy[i])

    return float(np.abs(vx).sum() + np.abs(vy).sum())
