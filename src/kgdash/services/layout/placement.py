"""
Initial placement of snapshot nodes.

Small graphs start on a grid, larger ones on up to three concentric rings, so
the simulation never begins from total overlap.
"""

import math
from typing import List, Tuple

import numpy as np

from .models import LayoutParameters

GRID_THRESHOLD = 10
RING_COUNT = 3
BASE_RING_FRACTION = 0.15
RING_GROWTH = 0.8


def base_position(index: int, total: int, params: LayoutParameters) -> Tuple[float, float]:
    """
    Position of the ``index``-th of ``total`` nodes before jitter.

    Args:
        index: Position of the node in snapshot order
        total: Number of nodes in the snapshot
        params: Layout parameters (canvas size, padding)

    Returns:
        (x, y) in canvas coordinates
    """
    width, height = params.width, params.height
    padding = params.padding

    if total <= GRID_THRESHOLD:
        cols = math.ceil(math.sqrt(total))
        rows = math.ceil(total / cols)
        col_index = index % cols
        row_index = index // cols

        x = padding + (col_index * (width - 2 * padding)) / max(1, cols - 1)
        y = padding + (row_index * (height - 2 * padding)) / max(1, rows - 1)
        return x, y

    angle = (2 * math.pi * index) / total
    ring_index = index // math.ceil(total / RING_COUNT)
    base_radius = min(width, height) * BASE_RING_FRACTION
    radius = base_radius + ring_index * base_radius * RING_GROWTH
    center_x, center_y = params.center

    return center_x + radius * math.cos(angle), center_y + radius * math.sin(angle)


def initial_positions(total: int,
                      params: LayoutParameters,
                      rng: np.random.Generator) -> List[Tuple[float, float]]:
    """Jittered, padded starting positions for ``total`` nodes."""
    positions = []
    for index in range(total):
        x, y = base_position(index, total, params)

        x += (rng.random() - 0.5) * params.jitter
        y += (rng.random() - 0.5) * params.jitter

        x = max(params.padding, min(params.width - params.padding, x))
        y = max(params.padding, min(params.height - params.padding, y))
        positions.append((x, y))

    return positions


def initial_velocity(params: LayoutParameters, rng: np.random.Generator) -> Tuple[float, float]:
    """Small random starting velocity."""
    return (
        (rng.random() - 0.5) * params.initial_speed,
        (rng.random() - 0.5) * params.initial_speed,
    )


def initial_radius(params: LayoutParameters, rng: np.random.Generator) -> float:
    return params.radius_min + rng.random() * params.radius_range
