"""
Force layout engine.

Owns the live node/edge working set, advances the physics one tick at a time
and exposes the editing operations the dashboard needs (add/remove, drag pins,
selection, restart). Frame timing lives in ``scheduler.py``; the engine only
knows whether it is running.
"""

import threading
import uuid
from dataclasses import replace
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from ...shared import get_logger, GraphSnapshot, GENERIC_CATEGORY
from .models import PositionedNode, Edge, LayoutParameters
from .placement import initial_positions, initial_velocity, initial_radius
from .physics import apply_tick

TickListener = Callable[["ForceLayoutEngine"], None]


class ForceLayoutEngine:
    """
    Force-directed layout over a mutable node/edge working set.

    All operations are total: unknown ids are ignored. Every state change
    holds the engine lock, so a tick never interleaves with an edit.
    """

    def __init__(self,
                 params: Optional[LayoutParameters] = None,
                 seed: Optional[int] = None,
                 on_node_click: Optional[Callable[[str], None]] = None):
        """
        Initialize the engine.

        Args:
            params: Physics constants (defaults from settings)
            seed: Seed for placement and jitter randomness
            on_node_click: Host callback receiving clicked node ids
        """
        self.logger = get_logger(__name__)
        self.params = params or LayoutParameters.from_settings()
        self.on_node_click = on_node_click

        self._rng = np.random.default_rng(seed)
        self._lock = threading.RLock()
        self._nodes: List[PositionedNode] = []
        self._edges: List[Edge] = []
        self._selected_id: Optional[str] = None
        self._running = False
        self._iterations = 0
        self._tick_listeners: List[TickListener] = []
        self.last_total_velocity: Optional[float] = None

    @classmethod
    def from_snapshot(cls, snapshot: GraphSnapshot, **kwargs) -> "ForceLayoutEngine":
        engine = cls(**kwargs)
        engine.load(snapshot)
        return engine

    # ========== State ==========

    @property
    def nodes(self) -> Tuple[PositionedNode, ...]:
        """Live nodes (read access for renderers)."""
        return tuple(self._nodes)

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return tuple(self._edges)

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def iterations(self) -> int:
        return self._iterations

    def is_running(self) -> bool:
        return self._running

    def get_node(self, node_id: str) -> Optional[PositionedNode]:
        return next((n for n in self._nodes if n.id == node_id), None)

    def snapshot(self) -> Tuple[List[PositionedNode], List[Edge]]:
        """Copies of the working set, safe to read while ticks continue."""
        with self._lock:
            return [replace(n) for n in self._nodes], [replace(e) for e in self._edges]

    # ========== Loading ==========

    def load(self, snapshot: GraphSnapshot) -> None:
        """
        Replace the working set with a new snapshot and start the run loop.

        Args:
            snapshot: Nodes and relationships from the host
        """
        edges = [
            Edge(
                id=rel.id,
                source_id=rel.start_node_id,
                target_id=rel.end_node_id,
                label=rel.type,
            )
            for rel in snapshot.relationships
        ]
        self.load_records(
            [(node.id, node.name, node.category) for node in snapshot.nodes],
            edges,
        )

    def load_records(self,
                     nodes: Sequence[Tuple[str, str, str]],
                     edges: Sequence[Edge]) -> None:
        """
        Replace the working set from ``(id, label, category)`` tuples and edges.
        """
        with self._lock:
            positions = initial_positions(len(nodes), self.params, self._rng)
            working = []
            for (node_id, label, category), (x, y) in zip(nodes, positions):
                vx, vy = initial_velocity(self.params, self._rng)
                working.append(PositionedNode(
                    id=node_id,
                    label=label,
                    category=category or GENERIC_CATEGORY,
                    x=x,
                    y=y,
                    vx=vx,
                    vy=vy,
                    radius=initial_radius(self.params, self._rng),
                ))

            self._nodes = working
            self._edges = [replace(edge) for edge in edges]
            self._selected_id = None
            self.logger.info(f"Loaded layout with {len(self._nodes)} nodes and {len(self._edges)} edges")
            self.restart()

    # ========== Run loop ==========

    def start(self) -> None:
        """Resume the run loop if it is idle."""
        with self._lock:
            if not self._running:
                self._running = True
                self.logger.debug("Layout run loop started")

    def stop(self, reason: str = "stopped") -> None:
        """Stop scheduling ticks and reset the iteration counter."""
        with self._lock:
            if self._running:
                self.logger.debug(f"Layout run loop stopped after {self._iterations} ticks ({reason})")
            self._running = False
            self._iterations = 0

    def restart(self) -> None:
        """Force the run loop to resume regardless of settled state."""
        with self._lock:
            self._iterations = 0
            self._running = True
            self.logger.debug("Layout run loop restarted")

    def step(self) -> bool:
        """
        Run one tick if the engine is running.

        Returns:
            True if a tick was computed
        """
        with self._lock:
            if not self._running:
                return False

            self._iterations += 1
            total_velocity = apply_tick(self._nodes, self._edges, self.params)
            self.last_total_velocity = total_velocity

            if not self._nodes:
                self.stop("empty")
            elif total_velocity < self.params.settle_threshold:
                self.stop("settled")
            elif self._iterations >= self.params.max_iterations:
                self.stop("iteration limit")

        for listener in list(self._tick_listeners):
            listener(self)
        return True

    def add_tick_listener(self, listener: TickListener) -> None:
        self._tick_listeners.append(listener)

    def remove_tick_listener(self, listener: TickListener) -> None:
        if listener in self._tick_listeners:
            self._tick_listeners.remove(listener)

    # ========== Editing ==========

    def add_node(self, label: str, category: str = GENERIC_CATEGORY) -> PositionedNode:
        """
        Add a node near the canvas center and resume the loop.

        Args:
            label: Display name
            category: Classification tag, blank means the generic category

        Returns:
            The new node
        """
        with self._lock:
            center_x, center_y = self.params.center
            spread = self.params.add_node_spread
            vx, vy = initial_velocity(self.params, self._rng)
            node = PositionedNode(
                id=f"node-{uuid.uuid4().hex[:12]}",
                label=label,
                category=(category or "").strip() or GENERIC_CATEGORY,
                x=center_x + (self._rng.random() - 0.5) * spread,
                y=center_y + (self._rng.random() - 0.5) * spread,
                vx=vx,
                vy=vy,
                radius=self.params.added_node_radius,
            )
            self._nodes.append(node)
            self.start()
            return node

    def remove_node(self, node_id: str) -> bool:
        """
        Remove a node and every edge touching it.

        Returns:
            True if the node existed
        """
        with self._lock:
            if self.get_node(node_id) is None:
                return False

            self._nodes = [n for n in self._nodes if n.id != node_id]
            self._edges = [
                e for e in self._edges
                if e.source_id != node_id and e.target_id != node_id
            ]
            if self._selected_id == node_id:
                self._selected_id = None

            if self._nodes:
                self.start()
            return True

    def add_edge(self, source_id: str, target_id: str, label: str) -> Optional[Edge]:
        """Connect two existing nodes; returns None when an endpoint is missing."""
        with self._lock:
            if self.get_node(source_id) is None or self.get_node(target_id) is None:
                return None

            edge = Edge(
                id=f"edge-{uuid.uuid4().hex[:12]}",
                source_id=source_id,
                target_id=target_id,
                label=label,
            )
            self._edges.append(edge)
            self.start()
            return edge

    def remove_edge(self, edge_id: str) -> bool:
        with self._lock:
            remaining = [e for e in self._edges if e.id != edge_id]
            removed = len(remaining) != len(self._edges)
            self._edges = remaining
            if removed and self._nodes:
                self.start()
            return removed

    def prune_dangling_edges(self) -> int:
        """Drop edges whose endpoints no longer exist; returns how many went."""
        with self._lock:
            ids = {n.id for n in self._nodes}
            remaining = [e for e in self._edges if e.source_id in ids and e.target_id in ids]
            pruned = len(self._edges) - len(remaining)
            self._edges = remaining
            return pruned

    # ========== Interaction ==========

    def pin(self, node_id: str, x: Optional[float] = None, y: Optional[float] = None) -> bool:
        """
        Pin a node (drag start / drag move).

        Coordinates default to the node's current position and are clamped
        into the node's canvas bounds.
        """
        with self._lock:
            node = self.get_node(node_id)
            if node is None:
                return False

            margin = node.radius + self.params.boundary_margin
            x = node.x if x is None else x
            y = node.y if y is None else y
            x = max(margin, min(self.params.width - margin, x))
            y = max(margin, min(self.params.height - margin, y))

            node.pinned_x, node.pinned_y = x, y
            node.x, node.y = x, y
            node.vx = node.vy = 0.0
            return True

    def unpin(self, node_id: str) -> bool:
        """Release a pinned node (drag end) and resume the loop."""
        with self._lock:
            node = self.get_node(node_id)
            if node is None:
                return False

            node.pinned_x = node.pinned_y = None
            self.start()
            return True

    def select(self, node_id: Optional[str]) -> bool:
        """Select a node, or clear the selection with None."""
        with self._lock:
            if node_id is not None and self.get_node(node_id) is None:
                return False
            self._selected_id = node_id
            return True

    def click(self, node_id: str) -> bool:
        """Select a node and forward its id to the host."""
        if not self.select(node_id):
            return False
        if self.on_node_click is not None:
            self.on_node_click(node_id)
        return True
