"""
Tests for the single-tick force computation.
"""

import numpy as np
import pytest

from kgdash.services.layout.models import PositionedNode, Edge, LayoutParameters
from kgdash.services.layout.physics import apply_tick, repulsion, springs, resolve_edges, index_nodes


def make_node(node_id, x, y, **kwargs):
    return PositionedNode(id=node_id, label=node_id, category="Entity", x=x, y=y, **kwargs)


def naive_repulsion(x, y, radius, params):
    """Reference nested-loop implementation."""
    n = len(x)
    dvx = np.zeros(n)
    dvy = np.zeros(n)
    for i in range(n):
        for j in range(i + 1, n):
            dx = x[j] - x[i]
            dy = y[j] - y[i]
            d = np.hypot(dx, dy)
            if d == 0 or d >= params.max_repulsion_distance:
                continue
            force = params.repel_strength / (d * d)
            if d < max(params.min_separation, radius[i] + radius[j] + params.separation_margin):
                force *= 2
            fx, fy = dx / d * force, dy / d * force
            dvx[i] -= fx
            dvy[i] -= fy
            dvx[j] += fx
            dvy[j] += fy
    return dvx, dvy


class TestForces:

    def test_vectorised_repulsion_matches_pair_loop(self, params):
        rng = np.random.default_rng(11)
        x = rng.uniform(100, 500, 25)
        y = rng.uniform(100, 400, 25)
        radius = rng.uniform(18, 26, 25)

        fast = repulsion(x, y, radius, params)
        slow = naive_repulsion(x, y, radius, params)

        np.testing.assert_allclose(fast[0], slow[0], atol=1e-12)
        np.testing.assert_allclose(fast[1], slow[1], atol=1e-12)

    def test_coincident_and_distant_pairs_do_not_repel(self, params):
        x = np.array([100.0, 100.0, 700.0])
        y = np.array([100.0, 100.0, 100.0])
        radius = np.full(3, 20.0)

        dvx, dvy = repulsion(x, y, radius, params)
        assert np.all(dvx == 0)
        assert np.all(dvy == 0)

    def test_close_pair_repels_twice_as_hard(self, params):
        radius = np.full(2, 20.0)
        near_x, _ = repulsion(np.array([0.0, 50.0]), np.zeros(2), radius, params)
        far_x, _ = repulsion(np.array([0.0, 100.0]), np.zeros(2), radius, params)

        assert near_x[0] == pytest.approx(-2 * 400 / 50 ** 2)
        assert far_x[0] == pytest.approx(-400 / 100 ** 2)

    def test_stretched_spring_pulls_endpoints_together(self, params):
        x = np.array([100.0, 400.0])
        y = np.array([200.0, 200.0])
        dvx, dvy = springs(x, y, [(0, 1)], params)

        expected = (300 - params.link_distance) * params.link_strength
        assert dvx[0] == pytest.approx(expected)
        assert dvx[1] == pytest.approx(-expected)
        assert np.all(dvy == 0)

    def test_dangling_edges_are_not_resolved(self):
        nodes = [make_node("a", 0, 0), make_node("b", 1, 1)]
        edges = [Edge("e1", "a", "b", "KNOWS"), Edge("e2", "a", "gone", "KNOWS")]
        assert resolve_edges(edges, index_nodes(nodes)) == [(0, 1)]


class TestTick:

    def test_coordinates_stay_in_bounds(self, params):
        nodes = [
            make_node("corner", 0.0, 0.0, vx=-500.0, vy=-500.0),
            make_node("far", 900.0, 900.0, vx=500.0, vy=500.0),
        ]
        apply_tick(nodes, [], params)

        for node in nodes:
            assert node.radius <= node.x <= params.width - node.radius
            assert node.radius <= node.y <= params.height - node.radius

    def test_pinned_axes_hold_their_value(self, params):
        pinned = make_node("p", 300.0, 200.0, vx=3.0, vy=3.0, pinned_x=300.0, pinned_y=200.0)
        other = make_node("o", 330.0, 210.0)
        apply_tick([pinned, other], [Edge("e", "p", "o", "KNOWS")], params)

        assert (pinned.x, pinned.y) == (300.0, 200.0)
        assert (pinned.vx, pinned.vy) == (0.0, 0.0)
        assert other.x != 330.0

    def test_single_axis_pin(self, params):
        node = make_node("p", 300.0, 200.0, pinned_x=300.0)
        apply_tick([node], [], params)

        assert node.x == 300.0
        assert node.vx == 0.0
        assert node.y != 200.0

    def test_returns_summed_absolute_velocity(self, params):
        nodes = [make_node("a", 200.0, 100.0), make_node("b", 600.0, 400.0)]
        total = apply_tick(nodes, [], params)
        assert total == pytest.approx(sum(abs(n.vx) + abs(n.vy) for n in nodes))

    def test_empty_working_set(self, params):
        assert apply_tick([], [], params) == 0.0

    def test_custom_canvas(self):
        params = LayoutParameters(width=300.0, height=200.0, padding=40.0)
        node = make_node("a", 1000.0, -50.0, radius=20.0)
        apply_tick([node], [], params)
        assert node.x == pytest.approx(300.0 - 30.0)
        assert node.y == pytest.approx(30.0)
