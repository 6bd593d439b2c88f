"""
Tests for the force layout engine: loading, run loop, editing and interaction.
"""

import pytest

from kgdash.shared import GraphSnapshot
from kgdash.services.layout import ForceLayoutEngine, Edge, LayoutParameters


def run_ticks(engine, count):
    for _ in range(count):
        if not engine.is_running():
            engine.restart()
        engine.step()


def assert_in_bounds(engine):
    params = engine.params
    for node in engine.nodes:
        assert node.radius <= node.x <= params.width - node.radius
        assert node.radius <= node.y <= params.height - node.radius


class TestLoading:

    def test_load_builds_working_set(self, engine, company_snapshot):
        engine.load(company_snapshot)

        assert len(engine.nodes) == 12
        assert len(engine.edges) == 10
        assert engine.is_running()
        assert engine.iterations == 0

        alice = engine.get_node("p0")
        assert alice.label == "Person 0"
        assert alice.category == "Person"
        assert alice.color == "#3b82f6"
        assert engine.get_node("launch").category == "Event"
        assert engine.get_node("misc").label == "Node misc"
        assert engine.get_node("misc").color == "#6b7280"

    def test_load_replaces_instead_of_merging(self, engine, company_snapshot, two_node_snapshot):
        engine.load(company_snapshot)
        engine.select("p0")
        engine.load(two_node_snapshot)

        assert [n.id for n in engine.nodes] == ["A", "B"]
        assert engine.selected_id is None

    def test_seeded_engines_agree(self, params, company_snapshot):
        first = ForceLayoutEngine(params=params, seed=99)
        second = ForceLayoutEngine(params=params, seed=99)
        first.load(company_snapshot)
        second.load(company_snapshot)

        assert [(n.x, n.y, n.radius) for n in first.nodes] == [(n.x, n.y, n.radius) for n in second.nodes]

    def test_from_snapshot(self, params, two_node_snapshot):
        engine = ForceLayoutEngine.from_snapshot(two_node_snapshot, params=params, seed=1)
        assert len(engine.nodes) == 2

    def test_snapshot_radius_range(self, engine, company_snapshot):
        engine.load(company_snapshot)
        assert all(18 <= n.radius < 26 for n in engine.nodes)


class TestRunLoop:

    def test_stops_within_iteration_budget(self, engine, company_snapshot):
        engine.load(company_snapshot)
        ticks = 0
        while engine.step():
            ticks += 1
            assert ticks <= engine.params.max_iterations

        assert not engine.is_running()
        assert engine.iterations == 0

    def test_bounds_hold_after_every_tick(self, engine, company_snapshot):
        engine.load(company_snapshot)
        while engine.step():
            assert_in_bounds(engine)

    def test_step_on_idle_engine_is_noop(self, engine, two_node_snapshot):
        engine.load(two_node_snapshot)
        engine.stop()
        before = [(n.x, n.y) for n in engine.nodes]

        assert engine.step() is False
        assert [(n.x, n.y) for n in engine.nodes] == before

    def test_empty_snapshot_stops_after_one_tick(self, engine):
        engine.load(GraphSnapshot())
        assert engine.step() is True
        assert not engine.is_running()

    def test_settled_layout_stops(self):
        engine = ForceLayoutEngine(params=LayoutParameters(settle_threshold=1e9), seed=1)
        engine.load_records([("a", "A", "Entity")], [])
        engine.step()
        assert not engine.is_running()

    def test_small_budget(self, two_node_snapshot):
        engine = ForceLayoutEngine(params=LayoutParameters(max_iterations=3, settle_threshold=0.0), seed=1)
        engine.load(two_node_snapshot)
        ticks = 0
        while engine.step():
            ticks += 1
        assert ticks == 3

    def test_restart_resets_counter(self, engine, two_node_snapshot):
        engine.load(two_node_snapshot)
        engine.step()
        engine.step()
        assert engine.iterations in (0, 2)

        engine.restart()
        assert engine.is_running()
        assert engine.iterations == 0

    def test_tick_listeners(self, engine, two_node_snapshot):
        seen = []
        listener = seen.append
        engine.add_tick_listener(listener)
        engine.load(two_node_snapshot)
        engine.step()
        engine.remove_tick_listener(listener)
        engine.restart()
        engine.step()

        assert seen == [engine]


class TestEditing:

    def test_add_node_near_center(self, engine, two_node_snapshot):
        engine.load(two_node_snapshot)
        engine.stop()

        node = engine.add_node("Zed", "Person")

        assert node.id.startswith("node-")
        assert node.radius == 20
        assert abs(node.x - 400) <= 50
        assert abs(node.y - 250) <= 50
        assert -2.5 <= node.vx < 2.5
        assert engine.is_running()
        assert engine.nodes[-1] is node

    def test_blank_category_becomes_entity(self, engine):
        assert engine.add_node("Thing", "  ").category == "Entity"
        assert engine.add_node("Other").category == "Entity"

    def test_remove_node_drops_incident_edges(self, engine, company_snapshot):
        engine.load(company_snapshot)
        engine.select("org")

        assert engine.remove_node("org") is True
        assert engine.get_node("org") is None
        assert all("org" not in (e.source_id, e.target_id) for e in engine.edges)
        assert len(engine.edges) == 2
        assert engine.selected_id is None

    def test_remove_unknown_node_is_noop(self, engine, company_snapshot):
        engine.load(company_snapshot)
        nodes, edges = engine.nodes, engine.edges

        assert engine.remove_node("missing") is False
        assert engine.nodes == nodes
        assert engine.edges == edges

    def test_remove_last_node_keeps_loop_idle(self, engine):
        engine.load_records([("a", "A", "Entity")], [])
        engine.stop()
        engine.remove_node("a")
        assert not engine.is_running()

    def test_add_and_remove_edge(self, engine, two_node_snapshot):
        engine.load(two_node_snapshot)
        edge = engine.add_edge("B", "A", "EMPLOYS")

        assert edge.id.startswith("edge-")
        assert len(engine.edges) == 2
        assert engine.add_edge("A", "missing", "KNOWS") is None
        assert engine.remove_edge(edge.id) is True
        assert engine.remove_edge(edge.id) is False
        assert len(engine.edges) == 1

    def test_prune_dangling_edges(self, engine):
        engine.load_records(
            [("a", "A", "Entity"), ("b", "B", "Entity")],
            [Edge("e1", "a", "b", "KNOWS"), Edge("e2", "a", "ghost", "KNOWS")],
        )
        # Dangling edges are tolerated by the tick
        engine.step()
        assert engine.prune_dangling_edges() == 1
        assert [e.id for e in engine.edges] == ["e1"]

    def test_snapshot_returns_copies(self, engine, two_node_snapshot):
        engine.load(two_node_snapshot)
        nodes, edges = engine.snapshot()
        nodes[0].x = -1000.0
        edges[0].label = "CHANGED"

        assert engine.nodes[0].x != -1000.0
        assert engine.edges[0].label == "WORKS_FOR"


class TestInteraction:

    def test_pin_holds_position_then_releases(self, engine, two_node_snapshot):
        engine.load(two_node_snapshot)
        assert engine.pin("A", 100.0, 100.0)

        for _ in range(10):
            run_ticks(engine, 1)
            node = engine.get_node("A")
            assert (node.x, node.y) == (100.0, 100.0)
            assert (node.vx, node.vy) == (0.0, 0.0)

        engine.stop()
        assert engine.unpin("A")
        assert engine.is_running()
        engine.step()

        node = engine.get_node("A")
        assert (node.x, node.y) != (100.0, 100.0)
        assert not node.is_pinned

    def test_pin_defaults_to_current_position(self, engine, two_node_snapshot):
        engine.load(two_node_snapshot)
        node = engine.get_node("B")
        x, y = node.x, node.y

        engine.pin("B")
        assert (node.pinned_x, node.pinned_y) == (x, y)

    def test_pin_is_clamped_into_canvas(self, engine, two_node_snapshot):
        engine.load(two_node_snapshot)
        engine.pin("A", -50.0, 9999.0)
        node = engine.get_node("A")
        margin = node.radius + engine.params.boundary_margin

        assert node.pinned_x == margin
        assert node.pinned_y == engine.params.height - margin

    def test_unknown_ids_are_noops(self, engine, two_node_snapshot):
        engine.load(two_node_snapshot)
        assert engine.pin("missing", 10, 10) is False
        assert engine.unpin("missing") is False
        assert engine.select("missing") is False
        assert engine.click("missing") is False

    def test_click_selects_and_notifies_host(self, params, two_node_snapshot):
        clicked = []
        engine = ForceLayoutEngine(params=params, seed=2, on_node_click=clicked.append)
        engine.load(two_node_snapshot)

        assert engine.click("B")
        assert engine.selected_id == "B"
        assert clicked == ["B"]

        engine.select(None)
        assert engine.selected_id is None


class TestTwoNodeScenario:

    def test_grid_is_one_by_two(self, two_node_snapshot):
        engine = ForceLayoutEngine(params=LayoutParameters(jitter=0.0), seed=0)
        engine.load(two_node_snapshot)

        a, b = engine.nodes
        assert (a.x, a.y) == (80.0, 80.0)
        assert (b.x, b.y) == (720.0, 80.0)

    def test_spring_pulls_pair_together(self, params, two_node_snapshot):
        engine = ForceLayoutEngine(params=params, seed=0)
        engine.load(two_node_snapshot)
        a, b = engine.nodes
        start = abs(b.x - a.x)

        run_ticks(engine, 20)
        assert abs(b.x - a.x) < start
