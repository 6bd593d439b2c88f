"""
Shared fixtures for the kg-dashboard test suite.
"""

import os

os.environ.setdefault("MPLBACKEND", "Agg")

import pytest

from kgdash.shared import GraphSnapshot, get_settings
from kgdash.services.layout import ForceLayoutEngine, LayoutParameters


@pytest.fixture(autouse=True)
def fresh_settings():
    """Every test reads settings from a clean cache."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def params():
    return LayoutParameters()


@pytest.fixture
def two_node_snapshot():
    return GraphSnapshot.from_dict({
        "nodes": [
            {"id": "A", "labels": ["Entity", "Person"], "properties": {"name": "Alice"}},
            {"id": "B", "labels": ["Entity", "Organization"], "properties": {"name": "Acme"}},
        ],
        "relationships": [
            {"id": "r1", "type": "WORKS_FOR", "startNodeId": "A", "endNodeId": "B", "properties": {}},
        ],
    })


@pytest.fixture
def company_snapshot():
    """Twelve nodes in a small company graph, enough for the ring placement."""
    people = [f"p{i}" for i in range(6)]
    nodes = [
        {"id": pid, "labels": ["Entity", "Person"], "properties": {"name": f"Person {i}"}}
        for i, pid in enumerate(people)
    ]
    nodes += [
        {"id": "org", "labels": ["Entity", "Organization"], "properties": {"name": "Acme Corporation"}},
        {"id": "lab", "labels": ["Entity", "Organization"], "properties": {"name": "Research Lab"}},
        {"id": "city", "labels": ["Entity", "Location"], "properties": {"name": "Berlin"}},
        {"id": "launch", "labels": ["Entity"], "properties": {"name": "Launch", "type": "Event"}},
        {"id": "widget", "labels": ["Entity", "Product"], "properties": {"name": "Widget"}},
        {"id": "misc", "labels": ["Entity"], "properties": {}},
    ]
    rels = [
        {"id": f"w{i}", "type": "WORKS_FOR", "startNodeId": pid, "endNodeId": "org"}
        for i, pid in enumerate(people)
    ]
    rels += [
        {"id": "l1", "type": "LOCATED_IN", "startNodeId": "org", "endNodeId": "city"},
        {"id": "l2", "type": "LOCATED_IN", "startNodeId": "lab", "endNodeId": "city"},
        {"id": "m1", "type": "MAKES", "startNodeId": "org", "endNodeId": "widget"},
        {"id": "e1", "type": "ATTENDED", "startNodeId": "p0", "endNodeId": "launch"},
    ]
    return GraphSnapshot.from_dict({"nodes": nodes, "relationships": rels})


@pytest.fixture
def engine(params):
    return ForceLayoutEngine(params=params, seed=7)


@pytest.fixture
def snapshot_file(tmp_path, company_snapshot):
    return company_snapshot.to_json_file(tmp_path / "snapshot.json")
