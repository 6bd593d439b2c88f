"""
Tests for the matplotlib frame renderer.
"""

import base64

from kgdash.services.layout import Edge, PositionedNode
from kgdash.services.visualization import FrameRenderer
from kgdash.services.visualization.renderer import short_label

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def test_short_label():
    assert short_label("Berlin") == "Berlin"
    assert short_label("Acme Corporation") == "Acme Cor…"


def test_renders_engine_frame_to_file(tmp_path, engine, company_snapshot):
    engine.load(company_snapshot)
    engine.step()
    engine.select("org")

    output = FrameRenderer().render_engine(engine, tmp_path / "frames" / "frame.png", highlighted={"org"})

    with open(output, "rb") as f:
        assert f.read(8) == PNG_MAGIC


def test_returns_data_uri_without_path(params):
    nodes = [
        PositionedNode(id="a", label="Alpha", category="Person", x=100.0, y=100.0),
        PositionedNode(id="b", label="Beta", category="Unknown", x=300.0, y=200.0),
    ]
    edges = [
        Edge(id="e1", source_id="a", target_id="b", label="KNOWS"),
        Edge(id="e2", source_id="a", target_id="ghost", label="KNOWS"),
    ]

    uri = FrameRenderer(show_legend=False).render(nodes, edges, params)

    prefix = "data:image/png;base64,"
    assert uri.startswith(prefix)
    assert base64.b64decode(uri[len(prefix):])[:8] == PNG_MAGIC


def test_empty_frame(params):
    assert FrameRenderer().render([], [], params).startswith("data:image/png;base64,")
