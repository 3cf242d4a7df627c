"""
Tests for snapshot serialisation and render projections.
"""

import json
from pathlib import Path

import pytest
from factories import make_edge, make_node

from canvas_graph.config import LayoutConfig
from canvas_graph.graph import CanvasGraph
from canvas_graph.projection import ProjectionError, export_adjacency, export_node_link
from canvas_graph.snapshot import CanvasSnapshot


@pytest.fixture
def populated(chain_graph: CanvasGraph) -> CanvasGraph:
    """Chain graph with a selection, an edit and a dangling edge."""
    chain_graph.select_node("A")
    chain_graph.start_editing("B")
    chain_graph.add_edge(make_edge("GONE", "C"))
    return chain_graph


class TestCanvasSnapshot:
    """Tests for CanvasSnapshot."""

    def test_default_snapshot(self) -> None:
        """Test an empty snapshot."""
        snapshot = CanvasSnapshot()

        assert snapshot.nodes == ()
        assert snapshot.editing.is_idle
        assert snapshot.version == 0

    def test_to_dict(self, populated: CanvasGraph) -> None:
        """Test the snapshot serialises to plain JSON types."""
        populated.select_node("C")

        data = populated.snapshot().to_dict()

        assert [node["id"] for node in data["nodes"]] == ["A", "B", "C"]
        assert data["selected_node_ids"] == ["A", "C"]
        assert data["editing"]["editing_node_id"] == "B"
        assert data["editing"]["input_mode"] == "note"
        assert data["viewport"] == {"x": 0, "y": 0, "zoom": 1}
        json.dumps(data)


class TestNodeLinkExport:
    """Tests for export_node_link()."""

    def test_structure(self, populated: CanvasGraph) -> None:
        """Test nodes, links and graph info are present."""
        data = export_node_link(populated.snapshot())

        assert [node["id"] for node in data["nodes"]] == ["A", "B", "C"]
        assert len(data["links"]) == 3
        assert data["graph_info"]["workspace_id"] == "ws-1"
        assert data["graph_info"]["node_count"] == 3
        assert data["graph_info"]["edge_count"] == 3

    def test_selected_and_editing_flags(self, populated: CanvasGraph) -> None:
        """Test per-node UI flags."""
        nodes = {node["id"]: node for node in export_node_link(populated.snapshot())["nodes"]}

        assert nodes["A"]["selected"] is True
        assert nodes["B"]["selected"] is False
        assert nodes["B"]["editing"] is True
        assert nodes["A"]["editing"] is False

    def test_effective_dimensions(self, graph: CanvasGraph) -> None:
        """Test nodes without explicit size report the defaults."""
        graph.add_node(make_node("A"))

        node = export_node_link(graph.snapshot())["nodes"][0]

        assert (node["width"], node["height"]) == (280, 220)

    def test_effective_dimensions_follow_graph_layout(self) -> None:
        """Test unsized nodes report the graph's own default size."""
        layout = LayoutConfig(default_node_width=320, default_node_height=180)
        graph = CanvasGraph(layout=layout)
        graph.add_node(make_node("A"))

        snapshot = graph.snapshot()
        node = export_node_link(snapshot)["nodes"][0]

        assert snapshot.layout is layout
        assert (node["width"], node["height"]) == (320, 180)
        assert export_adjacency(snapshot)["nodes"]["A"]["width"] == 320

    def test_without_data(self, populated: CanvasGraph) -> None:
        """Test the payload can be omitted."""
        node = export_node_link(populated.snapshot(), include_data=False)["nodes"][0]

        assert "data" not in node
        assert "created_at" not in node

    def test_write_to_file(self, populated: CanvasGraph, tmp_path: Path) -> None:
        """Test exporting to a file returns the JSON text."""
        output = tmp_path / "out" / "canvas.json"

        content = export_node_link(populated.snapshot(), output_path=output)

        assert output.read_text() == content
        assert json.loads(content)["graph_info"]["version"] == populated.version


class TestAdjacencyExport:
    """Tests for export_adjacency()."""

    def test_adjacency(self, populated: CanvasGraph) -> None:
        """Test outgoing lists keyed by existing nodes."""
        data = export_adjacency(populated.snapshot())

        assert data["adjacency"] == {"A": ["B"], "B": ["C"], "C": []}
        assert "id" not in data["nodes"]["A"]
        assert data["nodes"]["B"]["editing"] is True

    def test_failure_wrapped(self) -> None:
        """Test unexpected failures raise ProjectionError."""
        with pytest.raises(ProjectionError):
            export_adjacency(None)
