"""
Unit tests for canvas-graph data models and configuration.
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from canvas_graph.config import DEFAULT_LAYOUT, LayoutConfig
from canvas_graph.exceptions import InvalidEdgeError, InvalidNodeError
from canvas_graph.models import (
    CanvasEdge,
    CanvasNode,
    NodePosition,
    NodeType,
    Viewport,
    clamp_node_dimensions,
    create_idea_node,
    is_node_pinned,
    normalize_node_color_key,
    validate_node_attribute,
)

from factories import make_node


class TestCanvasNode:
    """Tests for the CanvasNode data model."""

    def test_defaults(self) -> None:
        """Test creating a node with only an id."""
        node = CanvasNode(id="n1")

        assert node.type == NodeType.IDEA
        assert node.position == NodePosition(x=0, y=0)
        assert node.width is None
        assert node.data == {}
        assert node.created_at.tzinfo == timezone.utc

    def test_empty_id_rejected(self) -> None:
        """Test that an empty id fails validation."""
        with pytest.raises(ValidationError):
            CanvasNode(id="")

    def test_naive_timestamp_becomes_utc(self) -> None:
        """Test that naive datetimes are treated as UTC."""
        node = CanvasNode(id="n1", created_at=datetime(2024, 5, 1, 12, 0))

        assert node.created_at == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def test_aware_timestamp_converted_to_utc(self) -> None:
        """Test that aware datetimes are converted to UTC."""
        plus_two = timezone(timedelta(hours=2))
        node = CanvasNode(id="n1", updated_at=datetime(2024, 5, 1, 12, 0, tzinfo=plus_two))

        assert node.updated_at == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    def test_node_is_frozen(self) -> None:
        """Test that nodes cannot be mutated in place."""
        node = make_node("n1")

        with pytest.raises(ValidationError):
            node.width = 500

    def test_with_changes_clones_and_refreshes_updated_at(self) -> None:
        """Test that with_changes returns a new node with a newer updated_at."""
        node = make_node("n1")
        moved = node.with_changes(position=NodePosition(x=10, y=20))

        assert moved is not node
        assert moved.position == NodePosition(x=10, y=20)
        assert node.position == NodePosition(x=0, y=0)
        assert moved.updated_at > node.updated_at
        assert moved.created_at == node.created_at

    def test_with_data_merges_keys(self) -> None:
        """Test that with_data keeps untouched keys."""
        node = make_node("n1", heading="Title", prompt="p")
        updated = node.with_data(prompt="q")

        assert updated.data == {"heading": "Title", "prompt": "q"}
        assert node.data == {"heading": "Title", "prompt": "p"}

    def test_dict_round_trip(self) -> None:
        """Test to_dict/from_dict preserve the node."""
        node = make_node("n1", x=5, y=6, width=300, tags=["a"])

        restored = CanvasNode.from_dict(node.to_dict())

        assert restored == node
        assert node.to_dict()["type"] == "idea"

    def test_from_dict_invalid_raises(self) -> None:
        """Test that invalid payloads raise InvalidNodeError."""
        with pytest.raises(InvalidNodeError):
            CanvasNode.from_dict({"id": "n1", "position": {"x": "left"}})


class TestCanvasEdge:
    """Tests for the CanvasEdge data model."""

    def test_defaults_and_touches(self) -> None:
        """Test default relationship type and endpoint check."""
        edge = CanvasEdge(id="e1", source_node_id="A", target_node_id="B")

        assert edge.relationship_type == "related"
        assert edge.touches("A")
        assert edge.touches("B")
        assert not edge.touches("C")

    def test_from_dict_invalid_raises(self) -> None:
        """Test that a missing endpoint raises InvalidEdgeError."""
        with pytest.raises(InvalidEdgeError):
            CanvasEdge.from_dict({"id": "e1", "source_node_id": "A"})


class TestViewport:
    """Tests for the Viewport model."""

    def test_defaults(self) -> None:
        """Test viewport defaults to origin at zoom 1."""
        assert Viewport() == Viewport(x=0, y=0, zoom=1)

    def test_zoom_must_be_positive(self) -> None:
        """Test that zero zoom is rejected."""
        with pytest.raises(ValidationError):
            Viewport(zoom=0)


class TestValidateNodeAttribute:
    """Tests for validate_node_attribute()."""

    def test_coerces_values(self) -> None:
        """Test values are converted to the attribute types."""
        assert validate_node_attribute("type", "media") is NodeType.MEDIA
        assert validate_node_attribute("position", {"x": 1, "y": 2}) == NodePosition(x=1, y=2)
        assert validate_node_attribute("width", "300") == 300
        assert validate_node_attribute("height", None) is None

    def test_rejects_invalid_values(self) -> None:
        """Test invalid values raise InvalidNodeError naming the field."""
        with pytest.raises(InvalidNodeError, match="height"):
            validate_node_attribute("height", "tall")


class TestFactories:
    """Tests for node factory and helper functions."""

    def test_create_idea_node(self) -> None:
        """Test idea node defaults."""
        node = create_idea_node("idea-1", "ws", NodePosition(x=1, y=2))

        assert node.width == 280
        assert node.height == 220
        assert node.data["color_key"] == "default"
        assert node.data["is_generating"] is False
        assert "prompt" not in node.data
        assert node.created_at == node.updated_at

    def test_create_idea_node_with_prompt(self) -> None:
        """Test that an initial prompt is stored."""
        node = create_idea_node("idea-1", "ws", NodePosition(), prompt="Why?")

        assert node.data["prompt"] == "Why?"

    def test_clamp_node_dimensions(self) -> None:
        """Test clamping into the configured bounds."""
        assert clamp_node_dimensions(50, 50) == (180, 100)
        assert clamp_node_dimensions(5000, 5000) == (900, 800)
        assert clamp_node_dimensions(400, 300) == (400, 300)

    def test_normalize_node_color_key(self) -> None:
        """Test colour normalisation including the legacy key."""
        assert normalize_node_color_key("warning") == "warning"
        assert normalize_node_color_key("primary") == "danger"
        assert normalize_node_color_key("magenta") == "default"
        assert normalize_node_color_key(None) == "default"

    def test_is_node_pinned(self) -> None:
        """Test that only a literal True pins a node."""
        assert is_node_pinned(make_node("a", is_pinned=True))
        assert not is_node_pinned(make_node("b", is_pinned="yes"))
        assert not is_node_pinned(make_node("c"))


class TestLayoutConfig:
    """Tests for LayoutConfig."""

    def test_defaults(self) -> None:
        """Test default grid geometry."""
        assert DEFAULT_LAYOUT.grid_columns == 4
        assert DEFAULT_LAYOUT.grid_gap == 40
        assert DEFAULT_LAYOUT.grid_padding == 32
        assert DEFAULT_LAYOUT.column_pitch == 320
        assert DEFAULT_LAYOUT.row_pitch == 260

    def test_inverted_bounds_rejected(self) -> None:
        """Test that min above max is rejected."""
        with pytest.raises(ValidationError):
            LayoutConfig(min_node_width=1000)

    def test_columns_must_be_positive(self) -> None:
        """Test that zero columns is rejected."""
        with pytest.raises(ValidationError):
            LayoutConfig(grid_columns=0)
