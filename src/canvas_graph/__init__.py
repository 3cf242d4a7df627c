"""
canvas-graph: In-memory state engine for a canvas of idea nodes.

This package keeps the authoritative nodes and directed edges of a visual
thinking canvas, answers ancestry queries for AI context assembly, arranges
nodes in a masonry grid and tracks the single-editor session and selection.
"""

from canvas_graph.ancestry import AncestryIndex, get_connected_node_ids, get_upstream_nodes
from canvas_graph.config import DEFAULT_LAYOUT, LayoutConfig
from canvas_graph.duplication import build_cloned_node, duplicate_node, generate_node_id
from canvas_graph.editing import IDLE, EditingSession, coerce_input_mode
from canvas_graph.exceptions import (
    CanvasGraphError,
    InvalidEdgeError,
    InvalidInputModeError,
    InvalidNodeError,
)
from canvas_graph.graph import CanvasGraph
from canvas_graph.layout import (
    arrange_masonry,
    calculate_branch_placement,
    calculate_masonry_position,
    calculate_smart_placement,
    rearrange_after_resize,
)
from canvas_graph.models import (
    CalendarEventMetadata,
    CanvasEdge,
    CanvasNode,
    InputMode,
    LinkPreviewMetadata,
    NodePosition,
    NodeType,
    Viewport,
    clamp_node_dimensions,
    create_idea_node,
    is_node_pinned,
    normalize_node_color_key,
)
from canvas_graph.projection import ProjectionError, export_adjacency, export_node_link
from canvas_graph.selection import EMPTY_SELECTION
from canvas_graph.snapshot import CanvasSnapshot

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Core classes
    "CanvasGraph",
    "CanvasSnapshot",
    "LayoutConfig",
    "DEFAULT_LAYOUT",
    # Data models
    "CanvasNode",
    "CanvasEdge",
    "NodeType",
    "NodePosition",
    "Viewport",
    "InputMode",
    "LinkPreviewMetadata",
    "CalendarEventMetadata",
    "create_idea_node",
    "clamp_node_dimensions",
    "normalize_node_color_key",
    "is_node_pinned",
    # Editing & selection
    "EditingSession",
    "IDLE",
    "coerce_input_mode",
    "EMPTY_SELECTION",
    # Queries
    "AncestryIndex",
    "get_upstream_nodes",
    "get_connected_node_ids",
    # Layout
    "arrange_masonry",
    "calculate_masonry_position",
    "rearrange_after_resize",
    "calculate_smart_placement",
    "calculate_branch_placement",
    # Duplication
    "duplicate_node",
    "build_cloned_node",
    "generate_node_id",
    # Projections
    "export_node_link",
    "export_adjacency",
    "ProjectionError",
    # Exceptions
    "CanvasGraphError",
    "InvalidNodeError",
    "InvalidEdgeError",
    "InvalidInputModeError",
]
