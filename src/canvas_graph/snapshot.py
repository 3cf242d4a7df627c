"""
Immutable point-in-time view of a canvas graph.

Snapshots hold the very containers the graph was holding when the snapshot
was taken (tuples, frozensets and frozen models), so comparing two snapshots'
fields with ``is`` tells a consumer exactly what changed.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .config import DEFAULT_LAYOUT, LayoutConfig
from .editing import IDLE, EditingSession
from .models import CanvasEdge, CanvasNode, Viewport
from .selection import EMPTY_SELECTION


class CanvasSnapshot(BaseModel):
    """Consistent view of nodes, edges, selection, editing session, viewport and layout."""

    workspace_id: str | None = None
    version: int = Field(default=0, description="Monotonic mutation counter")
    nodes: tuple[CanvasNode, ...] = ()
    edges: tuple[CanvasEdge, ...] = ()
    selected_node_ids: frozenset[str] = EMPTY_SELECTION
    editing: EditingSession = IDLE
    viewport: Viewport = Field(default_factory=Viewport)
    layout: LayoutConfig = Field(
        default=DEFAULT_LAYOUT,
        description="Layout config of the graph; supplies default node sizes",
    )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert snapshot to a JSON-ready dictionary.

        Returns:
            Dictionary with nodes/edges as lists and the selection sorted.
        """
        return {
            "workspace_id": self.workspace_id,
            "version": self.version,
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
            "selected_node_ids": sorted(self.selected_node_ids),
            "editing": self.editing.model_dump(mode="json"),
            "viewport": self.viewport.model_dump(mode="json"),
        }

    model_config = ConfigDict(frozen=True)
