"""
Render projections of a canvas snapshot.

This module turns a CanvasSnapshot into JSON-ready structures for the
rendering surface and external graph tools:
- node-link format (D3.js, Cytoscape.js, React Flow style nodes/edges)
- adjacency format for custom tools

Projections are computed from an immutable snapshot, so they are always
internally consistent even while the graph keeps changing.
"""

import json
import logging
from pathlib import Path
from typing import Any

from .models import CanvasEdge, CanvasNode, node_height, node_width
from .snapshot import CanvasSnapshot

logger = logging.getLogger(__name__)


class ProjectionError(Exception):
    """Raised when a projection export fails."""

    pass


def export_node_link(
    snapshot: CanvasSnapshot,
    output_path: Path | str | None = None,
    include_data: bool = True,
) -> dict[str, Any] | str:
    """
    Project a snapshot as node-link JSON.

    Args:
        snapshot: Snapshot to project
        output_path: Optional path to write the JSON file. If None, returns dict.
        include_data: Include each node's data payload and timestamps

    Returns:
        Dictionary with JSON structure (or JSON string if output_path provided)

    Raises:
        ProjectionError: If export fails
    """
    try:
        data = {
            "nodes": [_node_entry(node, snapshot, include_data) for node in snapshot.nodes],
            "links": [_link_entry(edge) for edge in snapshot.edges],
            "graph_info": _graph_info(snapshot),
        }
        return _maybe_write(data, output_path)

    except Exception as e:
        logger.error(f"Failed to export node-link projection: {e}", exc_info=True)
        raise ProjectionError(f"Node-link export failed: {e}") from e


def export_adjacency(
    snapshot: CanvasSnapshot,
    output_path: Path | str | None = None,
    include_data: bool = False,
) -> dict[str, Any] | str:
    """
    Project a snapshot as an adjacency list keyed by node id.

    Edges whose source is not a current node are left out; targets are listed
    as stored, so dangling targets remain visible.

    Raises:
        ProjectionError: If export fails
    """
    try:
        nodes: dict[str, dict[str, Any]] = {}
        adjacency: dict[str, list[str]] = {}

        for node in snapshot.nodes:
            entry = _node_entry(node, snapshot, include_data)
            entry.pop("id")
            nodes[node.id] = entry
            adjacency[node.id] = []

        for edge in snapshot.edges:
            if edge.source_node_id in adjacency:
                adjacency[edge.source_node_id].append(edge.target_node_id)

        data = {
            "nodes": nodes,
            "adjacency": adjacency,
            "graph_info": _graph_info(snapshot),
        }
        return _maybe_write(data, output_path)

    except Exception as e:
        logger.error(f"Failed to export adjacency projection: {e}", exc_info=True)
        raise ProjectionError(f"Adjacency export failed: {e}") from e


def _node_entry(node: CanvasNode, snapshot: CanvasSnapshot, include_data: bool) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "id": node.id,
        "type": node.type.value,
        "position": {"x": node.position.x, "y": node.position.y},
        "width": node_width(node, snapshot.layout),
        "height": node_height(node, snapshot.layout),
        "selected": node.id in snapshot.selected_node_ids,
        "editing": snapshot.editing.is_editing_node(node.id),
    }

    if include_data:
        entry["data"] = node.to_dict()["data"]
        entry["created_at"] = node.created_at.isoformat()
        entry["updated_at"] = node.updated_at.isoformat()

    return entry


def _link_entry(edge: CanvasEdge) -> dict[str, Any]:
    return {
        "id": edge.id,
        "source": edge.source_node_id,
        "target": edge.target_node_id,
        "relationship_type": edge.relationship_type,
    }


def _graph_info(snapshot: CanvasSnapshot) -> dict[str, Any]:
    return {
        "workspace_id": snapshot.workspace_id,
        "version": snapshot.version,
        "node_count": len(snapshot.nodes),
        "edge_count": len(snapshot.edges),
        "viewport": snapshot.viewport.model_dump(mode="json"),
    }


def _maybe_write(data: dict[str, Any], output_path: Path | str | None) -> dict[str, Any] | str:
    if not output_path:
        return data

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    json_content = json.dumps(data, indent=2, default=str)
    path.write_text(json_content)
    logger.info(f"Exported projection to {output_path}")
    return json_content
