"""
Node cloning for duplicate operations.

A clone gets a collision-safe ``idea-<uuid4>`` id, a deep copy of the source
payload with transient state reset, and no calendar binding.
"""

import copy
from typing import Any
from uuid import uuid4

from .config import DEFAULT_LAYOUT, LayoutConfig
from .models import (
    CALENDAR_EVENT,
    IS_GENERATING,
    IS_PROMPT_COLLAPSED,
    CanvasNode,
    NodePosition,
    node_width,
    utc_now,
)


def generate_node_id(prefix: str = "idea") -> str:
    """Generate a collision-safe node id."""
    return f"{prefix}-{uuid4()}"


def strip_none(value: Any) -> Any:
    """Recursively drop ``None`` entries from dicts (lists keep their length)."""
    if isinstance(value, dict):
        return {key: strip_none(item) for key, item in value.items() if item is not None}
    if isinstance(value, list):
        return [strip_none(item) for item in value]
    return value


def build_cloned_node(
    source: CanvasNode,
    position: NodePosition,
    workspace_id: str | None = None,
) -> CanvasNode:
    """
    Build an independent copy of ``source``.

    Args:
        source: Node to clone
        position: Position of the clone
        workspace_id: Target workspace; defaults to the source's

    Returns:
        New CanvasNode sharing no mutable state with ``source``
    """
    data = strip_none(copy.deepcopy(source.data))
    data.pop(CALENDAR_EVENT, None)
    data[IS_GENERATING] = False
    data[IS_PROMPT_COLLAPSED] = False

    now = utc_now()
    return CanvasNode(
        id=generate_node_id(),
        workspace_id=source.workspace_id if workspace_id is None else workspace_id,
        type=source.type,
        position=position,
        width=source.width,
        height=source.height,
        data=data,
        created_at=now,
        updated_at=now,
    )


def duplicate_node(source: CanvasNode, config: LayoutConfig = DEFAULT_LAYOUT) -> CanvasNode:
    """Clone ``source`` and place the copy one gap to its right, at the same y."""
    position = NodePosition(
        x=source.position.x + node_width(source, config) + config.grid_gap,
        y=source.position.y,
    )
    return build_cloned_node(source, position)
