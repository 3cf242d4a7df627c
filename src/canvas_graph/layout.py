"""
Masonry layout and free-flow placement.

Masonry arrangement packs unpinned nodes, oldest first, into a fixed number of
columns: each node drops into the currently shortest column, every column is
as wide as the widest node it received, and column x offsets accumulate those
widths plus the gap (a column that received no node takes the default width).
Pinned nodes keep their position and their index in the result.

Free-flow placement puts a single new node beside an anchor node and steps it
down until it no longer collides with existing nodes.

All functions are pure: input nodes are never mutated.
"""

import logging
from collections.abc import Sequence

from .config import DEFAULT_LAYOUT, LayoutConfig
from .models import CanvasNode, NodePosition, is_node_pinned, node_height, node_width

logger = logging.getLogger(__name__)


def _by_creation(nodes: Sequence[CanvasNode]) -> list[CanvasNode]:
    # sorted() is stable, so equal timestamps keep their input order
    return sorted(nodes, key=lambda node: node.created_at)


def _shortest_column(column_y: list[float]) -> int:
    shortest = 0
    for i in range(1, len(column_y)):
        if column_y[i] < column_y[shortest]:
            shortest = i
    return shortest


def _assign_columns(
    sorted_nodes: Sequence[CanvasNode],
    config: LayoutConfig,
) -> tuple[list[tuple[CanvasNode, int]], list[float]]:
    """Assign each node to the shortest column; return assignments and final column heights."""
    column_y = [config.grid_padding] * config.grid_columns
    assignments: list[tuple[CanvasNode, int]] = []

    for node in sorted_nodes:
        column = _shortest_column(column_y)
        assignments.append((node, column))
        column_y[column] += node_height(node, config) + config.grid_gap

    return assignments, column_y


def _column_x_positions(
    assignments: Sequence[tuple[CanvasNode, int]],
    config: LayoutConfig,
) -> list[float]:
    # A column is as wide as its widest node; empty columns take the default
    widths: list[float | None] = [None] * config.grid_columns
    for node, column in assignments:
        width = node_width(node, config)
        if widths[column] is None or width > widths[column]:
            widths[column] = width

    positions: list[float] = []
    x = config.grid_padding
    for width in widths:
        positions.append(x)
        x += (config.default_node_width if width is None else width) + config.grid_gap
    return positions


def arrange_masonry(
    nodes: Sequence[CanvasNode],
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> list[CanvasNode]:
    """
    Rearrange nodes into the masonry grid.

    Args:
        nodes: Nodes in their current order
        config: Grid geometry

    Returns:
        A new list in the same order as ``nodes``. Nodes whose position is
        unchanged (and all pinned nodes) are returned as the same objects;
        moved nodes are clones with a refreshed ``updated_at``.
    """
    if not nodes:
        return []

    free = [node for node in nodes if not is_node_pinned(node)]
    if not free:
        return list(nodes)

    assignments, _ = _assign_columns(_by_creation(free), config)
    column_x = _column_x_positions(assignments, config)

    column_y = [config.grid_padding] * config.grid_columns
    placed: dict[str, NodePosition] = {}
    for node, column in assignments:
        placed[node.id] = NodePosition(x=column_x[column], y=column_y[column])
        column_y[column] += node_height(node, config) + config.grid_gap

    arranged: list[CanvasNode] = []
    for node in nodes:
        position = None if is_node_pinned(node) else placed.get(node.id)
        if position is None or position == node.position:
            arranged.append(node)
        else:
            arranged.append(node.with_changes(position=position))
    return arranged


def calculate_masonry_position(
    nodes: Sequence[CanvasNode],
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> NodePosition:
    """
    Position the next node would take in the masonry grid.

    Pinned nodes are ignored. An empty canvas yields the padding origin.
    """
    free = [node for node in nodes if not is_node_pinned(node)]
    assignments, column_y = _assign_columns(_by_creation(free), config)
    column_x = _column_x_positions(assignments, config)
    target = _shortest_column(column_y)
    return NodePosition(x=column_x[target], y=column_y[target])


def rearrange_after_resize(
    nodes: Sequence[CanvasNode],
    resized_node_id: str,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> list[CanvasNode]:
    """
    Re-run the masonry layout after ``resized_node_id`` changed size.

    Ordering is by creation time, so the relative order of nodes is preserved
    and only nodes displaced by the new size move. An unknown id returns the
    nodes unchanged.
    """
    if not any(node.id == resized_node_id for node in nodes):
        logger.debug(f"Resize rearrange skipped: node '{resized_node_id}' not found")
        return list(nodes)
    return arrange_masonry(nodes, config)


# ==================== Free-flow placement ====================


def _collides_with_any(
    x: float,
    y: float,
    width: float,
    height: float,
    nodes: Sequence[CanvasNode],
    config: LayoutConfig,
) -> bool:
    for node in nodes:
        nw = node_width(node, config)
        nh = node_height(node, config)
        overlap_x = x < node.position.x + nw and x + width > node.position.x
        overlap_y = y < node.position.y + nh and y + height > node.position.y
        if overlap_x and overlap_y:
            return True
    return False


def _resolve_collision(
    x: float,
    start_y: float,
    nodes: Sequence[CanvasNode],
    config: LayoutConfig,
) -> NodePosition:
    """Step down by one default row until the default-sized rectangle is clear (bounded)."""
    y = start_y
    width = config.default_node_width
    height = config.default_node_height
    iterations = 0
    while (
        _collides_with_any(x, y, width, height, nodes, config)
        and iterations < config.max_collision_iterations
    ):
        y += config.row_pitch
        iterations += 1
    return NodePosition(x=x, y=y)


def calculate_smart_placement(
    nodes: Sequence[CanvasNode],
    focused_node_id: str | None = None,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> NodePosition:
    """
    Position for a new node in free-flow mode.

    Places to the right of the focused node, or of the most recently created
    node when nothing is focused, stepping down on collision. Falls back to
    the padding origin on an empty canvas or an unknown focused id.
    """
    origin = NodePosition(x=config.grid_padding, y=config.grid_padding)
    if not nodes:
        return origin

    if focused_node_id is not None:
        anchor = next((node for node in nodes if node.id == focused_node_id), None)
    else:
        anchor = max(nodes, key=lambda node: node.created_at)

    if anchor is None:
        return origin

    target_x = anchor.position.x + node_width(anchor, config) + config.grid_gap
    return _resolve_collision(target_x, anchor.position.y, nodes, config)


def calculate_branch_placement(
    source: CanvasNode,
    existing_nodes: Sequence[CanvasNode],
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> NodePosition:
    """Position for a node branched from ``source``: to its right, stacking down on collision."""
    target_x = source.position.x + node_width(source, config) + config.grid_gap
    others = [node for node in existing_nodes if node.id != source.id]
    return _resolve_collision(target_x, source.position.y, others, config)
