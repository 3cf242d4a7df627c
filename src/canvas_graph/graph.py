"""
Main CanvasGraph state engine.

The CanvasGraph class owns the authoritative in-memory nodes and edges of a
canvas, the selection set, the single-editor session and the viewport. Every
mutation goes through it, and every mutation replaces the affected container
(copy-on-write) so consumers can detect change by identity.

Operations that reference a missing node or edge id are silent no-ops: UI
event handlers routinely race with deletions and must not crash.
"""

import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from types import MappingProxyType
from typing import Any

from . import selection
from .ancestry import AncestryIndex
from .config import DEFAULT_LAYOUT, LayoutConfig
from .duplication import duplicate_node as clone_beside
from .editing import IDLE, EditingSession
from .layout import (
    arrange_masonry,
    calculate_branch_placement,
    calculate_masonry_position,
    calculate_smart_placement,
    rearrange_after_resize,
)
from .models import (
    CALENDAR_EVENT,
    COLOR_KEY,
    HEADING,
    INCLUDE_IN_AI_POOL,
    IS_COLLAPSED,
    IS_GENERATING,
    IS_PINNED,
    IS_PROMPT_COLLAPSED,
    LINK_PREVIEWS,
    OUTPUT,
    PROMPT,
    TAGS,
    CalendarEventMetadata,
    CanvasEdge,
    CanvasNode,
    InputMode,
    LinkPreviewMetadata,
    NodePosition,
    Viewport,
    clamp_node_dimensions,
    normalize_node_color_key,
    validate_node_attribute,
)
from .snapshot import CanvasSnapshot

logger = logging.getLogger(__name__)

Listener = Callable[[CanvasSnapshot], None]

# Node attributes update_field may target directly; anything else is a data key
NODE_ATTRIBUTE_FIELDS = frozenset({"position", "width", "height", "type"})
PROTECTED_FIELDS = frozenset({"id", "workspace_id", "data", "created_at", "updated_at"})

_UNSET: Any = object()


class CanvasGraph:
    """
    State engine for a canvas of idea nodes and directed edges.

    This class handles:
    - Node/edge CRUD with cascading delete
    - Ancestry and connectivity queries
    - Masonry auto-layout
    - The single-editor editing session
    - Selection with reference-stable empties
    - Change notification for renderers and persistence

    Writers are serialised by one re-entrant lock; readers get immutable
    containers, so a snapshot never shows a half-applied compound mutation.
    """

    def __init__(
        self,
        workspace_id: str | None = None,
        layout: LayoutConfig | None = None,
    ):
        """
        Initialize an empty CanvasGraph.

        Args:
            workspace_id: Workspace currently loaded, if any
            layout: Grid and sizing configuration (default: LayoutConfig())
        """
        self.workspace_id = workspace_id
        self.layout = layout if layout is not None else DEFAULT_LAYOUT

        self._nodes: tuple[CanvasNode, ...] = ()
        self._edges: tuple[CanvasEdge, ...] = ()
        self._selected: frozenset[str] = selection.EMPTY_SELECTION
        self._editing: EditingSession = IDLE
        self._viewport: Viewport = Viewport()

        # Version counters drive the derived caches
        self._version = 0
        self._nodes_version = 0
        self._edges_version = 0
        self._node_map_cache: dict[str, CanvasNode] = {}
        self._node_map_version = 0
        self._ancestry_cache: AncestryIndex | None = None
        self._ancestry_version = -1

        self._lock = threading.RLock()
        self._listeners: list[Listener] = []
        self._batch_depth = 0
        self._batch_dirty = False

        logger.debug(f"Created CanvasGraph for workspace '{workspace_id}'")

    def __repr__(self) -> str:
        """Return string representation of the graph."""
        return (
            f"CanvasGraph(workspace_id='{self.workspace_id}', "
            f"nodes={len(self._nodes)}, "
            f"edges={len(self._edges)})"
        )

    # ==================== Properties ====================

    @property
    def nodes(self) -> tuple[CanvasNode, ...]:
        """Current node collection (replaced on every node mutation)."""
        return self._nodes

    @property
    def edges(self) -> tuple[CanvasEdge, ...]:
        """Current edge collection (replaced on every edge mutation)."""
        return self._edges

    @property
    def selected_node_ids(self) -> frozenset[str]:
        """Current selection."""
        return self._selected

    @property
    def editing(self) -> EditingSession:
        """Current editing session."""
        return self._editing

    @property
    def editing_node_id(self) -> str | None:
        """Node being edited, or None."""
        return self._editing.editing_node_id

    @property
    def draft_content(self) -> str | None:
        """Unsaved draft of the node being edited."""
        return self._editing.draft_content

    @property
    def input_mode(self) -> InputMode:
        """Input mode of the editing session."""
        return self._editing.input_mode

    @property
    def viewport(self) -> Viewport:
        """Current viewport."""
        return self._viewport

    @property
    def version(self) -> int:
        """Monotonic counter, incremented once per committed change."""
        return self._version

    @property
    def node_count(self) -> int:
        """Get the total number of nodes in the graph."""
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        """Get the total number of edges in the graph."""
        return len(self._edges)

    @property
    def node_map(self) -> Mapping[str, CanvasNode]:
        """Read-only id -> node mapping, rebuilt lazily after node changes."""
        return MappingProxyType(self._node_map())

    # ==================== Snapshots & Subscriptions ====================

    def snapshot(self) -> CanvasSnapshot:
        """
        Take an immutable snapshot of the whole graph state.

        The snapshot shares the graph's current containers, so it is O(1).
        """
        with self._lock:
            # model_construct keeps container identity (validation would copy)
            return CanvasSnapshot.model_construct(
                workspace_id=self.workspace_id,
                version=self._version,
                nodes=self._nodes,
                edges=self._edges,
                selected_node_ids=self._selected,
                editing=self._editing,
                viewport=self._viewport,
                layout=self.layout,
            )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with a fresh snapshot after every change.

        Args:
            listener: Callable receiving the new CanvasSnapshot

        Returns:
            A function that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    @contextmanager
    def batch(self) -> Iterator["CanvasGraph"]:
        """
        Group several mutations into one serialised, singly-notified change.

        Other writers are blocked for the duration of the block and listeners
        are notified once at the end if anything changed. Nothing is rolled
        back: if the block raises, mutations already made stay applied and
        listeners are still notified before the exception propagates.
        """
        with self._lock:
            self._batch_depth += 1
            try:
                yield self
            finally:
                self._batch_depth -= 1
                if self._batch_depth == 0 and self._batch_dirty:
                    self._batch_dirty = False
                    self._notify()

    # ==================== Internal state plumbing ====================

    def _node_map(self) -> dict[str, CanvasNode]:
        with self._lock:
            if self._node_map_version != self._nodes_version:
                self._node_map_cache = {node.id: node for node in self._nodes}
                self._node_map_version = self._nodes_version
            return self._node_map_cache

    def _ancestry(self) -> AncestryIndex:
        with self._lock:
            if self._ancestry_cache is None or self._ancestry_version != self._edges_version:
                self._ancestry_cache = AncestryIndex(self._edges)
                self._ancestry_version = self._edges_version
            return self._ancestry_cache

    def _commit(
        self,
        reason: str,
        *,
        nodes: Any = _UNSET,
        edges: Any = _UNSET,
        selected: Any = _UNSET,
        editing: Any = _UNSET,
        viewport: Any = _UNSET,
    ) -> bool:
        """
        Install new containers; unchanged (identical) ones are ignored.

        Must be called with the lock held. Returns True if anything changed.
        """
        changed = False
        if nodes is not _UNSET and nodes is not self._nodes:
            self._nodes = nodes
            self._nodes_version += 1
            changed = True
        if edges is not _UNSET and edges is not self._edges:
            self._edges = edges
            self._edges_version += 1
            changed = True
        if selected is not _UNSET and selected is not self._selected:
            self._selected = selected
            changed = True
        if editing is not _UNSET and editing is not self._editing:
            self._editing = editing
            changed = True
        if viewport is not _UNSET and viewport is not self._viewport:
            self._viewport = viewport
            changed = True

        if not changed:
            return False

        self._version += 1
        self._check_invariants()
        logger.debug(f"{reason} (version {self._version})")

        if self._batch_depth > 0:
            self._batch_dirty = True
        else:
            self._notify()
        return True

    def _check_invariants(self) -> None:
        # Debug-only; stripped under python -O
        editing_id = self._editing.editing_node_id
        assert editing_id is None or editing_id in self._node_map(), (
            f"editing node '{editing_id}' does not exist"
        )

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.warning(f"Canvas listener {listener!r} failed: {e}", exc_info=True)

    def _replace_node(
        self,
        node_id: str,
        transform: Callable[[CanvasNode], CanvasNode],
        reason: str,
    ) -> bool:
        """Apply ``transform`` to the node(s) with ``node_id``; no-op if absent."""
        with self._lock:
            if node_id not in self._node_map():
                logger.debug(f"Ignoring {reason}: node '{node_id}' not found")
                return False

            changed = False
            replaced: list[CanvasNode] = []
            for node in self._nodes:
                if node.id == node_id:
                    updated = transform(node)
                    changed = changed or updated is not node
                    replaced.append(updated)
                else:
                    replaced.append(node)

            if not changed:
                return False
            return self._commit(f"{reason} on node '{node_id}'", nodes=tuple(replaced))

    @staticmethod
    def _coerce_node(node: CanvasNode | Mapping[str, Any]) -> CanvasNode:
        if isinstance(node, CanvasNode):
            return node
        return CanvasNode.from_dict(dict(node))

    @staticmethod
    def _coerce_edge(edge: CanvasEdge | Mapping[str, Any]) -> CanvasEdge:
        if isinstance(edge, CanvasEdge):
            return edge
        return CanvasEdge.from_dict(dict(edge))

    # ==================== Node Operations ====================

    def add_node(self, node: CanvasNode | Mapping[str, Any]) -> None:
        """
        Append a node.

        Id uniqueness is the caller's responsibility.

        Raises:
            InvalidNodeError: If a mapping payload is not a valid node
        """
        node = self._coerce_node(node)
        with self._lock:
            self._commit(f"Added node '{node.id}'", nodes=self._nodes + (node,))

    def get_node(self, node_id: str) -> CanvasNode | None:
        """
        Get a node by ID.

        Returns:
            The CanvasNode, or None if it does not exist
        """
        return self._node_map().get(node_id)

    def node_exists(self, node_id: str) -> bool:
        """Check if a node exists."""
        return node_id in self._node_map()

    def update_field(self, node_id: str, field: str, value: Any) -> None:
        """
        Replace a single field of a node.

        ``position``, ``width``, ``height`` and ``type`` address the node
        itself; every other name addresses a key of the node's data payload.
        The node is shallow-cloned with a refreshed ``updated_at``.

        Raises:
            ValueError: If ``field`` names an immutable attribute (id, ...)
            InvalidNodeError: If ``value`` is not valid for a node attribute
        """
        if field in PROTECTED_FIELDS:
            raise ValueError(f"Field '{field}' cannot be updated")

        if field in NODE_ATTRIBUTE_FIELDS:
            value = validate_node_attribute(field, value)
            self._replace_node(
                node_id, lambda node: node.with_changes(**{field: value}), f"update '{field}'"
            )
        else:
            self._replace_node(
                node_id, lambda node: node.with_data(**{field: value}), f"update data '{field}'"
            )

    def append_to_field(self, node_id: str, chunk: str, field: str = OUTPUT) -> None:
        """
        Concatenate ``chunk`` onto a text data field (streaming output).

        A missing or None field counts as the empty string.
        """

        def append(node: CanvasNode) -> CanvasNode:
            current = node.data.get(field) or ""
            return node.with_data(**{field: current + chunk})

        self._replace_node(node_id, append, f"append to '{field}'")

    def append_to_output(self, node_id: str, chunk: str) -> None:
        """Append a streamed chunk to the node's AI output."""
        self.append_to_field(node_id, chunk, OUTPUT)

    def update_node_position(self, node_id: str, position: NodePosition) -> None:
        """Move a node."""
        self.update_field(node_id, "position", position)

    def update_node_dimensions(self, node_id: str, width: float, height: float) -> None:
        """Resize a node, clamping to the configured bounds."""
        width, height = clamp_node_dimensions(
            validate_node_attribute("width", width),
            validate_node_attribute("height", height),
            self.layout,
        )
        self._replace_node(
            node_id,
            lambda node: node.with_changes(width=width, height=height),
            "update dimensions",
        )

    def update_node_heading(self, node_id: str, heading: str) -> None:
        self.update_field(node_id, HEADING, heading)

    def update_node_prompt(self, node_id: str, prompt: str) -> None:
        self.update_field(node_id, PROMPT, prompt)

    def update_node_output(self, node_id: str, output: str) -> None:
        self.update_field(node_id, OUTPUT, output)

    def update_node_tags(self, node_id: str, tags: Iterable[str]) -> None:
        self.update_field(node_id, TAGS, list(tags))

    def set_node_generating(self, node_id: str, is_generating: bool) -> None:
        """Flag whether AI generation is streaming into the node."""
        self.update_field(node_id, IS_GENERATING, is_generating)

    def set_node_color(self, node_id: str, color_key: str) -> None:
        """Set the node colour; unchanged colours leave the graph untouched."""
        color_key = normalize_node_color_key(color_key)

        def recolor(node: CanvasNode) -> CanvasNode:
            if node.data.get(COLOR_KEY) == color_key:
                return node
            return node.with_data(**{COLOR_KEY: color_key})

        self._replace_node(node_id, recolor, "set color")

    def set_node_calendar_event(
        self,
        node_id: str,
        event: CalendarEventMetadata | None,
    ) -> None:
        """Attach (or with None, detach) calendar metadata."""
        value = event.model_dump() if event is not None else None
        self.update_field(node_id, CALENDAR_EVENT, value)

    def add_link_preview(self, node_id: str, url: str, preview: LinkPreviewMetadata) -> None:
        """Store link preview metadata keyed by URL, replacing any earlier one."""

        def add(node: CanvasNode) -> CanvasNode:
            previews = dict(node.data.get(LINK_PREVIEWS) or {})
            previews[url] = preview.model_dump()
            return node.with_data(**{LINK_PREVIEWS: previews})

        self._replace_node(node_id, add, "add link preview")

    def remove_link_preview(self, node_id: str, url: str) -> None:
        """Remove the link preview for ``url``; unknown URLs are ignored."""

        def remove(node: CanvasNode) -> CanvasNode:
            previews = node.data.get(LINK_PREVIEWS) or {}
            if url not in previews:
                return node
            remaining = {key: value for key, value in previews.items() if key != url}
            return node.with_data(**{LINK_PREVIEWS: remaining})

        self._replace_node(node_id, remove, "remove link preview")

    def _toggle(self, node_id: str, key: str) -> None:
        self._replace_node(
            node_id,
            lambda node: node.with_data(**{key: not node.data.get(key)}),
            f"toggle '{key}'",
        )

    def toggle_prompt_collapsed(self, node_id: str) -> None:
        self._toggle(node_id, IS_PROMPT_COLLAPSED)

    def toggle_node_pinned(self, node_id: str) -> None:
        self._toggle(node_id, IS_PINNED)

    def toggle_node_collapsed(self, node_id: str) -> None:
        self._toggle(node_id, IS_COLLAPSED)

    def toggle_node_pool_membership(self, node_id: str) -> None:
        """Include the node in, or exclude it from, the AI knowledge pool."""
        self._toggle(node_id, INCLUDE_IN_AI_POOL)

    def clear_all_node_pool(self) -> None:
        """Remove every node from the AI pool; non-pooled nodes are untouched."""
        with self._lock:
            if not any(node.data.get(INCLUDE_IN_AI_POOL) for node in self._nodes):
                return
            nodes = tuple(
                node.with_data(**{INCLUDE_IN_AI_POOL: False})
                if node.data.get(INCLUDE_IN_AI_POOL)
                else node
                for node in self._nodes
            )
            self._commit("Cleared AI pool", nodes=nodes)

    def delete_node(self, node_id: str) -> None:
        """
        Delete a node and everything that refers to it, atomically.

        Removes the node, every incident edge, the id from the selection and,
        if the node was being edited, the whole editing session. Deleting a
        missing id is a no-op, so the operation is idempotent.
        """
        with self._lock:
            if node_id not in self._node_map():
                logger.debug(f"Ignoring delete: node '{node_id}' not found")
                return

            nodes = tuple(node for node in self._nodes if node.id != node_id)
            edges = self._edges
            if any(edge.touches(node_id) for edge in edges):
                edges = tuple(edge for edge in edges if not edge.touches(node_id))
            editing = self._editing.stop() if self._editing.is_editing_node(node_id) else _UNSET

            self._commit(
                f"Deleted node '{node_id}'",
                nodes=nodes,
                edges=edges,
                selected=selection.deselect(self._selected, node_id),
                editing=editing,
            )

    def duplicate_node(self, node_id: str) -> str | None:
        """
        Clone a node beside itself.

        Returns:
            The id of the new node, or None if ``node_id`` does not exist
        """
        with self._lock:
            source = self._node_map().get(node_id)
            if source is None:
                logger.debug(f"Ignoring duplicate: node '{node_id}' not found")
                return None
            clone = clone_beside(source, self.layout)
            self._commit(
                f"Duplicated node '{node_id}' as '{clone.id}'",
                nodes=self._nodes + (clone,),
            )
            return clone.id

    # ==================== Edge Operations ====================

    def add_edge(self, edge: CanvasEdge | Mapping[str, Any]) -> None:
        """
        Append an edge. Endpoints are not checked for existence.

        Raises:
            InvalidEdgeError: If a mapping payload is not a valid edge
        """
        edge = self._coerce_edge(edge)
        with self._lock:
            self._commit(
                f"Added edge '{edge.id}' ({edge.source_node_id} -> {edge.target_node_id})",
                edges=self._edges + (edge,),
            )

    def delete_edge(self, edge_id: str) -> None:
        """Delete an edge by id; unknown ids are ignored."""
        with self._lock:
            if not any(edge.id == edge_id for edge in self._edges):
                logger.debug(f"Ignoring delete: edge '{edge_id}' not found")
                return
            self._commit(
                f"Deleted edge '{edge_id}'",
                edges=tuple(edge for edge in self._edges if edge.id != edge_id),
            )

    def get_edge(self, edge_id: str) -> CanvasEdge | None:
        """Get an edge by id, or None."""
        return next((edge for edge in self._edges if edge.id == edge_id), None)

    # ==================== Queries ====================

    def get_connected_nodes(self, node_id: str) -> list[str]:
        """Ids of nodes joined to ``node_id`` by a single edge in either direction."""
        return self._ancestry().connected_ids(node_id)

    def get_upstream_nodes(self, node_id: str) -> list[CanvasNode]:
        """
        All nodes feeding into ``node_id`` through incoming edges.

        Breadth-first, closest ancestors first; each node at most once; the
        query node is never included, even through a cycle.
        """
        with self._lock:
            node_map = self._node_map()
            index = self._ancestry()
        return [node_map[upstream_id] for upstream_id in index.upstream_ids(node_id, node_map)]

    # ==================== Layout ====================

    def arrange_nodes(self) -> None:
        """Rearrange all unpinned nodes into the masonry grid."""
        with self._lock:
            self._install_arrangement(arrange_masonry(self._nodes, self.layout), "Arranged nodes")

    def arrange_after_resize(self, node_id: str) -> None:
        """Re-run the layout after ``node_id`` changed size; no-op if absent."""
        with self._lock:
            if node_id not in self._node_map():
                logger.debug(f"Ignoring arrange after resize: node '{node_id}' not found")
                return
            self._install_arrangement(
                rearrange_after_resize(self._nodes, node_id, self.layout),
                f"Arranged nodes after resizing '{node_id}'",
            )

    def _install_arrangement(self, arranged: list[CanvasNode], reason: str) -> None:
        if all(new is old for new, old in zip(arranged, self._nodes)):
            return
        self._commit(reason, nodes=tuple(arranged))

    def calculate_next_node_position(self) -> NodePosition:
        """Masonry slot the next new node would take."""
        return calculate_masonry_position(self._nodes, self.layout)

    def calculate_smart_placement(self, focused_node_id: str | None = None) -> NodePosition:
        """Free-flow position beside the focused (or newest) node."""
        return calculate_smart_placement(self._nodes, focused_node_id, self.layout)

    def calculate_branch_placement(self, source_node_id: str) -> NodePosition | None:
        """Free-flow position for a node branched from ``source_node_id``, or None."""
        source = self.get_node(source_node_id)
        if source is None:
            return None
        return calculate_branch_placement(source, self._nodes, self.layout)

    # ==================== Editing Session ====================

    def start_editing(self, node_id: str) -> None:
        """
        Start editing ``node_id``, implicitly stopping any other edit.

        The draft is reset and the input mode returns to the default; an
        unsaved draft of a previously edited node is discarded. Missing ids
        are ignored.
        """
        with self._lock:
            if node_id not in self._node_map():
                logger.debug(f"Ignoring start editing: node '{node_id}' not found")
                return
            self._commit(f"Started editing '{node_id}'", editing=self._editing.start(node_id))

    def update_draft(self, content: str) -> None:
        """Store unsaved text for the edited node; ignored while idle."""
        with self._lock:
            self._commit("Updated draft", editing=self._editing.with_draft(content))

    def set_input_mode(self, mode: InputMode | str) -> None:
        """
        Switch between note and AI input.

        Raises:
            InvalidInputModeError: If ``mode`` is not a known input mode
        """
        with self._lock:
            session = self._editing.with_input_mode(mode)
            self._commit(f"Set input mode to '{session.input_mode.value}'", editing=session)

    def stop_editing(self) -> None:
        """
        Return to idle, discarding the draft.

        Persist the draft (e.g. with update_node_output) before calling this
        if it must survive.
        """
        with self._lock:
            self._commit("Stopped editing", editing=self._editing.stop())

    # ==================== Selection ====================

    def select_node(self, node_id: str) -> frozenset[str]:
        """Add an existing node to the selection; returns the selection."""
        with self._lock:
            if node_id not in self._node_map():
                logger.debug(f"Ignoring select: node '{node_id}' not found")
                return self._selected
            self._commit(
                f"Selected '{node_id}'", selected=selection.select(self._selected, node_id)
            )
            return self._selected

    def deselect_node(self, node_id: str) -> frozenset[str]:
        """Remove a node from the selection; returns the selection."""
        with self._lock:
            self._commit(
                f"Deselected '{node_id}'", selected=selection.deselect(self._selected, node_id)
            )
            return self._selected

    def clear_selection(self) -> frozenset[str]:
        """
        Clear the selection; returns the (shared, empty) selection.

        Clearing an empty selection changes nothing and returns the very same
        object.
        """
        with self._lock:
            self._commit("Cleared selection", selected=selection.clear())
            return self._selected

    # ==================== Viewport ====================

    def set_viewport(self, viewport: Viewport) -> None:
        """Replace the viewport."""
        with self._lock:
            if viewport == self._viewport:
                return
            self._commit("Set viewport", viewport=viewport)

    # ==================== Bulk Operations ====================

    def set_nodes(self, nodes: Iterable[CanvasNode | Mapping[str, Any]]) -> None:
        """
        Replace the whole node collection (persistence hydration).

        Selection entries and the editing session that refer to nodes absent
        from the new collection are dropped in the same step.

        Raises:
            InvalidNodeError: If a mapping payload is not a valid node
        """
        new_nodes = tuple(self._coerce_node(node) for node in nodes)
        with self._lock:
            self._install_nodes(new_nodes, f"Replaced nodes ({len(new_nodes)})")

    def _install_nodes(self, new_nodes: tuple[CanvasNode, ...], reason: str) -> None:
        ids = {node.id for node in new_nodes}
        selected = self._selected
        if any(node_id not in ids for node_id in selected):
            selected = selection.normalize({node_id for node_id in selected if node_id in ids})
        editing = self._editing
        if editing.editing_node_id is not None and editing.editing_node_id not in ids:
            editing = editing.stop()
        self._commit(reason, nodes=new_nodes, selected=selected, editing=editing)

    def set_edges(self, edges: Iterable[CanvasEdge | Mapping[str, Any]]) -> None:
        """
        Replace the whole edge collection (persistence hydration).

        Raises:
            InvalidEdgeError: If a mapping payload is not a valid edge
        """
        new_edges = tuple(self._coerce_edge(edge) for edge in edges)
        with self._lock:
            self._commit(f"Replaced edges ({len(new_edges)})", edges=new_edges)

    def clear_canvas(self) -> None:
        """Reset nodes, edges, selection, viewport and editing session."""
        with self._lock:
            self._commit(
                "Cleared canvas",
                nodes=() if self._nodes else self._nodes,
                edges=() if self._edges else self._edges,
                selected=selection.clear(),
                editing=self._editing.stop(),
                viewport=Viewport() if self._viewport != Viewport() else self._viewport,
            )

    def switch_workspace(
        self,
        workspace_id: str,
        nodes: Iterable[CanvasNode | Mapping[str, Any]] = (),
        edges: Iterable[CanvasEdge | Mapping[str, Any]] = (),
    ) -> None:
        """
        Clear the canvas and load another workspace as one atomic change.

        Listeners see a single notification carrying the new workspace.
        """
        new_nodes = tuple(self._coerce_node(node) for node in nodes)
        new_edges = tuple(self._coerce_edge(edge) for edge in edges)
        with self.batch():
            self.clear_canvas()
            if workspace_id != self.workspace_id:
                self.workspace_id = workspace_id
                self._version += 1
                self._batch_dirty = True
                logger.info(f"Switched to workspace '{workspace_id}'")
            self._install_nodes(new_nodes, f"Loaded {len(new_nodes)} nodes")
            self._commit(f"Loaded {len(new_edges)} edges", edges=new_edges)
