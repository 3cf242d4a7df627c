"""
Data models for canvas-graph package.

This module defines the core data structures:
- CanvasNode: A single idea/content unit on the canvas
- CanvasEdge: Directed relationship between two nodes
- NodePosition / Viewport: Canvas geometry
- LinkPreviewMetadata / CalendarEventMetadata: Structured node payload entries

Nodes and edges are frozen. Every change produces a shallow clone through
``model_copy`` so containers holding them can be compared by identity.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .config import DEFAULT_LAYOUT, LayoutConfig
from .exceptions import InvalidEdgeError, InvalidNodeError


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _ensure_utc(v: datetime) -> datetime:
    if v.tzinfo is None:
        # Assume naive datetime is UTC
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


class NodeType(str, Enum):
    """Type tag of a canvas node."""

    IDEA = "idea"
    PROMPT = "prompt"
    AI_OUTPUT = "ai_output"
    DERIVED = "derived"
    MEDIA = "media"


class InputMode(str, Enum):
    """Input mode of the editing session."""

    NOTE = "note"
    AI = "ai"


DEFAULT_INPUT_MODE = InputMode.NOTE

NODE_COLOR_KEYS = ("default", "danger", "warning", "success")
_LEGACY_COLOR_KEYS = {"primary": "danger"}

# Well-known keys inside CanvasNode.data
HEADING = "heading"
PROMPT = "prompt"
OUTPUT = "output"
TAGS = "tags"
COLOR_KEY = "color_key"
IS_GENERATING = "is_generating"
IS_PROMPT_COLLAPSED = "is_prompt_collapsed"
IS_PINNED = "is_pinned"
IS_COLLAPSED = "is_collapsed"
INCLUDE_IN_AI_POOL = "include_in_ai_pool"
LINK_PREVIEWS = "link_previews"
CALENDAR_EVENT = "calendar_event"


class NodePosition(BaseModel):
    """Top-left corner of a node on the canvas."""

    x: float = 0
    y: float = 0

    model_config = ConfigDict(frozen=True)


class Viewport(BaseModel):
    """Pan/zoom state of the canvas surface."""

    x: float = 0
    y: float = 0
    zoom: float = Field(default=1, gt=0)

    model_config = ConfigDict(frozen=True)


class LinkPreviewMetadata(BaseModel):
    """Unfurled metadata for a URL referenced by a node."""

    url: str = Field(..., min_length=1)
    title: str | None = None
    description: str | None = None
    image: str | None = None
    favicon: str | None = None
    domain: str | None = None
    card_type: str | None = None
    fetched_at: int = Field(
        default=0,
        description="Epoch milliseconds when the preview was fetched",
    )

    model_config = ConfigDict(frozen=True)


class CalendarEventMetadata(BaseModel):
    """Calendar entry attached to a node by the calendar integration."""

    id: str = Field(..., min_length=1)
    type: str = Field(default="event", description="event, reminder or todo")
    title: str = ""
    date: str = Field(..., description="ISO date or datetime string")
    end_date: str | None = None
    status: str = Field(default="pending", description="pending, synced or failed")
    calendar_id: str | None = None
    error: str | None = None

    model_config = ConfigDict(frozen=True)


class CanvasNode(BaseModel):
    """
    Represents a node on the canvas graph.

    The ``data`` payload is free-form; the typed setters on CanvasGraph use the
    well-known keys defined in this module (prompt, output, tags, ...).
    """

    id: str = Field(
        ...,
        description="Unique, caller-supplied identifier for the node",
        min_length=1,
    )
    workspace_id: str = Field(
        default="",
        description="Workspace (tenant) the node belongs to",
    )
    type: NodeType = Field(
        default=NodeType.IDEA,
        description="Node type tag",
    )
    position: NodePosition = Field(
        default_factory=NodePosition,
        description="Top-left corner on the canvas",
    )
    width: float | None = Field(default=None, description="Explicit width, if any")
    height: float | None = Field(default=None, description="Explicit height, if any")
    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form content payload",
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        description="UTC timestamp when node was created",
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        description="UTC timestamp of the last change",
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Ensure timestamps are timezone-aware and in UTC."""
        return _ensure_utc(v)

    def with_changes(self, **changes: Any) -> "CanvasNode":
        """
        Return a shallow clone with the given attributes replaced.

        ``updated_at`` is refreshed unless explicitly supplied.
        """
        changes.setdefault("updated_at", utc_now())
        return self.model_copy(update=changes)

    def with_data(self, **fields: Any) -> "CanvasNode":
        """Return a shallow clone with the given data keys replaced."""
        return self.with_changes(data={**self.data, **fields})

    def to_dict(self) -> dict[str, Any]:
        """
        Convert node to a JSON-ready dictionary.

        Returns:
            Dictionary with ISO format timestamps and plain enum values.
        """
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CanvasNode":
        """
        Create a CanvasNode from a dictionary.

        Raises:
            InvalidNodeError: If the payload does not describe a valid node
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise InvalidNodeError(f"Node validation failed: {e}") from e

    model_config = ConfigDict(frozen=True)


_ATTRIBUTE_ADAPTERS: dict[str, TypeAdapter] = {}


def validate_node_attribute(field: str, value: Any) -> Any:
    """
    Validate ``value`` against the annotation of a CanvasNode attribute.

    ``model_copy`` skips validation, so values headed for a node attribute
    are coerced here first (e.g. ``"derived"`` becomes ``NodeType.DERIVED``).

    Raises:
        InvalidNodeError: If ``value`` is not valid for ``field``
    """
    adapter = _ATTRIBUTE_ADAPTERS.get(field)
    if adapter is None:
        adapter = TypeAdapter(CanvasNode.model_fields[field].annotation)
        _ATTRIBUTE_ADAPTERS[field] = adapter
    try:
        return adapter.validate_python(value)
    except ValidationError as e:
        raise InvalidNodeError(f"Invalid value for node field '{field}': {e}") from e


class CanvasEdge(BaseModel):
    """
    Represents a directed relationship between two nodes.

    Edges are not validated against node existence; they may dangle
    transiently while the persistence layer hydrates.
    """

    id: str = Field(
        ...,
        description="Unique, caller-supplied identifier for the edge",
        min_length=1,
    )
    workspace_id: str = Field(default="", description="Workspace the edge belongs to")
    source_node_id: str = Field(..., description="ID of the source node", min_length=1)
    target_node_id: str = Field(..., description="ID of the target node", min_length=1)
    relationship_type: str = Field(
        default="related",
        description="Relationship tag (related, derived, ...)",
    )

    def touches(self, node_id: str) -> bool:
        """Return True if either endpoint is ``node_id``."""
        return self.source_node_id == node_id or self.target_node_id == node_id

    def to_dict(self) -> dict[str, Any]:
        """Convert edge to a JSON-ready dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CanvasEdge":
        """
        Create a CanvasEdge from a dictionary.

        Raises:
            InvalidEdgeError: If the payload does not describe a valid edge
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise InvalidEdgeError(f"Edge validation failed: {e}") from e

    model_config = ConfigDict(frozen=True)


def create_idea_node(
    node_id: str,
    workspace_id: str,
    position: NodePosition,
    prompt: str | None = None,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> CanvasNode:
    """
    Create a unified idea node with default dimensions.

    Args:
        node_id: Identifier for the node
        workspace_id: Owning workspace
        position: Initial position
        prompt: Optional initial prompt; omitted from data when None
        config: Layout configuration supplying the default size

    Returns:
        A new CanvasNode whose created_at equals its updated_at
    """
    now = utc_now()
    data: dict[str, Any] = {
        IS_GENERATING: False,
        IS_PROMPT_COLLAPSED: False,
        COLOR_KEY: "default",
    }
    if prompt is not None:
        data[PROMPT] = prompt
    return CanvasNode(
        id=node_id,
        workspace_id=workspace_id,
        type=NodeType.IDEA,
        position=position,
        width=config.default_node_width,
        height=config.default_node_height,
        data=data,
        created_at=now,
        updated_at=now,
    )


def clamp_node_dimensions(
    width: float,
    height: float,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> tuple[float, float]:
    """Clamp a width/height pair into the configured bounds."""
    clamped_width = min(max(width, config.min_node_width), config.max_node_width)
    clamped_height = min(max(height, config.min_node_height), config.max_node_height)
    return clamped_width, clamped_height


def normalize_node_color_key(value: Any) -> str:
    """Map a stored colour key onto a known key, defaulting unknown values."""
    if not isinstance(value, str) or not value:
        return "default"
    value = _LEGACY_COLOR_KEYS.get(value, value)
    return value if value in NODE_COLOR_KEYS else "default"


def is_node_pinned(node: CanvasNode) -> bool:
    """Return True if the node is pinned in place."""
    data = getattr(node, "data", None)
    if not isinstance(data, dict):
        return False
    return data.get(IS_PINNED) is True


def node_width(node: CanvasNode, config: LayoutConfig = DEFAULT_LAYOUT) -> float:
    """Effective width of a node."""
    return node.width if node.width is not None else config.default_node_width


def node_height(node: CanvasNode, config: LayoutConfig = DEFAULT_LAYOUT) -> float:
    """Effective height of a node."""
    return node.height if node.height is not None else config.default_node_height
