"""
Layout and sizing configuration for canvas graphs.

LayoutConfig bundles the grid and node-size constants used by the layout
engine, dimension clamping and duplication offsets. A CanvasGraph receives one
at construction; the module-level constants mirror the defaults.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

GRID_COLUMNS = 4
GRID_GAP = 40
GRID_PADDING = 32

DEFAULT_NODE_WIDTH = 280
DEFAULT_NODE_HEIGHT = 220
MIN_NODE_WIDTH = 180
MAX_NODE_WIDTH = 900
MIN_NODE_HEIGHT = 100
MAX_NODE_HEIGHT = 800
RESIZE_INCREMENT_PX = 96

MAX_COLLISION_ITERATIONS = 200


class LayoutConfig(BaseModel):
    """Grid geometry and node sizing bounds."""

    grid_columns: int = Field(
        default=GRID_COLUMNS,
        description="Number of masonry columns",
        ge=1,
    )
    grid_gap: float = Field(
        default=GRID_GAP,
        description="Gap between columns and between stacked nodes",
        ge=0,
    )
    grid_padding: float = Field(
        default=GRID_PADDING,
        description="Offset of the first column/row from the canvas origin",
        ge=0,
    )
    default_node_width: float = Field(
        default=DEFAULT_NODE_WIDTH,
        description="Width used for nodes without an explicit width",
        gt=0,
    )
    default_node_height: float = Field(
        default=DEFAULT_NODE_HEIGHT,
        description="Height used for nodes without an explicit height",
        gt=0,
    )
    min_node_width: float = Field(default=MIN_NODE_WIDTH, gt=0)
    max_node_width: float = Field(default=MAX_NODE_WIDTH, gt=0)
    min_node_height: float = Field(default=MIN_NODE_HEIGHT, gt=0)
    max_node_height: float = Field(default=MAX_NODE_HEIGHT, gt=0)
    max_collision_iterations: int = Field(
        default=MAX_COLLISION_ITERATIONS,
        description="Upper bound on downward steps when resolving placement collisions",
        ge=0,
    )

    @model_validator(mode="after")
    def validate_bounds(self) -> "LayoutConfig":
        """Ensure min/max bounds are ordered."""
        if self.min_node_width > self.max_node_width:
            raise ValueError("min_node_width must not exceed max_node_width")
        if self.min_node_height > self.max_node_height:
            raise ValueError("min_node_height must not exceed max_node_height")
        return self

    @property
    def column_pitch(self) -> float:
        """Horizontal distance between default-width columns."""
        return self.default_node_width + self.grid_gap

    @property
    def row_pitch(self) -> float:
        """Vertical distance between default-height rows."""
        return self.default_node_height + self.grid_gap

    model_config = ConfigDict(frozen=True)


DEFAULT_LAYOUT = LayoutConfig()
