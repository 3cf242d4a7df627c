"""
Editing session state machine.

At most one node is edited at a time. The session is a single immutable value
whose nullable ``editing_node_id`` is the only record of which node is being
edited; there is no per-node flag that could disagree with it.

States:
    Idle           editing_node_id is None
    Editing(id)    editing_node_id == id

Every transition returns a new EditingSession (or the same instance when
nothing changes).
"""

import logging

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import InvalidInputModeError
from .models import DEFAULT_INPUT_MODE, InputMode

logger = logging.getLogger(__name__)


def coerce_input_mode(mode: InputMode | str) -> InputMode:
    """
    Convert a string or InputMode into an InputMode.

    Raises:
        InvalidInputModeError: If ``mode`` names no known input mode
    """
    if isinstance(mode, InputMode):
        return mode
    try:
        return InputMode(mode)
    except ValueError as e:
        valid = ", ".join(m.value for m in InputMode)
        raise InvalidInputModeError(
            f"Invalid input mode: '{mode}'. Valid options: {valid}"
        ) from e


class EditingSession(BaseModel):
    """Snapshot of the single-editor session."""

    editing_node_id: str | None = Field(
        default=None,
        description="Node currently being edited, or None when idle",
    )
    draft_content: str | None = Field(
        default=None,
        description="Unsaved text buffer for the edited node",
    )
    input_mode: InputMode = Field(
        default=DEFAULT_INPUT_MODE,
        description="Whether typed input is a plain note or an AI prompt",
    )

    @property
    def is_editing(self) -> bool:
        """True while a node is being edited."""
        return self.editing_node_id is not None

    @property
    def is_idle(self) -> bool:
        """True when no node is being edited."""
        return self.editing_node_id is None

    def is_editing_node(self, node_id: str) -> bool:
        """True if ``node_id`` is the node being edited."""
        return self.editing_node_id is not None and self.editing_node_id == node_id

    def start(self, node_id: str) -> "EditingSession":
        """
        Begin editing ``node_id``.

        Starting while another node is being edited is an implicit stop: the
        previous node's unsaved draft is discarded and the input mode resets.
        """
        if self.editing_node_id is not None and self.editing_node_id != node_id:
            logger.debug(
                f"Switching edit from '{self.editing_node_id}' to '{node_id}', "
                f"discarding draft"
            )
        return EditingSession(editing_node_id=node_id)

    def with_draft(self, content: str) -> "EditingSession":
        """Store unsaved text. Ignored while idle."""
        if self.is_idle:
            logger.debug("Ignoring draft update while no node is being edited")
            return self
        if self.draft_content == content:
            return self
        return self.model_copy(update={"draft_content": content})

    def with_input_mode(self, mode: InputMode | str) -> "EditingSession":
        """Switch the input mode without leaving the current state."""
        mode = coerce_input_mode(mode)
        if self.input_mode == mode:
            return self
        return self.model_copy(update={"input_mode": mode})

    def stop(self) -> "EditingSession":
        """Return to Idle, dropping the draft and resetting the input mode."""
        return IDLE

    model_config = ConfigDict(frozen=True)


IDLE = EditingSession()
