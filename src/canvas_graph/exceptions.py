"""
Exceptions for canvas-graph package.

Missing node or edge ids are never reported through these exceptions: every
graph operation treats an unknown id as a no-op. These exceptions only surface
programmer errors at construction boundaries (hydrating models from raw
payloads, unknown enum values).
"""


class CanvasGraphError(Exception):
    """Base exception for CanvasGraph errors."""

    pass


class InvalidNodeError(CanvasGraphError):
    """Raised when a node payload cannot be turned into a CanvasNode."""

    pass


class InvalidEdgeError(CanvasGraphError):
    """Raised when an edge payload cannot be turned into a CanvasEdge."""

    pass


class InvalidInputModeError(CanvasGraphError):
    """Raised when an unknown input mode is requested for the editing session."""

    pass
