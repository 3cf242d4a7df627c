"""
Selection set management.

Selections are immutable frozensets of node ids. Every transition returns a
container; when nothing changes the *same* container is returned so that
consumers memoizing on identity do not re-render. "No selection" is always the
single shared EMPTY_SELECTION instance.
"""

from typing import AbstractSet

EMPTY_SELECTION: frozenset[str] = frozenset()


def select(selection: AbstractSet[str], node_id: str) -> frozenset[str]:
    """Add ``node_id`` to the selection."""
    if node_id in selection and isinstance(selection, frozenset):
        return selection
    return frozenset(selection) | {node_id}


def deselect(selection: AbstractSet[str], node_id: str) -> frozenset[str]:
    """Remove ``node_id`` from the selection; unknown ids leave it untouched."""
    if node_id not in selection:
        return normalize(selection)
    remaining = frozenset(selection) - {node_id}
    return remaining if remaining else EMPTY_SELECTION


def clear() -> frozenset[str]:
    """Return the shared empty selection."""
    return EMPTY_SELECTION


def normalize(selection: AbstractSet[str]) -> frozenset[str]:
    """Coerce any set of ids into a frozenset, mapping empties onto EMPTY_SELECTION."""
    if not selection:
        return EMPTY_SELECTION
    if isinstance(selection, frozenset):
        return selection
    return frozenset(selection)
