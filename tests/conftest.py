"""
Pytest configuration and fixtures for canvas-graph tests.

This module provides:
- An empty CanvasGraph fixture
- A chain A -> B -> C fixture
- A listener fixture recording change notifications
"""

import pytest
from factories import make_edge, make_node

from canvas_graph.graph import CanvasGraph


@pytest.fixture
def graph() -> CanvasGraph:
    """Create an empty CanvasGraph."""
    return CanvasGraph(workspace_id="ws-1")


@pytest.fixture
def chain_graph(graph: CanvasGraph) -> CanvasGraph:
    """Graph holding the chain A -> B -> C."""
    for i, node_id in enumerate(["A", "B", "C"]):
        graph.add_node(make_node(node_id, order=i))
    graph.add_edge(make_edge("A", "B"))
    graph.add_edge(make_edge("B", "C"))
    return graph


@pytest.fixture
def recorder(graph: CanvasGraph) -> list:
    """Subscribe to ``graph`` and collect every snapshot it publishes."""
    snapshots: list = []
    graph.subscribe(snapshots.append)
    return snapshots
