"""
Ancestry and connectivity queries.

The edge collection is indexed once into a NetworkX DiGraph; queries then walk
predecessor/successor lists directly, so an upstream query costs O(V+E) no
matter how many edges the canvas holds. Edges may reference nodes that no
longer exist: such endpoints are skipped, never reported.
"""

from collections import deque
from collections.abc import Iterable, Mapping, Sequence

import networkx as nx

from .models import CanvasEdge, CanvasNode


class AncestryIndex:
    """
    Read-only adjacency index over a fixed edge collection.

    Build a new index whenever the edge collection changes; an index never
    observes later mutations.
    """

    def __init__(self, edges: Iterable[CanvasEdge]):
        self._graph = nx.DiGraph()
        for edge in edges:
            self._graph.add_edge(edge.source_node_id, edge.target_node_id)

    @property
    def graph(self) -> nx.DiGraph:
        """The underlying DiGraph (do not mutate)."""
        return self._graph

    def upstream_ids(self, node_id: str, known_ids: Mapping[str, object]) -> list[str]:
        """
        Breadth-first ancestors of ``node_id``, closest first.

        Args:
            node_id: Node whose ancestry is requested
            known_ids: Mapping (or set-like) of node ids that currently exist;
                sources absent from it are neither reported nor traversed

        Returns:
            Ancestor ids, each at most once, never including ``node_id``
        """
        if node_id not in self._graph:
            return []

        visited = {node_id}
        queue = deque([node_id])
        upstream: list[str] = []

        while queue:
            current = queue.popleft()
            for source_id in self._graph.predecessors(current):
                if source_id in visited or source_id not in known_ids:
                    continue
                visited.add(source_id)
                upstream.append(source_id)
                queue.append(source_id)

        return upstream

    def connected_ids(self, node_id: str) -> list[str]:
        """
        Ids joined to ``node_id`` by a single edge in either direction.

        Outgoing neighbours come first, then incoming ones; each id appears
        once and ``node_id`` itself is omitted even with a self-loop.
        """
        if node_id not in self._graph:
            return []
        neighbours = dict.fromkeys(self._graph.successors(node_id))
        neighbours.update(dict.fromkeys(self._graph.predecessors(node_id)))
        neighbours.pop(node_id, None)
        return list(neighbours)


def get_upstream_nodes(
    nodes: Sequence[CanvasNode],
    edges: Iterable[CanvasEdge],
    node_id: str,
) -> list[CanvasNode]:
    """
    Find all upstream nodes of ``node_id`` using BFS over incoming edges.

    Convenience wrapper for callers holding plain collections; CanvasGraph
    keeps its own cached index instead.
    """
    node_map = {node.id: node for node in nodes}
    index = AncestryIndex(edges)
    return [node_map[upstream_id] for upstream_id in index.upstream_ids(node_id, node_map)]


def get_connected_node_ids(edges: Iterable[CanvasEdge], node_id: str) -> list[str]:
    """Ids directly joined to ``node_id`` by any edge."""
    return AncestryIndex(edges).connected_ids(node_id)
