"""
Tests for ancestry and connectivity queries.
"""

from factories import make_edge, make_node

from canvas_graph.ancestry import AncestryIndex, get_connected_node_ids, get_upstream_nodes


def ids(nodes) -> list[str]:
    return [node.id for node in nodes]


class TestUpstreamNodes:
    """Tests for breadth-first upstream traversal."""

    def test_chain_closest_first(self) -> None:
        """Test A -> B -> C yields [B, A] for C."""
        nodes = [make_node("A"), make_node("B"), make_node("C")]
        edges = [make_edge("A", "B"), make_edge("B", "C")]

        assert ids(get_upstream_nodes(nodes, edges, "C")) == ["B", "A"]

    def test_root_has_no_ancestors(self) -> None:
        """Test a node without incoming edges has no ancestry."""
        nodes = [make_node("A"), make_node("B")]

        assert get_upstream_nodes(nodes, [make_edge("A", "B")], "A") == []

    def test_diamond_reports_each_node_once(self) -> None:
        """Test A -> B, A -> C, B -> D, C -> D reports A once."""
        nodes = [make_node(n) for n in "ABCD"]
        edges = [
            make_edge("A", "B"),
            make_edge("A", "C"),
            make_edge("B", "D"),
            make_edge("C", "D"),
        ]

        result = ids(get_upstream_nodes(nodes, edges, "D"))

        assert sorted(result[:2]) == ["B", "C"]
        assert result[2:] == ["A"]

    def test_cycle_excludes_query_node(self) -> None:
        """Test a cycle terminates and never reports the query node."""
        nodes = [make_node(n) for n in "ABC"]
        edges = [make_edge("A", "B"), make_edge("B", "C"), make_edge("C", "A")]

        result = ids(get_upstream_nodes(nodes, edges, "C"))

        assert result == ["B", "A"]

    def test_self_loop_ignored(self) -> None:
        """Test a self-loop does not report the node itself."""
        nodes = [make_node("A")]

        assert get_upstream_nodes(nodes, [make_edge("A", "A")], "A") == []

    def test_dangling_source_skipped(self) -> None:
        """Test sources that are not existing nodes are neither reported nor traversed."""
        nodes = [make_node("B"), make_node("C"), make_node("R")]
        edges = [make_edge("R", "GONE"), make_edge("GONE", "B"), make_edge("B", "C")]

        assert ids(get_upstream_nodes(nodes, edges, "C")) == ["B"]

    def test_unknown_node(self) -> None:
        """Test querying an id absent from the edges yields nothing."""
        assert get_upstream_nodes([make_node("A")], [], "missing") == []

    def test_two_parents(self) -> None:
        """Test A -> C and B -> C reports both parents exactly once."""
        nodes = [make_node(n) for n in "ABC"]
        edges = [make_edge("A", "C"), make_edge("B", "C")]

        assert ids(get_upstream_nodes(nodes, edges, "C")) == ["A", "B"]

    def test_isolated_node_excluded(self) -> None:
        """Test a chain of places ignores an unconnected node."""
        nodes = [make_node(n) for n in ("NY", "Washington", "Node4", "London")]
        edges = [make_edge("NY", "Washington"), make_edge("Washington", "Node4")]

        assert ids(get_upstream_nodes(nodes, edges, "Node4")) == ["Washington", "NY"]

    def test_merging_branches(self) -> None:
        """Test a second branch into the query node is walked breadth-first."""
        nodes = [make_node(n) for n in ("NY", "Washington", "Node4", "London")]
        edges = [
            make_edge("NY", "Washington"),
            make_edge("Washington", "Node4"),
            make_edge("London", "Node4"),
        ]

        result = ids(get_upstream_nodes(nodes, edges, "Node4"))

        assert result == ["Washington", "London", "NY"]


class TestConnectedNodes:
    """Tests for one-hop connectivity."""

    def test_both_directions(self) -> None:
        """Test outgoing then incoming neighbours are returned."""
        edges = [make_edge("A", "B"), make_edge("C", "A")]

        assert get_connected_node_ids(edges, "A") == ["B", "C"]

    def test_duplicates_and_self_removed(self) -> None:
        """Test parallel edges and self-loops do not duplicate ids."""
        edges = [
            make_edge("A", "B", "e1"),
            make_edge("B", "A", "e2"),
            make_edge("A", "A", "e3"),
        ]

        assert get_connected_node_ids(edges, "A") == ["B"]

    def test_isolated_node(self) -> None:
        """Test a node without edges has no connections."""
        assert get_connected_node_ids([make_edge("A", "B")], "Z") == []


class TestAncestryIndex:
    """Tests for the AncestryIndex adjacency structure."""

    def test_graph_exposes_edges(self) -> None:
        """Test the underlying DiGraph holds every edge."""
        index = AncestryIndex([make_edge("A", "B"), make_edge("B", "C")])

        assert set(index.graph.edges()) == {("A", "B"), ("B", "C")}

    def test_known_ids_accepts_set(self) -> None:
        """Test upstream_ids accepts any container of existing ids."""
        index = AncestryIndex([make_edge("A", "B")])

        assert index.upstream_ids("B", {"A", "B"}) == ["A"]
