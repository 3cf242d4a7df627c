#!/usr/bin/env python3
"""
Example: Knowledge Canvas - Travel Notes

This example builds a small idea canvas, links notes into a chain, gathers
the context an AI prompt would receive and tidies the canvas into the
masonry grid.

Key concepts covered:
- Adding idea nodes and directed edges
- Upstream ancestry queries for context assembly
- Streaming output into a node
- Editing session and selection
- Masonry arrangement and render projection

Run with:
    python examples/knowledge_canvas.py
"""

import logging

from canvas_graph import (
    CanvasEdge,
    CanvasGraph,
    NodePosition,
    create_idea_node,
    export_node_link,
)


def main():
    """Demonstrate a travel-notes canvas."""
    logging.basicConfig(level=logging.INFO)

    print("=" * 70)
    print("KNOWLEDGE CANVAS: Travel Notes")
    print("=" * 70)

    graph = CanvasGraph(workspace_id="travel")
    graph.subscribe(lambda snapshot: print(f"   [v{snapshot.version}] {len(snapshot.nodes)} nodes"))

    # ==========================================
    # STEP 1: Capture notes
    # ==========================================
    print("\n1. Capturing notes...")

    for node_id, note in [
        ("ny", "Flights from New York are cheapest in March"),
        ("washington", "Washington museums are free"),
        ("question", "Plan a 5 day east coast trip"),
        ("london", "London trip is next year"),
    ]:
        position = graph.calculate_next_node_position()
        graph.add_node(create_idea_node(node_id, "travel", position, prompt=note))

    # ==========================================
    # STEP 2: Link the ideas
    # ==========================================
    print("\n2. Linking ideas...")

    with graph.batch():
        graph.add_edge(CanvasEdge(id="e1", source_node_id="ny", target_node_id="washington"))
        graph.add_edge(CanvasEdge(id="e2", source_node_id="washington", target_node_id="question"))

    # ==========================================
    # STEP 3: Gather AI context
    # ==========================================
    print("\n3. Context for the question (closest first):")

    for node in graph.get_upstream_nodes("question"):
        print(f"   - {node.id}: {node.data['prompt']}")

    # ==========================================
    # STEP 4: Stream an answer
    # ==========================================
    print("\n4. Streaming an answer...")

    graph.set_node_generating("question", True)
    for chunk in ["Day 1-2: New York. ", "Day 3-5: Washington museums."]:
        graph.append_to_output("question", chunk)
    graph.set_node_generating("question", False)
    print(f"   {graph.get_node('question').data['output']}")

    # ==========================================
    # STEP 5: Edit, select and tidy up
    # ==========================================
    print("\n5. Editing and arranging...")

    graph.start_editing("london")
    graph.update_draft("London trip moved to spring")
    graph.update_node_prompt("london", graph.draft_content)
    graph.stop_editing()

    graph.select_node("question")
    graph.update_node_dimensions("question", 560, 320)
    graph.update_node_position("london", NodePosition(x=1500, y=900))
    graph.arrange_nodes()

    projection = export_node_link(graph.snapshot(), include_data=False)
    for node in projection["nodes"]:
        flag = " (selected)" if node["selected"] else ""
        print(f"   {node['id']:<12} at ({node['position']['x']}, {node['position']['y']}){flag}")

    print("\n" + "=" * 70)


if __name__ == "__main__":
    main()
