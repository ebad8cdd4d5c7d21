"""Tests for generator.py - engine selection, saved positions, ids and edges.

Links that resolve to nothing, or to a diagram the layout left out,
silently draw no edge; that leniency is intended.
"""

import random

import pytest
from pydantic import ValidationError

from metagraph.generator import apply_saved_positions, generate_graph
from metagraph.layout import LAYOUT_ENGINES
from metagraph.models import LayoutResult, NodePosition


def edge_pairs(graph):
    return [(e.source, e.target) for e in graph.edges]


class TestNodeIds:
    def test_ids_dense_over_emitted_nodes(self, make_diagram):
        corpus = [
            make_diagram("A", "market"),
            make_diagram("X", "graph"),
            make_diagram("B", "context"),
        ]
        graph = generate_graph(corpus, layout="hierarchical")
        assert [(n.id, n.diagram_path) for n in graph.nodes] == [("graph-0", "A"), ("graph-1", "B")]

    def test_grid_emits_every_diagram(self, sample_corpus):
        graph = generate_graph(sample_corpus, layout="grid")
        assert [n.id for n in graph.nodes] == [f"graph-{i}" for i in range(5)]

    def test_node_carries_metadata_and_counts(self, sample_corpus):
        graph = generate_graph(sample_corpus)
        context = graph.node_for_path("BAC4/Context.bac4")
        assert context.label == "Context"
        assert context.diagram_type == "context"
        assert context.parent_count == 1
        assert context.child_count == 3
        assert (context.width, context.height) == (240, 100)

    def test_empty_corpus(self):
        graph = generate_graph([])
        assert graph.nodes == []
        assert graph.edges == []


class TestEdges:
    def test_basename_fallback(self, make_diagram):
        corpus = [
            make_diagram("folder/A.ext", links=["folder/X.ext"]),
            make_diagram("other/X.ext"),
        ]
        graph = generate_graph(corpus, layout="grid")
        assert edge_pairs(graph) == [("graph-0", "graph-1")]

    def test_exact_match_preferred_over_basename(self, make_diagram):
        corpus = [
            make_diagram("a/X.bac4"),
            make_diagram("b/X.bac4"),
            make_diagram("c/Src.bac4", links=["b/X.bac4"]),
        ]
        graph = generate_graph(corpus, layout="grid")
        assert edge_pairs(graph) == [("graph-2", "graph-1")]

    def test_unresolved_links_draw_nothing(self, make_diagram):
        corpus = [
            make_diagram("A", "context", ["missing", "Unclassified"]),
            make_diagram("Unclassified", "graph"),
        ]
        graph = generate_graph(corpus, layout="hierarchical")
        assert graph.edges == []

    def test_repeated_links_give_one_edge(self, make_diagram):
        corpus = [make_diagram("A", links=["B", "B"]), make_diagram("B", links=["A"])]
        graph = generate_graph(corpus, layout="grid")
        assert [e.id for e in graph.edges] == ["edge-0", "edge-1"]
        assert edge_pairs(graph) == [("graph-0", "graph-1"), ("graph-1", "graph-0")]

    @pytest.mark.parametrize("layout", list(LAYOUT_ENGINES))
    def test_edges_reference_emitted_nodes(self, sample_corpus, layout):
        graph = generate_graph(sample_corpus, layout=layout, rng=random.Random(5))
        node_ids = {n.id for n in graph.nodes}
        assert graph.edges
        for edge in graph.edges:
            assert edge.source in node_ids
            assert edge.target in node_ids

    def test_sample_corpus_edges(self, sample_corpus):
        graph = generate_graph(sample_corpus, layout="grid")
        ids = {n.diagram_path: n.id for n in graph.nodes}
        assert edge_pairs(graph) == [
            (ids["BAC4/Market.bac4"], ids["BAC4/Org.bac4"]),
            (ids["BAC4/Market.bac4"], ids["BAC4/Context.bac4"]),
            (ids["BAC4/Context.bac4"], ids["BAC4/Container.bac4"]),
            (ids["BAC4/Notes.bac4"], ids["BAC4/Context.bac4"]),
        ]


class TestSavedPositions:
    def test_saved_position_replaces_computed(self, sample_corpus):
        saved = NodePosition(x=-999, y=42, width=310, height=120)
        graph = generate_graph(sample_corpus, saved_positions={"BAC4/Org.bac4": saved})
        node = graph.node_for_path("BAC4/Org.bac4")
        assert (node.x, node.y, node.width, node.height) == (-999, 42, 310, 120)

    def test_other_nodes_untouched(self, sample_corpus):
        plain = generate_graph(sample_corpus)
        saved = generate_graph(
            sample_corpus,
            saved_positions={"BAC4/Org.bac4": {"x": 1, "y": 2, "width": 3, "height": 4}},
        )
        for before, after in zip(plain.nodes, saved.nodes):
            if after.diagram_path != "BAC4/Org.bac4":
                assert before == after

    def test_entries_for_unplaced_paths_ignored(self, sample_corpus):
        saved = {
            "BAC4/Deleted.bac4": {"x": 1, "y": 2, "width": 3, "height": 4},
            "BAC4/Notes.bac4": {"x": 1, "y": 2, "width": 3, "height": 4},
        }
        graph = generate_graph(sample_corpus, layout="hierarchical", saved_positions=saved)
        assert graph.node_for_path("BAC4/Notes.bac4") is None
        assert len(graph.nodes) == 4

    def test_apply_saved_positions_keeps_original(self):
        computed = LayoutResult({"a": NodePosition(x=0, y=0, width=200, height=80)})
        merged = apply_saved_positions(computed, {"a": {"x": 5, "y": 6, "width": 7, "height": 8}})
        assert merged["a"] == NodePosition(x=5, y=6, width=7, height=8)
        assert computed["a"].x == 0

    def test_non_mapping_saved_positions_rejected(self):
        computed = LayoutResult({"a": NodePosition(x=0, y=0, width=200, height=80)})
        with pytest.raises(ValueError):
            apply_saved_positions(computed, [("a", 1)])

    def test_non_object_entry_rejected(self):
        computed = LayoutResult({"a": NodePosition(x=0, y=0, width=200, height=80)})
        with pytest.raises(ValidationError):
            apply_saved_positions(computed, {"a": 5})

    def test_saved_position_wins_for_force_directed(self, sample_corpus):
        saved = {"BAC4/Org.bac4": NodePosition(x=10, y=20, width=200, height=80)}
        graph = generate_graph(
            sample_corpus, layout="force-directed", saved_positions=saved, rng=random.Random(1),
        )
        node = graph.node_for_path("BAC4/Org.bac4")
        assert (node.x, node.y) == (10, 20)


class TestEngineSelection:
    def test_unknown_key_matches_hierarchical(self, sample_corpus):
        fallback = generate_graph(sample_corpus, layout="does-not-exist")
        hierarchical = generate_graph(sample_corpus, layout="hierarchical")
        assert fallback.layout == "hierarchical"
        assert fallback == hierarchical

    def test_default_is_hierarchical(self, sample_corpus):
        assert generate_graph(sample_corpus).layout == "hierarchical"

    def test_force_directed_reproducible_with_seed(self, sample_corpus):
        first = generate_graph(sample_corpus, layout="force-directed", rng=random.Random(9))
        second = generate_graph(sample_corpus, layout="force-directed", rng=random.Random(9))
        assert first == second

    def test_partial_config_applied(self, make_diagram):
        corpus = [make_diagram("a"), make_diagram("b")]
        graph = generate_graph(corpus, config={"horizontalSpacing": 100, "dynamicSizing": False})
        assert [n.x for n in graph.nodes] == [-50, 50]

    def test_invalid_config_raises(self, sample_corpus):
        with pytest.raises(ValidationError):
            generate_graph(sample_corpus, config={"canvasWidth": -1})
