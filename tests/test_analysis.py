"""Tests for analysis.py - relationship counting, link resolution, components."""

from metagraph.analysis import (
    RelationshipCount,
    build_adjacency,
    count_relationships,
    diagram_basename,
    find_connected_components,
    resolve_link,
    summarize_corpus,
)


class TestCountRelationships:
    def test_duplicates_count_for_children_but_once_for_parent(self, make_diagram):
        corpus = [
            make_diagram("A", links=["B", "B", "C"]),
            make_diagram("B"),
            make_diagram("C"),
        ]
        assert count_relationships("A", corpus) == RelationshipCount(parent_count=0, child_count=3)
        assert count_relationships("B", corpus) == RelationshipCount(parent_count=1, child_count=0)

    def test_counts_each_linking_diagram(self, make_diagram):
        corpus = [
            make_diagram("A", links=["C"]),
            make_diagram("B", links=["C"]),
            make_diagram("C", links=["A"]),
        ]
        counts = count_relationships("C", corpus)
        assert counts.parent_count == 2
        assert counts.child_count == 1
        assert counts.total == 3

    def test_unknown_path_is_zero(self, make_diagram):
        corpus = [make_diagram("A", links=["B"])]
        assert count_relationships("missing", corpus) == RelationshipCount(0, 0)

    def test_no_basename_matching(self, make_diagram):
        # Sizing counts exact references only; edges are more lenient
        corpus = [
            make_diagram("docs/A.bac4", links=["old/B.bac4"]),
            make_diagram("docs/B.bac4"),
        ]
        assert count_relationships("docs/B.bac4", corpus).parent_count == 0

    def test_dangling_links_still_count_as_children(self, make_diagram):
        corpus = [make_diagram("A", links=["nowhere"])]
        assert count_relationships("A", corpus).child_count == 1


class TestResolveLink:
    def test_basename_strips_directory_and_extension(self):
        assert diagram_basename("folder/sub/X.bac4") == "X"
        assert diagram_basename("X") == "X"

    def test_exact_match(self):
        assert resolve_link("a/X.bac4", ["b/X.bac4", "a/X.bac4"]) == "a/X.bac4"

    def test_basename_fallback(self):
        assert resolve_link("folder/X.ext", ["other/Y.ext", "other/X.ext"]) == "other/X.ext"

    def test_basename_ignores_extension(self):
        assert resolve_link("X.bac4", ["docs/X.json"]) == "docs/X.json"

    def test_dangling(self):
        assert resolve_link("folder/Z.ext", ["other/X.ext"]) is None


class TestAdjacency:
    def test_links_are_bidirectional(self, make_diagram):
        corpus = [make_diagram("A", links=["B"]), make_diagram("B"), make_diagram("C")]
        adjacency = build_adjacency(corpus)
        assert adjacency == {"A": ["B"], "B": ["A"], "C": []}

    def test_duplicates_self_links_and_dangling_ignored(self, make_diagram):
        corpus = [
            make_diagram("A", links=["B", "B", "A", "missing"]),
            make_diagram("B", links=["A"]),
        ]
        adjacency = build_adjacency(corpus)
        assert adjacency == {"A": ["B"], "B": ["A"]}

    def test_basename_links_resolved(self, make_diagram):
        corpus = [make_diagram("x/A.bac4", links=["y/B.bac4"]), make_diagram("z/B.bac4")]
        assert build_adjacency(corpus)["z/B.bac4"] == ["x/A.bac4"]

    def test_basename_fallback_skips_own_path(self, make_diagram):
        corpus = [make_diagram("a/X.bac4", links=["old/X.bac4"]), make_diagram("b/X.bac4")]
        assert build_adjacency(corpus) == {"a/X.bac4": ["b/X.bac4"], "b/X.bac4": ["a/X.bac4"]}


class TestComponents:
    def test_empty(self):
        assert find_connected_components([]) == []

    def test_two_components(self, make_diagram):
        corpus = [
            make_diagram("A", links=["B"]),
            make_diagram("B", links=["C"]),
            make_diagram("C"),
            make_diagram("D"),
        ]
        components = find_connected_components(corpus)
        assert [c.paths for c in components] == [["A", "B", "C"], ["D"]]
        assert components[0].link_count == 2
        assert components[1].size == 1


class TestSummarize:
    def test_summary(self, sample_corpus):
        summary = summarize_corpus(sample_corpus, top_n=2)
        assert summary.total_diagrams == 5
        assert summary.total_links == 6
        assert summary.resolved_links == 5  # Gone.bac4 dangles
        assert summary.diagrams_by_type["context"] == 1
        assert summary.diagrams_by_type["graph"] == 1
        assert summary.connected_components == 1
        assert summary.orphan_count == 0
        assert summary.most_connected_diagrams[0].path == "BAC4/Context.bac4"

        data = summary.to_dict()
        assert data["most_connected_diagrams"][0]["connections"] == 4
        assert len(data["most_connected_diagrams"]) == 2
