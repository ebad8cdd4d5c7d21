"""Tests for mcp_server.py - tools accept and return JSON text."""

import json

from metagraph.mcp_server import graph_layout, graph_list_layouts, graph_summarize, graph_validate


def test_list_layouts():
    data = json.loads(graph_list_layouts())
    assert data["default"] == "hierarchical"


def test_layout_grid(sample_corpus_json):
    data = json.loads(graph_layout(json.dumps(sample_corpus_json), layout="grid"))
    assert len(data["nodes"]) == 5
    assert data["nodes"][0]["id"] == "graph-0"


def test_layout_seeded(sample_corpus_json):
    diagrams = json.dumps(sample_corpus_json)
    first = graph_layout(diagrams, layout="force-directed", seed=4)
    second = graph_layout(diagrams, layout="force-directed", seed=4)
    assert first == second


def test_layout_bad_config_is_error(sample_corpus_json):
    data = json.loads(graph_layout(json.dumps(sample_corpus_json), config='{"canvasHeight": 0}'))
    assert data["status"] == "error"


def test_validate_and_summarize(sample_corpus_json):
    diagrams = json.dumps({"diagrams": sample_corpus_json})
    assert json.loads(graph_validate(diagrams))["summary"]["errors"] == 0
    assert json.loads(graph_summarize(diagrams))["total_diagrams"] == 5


def test_invalid_json_is_error():
    assert json.loads(graph_validate("not json"))["status"] == "error"


def test_non_object_saved_position_is_error():
    data = json.loads(graph_layout('[{"path": "a"}]', saved_positions='{"a": 5}'))
    assert data["status"] == "error"


def test_scalar_diagrams_is_error():
    assert json.loads(graph_layout("42"))["status"] == "error"
