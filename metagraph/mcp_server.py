#!/usr/bin/env python3
"""
Metagraph MCP Server

Provides MCP tools for AI agents to lay out and inspect a diagram corpus.
Tools take the corpus as JSON text and call the layout core directly.
"""

import json
import random
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .analysis import summarize_corpus
from .generator import generate_graph
from .layout import DEFAULT_LAYOUT, list_layout_engines
from .models import DiagramMetadata
from .validation import validate_corpus, validation_summary

# Create MCP server
mcp = FastMCP("metagraph")


def parse_diagrams(diagrams_json: str) -> list[DiagramMetadata]:
    """Parse a JSON array (or {"diagrams": [...]}) into metadata records."""
    data = json.loads(diagrams_json)
    if isinstance(data, dict):
        data = data.get("diagrams", [])
    if not isinstance(data, list):
        raise ValueError("Expected a JSON array of diagrams")
    return [DiagramMetadata.model_validate(d) for d in data]


def _error(message: str) -> str:
    return json.dumps({"status": "error", "error": message})


# ============================================================================
# LAYOUT TOOLS
# ============================================================================

@mcp.tool()
def graph_list_layouts() -> str:
    """
    List the available layout engines.

    Use the returned `key` values as the `layout` argument of graph_layout.
    """
    return json.dumps({"default": DEFAULT_LAYOUT, "layouts": list_layout_engines()}, indent=2)


@mcp.tool()
def graph_layout(
    diagrams: str,
    layout: str = DEFAULT_LAYOUT,
    config: Optional[str] = None,
    saved_positions: Optional[str] = None,
    seed: Optional[int] = None,
) -> str:
    """
    Lay out a diagram corpus as a meta-graph.

    Args:
        diagrams: JSON array of {path, displayName, diagramType, linkedDiagramPaths}
        layout: hierarchical, grid, circular or force-directed
        config: Optional JSON object of layout options (e.g. {"horizontalSpacing": 300})
        saved_positions: Optional JSON object mapping path to {x, y, width, height}
        seed: Random seed for reproducible force-directed output

    Returns the positioned nodes and the edges between them.
    """
    try:
        graph = generate_graph(
            parse_diagrams(diagrams),
            layout=layout,
            config=json.loads(config) if config else None,
            saved_positions=json.loads(saved_positions) if saved_positions else None,
            rng=random.Random(seed) if seed is not None else None,
        )
    except ValueError as e:
        return _error(str(e))
    return json.dumps(graph.to_json_dict(), indent=2)


# ============================================================================
# ANALYSIS TOOLS
# ============================================================================

@mcp.tool()
def graph_validate(diagrams: str) -> str:
    """
    Check a diagram corpus for problems.

    Reports duplicate paths, diagrams with an unrecognized type (left out of
    tiered layouts), dangling links and links matched only by file name.
    """
    try:
        issues = validate_corpus(parse_diagrams(diagrams))
    except ValueError as e:
        return _error(str(e))
    return json.dumps({
        "issues": [i.to_dict() for i in issues],
        "summary": validation_summary(issues),
    }, indent=2)


@mcp.tool()
def graph_summarize(diagrams: str, top_n: int = 5) -> str:
    """
    Summarize a diagram corpus.

    Returns counts by type, resolved link count, connected components,
    the most connected diagrams and the number of orphans.
    """
    try:
        summary = summarize_corpus(parse_diagrams(diagrams), top_n=top_n)
    except ValueError as e:
        return _error(str(e))
    return json.dumps(summary.to_dict(), indent=2)


def main():
    mcp.run()


if __name__ == "__main__":
    main()
