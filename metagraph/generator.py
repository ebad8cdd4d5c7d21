"""
Graph generator - Turn a diagram corpus into a positioned meta-graph.

Runs the selected layout engine, lets persisted (user-dragged) positions
override the computed ones, assigns node ids and resolves links into edges.
"""

import logging
import random
from typing import Any, Mapping, Optional, Sequence, Union

from .analysis import count_relationships, resolve_link
from .layout import ConfigInput, get_layout_engine, resolve_layout_key
from .models import (
    DEFAULT_COLOR,
    DiagramMetadata,
    GraphEdge,
    GraphNode,
    LayoutConfig,
    LayoutResult,
    MetaGraph,
    NodePosition,
    TIER_COLORS,
)

logger = logging.getLogger(__name__)

SavedPositions = Mapping[str, Union[NodePosition, Mapping[str, Any]]]

NODE_ID_PREFIX = "graph-"
EDGE_ID_PREFIX = "edge-"


def apply_saved_positions(
    result: LayoutResult,
    saved_positions: Optional[SavedPositions],
) -> LayoutResult:
    """
    Replace computed positions with persisted ones.

    A saved entry replaces the engine's position outright for any path the
    engine placed. Entries for paths the engine did not place are ignored.
    """
    if not saved_positions:
        return result
    if not isinstance(saved_positions, Mapping):
        raise ValueError("Saved positions must map diagram paths to positions")

    merged = dict(result.positions)
    for path in merged:
        if path not in saved_positions:
            continue
        saved = saved_positions[path]
        if not isinstance(saved, NodePosition):
            saved = NodePosition.model_validate(saved)
        logger.debug("Using saved position for %s", path)
        merged[path] = saved

    return LayoutResult(merged)


def generate_graph(
    diagrams: Sequence[DiagramMetadata],
    layout: Optional[str] = None,
    config: ConfigInput = None,
    saved_positions: Optional[SavedPositions] = None,
    rng: Optional[random.Random] = None,
) -> MetaGraph:
    """
    Generate the positioned meta-graph for a diagram corpus.

    Args:
        diagrams: Metadata for every diagram to show, in display order
        layout: Engine key (hierarchical, grid, circular, force-directed);
            unknown keys fall back to hierarchical
        config: Full or partial LayoutConfig
        saved_positions: Persisted positions by diagram path; these win
            over computed positions
        rng: Random source for the force-directed engine

    Returns:
        MetaGraph whose edges only reference emitted node ids
    """
    config = LayoutConfig.from_partial(config)
    layout_key = resolve_layout_key(layout)
    engine = get_layout_engine(layout_key, rng=rng)

    result = engine.calculate_layout(diagrams, config)
    result = apply_saved_positions(result, saved_positions)

    # Ids are dense over emitted nodes, in input order
    nodes: list[GraphNode] = []
    emitted: list[DiagramMetadata] = []
    for metadata in diagrams:
        position = result.get(metadata.path)
        if position is None:
            continue

        counts = count_relationships(metadata.path, diagrams)
        nodes.append(GraphNode(
            id=f"{NODE_ID_PREFIX}{len(nodes)}",
            diagram_path=metadata.path,
            label=metadata.display_name,
            diagram_type=metadata.diagram_type,
            x=position.x,
            y=position.y,
            width=position.width,
            height=position.height,
            parent_count=counts.parent_count,
            child_count=counts.child_count,
            color=TIER_COLORS.get(metadata.diagram_type, DEFAULT_COLOR),
        ))
        emitted.append(metadata)

    edges = build_edges(emitted, nodes)

    logger.info(
        "Generated %s graph: %d nodes, %d edges (%d diagrams in)",
        layout_key, len(nodes), len(edges), len(diagrams),
    )
    return MetaGraph(layout=layout_key, nodes=nodes, edges=edges)


def build_edges(
    emitted: Sequence[DiagramMetadata],
    nodes: Sequence[GraphNode],
) -> list[GraphEdge]:
    """
    Resolve every link of every emitted diagram into an edge.

    `emitted[i]` must be the diagram behind `nodes[i]`. Links are matched
    against emitted paths only (exact, then basename); unresolved links
    produce nothing. Repeated links between the same pair yield one edge.
    """
    emitted_paths = [m.path for m in emitted]
    id_by_path = {node.diagram_path: node.id for node in nodes}

    edges: list[GraphEdge] = []
    seen_pairs: set[tuple[str, str]] = set()

    for metadata, node in zip(emitted, nodes):
        for link in metadata.linked_diagram_paths:
            target_path = resolve_link(link, emitted_paths)
            if target_path is None:
                continue

            pair = (node.id, id_by_path[target_path])
            if pair in seen_pairs:
                continue
            seen_pairs.add(pair)

            edges.append(GraphEdge(
                id=f"{EDGE_ID_PREFIX}{len(edges)}",
                source=pair[0],
                target=pair[1],
            ))

    return edges
