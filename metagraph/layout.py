"""
Layout engines for the diagram meta-graph.

Provides interchangeable strategies that place every diagram on a 2D canvas:
- Hierarchical: Horizontal bands by architecture tier (market at the top)
- Grid: Uniform sqrt(n) x sqrt(n) grid, tier-agnostic
- Circular: Concentric rings by tier (market at the center)
- Force-directed: Spring/charge simulation over resolved links

Every engine takes the metadata set plus a (possibly partial) LayoutConfig
and returns a LayoutResult keyed by diagram path. Engines hold no state
between calls apart from an injected random source.
"""

import logging
import math
import random
from typing import Any, Mapping, Optional, Protocol, Sequence, Union

from .analysis import build_adjacency, count_relationships
from .models import (
    DiagramMetadata,
    LayoutConfig,
    LayoutResult,
    NodePosition,
    TIER_ORDER,
)

logger = logging.getLogger(__name__)

ConfigInput = Union[LayoutConfig, Mapping[str, Any], None]

# Node sizing
SIZE_STEP = 10         # Extra width per connection (height grows by half)
MAX_EXTRA_WIDTH = 200
MAX_EXTRA_HEIGHT = 100

# Hierarchical
HIERARCHY_START_Y = 100

# Circular
CIRCLE_BASE_RADIUS = 100

# Force-directed physics
REPULSION_STRENGTH = 5000
ATTRACTION_STRENGTH = 0.01
DAMPING = 0.8
MIN_DISTANCE = 50      # Below this, repulsion is boosted tenfold


def calculate_node_size(
    connection_count: int,
    config: ConfigInput = None,
) -> tuple[float, float]:
    """
    Size a node from its total connection count.

    Args:
        connection_count: Parent + child connections
        config: Layout configuration (defaults filled in)

    Returns:
        (width, height); the base size when dynamic sizing is off
    """
    config = LayoutConfig.from_partial(config)
    if not config.dynamic_sizing:
        return (config.base_width, config.base_height)

    width = config.base_width + min(connection_count * SIZE_STEP, MAX_EXTRA_WIDTH)
    height = config.base_height + min(connection_count * (SIZE_STEP / 2), MAX_EXTRA_HEIGHT)
    return (width, height)


def _sized_position(
    metadata: DiagramMetadata,
    diagrams: Sequence[DiagramMetadata],
    config: LayoutConfig,
    x: float,
    y: float,
) -> NodePosition:
    counts = count_relationships(metadata.path, diagrams)
    width, height = calculate_node_size(counts.total, config)
    return NodePosition(x=x, y=y, width=width, height=height)


def group_by_tier(diagrams: Sequence[DiagramMetadata]) -> list[list[DiagramMetadata]]:
    """
    Partition diagrams into the seven tiers, in tier order.

    Input order is preserved within each tier. Diagrams of an unrecognized
    type appear in no group.
    """
    groups: list[list[DiagramMetadata]] = [[] for _ in TIER_ORDER]
    for metadata in diagrams:
        index = metadata.tier_index
        if index is not None:
            groups[index].append(metadata)
    return groups


class LayoutEngine(Protocol):
    """Structural contract shared by all layout strategies."""

    name: str
    description: str

    def calculate_layout(
        self,
        diagrams: Sequence[DiagramMetadata],
        config: ConfigInput = None,
    ) -> LayoutResult:
        ...


class HierarchicalLayout:
    """
    Arrange diagrams in horizontal bands by tier, most abstract at the top.

    Each band is centered on x=0 independently of the others. Empty tiers
    take no vertical space. Diagrams of an unrecognized type are left out.
    """

    name = "Hierarchical"
    description = "Arrange by layer (Market → Code)"

    def calculate_layout(
        self,
        diagrams: Sequence[DiagramMetadata],
        config: ConfigInput = None,
    ) -> LayoutResult:
        config = LayoutConfig.from_partial(config)
        positions: dict[str, NodePosition] = {}
        spacing_x = config.horizontal_spacing

        current_y = HIERARCHY_START_Y
        for band in group_by_tier(diagrams):
            if not band:
                continue

            total_width = len(band) * spacing_x
            start_x = -total_width / 2 + spacing_x / 2

            for index, metadata in enumerate(band):
                positions[metadata.path] = _sized_position(
                    metadata, diagrams, config,
                    x=start_x + index * spacing_x,
                    y=current_y,
                )

            current_y += config.vertical_spacing

        return LayoutResult(positions)


class GridLayout:
    """Arrange diagrams in a centered sqrt(n) x sqrt(n) grid, in input order."""

    name = "Grid"
    description = "Simple grid arrangement"

    def calculate_layout(
        self,
        diagrams: Sequence[DiagramMetadata],
        config: ConfigInput = None,
    ) -> LayoutResult:
        config = LayoutConfig.from_partial(config)
        if not diagrams:
            return LayoutResult()

        grid_size = math.ceil(math.sqrt(len(diagrams)))
        spacing_x = config.horizontal_spacing
        spacing_y = config.vertical_spacing

        total_width = grid_size * spacing_x
        total_height = grid_size * spacing_y
        start_x = -total_width / 2 + spacing_x / 2
        start_y = -total_height / 2 + spacing_y / 2

        positions: dict[str, NodePosition] = {}
        for index, metadata in enumerate(diagrams):
            row = index // grid_size
            col = index % grid_size
            positions[metadata.path] = _sized_position(
                metadata, diagrams, config,
                x=start_x + col * spacing_x,
                y=start_y + row * spacing_y,
            )

        return LayoutResult(positions)


class CircularLayout:
    """
    Arrange diagrams on concentric rings by tier, most abstract at the center.

    Ring i has radius 0 for the first tier and
    CIRCLE_BASE_RADIUS + i * vertical_spacing otherwise. Members start at
    12 o'clock and proceed clockwise at equal angles.
    """

    name = "Circular"
    description = "Concentric circles by layer"

    def calculate_layout(
        self,
        diagrams: Sequence[DiagramMetadata],
        config: ConfigInput = None,
    ) -> LayoutResult:
        config = LayoutConfig.from_partial(config)
        positions: dict[str, NodePosition] = {}

        for tier_index, ring in enumerate(group_by_tier(diagrams)):
            if not ring:
                continue

            radius = 0 if tier_index == 0 else CIRCLE_BASE_RADIUS + tier_index * config.vertical_spacing

            # A lone center diagram sits exactly on the origin
            if tier_index == 0 and len(ring) == 1:
                positions[ring[0].path] = _sized_position(ring[0], diagrams, config, x=0, y=0)
                continue

            angle_step = 2 * math.pi / len(ring)
            for index, metadata in enumerate(ring):
                angle = -math.pi / 2 + index * angle_step
                positions[metadata.path] = _sized_position(
                    metadata, diagrams, config,
                    x=radius * math.cos(angle),
                    y=radius * math.sin(angle),
                )

        return LayoutResult(positions)


class _ForceNode:
    __slots__ = ("path", "x", "y", "vx", "vy", "width", "height")

    def __init__(self, path: str, x: float, y: float, width: float, height: float):
        self.path = path
        self.x = x
        self.y = y
        self.vx = 0.0
        self.vy = 0.0
        self.width = width
        self.height = height


class ForceDirectedLayout:
    """
    Arrange diagrams with a fixed-length force simulation.

    Simulates physical forces:
    - All nodes repel each other (inverse square, boosted below MIN_DISTANCE)
    - Linked nodes attract each other (spring force proportional to distance)

    Starting positions are drawn uniformly from the canvas bounds, so the
    result depends on the random source. Pass a seeded `random.Random` for
    reproducible output.
    """

    name = "Force-Directed"
    description = "Physics-based automatic arrangement"

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng

    def calculate_layout(
        self,
        diagrams: Sequence[DiagramMetadata],
        config: ConfigInput = None,
    ) -> LayoutResult:
        config = LayoutConfig.from_partial(config)
        if not diagrams:
            return LayoutResult()

        rng = self._rng if self._rng is not None else random.Random()

        nodes: list[_ForceNode] = []
        for metadata in diagrams:
            counts = count_relationships(metadata.path, diagrams)
            width, height = calculate_node_size(counts.total, config)
            nodes.append(_ForceNode(
                metadata.path,
                x=(rng.random() - 0.5) * config.canvas_width,
                y=(rng.random() - 0.5) * config.canvas_height,
                width=width,
                height=height,
            ))
        node_map = {n.path: n for n in nodes}
        adjacency = build_adjacency(diagrams)

        for _ in range(config.force_iterations):
            for node in nodes:
                node.vx = 0.0
                node.vy = 0.0

            self._apply_repulsion(nodes)
            self._apply_attraction(nodes, node_map, adjacency)

            for node in nodes:
                node.x += node.vx * DAMPING
                node.y += node.vy * DAMPING

        avg_x = sum(n.x for n in nodes) / len(nodes)
        avg_y = sum(n.y for n in nodes) / len(nodes)

        logger.debug(
            "Force-directed layout: %d nodes, %d iterations",
            len(nodes), config.force_iterations,
        )
        return LayoutResult({
            n.path: NodePosition(x=n.x - avg_x, y=n.y - avg_y, width=n.width, height=n.height)
            for n in nodes
        })

    @staticmethod
    def _apply_repulsion(nodes: list[_ForceNode]) -> None:
        for i, a in enumerate(nodes):
            for b in nodes[i + 1:]:
                dx = b.x - a.x
                dy = b.y - a.y
                dist = math.sqrt(dx * dx + dy * dy) or 1.0

                # Coulomb's law: F = k / r^2
                strength = REPULSION_STRENGTH * 10 if dist < MIN_DISTANCE else REPULSION_STRENGTH
                force = strength / (dist * dist)
                fx = dx / dist * force
                fy = dy / dist * force

                a.vx -= fx
                a.vy -= fy
                b.vx += fx
                b.vy += fy

    @staticmethod
    def _apply_attraction(
        nodes: list[_ForceNode],
        node_map: dict[str, _ForceNode],
        adjacency: dict[str, list[str]],
    ) -> None:
        # Adjacency is symmetric, so each linked pair is pulled from both ends
        for a in nodes:
            for neighbor in adjacency.get(a.path, []):
                b = node_map[neighbor]
                dx = b.x - a.x
                dy = b.y - a.y
                dist = math.sqrt(dx * dx + dy * dy) or 1.0

                # Hooke's law: F = k * x
                force = dist * ATTRACTION_STRENGTH
                a.vx += dx / dist * force
                a.vy += dy / dist * force


# Registry of engines by key
DEFAULT_LAYOUT = "hierarchical"

LAYOUT_ENGINES: dict[str, type] = {
    "hierarchical": HierarchicalLayout,
    "grid": GridLayout,
    "circular": CircularLayout,
    "force-directed": ForceDirectedLayout,
}

_ALIASES = {
    "force": "force-directed",
    "force_directed": "force-directed",
}


def resolve_layout_key(key: Optional[str]) -> str:
    """
    Normalize an engine key, falling back to the default for unknown keys.

    Never raises: an unknown or empty key selects the hierarchical layout.
    """
    if key is None:
        return DEFAULT_LAYOUT

    normalized = (key or "").strip().lower()
    normalized = _ALIASES.get(normalized, normalized)
    if normalized in LAYOUT_ENGINES:
        return normalized

    logger.warning("Unknown layout %r, falling back to %s", key, DEFAULT_LAYOUT)
    return DEFAULT_LAYOUT


def get_layout_engine(key: Optional[str], rng: Optional[random.Random] = None) -> LayoutEngine:
    """Instantiate the engine registered under `key` (hierarchical if unknown)."""
    resolved = resolve_layout_key(key)
    if resolved == "force-directed":
        return ForceDirectedLayout(rng=rng)
    return LAYOUT_ENGINES[resolved]()


def list_layout_engines() -> list[dict[str, str]]:
    """Describe every registered engine."""
    return [
        {"key": key, "name": engine.name, "description": engine.description}
        for key, engine in LAYOUT_ENGINES.items()
    ]
