"""
Metagraph - Layout core for the diagram meta-graph.

Positions a corpus of interlinked architecture diagrams on a 2D canvas,
one node per diagram and one edge per resolved cross-diagram link, using
interchangeable layout engines (hierarchical, grid, circular, force-directed).
"""

from .models import (
    # Enums and constants
    DiagramType,
    TIER_ORDER,
    # Core models
    DiagramMetadata,
    NodePosition,
    LayoutResult,
    LayoutConfig,
    GraphNode,
    GraphEdge,
    MetaGraph,
)

from .analysis import (
    RelationshipCount,
    count_relationships,
    resolve_link,
    find_connected_components,
    summarize_corpus,
)
from .layout import (
    LayoutEngine,
    HierarchicalLayout,
    GridLayout,
    CircularLayout,
    ForceDirectedLayout,
    LAYOUT_ENGINES,
    calculate_node_size,
    get_layout_engine,
)
from .generator import generate_graph
from .validation import validate_corpus, ValidationIssue, IssueSeverity

__version__ = "1.0.0"

__all__ = [
    # Enums and constants
    "DiagramType",
    "TIER_ORDER",
    # Models
    "DiagramMetadata",
    "NodePosition",
    "LayoutResult",
    "LayoutConfig",
    "GraphNode",
    "GraphEdge",
    "MetaGraph",
    # Analysis
    "RelationshipCount",
    "count_relationships",
    "resolve_link",
    "find_connected_components",
    "summarize_corpus",
    # Layout
    "LayoutEngine",
    "HierarchicalLayout",
    "GridLayout",
    "CircularLayout",
    "ForceDirectedLayout",
    "LAYOUT_ENGINES",
    "calculate_node_size",
    "get_layout_engine",
    "generate_graph",
    # Validation
    "validate_corpus",
    "ValidationIssue",
    "IssueSeverity",
    "__version__",
]
