"""
Core data models for the diagram meta-graph.

These models define the canonical schema flowing through the layout core:
- Diagram metadata records (path, display name, tier, outbound links)
- Node positions and the layout result mapping produced by engines
- Layout configuration with validated defaults
- Graph nodes and edges handed to the renderer

Field Naming Convention:
- Python attributes use snake_case (`display_name`, `linked_diagram_paths`)
- JSON input and output use camelCase aliases (`displayName`, `linkedDiagramPaths`)
- Either form is accepted on input
"""

from enum import Enum
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class DiagramType(str, Enum):
    """Architecture tiers, most abstract first."""
    MARKET = "market"
    ORGANISATION = "organisation"
    CAPABILITY = "capability"
    CONTEXT = "context"
    CONTAINER = "container"
    COMPONENT = "component"
    CODE = "code"


# Top-to-bottom (hierarchical) and center-to-outer (circular) order
TIER_ORDER: list[str] = [t.value for t in DiagramType]

# Node fill colors by tier (renderer hint)
TIER_COLORS: dict[str, str] = {
    DiagramType.MARKET.value: "#9B59B6",
    DiagramType.ORGANISATION.value: "#8E44AD",
    DiagramType.CAPABILITY.value: "#E67E22",
    DiagramType.CONTEXT.value: "#4A90E2",
    DiagramType.CONTAINER.value: "#7ED321",
    DiagramType.COMPONENT.value: "#F5A623",
    DiagramType.CODE.value: "#95A5A6",
}
DEFAULT_COLOR = TIER_COLORS[DiagramType.CONTEXT.value]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DiagramMetadata(_CamelModel):
    """
    Lightweight record identifying one diagram in the corpus.

    `diagram_type` is a free string: values outside the seven tiers are
    kept so tier-agnostic layouts can still place them.
    """
    path: str
    display_name: str = ""
    diagram_type: str = DiagramType.CONTEXT.value
    linked_diagram_paths: list[str] = Field(default_factory=list)

    @model_validator(mode='after')
    def default_display_name(self) -> "DiagramMetadata":
        """Fall back to the file stem when no display name is given."""
        if not self.display_name:
            self.display_name = PurePosixPath(self.path).stem or self.path
        return self

    @property
    def tier_index(self) -> Optional[int]:
        """Position of this diagram's tier in TIER_ORDER, or None if unrecognized."""
        try:
            return TIER_ORDER.index(self.diagram_type)
        except ValueError:
            return None


class NodePosition(BaseModel):
    """Position and size of one meta-graph node."""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float
    height: float


class LayoutResult:
    """
    Read-only mapping from diagram path to NodePosition.

    Engines build a plain dict and wrap it; callers cannot mutate the
    positions afterwards.
    """

    __slots__ = ("_positions",)

    def __init__(self, positions: Optional[Mapping[str, NodePosition]] = None):
        self._positions = MappingProxyType(dict(positions or {}))

    @property
    def positions(self) -> Mapping[str, NodePosition]:
        return self._positions

    def get(self, path: str) -> Optional[NodePosition]:
        return self._positions.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._positions

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._positions)

    def __getitem__(self, path: str) -> NodePosition:
        return self._positions[path]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LayoutResult):
            return dict(self._positions) == dict(other._positions)
        return NotImplemented

    def __repr__(self) -> str:
        return f"LayoutResult({len(self._positions)} positions)"


class LayoutConfig(_CamelModel):
    """
    Options shared by all layout engines.

    Every field has a default, so a partial config is always valid.
    Out-of-range values are caller bugs and fail validation naming the field.
    """
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid", validate_assignment=True,
    )

    vertical_spacing: float = 300   # Between hierarchical bands / circular rings
    horizontal_spacing: float = 250  # Between nodes in a band or grid row
    dynamic_sizing: bool = True     # Grow nodes with connection count
    base_width: float = Field(default=200, gt=0)
    base_height: float = Field(default=80, gt=0)
    canvas_width: float = Field(default=2000, gt=0)   # Force-directed initial bounds
    canvas_height: float = Field(default=2000, gt=0)
    force_iterations: int = Field(default=100, ge=0)

    @classmethod
    def from_partial(
        cls,
        config: Union["LayoutConfig", Mapping[str, Any], None] = None,
    ) -> "LayoutConfig":
        """Build a full config from None, a partial mapping, or an existing config."""
        if config is None:
            return cls()
        if isinstance(config, LayoutConfig):
            return config
        return cls.model_validate(dict(config))


class GraphNode(_CamelModel):
    """A diagram projected into the meta-graph, as the renderer expects it."""
    id: str
    diagram_path: str
    label: str
    diagram_type: str
    x: float
    y: float
    width: float
    height: float
    parent_count: int = 0
    child_count: int = 0
    color: str = DEFAULT_COLOR


class GraphEdge(_CamelModel):
    """A cross-diagram reference between two emitted nodes."""
    id: str
    source: str  # Source node ID
    target: str  # Target node ID
    type: str = "directional"


class MetaGraph(BaseModel):
    """The emitted node/edge set for one layout request."""
    layout: str
    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        """Get a node by ID."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def node_for_path(self, path: str) -> Optional[GraphNode]:
        """Get the node emitted for a diagram path."""
        for node in self.nodes:
            if node.diagram_path == path:
                return node
        return None

    def to_json_dict(self) -> dict:
        """Convert to JSON-serializable dict with camelCase field names."""
        return {
            "layout": self.layout,
            "nodes": [n.model_dump(by_alias=True) for n in self.nodes],
            "edges": [e.model_dump(by_alias=True) for e in self.edges],
        }
