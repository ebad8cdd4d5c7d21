"""
Corpus analysis - Relationship counting, link resolution and summaries.

Provides the graph helpers shared by every layout engine and by the
orchestrator:
- Relationship counting (parents/children) used for dynamic node sizing
- Link resolution (exact path, then basename fallback) used for edges
- Undirected adjacency and connected components over the corpus
"""

from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from .models import DiagramMetadata


@dataclass(frozen=True)
class RelationshipCount:
    """Inbound and outbound reference counts for one diagram."""
    parent_count: int = 0  # Other diagrams linking to this one
    child_count: int = 0   # Links this diagram makes

    @property
    def total(self) -> int:
        return self.parent_count + self.child_count


@dataclass
class ConnectedComponent:
    """A set of diagrams reachable from one another through resolved links."""
    paths: list[str] = field(default_factory=list)
    link_count: int = 0

    @property
    def size(self) -> int:
        return len(self.paths)


@dataclass
class DiagramConnectionInfo:
    """Connection information for a single diagram."""
    path: str
    label: str
    incoming: int = 0
    outgoing: int = 0

    @property
    def total(self) -> int:
        return self.incoming + self.outgoing


@dataclass
class CorpusSummary:
    """Summary of a diagram corpus's link structure."""
    total_diagrams: int
    total_links: int
    resolved_links: int
    diagrams_by_type: dict[str, int]
    connected_components: int
    most_connected_diagrams: list[DiagramConnectionInfo]
    orphan_count: int

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_diagrams": self.total_diagrams,
            "total_links": self.total_links,
            "resolved_links": self.resolved_links,
            "diagrams_by_type": self.diagrams_by_type,
            "connected_components": self.connected_components,
            "most_connected_diagrams": [
                {
                    "path": d.path,
                    "label": d.label,
                    "connections": d.total,
                    "incoming": d.incoming,
                    "outgoing": d.outgoing,
                }
                for d in self.most_connected_diagrams
            ],
            "orphan_count": self.orphan_count,
        }


def count_relationships(
    path: str,
    all_metadata: Sequence["DiagramMetadata"],
) -> RelationshipCount:
    """
    Count parent and child relationships for a diagram.

    Children are the diagram's own links, duplicates included. Parents are
    the records whose links contain `path` exactly; each such record counts
    once however many times it repeats the link. No basename matching is
    applied here.

    Args:
        path: Path of the diagram to count for
        all_metadata: The full metadata set

    Returns:
        RelationshipCount, zero on both sides if `path` is not in the set
    """
    subject = next((m for m in all_metadata if m.path == path), None)
    if subject is None:
        return RelationshipCount()

    child_count = len(subject.linked_diagram_paths)
    parent_count = sum(
        1 for other in all_metadata
        if other is not subject and path in other.linked_diagram_paths
    )
    return RelationshipCount(parent_count=parent_count, child_count=child_count)


def diagram_basename(path: str) -> str:
    """File name of a diagram path without directory or extension."""
    return PurePosixPath(path).stem or path


def resolve_link(link: str, candidate_paths: Sequence[str]) -> Optional[str]:
    """
    Resolve a linked diagram path against known paths.

    Exact path equality wins; otherwise the first candidate with the same
    basename (directory and extension ignored) is returned.

    Returns:
        The matching candidate path, or None if the link dangles
    """
    if link in candidate_paths:
        return link

    link_base = diagram_basename(link)
    for candidate in candidate_paths:
        if diagram_basename(candidate) == link_base:
            return candidate
    return None


def build_adjacency(all_metadata: Sequence["DiagramMetadata"]) -> dict[str, list[str]]:
    """
    Build an undirected adjacency list over resolved links.

    Every link is recorded in both directions. Self links are ignored, and
    the basename fallback only considers the other diagrams.
    Neighbour lists keep first-seen order so iteration is reproducible.
    """
    paths = [m.path for m in all_metadata]
    adjacency: dict[str, list[str]] = {p: [] for p in paths}

    for metadata in all_metadata:
        others = [p for p in paths if p != metadata.path]
        for link in metadata.linked_diagram_paths:
            if link == metadata.path:
                continue
            target = resolve_link(link, others)
            if target is None:
                continue
            if target not in adjacency[metadata.path]:
                adjacency[metadata.path].append(target)
            if metadata.path not in adjacency[target]:
                adjacency[target].append(metadata.path)

    return adjacency


def find_connected_components(
    all_metadata: Sequence["DiagramMetadata"],
) -> list[ConnectedComponent]:
    """
    Find all connected components in the corpus using BFS.

    Links are treated as undirected and resolved the same way the
    force-directed layout resolves them.

    Returns:
        List of ConnectedComponent objects in input order of their first member
    """
    if not all_metadata:
        return []

    adjacency = build_adjacency(all_metadata)
    visited: set[str] = set()
    components: list[ConnectedComponent] = []

    for start in adjacency:
        if start in visited:
            continue

        component_paths: list[str] = []
        link_ends = 0
        queue = [start]
        visited.add(start)

        while queue:
            current = queue.pop(0)
            component_paths.append(current)
            link_ends += len(adjacency[current])
            for neighbor in adjacency[current]:
                if neighbor not in visited:
                    visited.add(neighbor)
                    queue.append(neighbor)

        components.append(ConnectedComponent(
            paths=component_paths,
            link_count=link_ends // 2,
        ))

    return components


def summarize_corpus(
    all_metadata: Sequence["DiagramMetadata"],
    top_n: int = 5,
) -> CorpusSummary:
    """
    Generate a summary of a diagram corpus.

    Args:
        all_metadata: The metadata set to summarize
        top_n: Number of most connected diagrams to include

    Returns:
        CorpusSummary object with all analysis results
    """
    paths = [m.path for m in all_metadata]

    type_counts: dict[str, int] = defaultdict(int)
    for metadata in all_metadata:
        type_counts[metadata.diagram_type] += 1

    total_links = sum(len(m.linked_diagram_paths) for m in all_metadata)
    resolved_links = sum(
        1 for m in all_metadata for link in m.linked_diagram_paths
        if resolve_link(link, paths) is not None
    )

    connections: list[DiagramConnectionInfo] = []
    for metadata in all_metadata:
        counts = count_relationships(metadata.path, all_metadata)
        connections.append(DiagramConnectionInfo(
            path=metadata.path,
            label=metadata.display_name,
            incoming=counts.parent_count,
            outgoing=counts.child_count,
        ))

    sorted_by_connections = sorted(connections, key=lambda c: c.total, reverse=True)
    most_connected = [c for c in sorted_by_connections[:top_n] if c.total > 0]
    orphan_count = sum(1 for c in connections if c.total == 0)

    return CorpusSummary(
        total_diagrams=len(all_metadata),
        total_links=total_links,
        resolved_links=resolved_links,
        diagrams_by_type=dict(type_counts),
        connected_components=len(find_connected_components(all_metadata)),
        most_connected_diagrams=most_connected,
        orphan_count=orphan_count,
    )
