"""Pytest configuration and fixtures."""

import pytest

from metagraph.models import DiagramMetadata


def _make_diagram(path: str, diagram_type: str = "context", links=()) -> DiagramMetadata:
    return DiagramMetadata(path=path, diagram_type=diagram_type, linked_diagram_paths=list(links))


@pytest.fixture
def make_diagram():
    """Factory for minimal DiagramMetadata records."""
    return _make_diagram


@pytest.fixture
def sample_corpus() -> list[DiagramMetadata]:
    """A small corpus spanning several tiers with messy links.

    - Market links to Org by exact path and to Context by basename only
    - Context links twice to Container and once to a missing diagram
    - Notes has an unrecognized type and links to Context
    """
    return [
        _make_diagram("BAC4/Market.bac4", "market", ["BAC4/Org.bac4", "old/Context.bac4"]),
        _make_diagram("BAC4/Org.bac4", "organisation"),
        _make_diagram("BAC4/Context.bac4", "context", [
            "BAC4/Container.bac4", "BAC4/Container.bac4", "BAC4/Gone.bac4",
        ]),
        _make_diagram("BAC4/Container.bac4", "container"),
        _make_diagram("BAC4/Notes.bac4", "graph", ["BAC4/Context.bac4"]),
    ]


@pytest.fixture
def sample_corpus_json(sample_corpus) -> list[dict]:
    """The sample corpus in its camelCase JSON form."""
    return [d.model_dump(by_alias=True) for d in sample_corpus]
