"""
Metagraph Backend - FastAPI Application

Stateless HTTP surface over the layout core. It provides:
- Meta-graph generation for a posted corpus (layout + saved positions)
- Corpus validation and summary
- The list of available layout engines

Every request carries its own corpus; nothing is stored between calls.
"""
import os
import random
from typing import Any, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .analysis import summarize_corpus
from .generator import generate_graph
from .layout import DEFAULT_LAYOUT, list_layout_engines
from .models import DiagramMetadata, LayoutConfig, NodePosition
from .validation import validate_corpus, validation_summary

DEFAULT_HOST = os.environ.get("METAGRAPH_HOST", "127.0.0.1")
DEFAULT_PORT = int(os.environ.get("METAGRAPH_PORT", "8765"))


# --- FastAPI App ---

app = FastAPI(
    title="Metagraph API",
    description="Layout engine for the diagram meta-graph",
    version="1.0.0",
)

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class CorpusRequest(BaseModel):
    diagrams: list[DiagramMetadata] = Field(default_factory=list)


class GraphRequest(CorpusRequest):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    layout: str = DEFAULT_LAYOUT  # hierarchical, grid, circular, force-directed
    config: dict[str, Any] = Field(default_factory=dict)
    saved_positions: dict[str, NodePosition] = Field(default_factory=dict)
    seed: Optional[int] = None  # Seeds the force-directed start positions


# --- Health Check ---

@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


# --- Layout ---

@app.get("/api/layouts")
async def get_layouts():
    """List the registered layout engines."""
    return {"success": True, "default": DEFAULT_LAYOUT, "layouts": list_layout_engines()}


@app.post("/api/graph")
async def create_graph(request: GraphRequest):
    """Lay out the posted corpus and return nodes and edges."""
    try:
        config = LayoutConfig.from_partial(request.config)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    rng = random.Random(request.seed) if request.seed is not None else None
    graph = generate_graph(
        request.diagrams,
        layout=request.layout,
        config=config,
        saved_positions=request.saved_positions,
        rng=rng,
    )
    return {"success": True, "graph": graph.to_json_dict()}


# --- Analysis & Validation ---

@app.post("/api/graph/validate")
async def validate_graph(request: CorpusRequest):
    """
    Validate the posted corpus for link and tier problems.

    Returns a list of issues (errors, warnings, info) and a summary.
    """
    issues = validate_corpus(request.diagrams)
    return {
        "success": True,
        "issues": [i.to_dict() for i in issues],
        "summary": validation_summary(issues),
    }


@app.post("/api/graph/summary")
async def summarize_graph(request: CorpusRequest, top_n: int = 5):
    """Summarize the posted corpus's link structure."""
    summary = summarize_corpus(request.diagrams, top_n=top_n)
    return {"success": True, "summary": summary.to_dict()}


# --- Run with uvicorn ---

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=DEFAULT_HOST, port=DEFAULT_PORT)
