#!/usr/bin/env python3
"""Metagraph CLI - lay out, validate and summarize a diagram corpus."""

import argparse
import json
import logging
import random
import sys

from .analysis import summarize_corpus
from .generator import generate_graph
from .layout import DEFAULT_LAYOUT, list_layout_engines
from .models import DiagramMetadata, LayoutConfig
from .validation import validate_corpus, validation_summary

# CLI flag -> LayoutConfig field
CONFIG_FLAGS = {
    "vertical_spacing": "--vertical-spacing",
    "horizontal_spacing": "--horizontal-spacing",
    "base_width": "--base-width",
    "base_height": "--base-height",
    "canvas_width": "--canvas-width",
    "canvas_height": "--canvas-height",
    "force_iterations": "--force-iterations",
}


def _json_out(data, code=0):
    print(json.dumps(data))
    sys.exit(code)


def _error_out(message):
    _json_out({"status": "error", "error": message}, code=1)


def _read_json(path):
    try:
        with open(path) as f:
            return json.load(f)
    except OSError as e:
        _error_out(f"Cannot read {path}: {e.strerror}")
    except json.JSONDecodeError as e:
        _error_out(f"Invalid JSON in {path}: {e}")


def _load_diagrams(path):
    """Read metadata records from a JSON array or a {"diagrams": [...]} object."""
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("diagrams", [])
    if not isinstance(data, list):
        _error_out(f"Expected a list of diagrams in {path}")
    try:
        return [DiagramMetadata.model_validate(d) for d in data]
    except ValueError as e:
        _error_out(f"Invalid diagram metadata in {path}: {e}")


def _load_saved_positions(path):
    """Read a saved-layout sidecar ({"version", "layout": {...}}) or a bare mapping."""
    data = _read_json(path)
    if isinstance(data, dict) and isinstance(data.get("layout"), dict):
        return data["layout"]
    if not isinstance(data, dict):
        _error_out(f"Expected an object of saved positions in {path}")
    return data


def _build_config(args):
    """Merge the --config file with per-field flags; flags win."""
    config = {}
    if args.config:
        # Normalize camelCase file keys so flag values are not shadowed by aliases
        config = LayoutConfig.from_partial(_read_json(args.config)).model_dump(exclude_unset=True)
    for field in CONFIG_FLAGS:
        value = getattr(args, field)
        if value is not None:
            config[field] = value
    if args.fixed_size:
        config["dynamic_sizing"] = False
    return config


# ── Commands ─────────────────────────────────────────────────────────────────

def cmd_layout(args):
    diagrams = _load_diagrams(args.file)
    saved = _load_saved_positions(args.saved) if args.saved else None
    rng = random.Random(args.seed) if args.seed is not None else None

    try:
        graph = generate_graph(
            diagrams,
            layout=args.layout,
            config=_build_config(args),
            saved_positions=saved,
            rng=rng,
        )
    except ValueError as e:
        _error_out(str(e))
    _json_out(graph.to_json_dict())


def cmd_validate(args):
    issues = validate_corpus(_load_diagrams(args.file))
    _json_out({
        "issues": [i.to_dict() for i in issues],
        "summary": validation_summary(issues),
    })


def cmd_summarize(args):
    summary = summarize_corpus(_load_diagrams(args.file), top_n=args.top_n)
    _json_out(summary.to_dict())


def cmd_layouts(args):
    _json_out({"default": DEFAULT_LAYOUT, "layouts": list_layout_engines()})


def build_parser():
    parser = argparse.ArgumentParser(prog="metagraph", description=__doc__)
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("layout", help="Lay out a corpus as a meta-graph")
    p.add_argument("file", help="JSON file with diagram metadata")
    p.add_argument("--layout", default=DEFAULT_LAYOUT)
    p.add_argument("--config", default=None, help="JSON file with layout options")
    p.add_argument("--saved", default=None, help="Saved positions JSON file")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--fixed-size", action="store_true", help="Disable dynamic node sizing")
    for field, flag in CONFIG_FLAGS.items():
        kind = int if field == "force_iterations" else float
        p.add_argument(flag, dest=field, type=kind, default=None)

    p = sub.add_parser("validate", help="Check a corpus for link and tier problems")
    p.add_argument("file")

    p = sub.add_parser("summarize", help="Summarize a corpus's link structure")
    p.add_argument("file")
    p.add_argument("--top-n", type=int, default=5)

    sub.add_parser("layouts", help="List layout engines")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    cmd_map = {
        "layout": cmd_layout,
        "validate": cmd_validate,
        "summarize": cmd_summarize,
        "layouts": cmd_layouts,
    }
    cmd_map[args.command](args)


if __name__ == "__main__":
    main()
