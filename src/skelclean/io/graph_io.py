"""
Graph and artifact I/O.

Skeleton graphs are stored as JSON in the SkeletonGraph schema.
"""

import json
import os

from skelclean.models import SkeletonGraph
from skelclean.tracer import get_tracer, trace


def ensure_dir(path):
    """Create directory if it does not exist."""
    if path:
        os.makedirs(path, exist_ok=True)


def save_json(data, path, indent=2):
    """
    Save a dictionary or Pydantic model to JSON.
    """
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    if hasattr(data, "model_dump"):
        data = data.model_dump()

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, default=str)

    tracer.event(f"Saved JSON: {path}")


@trace(label="load_graph")
def load_graph(path):
    """
    Load a skeleton graph from a JSON file.

    Raises FileNotFoundError if path does not exist.
    Raises ValueError (pydantic ValidationError) if the content is not a valid graph.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Graph not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    graph = SkeletonGraph.model_validate(data)
    get_tracer().event(f"Loaded graph: {len(graph.vertices)} vertices, {len(graph.edges)} edges")
    return graph


def save_graph(graph, path):
    """Write a skeleton graph to a JSON file."""
    save_json(graph.model_dump(), path)


def validate_graph_inputs(paths):
    """
    Validate that all input paths exist and look like graph files.

    Returns a list of error messages (empty if all valid).
    """
    errors = []

    for path in paths:
        if not os.path.exists(path):
            errors.append(f"File not found: {path}")
            continue

        ext = os.path.splitext(path)[1].lower()
        if ext != ".json":
            errors.append(f"Unsupported graph format: {path}")

    return errors


def get_debug_dir(out_dir, graph_id, stage_name):
    """
    Get the debug directory path for a stage.

    Creates the directory if it does not exist.
    """
    debug_dir = os.path.join(out_dir, "debug", graph_id, stage_name)
    ensure_dir(debug_dir)
    return debug_dir


class DebugArtifactWriter:
    """
    Writes debug artifacts for a single graph.

    Files go to <out_dir>/debug/<graph_id>/<stage_name>/.
    """

    def __init__(self, out_dir, graph_id, enabled=True):
        self.out_dir = out_dir
        self.graph_id = graph_id
        self.enabled = enabled

    def get_stage_dir(self, stage_name):
        """Get the debug directory for a stage."""
        return get_debug_dir(self.out_dir, self.graph_id, stage_name)

    def save_json(self, data, stage_name, filename):
        """Save a JSON artifact."""
        if not self.enabled:
            return
        path = os.path.join(self.get_stage_dir(stage_name), filename)
        save_json(data, path)

    def save_graph(self, graph, stage_name, filename):
        """Save an intermediate graph."""
        if not self.enabled:
            return
        path = os.path.join(self.get_stage_dir(stage_name), filename)
        save_graph(graph, path)
