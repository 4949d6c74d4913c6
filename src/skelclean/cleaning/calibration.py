"""
Calibrated edge lengths.

Voxel coordinates are scaled per axis before measuring, so anisotropic
scans (e.g. thicker slices in z) get physical lengths.
"""

import math

import numpy as np

from skelclean.tracer import get_tracer, trace


ISOTROPIC = (1.0, 1.0, 1.0)


def validate_calibration(calibration):
    """
    Check a per-axis calibration vector.

    Returns it as a tuple of three floats. Raises ValueError for a wrong
    number of axes or a factor that is not a positive finite number.
    """
    if calibration is None:
        raise ValueError("Calibration must not be None")

    values = tuple(float(c) for c in calibration)
    if len(values) != 3:
        raise ValueError(f"Calibration needs 3 axes, got {len(values)}")
    for c in values:
        if not math.isfinite(c) or c <= 0:
            raise ValueError(f"Calibration factors must be positive, got {values}")
    return values


def vertex_centre(vertex):
    """Mean coordinate of a vertex's points."""
    coords = np.array([p.as_tuple() for p in vertex.points], dtype=float)
    return coords.mean(axis=0)


def edge_chain(graph, edge):
    """
    Full point chain of an edge as an (N, 3) array.

    The chain runs from the v1 centre through the slab points to the v2 centre.
    """
    rows = [vertex_centre(graph.vertices[edge.v1])]
    rows.extend(np.array(p.as_tuple(), dtype=float) for p in edge.slabs)
    rows.append(vertex_centre(graph.vertices[edge.v2]))
    return np.vstack(rows)


def calibrated_length(chain, calibration=ISOTROPIC):
    """Sum of scaled Euclidean distances between consecutive chain points."""
    chain = np.asarray(chain, dtype=float)
    if len(chain) < 2:
        return 0.0
    deltas = np.diff(chain, axis=0) * np.asarray(calibration, dtype=float)
    return float(np.sum(np.linalg.norm(deltas, axis=1)))


def linear_length(chain, calibration=ISOTROPIC):
    """Scaled straight distance between the first and last chain points."""
    chain = np.asarray(chain, dtype=float)
    if len(chain) < 2:
        return 0.0
    delta = (chain[-1] - chain[0]) * np.asarray(calibration, dtype=float)
    return float(np.linalg.norm(delta))


def edge_length(graph, edge, calibration=ISOTROPIC, method="chain"):
    """Physical length of an edge of the graph."""
    chain = edge_chain(graph, edge)
    if method == "chain":
        return calibrated_length(chain, calibration)
    if method == "linear":
        return linear_length(chain, calibration)
    raise ValueError(f"Unknown length method: {method}")


@trace(label="recompute_lengths")
def recompute_lengths(graph, calibration=ISOTROPIC, method="chain"):
    """
    Return a copy of the graph with every edge length recomputed.

    Slab points and all other edge attributes are left as they are.
    """
    if graph is None:
        raise ValueError("Graph must not be None")
    calibration = validate_calibration(calibration)

    lengths = [edge_length(graph, e, calibration, method) for e in graph.edges]

    result = graph.model_copy(deep=True)
    for edge, length in zip(result.edges, lengths):
        edge.length = length

    get_tracer().event(f"Recomputed {len(lengths)} edge lengths", calibration=list(calibration))
    return result
