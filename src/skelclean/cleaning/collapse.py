"""
Cluster collapsing.

Replaces a group of vertices with a single vertex at their centroid and
rewires the edges that cross the group boundary. Edge lengths are not
updated here; recompute them afterwards.
"""

import numpy as np

from skelclean.cleaning.classify import is_dead_end, is_short_edge
from skelclean.models import Point, Vertex, compose_graph
from skelclean.tracer import get_tracer, trace


# Centre of an empty cluster
NO_CENTRE = 2 ** 31 - 1


def get_cluster_centre(graph, cluster):
    """
    Vertex at the centroid of all points of the cluster's vertices.

    The mean is rounded half up on each axis. An empty cluster gives a
    vertex at NO_CENTRE on every axis. An index outside the graph raises
    ValueError.
    """
    if cluster is None:
        raise ValueError("Cluster must not be None")
    for index in cluster:
        if not 0 <= index < len(graph.vertices):
            raise ValueError(f"Cluster vertex {index} is not in the graph")

    points = [p.as_tuple() for i in sorted(cluster) for p in graph.vertices[i].points]
    if not points:
        return Vertex(points=[Point(x=NO_CENTRE, y=NO_CENTRE, z=NO_CENTRE)])

    mean = np.array(points, dtype=float).mean(axis=0)
    x, y, z = (int(c) for c in np.floor(mean + 0.5))
    return Vertex(points=[Point(x=x, y=y, z=z)])


@trace(label="collapse_clusters")
def collapse_clusters(graph, clusters):
    """
    Collapse disjoint clusters, each into one centre vertex.

    Surviving vertices keep their order and the centres are appended in
    cluster order. Edges inside a cluster are dropped, edges with an end in
    a cluster are rewired to its centre. New parallel edges are left for
    the structural cleaner.

    Returns (graph, absorbed_edge_count).
    """
    if graph is None:
        raise ValueError("Graph must not be None")
    if clusters is None:
        raise ValueError("Clusters must not be None")

    clusters = [c for c in clusters if c]
    owner = {}
    for k, cluster in enumerate(clusters):
        for index in cluster:
            if index in owner:
                raise ValueError(f"Vertex {index} belongs to more than one cluster")
            owner[index] = k

    centres = [get_cluster_centre(graph, c) for c in clusters]

    survivors = [i for i in range(len(graph.vertices)) if i not in owner]
    remap = {old: new for new, old in enumerate(survivors)}
    for index, k in owner.items():
        remap[index] = len(survivors) + k

    edges = []
    absorbed = 0
    for edge in graph.edges:
        c1 = owner.get(edge.v1)
        c2 = owner.get(edge.v2)
        if c1 is not None and c1 == c2:
            absorbed += 1
            continue
        edges.append((edge, remap[edge.v1], remap[edge.v2]))

    vertices = [graph.vertices[i] for i in survivors] + centres
    get_tracer().event(f"Collapsed {len(clusters)} clusters, absorbed {absorbed} edges")
    return compose_graph(vertices, edges), absorbed


def collapse_cluster(graph, cluster):
    """Collapse a single cluster. Returns (graph, absorbed_edge_count)."""
    if cluster is None:
        raise ValueError("Cluster must not be None")
    return collapse_clusters(graph, [cluster])


def find_short_edge(graph, threshold):
    """Index of the first short edge that is not a dead end, or None."""
    degrees = graph.degrees()
    for i, edge in enumerate(graph.edges):
        if is_short_edge(edge, threshold) and not is_dead_end(edge, degrees):
            return i
    return None


@trace(label="collapse_short_edges")
def collapse_short_edges(graph, threshold):
    """
    Collapse short edges one at a time.

    The first short edge in edge order has its two ends merged into a centre
    vertex, then the search starts again. Lengths are not recomputed between
    merges, so a rewired edge keeps the length it had.

    Returns (graph, absorbed_edge_count).
    """
    if graph is None:
        raise ValueError("Graph must not be None")

    graph = graph.model_copy(deep=True)
    absorbed = 0
    merges = 0
    index = find_short_edge(graph, threshold)
    while index is not None:
        edge = graph.edges[index]
        graph, count = collapse_cluster(graph, {edge.v1, edge.v2})
        absorbed += count
        merges += 1
        index = find_short_edge(graph, threshold)

    get_tracer().event(f"Merged {merges} short edges")
    return graph, absorbed
