"""
Cluster detection.

A cluster is a group of two or more vertices joined by chains of short
edges, typically a thick junction that the skeletonizer split into several
vertices a few voxels apart.
"""

import networkx as nx

from skelclean.cleaning.classify import is_dead_end, is_short_edge
from skelclean.tracer import get_tracer, trace


def short_edge_graph(graph, threshold):
    """
    Adjacency of the short, non-dead-end edges as a networkx Graph.

    Only vertices touched by such an edge become nodes.
    """
    degrees = graph.degrees()
    adjacency = nx.Graph()
    for edge in graph.edges:
        if is_short_edge(edge, threshold) and not is_dead_end(edge, degrees):
            adjacency.add_edge(edge.v1, edge.v2)
    return adjacency


@trace(label="find_clusters")
def find_clusters(graph, threshold):
    """
    Find the clusters of a graph.

    Vertices are scanned in index order and each unvisited vertex with a
    short edge seeds a breadth-first search, so the result is reproducible.

    Returns a list of vertex index sets, each with at least two members.
    """
    if graph is None:
        raise ValueError("Graph must not be None")

    adjacency = short_edge_graph(graph, threshold)

    clusters = []
    visited = set()
    for index in range(len(graph.vertices)):
        if index in visited or index not in adjacency:
            continue
        component = set(nx.bfs_tree(adjacency, index).nodes())
        visited |= component
        clusters.append(component)

    get_tracer().event(f"Found {len(clusters)} clusters", threshold=threshold)
    return clusters


def find_edges_with_one_end_in_cluster(graph, cluster):
    """Indices of the edges crossing the cluster boundary."""
    return [
        i for i, e in enumerate(graph.edges)
        if (e.v1 in cluster) != (e.v2 in cluster)
    ]


def find_inner_edges(graph, cluster):
    """Indices of the edges with both ends in the cluster."""
    return [
        i for i, e in enumerate(graph.edges)
        if e.v1 in cluster and e.v2 in cluster
    ]
