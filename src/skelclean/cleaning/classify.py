"""Edge predicates used by the cleaning passes."""


def is_loop(edge):
    """True if both ends of the edge are the same vertex."""
    return edge.v1 == edge.v2


def is_short_edge(edge, threshold):
    """True for a non-loop edge no longer than threshold."""
    return not is_loop(edge) and edge.length <= threshold


def is_dead_end(edge, degrees):
    """
    True if exactly one end of the edge is a leaf.

    degrees is the per-vertex degree list of the graph owning the edge.
    """
    if is_loop(edge):
        return False
    return (degrees[edge.v1] == 1) != (degrees[edge.v2] == 1)


def edge_key(edge):
    """Unordered vertex pair of an edge."""
    return (min(edge.v1, edge.v2), max(edge.v1, edge.v2))


def find_parallel_edges(graph):
    """
    Indices of edges duplicating an earlier edge between the same vertices.

    The first edge of each vertex pair, in edge order, is not reported.
    """
    seen = set()
    duplicates = []
    for i, edge in enumerate(graph.edges):
        key = edge_key(edge)
        if key in seen:
            duplicates.append(i)
        else:
            seen.add(key)
    return duplicates
