"""
Structural cleaning: loops, parallel edges and short dead ends.

Each function returns a new graph and the number of edges it removed.
"""

from skelclean.cleaning.classify import find_parallel_edges, is_loop, is_short_edge
from skelclean.models import subgraph
from skelclean.tracer import get_tracer, trace


def _check_graph(graph):
    if graph is None:
        raise ValueError("Graph must not be None")


def remove_loops(graph):
    """Remove every self-loop edge, whatever its length."""
    _check_graph(graph)
    keep = [i for i, e in enumerate(graph.edges) if not is_loop(e)]
    removed = len(graph.edges) - len(keep)
    return subgraph(graph, range(len(graph.vertices)), keep), removed


def remove_parallel_edges(graph):
    """Keep the first edge between each vertex pair and remove the others."""
    _check_graph(graph)
    duplicates = set(find_parallel_edges(graph))
    keep = [i for i in range(len(graph.edges)) if i not in duplicates]
    return subgraph(graph, range(len(graph.vertices)), keep), len(duplicates)


@trace(label="remove_loops_and_parallels")
def remove_loops_and_parallels(graph):
    """
    Remove self-loops, then duplicate edges.

    Returns (graph, loop_count, parallel_count).
    """
    graph, loops = remove_loops(graph)
    graph, parallels = remove_parallel_edges(graph)
    get_tracer().event(f"Removed {loops} loops, {parallels} parallel edges")
    return graph, loops, parallels


@trace(label="prune_dead_ends")
def prune_dead_ends(graph, threshold):
    """
    Amputate short twigs.

    A short edge with exactly one leaf end is removed together with the
    leaf vertex. Degrees are taken from the input graph, so twigs exposed by
    this pruning are left for the next pass.

    Returns (graph, dead_end_count).
    """
    _check_graph(graph)
    degrees = graph.degrees()

    dead_edges = set()
    leaves = set()
    for leaf, degree in enumerate(degrees):
        if degree != 1:
            continue
        (index,) = graph.branches(leaf)
        edge = graph.edges[index]
        if is_short_edge(edge, threshold) and degrees[edge.other_end(leaf)] != 1:
            dead_edges.add(index)
            leaves.add(leaf)

    keep_vertices = [i for i in range(len(graph.vertices)) if i not in leaves]
    keep_edges = [i for i in range(len(graph.edges)) if i not in dead_edges]

    get_tracer().event(f"Pruned {len(dead_edges)} dead ends")
    return subgraph(graph, keep_vertices, keep_edges), len(dead_edges)
