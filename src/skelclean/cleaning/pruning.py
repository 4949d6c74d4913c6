"""
Short edge cleaning of skeleton graphs.

Drives the cleaning passes as a small state machine:

    SCANNING -> CLEANING -> CLUSTERING -> COLLAPSING -> (STABLE | SCANNING)

SCANNING removes loops and parallel edges, CLEANING amputates short dead
ends, CLUSTERING looks for clusters (or single short edges) and COLLAPSING
merges them. Without iterative pruning the machine stops after the first
collapse; with it, passes repeat until a pass neither amputates a dead end
nor finds a cluster.
"""

from enum import Enum

from skelclean.cleaning.calibration import ISOTROPIC, recompute_lengths, validate_calibration
from skelclean.cleaning.clusters import find_clusters
from skelclean.cleaning.collapse import collapse_clusters, collapse_short_edges, find_short_edge
from skelclean.cleaning.structural import prune_dead_ends, remove_loops_and_parallels
from skelclean.config import LENGTH_METHODS
from skelclean.models import CleaningResult, PassRecord, PercentagesOfCulledEdges
from skelclean.tracer import get_tracer


class PruningState(str, Enum):
    """States of the cleaning state machine."""
    SCANNING = "scanning"
    CLEANING = "cleaning"
    CLUSTERING = "clustering"
    COLLAPSING = "collapsing"
    STABLE = "stable"


class ShortEdgeCleaner:
    """
    Removes skeletonization artifacts from a graph.

    The cleaner holds only configuration; each call to run() is independent,
    so one instance can clean many graphs.
    """

    def __init__(self, threshold, calibration=ISOTROPIC, iterative_pruning=False,
                 use_clusters=True, length_method="chain"):
        if threshold is None:
            raise ValueError("Threshold must not be None")
        if length_method not in LENGTH_METHODS:
            raise ValueError(f"Unknown length method: {length_method}")
        self.threshold = float(threshold)
        self.calibration = validate_calibration(calibration)
        self.iterative_pruning = iterative_pruning
        self.use_clusters = use_clusters
        self.length_method = length_method

    @classmethod
    def from_config(cls, cleaning_config):
        """Create a cleaner from a CleaningConfig."""
        cleaning_config.validate()
        return cls(
            threshold=cleaning_config.threshold,
            calibration=cleaning_config.calibration,
            iterative_pruning=cleaning_config.iterative_pruning,
            use_clusters=cleaning_config.use_clusters,
            length_method=cleaning_config.length_method,
        )

    def _recompute(self, graph):
        return recompute_lengths(graph, self.calibration, self.length_method)

    def run(self, graph):
        """
        Clean a graph.

        The input is never modified. Returns a CleaningResult with the
        cleaned graph, removal statistics and a record per pass.
        """
        if graph is None:
            raise ValueError("Graph must not be None")

        tracer = get_tracer()
        counts = {"loop_edges": 0, "parallel_edges": 0, "dead_ends": 0, "cluster_edges": 0}
        passes = []
        record = None
        clusters = []

        with tracer.span("clean_short_edges", module="pruning", threshold=self.threshold):
            current = self._recompute(graph)
            state = PruningState.SCANNING

            while state != PruningState.STABLE:
                tracer.event(f"State {state.value}", level="DEBUG")

                if state == PruningState.SCANNING:
                    record = PassRecord(pass_index=len(passes))
                    passes.append(record)
                    current, loops, parallels = remove_loops_and_parallels(current)
                    record.loop_edges += loops
                    record.parallel_edges += parallels
                    state = PruningState.CLEANING

                elif state == PruningState.CLEANING:
                    current, dead_ends = prune_dead_ends(current, self.threshold)
                    record.dead_ends += dead_ends
                    state = PruningState.CLUSTERING

                elif state == PruningState.CLUSTERING:
                    if self.use_clusters:
                        clusters = find_clusters(current, self.threshold)
                        record.clusters_found = len(clusters)
                        found = bool(clusters)
                    else:
                        found = find_short_edge(current, self.threshold) is not None
                    if found:
                        state = PruningState.COLLAPSING
                    elif self.iterative_pruning and record.dead_ends:
                        # amputating a twig can expose the next edge of the twig
                        state = PruningState.SCANNING
                    else:
                        state = PruningState.STABLE

                elif state == PruningState.COLLAPSING:
                    if self.use_clusters:
                        current, absorbed = collapse_clusters(current, clusters)
                    else:
                        before = len(current.vertices)
                        current, absorbed = collapse_short_edges(current, self.threshold)
                        # each merge replaces two vertices with one
                        record.clusters_found = before - len(current.vertices)
                    record.cluster_edges += absorbed
                    current = self._recompute(current)

                    if self.iterative_pruning:
                        state = PruningState.SCANNING
                    else:
                        current, loops, parallels = remove_loops_and_parallels(current)
                        record.loop_edges += loops
                        record.parallel_edges += parallels
                        state = PruningState.STABLE

                record.num_vertices = len(current.vertices)
                record.num_edges = len(current.edges)

            for r in passes:
                counts["loop_edges"] += r.loop_edges
                counts["parallel_edges"] += r.parallel_edges
                counts["dead_ends"] += r.dead_ends
                counts["cluster_edges"] += r.cluster_edges

            percentages = PercentagesOfCulledEdges(total_edges=len(graph.edges), **counts)
            tracer.event(
                f"Cleaned graph: {len(graph.vertices)}->{len(current.vertices)} vertices, "
                f"{len(graph.edges)}->{len(current.edges)} edges in {len(passes)} passes"
            )

        return CleaningResult(graph=current, percentages=percentages, passes=passes)


def clean_short_edges(graph, threshold, calibration=ISOTROPIC, iterative_pruning=False,
                      use_clusters=True, length_method="chain"):
    """
    Clean a graph with the given settings.

    Returns (cleaned_graph, PercentagesOfCulledEdges).
    """
    cleaner = ShortEdgeCleaner(
        threshold,
        calibration=calibration,
        iterative_pruning=iterative_pruning,
        use_clusters=use_clusters,
        length_method=length_method,
    )
    result = cleaner.run(graph)
    return result.graph, result.percentages
