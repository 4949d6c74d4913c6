"""
Validation rules for cleaned skeleton graphs.

Checks the structural guarantees of the cleaner and flags leftovers a
single pass may leave behind.
"""

from collections import Counter

import networkx as nx

from skelclean.cleaning.classify import edge_key, is_loop, is_short_edge
from skelclean.models import CheckResult, Severity, ValidationReport, to_networkx
from skelclean.tracer import get_tracer, trace


@trace(label="run_validation")
def run_validation(graph, threshold=None):
    """
    Run all validation checks on a graph.

    Returns ValidationReport with all check results.
    """
    tracer = get_tracer()

    checks = [
        check_no_loops(graph),
        check_no_parallel_edges(graph),
        check_short_edges_remaining(graph, threshold),
        check_isolated_vertices(graph),
    ]

    report = ValidationReport(checks=checks)
    tracer.event(f"Validation complete: {report.error_count} errors, {report.warning_count} warnings")
    return report


def check_no_loops(graph):
    """Check that no edge starts and ends at the same vertex."""
    loops = [i for i, e in enumerate(graph.edges) if is_loop(e)]

    if loops:
        return CheckResult(
            rule_id="no_loops",
            severity=Severity.ERROR,
            passed=False,
            message=f"Graph has {len(loops)} self-loop edges",
            evidence={"edges": loops[:5]},
        )

    return CheckResult(
        rule_id="no_loops",
        severity=Severity.ERROR,
        passed=True,
        message="No self-loop edges",
        evidence={},
    )


def check_no_parallel_edges(graph):
    """Check that every vertex pair is joined by at most one edge."""
    pair_counts = Counter(edge_key(e) for e in graph.edges)
    duplicated = [list(pair) for pair, n in pair_counts.items() if n > 1]

    if duplicated:
        return CheckResult(
            rule_id="no_parallel_edges",
            severity=Severity.ERROR,
            passed=False,
            message=f"{len(duplicated)} vertex pairs are joined by more than one edge",
            evidence={"pairs": duplicated[:5]},
        )

    return CheckResult(
        rule_id="no_parallel_edges",
        severity=Severity.ERROR,
        passed=True,
        message="No parallel edges",
        evidence={},
    )


def check_short_edges_remaining(graph, threshold):
    """
    Warn about edges still at or below the threshold.

    Expected after a single pass when collapsing brings vertices closer.
    """
    if threshold is None:
        return CheckResult(
            rule_id="short_edges_remaining",
            severity=Severity.INFO,
            passed=True,
            message="No threshold given, short edges not checked",
            evidence={},
        )

    short = [i for i, e in enumerate(graph.edges) if is_short_edge(e, threshold)]

    if short:
        return CheckResult(
            rule_id="short_edges_remaining",
            severity=Severity.WARN,
            passed=False,
            message=f"{len(short)} edges are still at or below {threshold}",
            evidence={"edges": short[:5], "threshold": threshold},
        )

    return CheckResult(
        rule_id="short_edges_remaining",
        severity=Severity.WARN,
        passed=True,
        message=f"All edges are longer than {threshold}",
        evidence={"threshold": threshold},
    )


def check_isolated_vertices(graph):
    """Report vertices without any edge."""
    isolated = sorted(nx.isolates(to_networkx(graph)))

    return CheckResult(
        rule_id="isolated_vertices",
        severity=Severity.INFO,
        passed=not isolated,
        message=f"{len(isolated)} isolated vertices",
        evidence={"vertices": isolated[:5]},
    )
