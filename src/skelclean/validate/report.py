"""
Cleaning report generation.

Writes the run report as JSON plus a plain text summary.
"""

import os

from skelclean.io.graph_io import ensure_dir, save_json
from skelclean.tracer import get_tracer, trace


@trace(label="generate_report")
def generate_report(report, out_dir, debug_writer=None):
    """
    Generate report files.

    Creates:
    - cleaning_report.json: full per-graph results
    - cleaning_summary.txt: human-readable summary
    """
    tracer = get_tracer()

    report_path = os.path.join(out_dir, "cleaning_report.json")
    save_json(report.model_dump(), report_path)

    summary_text = "\n".join(format_summary(report))

    summary_path = os.path.join(out_dir, "cleaning_summary.txt")
    ensure_dir(os.path.dirname(summary_path))
    with open(summary_path, "w", encoding="utf-8") as f:
        f.write(summary_text)

    tracer.event(f"Report saved: {len(report.graphs)} graphs")

    if debug_writer:
        metrics = {
            "graphs": len(report.graphs),
            "edges_in": sum(g.input_edges for g in report.graphs),
            "edges_out": sum(g.output_edges for g in report.graphs),
            "errors": sum(g.validation.error_count for g in report.graphs),
        }
        debug_writer.save_json(metrics, "report", "report_metrics.json")

    return report_path, summary_path


def format_summary(report):
    """Summary lines for a CleaningReport."""
    lines = ["Skeleton Cleaning Report", "=" * 40, ""]
    lines.append(f"Threshold: {report.threshold}")
    lines.append(f"Calibration: {report.calibration}")
    lines.append(f"Iterative pruning: {report.iterative_pruning}")
    lines.append(f"Cluster mode: {report.use_clusters}")
    lines.append("")

    for graph in report.graphs:
        p = graph.percentages
        lines.append(f"{graph.graph_id}  {graph.source_path}")
        lines.append("-" * 40)
        lines.append(f"Vertices: {graph.input_vertices} -> {graph.output_vertices}")
        lines.append(f"Edges: {graph.input_edges} -> {graph.output_edges}")
        lines.append(f"Passes: {len(graph.passes)}")
        lines.append(format_percentages(p))
        for check in graph.validation.checks:
            if not check.passed:
                lines.append(format_check_result(check))
        lines.append("")

    return lines


def format_percentages(percentages):
    """One line breakdown of removed edges."""
    p = percentages
    return (
        f"Removed of {p.total_edges}: "
        f"dead ends {p.dead_ends} ({p.percentage_dead_ends:.2f}%), "
        f"parallel {p.parallel_edges} ({p.percentage_parallel_edges:.2f}%), "
        f"loops {p.loop_edges} ({p.percentage_loop_edges:.2f}%), "
        f"clusters {p.cluster_edges} ({p.percentage_cluster_edges:.2f}%)"
    )


def format_check_result(check):
    """Format a single check result for display."""
    status = "PASS" if check.passed else "FAIL"
    severity = check.severity.value.upper()
    return f"[{status}][{severity}] {check.rule_id}: {check.message}"
