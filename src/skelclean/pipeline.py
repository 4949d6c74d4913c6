"""
Pipeline orchestrator for skeleton cleaning.

Cleans each input graph file, validates the result and writes the cleaned
graphs together with a report.
"""

import os
from datetime import datetime

from skelclean.cleaning.pruning import ShortEdgeCleaner
from skelclean.config import load_config
from skelclean.io.graph_io import (
    DebugArtifactWriter, ensure_dir, load_graph, save_graph, validate_graph_inputs,
)
from skelclean.models import (
    CleaningReport, GraphReport, generate_graph_id, generate_report_id,
)
from skelclean.tracer import get_tracer, trace
from skelclean.validate.report import generate_report
from skelclean.validate.rules import run_validation


@trace(label="run_pipeline")
def run_pipeline(input_paths, out_dir, config=None, config_path=None, debug=False):
    """
    Clean every input graph.

    Args:
        input_paths: list of graph JSON files
        out_dir: output directory
        config: PipelineConfig object (optional)
        config_path: path to YAML config file (optional)
        debug: enable debug artifact generation

    Returns:
        CleaningReport with one GraphReport per input
    """
    tracer = get_tracer()

    if config is None:
        config = load_config(config_path)

    if debug:
        config.debug.enabled = True

    errors = validate_graph_inputs(input_paths)
    if errors:
        for error in errors:
            tracer.event(error, level="ERROR")
        raise ValueError(f"Input validation failed: {errors}")

    cleaner = ShortEdgeCleaner.from_config(config.cleaning)

    ensure_dir(out_dir)

    report = CleaningReport(
        report_id=generate_report_id(input_paths),
        created_at=datetime.now().isoformat(),
        threshold=cleaner.threshold,
        calibration=list(cleaner.calibration),
        iterative_pruning=cleaner.iterative_pruning,
        use_clusters=cleaner.use_clusters,
    )

    for idx, input_path in enumerate(input_paths):
        with tracer.span(f"process_graph_{idx}", module="pipeline"):
            graph_report = process_single_graph(input_path, idx, out_dir, cleaner, config)
            report.graphs.append(graph_report)

    debug_writer = DebugArtifactWriter(out_dir, "global") if config.debug.enabled else None
    generate_report(report, out_dir, debug_writer)

    tracer.event(f"Pipeline complete: {len(report.graphs)} graphs")

    return report


def process_single_graph(input_path, idx, out_dir, cleaner, config):
    """
    Load, clean, validate and save one graph.

    Returns a GraphReport.
    """
    tracer = get_tracer()

    graph_id = generate_graph_id(input_path, idx)
    debug_writer = DebugArtifactWriter(out_dir, graph_id) if config.debug.enabled else None

    graph = load_graph(input_path)

    with tracer.span("clean", module="pipeline"):
        result = cleaner.run(graph)

    with tracer.span("validate", module="pipeline"):
        validation = run_validation(result.graph, cleaner.threshold)

    stem = os.path.splitext(os.path.basename(input_path))[0]
    output_path = os.path.join(out_dir, f"{stem}_clean.json")
    save_graph(result.graph, output_path)

    if debug_writer:
        for record in result.passes:
            debug_writer.save_json(record.model_dump(), "passes", f"pass_{record.pass_index:02d}.json")
        debug_writer.save_json(result.percentages.as_dict(), "cleaning", "percentages.json")
        debug_writer.save_json(validation.model_dump(), "cleaning", "validation.json")

    if validation.has_errors:
        tracer.event(f"Validation errors in {input_path}", level="WARN")

    return GraphReport(
        graph_id=graph_id,
        source_path=os.path.abspath(input_path),
        output_path=os.path.abspath(output_path),
        input_vertices=len(graph.vertices),
        input_edges=len(graph.edges),
        output_vertices=len(result.graph.vertices),
        output_edges=len(result.graph.edges),
        percentages=result.percentages,
        passes=result.passes,
        validation=validation,
    )
