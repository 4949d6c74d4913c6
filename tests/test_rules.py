"""Tests for validation rules and report formatting."""

import json
import os

from skelclean.models import Severity, create_graph


class TestValidationRules:
    """Tests for the cleaned graph checks."""

    def test_clean_graph_passes(self, square_cluster_graph):
        """Test that a graph without artefacts has no failed checks."""
        from skelclean.validate.rules import run_validation

        report = run_validation(square_cluster_graph, threshold=1.0)

        assert not report.has_errors
        assert report.warning_count == 0
        assert all(c.passed for c in report.checks)

    def test_loops_and_parallels_are_errors(self, square_cluster_artefacts_graph):
        """Test that structural leftovers fail the error checks."""
        from skelclean.validate.rules import run_validation

        report = run_validation(square_cluster_artefacts_graph)
        failed = {c.rule_id for c in report.checks if not c.passed}

        assert failed == {"no_loops", "no_parallel_edges"}
        assert report.error_count == 2

    def test_loop_evidence(self, loop_graph):
        """Test that loop edges are listed as evidence."""
        from skelclean.validate.rules import check_no_loops

        result = check_no_loops(loop_graph)

        assert not result.passed
        assert result.evidence["edges"] == [0]

    def test_short_edges_warn(self, sail_graph):
        """Test that edges at the threshold produce a warning."""
        from skelclean.validate.rules import check_short_edges_remaining

        result = check_short_edges_remaining(sail_graph, 2.0)

        assert not result.passed
        assert result.severity == Severity.WARN
        assert result.evidence["edges"] == [0, 3]

    def test_short_edges_skipped_without_threshold(self, sail_graph):
        """Test that no threshold means no short edge check."""
        from skelclean.validate.rules import check_short_edges_remaining

        result = check_short_edges_remaining(sail_graph, None)

        assert result.passed
        assert result.severity == Severity.INFO

    def test_isolated_vertices_are_info(self):
        """Test that isolated vertices never count as errors."""
        from skelclean.validate.rules import run_validation

        graph = create_graph([[(0, 0, 0)], [(5, 0, 0)], [(9, 9, 9)]], [(0, 1, 5.0)])
        report = run_validation(graph, threshold=1.0)
        check = next(c for c in report.checks if c.rule_id == "isolated_vertices")

        assert not check.passed
        assert check.evidence["vertices"] == [2]
        assert not report.has_errors


class TestReport:
    """Tests for report output."""

    def _report(self, sail_graph):
        from skelclean.cleaning.pruning import ShortEdgeCleaner
        from skelclean.models import CleaningReport, GraphReport
        from skelclean.validate.rules import run_validation

        result = ShortEdgeCleaner(1.01).run(sail_graph)
        graph_report = GraphReport(
            graph_id="graph_test",
            source_path="sail.json",
            input_vertices=4,
            input_edges=4,
            output_vertices=len(result.graph.vertices),
            output_edges=len(result.graph.edges),
            percentages=result.percentages,
            passes=result.passes,
            validation=run_validation(result.graph, 1.01),
        )
        return CleaningReport(report_id="report_test", threshold=1.01, graphs=[graph_report])

    def test_format_percentages(self):
        """Test the removal breakdown line."""
        from skelclean.models import PercentagesOfCulledEdges
        from skelclean.validate.report import format_percentages

        line = format_percentages(PercentagesOfCulledEdges(total_edges=4, dead_ends=1))

        assert line.startswith("Removed of 4:")
        assert "dead ends 1 (25.00%)" in line
        assert "loops 0 (0.00%)" in line

    def test_format_check_result(self):
        """Test check result display."""
        from skelclean.models import CheckResult
        from skelclean.validate.report import format_check_result

        check = CheckResult(
            rule_id="no_loops", severity=Severity.ERROR, passed=False, message="Graph has 1 self-loop edges",
        )

        assert format_check_result(check) == "[FAIL][ERROR] no_loops: Graph has 1 self-loop edges"

    def test_generate_report_files(self, temp_dir, sail_graph):
        """Test that JSON and text reports are written."""
        from skelclean.validate.report import generate_report

        report_path, summary_path = generate_report(self._report(sail_graph), temp_dir)

        with open(report_path, encoding="utf-8") as f:
            data = json.load(f)
        with open(summary_path, encoding="utf-8") as f:
            summary = f.read()

        assert data["report_id"] == "report_test"
        assert data["graphs"][0]["percentages"]["dead_ends"] == 1
        assert data["graphs"][0]["validation"]["checks"][0]["severity"] == "error"
        assert "Vertices: 4 -> 3" in summary
        assert "Threshold: 1.01" in summary

    def test_debug_metrics(self, temp_dir, sail_graph):
        """Test that report metrics are written when debugging."""
        from skelclean.io.graph_io import DebugArtifactWriter
        from skelclean.validate.report import generate_report

        writer = DebugArtifactWriter(temp_dir, "global")
        generate_report(self._report(sail_graph), temp_dir, writer)

        path = os.path.join(temp_dir, "debug", "global", "report", "report_metrics.json")
        with open(path, encoding="utf-8") as f:
            metrics = json.load(f)

        assert metrics == {"graphs": 1, "edges_in": 4, "edges_out": 3, "errors": 0}
