"""
Command-line interface for skeleton cleaning.

Provides commands for cleaning graph files and writing a default config.
"""

import argparse
import sys

from skelclean.config import LENGTH_METHODS, load_config, save_default_config
from skelclean.tracer import configure_tracer, get_tracer


def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="skelclean: remove short edge artifacts from skeleton graphs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Clean skeleton graph files")
    run_parser.add_argument(
        "--inputs", "-i",
        nargs="+",
        required=True,
        help="Input graph JSON files",
    )
    run_parser.add_argument(
        "--out", "-o",
        required=True,
        help="Output directory",
    )
    run_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    run_parser.add_argument(
        "--threshold", "-t",
        type=float,
        default=None,
        help="Maximum length of a short edge (overrides config)",
    )
    run_parser.add_argument(
        "--calibration",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        default=None,
        help="Per-axis voxel size (overrides config)",
    )
    run_parser.add_argument(
        "--iterative",
        action="store_true",
        help="Repeat passes until no cluster is left",
    )
    run_parser.add_argument(
        "--individual-edges",
        action="store_true",
        help="Merge short edges one by one instead of whole clusters",
    )
    run_parser.add_argument(
        "--length-method",
        default=None,
        choices=list(LENGTH_METHODS),
        help="How edge lengths are measured (overrides config)",
    )
    run_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug artifact generation",
    )
    run_parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable runtime tracing",
    )
    run_parser.add_argument(
        "--trace-level",
        default="INFO",
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    run_parser.add_argument(
        "--trace-file",
        default=None,
        help="Path to write trace logs",
    )
    run_parser.add_argument(
        "--trace-json",
        action="store_true",
        help="Enable JSON trace output",
    )

    # Init config command
    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="skelclean_config.yaml",
        help="Output path for config file",
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "run":
        return handle_run(args)
    elif args.command == "init-config":
        return handle_init_config(args)

    return 0


def apply_overrides(config, args):
    """Apply command-line values on top of the loaded config."""
    if args.threshold is not None:
        config.cleaning.threshold = args.threshold
    if args.calibration is not None:
        config.cleaning.calibration = list(args.calibration)
    if args.iterative:
        config.cleaning.iterative_pruning = True
    if args.individual_edges:
        config.cleaning.use_clusters = False
    if args.length_method is not None:
        config.cleaning.length_method = args.length_method
    return config


def handle_run(args):
    """Handle the run command."""
    configure_tracer(
        enabled=args.trace,
        level=args.trace_level,
        file_path=args.trace_file,
        json_output=args.trace_json,
    )

    tracer = get_tracer()

    try:
        from skelclean.pipeline import run_pipeline

        config = apply_overrides(load_config(args.config), args)

        with tracer.span("cli_run", module="cli"):
            report = run_pipeline(
                input_paths=args.inputs,
                out_dir=args.out,
                config=config,
                debug=args.debug,
            )

        print(f"\nCleaning completed successfully.")
        print(f"  Graphs processed: {len(report.graphs)}")
        for graph in report.graphs:
            p = graph.percentages
            print(f"  {graph.source_path}")
            print(f"    vertices {graph.input_vertices} -> {graph.output_vertices}, "
                  f"edges {graph.input_edges} -> {graph.output_edges} "
                  f"({p.removed_edges} removed)")
        print(f"\nOutputs saved to: {args.out}/")
        print(f"  - cleaning_report.json")
        print(f"  - cleaning_summary.txt")

        if report.has_errors:
            print(f"\n[!] Validation errors detected. Review cleaning_report.json")
            return 1

        return 0

    except Exception as e:
        tracer.event(f"Cleaning failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1

    finally:
        get_tracer().config.close()


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
