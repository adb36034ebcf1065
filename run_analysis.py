#!/usr/bin/env python3
# run_analysis.py
# This file is part of dxt-conflicts - Parallel I/O conflict detection for Darshan DXT traces
#
# Command-line interface for conflict analysis with configurable logging levels

import sys
import argparse
from pathlib import Path

from logic.config import AnalysisConfig, ConfigError, GRAPH_FORMATS, OUTPUT_FORMATS
from logic.runner import AnalysisResult, ConflictAnalysis
from utils.conflict_graph import render_conflict_graphs
from utils.logger import configure_logging, get_logger
from utils.report_writer import write_json, write_text
from utils.trace_reader import TraceFormatError, validate_trace_file


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser for command line interface.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Report conflicting parallel I/O accesses in a Darshan DXT trace",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  darshan-dxt-parser app.darshan > app.dxt
  python run_analysis.py app.dxt
  python run_analysis.py app.dxt --block-size 4096
  python run_analysis.py app.dxt --format json -j 4
  darshan-dxt-parser app.darshan | python run_analysis.py -

A conflict is a pair of accesses to the same file, from different ranks,
with overlapping byte ranges, where at least one access is a write.
        """,
    )

    parser.add_argument(
        "trace", type=str, help="darshan-dxt-parser output file, or - for stdin"
    )

    parser.add_argument(
        "-b", "--block-size", type=int, default=1,
        help="Storage block size in bytes for write/write false sharing (default: 1, disabled)",
    )

    parser.add_argument(
        "-j", "--jobs", type=int, default=1, help="Number of worker processes (default: 1)"
    )

    parser.add_argument(
        "--format", choices=OUTPUT_FORMATS, default="text", help="Report format"
    )

    parser.add_argument(
        "--dump-events", action="store_true", help="List every file's ordered events"
    )

    parser.add_argument(
        "--graph", type=Path, default=None, metavar="DIR",
        help="Render a rank conflict graph per file into DIR",
    )

    parser.add_argument(
        "--graph-format", choices=GRAPH_FORMATS, default="png", help="Conflict graph format"
    )

    parser.add_argument(
        "--validate-only", action="store_true", help="Only check that the trace can be read"
    )

    parser.add_argument(
        "--fail-on-conflict",
        action="store_true",
        help="Exit with status 3 when any conflict or false sharing is found",
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )

    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output (overrides --verbose)"
    )

    return parser


def write_result(result: AnalysisResult, config: AnalysisConfig) -> None:
    """Write the reports to stdout and render graphs if requested."""
    if config.output_format == "json":
        write_json(result, sys.stdout, dump_events=config.dump_events)
    else:
        write_text(result, sys.stdout, dump_events=config.dump_events)

    if config.graph_dir is not None:
        render_conflict_graphs(result.scans, str(config.graph_dir), config.graph_format)


def main(argv=None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, debug=args.debug)
    logger = get_logger()

    try:
        config = AnalysisConfig.from_args(args)

        if args.validate_only:
            events, diagnostics = validate_trace_file(args.trace)
            print(f"Trace readable: {events} events, {diagnostics} diagnostics")
            return 0

        result = ConflictAnalysis(config).run(args.trace)
        write_result(result, config)

        if args.fail_on_conflict and result.has_hazards:
            return 3
        return 0

    except TraceFormatError as e:
        logger.error(f"Trace file error: {e}")
        return 1

    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    except KeyboardInterrupt:
        logger.error("Analysis interrupted by user")
        return 4

    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        import traceback

        traceback.print_exc()
        return 5


if __name__ == "__main__":
    sys.exit(main())
