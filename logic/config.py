# logic/config.py

"""
Run configuration for a conflict analysis.

All options come from the command line; the block size is fixed for the
whole run.
"""

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

OUTPUT_FORMATS = ("text", "json")
GRAPH_FORMATS = ("png", "svg", "pdf", "dot")


class ConfigError(ValueError):
    """Raised when an analysis option is out of range."""


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Attributes:
      block_size: Storage block size in bytes; 1 disables false-sharing detection.
      jobs: Number of worker processes scanning files; 1 scans in-process.
      output_format: "text" or "json".
      dump_events: List each file's ordered events before its reports.
      graph_dir: Directory for per-file conflict graphs, or None.
      graph_format: Graphviz output format.
    """
    block_size: int = 1
    jobs: int = 1
    output_format: str = "text"
    dump_events: bool = False
    graph_dir: Optional[Path] = None
    graph_format: str = "png"

    def __post_init__(self):
        if self.block_size < 1:
            raise ConfigError(f"block size must be at least 1, got {self.block_size}")
        if self.jobs < 1:
            raise ConfigError(f"jobs must be at least 1, got {self.jobs}")
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigError(f"unknown output format: {self.output_format}")
        if self.graph_format not in GRAPH_FORMATS:
            raise ConfigError(f"unknown graph format: {self.graph_format}")

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "AnalysisConfig":
        """Build the configuration from parsed command line arguments."""
        return cls(
            block_size=args.block_size,
            jobs=args.jobs,
            output_format=args.format,
            dump_events=args.dump_events,
            graph_dir=args.graph,
            graph_format=args.graph_format,
        )
