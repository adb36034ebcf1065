# utils/logger.py
# This file is part of dxt-conflicts - Parallel I/O conflict detection for Darshan DXT traces
#
# Logging utility for trace ingestion and conflict scanning with configurable levels

import logging
import sys
from enum import Enum
from typing import Dict, Optional, TextIO


class LogLevel(Enum):
    """Log levels for conflict analysis."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


class ConflictLogger:
    """Centralized logger for conflict analysis with structured output.

    Every level goes to stderr so log lines never interleave with a report
    written to stdout.
    """

    def __init__(self, name: str = "dxt_conflicts", level: LogLevel = LogLevel.WARNING):
        """Initialize the logger.

        Args:
            name: Logger name
            level: Default logging level
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level.value)

        # Remove existing handlers to avoid duplicates
        self.logger.handlers.clear()

        self._handler = logging.StreamHandler(sys.stderr)
        self._handler.setLevel(level.value)
        self._handler.setFormatter(ConflictFormatter())
        self.logger.addHandler(self._handler)

        # Prevent propagation to root logger
        self.logger.propagate = False

    def set_level(self, level: LogLevel):
        """Change the logging level."""
        self.logger.setLevel(level.value)
        self._handler.setLevel(level.value)

    def set_stream(self, stream: TextIO):
        """Redirect log output, e.g. after sys.stderr was replaced."""
        self._handler.setStream(stream)

    def debug(self, message: str, **kwargs):
        """Log debug message (detailed internal state)."""
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message (general progress)."""
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message (unexpected but recoverable)."""
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs):
        """Log error message (serious problems)."""
        self.logger.error(message, **kwargs)

    # Ingestion events
    def file_discovered(self, file_id: str, file_name: str):
        """Log the first section seen for a file."""
        self.info(f"First instance of {file_name} ({file_id})")

    def section_read(self, rank: int, file_name: str, event_count: int):
        self.debug(f"  reading rank {rank} {file_name}: {event_count} events")

    def unrecognized_line(self, line_number: int, text: str):
        self.warning(f"Unrecognized line {line_number}: {text}")

    def rejected_event(self, line_number: int, reason: str):
        self.warning(f"Rejected event on line {line_number}: {reason}")

    def trace_truncated(self, file_name: str):
        self.warning(f"No rank line after section header for {file_name}; trace assumed truncated")

    # Scan events
    def scan_start(self, file_name: str, event_count: int, block_size: int):
        """Log the beginning of a per-file sweep."""
        self.info(f"scanForConflicts({file_name}): {event_count} events, block size {block_size}")

    def rank_summary(self, counts: Dict[int, int]):
        """Log per-rank event counts for the file being scanned."""
        for rank, count in counts.items():
            self.debug(f"  rank {rank}, {count}")

    def merge_anomaly(self, existing: str, incoming: str, description: str):
        self.warning(f"Unexpected same-rank overlap: {incoming} vs {existing}: {description}")

    def scan_complete(self, file_name: str, conflicts: int, false_sharing: int, anomalies: int):
        self.info(
            f"  {file_name}: {conflicts} conflicts, {false_sharing} false sharing, "
            f"{anomalies} anomalies"
        )


class ConflictFormatter(logging.Formatter):
    """Custom formatter with clean output."""

    def format(self, record):
        # INFO shows the message only
        if record.levelno == logging.INFO:
            return record.getMessage()

        if record.levelno == logging.DEBUG:
            return f"[DEBUG] {record.getMessage()}"

        return f"[{record.levelname}] {record.getMessage()}"


# Global logger instance
_global_logger: Optional[ConflictLogger] = None


def get_logger(name: str = "dxt_conflicts") -> ConflictLogger:
    """Get or create the global logger instance.

    Args:
        name: Logger name (default: "dxt_conflicts")

    Returns:
        ConflictLogger instance
    """
    global _global_logger
    if _global_logger is None:
        _global_logger = ConflictLogger(name)
    return _global_logger


def set_log_level(level: LogLevel):
    """Set the global log level.

    Args:
        level: New log level
    """
    logger = get_logger()
    logger.set_level(level)


def configure_logging(verbose: bool = False, debug: bool = False):
    """Configure logging based on command line flags.

    Log output is bound to the current sys.stderr.

    Args:
        verbose: Enable verbose (INFO) output
        debug: Enable debug output (overrides verbose)
    """
    get_logger().set_stream(sys.stderr)
    if debug:
        set_log_level(LogLevel.DEBUG)
    elif verbose:
        set_log_level(LogLevel.INFO)
    else:
        set_log_level(LogLevel.WARNING)
