# parser/__init__.py
# This file is part of dxt-conflicts - Parallel I/O conflict detection for Darshan DXT traces
#
# Data line parsing for darshan-dxt-parser output

"""Parsing of individual darshan-dxt-parser data lines.

Section headers and metadata comments are handled by the trace reader with
regular expressions; this package turns one access row into its column
values.

Example:
    >>> from parser import parse_event_line
    >>> parse_event_line(" X_POSIX 0 write 0 0 1048576 4.8324 4.8436").length
    1048576
"""

from .exceptions import ParseError
from .grammar import EventFields, _DXTLineParser
from utils.logger import get_logger


def parse_event_line(source: str) -> EventFields:
    """Parse one DXT data line.

    Uses a fresh parser instance per call so parsing carries no state from
    one line to the next.

    Args:
        source: Text of the data line, leading whitespace allowed

    Returns:
        Column values of the line

    Raises:
        ParseError: The line does not match the data line grammar
    """
    parser = _DXTLineParser()

    try:
        return parser.parse(source)
    except ParseError:
        get_logger().debug(f"ParseError for line: {source.strip()}")
        raise


__all__ = ["parse_event_line", "EventFields", "ParseError"]
