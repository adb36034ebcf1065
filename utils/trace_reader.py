# utils/trace_reader.py
# This file is part of dxt-conflicts - Parallel I/O conflict detection for Darshan DXT traces
#
# Reader for darshan-dxt-parser text output

"""Trace ingestion for darshan-dxt-parser output.

A trace is a sequence of per-(file, rank) sections::

    # DXT, file_id: 8515199880342690440, file_name: /path/to/conflict_app.out
    # DXT, rank: 0, hostname: XPS13
    # DXT, write_count: 10, read_count: 0
    # Module    Rank  Wt/Rd  Segment          Offset       Length    Start(s)      End(s)
     X_POSIX       0  write        0               0         1048576      4.8324      4.8436
     ...

A section ends at a blank line or at end of input. Malformed data lines and
degenerate accesses are recorded as diagnostics and skipped; a section header
with no rank line after it means the trace was cut short, and reading stops
with everything collected so far kept.
"""

import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, TextIO, Tuple, Union

from model.event import Api, Event, InvalidEventError, Mode
from model.file_aggregate import FileAggregate
from model.reports import RejectedEvent, UnrecognizedLine
from parser import ParseError, parse_event_line
from parser.grammar import EventFields
from utils.logger import get_logger

SECTION_HEADER_RE = re.compile(r"^# DXT, file_id: ([0-9]+), file_name: (.*)$")
RANK_LINE_RE = re.compile(r"^# DXT, rank: ([0-9]+),")

_LIBRARIES = {"X_POSIX": Api.POSIX, "X_MPIIO": Api.MPIIO}
_DIRECTIONS = {"read": Mode.READ, "write": Mode.WRITE}

Diagnostic = Union[UnrecognizedLine, RejectedEvent]


class TraceFormatError(Exception):
    """Exception raised when a trace file cannot be opened or read."""

    pass


@dataclass
class TraceReadResult:
    """Everything ingested from one trace.

    Attributes:
        files: File aggregates keyed by file id, in discovery order
        diagnostics: Unrecognized lines and rejected events, in input order
        truncated: True if a section header had no rank line after it
        sections: Number of complete (file, rank) sections read
        lines_read: Number of input lines consumed
    """

    files: Dict[str, FileAggregate] = field(default_factory=dict)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    truncated: bool = False
    sections: int = 0
    lines_read: int = 0

    @property
    def event_count(self) -> int:
        return sum(len(f) for f in self.files.values())


def build_event(fields: EventFields) -> Event:
    """Turn parsed columns into an Event.

    Raises:
        InvalidEventError: Negative rank or offset, empty byte range, or an end
            time earlier than the start time
    """
    if fields.rank < 0:
        raise InvalidEventError(f"negative rank {fields.rank}")
    if fields.end_time < fields.start_time:
        raise InvalidEventError(
            f"end time {fields.end_time} before start time {fields.start_time}"
        )
    return Event(
        rank=fields.rank,
        mode=_DIRECTIONS[fields.direction],
        api=_LIBRARIES[fields.library],
        offset=fields.offset,
        length=fields.length,
        start_time=fields.start_time,
        end_time=fields.end_time,
    )


class _NumberedLines:
    """Line iterator that strips line endings and counts lines."""

    def __init__(self, lines: Iterable[str]):
        self._it = iter(lines)
        self.line_number = 0

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        line = next(self._it)
        self.line_number += 1
        return line.rstrip("\r\n")


def read_dxt_lines(lines: Iterable[str]) -> TraceReadResult:
    """Ingest DXT trace text given as an iterable of lines.

    Args:
        lines: Trace lines, with or without line endings

    Returns:
        TraceReadResult with one FileAggregate per distinct file id
    """
    logger = get_logger()
    result = TraceReadResult()
    numbered = _NumberedLines(lines)

    while True:
        header = _find_match(numbered, SECTION_HEADER_RE)
        if header is None:
            break
        file_id, file_name = header.group(1), header.group(2)

        current_file = result.files.get(file_id)
        if current_file is None:
            logger.file_discovered(file_id, file_name)
            current_file = FileAggregate(file_id, file_name)
            result.files[file_id] = current_file

        rank_line = _find_match(numbered, RANK_LINE_RE)
        if rank_line is None:
            logger.trace_truncated(file_name)
            result.truncated = True
            break
        rank = int(rank_line.group(1))

        added = _read_section_events(numbered, current_file, rank, result.diagnostics)
        result.sections += 1
        logger.section_read(rank, file_name, added)

    result.lines_read = numbered.line_number
    logger.debug(
        f"Trace read: {len(result.files)} files, {result.sections} sections, "
        f"{result.event_count} events, {len(result.diagnostics)} diagnostics"
    )
    return result


def _find_match(lines: _NumberedLines, pattern: "re.Pattern[str]"):
    """Advance until a line matches `pattern`; None at end of input."""
    for line in lines:
        match = pattern.search(line)
        if match:
            return match
    return None


def _read_section_events(
    lines: _NumberedLines,
    current_file: FileAggregate,
    rank: int,
    diagnostics: List[Diagnostic],
) -> int:
    """Read data lines up to a blank line or end of input."""
    logger = get_logger()
    added = 0
    for line in lines:
        if not line.strip():
            break
        if line.startswith("#"):
            continue

        try:
            fields = parse_event_line(line)
        except ParseError:
            logger.unrecognized_line(lines.line_number, line)
            diagnostics.append(UnrecognizedLine(lines.line_number, line))
            continue

        try:
            event = build_event(fields)
        except InvalidEventError as e:
            logger.rejected_event(lines.line_number, str(e))
            diagnostics.append(RejectedEvent(lines.line_number, line, str(e)))
            continue

        if event.rank != rank:
            logger.debug(f"Line {lines.line_number} has rank {event.rank} in a rank {rank} section")
        current_file.add_event(event)
        added += 1
    return added


def read_dxt_trace(source: Union[str, Path, TextIO]) -> TraceReadResult:
    """Read a DXT trace from a path, "-" for standard input, or an open stream.

    Raises:
        TraceFormatError: If the trace file cannot be opened or decoded
    """
    if not isinstance(source, (str, Path)):
        return read_dxt_lines(source)

    if str(source) == "-":
        return read_dxt_lines(sys.stdin)

    path = Path(source)
    if not path.exists():
        raise TraceFormatError(f"Trace file not found: {source}")

    get_logger().debug(f"Reading trace file: {source}")
    try:
        with open(path, "r", encoding="utf-8") as file:
            return read_dxt_lines(file)
    except (OSError, UnicodeDecodeError) as e:
        raise TraceFormatError(f"Error reading trace file {source}: {e}") from e


def validate_trace_file(source: Union[str, Path]) -> Tuple[int, int]:
    """Check that a trace can be ingested.

    Returns:
        (number of events accepted, number of diagnostics)

    Raises:
        TraceFormatError: If the file cannot be read or contains no section
    """
    logger = get_logger()
    logger.debug(f"Validating trace file: {source}")

    result = read_dxt_trace(source)
    if result.sections == 0 and not result.files:
        raise TraceFormatError(f"No DXT sections found in {source}")

    logger.debug(
        f"Trace validation successful: {result.event_count} events, "
        f"{len(result.diagnostics)} diagnostics"
    )
    return result.event_count, len(result.diagnostics)
