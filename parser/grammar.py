# parser/grammar.py
# This file is part of dxt-conflicts - Parallel I/O conflict detection for Darshan DXT traces
#
# LALR(1) grammar and parser for DXT data lines using SLY

"""DXT data line grammar implemented with the SLY parser generator.

A data line has eight columns::

    <module> <rank> <read|write> <segment> <offset> <length> <start> <end>

where the module is X_POSIX or X_MPIIO and the two timestamps are seconds
since the start of the run. Timestamps written without a fractional part
are accepted as well. Columns after the end time, such as the OST list
printed for Lustre files, are accepted and dropped.
"""

from typing import NamedTuple

from sly import Parser
from .lexer import DXTLexer
from .exceptions import ParseError
from utils.logger import get_logger


class EventFields(NamedTuple):
    """Raw column values of one data line, not yet validated."""
    library: str
    rank: int
    direction: str
    segment: int
    offset: int
    length: int
    start_time: float
    end_time: float


class _DXTLineParser(Parser):
    """SLY-based LALR(1) parser for a single DXT data line.

    Attributes:
        tokens: Token types from DXTLexer
    """

    tokens = DXTLexer.tokens

    @_("library INT direction INT INT INT number number trailer")
    def record(self, p) -> EventFields:
        """A complete data line; trailing columns are ignored."""
        return EventFields(
            library=p.library,
            rank=p.INT0,
            direction=p.direction,
            segment=p.INT1,
            offset=p.INT2,
            length=p.INT3,
            start_time=p.number0,
            end_time=p.number1,
        )

    @_("trailer column")
    def trailer(self, p):
        return None

    @_("")
    def trailer(self, p):
        return None

    @_("BRACKETED", "INT", "FLOAT", "ID", "LIBRARY", "READ", "WRITE")
    def column(self, p):
        return p[0]

    @_("LIBRARY")
    def library(self, p) -> str:
        return p.LIBRARY

    @_("ID")
    def library(self, p) -> str:
        raise ParseError(f"invalid library: {p.ID}")

    @_("READ", "WRITE")
    def direction(self, p) -> str:
        return p[0]

    @_("ID")
    def direction(self, p) -> str:
        raise ParseError(f"invalid io access type: {p.ID}")

    @_("FLOAT")
    def number(self, p) -> float:
        return p.FLOAT

    @_("INT")
    def number(self, p) -> float:
        return float(p.INT)

    def parse(self, text: str) -> EventFields:
        """Parse one data line into its column values.

        Raises:
            ParseError: If the line is empty or does not match the grammar
        """
        try:
            result = super().parse(DXTLexer().tokenize(text))
        except ParseError:
            raise
        except Exception as e:
            get_logger().debug(f"Unexpected parsing error: {e}")
            raise ParseError(f"Parse failed: {e}") from e

        if result is None:
            if not text.strip():
                raise ParseError("Input line is empty.")
            raise ParseError("Failed to parse line (syntax error).")
        return result

    def error(self, token):
        """Handle syntax errors during parsing.

        Raises:
            ParseError: Always raises with the offending token
        """
        if token:
            error_msg = (
                f"Syntax error near '{token.value}' "
                f"(type: {token.type}) at position {token.index}"
            )
        else:
            error_msg = "Syntax error: Unexpected end of line"

        raise ParseError(error_msg)
