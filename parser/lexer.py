# parser/lexer.py
# This file is part of dxt-conflicts - Parallel I/O conflict detection for Darshan DXT traces
#
# Lexical analyzer for DXT data lines using SLY

"""Lexical analyzer for darshan-dxt-parser data lines.

A data line is a whitespace separated row such as::

     X_POSIX       0  write        0               0         1048576      4.8324      4.8436

Supported Tokens:
- Keywords: X_POSIX, X_MPIIO (LIBRARY), read, write
- Numbers: integers (optionally signed) and decimal floats
- Identifiers: any other word, which the grammar rejects
- Bracketed columns such as the Lustre OST column [  3]
- Whitespace: ignored during tokenization
"""

from sly import Lexer
from utils.logger import get_logger


class DXTLexer(Lexer):
    """SLY-based lexer for one DXT data line.

    Module names and access directions are recognized as keywords by
    remapping identifiers, so an unknown module or direction still lexes
    (as ID) and is rejected by the grammar with a clear message.

    Attributes:
        tokens: Set of valid token types
        ignore: Characters to skip during tokenization
    """

    tokens = {
        "LIBRARY",
        "READ",
        "WRITE",
        "FLOAT",
        "INT",
        "ID",
        "BRACKETED",
    }

    ignore = " \t\r\n"

    ID = r"[a-zA-Z_][a-zA-Z0-9_]*"

    ID["X_POSIX"] = "LIBRARY"
    ID["X_MPIIO"] = "LIBRARY"
    ID["read"] = "READ"
    ID["write"] = "WRITE"

    BRACKETED = r"\[[^\]]*\]"

    # Floats must be tried before integers
    @_(r"-?\d+\.\d*(?:[eE][-+]?\d+)?")
    def FLOAT(self, t):
        t.value = float(t.value)
        return t

    @_(r"-?\d+")
    def INT(self, t):
        t.value = int(t.value)
        return t

    def error(self, t):
        """Handle illegal characters during tokenization.

        Raises:
            ValueError: Always raised with character and position information
        """
        logger = get_logger()

        illegal_char = t.value[0]
        error_pos = self.index

        logger.debug(f"Illegal character '{illegal_char}' at position {error_pos}")

        self.index += 1

        raise ValueError(
            f"Illegal character '{illegal_char}' encountered at position {error_pos}"
        )
