# parser/exceptions.py
# This file is part of dxt-conflicts - Parallel I/O conflict detection for Darshan DXT traces
#
# Custom exceptions for trace line parsing


class ParseError(RuntimeError):
    """Exception raised when a DXT data line does not match the line grammar.

    Trace ingestion catches it, records the line as unrecognized and carries
    on with the next line.
    """

    pass
