# utils/__init__.py
# This file is part of dxt-conflicts - Parallel I/O conflict detection for Darshan DXT traces
#
# Utility module exports; the trace reader, report writer and conflict graph
# are imported from their own modules.

from .logger import LogLevel, configure_logging, get_logger, set_log_level

__all__ = [
    "LogLevel",
    "configure_logging",
    "get_logger",
    "set_log_level",
]
