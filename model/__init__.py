# model/__init__.py

"""
Domain objects for I/O trace analysis: recorded accesses, per-file event
collections, the active-event window used by the conflict sweep, and the
report records the sweep produces. These types carry no ingestion or
output logic.
"""

from .event import Api, Event, InvalidEventError, Mode, block_end, block_start
from .file_aggregate import FileAggregate
from .overlap_set import MergeOutcome, OverlapSet
from .reports import (
    AnomalyReport,
    ConflictReport,
    FalseSharingReport,
    RejectedEvent,
    ReportKind,
    UnrecognizedLine,
)

__all__ = [
    "Api",
    "Event",
    "InvalidEventError",
    "Mode",
    "block_start",
    "block_end",
    "FileAggregate",
    "MergeOutcome",
    "OverlapSet",
    "AnomalyReport",
    "ConflictReport",
    "FalseSharingReport",
    "RejectedEvent",
    "ReportKind",
    "UnrecognizedLine",
]
