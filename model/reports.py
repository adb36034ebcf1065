# model/reports.py

"""
Report records produced by the conflict scan and by trace ingestion.

Scan reports always name two events: ``first`` is the event being swept
when the report was raised, ``second`` the active event it collided with.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .event import Event


class ReportKind(Enum):
    CONFLICT = "conflict"
    FALSE_SHARING = "false_sharing"
    ANOMALY = "anomaly"
    UNRECOGNIZED = "unrecognized"
    REJECTED = "rejected"


@dataclass(frozen=True, slots=True)
class ConflictReport:
    """Two ranks touch overlapping bytes of one file and at least one writes."""
    file_id: str
    first: Event
    second: Event
    byte_range: Tuple[int, int]
    time_range: Optional[Tuple[float, float]]

    kind = ReportKind.CONFLICT

    @property
    def concurrent(self) -> bool:
        """True if the two accesses also overlap in wall-clock time."""
        return self.time_range is not None

    @property
    def hazard(self) -> str:
        """WAW, RAW or WAR, read in the order the two accesses started."""
        earlier, later = sorted((self.first, self.second), key=lambda e: e.start_time)
        if earlier.is_write and later.is_write:
            return "WAW"
        if earlier.is_write:
            return "RAW"
        return "WAR"

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "file_id": self.file_id,
            "hazard": self.hazard,
            "first": self.first.to_dict(),
            "second": self.second.to_dict(),
            "byte_range": list(self.byte_range),
            "time_range": list(self.time_range) if self.time_range else None,
        }


@dataclass(frozen=True, slots=True)
class FalseSharingReport:
    """Two writes from different ranks share a storage block but no bytes."""
    file_id: str
    first: Event
    second: Event
    block_range: Tuple[int, int]

    kind = ReportKind.FALSE_SHARING

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "file_id": self.file_id,
            "first": self.first.to_dict(),
            "second": self.second.to_dict(),
            "block_range": list(self.block_range),
        }


@dataclass(frozen=True, slots=True)
class AnomalyReport:
    """A same-rank overlap that is not a clean nesting of one call in another."""
    file_id: str
    first: Event
    second: Event
    description: str

    kind = ReportKind.ANOMALY

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "file_id": self.file_id,
            "first": self.first.to_dict(),
            "second": self.second.to_dict(),
            "description": self.description,
        }


@dataclass(frozen=True, slots=True)
class UnrecognizedLine:
    line_number: int
    text: str

    kind = ReportKind.UNRECOGNIZED

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "line_number": self.line_number, "text": self.text}


@dataclass(frozen=True, slots=True)
class RejectedEvent:
    line_number: int
    text: str
    reason: str

    kind = ReportKind.REJECTED

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "line_number": self.line_number,
            "text": self.text,
            "reason": self.reason,
        }
