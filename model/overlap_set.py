# model/overlap_set.py

"""
OverlapSet holds the events still relevant to a left-to-right sweep over one
file's accesses. Events are retrieved in ascending order of their
block-quantized end offset; once the sweep passes that offset, an event can
never overlap anything that follows and is dropped from the front.

Each incoming event goes through, in order: expiry of old events, same-rank
merge, cross-rank overlap reporting, block false-sharing reporting, and
finally admission into the set.
"""

from __future__ import annotations
import bisect
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from utils.logger import get_logger
from .event import Event
from .reports import AnomalyReport, ConflictReport, FalseSharingReport

logger = get_logger()


@dataclass(frozen=True, slots=True)
class MergeOutcome:
    """
    Result of folding an event into an active event of the same rank.

    `description` is None for a clean merge and names the broken containment
    otherwise.
    """
    existing: Event
    incoming: Event
    description: Optional[str] = None

    @property
    def is_anomaly(self) -> bool:
        return self.description is not None

    def to_report(self, file_id: str) -> AnomalyReport:
        return AnomalyReport(file_id, self.incoming, self.existing, self.description or "")


def _containment_failures(outer: Event, inner: Event) -> List[str]:
    failures = []
    if outer.offset > inner.offset or outer.end_offset < inner.end_offset:
        failures.append("byte range not contained")
    if outer.start_time > inner.start_time or outer.end_time < inner.end_time:
        failures.append("time range not contained")
    if inner.is_write and not outer.is_write:
        failures.append("write nested in read")
    return failures


@dataclass(slots=True)
class OverlapSet:
    """
    Active events of one sweep, ordered by quantized end offset.

    Attributes:
      block_size: Storage block size; 1 disables quantization.
    """
    block_size: int = 1
    # (quantized end offset, admission sequence, event)
    _active: List[Tuple[int, int, Event]] = field(default_factory=list)
    _sequence: int = 0
    _peak_size: int = 0

    def __post_init__(self):
        if self.block_size < 1:
            raise ValueError(f"block size must be at least 1, got {self.block_size}")

    def remove_old_events(self, threshold: int) -> int:
        """
        Drops every event whose quantized end offset is below `threshold`.

        Returns:
            Number of events removed.
        """
        cut = bisect.bisect_left(self._active, (threshold,))
        if cut:
            del self._active[:cut]
        return cut

    def merge_same_rank(self, ev: Event) -> Optional[MergeOutcome]:
        """
        Folds `ev` into an active event of the same rank that overlaps it.

        The overlap is taken to be one logical call recorded at two layers
        (an MPI-IO call and the POSIX calls that implement it). The active
        event should cover `ev` completely; if no overlapping event does, the
        outcome carries a description of the mismatch instead.

        Returns:
            None when no same-rank event overlaps `ev`. Otherwise an outcome,
            and the caller must discard `ev` either way.
        """
        first_overlap: Optional[Event] = None
        for _, _, other in self._active:
            if other.rank != ev.rank or not other.overlaps(ev):
                continue
            if other.covers(ev):
                logger.debug(f"    merged {ev} into {other}")
                return MergeOutcome(other, ev)
            if first_overlap is None:
                first_overlap = other

        if first_overlap is None:
            return None

        description = ", ".join(_containment_failures(first_overlap, ev))
        logger.merge_anomaly(str(first_overlap), str(ev), description)
        return MergeOutcome(first_overlap, ev, description)

    def report_overlaps(self, ev: Event, file_id: str) -> Tuple[List[ConflictReport], bool]:
        """
        Reports every active event of another rank whose bytes overlap `ev`
        where at least one side writes.

        Returns:
            The conflict reports, and whether any other-rank byte overlap was
            seen at all (read/read overlaps included).
        """
        reports: List[ConflictReport] = []
        found_overlap = False
        for _, _, other in self._active:
            if other.rank == ev.rank or not ev.overlaps(other):
                continue
            found_overlap = True
            if not (ev.is_write or other.is_write):
                continue
            byte_range = (max(ev.offset, other.offset), min(ev.end_offset, other.end_offset))
            reports.append(ConflictReport(file_id, ev, other, byte_range, ev.time_overlap(other)))
        return reports, found_overlap

    def report_block_overlaps(self, ev: Event, file_id: str) -> List[FalseSharingReport]:
        """
        Reports write/write false sharing: another rank's active write shares a
        block with `ev` without sharing any byte.
        """
        if self.block_size <= 1 or not ev.is_write:
            return []

        reports: List[FalseSharingReport] = []
        ev_start, ev_end = ev.quantized_range(self.block_size)
        for _, _, other in self._active:
            if other.rank == ev.rank or not other.is_write:
                continue
            if ev.overlaps(other) or not ev.overlaps_blocks(other, self.block_size):
                continue
            other_start, other_end = other.quantized_range(self.block_size)
            block_range = (max(ev_start, other_start), min(ev_end, other_end))
            reports.append(FalseSharingReport(file_id, ev, other, block_range))
        return reports

    def add_event(self, ev: Event) -> None:
        """Admits `ev` into the active set."""
        _, quantized_end = ev.quantized_range(self.block_size)
        bisect.insort(self._active, (quantized_end, self._sequence, ev))
        self._sequence += 1
        if len(self._active) > self._peak_size:
            self._peak_size = len(self._active)

    @property
    def peak_size(self) -> int:
        """Largest number of simultaneously active events seen."""
        return self._peak_size

    def __iter__(self) -> Iterator[Event]:
        """Active events in ascending quantized end offset."""
        return (ev for _, _, ev in self._active)

    def __len__(self) -> int:
        return len(self._active)

    def __bool__(self) -> bool:
        return bool(self._active)
