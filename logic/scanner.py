# logic/scanner.py

"""
Per-file conflict sweep.

Walks one file's events in canonical order and drives an OverlapSet through
expiry, same-rank merge, cross-rank overlap and false-sharing checks for each
one. Files are scanned independently of each other; nothing is shared
between two scans.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Union

from model.event import block_start
from model.file_aggregate import FileAggregate
from model.overlap_set import OverlapSet
from model.reports import AnomalyReport, ConflictReport, FalseSharingReport
from utils.logger import get_logger

ScanReport = Union[ConflictReport, FalseSharingReport, AnomalyReport]


@dataclass
class ScanResult:
    """Reports for one file, in the order the sweep raised them."""
    file_id: str
    file_name: str
    block_size: int = 1
    reports: List[ScanReport] = field(default_factory=list)
    events_scanned: int = 0
    events_merged: int = 0
    peak_active: int = 0
    ranks: List[int] = field(default_factory=list)

    @property
    def conflicts(self) -> List[ConflictReport]:
        return [r for r in self.reports if isinstance(r, ConflictReport)]

    @property
    def false_sharing(self) -> List[FalseSharingReport]:
        return [r for r in self.reports if isinstance(r, FalseSharingReport)]

    @property
    def anomalies(self) -> List[AnomalyReport]:
        return [r for r in self.reports if isinstance(r, AnomalyReport)]

    def to_dict(self) -> dict:
        return {
            "file_id": self.file_id,
            "file_name": self.file_name,
            "block_size": self.block_size,
            "events_scanned": self.events_scanned,
            "events_merged": self.events_merged,
            "peak_active": self.peak_active,
            "ranks": self.ranks,
            "reports": [r.to_dict() for r in self.reports],
        }


def scan_for_conflicts(f: FileAggregate, block_size: int = 1) -> ScanResult:
    """
    Scan one file for conflicting accesses.

    Events arrive ordered by starting offset. The OverlapSet keeps the events
    that still reach the current offset, ordered by their (block-rounded)
    ending offset. An overlapping event from the same rank is most likely an
    MPI-IO call and the POSIX call implementing it, so it is folded into the
    earlier one instead of being reported; one that is not a clean nesting is
    reported as an anomaly and dropped all the same.

    Args:
        f: File to scan.
        block_size: Storage block size for false-sharing detection.

    Returns:
        ScanResult with conflict, false-sharing and anomaly reports.
    """
    logger = get_logger()
    events = f.events
    logger.scan_start(f.name, len(events), block_size)
    logger.rank_summary(f.rank_summary())

    result = ScanResult(f.id, f.name, block_size, ranks=f.ranks)
    overlap_set = OverlapSet(block_size)

    for e in events:
        result.events_scanned += 1

        # throw out events that end before the first block of e
        overlap_set.remove_old_events(block_start(e.offset, block_size))

        merge = overlap_set.merge_same_rank(e)
        if merge is not None:
            if merge.is_anomaly:
                result.reports.append(merge.to_report(f.id))
            else:
                result.events_merged += 1
            continue

        conflicts, found_overlap = overlap_set.report_overlaps(e, f.id)
        result.reports.extend(conflicts)

        # false sharing only matters when no bytes are shared outright
        if not found_overlap:
            result.reports.extend(overlap_set.report_block_overlaps(e, f.id))

        overlap_set.add_event(e)

    result.peak_active = overlap_set.peak_size
    logger.scan_complete(
        f.name, len(result.conflicts), len(result.false_sharing), len(result.anomalies)
    )
    return result
