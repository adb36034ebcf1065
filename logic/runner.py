# logic/runner.py

"""
ConflictAnalysis: glue code that ties a DXT trace to the per-file conflict
scan. Reads the trace, scans every file in the order it was first seen, and
collects the per-file results together with the ingestion diagnostics.

Scans can be spread over worker processes; results are still gathered in
file discovery order, so the output matches a sequential run.
"""

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from itertools import repeat
from pathlib import Path
from typing import Dict, List, TextIO, Union

from model.file_aggregate import FileAggregate
from utils.logger import get_logger
from utils.trace_reader import Diagnostic, TraceReadResult, read_dxt_trace

from .config import AnalysisConfig
from .scanner import ScanResult, scan_for_conflicts


@dataclass
class AnalysisResult:
    """Outcome of analyzing one trace."""
    files: Dict[str, FileAggregate] = field(default_factory=dict)
    scans: List[ScanResult] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    truncated: bool = False

    @property
    def conflict_count(self) -> int:
        return sum(len(s.conflicts) for s in self.scans)

    @property
    def false_sharing_count(self) -> int:
        return sum(len(s.false_sharing) for s in self.scans)

    @property
    def anomaly_count(self) -> int:
        return sum(len(s.anomalies) for s in self.scans)

    @property
    def has_hazards(self) -> bool:
        """True if any conflict or false sharing was found."""
        return self.conflict_count > 0 or self.false_sharing_count > 0


class ConflictAnalysis:
    """
    Runs the conflict scan over every file of a trace.
    """

    def __init__(self, config: AnalysisConfig = AnalysisConfig()):
        self.config = config

    def run(self, source: Union[str, Path, TextIO]) -> AnalysisResult:
        """Read `source` and scan all of its files."""
        trace = read_dxt_trace(source)
        return self.analyze(trace)

    def analyze(self, trace: TraceReadResult) -> AnalysisResult:
        """Scan every file of an already ingested trace."""
        logger = get_logger()
        files = list(trace.files.values())

        if trace.truncated:
            logger.warning("Trace is truncated; analyzing the sections read so far")

        if self.config.jobs > 1 and len(files) > 1:
            logger.info(f"Scanning {len(files)} files with {self.config.jobs} workers")
            with ProcessPoolExecutor(max_workers=self.config.jobs) as pool:
                scans = list(pool.map(scan_for_conflicts, files, repeat(self.config.block_size)))
        else:
            scans = [scan_for_conflicts(f, self.config.block_size) for f in files]

        return AnalysisResult(
            files=dict(trace.files),
            scans=scans,
            diagnostics=list(trace.diagnostics),
            truncated=trace.truncated,
        )
