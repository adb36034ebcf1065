# logic/__init__.py

"""Conflict analysis interface.

This package provides:
  • scan_for_conflicts: per-file sweep producing conflict reports
  • ConflictAnalysis: runner that scans every file of a DXT trace
  • AnalysisConfig: run options (block size, workers, output)
"""

from .config import AnalysisConfig, ConfigError
from .runner import AnalysisResult, ConflictAnalysis
from .scanner import ScanResult, scan_for_conflicts

__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "ConfigError",
    "ConflictAnalysis",
    "ScanResult",
    "scan_for_conflicts",
]
