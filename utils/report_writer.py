# utils/report_writer.py
# This file is part of dxt-conflicts - Parallel I/O conflict detection for Darshan DXT traces
#
# Text and JSON rendering of analysis results

import json
from typing import TextIO

from model.file_aggregate import FileAggregate
from model.reports import (
    AnomalyReport,
    ConflictReport,
    FalseSharingReport,
    RejectedEvent,
    UnrecognizedLine,
)


def format_report(report) -> str:
    """Render one scan report or ingestion diagnostic as a single line."""
    if isinstance(report, ConflictReport):
        lo, hi = report.byte_range
        if report.time_range is None:
            when = "no time overlap"
        else:
            when = f"time overlap {report.time_range[0]:.4f}..{report.time_range[1]:.4f}"
        return (f"CONFLICT {report.hazard} bytes {lo}..{hi}, {when}: "
                f"{report.first} / {report.second}")
    if isinstance(report, FalseSharingReport):
        lo, hi = report.block_range
        return f"FALSE-SHARING block {lo}..{hi}: {report.first} / {report.second}"
    if isinstance(report, AnomalyReport):
        return f"ANOMALY {report.description}: {report.first} / {report.second}"
    if isinstance(report, UnrecognizedLine):
        return f"UNRECOGNIZED line {report.line_number}: {report.text}"
    if isinstance(report, RejectedEvent):
        return f"REJECTED line {report.line_number} ({report.reason}): {report.text}"
    raise TypeError(f"not a report: {report!r}")


def write_events(f: FileAggregate, out: TextIO) -> None:
    """List a file's events in canonical order."""
    out.write(f"File {f.name}\n")
    for ev in f.events:
        out.write(f"{ev}\n")


def write_text(result, out: TextIO, dump_events: bool = False) -> None:
    """Write an AnalysisResult as human-readable text."""
    if dump_events:
        for f in result.files.values():
            write_events(f, out)
        out.write("\n")

    for scan in result.scans:
        out.write(f"File {scan.file_name} ({scan.file_id})\n")
        for report in scan.reports:
            out.write(f"  {format_report(report)}\n")

    if result.diagnostics:
        out.write("Diagnostics\n")
        for diag in result.diagnostics:
            out.write(f"  {format_report(diag)}\n")

    summary = (f"{len(result.scans)} files, {result.conflict_count} conflicts, "
               f"{result.false_sharing_count} false sharing, {result.anomaly_count} anomalies")
    if result.truncated:
        summary += " (trace truncated)"
    out.write(f"{summary}\n")


def write_json(result, out: TextIO, dump_events: bool = False) -> None:
    """Write an AnalysisResult as one JSON document."""
    files = []
    for scan in result.scans:
        entry = scan.to_dict()
        if dump_events:
            entry["events"] = [ev.to_dict() for ev in result.files[scan.file_id].events]
        files.append(entry)

    document = {
        "files": files,
        "diagnostics": [d.to_dict() for d in result.diagnostics],
        "truncated": result.truncated,
        "summary": {
            "files": len(result.scans),
            "conflicts": result.conflict_count,
            "false_sharing": result.false_sharing_count,
            "anomalies": result.anomaly_count,
        },
    }
    json.dump(document, out, indent=2)
    out.write("\n")
