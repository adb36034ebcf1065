# tests/conftest.py
# This file is part of dxt-conflicts - Parallel I/O conflict detection for Darshan DXT traces
#
# Test configuration and shared fixtures for pytest

"""Test configuration and shared fixtures for the conflict analysis tests.

The configuration handles:
- Python path setup for module imports
- Shared DXT trace text for ingestion and end-to-end tests
"""

import sys
import pytest
from pathlib import Path

# Ensure project modules can be imported
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from utils.logger import configure_logging  # noqa: E402


SAMPLE_FILE_ID = "8515199880342690440"
SAMPLE_FILE_NAME = "/mnt/c/Ed/UI/Research/Darshan/conflict_app.out.RAW.POSIX.NONE"

_WRITE_TIMES = [
    (4.8324, 4.8436), (4.8436, 4.8534), (4.8534, 4.8637), (4.8638, 4.8706),
    (4.8706, 4.8769), (4.8769, 4.8832), (4.8832, 4.8892), (4.8892, 4.8944),
    (4.8944, 4.9000), (4.9000, 4.9059),
]
_READ_TIMES = [
    (6.8327, 6.8392), (6.8392, 6.8434), (6.8434, 6.8473), (6.8473, 6.8513),
    (6.8513, 6.8553), (6.8553, 6.8601), (6.8601, 6.8639), (6.8639, 6.8673),
    (6.8673, 6.8709), (6.8709, 6.8747),
]


def _section(rank: int, direction: str, times) -> str:
    writes = 10 if direction == "write" else 0
    reads = 10 if direction == "read" else 0
    lines = [
        f"# DXT, file_id: {SAMPLE_FILE_ID}, file_name: {SAMPLE_FILE_NAME}",
        f"# DXT, rank: {rank}, hostname: XPS13",
        f"# DXT, write_count: {writes}, read_count: {reads}",
        "# DXT, mnt_pt: /mnt/c, fs_type: 9p",
        "# Module    Rank  Wt/Rd  Segment          Offset       Length    Start(s)      End(s)",
    ]
    for segment, (start, end) in enumerate(times):
        offset = segment * 1048576
        lines.append(
            f" X_POSIX {rank:7d} {direction:>6} {segment:8d} {offset:15d} {1048576:15d}"
            f" {start:11.4f} {end:11.4f}"
        )
    return "\n".join(lines) + "\n"


SAMPLE_TRACE = (
    "# darshan log version: 3.21\n"
    "# exe: ./conflict_app\n"
    "\n"
    + _section(0, "write", _WRITE_TIMES)
    + "\n"
    + _section(1, "read", _READ_TIMES)
)


@pytest.fixture
def sample_trace_text():
    """Two-rank trace: rank 0 writes ten 1 MiB segments, rank 1 reads them back.

    Returns:
        str: Trace text in darshan-dxt-parser format
    """
    return SAMPLE_TRACE


@pytest.fixture
def sample_trace_file(tmp_path):
    """Write the two-rank sample trace to a temporary file.

    Returns:
        Path: Location of the trace file
    """
    path = tmp_path / "sample.dxt"
    path.write_text(SAMPLE_TRACE, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore the default log level and stream after each test.

    CLI tests bind the global logger to pytest's captured stderr.
    """
    yield
    configure_logging()
