# tests/logic_tests/test_scanner_scenarios.py

"""
Scenario tests for the per-file conflict sweep: reference traces with known
report sets, plus the structural guarantees every report set must satisfy
(ranks differ, a write is always involved, results are deterministic and
block quantization only ever adds detections).
"""

import random

import pytest
from logic.scanner import ScanResult, scan_for_conflicts
from model.event import Api, Event, Mode
from model.file_aggregate import FileAggregate
from model.reports import AnomalyReport, ConflictReport, FalseSharingReport


def E(rank: int, mode: str, offset: int, length: int, start: float = 0.0, end: float = 1.0,
      api: Api = Api.POSIX) -> Event:
    """Factory for creating Event objects for testing."""
    return Event(rank, Mode(mode), api, offset, length, start, end)


def make_file(*events: Event, file_id: str = "42") -> FileAggregate:
    f = FileAggregate(file_id, f"/scratch/file_{file_id}")
    for ev in events:
        f.add_event(ev)
    return f


def random_events(seed: int, count: int = 60, ranks: int = 4, span: int = 2000):
    rng = random.Random(seed)
    events = []
    for _ in range(count):
        start = round(rng.uniform(0.0, 10.0), 4)
        events.append(E(
            rng.randrange(ranks),
            rng.choice(["read", "write"]),
            rng.randrange(span),
            rng.randrange(1, 200),
            start,
            round(start + rng.uniform(0.0, 0.5), 4),
        ))
    return events


class TestReferenceScenarios:
    """Known traces with known report sets."""

    def test_scenario_a_write_then_read_back(self):
        """
        Rank 0 writes ten contiguous 1 MiB blocks, rank 1 later reads the same
        ten blocks. Every pair overlaps in bytes and one side writes, so there
        are ten conflicts even though the accesses are far apart in time.
        """
        mib = 1048576
        events = []
        for seg in range(10):
            events.append(E(0, "write", seg * mib, mib, 4.8 + seg * 0.01, 4.8 + seg * 0.01 + 0.005))
        for seg in range(10):
            events.append(E(1, "read", seg * mib, mib, 6.8 + seg * 0.01, 6.8 + seg * 0.01 + 0.005))

        result = scan_for_conflicts(make_file(*events))

        assert len(result.conflicts) == 10
        assert result.false_sharing == []
        assert result.anomalies == []
        for seg, report in enumerate(result.conflicts):
            assert report.byte_range == (seg * mib, (seg + 1) * mib - 1)
            assert report.time_range is None
            assert {report.first.rank, report.second.rank} == {0, 1}
            assert report.hazard == "RAW"

    def test_scenario_b_partial_overlap(self):
        """Rank 0 writes [0,100), rank 1 writes [50,150): one conflict on [50,100)."""
        result = scan_for_conflicts(make_file(
            E(0, "write", 0, 100), E(1, "write", 50, 100)
        ))
        assert len(result.reports) == 1
        report = result.conflicts[0]
        assert report.byte_range == (50, 99)
        assert report.hazard == "WAW"

    def test_scenario_c_disjoint(self):
        """Rank 0 writes [0,100), rank 1 reads [200,300): nothing to report."""
        result = scan_for_conflicts(make_file(
            E(0, "write", 0, 100), E(1, "read", 200, 100)
        ))
        assert result.reports == []

    def test_scenario_d_same_rank_nesting(self):
        """A POSIX write nested in rank 0's MPI-IO write is merged silently."""
        mpi = E(0, "write", 0, 1000, 1.0, 2.0, Api.MPIIO)
        posix = E(0, "write", 0, 500, 1.1, 1.9)
        result = scan_for_conflicts(make_file(posix, mpi))
        assert result.reports == []
        assert result.events_merged == 1
        assert result.events_scanned == 2

    def test_scenario_e_block_false_sharing(self):
        """With 100-byte blocks, writes to bytes 0..3 and 96..99 share block 0..99."""
        f = make_file(E(0, "write", 0, 4), E(1, "write", 96, 4))
        result = scan_for_conflicts(f, block_size=100)
        assert result.conflicts == []
        assert len(result.false_sharing) == 1
        assert result.false_sharing[0].block_range == (0, 99)

        assert scan_for_conflicts(f).reports == []


class TestSweepBehavior:
    """Finer points of the sweep sequence."""

    def test_same_rank_mismatch_reported_as_anomaly(self):
        """Overlapping same-rank writes that do not nest are flagged and dropped."""
        first = E(0, "write", 0, 100, 1.0, 2.0)
        second = E(0, "write", 50, 100, 3.0, 4.0)
        result = scan_for_conflicts(make_file(first, second))
        assert len(result.anomalies) == 1
        anomaly = result.anomalies[0]
        assert anomaly.first == second
        assert anomaly.second == first
        assert result.conflicts == []

    def test_discarded_event_never_conflicts(self):
        """
        A merged event is not admitted, so a later access from another rank
        is only reported against the enclosing event.
        """
        mpi = E(0, "write", 0, 1000, 1.0, 2.0, Api.MPIIO)
        posix = E(0, "write", 0, 500, 1.1, 1.9)
        reader = E(1, "read", 100, 10, 5.0, 6.0)
        result = scan_for_conflicts(make_file(mpi, posix, reader))
        assert len(result.conflicts) == 1
        assert result.conflicts[0].second == mpi

    def test_anomalous_event_never_conflicts(self):
        first = E(0, "write", 0, 100, 1.0, 2.0)
        stray = E(0, "write", 50, 100, 3.0, 4.0)
        other = E(1, "read", 120, 10, 5.0, 6.0)
        result = scan_for_conflicts(make_file(first, stray, other))
        assert result.conflicts == []
        assert len(result.anomalies) == 1

    def test_false_sharing_skipped_when_bytes_overlap(self):
        """
        Once the event shares bytes with another rank, block sharing with a
        third rank is not reported.
        """
        f = make_file(
            E(1, "write", 0, 4),
            E(2, "read", 90, 20),
            E(0, "write", 96, 4),
        )
        result = scan_for_conflicts(f, block_size=100)
        assert len(result.conflicts) == 1
        assert result.false_sharing == []

    def test_read_read_overlap_suppresses_false_sharing(self):
        f = make_file(
            E(1, "write", 0, 4),
            E(2, "read", 90, 20),
            E(0, "read", 96, 4),
        )
        result = scan_for_conflicts(f, block_size=100)
        assert result.reports == []

    def test_concurrent_conflict_reports_time_range(self):
        result = scan_for_conflicts(make_file(
            E(0, "write", 0, 100, 1.0, 3.0), E(1, "read", 10, 10, 2.0, 4.0)
        ))
        report = result.conflicts[0]
        assert report.time_range == (2.0, 3.0)
        assert report.concurrent
        assert report.hazard == "RAW"

    def test_write_after_read_hazard(self):
        result = scan_for_conflicts(make_file(
            E(0, "read", 0, 100, 1.0, 2.0), E(1, "write", 0, 100, 3.0, 4.0)
        ))
        assert result.conflicts[0].hazard == "WAR"

    def test_reports_carry_file_identity(self):
        result = scan_for_conflicts(make_file(
            E(0, "write", 0, 10), E(1, "write", 0, 10), file_id="777"
        ))
        assert isinstance(result, ScanResult)
        assert result.file_id == "777"
        assert result.file_name == "/scratch/file_777"
        assert all(r.file_id == "777" for r in result.reports)

    def test_empty_file_scans_cleanly(self):
        result = scan_for_conflicts(make_file())
        assert result.reports == []
        assert result.events_scanned == 0
        assert result.peak_active == 0

    def test_expired_events_do_not_accumulate(self):
        """Contiguous non-overlapping accesses keep the active window at one event."""
        events = [E(r % 3, "write", i * 10, 10) for i, r in enumerate(range(50))]
        result = scan_for_conflicts(make_file(*events))
        assert result.reports == []
        assert result.peak_active == 1

    def test_to_dict(self):
        result = scan_for_conflicts(make_file(E(0, "write", 0, 100), E(1, "write", 50, 100)))
        d = result.to_dict()
        assert d["file_id"] == "42"
        assert d["events_scanned"] == 2
        assert d["peak_active"] == 2
        assert d["ranks"] == [0, 1]
        assert d["reports"][0]["kind"] == "conflict"
        assert d["reports"][0]["byte_range"] == [50, 99]


class TestReportInvariants:
    """Properties every report set satisfies, checked over random traces."""

    @pytest.mark.parametrize("seed", range(8))
    def test_rank_difference_and_write_involvement(self, seed):
        result = scan_for_conflicts(make_file(*random_events(seed)), block_size=64)
        for report in result.reports:
            if isinstance(report, (ConflictReport, FalseSharingReport)):
                assert report.first.rank != report.second.rank
            if isinstance(report, ConflictReport):
                assert report.first.is_write or report.second.is_write
                assert report.first.overlaps(report.second)
                assert report.second.overlaps(report.first)
                lo, hi = report.byte_range
                assert lo <= hi
            if isinstance(report, FalseSharingReport):
                assert report.first.is_write and report.second.is_write
                assert not report.first.overlaps(report.second)
            if isinstance(report, AnomalyReport):
                assert report.first.rank == report.second.rank

    @pytest.mark.parametrize("seed", range(4))
    def test_deterministic(self, seed):
        events = random_events(seed)
        first = scan_for_conflicts(make_file(*events), block_size=32)
        second = scan_for_conflicts(make_file(*events), block_size=32)
        assert first.reports == second.reports

    @pytest.mark.parametrize("seed", range(6))
    def test_block_size_only_adds_detections(self, seed):
        """Larger blocks keep every byte conflict and never lose false sharing."""
        events = random_events(seed)
        previous_conflicts = None
        previous_sharing = -1
        for block_size in (1, 16, 64, 256):
            result = scan_for_conflicts(make_file(*events), block_size=block_size)
            conflicts = {(r.first, r.second) for r in result.conflicts}
            if previous_conflicts is not None:
                assert previous_conflicts <= conflicts
            assert len(result.false_sharing) >= previous_sharing
            previous_conflicts = conflicts
            previous_sharing = len(result.false_sharing)

    @pytest.mark.parametrize("seed", range(4))
    def test_scan_matches_pairwise_reference(self, seed):
        """
        For traces without same-rank overlaps, the sweep finds exactly the
        conflicting pairs a brute-force pairwise comparison finds.
        """
        events = []
        for ev in random_events(seed, count=40):
            if not any(o.rank == ev.rank and o.overlaps(ev) for o in events):
                events.append(ev)

        result = scan_for_conflicts(make_file(*events))
        found = {frozenset((r.first, r.second)) for r in result.conflicts}

        expected = set()
        for i, a in enumerate(events):
            for b in events[i + 1:]:
                if a.rank != b.rank and a.overlaps(b) and (a.is_write or b.is_write):
                    expected.add(frozenset((a, b)))
        assert found == expected
