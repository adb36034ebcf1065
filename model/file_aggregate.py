# model/file_aggregate.py

"""
FileAggregate collects every access recorded for one file during a run.

Files are keyed by the Darshan file id (a hash of the full path) rather than
by name: Darshan truncates long paths, so two different files can share a
recorded name.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .event import Event


@dataclass(slots=True)
class FileAggregate:
    """
    Events of one file, kept in canonical (offset, start time) order.

    Attributes:
      id: Darshan file id.
      name: File path as recorded (possibly truncated); reporting only.
    """
    id: str
    name: str
    _events: List[Event] = field(default_factory=list)
    _ordered: Optional[Tuple[Event, ...]] = None

    def add_event(self, event: Event) -> None:
        """Record one more access. Duplicate events are kept."""
        self._events.append(event)
        self._ordered = None

    @property
    def events(self) -> Tuple[Event, ...]:
        """All events in canonical order; ties keep insertion order."""
        if self._ordered is None:
            self._ordered = tuple(sorted(self._events, key=Event.sort_key))
        return self._ordered

    @property
    def by_rank(self) -> Dict[int, Tuple[Event, ...]]:
        """Each rank's own events, in canonical order."""
        grouped: Dict[int, List[Event]] = {}
        for ev in self.events:
            grouped.setdefault(ev.rank, []).append(ev)
        return {rank: tuple(evs) for rank, evs in sorted(grouped.items())}

    @property
    def ranks(self) -> List[int]:
        return sorted({ev.rank for ev in self._events})

    def rank_summary(self) -> Dict[int, int]:
        """Number of events per rank."""
        return {rank: len(evs) for rank, evs in self.by_rank.items()}

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self):
        return iter(self.events)

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"
