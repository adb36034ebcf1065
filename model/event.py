# model/event.py

"""
Event
=====

Immutable record of one read or write issued by one rank. The byte range
accessed is ``[offset, offset + length)``. Events order canonically by
starting offset, then start time, which is the order the conflict sweep
walks them in.

Block helpers quantize offsets to storage blocks: with a block size of 100,
offset 42 lives in the block ``0..99``.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Mode(Enum):
    READ = "read"
    WRITE = "write"


class Api(Enum):
    POSIX = "POSIX"
    MPIIO = "MPIIO"


class InvalidEventError(ValueError):
    """Raised when an event has a negative offset or an empty byte range."""


def block_start(offset: int, block_size: int) -> int:
    """Round an offset down to the beginning of its block."""
    return offset - (offset % block_size)


def block_end(offset: int, block_size: int) -> int:
    """Round an offset up to the last byte of its block."""
    return block_start(offset, block_size) + block_size - 1


@dataclass(frozen=True, slots=True)
class Event:
    rank: int
    mode: Mode
    api: Api
    offset: int
    length: int
    start_time: float
    end_time: float

    def __post_init__(self):
        if self.offset < 0:
            raise InvalidEventError(f"negative offset {self.offset}")
        if self.length <= 0:
            raise InvalidEventError(f"empty byte range (length {self.length})")

    @property
    def end_offset(self) -> int:
        """Last byte accessed (inclusive)."""
        return self.offset + self.length - 1

    @property
    def is_write(self) -> bool:
        return self.mode is Mode.WRITE

    def overlaps(self, other: Event) -> bool:
        """True if the raw byte ranges of the two events intersect."""
        return (self.offset < other.offset + other.length
                and self.offset + self.length > other.offset)

    def quantized_range(self, block_size: int) -> Tuple[int, int]:
        """Byte range rounded outward to block boundaries, both ends inclusive."""
        return (block_start(self.offset, block_size),
                block_end(self.end_offset, block_size))

    def overlaps_blocks(self, other: Event, block_size: int) -> bool:
        """True if the two events touch at least one common block."""
        this_start, this_end = self.quantized_range(block_size)
        other_start, other_end = other.quantized_range(block_size)
        return this_start <= other_end and this_end >= other_start

    def time_overlap(self, other: Event) -> Optional[Tuple[float, float]]:
        """
        Common time span of two events, or None.

        Durations are half-open ``[start, end)``; a zero-duration event is an
        instant that overlaps any span containing it.
        """
        lo = max(self.start_time, other.start_time)
        hi = min(self.end_time, other.end_time)
        if lo < hi:
            return lo, hi
        if lo == hi and (self.start_time == self.end_time or other.start_time == other.end_time):
            return lo, hi
        return None

    def covers(self, other: Event) -> bool:
        """
        True if this event is a superset of `other` in byte range, time range
        and operation kind (a write covers a read, a read only covers a read).
        """
        return (self.offset <= other.offset
                and self.end_offset >= other.end_offset
                and self.start_time <= other.start_time
                and self.end_time >= other.end_time
                and (self.is_write or not other.is_write))

    def sort_key(self) -> Tuple[int, float, int]:
        # wider access first on ties so an MPI-IO call precedes its POSIX pieces
        return self.offset, self.start_time, -self.length

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "api": self.api.value,
            "mode": self.mode.value,
            "offset": self.offset,
            "length": self.length,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }

    def __str__(self) -> str:
        return (f"rank {self.rank} bytes {self.offset}..{self.end_offset} "
                f"{self.api.value} {self.mode.value} "
                f"time {self.start_time:.4f}..{self.end_time:.4f}")
