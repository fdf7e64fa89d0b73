"""
Core data structures for the MLFQ simulator.
Includes ProcessSpec, ProcessRecord and the multilevel ReadyQueues.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, Iterator, List, Optional, Sequence, Tuple


class ProcessState(Enum):
    """Where a process currently lives during a run."""
    NEW = "NEW"
    WAITING = "WAITING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class ProcessSpec:
    """Immutable (pid, arrival, burst) triple a run is built from."""
    pid: int
    arrival_time: int
    burst_time: int

    def __post_init__(self) -> None:
        if self.arrival_time < 0:
            raise ValueError(f"arrival_time cannot be negative (pid {self.pid})")
        if self.burst_time < 1:
            raise ValueError(f"burst_time must be at least 1 (pid {self.pid})")

    def to_record(self) -> "ProcessRecord":
        return ProcessRecord(pid=self.pid, arrival_time=self.arrival_time, burst_time=self.burst_time)


@dataclass
class ProcessRecord:
    """Per-run simulation state of one process.

    `burst_time` is the original burst and is never touched by an engine;
    `remaining_time` counts down to zero as the process executes.
    """
    pid: int
    arrival_time: int
    burst_time: int
    remaining_time: Optional[int] = None
    level: int = 0
    start_time: Optional[int] = None
    completion_time: Optional[int] = None
    ticks_in_quantum: int = 0
    ticks_waiting: int = 0
    started: bool = False
    state: ProcessState = ProcessState.NEW

    def __post_init__(self):
        self.remaining_time = self.burst_time if self.remaining_time is None else self.remaining_time

    @property
    def is_complete(self) -> bool:
        return self.remaining_time <= 0

    @property
    def turnaround_time(self) -> Optional[int]:
        if self.completion_time is None:
            return None
        return self.completion_time - self.arrival_time

    @property
    def waiting_time(self) -> Optional[int]:
        tat = self.turnaround_time
        if tat is None:
            return None
        return tat - self.burst_time

    def mark_started(self, now: int) -> None:
        if not self.started:
            self.started = True
            self.start_time = now


def fresh_records(specs: Sequence[ProcessSpec], order_by_arrival: bool = True) -> List[ProcessRecord]:
    """Build a brand new set of records for one engine run."""
    if order_by_arrival:
        specs = sorted(specs, key=lambda s: (s.arrival_time, s.pid))
    return [spec.to_record() for spec in specs]


class ReadyQueues:
    """One FIFO queue per priority level, holding handles into a record arena.

    A handle is the index of a record in the owning engine's record list.
    The engine moves handles between queues and its running slot, so a
    record is never referenced from two places at once.
    """

    def __init__(self, num_levels: int):
        if num_levels < 1:
            raise ValueError("num_levels must be at least 1")
        self._levels: List[Deque[int]] = [deque() for _ in range(num_levels)]

    def push_back(self, level: int, handle: int) -> None:
        self._levels[level].append(handle)

    def push_front(self, level: int, handle: int) -> None:
        self._levels[level].appendleft(handle)

    def pop_front(self, level: int) -> int:
        return self._levels[level].popleft()

    def highest_nonempty(self) -> Optional[int]:
        """Index of the highest-priority level with work, or None."""
        for level, queue in enumerate(self._levels):
            if queue:
                return level
        return None

    def any_above(self, level: int) -> bool:
        """True when a level strictly higher in priority than `level` has work."""
        return any(self._levels[q] for q in range(level))

    def drain(self, level: int) -> List[int]:
        """Remove and return every handle queued at `level`, in FIFO order."""
        handles = list(self._levels[level])
        self._levels[level].clear()
        return handles

    def purge(self, predicate: Callable[[int], bool]) -> List[int]:
        """Drop handles matching `predicate` from every level."""
        removed: List[int] = []
        for level, queue in enumerate(self._levels):
            kept = [h for h in queue if not predicate(h)]
            if len(kept) != len(queue):
                removed.extend(h for h in queue if predicate(h))
                self._levels[level] = deque(kept)
        return removed

    def waiting(self) -> Iterator[Tuple[int, int]]:
        """Yield (level, handle) pairs for every queued handle."""
        for level, queue in enumerate(self._levels):
            for handle in queue:
                yield level, handle

