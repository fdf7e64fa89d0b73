"""
Baseline scheduler implementations: FCFS, non-preemptive SJF and Round Robin.
Used to benchmark MLFQ against simpler policies on the same workload.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, List, Optional, Sequence

from .core import ProcessRecord, ProcessSpec, ProcessState, fresh_records
from .simulator import SimulationResult
from .utils import IDLE, Event, EventLogger, TimelineEntry


class BaseScheduler(ABC):
    """Abstract base class for the baseline engines.

    Every instance builds its own records from the specs it is given, so
    runs never see each other's state.
    """

    ALGORITHM = "BASE"

    def __init__(self, processes: Sequence[ProcessSpec], logger: Optional[EventLogger] = None):
        # Stable sort by arrival only; equal arrivals keep input order
        ordered = sorted(processes, key=lambda s: s.arrival_time)
        self.records: List[ProcessRecord] = fresh_records(ordered, order_by_arrival=False)
        self.logger = logger if logger is not None else EventLogger()
        self.current_time = 0
        self.busy_time = 0
        self.context_switches = 0
        self.completed = 0
        self.timeline: List[TimelineEntry] = []

    @abstractmethod
    def run(self) -> SimulationResult:
        """Run the workload to completion."""
        pass

    def dispatch(self, p: ProcessRecord) -> None:
        """Hand the CPU to `p`; every dispatch counts as a context switch."""
        p.state = ProcessState.RUNNING
        p.mark_started(self.current_time)
        self.context_switches += 1
        self.logger.log_event(self.current_time, Event.DISPATCH, p.pid, level=0)

    def execute(self, p: ProcessRecord, units: int = 1) -> None:
        for _ in range(units):
            self.timeline.append((p.pid, 0))
        p.remaining_time -= units
        self.busy_time += units
        self.current_time += units

    def complete(self, p: ProcessRecord) -> None:
        p.completion_time = self.current_time
        p.state = ProcessState.COMPLETED
        self.completed += 1
        self.logger.log_event(self.current_time, Event.COMPLETE, p.pid, level=0)

    def idle(self) -> None:
        self.timeline.append(IDLE)
        self.current_time += 1

    def arrive(self, p: ProcessRecord) -> None:
        p.state = ProcessState.WAITING
        self.logger.log_event(p.arrival_time, Event.ARRIVAL, p.pid, to_level=0)

    def result(self) -> SimulationResult:
        return SimulationResult(
            algorithm=self.ALGORITHM,
            processes=self.records,
            timeline=self.timeline,
            total_time=self.current_time,
            busy_time=self.busy_time,
            context_switches=self.context_switches,
            logger=self.logger,
        )


class FCFSScheduler(BaseScheduler):
    """First Come First Serve scheduler implementation."""

    ALGORITHM = "FCFS"

    def run(self) -> SimulationResult:
        for p in self.records:
            while self.current_time < p.arrival_time:
                self.idle()
            self.arrive(p)
            self.dispatch(p)
            self.execute(p, p.burst_time)
            self.complete(p)
        return self.result()


class SJFScheduler(BaseScheduler):
    """Non-preemptive Shortest Job First scheduler."""

    ALGORITHM = "SJF"

    def pick_shortest(self) -> Optional[ProcessRecord]:
        shortest: Optional[ProcessRecord] = None
        for p in self.records:
            if p.is_complete or p.arrival_time > self.current_time:
                continue
            # Strict comparison keeps the earliest candidate on ties
            if shortest is None or p.burst_time < shortest.burst_time:
                shortest = p
        return shortest

    def run(self) -> SimulationResult:
        while self.completed < len(self.records):
            for waiting in self.records:
                if waiting.state is ProcessState.NEW and waiting.arrival_time <= self.current_time:
                    self.arrive(waiting)
            p = self.pick_shortest()
            if p is None:
                self.idle()
                continue
            self.dispatch(p)
            self.execute(p, p.remaining_time)
            self.complete(p)
        return self.result()


class RoundRobinScheduler(BaseScheduler):
    """Round Robin scheduler over a single FIFO queue."""

    ALGORITHM = "Round Robin"

    def __init__(self, processes: Sequence[ProcessSpec], time_quantum: int = 4,
                 logger: Optional[EventLogger] = None):
        if time_quantum < 1:
            raise ValueError("time_quantum must be a positive integer")
        super().__init__(processes, logger=logger)
        self.time_quantum = time_quantum

    def run(self) -> SimulationResult:
        ready: Deque[ProcessRecord] = deque()
        next_arrival = 0
        current: Optional[ProcessRecord] = None
        quantum_used = 0

        while self.completed < len(self.records):
            while next_arrival < len(self.records) and self.records[next_arrival].arrival_time <= self.current_time:
                self.arrive(self.records[next_arrival])
                ready.append(self.records[next_arrival])
                next_arrival += 1

            if current is None:
                if not ready:
                    self.idle()
                    continue
                current = ready.popleft()
                quantum_used = 0
                self.dispatch(current)

            self.execute(current)
            quantum_used += 1

            if current.is_complete:
                self.complete(current)
                current = None
            elif quantum_used >= self.time_quantum:
                # Re-queued before this tick's arrivals are admitted
                current.state = ProcessState.WAITING
                ready.append(current)
                self.logger.log_event(self.current_time, Event.REQUEUE, current.pid, level=0,
                                      to_level=0, reason="quantum exhausted")
                current = None

        return self.result()
