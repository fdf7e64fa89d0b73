from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .config import DEFAULT_CONFIG, SchedulerConfig
from .core import ProcessRecord, ProcessSpec, ProcessState, ReadyQueues, fresh_records
from .utils import IDLE, Event, EventLogger, Metrics, TimelineEntry, compute_metrics


@dataclass
class SimulationResult:
    algorithm: str
    processes: List[ProcessRecord]
    timeline: List[TimelineEntry]
    total_time: int
    busy_time: int
    context_switches: int
    logger: EventLogger = field(default_factory=EventLogger)

    @property
    def metrics(self) -> Metrics:
        return compute_metrics(self.processes, self.busy_time, self.context_switches)

    def process(self, pid: int) -> ProcessRecord:
        return next(p for p in self.processes if p.pid == pid)


class MLFQSimulator:
    """Multilevel feedback queue engine, advanced one time unit per tick.

    Each tick runs, in order: admission, queue hygiene, aging sweep,
    priority boost, preemption check, dispatch, execution, waiting-time
    accounting and the completion/demotion check.
    """

    ALGORITHM = "MLFQ"

    def __init__(self, processes: Sequence[ProcessSpec], config: SchedulerConfig | None = None,
                 logger: EventLogger | None = None):
        self.config = config or DEFAULT_CONFIG
        self.logger = logger if logger is not None else EventLogger()
        self.records: List[ProcessRecord] = fresh_records(processes)
        self.queues = ReadyQueues(self.config.num_levels)
        self.current_time = 0
        self.running: Optional[int] = None
        self.completed = 0
        self.busy_time = 0
        self.context_switches = 0
        self.timeline: List[TimelineEntry] = []

    def run(self) -> SimulationResult:
        while self.completed < len(self.records):
            self._admit_arrivals()
            self._purge_finished()

            if self._is_period(self.config.aging_check_interval):
                self._apply_aging()
            if self._is_period(self.config.boost_interval):
                self._apply_priority_boost()

            self._check_preemption()

            if self.running is None:
                level = self.queues.highest_nonempty()
                if level is None:
                    if not self._has_future_work():
                        break
                    # Idle units are recorded one at a time, like busy ones
                    self.timeline.append(IDLE)
                    self.current_time += 1
                    continue
                self._dispatch(level)

            self._execute()
            self._age_waiting()
            self._finish_tick()
            self.current_time += 1

        return SimulationResult(
            algorithm=self.ALGORITHM,
            processes=self.records,
            timeline=self.timeline,
            total_time=self.current_time,
            busy_time=self.busy_time,
            context_switches=self.context_switches,
            logger=self.logger,
        )

    def _is_period(self, interval: int) -> bool:
        return self.current_time > 0 and self.current_time % interval == 0

    def _admit_arrivals(self) -> None:
        for handle, p in enumerate(self.records):
            if p.state is ProcessState.NEW and p.arrival_time == self.current_time and not p.started:
                p.level = 0
                p.state = ProcessState.WAITING
                self.queues.push_back(0, handle)
                self.logger.log_event(self.current_time, Event.ARRIVAL, p.pid, to_level=0)

    def _purge_finished(self) -> None:
        # Only stale handles can match; completed records leave the queues on completion
        self.queues.purge(lambda h: self.records[h].remaining_time <= 0)

    def _apply_aging(self) -> None:
        threshold = self.config.aging_threshold
        for level in range(1, self.config.num_levels):
            for handle in self.queues.drain(level):
                p = self.records[handle]
                if handle != self.running and p.ticks_waiting >= threshold:
                    p.level = level - 1
                    p.ticks_waiting = 0
                    p.ticks_in_quantum = 0
                    self.queues.push_back(level - 1, handle)
                    self.logger.log_event(self.current_time, Event.PROMOTE, p.pid, level=level,
                                          to_level=level - 1, reason="aging")
                else:
                    self.queues.push_back(level, handle)

    def _apply_priority_boost(self) -> None:
        moved: List[int] = []
        for level in range(1, self.config.num_levels):
            moved.extend(self.queues.drain(level))
        for handle in moved:
            p = self.records[handle]
            p.level = 0
            p.ticks_waiting = 0
            p.ticks_in_quantum = 0
            self.queues.push_back(0, handle)

        if self.running is not None:
            current = self.records[self.running]
            if current.level > 0:
                current.level = 0
                current.ticks_in_quantum = 0
        self.logger.log_event(self.current_time, Event.BOOST, to_level=0, reason=f"{len(moved)} waiting moved")

    def _check_preemption(self) -> None:
        if self.running is None:
            return
        current = self.records[self.running]
        if current.remaining_time <= 0 or not self.queues.any_above(current.level):
            return
        # Front of its own level, partial quantum kept for when it resumes
        current.state = ProcessState.WAITING
        self.queues.push_front(current.level, self.running)
        self.running = None
        self.context_switches += 1
        self.logger.log_event(self.current_time, Event.PREEMPT, current.pid, level=current.level)

    def _has_future_work(self) -> bool:
        return any(p.arrival_time > self.current_time and p.remaining_time > 0 for p in self.records)

    def _dispatch(self, level: int) -> None:
        handle = self.queues.pop_front(level)
        p = self.records[handle]
        p.state = ProcessState.RUNNING
        p.mark_started(self.current_time)
        self.running = handle
        self.context_switches += 1
        self.logger.log_event(self.current_time, Event.DISPATCH, p.pid, level=level)

    def _execute(self) -> None:
        p = self.records[self.running]
        self.timeline.append((p.pid, p.level))
        p.remaining_time -= 1
        p.ticks_in_quantum += 1
        self.busy_time += 1

    def _age_waiting(self) -> None:
        for _, handle in self.queues.waiting():
            p = self.records[handle]
            if handle != self.running and p.remaining_time > 0:
                p.ticks_waiting += 1

    def _finish_tick(self) -> None:
        p = self.records[self.running]
        end = self.current_time + 1

        if p.remaining_time == 0:
            p.completion_time = end
            p.state = ProcessState.COMPLETED
            self.completed += 1
            self.running = None
            self.logger.log_event(end, Event.COMPLETE, p.pid, level=p.level)
            return

        quantum = self.config.quantum_for(p.level)
        if quantum > 0 and p.ticks_in_quantum >= quantum:
            old_level = p.level
            if p.level < self.config.lowest_level:
                p.level += 1
            p.ticks_in_quantum = 0
            p.ticks_waiting = 0
            p.state = ProcessState.WAITING
            self.queues.push_back(p.level, self.running)
            self.running = None
            self.context_switches += 1
            kind = Event.DEMOTE if p.level != old_level else Event.REQUEUE
            self.logger.log_event(end, kind, p.pid, level=old_level, to_level=p.level, reason="quantum exhausted")


def simulate_mlfq(
    processes: Sequence[ProcessSpec],
    config: SchedulerConfig | None = None,
    logger: EventLogger | None = None,
) -> SimulationResult:
    return MLFQSimulator(processes, config=config, logger=logger).run()
