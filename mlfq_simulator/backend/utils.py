from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple
import csv
import json

import numpy as np

from .core import ProcessRecord


TimelineEntry = Tuple[Optional[int], Optional[int]]
IDLE: TimelineEntry = (None, None)


class Event:
    """Event kinds emitted by the engines."""
    ARRIVAL = "arrival"
    DISPATCH = "dispatch"
    PREEMPT = "preempt"
    DEMOTE = "demote"
    REQUEUE = "requeue"
    PROMOTE = "promote"
    BOOST = "boost"
    COMPLETE = "complete"


EventListener = Callable[[Dict[str, Any]], None]


class EventLogger:
    """Structured event stream for one simulation run.

    Engines only append here; anything that wants to show the events
    subscribes a listener or reads `events` after the run.
    """

    def __init__(self, listeners: Optional[Iterable[EventListener]] = None) -> None:
        self.events: List[Dict[str, Any]] = []
        self.listeners: List[EventListener] = list(listeners or [])

    def subscribe(self, listener: EventListener) -> None:
        self.listeners.append(listener)

    def log_event(
        self,
        time_s: int,
        event: str,
        pid: Optional[int] = None,
        level: Optional[int] = None,
        to_level: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> None:
        record = {
            "time": time_s,
            "event": event,
            "pid": pid,
            "level": level,
            "to_level": to_level,
            "reason": reason,
        }
        self.events.append(record)
        for listener in self.listeners:
            listener(record)

    def of_kind(self, event: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e["event"] == event]

    def export_json(self, path: str, timeline: Optional[Sequence[TimelineEntry]] = None) -> None:
        data = {
            "events": self.events,
            "timeline": timeline_segments(timeline or []),
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def export_csv(self, base_path_no_ext: str, timeline: Optional[Sequence[TimelineEntry]] = None) -> None:
        with open(f"{base_path_no_ext}_events.csv", "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=["time", "event", "pid", "level", "to_level", "reason"])
            writer.writeheader()
            for row in self.events:
                writer.writerow(row)
        with open(f"{base_path_no_ext}_timeline.csv", "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=["start", "end", "pid", "level"])
            writer.writeheader()
            for row in timeline_segments(timeline or []):
                writer.writerow(row)


@dataclass(frozen=True)
class Metrics:
    avg_turnaround: float
    avg_waiting: float
    throughput: float
    cpu_utilization: float
    context_switches: int

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def compute_turnaround_times(records: Iterable[ProcessRecord]) -> Dict[int, int]:
    tat: Dict[int, int] = {}
    for p in records:
        if p.completion_time is None:
            continue
        tat[p.pid] = p.completion_time - p.arrival_time
    return tat


def compute_waiting_times(records: Iterable[ProcessRecord]) -> Dict[int, int]:
    waiting: Dict[int, int] = {}
    for p in records:
        if p.completion_time is None:
            continue
        waiting[p.pid] = (p.completion_time - p.arrival_time) - p.burst_time
    return waiting


def compute_avg(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def compute_metrics(records: Sequence[ProcessRecord], busy_time: int, context_switches: int) -> Metrics:
    """Aggregate metrics for a finished run.

    Divisors are clamped to one so an empty run or a run that ends at
    time 0 still yields a defined value.
    """
    # Records may share a pid, so average per record
    done = [p for p in records if p.completion_time is not None]
    turnaround = [p.turnaround_time for p in done]
    waiting = [p.waiting_time for p in done]
    last_completion = max((p.completion_time for p in done), default=0)
    elapsed = max(1, last_completion)
    return Metrics(
        avg_turnaround=compute_avg(turnaround),
        avg_waiting=compute_avg(waiting),
        throughput=len(records) / elapsed,
        cpu_utilization=100.0 * busy_time / elapsed,
        context_switches=context_switches,
    )


def timeline_segments(timeline: Sequence[TimelineEntry]) -> List[Dict[str, Any]]:
    """Merge consecutive identical timeline units into [start, end) segments."""
    segments: List[Dict[str, Any]] = []
    for t, (pid, level) in enumerate(timeline):
        if segments and segments[-1]["pid"] == pid and segments[-1]["level"] == level:
            segments[-1]["end"] = t + 1
            continue
        segments.append({"start": t, "end": t + 1, "pid": pid, "level": level})
    return segments


def queue_usage(timeline: Sequence[TimelineEntry], num_levels: int) -> np.ndarray:
    """Busy units spent at each level; idle units are not counted."""
    levels = np.array([level for _, level in timeline if level is not None], dtype=int)
    if levels.size == 0:
        return np.zeros(num_levels, dtype=int)
    return np.bincount(levels, minlength=num_levels)
