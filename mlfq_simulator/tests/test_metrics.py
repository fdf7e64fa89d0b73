import csv
import json

import numpy as np
import pytest

from mlfq_simulator.backend.core import ProcessRecord
from mlfq_simulator.backend.utils import (
    IDLE,
    Event,
    EventLogger,
    Metrics,
    compute_avg,
    compute_metrics,
    compute_turnaround_times,
    compute_waiting_times,
    queue_usage,
    timeline_segments,
)


def finished(pid, arrival, burst, completion):
    return ProcessRecord(pid=pid, arrival_time=arrival, burst_time=burst, remaining_time=0,
                         completion_time=completion)


@pytest.fixture
def completed_records():
    return [finished(1, 0, 5, 5), finished(2, 1, 3, 8)]


def test_per_process_times(completed_records):
    assert compute_turnaround_times(completed_records) == {1: 5, 2: 7}
    assert compute_waiting_times(completed_records) == {1: 0, 2: 4}


def test_unfinished_records_are_skipped():
    records = [finished(1, 0, 2, 2), ProcessRecord(pid=2, arrival_time=0, burst_time=4)]
    assert compute_turnaround_times(records) == {1: 2}
    assert compute_waiting_times(records) == {1: 0}


def test_compute_metrics(completed_records):
    m = compute_metrics(completed_records, busy_time=8, context_switches=3)
    assert m == Metrics(avg_turnaround=6.0, avg_waiting=2.0, throughput=0.25,
                        cpu_utilization=100.0, context_switches=3)
    assert m.as_dict()["throughput"] == pytest.approx(0.25)


def test_shared_pids_count_once_per_record():
    records = [finished(1, 0, 5, 5), finished(1, 1, 3, 8)]
    m = compute_metrics(records, busy_time=8, context_switches=2)
    assert m.avg_turnaround == pytest.approx(6.0)
    assert m.avg_waiting == pytest.approx(2.0)
    assert m.throughput == pytest.approx(0.25)


def test_degenerate_metrics_are_clamped():
    m = compute_metrics([], busy_time=0, context_switches=0)
    assert m == Metrics(0.0, 0.0, 0.0, 0.0, 0)


def test_compute_avg():
    assert compute_avg([]) == 0.0
    assert compute_avg([1, 2, 6]) == pytest.approx(3.0)


def test_timeline_segments_merge_runs():
    timeline = [(1, 0), (1, 0), IDLE, (1, 1), (2, 1), (2, 1)]
    assert timeline_segments(timeline) == [
        {"start": 0, "end": 2, "pid": 1, "level": 0},
        {"start": 2, "end": 3, "pid": None, "level": None},
        {"start": 3, "end": 4, "pid": 1, "level": 1},
        {"start": 4, "end": 6, "pid": 2, "level": 1},
    ]
    assert timeline_segments([]) == []


def test_queue_usage_ignores_idle():
    usage = queue_usage([(1, 0), IDLE, (1, 2), (2, 2)], num_levels=4)
    assert isinstance(usage, np.ndarray)
    assert usage.tolist() == [1, 0, 2, 0]
    assert queue_usage([IDLE], num_levels=2).tolist() == [0, 0]


class TestEventLogger:

    def test_listeners_receive_every_event(self):
        seen = []
        logger = EventLogger()
        logger.subscribe(seen.append)
        logger.log_event(0, Event.ARRIVAL, 1, to_level=0)
        logger.log_event(3, Event.BOOST, to_level=0)
        assert [e["event"] for e in seen] == [Event.ARRIVAL, Event.BOOST]
        assert logger.of_kind(Event.BOOST)[0]["time"] == 3

    def test_export_json_and_csv(self, tmp_path):
        logger = EventLogger()
        logger.log_event(0, Event.DISPATCH, 1, level=0)
        logger.log_event(2, Event.COMPLETE, 1, level=0)
        timeline = [(1, 0), (1, 0)]

        json_path = tmp_path / "run.json"
        logger.export_json(str(json_path), timeline)
        data = json.loads(json_path.read_text(encoding="utf-8"))
        assert [e["event"] for e in data["events"]] == [Event.DISPATCH, Event.COMPLETE]
        assert data["timeline"] == [{"start": 0, "end": 2, "pid": 1, "level": 0}]

        logger.export_csv(str(tmp_path / "run"), timeline)
        with open(tmp_path / "run_events.csv", newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert [r["event"] for r in rows] == [Event.DISPATCH, Event.COMPLETE]
        with open(tmp_path / "run_timeline.csv", newline="", encoding="utf-8") as f:
            segments = list(csv.DictReader(f))
        assert segments == [{"start": "0", "end": "2", "pid": "1", "level": "0"}]
