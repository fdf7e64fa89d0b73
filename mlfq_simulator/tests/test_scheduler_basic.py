"""
Tests for the FCFS, SJF and Round Robin baseline engines.
"""

import pytest

from mlfq_simulator.backend.core import ProcessSpec, ProcessState
from mlfq_simulator.backend.schedulers import FCFSScheduler, RoundRobinScheduler, SJFScheduler
from mlfq_simulator.backend.utils import IDLE, Event


def specs(*rows):
    return [ProcessSpec(pid=pid, arrival_time=a, burst_time=b) for pid, a, b in rows]


@pytest.fixture
def sample_specs():
    """Create a set of test processes."""
    return specs((1, 0, 4), (2, 1, 3), (3, 2, 1), (4, 3, 2), (5, 4, 5))


class TestFCFS:
    """Test First Come First Serve scheduler."""

    def test_two_process_scenario(self):
        result = FCFSScheduler(specs((1, 0, 5), (2, 1, 3))).run()

        p1, p2 = result.process(1), result.process(2)
        assert (p1.completion_time, p1.turnaround_time, p1.waiting_time) == (5, 5, 0)
        assert (p2.start_time, p2.completion_time) == (5, 8)
        assert (p2.turnaround_time, p2.waiting_time) == (7, 4)
        m = result.metrics
        assert m.avg_turnaround == pytest.approx(6.0)
        assert m.avg_waiting == pytest.approx(2.0)
        assert m.context_switches == 2
        assert m.cpu_utilization == pytest.approx(100.0)

    def test_shared_pid_does_not_skew_averages(self):
        result = FCFSScheduler(specs((1, 0, 5), (1, 1, 3))).run()

        assert result.metrics.avg_turnaround == pytest.approx(6.0)
        assert result.metrics.avg_waiting == pytest.approx(2.0)

    def test_idle_gap_is_recorded(self):
        result = FCFSScheduler(specs((1, 0, 2), (2, 5, 1))).run()

        assert result.timeline == [(1, 0), (1, 0), IDLE, IDLE, IDLE, (2, 0)]
        assert result.process(2).start_time == 5
        assert result.metrics.cpu_utilization == pytest.approx(50.0)

    def test_order_is_arrival_order(self, sample_specs):
        result = FCFSScheduler(list(reversed(sample_specs))).run()
        starts = sorted(result.processes, key=lambda p: p.start_time)
        assert [p.pid for p in starts] == [1, 2, 3, 4, 5]

    def test_equal_arrivals_keep_input_order(self):
        result = FCFSScheduler(specs((2, 0, 3), (1, 0, 1))).run()
        assert result.process(2).completion_time == 3
        assert result.process(1).completion_time == 4


class TestSJF:
    """Test non-preemptive Shortest Job First scheduler."""

    def test_shortest_waiting_job_runs_next(self):
        result = SJFScheduler(specs((1, 0, 8), (2, 1, 3), (3, 2, 1))).run()

        assert result.process(1).completion_time == 8
        assert result.process(3).completion_time == 9
        assert result.process(2).completion_time == 12
        assert result.process(3).start_time == 8
        m = result.metrics
        assert m.avg_turnaround == pytest.approx(26 / 3)
        assert m.avg_waiting == pytest.approx(14 / 3)

    def test_ties_go_to_earliest_in_scan_order(self):
        result = SJFScheduler(specs((1, 0, 4), (2, 1, 2), (3, 1, 2))).run()
        assert result.process(2).completion_time == 6
        assert result.process(3).completion_time == 8

    def test_idle_until_first_arrival(self):
        result = SJFScheduler(specs((1, 3, 2))).run()
        assert result.timeline == [IDLE, IDLE, IDLE, (1, 0), (1, 0)]
        assert result.context_switches == 1

    def test_burst_order_when_all_arrive_together(self, sample_specs):
        together = [ProcessSpec(s.pid, 0, s.burst_time) for s in sample_specs]
        result = SJFScheduler(together).run()
        order = sorted(result.processes, key=lambda p: p.start_time)
        assert [p.burst_time for p in order] == sorted(p.burst_time for p in order)


class TestRoundRobin:
    """Test Round Robin scheduler."""

    def test_round_robin_switching(self):
        result = RoundRobinScheduler(specs((1, 0, 5), (2, 0, 3)), time_quantum=2).run()

        assert [pid for pid, _ in result.timeline] == [1, 1, 2, 2, 1, 1, 2, 1]
        assert result.process(2).completion_time == 7
        assert result.process(1).completion_time == 8
        assert result.context_switches == 5

    def test_requeued_before_simultaneous_arrival(self):
        # P1's quantum ends at t=2, the same tick P2 arrives; P1 is queued first
        result = RoundRobinScheduler(specs((1, 0, 4), (2, 2, 2)), time_quantum=2).run()

        assert [pid for pid, _ in result.timeline] == [1, 1, 1, 1, 2, 2]
        assert result.context_switches == 3
        assert len(result.logger.of_kind(Event.REQUEUE)) == 1

    def test_large_quantum_behaves_like_fcfs(self, sample_specs):
        rr = RoundRobinScheduler(sample_specs, time_quantum=100).run()
        fcfs = FCFSScheduler(sample_specs).run()
        assert rr.timeline == fcfs.timeline
        assert rr.metrics == fcfs.metrics

    def test_invalid_quantum(self):
        with pytest.raises(ValueError):
            RoundRobinScheduler(specs((1, 0, 1)), time_quantum=0)


@pytest.mark.parametrize("engine", [FCFSScheduler, SJFScheduler, RoundRobinScheduler])
def test_every_process_completes_once(engine, sample_specs):
    result = engine(sample_specs).run()

    assert all(p.state is ProcessState.COMPLETED and p.remaining_time == 0 for p in result.processes)
    assert result.busy_time == sum(s.burst_time for s in sample_specs)
    assert len(result.logger.of_kind(Event.COMPLETE)) == len(sample_specs)
    assert len(result.timeline) == result.total_time


def test_engines_build_their_own_records(sample_specs):
    first = FCFSScheduler(sample_specs)
    second = SJFScheduler(sample_specs)
    assert not any(a is b for a in first.records for b in second.records)
    first.run()
    assert all(p.state is ProcessState.NEW for p in second.records)
    assert all(p.remaining_time == p.burst_time for p in second.records)
