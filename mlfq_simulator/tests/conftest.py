import os
import sys

import pytest


def pytest_sessionstart(session):
    # Ensure repo root is on sys.path so 'mlfq_simulator' can be imported
    here = os.path.dirname(os.path.abspath(__file__))
    repo_root = os.path.abspath(os.path.join(here, os.pardir, os.pardir))
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)


@pytest.fixture
def mixed_workload():
    """A workload long enough to hit demotion, aging, boost and idle gaps."""
    from mlfq_simulator.backend.core import ProcessSpec

    rows = [(1, 0, 8), (2, 1, 4), (3, 2, 9), (4, 3, 5), (5, 10, 2), (6, 30, 20), (7, 31, 3), (8, 90, 4)]
    return [ProcessSpec(pid=pid, arrival_time=a, burst_time=b) for pid, a, b in rows]
