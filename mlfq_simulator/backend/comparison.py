from __future__ import annotations

from typing import Callable, List, Sequence, Tuple

import pandas as pd

from .config import SchedulerConfig
from .core import ProcessSpec
from .schedulers import FCFSScheduler, RoundRobinScheduler, SJFScheduler
from .simulator import SimulationResult, simulate_mlfq


METRIC_COLUMNS = ["avg_turnaround", "avg_waiting", "throughput", "cpu_utilization", "context_switches"]

EngineFactory = Callable[[Sequence[ProcessSpec]], SimulationResult]


def default_suite(config: SchedulerConfig | None = None, rr_quantum: int = 4) -> List[Tuple[str, EngineFactory]]:
    """The four engines compared side by side, in report order."""
    return [
        ("MLFQ", lambda specs: simulate_mlfq(specs, config=config)),
        ("Round Robin", lambda specs: RoundRobinScheduler(specs, time_quantum=rr_quantum).run()),
        ("FCFS", lambda specs: FCFSScheduler(specs).run()),
        ("SJF", lambda specs: SJFScheduler(specs).run()),
    ]


def evaluate_suite(
    specs: Sequence[ProcessSpec],
    suite: Sequence[Tuple[str, EngineFactory]],
) -> List[Tuple[str, SimulationResult]]:
    # Specs are immutable; each engine builds its own records from them
    return [(name, factory(specs)) for name, factory in suite]


def metrics_table(outcomes: Sequence[Tuple[str, SimulationResult]]) -> pd.DataFrame:
    table = pd.DataFrame(
        [result.metrics.as_dict() for _, result in outcomes],
        index=[name for name, _ in outcomes],
        columns=METRIC_COLUMNS,
    )
    table.index.name = "algorithm"
    return table.astype({"context_switches": int})


def run_comparative_analysis(
    specs: Sequence[ProcessSpec],
    config: SchedulerConfig | None = None,
    rr_quantum: int = 4,
) -> pd.DataFrame:
    """Run MLFQ, Round Robin, FCFS and SJF on the same workload."""
    return metrics_table(evaluate_suite(specs, default_suite(config, rr_quantum)))


def best_algorithm(table: pd.DataFrame, column: str) -> Tuple[str, float]:
    """Algorithm with the lowest value in `column` (first one on ties)."""
    name = table[column].idxmin()
    return name, float(table.loc[name, column])
