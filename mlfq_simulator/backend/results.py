"""
Persistence of finished runs to plain text result files.
"""

from __future__ import annotations

import os

import pandas as pd

from .config import SchedulerConfig
from .simulator import SimulationResult


def ensure_dir(path: str) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)


def save_results(result: SimulationResult, config: SchedulerConfig, path: str = "mlfq_results.txt") -> None:
    m = result.metrics
    lines = [
        "MLFQ Scheduler Results",
        "======================",
        "",
        "Configuration:",
        f"Number of Queues: {config.num_levels}",
    ]
    lines.extend(f"Q{level}: {config.describe_level(level)}" for level in range(config.num_levels))
    lines.extend([
        "",
        "Performance Metrics:",
        f"Average Turnaround Time: {m.avg_turnaround:g}",
        f"Average Waiting Time: {m.avg_waiting:g}",
        f"Throughput: {m.throughput:g}",
        f"CPU Utilization: {m.cpu_utilization:g}%",
        f"Context Switches: {m.context_switches}",
    ])
    ensure_dir(path)
    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")


def save_comparison(table: pd.DataFrame, path: str = "comparison_results.txt") -> None:
    ensure_dir(path)
    with open(path, "w", encoding="utf-8") as f:
        f.write("Scheduling Algorithm Comparison\n")
        f.write("================================\n\n")
        table.to_csv(f, sep="\t", float_format="%.6g")
