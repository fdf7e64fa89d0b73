"""Multilevel feedback queue scheduling simulator with FCFS, SJF and RR baselines."""

from .backend.config import DEFAULT_CONFIG, SchedulerConfig
from .backend.core import ProcessRecord, ProcessSpec, ProcessState
from .backend.simulator import MLFQSimulator, SimulationResult, simulate_mlfq
from .backend.schedulers import FCFSScheduler, RoundRobinScheduler, SJFScheduler
from .backend.comparison import run_comparative_analysis
from .backend.utils import Metrics, compute_metrics

__all__ = [
    "DEFAULT_CONFIG",
    "SchedulerConfig",
    "ProcessRecord",
    "ProcessSpec",
    "ProcessState",
    "MLFQSimulator",
    "SimulationResult",
    "simulate_mlfq",
    "FCFSScheduler",
    "RoundRobinScheduler",
    "SJFScheduler",
    "run_comparative_analysis",
    "Metrics",
    "compute_metrics",
]
