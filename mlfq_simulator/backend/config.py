from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class SchedulerConfig:
    """Immutable MLFQ run parameters.

    A quantum of 0 means a process dispatched at that level runs until it
    finishes (or a higher level gets work); it is never demoted from there.
    """
    num_levels: int = 3
    time_quanta: Tuple[int, ...] = (4, 8, 0)
    level_labels: Tuple[str, ...] = ("Round-Robin", "Round-Robin", "FCFS")
    aging_threshold: int = 15
    aging_check_interval: int = 3
    boost_interval: int = 50

    def __post_init__(self) -> None:
        # Normalise lists handed in by loaders or callers
        object.__setattr__(self, "time_quanta", tuple(int(q) for q in self.time_quanta))
        labels = tuple(self.level_labels) if self.level_labels else ()
        if len(labels) != self.num_levels:
            labels = tuple(_default_label(q) for q in self.time_quanta)
        object.__setattr__(self, "level_labels", labels)

        if self.num_levels < 1:
            raise ValueError("num_levels must be at least 1")
        if len(self.time_quanta) != self.num_levels:
            raise ValueError(f"expected {self.num_levels} time quanta, got {len(self.time_quanta)}")
        if any(q < 0 for q in self.time_quanta):
            raise ValueError("time quanta cannot be negative")
        for name in ("aging_threshold", "aging_check_interval", "boost_interval"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be a positive integer")

    @property
    def lowest_level(self) -> int:
        return self.num_levels - 1

    def quantum_for(self, level: int) -> int:
        return self.time_quanta[level]

    def describe_level(self, level: int) -> str:
        label = self.level_labels[level]
        quantum = self.time_quanta[level]
        return f"{label} (TQ={quantum})" if quantum > 0 else label


def _default_label(quantum: int) -> str:
    return "Round-Robin" if quantum > 0 else "FCFS"


DEFAULT_CONFIG = SchedulerConfig()

