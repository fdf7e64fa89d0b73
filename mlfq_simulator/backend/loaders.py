"""
Loading of process lists and MLFQ configuration files.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Tuple

from .config import DEFAULT_CONFIG, SchedulerConfig
from .core import ProcessSpec


class WorkloadError(ValueError):
    """Process input is missing, unreadable or malformed."""


class ConfigError(ValueError):
    """Config file is missing, unreadable or malformed."""


def _read_text(path: str, error_cls: type) -> str:
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise error_cls(f"Cannot open file: {path} ({e.strerror or e})") from e
    except UnicodeDecodeError as e:
        raise error_cls(f"Cannot read file: {path} (not UTF-8 text)") from e


def _to_int(token: str, what: str, error_cls: type) -> int:
    try:
        return int(token)
    except ValueError:
        raise error_cls(f"expected an integer for {what}, got {token!r}") from None


def parse_processes(tokens: Iterable[str]) -> List[ProcessSpec]:
    """Parse `N` followed by `N` (pid, arrival, burst) triples."""
    it = iter(tokens)
    count_token = next(it, None)
    if count_token is None:
        raise WorkloadError("No processes found!")
    count = _to_int(count_token, "process count", WorkloadError)
    if count < 0:
        raise WorkloadError("process count cannot be negative")

    specs: List[ProcessSpec] = []
    for i in range(count):
        triple = [next(it, None) for _ in range(3)]
        if any(t is None for t in triple):
            raise WorkloadError(f"expected {count} processes, input ended after {i}")
        pid, arrival, burst = (_to_int(t, f"process #{i + 1}", WorkloadError) for t in triple)
        try:
            specs.append(ProcessSpec(pid=pid, arrival_time=arrival, burst_time=burst))
        except ValueError as e:
            raise WorkloadError(str(e)) from e

    if not specs:
        raise WorkloadError("No processes found!")
    return specs


def load_processes(path: str) -> List[ProcessSpec]:
    return parse_processes(_read_text(path, WorkloadError).split())


class _TokenReader:
    """Reads integer tokens line by line, keeping the rest of the current line."""

    def __init__(self, text: str):
        self.lines: Iterator[str] = iter(text.splitlines())
        self.pending: List[str] = []

    def ints(self, needed: int) -> List[int]:
        values: List[int] = []
        while len(values) < needed:
            if not self.pending:
                line = next(self.lines, None)
                if line is None:
                    raise ConfigError(f"config ended early, expected {needed - len(values)} more integers")
                self.pending = line.split()
                continue
            values.append(_to_int(self.pending.pop(0), "config value", ConfigError))
        return values

    def line(self) -> Optional[str]:
        self.pending = []
        return next(self.lines, None)


def parse_config(text: str) -> SchedulerConfig:
    """Parse a config file.

    Layout: the level count, one quantum per level, one label line per
    level, then the aging threshold, aging check interval and boost
    interval. Anything after the last quantum on its line is ignored.
    """
    reader = _TokenReader(text)
    num_levels = reader.ints(1)[0]
    if num_levels < 1:
        raise ConfigError("number of queues must be at least 1")
    quanta = reader.ints(num_levels)

    labels: List[str] = []
    for _ in range(num_levels):
        line = reader.line()
        if line is None:
            raise ConfigError("config ended before all queue labels were read")
        labels.append(line.strip())

    aging_threshold, aging_interval, boost_interval = reader.ints(3)
    try:
        return SchedulerConfig(
            num_levels=num_levels,
            time_quanta=tuple(quanta),
            level_labels=tuple(labels),
            aging_threshold=aging_threshold,
            aging_check_interval=aging_interval,
            boost_interval=boost_interval,
        )
    except ValueError as e:
        raise ConfigError(str(e)) from e


def load_config(path: str) -> SchedulerConfig:
    return parse_config(_read_text(path, ConfigError))


def load_config_or_default(path: Optional[str]) -> Tuple[SchedulerConfig, bool]:
    """Return (config, loaded_from_file); defaults when the file is unusable."""
    if not path:
        return DEFAULT_CONFIG, False
    try:
        return load_config(path), True
    except ConfigError:
        return DEFAULT_CONFIG, False

