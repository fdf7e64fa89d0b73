from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import pandas as pd
from colorama import Fore, Style, init as colorama_init

from .comparison import best_algorithm
from .config import SchedulerConfig
from .core import ProcessSpec
from .loaders import parse_processes
from .simulator import SimulationResult
from .utils import Event, queue_usage, timeline_segments


DETAIL_LIMIT = 100
RULE = "=" * 40


def format_event(event: Dict[str, Any]) -> Optional[str]:
    """One console line per event worth showing; dispatches stay silent."""
    t, kind, pid = event["time"], event["event"], event["pid"]
    if kind == Event.ARRIVAL:
        return f"Time {t}: Process P{pid} arrived -> Q{event['to_level']}"
    if kind == Event.PROMOTE:
        return f"Time {t}: Process P{pid} promoted Q{event['level']} -> Q{event['to_level']} (Aging)"
    if kind == Event.BOOST:
        return f"Time {t}: PRIORITY BOOST - All processes moved to Q0"
    if kind == Event.PREEMPT:
        return f"Time {t}: Process P{pid} preempted in Q{event['level']}"
    if kind == Event.DEMOTE:
        return f"Time {t}: Process P{pid} demoted Q{event['level']} -> Q{event['to_level']} (Quantum exhausted)"
    if kind == Event.COMPLETE:
        return f"Time {t}: Process P{pid} completed in Q{event['level']}"
    return None


def gantt_lines(result: SimulationResult) -> List[str]:
    lines = []
    for seg in timeline_segments(result.timeline):
        if seg["pid"] is None:
            lines.append(f"[Idle] {seg['start']}->{seg['end']}")
        else:
            lines.append(f"P{seg['pid']} [Q{seg['level']}] {seg['start']}->{seg['end']}")
    return lines


def detailed_timeline(result: SimulationResult, limit: int = DETAIL_LIMIT) -> List[str]:
    shown = result.timeline[:limit]
    more = " ..." if len(result.timeline) > limit else ""
    time_row = "Time: " + "".join(f"{t:>3}" for t in range(len(shown))) + more
    proc_row = "Proc: " + "".join("  -" if pid is None else f" P{pid}" for pid, _ in shown) + more
    queue_row = "Queue:" + "".join("  -" if level is None else f" Q{level}" for _, level in shown) + more
    return [time_row, proc_row, queue_row]


class MLFQTerminal:
    """Console front end: prompts for input and prints run reports."""

    def __init__(self, input_fn: Callable[[str], str] = input) -> None:
        colorama_init(autoreset=True)
        self.input_fn = input_fn

    def banner(self, title: str) -> None:
        print(Style.BRIGHT + "\n" + RULE)
        print(Style.BRIGHT + title)
        print(Style.BRIGHT + RULE)

    def info(self, message: str) -> None:
        print(Fore.CYAN + message)

    def warn(self, message: str) -> None:
        print(Fore.YELLOW + message)

    def error(self, message: str) -> None:
        print(Fore.RED + message)

    def print_event(self, event: Dict[str, Any]) -> None:
        line = format_event(event)
        if line is None:
            return
        color = Fore.MAGENTA if event["event"] == Event.BOOST else ""
        print(color + line)

    def read_processes(self) -> List[ProcessSpec]:
        """Prompt for a process count and that many "pid arrival burst" lines."""
        count = self.input_fn("\nEnter number of processes: ").strip()
        tokens = [count]
        print("Enter PID, Arrival, Burst for each process:")
        try:
            n = int(count)
        except ValueError:
            n = 0
        for _ in range(max(0, n)):
            tokens.extend(self.input_fn("").split())
        return parse_processes(tokens)

    def ask_yes_no(self, question: str) -> bool:
        try:
            answer = self.input_fn(question).strip().lower()
        except EOFError:
            return False
        return answer.startswith("y")

    def show_config(self, config: SchedulerConfig) -> None:
        print("Configuration:")
        print(f"  Number of Queues: {config.num_levels}")
        for level in range(config.num_levels):
            print(f"  Q{level}: {config.describe_level(level)}")
        print(f"  Aging Threshold: {config.aging_threshold} time units")
        print(f"  Aging Check Interval: Every {config.aging_check_interval} time units")
        print(f"  Priority Boost Interval: Every {config.boost_interval} time units")

    def show_results(self, result: SimulationResult, config: SchedulerConfig) -> None:
        self.banner("MLFQ SCHEDULER RESULTS")

        usage = queue_usage(result.timeline, config.num_levels)
        busy = max(1, result.busy_time)
        print("Queue Usage Statistics:")
        for level in range(config.num_levels):
            print(f"  Q{level} ({config.level_labels[level]}): {usage[level]} time units "
                  f"({100.0 * usage[level] / busy:.1f}%)")

        print("\nProcess-wise Metrics:")
        print("PID\tArrival\tBurst\tStart\tCompletion\tTurnaround\tWaiting")
        print("---\t-------\t-----\t-----\t----------\t----------\t-------")
        for p in result.processes:
            print(f"{p.pid}\t{p.arrival_time}\t{p.burst_time}\t{p.start_time}\t{p.completion_time}\t\t"
                  f"{p.turnaround_time}\t\t{p.waiting_time}")

        self.banner("Overall Performance Metrics")
        self.show_metrics(result)
        self.show_gantt(result)

    def show_metrics(self, result: SimulationResult) -> None:
        m = result.metrics
        print(Style.BRIGHT + f"\n{result.algorithm} Performance:")
        print(f"  Avg Turnaround Time: {m.avg_turnaround:.2f}")
        print(f"  Avg Waiting Time   : {m.avg_waiting:.2f}")
        print(f"  Throughput         : {m.throughput:.3f} jobs/unit")
        print(f"  CPU Utilization    : {m.cpu_utilization:.2f} %")
        print(f"  Context Switches   : {m.context_switches}")

    def show_gantt(self, result: SimulationResult) -> None:
        if not result.timeline:
            return
        self.banner("Gantt Chart")
        for line in gantt_lines(result):
            print(line)
        limit = min(DETAIL_LIMIT, len(result.timeline))
        print(f"\nDetailed Timeline (first {limit} units):")
        for line in detailed_timeline(result):
            print(line)

    def show_comparison(self, table: pd.DataFrame) -> None:
        self.banner("PERFORMANCE COMPARISON TABLE")
        print(f"{'Algorithm':<15}{'Avg TAT':>12}{'Avg WT':>12}{'Throughput':>12}{'CPU Util%':>12}{'Ctx Switch':>12}")
        print("-" * 75)
        for name, row in table.iterrows():
            print(f"{name:<15}{row['avg_turnaround']:>12.2f}{row['avg_waiting']:>12.2f}"
                  f"{row['throughput']:>12.3f}{row['cpu_utilization']:>12.2f}{int(row['context_switches']):>12}")

        self.banner("ANALYSIS")
        best_tat = best_algorithm(table, "avg_turnaround")
        best_wt = best_algorithm(table, "avg_waiting")
        print(Fore.GREEN + f"\nBest Average Turnaround Time: {best_tat[0]} ({best_tat[1]:.2f})")
        print(Fore.GREEN + f"Best Average Waiting Time: {best_wt[0]} ({best_wt[1]:.2f})")
