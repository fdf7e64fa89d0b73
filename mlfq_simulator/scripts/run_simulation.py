from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

# Ensure repo root is on sys.path so this script can be executed directly
repo_root = Path(__file__).resolve().parents[2]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from mlfq_simulator.backend.comparison import run_comparative_analysis
from mlfq_simulator.backend.core import ProcessSpec
from mlfq_simulator.backend.loaders import WorkloadError, load_config_or_default, load_processes
from mlfq_simulator.backend.results import save_comparison, save_results
from mlfq_simulator.backend.simulator import simulate_mlfq
from mlfq_simulator.backend.terminal import MLFQTerminal
from mlfq_simulator.backend.utils import EventLogger


DEFAULT_CONFIG_FILE = "config.txt"


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Multilevel Feedback Queue scheduler simulator")
    p.add_argument("input_file", nargs="?", default=None,
                   help="Process list file: N, then N lines of 'pid arrival burst'. Prompts when omitted.")
    p.add_argument("-c", "--config", nargs="?", const=DEFAULT_CONFIG_FILE, default=None,
                   help=f"Load the MLFQ configuration from a file (default {DEFAULT_CONFIG_FILE})")
    p.add_argument("--compare", choices=["ask", "yes", "no"], default="ask",
                   help="Run the comparison against RR, FCFS and SJF")
    p.add_argument("--rr-quantum", type=int, default=4, help="Time quantum of the Round Robin baseline")
    p.add_argument("--quiet", action="store_true", help="Do not print events and per-process reports")
    p.add_argument("--results-dir", type=str, default=".", help="Directory for the result text files")
    p.add_argument("--plot", type=str, default=None, help="Save a Gantt chart PNG of the MLFQ run")
    p.add_argument("--log-dir", type=str, default=None, help="Export the event stream as JSON and CSV")
    args = p.parse_args(argv)
    if args.rr_quantum < 1:
        p.error(f"--rr-quantum must be a positive integer, got {args.rr_quantum}")
    return args


def read_workload(args: argparse.Namespace, terminal: MLFQTerminal) -> List[ProcessSpec]:
    if args.input_file:
        specs = load_processes(args.input_file)
        terminal.info(f"\nProcesses loaded from: {args.input_file}")
        return specs
    return terminal.read_processes()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    terminal = MLFQTerminal()
    terminal.banner("   MULTILEVEL FEEDBACK QUEUE (MLFQ) SCHEDULER   ")

    config, loaded = load_config_or_default(args.config)
    if loaded:
        terminal.info(f"\nConfiguration loaded from {args.config}")
    else:
        if args.config:
            terminal.warn(f"\nCould not use {args.config}")
        terminal.info("\nUsing default configuration")

    try:
        specs = read_workload(args, terminal)
    except (WorkloadError, EOFError) as e:
        terminal.error(f"Error: {e}")
        return 1

    logger = EventLogger()
    if not args.quiet:
        logger.subscribe(terminal.print_event)
        terminal.banner("MLFQ SCHEDULER")
        terminal.show_config(config)
        print()

    result = simulate_mlfq(specs, config=config, logger=logger)

    if not args.quiet:
        terminal.show_results(result, config)
    results_path = os.path.join(args.results_dir, "mlfq_results.txt")
    save_results(result, config, results_path)
    terminal.info(f"\nResults saved to: {results_path}")

    if args.plot:
        from mlfq_simulator.backend.visualizer import plot_gantt
        plot_gantt(result, args.plot, level_labels=list(config.level_labels))
        terminal.info(f"Saved plot to {args.plot}")

    if args.log_dir:
        out = Path(args.log_dir)
        out.mkdir(parents=True, exist_ok=True)
        base = out / "mlfq_run"
        logger.export_json(str(base.with_suffix(".json")), result.timeline)
        logger.export_csv(str(base), result.timeline)
        terminal.info(f"Logs written to {out} (base: {base})")

    if args.compare == "yes" or (args.compare == "ask" and terminal.ask_yes_no(
            "\nWould you like to run comparative analysis? (y/n): ")):
        table = run_comparative_analysis(specs, config=config, rr_quantum=args.rr_quantum)
        terminal.show_comparison(table)
        comparison_path = os.path.join(args.results_dir, "comparison_results.txt")
        save_comparison(table, comparison_path)
        terminal.info(f"\nComparison results saved to: {comparison_path}")

    terminal.banner("Simulation Complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
