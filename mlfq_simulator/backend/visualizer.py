from __future__ import annotations

from typing import Dict, List, Optional
import matplotlib.pyplot as plt

from .results import ensure_dir
from .simulator import SimulationResult
from .utils import Event, timeline_segments


LEVEL_COLORS = ["#4c72b0", "#dd8452", "#55a868", "#c44e52", "#8172b3", "#937860"]


def level_color(level: int) -> str:
    return LEVEL_COLORS[level % len(LEVEL_COLORS)]


def plot_gantt(result: SimulationResult, out_path: Optional[str] = None, level_labels: Optional[List[str]] = None) -> None:
    segments = timeline_segments(result.timeline)
    pids_order = sorted({seg["pid"] for seg in segments if seg["pid"] is not None})
    y_positions: Dict[int, int] = {pid: i for i, pid in enumerate(pids_order)}

    fig, ax = plt.subplots(figsize=(12, 3 + 0.3 * max(1, len(pids_order))))

    # One bar per segment, colored by the level it ran at
    seen_levels = set()
    for seg in segments:
        pid = seg["pid"]
        if pid is None:
            ax.axvspan(seg["start"], seg["end"], color="#dddddd", alpha=0.5, lw=0)
            continue
        level = seg["level"]
        label = None
        if level not in seen_levels:
            seen_levels.add(level)
            label = level_labels[level] if level_labels and level < len(level_labels) else f"Q{level}"
        ax.barh(y_positions[pid], seg["end"] - seg["start"], left=seg["start"], color=level_color(level),
                edgecolor="black", alpha=0.9, label=label)

    for event in result.logger.events:
        if event["event"] == Event.BOOST:
            ax.axvline(event["time"], color="#444444", linestyle="--", alpha=0.7)

    ax.set_yticks([y_positions[pid] for pid in pids_order])
    ax.set_yticklabels([f"P{pid}" for pid in pids_order])
    ax.set_xlabel("Time")
    ax.set_title(f"{result.algorithm} Gantt Chart")
    ax.grid(True, axis="x", linestyle=":", alpha=0.5)
    if seen_levels:
        ax.legend(loc="upper right", fontsize=8)
    fig.tight_layout()

    if out_path:
        ensure_dir(out_path)
        fig.savefig(out_path, dpi=150)
        plt.close(fig)
    else:
        plt.show()
