from __future__ import annotations

from typing import Dict, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import TimelineEntry

IDLE_COLOR = "grey30"
COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def render_gantt(timeline: Sequence[TimelineEntry]) -> str:
    """
    Plain-text Gantt chart. Idle intervals are drawn with dots.
    """
    if not timeline:
        return "(no execution)"

    line = "|"
    labels = ""
    time_marks = f"{timeline[0].start_time}"

    for entry in timeline:
        width = max(1, entry.duration)
        line += ("." if entry.is_idle else "=") * width
        labels += entry.label[:width].ljust(width)
        time_marks += f"{entry.end_time:>3}"

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels,
            time_marks,
        ]
    )


def build_rich_gantt(timeline: Sequence[TimelineEntry]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not timeline:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(COLORS)
            pid_to_color[pid] = COLORS[idx]
        return pid_to_color[pid]

    bars = Text()
    labels = Text()
    time_marks = f"{timeline[0].start_time}"

    for entry in timeline:
        width = max(1, entry.duration)
        color = IDLE_COLOR if entry.is_idle else pid_color(entry.pid)

        bars.append(" " * width, style=f"on {color}")
        labels.append(entry.label[:width].ljust(width), style="dim" if entry.is_idle else "bold")
        time_marks += f"{entry.end_time:>3}"

    table = Table.grid(padding=(0, 0))
    table.add_row(bars)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
