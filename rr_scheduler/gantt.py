from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import GanttChartItem

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]
IDLE_STYLE = "on grey50"


def assign_colors(items: List[GanttChartItem]) -> Dict[str, str]:
    """
    Give each process a color in order of first appearance on the timeline.
    """
    pid_to_color: Dict[str, str] = {}
    for item in items:
        if item.is_idle or item.pid in pid_to_color:
            continue
        pid_to_color[item.pid] = COLORS[len(pid_to_color) % len(COLORS)]
    return pid_to_color


def gantt_rows(
    items: List[GanttChartItem],
    current_time: Optional[int] = None,
) -> Tuple[Text, Text, str]:
    """
    Build the colored timeline row, the label row and the time marks line.

    Each interval gets at least enough columns for its end mark, so every
    mark ends on the last column of its interval. When ``current_time`` is
    given, the label of the interval covering it is shown in reverse video.
    """
    items = sorted(items, key=lambda i: i.start_time)
    colors = assign_colors(items)

    time_marks = f"{items[0].start_time}"
    # Offset both rows by the first mark so cells sit under their marks
    timeline = Text(" " * len(time_marks))
    labels = Text(" " * len(time_marks))

    for item in items:
        mark = str(item.end_time)
        width = max(1, item.duration, len(mark) + 1)
        active = current_time is not None and item.covers(current_time)

        if item.is_idle:
            timeline.append(" " * width, style=IDLE_STYLE)
            label = "idle"
        else:
            timeline.append(" " * width, style=f"on {colors[item.pid]}")
            label = item.pid

        labels.append(label[:width].ljust(width), style="bold reverse" if active else "bold")
        time_marks += mark.rjust(width)

    return timeline, labels, time_marks


def build_rich_gantt(
    items: List[GanttChartItem],
    current_time: Optional[int] = None,
) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart, its labels and time marks.

    The time marks are also returned as a plain string.
    """
    if not items:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    timeline, labels, time_marks = gantt_rows(items, current_time)

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)
    table.add_row(Text(time_marks))

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
