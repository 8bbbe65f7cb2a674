"""
Terminal rendering of the month / week / day views with rich.

Month cells show at most 2 sessions plus a "+N more" marker, like the
web calendar did. Days outside the displayed month are dimmed.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable

from rich import box
from rich.markup import escape
from rich.table import Table

from classcal.binning import bin_events, events_on_day, sort_by_start
from classcal.colors import display_color
from classcal.grid import WEEKDAY_NAMES, in_month, month_grid, week_grid
from classcal.model import ScheduleEvent


MONTH_CELL_EVENTS = 2


def _time_range(ev: ScheduleEvent) -> str:
    start = ev.start.strftime("%H:%M") if ev.start else "--:--"
    end = ev.end.strftime("%H:%M") if ev.end else "--:--"
    return f"{start}-{end}"


def event_line(ev: ScheduleEvent) -> str:
    """
    One-line rich markup label: colored time, title, teacher.
    """
    color = display_color(ev)
    bits = [f"[{color}]{_time_range(ev)}[/]", escape(ev.title or "(no title)")]
    if ev.teacher_name:
        bits.append(f"[magenta]{escape(ev.teacher_name)}[/]")
    if ev.pending_sync:
        bits.append("[yellow](not synced)[/]")
    return " | ".join(bits)


def month_table(reference: date, events: Iterable[ScheduleEvent], today: date | None = None) -> Table:
    days = month_grid(reference)
    buckets = bin_events(days, events)

    table = Table(title=reference.strftime("%B %Y"), box=box.SIMPLE, show_lines=True)
    for name in WEEKDAY_NAMES:
        table.add_column(name)

    for week in range(len(days) // 7):
        row = []
        for d in days[week * 7 : week * 7 + 7]:
            label = str(d.day)
            if today is not None and d == today:
                label = f"[reverse]{label}[/]"
            elif not in_month(d, reference):
                label = f"[dim]{label}[/]"
            lines = [label]
            day_events = buckets[d]
            for ev in day_events[:MONTH_CELL_EVENTS]:
                start = ev.start.strftime("%H:%M") if ev.start else ""
                lines.append(f"[{display_color(ev)}]{start}[/] {escape(ev.title)}")
            if len(day_events) > MONTH_CELL_EVENTS:
                lines.append(f"[dim]+{len(day_events) - MONTH_CELL_EVENTS} more[/]")
            row.append("\n".join(lines))
        table.add_row(*row)
    return table


def week_table(reference: date, events: Iterable[ScheduleEvent]) -> Table:
    days = week_grid(reference)
    buckets = bin_events(days, events)

    table = Table(title=f"Week of {days[0].strftime('%B %d, %Y')}", box=box.SIMPLE)
    for d in days:
        table.add_column(d.strftime("%a %d"))

    max_len = max(len(buckets[d]) for d in days)
    for r in range(max_len):
        row = []
        for d in days:
            row.append(event_line(buckets[d][r]) if r < len(buckets[d]) else "")
        table.add_row(*row)
    return table


def day_table(day: date, events: Iterable[ScheduleEvent]) -> Table:
    table = Table(title=day.strftime("%A, %B %d, %Y"), box=box.SIMPLE)
    table.add_column("Time")
    table.add_column("Class")
    table.add_column("Teacher")
    table.add_column("Join")
    table.add_column("ID", style="dim")

    for ev in sort_by_start(events_on_day(day, events)):
        table.add_row(
            f"[{display_color(ev)}]{_time_range(ev)}[/]",
            escape(ev.title or "(no title)"),
            escape(ev.teacher_name),
            escape(ev.meet_link),
            escape(ev.id),
        )
    return table
