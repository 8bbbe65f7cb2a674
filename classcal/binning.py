"""
Event-to-day binning.

Membership rule for a calendar day D:
    start date == D  OR  end date == D  OR  start date < D < end date

Only the calendar date is compared; the time of day is kept for sorting
and display.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

from classcal.grid import as_date
from classcal.model import ScheduleEvent


def events_on_day(day: date | datetime, events: Iterable[ScheduleEvent]) -> list[ScheduleEvent]:
    """
    Return the events that touch `day`, in their original order.

    Multi-day events are included on every day they span.
    Events without timestamps never match.
    """
    d = as_date(day)
    out: list[ScheduleEvent] = []
    for ev in events:
        if ev.start is None or ev.end is None:
            continue
        start_d = ev.start.date()
        end_d = ev.end.date()
        if start_d == d or end_d == d or start_d < d < end_d:
            out.append(ev)
    return out


def has_events_on_day(day: date | datetime, events: Iterable[ScheduleEvent]) -> bool:
    """
    Quick marker check used by the month view: does any event start or end on `day`?
    """
    d = as_date(day)
    for ev in events:
        if ev.start is not None and ev.start.date() == d:
            return True
        if ev.end is not None and ev.end.date() == d:
            return True
    return False


def sort_by_start(events: Iterable[ScheduleEvent]) -> list[ScheduleEvent]:
    """
    Sort events ascending by start time.

    sorted() is stable, so events with the same start keep their relative
    order. Events without a start go last.
    """
    return sorted(events, key=lambda ev: (ev.start is None, ev.start or datetime.min))


def bin_events(days: Iterable[date], events: Iterable[ScheduleEvent]) -> dict[date, list[ScheduleEvent]]:
    """
    Materialize a grid: map each day to its sorted events.
    """
    event_list = list(events)
    return {d: sort_by_start(events_on_day(d, event_list)) for d in days}


def events_for_teacher(events: Iterable[ScheduleEvent], teacher_id: str) -> list[ScheduleEvent]:
    return [ev for ev in events if ev.teacher_id == teacher_id]
