"""
Calendar grid generation.

Produces the day sequences behind the month and week views.

Rules:
- weeks start on Sunday
- a month grid is always 6 full weeks (42 days), so the grid height is stable;
  days outside the reference month are included on purpose
- all arithmetic is done on date values, never on elapsed seconds,
  so daylight-saving transitions cannot shift a day
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta


MONTH_GRID_DAYS = 42
WEEK_DAYS = 7
WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def as_date(day: date | datetime) -> date:
    # datetime is a subclass of date, so check it first
    if isinstance(day, datetime):
        return day.date()
    return day


def today() -> date:
    return date.today()


def week_start(day: date | datetime) -> date:
    """
    Return the Sunday on or before `day`.
    """
    d = as_date(day)
    # date.weekday(): Monday == 0 ... Sunday == 6
    return d - timedelta(days=(d.weekday() + 1) % 7)


def month_grid(reference: date | datetime) -> list[date]:
    """
    Return the 42 consecutive days of the month view containing `reference`.

    The grid starts on the first day of the week that contains the 1st
    of the month.
    """
    first = as_date(reference).replace(day=1)
    start = week_start(first)
    return [start + timedelta(days=i) for i in range(MONTH_GRID_DAYS)]


def week_grid(reference: date | datetime) -> list[date]:
    """
    Return the 7 days (Sunday first) of the week containing `reference`.
    """
    start = week_start(reference)
    return [start + timedelta(days=i) for i in range(WEEK_DAYS)]


def in_month(day: date | datetime, reference: date | datetime) -> bool:
    d = as_date(day)
    ref = as_date(reference)
    return (d.year, d.month) == (ref.year, ref.month)


def shift_month(reference: date | datetime, delta: int) -> date:
    """
    Move `reference` by `delta` months (previous/next navigation).

    The day of month is clamped to the length of the target month,
    e.g. Jan 31 + 1 month -> Feb 28/29.
    """
    ref = as_date(reference)
    month_index = ref.year * 12 + (ref.month - 1) + delta
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(ref.day, last_day))
