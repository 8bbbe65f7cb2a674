"""
Unit tests for event-to-day binning and sorting.

Membership: start date == day OR end date == day OR start < day < end.
Sorting: ascending by start, stable for equal starts.
"""

import unittest
from datetime import date, datetime

from classcal.binning import bin_events, events_for_teacher, events_on_day, has_events_on_day, sort_by_start
from classcal.model import ScheduleEvent


def _ev(event_id: str, start: datetime, end: datetime, teacher_id: str = "1") -> ScheduleEvent:
    return ScheduleEvent(id=event_id, title=event_id, start=start, end=end, teacher_id=teacher_id)


class TestEventsOnDay(unittest.TestCase):
    def test_same_day_event(self) -> None:
        ev = _ev("a", datetime(2026, 2, 19, 9, 0), datetime(2026, 2, 19, 10, 0))
        self.assertEqual(events_on_day(date(2026, 2, 19), [ev]), [ev])
        self.assertEqual(events_on_day(date(2026, 2, 20), [ev]), [])

    def test_multi_day_event_includes_days_between(self) -> None:
        ev = _ev("a", datetime(2026, 2, 19, 9, 0), datetime(2026, 2, 21, 10, 0))
        self.assertEqual(events_on_day(date(2026, 2, 19), [ev]), [ev])
        self.assertEqual(events_on_day(date(2026, 2, 20), [ev]), [ev])
        self.assertEqual(events_on_day(date(2026, 2, 21), [ev]), [ev])
        self.assertEqual(events_on_day(date(2026, 2, 22), [ev]), [])

    def test_time_of_day_ignored_for_membership(self) -> None:
        ev = _ev("late", datetime(2026, 2, 19, 23, 30), datetime(2026, 2, 19, 23, 59))
        self.assertEqual(events_on_day(datetime(2026, 2, 19, 0, 0), [ev]), [ev])

    def test_events_without_timestamps_never_match(self) -> None:
        ev = ScheduleEvent(id="x", title="x")
        self.assertEqual(events_on_day(date(2026, 2, 19), [ev]), [])

    def test_empty_input(self) -> None:
        self.assertEqual(events_on_day(date(2026, 2, 19), []), [])

    def test_has_events_only_checks_start_and_end(self) -> None:
        ev = _ev("a", datetime(2026, 2, 19, 9, 0), datetime(2026, 2, 21, 10, 0))
        self.assertTrue(has_events_on_day(date(2026, 2, 19), [ev]))
        self.assertFalse(has_events_on_day(date(2026, 2, 20), [ev]))
        self.assertTrue(has_events_on_day(date(2026, 2, 21), [ev]))


class TestSortByStart(unittest.TestCase):
    def test_stable_for_equal_starts(self) -> None:
        late = _ev("late", datetime(2026, 2, 19, 10, 0), datetime(2026, 2, 19, 11, 0))
        a = _ev("A", datetime(2026, 2, 19, 9, 0), datetime(2026, 2, 19, 10, 0))
        b = _ev("B", datetime(2026, 2, 19, 9, 0), datetime(2026, 2, 19, 9, 30))
        self.assertEqual([e.id for e in sort_by_start([late, a, b])], ["A", "B", "late"])

    def test_missing_start_goes_last(self) -> None:
        a = _ev("A", datetime(2026, 2, 19, 9, 0), datetime(2026, 2, 19, 10, 0))
        broken = ScheduleEvent(id="broken")
        self.assertEqual([e.id for e in sort_by_start([broken, a])], ["A", "broken"])

    def test_does_not_mutate_input(self) -> None:
        late = _ev("late", datetime(2026, 2, 19, 10, 0), datetime(2026, 2, 19, 11, 0))
        a = _ev("A", datetime(2026, 2, 19, 9, 0), datetime(2026, 2, 19, 10, 0))
        events = [late, a]
        sort_by_start(events)
        self.assertEqual([e.id for e in events], ["late", "A"])


class TestBinEvents(unittest.TestCase):
    def test_buckets_are_sorted_per_day(self) -> None:
        late = _ev("late", datetime(2026, 2, 19, 14, 0), datetime(2026, 2, 19, 15, 0))
        early = _ev("early", datetime(2026, 2, 19, 8, 0), datetime(2026, 2, 19, 9, 0))
        days = [date(2026, 2, 18), date(2026, 2, 19)]
        buckets = bin_events(days, [late, early])
        self.assertEqual(buckets[date(2026, 2, 18)], [])
        self.assertEqual([e.id for e in buckets[date(2026, 2, 19)]], ["early", "late"])

    def test_filter_by_teacher(self) -> None:
        a = _ev("a", datetime(2026, 2, 19, 9, 0), datetime(2026, 2, 19, 10, 0), teacher_id="1")
        b = _ev("b", datetime(2026, 2, 19, 9, 0), datetime(2026, 2, 19, 10, 0), teacher_id="2")
        self.assertEqual(events_for_teacher([a, b], "2"), [b])


if __name__ == "__main__":
    unittest.main()
