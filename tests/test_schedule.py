"""
Tests for the create / edit flow.

- missing title or date -> nothing saved
- new sessions ask the meet provider for a link
- edits keep the stored link
"""

import tempfile
import unittest
from datetime import date, datetime
from pathlib import Path

from classcal.colors import color_for
from classcal.meet import MeetLinkProvider, MeetLinkState
from classcal.model import Teacher
from classcal.schedule import ScheduleForm, parse_hhmm, save_schedule
from classcal.storage import LocalCache
from classcal.store import EventStore
from fakes import FakeRecordService, FakeResponse, FakeSession


TEACHER = Teacher("2", "Jane Doe", "jane.doe@example.com")


class TestSaveSchedule(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.remote = FakeRecordService()
        self.store = EventStore(self.remote, LocalCache(Path(self._tmp.name) / "cache.json"))
        self.session = FakeSession(FakeResponse(body={"hangoutLink": "https://meet.google.com/real-link"}))

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_missing_title_or_date_is_refused(self) -> None:
        provider = MeetLinkProvider(lambda: "tok", session=self.session)
        self.assertIsNone(save_schedule(self.store, provider, ScheduleForm(start_date=date(2026, 2, 19)), TEACHER))
        self.assertIsNone(save_schedule(self.store, provider, ScheduleForm(title="   "), TEACHER))
        self.assertIsNone(save_schedule(self.store, provider, ScheduleForm(title="Algebra"), TEACHER))
        self.assertEqual(self.remote.calls, [])
        self.assertEqual(self.session.requests, [])
        self.assertEqual(provider.state, MeetLinkState.IDLE)

    def test_create_with_real_link(self) -> None:
        provider = MeetLinkProvider(lambda: "tok", session=self.session)
        form = ScheduleForm(title="Algebra", start_date=date(2026, 2, 19), start_time="10:15", end_time="12:00")
        result = save_schedule(self.store, provider, form, TEACHER)

        self.assertIsNotNone(result)
        assert result is not None
        ev = result.event
        self.assertEqual(result.warnings, [])
        self.assertEqual(ev.meet_link, "https://meet.google.com/real-link")
        self.assertEqual(ev.start, datetime(2026, 2, 19, 10, 15))
        self.assertEqual(ev.end, datetime(2026, 2, 19, 12, 0))
        self.assertEqual(ev.teacher_id, "2")
        self.assertEqual(ev.teacher_name, "Jane Doe")
        self.assertEqual(ev.color, color_for("2"))

    def test_create_without_token_warns(self) -> None:
        provider = MeetLinkProvider(lambda: None, session=self.session)
        form = ScheduleForm(title="Algebra", start_date=date(2026, 2, 19))
        result = save_schedule(self.store, provider, form, TEACHER)

        assert result is not None
        self.assertEqual(len(result.warnings), 1)
        self.assertRegex(result.event.meet_link, r"^https://meet\.google\.com/[a-z]{10}$")
        self.assertEqual(result.event.start, datetime(2026, 2, 19, 9, 0))
        self.assertEqual(result.event.end, datetime(2026, 2, 19, 10, 0))

    def test_edit_reuses_link_and_skips_provider(self) -> None:
        provider = MeetLinkProvider(lambda: "tok", session=self.session)
        created = save_schedule(
            self.store, provider, ScheduleForm(title="Algebra", start_date=date(2026, 2, 19)), TEACHER
        )
        assert created is not None
        self.session.requests.clear()

        form = ScheduleForm.from_event(created.event)
        self.assertEqual(form.start_time, "09:00")
        form.title = "Algebra II"
        form.end_time = "11:30"
        edited = save_schedule(self.store, provider, form, TEACHER, edit_event=created.event)

        assert edited is not None
        self.assertEqual(edited.event.id, created.event.id)
        self.assertEqual(edited.event.title, "Algebra II")
        self.assertEqual(edited.event.end, datetime(2026, 2, 19, 11, 30))
        self.assertEqual(edited.event.meet_link, created.event.meet_link)
        self.assertEqual(self.session.requests, [])

    def test_malformed_time_raises(self) -> None:
        provider = MeetLinkProvider(lambda: None, session=self.session)
        form = ScheduleForm(title="Algebra", start_date=date(2026, 2, 19), start_time="25:00")
        with self.assertRaises(ValueError):
            save_schedule(self.store, provider, form, TEACHER)


class TestParseHHMM(unittest.TestCase):
    def test_valid_and_invalid(self) -> None:
        self.assertEqual(parse_hhmm(" 08:05 ").strftime("%H:%M"), "08:05")
        for bad in ("8", "8:60", "aa:bb", "24:00", "1:2:3"):
            with self.assertRaises(ValueError):
                parse_hhmm(bad)


if __name__ == "__main__":
    unittest.main()
