"""
Create / edit flow for class sessions.

Turns the values a teacher typed (title, date, HH:MM times) into a saved
ScheduleEvent:
- title and start date are required; without them nothing is saved
- new sessions get a meeting link from the MeetLinkProvider
- edits keep the link already stored on the event
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Optional

from classcal.colors import color_for
from classcal.meet import MeetLinkProvider
from classcal.model import ScheduleEvent, Teacher
from classcal.store import EventStore


DEFAULT_START_TIME = "09:00"
DEFAULT_END_TIME = "10:00"


def parse_hhmm(hhmm: str) -> time:
    """
    Convert 'HH:MM' to a time value.
    Raises ValueError for invalid formats.
    """
    parts = hhmm.strip().split(":")
    if len(parts) != 2:
        raise ValueError(f"Invalid time format: {hhmm!r}")
    h = int(parts[0])
    m = int(parts[1])
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise ValueError(f"Invalid time value: {hhmm!r}")
    return time(h, m)


@dataclass
class ScheduleForm:
    title: str = ""
    description: str = ""
    start_date: Optional[date] = None
    start_time: str = DEFAULT_START_TIME
    end_time: str = DEFAULT_END_TIME

    @classmethod
    def from_event(cls, event: ScheduleEvent) -> "ScheduleForm":
        """
        Prefill the form from an existing event (edit mode).
        """
        return cls(
            title=event.title,
            description=event.description,
            start_date=event.start.date() if event.start else None,
            start_time=event.start.strftime("%H:%M") if event.start else DEFAULT_START_TIME,
            end_time=event.end.strftime("%H:%M") if event.end else DEFAULT_END_TIME,
        )

    def is_complete(self) -> bool:
        return bool(self.title.strip()) and self.start_date is not None


@dataclass
class SaveResult:
    event: ScheduleEvent
    warnings: list[str] = field(default_factory=list)


def save_schedule(
    store: EventStore,
    provider: MeetLinkProvider,
    form: ScheduleForm,
    teacher: Teacher,
    edit_event: Optional[ScheduleEvent] = None,
) -> Optional[SaveResult]:
    """
    Save the form as a new event, or as an update of `edit_event`.

    Returns None (and saves nothing) if the title or start date is missing.
    """
    start_date = form.start_date
    if start_date is None or not form.is_complete():
        return None

    # both times are on the start date
    start = datetime.combine(start_date, parse_hhmm(form.start_time))
    end = datetime.combine(start_date, parse_hhmm(form.end_time))

    fields: dict[str, Any] = {
        "title": form.title.strip(),
        "description": form.description,
        "start": start,
        "end": end,
        "teacher_id": teacher.id,
        "teacher_name": teacher.name,
        "teacher_photo_url": teacher.photo_url,
        "color": color_for(teacher.id),
    }

    warnings: list[str] = []
    if edit_event is not None:
        fields["id"] = edit_event.id
        fields["meet_link"] = edit_event.meet_link
        return SaveResult(event=store.update(fields), warnings=warnings)

    link = provider.create_link(fields["title"], start, end)
    if link.warning:
        warnings.append(link.warning)
    fields["meet_link"] = link.url
    return SaveResult(event=store.create(fields), warnings=warnings)
