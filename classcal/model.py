"""
Central data model definitions used across the project.

This module defines the canonical structure of Teacher and ScheduleEvent
objects so that:
- all modules share the same field names
- the JSON record shape (remote service + local cache) is converted in one place
- timestamps are normalized to datetime values exactly once, at the boundary
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields as dc_fields
from datetime import datetime, timezone
from typing import Any, Mapping, Optional


# Python attribute name -> JSON record key
RECORD_KEYS: dict[str, str] = {
    "id": "id",
    "title": "title",
    "description": "description",
    "start": "startDateTime",
    "end": "endDateTime",
    "meet_link": "meetLink",
    "teacher_id": "teacherId",
    "teacher_name": "teacherName",
    "teacher_photo_url": "teacherPhotoUrl",
    "color": "color",
    "pending_sync": "pendingSync",
}

DATETIME_FIELDS = ("start", "end")

_FRACTION_RE = re.compile(r"\.(\d+)")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Normalize an ISO-8601 string (or datetime) to a naive local datetime.

    Aware values are converted to local wall-clock time first, so that
    calendar-date comparisons work in a single timezone.
    Returns None for missing or unparseable values.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        # fromisoformat() only accepts a trailing 'Z' from 3.11 on
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        # before 3.11 only 3 or 6 fractional digits are accepted
        text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """
    Format as an absolute UTC ISO string; naive values are taken as local time.
    """
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat()


def fields_to_record(values: Mapping[str, Any]) -> dict[str, Any]:
    """
    Convert a (partial) mapping of attribute names to a JSON record.

    Only keys present in `values` are emitted; unknown keys are dropped.
    """
    record: dict[str, Any] = {}
    for attr, value in values.items():
        key = RECORD_KEYS.get(attr)
        if key is None:
            continue
        if attr in DATETIME_FIELDS:
            value = format_timestamp(parse_timestamp(value))
        record[key] = value
    return record


@dataclass
class Teacher:
    """
    One authorized teacher, as listed in the allow-list.
    """

    id: str
    name: str
    email: str
    photo_url: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Teacher":
        return cls(
            id=str(record.get("id", "")),
            name=str(record.get("name", "") or ""),
            email=str(record.get("email", "") or ""),
            photo_url=record.get("photoUrl") or None,
        )

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {"id": self.id, "name": self.name, "email": self.email}
        if self.photo_url:
            record["photoUrl"] = self.photo_url
        return record


@dataclass
class ScheduleEvent:
    """
    Represents one scheduled class session with its meeting link.

    start <= end is expected but not enforced.
    """

    id: str = ""
    title: str = ""
    description: str = ""
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    meet_link: str = ""
    teacher_id: str = ""
    teacher_name: str = ""
    teacher_photo_url: Optional[str] = None
    color: Optional[str] = None
    pending_sync: bool = field(default=False)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ScheduleEvent":
        """
        Build an event from a JSON record (remote response or cache entry).
        """
        return cls(
            id=str(record.get("id", "") or ""),
            title=str(record.get("title", "") or ""),
            description=str(record.get("description", "") or ""),
            start=parse_timestamp(record.get("startDateTime")),
            end=parse_timestamp(record.get("endDateTime")),
            meet_link=str(record.get("meetLink", "") or ""),
            teacher_id=str(record.get("teacherId", "") or ""),
            teacher_name=str(record.get("teacherName", "") or ""),
            teacher_photo_url=record.get("teacherPhotoUrl") or None,
            color=record.get("color") or None,
            pending_sync=bool(record.get("pendingSync", False)),
        )

    @classmethod
    def from_fields(cls, values: Mapping[str, Any]) -> "ScheduleEvent":
        """
        Build an event from a (partial) mapping of attribute names.
        """
        return cls.from_record(fields_to_record(values))

    def to_record(self) -> dict[str, Any]:
        return fields_to_record({f.name: getattr(self, f.name) for f in dc_fields(self)})

    def to_fields(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in dc_fields(self)}
