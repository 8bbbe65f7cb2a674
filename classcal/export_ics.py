"""
iCalendar (.ics) export.

Students can download the sessions they want to join and import them into:
- Google Calendar
- Outlook
- Apple Calendar
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from classcal.model import ScheduleEvent


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _dt_local(dt: datetime) -> str:
    """
    Format a datetime as ICS local datetime string 'YYYYMMDDTHHMMSS'.
    """
    return dt.strftime("%Y%m%dT%H%M%S")


def export_events_to_ics(events: Iterable[ScheduleEvent], out_path: str | Path) -> int:
    """
    Export events to an .ics file. Returns number of exported events.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//ClassCal//EN")
    lines.append("CALSCALE:GREGORIAN")

    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    count = 0
    for ev in events:
        if ev.start is None or ev.end is None:
            continue

        dtstart = _dt_local(ev.start)
        summary = ev.title.strip() or "Class session"
        if ev.teacher_name:
            summary = f"{summary} ({ev.teacher_name})"
        uid = ev.id if ev.id else f"{ev.teacher_id}-{dtstart}"

        description = ev.description.strip()
        if ev.meet_link:
            join = f"Join: {ev.meet_link}"
            description = f"{description}\n\n{join}" if description else join

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{_ics_escape(uid)}@classcal")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART:{dtstart}")
        lines.append(f"DTEND:{_dt_local(ev.end)}")
        lines.append(f"SUMMARY:{_ics_escape(summary)}")
        if description:
            lines.append(f"DESCRIPTION:{_ics_escape(description)}")
        if ev.meet_link:
            lines.append(f"URL:{ev.meet_link}")
        lines.append("END:VEVENT")
        count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
