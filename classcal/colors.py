"""
Per-teacher display colors.

A teacher's color is derived from the teacher id with a simple additive
hash, so nothing has to be stored. Collisions between teachers are expected
(5 colors).
"""

from __future__ import annotations

from classcal.model import ScheduleEvent


PALETTE = [
    "#4285F4",  # blue
    "#EA4335",  # red
    "#FBBC05",  # yellow
    "#34A853",  # green
    "#9334E6",  # purple
]


def color_for(teacher_id: str) -> str:
    """
    Return the palette color for `teacher_id`.

    The empty id hashes to 0 and therefore gets the first palette entry.
    """
    # sum UTF-16 code units, so ids outside the BMP count as a surrogate pair
    data = (teacher_id or "").encode("utf-16-le")
    total = sum(int.from_bytes(data[i:i + 2], "little") for i in range(0, len(data), 2))
    return PALETTE[total % len(PALETTE)]


def display_color(event: ScheduleEvent) -> str:
    # an explicit color on the event always wins
    if event.color:
        return event.color
    return color_for(event.teacher_id)
