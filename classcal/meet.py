"""
Meeting links for new class sessions.

State machine per request:

    IDLE -> REQUESTING -> READY     (Google Calendar created a Meet conference)
                       -> FALLBACK  (no token, request failed, no link returned)

The fallback is a locally generated placeholder link; the caller gets a
warning to show the teacher, event creation is never blocked.
Single attempt, no automatic retry.
"""

from __future__ import annotations

import enum
import logging
import random
import string
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional
from uuid import uuid4

import requests


logger = logging.getLogger(__name__)

MEET_HOST = "https://meet.google.com/"
CALENDAR_EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/primary/events"
FALLBACK_CODE_LENGTH = 10
DEFAULT_TIMEOUT = 10.0

FALLBACK_WARNING = "Could not create a Google Meet link; a placeholder link was generated instead."


class MeetLinkState(enum.Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    READY = "ready"
    FALLBACK = "fallback"


@dataclass
class MeetLinkResult:
    url: str
    state: MeetLinkState
    warning: Optional[str] = None


def generate_meet_link(rng: Optional[random.Random] = None) -> str:
    """
    Return a placeholder Meet URL with a random lowercase code.
    """
    rng = rng or random.Random()
    code = "".join(rng.choice(string.ascii_lowercase) for _ in range(FALLBACK_CODE_LENGTH))
    return f"{MEET_HOST}{code}"


def _extract_link(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    hangout_link = body.get("hangoutLink")
    if hangout_link:
        return str(hangout_link)
    entry_points = (body.get("conferenceData") or {}).get("entryPoints") or []
    for ep in entry_points:
        if isinstance(ep, dict) and ep.get("uri"):
            return str(ep["uri"])
    return None


class MeetLinkProvider:
    """
    Requests a Meet link through the Google Calendar API using the cached token.

    `token_source` returns the current bearer token, or None when the teacher
    has not granted access (or the token expired).
    """

    def __init__(
        self,
        token_source: Callable[[], Optional[str]],
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.token_source = token_source
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.rng = rng
        self.state = MeetLinkState.IDLE

    def _fallback(self, reason: str) -> MeetLinkResult:
        logger.warning("Using fallback meet link: %s", reason)
        self.state = MeetLinkState.FALLBACK
        return MeetLinkResult(url=generate_meet_link(self.rng), state=self.state, warning=FALLBACK_WARNING)

    def create_link(self, title: str, start: datetime, end: datetime) -> MeetLinkResult:
        self.state = MeetLinkState.REQUESTING

        token = self.token_source()
        if not token:
            # no network call without credentials
            return self._fallback("no authorization token available")

        body = {
            "summary": title,
            "start": {"dateTime": start.astimezone().isoformat()},
            "end": {"dateTime": end.astimezone().isoformat()},
            "conferenceData": {
                "createRequest": {"requestId": uuid4().hex, "conferenceSolutionKey": {"type": "hangoutsMeet"}}
            },
        }
        try:
            resp = self.session.post(
                CALENDAR_EVENTS_URL,
                params={"conferenceDataVersion": "1"},
                json=body,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            link = _extract_link(resp.json())
        except (requests.RequestException, ValueError) as exc:
            return self._fallback(f"calendar request failed: {exc}")

        if not link:
            return self._fallback("calendar response contained no conference link")

        self.state = MeetLinkState.READY
        logger.info("Created meet link %s", link)
        return MeetLinkResult(url=link, state=self.state)
