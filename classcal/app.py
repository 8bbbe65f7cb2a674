"""
Application wiring.

Everything that talks to the outside world is built once here and passed
around explicitly; there are no module-level clients.
"""

from __future__ import annotations

from dataclasses import dataclass

from classcal.config import Settings
from classcal.meet import MeetLinkProvider
from classcal.remote import RecordServiceClient
from classcal.storage import LocalCache
from classcal.store import EventStore
from classcal.teachers import TeacherDirectory


@dataclass
class App:
    settings: Settings
    cache: LocalCache
    store: EventStore
    teachers: TeacherDirectory
    meet: MeetLinkProvider


def build_app(settings: Settings) -> App:
    cache = LocalCache(settings.cache_path)
    client = RecordServiceClient(settings.service_url, settings.service_key, timeout=settings.timeout)
    teachers = TeacherDirectory(client, cache)
    return App(
        settings=settings,
        cache=cache,
        store=EventStore(client, cache),
        teachers=teachers,
        meet=MeetLinkProvider(teachers.cached_token, timeout=settings.timeout),
    )
