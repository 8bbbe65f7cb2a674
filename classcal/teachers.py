"""
Teacher allow-list and sign-in state.

Only teachers on the allow-list may sign in and create sessions.
The list comes from the remote "teachers" collection; the cached snapshot
and finally the built-in list below are used when the service is down.

Identity-provider authentication happens elsewhere: sign_in() only checks
the e-mail address and remembers the teacher and the bearer token.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from classcal.model import Teacher
from classcal.storage import AUTH_KEY, TEACHER_INFO_KEY, TEACHERS_KEY, LocalCache
from classcal.store import RecordService


logger = logging.getLogger(__name__)

TEACHERS_TABLE = "teachers"
TOKEN_TTL_SECONDS = 3600

ALLOWED_TEACHERS: list[Teacher] = [
    Teacher("1", "John Smith", "john.smith@example.com", "https://randomuser.me/api/portraits/men/1.jpg"),
    Teacher("2", "Jane Doe", "jane.doe@example.com", "https://randomuser.me/api/portraits/women/2.jpg"),
    Teacher("3", "Robert Johnson", "robert.johnson@example.com", "https://randomuser.me/api/portraits/men/3.jpg"),
    Teacher("4", "Emily Davis", "emily.davis@example.com", "https://randomuser.me/api/portraits/women/4.jpg"),
    Teacher("5", "Michael Wilson", "michael.wilson@example.com", "https://randomuser.me/api/portraits/men/5.jpg"),
]


def _now_ms() -> int:
    return int(time.time() * 1000)


class TeacherDirectory:
    def __init__(self, remote: RecordService, cache: LocalCache, table: str = TEACHERS_TABLE) -> None:
        self.remote = remote
        self.cache = cache
        self.table = table

    def fetch_all(self) -> list[Teacher]:
        result = self.remote.select_all(self.table)
        if result.ok:
            records = [r for r in result.data if isinstance(r, dict)]
            self.cache.set(TEACHERS_KEY, records)
            return [Teacher.from_record(r) for r in records]

        logger.warning("Fetching teachers failed, using cached list: %s", result.error)
        cached = self.cache.get_list(TEACHERS_KEY)
        if cached:
            return [Teacher.from_record(r) for r in cached]
        return list(ALLOWED_TEACHERS)

    def find_by_email(self, email: str) -> Optional[Teacher]:
        wanted = email.strip().lower()
        if not wanted:
            return None
        for teacher in self.fetch_all():
            if teacher.email.strip().lower() == wanted:
                return teacher
        return None

    # -- sign-in state -----------------------------------------------------

    def sign_in(self, email: str, token: Optional[str] = None, photo_url: Optional[str] = None) -> Optional[Teacher]:
        """
        Sign in an allow-listed teacher. Returns None if not authorized.

        A profile photo from the identity provider replaces the listed one.
        """
        teacher = self.find_by_email(email)
        if teacher is None:
            logger.info("Sign-in refused for %s: not an authorized teacher", email)
            return None

        if photo_url:
            teacher = Teacher(teacher.id, teacher.name, teacher.email, photo_url)
        self.cache.set(TEACHER_INFO_KEY, teacher.to_record())
        if token:
            self.cache.set(AUTH_KEY, {"token": token, "expires": _now_ms() + TOKEN_TTL_SECONDS * 1000})
        return teacher

    def sign_out(self) -> None:
        self.cache.remove(TEACHER_INFO_KEY)
        self.cache.remove(AUTH_KEY)

    def current_teacher(self) -> Optional[Teacher]:
        info = self.cache.get(TEACHER_INFO_KEY)
        if not isinstance(info, dict) or not info.get("id"):
            return None
        return Teacher.from_record(info)

    def cached_token(self) -> Optional[str]:
        """
        Return the stored bearer token, or None if missing or expired.
        """
        creds = self.cache.get(AUTH_KEY)
        if not isinstance(creds, dict):
            return None
        token = creds.get("token")
        expires = creds.get("expires")
        if not isinstance(token, str) or not token:
            return None
        if isinstance(expires, (int, float)) and expires <= _now_ms():
            return None
        return token
