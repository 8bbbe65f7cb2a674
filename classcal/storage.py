"""
Local durable cache.

A single JSON file holding one object of fixed keys:

    {
      "cachedEvents":   [ ...event records... ],
      "cachedTeachers": [ ...teacher records... ],
      "teacherInfo":    { ...signed-in teacher... },
      "googleAuthCredentials": {"token": "...", "expires": 1700000000000}
    }

Design rationale:
- the remote record service is the source of truth
- this file is the fallback snapshot used when the service is unreachable,
  and it survives between sessions

Values are stored with the same JSON shape the remote service uses
(timestamps as ISO strings); they are normalized when read by the store.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)

EVENTS_KEY = "cachedEvents"
TEACHERS_KEY = "cachedTeachers"
TEACHER_INFO_KEY = "teacherInfo"
AUTH_KEY = "googleAuthCredentials"


def _default_cache_path() -> Path:
    """
    Return the default cache location in the user's home directory.

    Using a function instead of a constant makes testing easier,
    because tests can override the path.
    """
    return Path.home() / ".classcal" / "cache.json"


class LocalCache:
    """
    Key-value store persisted as one JSON file.

    Reads never raise: a missing or corrupted file behaves like an empty cache.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else _default_cache_path()

    def _load(self) -> dict[str, Any]:
        # First run: file does not exist yet -> nothing cached
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Ignoring unreadable cache file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed cache file %s (not an object)", self.path)
            return {}
        return data

    def _save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    def get(self, key: str) -> Any:
        """
        Return the cached value for `key`, or None if absent.
        """
        return self._load().get(key)

    def get_list(self, key: str) -> list[dict[str, Any]] | None:
        """
        Return the cached list of records for `key`.

        None means "no usable snapshot": missing, or not a list of objects.
        """
        value = self.get(key)
        if value is None:
            return None
        if not isinstance(value, list):
            logger.warning("Cached value for %r is not a list, ignoring it", key)
            return None
        return [x for x in value if isinstance(x, dict)]

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)
