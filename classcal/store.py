"""
Event store: the single writer of the event collection.

Reconciles the remote record service with the local durable cache:
- reads are read-through: the remote wins, the cache is the fallback
- writes go to the remote first; on failure they are applied to the cache only
- every successful remote read/write refreshes the cache

Events created while the remote is unreachable carry pendingSync=True in
the cache. They are kept across fresh remote snapshots and can be pushed
later with sync_pending().
"""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping, Protocol

from classcal.model import ScheduleEvent, fields_to_record
from classcal.remote import RemoteResult
from classcal.storage import EVENTS_KEY, LocalCache


logger = logging.getLogger(__name__)

EVENTS_TABLE = "events"
LOCAL_ID_PREFIX = "local-"

# local bookkeeping, never sent to the remote service
_LOCAL_ONLY_KEYS = ("pendingSync",)


class MissingEventIdError(ValueError):
    """
    Raised when update() is called without an event id.

    This is a caller mistake, not a runtime fault, so it is not recovered.
    """


class RecordService(Protocol):
    def select_all(self, table: str) -> RemoteResult: ...

    def insert_one(self, table: str, record: dict[str, Any]) -> RemoteResult: ...

    def update_by_id(self, table: str, record_id: str, changes: dict[str, Any]) -> RemoteResult: ...

    def delete_by_id(self, table: str, record_id: str) -> RemoteResult: ...


def _remote_payload(record: Mapping[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in record.items() if k not in _LOCAL_ONLY_KEYS}


def _normalize(records: list[dict[str, Any]]) -> list[ScheduleEvent]:
    return [ScheduleEvent.from_record(r) for r in records]


def _find_index(records: list[dict[str, Any]], event_id: str) -> int:
    for i, rec in enumerate(records):
        if str(rec.get("id", "")) == event_id:
            return i
    return -1


def _next_local_id(records: list[dict[str, Any]]) -> str:
    """
    local-<millis>, bumped past any cached local id so ids stay unique
    and increasing even within one millisecond.
    """
    stamp = int(time.time() * 1000)
    for rec in records:
        rid = str(rec.get("id", ""))
        if rid.startswith(LOCAL_ID_PREFIX):
            suffix = rid[len(LOCAL_ID_PREFIX):]
            if suffix.isdigit():
                stamp = max(stamp, int(suffix) + 1)
    return f"{LOCAL_ID_PREFIX}{stamp}"


class EventStore:
    """
    Construct once at application start and pass to consumers.
    """

    def __init__(self, remote: RecordService, cache: LocalCache, table: str = EVENTS_TABLE) -> None:
        self.remote = remote
        self.cache = cache
        self.table = table

    # -- cache helpers -----------------------------------------------------

    def _cached_records(self) -> list[dict[str, Any]]:
        return self.cache.get_list(EVENTS_KEY) or []

    def _write_records(self, records: list[dict[str, Any]]) -> None:
        self.cache.set(EVENTS_KEY, records)

    def _append_record(self, record: dict[str, Any]) -> None:
        records = self._cached_records()
        records.append(record)
        self._write_records(records)

    # -- operations --------------------------------------------------------

    def fetch_all(self) -> list[ScheduleEvent]:
        """
        Return all events: the remote snapshot if reachable, else the cached one.
        """
        result = self.remote.select_all(self.table)
        if result.ok:
            records = [r for r in result.data if isinstance(r, dict)]
            remote_ids = {str(r.get("id", "")) for r in records}
            # keep local-only records a fresh snapshot does not know about
            pending = [
                r
                for r in self._cached_records()
                if r.get("pendingSync") and str(r.get("id", "")) not in remote_ids
            ]
            snapshot = records + pending
            self._write_records(snapshot)
            return _normalize(snapshot)

        logger.warning("Fetching events failed, using cached snapshot: %s", result.error)
        cached = self.cache.get_list(EVENTS_KEY)
        if cached is None:
            return []
        return _normalize(cached)

    def create(self, fields: Mapping[str, Any]) -> ScheduleEvent:
        """
        Insert a new event. Falls back to a local-only record if the remote fails.
        """
        record = fields_to_record(fields)
        record.pop("pendingSync", None)
        if not record.get("id"):
            # let the service assign the id
            record.pop("id", None)

        result = self.remote.insert_one(self.table, _remote_payload(record))
        if result.ok:
            # server-assigned fields take precedence
            stored = {**record, **result.data}
            self._append_record(stored)
            return ScheduleEvent.from_record(stored)

        logger.warning("Creating event remotely failed, storing locally: %s", result.error)
        local = {**record, "id": _next_local_id(self._cached_records()), "pendingSync": True}
        self._append_record(local)
        return ScheduleEvent.from_record(local)

    def update(self, fields: Mapping[str, Any]) -> ScheduleEvent:
        """
        Update an existing event by id.

        Raises MissingEventIdError if no id is given. If the remote fails and
        no cached event matches, the input is returned unchanged.
        """
        event_id = str(fields.get("id") or "")
        if not event_id:
            raise MissingEventIdError("Event ID is required for update")

        changes = fields_to_record(fields)
        changes.pop("id", None)
        changes.pop("pendingSync", None)

        records = self._cached_records()
        index = _find_index(records, event_id)

        result = self.remote.update_by_id(self.table, event_id, _remote_payload(changes))
        if result.ok:
            if index >= 0:
                records[index] = {**records[index], **result.data}
            else:
                records.append(dict(result.data))
            self._write_records(records)
            return ScheduleEvent.from_record(result.data)

        logger.warning("Updating event %s remotely failed, updating cache: %s", event_id, result.error)
        if index < 0:
            return ScheduleEvent.from_fields(fields)
        records[index] = {**records[index], **changes}
        self._write_records(records)
        return ScheduleEvent.from_record(records[index])

    def delete(self, event_id: str) -> bool:
        """
        Delete an event. The cache entry is removed whatever the remote says.

        Returns True if the remote delete succeeded.
        """
        result = self.remote.delete_by_id(self.table, event_id)
        if not result.ok:
            logger.warning("Deleting event %s remotely failed: %s", event_id, result.error)

        records = self._cached_records()
        remaining = [r for r in records if str(r.get("id", "")) != event_id]
        if len(remaining) != len(records):
            self._write_records(remaining)
        return result.ok

    def sync_pending(self) -> int:
        """
        Push locally created events to the remote service.

        Each success replaces the local record (and its local id) with the
        server record. Returns the number of synced events.
        """
        records = self._cached_records()
        synced = 0
        for i, rec in enumerate(records):
            if not rec.get("pendingSync"):
                continue
            payload = _remote_payload(rec)
            payload.pop("id", None)
            result = self.remote.insert_one(self.table, payload)
            if not result.ok:
                logger.warning("Syncing event %s failed: %s", rec.get("id"), result.error)
                continue
            records[i] = {**payload, **result.data}
            synced += 1

        if synced:
            self._write_records(records)
        return synced
