"""
Client for the remote record service.

The service is a PostgREST-style REST API (e.g. Supabase) exposing one
resource per collection:

    GET    /rest/v1/<table>?select=*
    POST   /rest/v1/<table>              (Prefer: return=representation)
    PATCH  /rest/v1/<table>?id=eq.<id>   (Prefer: return=representation)
    DELETE /rest/v1/<table>?id=eq.<id>

Every call returns a RemoteResult instead of raising. Network errors,
timeouts, non-2xx responses and unexpected bodies all become failures,
which the store turns into cache fallbacks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass
class RemoteResult:
    ok: bool
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, data: Any = None) -> "RemoteResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "RemoteResult":
        return cls(ok=False, error=error)


class RecordServiceClient:
    """
    Thin wrapper over requests for the four record operations.
    """

    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") if base_url else None
        self.api_key = api_key
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Prefer": "return=representation",
        }
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _request(
        self,
        method: str,
        table: str,
        params: Optional[dict[str, str]] = None,
        payload: Any = None,
        expect_body: bool = True,
    ) -> RemoteResult:
        if not self.base_url:
            return RemoteResult.failure("record service URL is not configured")

        url = f"{self.base_url}/rest/v1/{table}"
        try:
            resp = self.session.request(
                method,
                url,
                params=params,
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.Timeout:
            return RemoteResult.failure(f"{method} {table}: timed out after {self.timeout}s")
        except requests.RequestException as exc:
            return RemoteResult.failure(f"{method} {table}: {exc}")

        if not expect_body:
            return RemoteResult.success()

        try:
            body = resp.json()
        except ValueError:
            return RemoteResult.failure(f"{method} {table}: response is not JSON")
        return RemoteResult.success(body)

    @staticmethod
    def _single(result: RemoteResult, what: str) -> RemoteResult:
        # return=representation answers with a one-element list
        if not result.ok:
            return result
        body = result.data
        if isinstance(body, list):
            if len(body) != 1 or not isinstance(body[0], dict):
                return RemoteResult.failure(f"{what}: expected exactly one record, got {len(body)}")
            return RemoteResult.success(body[0])
        if isinstance(body, dict):
            return RemoteResult.success(body)
        return RemoteResult.failure(f"{what}: malformed response")

    def select_all(self, table: str) -> RemoteResult:
        result = self._request("GET", table, params={"select": "*"})
        if result.ok and not isinstance(result.data, list):
            return RemoteResult.failure(f"select {table}: malformed response")
        if result.ok:
            logger.info("Fetched %d records from %s", len(result.data), table)
        return result

    def insert_one(self, table: str, record: dict[str, Any]) -> RemoteResult:
        return self._single(self._request("POST", table, payload=[record]), f"insert {table}")

    def update_by_id(self, table: str, record_id: str, changes: dict[str, Any]) -> RemoteResult:
        result = self._request("PATCH", table, params={"id": f"eq.{record_id}"}, payload=changes)
        return self._single(result, f"update {table}")

    def delete_by_id(self, table: str, record_id: str) -> RemoteResult:
        return self._request("DELETE", table, params={"id": f"eq.{record_id}"}, expect_body=False)
