from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import httpx

from ..errors import UpstreamError

LOGGER = logging.getLogger(__name__)

USER_AGENT = "post-preview/1.0"


@dataclass(frozen=True)
class FetchResult:
    """Outcome of a successful single-row query."""

    record: Optional[Dict[str, Any]]
    status_code: int
    body: str


class LookupState(str, Enum):
    FOUND = "found"
    MISSING = "missing"
    FAILED = "failed"


@dataclass(frozen=True)
class Lookup:
    """Result of a best-effort lookup for a related record."""

    state: LookupState
    record: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @classmethod
    def skipped(cls) -> "Lookup":
        return cls(LookupState.MISSING)

    @property
    def found(self) -> bool:
        return self.state is LookupState.FOUND


class RecordStore:
    """Issue ``limit=1`` queries against a PostgREST-style endpoint.

    The client is owned by the caller; the store never closes it.
    """

    def __init__(self, client: httpx.AsyncClient, base_url: str, api_key: str) -> None:
        self._client = client
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

    async def fetch_one(
        self,
        table: str,
        filters: Mapping[str, str],
        select: str,
    ) -> FetchResult:
        """Fetch at most one row matching every equality filter.

        Raises :class:`UpstreamError` when the store answers with a non-2xx
        status, the request fails or times out, or the body is not a JSON list.
        """

        url = f"{self.base_url}/rest/v1/{quote(table, safe='')}"
        params: Dict[str, str] = {column: f"eq.{value}" for column, value in filters.items()}
        params["select"] = select
        params["limit"] = "1"
        try:
            response = await self._client.get(url, params=params, headers=self._headers())
        except httpx.TimeoutException as exc:
            raise UpstreamError(f"Data store timed out reading {table}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Data store unavailable reading {table}") from exc

        body = response.text
        if not response.is_success:
            raise UpstreamError(
                f"Data store returned {response.status_code} for {table}",
                upstream_status=response.status_code,
                upstream_body=body,
            )
        try:
            rows = response.json()
        except ValueError as exc:
            raise UpstreamError(
                f"Data store returned invalid JSON for {table}",
                upstream_status=response.status_code,
                upstream_body=body,
            ) from exc
        if not isinstance(rows, list):
            raise UpstreamError(
                f"Data store returned an unexpected payload for {table}",
                upstream_status=response.status_code,
                upstream_body=body,
            )
        record = rows[0] if rows and isinstance(rows[0], dict) else None
        return FetchResult(record=record, status_code=response.status_code, body=body)

    async def lookup(
        self,
        table: str,
        filters: Mapping[str, str],
        select: str,
    ) -> Lookup:
        """Best-effort variant of :meth:`fetch_one` that never raises."""

        try:
            result = await self.fetch_one(table, filters, select)
        except UpstreamError as exc:
            LOGGER.warning("Lookup in %s degraded: %s", table, exc.message)
            return Lookup(LookupState.FAILED, error=exc.message)
        if result.record is None:
            return Lookup(LookupState.MISSING)
        return Lookup(LookupState.FOUND, record=result.record)


__all__ = ["FetchResult", "Lookup", "LookupState", "RecordStore", "USER_AGENT"]
