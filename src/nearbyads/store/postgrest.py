"""
Supabase / PostgREST entity store.

Issues the bounding-box query against the hosted `ads` table over its REST interface:

    GET {url}/rest/v1/{table}?select=...&status=eq.active
        &latitude=not.is.null&longitude=not.is.null
        &latitude=gte.<min>&latitude=lte.<max>
        &longitude=gte.<min>&longitude=lte.<max>&limit=<n>

Every failure mode (transport error, non-2xx status, non-JSON body, rows that do not
validate) is reported as `StoreUnavailable`. Retries are the caller's decision.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from nearbyads.core.http import get_json
from nearbyads.domain.models import DISPLAY_COLUMNS, SearchableEntity
from nearbyads.errors import ConfigError, StoreUnavailable

logger = logging.getLogger(__name__)

SELECT_COLUMNS: tuple[str, ...] = ("id", *DISPLAY_COLUMNS, "latitude", "longitude", "created_at", "status")


class PostgrestEntityStore:
    def __init__(
        self,
        *,
        url: str,
        api_key: str,
        table: str = "ads",
        timeout_seconds: float = 10,
    ) -> None:
        if not url:
            raise ConfigError("PostgREST store requires a base url (SUPABASE_URL)")
        if not api_key:
            raise ConfigError("PostgREST store requires an api key (SUPABASE_ANON_KEY)")
        self._endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        self._api_key = api_key
        self._timeout_seconds = float(timeout_seconds)

    def _headers(self) -> dict[str, str]:
        return {"apikey": self._api_key, "Authorization": f"Bearer {self._api_key}"}

    @staticmethod
    def build_params(
        *,
        min_lat: float,
        max_lat: float,
        min_lon: float,
        max_lon: float,
        status: str,
        limit: int,
    ) -> list[tuple[str, str]]:
        """Build PostgREST query params; repeated keys AND together on the same column."""
        return [
            ("select", ",".join(SELECT_COLUMNS)),
            ("status", f"eq.{status}"),
            ("latitude", "not.is.null"),
            ("longitude", "not.is.null"),
            ("latitude", f"gte.{min_lat!r}"),
            ("latitude", f"lte.{max_lat!r}"),
            ("longitude", f"gte.{min_lon!r}"),
            ("longitude", f"lte.{max_lon!r}"),
            ("limit", str(int(limit))),
        ]

    def query_in_bounding_box(
        self,
        *,
        min_lat: float,
        max_lat: float,
        min_lon: float,
        max_lon: float,
        status: str,
        limit: int,
    ) -> list[SearchableEntity]:
        params = self.build_params(
            min_lat=min_lat,
            max_lat=max_lat,
            min_lon=min_lon,
            max_lon=max_lon,
            status=status,
            limit=limit,
        )
        try:
            payload = get_json(
                self._endpoint,
                params=params,
                headers=self._headers(),
                timeout_seconds=self._timeout_seconds,
            )
        except httpx.HTTPStatusError as e:
            logger.warning("PostgREST query failed status=%s url=%s", e.response.status_code, self._endpoint)
            raise StoreUnavailable(f"entity store returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("PostgREST query failed url=%s error=%s", self._endpoint, e)
            raise StoreUnavailable(f"entity store unreachable: {e}") from e
        except ValueError as e:
            logger.warning("PostgREST returned a non-JSON body url=%s", self._endpoint)
            raise StoreUnavailable("entity store returned a malformed response") from e

        return self._parse_rows(payload)

    def _parse_rows(self, payload: Any) -> list[SearchableEntity]:
        if not isinstance(payload, list):
            raise StoreUnavailable("entity store returned a malformed response (expected a JSON array)")
        out: list[SearchableEntity] = []
        for row in payload:
            if not isinstance(row, dict):
                raise StoreUnavailable("entity store returned a malformed row (expected an object)")
            try:
                out.append(SearchableEntity.from_row(row))
            except ValueError as e:
                logger.warning("PostgREST returned an invalid row id=%s", row.get("id"))
                raise StoreUnavailable(f"entity store returned an invalid row: {row.get('id')!r}") from e
        return out
