"""
HTTP helpers.

This module centralizes the minimal HTTP client logic used by the PostgREST store.

Design goals:
- Small surface area (GET JSON).
- Deterministic defaults (timeout + User-Agent).
- Raise on non-2xx so callers can decide how to fail (the store maps errors to `StoreUnavailable`).
"""

from __future__ import annotations

from typing import Any

import httpx

from nearbyads import __version__

DEFAULT_USER_AGENT = f"nearbyads/{__version__} (+https://local)"


def get_json(
    url: str,
    *,
    params: Any = None,
    headers: dict[str, str] | None = None,
    timeout_seconds: float = 15,
) -> Any:
    """GET `url` and return the decoded JSON response.

    `params` may be a mapping or a list of `(key, value)` pairs; PostgREST filters repeat
    the same column key, so the pair form is the common one.

    Raises:
        httpx.HTTPError: On transport errors or non-2xx status codes.
        ValueError: If the response body is not valid JSON.
    """
    request_headers = {"User-Agent": DEFAULT_USER_AGENT, "Accept": "application/json"}
    if headers:
        request_headers.update(headers)

    with httpx.Client(timeout=timeout_seconds) as client:
        resp = client.get(url, params=params, headers=request_headers)
        resp.raise_for_status()
        return resp.json()
