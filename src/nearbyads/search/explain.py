"""
Small display helpers for search results.

Used by the CLI and the API to print compact, human-readable distances.
"""

from __future__ import annotations

import math

from nearbyads.domain.models import ProximityResult


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def format_distance(distance_km: float) -> str:
    """Render a distance as "850m away" (under 1 km, 50 m steps) or "3.2 km away"."""
    if not math.isfinite(distance_km):
        return ""
    if distance_km < 1:
        meters = _round_half_up(distance_km * 1000 / 50) * 50
        return f"{max(meters, 50)}m away"
    km = _round_half_up(distance_km * 10) / 10
    return f"{km:g} km away"


def one_line_summary(result: ProximityResult) -> str:
    """Render a compact single-line summary for a search hit."""
    fields = result.display_fields
    title = fields.get("title") or result.id
    parts = [str(title), format_distance(result.distance_km)]
    place = ", ".join(str(p) for p in (fields.get("neighborhood"), fields.get("city")) if p)
    if place:
        parts.append(place)
    if fields.get("price") is not None:
        currency = str(fields.get("currency") or "").strip()
        parts.append(f"{fields['price']} {currency}".strip())
    if result.created_at is not None:
        parts.append(result.created_at.date().isoformat())
    return " | ".join(parts)
