"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- store rows (`SearchableEntity`, built from `ads` table rows or catalog JSON)
- search output (`ProximityResult`)

The coordinate value type (`GeoPoint`) lives in `nearbyads.core.geo` so the geometry
helpers do not depend on this module; it is re-exported here for convenience.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nearbyads.core.geo import GeoPoint
from nearbyads.core.time import ensure_utc

ListingStatus = Literal["active", "pending", "sold", "rejected", "draft", "deleted"]

ACTIVE: ListingStatus = "active"

# Presentation columns selected alongside the searchable ones; passed through untouched.
DISPLAY_COLUMNS: tuple[str, ...] = ("title", "price", "currency", "city", "neighborhood", "image_urls")

__all__ = [
    "ACTIVE",
    "DISPLAY_COLUMNS",
    "GeoPoint",
    "ListingStatus",
    "ProximityResult",
    "SearchableEntity",
]


def _finite(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


class SearchableEntity(BaseModel):
    """A listing eligible for proximity search (when active and geotagged)."""

    model_config = ConfigDict(frozen=True)

    id: str
    location: GeoPoint | None = None
    status: ListingStatus = ACTIVE
    created_at: datetime | None = None
    display_fields: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("location", mode="before")
    @classmethod
    def _coerce_location(cls, v: Any) -> Any:
        if v is None or isinstance(v, GeoPoint):
            return v
        if isinstance(v, Mapping):
            return GeoPoint(lat=v.get("lat"), lon=v.get("lon"))
        if isinstance(v, (tuple, list)) and len(v) == 2:
            return GeoPoint(lat=v[0], lon=v[1])
        raise ValueError("location must be a GeoPoint, a {lat, lon} mapping or a (lat, lon) pair")

    @field_validator("created_at")
    @classmethod
    def _normalize_created_at(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> SearchableEntity:
        """Build an entity from a flat `ads` row (latitude/longitude columns).

        Rows with a missing or non-finite coordinate get `location=None`; they stay
        loadable but are never returned by a proximity search.
        """
        lat = _finite(row.get("latitude"))
        lon = _finite(row.get("longitude"))
        location = GeoPoint(lat=lat, lon=lon) if lat is not None and lon is not None else None
        display = {k: row[k] for k in DISPLAY_COLUMNS if k in row}
        payload: dict[str, Any] = {
            "id": row.get("id"),
            "location": location,
            "display_fields": display,
        }
        if row.get("status") is not None:
            payload["status"] = row["status"]
        if row.get("created_at"):
            payload["created_at"] = row["created_at"]
        return cls.model_validate(payload)

    def to_row(self) -> dict[str, Any]:
        """Flatten back into the `ads` row shape used by the API and CLI JSON output."""
        return {
            "id": self.id,
            **self.display_fields,
            "latitude": self.location.lat if self.location else None,
            "longitude": self.location.lon if self.location else None,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class ProximityResult(SearchableEntity):
    """A search hit: the entity snapshot plus its great-circle distance from the query center."""

    distance_km: float = Field(..., ge=0)

    @classmethod
    def from_entity(cls, entity: SearchableEntity, *, distance_km: float) -> ProximityResult:
        return cls(**dict(entity), distance_km=distance_km)

    def to_row(self) -> dict[str, Any]:
        return {**super().to_row(), "distance_km": self.distance_km}
