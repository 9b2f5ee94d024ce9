"""
API routes.

Endpoints:
- GET `/api/ads/nearby`: active ads within a radius of a point, nearest first.
- GET `/api/distance`: point-to-point distance (listing detail "how far from me").
- GET `/api/settings`: public settings (store credentials redacted).
- GET `/api/health`: liveness probe.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import APIRouter, HTTPException, Query

from nearbyads.config.settings import get_settings
from nearbyads.core.geo import GeoPoint
from nearbyads.errors import ConfigError, InvalidArgument, StoreUnavailable
from nearbyads.search.explain import format_distance
from nearbyads.search.proximity import ProximitySearch, distance_between, effective_radius_km
from nearbyads.store.base import EntityStore
from nearbyads.store.factory import build_store

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache
def _store() -> EntityStore:
    return build_store(get_settings())


def _search() -> ProximitySearch:
    return ProximitySearch(_store(), settings=get_settings().search)


def _validation_error(e: Exception) -> HTTPException:
    return HTTPException(status_code=400, detail={"code": InvalidArgument.error_code, "message": str(e)})


@router.get("/api/health")
def get_health() -> dict:
    return {"status": "ok"}


@router.get("/api/ads/nearby")
def get_nearby_ads(
    lat: float,
    lng: float,
    radius: float | None = None,
    limit: int | None = Query(default=None, ge=1),
) -> dict:
    """Return active ads within `radius` km of (`lat`, `lng`), nearest first (ties: newest)."""
    settings = get_settings()
    radius_km = settings.search.default_radius_km if radius is None else radius
    # The candidate budget is capped so one request cannot pull the whole table.
    max_candidates = min(int(limit or settings.search.default_limit), settings.search.max_limit)

    try:
        center = GeoPoint(lat=lat, lon=lng)
        results = _search().search(center, radius_km, max_candidates)
    except InvalidArgument as e:
        raise _validation_error(e) from e
    except StoreUnavailable as e:
        logger.warning("nearby search failed: %s", e)
        raise HTTPException(
            status_code=503,
            detail={"code": StoreUnavailable.error_code, "message": str(e)},
        ) from e
    except ConfigError as e:
        raise HTTPException(
            status_code=500,
            detail={"code": ConfigError.error_code, "message": str(e)},
        ) from e

    return {
        "center": {"lat": center.lat, "lng": center.lon},
        "radius_km": effective_radius_km(radius_km, min_radius_km=settings.search.min_radius_km),
        "limit": max_candidates,
        "count": len(results),
        "results": [{**r.to_row(), "distance_label": format_distance(r.distance_km)} for r in results],
    }


@router.get("/api/distance")
def get_distance(from_lat: float, from_lng: float, to_lat: float, to_lng: float) -> dict:
    """Return the great-circle distance between two points (km + display label)."""
    settings = get_settings()
    try:
        d = distance_between(
            GeoPoint(lat=from_lat, lon=from_lng),
            GeoPoint(lat=to_lat, lon=to_lng),
            earth_radius_km=settings.search.earth_radius_km,
        )
    except InvalidArgument as e:
        raise _validation_error(e) from e
    return {"distance_km": d, "label": format_distance(d)}


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return safe-to-expose settings for UI defaults (credentials removed)."""
    data = get_settings().model_dump(mode="json")
    data.get("store", {}).pop("api_key", None)
    return {
        "app": {"name": data.get("app", {}).get("name")},
        "search": data.get("search", {}),
        "store": data.get("store", {}),
    }
