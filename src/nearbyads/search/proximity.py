"""
Nearby-ads proximity search.

Two-step geofilter:
1. compute a lat/lon bounding box around the center and ask the store for up to `limit`
   active, geotagged candidates inside it (coarse, loose at the corners);
2. compute the exact Haversine distance for each candidate, drop the ones outside the
   radius, and sort nearest-first (ties: newest first).

The box lets any store with plain range queries on two numeric columns serve the search;
the price is some over-fetching at the box corners. `limit` caps the candidates fetched,
not the results returned, so a dense area can yield fewer than `limit` results even when
more eligible ads exist inside the radius.

A search is a pure read: no caching, no retries, no mutation of the entities. Store
failures surface as `StoreUnavailable` unchanged.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from nearbyads.config.settings import SearchSettings
from nearbyads.core.geo import (
    EARTH_RADIUS_KM,
    BoundingBox,
    GeoPoint,
    bounding_box_around,
    haversine_km,
    split_at_antimeridian,
)
from nearbyads.core.time import EPOCH
from nearbyads.domain.models import ProximityResult, SearchableEntity
from nearbyads.errors import InvalidArgument
from nearbyads.store.base import EntityStore

logger = logging.getLogger(__name__)


def coerce_center(center: Any) -> GeoPoint:
    """Accept a `GeoPoint` or a `(lat, lon)` pair; raise `InvalidArgument` otherwise."""
    if isinstance(center, GeoPoint):
        return center
    if isinstance(center, (tuple, list)) and len(center) == 2:
        return GeoPoint(lat=center[0], lon=center[1])
    raise InvalidArgument("A valid latitude and longitude are required.")


def effective_radius_km(radius_km: Any, *, min_radius_km: float) -> float:
    """Return `radius_km`, or the floor radius when it is non-positive or non-finite."""
    if radius_km is None or isinstance(radius_km, bool):
        raise InvalidArgument("radius_km must be a number")
    try:
        r = float(radius_km)
    except (TypeError, ValueError) as e:
        raise InvalidArgument("radius_km must be a number") from e
    if not math.isfinite(r) or r <= 0:
        return float(min_radius_km)
    return r


def _validate_limit(limit: Any) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise InvalidArgument(f"limit must be a positive integer, got {limit!r}")
    return limit


class ProximitySearch:
    """Search an `EntityStore` for active ads within a radius of a point.

    The store is injected so callers can swap the hosted table for an in-memory snapshot.
    Instances hold no per-call state and are safe to share across threads.
    """

    def __init__(self, store: EntityStore, *, settings: SearchSettings | None = None) -> None:
        self._store = store
        self._settings = settings or SearchSettings()

    @property
    def settings(self) -> SearchSettings:
        return self._settings

    def bounding_box(self, center: GeoPoint, radius_km: float) -> BoundingBox:
        cfg = self._settings
        return bounding_box_around(
            center,
            radius_km,
            km_per_degree_lat=cfg.km_per_degree_lat,
            min_cos_lat=cfg.min_cos_lat,
            earth_radius_km=cfg.earth_radius_km,
        )

    def search(
        self,
        center: GeoPoint,
        radius_km: float | None = None,
        limit: int | None = None,
    ) -> list[ProximityResult]:
        """Return active ads within `radius_km` of `center`, nearest first.

        Raises:
            InvalidArgument: If `center` is not a finite, in-range point or `limit` is not a
                positive integer.
            StoreUnavailable: If the store query fails.
        """
        cfg = self._settings
        center = coerce_center(center)
        radius = effective_radius_km(
            cfg.default_radius_km if radius_km is None else radius_km,
            min_radius_km=cfg.min_radius_km,
        )
        max_candidates = _validate_limit(cfg.default_limit if limit is None else limit)

        box = self.bounding_box(center, radius)
        candidates: list[SearchableEntity] = []
        # Near the antimeridian the box wraps into two ranges; they share one candidate budget.
        for part in split_at_antimeridian(box):
            remaining = max_candidates - len(candidates)
            if remaining <= 0:
                break
            candidates.extend(
                self._store.query_in_bounding_box(
                    min_lat=part.min_lat,
                    max_lat=part.max_lat,
                    min_lon=part.min_lon,
                    max_lon=part.max_lon,
                    status=cfg.eligible_status,
                    limit=remaining,
                )
            )

        results: list[ProximityResult] = []
        for entity in candidates:
            # Stores promise geotagged, eligible rows; a loose backend still must not leak others.
            if entity.location is None or entity.status != cfg.eligible_status:
                continue
            d = haversine_km(center, entity.location, earth_radius_km=cfg.earth_radius_km)
            if d > radius:
                continue
            results.append(ProximityResult.from_entity(entity, distance_km=d))

        results.sort(key=_nearest_then_newest)
        logger.debug(
            "nearby search center=(%.5f,%.5f) radius_km=%.3f limit=%d candidates=%d kept=%d",
            center.lat,
            center.lon,
            radius,
            max_candidates,
            len(candidates),
            len(results),
        )
        return results


def _nearest_then_newest(result: ProximityResult) -> tuple[float, float]:
    # Undated ads count as the oldest possible listing.
    return result.distance_km, -(result.created_at or EPOCH).timestamp()


def distance_between(origin: GeoPoint, target: GeoPoint, *, earth_radius_km: float = EARTH_RADIUS_KM) -> float:
    """Point-to-point great-circle distance in km (the "how far is this ad from me" helper)."""
    return haversine_km(coerce_center(origin), coerce_center(target), earth_radius_km=earth_radius_km)
