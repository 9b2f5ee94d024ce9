"""
Geospatial helpers.

We keep a tiny geometry layer here so search and display code share one distance routine
without pulling in heavier GIS dependencies:
- `haversine_km`: great-circle distance on a spherical Earth
- `bounding_box_around`: a lat/lon rectangle that encloses a radius around a point
- `split_at_antimeridian`: the same rectangle as plain ranges a store can query
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from math import asin, atan2, cos, degrees, radians, sin, sqrt

from nearbyads.errors import InvalidArgument

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE_LAT = 111.32
MIN_COS_LAT = 0.01


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float

    def __post_init__(self) -> None:
        try:
            lat = float(self.lat)
            lon = float(self.lon)
        except (TypeError, ValueError) as e:
            raise InvalidArgument("A valid latitude and longitude are required.") from e
        if not math.isfinite(lat) or not math.isfinite(lon):
            raise InvalidArgument("A valid latitude and longitude are required.")
        if not -90.0 <= lat <= 90.0:
            raise InvalidArgument(f"latitude must be within [-90, 90], got {lat}")
        if not -180.0 <= lon <= 180.0:
            raise InvalidArgument(f"longitude must be within [-180, 180], got {lon}")
        object.__setattr__(self, "lat", lat)
        object.__setattr__(self, "lon", lon)


@dataclass(frozen=True)
class BoundingBox:
    """An axis-aligned lat/lon rectangle (edges inclusive)."""

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def contains(self, lat: float, lon: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lon <= lon <= self.max_lon


def haversine_km(a: GeoPoint, b: GeoPoint, *, earth_radius_km: float = EARTH_RADIUS_KM) -> float:
    """Compute great-circle distance in kilometers between two points."""
    lat1 = radians(a.lat)
    lat2 = radians(b.lat)
    dlat = radians(b.lat - a.lat)
    dlon = radians(b.lon - a.lon)

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(h), sqrt(1 - h))
    return earth_radius_km * c


def _spherical_cap_extent_deg(center: GeoPoint, radius_km: float, *, earth_radius_km: float) -> tuple[float, float]:
    # Exact lat/lon half-widths of a spherical cap; a cap that reaches a pole spans every longitude.
    delta = float(radius_km) / earth_radius_km
    d_lat = degrees(delta)
    if abs(center.lat) + d_lat >= 90.0:
        return d_lat, 180.0
    return d_lat, degrees(asin(min(1.0, sin(delta) / cos(radians(center.lat)))))


def bounding_box_around(
    center: GeoPoint,
    radius_km: float,
    *,
    km_per_degree_lat: float = KM_PER_DEGREE_LAT,
    min_cos_lat: float = MIN_COS_LAT,
    earth_radius_km: float = EARTH_RADIUS_KM,
) -> BoundingBox:
    """Return the rectangle used as a coarse pre-filter for a radius search.

    Longitude degrees shrink towards the poles, so the longitude delta is widened by
    1/cos(lat). The cosine is floored at `min_cos_lat` so the delta stays finite near
    the poles. The box is a city-scale approximation; it is not meant for radii of
    hundreds of kilometers.

    `km_per_degree_lat` (111.32) is slightly longer than a degree on the Haversine
    sphere (~111.195 km), so each half-width is raised to the exact spherical-cap
    extent when the linear estimate falls short. The box always encloses the circle.
    """
    d_lat = float(radius_km) / km_per_degree_lat
    d_lon = float(radius_km) / (km_per_degree_lat * max(cos(radians(center.lat)), min_cos_lat))
    cap_lat, cap_lon = _spherical_cap_extent_deg(center, radius_km, earth_radius_km=earth_radius_km)
    d_lat = max(d_lat, cap_lat)
    d_lon = max(d_lon, cap_lon)
    if d_lon >= 180.0:
        # The circle covers every meridian (typically a cap over a pole).
        min_lon, max_lon = -180.0, 180.0
    else:
        min_lon, max_lon = center.lon - d_lon, center.lon + d_lon
    return BoundingBox(
        min_lat=max(center.lat - d_lat, -90.0),
        max_lat=min(center.lat + d_lat, 90.0),
        min_lon=min_lon,
        max_lon=max_lon,
    )


def split_at_antimeridian(box: BoundingBox) -> list[BoundingBox]:
    """Split a box whose longitudes run past ±180 into in-range rectangles.

    A box around a center near the antimeridian comes back from `bounding_box_around`
    with `min_lon < -180` or `max_lon > 180`; stores only understand plain ranges, so the
    overhang is wrapped into a second rectangle on the other side.
    """
    if box.min_lon < -180.0:
        return [
            BoundingBox(min_lat=box.min_lat, max_lat=box.max_lat, min_lon=box.min_lon + 360.0, max_lon=180.0),
            BoundingBox(min_lat=box.min_lat, max_lat=box.max_lat, min_lon=-180.0, max_lon=box.max_lon),
        ]
    if box.max_lon > 180.0:
        return [
            BoundingBox(min_lat=box.min_lat, max_lat=box.max_lat, min_lon=box.min_lon, max_lon=180.0),
            BoundingBox(min_lat=box.min_lat, max_lat=box.max_lat, min_lon=-180.0, max_lon=box.max_lon - 360.0),
        ]
    return [box]
