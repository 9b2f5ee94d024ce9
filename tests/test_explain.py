import math
from datetime import datetime, timezone

from nearbyads.core.geo import GeoPoint
from nearbyads.domain.models import ProximityResult

# Display helpers are pure string formatting, so they are tested with literal expectations.
from nearbyads.search.explain import format_distance, one_line_summary


def test_format_distance_uses_meters_below_one_km():
    # Sub-km distances round half-up to 50 m steps.
    assert format_distance(0.849) == "850m away"

    # Never show "0m": the smallest label is 50 m.
    assert format_distance(0.0) == "50m away"
    assert format_distance(0.024) == "50m away"


def test_format_distance_uses_one_decimal_km():
    # One decimal, half-up; whole kilometers drop the trailing ".0".
    assert format_distance(3.24) == "3.2 km away"
    assert format_distance(3.25) == "3.3 km away"
    assert format_distance(12.0) == "12 km away"


def test_format_distance_blank_for_non_finite():
    # A missing distance renders as nothing rather than "nan km away".
    assert format_distance(math.nan) == ""
    assert format_distance(math.inf) == ""


def test_one_line_summary_lists_title_distance_place_and_price():
    result = ProximityResult(
        id="a",
        location=GeoPoint(lat=33.5, lon=-7.6),
        created_at=datetime(2025, 11, 2, 9, 15, tzinfo=timezone.utc),
        display_fields={"title": "Bike", "price": 1200, "currency": "MAD", "city": "Casablanca", "neighborhood": "Maarif"},
        distance_km=1.26,
    )

    assert one_line_summary(result) == "Bike | 1.3 km away | Maarif, Casablanca | 1200 MAD | 2025-11-02"


def test_one_line_summary_skips_missing_parts():
    # No title, place, price or date: the id and the distance are still shown.
    result = ProximityResult(id="a1", location=GeoPoint(lat=33.5, lon=-7.6), distance_km=0.31)

    assert one_line_summary(result) == "a1 | 300m away"
