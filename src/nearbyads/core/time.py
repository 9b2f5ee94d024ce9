"""
Timestamp normalization.

Listing rows carry `created_at` as ISO-8601 strings, sometimes without an offset. We
treat every timestamp as timezone-aware so recency tie-breaks never compare naive and
aware datetimes.
"""

from __future__ import annotations

from datetime import datetime, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Ensure `dt` has tzinfo; attach UTC if naive."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt
