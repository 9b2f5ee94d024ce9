"""
Entity store contract.

The proximity search only needs one capability from a store: a rectangular range query on
two numeric columns plus a status predicate. Any backend that can do that (a PostgREST
table, a list in memory, a SQL view) can serve nearby-ads searches without native
geospatial indexing.
"""

from __future__ import annotations

from typing import Protocol

from nearbyads.domain.models import SearchableEntity


class EntityStore(Protocol):
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
        """Return up to `limit` entities with `status` whose coordinates fall in the box.

        Entities without coordinates are never returned. Row order is unspecified.

        Raises:
            StoreUnavailable: On timeouts, connection loss or malformed responses.
        """
        ...
