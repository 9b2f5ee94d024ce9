from __future__ import annotations

from typing import Iterable

from nearbyads.domain.models import SearchableEntity


class InMemoryEntityStore:
    """A snapshot list of entities served through the bounding-box contract.

    Used by tests and by the `memory` backend (a local JSON catalog). Filtering is
    inclusive on the box edges and the `limit` cap applies after filtering, in insertion
    order.
    """

    def __init__(self, entities: Iterable[SearchableEntity] = ()) -> None:
        self._entities: list[SearchableEntity] = list(entities)

    def __len__(self) -> int:
        return len(self._entities)

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
        out: list[SearchableEntity] = []
        if limit <= 0:
            return out
        for e in self._entities:
            if e.status != status or e.location is None:
                continue
            if not (min_lat <= e.location.lat <= max_lat and min_lon <= e.location.lon <= max_lon):
                continue
            out.append(e)
            if len(out) >= limit:
                break
        return out
