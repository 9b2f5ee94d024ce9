"""
Ad catalog loader.

The catalog is a local JSON file (default: `data/catalogs/ads.json`) holding an array of
`ads` rows in the same column shape PostgREST returns. We validate it into typed
`SearchableEntity` models so the in-memory store and the search can assume a consistent
shape.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from nearbyads.core.env import resolve_project_path
from nearbyads.domain.models import SearchableEntity


_ROWS_ADAPTER = TypeAdapter(list[dict[str, Any]])


def load_entities(path: str | Path) -> list[SearchableEntity]:
    """Load and validate an ad catalog JSON file.

    Raises `ValueError` (pydantic `ValidationError` included) when the file is not an
    array of row objects or a row does not map to a valid entity.
    """
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    rows = _ROWS_ADAPTER.validate_python(payload)
    return [SearchableEntity.from_row(row) for row in rows]
