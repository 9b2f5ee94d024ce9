from __future__ import annotations

from nearbyads.catalog.loader import load_entities
from nearbyads.config.settings import Settings
from nearbyads.errors import ConfigError
from nearbyads.store.base import EntityStore
from nearbyads.store.memory import InMemoryEntityStore
from nearbyads.store.postgrest import PostgrestEntityStore


def build_store(settings: Settings, *, catalog_path: str | None = None) -> EntityStore:
    """Build the configured store backend (`memory` or `postgrest`)."""
    cfg = settings.store
    if cfg.backend == "memory":
        path = catalog_path or cfg.catalog_path
        try:
            entities = load_entities(path)
        except (OSError, ValueError) as e:
            # A broken catalog is a deployment problem, not a bad search argument.
            raise ConfigError(f"Cannot load ad catalog {path}: {e}") from e
        return InMemoryEntityStore(entities)
    if cfg.backend == "postgrest":
        return PostgrestEntityStore(
            url=cfg.url or "",
            api_key=cfg.api_key or "",
            table=cfg.table,
            timeout_seconds=settings.app.http_timeout_seconds,
        )
    raise ConfigError(f"Unknown store backend: {cfg.backend!r}")
