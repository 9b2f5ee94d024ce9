"""Entity stores queried by the proximity search."""

from nearbyads.store.base import EntityStore
from nearbyads.store.factory import build_store
from nearbyads.store.memory import InMemoryEntityStore
from nearbyads.store.postgrest import PostgrestEntityStore

__all__ = ["EntityStore", "InMemoryEntityStore", "PostgrestEntityStore", "build_store"]
