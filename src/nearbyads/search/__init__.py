"""Proximity search over an entity store."""
