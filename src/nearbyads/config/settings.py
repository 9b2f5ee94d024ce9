# src/nearbyads/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/nearbyads/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `NEARBYADS_CONFIG_PATH`
- environment variables (e.g., `SUPABASE_URL`, `SUPABASE_ANON_KEY`)

Design rule:
- Tuning knobs live in YAML, not hard-coded in search logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from nearbyads.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `nearbyads.config`."""
    text = resources.files("nearbyads.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "nearbyads"
    http_timeout_seconds: float = Field(10, gt=0)
    log_level: str = "INFO"


class SearchSettings(BaseModel):
    default_radius_km: float = Field(5, gt=0)
    # Substituted when a caller passes a non-positive or non-finite radius.
    min_radius_km: float = Field(1, gt=0)
    default_limit: int = Field(24, ge=1)
    max_limit: int = Field(200, ge=1)
    km_per_degree_lat: float = Field(111.32, gt=0)
    min_cos_lat: float = Field(0.01, gt=0, le=1)
    earth_radius_km: float = Field(6371, gt=0)
    eligible_status: str = "active"


class StoreSettings(BaseModel):
    backend: Literal["memory", "postgrest"] = "memory"
    catalog_path: str = "data/catalogs/ads.json"
    url: str | None = None
    api_key: str | None = None
    table: str = "ads"


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small to avoid exposing unsafe overrides.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("NEARBYADS_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    backend = os.getenv("NEARBYADS_STORE_BACKEND")
    if backend:
        data.setdefault("store", {})["backend"] = backend

    catalog_path = os.getenv("NEARBYADS_CATALOG_PATH")
    if catalog_path:
        data.setdefault("store", {})["catalog_path"] = catalog_path

    url = os.getenv("SUPABASE_URL")
    api_key = os.getenv("SUPABASE_ANON_KEY")
    if url:
        data.setdefault("store", {})["url"] = url
    if api_key:
        data.setdefault("store", {})["api_key"] = api_key

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("NEARBYADS_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
