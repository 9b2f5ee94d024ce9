"""Domain errors and failure typing."""

from __future__ import annotations


class NearbyAdsError(Exception):
    """Base class for nearbyads failures."""

    error_code = "NEARBYADS_ERROR"


class InvalidArgument(NearbyAdsError, ValueError):
    """Raised when a caller passes malformed coordinates or limits."""

    error_code = "VALIDATION_ERROR"


class StoreUnavailable(NearbyAdsError):
    """Raised when the entity store query fails (timeout, connection, bad payload)."""

    error_code = "STORE_UNAVAILABLE"


class ConfigError(NearbyAdsError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"
