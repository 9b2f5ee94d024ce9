"""Nearby-ads proximity search for the marketplace."""

__version__ = "0.1.0"
