"""Shared low-level helpers (geo math, env, logging, HTTP)."""
