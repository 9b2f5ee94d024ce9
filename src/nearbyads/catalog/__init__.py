"""Local JSON catalogs of ads."""
