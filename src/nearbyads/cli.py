"""
nearbyads CLI entrypoint.

This CLI is intended for quick local checks against a catalog or the hosted table without
the HTTP API. It delegates all search logic to `nearbyads.search.proximity`.

Exit codes: 0 ok, 2 invalid arguments, 3 store unavailable, 4 configuration error.
Errors go to stderr; stdout carries only results.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from nearbyads.config.settings import get_settings
from nearbyads.core.geo import GeoPoint
from nearbyads.core.logging import configure_logging
from nearbyads.errors import ConfigError, InvalidArgument, StoreUnavailable
from nearbyads.search.explain import format_distance, one_line_summary
from nearbyads.search.proximity import ProximitySearch, distance_between
from nearbyads.store.factory import build_store

logger = logging.getLogger(__name__)

EXIT_INVALID_ARGUMENT = 2
EXIT_STORE_UNAVAILABLE = 3
EXIT_CONFIG_ERROR = 4


def _cmd_nearby(args: argparse.Namespace) -> int:
    """Handle the `nearby` subcommand."""
    settings = get_settings()
    store = build_store(settings, catalog_path=args.catalog)
    search = ProximitySearch(store, settings=settings.search)

    results = search.search(GeoPoint(lat=args.lat, lon=args.lng), args.radius, args.limit)

    if args.json:
        print(json.dumps([r.to_row() for r in results], ensure_ascii=False, indent=2))
        return 0

    if not results:
        print("No nearby ads. Try a larger --radius.")
        return 0
    for i, r in enumerate(results, start=1):
        print(f"{i:>2}. {one_line_summary(r)}")
    return 0


def _cmd_distance(args: argparse.Namespace) -> int:
    """Handle the `distance` subcommand."""
    settings = get_settings()
    d = distance_between(
        GeoPoint(lat=args.from_lat, lon=args.from_lng),
        GeoPoint(lat=args.to_lat, lon=args.to_lng),
        earth_radius_km=settings.search.earth_radius_km,
    )
    print(f"{d:.3f} km ({format_distance(d)})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the nearbyads CLI."""
    parser = argparse.ArgumentParser(prog="nearbyads")
    sub = parser.add_subparsers(dest="command", required=True)

    near = sub.add_parser("nearby", help="List active ads within a radius of a point, nearest first.")
    near.add_argument("--lat", required=True, type=float)
    near.add_argument("--lng", required=True, type=float)
    near.add_argument("--radius", type=float, default=None, help="km; <= 0 falls back to the minimum radius")
    near.add_argument("--limit", type=int, default=None, help="Max candidates fetched before distance filtering")
    near.add_argument("--catalog", type=str, default=None, help="JSON catalog path (memory backend only)")
    near.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    near.set_defaults(func=_cmd_nearby)

    dist = sub.add_parser("distance", help="Great-circle distance between two points.")
    dist.add_argument("--from-lat", dest="from_lat", required=True, type=float)
    dist.add_argument("--from-lng", dest="from_lng", required=True, type=float)
    dist.add_argument("--to-lat", dest="to_lat", required=True, type=float)
    dist.add_argument("--to-lng", dest="to_lng", required=True, type=float)
    dist.set_defaults(func=_cmd_distance)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m nearbyads.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except InvalidArgument as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID_ARGUMENT
    except StoreUnavailable as e:
        logger.error("store unavailable: %s", e)
        print(f"error: nearby ads are unavailable right now ({e}); try again shortly", file=sys.stderr)
        return EXIT_STORE_UNAVAILABLE
    except ConfigError as e:
        logger.error("configuration error: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
