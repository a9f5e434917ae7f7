"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Command line reverse geocoding.

Usage examples:
  geolookup 39.8283,-98.5795
  geolookup --quiet-window-s 0.5 -v 48.8566,2.3522 51.5074,-0.1278
  geolookup -- -33.8688,151.2093
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from dataclasses import replace
from typing import TextIO

from .client import ReverseGeocoder
from .errors import GeoLookupError, LookupConfigurationError
from .fetchers.base import Fetcher
from .settings import LookupSettings
from .types import Coordinates

logger = logging.getLogger("geolookup.cli")


def parse_coordinates(raw: str) -> Coordinates:
    try:
        return Coordinates.parse(raw)
    except ValueError as exc:
        raise LookupConfigurationError(str(exc)) from exc


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="geolookup", description="Reverse geocode LAT,LON pairs"
    )
    parser.add_argument("coordinates", nargs="+", metavar="LAT,LON")
    parser.add_argument("--quiet-window-s", type=float, default=None)
    parser.add_argument("--timeout-s", type=float, default=None)
    parser.add_argument("--endpoint", type=str, default=None)
    parser.add_argument("--user-agent", type=str, default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> LookupSettings:
    settings = LookupSettings.from_env()
    overrides = {
        "quiet_window_s": args.quiet_window_s,
        "fetch_timeout_s": args.timeout_s,
        "endpoint": args.endpoint,
        "user_agent": args.user_agent,
    }
    return replace(
        settings, **{k: v for k, v in overrides.items() if v is not None}
    ).validate()


async def run_lookups(
    keys: Sequence[Coordinates],
    settings: LookupSettings,
    *,
    fetcher: Fetcher | None = None,
    out: TextIO | None = None,
) -> int:
    """Look up keys one at a time and print one line per key.

    Each lookup waits for the dispatch slot to go idle first, so every key
    is fetched by an immediate dispatch: answers stay tied to their own key,
    failures reach the output, and fetches are still paced one per quiet
    window.
    """
    out = out or sys.stdout
    failures = 0
    async with ReverseGeocoder(settings, fetcher=fetcher) as geocoder:
        for key in keys:
            await geocoder.coalescer.wait_until_idle()
            try:
                result = await geocoder.lookup(key.latitude, key.longitude)
            except GeoLookupError as exc:
                failures += 1
                print(f"{key}\terror: {exc}", file=out)
                continue
            print(f"{key}\t{result if result is not None else '-'}", file=out)
        logger.debug("Lookup stats: %s", geocoder.get_stats())
    return 1 if failures else 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = build_settings(args)
        keys = [parse_coordinates(raw) for raw in args.coordinates]
    except GeoLookupError as exc:
        print(f"geolookup: {exc}", file=sys.stderr)
        return 2
    return asyncio.run(run_lookups(keys, settings))


if __name__ == "__main__":
    raise SystemExit(main())
