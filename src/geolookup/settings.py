"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Lookup settings and explicit environment loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import LookupConfigurationError

DEFAULT_ENDPOINT = "https://nominatim.openstreetmap.org/reverse"
DEFAULT_USER_AGENT = "map-picker/1.0"


@dataclass(frozen=True, slots=True)
class LookupSettings:
    """Explicit settings used by the coalescer, cache and fetcher."""

    quiet_window_s: float = 1.0
    fetch_timeout_s: float = 5.0

    endpoint: str = DEFAULT_ENDPOINT
    user_agent: str = DEFAULT_USER_AGENT
    zoom: int = 18

    cache_backend: str = "inmemory"

    def validate(self) -> "LookupSettings":
        """Reject settings the coalescer cannot run with."""
        if self.quiet_window_s <= 0:
            raise LookupConfigurationError(
                f"quiet_window_s must be positive, got {self.quiet_window_s}"
            )
        if self.fetch_timeout_s <= 0:
            raise LookupConfigurationError(
                f"fetch_timeout_s must be positive, got {self.fetch_timeout_s}"
            )
        if not self.endpoint.strip():
            raise LookupConfigurationError("endpoint must be non-empty")
        return self

    @staticmethod
    def from_env() -> "LookupSettings":
        """Load settings from environment variables."""
        try:
            settings = LookupSettings(
                quiet_window_s=float(os.getenv("GEOLOOKUP_QUIET_WINDOW_S", "1.0")),
                fetch_timeout_s=float(os.getenv("GEOLOOKUP_FETCH_TIMEOUT_S", "5.0")),
                endpoint=os.getenv("GEOLOOKUP_ENDPOINT", DEFAULT_ENDPOINT),
                user_agent=os.getenv("GEOLOOKUP_USER_AGENT", DEFAULT_USER_AGENT),
                zoom=int(os.getenv("GEOLOOKUP_ZOOM", "18")),
                cache_backend=os.getenv("GEOLOOKUP_CACHE_BACKEND", "inmemory"),
            )
        except ValueError as exc:
            raise LookupConfigurationError(f"Invalid lookup setting: {exc}") from exc
        return settings.validate()
