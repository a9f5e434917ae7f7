"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Reverse geocoding against a Nominatim-compatible HTTP endpoint.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..errors import (
    FetchStatusError,
    FetchTimeoutError,
    FetchTransportError,
    MalformedResponseError,
)
from ..settings import LookupSettings
from ..types import Coordinates, LookupValue

logger = logging.getLogger("geolookup.fetchers.nominatim")


class NominatimFetcher:
    """
    Fetcher issuing one `GET /reverse` per key.

    The timeout is applied by the coalescer; the HTTP client is created
    without one unless an explicit client is injected.
    """

    def __init__(
        self,
        settings: LookupSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or LookupSettings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=None)

    @property
    def headers(self) -> dict[str, str]:
        return {
            "User-Agent": self._settings.user_agent,
            "Accept": "application/json",
        }

    def params_for(self, key: Coordinates) -> dict[str, Any]:
        return {
            "format": "json",
            "lat": key.latitude,
            "lon": key.longitude,
            "zoom": self._settings.zoom,
            "addressdetails": 0,
        }

    async def fetch(self, key: Coordinates) -> LookupValue:
        try:
            response = await self._client.get(
                self._settings.endpoint,
                params=self.params_for(key),
                headers=self.headers,
            )
        except httpx.TimeoutException as e:
            logger.warning("Geocoding timed out for %s: %s", key, e)
            raise FetchTimeoutError(f"Timed out geocoding {key}", key=key) from e
        except httpx.HTTPError as e:
            logger.warning("Geocoding transport error for %s: %s", key, e)
            raise FetchTransportError(f"Network error geocoding {key}: {e}", key=key) from e

        if not response.is_success:
            logger.warning("Geocoding HTTP %s for %s", response.status_code, key)
            raise FetchStatusError(
                f"HTTP {response.status_code} geocoding {key}",
                key=key,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.warning("Geocoding returned invalid JSON for %s", key)
            raise MalformedResponseError(f"Invalid JSON geocoding {key}", key=key) from e

        if not isinstance(data, dict):
            logger.warning(
                "Geocoding returned %s instead of an object for %s",
                type(data).__name__,
                key,
            )
            raise MalformedResponseError(
                f"Expected JSON object geocoding {key}, got {type(data).__name__}",
                key=key,
            )

        display_name = data.get("display_name")
        if display_name is None or display_name == "":
            logger.debug("No address found for %s", key)
            return None
        if not isinstance(display_name, str):
            logger.warning("Geocoding returned non-string display_name for %s", key)
            raise MalformedResponseError(
                f"Non-string display_name geocoding {key}", key=key
            )
        return display_name

    async def aclose(self) -> None:
        """Close the HTTP client when this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()
