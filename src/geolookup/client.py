"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: client.py.
"""

from __future__ import annotations

import asyncio
from typing import Any

from .cache.base import LookupCacheBackend
from .fetchers.base import Fetcher
from .fetchers.nominatim import NominatimFetcher
from .metrics import LookupMetrics
from .runtime.coalescer import LookupCoalescer
from .runtime.scheduler import Scheduler
from .settings import LookupSettings
from .types import Coordinates, LookupValue


class ReverseGeocoder:
    """Coordinates-to-address lookups with caching, dedup and rate limiting.

    Usage:
        async with ReverseGeocoder() as geocoder:
            address = await geocoder.lookup(39.8283, -98.5795)
    """

    def __init__(
        self,
        settings: LookupSettings | None = None,
        *,
        fetcher: Fetcher | None = None,
        cache: LookupCacheBackend | None = None,
        scheduler: Scheduler | None = None,
        metrics: LookupMetrics | None = None,
    ) -> None:
        self.settings = (settings or LookupSettings()).validate()
        self._owns_fetcher = fetcher is None
        self._fetcher: Fetcher = fetcher or NominatimFetcher(self.settings)
        self._coalescer = LookupCoalescer(
            self._fetcher,
            cache=cache if cache is not None else self.settings.cache_backend,
            scheduler=scheduler,
            quiet_window_s=self.settings.quiet_window_s,
            fetch_timeout_s=self.settings.fetch_timeout_s,
            metrics=metrics,
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> "ReverseGeocoder":
        return cls(LookupSettings.from_env(), **kwargs)

    @property
    def coalescer(self) -> LookupCoalescer:
        return self._coalescer

    def lookup(self, latitude: float, longitude: float) -> asyncio.Future[LookupValue]:
        """Resolve one coordinate pair; the returned future settles exactly once."""
        return self._coalescer.lookup(Coordinates(latitude, longitude))

    async def get_address(self, latitude: float, longitude: float) -> LookupValue:
        return await self.lookup(latitude, longitude)

    def get_stats(self) -> dict[str, Any]:
        return self._coalescer.get_stats()

    async def aclose(self) -> None:
        await self._coalescer.aclose()
        if self._owns_fetcher and isinstance(self._fetcher, NominatimFetcher):
            await self._fetcher.aclose()

    async def __aenter__(self) -> "ReverseGeocoder":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
