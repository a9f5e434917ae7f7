"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: __init__.py.
"""

from __future__ import annotations

from .cache import (
    InMemoryLookupCache,
    LookupCacheBackend,
    create_lookup_cache,
    list_lookup_cache_backends,
    register_lookup_cache_backend,
)
from .client import ReverseGeocoder
from .errors import (
    DispatchFailure,
    FetchStatusError,
    FetchTimeoutError,
    FetchTransportError,
    GeoLookupError,
    LookupCacheError,
    LookupConfigurationError,
    MalformedResponseError,
)
from .fetchers import Fetcher, NominatimFetcher
from .metrics import LookupMetrics, NoOpLookupMetrics, PrometheusLookupMetrics
from .runtime import LookupCoalescer, LoopScheduler, ManualScheduler, Scheduler
from .settings import LookupSettings
from .types import MISSING, Coordinates, LookupValue

__all__ = [
    "ReverseGeocoder",
    "LookupCoalescer",
    "LookupSettings",
    "Coordinates",
    "LookupValue",
    "MISSING",
    "Fetcher",
    "NominatimFetcher",
    "Scheduler",
    "LoopScheduler",
    "ManualScheduler",
    "LookupCacheBackend",
    "InMemoryLookupCache",
    "create_lookup_cache",
    "register_lookup_cache_backend",
    "list_lookup_cache_backends",
    "LookupMetrics",
    "NoOpLookupMetrics",
    "PrometheusLookupMetrics",
    "GeoLookupError",
    "LookupConfigurationError",
    "LookupCacheError",
    "DispatchFailure",
    "FetchTimeoutError",
    "FetchStatusError",
    "FetchTransportError",
    "MalformedResponseError",
]
