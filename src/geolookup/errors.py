"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error taxonomy for coordinate lookups.
"""

from __future__ import annotations

from .types import Coordinates


class GeoLookupError(RuntimeError):
    """Base error for the lookup layer."""


class LookupConfigurationError(GeoLookupError):
    """Raised when settings or CLI input are invalid."""


class LookupCacheError(GeoLookupError):
    """Raised when cache backend resolution fails."""


class DispatchFailure(GeoLookupError):
    """One outbound fetch for a key did not produce a value."""

    def __init__(self, message: str, *, key: Coordinates | None = None) -> None:
        super().__init__(message)
        self.key = key


class FetchTimeoutError(DispatchFailure):
    """Fetch exceeded the configured timeout and was cancelled."""


class FetchStatusError(DispatchFailure):
    """Upstream answered with a non-success HTTP status."""

    def __init__(
        self,
        message: str,
        *,
        key: Coordinates | None = None,
        status_code: int,
    ) -> None:
        super().__init__(message, key=key)
        self.status_code = status_code


class MalformedResponseError(DispatchFailure):
    """Upstream body could not be interpreted."""


class FetchTransportError(DispatchFailure):
    """Network-level failure talking to upstream."""
