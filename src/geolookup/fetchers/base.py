"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: fetchers/base.py.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..types import Coordinates, LookupValue


@runtime_checkable
class Fetcher(Protocol):
    """One outbound lookup for one key.

    Implementations raise `DispatchFailure` subclasses on failure. The
    coalescer applies the timeout itself, so implementations must tolerate
    cancellation at any await point.
    """

    async def fetch(self, key: Coordinates) -> LookupValue: ...
