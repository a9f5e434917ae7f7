"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/pending.py.
"""

from __future__ import annotations

import asyncio

from ..types import Coordinates, LookupValue


class PendingRequestTable:
    """At most one in-flight settlement handle per key."""

    def __init__(self) -> None:
        self._rows: dict[Coordinates, asyncio.Future[LookupValue]] = {}

    def get(self, key: Coordinates) -> asyncio.Future[LookupValue] | None:
        return self._rows.get(key)

    def set(self, key: Coordinates, handle: asyncio.Future[LookupValue]) -> None:
        self._rows[key] = handle

    def remove(
        self,
        key: Coordinates,
        handle: asyncio.Future[LookupValue] | None = None,
    ) -> None:
        """Drop the entry for `key`; with `handle`, only if it is still that one."""
        if handle is not None and self._rows.get(key) is not handle:
            return
        self._rows.pop(key, None)

    def keys(self) -> list[Coordinates]:
        return list(self._rows.keys())

    def __len__(self) -> int:
        return len(self._rows)
