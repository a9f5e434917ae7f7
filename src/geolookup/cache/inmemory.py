"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/inmemory.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..types import MISSING, Coordinates, LookupValue, _Missing


@dataclass(slots=True)
class InMemoryLookupCache:
    """Process-lifetime cache. Entries are never updated, expired or evicted."""

    backend_id: str = "inmemory"
    _rows: dict[Coordinates, LookupValue] = field(
        default_factory=dict, init=False, repr=False
    )

    def get(self, key: Coordinates) -> LookupValue | _Missing:
        return self._rows.get(key, MISSING)

    def put(self, key: Coordinates, value: LookupValue) -> None:
        # First resolution wins.
        self._rows.setdefault(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def clear(self) -> None:
        self._rows.clear()
