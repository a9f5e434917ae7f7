"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/base.py.
"""

from __future__ import annotations

from typing import Protocol

from ..types import Coordinates, LookupValue, _Missing


class LookupCacheBackend(Protocol):
    """Protocol implemented by cache backends used by the coalescer.

    Calls are synchronous so a cache hit never yields to the event loop.
    """

    backend_id: str

    def get(self, key: Coordinates) -> LookupValue | _Missing: ...

    def put(self, key: Coordinates, value: LookupValue) -> None: ...

    def __contains__(self, key: object) -> bool: ...

    def __len__(self) -> int: ...

    def clear(self) -> None: ...
