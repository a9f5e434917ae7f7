"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/timeouts.py.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from ..errors import FetchTimeoutError
from ..types import Coordinates

T = TypeVar("T")


async def await_with_timeout(
    awaitable: Awaitable[T],
    timeout_s: float | None,
    *,
    key: Coordinates | None = None,
) -> T:
    """Await value with optional timeout, cancelling the awaitable on expiry."""
    if timeout_s is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_s)
    except asyncio.TimeoutError as exc:
        raise FetchTimeoutError(
            f"Lookup for {key} timed out after {timeout_s}s", key=key
        ) from exc
