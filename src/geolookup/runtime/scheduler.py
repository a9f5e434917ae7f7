"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Timer scheduling behind a cancellable-handle interface.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


class TimerHandle(Protocol):
    """Handle returned by a scheduler; cancelling is idempotent."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Schedules one callback after a delay in seconds."""

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle: ...


class LoopScheduler:
    """Scheduler backed by the running asyncio event loop."""

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay_s, callback)


@dataclass(slots=True)
class _ManualTimer:
    when_s: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass(slots=True)
class ManualScheduler:
    """
    Virtual-clock scheduler for deterministic tests.

    Time only moves through `advance`; due callbacks run in deadline order,
    ties broken by scheduling order.
    """

    now_s: float = 0.0
    _heap: list[tuple[float, int, _ManualTimer]] = field(
        default_factory=list, init=False, repr=False
    )
    _seq: itertools.count = field(
        default_factory=itertools.count, init=False, repr=False
    )

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle:
        timer = _ManualTimer(when_s=self.now_s + max(0.0, delay_s), callback=callback)
        heapq.heappush(self._heap, (timer.when_s, next(self._seq), timer))
        return timer

    def advance(self, delta_s: float) -> int:
        """Move the clock forward, running every callback that comes due."""
        target = self.now_s + delta_s
        fired = 0
        while self._heap and self._heap[0][0] <= target:
            when_s, _, timer = heapq.heappop(self._heap)
            if timer.cancelled:
                continue
            self.now_s = when_s
            timer.callback()
            fired += 1
        self.now_s = target
        return fired

    @property
    def pending(self) -> int:
        """Number of live (uncancelled) timers."""
        return sum(1 for _, _, timer in self._heap if not timer.cancelled)
