"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Explicitly owned coalescer state and waiter sinks.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Literal

from ..types import Coordinates, LookupValue
from .scheduler import TimerHandle

SlotPhase = Literal["idle", "active", "cooldown"]


@dataclass(slots=True)
class Waiter:
    """Completion sink for a call queued while the slot was busy.

    Carries no key: it settles with whatever the draining dispatch produced.
    """

    future: asyncio.Future[LookupValue]

    def resolve(self, value: LookupValue) -> None:
        if not self.future.done():
            self.future.set_result(value)

    def cancel(self) -> None:
        self.future.cancel()


@dataclass(slots=True)
class CoalescerState:
    """Single-owner state for one coalescer instance."""

    slot_busy: bool = False
    phase: SlotPhase = "idle"
    latest_queued_key: Coordinates | None = None
    queued_waiters: list[Waiter] = field(default_factory=list)
    slot_release_timer: TimerHandle | None = None
    trailing_timer: TimerHandle | None = None
    active_dispatches: int = 0

    def take_waiters(self) -> tuple[Coordinates | None, list[Waiter]]:
        """Atomically drain the queue and clear the latest queued key."""
        key = self.latest_queued_key
        waiters = self.queued_waiters
        self.queued_waiters = []
        self.latest_queued_key = None
        return key, waiters

    def cancel_timers(self) -> None:
        if self.slot_release_timer is not None:
            self.slot_release_timer.cancel()
            self.slot_release_timer = None
        if self.trailing_timer is not None:
            self.trailing_timer.cancel()
            self.trailing_timer = None
