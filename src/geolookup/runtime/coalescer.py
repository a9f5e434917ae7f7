"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Leading-edge dispatch, trailing-edge coalescing and caching for key lookups.

Each `lookup` is answered from the cache, attached to an in-flight dispatch
for the same key, dispatched immediately when the slot is free, or queued as
a waiter. Queued waiters are answered by one deferred dispatch for the most
recently queued key, fired by whichever of two timers elapses first: the
slot-release timer (quiet window after the last settlement) or the trailing
timer (quiet window after the last queued call).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from ..cache.base import LookupCacheBackend
from ..cache.registry import create_lookup_cache
from ..errors import DispatchFailure, GeoLookupError
from ..fetchers.base import Fetcher
from ..metrics import LookupMetrics, NoOpLookupMetrics
from ..types import MISSING, Coordinates, LookupValue
from .pending import PendingRequestTable
from .scheduler import LoopScheduler, Scheduler
from .state import CoalescerState, Waiter
from .timeouts import await_with_timeout

logger = logging.getLogger("geolookup.runtime.coalescer")


def _attach(source: asyncio.Future[LookupValue]) -> asyncio.Future[LookupValue]:
    """Give one caller its own future mirroring a shared settlement."""
    target: asyncio.Future[LookupValue] = source.get_loop().create_future()

    def _relay(done: asyncio.Future[LookupValue]) -> None:
        if target.done():
            return
        if done.cancelled():
            target.cancel()
            return
        error = done.exception()
        if error is not None:
            target.set_exception(error)
        else:
            target.set_result(done.result())

    source.add_done_callback(_relay)
    return target


class LookupCoalescer:
    """Cache + in-flight dedup + leading/trailing rate limiting for one fetcher."""

    def __init__(
        self,
        fetcher: Fetcher,
        *,
        cache: str | LookupCacheBackend | None = None,
        scheduler: Scheduler | None = None,
        quiet_window_s: float = 1.0,
        fetch_timeout_s: float | None = 5.0,
        metrics: LookupMetrics | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._cache = create_lookup_cache(cache)
        self._scheduler: Scheduler = scheduler or LoopScheduler()
        self._quiet_window_s = quiet_window_s
        self._fetch_timeout_s = fetch_timeout_s
        self._metrics: LookupMetrics = metrics or NoOpLookupMetrics()

        self._state = CoalescerState()
        self._pending = PendingRequestTable()
        self._tasks: set[asyncio.Task[None]] = set()
        self._fetch_count = 0
        self._closed = False
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def state(self) -> CoalescerState:
        return self._state

    @property
    def cache(self) -> LookupCacheBackend:
        return self._cache

    @property
    def pending(self) -> PendingRequestTable:
        return self._pending

    @property
    def fetch_count(self) -> int:
        """Number of fetcher calls issued so far."""
        return self._fetch_count

    def lookup(self, key: Coordinates) -> asyncio.Future[LookupValue]:
        """Return a future for the value of `key`. Never blocks.

        Must be called from a running event loop.
        """
        if self._closed:
            raise GeoLookupError("Lookup coalescer is closed")

        loop = asyncio.get_running_loop()

        cached = self._cache.get(key)
        if cached is not MISSING:
            self._metrics.incr("lookup_cache_hit")
            done: asyncio.Future[LookupValue] = loop.create_future()
            done.set_result(cached)
            return done

        in_flight = self._pending.get(key)
        if in_flight is not None:
            self._metrics.incr("lookup_attached")
            logger.debug("Attaching lookup for %s to in-flight dispatch", key)
            return _attach(in_flight)

        state = self._state
        if not state.slot_busy:
            state.slot_busy = True
            self._idle.clear()
            state.phase = "active"
            handle: asyncio.Future[LookupValue] = loop.create_future()
            self._pending.set(key, handle)
            self._metrics.incr("dispatch_immediate")
            logger.debug("Immediate dispatch for %s", key)
            self._spawn(self._run_immediate(key, handle))
            return _attach(handle)

        return self._enqueue(key, loop)

    def _enqueue(
        self, key: Coordinates, loop: asyncio.AbstractEventLoop
    ) -> asyncio.Future[LookupValue]:
        state = self._state
        waiter = Waiter(loop.create_future())
        state.queued_waiters.append(waiter)
        state.latest_queued_key = key

        if state.trailing_timer is not None:
            state.trailing_timer.cancel()
        state.trailing_timer = self._scheduler.call_later(
            self._quiet_window_s, self._on_trailing_timer
        )
        self._metrics.incr("lookup_queued")
        logger.debug(
            "Queued lookup for %s (waiters: %d, phase: %s)",
            key,
            len(state.queued_waiters),
            state.phase,
        )
        return waiter.future

    async def _fetch(self, key: Coordinates) -> LookupValue:
        self._fetch_count += 1
        try:
            return await await_with_timeout(
                self._fetcher.fetch(key), self._fetch_timeout_s, key=key
            )
        except DispatchFailure:
            raise
        except Exception as exc:  # noqa: BLE001
            raise DispatchFailure(f"Lookup for {key} failed: {exc}", key=key) from exc

    async def _run_immediate(
        self, key: Coordinates, handle: asyncio.Future[LookupValue]
    ) -> None:
        state = self._state
        try:
            value = await self._fetch(key)
        except asyncio.CancelledError:
            self._pending.remove(key, handle)
            handle.cancel()
            raise
        except DispatchFailure as exc:
            self._pending.remove(key, handle)
            self._metrics.incr("dispatch_failed", tags={"kind": "immediate"})
            logger.warning("Immediate lookup for %s failed: %s", key, exc)
            # Queued waiters stay queued for the deferred dispatch.
            handle.set_exception(exc)
        else:
            self._pending.remove(key, handle)
            self._cache.put(key, value)
            handle.set_result(value)
            if state.queued_waiters:
                _, waiters = state.take_waiters()
                if state.trailing_timer is not None:
                    state.trailing_timer.cancel()
                    state.trailing_timer = None
                self._resolve_waiters(waiters, value)
        finally:
            state.active_dispatches -= 1
            self._arm_slot_release()

    async def _run_deferred(
        self, key: Coordinates, handle: asyncio.Future[LookupValue]
    ) -> None:
        """Settle `handle` with the value, or with None on failure."""
        try:
            value = await self._fetch(key)
        except asyncio.CancelledError:
            self._pending.remove(key, handle)
            handle.cancel()
            raise
        except DispatchFailure as exc:
            self._pending.remove(key, handle)
            self._metrics.incr("dispatch_failed", tags={"kind": "deferred"})
            logger.warning("Deferred lookup for %s failed, answering with no value: %s", key, exc)
            handle.set_result(None)
        else:
            self._pending.remove(key, handle)
            self._cache.put(key, value)
            handle.set_result(value)
        finally:
            self._state.active_dispatches -= 1
            self._arm_slot_release()

    def _resolve_waiters(self, waiters: list[Waiter], value: LookupValue) -> None:
        for waiter in waiters:
            waiter.resolve(value)
        if waiters:
            self._metrics.incr("waiters_resolved", len(waiters))

    def _chain_waiters(
        self, handle: asyncio.Future[LookupValue], waiters: list[Waiter]
    ) -> None:
        """Answer drained waiters from a dispatch handle; failures become None."""

        def _relay(done: asyncio.Future[LookupValue]) -> None:
            if done.cancelled():
                for waiter in waiters:
                    waiter.cancel()
                return
            value = None if done.exception() is not None else done.result()
            self._resolve_waiters(waiters, value)

        handle.add_done_callback(_relay)

    def _arm_slot_release(self) -> None:
        if self._closed:
            return
        state = self._state
        if state.slot_release_timer is not None:
            state.slot_release_timer.cancel()
        state.slot_release_timer = self._scheduler.call_later(
            self._quiet_window_s, self._on_slot_release
        )
        if state.active_dispatches == 0:
            state.phase = "cooldown"

    def _on_slot_release(self) -> None:
        state = self._state
        state.slot_release_timer = None
        if state.queued_waiters:
            self._start_deferred(trigger="slot_release")
            return
        if state.active_dispatches:
            # The running dispatch re-arms this timer when it settles.
            return
        state.slot_busy = False
        state.phase = "idle"
        logger.debug("Dispatch slot released")
        self._idle.set()

    def _on_trailing_timer(self) -> None:
        state = self._state
        state.trailing_timer = None
        if not state.queued_waiters:
            return
        self._start_deferred(trigger="trailing")

    def _start_deferred(self, *, trigger: str) -> None:
        state = self._state
        key, waiters = state.take_waiters()
        if key is None:
            return

        cached = self._cache.get(key)
        if cached is not MISSING:
            logger.debug("Deferred key %s already cached; answering %d waiters", key, len(waiters))
            self._resolve_waiters(waiters, cached)
            if state.slot_release_timer is None and not state.active_dispatches:
                self._arm_slot_release()
            return

        in_flight = self._pending.get(key)
        if in_flight is not None:
            logger.debug("Deferred key %s already in flight; chaining %d waiters", key, len(waiters))
            self._chain_waiters(in_flight, waiters)
            return

        state.cancel_timers()
        state.slot_busy = True
        self._idle.clear()
        state.phase = "active"
        handle: asyncio.Future[LookupValue] = asyncio.get_running_loop().create_future()
        self._pending.set(key, handle)
        self._chain_waiters(handle, waiters)
        self._metrics.incr("dispatch_deferred", tags={"trigger": trigger})
        logger.debug(
            "Deferred dispatch for %s via %s timer (waiters: %d)",
            key,
            trigger,
            len(waiters),
        )
        self._spawn(self._run_deferred(key, handle))

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        self._state.active_dispatches += 1
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def wait_until_idle(self) -> None:
        """Wait until the slot is free, so the next lookup dispatches immediately."""
        await self._idle.wait()

    def get_stats(self) -> dict[str, Any]:
        """Get coalescer statistics."""
        state = self._state
        return {
            "phase": state.phase,
            "slot_busy": state.slot_busy,
            "queued_waiters": len(state.queued_waiters),
            "latest_queued_key": (
                state.latest_queued_key.index if state.latest_queued_key else None
            ),
            "active_dispatches": state.active_dispatches,
            "in_flight_keys": [key.index for key in self._pending.keys()],
            "cache_size": len(self._cache),
            "fetch_count": self._fetch_count,
        }

    async def aclose(self) -> None:
        """Cancel timers, running dispatches and still-queued waiters."""
        if self._closed:
            return
        self._closed = True
        state = self._state
        state.cancel_timers()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        # Dispatches cancelled before their first step never settle their handle.
        for key in self._pending.keys():
            handle = self._pending.get(key)
            if handle is not None:
                handle.cancel()
            self._pending.remove(key)
        _, waiters = state.take_waiters()
        for waiter in waiters:
            waiter.cancel()
        state.slot_busy = False
        state.phase = "idle"
        state.active_dispatches = 0
        self._idle.set()
        logger.debug("Lookup coalescer closed (fetches: %d)", self._fetch_count)
