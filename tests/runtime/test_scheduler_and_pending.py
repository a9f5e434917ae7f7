from __future__ import annotations

import asyncio

from geolookup import Coordinates, LoopScheduler, ManualScheduler
from geolookup.runtime import PendingRequestTable


def test_manual_scheduler_runs_due_callbacks_in_deadline_order():
    scheduler = ManualScheduler()
    fired: list[str] = []
    scheduler.call_later(2.0, lambda: fired.append("late"))
    scheduler.call_later(1.0, lambda: fired.append("early"))
    scheduler.call_later(1.0, lambda: fired.append("early-second"))

    assert scheduler.advance(0.5) == 0
    assert scheduler.advance(0.5) == 2
    assert fired == ["early", "early-second"]
    assert scheduler.now_s == 1.0
    assert scheduler.advance(5.0) == 1
    assert fired[-1] == "late"
    assert scheduler.now_s == 6.0


def test_manual_scheduler_skips_cancelled_timers():
    scheduler = ManualScheduler()
    fired: list[str] = []
    handle = scheduler.call_later(1.0, lambda: fired.append("cancelled"))
    scheduler.call_later(1.0, lambda: fired.append("kept"))
    handle.cancel()
    handle.cancel()

    assert scheduler.pending == 1
    scheduler.advance(1.0)
    assert fired == ["kept"]


def test_callbacks_scheduled_while_advancing_still_fire_if_due():
    scheduler = ManualScheduler()
    fired: list[float] = []

    def first() -> None:
        fired.append(scheduler.now_s)
        scheduler.call_later(0.5, lambda: fired.append(scheduler.now_s))

    scheduler.call_later(1.0, first)
    scheduler.advance(2.0)
    assert fired == [1.0, 1.5]


def test_loop_scheduler_uses_running_loop():
    async def scenario() -> None:
        fired = asyncio.Event()
        handle = LoopScheduler().call_later(0.01, fired.set)
        await asyncio.wait_for(fired.wait(), timeout=1.0)
        handle.cancel()

    asyncio.run(scenario())


def test_pending_remove_only_drops_matching_handle():
    async def scenario() -> None:
        loop = asyncio.get_running_loop()
        table = PendingRequestTable()
        key = Coordinates(1, 2)
        old = loop.create_future()
        new = loop.create_future()

        table.set(key, new)
        table.remove(key, old)
        assert table.get(key) is new
        table.remove(key, new)
        assert table.get(key) is None
        assert len(table) == 0

        table.set(key, old)
        table.remove(key)
        assert table.keys() == []

    asyncio.run(scenario())


def test_coordinates_compare_numerically_and_keep_full_precision():
    assert Coordinates(1, 2) == Coordinates(1.0, 2.0)
    assert hash(Coordinates(1, 2)) == hash(Coordinates(1.0, 2.0))
    assert Coordinates(39.82831234567, -98.5795).index == "39.82831234567,-98.5795"
    assert Coordinates.parse(" 39.8283 , -98.5795 ") == Coordinates(39.8283, -98.5795)
