"""Unit tests for NumberCallScheduler in isolation."""

import asyncio

import pytest

from housie.session.call_scheduler import NumberCallScheduler

TICK = 0.01


@pytest.fixture
def tick_log():
    return []


@pytest.fixture
async def scheduler(tick_log):
    async def on_tick(room_id: str) -> None:
        tick_log.append(room_id)

    sched = NumberCallScheduler(on_tick, interval_seconds=TICK)
    yield sched
    await sched.stop_all()


class TestNumberCallScheduler:
    def test_rejects_non_positive_interval(self):
        async def on_tick(_room_id: str) -> None:
            pass

        with pytest.raises(ValueError, match="interval_seconds"):
            NumberCallScheduler(on_tick, interval_seconds=0)

    async def test_ticks_repeatedly(self, scheduler, tick_log):
        scheduler.start("R1")
        await asyncio.sleep(TICK * 10)
        assert tick_log.count("R1") >= 2
        assert scheduler.is_running("R1")

    async def test_stop_halts_ticks(self, scheduler, tick_log):
        scheduler.start("R1")
        await asyncio.sleep(TICK * 5)
        scheduler.stop("R1", reason="test")
        count = len(tick_log)
        await asyncio.sleep(TICK * 5)
        assert len(tick_log) == count
        assert not scheduler.is_running("R1")

    async def test_stop_is_idempotent(self, scheduler):
        scheduler.stop("R1", reason="never started")
        scheduler.start("R1")
        scheduler.stop("R1", reason="first")
        scheduler.stop("R1", reason="second")
        assert scheduler.active_count == 0

    async def test_restart_cancels_previous_task(self, scheduler):
        scheduler.start("R1")
        first = scheduler._tasks["R1"]
        scheduler.start("R1")
        await asyncio.sleep(0)
        assert scheduler.active_count == 1
        assert first.cancelled() or first.done()
        assert scheduler._tasks["R1"] is not first

    async def test_rooms_are_independent(self, scheduler, tick_log):
        scheduler.start("R1")
        scheduler.start("R2")
        scheduler.stop("R1", reason="test")
        await asyncio.sleep(TICK * 5)
        assert "R2" in tick_log
        assert "R1" not in tick_log

    async def test_stop_all(self, scheduler):
        scheduler.start("R1")
        scheduler.start("R2")
        tasks = list(scheduler._tasks.values())
        await scheduler.stop_all()
        assert scheduler.active_count == 0
        assert all(task.done() for task in tasks)

    async def test_no_tick_before_first_interval(self, tick_log):
        async def on_tick(room_id: str) -> None:
            tick_log.append(room_id)

        sched = NumberCallScheduler(on_tick, interval_seconds=10)
        sched.start("R1")
        await asyncio.sleep(0.02)
        assert tick_log == []
        await sched.stop_all()

    async def test_tick_can_stop_its_own_timer_and_finish(self):
        finished = asyncio.Event()
        sched: NumberCallScheduler

        async def on_tick(room_id: str) -> None:
            sched.stop(room_id, reason="done")
            await asyncio.sleep(0)
            finished.set()

        sched = NumberCallScheduler(on_tick, interval_seconds=TICK)
        sched.start("R1")
        await asyncio.wait_for(finished.wait(), timeout=1.0)
        assert not sched.is_running("R1")

    async def test_failing_tick_stops_timer(self, caplog):
        calls = []

        async def on_tick(room_id: str) -> None:
            calls.append(room_id)
            raise RuntimeError("boom")

        sched = NumberCallScheduler(on_tick, interval_seconds=TICK)
        sched.start("R1")
        await asyncio.sleep(TICK * 10)
        assert calls == ["R1"]
        assert not sched.is_running("R1")
        assert "number call tick failed" in caplog.text

    async def test_stop_all_waits_for_tick_in_progress(self):
        entered = asyncio.Event()

        async def on_tick(_room_id: str) -> None:
            entered.set()
            await asyncio.Event().wait()

        sched = NumberCallScheduler(on_tick, interval_seconds=TICK)
        sched.start("R1")
        task = sched._tasks["R1"]
        await asyncio.wait_for(entered.wait(), timeout=1.0)
        await sched.stop_all()
        assert task.done()
        assert sched.active_count == 0
