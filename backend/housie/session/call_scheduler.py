"""Manage the repeating number-call timer of every active room."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from housie.logic.settings import CALL_INTERVAL_SECONDS

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = structlog.get_logger()

# Callback type: (room_id) -> Awaitable[None]
type TickCallback = Callable[[str], Awaitable[None]]


class NumberCallScheduler:
    """Own one periodic asyncio task per room.

    The scheduler only handles task lifecycle: start, stop and cleanup. It does
    not inspect rooms; the on_tick callback draws, publishes
    and decides when the room's timer must stop.

    A tick may stop its own room's timer. In that case the running task is
    not cancelled, so the callback can finish publishing; the loop exits as
    soon as the tick returns.
    """

    def __init__(self, on_tick: TickCallback, interval_seconds: float = CALL_INTERVAL_SECONDS) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self._on_tick = on_tick
        self._interval = interval_seconds
        self._tasks: dict[str, asyncio.Task[None]] = {}

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def active_count(self) -> int:
        return len(self._tasks)

    def is_running(self, room_id: str) -> bool:
        return room_id in self._tasks

    def start(self, room_id: str) -> None:
        """Start calling numbers for a room, replacing any existing timer."""
        self.stop(room_id, reason="timer restarted")
        self._tasks[room_id] = asyncio.create_task(self._run(room_id), name=f"number-call-{room_id}")
        logger.info("number calling started", room_id=room_id, interval_seconds=self._interval)

    def stop(self, room_id: str, reason: str) -> None:
        """Stop a room's timer. No-op if none is running."""
        task = self._tasks.pop(room_id, None)
        if task is None:
            return
        if task is not asyncio.current_task() and not task.done():
            task.cancel()
        logger.info("number calling stopped", room_id=room_id, reason=reason)

    async def stop_all(self) -> None:
        """Cancel every timer and wait for the tasks to unwind (used at shutdown)."""
        tasks = list(self._tasks.values())
        for room_id in list(self._tasks):
            self.stop(room_id, reason="server shutting down")
        current = asyncio.current_task()
        pending = [task for task in tasks if task is not current]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    def _owns(self, room_id: str, task: asyncio.Task[None] | None) -> bool:
        return task is not None and self._tasks.get(room_id) is task

    async def _run(self, room_id: str) -> None:
        task = asyncio.current_task()
        try:
            while self._owns(room_id, task):
                await asyncio.sleep(self._interval)
                if not self._owns(room_id, task):
                    return
                try:
                    await self._on_tick(room_id)
                except Exception:
                    logger.exception("number call tick failed", room_id=room_id)
                    if self._owns(room_id, task):
                        self.stop(room_id, reason="tick failed")
        except asyncio.CancelledError:
            pass
