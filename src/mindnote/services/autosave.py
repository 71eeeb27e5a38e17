"""Debounced auto-save of edited blocks."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Awaitable, Callable, Iterable

from ..core.blocks import ContentBlock
from ..ui.events import BlockSaved, BlockSaveFailed, EventBus

__all__ = ["AutosaveScheduler"]

LOGGER = logging.getLogger(__name__)

SaveCallback = Callable[[ContentBlock], Awaitable[None]]


class AutosaveScheduler:
    """Keeps at most one pending save per block id.

    ``schedule`` cancels the pending save for the same block and starts a new
    deferred task, so the block written is always the latest one handed in
    before the delay elapsed. Once a task's delay has elapsed it is no longer
    pending but in flight: it cannot be cancelled by a newer edit, and
    :meth:`flush` and :meth:`aclose` wait for it.
    """

    def __init__(
        self,
        save: SaveCallback,
        *,
        delay: float = 1.0,
        event_bus: EventBus | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._save = save
        self._delay = max(0.0, delay)
        self._bus = event_bus
        self._loop = loop
        self._latest: dict[str, ContentBlock] = {}
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._in_flight: set[asyncio.Task[None]] = set()
        self._closed = False

    @property
    def delay(self) -> float:
        return self._delay

    def pending(self) -> set[str]:
        return {block_id for block_id, task in self._tasks.items() if not task.done()}

    def is_pending(self, block_id: str) -> bool:
        task = self._tasks.get(block_id)
        return task is not None and not task.done()

    def in_flight(self) -> int:
        return len(self._in_flight)

    def schedule(self, block: ContentBlock) -> None:
        """Replace any pending save for ``block.id`` with one for ``block``."""

        if self._closed:
            LOGGER.debug("Ignoring auto-save for %s after close", block.id)
            return
        self._latest[block.id] = block
        previous = self._tasks.pop(block.id, None)
        if previous is not None and not previous.done():
            previous.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._tasks[block.id] = loop.create_task(self._deferred_save(block.id))

    async def flush(self) -> None:
        """Save every pending block now, then wait for saves already running."""

        pending = list(self._tasks.items())
        self._tasks.clear()
        await self._cancel_all(task for _, task in pending)
        for block_id, _ in pending:
            await self._save_latest(block_id)
        await self._drain()

    async def aclose(self) -> None:
        """Drop pending saves, wait for in-flight ones and refuse new work."""

        self._closed = True
        pending = list(self._tasks.values())
        self._tasks.clear()
        await self._cancel_all(pending)
        self._latest.clear()
        await self._drain()

    async def _cancel_all(self, tasks: Iterable[asyncio.Task[None]]) -> None:
        tasks = list(tasks)
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _drain(self) -> None:
        while self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    async def _deferred_save(self, block_id: str) -> None:
        await asyncio.sleep(self._delay)
        task = asyncio.current_task()
        if self._tasks.get(block_id) is task:
            del self._tasks[block_id]
        self._in_flight.add(task)  # type: ignore[arg-type]
        try:
            await self._save_latest(block_id)
        finally:
            self._in_flight.discard(task)  # type: ignore[arg-type]

    async def _save_latest(self, block_id: str) -> None:
        block = self._latest.pop(block_id, None)
        if block is None:
            return
        try:
            await self._save(block)
        except Exception as exc:
            LOGGER.warning("Auto-save failed for block %s: %s", block_id, exc)
            if self._bus is not None:
                self._bus.publish(BlockSaveFailed(block_id=block_id, error=str(exc)))
            return
        LOGGER.debug("Auto-saved block %s", block_id)
        if self._bus is not None:
            self._bus.publish(BlockSaved(block_id=block_id, block=block))
