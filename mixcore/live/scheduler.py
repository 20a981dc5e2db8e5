"""Cancellable fixed-cadence loop on the asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class CancellationToken:
    """One-way flag checked by a loop before every tick."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class PeriodicTask:
    """Call *callback* every *interval* seconds until stopped.

    Ticks are scheduled against the loop clock, so a slow tick shortens the
    following sleep instead of drifting; ticks missed entirely are skipped.
    :meth:`stop` is synchronous: once it returns no further tick runs. A
    callback exception ends the loop; it is logged when the task finishes and
    re-raised by :meth:`aclose`.
    """

    def __init__(self, interval: float, callback: Callable[[], None], name: str = "periodic") -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.interval = interval
        self.name = name
        self.ticks = 0
        self._callback = callback
        self._token = CancellationToken()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done() and not self._token.cancelled

    def start(self) -> None:
        """Schedule the loop. Must be called with an event loop running."""
        if self._task is not None:
            raise RuntimeError(f"{self.name} already started")
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name=self.name)
        self._task.add_done_callback(self._on_done)
        logger.debug("Started %s at %.1f Hz", self.name, 1.0 / self.interval)

    def stop(self) -> None:
        """Cancel the loop. Idempotent."""
        if self._token.cancelled:
            return
        self._token.cancel()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        logger.debug("Stopped %s after %d ticks", self.name, self.ticks)

    async def aclose(self) -> None:
        """Stop and wait for the loop task to finish."""
        self.stop()
        if self._task is not None:
            try:
                await self._task
            except asyncio.CancelledError:
                pass

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        while not self._token.cancelled:
            self._callback()
            self.ticks += 1
            next_tick += self.interval
            delay = next_tick - loop.time()
            if delay < 0:
                next_tick = loop.time()
                delay = 0.0
            await asyncio.sleep(delay)

    def _on_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("%s failed after %d ticks: %s", self.name, self.ticks, exc, exc_info=exc)
