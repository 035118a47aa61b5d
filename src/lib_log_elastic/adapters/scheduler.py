"""Scheduler adapters for the shutdown drain.

* :class:`AsyncioScheduler` - defers onto an asyncio event loop; the default
  when the output runs inside an async pipeline.
* :class:`InlineScheduler` - runs deferred callbacks immediately and timers on
  a daemon :class:`threading.Timer`; for synchronous hosts and scripts.
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable

from lib_log_elastic.application.ports.scheduler import CancelHandle, SchedulerPort


class AsyncioScheduler(SchedulerPort):
    """Schedule callbacks on ``loop`` (thread-safe)."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_soon(self, callback: Callable[[], None]) -> None:
        self.loop.call_soon_threadsafe(callback)

    def call_later(self, delay: float, callback: Callable[[], None]) -> CancelHandle:
        return _LoopTimer(self.loop, delay, callback)


class _LoopTimer:
    """Timer handle that can be armed and cancelled from any thread."""

    def __init__(self, loop: asyncio.AbstractEventLoop, delay: float, callback: Callable[[], None]) -> None:
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._cancelled = False
        loop.call_soon_threadsafe(self._arm, delay, callback)

    def _arm(self, delay: float, callback: Callable[[], None]) -> None:
        if not self._cancelled:
            self._handle = self._loop.call_later(delay, callback)

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._loop.call_soon_threadsafe(self._handle.cancel)


class InlineScheduler(SchedulerPort):
    """Run deferred callbacks synchronously.

    Examples
    --------
    >>> calls = []
    >>> InlineScheduler().call_soon(lambda: calls.append('ran'))
    >>> calls
    ['ran']
    """

    def call_soon(self, callback: Callable[[], None]) -> None:
        callback()

    def call_later(self, delay: float, callback: Callable[[], None]) -> CancelHandle:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


__all__ = ["AsyncioScheduler", "InlineScheduler"]
