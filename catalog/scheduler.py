"""Cancelable deferred-callback scheduling for the carousel autoplay timer."""

import asyncio
import heapq
import logging
from typing import Callable, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    """Handle returned by a scheduler; cancel() must be idempotent."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback once after a delay."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Scheduler backed by the running asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(
        self, delay: float, callback: Callable[[], None]
    ) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class ManualTimer:
    """Timer owned by a ManualScheduler."""

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Virtual-clock scheduler for headless driving and tests.

    Time only moves when advance() is called; due timers fire in due order
    (ties in scheduling order) and may schedule further timers, which fire
    within the same advance() if they fall inside the window.
    """

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, ManualTimer]] = []
        self._counter = 0

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (timer.due, self._counter, timer))
        self._counter += 1
        return timer

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward and fire every timer that falls due.

        Returns:
            Number of callbacks fired
        """
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            _, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now = timer.due
            timer.callback()
            fired += 1
        self.now = target
        return fired

    @property
    def pending(self) -> int:
        """Number of scheduled, not-yet-cancelled timers."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)


def default_scheduler() -> Scheduler:
    """
    Scheduler for a controller built without one.

    Uses the running asyncio loop when there is one. Outside a loop the
    autoplay timer runs on a ManualScheduler, which only advances when the
    caller drives it.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.debug("No running event loop; carousel timers use a manual clock")
        return ManualScheduler()
    return AsyncioScheduler(loop)
