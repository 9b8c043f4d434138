"""
Pig Dice - Step Schedulers

Timers that pace the scripted opponent. ThreadingScheduler fires callbacks
on daemon timer threads for live play; ManualScheduler keeps a virtual
clock that tests and headless simulations advance explicitly.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    """Anything that can run a callback after a delay."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        ...


class ThreadingScheduler:
    """Runs callbacks on background timer threads.

    Callbacks run off the caller's thread; the game serialises them with
    its own lock.
    """

    def __init__(self) -> None:
        self._timers: set[threading.Timer] = set()
        self._lock = threading.Lock()

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        timer: threading.Timer

        def run() -> None:
            with self._lock:
                self._timers.discard(timer)
            try:
                callback()
            except Exception:
                logger.exception("Scheduled callback failed")

        timer = threading.Timer(delay, run)
        timer.daemon = True
        with self._lock:
            self._timers.add(timer)
        timer.start()

    @property
    def pending(self) -> int:
        """Number of timers that have not fired yet."""
        with self._lock:
            return len(self._timers)

    def shutdown(self) -> None:
        """Cancel every timer that has not fired yet."""
        with self._lock:
            timers = list(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()


class ManualScheduler:
    """Virtual-time scheduler. Nothing runs until the clock is advanced."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, Callable[[], None]]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        heapq.heappush(self._queue, (self.now + delay, next(self._counter), callback))

    @property
    def pending(self) -> int:
        return len(self._queue)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running every callback that falls due.

        Callbacks scheduled while advancing run too if they fall due
        before the new time.

        Returns:
            Number of callbacks run
        """
        target = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self.now = due
            callback()
            ran += 1
        self.now = target
        return ran

    def run_until_idle(self, max_steps: int = 10_000) -> int:
        """Run callbacks in due order until none remain.

        Raises:
            RuntimeError: If more than max_steps callbacks run
        """
        ran = 0
        while self._queue:
            if ran >= max_steps:
                raise RuntimeError(f"Scheduler still busy after {max_steps} steps.")
            due, _, callback = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            callback()
            ran += 1
        return ran
