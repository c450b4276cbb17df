"""Cancellable deferred callbacks for the typing session.

Callbacks are always delivered on the thread that drives the scheduler, so
a session never sees a timer fire concurrently with a keystroke.
"""

import heapq
import itertools
import logging
import time
from typing import Callable, Optional, Protocol

log = logging.getLogger("typetrainer.scheduler")


class ScheduledTask:
    """Handle for a deferred callback."""

    def __init__(self, callback: Callable[[], None],
                 on_cancel: Optional[Callable[[], None]] = None):
        """Initialize task handle.

        Args:
            callback: Function to run when the task falls due
            on_cancel: Called once if the task is cancelled before running
        """
        self._callback = callback
        self.cancelled = False
        self.done = False
        self._on_cancel = on_cancel

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)

    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call repeatedly."""
        if not self.pending:
            return
        self.cancelled = True
        if self._on_cancel:
            self._on_cancel()

    def run(self) -> None:
        """Run the callback unless it was cancelled or already ran."""
        if not self.pending:
            return
        self.done = True
        self._callback()


class Scheduler(Protocol):
    """Anything that can run a callback later on the session's thread."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledTask:
        ...


class ManualScheduler:
    """Scheduler driven by an explicit virtual clock.

    Nothing fires until advance() is called, which makes lockout cooldowns
    and completion delays reproducible without sleeping.
    """

    def __init__(self, start_ms: int = 0):
        self._now_ms = start_ms
        self._queue: list[tuple[int, int, ScheduledTask]] = []
        self._sequence = itertools.count()

    def now_ms(self) -> int:
        """Current virtual time; usable as a session clock."""
        return self._now_ms

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(callback)
        due = self._now_ms + max(0, delay_ms)
        heapq.heappush(self._queue, (due, next(self._sequence), task))
        return task

    def advance(self, delta_ms: int) -> int:
        """Move the clock forward, firing every task that falls due.

        Args:
            delta_ms: Milliseconds to advance (must be non-negative)

        Returns:
            Number of callbacks that ran
        """
        if delta_ms < 0:
            raise ValueError(f"Cannot move clock backwards ({delta_ms}ms)")

        target = self._now_ms + delta_ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, task = heapq.heappop(self._queue)
            self._now_ms = due
            if task.pending:
                task.run()
                fired += 1
        self._now_ms = target
        return fired

    def pending_count(self) -> int:
        return sum(1 for _, _, task in self._queue if task.pending)


class QtScheduler:
    """Scheduler backed by single-shot QTimers on the Qt event loop."""

    def __init__(self, parent=None):
        self.parent = parent
        self._tasks: dict[int, ScheduledTask] = {}
        self._ids = itertools.count()

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledTask:
        from PySide6.QtCore import QTimer

        timer_id = next(self._ids)
        timer = QTimer(self.parent)
        timer.setSingleShot(True)
        timer.setInterval(max(0, delay_ms))

        def stop() -> None:
            self._tasks.pop(timer_id, None)
            timer.stop()
            timer.deleteLater()

        task = ScheduledTask(callback, on_cancel=stop)

        def fire() -> None:
            self._tasks.pop(timer_id, None)
            timer.deleteLater()
            task.run()

        timer.timeout.connect(fire)
        self._tasks[timer_id] = task
        timer.start()
        return task

    def cancel_all(self) -> None:
        """Cancel every timer that has not fired yet."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            log.debug(f"Cancelled {len(tasks)} pending timer(s)")


def wall_clock_ms() -> int:
    """Current wall-clock time in milliseconds."""
    return int(time.time() * 1000)
