"""Cancellable delayed evaluation, independent of the timer primitive."""

from collections.abc import Callable
from typing import Any, Protocol


class ScheduledTask(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledTask: ...


class _CompletedTask:
    def cancel(self) -> None:
        pass


class ImmediateScheduler:
    """Runs callbacks at once. Used where there is no event loop to defer to."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        callback()
        return _CompletedTask()


class Debouncer:
    """Single-flight delayed call: each new call cancels the pending one."""

    def __init__(self, delay: float, scheduler: Scheduler):
        self._delay = delay
        self._scheduler = scheduler
        self._task: ScheduledTask | None = None
        self._pending: tuple[Callable[..., Any], tuple] | None = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def call(self, fn: Callable[..., Any], *args) -> None:
        self.cancel()
        self._generation += 1
        generation = self._generation
        self._pending = (fn, args)
        self._task = self._scheduler.schedule(self._delay, lambda: self._fire(generation))

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
        self._task = None
        self._pending = None

    def flush(self) -> None:
        """Run the pending call now, if any."""
        if self._pending is None:
            return
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._run()

    def _fire(self, generation: int) -> None:
        # A timer that fires after being superseded must not run the newer call early
        if generation != self._generation or self._pending is None:
            return
        self._task = None
        self._run()

    def _run(self) -> None:
        fn, args = self._pending
        self._pending = None
        fn(*args)
