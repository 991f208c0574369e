"""Time sources for DailyFocus.

The core never reads system time directly. Hosts pass a ``Clock``:
``SystemClock`` for real use, ``VirtualClock`` for tests and simulations.
Deferred work is represented by an owned ``Handle`` that the caller must
cancel when it no longer wants the callback.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
from datetime import datetime, timedelta, tzinfo
from typing import Callable, Protocol

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)


class Handle:
    """Cancellation handle for a scheduled callback. ``cancel()`` is idempotent."""

    def __init__(self, on_cancel: Callable[[], None] | None = None):
        self._on_cancel = on_cancel
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        if self._on_cancel is not None:
            self._on_cancel()

    def _finish(self) -> None:
        self._active = False


class Clock(Protocol):
    def now(self) -> datetime: ...

    def schedule_after(self, delay_ms: int, callback: Callable[[], None]) -> Handle: ...

    def schedule_every(self, period_ms: int, callback: Callable[[], None]) -> Handle: ...


def _check_delay(delay_ms: int) -> None:
    if delay_ms < 0:
        raise ValueError(f"Delay must be non-negative, got {delay_ms}")


def _local_zone() -> tzinfo:
    return datetime.now().astimezone().tzinfo


class SystemClock:
    """Wall clock in *tz* (host zone by default) with APScheduler jobs.

    The background scheduler starts on first use; ``shutdown()`` stops it.
    """

    def __init__(self, tz: tzinfo | None = None, scheduler: BackgroundScheduler | None = None):
        self.tz = tz or _local_zone()
        self.scheduler = scheduler or BackgroundScheduler(timezone=self.tz)
        self._lock = threading.Lock()

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def schedule_after(self, delay_ms: int, callback: Callable[[], None]) -> Handle:
        _check_delay(delay_ms)
        handle = Handle()

        def fire() -> None:
            if handle.active:
                handle._finish()
                callback()

        job = self._add_job(
            fire, "date",
            run_date=self.now() + timedelta(milliseconds=delay_ms),
            misfire_grace_time=None,
        )
        handle._on_cancel = lambda: _remove_job(job)
        return handle

    def schedule_every(self, period_ms: int, callback: Callable[[], None]) -> Handle:
        if period_ms <= 0:
            raise ValueError(f"Period must be positive, got {period_ms}")
        job = self._add_job(callback, "interval", seconds=period_ms / 1000)
        return Handle(lambda: _remove_job(job))

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)

    def _add_job(self, func: Callable[[], None], trigger: str, **trigger_args) -> Job:
        with self._lock:
            if not self.scheduler.running:
                self.scheduler.start()
        return self.scheduler.add_job(func, trigger, **trigger_args)


def _remove_job(job: Job) -> None:
    try:
        job.remove()
    except JobLookupError:
        logger.debug("Job %s already gone", job.id)


class VirtualClock:
    """Manually advanced clock. Due callbacks run inside ``advance()``."""

    def __init__(self, start: datetime):
        if start.tzinfo is None:
            raise ValueError("VirtualClock needs an aware start time")
        self._now = start
        self._queue: list[tuple[datetime, int, Handle, Callable[[], None], int | None]] = []
        self._seq = itertools.count()

    def now(self) -> datetime:
        return self._now

    def pending(self) -> int:
        return sum(1 for entry in self._queue if entry[2].active)

    def schedule_after(self, delay_ms: int, callback: Callable[[], None]) -> Handle:
        _check_delay(delay_ms)
        handle = Handle()
        self._push(self._now + timedelta(milliseconds=delay_ms), handle, callback, None)
        return handle

    def schedule_every(self, period_ms: int, callback: Callable[[], None]) -> Handle:
        if period_ms <= 0:
            raise ValueError(f"Period must be positive, got {period_ms}")
        handle = Handle()
        self._push(self._now + timedelta(milliseconds=period_ms), handle, callback, period_ms)
        return handle

    def advance(self, ms: int = 0, seconds: float = 0) -> None:
        """Move time forward, firing due callbacks in deadline order."""
        target = self._now + timedelta(milliseconds=ms, seconds=seconds)
        if target < self._now:
            raise ValueError("Cannot move a clock backwards")
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback, period = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self._now = due
            if period is None:
                handle._finish()
            else:
                self._push(due + timedelta(milliseconds=period), handle, callback, period)
            callback()
        self._now = target

    def set(self, moment: datetime) -> None:
        """Jump to *moment*, firing anything that falls due on the way."""
        self.advance(ms=(moment - self._now) // timedelta(milliseconds=1))

    def _push(self, due: datetime, handle: Handle, callback: Callable[[], None], period: int | None) -> None:
        heapq.heappush(self._queue, (due, next(self._seq), handle, callback, period))
