"""Focus/break interval timer for DailyFocus.

``FocusTimer`` is a pure state machine advanced one second per ``tick()``.
``TimerDriver`` connects it to a ``Clock`` and owns the repeating handle
that produces those ticks.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from dailyfocus.clock import Clock, Handle
from dailyfocus.hooks import TIMER_EVENTS, Callback, Hooks, Subscription
from dailyfocus.models import Phase, TimerConfig, TimerState

logger = logging.getLogger(__name__)

TICK_MS = 1000


class FocusTimer:
    def __init__(self, config: TimerConfig | None = None):
        self.config = config or TimerConfig()
        self.phase = Phase.FOCUS
        self.seconds_remaining = self.config.seconds_for(self.phase)
        self.running = False
        self.hooks = Hooks(TIMER_EVENTS)

    def subscribe(self, callback: Callback) -> Subscription:
        return self.hooks.subscribe(callback)

    @property
    def state(self) -> TimerState:
        return TimerState(
            phase=self.phase,
            seconds_remaining=self.seconds_remaining,
            running=self.running,
        )

    def start(self) -> None:
        self.running = True
        self._fire("timer_started")

    def pause(self) -> None:
        self.running = False
        self._fire("timer_paused")

    def toggle_running(self) -> None:
        if self.running:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        """Stop and refill the current phase from the live config."""
        self.running = False
        self.seconds_remaining = self.config.seconds_for(self.phase)
        self._fire("timer_reset")

    def tick(self) -> None:
        """Advance one second. Flips phase (and keeps running) at the end."""
        if not self.running:
            return
        if self.seconds_remaining > 1:
            self.seconds_remaining -= 1
            self._fire("timer_ticked")
            return
        self.phase = self.phase.flipped()
        self.seconds_remaining = self.config.seconds_for(self.phase)
        logger.debug("Timer phase -> %s", self.phase.value)
        self._fire("phase_changed")

    def set_config(self, focus_minutes: Any, break_minutes: Any) -> None:
        """Update durations (clamped to >= 1 minute).

        A stopped timer shows the new duration at once; a running one keeps
        counting and picks it up at the next phase flip or reset.
        """
        self.config = TimerConfig.clamped(focus_minutes, break_minutes)
        if not self.running:
            self.seconds_remaining = self.config.seconds_for(self.phase)
        self._fire("config_changed")

    def toggle_break(self) -> None:
        """Flip phase by hand; the remaining seconds carry over unchanged."""
        self.phase = self.phase.flipped()
        self._fire("break_toggled")

    def display(self) -> str:
        minutes, seconds = divmod(self.seconds_remaining, 60)
        return f"{minutes:02d}:{seconds:02d}"

    def _fire(self, event: str) -> None:
        self.hooks.fire(event, self.state.to_dict())


class TimerDriver:
    """Owns the once-per-second tick handle for a ``FocusTimer``."""

    def __init__(self, timer: FocusTimer, clock: Clock):
        self.timer = timer
        self.clock = clock
        self._handle: Handle | None = None
        self._lock = threading.RLock()

    @property
    def active(self) -> bool:
        return self._handle is not None and self._handle.active

    def start(self) -> Handle:
        """Start the timer and return the (single) outstanding tick handle."""
        with self._lock:
            self.timer.start()
            if self._handle is None or not self._handle.active:
                self._handle = self.clock.schedule_every(TICK_MS, self._tick)
            return self._handle

    def pause(self) -> None:
        with self._lock:
            self._cancel()
            self.timer.pause()

    def reset(self) -> None:
        with self._lock:
            self._cancel()
            self.timer.reset()

    def toggle_running(self) -> None:
        if self.timer.running:
            self.pause()
        else:
            self.start()

    def close(self) -> None:
        with self._lock:
            self._cancel()

    def _tick(self) -> None:
        with self._lock:
            self.timer.tick()

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
