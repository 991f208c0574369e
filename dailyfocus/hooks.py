"""In-process subscription hooks for DailyFocus.

Stores and timers own a ``Hooks`` registry and fire it after every
successful mutation. Subscribers receive ``(event, payload)``.

Record events:
- reflection_saved, reflection_cleared
- todo_added, todo_toggled, todo_edited, todo_deleted
- day_reset

Timer events:
- timer_started, timer_paused, timer_reset, timer_ticked
- phase_changed, config_changed, break_toggled
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

logger = logging.getLogger(__name__)

Callback = Callable[[str, dict[str, Any]], None]

RECORD_EVENTS = {
    "reflection_saved",
    "reflection_cleared",
    "todo_added",
    "todo_toggled",
    "todo_edited",
    "todo_deleted",
    "day_reset",
}

TIMER_EVENTS = {
    "timer_started",
    "timer_paused",
    "timer_reset",
    "timer_ticked",
    "phase_changed",
    "config_changed",
    "break_toggled",
}


class Subscription:
    """Owned registration handle. ``cancel()`` is idempotent."""

    def __init__(self, hooks: Hooks, callback: Callback):
        self._hooks = hooks
        self.callback = callback

    @property
    def active(self) -> bool:
        return self._hooks._contains(self)

    def cancel(self) -> None:
        self._hooks._remove(self)


class Hooks:
    def __init__(self, events: set[str] | None = None):
        self.events = events
        self._subs: list[Subscription] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Callback) -> Subscription:
        sub = Subscription(self, callback)
        with self._lock:
            self._subs.append(sub)
        return sub

    def fire(self, event: str, payload: dict[str, Any] | None = None) -> int:
        """Call every subscriber; returns how many completed without error."""
        if self.events is not None and event not in self.events:
            raise ValueError(f"Unknown event: {event}")
        with self._lock:
            subs = list(self._subs)
        payload = payload or {}
        ok = 0
        for sub in subs:
            try:
                sub.callback(event, payload)
                ok += 1
            except Exception:
                logger.exception("Subscriber failed on %s", event)
        return ok

    def __len__(self) -> int:
        return len(self._subs)

    def _contains(self, sub: Subscription) -> bool:
        with self._lock:
            return sub in self._subs

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            if sub in self._subs:
                self._subs.remove(sub)
