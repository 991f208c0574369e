"""Nightly reflection prompt scheduling for DailyFocus."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from dailyfocus.clock import Clock, Handle
from dailyfocus.dates import date_key
from dailyfocus.hooks import Subscription
from dailyfocus.models import After, Immediate, PromptDecision, Suppressed
from dailyfocus.records import DailyRecordStore
from dailyfocus.workspace import DEFAULT_PROMPT_HOUR

logger = logging.getLogger(__name__)


def decide(now: datetime, has_reflection_today: bool, hour: int = DEFAULT_PROMPT_HOUR) -> PromptDecision:
    """Decide whether to prompt now, later today, or not at all.

    *now* is local time. The delay runs to ``hour``:00:00.000 on the same
    calendar date and is measured between absolute instants.
    """
    if has_reflection_today:
        return Suppressed()
    if now.hour >= hour:
        return Immediate()
    trigger = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if now.tzinfo is not None:
        delta = trigger.astimezone(timezone.utc) - now.astimezone(timezone.utc)
    else:
        delta = trigger - now
    return After(delay_ms=max(0, delta // timedelta(milliseconds=1)))


class NightlyPrompt:
    """Host helper that acts on ``decide()`` with at most one pending call.

    Saving today's reflection cancels the pending call; ``close()`` tears
    everything down.
    """

    def __init__(
        self,
        clock: Clock,
        store: DailyRecordStore,
        on_prompt: Callable[[], None],
        hour: int = DEFAULT_PROMPT_HOUR,
    ):
        self.clock = clock
        self.store = store
        self.on_prompt = on_prompt
        self.hour = hour
        self._pending: Handle | None = None
        self._subscription: Subscription | None = None
        self._lock = threading.RLock()

    @property
    def pending(self) -> bool:
        return self._pending is not None and self._pending.active

    def arm(self) -> PromptDecision:
        """Evaluate now and act on it. Replaces any earlier pending call."""
        with self._lock:
            self._cancel_pending()
            if self._subscription is None:
                self._subscription = self.store.subscribe(self._on_record_event)
            now = self.clock.now()
            decision = decide(now, self.store.has_reflection(date_key(now)), self.hour)
            if isinstance(decision, After):
                self._pending = self.clock.schedule_after(decision.delay_ms, self._fire)
                logger.debug("Reflection prompt due in %d ms", decision.delay_ms)
        if isinstance(decision, Immediate):
            self.on_prompt()
        return decision

    def close(self) -> None:
        with self._lock:
            self._cancel_pending()
            if self._subscription is not None:
                self._subscription.cancel()
                self._subscription = None

    def _fire(self) -> None:
        with self._lock:
            self._pending = None
            if self.store.has_reflection(date_key(self.clock.now())):
                return
        self.on_prompt()

    def _on_record_event(self, event: str, payload: dict[str, Any]) -> None:
        if event != "reflection_saved":
            return
        if payload.get("date") != date_key(self.clock.now()):
            return
        with self._lock:
            self._cancel_pending()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
