"""Today-centric facade wiring records, metrics, timer and prompt together.

This is what a host UI talks to: every todo/reflection call targets the
current local date of the session clock.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

from dailyfocus.clock import Clock, SystemClock
from dailyfocus.dates import date_key
from dailyfocus.metrics import day_progress, streak
from dailyfocus.models import DayProgress, PromptDecision, TimerConfig, TodoItem
from dailyfocus.prompt import NightlyPrompt
from dailyfocus.records import DailyRecordStore
from dailyfocus.storage import FileBackend, PersistentStore
from dailyfocus.timer import FocusTimer, TimerDriver
from dailyfocus.workspace import Settings, load_settings, store_dir, workspace_root


class DailySession:
    def __init__(
        self,
        store: DailyRecordStore,
        clock: Clock,
        settings: Settings | None = None,
        on_prompt: Callable[[], None] | None = None,
    ):
        self.settings = settings or Settings()
        self.store = store
        self.clock = clock
        self.timer = FocusTimer(
            TimerConfig.clamped(self.settings.focus_minutes, self.settings.break_minutes)
        )
        self.driver = TimerDriver(self.timer, clock)
        self.prompt = NightlyPrompt(
            clock, store, on_prompt or (lambda: None), hour=self.settings.prompt_hour
        )
        self._owned_clock: SystemClock | None = None

    @classmethod
    def open(
        cls,
        root: Path | None = None,
        clock: Clock | None = None,
        on_prompt: Callable[[], None] | None = None,
    ) -> DailySession:
        """Build a session from the workspace profile and on-disk store."""
        if root is None:
            root = workspace_root()
        settings = load_settings(root)
        backend = FileBackend(store_dir(root))
        store = DailyRecordStore(PersistentStore(backend, prefix=settings.store_prefix))
        session = cls(store, clock or SystemClock(settings.tzinfo()), settings, on_prompt)
        if clock is None:
            session._owned_clock = session.clock
        return session

    @property
    def today(self) -> str:
        return date_key(self.clock.now())

    # ── Todos ────────────────────────────────────────────────

    def todays_todos(self) -> list[TodoItem]:
        return self.store.get_todos(self.today)

    def add_todo(self, text: str) -> TodoItem | None:
        return self.store.add_todo(self.today, text)

    def toggle_todo(self, todo_id: int) -> None:
        self.store.toggle_todo(self.today, todo_id)

    def edit_todo(self, todo_id: int, text: str) -> None:
        self.store.edit_todo(self.today, todo_id, text)

    def delete_todo(self, todo_id: int) -> None:
        self.store.delete_todo(self.today, todo_id)

    # ── Reflection ───────────────────────────────────────────

    def reflection(self) -> str | None:
        return self.store.get_reflection(self.today)

    def save_reflection(self, text: str) -> None:
        self.store.set_reflection(self.today, text)

    def reset_day(self) -> None:
        self.store.reset_day(self.today)

    # ── Metrics ──────────────────────────────────────────────

    def progress(self) -> DayProgress:
        return day_progress(self.todays_todos())

    def streak(self, include_pending_today: bool = True) -> int:
        return streak(
            self.today,
            self.store.todos_by_date(),
            self.store.reflections(),
            include_pending_today=include_pending_today,
        )

    def summary(self) -> dict[str, Any]:
        progress = self.progress()
        return {
            "date": self.today,
            "done": progress.done,
            "total": progress.total,
            "percent": progress.percent,
            "streak": self.streak(),
            "hasReflection": self.store.has_reflection(self.today),
            "timer": self.timer.state.to_dict(),
        }

    # ── Lifecycle ────────────────────────────────────────────

    def arm_prompt(self) -> PromptDecision:
        return self.prompt.arm()

    def close(self) -> None:
        self.driver.close()
        self.prompt.close()
        if self._owned_clock is not None:
            self._owned_clock.shutdown()
            self._owned_clock = None
