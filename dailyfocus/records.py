"""Date-keyed reflections and todo lists for DailyFocus.

Both collections are loaded once, kept in memory, and written through to
the ``PersistentStore`` in full after every mutation. Invalid input
(blank text, unknown ids, dates with no records) is a silent no-op.
"""

from __future__ import annotations

import copy
import itertools
import logging
import threading
from typing import Any

from dailyfocus.hooks import RECORD_EVENTS, Callback, Hooks, Subscription
from dailyfocus.models import TodoItem
from dailyfocus.storage import REFLECTIONS, TODOS, PersistentStore

logger = logging.getLogger(__name__)


def _load_reflections(raw: dict[str, Any]) -> dict[str, str]:
    out = {}
    for day, text in raw.items():
        if isinstance(text, str):
            out[day] = text
        else:
            logger.warning("Skipping non-text reflection for %s", day)
    return out


def _load_todos(raw: dict[str, Any]) -> dict[str, list[TodoItem]]:
    out: dict[str, list[TodoItem]] = {}
    for day, items in raw.items():
        if not isinstance(items, list):
            logger.warning("Skipping malformed todo list for %s", day)
            continue
        parsed = []
        seen: set[int] = set()
        for item in items:
            try:
                todo = TodoItem.from_dict(item)
            except (TypeError, ValueError) as e:
                logger.warning("Skipping malformed todo on %s: %s", day, e)
                continue
            if todo.id in seen:
                logger.warning("Skipping duplicate todo id %s on %s", todo.id, day)
                continue
            seen.add(todo.id)
            parsed.append(todo)
        out[day] = parsed
    return out


class DailyRecordStore:
    def __init__(self, store: PersistentStore):
        self.store = store
        self.hooks = Hooks(RECORD_EVENTS)
        self._lock = threading.RLock()
        self._reflections = _load_reflections(store.load(REFLECTIONS, {}))
        self._todos = _load_todos(store.load(TODOS, {}))
        start = max(
            (t.id for items in self._todos.values() for t in items),
            default=0,
        ) + 1
        self._ids = itertools.count(start)

    def subscribe(self, callback: Callback) -> Subscription:
        return self.hooks.subscribe(callback)

    # ── Reflections ──────────────────────────────────────────

    def get_reflection(self, date: str) -> str | None:
        """Return the reflection for *date*, or None if none was recorded."""
        with self._lock:
            return self._reflections.get(date)

    def has_reflection(self, date: str) -> bool:
        with self._lock:
            return date in self._reflections

    def set_reflection(self, date: str, text: str) -> None:
        with self._lock:
            self._reflections[date] = text
            self._save_reflections()
        self.hooks.fire("reflection_saved", {"date": date, "text": text})

    def clear_reflection(self, date: str) -> None:
        with self._lock:
            if date not in self._reflections:
                return
            del self._reflections[date]
            self._save_reflections()
        self.hooks.fire("reflection_cleared", {"date": date})

    # ── Todos ────────────────────────────────────────────────

    def get_todos(self, date: str) -> list[TodoItem]:
        """Return copies of the todos for *date* in insertion order."""
        with self._lock:
            return [copy.copy(t) for t in self._todos.get(date, [])]

    def add_todo(self, date: str, text: str) -> TodoItem | None:
        """Append a todo. Returns the new item, or None for blank text."""
        text = (text or "").strip()
        if not text:
            return None
        with self._lock:
            item = TodoItem(id=next(self._ids), text=text, done=False)
            self._todos.setdefault(date, []).append(item)
            self._save_todos()
        logger.debug("Added todo %s on %s", item.id, date)
        self.hooks.fire("todo_added", {"date": date, "item": item.to_dict()})
        return copy.copy(item)

    def toggle_todo(self, date: str, todo_id: int) -> None:
        with self._lock:
            item = self._find(date, todo_id)
            if item is None:
                return
            item.done = not item.done
            self._save_todos()
            payload = {"date": date, "item": item.to_dict()}
        self.hooks.fire("todo_toggled", payload)

    def edit_todo(self, date: str, todo_id: int, new_text: str) -> None:
        """Replace an item's text. Blank text is rejected like in add_todo."""
        new_text = (new_text or "").strip()
        if not new_text:
            return
        with self._lock:
            item = self._find(date, todo_id)
            if item is None:
                return
            item.text = new_text
            self._save_todos()
            payload = {"date": date, "item": item.to_dict()}
        self.hooks.fire("todo_edited", payload)

    def delete_todo(self, date: str, todo_id: int) -> None:
        with self._lock:
            items = self._todos.get(date, [])
            for i, t in enumerate(items):
                if t.id == todo_id:
                    items.pop(i)
                    break
            else:
                return
            self._save_todos()
        self.hooks.fire("todo_deleted", {"date": date, "id": todo_id})

    def reset_day(self, date: str) -> None:
        """Empty the day's todo list and drop its reflection."""
        with self._lock:
            self._todos[date] = []
            self._save_todos()
            if self._reflections.pop(date, None) is not None:
                self._save_reflections()
        logger.debug("Reset %s", date)
        self.hooks.fire("day_reset", {"date": date})

    # ── Snapshots ────────────────────────────────────────────

    def reflections(self) -> dict[str, str]:
        with self._lock:
            return dict(self._reflections)

    def todos_by_date(self) -> dict[str, list[TodoItem]]:
        with self._lock:
            return {d: [copy.copy(t) for t in items] for d, items in self._todos.items()}

    def dates(self) -> list[str]:
        """Every date with a reflection or a non-empty todo list, sorted."""
        with self._lock:
            days = set(self._reflections)
            days.update(d for d, items in self._todos.items() if items)
        return sorted(days)

    # ── Internals ────────────────────────────────────────────

    def _find(self, date: str, todo_id: int) -> TodoItem | None:
        for t in self._todos.get(date, []):
            if t.id == todo_id:
                return t
        return None

    def _save_reflections(self) -> None:
        self.store.save(REFLECTIONS, dict(self._reflections))

    def _save_todos(self) -> None:
        self.store.save(
            TODOS,
            {d: [t.to_dict() for t in items] for d, items in self._todos.items()},
        )
