"""Completion percentage and streak counting for DailyFocus."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, datetime, tzinfo

from dailyfocus.dates import date_key, previous_key
from dailyfocus.models import DayProgress, TodoItem


def completion_percent(todos: Sequence[TodoItem]) -> int:
    """Percent of *todos* done, rounded half-up; 0 for an empty list."""
    total = len(todos)
    if total == 0:
        return 0
    done = sum(1 for t in todos if t.done)
    return (200 * done + total) // (2 * total)


def day_progress(todos: Sequence[TodoItem]) -> DayProgress:
    done = sum(1 for t in todos if t.done)
    return DayProgress(done=done, total=len(todos), percent=completion_percent(todos))


def qualifies(
    day: str,
    todos_by_date: Mapping[str, Sequence[TodoItem]],
    reflections_by_date: Mapping[str, str],
) -> bool:
    """A day counts if any todo is done or a reflection exists (even empty)."""
    if day in reflections_by_date:
        return True
    return any(t.done for t in todos_by_date.get(day, ()))


def streak(
    as_of: datetime | date | str,
    todos_by_date: Mapping[str, Sequence[TodoItem]],
    reflections_by_date: Mapping[str, str],
    tz: tzinfo | None = None,
    include_pending_today: bool = True,
) -> int:
    """Count consecutive qualifying days ending at *as_of*.

    The walk starts on the date of *as_of* and stops at the first day that
    does not qualify, so an idle today yields 0. With
    ``include_pending_today=False`` an unqualified start day is skipped and
    counting starts from the day before.
    """
    day = as_of if isinstance(as_of, str) else date_key(as_of, tz)
    if not include_pending_today and not qualifies(day, todos_by_date, reflections_by_date):
        day = previous_key(day)

    count = 0
    while qualifies(day, todos_by_date, reflections_by_date):
        count += 1
        day = previous_key(day)
    return count
