"""Typed dataclasses for the DailyFocus data model.

Records use from_dict/to_dict for JSON serialization.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


# ── Todos ─────────────────────────────────────────────────────


@dataclass
class TodoItem:
    id: int
    text: str
    done: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TodoItem:
        """Parse a stored item. Raises ValueError/TypeError when unusable."""
        if not isinstance(d, dict):
            raise TypeError(f"Todo item must be an object, got {type(d).__name__}")
        raw_id = d.get("id")
        if raw_id is None or isinstance(raw_id, bool):
            raise ValueError(f"Todo item has no usable id: {d!r}")
        if isinstance(raw_id, float) and not raw_id.is_integer():
            raise ValueError(f"Todo item id is not an integer: {raw_id!r}")
        return cls(
            id=int(raw_id),
            text=str(d.get("text", "")),
            done=bool(d.get("done", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "done": self.done}


# ── Timer ─────────────────────────────────────────────────────


class Phase(str, Enum):
    FOCUS = "focus"
    BREAK = "break"

    def flipped(self) -> Phase:
        return Phase.BREAK if self is Phase.FOCUS else Phase.FOCUS


@dataclass(frozen=True)
class TimerConfig:
    focus_minutes: int = 25
    break_minutes: int = 5

    def __post_init__(self):
        object.__setattr__(self, "focus_minutes", _clamp_minutes(self.focus_minutes))
        object.__setattr__(self, "break_minutes", _clamp_minutes(self.break_minutes))

    @classmethod
    def clamped(cls, focus_minutes: Any, break_minutes: Any) -> TimerConfig:
        """Build a config with both durations clamped to at least 1 minute."""
        return cls(focus_minutes=focus_minutes, break_minutes=break_minutes)

    def seconds_for(self, phase: Phase) -> int:
        minutes = self.break_minutes if phase is Phase.BREAK else self.focus_minutes
        return minutes * 60


def _clamp_minutes(value: Any) -> int:
    try:
        minutes = int(value)
    except (TypeError, ValueError, OverflowError):
        return 1
    return max(1, minutes)


@dataclass(frozen=True)
class TimerState:
    phase: Phase = Phase.FOCUS
    seconds_remaining: int = 25 * 60
    running: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase.value,
            "secondsRemaining": self.seconds_remaining,
            "running": self.running,
        }


# ── Metrics ───────────────────────────────────────────────────


@dataclass(frozen=True)
class DayProgress:
    done: int = 0
    total: int = 0
    percent: int = 0


# ── Prompt decisions ──────────────────────────────────────────


@dataclass(frozen=True)
class Immediate:
    """Show the reflection prompt now."""


@dataclass(frozen=True)
class After:
    """Re-evaluate after *delay_ms* milliseconds."""

    delay_ms: int


@dataclass(frozen=True)
class Suppressed:
    """Today already has a reflection; do not prompt."""


PromptDecision = Union[Immediate, After, Suppressed]
