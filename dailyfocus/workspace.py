"""Workspace root, timezone and settings for DailyFocus."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from dailyfocus.fileio import read_yaml

logger = logging.getLogger(__name__)

DEFAULT_FOCUS_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5
DEFAULT_PROMPT_HOUR = 21
DEFAULT_STORE_PREFIX = "df_"


@dataclass(frozen=True)
class Settings:
    timezone: str = "UTC"
    focus_minutes: int = DEFAULT_FOCUS_MINUTES
    break_minutes: int = DEFAULT_BREAK_MINUTES
    prompt_hour: int = DEFAULT_PROMPT_HOUR
    store_prefix: str = DEFAULT_STORE_PREFIX

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        """Build settings from a profile mapping.

        Unknown keys are ignored; missing or unusable values use defaults.
        Durations are clamped to at least one minute, the hour to 0..23.
        """
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            timezone=str(d.get("timezone") or "UTC"),
            focus_minutes=max(1, _as_int(d.get("focus_minutes"), DEFAULT_FOCUS_MINUTES)),
            break_minutes=max(1, _as_int(d.get("break_minutes"), DEFAULT_BREAK_MINUTES)),
            prompt_hour=min(23, max(0, _as_int(d.get("prompt_hour"), DEFAULT_PROMPT_HOUR))),
            store_prefix=str(d.get("store_prefix", DEFAULT_STORE_PREFIX)),
        )

    def tzinfo(self) -> ZoneInfo:
        return resolve_timezone(self.timezone)


def _as_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def resolve_timezone(name: str) -> ZoneInfo:
    """Resolve an IANA zone name, defaulting to UTC when unknown."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, falling back to UTC", name)
        return ZoneInfo("UTC")


def workspace_root() -> Path:
    """Get the workspace root directory (holds profile.yaml and store/)."""
    return Path(
        os.environ.get("DAILYFOCUS_ROOT", str(Path.home() / "dailyfocus"))
    ).expanduser().resolve()


def profile_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "profile.yaml"


def store_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "store"


def load_settings(root: Path | None = None) -> Settings:
    """Load settings from profile.yaml, defaulting everything on failure."""
    path = profile_path(root)
    try:
        return Settings.from_dict(read_yaml(path))
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return Settings()


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    return load_settings(root).tzinfo()


def now_local(root: Path | None = None) -> datetime:
    """Get current datetime in user's timezone."""
    return datetime.now(get_user_timezone(root))


def today_str(root: Path | None = None) -> str:
    """Get today's date string (YYYY-MM-DD) in user's timezone."""
    return now_local(root).date().isoformat()
