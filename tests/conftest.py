"""Shared test fixtures for DailyFocus tests."""

from __future__ import annotations

import json
import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
import yaml

from dailyfocus.clock import VirtualClock
from dailyfocus.records import DailyRecordStore
from dailyfocus.storage import MemoryBackend, PersistentStore

TZ = ZoneInfo("UTC")


def at(day: str, hh: int = 12, mm: int = 0, ss: int = 0) -> datetime:
    """Aware local datetime on *day* ('YYYY-MM-DD')."""
    y, m, d = (int(p) for p in day.split("-"))
    return datetime(y, m, d, hh, mm, ss, tzinfo=TZ)


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def store(backend: MemoryBackend) -> DailyRecordStore:
    return DailyRecordStore(PersistentStore(backend))


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock(at("2026-02-11", 20, 59))


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with a profile and a seeded store."""
    root = tmp_path / "workspace"
    (root / "store").mkdir(parents=True)

    profile = {
        "timezone": "UTC",
        "focus_minutes": 50,
        "break_minutes": 10,
        "prompt_hour": 21,
    }
    (root / "profile.yaml").write_text(
        yaml.dump(profile, default_flow_style=False), encoding="utf-8"
    )

    reflections = {
        "2026-02-09": "Fair day. Got the API refactor done.",
        "2026-02-10": "Good productive day.",
    }
    (root / "store" / "df_reflections.json").write_text(
        json.dumps(reflections, indent=2), encoding="utf-8"
    )

    todos = {
        "2026-02-10": [
            {"id": 1, "text": "Experiment writeup", "done": True},
            {"id": 2, "text": "Code review", "done": False},
        ],
        "2026-02-11": [
            {"id": 7, "text": "Daily maintenance", "done": False},
        ],
    }
    (root / "store" / "df_todos.json").write_text(
        json.dumps(todos, indent=2), encoding="utf-8"
    )

    os.environ["DAILYFOCUS_ROOT"] = str(root)
    yield root
    if "DAILYFOCUS_ROOT" in os.environ:
        del os.environ["DAILYFOCUS_ROOT"]
