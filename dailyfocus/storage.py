"""Key-value persistence for DailyFocus.

A backend only needs ``get(key) -> str | None`` and ``set(key, text)``.
``PersistentStore`` layers JSON records on top of it and never lets a
storage problem reach the caller: unreadable records load as the default,
failed writes are logged and dropped.
"""

from __future__ import annotations

import copy
import json
import logging
import re
from pathlib import Path
from typing import Any, Protocol

from dailyfocus.fileio import read_text, write_text_atomic

logger = logging.getLogger(__name__)

REFLECTIONS = "reflections"
TODOS = "todos"

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueBackend(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, text: str) -> None: ...


class MemoryBackend:
    """Dict-backed backend for tests and ephemeral hosts."""

    def __init__(self, data: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, text: str) -> None:
        self.data[key] = text


class FileBackend:
    """One ``<key>.json`` file per key inside *directory*."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key) or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        return read_text(self.path_for(key))

    def set(self, key: str, text: str) -> None:
        write_text_atomic(self.path_for(key), text + "\n", suffix=".json")


class PersistentStore:
    def __init__(self, backend: KeyValueBackend, prefix: str = "df_"):
        self.backend = backend
        self.prefix = prefix

    def key(self, name: str) -> str:
        return f"{self.prefix}{name}"

    def load(self, name: str, default: Any) -> Any:
        """Load a record, or a copy of *default* when absent or unusable.

        The stored value must have the same JSON shape (object vs array) as
        the default to be accepted.
        """
        key = self.key(name)
        try:
            raw = self.backend.get(key)
        except Exception as e:
            logger.warning("Could not read %s: %s", key, e)
            return copy.deepcopy(default)
        if raw is None or not raw.strip():
            return copy.deepcopy(default)
        try:
            value = json.loads(raw)
        except (ValueError, RecursionError) as e:
            logger.warning("Discarding unparseable %s: %s", key, e)
            return copy.deepcopy(default)
        if default is not None and not isinstance(value, type(default)):
            logger.warning(
                "Discarding %s: expected %s, got %s",
                key, type(default).__name__, type(value).__name__,
            )
            return copy.deepcopy(default)
        return value

    def save(self, name: str, value: Any) -> bool:
        """Write a record. Returns False (and logs) if the write failed."""
        key = self.key(name)
        try:
            text = json.dumps(value, ensure_ascii=False)
            self.backend.set(key, text)
        except Exception as e:
            logger.warning("Dropping write of %s: %s", key, e)
            return False
        return True
