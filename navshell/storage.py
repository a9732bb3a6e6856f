"""Durable key/value storage backends.

Values are strings under string keys, like browser local storage. Callers
depend on the ``KeyValueStore`` protocol so tests can substitute
``MemoryStorage`` for the JSON file that backs a real session.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "navshell"
STORAGE_FILENAME = "storage.json"
DEFAULT_STORAGE_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / STORAGE_FILENAME
STORAGE_PATH = DEFAULT_STORAGE_PATH

StorageListener = Callable[[str, "str | None"], None]


class StorageError(Exception):
    """Raised when a storage backend cannot persist a change."""


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def subscribe(self, listener: StorageListener) -> Callable[[], None]: ...


class _Subscribers:
    def __init__(self) -> None:
        self._listeners: list[StorageListener] = []

    def subscribe(self, listener: StorageListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, key: str, value: str | None) -> None:
        for listener in list(self._listeners):
            listener(key, value)


class MemoryStorage(_Subscribers):
    """In-memory store for tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        super().__init__()
        self.data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = str(value)
        self._notify(key, self.data[key])

    def remove_item(self, key: str) -> None:
        if self.data.pop(key, None) is not None:
            self._notify(key, None)


class JsonFileStorage(_Subscribers):
    """Store backed by one JSON object file.

    A missing, unreadable or malformed file reads as empty, and non-string
    values inside it are ignored. Every write rewrites the whole file; write
    failures raise ``StorageError``.
    """

    def __init__(self, path: Path | None = None) -> None:
        super().__init__()
        self._path = path

    @property
    def path(self) -> Path:
        return self._path if self._path is not None else STORAGE_PATH

    def load(self) -> dict[str, str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except Exception:
            return {}
        if not isinstance(data, dict):
            return {}
        return {key: value for key, value in data.items() if isinstance(key, str) and isinstance(value, str)}

    def _save(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(f"cannot write {self.path}: {exc}") from exc

    def get_item(self, key: str) -> str | None:
        return self.load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self.load()
        data[key] = str(value)
        self._save(data)
        self._notify(key, data[key])

    def remove_item(self, key: str) -> None:
        data = self.load()
        if key not in data:
            return
        del data[key]
        self._save(data)
        self._notify(key, None)
