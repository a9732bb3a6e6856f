"""Best-effort preference stores layered over ``KeyValueStore``.

Reads never raise: storage errors and unexpected values read as "no
preference". Writes swallow storage errors. Only caller mistakes (asking to
persist a value outside the allowed set) raise.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Literal

from .motion import MotionLevel
from .storage import KeyValueStore, StorageListener

logger = logging.getLogger(__name__)

SIDEBAR_STORAGE_KEY = "navshell.nav.state"
MOTION_STORAGE_KEY = "navshell.motion"
DEMO_STORAGE_KEY = "navshell.demo"

SidebarPreference = Literal["icon", "expanded"]
SIDEBAR_PREFERENCES: frozenset[str] = frozenset({"icon", "expanded"})


def _read(storage: KeyValueStore, key: str) -> str | None:
    try:
        return storage.get_item(key)
    except Exception as exc:
        logger.debug("storage read of %s failed: %s", key, exc)
        return None


def _write(storage: KeyValueStore, key: str, value: str) -> None:
    try:
        storage.set_item(key, value)
    except Exception as exc:
        logger.debug("storage write of %s failed: %s", key, exc)


def _remove(storage: KeyValueStore, key: str) -> None:
    try:
        storage.remove_item(key)
    except Exception as exc:
        logger.debug("storage remove of %s failed: %s", key, exc)


class SidebarPreferenceStore:
    """Persisted sidebar width preference: ``icon`` or ``expanded``.

    ``closed`` is always derived from the device mode and is never a
    preference, so it is rejected by ``write``.
    """

    def __init__(self, storage: KeyValueStore, key: str = SIDEBAR_STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key

    def read(self) -> SidebarPreference | None:
        value = _read(self.storage, self.key)
        if value == "icon":
            return "icon"
        if value == "expanded":
            return "expanded"
        return None

    def write(self, value: SidebarPreference) -> None:
        if value not in SIDEBAR_PREFERENCES:
            raise ValueError(f"sidebar preference must be 'icon' or 'expanded', got {value!r}")
        _write(self.storage, self.key, value)

    def remove(self) -> None:
        _remove(self.storage, self.key)

    def subscribe(self, listener: Callable[[SidebarPreference | None], None]) -> Callable[[], None]:
        """Call ``listener`` with the validated value whenever the key changes."""

        def on_change(key: str, _value: str | None) -> None:
            if key == self.key:
                listener(self.read())

        return self.storage.subscribe(on_change)


class MotionLevelStore:
    """Persisted motion level; anything but a stored ``apple`` is ``stable``."""

    def __init__(self, storage: KeyValueStore, key: str = MOTION_STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key

    def read(self) -> MotionLevel:
        return "apple" if _read(self.storage, self.key) == "apple" else "stable"

    def write(self, level: MotionLevel) -> None:
        if level not in ("stable", "apple"):
            raise ValueError(f"unknown motion level: {level!r}")
        _write(self.storage, self.key, level)


class DemoModeStore:
    """Demo-mode flag; enabled only while the key holds literally ``1``."""

    def __init__(self, storage: KeyValueStore, key: str = DEMO_STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key

    def enable(self) -> None:
        _write(self.storage, self.key, "1")

    def disable(self) -> None:
        _remove(self.storage, self.key)

    def is_demo(self) -> bool:
        return _read(self.storage, self.key) == "1"


class DemoWriteGuard:
    """Storage view that drops writes while demo mode is on.

    Reads pass through. The demo flag itself stays writable so demo mode can
    always be switched off again.
    """

    def __init__(self, storage: KeyValueStore, demo_key: str = DEMO_STORAGE_KEY) -> None:
        self.storage = storage
        self.demo_key = demo_key

    def _blocked(self, key: str) -> bool:
        if key == self.demo_key or _read(self.storage, self.demo_key) != "1":
            return False
        logger.info("demo mode: change to %s not saved", key)
        return True

    def get_item(self, key: str) -> str | None:
        return self.storage.get_item(key)

    def set_item(self, key: str, value: str) -> None:
        if not self._blocked(key):
            self.storage.set_item(key, value)

    def remove_item(self, key: str) -> None:
        if not self._blocked(key):
            self.storage.remove_item(key)

    def subscribe(self, listener: StorageListener) -> Callable[[], None]:
        return self.storage.subscribe(listener)
