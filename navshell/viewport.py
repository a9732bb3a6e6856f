"""Viewport classification into discrete device modes.

Breakpoints are pixel values and must stay exact: widths below 768 are
mobile, 768-1023 is the tablet range (split by orientation), 1024 and above
is desktop.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Literal

from .host import Window
from .scheduler import Debouncer, Scheduler

logger = logging.getLogger(__name__)

DeviceMode = Literal["mobile", "tablet-compact", "tablet-expanded", "desktop"]

MOBILE = "mobile"
TABLET_COMPACT = "tablet-compact"
TABLET_EXPANDED = "tablet-expanded"
DESKTOP = "desktop"

DEVICE_MODES: tuple[DeviceMode, ...] = (MOBILE, TABLET_COMPACT, TABLET_EXPANDED, DESKTOP)
DRAWER_MODES = frozenset({MOBILE, TABLET_EXPANDED})
SIDEBAR_MODES = frozenset({TABLET_COMPACT, DESKTOP})

TABLET_MIN_WIDTH = 768
DESKTOP_MIN_WIDTH = 1024

RESIZE_DEBOUNCE_MS = 50.0


def classify_viewport(width: float, height: float) -> DeviceMode:
    """Map viewport dimensions to a device mode.

    Inside the tablet range a landscape viewport (``width > height``) is
    ``tablet-compact`` and anything else is ``tablet-expanded``. Inputs that
    match no bucket (zero, negative, NaN) fall through to ``desktop``.
    """
    if 0 < width < TABLET_MIN_WIDTH:
        return MOBILE
    if TABLET_MIN_WIDTH <= width < DESKTOP_MIN_WIDTH:
        return TABLET_COMPACT if width > height else TABLET_EXPANDED
    return DESKTOP


def is_drawer_mode(mode: str) -> bool:
    return mode in DRAWER_MODES


def is_sidebar_mode(mode: str) -> bool:
    return mode in SIDEBAR_MODES


class ViewportObserver:
    """Push device-mode changes from debounced window resize events."""

    def __init__(
        self,
        window: Window,
        scheduler: Scheduler,
        on_change: Callable[[DeviceMode], None],
        debounce_ms: float = RESIZE_DEBOUNCE_MS,
    ) -> None:
        self.window = window
        self._on_change = on_change
        self._debouncer = Debouncer(scheduler, debounce_ms)
        self._remove_listener: Callable[[], None] | None = None
        self.mode: DeviceMode | None = None

    @property
    def active(self) -> bool:
        return self._remove_listener is not None

    def measure(self) -> DeviceMode:
        return classify_viewport(self.window.width, self.window.height)

    def start(self) -> DeviceMode:
        """Classify the current viewport, push it, and start listening."""
        if self._remove_listener is None:
            self._remove_listener = self.window.add_event_listener("resize", self._on_resize)
        mode = self.measure()
        self._push(mode)
        return mode

    def stop(self) -> None:
        """Detach and forget the last mode so the next ``start`` pushes again."""
        self._debouncer.cancel()
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None
        self.mode = None

    def _on_resize(self) -> None:
        self._debouncer.call(self._recompute)

    def _recompute(self) -> None:
        self._push(self.measure())

    def _push(self, mode: DeviceMode) -> None:
        if mode == self.mode:
            return
        logger.debug("viewport %sx%s classified as %s", self.window.width, self.window.height, mode)
        self.mode = mode
        self._on_change(mode)
