"""Scroll velocity and direction signals for cosmetic chrome effects."""

from __future__ import annotations

from collections.abc import Callable
from typing import Literal

from ..host import CONTENT_SCROLL_ID, Document, ScrollContainer
from ..scheduler import FrameCoalescer, Scheduler

VELOCITY_SMOOTHING = 0.8
DIRECTION_THRESHOLD_PX = 6.0

ScrollDirection = Literal["up", "down"]


def smooth_velocity(previous: float, instant: float, smoothing: float = VELOCITY_SMOOTHING) -> float:
    """Exponential moving average: ``previous * s + instant * (1 - s)``."""
    return previous * smoothing + instant * (1.0 - smoothing)


class ScrollVelocityTracker:
    """Sample ``|dy| / dt`` in px/ms every frame while mounted.

    Typical values stay within 0-2 px/ms. ``dt`` is floored at 1ms.
    """

    def __init__(
        self,
        document: Document,
        scheduler: Scheduler,
        container_id: str = CONTENT_SCROLL_ID,
        smoothing: float = VELOCITY_SMOOTHING,
    ) -> None:
        self.document = document
        self.container_id = container_id
        self.smoothing = smoothing
        self.velocity = 0.0
        self._scheduler = scheduler
        self._frames = FrameCoalescer(scheduler)
        self._container: ScrollContainer | None = None
        self._last_y = 0.0
        self._last_t = 0.0

    @property
    def running(self) -> bool:
        return self._frames.pending

    def mount(self) -> None:
        if self._container is not None:
            return
        container = self.document.get_element_by_id(self.container_id)
        if container is None:
            return
        self._container = container
        self._last_y = container.scroll_top
        self._last_t = self._scheduler.now()
        self._frames.request(self._tick)

    def unmount(self) -> None:
        self._frames.cancel()
        self._container = None

    def _tick(self, timestamp: float) -> None:
        container = self._container
        if container is None:
            return
        y = container.scroll_top
        dt = max(1.0, timestamp - self._last_t)
        instant = abs(y - self._last_y) / dt
        self.velocity = smooth_velocity(self.velocity, instant, self.smoothing)
        self._last_y = y
        self._last_t = timestamp
        self._frames.request(self._tick)


class ScrollDirectionTracker:
    """Report the last significant scroll direction, ignoring small jitter."""

    def __init__(
        self,
        document: Document,
        scheduler: Scheduler,
        container_id: str = CONTENT_SCROLL_ID,
        threshold_px: float = DIRECTION_THRESHOLD_PX,
    ) -> None:
        self.document = document
        self.container_id = container_id
        self.threshold_px = threshold_px
        self.direction: ScrollDirection = "up"
        self._frames = FrameCoalescer(scheduler)
        self._container: ScrollContainer | None = None
        self._remove_listener: Callable[[], None] | None = None
        self._last = 0.0

    def mount(self) -> None:
        if self._container is not None:
            return
        container = self.document.get_element_by_id(self.container_id)
        if container is None:
            return
        self._container = container
        self._last = container.scroll_top
        self._remove_listener = container.add_event_listener("scroll", self._on_scroll)

    def unmount(self) -> None:
        self._frames.cancel()
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None
        self._container = None

    def _on_scroll(self) -> None:
        self._frames.request(self._evaluate)

    def _evaluate(self, _timestamp: float) -> None:
        container = self._container
        if container is None:
            return
        current = container.scroll_top
        delta = current - self._last
        if abs(delta) > self.threshold_px:
            self.direction = "down" if delta > 0 else "up"
        self._last = current
