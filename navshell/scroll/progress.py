"""Normalized scroll progress of the content container.

``progress`` is a pure function of the scroll offset and a fixed distance,
so the header-collapse animation is fully determined by where the content is
scrolled to.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..host import CONTENT_SCROLL_ID, Document, ScrollContainer
from ..scheduler import FrameCoalescer, Scheduler

SCROLL_DISTANCE_PX = 56.0
OFFSET_EPSILON_PX = 0.5


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def scroll_progress(offset: float, distance: float = SCROLL_DISTANCE_PX) -> float:
    """Return ``offset / distance`` clamped to ``[0, 1]``."""
    if distance <= 0:
        raise ValueError(f"scroll distance must be positive, got {distance!r}")
    return clamp(offset / distance, 0.0, 1.0)


@dataclass(frozen=True)
class ScrollProgress:
    offset: float
    progress: float


class ScrollProgressTracker:
    """Follow the container's scroll offset, one recomputation per frame.

    When the container is absent the tracker stays inert and keeps reporting
    its last known (initially zero) values.
    """

    def __init__(
        self,
        document: Document,
        scheduler: Scheduler,
        container_id: str = CONTENT_SCROLL_ID,
        distance_px: float = SCROLL_DISTANCE_PX,
        epsilon_px: float = OFFSET_EPSILON_PX,
    ) -> None:
        if distance_px <= 0:
            raise ValueError(f"scroll distance must be positive, got {distance_px!r}")
        self.document = document
        self.container_id = container_id
        self.distance_px = distance_px
        self.epsilon_px = epsilon_px
        self.offset = 0.0
        self._frames = FrameCoalescer(scheduler)
        self._container: ScrollContainer | None = None
        self._remove_listener: Callable[[], None] | None = None
        self._listeners: list[Callable[[ScrollProgress], None]] = []

    @property
    def progress(self) -> float:
        return scroll_progress(self.offset, self.distance_px)

    @property
    def attached(self) -> bool:
        return self._container is not None

    def snapshot(self) -> ScrollProgress:
        return ScrollProgress(offset=self.offset, progress=self.progress)

    def subscribe(self, listener: Callable[[ScrollProgress], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def mount(self) -> None:
        if self._container is not None:
            return
        container = self.document.get_element_by_id(self.container_id)
        if container is None:
            return
        self._container = container
        self._remove_listener = container.add_event_listener("scroll", self._on_scroll)
        self._on_scroll()

    def unmount(self) -> None:
        self._frames.cancel()
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None
        self._container = None

    def _on_scroll(self) -> None:
        self._frames.request(self._sample)

    def _sample(self, _timestamp: float) -> None:
        container = self._container
        if container is None:
            return
        offset = container.scroll_top
        if abs(offset - self.offset) <= self.epsilon_px:
            return
        self.offset = offset
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
