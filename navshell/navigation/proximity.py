"""Pointer proximity to the left screen edge, with asymmetric debounce."""

from __future__ import annotations

from collections.abc import Callable

from ..host import PointerEvent, Window
from ..scheduler import Debouncer, Scheduler

PROXIMITY_EDGE_PX = 24.0
PROXIMITY_ENTER_MS = 80.0
PROXIMITY_LEAVE_MS = 400.0


class ProximityTracker:
    """Report whether the pointer rests near the left edge.

    Entering the edge zone turns the flag on after ``enter_ms``; leaving it
    turns the flag off after ``leave_ms``. Only the most recent intent wins:
    moving out cancels a pending enter and moving back in cancels a pending
    leave. Repeated moves with the same intent keep the pending timer.
    """

    def __init__(
        self,
        window: Window,
        scheduler: Scheduler,
        on_change: Callable[[bool], None],
        edge_px: float = PROXIMITY_EDGE_PX,
        enter_ms: float = PROXIMITY_ENTER_MS,
        leave_ms: float = PROXIMITY_LEAVE_MS,
    ) -> None:
        self.window = window
        self.edge_px = edge_px
        self._on_change = on_change
        self._enter = Debouncer(scheduler, enter_ms)
        self._leave = Debouncer(scheduler, leave_ms)
        self._removers: list[Callable[[], None]] = []
        self.near = False

    @property
    def active(self) -> bool:
        return bool(self._removers)

    def start(self) -> None:
        if self._removers:
            return
        self._removers = [
            self.window.add_event_listener("pointermove", self._on_pointer_move),
            self.window.add_event_listener("pointerleave", self._on_pointer_leave),
        ]

    def stop(self) -> None:
        """Detach listeners, drop pending timers and clear the flag silently."""
        for remove in self._removers:
            remove()
        self._removers = []
        self._enter.cancel()
        self._leave.cancel()
        self.near = False

    def _on_pointer_move(self, event: PointerEvent) -> None:
        self._track(event.x < self.edge_px)

    def _on_pointer_leave(self) -> None:
        self._track(False)

    def _track(self, in_zone: bool) -> None:
        if in_zone:
            self._leave.cancel()
            if not self.near and not self._enter.pending:
                self._enter.call(lambda: self._set(True))
            return
        self._enter.cancel()
        if self.near and not self._leave.pending:
            self._leave.call(lambda: self._set(False))

    def _set(self, near: bool) -> None:
        if near == self.near:
            return
        self.near = near
        self._on_change(near)
