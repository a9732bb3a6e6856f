"""Cooperative timer and animation-frame scheduling.

Everything in navshell runs on one thread. High-frequency inputs never do
work inline; they schedule at most one pending recomputation through the
helpers here, and a newer event cancels the pending one before scheduling its
own. Hosts drive the queue by calling ``run_due`` and ``run_frame`` from
their event loop; tests use ``ManualScheduler`` and a virtual clock.
"""

from __future__ import annotations

import heapq
import itertools
import time
from collections.abc import Callable

FRAME_MS = 16.0


def monotonic_ms() -> float:
    """Return a monotonic timestamp in milliseconds."""
    return time.monotonic() * 1000.0


class TimerHandle:
    """Cancelable reference to one pending ``call_later`` callback."""

    __slots__ = ("due", "callback", "cancelled", "fired")

    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True


class FrameHandle:
    """Cancelable reference to one requested animation frame."""

    __slots__ = ("callback", "cancelled", "fired")

    def __init__(self, callback: Callable[[float], None]) -> None:
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """Timer heap plus a frame batch over an injectable millisecond clock."""

    def __init__(self, clock: Callable[[], float] = monotonic_ms) -> None:
        self._clock = clock
        self._timers: list[tuple[float, int, TimerHandle]] = []
        self._frames: list[FrameHandle] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self._clock()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """Schedule ``callback`` to run ``delay_ms`` from now."""
        if delay_ms < 0:
            raise ValueError(f"delay must be >= 0, got {delay_ms!r}")
        handle = TimerHandle(self.now() + delay_ms, callback)
        heapq.heappush(self._timers, (handle.due, next(self._sequence), handle))
        return handle

    def request_frame(self, callback: Callable[[float], None]) -> FrameHandle:
        """Queue ``callback`` for the next ``run_frame`` batch."""
        handle = FrameHandle(callback)
        self._frames.append(handle)
        return handle

    def next_deadline(self) -> float | None:
        """Return the due time of the earliest live timer, if any."""
        while self._timers and not self._timers[0][2].pending:
            heapq.heappop(self._timers)
        if not self._timers:
            return None
        return self._timers[0][0]

    def has_pending_frames(self) -> bool:
        return any(handle.pending for handle in self._frames)

    def run_due(self) -> int:
        """Run every timer whose due time has passed; return how many ran.

        Timers fire in due order, ties in scheduling order. A timer scheduled
        by a callback with zero delay runs in the same pass.
        """
        ran = 0
        while True:
            deadline = self.next_deadline()
            if deadline is None or deadline > self.now():
                return ran
            _due, _seq, handle = heapq.heappop(self._timers)
            handle.fired = True
            handle.callback()
            ran += 1

    def run_frame(self) -> int:
        """Run the current frame batch; frames requested meanwhile wait."""
        batch, self._frames = self._frames, []
        timestamp = self.now()
        ran = 0
        for handle in batch:
            if not handle.pending:
                continue
            handle.fired = True
            handle.callback(timestamp)
            ran += 1
        return ran

    def clear(self) -> None:
        """Cancel everything still queued."""
        for _due, _seq, handle in self._timers:
            handle.cancel()
        for handle in self._frames:
            handle.cancel()
        self._timers = []
        self._frames = []


class ManualClock:
    """Virtual millisecond clock for deterministic tests."""

    def __init__(self, start: float = 0.0) -> None:
        self.value = float(start)

    def __call__(self) -> float:
        return self.value


class ManualScheduler(Scheduler):
    """Scheduler on a virtual clock that only moves when told to."""

    def __init__(self, start: float = 0.0) -> None:
        self.clock = ManualClock(start)
        super().__init__(self.clock)

    def advance(self, ms: float) -> None:
        """Move the clock forward, firing timers at their due times."""
        if ms < 0:
            raise ValueError("cannot move the clock backwards")
        target = self.clock.value + ms
        while True:
            deadline = self.next_deadline()
            if deadline is None or deadline > target:
                break
            self.clock.value = max(self.clock.value, deadline)
            self.run_due()
        self.clock.value = target

    def advance_frames(self, count: int = 1, frame_ms: float = FRAME_MS) -> None:
        """Step ``count`` frames, running due timers then the frame batch."""
        for _ in range(count):
            self.advance(frame_ms)
            self.run_frame()


class Debouncer:
    """Keep at most one pending delayed call; newer calls supersede."""

    def __init__(self, scheduler: Scheduler, delay_ms: float) -> None:
        if delay_ms < 0:
            raise ValueError(f"delay must be >= 0, got {delay_ms!r}")
        self._scheduler = scheduler
        self.delay_ms = delay_ms
        self._handle: TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None and self._handle.pending

    def call(self, callback: Callable[[], None]) -> None:
        """Cancel the pending call and schedule ``callback`` instead."""
        self.cancel()
        self._handle = self._scheduler.call_later(self.delay_ms, callback)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class FrameCoalescer:
    """Keep at most one pending animation-frame callback."""

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._handle: FrameHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None and self._handle.pending

    def request(self, callback: Callable[[float], None]) -> None:
        self.cancel()
        self._handle = self._scheduler.request_frame(callback)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
