"""Navigation state machine.

Owns device mode, sidebar state, drawer flag and proximity, and reconciles
them whenever the viewport observer reports a new mode. Renderers read
``context()`` and change state only through its ``actions``. Side-effect
behaviors (Escape, pointer proximity, scroll auto-collapse, scroll lock behind
an open drawer) are wired on ``mount`` and torn down on ``unmount``; no timer
scheduled here fires after ``unmount``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from ..host import CONTENT_SCROLL_ID, Document, KeyEvent, ScrollContainer, Window
from ..motion import MotionLevel, ReducedMotionDetector, motion_policy
from ..preferences import SidebarPreference, SidebarPreferenceStore
from ..scheduler import Debouncer, Scheduler
from ..viewport import MOBILE, RESIZE_DEBOUNCE_MS, DeviceMode, ViewportObserver, is_sidebar_mode
from .proximity import PROXIMITY_EDGE_PX, PROXIMITY_ENTER_MS, PROXIMITY_LEAVE_MS, ProximityTracker
from .state import (
    MOBILE_SAFE_STATE,
    UNHYDRATED_STATE,
    NavActions,
    NavContext,
    NavState,
    is_elevated,
    reconcile_mode,
)

logger = logging.getLogger(__name__)

SCROLL_COLLAPSE_MS = 300.0
ESCAPE_KEYS = frozenset({"Escape", "Esc", "ESC"})

NavListener = Callable[[NavContext], None]


@dataclass(frozen=True)
class NavigationTiming:
    """Debounce delays and hot-zone geometry for the side-effect behaviors."""

    resize_debounce_ms: float = RESIZE_DEBOUNCE_MS
    proximity_edge_px: float = PROXIMITY_EDGE_PX
    proximity_enter_ms: float = PROXIMITY_ENTER_MS
    proximity_leave_ms: float = PROXIMITY_LEAVE_MS
    scroll_collapse_ms: float = SCROLL_COLLAPSE_MS


class NavigationStateMachine:
    def __init__(
        self,
        window: Window,
        document: Document,
        preferences: SidebarPreferenceStore,
        scheduler: Scheduler,
        *,
        timing: NavigationTiming | None = None,
        motion_level: MotionLevel = "stable",
        scroll_container_id: str = CONTENT_SCROLL_ID,
    ) -> None:
        timing = timing if timing is not None else NavigationTiming()
        self.window = window
        self.document = document
        self.preferences = preferences
        self.timing = timing
        self.motion_level = motion_level
        self.scroll_container_id = scroll_container_id
        self._state = UNHYDRATED_STATE
        self._hydrated = False
        self._mounted = False
        self._listeners: list[NavListener] = []
        self._teardown: list[Callable[[], None]] = []
        self._locked_container: ScrollContainer | None = None
        self._lock_prev_overflow = False

        self._viewport = ViewportObserver(
            window, scheduler, self._on_mode_change, debounce_ms=timing.resize_debounce_ms
        )
        self._motion = ReducedMotionDetector(window, on_change=self._on_reduced_motion_change)
        self._proximity = ProximityTracker(
            window,
            scheduler,
            self._on_proximity_change,
            edge_px=timing.proximity_edge_px,
            enter_ms=timing.proximity_enter_ms,
            leave_ms=timing.proximity_leave_ms,
        )
        self._scroll_collapse = Debouncer(scheduler, timing.scroll_collapse_ms)
        self.actions = NavActions(
            open_drawer=self.open_drawer,
            close_drawer=self.close_drawer,
            toggle_drawer=self.toggle_drawer,
            set_expanded=self.set_expanded,
            set_icon=self.set_icon,
            toggle_sidebar=self.toggle_sidebar,
        )
        self._last_context = self.context()

    # Lifecycle

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def hydrated(self) -> bool:
        return self._hydrated

    @property
    def state(self) -> NavState:
        """Internal state, including the pre-hydration server-safe default."""
        return self._state

    def mount(self) -> NavContext:
        """Measure the viewport, reconcile, and start every observer."""
        if self._mounted:
            return self.context()
        self._mounted = True
        self._motion.start()
        self._teardown.append(self.window.add_event_listener("keydown", self._on_key_down))
        self._teardown.append(self.preferences.subscribe(self._on_preference_change))
        container = self.document.get_element_by_id(self.scroll_container_id)
        if container is not None:
            self._teardown.append(container.add_event_listener("scroll", self._on_content_scroll))
        else:
            logger.debug("scroll container %r missing; auto-collapse inactive", self.scroll_container_id)
        self._hydrated = True
        self._viewport.start()
        self._notify()
        return self.context()

    def unmount(self) -> None:
        if not self._mounted:
            return
        self._mounted = False
        self._viewport.stop()
        self._motion.stop()
        self._proximity.stop()
        self._scroll_collapse.cancel()
        for remove in self._teardown:
            remove()
        self._teardown = []
        self._release_scroll_lock()

    def subscribe(self, listener: NavListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def context(self) -> NavContext:
        """Snapshot for renderers; mobile-safe until the first measurement."""
        state = self._state if self._hydrated else MOBILE_SAFE_STATE
        return NavContext.from_state(state, self._motion.reduced_motion, self.actions)

    # Actions

    def open_drawer(self) -> None:
        self._commit(replace(self._state, drawer_open=True))

    def close_drawer(self) -> None:
        self._commit(replace(self._state, drawer_open=False))

    def toggle_drawer(self) -> None:
        self._commit(replace(self._state, drawer_open=not self._state.drawer_open))

    def set_expanded(self) -> None:
        self._set_sidebar("expanded")

    def set_icon(self) -> None:
        self._set_sidebar("icon")

    def toggle_sidebar(self) -> None:
        self._set_sidebar("icon" if self._state.sidebar_state == "expanded" else "expanded")

    def _set_sidebar(self, value: SidebarPreference) -> None:
        # Drawer modes keep the sidebar closed; the preference applies on the
        # next transition into a sidebar mode.
        if not is_sidebar_mode(self._state.mode):
            return
        self._scroll_collapse.cancel()
        self.preferences.write(value)
        self._commit(replace(self._state, sidebar_state=value))

    # Observers

    def _on_mode_change(self, mode: DeviceMode) -> None:
        previous = self._state.mode
        stored = self.preferences.read() if is_sidebar_mode(mode) else None
        self._state = reconcile_mode(self._state, mode, stored)
        logger.debug("mode %s -> %s (stored preference %s)", previous, mode, stored)
        if is_sidebar_mode(mode) and motion_policy(self.motion_level).proximity_enabled:
            self._proximity.start()
        else:
            self._proximity.stop()
            self._state = replace(self._state, proximity=False)
        if not is_sidebar_mode(mode):
            self._scroll_collapse.cancel()
        self._commit(self._state)

    def _on_reduced_motion_change(self, _reduced: bool) -> None:
        self._notify()

    def _on_proximity_change(self, near: bool) -> None:
        if not is_sidebar_mode(self._state.mode):
            return
        self._commit(replace(self._state, proximity=near))

    def _on_preference_change(self, value: SidebarPreference | None) -> None:
        # Another writer sharing the store; drawer modes pick it up on the
        # next transition into a sidebar mode.
        if value is None or not is_sidebar_mode(self._state.mode):
            return
        if value == self._state.sidebar_state:
            return
        self._scroll_collapse.cancel()
        self._commit(replace(self._state, sidebar_state=value))

    def _on_key_down(self, event: KeyEvent) -> None:
        if event.key not in ESCAPE_KEYS:
            return
        state = self._state
        if state.mode == MOBILE:
            if state.drawer_open:
                self.close_drawer()
            return
        if state.sidebar_state == "expanded":
            self.set_icon()

    def _on_content_scroll(self) -> None:
        if is_sidebar_mode(self._state.mode) and self._state.sidebar_state == "expanded":
            self._scroll_collapse.call(self._auto_collapse)

    def _auto_collapse(self) -> None:
        if not self._mounted:
            return
        if not is_sidebar_mode(self._state.mode) or self._state.sidebar_state != "expanded":
            return
        logger.debug("auto-collapsing sidebar after idle scroll")
        self.preferences.write("icon")
        self._commit(replace(self._state, sidebar_state="icon"))

    # Internals

    def _commit(self, state: NavState) -> None:
        self._state = state
        self._sync_scroll_lock()
        self._notify()

    def _notify(self) -> None:
        context = self.context()
        if context == self._last_context:
            return
        self._last_context = context
        for listener in list(self._listeners):
            listener(context)

    def _sync_scroll_lock(self) -> None:
        if not self._mounted:
            return
        if is_elevated(self._state.mode, self._state.drawer_open):
            if self._locked_container is not None:
                return
            container = self.document.get_element_by_id(self.scroll_container_id)
            if container is None:
                return
            self._locked_container = container
            self._lock_prev_overflow = container.overflow_locked
            container.overflow_locked = True
            return
        self._release_scroll_lock()

    def _release_scroll_lock(self) -> None:
        if self._locked_container is None:
            return
        self._locked_container.overflow_locked = self._lock_prev_overflow
        self._locked_container = None
