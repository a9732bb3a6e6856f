"""Interactive shell session: wires the navigation core to terminal input.

A session owns the host model (window, document, content container), the
scheduler, the state machine and the scroll trackers. The event loop feeds it
terminal sizes and key tokens and asks it for frames; nothing here touches the
tty, so sessions are driven directly in tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..host import CONTENT_SCROLL_ID, Document, ScrollContainer, Window
from ..motion import MotionLevel, motion_policy
from ..navigation import MENU_ITEMS, NavigationStateMachine, NavigationTiming
from ..preferences import DemoModeStore, DemoWriteGuard, MotionLevelStore, SidebarPreferenceStore
from ..scheduler import Scheduler
from ..scroll import HeaderMetrics, ScrollDirectionTracker, ScrollProgressTracker, ScrollVelocityTracker
from ..storage import KeyValueStore
from .geometry import CellGeometry
from .input import parse_mouse_col_row
from .render import RenderContext, ShellLayout, render_frame, shell_layout
from .theme import ShellTheme, resolve_theme

logger = logging.getLogger(__name__)

WHEEL_SCROLL_ROWS = 3


@dataclass(frozen=True)
class SessionOptions:
    title: str = "Dashboard"
    subtitle: str = ""
    no_color: bool = False
    geometry: CellGeometry = CellGeometry()
    timing: NavigationTiming = NavigationTiming()


class ShellSession:
    def __init__(
        self,
        storage: KeyValueStore,
        scheduler: Scheduler,
        content_lines: list[str],
        options: SessionOptions | None = None,
        window: Window | None = None,
    ) -> None:
        self.options = options if options is not None else SessionOptions()
        self.geometry = self.options.geometry
        self.theme: ShellTheme = resolve_theme(self.options.no_color)
        self.scheduler = scheduler
        self.content_lines = content_lines
        self.columns = 80
        self.rows = 24
        self.active_index = 0
        self.quit_requested = False

        self.window = window if window is not None else Window()
        self.document = Document()
        self.container = self.document.add_element(ScrollContainer(CONTENT_SCROLL_ID))
        self.demo = DemoModeStore(storage)
        self.demo_active = self.demo.is_demo()
        guarded = DemoWriteGuard(storage)
        self.motion_levels = MotionLevelStore(guarded)
        self.motion_level: MotionLevel = self.motion_levels.read()
        self.nav = NavigationStateMachine(
            self.window,
            self.document,
            SidebarPreferenceStore(guarded),
            scheduler,
            timing=self.options.timing,
            motion_level=self.motion_level,
        )
        self.progress = ScrollProgressTracker(self.document, scheduler)
        self.velocity = ScrollVelocityTracker(self.document, scheduler)
        self.direction = ScrollDirectionTracker(self.document, scheduler)

    # Lifecycle

    def mount(self, columns: int, rows: int) -> None:
        self.resize(columns, rows)
        self.nav.mount()
        self.progress.mount()
        self.velocity.mount()
        self.direction.mount()

    def unmount(self) -> None:
        self.direction.unmount()
        self.velocity.unmount()
        self.progress.unmount()
        self.nav.unmount()

    def tick(self) -> None:
        """Run due timers, then one animation frame."""
        self.scheduler.run_due()
        self.scheduler.run_frame()

    # Geometry

    def resize(self, columns: int, rows: int) -> None:
        """Report the terminal size in cells; no-op when unchanged."""
        columns = max(1, columns)
        rows = max(1, rows)
        if (columns, rows) == (self.columns, self.rows) and self.nav.mounted:
            return
        self.columns = columns
        self.rows = rows
        width_px, height_px = self.geometry.viewport_px(columns, rows)
        self.window.resize(width_px, height_px)
        self._sync_container()

    def header_metrics(self) -> HeaderMetrics:
        return HeaderMetrics.from_progress(self.progress.progress)

    def layout(self) -> ShellLayout:
        return shell_layout(
            self.nav.context(),
            self.header_metrics(),
            self.columns,
            self.rows,
            self.geometry,
            demo=self.demo_active,
        )

    def _sync_container(self) -> ShellLayout:
        layout = self.layout()
        self.container.resize(
            scroll_height=self.geometry.rows_px(len(self.content_lines)),
            client_height=self.geometry.rows_px(layout.body_rows),
        )
        return layout

    # Input

    def handle_key(self, key: str) -> bool:
        """Dispatch one key token; return whether the session should quit."""
        if key in {"q", "CTRL_C"}:
            self.quit_requested = True
            return True
        if key == "ESC":
            self.window.key_down("Escape")
        elif key == "m":
            self.nav.actions.toggle_drawer()
        elif key == "s":
            self.nav.actions.toggle_sidebar()
        elif key == "e":
            self.nav.actions.set_expanded()
        elif key == "i":
            self.nav.actions.set_icon()
        elif key == "t":
            self.toggle_motion_level()
        elif key == "d":
            self.toggle_demo()
        elif key in {"UP", "DOWN", "PAGE_UP", "PAGE_DOWN", "HOME", "END"}:
            self._scroll_key(key)
        elif key.startswith("MOUSE_"):
            self._handle_mouse(key)
        return False

    def toggle_motion_level(self) -> None:
        self.motion_level = "apple" if self.motion_level == "stable" else "stable"
        self.motion_levels.write(self.motion_level)
        self.nav.motion_level = self.motion_level

    def toggle_demo(self) -> None:
        if self.demo_active:
            self.demo.disable()
        else:
            self.demo.enable()
        self.demo_active = self.demo.is_demo()
        self._sync_container()

    def _scroll_rows(self, rows: int) -> None:
        self.container.scroll_by(self.geometry.rows_px(rows))

    def _scroll_key(self, key: str) -> None:
        page = max(1, self.layout().body_rows - 1)
        if key == "UP":
            self._scroll_rows(-1)
        elif key == "DOWN":
            self._scroll_rows(1)
        elif key == "PAGE_UP":
            self._scroll_rows(-page)
        elif key == "PAGE_DOWN":
            self._scroll_rows(page)
        elif key == "HOME":
            self.container.scroll_to(0)
        else:
            self.container.scroll_to(self.container.max_scroll_top)

    def _handle_mouse(self, key: str) -> None:
        col, row = parse_mouse_col_row(key)
        if col is None or row is None:
            return
        if key.startswith("MOUSE_MOVE:"):
            x, y = self.geometry.pointer_px(col, row)
            self.window.pointer_move(x, y)
        elif key.startswith("MOUSE_WHEEL_UP:"):
            self._scroll_rows(-WHEEL_SCROLL_ROWS)
        elif key.startswith("MOUSE_WHEEL_DOWN:"):
            self._scroll_rows(WHEEL_SCROLL_ROWS)
        elif key.startswith("MOUSE_LEFT_DOWN:"):
            x, y = self.geometry.pointer_px(col, row)
            self.window.pointer_move(x, y)
            self._click(col - 1, row - 1)

    def _click(self, col: int, row: int) -> None:
        layout = self.layout()
        context = self.nav.context()
        if row == layout.topbar_row and col <= 2:
            if context.mode in ("mobile", "tablet-expanded"):
                context.actions.toggle_drawer()
            else:
                context.actions.toggle_sidebar()
            return
        if context.drawer_open:
            if col < layout.drawer_cols:
                idx = layout.menu_index_at(row)
                if idx is not None:
                    self.select_menu_item(idx)
                    context.actions.close_drawer()
                return
            context.actions.close_drawer()
            return
        if col < layout.nav_cols:
            idx = layout.menu_index_at(row)
            if idx is not None:
                self.select_menu_item(idx)

    def select_menu_item(self, idx: int) -> None:
        if 0 <= idx < len(MENU_ITEMS):
            self.active_index = idx
            logger.debug("navigated to %s", MENU_ITEMS[idx].path)

    # Output

    def render(self) -> str:
        layout = self._sync_container()
        header = self.header_metrics()
        context = self.nav.context()
        content_start = self.geometry.px_rows(self.container.scroll_top)
        return render_frame(
            RenderContext(
                nav=context,
                header=header,
                motion=motion_policy(
                    self.motion_level,
                    scroll_velocity=self.velocity.velocity,
                    scroll_top=self.container.scroll_top,
                    reduced_motion=context.reduced_motion,
                ),
                layout=layout,
                theme=self.theme,
                content_lines=self.content_lines,
                content_start=content_start,
                title=self.options.title,
                subtitle=self.options.subtitle,
                active_index=self.active_index,
                velocity=self.velocity.velocity,
                direction=self.direction.direction,
                motion_level=self.motion_level,
            )
        )
