"""Frame composition for the terminal shell.

Renderers only read: the navigation context, scroll-derived metrics and the
content lines come in through ``RenderContext`` and a list of fixed-width
rows comes out. Layout math lives in ``shell_layout`` so input hit-testing
and drawing agree on where things are.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..motion import MotionTokens
from ..navigation import MENU_ITEMS, NavContext
from ..scroll import HeaderMetrics
from .ansi import fit_ansi_line
from .geometry import CellGeometry
from .theme import ShellTheme

DRAWER_MAX_COLS = 28
SIDEBAR_LABEL_MIN_COLS = 12
LARGE_TITLE_MIN_FONT_PX = 25.5


@dataclass(frozen=True)
class ShellLayout:
    """Row/column regions of one frame (0-based rows)."""

    width: int
    height: int
    demo_row: int | None
    topbar_row: int
    title_row: int | None
    subtitle_row: int | None
    body_top: int
    body_rows: int
    nav_cols: int
    content_left: int
    content_cols: int
    drawer_cols: int
    status_row: int

    def menu_index_at(self, row: int) -> int | None:
        """Menu entry drawn on body ``row``, for both sidebar and drawer."""
        idx = row - self.body_top - 1
        if 0 <= idx < len(MENU_ITEMS):
            return idx
        return None


def shell_layout(
    nav: NavContext,
    header: HeaderMetrics,
    width: int,
    height: int,
    geometry: CellGeometry,
    demo: bool = False,
) -> ShellLayout:
    width = max(1, width)
    height = max(1, height)
    row = 0
    demo_row = None
    if demo:
        demo_row = row
        row += 1
    topbar_row = row
    row += 1
    title_row = None
    subtitle_row = None
    if not header.collapsed:
        title_row = row
        row += 1
        if header.subtitle_opacity > 0:
            subtitle_row = row
            row += 1
    status_row = height - 1
    body_top = min(row, status_row)
    body_rows = max(0, status_row - body_top)

    nav_cols = min(width, geometry.width_cells(nav.nav_width_px))
    content_left = nav_cols + 1 if nav_cols else 0
    drawer_cols = min(width, DRAWER_MAX_COLS) if nav.drawer_open else 0
    return ShellLayout(
        width=width,
        height=height,
        demo_row=demo_row,
        topbar_row=topbar_row,
        title_row=title_row,
        subtitle_row=subtitle_row,
        body_top=body_top,
        body_rows=body_rows,
        nav_cols=nav_cols,
        content_left=content_left,
        content_cols=max(0, width - content_left),
        drawer_cols=drawer_cols,
        status_row=status_row,
    )


@dataclass
class RenderContext:
    nav: NavContext
    header: HeaderMetrics
    motion: MotionTokens
    layout: ShellLayout
    theme: ShellTheme
    content_lines: list[str]
    content_start: int
    title: str
    subtitle: str = ""
    active_index: int = 0
    velocity: float = 0.0
    direction: str = "up"
    motion_level: str = "stable"


def _styled(theme_sgr: str, text: str, reset: str) -> str:
    return f"{theme_sgr}{text}{reset}" if theme_sgr else text


def _large_title(title: str, font_px: float) -> str:
    if font_px >= LARGE_TITLE_MIN_FONT_PX:
        return " ".join(title.upper())
    return title


def _sidebar_cell(context: RenderContext, row: int) -> str:
    layout = context.layout
    theme = context.theme
    idx = layout.menu_index_at(row)
    if idx is None:
        return " " * layout.nav_cols
    item = MENU_ITEMS[idx]
    label = f" {item.icon} {item.name}" if layout.nav_cols >= SIDEBAR_LABEL_MIN_COLS else f" {item.icon}"
    style = theme.sidebar_active if idx == context.active_index else theme.sidebar
    return _styled(style, fit_ansi_line(label, layout.nav_cols), theme.reset)


def _drawer_cell(context: RenderContext, row: int) -> str:
    layout = context.layout
    theme = context.theme
    idx = layout.menu_index_at(row)
    if idx is None:
        label = " Menu" if row == layout.body_top else ""
        return _styled(theme.drawer, fit_ansi_line(label, layout.drawer_cols), theme.reset)
    item = MENU_ITEMS[idx]
    style = theme.drawer_active if idx == context.active_index else theme.drawer
    return _styled(style, fit_ansi_line(f" {item.icon}  {item.name}", layout.drawer_cols), theme.reset)


def _body_row(context: RenderContext, row: int) -> str:
    layout = context.layout
    theme = context.theme
    if layout.drawer_cols:
        backdrop_cols = layout.width - layout.drawer_cols
        backdrop = _styled(theme.backdrop, "░" * backdrop_cols, theme.reset) if backdrop_cols else ""
        return _drawer_cell(context, row) + backdrop
    parts: list[str] = []
    if layout.nav_cols:
        parts.append(_sidebar_cell(context, row))
        parts.append(_styled(theme.divider, "│", theme.reset))
    line_idx = context.content_start + (row - layout.body_top)
    text = context.content_lines[line_idx] if 0 <= line_idx < len(context.content_lines) else ""
    parts.append(fit_ansi_line(text, layout.content_cols))
    return "".join(parts)


def _topbar(context: RenderContext) -> str:
    nav = context.nav
    layout = context.layout
    glyph = "☰" if nav.mode in ("mobile", "tablet-expanded") else ("«" if nav.sidebar_state == "expanded" else "»")
    left = f" {glyph}  {context.title}" if context.header.collapsed else f" {glyph}"
    right = f"{nav.mode} · nav {nav.nav_width_px}px "
    gap = max(1, layout.width - len(left) - len(right))
    return _styled(context.theme.topbar, fit_ansi_line(left + " " * gap + right, layout.width), context.theme.reset)


def _status(context: RenderContext) -> str:
    nav = context.nav
    flags = [
        f"sidebar={nav.sidebar_state}",
        f"drawer={'open' if nav.drawer_open else 'closed'}",
        f"peek={'on' if nav.proximity else 'off'}",
        f"v={context.velocity:.2f}",
        f"{context.direction}",
        f"blur={context.motion.topbar_blur_px:.0f}px",
        f"motion={context.motion_level}{' (reduced)' if nav.reduced_motion else ''}",
    ]
    hint = "  q quit · m drawer · s sidebar · t motion · esc"
    return _styled(context.theme.status, fit_ansi_line(" " + " ".join(flags) + hint, context.layout.width), context.theme.reset)


def build_frame_rows(context: RenderContext) -> list[str]:
    """Compose the whole frame as ``layout.height`` rows of ``layout.width`` columns."""
    layout = context.layout
    theme = context.theme
    rows: list[str] = []
    for row in range(layout.height):
        if row == layout.status_row:
            rows.append(_status(context))
        elif row == layout.demo_row:
            rows.append(_styled(theme.demo_banner, fit_ansi_line(" DEMO MODE · changes are not saved", layout.width), theme.reset))
        elif row == layout.topbar_row:
            rows.append(_topbar(context))
        elif row == layout.title_row:
            title = _large_title(context.title, context.header.title_font_px)
            rows.append(_styled(theme.title, fit_ansi_line(f" {title}", layout.width), theme.reset))
        elif row == layout.subtitle_row:
            style = theme.subtitle if context.header.subtitle_opacity >= 0.5 else theme.subtitle_fading
            rows.append(_styled(style, fit_ansi_line(f" {context.subtitle}", layout.width), theme.reset))
        elif layout.body_top <= row < layout.body_top + layout.body_rows:
            rows.append(_body_row(context, row))
        else:
            rows.append(" " * layout.width)
    return rows


def render_frame(context: RenderContext) -> str:
    return "\r\n".join(build_frame_rows(context))
