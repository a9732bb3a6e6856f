"""Navigation state, derived values and the mode reconciliation rules.

Everything here is pure: the state machine feeds in the new device mode and
the stored preference, and gets a new ``NavState`` back.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Literal

from ..preferences import SidebarPreference
from ..viewport import DESKTOP, MOBILE, TABLET_COMPACT, TABLET_EXPANDED, DeviceMode

SidebarState = Literal["closed", "icon", "expanded"]

SIDEBAR_EXPANDED_PX = 260
SIDEBAR_ICON_PX = 72


@dataclass(frozen=True)
class NavState:
    mode: DeviceMode
    sidebar_state: SidebarState
    drawer_open: bool = False
    proximity: bool = False


# Server-safe default held until the first client measurement.
UNHYDRATED_STATE = NavState(mode=DESKTOP, sidebar_state="expanded")

# What consumers see before hydration, so nothing assumes a wide layout.
MOBILE_SAFE_STATE = NavState(mode=MOBILE, sidebar_state="closed")


def default_sidebar_for(mode: DeviceMode) -> SidebarPreference:
    """Fallback sidebar state when no preference is stored."""
    return "icon" if mode == TABLET_COMPACT else "expanded"


def reconcile_mode(state: NavState, mode: DeviceMode, stored: SidebarPreference | None) -> NavState:
    """Apply the mode-change rules to ``state`` for the new ``mode``.

    Drawer modes force the sidebar closed and leave the drawer flag alone.
    Sidebar modes force the drawer closed and take the stored preference,
    falling back to ``icon`` on tablet-compact and ``expanded`` on desktop.
    Calling this twice with the same inputs yields the same state.
    """
    if mode in (MOBILE, TABLET_EXPANDED):
        return replace(state, mode=mode, sidebar_state="closed", proximity=False)
    sidebar_state: SidebarState = stored if stored is not None else default_sidebar_for(mode)
    return replace(state, mode=mode, sidebar_state=sidebar_state, drawer_open=False)


def nav_width_px(mode: DeviceMode, sidebar_state: SidebarState, proximity: bool) -> int:
    """Width the persistent navigation occupies in layout.

    Tablet-compact is pinned to icon width whatever the stored state. On
    desktop a hovered icon sidebar lays out at expanded width without changing
    the stored state.
    """
    if mode in (MOBILE, TABLET_EXPANDED):
        return 0
    if mode == TABLET_COMPACT:
        return SIDEBAR_ICON_PX
    if sidebar_state == "expanded":
        return SIDEBAR_EXPANDED_PX
    if sidebar_state == "icon":
        return SIDEBAR_EXPANDED_PX if proximity else SIDEBAR_ICON_PX
    return 0


def is_elevated(mode: DeviceMode, drawer_open: bool) -> bool:
    """Content scales down behind an open drawer on mobile only."""
    return mode == MOBILE and drawer_open


@dataclass(frozen=True)
class NavActions:
    """The only way renderers may change navigation state."""

    open_drawer: Callable[[], None]
    close_drawer: Callable[[], None]
    toggle_drawer: Callable[[], None]
    set_expanded: Callable[[], None]
    set_icon: Callable[[], None]
    toggle_sidebar: Callable[[], None]


@dataclass(frozen=True)
class NavContext:
    """Read-only navigation snapshot handed to renderers."""

    mode: DeviceMode
    sidebar_state: SidebarState
    drawer_open: bool
    proximity: bool
    nav_width_px: int
    elevated: bool
    reduced_motion: bool
    actions: NavActions

    @classmethod
    def from_state(cls, state: NavState, reduced_motion: bool, actions: NavActions) -> NavContext:
        return cls(
            mode=state.mode,
            sidebar_state=state.sidebar_state,
            drawer_open=state.drawer_open,
            proximity=state.proximity,
            nav_width_px=nav_width_px(state.mode, state.sidebar_state, state.proximity),
            elevated=is_elevated(state.mode, state.drawer_open),
            reduced_motion=reduced_motion,
            actions=actions,
        )

    def as_dict(self) -> dict[str, object]:
        """Plain-data view without the action callables."""
        return {
            "mode": self.mode,
            "sidebar_state": self.sidebar_state,
            "drawer_open": self.drawer_open,
            "proximity": self.proximity,
            "nav_width_px": self.nav_width_px,
            "elevated": self.elevated,
            "reduced_motion": self.reduced_motion,
        }
