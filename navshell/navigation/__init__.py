"""Responsive navigation: state, reconciliation rules and the state machine."""

from __future__ import annotations

from .machine import NavigationStateMachine, NavigationTiming
from .menu import MENU_ITEMS, MenuItem
from .state import (
    SIDEBAR_EXPANDED_PX,
    SIDEBAR_ICON_PX,
    NavActions,
    NavContext,
    NavState,
    SidebarState,
    nav_width_px,
    reconcile_mode,
)

__all__ = [
    "MENU_ITEMS",
    "MenuItem",
    "NavActions",
    "NavContext",
    "NavState",
    "NavigationStateMachine",
    "NavigationTiming",
    "SIDEBAR_EXPANDED_PX",
    "SIDEBAR_ICON_PX",
    "SidebarState",
    "nav_width_px",
    "reconcile_mode",
]
