"""Navigation menu entries shared by the sidebar and drawer renderers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MenuItem:
    name: str
    path: str
    icon: str


MENU_ITEMS: tuple[MenuItem, ...] = (
    MenuItem("Dashboard", "/", "⌂"),
    MenuItem("Customers", "/history", "☺"),
    MenuItem("Visits", "/visits", "⚑"),
    MenuItem("Settings", "/settings", "⚙"),
)
