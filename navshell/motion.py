"""Reduced-motion detection and the motion policy derived from it.

``ReducedMotionDetector`` probes the host's media-query support once at start
and then follows the OS preference reactively. ``motion_policy`` is a pure
function turning the motion level, scroll physics and that preference into
the tokens renderers consume.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from .host import MediaQueryList, Window

logger = logging.getLogger(__name__)

REDUCED_MOTION_QUERY = "(prefers-reduced-motion: reduce)"

MotionLevel = Literal["stable", "apple"]
MOTION_LEVELS: tuple[MotionLevel, ...] = ("stable", "apple")

EASING_SPRING = "cubic-bezier(0.2, 0.8, 0.2, 1)"
BASE_TOPBAR_BLUR_PX = 18.0
MAX_VELOCITY_BLUR_BOOST_PX = 12.0
LARGE_TITLE_SCROLL_DISTANCE = 56.0


class ReducedMotionDetector:
    """Track ``prefers-reduced-motion: reduce``; ``False`` when unsupported."""

    def __init__(self, window: Window, on_change: Callable[[bool], None] | None = None) -> None:
        self.window = window
        self._on_change = on_change
        self._media: MediaQueryList | None = None
        self._uses_legacy_api = False
        self.reduced_motion = False

    @property
    def supported(self) -> bool:
        return self._media is not None

    def start(self) -> bool:
        if self._media is not None:
            return self.reduced_motion
        match_media = getattr(self.window, "match_media", None)
        media = match_media(REDUCED_MOTION_QUERY) if callable(match_media) else None
        if media is None:
            logger.debug("matchMedia unsupported; reduced motion defaults to off")
            self.reduced_motion = False
            return False

        self._media = media
        self.reduced_motion = bool(media.matches)
        if callable(getattr(media, "add_event_listener", None)):
            media.add_event_listener("change", self._handle_change)
            self._uses_legacy_api = False
        else:
            media.add_listener(self._handle_change)
            self._uses_legacy_api = True
        return self.reduced_motion

    def stop(self) -> None:
        media = self._media
        if media is None:
            return
        if self._uses_legacy_api:
            media.remove_listener(self._handle_change)
        else:
            media.remove_event_listener("change", self._handle_change)
        self._media = None

    def _handle_change(self, matches: bool) -> None:
        value = bool(matches)
        if value == self.reduced_motion:
            return
        self.reduced_motion = value
        if self._on_change is not None:
            self._on_change(value)


@dataclass(frozen=True)
class MotionDurations:
    fast: float
    base: float
    slow: float


@dataclass(frozen=True)
class MotionTokens:
    """Visual and timing parameters for chrome animations."""

    topbar_blur_px: float
    topbar_alpha: float
    shadow_level: float
    durations: MotionDurations
    easing: str
    large_title_enabled: bool
    drawer_drag_enabled: bool
    proximity_enabled: bool


def motion_policy(
    level: MotionLevel,
    scroll_velocity: float = 0.0,
    scroll_top: float = 0.0,
    reduced_motion: bool = False,
) -> MotionTokens:
    """Return motion tokens for ``level`` under the current scroll physics.

    Reduced motion wins over the selected level. ``stable`` ignores scroll
    physics; ``apple`` boosts topbar blur with velocity (capped at 12px) and
    raises topbar alpha as the large title collapses.
    """
    if reduced_motion:
        return MotionTokens(
            topbar_blur_px=BASE_TOPBAR_BLUR_PX,
            topbar_alpha=0.85,
            shadow_level=1.0,
            durations=MotionDurations(0.0, 0.0, 0.0),
            easing="linear",
            large_title_enabled=False,
            drawer_drag_enabled=False,
            proximity_enabled=True,
        )
    if level != "apple":
        return MotionTokens(
            topbar_blur_px=BASE_TOPBAR_BLUR_PX,
            topbar_alpha=0.85,
            shadow_level=1.0,
            durations=MotionDurations(120.0, 200.0, 300.0),
            easing=EASING_SPRING,
            large_title_enabled=False,
            drawer_drag_enabled=False,
            proximity_enabled=True,
        )

    velocity_boost = min(MAX_VELOCITY_BLUR_BOOST_PX, max(0.0, scroll_velocity) * 8.0)
    title_progress = min(1.0, max(0.0, scroll_top) / LARGE_TITLE_SCROLL_DISTANCE)
    return MotionTokens(
        topbar_blur_px=BASE_TOPBAR_BLUR_PX + velocity_boost,
        topbar_alpha=0.72 + title_progress * 0.13,
        shadow_level=1.0 + velocity_boost * 0.1,
        durations=MotionDurations(120.0, 200.0, 240.0),
        easing=EASING_SPRING,
        large_title_enabled=True,
        drawer_drag_enabled=True,
        proximity_enabled=True,
    )
