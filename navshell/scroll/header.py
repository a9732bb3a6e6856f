"""Page-header collapse metrics driven by scroll progress."""

from __future__ import annotations

from dataclasses import dataclass

from .progress import clamp

TITLE_FONT_MAX_PX = 34.0
TITLE_FONT_MIN_PX = 17.0


def title_font_size(
    progress: float,
    max_px: float = TITLE_FONT_MAX_PX,
    min_px: float = TITLE_FONT_MIN_PX,
) -> float:
    """Interpolate the title size from ``max_px`` down to ``min_px``."""
    return max_px - (max_px - min_px) * clamp(progress, 0.0, 1.0)


def subtitle_opacity(progress: float) -> float:
    return 1.0 - clamp(progress, 0.0, 1.0)


@dataclass(frozen=True)
class HeaderMetrics:
    title_font_px: float
    subtitle_opacity: float
    collapsed: bool

    @classmethod
    def from_progress(cls, progress: float) -> HeaderMetrics:
        return cls(
            title_font_px=title_font_size(progress),
            subtitle_opacity=subtitle_opacity(progress),
            collapsed=progress >= 1.0,
        )
