"""Scroll-derived signals: progress, velocity, direction and header metrics."""

from __future__ import annotations

from .header import HeaderMetrics, subtitle_opacity, title_font_size
from .progress import ScrollProgress, ScrollProgressTracker, scroll_progress
from .velocity import ScrollDirectionTracker, ScrollVelocityTracker

__all__ = [
    "HeaderMetrics",
    "ScrollDirectionTracker",
    "ScrollProgress",
    "ScrollProgressTracker",
    "ScrollVelocityTracker",
    "scroll_progress",
    "subtitle_opacity",
    "title_font_size",
]
