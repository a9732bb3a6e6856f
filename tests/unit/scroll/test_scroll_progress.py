"""Tests for scroll progress and the header metrics derived from it."""

from __future__ import annotations

import unittest

from navshell.host import CONTENT_SCROLL_ID, Document, ScrollContainer
from navshell.scheduler import ManualScheduler
from navshell.scroll import HeaderMetrics, ScrollProgressTracker, scroll_progress
from navshell.scroll.header import subtitle_opacity, title_font_size


def _make_tracker(scroll_top: float = 0.0):
    document = Document()
    container = document.add_element(ScrollContainer(CONTENT_SCROLL_ID, scroll_height=2000, client_height=400))
    container.scroll_top = scroll_top
    scheduler = ManualScheduler()
    tracker = ScrollProgressTracker(document, scheduler)
    return tracker, container, scheduler


class ScrollProgressFunctionTests(unittest.TestCase):
    def test_progress_is_clamped_ratio(self) -> None:
        self.assertEqual(scroll_progress(0), 0.0)
        self.assertEqual(scroll_progress(28), 0.5)
        self.assertEqual(scroll_progress(56), 1.0)
        self.assertEqual(scroll_progress(500), 1.0)
        self.assertEqual(scroll_progress(-20), 0.0)

    def test_non_positive_distance_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            scroll_progress(10, 0)
        with self.assertRaises(ValueError):
            ScrollProgressTracker(Document(), ManualScheduler(), distance_px=-1)


class ScrollProgressTrackerTests(unittest.TestCase):
    def test_scroll_events_coalesce_to_one_sample_per_frame(self) -> None:
        tracker, container, scheduler = _make_tracker()
        seen = []
        tracker.subscribe(seen.append)
        tracker.mount()

        container.scroll_to(10)
        container.scroll_to(20)
        container.scroll_to(28)
        self.assertEqual(tracker.offset, 0.0)

        scheduler.advance_frames(1)

        self.assertEqual(tracker.progress, 0.5)
        self.assertEqual(len(seen), 1)
        self.assertEqual(seen[0].offset, 28.0)

    def test_sub_pixel_changes_are_ignored(self) -> None:
        tracker, container, scheduler = _make_tracker()
        seen = []
        tracker.subscribe(seen.append)
        tracker.mount()

        container.scroll_to(0.4)
        scheduler.advance_frames(1)

        self.assertEqual(tracker.offset, 0.0)
        self.assertEqual(seen, [])

    def test_mount_samples_the_current_offset(self) -> None:
        tracker, _container, scheduler = _make_tracker(scroll_top=120)
        tracker.mount()

        scheduler.advance_frames(1)

        self.assertEqual(tracker.progress, 1.0)

    def test_missing_container_leaves_tracker_inert(self) -> None:
        tracker = ScrollProgressTracker(Document(), ManualScheduler())
        tracker.mount()

        self.assertFalse(tracker.attached)
        self.assertEqual(tracker.snapshot().progress, 0.0)

    def test_unmount_drops_pending_frame(self) -> None:
        tracker, container, scheduler = _make_tracker()
        tracker.mount()
        container.scroll_to(40)

        tracker.unmount()
        scheduler.advance_frames(2)

        self.assertEqual(tracker.offset, 0.0)
        self.assertEqual(container.listener_count("scroll"), 0)


class HeaderMetricsTests(unittest.TestCase):
    def test_title_and_subtitle_interpolate(self) -> None:
        self.assertEqual(title_font_size(0), 34.0)
        self.assertEqual(title_font_size(0.5), 25.5)
        self.assertEqual(title_font_size(1), 17.0)
        self.assertEqual(title_font_size(3), 17.0)
        self.assertEqual(subtitle_opacity(0.25), 0.75)

    def test_collapsed_only_at_full_progress(self) -> None:
        self.assertFalse(HeaderMetrics.from_progress(0.99).collapsed)
        self.assertTrue(HeaderMetrics.from_progress(1.0).collapsed)


if __name__ == "__main__":
    unittest.main()
