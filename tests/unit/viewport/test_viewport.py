"""Tests for viewport classification and the debounced viewport observer."""

from __future__ import annotations

import math
import unittest

from navshell.host import Window
from navshell.scheduler import ManualScheduler
from navshell.viewport import DEVICE_MODES, ViewportObserver, classify_viewport, is_drawer_mode, is_sidebar_mode


class ClassifyViewportTests(unittest.TestCase):
    def test_breakpoints_are_exact(self) -> None:
        self.assertEqual(classify_viewport(767, 1000), "mobile")
        self.assertEqual(classify_viewport(768, 1000), "tablet-expanded")
        self.assertEqual(classify_viewport(1023, 700), "tablet-compact")
        self.assertEqual(classify_viewport(1024, 700), "desktop")
        self.assertEqual(classify_viewport(1024, 2000), "desktop")

    def test_tablet_orientation_split(self) -> None:
        self.assertEqual(classify_viewport(900, 899), "tablet-compact")
        self.assertEqual(classify_viewport(900, 900), "tablet-expanded")
        self.assertEqual(classify_viewport(900, 1200), "tablet-expanded")

    def test_narrow_viewports_are_mobile_whatever_the_height(self) -> None:
        for height in (1, 400, 5000):
            self.assertEqual(classify_viewport(320, height), "mobile")

    def test_fractional_widths_below_tablet_are_mobile(self) -> None:
        self.assertEqual(classify_viewport(767.5, 900), "mobile")
        self.assertEqual(classify_viewport(767.99, 400), "mobile")
        self.assertEqual(classify_viewport(0.5, 400), "mobile")
        self.assertEqual(classify_viewport(1023.5, 700), "tablet-compact")

    def test_degenerate_widths_fall_through_to_desktop(self) -> None:
        self.assertEqual(classify_viewport(0, 600), "desktop")
        self.assertEqual(classify_viewport(-10, 600), "desktop")
        self.assertEqual(classify_viewport(math.nan, 600), "desktop")

    def test_every_width_lands_in_exactly_one_mode(self) -> None:
        for width in range(1, 1400, 7):
            for height in (300, 900, 1400):
                self.assertIn(classify_viewport(width, height), DEVICE_MODES)

    def test_mode_families_partition_the_modes(self) -> None:
        for mode in DEVICE_MODES:
            self.assertNotEqual(is_drawer_mode(mode), is_sidebar_mode(mode))


class ViewportObserverTests(unittest.TestCase):
    def _observer(self, width: float = 1280, height: float = 800):
        window = Window(width, height)
        scheduler = ManualScheduler()
        pushed: list[str] = []
        observer = ViewportObserver(window, scheduler, pushed.append)
        return window, scheduler, observer, pushed

    def test_start_pushes_the_current_mode_synchronously(self) -> None:
        _window, _scheduler, observer, pushed = self._observer(375, 812)

        self.assertEqual(observer.start(), "mobile")
        self.assertEqual(pushed, ["mobile"])
        self.assertTrue(observer.active)

    def test_resize_bursts_collapse_into_one_recompute(self) -> None:
        window, scheduler, observer, pushed = self._observer()
        observer.start()

        window.resize(900, 1200)
        scheduler.advance(20)
        window.resize(700, 1200)
        scheduler.advance(20)
        window.resize(375, 812)
        scheduler.advance(49)
        self.assertEqual(pushed, ["desktop"])

        scheduler.advance(1)
        self.assertEqual(pushed, ["desktop", "mobile"])

    def test_unchanged_mode_is_not_pushed(self) -> None:
        window, scheduler, observer, pushed = self._observer()
        observer.start()

        window.resize(1400, 900)
        scheduler.advance(100)

        self.assertEqual(pushed, ["desktop"])

    def test_stop_detaches_and_drops_pending_recompute(self) -> None:
        window, scheduler, observer, pushed = self._observer()
        observer.start()
        window.resize(375, 812)

        observer.stop()
        scheduler.advance(100)
        window.resize(900, 1200)
        scheduler.advance(100)

        self.assertEqual(pushed, ["desktop"])
        self.assertEqual(window.listener_count("resize"), 0)
        self.assertFalse(observer.active)


    def test_restart_after_stop_pushes_the_same_mode_again(self) -> None:
        window, _scheduler, observer, pushed = self._observer()
        observer.start()

        observer.stop()
        self.assertIsNone(observer.mode)
        observer.start()

        self.assertEqual(pushed, ["desktop", "desktop"])
        self.assertEqual(window.listener_count("resize"), 1)


if __name__ == "__main__":
    unittest.main()
