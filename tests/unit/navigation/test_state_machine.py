"""Tests for the navigation state machine: lifecycle, actions and observers."""

from __future__ import annotations

import unittest

from navshell.host import CONTENT_SCROLL_ID, Document, MediaQueryList, ScrollContainer, Window
from navshell.motion import REDUCED_MOTION_QUERY
from navshell.navigation import NavigationStateMachine
from navshell.preferences import SIDEBAR_STORAGE_KEY, SidebarPreferenceStore
from navshell.scheduler import ManualScheduler
from navshell.storage import MemoryStorage


def _make_machine(width=1280, height=800, stored=None, with_container=True, window=None):
    window = window if window is not None else Window(width, height)
    document = Document()
    container = None
    if with_container:
        container = document.add_element(ScrollContainer(CONTENT_SCROLL_ID, scroll_height=4000, client_height=600))
    storage = MemoryStorage({SIDEBAR_STORAGE_KEY: stored} if stored is not None else {})
    scheduler = ManualScheduler()
    machine = NavigationStateMachine(window, document, SidebarPreferenceStore(storage), scheduler)
    return machine, window, container, storage, scheduler


class LifecycleTests(unittest.TestCase):
    def test_context_is_mobile_safe_before_mount(self) -> None:
        machine, *_ = _make_machine()

        context = machine.context()

        self.assertEqual(context.mode, "mobile")
        self.assertEqual(context.sidebar_state, "closed")
        self.assertEqual(context.nav_width_px, 0)
        self.assertEqual(machine.state.mode, "desktop")
        self.assertFalse(machine.hydrated)

    def test_mount_reconciles_synchronously(self) -> None:
        machine, *_ = _make_machine(1280, 800, stored="icon")

        context = machine.mount()

        self.assertEqual(context.mode, "desktop")
        self.assertEqual(context.sidebar_state, "icon")
        self.assertEqual(context.nav_width_px, 72)
        self.assertTrue(machine.hydrated)

    def test_subscribers_hear_each_distinct_context_once(self) -> None:
        machine, window, _container, _storage, scheduler = _make_machine()
        seen = []
        machine.subscribe(seen.append)

        machine.mount()
        machine.set_expanded()
        window.resize(375, 812)
        scheduler.advance(50)

        self.assertEqual([ctx.mode for ctx in seen], ["desktop", "mobile"])

    def test_unmount_removes_every_listener(self) -> None:
        machine, window, container, _storage, _scheduler = _make_machine()
        machine.mount()

        machine.unmount()

        for event_type in ("resize", "pointermove", "pointerleave", "keydown"):
            self.assertEqual(window.listener_count(event_type), 0, event_type)
        self.assertEqual(container.listener_count("scroll"), 0)
        self.assertEqual(window.match_media(REDUCED_MOTION_QUERY).listener_count(), 0)

    def test_remount_reconciles_and_restarts_proximity(self) -> None:
        machine, window, _container, storage, scheduler = _make_machine(stored="icon")
        machine.mount()
        machine.unmount()
        storage.set_item(SIDEBAR_STORAGE_KEY, "expanded")
        storage.set_item(SIDEBAR_STORAGE_KEY, "icon")

        context = machine.mount()
        window.pointer_move(10, 100)
        scheduler.advance(100)

        self.assertEqual(context.sidebar_state, "icon")
        self.assertEqual(window.listener_count("pointermove"), 1)
        self.assertEqual(window.listener_count("resize"), 1)
        self.assertTrue(machine.context().proximity)
        self.assertEqual(machine.context().nav_width_px, 260)

    def test_remount_after_resize_while_unmounted_picks_up_new_mode(self) -> None:
        machine, window, _container, _storage, _scheduler = _make_machine()
        machine.mount()
        machine.unmount()

        window.resize(375, 812)
        context = machine.mount()

        self.assertEqual(context.mode, "mobile")
        self.assertEqual(window.listener_count("pointermove"), 0)

    def test_missing_scroll_container_is_tolerated(self) -> None:
        machine, *_ = _make_machine(with_container=False)

        context = machine.mount()

        self.assertEqual(context.mode, "desktop")


class DrawerActionTests(unittest.TestCase):
    def test_toggle_drawer_on_mobile_elevates_and_locks_scroll(self) -> None:
        machine, _window, container, _storage, _scheduler = _make_machine(375, 812)
        machine.mount()

        machine.actions.toggle_drawer()
        context = machine.context()
        self.assertTrue(context.drawer_open)
        self.assertTrue(context.elevated)
        self.assertTrue(container.overflow_locked)
        self.assertFalse(container.scroll_to(200))

        machine.actions.close_drawer()
        self.assertFalse(machine.context().elevated)
        self.assertFalse(container.overflow_locked)

    def test_tablet_expanded_drawer_is_not_elevated(self) -> None:
        machine, _window, container, _storage, _scheduler = _make_machine(900, 1200)
        machine.mount()

        machine.actions.open_drawer()

        self.assertTrue(machine.context().drawer_open)
        self.assertFalse(machine.context().elevated)
        self.assertFalse(container.overflow_locked)

    def test_unmount_releases_scroll_lock(self) -> None:
        machine, _window, container, _storage, _scheduler = _make_machine(375, 812)
        machine.mount()
        machine.actions.open_drawer()

        machine.unmount()

        self.assertFalse(container.overflow_locked)


class SidebarActionTests(unittest.TestCase):
    def test_set_icon_and_expanded_persist(self) -> None:
        machine, _window, _container, storage, _scheduler = _make_machine()
        machine.mount()

        machine.actions.set_icon()
        self.assertEqual(storage.data[SIDEBAR_STORAGE_KEY], "icon")
        self.assertEqual(machine.context().nav_width_px, 72)

        machine.actions.toggle_sidebar()
        self.assertEqual(storage.data[SIDEBAR_STORAGE_KEY], "expanded")
        self.assertEqual(machine.context().sidebar_state, "expanded")

    def test_sidebar_actions_are_ignored_in_drawer_modes(self) -> None:
        for size in ((375, 812), (900, 1200)):
            machine, _window, _container, storage, _scheduler = _make_machine(*size)
            machine.mount()

            machine.actions.set_expanded()
            machine.actions.toggle_sidebar()

            self.assertEqual(machine.context().sidebar_state, "closed")
            self.assertNotIn(SIDEBAR_STORAGE_KEY, storage.data)

    def test_tablet_compact_keeps_icon_width_when_expanded(self) -> None:
        machine, *_ = _make_machine(1000, 700)
        machine.mount()

        machine.actions.set_expanded()

        self.assertEqual(machine.context().sidebar_state, "expanded")
        self.assertEqual(machine.context().nav_width_px, 72)


class EscapeKeyTests(unittest.TestCase):
    def test_escape_closes_open_drawer_on_mobile(self) -> None:
        machine, window, *_ = _make_machine(375, 812)
        machine.mount()
        machine.actions.open_drawer()

        window.key_down("Escape")

        self.assertFalse(machine.context().drawer_open)

    def test_escape_collapses_expanded_sidebar_on_desktop(self) -> None:
        machine, window, _container, storage, _scheduler = _make_machine(stored="expanded")
        machine.mount()

        window.key_down("Escape")

        self.assertEqual(machine.context().sidebar_state, "icon")
        self.assertEqual(storage.data[SIDEBAR_STORAGE_KEY], "icon")

    def test_other_keys_and_icon_sidebar_are_left_alone(self) -> None:
        machine, window, *_ = _make_machine(stored="icon")
        machine.mount()

        window.key_down("Enter")
        window.key_down("Escape")

        self.assertEqual(machine.context().sidebar_state, "icon")

    def test_escape_in_tablet_expanded_leaves_drawer_open(self) -> None:
        machine, window, *_ = _make_machine(900, 1200)
        machine.mount()
        machine.actions.open_drawer()

        window.key_down("Escape")

        self.assertTrue(machine.context().drawer_open)


class ScrollCollapseTests(unittest.TestCase):
    def test_scroll_idle_collapses_expanded_sidebar(self) -> None:
        machine, _window, container, storage, scheduler = _make_machine(stored="expanded")
        machine.mount()

        container.scroll_to(100)
        scheduler.advance(200)
        container.scroll_to(200)
        scheduler.advance(299)
        self.assertEqual(machine.context().sidebar_state, "expanded")

        scheduler.advance(1)
        self.assertEqual(machine.context().sidebar_state, "icon")
        self.assertEqual(storage.data[SIDEBAR_STORAGE_KEY], "icon")

    def test_explicit_expand_cancels_pending_collapse(self) -> None:
        machine, _window, container, _storage, scheduler = _make_machine(stored="expanded")
        machine.mount()

        container.scroll_to(100)
        scheduler.advance(100)
        machine.actions.set_expanded()
        scheduler.advance(1000)

        self.assertEqual(machine.context().sidebar_state, "expanded")

    def test_no_collapse_after_unmount(self) -> None:
        machine, _window, container, storage, scheduler = _make_machine(stored="expanded")
        machine.mount()
        container.scroll_to(100)

        machine.unmount()
        scheduler.advance(1000)

        self.assertEqual(storage.data[SIDEBAR_STORAGE_KEY], "expanded")
        self.assertEqual(machine.state.sidebar_state, "expanded")


class ProximityWiringTests(unittest.TestCase):
    def test_desktop_icon_sidebar_peeks_without_changing_state(self) -> None:
        machine, window, _container, storage, scheduler = _make_machine(stored="icon")
        machine.mount()

        window.pointer_move(10, 300)
        scheduler.advance(80)

        context = machine.context()
        self.assertTrue(context.proximity)
        self.assertEqual(context.nav_width_px, 260)
        self.assertEqual(context.sidebar_state, "icon")
        self.assertEqual(storage.data[SIDEBAR_STORAGE_KEY], "icon")

    def test_proximity_is_inactive_in_drawer_modes(self) -> None:
        machine, window, _container, _storage, scheduler = _make_machine(375, 812)
        machine.mount()

        window.pointer_move(10, 300)
        scheduler.advance(500)

        self.assertFalse(machine.context().proximity)
        self.assertEqual(window.listener_count("pointermove"), 0)

    def test_leaving_sidebar_mode_clears_proximity(self) -> None:
        machine, window, _container, _storage, scheduler = _make_machine(stored="icon")
        machine.mount()
        window.pointer_move(10, 300)
        scheduler.advance(80)

        window.resize(375, 812)
        scheduler.advance(50)

        self.assertFalse(machine.context().proximity)


class SharedPreferenceTests(unittest.TestCase):
    def test_other_writer_on_same_store_updates_sidebar(self) -> None:
        storage = MemoryStorage()
        first = NavigationStateMachine(Window(1280, 800), Document(), SidebarPreferenceStore(storage), ManualScheduler())
        second = NavigationStateMachine(Window(1280, 800), Document(), SidebarPreferenceStore(storage), ManualScheduler())
        first.mount()
        second.mount()

        first.set_icon()

        self.assertEqual(second.context().sidebar_state, "icon")
        self.assertEqual(second.context().nav_width_px, 72)

    def test_invalid_external_value_is_ignored(self) -> None:
        machine, _window, _container, storage, _scheduler = _make_machine(stored="expanded")
        machine.mount()

        storage.set_item(SIDEBAR_STORAGE_KEY, "wide")

        self.assertEqual(machine.context().sidebar_state, "expanded")

    def test_drawer_modes_ignore_external_writes(self) -> None:
        machine, _window, _container, storage, _scheduler = _make_machine(375, 812)
        machine.mount()

        storage.set_item(SIDEBAR_STORAGE_KEY, "icon")

        self.assertEqual(machine.context().sidebar_state, "closed")

    def test_unmounted_machine_stops_listening(self) -> None:
        machine, _window, _container, storage, _scheduler = _make_machine(stored="expanded")
        machine.mount()
        machine.unmount()

        storage.set_item(SIDEBAR_STORAGE_KEY, "icon")

        self.assertEqual(machine.state.sidebar_state, "expanded")


class ReducedMotionWiringTests(unittest.TestCase):
    def test_context_follows_reduced_motion_changes(self) -> None:
        media = MediaQueryList(REDUCED_MOTION_QUERY, matches=False)
        window = Window(1280, 800, media_queries={REDUCED_MOTION_QUERY: media})
        machine, *_ = _make_machine(window=window)
        seen = []
        machine.subscribe(seen.append)
        machine.mount()

        media.set_matches(True)

        self.assertTrue(machine.context().reduced_motion)
        self.assertTrue(seen[-1].reduced_motion)


if __name__ == "__main__":
    unittest.main()
