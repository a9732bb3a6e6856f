"""Host platform model: window, media queries, document and scroll containers.

These objects are what the navigation core observes. A host (the terminal
runtime, or a test) owns them and dispatches raw events into them; the core
only ever subscribes. ``add_event_listener`` returns a remover so every
subscription can be torn down on unmount.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

CONTENT_SCROLL_ID = "content-scroll"

WINDOW_EVENTS = frozenset({"resize", "pointermove", "pointerleave", "keydown"})


@dataclass(frozen=True)
class PointerEvent:
    x: float
    y: float


@dataclass(frozen=True)
class KeyEvent:
    key: str


class _EventTarget:
    _event_types: frozenset[str] = frozenset()

    def __init__(self) -> None:
        self._listeners: dict[str, list[Callable[..., None]]] = {name: [] for name in self._event_types}

    def add_event_listener(self, event_type: str, listener: Callable[..., None]) -> Callable[[], None]:
        """Register ``listener``; return a function that removes it again."""
        if event_type not in self._listeners:
            raise ValueError(f"unsupported event type: {event_type!r}")
        self._listeners[event_type].append(listener)

        def remove() -> None:
            self.remove_event_listener(event_type, listener)

        return remove

    def remove_event_listener(self, event_type: str, listener: Callable[..., None]) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event_type: str) -> int:
        return len(self._listeners.get(event_type, []))

    def _dispatch(self, event_type: str, *args: object) -> None:
        for listener in list(self._listeners[event_type]):
            listener(*args)


class MediaQueryList:
    """Media query result with both the modern and the legacy listener API."""

    def __init__(self, query: str, matches: bool = False) -> None:
        self.query = query
        self.matches = bool(matches)
        self._change_listeners: list[Callable[[bool], None]] = []

    def add_event_listener(self, event_type: str, listener: Callable[[bool], None]) -> None:
        if event_type != "change":
            raise ValueError(f"unsupported event type: {event_type!r}")
        self._change_listeners.append(listener)

    def remove_event_listener(self, event_type: str, listener: Callable[[bool], None]) -> None:
        if event_type == "change" and listener in self._change_listeners:
            self._change_listeners.remove(listener)

    def add_listener(self, listener: Callable[[bool], None]) -> None:
        self._change_listeners.append(listener)

    def remove_listener(self, listener: Callable[[bool], None]) -> None:
        if listener in self._change_listeners:
            self._change_listeners.remove(listener)

    def listener_count(self) -> int:
        return len(self._change_listeners)

    def set_matches(self, matches: bool) -> None:
        """Update the match state and notify listeners on a real change."""
        matches = bool(matches)
        if matches == self.matches:
            return
        self.matches = matches
        for listener in list(self._change_listeners):
            listener(matches)


class LegacyMediaQueryList(MediaQueryList):
    """Media query list exposing only ``add_listener``/``remove_listener``."""

    add_event_listener = None  # type: ignore[assignment]
    remove_event_listener = None  # type: ignore[assignment]


class Window(_EventTarget):
    """Viewport dimensions plus the input events the navigation core uses."""

    _event_types = WINDOW_EVENTS

    def __init__(
        self,
        width: float = 1280,
        height: float = 800,
        media_queries: dict[str, MediaQueryList] | None = None,
        supports_match_media: bool = True,
    ) -> None:
        super().__init__()
        self.width = width
        self.height = height
        self._media_queries = dict(media_queries or {})
        self.supports_match_media = supports_match_media

    def match_media(self, query: str) -> MediaQueryList | None:
        """Return the media query list for ``query``, or ``None`` if unsupported."""
        if not self.supports_match_media:
            return None
        if query not in self._media_queries:
            self._media_queries[query] = MediaQueryList(query)
        return self._media_queries[query]

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self._dispatch("resize")

    def pointer_move(self, x: float, y: float) -> None:
        self._dispatch("pointermove", PointerEvent(x, y))

    def pointer_leave(self) -> None:
        self._dispatch("pointerleave")

    def key_down(self, key: str) -> None:
        self._dispatch("keydown", KeyEvent(key))


class ScrollContainer(_EventTarget):
    """Scrollable element; ``scroll_top`` is clamped to its scroll range."""

    _event_types = frozenset({"scroll"})

    def __init__(self, element_id: str, scroll_height: float = 0.0, client_height: float = 0.0) -> None:
        super().__init__()
        self.element_id = element_id
        self.scroll_height = scroll_height
        self.client_height = client_height
        self.scroll_top = 0.0
        self.overflow_locked = False

    @property
    def max_scroll_top(self) -> float:
        return max(0.0, self.scroll_height - self.client_height)

    def scroll_to(self, y: float) -> bool:
        """Scroll to ``y``; return whether the offset changed."""
        if self.overflow_locked:
            return False
        target = max(0.0, min(float(y), self.max_scroll_top))
        if target == self.scroll_top:
            return False
        self.scroll_top = target
        self._dispatch("scroll")
        return True

    def scroll_by(self, dy: float) -> bool:
        return self.scroll_to(self.scroll_top + dy)

    def resize(self, scroll_height: float, client_height: float) -> None:
        """Change content/viewport heights, re-clamping the offset silently."""
        self.scroll_height = scroll_height
        self.client_height = client_height
        self.scroll_top = max(0.0, min(self.scroll_top, self.max_scroll_top))


class Document:
    """Element registry keyed by id."""

    def __init__(self) -> None:
        self._elements: dict[str, ScrollContainer] = {}

    def add_element(self, element: ScrollContainer) -> ScrollContainer:
        self._elements[element.element_id] = element
        return element

    def get_element_by_id(self, element_id: str) -> ScrollContainer | None:
        return self._elements.get(element_id)
