"""Navigation state machine for the single-photo viewer.

The controller is toolkit-agnostic: views translate keyboard, click, drag and
window-state events into the calls below. Navigation is circular, so stepping
past either end wraps around.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Protocol

from loguru import logger

from core.models import NavigationState, PhotoRef

SWIPE_THRESHOLD: float = 50.0
DRAG_DAMPING: float = 0.5
CLICK_PREVIOUS_ZONE: float = 0.3
CLICK_NEXT_ZONE: float = 0.7

KEY_LEFT = "Left"
KEY_RIGHT = "Right"
KEY_ESCAPE = "Escape"
FULLSCREEN_KEYS = frozenset({"f", "F"})


class NavAction(Enum):
    """Outcome of a single input event."""

    NONE = "none"
    PREVIOUS = "previous"
    NEXT = "next"
    TOGGLE_FULLSCREEN = "toggle_fullscreen"
    EXIT_FULLSCREEN = "exit_fullscreen"
    CLOSE = "close"


class FullscreenSurface(Protocol):
    """Host surface able to enter and leave fullscreen.

    Requests may be granted asynchronously; the host reports the actual state
    back through `NavigationController.on_fullscreen_changed`.
    """

    def is_fullscreen(self) -> bool: ...

    def request_fullscreen(self) -> None: ...

    def exit_fullscreen(self) -> None: ...


class NavigationController:
    """Owns the `NavigationState` of one viewing session."""

    def __init__(
        self,
        photos: list[PhotoRef],
        initial_index: int = 0,
        surface: FullscreenSurface | None = None,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        """Open a session over `photos`.

        Args:
            photos: Ordered photos to navigate; must not be empty.
            initial_index: Starting index; out-of-range values fall back to 0.
            surface: Fullscreen host, optional.
            on_close: Called when the user asks to close the viewer.
        """
        if not photos:
            raise ValueError("Cannot open a viewer session over an empty photo list")
        start = initial_index if 0 <= initial_index < len(photos) else 0
        self.state = NavigationState(photos=list(photos), current_index=start)
        self._surface = surface
        self._on_close = on_close
        self._index_listeners: list[Callable[[int], None]] = []

    # Accessors
    @property
    def count(self) -> int:
        return len(self.state.photos)

    @property
    def current_index(self) -> int:
        return self.state.current_index

    @property
    def current_photo(self) -> PhotoRef:
        return self.state.current_photo

    def add_index_listener(self, callback: Callable[[int], None]) -> None:
        """Register `callback(new_index)`, fired whenever the index changes."""
        self._index_listeners.append(callback)

    # Stepping
    def next(self) -> None:
        self._select((self.state.current_index + 1) % self.count)

    def previous(self) -> None:
        self._select((self.state.current_index - 1 + self.count) % self.count)

    def jump_to(self, index: int) -> bool:
        """Select `index` directly; out-of-range indices are ignored."""
        if not 0 <= index < self.count:
            return False
        self._select(index)
        return True

    def _select(self, index: int) -> None:
        if index == self.state.current_index:
            return
        self.state.current_index = index
        for callback in list(self._index_listeners):
            callback(index)

    # Gestures
    def gesture_start(self, x: float) -> None:
        self.state.gesture_start = x
        self.state.is_dragging = True
        self.state.drag_offset = 0.0

    def gesture_move(self, x: float) -> None:
        if not self.state.is_dragging or self.state.gesture_start is None:
            return
        self.state.drag_offset = (x - self.state.gesture_start) * DRAG_DAMPING

    def gesture_end(self, x: float) -> NavAction:
        """Finish a drag at `x`; swipes beyond the threshold step once."""
        start = self.state.gesture_start
        self.state.gesture_start = None
        self.state.is_dragging = False
        self.state.drag_offset = 0.0
        if start is None:
            return NavAction.NONE

        distance = start - x
        if distance > SWIPE_THRESHOLD:
            self.next()
            return NavAction.NEXT
        if distance < -SWIPE_THRESHOLD:
            self.previous()
            return NavAction.PREVIOUS
        return NavAction.NONE

    # Click zones
    def click(self, x: float, width: float) -> NavAction:
        """Translate a press at `x` (relative to the photo's left edge).

        The outer 30% on each side steps; the middle 40% is ignored.
        """
        if width <= 0:
            return NavAction.NONE
        ratio = x / width
        if ratio < CLICK_PREVIOUS_ZONE:
            self.previous()
            return NavAction.PREVIOUS
        if ratio > CLICK_NEXT_ZONE:
            self.next()
            return NavAction.NEXT
        return NavAction.NONE

    # Keyboard
    def handle_key(self, key: str) -> NavAction:
        """Dispatch a key name (e.g. "Left", "Right", "f", "Escape")."""
        if key == KEY_LEFT:
            self.previous()
            return NavAction.PREVIOUS
        if key == KEY_RIGHT:
            self.next()
            return NavAction.NEXT
        if key in FULLSCREEN_KEYS:
            self.toggle_fullscreen()
            return NavAction.TOGGLE_FULLSCREEN
        if key == KEY_ESCAPE:
            if self.state.is_fullscreen:
                self.exit_fullscreen()
                return NavAction.EXIT_FULLSCREEN
            if self._on_close is not None:
                self._on_close()
            return NavAction.CLOSE
        return NavAction.NONE

    # Fullscreen
    def toggle_fullscreen(self) -> None:
        if self.state.is_fullscreen:
            self.exit_fullscreen()
            return
        surface = self._surface
        if surface is None:
            return
        try:
            if not surface.is_fullscreen():
                surface.request_fullscreen()
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.error("Error requesting fullscreen: {}", ex)

    def exit_fullscreen(self) -> None:
        surface = self._surface
        if surface is None:
            return
        try:
            if surface.is_fullscreen():
                surface.exit_fullscreen()
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.error("Error exiting fullscreen: {}", ex)

    def on_fullscreen_changed(self, is_fullscreen: bool) -> None:
        """Mirror the host's reported fullscreen state."""
        self.state.is_fullscreen = bool(is_fullscreen)
