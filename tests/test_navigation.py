"""Tests for the viewer navigation state machine."""

from __future__ import annotations

import pytest

from core.models import PhotoRef
from core.services.navigation import NavAction, NavigationController


def _photos(n: int) -> list[PhotoRef]:
    return [PhotoRef(path=f"/p{i}.jpg", name=f"p{i}.jpg", full_path="/") for i in range(n)]


class FakeSurface:
    """Fullscreen host that grants requests only when told to."""

    def __init__(self, fullscreen: bool = False, fail: bool = False) -> None:
        self.fullscreen = fullscreen
        self.fail = fail
        self.requests: list[str] = []

    def is_fullscreen(self) -> bool:
        return self.fullscreen

    def request_fullscreen(self) -> None:
        if self.fail:
            raise RuntimeError("denied")
        self.requests.append("enter")

    def exit_fullscreen(self) -> None:
        self.requests.append("exit")


class TestStepping:
    def test_wraps_at_low_end(self):
        nav = NavigationController(_photos(3), initial_index=0)
        nav.previous()
        assert nav.current_index == 2

    def test_wraps_at_high_end(self):
        nav = NavigationController(_photos(3), initial_index=2)
        nav.next()
        assert nav.current_index == 0

    @pytest.mark.parametrize("n", [1, 2, 5])
    def test_next_then_previous_round_trips(self, n):
        for start in range(n):
            nav = NavigationController(_photos(n), initial_index=start)
            nav.next()
            nav.previous()
            assert nav.current_index == start

    def test_single_photo_is_noop_without_notification(self):
        nav = NavigationController(_photos(1))
        seen = []
        nav.add_index_listener(seen.append)
        nav.next()
        nav.previous()
        assert nav.current_index == 0
        assert seen == []

    def test_listener_fires_on_change(self):
        nav = NavigationController(_photos(4))
        seen = []
        nav.add_index_listener(seen.append)
        nav.next()
        nav.jump_to(3)
        assert seen == [1, 3]

    def test_jump_to_out_of_range_is_ignored(self):
        nav = NavigationController(_photos(3), initial_index=1)
        assert nav.jump_to(3) is False
        assert nav.jump_to(-1) is False
        assert nav.current_index == 1
        assert nav.jump_to(2) is True
        assert nav.current_photo.name == "p2.jpg"

    def test_empty_list_rejected(self):
        with pytest.raises(ValueError):
            NavigationController([])

    def test_out_of_range_initial_index_falls_back(self):
        assert NavigationController(_photos(2), initial_index=7).current_index == 0


class TestGestures:
    def test_left_swipe_steps_forward_once(self):
        nav = NavigationController(_photos(3))
        seen = []
        nav.add_index_listener(seen.append)

        nav.gesture_start(100)
        assert nav.state.is_dragging
        nav.gesture_move(40)
        assert nav.state.drag_offset == -30
        action = nav.gesture_end(40)

        assert action is NavAction.NEXT
        assert seen == [1]
        assert nav.state.is_dragging is False
        assert nav.state.drag_offset == 0

    def test_right_swipe_steps_back(self):
        nav = NavigationController(_photos(3))
        nav.gesture_start(10)
        nav.gesture_move(100)
        assert nav.state.drag_offset == 45
        assert nav.gesture_end(100) is NavAction.PREVIOUS
        assert nav.current_index == 2

    @pytest.mark.parametrize("end", [50, 150, 100])
    def test_short_swipe_does_not_navigate(self, end):
        nav = NavigationController(_photos(3))
        nav.gesture_start(100)
        nav.gesture_move(end)
        assert nav.gesture_end(end) is NavAction.NONE
        assert nav.current_index == 0
        assert nav.state.drag_offset == 0
        assert not nav.state.is_dragging

    def test_move_without_start_is_ignored(self):
        nav = NavigationController(_photos(3))
        nav.gesture_move(300)
        assert nav.state.drag_offset == 0
        assert nav.gesture_end(0) is NavAction.NONE

    def test_start_at_zero_coordinate_still_counts(self):
        nav = NavigationController(_photos(3))
        nav.gesture_start(0)
        assert nav.gesture_end(-80) is NavAction.NEXT


class TestClickZones:
    @pytest.mark.parametrize(
        "x, expected, index",
        [(0, NavAction.PREVIOUS, 2), (29, NavAction.PREVIOUS, 2), (50, NavAction.NONE, 0),
         (70, NavAction.NONE, 0), (71, NavAction.NEXT, 1), (100, NavAction.NEXT, 1)],
    )
    def test_zones(self, x, expected, index):
        nav = NavigationController(_photos(3))
        assert nav.click(x, 100) is expected
        assert nav.current_index == index

    def test_zero_width_ignored(self):
        nav = NavigationController(_photos(3))
        assert nav.click(10, 0) is NavAction.NONE


class TestKeyboardAndFullscreen:
    def test_arrow_keys(self):
        nav = NavigationController(_photos(3))
        assert nav.handle_key("Right") is NavAction.NEXT
        assert nav.current_index == 1
        assert nav.handle_key("Left") is NavAction.PREVIOUS
        assert nav.current_index == 0
        assert nav.handle_key("x") is NavAction.NONE

    @pytest.mark.parametrize("key", ["f", "F"])
    def test_f_requests_fullscreen_without_assuming_grant(self, key):
        surface = FakeSurface()
        nav = NavigationController(_photos(2), surface=surface)
        assert nav.handle_key(key) is NavAction.TOGGLE_FULLSCREEN
        assert surface.requests == ["enter"]
        assert nav.state.is_fullscreen is False
        nav.on_fullscreen_changed(True)
        assert nav.state.is_fullscreen is True

    def test_no_request_when_surface_already_fullscreen(self):
        surface = FakeSurface(fullscreen=True)
        nav = NavigationController(_photos(2), surface=surface)
        nav.toggle_fullscreen()
        assert surface.requests == []

    def test_toggle_exits_when_fullscreen(self):
        surface = FakeSurface(fullscreen=True)
        nav = NavigationController(_photos(2), surface=surface)
        nav.on_fullscreen_changed(True)
        nav.toggle_fullscreen()
        assert surface.requests == ["exit"]

    def test_escape_exits_fullscreen_before_closing(self):
        closed = []
        surface = FakeSurface(fullscreen=True)
        nav = NavigationController(_photos(2), surface=surface, on_close=lambda: closed.append(1))
        nav.on_fullscreen_changed(True)

        assert nav.handle_key("Escape") is NavAction.EXIT_FULLSCREEN
        assert surface.requests == ["exit"]
        assert closed == []

        surface.fullscreen = False
        nav.on_fullscreen_changed(False)
        assert nav.handle_key("Escape") is NavAction.CLOSE
        assert closed == [1]

    def test_surface_error_is_contained(self):
        nav = NavigationController(_photos(2), surface=FakeSurface(fail=True))
        nav.toggle_fullscreen()
        assert nav.state.is_fullscreen is False

    def test_fullscreen_does_not_reset_drag(self):
        nav = NavigationController(_photos(2))
        nav.gesture_start(10)
        nav.on_fullscreen_changed(True)
        nav.on_fullscreen_changed(False)
        assert nav.state.is_dragging is True

    def test_without_surface_fullscreen_requests_are_ignored(self):
        nav = NavigationController(_photos(2))
        nav.toggle_fullscreen()
        nav.exit_fullscreen()
        assert nav.handle_key("f") is NavAction.TOGGLE_FULLSCREEN
        assert nav.state.is_fullscreen is False
        assert not hasattr(nav, "set_surface")
