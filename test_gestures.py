"""Gesture Executor Tests - click, reset, drag sequencing and fault recovery."""

import unittest
from unittest.mock import MagicMock, patch

from device.gestures import GestureExecutor
from game_profile import ViewportGeometry


class RecordingController:
    """Pointer stub that records events and can fail on the Nth call of a method.

    ``pressed`` mirrors the real button state: set on mouse_down (even if the
    call then fails), cleared only by a mouse_up that succeeds.
    """

    def __init__(self, fail_on: tuple[str, int] | None = None) -> None:
        self.fail_on = fail_on
        self.events: list[tuple] = []
        self.calls: dict[str, int] = {}
        self.pressed = False

    def _maybe_fail(self, method: str) -> None:
        self.calls[method] = self.calls.get(method, 0) + 1
        if self.fail_on == (method, self.calls[method]):
            raise RuntimeError(f"injected {method} failure")

    def mouse_move(self, x, y):
        self._maybe_fail("mouse_move")
        self.events.append(("move", x, y))

    def mouse_down(self):
        self.pressed = True
        self._maybe_fail("mouse_down")
        self.events.append(("down",))

    def mouse_up(self):
        self._maybe_fail("mouse_up")
        self.pressed = False
        self.events.append(("up",))

    def click(self, x, y):
        self._maybe_fail("click")
        self.events.append(("click", x, y))


class StuckButtonController(RecordingController):
    """Surface whose mouse-up never goes through."""

    def mouse_up(self):
        raise RuntimeError("mouse up rejected")


# Phase -> failing call. Moves: 1 approach, 2..16 travel, 17 hold.
DRAG_PHASES = {
    "approach": ("mouse_move", 1),
    "press": ("mouse_down", 1),
    "travel": ("mouse_move", 6),
    "hold": ("mouse_move", 17),
    "release": ("mouse_up", 1),
}


@patch("device.gestures.time.sleep")
class TestDrag(unittest.TestCase):
    """Tests for GestureExecutor.drag."""

    def test_full_sequence(self, _sleep):
        controller = RecordingController()
        gestures = GestureExecutor(controller, ViewportGeometry())

        self.assertTrue(gestures.drag(130, 690, 250, 150))
        self.assertFalse(gestures.button_held)

        events = controller.events
        # Reset clicks first, then approach, press
        self.assertEqual(events[0], ("click", 250, 150))
        self.assertEqual(events[1], ("click", 250, 400))
        self.assertEqual(events[2], ("move", 130, 690))
        self.assertEqual(events[3], ("down",))

        moves = [e for e in events[4:] if e[0] == "move"]
        self.assertEqual(len(moves), 16)  # 15 steps + hold
        self.assertEqual(moves[0], ("move", 138, 654))
        self.assertEqual(moves[14], ("move", 250, 150))
        self.assertEqual(moves[15], ("move", 250, 150))

        # Release then confirm click
        self.assertEqual(events[-2], ("up",))
        self.assertEqual(events[-1], ("click", 250, 300))

    def test_steps_are_linear(self, _sleep):
        controller = RecordingController()
        gestures = GestureExecutor(controller, ViewportGeometry())
        gestures.drag(0, 0, 150, 300)

        moves = [e for e in controller.events if e[0] == "move"][1:16]
        for i, (_, x, y) in enumerate(moves, start=1):
            self.assertEqual((x, y), (round(150 * i / 15), round(300 * i / 15)))

    def test_fault_in_every_phase_leaves_button_released(self, _sleep):
        for phase, fail_on in DRAG_PHASES.items():
            with self.subTest(phase=phase):
                controller = RecordingController(fail_on=fail_on)
                gestures = GestureExecutor(controller, ViewportGeometry())

                self.assertFalse(gestures.drag(130, 690, 250, 150))
                self.assertFalse(gestures.button_held)
                self.assertFalse(controller.pressed)

    def test_fault_triggers_reset_clicks(self, _sleep):
        controller = RecordingController(fail_on=("mouse_move", 6))
        gestures = GestureExecutor(controller, ViewportGeometry())
        gestures.drag(130, 690, 250, 150)

        self.assertEqual(controller.events[-3], ("up",))
        self.assertEqual(controller.events[-2], ("click", 250, 150))
        self.assertEqual(controller.events[-1], ("click", 250, 400))

    def test_stuck_button_stays_reported(self, _sleep):
        controller = StuckButtonController()
        gestures = GestureExecutor(controller, ViewportGeometry())

        self.assertFalse(gestures.drag(130, 690, 250, 150))
        self.assertTrue(controller.pressed)
        self.assertTrue(gestures.button_held)
        self.assertFalse(gestures.release())

    def test_custom_step_count(self, _sleep):
        controller = RecordingController()
        gestures = GestureExecutor(controller, ViewportGeometry(), drag_steps=4)
        gestures.drag(0, 0, 40, 40)
        moves = [e for e in controller.events if e[0] == "move"]
        self.assertEqual(len(moves), 6)  # approach + 4 steps + hold


@patch("device.gestures.time.sleep")
class TestClicks(unittest.TestCase):
    """Tests for click, click_many and reset."""

    def test_click_failure_is_reported(self, _sleep):
        controller = MagicMock()
        controller.click.side_effect = RuntimeError("Target closed")
        gestures = GestureExecutor(controller, ViewportGeometry())
        self.assertFalse(gestures.click(10, 20))

    def test_click_many_counts_successes(self, _sleep):
        controller = MagicMock()
        controller.click.side_effect = [None, RuntimeError("boom"), None]
        gestures = GestureExecutor(controller, ViewportGeometry())
        self.assertEqual(gestures.click_many([(1, 1), (2, 2), (3, 3)]), 2)
        self.assertEqual(controller.click.call_count, 3)

    def test_reset_releases_held_button(self, _sleep):
        controller = MagicMock()
        gestures = GestureExecutor(controller, ViewportGeometry())
        gestures.button_held = True

        gestures.reset()

        controller.mouse_up.assert_called_once()
        self.assertFalse(gestures.button_held)
        self.assertEqual(controller.click.call_count, 2)

    def test_reset_never_raises(self, _sleep):
        controller = MagicMock()
        controller.mouse_up.side_effect = RuntimeError("boom")
        controller.click.side_effect = RuntimeError("boom")
        gestures = GestureExecutor(controller, ViewportGeometry())
        gestures.button_held = True

        gestures.reset()
        # The failed mouse-up is not reported as a release
        self.assertTrue(gestures.button_held)
        self.assertEqual(controller.click.call_count, 2)

    def test_release_without_press_is_noop(self, _sleep):
        controller = MagicMock()
        gestures = GestureExecutor(controller, ViewportGeometry())
        self.assertTrue(gestures.release())
        controller.mouse_up.assert_not_called()


if __name__ == "__main__":
    unittest.main()
