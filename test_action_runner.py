"""Action Runner Tests - named zones, map locations, END TURN fallbacks."""

import unittest
from unittest.mock import MagicMock, patch

from device.gestures import GestureExecutor
from executor.action_runner import ActionRunner
from game_profile import ViewportGeometry


def make_runner():
    controller = MagicMock()
    controller.click_text.return_value = False
    gestures = GestureExecutor(controller, ViewportGeometry())
    return ActionRunner(controller, gestures), controller


@patch("time.sleep")
class TestActionRunner(unittest.TestCase):

    def test_open_known_location(self, _sleep):
        runner, controller = make_runner()
        self.assertTrue(runner.open_location("CAVES"))
        controller.click.assert_called_once_with(39, 317)

    def test_open_unknown_location(self, _sleep):
        runner, controller = make_runner()
        self.assertFalse(runner.open_location("ATLANTIS"))
        controller.click.assert_not_called()

    def test_press_play_reports_click_failure(self, _sleep):
        runner, controller = make_runner()
        controller.click.side_effect = RuntimeError("Target closed")
        self.assertFalse(runner.press_play())

    def test_plain_end_turn(self, _sleep):
        runner, controller = make_runner()
        self.assertTrue(runner.end_turn())
        controller.click.assert_called_once_with(250, 777)
        controller.click_text.assert_not_called()

    def test_end_turn_in_battle_hits_every_candidate(self, _sleep):
        runner, controller = make_runner()
        self.assertTrue(runner.end_turn_in_battle())
        clicked = [c.args for c in controller.click.call_args_list]
        self.assertEqual(clicked, [(400, 750), (420, 760), (380, 740), (250, 777)])
        controller.click_text.assert_called_once_with("END TURN")

    def test_end_turn_in_battle_dom_fallback(self, _sleep):
        runner, controller = make_runner()
        controller.click.side_effect = RuntimeError("boom")
        controller.click_text.return_value = True
        self.assertTrue(runner.end_turn_in_battle())

    def test_end_turn_in_battle_nothing_worked(self, _sleep):
        runner, controller = make_runner()
        controller.click.side_effect = RuntimeError("boom")
        controller.click_text.side_effect = RuntimeError("boom")
        self.assertFalse(runner.end_turn_in_battle())


if __name__ == "__main__":
    unittest.main()
