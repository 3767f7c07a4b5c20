"""Map Session Tests - per-location loop, skip reasons, play cap."""

import unittest
from unittest.mock import MagicMock, patch

from brain.map_session import MapSession, SessionOptions
from state.game_state import BattleReport, PopupState


class FakeWorld:
    """Map stub: each location has a popup counter spent by every battle.

    Locations missing from ``attempts`` open no popup; those in ``locked``
    open a locked one. ``stuck`` keeps the counter from ever dropping.
    """

    def __init__(self, attempts: dict[str, int], locked=(), stuck: bool = False) -> None:
        self.attempts = dict(attempts)
        self.locked = set(locked)
        self.stuck = stuck
        self.current: str | None = None

        self.runner = MagicMock()
        self.runner.open_location.side_effect = self.open_location
        self.observer = MagicMock()
        self.observer.detect_popup.side_effect = self.detect_popup
        self.supervisor = MagicMock()
        self.supervisor.run_battle.side_effect = self.run_battle

    def open_location(self, location):
        self.current = location
        return True

    def detect_popup(self):
        if self.current not in self.attempts:
            return PopupState()
        left = self.attempts[self.current]
        locked = self.current in self.locked
        return PopupState(
            is_open=True, location=self.current,
            attempts=left, max_attempts=3,
            can_play=left > 0 and not locked,
            is_locked=locked, exhausted=left == 0,
        )

    def run_battle(self, location):
        if not self.stuck:
            self.attempts[location] -= 1
        return BattleReport(location=location, cards_played=4, damage=40)

    def session(self, **options):
        return MapSession(
            self.observer, self.runner, self.supervisor, SessionOptions(**options)
        )


@patch("brain.map_session.time.sleep")
class TestMapSession(unittest.TestCase):
    """Tests for brain.map_session.MapSession.run."""

    def test_spends_every_attempt(self, _sleep):
        world = FakeWorld({"TRAINING": 3})
        report = world.session(map_order=["TRAINING", "FOREST"]).run()

        self.assertEqual(world.runner.press_play.call_count, 3)
        self.assertEqual(world.supervisor.run_battle.call_count, 3)
        opened = [c.args[0] for c in world.runner.open_location.call_args_list]
        self.assertEqual(opened, ["TRAINING"] * 4 + ["FOREST"])

        self.assertTrue(report.success)
        self.assertEqual(report.battles, 3)
        self.assertEqual(report.per_location, {"TRAINING": 3})
        self.assertEqual(report.cards_played, 12)
        self.assertEqual(report.damage, 120)
        self.assertEqual(report.skipped, {"FOREST": "no_popup"})

    def test_popup_closed_once_per_location(self, _sleep):
        world = FakeWorld({"TRAINING": 2, "FOREST": 1})
        world.session(map_order=["TRAINING", "FOREST"]).run()
        self.assertEqual(world.runner.close_popup.call_count, 2)

    def test_locked_location_skipped(self, _sleep):
        world = FakeWorld({"CASTLE": 3}, locked={"CASTLE"})
        report = world.session(map_order=["CASTLE"]).run()

        world.runner.press_play.assert_not_called()
        self.assertEqual(report.skipped, {"CASTLE": "locked"})

    def test_exhausted_location_skipped(self, _sleep):
        world = FakeWorld({"BRIDGE": 0})
        report = world.session(map_order=["BRIDGE"]).run()

        world.runner.press_play.assert_not_called()
        self.assertEqual(report.skipped, {"BRIDGE": "exhausted"})

    def test_play_cap_bounds_stuck_counter(self, _sleep):
        world = FakeWorld({"CAVES": 2}, stuck=True)
        report = world.session(map_order=["CAVES"], max_plays_per_location=4).run()

        self.assertEqual(world.supervisor.run_battle.call_count, 4)
        self.assertEqual(report.per_location, {"CAVES": 4})

    def test_auto_battle_disabled(self, _sleep):
        world = FakeWorld({"TRAINING": 3})
        report = world.session(auto_battle=False).run()

        world.runner.navigate_to_map.assert_not_called()
        world.runner.open_location.assert_not_called()
        self.assertTrue(report.success)
        self.assertEqual(report.battles, 0)

    def test_returns_to_map_after_each_battle(self, _sleep):
        world = FakeWorld({"TRAINING": 2})
        world.session(map_order=["TRAINING"]).run()
        # Once at session start, once after every battle
        self.assertEqual(world.runner.navigate_to_map.call_count, 3)


if __name__ == "__main__":
    unittest.main()
