"""Battle Supervisor - Run turns until the battle ends, then clear the result.

Flow per battle:
  wait for player turn (bounded) -> Turn Engine -> battle over? ->
    still player turn -> plain END TURN -> next turn
  -> dismiss the victory/defeat dialog (bounded retries + final click)
"""

import time
import logging

import config
from game_profile import ViewportGeometry
from state.game_state import TurnEstimate, BattleReport

logger = logging.getLogger(__name__)


class BattleSupervisor:
    """Drive one battle from load to dismissed result screen."""

    def __init__(self, observer, turn_engine, action_runner, gestures,
                 geometry: ViewportGeometry | None = None,
                 max_turns: int = None,
                 max_wait_for_turn: int = None,
                 max_dismiss_retries: int = None,
                 controller=None,
                 game_logger=None) -> None:
        self.observer = observer
        self.engine = turn_engine
        self.runner = action_runner
        self.gestures = gestures
        self.geometry = geometry or ViewportGeometry()
        self.max_turns = max_turns or config.MAX_TURNS_PER_BATTLE
        self.max_wait_for_turn = max_wait_for_turn or config.MAX_WAIT_FOR_TURN
        self.max_dismiss_retries = max_dismiss_retries or config.MAX_DISMISS_RETRIES
        self.controller = controller
        self.game_logger = game_logger

    def run_battle(self, location: str = "") -> BattleReport:
        """Play a battle that has just been launched."""
        logger.info("Battle started!")
        report = BattleReport(location=location)
        estimate = TurnEstimate()

        time.sleep(config.BATTLE_LOAD_WAIT)

        while report.turns < self.max_turns:
            if self._is_over():
                logger.info("Battle completed!")
                break

            if not self._wait_for_player_turn():
                if self._is_over():
                    logger.info("Battle completed during enemy turn!")
                    break
                logger.warning("Timed out waiting for player turn")
                report.timed_out = True
                self._log_recovery("turn_timeout", "player turn never came")
                break

            report.turns += 1
            logger.info(f"Turn {report.turns}")

            turn = self.engine.play_turn(estimate)
            report.cards_played += turn.cards_played
            report.damage += turn.damage

            # The enemy may have died during our plays
            if self._is_over():
                logger.info("Battle won after playing cards!")
                break

            if self.observer.detect_battle_phase().is_player_turn:
                self.runner.end_turn()

        report.result_dismissed = self.dismiss_result_screen()
        return report

    def _is_over(self) -> bool:
        return self.observer.detect_battle_phase().is_battle_over

    def _wait_for_player_turn(self) -> bool:
        """Poll once per second. False on timeout or when the battle ends."""
        for _ in range(self.max_wait_for_turn):
            phase = self.observer.detect_battle_phase()
            if phase.is_battle_over:
                return False
            if phase.is_player_turn:
                return True
            time.sleep(1)
        return self.observer.detect_battle_phase().is_player_turn

    def dismiss_result_screen(self) -> bool:
        """Click through the victory/defeat dialog.

        Returns True if the dialog was seen to clear, False if the
        retries ran out and only the final forced click was made.
        """
        time.sleep(3)
        logger.info("Looking for CONTINUE button...")
        candidates = self.geometry.points("continue_candidates")

        for retry in range(1, self.max_dismiss_retries + 1):
            self.gestures.click_many(candidates, pause=0.5)
            time.sleep(2)

            if not self.observer.is_result_screen():
                logger.info("CONTINUE clicked successfully")
                return True

            logger.info(f"Retry {retry}/{self.max_dismiss_retries} - CONTINUE still visible")

        x, y = self.geometry.point("continue_final")
        self.gestures.click(x, y)
        time.sleep(2)
        logger.info("Clicked CONTINUE (final attempt)")
        self._log_recovery("dismiss_forced", "result screen still visible after retries")
        return False

    def _log_recovery(self, event: str, details: str) -> None:
        if self.game_logger is None:
            return
        screenshot = None
        if self.controller is not None:
            try:
                screenshot = self.controller.screenshot()
            except Exception as e:
                logger.debug(f"Screenshot for '{event}' failed: {e}")
        self.game_logger.log_recovery(event, details, screenshot)
