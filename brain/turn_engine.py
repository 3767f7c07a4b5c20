"""Turn Engine - Play cards from estimated hand slots until the turn is spent.

Per round:
  scan slot -> drag to enemy -> verify by hit points ->
    confirmed     -> count the play, forget failures, rescan from the left
    not confirmed -> exclude the slot for this pass
  no confirmed play in a round -> end turn, refill the estimate

Hand size and energy are never observable, so slot positions come from a
local estimate. A confirmed play shrinks the hand and shifts every card,
which is why the scan restarts from the first slot instead of continuing.
"""

import time
import logging

import config
from game_profile import ViewportGeometry
from state.game_state import TurnEstimate, TurnReport
from executor.result_checker import ResultChecker

logger = logging.getLogger(__name__)

MAX_SLOT_ATTEMPTS = 2


class TurnEngine:
    """Round-based card play state machine for one player turn."""

    def __init__(self, observer, gestures, action_runner,
                 geometry: ViewportGeometry | None = None,
                 checker: ResultChecker | None = None,
                 max_rounds: int = None,
                 max_attempts_per_slot: int = None) -> None:
        self.observer = observer
        self.gestures = gestures
        self.runner = action_runner
        self.geometry = geometry or ViewportGeometry()
        self.checker = checker or ResultChecker(observer)
        self.max_rounds = max_rounds or config.MAX_ROUNDS_PER_TURN
        # One retry per slot at most
        self.max_attempts_per_slot = min(
            max_attempts_per_slot or config.MAX_ATTEMPTS_PER_SLOT, MAX_SLOT_ATTEMPTS
        )

    def play_turn(self, estimate: TurnEstimate) -> TurnReport:
        """Run up to ``max_rounds`` rounds while the battle stays active."""
        report = TurnReport()
        opening_hp = None
        try:
            self.gestures.click(*self.geometry.point("neutral"))
            time.sleep(0.5)

            opening_hp = self.observer.detect_monster_hp()
            logger.info(f"Turn started. Monster HP: {opening_hp if opening_hp is not None else 'Unknown'}")

            for round_index in range(self.max_rounds):
                if not self.observer.is_battle_active():
                    logger.info("Battle ended!")
                    break

                report.rounds += 1
                logger.info(
                    f"Round {round_index + 1} | Energy: ~{estimate.energy} "
                    f"| Est. Cards: {estimate.hand_size}"
                )

                played, interrupted = self._play_round(estimate, report)
                if interrupted:
                    break

                if played == 0:
                    logger.info("No card could be played - ending turn")
                    self.runner.end_turn_in_battle()
                    estimate.end_turn()
                    report.turns_ended += 1
                    logger.info(f"Turn ended. Energy refilled to {estimate.energy}.")
                    time.sleep(config.ENEMY_ANIMATION_WAIT)

                time.sleep(0.5)
        finally:
            self.gestures.release()

        closing_hp = self.observer.detect_monster_hp()
        if opening_hp is not None and closing_hp is not None:
            report.damage = opening_hp - closing_hp

        logger.info(f"Turn complete! Cards: {report.cards_played} | Damage: {report.damage}")
        return report

    def _play_round(self, estimate: TurnEstimate,
                    report: TurnReport) -> tuple[int, bool]:
        """One scan pass. Returns (confirmed plays, battle stopped mid-pass)."""
        failed: set[int] = set()
        played = 0

        while True:
            if estimate.exhausted:
                logger.info("Out of energy for this turn!")
                return played, False

            slots = self.geometry.slots_for(estimate.hand_size)
            slot = next((x for x in slots if x not in failed), None)
            if slot is None:
                logger.info(f"All {len(failed)} positions failed - cards are gray")
                return played, False

            if not self.observer.is_battle_active():
                return played, True

            if self._attempt_slot(slot, estimate):
                played += 1
                report.cards_played += 1
                logger.info(f"Card played from X={slot}! Cards left: ~{estimate.hand_size}")
                # Layout shifted: every remaining position is stale
                failed.clear()
            else:
                failed.add(slot)

    def _attempt_slot(self, slot_x: int, estimate: TurnEstimate) -> bool:
        """Drag the card at ``slot_x`` onto the enemy and verify the hit."""
        target_x, target_y = self.geometry.point("enemy_target")

        for attempt in range(1, self.max_attempts_per_slot + 1):
            if attempt > 1:
                logger.info(f"Retry {attempt}/{self.max_attempts_per_slot} at X={slot_x}")
                time.sleep(0.3)

            hp_before = self.observer.detect_monster_hp()
            if not self.gestures.drag(slot_x, self.geometry.card_y, target_x, target_y):
                continue

            if self.checker.check_play(hp_before).success:
                estimate.record_play()
                return True

        return False
