"""Map Session - Spend every location's battle attempts, easy to hard."""

import time
import logging
from dataclasses import dataclass, field

import config
from state.game_state import SessionReport

logger = logging.getLogger(__name__)


@dataclass
class SessionOptions:
    """Run switches, passed explicitly instead of module-level flags."""
    auto_battle: bool = True
    map_order: list[str] = field(default_factory=lambda: list(config.MAP_ORDER))
    max_plays_per_location: int = config.MAX_PLAYS_PER_LOCATION


class MapSession:
    """Visit each map location and battle until its attempts run out.

    The per-location loop ends when the popup reports no attempts left, PLAY
    is no longer usable, or ``max_plays_per_location`` is reached (covers a
    popup whose counter is misread and never drops).
    """

    def __init__(self, observer, action_runner, supervisor,
                 options: SessionOptions | None = None) -> None:
        self.observer = observer
        self.runner = action_runner
        self.supervisor = supervisor
        self.options = options or SessionOptions()

    def run(self) -> SessionReport:
        report = SessionReport()
        report.start()

        if not self.options.auto_battle:
            logger.info("Auto battle disabled, skipping map session")
            report.finish(success=True)
            return report

        logger.info("=== Starting Browser Battle Automation ===")
        self.runner.navigate_to_map()

        for location in self.options.map_order:
            self._run_location(location, report)

        logger.info(f"=== Battle Automation Complete: {report.battles} battles ===")
        report.finish(success=True)
        return report

    def _run_location(self, location: str, report: SessionReport) -> None:
        logger.info(f"Checking {location}...")
        self.runner.open_location(location)
        popup = self.observer.detect_popup()

        if not popup.is_open:
            logger.warning(f"{location}: No popup opened (might be locked)")
            report.skipped[location] = "no_popup"
            self.runner.close_popup()
            return

        if popup.is_locked:
            logger.info(f"{location}: Locked")
            report.skipped[location] = "locked"
            self.runner.close_popup()
            return

        if popup.exhausted or popup.attempts <= 0:
            logger.info(
                f"{location}: No attempts remaining "
                f"({popup.attempts}/{popup.max_attempts})"
            )
            report.skipped[location] = "exhausted"
            self.runner.close_popup()
            return

        logger.info(f"{location}: {popup.attempts}/{popup.max_attempts} attempts available")

        plays = 0
        while popup.can_play and popup.attempts > 0:
            if plays >= self.options.max_plays_per_location:
                logger.warning(
                    f"{location}: play limit {self.options.max_plays_per_location} reached"
                )
                break

            self.runner.press_play()
            time.sleep(3)
            battle = self.supervisor.run_battle(location)
            plays += 1
            report.record_battle(battle)
            logger.info(f"Completed battle {report.battles} on {location}")

            self.runner.navigate_to_map()
            self.runner.open_location(location)
            popup = self.observer.detect_popup()
            if not popup.can_play or popup.attempts <= 0:
                logger.info(f"{location}: All attempts exhausted")
                break

        self.runner.close_popup()
