"""NKbot - Browser battle automation for Neura Knights.

Session flow:
  launch browser -> inject auth token -> home ->
    MAP -> for each location (easy to hard):
      open popup -> read attempts ->
        PLAY -> battle (turns: drag cards, verify by HP, end turn) ->
        dismiss result -> back to MAP -> reopen -> repeat while attempts left
  -> save session report
"""

import os
import sys
import time
import logging
import argparse

import config
from game_profile import GameProfile, load_game_profile, list_games
from device.browser_controller import BrowserController
from device.gestures import GestureExecutor
from device.session import bootstrap_session
from scene.perception import TextPerception
from state.game_state import SessionReport
from state.persistence import SessionPersistence
from executor.action_runner import ActionRunner
from executor.result_checker import ResultChecker
from brain.turn_engine import TurnEngine
from brain.battle_supervisor import BattleSupervisor
from brain.map_session import MapSession, SessionOptions
from utils.logger import GameLogger

logger = logging.getLogger(__name__)

TOKEN_ENV = "NKBOT_TOKEN"


class BattleBot:
    """Wire the layers together for one account session.

    Layers:
    1. Device:    browser_controller -> gestures
    2. Scene:     perception (DOM text)
    3. Executor:  action_runner, result_checker
    4. Brain:     turn_engine -> battle_supervisor -> map_session
    """

    def __init__(self, game_profile: GameProfile | None = None,
                 options: SessionOptions | None = None,
                 game_logger: GameLogger | None = None,
                 controller: BrowserController | None = None) -> None:
        self.profile = game_profile or GameProfile()
        self.options = options or SessionOptions(map_order=list(self.profile.map_order))
        self.game_logger = game_logger
        geometry = self.profile.geometry

        # Device layer
        self.controller = controller or BrowserController(geometry)
        self.gestures = GestureExecutor(self.controller, geometry)

        # Scene layer
        self.perception = TextPerception(self.controller, game_profile=self.profile)

        # Executor layer
        self.runner = ActionRunner(self.controller, self.gestures, geometry)
        self.checker = ResultChecker(self.perception)

        # Brain layer
        self.engine = TurnEngine(
            self.perception, self.gestures, self.runner,
            geometry=geometry, checker=self.checker,
        )
        self.supervisor = BattleSupervisor(
            self.perception, self.engine, self.runner, self.gestures,
            geometry=geometry, controller=self.controller,
            game_logger=game_logger,
        )
        self.session = MapSession(
            self.perception, self.runner, self.supervisor, self.options,
        )

    def run(self, token: str, headless: bool = False) -> SessionReport:
        """Launch, authenticate and play. Never raises; failures land in the report."""
        report = SessionReport()
        report.start()
        try:
            self.controller.launch(headless=headless, user_agent=self.profile.user_agent)
            bootstrap_session(self.controller, self.perception, token, self.profile)
            time.sleep(2)
            report = self.session.run()
        except Exception as e:
            logger.error(f"Battle automation failed: {e}")
            if self.game_logger is not None:
                self.game_logger.log_error(str(e), self._safe_screenshot())
            report.finish(success=False, error=str(e))
        finally:
            self.controller.close()
        return report

    def _safe_screenshot(self):
        if self.controller.page is None:
            return None
        try:
            return self.controller.screenshot()
        except Exception as e:
            logger.debug(f"Error screenshot failed: {e}")
            return None


def parse_maps(value: str, known: list[str]) -> list[str]:
    """Parse a comma separated location list; every name must be in ``known``."""
    names = [part.strip().upper() for part in value.split(",") if part.strip()]
    unknown = [name for name in names if name not in known]
    if unknown:
        raise argparse.ArgumentTypeError(
            f"Unknown map(s): {', '.join(unknown)} (known: {', '.join(known)})"
        )
    return names


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="NKbot - Neura Knights browser battle automation",
    )
    parser.add_argument(
        "--token", type=str, default=os.environ.get(TOKEN_ENV),
        help=f"Auth token (default: ${TOKEN_ENV})"
    )
    parser.add_argument(
        "--game", type=str, default=config.ACTIVE_GAME,
        help="Game profile to load (default: %(default)s)"
    )
    parser.add_argument(
        "--headless", action="store_true",
        help="Run the browser without a window"
    )
    parser.add_argument(
        "--no-battle", action="store_true",
        help="Log in only, skip the map battle session"
    )
    parser.add_argument(
        "--maps", type=str, default="",
        help="Comma separated locations to visit (default: all, easy to hard)"
    )
    parser.add_argument(
        "--max-plays", type=int, default=config.MAX_PLAYS_PER_LOCATION,
        help="Upper bound on battles per location (default: %(default)s)"
    )
    parser.add_argument(
        "--session-file", type=str, default=config.SESSION_FILE,
        help="Where to write the session report (default: %(default)s)"
    )
    parser.add_argument(
        "--list-games", action="store_true",
        help="List available game profiles and exit"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug console output")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    games_dir = config.GAMES_DIR
    if args.list_games:
        for game_id in list_games(games_dir):
            print(game_id)
        return 0

    if not args.token:
        parser.error(f"an auth token is required (--token or ${TOKEN_ENV})")

    game_logger = GameLogger(config.LOG_DIR, verbose=args.verbose)

    try:
        game_profile = load_game_profile(args.game, games_dir)
    except FileNotFoundError:
        logger.warning(f"Game profile '{args.game}' not found, using defaults")
        game_profile = GameProfile()

    map_order = list(game_profile.map_order)
    if args.maps:
        try:
            map_order = parse_maps(args.maps, map_order)
        except argparse.ArgumentTypeError as e:
            parser.error(str(e))

    options = SessionOptions(
        auto_battle=not args.no_battle,
        map_order=map_order,
        max_plays_per_location=args.max_plays,
    )

    persistence = SessionPersistence(args.session_file)
    previous = persistence.load_report()
    if previous is not None:
        logger.info(f"Last session ({previous.finished_at or 'unfinished'}): {previous.summary()}")

    bot = BattleBot(game_profile, options, game_logger=game_logger)
    report = bot.run(args.token, headless=args.headless)

    persistence.save(report)
    game_logger.log_session(report)
    return 0 if report.success else 1


if __name__ == "__main__":
    sys.exit(main())
