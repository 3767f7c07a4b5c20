"""Action Runner - Named UI actions executed as gestures.

Translates semantic actions (open a map location, press PLAY, end the turn)
into clicks on the geometry's named zones, followed by the settle delay the
client needs before the next observation.
"""

import logging
import time

from device.gestures import GestureExecutor
from game_profile import ViewportGeometry
import config

logger = logging.getLogger(__name__)


class ActionRunner:
    """Execute named actions against fixed viewport zones.

    Every method returns True if its clicks were dispatched; none of them
    confirm the game reacted.
    """

    END_TURN_TEXT = "END TURN"

    def __init__(self, controller, gestures: GestureExecutor,
                 geometry: ViewportGeometry | None = None) -> None:
        self.controller = controller
        self.gestures = gestures
        self.geometry = geometry or gestures.geometry

    def click_zone(self, name: str, delay: float = 0.0) -> bool:
        """Click a named zone, then sleep ``delay`` seconds."""
        x, y = self.geometry.point(name)
        success = self.gestures.click(x, y)
        if delay > 0:
            time.sleep(delay)
        return success

    def navigate_to_map(self) -> bool:
        """Open the MAP tab in the bottom navigation bar."""
        logger.info("Navigating to MAP tab...")
        time.sleep(1)
        success = self.click_zone("map_tab", delay=3)
        if success:
            logger.info("Navigated to MAP tab")
        else:
            logger.error("Failed to navigate to MAP")
        return success

    def open_location(self, location: str) -> bool:
        """Click a map location; its popup needs a few seconds to open."""
        pos = self.geometry.map_position(location)
        if pos is None:
            logger.warning(f"Unknown map: {location}")
            return False

        logger.info(f"Clicking on {location} at {pos}...")
        success = self.gestures.click(*pos)
        time.sleep(3)
        return success

    def close_popup(self) -> bool:
        """Dismiss a location popup by clicking the map header."""
        return self.click_zone("popup_close", delay=2)

    def press_play(self) -> bool:
        logger.info(f"Clicking PLAY button at {self.geometry.point('play_button')}...")
        success = self.click_zone("play_button", delay=3)
        if not success:
            logger.error("Failed to click PLAY")
        return success

    def end_turn(self) -> bool:
        """Plain END TURN press, then wait for the enemy turn and new draw."""
        success = self.click_zone("end_turn")
        if success:
            logger.info("Clicked END TURN")
        time.sleep(5)
        return success

    def end_turn_in_battle(self) -> bool:
        """END TURN via every candidate position plus a DOM text click.

        The button drifts with layout, so all candidates are clicked; the DOM
        fallback covers positions none of them hit.
        """
        logger.info("Clicking END TURN...")
        clicked = self.gestures.click_many(self.geometry.points("end_turn_candidates"))

        dom_clicked = False
        try:
            dom_clicked = self.controller.click_text(self.END_TURN_TEXT)
        except Exception as e:
            logger.debug(f"END TURN DOM click failed: {e}")

        time.sleep(config.END_TURN_SETTLE)
        return clicked > 0 or dom_clicked
