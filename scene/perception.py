"""Text Perception - Derive game state facts from the page's visible text.

Every query takes a fresh reading of the DOM text; nothing is cached across
decisions.
"""

import re
import logging

from state.game_state import PopupState, BattlePhase
from .base import BaseObserver

logger = logging.getLogger(__name__)

RATIO_RE = re.compile(r"(\d+)\s*/\s*(\d+)")
HP_RATIO_RE = re.compile(r"(\d{1,5})\s*/\s*(\d{1,5})")
HP_LABEL_RE = re.compile(r"HP[:\s]*(\d{1,5})", re.IGNORECASE)


class TextPerception(BaseObserver):
    """Scan the full visible text (upper-cased) for known markers.

    Hit points are matched by a loose ratio pattern. Any other ``a / b`` on
    the page (reward counters, attempt counters) matches as well and can
    make a play look confirmed when it was not.
    """

    POPUP_MARKERS = ["DAILY REWARD LIMIT"]
    EXHAUSTED_MARKERS = ["REWARDS WILL RETURN"]

    # Priority order for resolving the popup's location name
    LOCATIONS = [
        "TRAINING", "FOREST", "BRIDGE", "CAVES",
        "GHOST TOWN", "MOUNTAIN", "CASTLE",
    ]

    TURN_MARKER = "END TURN"
    TERMINAL_MARKERS = [
        "VICTORY", "DEFEAT", "YOU WIN", "YOU WON", "YOU LOSE", "YOU LOST",
    ]
    CONTINUE_MARKER = "CONTINUE"
    CONTINUE_COMPANIONS = ["YOUR DAMAGE", "REWARDS"]
    # Both visible without END TURN: the view fell back to the map
    MAP_MARKERS = ["TRAINING", "FOREST"]

    # Any of these means the player can no longer act
    INACTIVE_MARKERS = [
        "YOU WON", "YOU LOST", "VICTORY", "DEFEAT", "CONTINUE", "YOUR DAMAGE",
    ]
    RESULT_MARKERS = ["CONTINUE", "YOU WON", "YOU LOST", "YOUR DAMAGE"]

    PLAY_LABEL = "PLAY"
    LOCKED_LABEL = "LOCKED"

    def __init__(self, controller, game_profile=None) -> None:
        self.controller = controller
        self.popup_markers = self.POPUP_MARKERS
        self.terminal_markers = self.TERMINAL_MARKERS
        self.result_markers = self.RESULT_MARKERS
        self.locations = self.LOCATIONS
        self.inactive_markers = self.INACTIVE_MARKERS
        if game_profile is not None:
            self.popup_markers = game_profile.popup_markers or self.POPUP_MARKERS
            self.terminal_markers = game_profile.terminal_markers or self.TERMINAL_MARKERS
            self.result_markers = game_profile.result_markers or self.RESULT_MARKERS
            self.locations = game_profile.map_order or self.LOCATIONS
            # A custom terminal marker must also stop card play
            self.inactive_markers = self.INACTIVE_MARKERS + [
                marker for marker in game_profile.terminal_markers
                if marker not in self.INACTIVE_MARKERS
            ]

    def _raw_text(self) -> str:
        return self.controller.body_text() or ""

    def _text(self) -> str:
        return self._raw_text().upper()

    def detect_popup(self) -> PopupState:
        """Read the location popup: name, attempts and whether PLAY is usable."""
        try:
            raw = self._raw_text()
            text = raw.upper()
            if not any(marker in text for marker in self.popup_markers):
                return PopupState(is_open=False)

            location = next((name for name in self.locations if name in text), None)

            attempts, max_attempts = 0, 0
            match = RATIO_RE.search(raw)
            if match:
                attempts, max_attempts = int(match.group(1)), int(match.group(2))

            labels = self.controller.element_labels()
            has_play = self.PLAY_LABEL in labels
            is_locked = self.LOCKED_LABEL in labels
            exhausted = (
                any(marker in text for marker in self.EXHAUSTED_MARKERS)
                or attempts == 0
            )

            popup = PopupState(
                is_open=True,
                location=location,
                attempts=attempts,
                max_attempts=max_attempts,
                can_play=has_play and not is_locked and attempts > 0,
                is_locked=is_locked,
                exhausted=exhausted,
            )
            logger.debug(f"Popup: {popup}")
            return popup
        except Exception as e:
            logger.error(f"Failed to get popup details: {e}")
            return PopupState(is_open=False)

    def detect_battle_phase(self) -> BattlePhase:
        try:
            text = self._text()
        except Exception as e:
            logger.debug(f"Battle phase read failed: {e}")
            return BattlePhase()

        player_turn = self.TURN_MARKER in text
        over = any(marker in text for marker in self.terminal_markers)
        if not over and self.CONTINUE_MARKER in text:
            over = any(marker in text for marker in self.CONTINUE_COMPANIONS)
        if not over and not player_turn:
            over = all(marker in text for marker in self.MAP_MARKERS)

        return BattlePhase(is_player_turn=player_turn, is_battle_over=over)

    def detect_monster_hp(self) -> int | None:
        try:
            raw = self._raw_text()
        except Exception as e:
            logger.debug(f"Monster HP read failed: {e}")
            return None

        for pattern in (HP_RATIO_RE, HP_LABEL_RE):
            match = pattern.search(raw)
            if match:
                return int(match.group(1))
        return None

    def is_battle_active(self) -> bool:
        # Unreadable page: keep going, max_rounds still bounds the loop
        try:
            text = self._text()
        except Exception as e:
            logger.debug(f"Battle activity read failed: {e}")
            return True
        if self.TURN_MARKER not in text:
            return False
        return not any(marker in text for marker in self.inactive_markers)

    def is_result_screen(self) -> bool:
        try:
            text = self._text()
        except Exception as e:
            logger.debug(f"Result screen read failed: {e}")
            return False
        return any(marker in text for marker in self.result_markers)

    def is_game_ready(self, markers: list[str]) -> bool:
        try:
            text = self._text()
        except Exception as e:
            # Page may still be navigating
            logger.debug(f"Ready check failed: {e}")
            return False
        return any(marker in text for marker in markers)
