"""Result Checker - Post-gesture confirmation that a card play took effect.

A drag completing mechanically says nothing about the game accepting it;
the only evidence used is a drop in the monster's hit points.
"""

import time
import logging
from dataclasses import dataclass

import config

logger = logging.getLogger(__name__)


@dataclass
class PlayCheck:
    """Verification outcome for one attempted card play."""
    success: bool
    hp_before: int | None = None
    hp_after: int | None = None

    @property
    def damage(self) -> int:
        if self.success:
            return self.hp_before - self.hp_after
        return 0


def verify_play(hp_before: int | None, hp_after: int | None) -> bool:
    """A play counts only if both readings exist and hit points dropped."""
    return hp_before is not None and hp_after is not None and hp_after < hp_before


class ResultChecker:
    """Verify card plays by re-reading monster hit points after a settle."""

    def __init__(self, observer, settle: float = None) -> None:
        self.observer = observer
        self.settle = config.VERIFY_SETTLE if settle is None else settle

    def check_play(self, hp_before: int | None) -> PlayCheck:
        """Wait for the hit animation, then compare against ``hp_before``."""
        time.sleep(self.settle)
        hp_after = self.observer.detect_monster_hp()
        check = PlayCheck(
            success=verify_play(hp_before, hp_after),
            hp_before=hp_before,
            hp_after=hp_after,
        )
        if check.success:
            logger.info(f"Damage dealt: {check.damage}")
        else:
            logger.debug(f"Play not confirmed (hp {hp_before} -> {hp_after})")
        return check
