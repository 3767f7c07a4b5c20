"""Game State - Per-decision snapshots, per-battle estimates, run reports."""

import logging
from dataclasses import dataclass, field, fields, asdict
from datetime import datetime

import config

logger = logging.getLogger(__name__)


@dataclass
class PopupState:
    """One reading of a map location popup.

    ``attempts`` is the first number of the popup's ``<int> / <int>`` ratio;
    the game counts it down, so a positive value means a play is available.
    """
    is_open: bool = False
    location: str | None = None
    attempts: int = 0
    max_attempts: int = 0
    can_play: bool = False
    is_locked: bool = False
    exhausted: bool = False


@dataclass
class BattlePhase:
    """Turn / end-of-battle facts from one perception pass."""
    is_player_turn: bool = False
    is_battle_over: bool = False

    @property
    def is_active(self) -> bool:
        return self.is_player_turn and not self.is_battle_over


class TurnEstimate:
    """Local energy / hand-size counters for one battle.

    Not ground truth: they only bound how many plays are attempted before
    the turn is yielded.
    """

    def __init__(self, full_energy: int = None,
                 full_hand_size: int = None) -> None:
        self.full_energy = full_energy or config.FULL_ENERGY
        self.full_hand_size = full_hand_size or config.FULL_HAND_SIZE
        self.energy = self.full_energy
        self.hand_size = self.full_hand_size

    @property
    def exhausted(self) -> bool:
        return self.energy <= 0

    def record_play(self) -> None:
        """A play was confirmed: one less energy, one less card (min 1)."""
        self.energy -= 1
        self.hand_size = max(1, self.hand_size - 1)

    def end_turn(self) -> None:
        """The turn system refills energy and hand."""
        self.energy = self.full_energy
        self.hand_size = self.full_hand_size

    def __repr__(self) -> str:
        return f"TurnEstimate(energy={self.energy}, hand_size={self.hand_size})"


@dataclass
class TurnReport:
    """Outcome of one Turn Engine invocation."""
    rounds: int = 0
    cards_played: int = 0
    damage: int = 0
    turns_ended: int = 0


@dataclass
class BattleReport:
    """Outcome of one supervised battle."""
    location: str = ""
    turns: int = 0
    cards_played: int = 0
    damage: int = 0
    timed_out: bool = False
    result_dismissed: bool = False


@dataclass
class SessionReport:
    """Outcome of one map session, persisted as JSON."""
    battles: int = 0
    per_location: dict[str, int] = field(default_factory=dict)
    skipped: dict[str, str] = field(default_factory=dict)
    cards_played: int = 0
    damage: int = 0
    started_at: str = ""
    finished_at: str = ""
    success: bool = False
    error: str | None = None

    def record_battle(self, report: BattleReport) -> None:
        self.battles += 1
        self.per_location[report.location] = self.per_location.get(report.location, 0) + 1
        self.cards_played += report.cards_played
        self.damage += report.damage

    def start(self) -> None:
        self.started_at = datetime.now().isoformat()

    def finish(self, success: bool, error: str | None = None) -> None:
        self.finished_at = datetime.now().isoformat()
        self.success = success
        self.error = error

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SessionReport":
        """Rebuild a report; unknown keys are dropped."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def summary(self) -> str:
        """One-line summary for the console."""
        parts = [f"{name}={count}" for name, count in self.per_location.items()]
        where = ", ".join(parts) if parts else "none"
        return (f"{self.battles} battles ({where}), "
                f"{self.cards_played} cards, {self.damage} damage")
