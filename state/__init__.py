"""State management - snapshots, battle estimates, reports, and persistence."""

from .game_state import (
    PopupState, BattlePhase, TurnEstimate,
    TurnReport, BattleReport, SessionReport,
)
from .persistence import SessionPersistence
