"""Base Observer - Abstract "observe current state" capability."""

from abc import ABC, abstractmethod

from state.game_state import PopupState, BattlePhase


class BaseObserver(ABC):
    """Abstract base for game-state perception.

    The battle logic only talks to this interface, so a structured game
    state backend can replace text scraping without touching it.
    Implementations must never raise; on failure they return the
    conservative default (closed popup, battle not over, hit points unknown).
    """

    @abstractmethod
    def detect_popup(self) -> PopupState:
        """Read the map location popup."""

    @abstractmethod
    def detect_battle_phase(self) -> BattlePhase:
        """Read whose turn it is and whether the battle has ended."""

    @abstractmethod
    def detect_monster_hp(self) -> int | None:
        """Best-effort monster hit points; None means unknown, not zero."""

    @abstractmethod
    def is_battle_active(self) -> bool:
        """True while the player can still act in this battle."""

    @abstractmethod
    def is_result_screen(self) -> bool:
        """True while the victory/defeat dialog is showing."""

    @abstractmethod
    def is_game_ready(self, markers: list[str]) -> bool:
        """True if any of ``markers`` is visible."""
