"""Brain - Decision layer: turn engine, battle supervisor, map session."""

from .turn_engine import TurnEngine
from .battle_supervisor import BattleSupervisor
from .map_session import MapSession, SessionOptions
