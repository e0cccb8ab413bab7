"""Game engine components."""

from .events import EventBus, EventKind, GameEvent
from .game_engine import GameEngine
from .history import CommandHistory
from .map_generator import generate_map
from .results import CommandResult, RejectReason
from .turn_manager import TurnManager

__all__ = [
    "CommandHistory",
    "CommandResult",
    "EventBus",
    "EventKind",
    "GameEngine",
    "GameEvent",
    "RejectReason",
    "TurnManager",
    "generate_map",
]
