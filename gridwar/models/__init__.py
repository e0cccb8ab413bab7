"""Data models for Grid War."""

from .base import Base
from .board import Board, BoardError
from .config import RulesConfig
from .game import GameState, Winner
from .player import Player
from .resource_node import ResourceNode
from .unit import UNIT_STATS, Unit, UnitStats, UnitType

__all__ = [
    "Base",
    "Board",
    "BoardError",
    "GameState",
    "Player",
    "ResourceNode",
    "RulesConfig",
    "Unit",
    "UnitStats",
    "UnitType",
    "UNIT_STATS",
    "Winner",
]
