"""Game state container."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from ..utils.constants import (
    DRAW,
    PHASES,
    PLAYER_IDS,
    STATUS_ENDED,
    STATUS_PLAYING,
    STATUS_READY,
)
from .base import Base
from .board import Board
from .config import RulesConfig
from .player import Player
from .resource_node import ResourceNode
from .unit import Unit

Winner = Union[int, str, None]  # Player id, DRAW, or None while unresolved


@dataclass
class GameState:
    """Aggregate root for one game.

    GameState exclusively owns players, units, bases, resource nodes and the
    board. Unit registration and removal go through the methods below so the
    board, the unit collection and player ownership stay consistent.
    """

    game_id: str
    config: RulesConfig = field(default_factory=RulesConfig)
    status: str = STATUS_READY  # "ready", "playing", or "ended"
    current_player: int = 1
    current_phase: str = "resource"
    turn_number: int = 1
    players: Dict[int, Player] = field(default_factory=dict)
    units: Dict[str, Unit] = field(default_factory=dict)
    bases: Dict[str, Base] = field(default_factory=dict)
    resource_nodes: Dict[str, ResourceNode] = field(default_factory=dict)
    board: Optional[Board] = None
    winner: Winner = None  # 1, 2, "draw", or None
    end_reason: Optional[str] = None  # e.g. "base_destroyed", "surrender"
    surrendered_player: Optional[int] = None
    draw_agreed: bool = False
    unit_counter: Dict[int, int] = field(
        default_factory=lambda: {pid: 0 for pid in PLAYER_IDS}
    )  # Unit ID generation

    def __post_init__(self):
        """Create the board if not provided and validate scalar fields."""
        if self.board is None:
            self.board = Board(self.config.grid_size, self.config.grid_size)
        if self.status not in (STATUS_READY, STATUS_PLAYING, STATUS_ENDED):
            raise ValueError(f"Invalid status: {self.status}")
        if self.current_player not in PLAYER_IDS:
            raise ValueError(f"Invalid current_player: {self.current_player} (must be 1 or 2)")
        if self.current_phase not in PHASES:
            raise ValueError(f"Invalid phase: {self.current_phase} (must be one of {PHASES})")
        if self.turn_number < 1:
            raise ValueError(f"Invalid turn_number: {self.turn_number} (must be >= 1)")
        if self.winner not in (None, DRAW, *PLAYER_IDS):
            raise ValueError(f"Invalid winner: {self.winner} (must be None, 1, 2, or 'draw')")

    # ----- status -----

    @property
    def is_playing(self) -> bool:
        return self.status == STATUS_PLAYING

    @property
    def is_ended(self) -> bool:
        return self.status == STATUS_ENDED

    @property
    def is_draw(self) -> bool:
        return self.winner == DRAW

    # ----- lookups -----

    def get_player(self, player_id: int) -> Optional[Player]:
        return self.players.get(player_id)

    def get_current_player(self) -> Player:
        return self.players[self.current_player]

    def get_base(self, player_id: int) -> Optional[Base]:
        """Return the player's base, destroyed or not."""
        for base in self.bases.values():
            if base.owner == player_id:
                return base
        return None

    def get_live_base(self, player_id: int) -> Optional[Base]:
        base = self.get_base(player_id)
        if base is None or base.destroyed:
            return None
        return base

    def get_entity_at(self, x: int, y: int) -> Optional[Union[Unit, Base]]:
        entity_id = self.board.get(x, y)
        if entity_id is None:
            return None
        if entity_id in self.units:
            return self.units[entity_id]
        return self.bases.get(entity_id)

    def get_unit_at(self, x: int, y: int) -> Optional[Unit]:
        entity = self.get_entity_at(x, y)
        return entity if isinstance(entity, Unit) else None

    def units_of(self, player_id: int) -> list[Unit]:
        return [unit for unit in self.units.values() if unit.owner == player_id]

    # ----- mutation -----

    def next_unit_id(self, player_id: int) -> str:
        """Return a fresh unit ID for a player, skipping any already in use."""
        while True:
            self.unit_counter[player_id] = self.unit_counter.get(player_id, 0) + 1
            unit_id = f"p{player_id}-{self.unit_counter[player_id]:03d}"
            if unit_id not in self.units and unit_id not in self.bases:
                return unit_id

    def add_base(self, base: Base) -> None:
        self.board.place(base.id, base.x, base.y)
        self.bases[base.id] = base

    def add_unit(self, unit: Unit) -> None:
        if unit.id in self.units or unit.id in self.bases:
            raise ValueError(f"Entity ID {unit.id} is already in use")
        self.board.place(unit.id, unit.x, unit.y)
        self.units[unit.id] = unit
        self.players[unit.owner].add_unit(unit.id)

    def relocate_unit(self, unit: Unit, x: int, y: int) -> None:
        self.board.relocate(unit.id, unit.x, unit.y, x, y)
        unit.move_to(x, y)

    def remove_unit(self, unit: Unit) -> None:
        self.board.remove(unit.id, unit.x, unit.y)
        del self.units[unit.id]
        self.players[unit.owner].remove_unit(unit.id)

    def clear_base(self, base: Base) -> None:
        """Take a destroyed base off the board, keeping its record."""
        self.board.remove(base.id, base.x, base.y)

    def live_entity_count(self) -> int:
        return len(self.units) + sum(1 for base in self.bases.values() if not base.destroyed)
