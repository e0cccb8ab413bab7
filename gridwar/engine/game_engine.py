"""Command/query facade over one game.

GameEngine is what collaborators hold: they issue commands, subscribe to
events, run read-only queries, and take or restore snapshots. Nothing is
global; every engine owns its GameState and its EventBus.

Commands run to completion synchronously and answer with a CommandResult.
Queries return copies, never the live entities.
"""

import copy
import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Union

from ..models.base import Base
from ..models.config import RulesConfig
from ..models.game import GameState
from ..models.player import Player
from ..models.resource_node import ResourceNode
from ..models.unit import Unit, UnitType
from ..utils.serialization import deserialize_game, serialize_game
from . import combat, movement, production, resources
from .events import EventBus, EventKind, Handler
from .history import AttackRecord, BuildRecord, CommandHistory, MoveRecord, replay, revert
from .map_generator import generate_map
from .results import CommandResult, RejectReason, check_game_running
from .turn_manager import TurnManager
from .victory import check_victory

logger = logging.getLogger(__name__)


class GameEngine:
    """Entry point for commands, queries, events and snapshots."""

    def __init__(self, state: GameState, bus: Optional[EventBus] = None):
        self.state = state
        self.events = bus or EventBus()
        self.turns = TurnManager(state, self.events)
        self.history = CommandHistory()
        self._batch_depth = 0
        self._victory_pending = False

    @classmethod
    def new_game(
        cls, config: Optional[RulesConfig] = None, game_id: Optional[str] = None
    ) -> "GameEngine":
        """Create an engine around a freshly generated, not yet started game."""
        return cls(generate_map(config, game_id))

    @classmethod
    def from_snapshot(cls, data: dict[str, Any]) -> "GameEngine":
        """Restore an engine from a snapshot (see utils.serialization)."""
        return cls(deserialize_game(data))

    # =========================================================================
    # EVENTS & SNAPSHOTS
    # =========================================================================

    def subscribe(self, kind: EventKind, handler: Handler) -> None:
        self.events.subscribe(kind, handler)

    def unsubscribe(self, kind: EventKind, handler: Handler) -> bool:
        return self.events.unsubscribe(kind, handler)

    def snapshot(self) -> dict[str, Any]:
        return serialize_game(self.state)

    @contextmanager
    def batch(self) -> Iterator["GameEngine"]:
        """Run several commands with one victory evaluation at the end.

        Inside the block, damage and removals do not end the game; the
        pending check runs once when the outermost batch exits, so effects
        of the whole batch are arbitrated together.
        """
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._victory_pending:
                self._victory_pending = False
                check_victory(self.state, self.events)

    def _request_victory_check(self) -> None:
        if self._batch_depth > 0:
            self._victory_pending = True
        else:
            check_victory(self.state, self.events)

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def _precheck(self) -> Optional[RejectReason]:
        """Guards every mutating command runs before anything else."""
        if self.events.dispatching:
            return RejectReason.REENTRANT_COMMAND
        return check_game_running(self.state)

    def _lookup_unit(self, unit_id: str) -> tuple[Optional[Unit], Optional[CommandResult]]:
        reason = self._precheck()
        if reason is not None:
            return None, CommandResult.failure(reason, unitId=unit_id)
        unit = self.state.units.get(unit_id)
        if unit is None:
            return None, CommandResult.failure(RejectReason.UNKNOWN_UNIT, unitId=unit_id)
        return unit, None

    def start_game(self) -> CommandResult:
        if self.events.dispatching:
            return CommandResult.failure(RejectReason.REENTRANT_COMMAND)
        return self.turns.start_game()

    def advance_phase(self) -> CommandResult:
        reason = self._precheck()
        if reason is not None:
            return CommandResult.failure(reason)
        self.history.clear()
        return self.turns.advance_phase()

    def end_turn(self) -> CommandResult:
        reason = self._precheck()
        if reason is not None:
            return CommandResult.failure(reason)
        self.history.clear()
        return self.turns.end_turn()

    def create_unit(
        self, unit_type: Union[str, UnitType], player_id: int, x: int, y: int
    ) -> CommandResult:
        reason = self._precheck()
        if reason is not None:
            return CommandResult.failure(reason)
        result = production.create_unit(self.state, self.events, unit_type, player_id, x, y)
        if result.ok:
            self.history.record(BuildRecord.from_result(result))
        return result

    def move_unit(self, unit_id: str, x: int, y: int) -> CommandResult:
        unit, rejected = self._lookup_unit(unit_id)
        if rejected is not None:
            return rejected
        result = movement.move_unit(self.state, self.events, unit, x, y)
        if result.ok:
            self.history.record(MoveRecord.from_result(result))
        return result

    def attack_unit(self, unit_id: str, x: int, y: int) -> CommandResult:
        unit, rejected = self._lookup_unit(unit_id)
        if rejected is not None:
            return rejected
        result = combat.attack(self.state, self.events, unit, x, y)
        if result.ok:
            self.history.record(AttackRecord(attacker_id=unit.id, target_id=result.payload["targetId"]))
            self._request_victory_check()
        return result

    def gather_resource(self, unit_id: str) -> CommandResult:
        unit, rejected = self._lookup_unit(unit_id)
        if rejected is not None:
            return rejected
        result = resources.gather(self.state, self.events, unit)
        if result.ok and self.state.config.resource_victory_threshold is not None:
            self._request_victory_check()
        return result

    def player_surrender(self, player_id: int) -> CommandResult:
        reason = self._precheck()
        if reason is not None:
            return CommandResult.failure(reason, playerId=player_id)
        if player_id not in self.state.players:
            return CommandResult.failure(RejectReason.UNKNOWN_PLAYER, playerId=player_id)

        winner = 2 if player_id == 1 else 1
        self.state.surrendered_player = player_id
        logger.info(f"Player {player_id} surrendered in game {self.state.game_id}")
        self.events.emit(EventKind.PLAYER_SURRENDERED, surrenderedPlayer=player_id, winner=winner)
        self._request_victory_check()
        return CommandResult.success(surrenderedPlayer=player_id, winner=self.state.winner)

    def declare_draw(self) -> CommandResult:
        reason = self._precheck()
        if reason is not None:
            return CommandResult.failure(reason)

        self.state.draw_agreed = True
        logger.info(f"Draw declared in game {self.state.game_id}")
        self.events.emit(EventKind.DRAW_DECLARED, turnNumber=self.state.turn_number)
        self._request_victory_check()
        return CommandResult.success(winner=self.state.winner)

    def undo(self) -> CommandResult:
        """Revert the latest move or build of the current phase.

        Attacks cannot be undone, and nothing recorded before an attack can
        be reached until the phase changes.
        """
        reason = self._precheck()
        if reason is not None:
            return CommandResult.failure(reason)
        entry = self.history.peek_undo()
        if entry is None:
            return CommandResult.failure(RejectReason.NOTHING_TO_UNDO)
        result = revert(self.state, self.events, entry)
        if result.ok:
            self.history.mark_undone()
        return result

    def redo(self) -> CommandResult:
        """Re-apply the latest undone command, validated like a new one."""
        reason = self._precheck()
        if reason is not None:
            return CommandResult.failure(reason)
        entry = self.history.peek_redo()
        if entry is None:
            return CommandResult.failure(RejectReason.NOTHING_TO_REDO)
        result, new_entry = replay(self.state, self.events, entry)
        if new_entry is not None:
            self.history.mark_redone(new_entry)
        return result

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_unit_at(self, x: int, y: int) -> Optional[Unit]:
        return copy.deepcopy(self.state.get_unit_at(x, y))

    def get_entity_at(self, x: int, y: int) -> Optional[Union[Unit, Base]]:
        return copy.deepcopy(self.state.get_entity_at(x, y))

    def is_position_empty(self, x: int, y: int) -> bool:
        return self.state.board.is_empty(x, y)

    def get_valid_move_positions(self, unit_id: str) -> List[movement.MoveOption]:
        unit = self.state.units.get(unit_id)
        if unit is None:
            return []
        return movement.get_valid_moves(self.state, unit)

    def get_valid_attack_targets(self, unit_id: str) -> List[combat.TargetOption]:
        unit = self.state.units.get(unit_id)
        if unit is None:
            return []
        return combat.get_valid_targets(self.state, unit)

    def get_valid_placements(self, player_id: int) -> List[production.Placement]:
        return production.valid_placements(self.state, player_id)

    def get_player_units(self, player_id: int) -> List[Unit]:
        return copy.deepcopy(self.state.units_of(player_id))

    def get_player_base(self, player_id: int) -> Optional[Base]:
        """Return a copy of the player's base while it stands, else None."""
        return copy.deepcopy(self.state.get_live_base(player_id))

    def get_player(self, player_id: int) -> Optional[Player]:
        return copy.deepcopy(self.state.get_player(player_id))

    def get_resource_nodes(self) -> List[ResourceNode]:
        return copy.deepcopy(list(self.state.resource_nodes.values()))
