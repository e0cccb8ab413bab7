"""Command history with undo/redo.

This module handles:
1. Recording applied move, build and attack commands
2. Reverting moves (position, unit actions, player action) and builds
   (unit removed, energy refunded)
3. Replaying undone commands through the normal rules

Attacks are recorded but cannot be undone: damage and removals are final.
The history only spans the current phase; the engine clears it whenever
the phase changes, so an undo never crosses a budget reset.
"""

import logging
from dataclasses import dataclass
from typing import ClassVar, List, Optional, Union

from ..models.game import GameState
from ..utils.constants import HISTORY_LIMIT
from . import movement, production
from .events import EventBus, EventKind
from .results import CommandResult, RejectReason

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveRecord:
    """An applied move."""

    kind: ClassVar[str] = "move"
    reversible: ClassVar[bool] = True

    unit_id: str
    from_x: int
    from_y: int
    to_x: int
    to_y: int
    cost: int

    @classmethod
    def from_result(cls, result: CommandResult) -> "MoveRecord":
        payload = result.payload
        return cls(
            unit_id=payload["unitId"],
            from_x=payload["from"]["x"],
            from_y=payload["from"]["y"],
            to_x=payload["to"]["x"],
            to_y=payload["to"]["y"],
            cost=payload["cost"],
        )


@dataclass(frozen=True)
class BuildRecord:
    """An applied build."""

    kind: ClassVar[str] = "build"
    reversible: ClassVar[bool] = True

    unit_id: str
    unit_type: str
    player_id: int
    x: int
    y: int
    cost: int

    @classmethod
    def from_result(cls, result: CommandResult) -> "BuildRecord":
        payload = result.payload
        return cls(
            unit_id=payload["unitId"],
            unit_type=payload["unitType"],
            player_id=payload["playerId"],
            x=payload["position"]["x"],
            y=payload["position"]["y"],
            cost=payload["cost"],
        )


@dataclass(frozen=True)
class AttackRecord:
    """An applied attack. Kept only to block undoing past it."""

    kind: ClassVar[str] = "attack"
    reversible: ClassVar[bool] = False

    attacker_id: str
    target_id: str


Record = Union[MoveRecord, BuildRecord, AttackRecord]


class CommandHistory:
    """Bounded undo and redo stacks.

    Recording a new command discards everything that could be redone.
    When the undo stack exceeds its limit the oldest entry is dropped.
    """

    def __init__(self, limit: int = HISTORY_LIMIT):
        if limit <= 0:
            raise ValueError(f"Invalid history limit: {limit} (must be > 0)")
        self.limit = limit
        self._undo: List[Record] = []
        self._redo: List[Record] = []

    @property
    def undo_size(self) -> int:
        return len(self._undo)

    @property
    def redo_size(self) -> int:
        return len(self._redo)

    def can_undo(self) -> bool:
        return bool(self._undo) and self._undo[-1].reversible

    def can_redo(self) -> bool:
        return bool(self._redo)

    def record(self, entry: Record) -> None:
        self._push(entry)
        self._redo.clear()

    def peek_undo(self) -> Optional[Record]:
        return self._undo[-1] if self._undo else None

    def peek_redo(self) -> Optional[Record]:
        return self._redo[-1] if self._redo else None

    def mark_undone(self) -> None:
        self._redo.append(self._undo.pop())

    def mark_redone(self, entry: Record) -> None:
        """Move the top redo entry back, replaced by its re-applied record."""
        self._redo.pop()
        self._push(entry)

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    def _push(self, entry: Record) -> None:
        self._undo.append(entry)
        if len(self._undo) > self.limit:
            del self._undo[0]


def revert(state: GameState, bus: EventBus, entry: Record) -> CommandResult:
    """Undo one recorded command.

    Args:
        state: Current game state
        bus: Event channel for the commandUndone notification
        entry: Record on top of the undo stack

    Returns:
        CommandResult describing what was restored, or a rejection
    """
    if isinstance(entry, MoveRecord):
        return _revert_move(state, bus, entry)
    if isinstance(entry, BuildRecord):
        return _revert_build(state, bus, entry)
    return CommandResult.failure(RejectReason.IRREVERSIBLE, command=entry.kind)


def _revert_move(state: GameState, bus: EventBus, entry: MoveRecord) -> CommandResult:
    unit = state.units.get(entry.unit_id)
    if unit is None or unit.position != (entry.to_x, entry.to_y):
        return CommandResult.failure(RejectReason.UNKNOWN_UNIT, command=entry.kind, unitId=entry.unit_id)
    if not state.board.is_empty(entry.from_x, entry.from_y):
        return CommandResult.failure(RejectReason.OCCUPIED, command=entry.kind, unitId=entry.unit_id)

    state.relocate_unit(unit, entry.from_x, entry.from_y)
    unit.actions_used -= entry.cost
    state.players[unit.owner].actions_remaining += 1

    payload = {
        "command": entry.kind,
        "unitId": unit.id,
        "from": {"x": entry.to_x, "y": entry.to_y},
        "to": {"x": entry.from_x, "y": entry.from_y},
        "cost": entry.cost,
    }
    logger.debug(f"Undid move of {unit.id} back to ({entry.from_x}, {entry.from_y})")
    bus.emit(EventKind.COMMAND_UNDONE, **payload)
    return CommandResult.success(**payload)


def _revert_build(state: GameState, bus: EventBus, entry: BuildRecord) -> CommandResult:
    unit = state.units.get(entry.unit_id)
    if unit is None:
        return CommandResult.failure(RejectReason.UNKNOWN_UNIT, command=entry.kind, unitId=entry.unit_id)

    state.remove_unit(unit)
    player = state.players[entry.player_id]
    player.add_energy(entry.cost)
    player.units_built -= 1

    payload = {
        "command": entry.kind,
        "unitId": unit.id,
        "playerId": entry.player_id,
        "position": {"x": entry.x, "y": entry.y},
        "refund": entry.cost,
    }
    logger.debug(f"Undid build of {unit.id}, refunded {entry.cost} energy")
    bus.emit(EventKind.COMMAND_UNDONE, **payload)
    return CommandResult.success(**payload, energyRemaining=player.energy)


def replay(state: GameState, bus: EventBus, entry: Record) -> tuple[CommandResult, Optional[Record]]:
    """Re-apply an undone command under the normal rules.

    A replayed build gets a new unit ID, so the returned record (not the
    original one) belongs on the undo stack.

    Returns:
        (result, new record); the record is None when the replay was rejected
    """
    if isinstance(entry, MoveRecord):
        unit = state.units.get(entry.unit_id)
        if unit is None:
            return CommandResult.failure(RejectReason.UNKNOWN_UNIT, unitId=entry.unit_id), None
        result = movement.move_unit(state, bus, unit, entry.to_x, entry.to_y)
        new_entry = MoveRecord.from_result(result) if result.ok else None
    elif isinstance(entry, BuildRecord):
        result = production.create_unit(state, bus, entry.unit_type, entry.player_id, entry.x, entry.y)
        new_entry = BuildRecord.from_result(result) if result.ok else None
    else:
        return CommandResult.failure(RejectReason.IRREVERSIBLE, command=entry.kind), None

    if new_entry is not None:
        bus.emit(EventKind.COMMAND_REDONE, command=entry.kind, **result.payload)
    return result, new_entry
