"""Command results and the shared turn/ownership guards.

Expected domain failures are never raised: every command answers with a
CommandResult whose reason tells the caller why it was rejected.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..models.game import GameState
from ..utils.constants import STATUS_ENDED, STATUS_READY


class RejectReason(str, Enum):
    """Why a command was refused."""

    OUT_OF_BOUNDS = "out_of_bounds"
    OCCUPIED = "occupied"
    INSUFFICIENT_ACTIONS = "insufficient_actions"
    WRONG_PHASE = "wrong_phase"
    NOT_CURRENT_PLAYER = "not_current_player"
    INSUFFICIENT_ENERGY = "insufficient_energy"
    INVALID_TARGET = "invalid_target"
    NOT_ADJACENT = "not_adjacent"
    NO_RESOURCES = "no_resources"
    ON_COOLDOWN = "on_cooldown"
    GAME_OVER = "game_over"
    GAME_NOT_STARTED = "game_not_started"
    ALREADY_STARTED = "already_started"
    UNKNOWN_UNIT = "unknown_unit"
    UNKNOWN_UNIT_TYPE = "unknown_unit_type"
    UNKNOWN_PLAYER = "unknown_player"
    CANNOT_GATHER = "cannot_gather"
    OUTSIDE_PLACEMENT_RADIUS = "outside_placement_radius"
    REENTRANT_COMMAND = "reentrant_command"
    NOTHING_TO_UNDO = "nothing_to_undo"
    NOTHING_TO_REDO = "nothing_to_redo"
    IRREVERSIBLE = "irreversible"


@dataclass
class CommandResult:
    """Outcome of a command.

    Attributes:
        ok: True if the command was applied
        reason: Rejection reason when ok is False
        payload: Command-specific details (copies, never live entities)
    """

    ok: bool
    reason: Optional[RejectReason] = None
    payload: dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, **payload: Any) -> "CommandResult":
        return cls(ok=True, payload=payload)

    @classmethod
    def failure(cls, reason: RejectReason, **payload: Any) -> "CommandResult":
        return cls(ok=False, reason=reason, payload=payload)


def check_game_running(state: GameState) -> Optional[RejectReason]:
    if state.status == STATUS_ENDED:
        return RejectReason.GAME_OVER
    if state.status == STATUS_READY:
        return RejectReason.GAME_NOT_STARTED
    return None


def check_actor(
    state: GameState, owner: int, phase: str, needs_action: bool = True
) -> Optional[RejectReason]:
    """Common guard for commands acting on behalf of a player.

    Checks, in order: the game is running, the phase permits the command,
    the actor belongs to the current player, and (optionally) the player
    still has actions left this turn.
    """
    reason = check_game_running(state)
    if reason is not None:
        return reason
    if state.current_phase != phase:
        return RejectReason.WRONG_PHASE
    if owner != state.current_player:
        return RejectReason.NOT_CURRENT_PLAYER
    if needs_action and state.players[owner].actions_remaining <= 0:
        return RejectReason.INSUFFICIENT_ACTIONS
    return None
