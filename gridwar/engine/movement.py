"""Unit movement under the Manhattan distance / action budget rule.

This module handles:
1. Validating a relocation (phase, ownership, bounds, occupancy, budget)
2. Enumerating every reachable empty cell with its exact cost
3. Executing a move: board update, action spend, unitMoved event

Movement ignores obstacles between the two cells; only the destination has
to be empty. A move either applies in full (relocation and full cost) or
leaves the state untouched.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..models.game import GameState
from ..models.unit import Unit
from ..utils.distance import manhattan_distance
from .events import EventBus, EventKind
from .results import CommandResult, RejectReason, check_actor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveOption:
    """A reachable destination.

    Attributes:
        x: Destination X coordinate
        y: Destination Y coordinate
        cost: Unit actions the move would spend (Manhattan distance)
    """

    x: int
    y: int
    cost: int


def can_move(state: GameState, unit: Unit, x: int, y: int) -> Optional[RejectReason]:
    """Check whether a unit may move to a cell.

    Args:
        state: Current game state
        unit: Unit to move
        x: Target X coordinate
        y: Target Y coordinate

    Returns:
        None if the move is legal, otherwise the rejection reason
    """
    reason = check_actor(state, unit.owner, "action")
    if reason is not None:
        return reason
    if not state.board.in_bounds(x, y):
        return RejectReason.OUT_OF_BOUNDS
    if not state.board.is_empty(x, y):
        return RejectReason.OCCUPIED
    if manhattan_distance(unit.x, unit.y, x, y) > unit.remaining_actions:
        return RejectReason.INSUFFICIENT_ACTIONS
    return None


def get_valid_moves(
    state: GameState, unit: Unit, budget: Optional[int] = None
) -> List[MoveOption]:
    """List every empty cell the unit can reach.

    Scans the bounding box of the budget and keeps cells whose Manhattan
    distance fits. Phase and ownership are not checked, so collaborators can
    preview moves at any time.

    Args:
        state: Current game state
        unit: Unit to evaluate
        budget: Action allowance to assume (defaults to the unit's remaining actions)

    Returns:
        Reachable cells ordered by x then y, each with its exact cost
    """
    allowance = unit.remaining_actions if budget is None else budget
    if allowance <= 0:
        return []

    board = state.board
    options = []
    for x in range(max(0, unit.x - allowance), min(board.width - 1, unit.x + allowance) + 1):
        for y in range(max(0, unit.y - allowance), min(board.height - 1, unit.y + allowance) + 1):
            if (x, y) == unit.position:
                continue
            cost = manhattan_distance(unit.x, unit.y, x, y)
            if cost <= allowance and board.is_empty(x, y):
                options.append(MoveOption(x=x, y=y, cost=cost))
    return options


def move_unit(state: GameState, bus: EventBus, unit: Unit, x: int, y: int) -> CommandResult:
    """Move a unit, charging the full Manhattan distance.

    The unit spends one action per cell travelled and the owning player
    spends one action from the per-turn budget.

    Args:
        state: Current game state
        bus: Event channel for the unitMoved notification
        unit: Unit to move
        x: Target X coordinate
        y: Target Y coordinate

    Returns:
        CommandResult with from/to/cost on success
    """
    reason = can_move(state, unit, x, y)
    if reason is not None:
        logger.debug(f"Move of {unit.id} to ({x}, {y}) rejected: {reason.value}")
        return CommandResult.failure(reason, unitId=unit.id)

    origin = {"x": unit.x, "y": unit.y}
    cost = manhattan_distance(unit.x, unit.y, x, y)

    state.relocate_unit(unit, x, y)
    unit.use_actions(cost)
    state.players[unit.owner].use_action()

    payload = {
        "unitId": unit.id,
        "from": origin,
        "to": {"x": x, "y": y},
        "cost": cost,
    }
    bus.emit(EventKind.UNIT_MOVED, **payload)
    return CommandResult.success(**payload, actionsUsed=unit.actions_used)
