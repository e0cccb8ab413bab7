"""Unit production during the build phase.

New units appear near their owner's base: within the placement radius
(Manhattan) of a live base, or within the wider fallback radius when every
cell of the normal radius is taken. Building spends energy, not actions.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from ..models.game import GameState
from ..models.unit import Unit, UnitType
from ..utils.distance import manhattan_distance
from .events import EventBus, EventKind
from .results import CommandResult, RejectReason, check_actor, check_game_running

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    """An empty cell near a base, with its Manhattan distance from the base."""

    x: int
    y: int
    distance: int


def _cells_around(state: GameState, cx: int, cy: int, radius: int) -> List[Placement]:
    cells = []
    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            distance = abs(dx) + abs(dy)
            if distance == 0 or distance > radius:
                continue
            x, y = cx + dx, cy + dy
            if state.board.is_empty(x, y):
                cells.append(Placement(x=x, y=y, distance=distance))
    return cells


def placement_radius(state: GameState, player_id: int) -> int:
    """Return the radius new units of this player may be placed within."""
    base = state.get_live_base(player_id)
    radius = state.config.placement_radius
    if base is not None and not _cells_around(state, base.x, base.y, radius):
        return state.config.max_placement_radius
    return radius


def valid_placements(state: GameState, player_id: int) -> List[Placement]:
    """List empty cells where the player could place a new unit.

    Args:
        state: Current game state
        player_id: Building player

    Returns:
        Cells sorted by distance from the base (closest first); each carries
        that distance. Empty if the player has no live base.
    """
    base = state.get_live_base(player_id)
    if base is None:
        return []
    cells = _cells_around(state, base.x, base.y, placement_radius(state, player_id))
    return sorted(cells, key=lambda cell: (cell.distance, cell.x, cell.y))


def cheapest_unit_cost() -> int:
    return min(unit_type.stats.cost for unit_type in UnitType)


def can_create_unit(
    state: GameState, unit_type: Union[str, UnitType], player_id: int, x: int, y: int
) -> Optional[RejectReason]:
    """Check whether a unit can be built at a cell.

    Returns:
        None if the build is legal, otherwise the rejection reason
    """
    reason = check_game_running(state)
    if reason is not None:
        return reason
    if player_id not in state.players:
        return RejectReason.UNKNOWN_PLAYER
    reason = check_actor(state, player_id, "build", needs_action=False)
    if reason is not None:
        return reason
    try:
        resolved = UnitType.parse(unit_type)
    except ValueError:
        return RejectReason.UNKNOWN_UNIT_TYPE
    if not state.board.in_bounds(x, y):
        return RejectReason.OUT_OF_BOUNDS
    if not state.board.is_empty(x, y):
        return RejectReason.OCCUPIED
    base = state.get_live_base(player_id)
    if base is None or manhattan_distance(base.x, base.y, x, y) > placement_radius(state, player_id):
        return RejectReason.OUTSIDE_PLACEMENT_RADIUS
    if state.players[player_id].energy < resolved.stats.cost:
        return RejectReason.INSUFFICIENT_ENERGY
    return None


def create_unit(
    state: GameState,
    bus: EventBus,
    unit_type: Union[str, UnitType],
    player_id: int,
    x: int,
    y: int,
) -> CommandResult:
    """Build a unit for a player.

    Args:
        state: Current game state
        bus: Event channel for the unitCreated notification
        unit_type: Roster entry to build (enum member or its name)
        player_id: Owning player, must be the current player
        x: Target X coordinate
        y: Target Y coordinate

    Returns:
        CommandResult with the new unit's ID and stats
    """
    reason = can_create_unit(state, unit_type, player_id, x, y)
    if reason is not None:
        logger.debug(f"Build of {unit_type} for player {player_id} at ({x}, {y}) rejected: {reason.value}")
        return CommandResult.failure(reason, unitType=str(getattr(unit_type, "value", unit_type)))

    resolved = UnitType.parse(unit_type)
    player = state.players[player_id]
    player.spend_energy(resolved.stats.cost)

    unit = Unit.create(state.next_unit_id(player_id), resolved, player_id, x, y)
    state.add_unit(unit)
    player.units_built += 1

    payload = {
        "unitId": unit.id,
        "unitType": resolved.value,
        "playerId": player_id,
        "position": {"x": x, "y": y},
        "health": unit.health,
        "cost": resolved.stats.cost,
    }
    logger.info(f"Player {player_id} built {resolved.value} {unit.id} at ({x}, {y})")
    bus.emit(EventKind.UNIT_CREATED, **payload)
    return CommandResult.success(**payload, energyRemaining=player.energy)
