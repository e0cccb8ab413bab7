"""Combat resolution.

This module handles:
1. Validating an attack (adjacency, hostility, action budgets)
2. Applying the fixed per-type damage to a unit or base
3. Removing destroyed units and flagging destroyed bases

There is no randomness: damage depends only on the attacker's type and is
the same against units and bases. Every attack costs exactly one attacker
action and one player action, whatever the target.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from ..models.base import Base
from ..models.game import GameState
from ..models.unit import UNIT_STATS, Unit, UnitType
from ..utils.constants import ATTACK_RANGE
from ..utils.distance import chebyshev_distance
from .events import EventBus, EventKind
from .results import CommandResult, RejectReason, check_actor

logger = logging.getLogger(__name__)

DAMAGE_TABLE: dict[UnitType, int] = {unit_type: stats.damage for unit_type, stats in UNIT_STATS.items()}

NEIGHBOUR_OFFSETS = [(dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if (dx, dy) != (0, 0)]


@dataclass(frozen=True)
class TargetOption:
    """An attackable neighbouring cell.

    Attributes:
        x: Target X coordinate
        y: Target Y coordinate
        target_id: ID of the unit or base in the cell
        target_type: "unit" or "base"
        damage: Damage the attack would deal
    """

    x: int
    y: int
    target_id: str
    target_type: str
    damage: int


def _target_type(entity: Union[Unit, Base]) -> str:
    return "unit" if isinstance(entity, Unit) else "base"


def can_attack(state: GameState, attacker: Unit, x: int, y: int) -> Optional[RejectReason]:
    """Check whether a unit may attack the entity in a cell.

    Args:
        state: Current game state
        attacker: Attacking unit
        x: Target X coordinate
        y: Target Y coordinate

    Returns:
        None if the attack is legal, otherwise the rejection reason
    """
    reason = check_actor(state, attacker.owner, "action")
    if reason is not None:
        return reason
    if not attacker.can_act():
        return RejectReason.INSUFFICIENT_ACTIONS
    return _check_target(state, attacker, x, y)


def _check_target(state: GameState, attacker: Unit, x: int, y: int) -> Optional[RejectReason]:
    if not state.board.in_bounds(x, y):
        return RejectReason.OUT_OF_BOUNDS
    distance = chebyshev_distance(attacker.x, attacker.y, x, y)
    if distance == 0:
        return RejectReason.INVALID_TARGET
    if distance > ATTACK_RANGE:
        return RejectReason.NOT_ADJACENT
    target = state.get_entity_at(x, y)
    if target is None or target.owner == attacker.owner:
        return RejectReason.INVALID_TARGET
    return None


def get_valid_targets(
    state: GameState, attacker: Unit, ignore_budget: bool = False
) -> List[TargetOption]:
    """List hostile entities in the 8 neighbouring cells.

    Args:
        state: Current game state
        attacker: Unit to evaluate
        ignore_budget: Only check geometry and hostility, as if the unit had
            a fresh turn (used for stalemate detection)

    Returns:
        Attackable targets in neighbour order
    """
    if not ignore_budget and not attacker.can_act():
        return []

    targets = []
    for dx, dy in NEIGHBOUR_OFFSETS:
        x, y = attacker.x + dx, attacker.y + dy
        if _check_target(state, attacker, x, y) is not None:
            continue
        target = state.get_entity_at(x, y)
        targets.append(
            TargetOption(
                x=x,
                y=y,
                target_id=target.id,
                target_type=_target_type(target),
                damage=DAMAGE_TABLE[attacker.type],
            )
        )
    return targets


def attack(state: GameState, bus: EventBus, attacker: Unit, x: int, y: int) -> CommandResult:
    """Attack the entity in an adjacent cell.

    A unit brought to zero health is removed from the board and its owner;
    a base is flagged destroyed and taken off the board. The caller is
    responsible for the victory re-check that follows.

    Args:
        state: Current game state
        bus: Event channel for combat notifications
        attacker: Attacking unit
        x: Target X coordinate
        y: Target Y coordinate

    Returns:
        CommandResult with damage, resulting health and destroyed flag
    """
    reason = can_attack(state, attacker, x, y)
    if reason is not None:
        logger.debug(f"Attack by {attacker.id} on ({x}, {y}) rejected: {reason.value}")
        return CommandResult.failure(reason, unitId=attacker.id)

    target = state.get_entity_at(x, y)
    target_type = _target_type(target)
    damage = DAMAGE_TABLE[attacker.type]

    destroyed = target.take_damage(damage)
    attacker.use_actions(1)
    state.players[attacker.owner].use_action()

    payload = {
        "attackerId": attacker.id,
        "targetId": target.id,
        "targetType": target_type,
        "damage": damage,
        "targetHealth": target.health,
        "destroyed": destroyed,
    }
    bus.emit(EventKind.UNIT_ATTACKED, **payload)

    if destroyed:
        if isinstance(target, Unit):
            _remove_destroyed_unit(state, bus, target)
        else:
            _destroy_base(state, bus, target)

    return CommandResult.success(**payload)


def _remove_destroyed_unit(state: GameState, bus: EventBus, unit: Unit) -> None:
    state.remove_unit(unit)
    logger.info(f"Unit {unit.id} ({unit.type.value}) of player {unit.owner} destroyed")
    bus.emit(
        EventKind.UNIT_REMOVED,
        unitId=unit.id,
        playerId=unit.owner,
        position={"x": unit.x, "y": unit.y},
    )


def _destroy_base(state: GameState, bus: EventBus, base: Base) -> None:
    state.clear_base(base)
    logger.info(f"Base {base.id} of player {base.owner} destroyed")
    bus.emit(
        EventKind.BASE_DESTROYED,
        baseId=base.id,
        playerId=base.owner,
        position={"x": base.x, "y": base.y},
    )
