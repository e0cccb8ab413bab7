"""Resource gathering, node regeneration and passive income.

This module handles:
1. Worker gathering from an adjacent node during the resource phase
2. Node regeneration at the start of every resource phase
3. Passive energy income for the player whose resource phase begins
4. Clearing the per-unit gather cooldowns of that player

A gather takes a fixed amount (floored at the node's value), credits the
owner's energy and cumulative total, and spends one unit action and one
player action. The node then remembers the unit until its owner's next
resource phase, so a worker gathers from a given node at most once per turn.
"""

import logging
from typing import List, Optional

from ..models.game import GameState
from ..models.resource_node import ResourceNode
from ..models.unit import Unit
from ..utils.constants import GATHER_RANGE
from ..utils.distance import manhattan_distance
from .events import EventBus, EventKind
from .results import CommandResult, RejectReason, check_actor

logger = logging.getLogger(__name__)


def nodes_in_range(state: GameState, x: int, y: int, distance: int = GATHER_RANGE) -> List[ResourceNode]:
    """Return nodes within a Manhattan distance of a cell, in node order."""
    return [
        node
        for node in state.resource_nodes.values()
        if manhattan_distance(node.x, node.y, x, y) <= distance
    ]


def _select_node(state: GameState, unit: Unit) -> tuple[Optional[ResourceNode], Optional[RejectReason]]:
    """Pick the richest node the unit may gather from.

    Returns:
        (node, None) on success, (None, reason) otherwise
    """
    nearby = nodes_in_range(state, unit.x, unit.y)
    stocked = [node for node in nearby if node.value > 0]
    if not stocked:
        return None, RejectReason.NO_RESOURCES
    ready = [node for node in stocked if not node.is_on_cooldown(unit.id)]
    if not ready:
        return None, RejectReason.ON_COOLDOWN
    # max() keeps the first of equally rich nodes
    return max(ready, key=lambda node: node.value), None


def can_gather(state: GameState, unit: Unit) -> Optional[RejectReason]:
    """Check whether a unit may gather right now.

    Returns:
        None if a gather would succeed, otherwise the rejection reason
    """
    reason = check_actor(state, unit.owner, "resource")
    if reason is not None:
        return reason
    if not unit.type.stats.can_gather:
        return RejectReason.CANNOT_GATHER
    if not unit.can_act():
        return RejectReason.INSUFFICIENT_ACTIONS
    _, reason = _select_node(state, unit)
    return reason


def gather(state: GameState, bus: EventBus, unit: Unit) -> CommandResult:
    """Gather from the richest adjacent node.

    Args:
        state: Current game state
        bus: Event channel for the resourcesGathered notification
        unit: Gathering unit

    Returns:
        CommandResult with amount, node ID and remaining node value
    """
    reason = can_gather(state, unit)
    if reason is not None:
        logger.debug(f"Gather by {unit.id} rejected: {reason.value}")
        return CommandResult.failure(reason, unitId=unit.id)

    node, _ = _select_node(state, unit)
    amount = node.extract(state.config.gather_amount)

    player = state.players[unit.owner]
    player.add_energy(amount)
    player.resources_gathered += amount
    unit.use_actions(1)
    player.use_action()
    node.cooldowns[unit.id] = state.turn_number

    payload = {
        "unitId": unit.id,
        "playerId": unit.owner,
        "amount": amount,
        "nodeId": node.id,
        "nodePosition": {"x": node.x, "y": node.y},
        "nodeValueRemaining": node.value,
    }
    bus.emit(EventKind.RESOURCES_GATHERED, **payload)
    return CommandResult.success(**payload)


def regenerate_nodes(state: GameState, bus: EventBus) -> int:
    """Regenerate every node, clamped to its maximum.

    Returns:
        Total amount regenerated across all nodes
    """
    total = 0
    changed = {}
    for node in state.resource_nodes.values():
        gained = node.regenerate()
        if gained:
            total += gained
            changed[node.id] = node.value
    if changed:
        bus.emit(EventKind.RESOURCES_REGENERATED, total=total, nodes=changed)
    return total


def collect_income(state: GameState, bus: EventBus, player_id: int) -> int:
    """Grant the passive per-turn energy income to a player."""
    player = state.players[player_id]
    income = state.config.income_per_turn
    player.add_energy(income)
    bus.emit(EventKind.INCOME_COLLECTED, playerId=player_id, amount=income, energy=player.energy)
    return income


def clear_cooldowns(state: GameState, player_id: int) -> None:
    """Forget the gather cooldowns of one player's units on every node."""
    owned = state.players[player_id].units_owned
    for node in state.resource_nodes.values():
        for unit_id in [uid for uid in node.cooldowns if uid in owned or uid not in state.units]:
            del node.cooldowns[unit_id]
