"""Victory and draw arbitration.

This module handles:
1. Evaluating every end condition after damage, removal, surrender or draw
2. Picking exactly one outcome by priority
3. Ending the game (status, winner, gameEnded event) exactly once

Priority order, first match wins:
1. Both bases destroyed → draw
2. One base destroyed → the other player wins
3. Surrender → the non-surrendering player wins
4. Agreed draw → draw
5. Elimination (from min_elimination_turn) → the player who still has units wins
6. Resource victory (optional threshold) → the richer gatherer wins
7. Stalemate of the current player → draw
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..models.game import GameState, Winner
from ..utils.constants import DRAW, PLAYER_IDS, STATUS_ENDED
from .combat import get_valid_targets
from .events import EventBus, EventKind
from .movement import get_valid_moves
from .production import cheapest_unit_cost, valid_placements

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outcome:
    """Result of an arbitration.

    Attributes:
        winner: Player id, or DRAW
        reason: Why the game ended (e.g. "base_destroyed", "stalemate")
    """

    winner: Winner
    reason: str


def _other(player_id: int) -> int:
    return 2 if player_id == 1 else 1


def _check_bases(state: GameState) -> Optional[Outcome]:
    destroyed = [pid for pid in PLAYER_IDS if state.get_live_base(pid) is None]
    if len(destroyed) == 2:
        return Outcome(DRAW, "bases_destroyed")
    if len(destroyed) == 1:
        return Outcome(_other(destroyed[0]), "base_destroyed")
    return None


def _check_elimination(state: GameState) -> Optional[Outcome]:
    """A player who fielded units and lost them all is eliminated.

    Only applies from min_elimination_turn onward, and never to a player
    who has not built anything yet (e.g. at the start of the game).
    """
    if state.turn_number < state.config.min_elimination_turn:
        return None
    eliminated = [
        pid
        for pid in PLAYER_IDS
        if state.players[pid].units_built > 0 and not state.players[pid].units_owned
    ]
    if len(eliminated) != 1:
        return None
    loser = eliminated[0]
    if not state.players[_other(loser)].units_owned:
        return None
    return Outcome(_other(loser), "elimination")


def _check_resources(state: GameState) -> Optional[Outcome]:
    threshold = state.config.resource_victory_threshold
    if threshold is None:
        return None
    totals = {pid: state.players[pid].resources_gathered for pid in PLAYER_IDS}
    reached = [pid for pid in PLAYER_IDS if totals[pid] >= threshold]
    if not reached:
        return None
    if len(reached) == 2:
        if totals[1] == totals[2]:
            return Outcome(DRAW, "resources")
        return Outcome(max(reached, key=lambda pid: totals[pid]), "resources")
    return Outcome(reached[0], "resources")


def has_available_play(state: GameState, player_id: int) -> bool:
    """Whether a player could do anything on a fresh turn.

    Looks at full per-unit budgets rather than what is left this turn, so a
    player who simply spent their actions is not considered stuck. Building
    counts as available play when the player can afford the cheapest unit
    and has a free placement cell.
    """
    for unit in state.units_of(player_id):
        if get_valid_moves(state, unit, budget=unit.max_actions):
            return True
        if get_valid_targets(state, unit, ignore_budget=True):
            return True
    player = state.players[player_id]
    return player.energy >= cheapest_unit_cost() and bool(valid_placements(state, player_id))


def _check_stalemate(state: GameState) -> Optional[Outcome]:
    player_id = state.current_player
    if not state.players[player_id].units_owned:
        return None
    if has_available_play(state, player_id):
        return None
    return Outcome(DRAW, "stalemate")


def determine_outcome(state: GameState) -> Optional[Outcome]:
    """Apply the priority list without touching the state.

    Returns:
        The first matching Outcome, or None if the game continues
    """
    outcome = _check_bases(state)
    if outcome is None and state.surrendered_player is not None:
        outcome = Outcome(_other(state.surrendered_player), "surrender")
    if outcome is None and state.draw_agreed:
        outcome = Outcome(DRAW, "draw_agreed")
    if outcome is None:
        outcome = _check_elimination(state)
    if outcome is None:
        outcome = _check_resources(state)
    if outcome is None:
        outcome = _check_stalemate(state)
    return outcome


def end_game(state: GameState, bus: EventBus, outcome: Outcome) -> None:
    """End the game with an outcome. Does nothing if it already ended."""
    if state.status == STATUS_ENDED:
        return
    state.status = STATUS_ENDED
    state.winner = outcome.winner
    state.end_reason = outcome.reason
    logger.info(f"Game {state.game_id} ended: winner = {outcome.winner} ({outcome.reason})")
    bus.emit(
        EventKind.GAME_ENDED,
        winner=outcome.winner,
        reason=outcome.reason,
        turnNumber=state.turn_number,
    )


def check_victory(state: GameState, bus: EventBus) -> Optional[Outcome]:
    """Re-evaluate the end conditions and end the game on a match.

    Args:
        state: Current game state
        bus: Event channel for victoryCheck/stalemateDetected/gameEnded

    Returns:
        The outcome if the game ended during this check, otherwise None
    """
    if state.status == STATUS_ENDED:
        return None

    p1_base = state.get_base(1)
    p2_base = state.get_base(2)
    bus.emit(
        EventKind.VICTORY_CHECK,
        player1BaseHealth=p1_base.health if p1_base else 0,
        player2BaseHealth=p2_base.health if p2_base else 0,
        gameStatus=state.status,
        turnNumber=state.turn_number,
    )

    outcome = determine_outcome(state)
    if outcome is None:
        return None
    if outcome.reason == "stalemate":
        bus.emit(
            EventKind.STALEMATE_DETECTED,
            player=state.current_player,
            turnNumber=state.turn_number,
        )
    end_game(state, bus, outcome)
    return outcome
