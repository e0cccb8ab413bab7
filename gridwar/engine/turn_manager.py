"""Turn and phase state machine.

Each player's turn runs three phases in order:
1. Resource - passive income, node regeneration, gather cooldowns cleared;
   workers may gather
2. Action - units may move and attack
3. Build - units may be built

Advancing past the build phase hands the turn to the other player. The turn
counter increments when play wraps from player 2 back to player 1. The
engine never advances on its own: a collaborator enforcing a time limit
calls advance_phase or end_turn like anybody else.
"""

import logging

from ..models.game import GameState
from ..utils.constants import PHASES, STATUS_PLAYING, STATUS_READY
from .events import EventBus, EventKind
from .resources import clear_cooldowns, collect_income, regenerate_nodes
from .results import CommandResult, RejectReason, check_game_running

logger = logging.getLogger(__name__)


class TurnManager:
    """Drives phase transitions and player hand-over for one game."""

    def __init__(self, state: GameState, bus: EventBus):
        self.state = state
        self.bus = bus

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def start_game(self) -> CommandResult:
        """Move a ready game to playing and open player 1's first turn."""
        if self.state.status != STATUS_READY:
            reason = check_game_running(self.state) or RejectReason.ALREADY_STARTED
            return CommandResult.failure(reason)

        self.state.status = STATUS_PLAYING
        logger.info(f"Game {self.state.game_id} started")
        self.bus.emit(EventKind.GAME_STARTED, gameId=self.state.game_id)
        self._begin_turn()
        return CommandResult.success(**self.phase_info())

    def advance_phase(self) -> CommandResult:
        """Advance to the next phase, or to the next player after build.

        Returns:
            CommandResult carrying the new phase info, or a rejection when
            the game is not being played
        """
        reason = check_game_running(self.state)
        if reason is not None:
            return CommandResult.failure(reason)

        index = PHASES.index(self.state.current_phase)
        if index + 1 < len(PHASES):
            self._enter_phase(PHASES[index + 1])
        else:
            self._switch_player()
        return CommandResult.success(**self.phase_info())

    def end_turn(self) -> CommandResult:
        """Skip the remaining phases and hand over to the other player."""
        reason = check_game_running(self.state)
        if reason is not None:
            return CommandResult.failure(reason)

        player = self.state.current_player
        while self.state.current_player == player:
            self.advance_phase()
        return CommandResult.success(**self.phase_info())

    def phase_info(self) -> dict:
        return {
            "player": self.state.current_player,
            "phase": self.state.current_phase,
            "turnNumber": self.state.turn_number,
        }

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def _switch_player(self) -> None:
        state = self.state
        previous = state.current_player
        state.current_player = 2 if previous == 1 else 1
        if state.current_player == 1:
            state.turn_number += 1

        self.bus.emit(
            EventKind.TURN_ENDED,
            previousPlayer=previous,
            nextPlayer=state.current_player,
            turnNumber=state.turn_number,
        )
        self._begin_turn()

    def _begin_turn(self) -> None:
        """Reset the current player's budgets and open the resource phase."""
        state = self.state
        player = state.get_current_player()
        player.reset_actions(state.config.max_actions_per_turn)
        for unit in state.units_of(player.id):
            unit.reset_actions()

        logger.info(f"Turn {state.turn_number}: player {player.id}")
        self.bus.emit(EventKind.TURN_STARTED, player=player.id, turnNumber=state.turn_number)
        self._enter_phase("resource")

    def _enter_phase(self, phase: str) -> None:
        state = self.state
        state.current_phase = phase
        if phase == "resource":
            regenerate_nodes(state, self.bus)
            clear_cooldowns(state, state.current_player)
            collect_income(state, self.bus, state.current_player)

        logger.debug(f"Player {state.current_player} entered {phase} phase")
        self.bus.emit(EventKind.PHASE_CHANGED, phase=phase, player=state.current_player)
