"""Shared fixtures and helpers for Grid War tests."""

import pytest

from gridwar.engine import GameEngine
from gridwar.models import Unit, UnitType


def place_unit(engine, unit_type, owner, x, y, health=None):
    """Put a unit straight on the board, bypassing build rules."""
    state = engine.state
    unit = Unit.create(state.next_unit_id(owner), UnitType.parse(unit_type), owner, x, y)
    if health is not None:
        unit.health = health
    state.add_unit(unit)
    state.players[owner].units_built += 1
    return unit


def advance_to(engine, player, phase):
    """Advance phases until the given player's given phase is reached."""
    for _ in range(12):
        if engine.state.current_player == player and engine.state.current_phase == phase:
            return
        assert engine.advance_phase().ok
    raise AssertionError(f"Never reached player {player} {phase} phase")


def check_board_invariant(state):
    """Board holds exactly the live units and standing bases, each at its own cell."""
    assert state.board.occupied_count() == state.live_entity_count()
    for unit in state.units.values():
        assert state.board.get(unit.x, unit.y) == unit.id
        assert 0 <= unit.actions_used <= unit.max_actions
    for base in state.bases.values():
        expected = None if base.destroyed else base.id
        assert state.board.get(base.x, base.y) == expected


@pytest.fixture
def engine():
    """A started default game, player 1 in the resource phase of turn 1."""
    eng = GameEngine.new_game(game_id="test-game")
    eng.start_game()
    return eng


@pytest.fixture
def fresh_engine():
    """A default game that has not been started."""
    return GameEngine.new_game(game_id="fresh-game")


@pytest.fixture
def recorder(engine):
    """List collecting every event the started engine publishes from now on."""
    events = []
    engine.events.subscribe_all(events.append)
    return events
