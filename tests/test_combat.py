"""Tests for combat resolution."""

import pytest
from conftest import advance_to, check_board_invariant, place_unit

from gridwar.engine import EventKind, RejectReason
from gridwar.engine.combat import DAMAGE_TABLE
from gridwar.models import UnitType


@pytest.fixture
def skirmish(engine):
    """Player 1 infantry at (10, 10) next to a wounded player 2 worker at (11, 11)."""
    attacker = place_unit(engine, "infantry", 1, 10, 10)
    defender = place_unit(engine, "worker", 2, 11, 11, health=3)
    advance_to(engine, 1, "action")
    return attacker, defender


def test_damage_table():
    assert DAMAGE_TABLE == {
        UnitType.WORKER: 1,
        UnitType.SCOUT: 1,
        UnitType.INFANTRY: 2,
        UnitType.HEAVY: 3,
    }


def test_diagonal_attack_deals_fixed_damage(engine, skirmish, recorder):
    """Test that an infantry hit takes a 3-health worker down to 1 without removing it."""
    attacker, defender = skirmish

    result = engine.attack_unit(attacker.id, 11, 11)

    assert result.ok
    assert result.payload["damage"] == 2
    assert result.payload["targetHealth"] == 1
    assert result.payload["destroyed"] is False
    assert defender.health == 1
    assert engine.state.board.get(11, 11) == defender.id
    assert attacker.actions_used == 1
    assert engine.state.players[1].actions_remaining == 2
    assert [e.kind for e in recorder].count(EventKind.UNIT_ATTACKED) == 1
    assert EventKind.UNIT_REMOVED not in [e.kind for e in recorder]


def test_unit_removed_at_zero_health(engine, skirmish, recorder):
    """Test that a unit reduced to 0 leaves the board and its owner on a later turn."""
    attacker, defender = skirmish
    engine.attack_unit(attacker.id, 11, 11)
    engine.end_turn()
    advance_to(engine, 1, "action")

    result = engine.attack_unit(attacker.id, 11, 11)

    assert result.ok
    assert result.payload["destroyed"] is True
    assert result.payload["targetHealth"] == 0
    assert defender.id not in engine.state.units
    assert defender.id not in engine.state.players[2].units_owned
    assert engine.state.board.is_empty(11, 11)
    assert engine.get_unit_at(11, 11) is None
    removed = [e for e in recorder if e.kind == EventKind.UNIT_REMOVED]
    assert removed[0].payload == {"unitId": defender.id, "playerId": 2, "position": {"x": 11, "y": 11}}
    # Elimination only applies from turn 10
    assert engine.state.is_playing
    check_board_invariant(engine.state)


def test_attack_base(engine, recorder):
    heavy = place_unit(engine, "heavy", 1, 18, 18)
    advance_to(engine, 1, "action")

    targets = engine.get_valid_attack_targets(heavy.id)
    assert [(t.x, t.y, t.target_type) for t in targets] == [(19, 19, "base")]

    result = engine.attack_unit(heavy.id, 19, 19)

    assert result.ok
    assert result.payload["targetType"] == "base"
    assert engine.state.bases["base-2"].health == 197
    assert engine.state.is_playing
    assert recorder[-1].kind == EventKind.VICTORY_CHECK
    assert recorder[-1].payload["player2BaseHealth"] == 197


def test_attack_empty_cell(engine, skirmish):
    attacker, _ = skirmish
    assert engine.attack_unit(attacker.id, 9, 9).reason == RejectReason.INVALID_TARGET


def test_attack_own_unit(engine, skirmish):
    attacker, _ = skirmish
    place_unit(engine, "worker", 1, 9, 10)
    result = engine.attack_unit(attacker.id, 9, 10)
    assert result.reason == RejectReason.INVALID_TARGET
    assert attacker.actions_used == 0


def test_attack_own_cell(engine, skirmish):
    attacker, _ = skirmish
    assert engine.attack_unit(attacker.id, 10, 10).reason == RejectReason.INVALID_TARGET


def test_attack_not_adjacent(engine, skirmish):
    attacker, _ = skirmish
    place_unit(engine, "worker", 2, 12, 10)
    assert engine.attack_unit(attacker.id, 12, 10).reason == RejectReason.NOT_ADJACENT


def test_attack_out_of_bounds(engine):
    unit = place_unit(engine, "infantry", 1, 0, 0)
    advance_to(engine, 1, "action")
    assert engine.attack_unit(unit.id, -1, 0).reason == RejectReason.OUT_OF_BOUNDS


def test_attack_outside_action_phase(engine):
    attacker = place_unit(engine, "infantry", 1, 10, 10)
    place_unit(engine, "worker", 2, 11, 10)
    assert engine.attack_unit(attacker.id, 11, 10).reason == RejectReason.WRONG_PHASE


def test_attack_with_opponent_unit(engine, skirmish):
    _, defender = skirmish
    result = engine.attack_unit(defender.id, 10, 10)
    assert result.reason == RejectReason.NOT_CURRENT_PLAYER


def test_attack_requires_unit_action(engine):
    """Test that a heavy (one action per turn) cannot attack twice."""
    heavy = place_unit(engine, "heavy", 1, 10, 10)
    place_unit(engine, "infantry", 2, 11, 10)
    advance_to(engine, 1, "action")

    assert engine.attack_unit(heavy.id, 11, 10).ok
    result = engine.attack_unit(heavy.id, 11, 10)

    assert result.reason == RejectReason.INSUFFICIENT_ACTIONS
    assert engine.state.players[1].actions_remaining == 2
    assert engine.get_valid_attack_targets(heavy.id) == []


def test_attack_requires_player_action(engine):
    attackers = [place_unit(engine, "infantry", 1, 10, y) for y in (10, 12)]
    place_unit(engine, "heavy", 2, 11, 11)
    advance_to(engine, 1, "action")

    assert engine.attack_unit(attackers[0].id, 11, 11).ok
    assert engine.attack_unit(attackers[0].id, 11, 11).ok
    assert engine.attack_unit(attackers[1].id, 11, 11).ok
    assert engine.state.players[1].actions_remaining == 0
    # attackers[1] still has one unit action but the player budget is spent
    assert engine.attack_unit(attackers[1].id, 11, 11).reason == RejectReason.INSUFFICIENT_ACTIONS


def test_valid_targets_cover_all_neighbours(engine):
    attacker = place_unit(engine, "scout", 1, 10, 10)
    for dx, dy in [(-1, -1), (0, 1), (1, 0)]:
        place_unit(engine, "worker", 2, 10 + dx, 10 + dy)
    place_unit(engine, "worker", 1, 9, 10)
    place_unit(engine, "worker", 2, 12, 10)

    targets = engine.get_valid_attack_targets(attacker.id)

    assert {(t.x, t.y) for t in targets} == {(9, 9), (10, 11), (11, 10)}
    assert all(t.damage == 1 and t.target_type == "unit" for t in targets)
