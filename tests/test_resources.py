"""Tests for gathering, regeneration and income."""

import pytest
from conftest import advance_to, place_unit

from gridwar.engine import EventKind, GameEngine, RejectReason
from gridwar.models import RulesConfig


@pytest.fixture
def worker(engine):
    """Player 1 worker at (4, 5), adjacent to the node at (4, 4)."""
    return place_unit(engine, "worker", 1, 4, 5)


def test_gather_from_adjacent_node(engine, worker, recorder):
    result = engine.gather_resource(worker.id)

    assert result.ok
    assert result.payload["amount"] == 5
    assert result.payload["nodeId"] == "node-1"
    assert result.payload["nodeValueRemaining"] == 95
    player = engine.state.players[1]
    assert player.energy == 115
    assert player.resources_gathered == 5
    assert player.actions_remaining == 2
    assert worker.actions_used == 1
    assert engine.state.resource_nodes["node-1"].value == 95
    gathered = [e for e in recorder if e.kind == EventKind.RESOURCES_GATHERED]
    assert gathered[0].payload["nodePosition"] == {"x": 4, "y": 4}


def test_gather_on_the_node_cell(engine):
    unit = place_unit(engine, "worker", 1, 4, 4)
    assert engine.gather_resource(unit.id).ok


def test_diagonal_node_is_out_of_range(engine):
    unit = place_unit(engine, "worker", 1, 5, 3)
    result = engine.gather_resource(unit.id)
    assert result.reason == RejectReason.NO_RESOURCES


def test_gather_cooldown_until_next_turn(engine, worker):
    """Test that a worker gathers a node once per turn and again on its next turn."""
    assert engine.gather_resource(worker.id).ok

    result = engine.gather_resource(worker.id)
    assert result.reason == RejectReason.ON_COOLDOWN
    assert engine.state.players[1].energy == 115

    engine.end_turn()
    engine.end_turn()
    assert engine.state.resource_nodes["node-1"].cooldowns == {}
    assert engine.gather_resource(worker.id).ok


def test_cooldown_is_per_unit(engine, worker):
    other = place_unit(engine, "worker", 1, 3, 4)
    assert engine.gather_resource(worker.id).ok
    assert engine.gather_resource(other.id).ok
    assert engine.state.resource_nodes["node-1"].value == 90


def test_opponent_turn_keeps_cooldowns(engine, worker):
    engine.gather_resource(worker.id)
    engine.end_turn()
    assert worker.id in engine.state.resource_nodes["node-1"].cooldowns


def test_depleted_node_has_no_side_effects(engine, worker):
    engine.state.resource_nodes["node-1"].value = 0

    result = engine.gather_resource(worker.id)

    assert result.reason == RejectReason.NO_RESOURCES
    assert engine.state.players[1].energy == 110
    assert engine.state.players[1].actions_remaining == 3
    assert worker.actions_used == 0
    assert engine.state.resource_nodes["node-1"].cooldowns == {}


def test_gather_floors_at_node_value(engine, worker):
    engine.state.resource_nodes["node-1"].value = 3
    result = engine.gather_resource(worker.id)
    assert result.payload["amount"] == 3
    assert engine.state.resource_nodes["node-1"].value == 0
    assert engine.state.players[1].energy == 113


def test_only_workers_gather(engine):
    infantry = place_unit(engine, "infantry", 1, 4, 5)
    assert engine.gather_resource(infantry.id).reason == RejectReason.CANNOT_GATHER


def test_gather_outside_resource_phase(engine, worker):
    advance_to(engine, 1, "action")
    assert engine.gather_resource(worker.id).reason == RejectReason.WRONG_PHASE


def test_gather_on_opponent_turn(engine):
    unit = place_unit(engine, "worker", 2, 20, 19)
    assert engine.gather_resource(unit.id).reason == RejectReason.NOT_CURRENT_PLAYER


def test_gather_with_player_budget_spent(engine):
    workers = [place_unit(engine, "worker", 1, x, y) for x, y in [(4, 5), (12, 5), (4, 13), (12, 13)]]
    for unit in workers[:3]:
        assert engine.gather_resource(unit.id).ok
    assert engine.gather_resource(workers[3].id).reason == RejectReason.INSUFFICIENT_ACTIONS


def test_gather_picks_richest_node():
    engine = GameEngine.new_game(RulesConfig(node_positions=((2, 2), (4, 2))))
    engine.start_game()
    engine.state.resource_nodes["node-1"].value = 40
    engine.state.resource_nodes["node-2"].value = 60
    unit = place_unit(engine, "worker", 1, 3, 2)

    assert engine.gather_resource(unit.id).payload["nodeId"] == "node-2"
    # Each node cools down separately
    assert engine.gather_resource(unit.id).payload["nodeId"] == "node-1"


def test_regeneration_clamps_at_max(engine, recorder):
    node = engine.state.resource_nodes["node-1"]
    node.value = 98

    engine.end_turn()

    assert node.value == 100
    regenerated = [e for e in recorder if e.kind == EventKind.RESOURCES_REGENERATED]
    assert regenerated[0].payload == {"total": 2, "nodes": {"node-1": 100}}


def test_regeneration_every_resource_phase(engine):
    node = engine.state.resource_nodes["node-5"]
    node.value = 50
    engine.end_turn()
    assert node.value == 55
    engine.end_turn()
    assert node.value == 60


def test_full_nodes_emit_no_regeneration(engine, recorder):
    engine.end_turn()
    assert EventKind.RESOURCES_REGENERATED not in [e.kind for e in recorder]


def test_income_event(engine, recorder):
    engine.end_turn()
    income = [e for e in recorder if e.kind == EventKind.INCOME_COLLECTED]
    assert income[0].payload == {"playerId": 2, "amount": 10, "energy": 110}


def test_resource_nodes_query_returns_copies(engine):
    nodes = engine.get_resource_nodes()
    assert len(nodes) == 9
    nodes[0].value = 0
    assert engine.state.resource_nodes["node-1"].value == 100
