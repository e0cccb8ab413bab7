"""Tests for data models."""

import pytest

from gridwar.models import (
    Base,
    Board,
    BoardError,
    GameState,
    Player,
    ResourceNode,
    RulesConfig,
    Unit,
    UnitType,
)
from gridwar.utils import DRAW


class TestUnitType:
    """Test the closed unit roster."""

    def test_parse_by_name(self):
        assert UnitType.parse("infantry") is UnitType.INFANTRY
        assert UnitType.parse("HEAVY") is UnitType.HEAVY
        assert UnitType.parse(UnitType.SCOUT) is UnitType.SCOUT

    def test_unknown_type_raises(self):
        """Unknown names never fall back to the worker stats."""
        with pytest.raises(ValueError, match="Unknown unit type"):
            UnitType.parse("dragon")

    def test_only_workers_gather(self):
        assert [t for t in UnitType if t.stats.can_gather] == [UnitType.WORKER]

    def test_stat_table(self):
        assert UnitType.WORKER.stats.cost == 10
        assert UnitType.SCOUT.stats.movement == 4
        assert UnitType.INFANTRY.stats.damage == 2
        assert UnitType.HEAVY.stats.health == 200


class TestUnit:
    """Test unit self-mutation."""

    def test_create_uses_type_stats(self):
        unit = Unit.create("p1-001", UnitType.SCOUT, 1, 3, 4)
        assert unit.health == 30
        assert unit.max_health == 30
        assert unit.max_actions == 4
        assert unit.actions_used == 0
        assert unit.position == (3, 4)

    def test_string_type_is_coerced(self):
        unit = Unit(id="u", type="worker", owner=2, x=0, y=0, health=50, max_health=50, max_actions=2)
        assert unit.type is UnitType.WORKER

    def test_take_damage_clamps_at_zero(self):
        unit = Unit.create("p1-001", UnitType.WORKER, 1, 0, 0)
        unit.health = 3
        assert unit.take_damage(2) is False
        assert unit.health == 1
        assert unit.take_damage(2) is True
        assert unit.health == 0

    def test_use_actions_respects_budget(self):
        unit = Unit.create("p1-001", UnitType.INFANTRY, 1, 0, 0)
        unit.use_actions(2)
        assert unit.remaining_actions == 0
        assert not unit.can_act()
        with pytest.raises(ValueError):
            unit.use_actions(1)
        unit.reset_actions()
        assert unit.actions_used == 0

    def test_invalid_owner(self):
        with pytest.raises(ValueError, match="Invalid owner"):
            Unit.create("p3-001", UnitType.WORKER, 3, 0, 0)


class TestBase:
    """Test base destruction flag."""

    def test_destroyed_at_zero_and_stays_destroyed(self):
        base = Base(id="base-1", owner=1, x=5, y=5, health=3)
        assert base.take_damage(2) is False
        assert base.take_damage(2) is True
        assert base.health == 0
        assert base.destroyed

    def test_inconsistent_destroyed_flag_rejected(self):
        with pytest.raises(ValueError):
            Base(id="base-1", owner=1, x=5, y=5, health=10, destroyed=True)


class TestPlayer:
    """Test player energy and action budget."""

    def test_default_name(self):
        assert Player(id=2).name == "Player 2"

    def test_spend_energy(self):
        player = Player(id=1, energy=20)
        assert player.spend_energy(15)
        assert player.energy == 5
        assert not player.spend_energy(10)
        assert player.energy == 5

    def test_use_action_until_exhausted(self):
        player = Player(id=1, actions_remaining=1)
        assert player.use_action()
        assert not player.use_action()
        player.reset_actions(3)
        assert player.actions_remaining == 3


class TestResourceNode:
    """Test node depletion and regeneration."""

    def test_extract_floors_at_zero(self):
        node = ResourceNode(id="node-1", x=0, y=0, value=3, max_value=100)
        assert node.extract(5) == 3
        assert node.value == 0
        assert node.depleted

    def test_regenerate_clamps_to_max(self):
        node = ResourceNode(id="node-1", x=0, y=0, value=98, max_value=100, regeneration_rate=5)
        assert node.regenerate() == 2
        assert node.value == 100
        assert node.regenerate() == 0

    def test_value_outside_range_rejected(self):
        with pytest.raises(ValueError):
            ResourceNode(id="node-1", x=0, y=0, value=120, max_value=100)


class TestBoard:
    """Test single occupancy."""

    def test_place_and_query(self):
        board = Board(5, 5)
        board.place("a", 1, 2)
        assert board.get(1, 2) == "a"
        assert not board.is_empty(1, 2)
        assert board.is_empty(2, 1)
        assert board.occupied_count() == 1

    def test_out_of_bounds_cells_are_not_empty(self):
        board = Board(5, 5)
        assert not board.in_bounds(5, 0)
        assert not board.is_empty(-1, 0)
        assert board.get(7, 7) is None

    def test_double_occupancy_raises(self):
        board = Board(5, 5)
        board.place("a", 1, 1)
        with pytest.raises(BoardError):
            board.place("b", 1, 1)

    def test_remove_wrong_id_raises(self):
        board = Board(5, 5)
        board.place("a", 1, 1)
        with pytest.raises(BoardError):
            board.remove("b", 1, 1)

    def test_relocate_to_occupied_leaves_board_untouched(self):
        board = Board(5, 5)
        board.place("a", 0, 0)
        board.place("b", 1, 0)
        with pytest.raises(BoardError):
            board.relocate("a", 0, 0, 1, 0)
        assert board.get(0, 0) == "a"
        assert board.get(1, 0) == "b"


class TestRulesConfig:
    """Test rule validation."""

    def test_defaults(self):
        config = RulesConfig()
        assert config.grid_size == 25
        assert config.base_positions == {1: (5, 5), 2: (19, 19)}
        assert config.resource_victory_threshold is None

    def test_json_shaped_positions_are_normalized(self):
        config = RulesConfig(base_positions={"1": [0, 0], "2": [4, 4]}, grid_size=5, node_positions=[[2, 2]])
        assert config.base_positions == {1: (0, 0), 2: (4, 4)}
        assert config.node_positions == ((2, 2),)

    def test_base_outside_grid_rejected(self):
        with pytest.raises(ValueError):
            RulesConfig(grid_size=10, node_positions=())

    def test_shared_base_cell_rejected(self):
        with pytest.raises(ValueError):
            RulesConfig(base_positions={1: (3, 3), 2: (3, 3)})


class TestGameState:
    """Test aggregate validation."""

    def test_board_sized_from_config(self):
        state = GameState(game_id="g", config=RulesConfig(grid_size=8, base_positions={1: (0, 0), 2: (7, 7)}, node_positions=()))
        assert state.board.width == 8

    def test_invalid_winner(self):
        with pytest.raises(ValueError, match="Invalid winner"):
            GameState(game_id="g", winner="p1")

    def test_draw_winner(self):
        state = GameState(game_id="g", status="ended", winner=DRAW)
        assert state.is_draw
        assert state.is_ended


class TestGameStateUnitIds:
    """Test unit registration keeps IDs unique."""

    def test_duplicate_unit_id_rejected(self):
        state = GameState(game_id="g")
        state.players = {1: Player(id=1), 2: Player(id=2)}
        state.add_unit(Unit.create("p1-001", UnitType.WORKER, 1, 0, 0))
        with pytest.raises(ValueError, match="already in use"):
            state.add_unit(Unit.create("p1-001", UnitType.WORKER, 1, 1, 0))
        assert state.board.is_empty(1, 0)

    def test_next_unit_id_skips_ids_in_use(self):
        state = GameState(game_id="g")
        state.players = {1: Player(id=1), 2: Player(id=2)}
        state.add_unit(Unit.create("p1-001", UnitType.WORKER, 1, 0, 0))
        assert state.next_unit_id(1) == "p1-002"
