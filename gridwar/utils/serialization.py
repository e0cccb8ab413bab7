"""Game state serialization to/from snapshots and JSON files.

This module provides the snapshot codec consumed by persistence
collaborators, plus functions to save and load a snapshot as JSON.

Entity position fields are authoritative: on load the board is rebuilt
from unit and base positions, then compared cell by cell with the stored
grid. Any disagreement means the snapshot is corrupt and loading fails.
"""

import dataclasses
import json
import re
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from ..models.base import Base
from ..models.board import Board, BoardError
from ..models.config import RulesConfig
from ..models.game import GameState
from ..models.player import Player
from ..models.resource_node import ResourceNode
from ..models.unit import Unit, UnitType
from ..schemas.snapshot import BaseRecord, NodeRecord, PlayerRecord, SnapshotModel, UnitRecord
from .constants import PLAYER_IDS, SNAPSHOT_VERSION

UNIT_ID_PATTERN = re.compile(r"p(\d+)-(\d+)")


class SnapshotError(ValueError):
    """Raised when a snapshot is malformed or internally inconsistent."""


def save_game(state: GameState, filepath: Union[str, Path]) -> None:
    """Save game state to a JSON file.

    Args:
        state: Game state to save
        filepath: Destination path (parent directories are created)

    Example:
        save_game(state, "saves/my_game.json")
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(serialize_game(state), f, indent=2)


def load_game(filepath: Union[str, Path]) -> GameState:
    """Load game state from a JSON file.

    Args:
        filepath: Path to saved game file

    Returns:
        Restored GameState

    Raises:
        FileNotFoundError: If file doesn't exist
        SnapshotError: If the JSON is invalid or the snapshot is inconsistent
    """
    with open(filepath) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Snapshot file {filepath} is not valid JSON: {e}") from e
    return deserialize_game(data)


def serialize_game(state: GameState) -> dict[str, Any]:
    """Convert a GameState to a JSON-compatible snapshot.

    Args:
        state: Game to serialize

    Returns:
        Snapshot dictionary (keys of keyed collections are strings)
    """
    return {
        "version": SNAPSHOT_VERSION,
        "gameId": state.game_id,
        "status": state.status,
        "currentPlayer": state.current_player,
        "currentPhase": state.current_phase,
        "turnNumber": state.turn_number,
        "players": {str(pid): _serialize_player(p) for pid, p in state.players.items()},
        "units": {uid: _serialize_unit(u) for uid, u in state.units.items()},
        "bases": {bid: _serialize_base(b) for bid, b in state.bases.items()},
        "resourceNodes": {nid: _serialize_node(n) for nid, n in state.resource_nodes.items()},
        "board": state.board.to_grid(),
        "winner": state.winner,
        "endReason": state.end_reason,
        "surrenderedPlayer": state.surrendered_player,
        "drawAgreed": state.draw_agreed,
        "unitCounter": {str(pid): count for pid, count in state.unit_counter.items()},
        "config": _serialize_config(state.config),
    }


def deserialize_game(data: dict[str, Any]) -> GameState:
    """Reconstruct a GameState from a snapshot.

    Args:
        data: Snapshot dictionary

    Returns:
        Restored GameState

    Raises:
        SnapshotError: If fields are missing or invalid, or the stored board
            disagrees with entity positions
    """
    try:
        snapshot = SnapshotModel.model_validate(data)
    except ValidationError as e:
        raise SnapshotError(f"Invalid snapshot: {e}") from e
    if snapshot.version != SNAPSHOT_VERSION:
        raise SnapshotError(f"Unsupported snapshot version: {snapshot.version}")

    try:
        config = RulesConfig(**snapshot.config)
        state = GameState(
            game_id=snapshot.gameId,
            config=config,
            status=snapshot.status,
            current_player=snapshot.currentPlayer,
            current_phase=snapshot.currentPhase,
            turn_number=snapshot.turnNumber,
            players={int(pid): _deserialize_player(p) for pid, p in snapshot.players.items()},
            units={},
            bases={},
            resource_nodes={nid: _deserialize_node(n) for nid, n in snapshot.resourceNodes.items()},
            board=Board(config.grid_size, config.grid_size),
            winner=snapshot.winner,
            end_reason=snapshot.endReason,
            surrendered_player=snapshot.surrenderedPlayer,
            draw_agreed=snapshot.drawAgreed,
            unit_counter={int(pid): count for pid, count in snapshot.unitCounter.items()},
        )
        units = {uid: _deserialize_unit(u) for uid, u in snapshot.units.items()}
        bases = {bid: _deserialize_base(b) for bid, b in snapshot.bases.items()}
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"Invalid snapshot contents: {e}") from e

    _check_keys(units, "unit")
    _check_keys(bases, "base")
    _check_keys(state.resource_nodes, "resource node")
    shared = set(units) & set(bases)
    if shared:
        raise SnapshotError(f"IDs used by both a unit and a base: {sorted(shared)}")
    if set(state.players) != {1, 2}:
        raise SnapshotError(f"Snapshot must hold players 1 and 2, got {sorted(state.players)}")
    if sorted(base.owner for base in bases.values()) != [1, 2]:
        raise SnapshotError("Snapshot must hold exactly one base per player")

    # Rebuild the board from positions, then cross-check the stored grid
    try:
        for base in bases.values():
            state.bases[base.id] = base
            if not base.destroyed:
                state.board.place(base.id, base.x, base.y)
        for unit in units.values():
            state.units[unit.id] = unit
            state.board.place(unit.id, unit.x, unit.y)
    except BoardError as e:
        raise SnapshotError(f"Entity positions collide: {e}") from e

    _check_board(state, snapshot.board)
    _check_ownership(state)
    _sync_unit_counter(state)
    return state


def _check_keys(records: dict[str, Any], label: str) -> None:
    for key, record in records.items():
        if key != record.id:
            raise SnapshotError(f"{label} keyed as {key!r} has id {record.id!r}")


def _check_board(state: GameState, grid: list[list[str | None]]) -> None:
    expected = state.board.to_grid()
    if len(grid) != len(expected) or any(len(col) != len(exp) for col, exp in zip(grid, expected)):
        raise SnapshotError(
            f"Stored board is not {state.board.width}x{state.board.height}"
        )
    for x, (column, expected_column) in enumerate(zip(grid, expected)):
        for y, (stored, actual) in enumerate(zip(column, expected_column)):
            if stored != actual:
                raise SnapshotError(
                    f"Board mismatch at ({x}, {y}): stored {stored!r}, entities place {actual!r}"
                )


def _sync_unit_counter(state: GameState) -> None:
    """Raise each player's ID counter past the IDs already on the board.

    Snapshots may omit unitCounter or carry a stale one; new units must
    never reuse the ID of a live unit.
    """
    for pid in PLAYER_IDS:
        highest = state.unit_counter.get(pid, 0)
        for unit in state.units_of(pid):
            match = UNIT_ID_PATTERN.fullmatch(unit.id)
            if match and int(match.group(1)) == pid:
                highest = max(highest, int(match.group(2)))
        state.unit_counter[pid] = highest


def _check_ownership(state: GameState) -> None:
    for pid, player in state.players.items():
        owned = {unit.id for unit in state.units.values() if unit.owner == pid}
        if player.units_owned != owned:
            raise SnapshotError(
                f"Player {pid} unitsOwned {sorted(player.units_owned)} "
                f"does not match units {sorted(owned)}"
            )


def _serialize_config(config: RulesConfig) -> dict[str, Any]:
    data = dataclasses.asdict(config)
    data["base_positions"] = {str(pid): list(pos) for pid, pos in config.base_positions.items()}
    data["node_positions"] = [list(pos) for pos in config.node_positions]
    return data


def _serialize_player(player: Player) -> dict[str, Any]:
    """Convert Player to dictionary."""
    return {
        "id": player.id,
        "name": player.name,
        "energy": player.energy,
        "actionsRemaining": player.actions_remaining,
        "unitsOwned": sorted(player.units_owned),
        "resourcesGathered": player.resources_gathered,
        "unitsBuilt": player.units_built,
    }


def _deserialize_player(data: PlayerRecord) -> Player:
    """Reconstruct Player from its record."""
    return Player(
        id=data.id,
        name=data.name,
        energy=data.energy,
        actions_remaining=data.actionsRemaining,
        units_owned=set(data.unitsOwned),
        resources_gathered=data.resourcesGathered,
        units_built=data.unitsBuilt,
    )


def _serialize_unit(unit: Unit) -> dict[str, Any]:
    """Convert Unit to dictionary."""
    return {
        "id": unit.id,
        "type": unit.type.value,
        "playerId": unit.owner,
        "position": {"x": unit.x, "y": unit.y},
        "health": unit.health,
        "maxHealth": unit.max_health,
        "actionsUsed": unit.actions_used,
        "maxActions": unit.max_actions,
    }


def _deserialize_unit(data: UnitRecord) -> Unit:
    """Reconstruct Unit from its record."""
    return Unit(
        id=data.id,
        type=UnitType(data.type),
        owner=data.playerId,
        x=data.position.x,
        y=data.position.y,
        health=data.health,
        max_health=data.maxHealth,
        actions_used=data.actionsUsed,
        max_actions=data.maxActions,
    )


def _serialize_base(base: Base) -> dict[str, Any]:
    """Convert Base to dictionary."""
    return {
        "id": base.id,
        "playerId": base.owner,
        "position": {"x": base.x, "y": base.y},
        "health": base.health,
        "maxHealth": base.max_health,
        "isDestroyed": base.destroyed,
    }


def _deserialize_base(data: BaseRecord) -> Base:
    """Reconstruct Base from its record."""
    return Base(
        id=data.id,
        owner=data.playerId,
        x=data.position.x,
        y=data.position.y,
        health=data.health,
        max_health=data.maxHealth,
        destroyed=data.isDestroyed,
    )


def _serialize_node(node: ResourceNode) -> dict[str, Any]:
    """Convert ResourceNode to dictionary."""
    return {
        "id": node.id,
        "position": {"x": node.x, "y": node.y},
        "value": node.value,
        "maxValue": node.max_value,
        "regenerationRate": node.regeneration_rate,
        "cooldowns": dict(node.cooldowns),
    }


def _deserialize_node(data: NodeRecord) -> ResourceNode:
    """Reconstruct ResourceNode from its record."""
    return ResourceNode(
        id=data.id,
        x=data.position.x,
        y=data.position.y,
        value=data.value,
        max_value=data.maxValue,
        regeneration_rate=data.regenerationRate,
        cooldowns=dict(data.cooldowns),
    )
