"""New game setup: players, bases and resource nodes."""

import logging
import uuid
from typing import Optional

from ..models import Base, GameState, Player, ResourceNode, RulesConfig
from ..utils.constants import PLAYER_IDS

logger = logging.getLogger(__name__)


def generate_map(config: Optional[RulesConfig] = None, game_id: Optional[str] = None) -> GameState:
    """Create a ready-to-start game.

    Places one base per player at its configured starting cell and one
    full resource node per configured node position. Nodes must not share
    a cell with a base.

    Args:
        config: Rules to play under (defaults to RulesConfig())
        game_id: Identifier to use (defaults to a random UUID hex)

    Returns:
        GameState with status "ready"

    Raises:
        ValueError: If a node position collides with a base
    """
    config = config or RulesConfig()
    state = GameState(game_id=game_id or uuid.uuid4().hex, config=config)

    for pid in PLAYER_IDS:
        state.players[pid] = Player(
            id=pid,
            energy=config.starting_energy,
            actions_remaining=config.max_actions_per_turn,
        )
        x, y = config.base_positions[pid]
        state.add_base(
            Base(id=f"base-{pid}", owner=pid, x=x, y=y, health=config.base_health, max_health=config.base_health)
        )

    base_cells = set(config.base_positions.values())
    for index, (x, y) in enumerate(config.node_positions, start=1):
        if (x, y) in base_cells:
            raise ValueError(f"Resource node at ({x}, {y}) overlaps a base")
        node = ResourceNode(
            id=f"node-{index}",
            x=x,
            y=y,
            value=config.node_initial_value,
            max_value=config.node_initial_value,
            regeneration_rate=config.node_regeneration_rate,
        )
        state.resource_nodes[node.id] = node

    logger.debug(
        f"Generated game {state.game_id}: {config.grid_size}x{config.grid_size}, "
        f"{len(state.resource_nodes)} resource nodes"
    )
    return state
