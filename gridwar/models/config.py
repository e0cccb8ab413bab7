"""Rule set a game is played under."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from ..utils import constants


@dataclass
class RulesConfig:
    """Tunable game rules.

    Defaults mirror the module constants. A config is stored inside every
    snapshot so a restored game keeps playing under the same rules.
    """

    grid_size: int = constants.GRID_SIZE
    starting_energy: int = constants.STARTING_ENERGY
    max_actions_per_turn: int = constants.MAX_ACTIONS_PER_TURN
    income_per_turn: int = constants.INCOME_PER_TURN
    base_health: int = constants.BASE_HEALTH
    base_positions: Dict[int, Tuple[int, int]] = field(
        default_factory=lambda: dict(constants.BASE_POSITIONS)
    )
    placement_radius: int = constants.PLACEMENT_RADIUS
    max_placement_radius: int = constants.MAX_PLACEMENT_RADIUS
    node_positions: Tuple[Tuple[int, int], ...] = constants.NODE_POSITIONS
    node_initial_value: int = constants.NODE_INITIAL_VALUE
    node_regeneration_rate: int = constants.NODE_REGENERATION_RATE
    gather_amount: int = constants.GATHER_AMOUNT
    min_elimination_turn: int = constants.MIN_ELIMINATION_TURN
    resource_victory_threshold: Optional[int] = None  # Disabled when None

    def __post_init__(self):
        """Validate rule values after initialization."""
        if self.grid_size < 2:
            raise ValueError(f"Invalid grid_size: {self.grid_size} (must be >= 2)")
        # JSON round trips turn keys into strings and tuples into lists
        self.base_positions = {
            int(pid): (int(pos[0]), int(pos[1])) for pid, pos in self.base_positions.items()
        }
        self.node_positions = tuple((int(x), int(y)) for x, y in self.node_positions)
        if set(self.base_positions) != set(constants.PLAYER_IDS):
            raise ValueError(
                f"Invalid base_positions: {self.base_positions} (need one per player)"
            )
        if len(set(self.base_positions.values())) != len(self.base_positions):
            raise ValueError("Bases cannot share a cell")
        for x, y in list(self.base_positions.values()) + list(self.node_positions):
            if not (0 <= x < self.grid_size and 0 <= y < self.grid_size):
                raise ValueError(f"Position ({x}, {y}) is outside a {self.grid_size} grid")
        if self.max_actions_per_turn <= 0:
            raise ValueError(
                f"Invalid max_actions_per_turn: {self.max_actions_per_turn} (must be > 0)"
            )
        if self.max_placement_radius < self.placement_radius:
            raise ValueError("max_placement_radius must be >= placement_radius")
        if self.min_elimination_turn < 1:
            raise ValueError(
                f"Invalid min_elimination_turn: {self.min_elimination_turn} (must be >= 1)"
            )
        if self.resource_victory_threshold is not None and self.resource_victory_threshold <= 0:
            raise ValueError("resource_victory_threshold must be positive or None")
