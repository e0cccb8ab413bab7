"""Player data model with per-turn action budget."""

from dataclasses import dataclass, field
from typing import Set

from ..utils.constants import MAX_ACTIONS_PER_TURN, STARTING_ENERGY


@dataclass
class Player:
    """Player state.

    Players are created with the game (one per seat) and never destroyed.
    Energy is the build currency; actions_remaining is the player-wide
    budget spent by move, attack and gather commands.
    """

    id: int  # 1 or 2
    name: str = ""
    energy: int = STARTING_ENERGY
    actions_remaining: int = MAX_ACTIONS_PER_TURN
    units_owned: Set[str] = field(default_factory=set)  # Live unit IDs
    resources_gathered: int = 0  # Cumulative, never decreases
    units_built: int = 0  # Cumulative count of units ever created

    def __post_init__(self):
        """Validate player data after initialization."""
        if self.id not in (1, 2):
            raise ValueError(f"Invalid player id: {self.id} (must be 1 or 2)")
        if not self.name:
            self.name = f"Player {self.id}"
        if self.energy < 0:
            raise ValueError(f"Invalid energy: {self.energy} (must be >= 0)")
        if self.actions_remaining < 0:
            raise ValueError(
                f"Invalid actions_remaining: {self.actions_remaining} (must be >= 0)"
            )

    @property
    def opponent(self) -> int:
        return 2 if self.id == 1 else 1

    def add_energy(self, amount: int) -> None:
        self.energy += amount

    def spend_energy(self, amount: int) -> bool:
        """Spend energy if the player has enough.

        Returns:
            True if the energy was spent, False if the pool was too small
        """
        if self.energy < amount:
            return False
        self.energy -= amount
        return True

    def use_action(self) -> bool:
        if self.actions_remaining <= 0:
            return False
        self.actions_remaining -= 1
        return True

    def reset_actions(self, budget: int = MAX_ACTIONS_PER_TURN) -> None:
        self.actions_remaining = budget

    def add_unit(self, unit_id: str) -> None:
        self.units_owned.add(unit_id)

    def remove_unit(self, unit_id: str) -> None:
        self.units_owned.discard(unit_id)
