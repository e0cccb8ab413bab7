"""Resource node data model."""

from dataclasses import dataclass, field
from typing import Dict

from ..utils.constants import NODE_INITIAL_VALUE, NODE_REGENERATION_RATE


@dataclass
class ResourceNode:
    """A depletable, regenerating source of energy.

    Nodes live for the whole game and are not board occupants. The
    cooldowns map records, per unit ID, the turn number of that unit's last
    gather from this node; entries are cleared when the owner's resource
    phase begins.
    """

    id: str  # e.g., "node-1"
    x: int
    y: int
    value: int = NODE_INITIAL_VALUE
    max_value: int = NODE_INITIAL_VALUE
    regeneration_rate: int = NODE_REGENERATION_RATE
    cooldowns: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        """Validate node data after initialization."""
        if self.max_value <= 0:
            raise ValueError(f"Invalid max_value: {self.max_value} (must be > 0)")
        if not (0 <= self.value <= self.max_value):
            raise ValueError(f"Invalid value: {self.value} (must be 0-{self.max_value})")
        if self.regeneration_rate < 0:
            raise ValueError(
                f"Invalid regeneration_rate: {self.regeneration_rate} (must be >= 0)"
            )

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    @property
    def depleted(self) -> bool:
        return self.value == 0

    def is_on_cooldown(self, unit_id: str) -> bool:
        return unit_id in self.cooldowns

    def extract(self, amount: int) -> int:
        """Remove up to amount from the node, flooring at zero.

        Returns:
            The amount actually removed
        """
        taken = min(amount, self.value)
        self.value -= taken
        return taken

    def regenerate(self) -> int:
        """Regenerate toward max_value.

        Returns:
            The amount regenerated (0 when already full)
        """
        gained = min(self.regeneration_rate, self.max_value - self.value)
        self.value += gained
        return gained
