"""Base data model."""

from dataclasses import dataclass

from ..utils.constants import BASE_HEALTH


@dataclass
class Base:
    """A player's headquarters.

    Bases never move. Once health reaches zero the base is flagged destroyed
    for the rest of the game; it leaves the board but its record (and final
    position) stays queryable.
    """

    id: str  # e.g., "base-1"
    owner: int  # 1 or 2
    x: int
    y: int
    health: int = BASE_HEALTH
    max_health: int = BASE_HEALTH
    destroyed: bool = False

    def __post_init__(self):
        """Validate base data after initialization."""
        if self.owner not in (1, 2):
            raise ValueError(f"Invalid owner: {self.owner} (must be 1 or 2)")
        if not (0 <= self.health <= self.max_health):
            raise ValueError(
                f"Invalid health: {self.health} (must be 0-{self.max_health})"
            )
        if self.destroyed != (self.health == 0):
            raise ValueError(
                f"Base {self.id} destroyed={self.destroyed} does not match health={self.health}"
            )

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    def take_damage(self, amount: int) -> bool:
        """Apply damage and flag destruction at zero health.

        Returns:
            True if the base is destroyed
        """
        self.health = max(0, self.health - amount)
        if self.health == 0:
            self.destroyed = True
        return self.destroyed
