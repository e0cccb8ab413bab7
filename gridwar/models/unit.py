"""Unit data model and the fixed unit roster."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class UnitStats:
    """Static stat block shared by every unit of a type.

    Attributes:
        cost: Energy spent to build the unit
        health: Starting (and maximum) health
        movement: Per-turn action allowance; one action per cell moved
        damage: Fixed damage dealt by one attack
        can_gather: Whether the unit may harvest resource nodes
    """

    cost: int
    health: int
    movement: int
    damage: int
    can_gather: bool = False


class UnitType(Enum):
    """Closed roster of buildable unit types."""

    WORKER = "worker"
    SCOUT = "scout"
    INFANTRY = "infantry"
    HEAVY = "heavy"

    @property
    def stats(self) -> UnitStats:
        return UNIT_STATS[self]

    @classmethod
    def parse(cls, value: "str | UnitType") -> "UnitType":
        """Resolve a unit type from its name.

        Raises:
            ValueError: If the name is not part of the roster
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown unit type: {value!r}") from None


UNIT_STATS: dict[UnitType, UnitStats] = {
    UnitType.WORKER: UnitStats(cost=10, health=50, movement=2, damage=1, can_gather=True),
    UnitType.SCOUT: UnitStats(cost=15, health=30, movement=4, damage=1),
    UnitType.INFANTRY: UnitStats(cost=25, health=100, movement=2, damage=2),
    UnitType.HEAVY: UnitStats(cost=50, health=200, movement=1, damage=3),
}


@dataclass
class Unit:
    """A unit on the board.

    Units are created in the build phase and removed from the game as soon
    as their health reaches zero.
    """

    id: str  # Unique identifier (e.g., "p1-003")
    type: UnitType
    owner: int  # 1 or 2
    x: int
    y: int
    health: int
    max_health: int
    actions_used: int = 0
    max_actions: int = 0

    def __post_init__(self):
        """Validate unit data after initialization."""
        if not isinstance(self.type, UnitType):
            self.type = UnitType.parse(self.type)
        if self.owner not in (1, 2):
            raise ValueError(f"Invalid owner: {self.owner} (must be 1 or 2)")
        if self.max_health <= 0:
            raise ValueError(f"Invalid max_health: {self.max_health} (must be > 0)")
        if not (0 <= self.health <= self.max_health):
            raise ValueError(
                f"Invalid health: {self.health} (must be 0-{self.max_health})"
            )
        if not (0 <= self.actions_used <= self.max_actions):
            raise ValueError(
                f"Invalid actions_used: {self.actions_used} (must be 0-{self.max_actions})"
            )

    @classmethod
    def create(cls, unit_id: str, unit_type: UnitType, owner: int, x: int, y: int) -> "Unit":
        """Build a fresh unit with the stats of its type."""
        stats = unit_type.stats
        return cls(
            id=unit_id,
            type=unit_type,
            owner=owner,
            x=x,
            y=y,
            health=stats.health,
            max_health=stats.health,
            actions_used=0,
            max_actions=stats.movement,
        )

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    @property
    def remaining_actions(self) -> int:
        return self.max_actions - self.actions_used

    @property
    def damage(self) -> int:
        return self.type.stats.damage

    def can_act(self) -> bool:
        return self.actions_used < self.max_actions

    def use_actions(self, count: int = 1) -> None:
        """Spend unit actions.

        Raises:
            ValueError: If the unit does not have that many actions left
        """
        if count < 0 or count > self.remaining_actions:
            raise ValueError(
                f"Unit {self.id} cannot spend {count} actions "
                f"({self.remaining_actions} remaining)"
            )
        self.actions_used += count

    def reset_actions(self) -> None:
        self.actions_used = 0

    def move_to(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def take_damage(self, amount: int) -> bool:
        """Apply damage, clamping health at zero.

        Returns:
            True if the unit is destroyed
        """
        self.health = max(0, self.health - amount)
        return self.health == 0
