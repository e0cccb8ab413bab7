"""Pydantic models describing the snapshot format.

Snapshots are validated against these models before any entity is
rebuilt, so a missing or mistyped field fails loudly on load.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..utils.constants import DRAW, PHASES


class Position(BaseModel):
    """Grid cell."""

    x: int = Field(ge=0)
    y: int = Field(ge=0)


class PlayerRecord(BaseModel):
    """Serialized Player."""

    model_config = ConfigDict(extra="forbid")

    id: Literal[1, 2]
    name: str
    energy: int = Field(ge=0)
    actionsRemaining: int = Field(ge=0)  # noqa: N815
    unitsOwned: list[str] = Field(default_factory=list)  # noqa: N815
    resourcesGathered: int = Field(default=0, ge=0)  # noqa: N815
    unitsBuilt: int = Field(default=0, ge=0)  # noqa: N815


class UnitRecord(BaseModel):
    """Serialized Unit."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    type: Literal["worker", "scout", "infantry", "heavy"]
    playerId: Literal[1, 2]  # noqa: N815
    position: Position
    health: int = Field(gt=0)
    maxHealth: int = Field(gt=0)  # noqa: N815
    actionsUsed: int = Field(ge=0)  # noqa: N815
    maxActions: int = Field(ge=0)  # noqa: N815

    @model_validator(mode="after")
    def check_budgets(self) -> "UnitRecord":
        """Health and actions must stay within their maximums."""
        if self.health > self.maxHealth:
            raise ValueError(f"Unit {self.id} health {self.health} exceeds {self.maxHealth}")
        if self.actionsUsed > self.maxActions:
            raise ValueError(
                f"Unit {self.id} actionsUsed {self.actionsUsed} exceeds {self.maxActions}"
            )
        return self


class BaseRecord(BaseModel):
    """Serialized Base."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    playerId: Literal[1, 2]  # noqa: N815
    position: Position
    health: int = Field(ge=0)
    maxHealth: int = Field(gt=0)  # noqa: N815
    isDestroyed: bool  # noqa: N815


class NodeRecord(BaseModel):
    """Serialized ResourceNode."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    position: Position
    value: int = Field(ge=0)
    maxValue: int = Field(gt=0)  # noqa: N815
    regenerationRate: int = Field(ge=0)  # noqa: N815
    cooldowns: dict[str, int] = Field(default_factory=dict)


class SnapshotModel(BaseModel):
    """Complete engine snapshot."""

    version: int = 1
    gameId: str = Field(min_length=1)  # noqa: N815
    status: Literal["ready", "playing", "ended"]
    currentPlayer: Literal[1, 2]  # noqa: N815
    currentPhase: str  # noqa: N815
    turnNumber: int = Field(ge=1)  # noqa: N815
    players: dict[str, PlayerRecord]
    units: dict[str, UnitRecord]
    bases: dict[str, BaseRecord]
    resourceNodes: dict[str, NodeRecord] = Field(default_factory=dict)  # noqa: N815
    board: list[list[str | None]]
    winner: int | str | None
    endReason: str | None = None  # noqa: N815
    surrenderedPlayer: Literal[1, 2] | None = None  # noqa: N815
    drawAgreed: bool = False  # noqa: N815
    unitCounter: dict[str, int] = Field(default_factory=dict)  # noqa: N815
    config: dict[str, Any] = Field(default_factory=dict)

    @field_validator("currentPhase")
    @classmethod
    def known_phase(cls, v: str) -> str:
        """Phase must be one of the three turn phases."""
        if v not in PHASES:
            raise ValueError(f"Unknown phase: {v}")
        return v

    @field_validator("winner")
    @classmethod
    def three_way_winner(cls, v: int | str | None) -> int | str | None:
        """Winner is a player id, the draw sentinel, or None."""
        if v not in (None, 1, 2, DRAW):
            raise ValueError(f"Invalid winner: {v!r}")
        return v

    @model_validator(mode="after")
    def winner_matches_status(self) -> "SnapshotModel":
        """An ended game has a result; an unfinished one has none."""
        if self.status == "ended" and self.winner is None:
            raise ValueError("Ended game has no winner")
        if self.status != "ended" and self.winner is not None:
            raise ValueError(f"Game with status {self.status} has winner {self.winner!r}")
        return self
