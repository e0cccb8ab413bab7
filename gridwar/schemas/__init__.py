"""Pydantic schemas for engine snapshots."""

from .snapshot import (
    BaseRecord,
    NodeRecord,
    PlayerRecord,
    Position,
    SnapshotModel,
    UnitRecord,
)

__all__ = [
    "BaseRecord",
    "NodeRecord",
    "PlayerRecord",
    "Position",
    "SnapshotModel",
    "UnitRecord",
]
