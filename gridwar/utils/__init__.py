"""Utility functions and constants for Grid War."""

from .constants import (
    DRAW,
    GRID_SIZE,
    MAX_ACTIONS_PER_TURN,
    PHASES,
    PLAYER_IDS,
    STATUS_ENDED,
    STATUS_PLAYING,
    STATUS_READY,
)
from .distance import chebyshev_distance, manhattan_distance

__all__ = [
    "DRAW",
    "GRID_SIZE",
    "MAX_ACTIONS_PER_TURN",
    "PHASES",
    "PLAYER_IDS",
    "STATUS_ENDED",
    "STATUS_PLAYING",
    "STATUS_READY",
    "chebyshev_distance",
    "manhattan_distance",
]
