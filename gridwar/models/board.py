"""Single-occupancy coordinate index for units and bases."""

from typing import Iterator, List, Optional


class BoardError(ValueError):
    """Raised when a board write would break single occupancy."""


class Board:
    """Grid of cells, each holding at most one entity ID.

    Cells are indexed ``[x][y]``. The board only stores identifiers; the
    entities themselves live in the GameState collections. Every write goes
    through place/remove/relocate so the grid never holds a stale ID.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid board size: {width}x{height}")
        self.width = width
        self.height = height
        self._cells: List[List[Optional[str]]] = [
            [None for _ in range(height)] for _ in range(width)
        ]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Optional[str]:
        """Return the entity ID at a cell, or None if empty or out of bounds."""
        if not self.in_bounds(x, y):
            return None
        return self._cells[x][y]

    def is_empty(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self._cells[x][y] is None

    def place(self, entity_id: str, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise BoardError(f"Cannot place {entity_id} out of bounds at ({x}, {y})")
        occupant = self._cells[x][y]
        if occupant is not None:
            raise BoardError(f"Cannot place {entity_id} at ({x}, {y}): occupied by {occupant}")
        self._cells[x][y] = entity_id

    def remove(self, entity_id: str, x: int, y: int) -> None:
        occupant = self.get(x, y)
        if occupant != entity_id:
            raise BoardError(
                f"Cannot remove {entity_id} from ({x}, {y}): cell holds {occupant}"
            )
        self._cells[x][y] = None

    def relocate(self, entity_id: str, from_x: int, from_y: int, to_x: int, to_y: int) -> None:
        # Validate the destination before touching the source cell
        if not self.is_empty(to_x, to_y):
            raise BoardError(
                f"Cannot move {entity_id} to ({to_x}, {to_y}): not an empty cell"
            )
        self.remove(entity_id, from_x, from_y)
        self._cells[to_x][to_y] = entity_id

    def occupied(self) -> Iterator[tuple[int, int, str]]:
        """Yield (x, y, entity_id) for every occupied cell."""
        for x, column in enumerate(self._cells):
            for y, entity_id in enumerate(column):
                if entity_id is not None:
                    yield x, y, entity_id

    def occupied_count(self) -> int:
        return sum(1 for _ in self.occupied())

    def to_grid(self) -> List[List[Optional[str]]]:
        """Return a copy of the grid as nested lists ``[x][y]``."""
        return [list(column) for column in self._cells]
