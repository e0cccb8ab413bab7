"""Distance calculations for the game grid."""


def manhattan_distance(x1: int, y1: int, x2: int, y2: int) -> int:
    """Calculate Manhattan distance between two points.

    Sum of the absolute coordinate differences. This is the movement cost
    metric: every orthogonal step spends one unit action.

    Args:
        x1: X coordinate of first point
        y1: Y coordinate of first point
        x2: X coordinate of second point
        y2: Y coordinate of second point

    Returns:
        Manhattan distance between the two points

    Examples:
        >>> manhattan_distance(10, 10, 12, 11)
        3
        >>> manhattan_distance(0, 0, 0, 0)
        0
    """
    return abs(x2 - x1) + abs(y2 - y1)


def chebyshev_distance(x1: int, y1: int, x2: int, y2: int) -> int:
    """Calculate Chebyshev distance between two points.

    Chebyshev distance is the maximum absolute difference of coordinates.
    Also known as chessboard or L∞ distance. A value of 1 means the two
    cells touch, diagonals included, which is the attack range rule.

    Args:
        x1: X coordinate of first point
        y1: Y coordinate of first point
        x2: X coordinate of second point
        y2: Y coordinate of second point

    Returns:
        Chebyshev distance between the two points

    Examples:
        >>> chebyshev_distance(0, 0, 1, 1)
        1
        >>> chebyshev_distance(0, 0, 5, 0)
        5
    """
    return max(abs(x2 - x1), abs(y2 - y1))
