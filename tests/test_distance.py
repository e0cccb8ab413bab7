"""Tests for distance calculations."""

from gridwar.utils import chebyshev_distance, manhattan_distance


class TestManhattanDistance:
    """Test Manhattan distance calculation."""

    def test_distance_same_point(self):
        assert manhattan_distance(5, 5, 5, 5) == 0

    def test_distance_mixed(self):
        """Test that both axes add up."""
        assert manhattan_distance(10, 10, 12, 11) == 3
        assert manhattan_distance(12, 11, 10, 10) == 3

    def test_diagonal_costs_two(self):
        assert manhattan_distance(0, 0, 1, 1) == 2


class TestChebyshevDistance:
    """Test Chebyshev distance calculation."""

    def test_distance_same_point(self):
        assert chebyshev_distance(5, 5, 5, 5) == 0

    def test_diagonal_neighbour_is_adjacent(self):
        assert chebyshev_distance(10, 10, 11, 11) == 1
        assert chebyshev_distance(10, 10, 9, 11) == 1

    def test_distance_uses_larger_axis(self):
        assert chebyshev_distance(0, 0, 3, 4) == 4
