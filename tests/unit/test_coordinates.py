"""
Unit tests for coordinate utilities.
"""
import pytest
from game import (
    Coordinate,
    coordinate_to_string,
    get_adjacent_coordinates,
    is_valid_coordinate,
    string_to_coordinate,
)


class TestKeys:
    """Test "x,y" key conversion."""

    def test_coordinate_to_string(self) -> None:
        """Keys are x then y, comma separated."""
        assert coordinate_to_string(Coordinate(3, 7)) == "3,7"

    def test_plain_tuple_accepted(self) -> None:
        """Plain tuples serialize like coordinates."""
        assert coordinate_to_string((0, 12)) == "0,12"

    @pytest.mark.parametrize("coord", [(0, 0), (4, 2), (29, 15)])
    def test_key_round_trip(self, coord) -> None:
        """Parsing a key gives back the original coordinate."""
        assert string_to_coordinate(coordinate_to_string(coord)) == Coordinate(*coord)


class TestBounds:
    """Test bounds checking."""

    @pytest.mark.parametrize("coord", [(0, 0), (8, 8), (0, 8), (8, 0)])
    def test_in_bounds(self, coord) -> None:
        """Corners of a 9x9 grid are valid."""
        assert is_valid_coordinate(coord, 9, 9) is True

    @pytest.mark.parametrize("coord", [(-1, 0), (0, -1), (9, 0), (0, 9)])
    def test_out_of_bounds(self, coord) -> None:
        """Positions just off the grid are invalid."""
        assert is_valid_coordinate(coord, 9, 9) is False

    def test_non_square_grid(self) -> None:
        """Width bounds x and height bounds y."""
        assert is_valid_coordinate((29, 15), 30, 16) is True
        assert is_valid_coordinate((15, 29), 30, 16) is False


class TestAdjacency:
    """Test neighbor enumeration."""

    def test_corner_has_three_neighbors(self) -> None:
        """Top-left corner has 3 neighbors."""
        neighbors = get_adjacent_coordinates((0, 0), 9, 9)
        assert set(neighbors) == {(1, 0), (0, 1), (1, 1)}

    def test_edge_has_five_neighbors(self) -> None:
        """Edge tile has 5 neighbors."""
        assert len(get_adjacent_coordinates((4, 0), 9, 9)) == 5

    def test_center_has_eight_neighbors(self) -> None:
        """Center tile has 8 neighbors including diagonals."""
        neighbors = get_adjacent_coordinates((4, 4), 9, 9)
        assert len(neighbors) == 8
        assert (3, 3) in neighbors and (5, 5) in neighbors

    def test_excludes_self(self) -> None:
        """A tile is never its own neighbor."""
        assert (4, 4) not in get_adjacent_coordinates((4, 4), 9, 9)

    def test_single_tile_grid(self) -> None:
        """A 1x1 grid has no neighbors."""
        assert get_adjacent_coordinates((0, 0), 1, 1) == []
