"""
Coordinate utilities for the Minesweeper grid.

Coordinates are (x, y) pairs, 0-indexed, with x as the column and y as
the row. String keys of the form "x,y" are used for set membership.
"""
from typing import List, NamedTuple


class Coordinate(NamedTuple):
    """Immutable grid position."""

    x: int
    y: int


def coordinate_to_string(coord: Coordinate) -> str:
    """Serialize a coordinate to its "x,y" key."""
    return f"{coord[0]},{coord[1]}"


def string_to_coordinate(key: str) -> Coordinate:
    """Parse an "x,y" key back into a coordinate."""
    x, y = key.split(",")
    return Coordinate(int(x), int(y))


def is_valid_coordinate(coord: Coordinate, width: int, height: int) -> bool:
    """Check if position is within grid bounds."""
    x, y = coord
    return 0 <= x < width and 0 <= y < height


def get_adjacent_coordinates(
    coord: Coordinate, width: int, height: int
) -> List[Coordinate]:
    """
    Get valid neighboring positions, diagonals included.

    Args:
        coord: Center position.
        width: Grid width.
        height: Grid height.

    Returns:
        Up to 8 in-bounds neighbors.
    """
    x, y = coord
    neighbors = []
    for delta_x in (-1, 0, 1):
        for delta_y in (-1, 0, 1):
            if delta_x == 0 and delta_y == 0:
                continue
            neighbor = Coordinate(x + delta_x, y + delta_y)
            if is_valid_coordinate(neighbor, width, height):
                neighbors.append(neighbor)
    return neighbors
