"""
Minesweeper game module.

Provides core game logic including the engine, tile state and
coordinate utilities.
"""
from .coordinates import (
    Coordinate,
    coordinate_to_string,
    string_to_coordinate,
    is_valid_coordinate,
    get_adjacent_coordinates,
)
from .tile import Tile, TileState
from .engine import (
    GameEngine,
    GameConfig,
    GameState,
    GameStatus,
    Dimensions,
    BEGINNER,
    INTERMEDIATE,
    EXPERT,
)
from .errors import (
    GameError,
    InvalidCoordinateError,
    InvalidGameStateError,
    InvalidConfigurationError,
    InvalidTileError,
)

__all__ = [
    "Coordinate",
    "coordinate_to_string",
    "string_to_coordinate",
    "is_valid_coordinate",
    "get_adjacent_coordinates",
    "Tile",
    "TileState",
    "GameEngine",
    "GameConfig",
    "GameState",
    "GameStatus",
    "Dimensions",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "GameError",
    "InvalidCoordinateError",
    "InvalidGameStateError",
    "InvalidConfigurationError",
    "InvalidTileError",
]
