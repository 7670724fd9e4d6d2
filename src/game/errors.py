"""
Error taxonomy for the game engine and agents.

Coordinate and lifecycle violations are caller errors and are never retried.
"""
from typing import Tuple


class GameError(Exception):
    """Base class for all game errors, carrying a stable error code."""

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class InvalidCoordinateError(GameError):
    """Raised when a coordinate lies outside the grid."""

    def __init__(self, coordinate: Tuple[int, int]) -> None:
        x, y = coordinate
        super().__init__(f"Invalid coordinate: ({x}, {y})", "INVALID_COORDINATE")
        self.coordinate = coordinate


class InvalidGameStateError(GameError):
    """Raised when an operation is attempted in the wrong lifecycle phase."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "INVALID_GAME_STATE")


class InvalidConfigurationError(InvalidGameStateError, ValueError):
    """Raised for a board configuration that cannot produce a game."""


class InvalidTileError(GameError):
    """Raised when advice is requested for a revealed or flagged tile."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "INVALID_TILE")
