"""
Tile module for Minesweeper game.

Represents individual tiles on the game grid with their state
(hidden/revealed/flagged) and content (mine/number).
"""
from enum import Enum, auto
from dataclasses import dataclass

from .coordinates import Coordinate


# ============================================================================
# Constants
# ============================================================================

class TileState(Enum):
    """Possible visual states of a tile."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


# ============================================================================
# Tile Data Class
# ============================================================================

@dataclass
class Tile:
    """
    Represents a single tile in the Minesweeper grid.

    A single state field makes revealed and flagged mutually exclusive.

    Attributes:
        x: Column index.
        y: Row index.
        is_mine: Whether this tile contains a mine.
        adjacent_mines: Count of mines in neighboring tiles (0-8).
        state: Current visual state (hidden, revealed, or flagged).
    """

    x: int
    y: int
    is_mine: bool = False
    adjacent_mines: int = 0
    state: TileState = TileState.HIDDEN

    def reveal(self) -> bool:
        """
        Reveal this tile.

        Returns:
            True if tile was revealed, False if already revealed or flagged.
        """
        if self.state != TileState.HIDDEN:
            return False
        self.state = TileState.REVEALED
        return True

    def expose(self) -> None:
        """Force this tile revealed, dropping any flag (end-of-game only)."""
        self.state = TileState.REVEALED

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this tile.

        Returns:
            True if flag was toggled, False if tile is revealed.
        """
        if self.state == TileState.REVEALED:
            return False
        if self.state == TileState.HIDDEN:
            self.state = TileState.FLAGGED
        else:
            self.state = TileState.HIDDEN
        return True

    @property
    def coordinate(self) -> Coordinate:
        """Position of this tile."""
        return Coordinate(self.x, self.y)

    @property
    def is_hidden(self) -> bool:
        """Check if tile is hidden."""
        return self.state == TileState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if tile is revealed."""
        return self.state == TileState.REVEALED

    @property
    def is_flagged(self) -> bool:
        """Check if tile is flagged."""
        return self.state == TileState.FLAGGED

    def to_observation(self) -> int:
        """
        Convert tile to an observation value for array views.

        Returns:
            -1: Hidden tile
            -2: Flagged tile
            0-8: Revealed tile with adjacent mine count
            9: Revealed mine (game over state)
        """
        if self.state == TileState.HIDDEN:
            return -1
        if self.state == TileState.FLAGGED:
            return -2
        if self.is_mine:
            return 9
        return self.adjacent_mines
