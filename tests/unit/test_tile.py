"""
Unit tests for Tile class.

Tests tile state management, reveal/flag behavior, and observation conversion.
"""
import pytest
from game import Coordinate, Tile, TileState


# ============================================================================
# Tile Initialization Tests
# ============================================================================

class TestTileInitialization:
    """Test tile creation and default values."""

    def test_default_tile_is_hidden_and_safe(self, hidden_tile: Tile) -> None:
        """New tile is hidden, not a mine, with no adjacent mines."""
        assert hidden_tile.state == TileState.HIDDEN
        assert hidden_tile.is_hidden is True
        assert hidden_tile.is_mine is False
        assert hidden_tile.adjacent_mines == 0

    def test_coordinate_property(self) -> None:
        """Tile knows its own position."""
        assert Tile(3, 5).coordinate == Coordinate(3, 5)


# ============================================================================
# Tile Reveal Tests
# ============================================================================

class TestTileReveal:
    """Test tile reveal behavior."""

    def test_reveal_hidden_tile(self, hidden_tile: Tile) -> None:
        """Revealing a hidden tile succeeds and changes state."""
        assert hidden_tile.reveal() is True
        assert hidden_tile.is_revealed is True

    def test_reveal_twice_returns_false(self, hidden_tile: Tile) -> None:
        """Revealing an already revealed tile does nothing."""
        hidden_tile.reveal()
        assert hidden_tile.reveal() is False

    def test_reveal_flagged_tile_returns_false(self, hidden_tile: Tile) -> None:
        """Cannot reveal a flagged tile."""
        hidden_tile.toggle_flag()
        assert hidden_tile.reveal() is False
        assert hidden_tile.is_flagged is True

    def test_expose_overrides_flag(self, mine_tile: Tile) -> None:
        """Exposing a flagged mine reveals it and drops the flag."""
        mine_tile.toggle_flag()
        mine_tile.expose()
        assert mine_tile.is_revealed is True
        assert mine_tile.is_flagged is False


# ============================================================================
# Tile Flag Tests
# ============================================================================

class TestTileFlag:
    """Test tile flagging behavior."""

    def test_flag_and_unflag(self, hidden_tile: Tile) -> None:
        """Flag toggles between FLAGGED and HIDDEN."""
        assert hidden_tile.toggle_flag() is True
        assert hidden_tile.state == TileState.FLAGGED
        assert hidden_tile.toggle_flag() is True
        assert hidden_tile.state == TileState.HIDDEN

    def test_flag_revealed_tile_returns_false(self, numbered_tile: Tile) -> None:
        """Cannot flag a revealed tile."""
        assert numbered_tile.toggle_flag() is False
        assert numbered_tile.is_revealed is True

    def test_revealed_and_flagged_exclusive(self, hidden_tile: Tile) -> None:
        """A tile is never both revealed and flagged."""
        for action in (hidden_tile.toggle_flag, hidden_tile.reveal,
                       hidden_tile.toggle_flag, hidden_tile.reveal):
            action()
            assert not (hidden_tile.is_revealed and hidden_tile.is_flagged)


# ============================================================================
# Tile Observation Tests
# ============================================================================

class TestTileObservation:
    """Test tile observation values."""

    def test_hidden_is_negative_one(self, hidden_tile: Tile) -> None:
        assert hidden_tile.to_observation() == -1

    def test_flagged_is_negative_two(self, hidden_tile: Tile) -> None:
        hidden_tile.toggle_flag()
        assert hidden_tile.to_observation() == -2

    def test_revealed_shows_count(self, numbered_tile: Tile) -> None:
        assert numbered_tile.to_observation() == 3

    def test_revealed_mine_is_nine(self, mine_tile: Tile) -> None:
        mine_tile.reveal()
        assert mine_tile.to_observation() == 9

    @pytest.mark.parametrize("count", range(9))
    def test_all_counts(self, count: int) -> None:
        """Revealed non-mine tiles report their count."""
        tile = Tile(0, 0, adjacent_mines=count)
        tile.reveal()
        assert tile.to_observation() == count
