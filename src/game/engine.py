"""
Engine module for Minesweeper game.

Implements the game grid with mine placement, tile revealing,
flagging and win/lose detection. The engine is the only writer of
grid state; readers get deep snapshots.
"""
import dataclasses
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, List, NamedTuple, Optional, Set, Tuple, Union

import numpy as np

from .coordinates import (
    Coordinate,
    coordinate_to_string,
    get_adjacent_coordinates,
    is_valid_coordinate,
)
from .errors import (
    InvalidConfigurationError,
    InvalidCoordinateError,
    InvalidGameStateError,
)
from .tile import Tile


# ============================================================================
# Constants
# ============================================================================

class GameStatus(str, Enum):
    """Possible states of the game."""

    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class Dimensions(NamedTuple):
    """Grid size."""

    width: int
    height: int


@dataclass
class GameConfig:
    """
    Configuration for a Minesweeper grid.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        mine_count: Total mines to place.
    """

    width: int = 9
    height: int = 9
    mine_count: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.width < 1 or self.height < 1:
            raise InvalidConfigurationError("Board dimensions must be positive")
        if self.mine_count < 0:
            raise InvalidConfigurationError("Number of mines cannot be negative")
        max_mines = self.width * self.height - 1
        if self.mine_count > max_mines:
            raise InvalidConfigurationError(f"Too many mines (max {max_mines})")

    @property
    def total_tiles(self) -> int:
        """Number of tiles on the grid."""
        return self.width * self.height


# Preset difficulty levels
BEGINNER = GameConfig(9, 9, 10)
INTERMEDIATE = GameConfig(16, 16, 40)
EXPERT = GameConfig(30, 16, 99)


# ============================================================================
# Snapshot
# ============================================================================

@dataclass(frozen=True)
class GameState:
    """
    Read-only snapshot of a game.

    The grid holds copies of the engine's tiles, so nothing reachable from
    a snapshot aliases engine state.
    """

    grid: Tuple[Tuple[Tile, ...], ...]
    game_status: GameStatus
    mine_locations: FrozenSet[str]
    revealed_tiles: FrozenSet[str]
    flagged_tiles: FrozenSet[str]
    width: int
    height: int
    mine_count: int

    @property
    def dimensions(self) -> Dimensions:
        """Grid size as (width, height)."""
        return Dimensions(self.width, self.height)

    @property
    def total_tiles(self) -> int:
        """Number of tiles on the grid."""
        return self.width * self.height

    @property
    def progress(self) -> float:
        """Fraction of tiles revealed so far."""
        return len(self.revealed_tiles) / self.total_tiles

    def tile_at(self, coord: Coordinate) -> Tile:
        """Get the tile at a position (grid is indexed [y][x])."""
        x, y = coord
        return self.grid[y][x]

    def observation(self) -> np.ndarray:
        """
        Get grid state as a numpy array.

        Returns:
            2D int8 array of shape (height, width) where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with adjacent count
                9 = revealed mine
        """
        obs = np.zeros((self.height, self.width), dtype=np.int8)
        for row in self.grid:
            for tile in row:
                obs[tile.y, tile.x] = tile.to_observation()
        return obs


# ============================================================================
# Engine Class
# ============================================================================

@dataclass
class GameEngine:
    """
    Minesweeper game engine.

    Manages the grid of tiles, mine placement, revealing logic,
    and win/lose conditions.

    Args:
        config: Grid configuration.
        seed: Seed or numpy Generator used for mine placement.
        mine_locations: Explicit mine layout; overrides random placement.
    """

    config: GameConfig = field(default_factory=GameConfig)
    seed: Optional[Union[int, np.random.Generator]] = field(default=None, repr=False)
    mine_locations: Optional[Iterable[Coordinate]] = field(default=None, repr=False)
    _grid: List[List[Tile]] = field(default_factory=list, init=False, repr=False)
    _game_status: GameStatus = field(default=GameStatus.PLAYING, init=False)
    _mines: Set[str] = field(default_factory=set, init=False, repr=False)
    _revealed: Set[str] = field(default_factory=set, init=False, repr=False)
    _flagged: Set[str] = field(default_factory=set, init=False, repr=False)

    def __post_init__(self) -> None:
        """Build the grid, place mines and count neighbors."""
        self._rng = np.random.default_rng(self.seed)
        self._init_grid()
        if self.mine_locations is None:
            mines = self._place_mines()
        else:
            mines = self._preset_mines(self.mine_locations)
        for coord in mines:
            self._grid[coord.y][coord.x].is_mine = True
            self._mines.add(coordinate_to_string(coord))
        self._calculate_adjacent_mines()

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create empty grid of tiles, indexed [y][x]."""
        self._grid = [
            [Tile(x, y) for x in range(self.config.width)]
            for y in range(self.config.height)
        ]

    def _place_mines(self) -> List[Coordinate]:
        """Choose distinct mine positions by rejection sampling."""
        chosen: List[Coordinate] = []
        seen: Set[Coordinate] = set()
        while len(chosen) < self.config.mine_count:
            coord = Coordinate(
                int(self._rng.integers(self.config.width)),
                int(self._rng.integers(self.config.height)),
            )
            if coord not in seen:
                seen.add(coord)
                chosen.append(coord)
        return chosen

    def _preset_mines(self, locations: Iterable[Coordinate]) -> List[Coordinate]:
        """Validate an explicit mine layout against the configuration."""
        mines = [Coordinate(*coord) for coord in locations]
        if len(set(mines)) != len(mines):
            raise InvalidConfigurationError("Mine locations must be distinct")
        if len(mines) != self.config.mine_count:
            raise InvalidConfigurationError(
                f"Expected {self.config.mine_count} mine locations, got {len(mines)}"
            )
        for coord in mines:
            if not self._is_valid_position(coord):
                raise InvalidConfigurationError(
                    f"Mine location out of bounds: ({coord.x}, {coord.y})"
                )
        return mines

    def _calculate_adjacent_mines(self) -> None:
        """Calculate adjacent mine counts for all non-mine tiles."""
        for row in self._grid:
            for tile in row:
                if not tile.is_mine:
                    tile.adjacent_mines = sum(
                        1 for n in self._get_neighbors(tile.coordinate)
                        if self._grid[n.y][n.x].is_mine
                    )

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def _get_neighbors(self, coord: Coordinate) -> List[Coordinate]:
        return get_adjacent_coordinates(coord, self.config.width, self.config.height)

    def _is_valid_position(self, coord: Coordinate) -> bool:
        return is_valid_coordinate(coord, self.config.width, self.config.height)

    def _validate_action(self, coord: Coordinate) -> Tile:
        """Check bounds and lifecycle before a mutating action."""
        if not self._is_valid_position(coord):
            raise InvalidCoordinateError(coord)
        if self._game_status != GameStatus.PLAYING:
            raise InvalidGameStateError("Game is not in playing state")
        return self._grid[coord[1]][coord[0]]

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def click_tile(self, coord: Coordinate) -> None:
        """
        Reveal the tile at the given position.

        Hidden zero-count tiles cascade to their neighbors. A mine ends the
        game as lost and exposes every mine. Clicking a revealed or flagged
        tile does nothing.

        Args:
            coord: Position to reveal.

        Raises:
            InvalidCoordinateError: Position is off the grid.
            InvalidGameStateError: Game is already over.
        """
        tile = self._validate_action(coord)
        if not tile.reveal():
            return
        self._revealed.add(coordinate_to_string(tile.coordinate))

        if tile.is_mine:
            self._game_status = GameStatus.LOST
            self._reveal_all_mines()
            return

        if tile.adjacent_mines == 0:
            self._cascade_reveal(tile.coordinate)

        self._check_win_condition()

    def _cascade_reveal(self, start: Coordinate) -> None:
        """Flood-fill outward from an empty tile; mines and flags bound it."""
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for neighbor in self._get_neighbors(current):
                tile = self._grid[neighbor.y][neighbor.x]
                if tile.is_mine or not tile.reveal():
                    continue
                self._revealed.add(coordinate_to_string(neighbor))
                if tile.adjacent_mines == 0:
                    queue.append(neighbor)

    def _reveal_all_mines(self) -> None:
        """Expose every mine after a loss; non-mine tiles are untouched."""
        for row in self._grid:
            for tile in row:
                if tile.is_mine:
                    key = coordinate_to_string(tile.coordinate)
                    tile.expose()
                    self._flagged.discard(key)
                    self._revealed.add(key)

    def _check_win_condition(self) -> None:
        """Check if all non-mine tiles are revealed."""
        non_mine_tiles = self.config.total_tiles - self.config.mine_count
        if len(self._revealed) == non_mine_tiles:
            self._game_status = GameStatus.WON

    def flag_tile(self, coord: Coordinate) -> None:
        """
        Toggle flag on a tile. Revealed tiles are left alone.

        Raises:
            InvalidCoordinateError: Position is off the grid.
            InvalidGameStateError: Game is already over.
        """
        tile = self._validate_action(coord)
        if not tile.toggle_flag():
            return
        key = coordinate_to_string(tile.coordinate)
        if tile.is_flagged:
            self._flagged.add(key)
        else:
            self._flagged.discard(key)

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def game_status(self) -> GameStatus:
        """Get current game status."""
        return self._game_status

    @property
    def is_playing(self) -> bool:
        return self._game_status == GameStatus.PLAYING

    @property
    def is_won(self) -> bool:
        return self._game_status == GameStatus.WON

    @property
    def is_lost(self) -> bool:
        return self._game_status == GameStatus.LOST

    def get_game_state(self) -> GameState:
        """Return a deep snapshot of the current game."""
        return GameState(
            grid=tuple(
                tuple(dataclasses.replace(tile) for tile in row)
                for row in self._grid
            ),
            game_status=self._game_status,
            mine_locations=frozenset(self._mines),
            revealed_tiles=frozenset(self._revealed),
            flagged_tiles=frozenset(self._flagged),
            width=self.config.width,
            height=self.config.height,
            mine_count=self.config.mine_count,
        )

    def get_observation(self) -> np.ndarray:
        """Get grid state as a numpy array (see GameState.observation)."""
        return self.get_game_state().observation()

    def get_valid_actions(self) -> List[Coordinate]:
        """
        Get list of tiles that can still be revealed.

        Returns:
            List of hidden (unrevealed, unflagged) positions.
        """
        return [
            tile.coordinate
            for row in self._grid
            for tile in row
            if tile.is_hidden
        ]
