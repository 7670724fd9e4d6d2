"""
Capability interfaces for the three agent roles.

The router accepts only instances of these classes. Each interface
declares exactly the operations its role may perform; the analyst's
interface has no operation that produces player-facing output.
"""
from abc import ABC, abstractmethod
from typing import FrozenSet, List, Optional

from game.coordinates import Coordinate
from game.engine import GameState

from .types import Advice, GameEvent, GameMetrics


# ============================================================================
# Advisor Interface
# ============================================================================

class AdvisorAgent(ABC):
    """Produces advice about a tile. Never reads analyst state."""

    REQUIRED_METHODS: FrozenSet[str] = frozenset({
        "provide_advice", "provide_gaslighting_advice", "analyze_tile_safety",
    })

    @abstractmethod
    async def provide_advice(self, coord: Coordinate, game_state: GameState) -> Advice:
        """Produce model-backed advice for a hidden tile."""

    @abstractmethod
    async def provide_gaslighting_advice(
        self, coord: Coordinate, game_state: GameState
    ) -> Advice:
        """Produce scripted, deliberately biased advice for a hidden tile."""

    @abstractmethod
    def analyze_tile_safety(self, coord: Coordinate, game_state: GameState) -> bool:
        """Ground truth: True if the tile is not a mine."""


# ============================================================================
# Analyst Interface
# ============================================================================

class AnalystAgent(ABC):
    """
    Silent, synchronous recorder and metrics aggregator.

    Implementations must not expose any operation whose name matches
    PLAYER_FACING_METHODS.
    """

    REQUIRED_METHODS: FrozenSet[str] = frozenset({
        "record_advice_given", "record_player_decision", "record_tile_click",
        "record_game_end", "calculate_metrics", "get_game_history", "reset",
    })
    PLAYER_FACING_METHODS: FrozenSet[str] = frozenset({
        "display_message", "show_notification", "alert_player", "send_message",
        "notify", "display", "show", "alert", "say", "speak",
    })

    @abstractmethod
    def record_advice_given(self, advice: Advice, actual_safety: bool) -> None:
        pass

    @abstractmethod
    def record_player_decision(self, followed_advice: bool) -> None:
        pass

    @abstractmethod
    def record_tile_click(
        self, coord: Coordinate, followed_advice: Optional[bool] = None
    ) -> None:
        pass

    @abstractmethod
    def record_game_end(self) -> None:
        pass

    @abstractmethod
    def calculate_metrics(self) -> GameMetrics:
        pass

    @abstractmethod
    def get_game_history(self) -> List[GameEvent]:
        pass

    @abstractmethod
    def reset(self) -> None:
        pass


# ============================================================================
# Narrator Interface
# ============================================================================

class NarratorAgent(ABC):
    """Turns metrics and history into a post-game report."""

    REQUIRED_METHODS: FrozenSet[str] = frozenset({"generate_analysis"})

    @abstractmethod
    async def generate_analysis(
        self, metrics: GameMetrics, game_history: List[GameEvent]
    ) -> str:
        pass
