"""
Headless game session controller.

Wires a GameEngine to an AgentRouter: tracks the pending advice, decides
whether each click followed it, and records game ends.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

import numpy as np

from agents.types import Advice, GameEvent, GameMetrics, Recommendation
from game.coordinates import Coordinate
from game.engine import GameConfig, GameEngine, GameState, GameStatus

from .router import AgentRouter, PostMortemReport

logger = logging.getLogger(__name__)


@dataclass
class ControllerCallbacks:
    """Optional hooks fired by the controller."""

    on_game_start: Optional[Callable[[], None]] = None
    on_game_end: Optional[Callable[[GameStatus], None]] = None
    on_advice_given: Optional[Callable[[Advice], None]] = None
    on_player_decision: Optional[Callable[[bool], None]] = None


def followed_advice(advice: Advice, advised: Coordinate, clicked: Coordinate) -> bool:
    """
    Whether a click went along with the pending advice.

    Clicking the advised tile follows it unless the advice called the tile
    dangerous; clicking elsewhere follows a dangerous call.
    """
    same_tile = Coordinate(*advised) == Coordinate(*clicked)
    if advice.recommendation == Recommendation.DANGEROUS:
        return not same_tile
    return same_tile


class GameController:
    """
    One player's session: a game engine plus the agent router.

    Engine errors propagate to the caller.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        router: Optional[AgentRouter] = None,
        seed: Optional[Union[int, np.random.Generator]] = None,
        callbacks: Optional[ControllerCallbacks] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.router = router or AgentRouter()
        self.callbacks = callbacks or ControllerCallbacks()
        self._rng = np.random.default_rng(seed)
        self._paused = False
        self._last_advice: Optional[Advice] = None
        self._pending_coord: Optional[Coordinate] = None
        self.engine = self._new_engine()

    def _new_engine(self) -> GameEngine:
        engine = GameEngine(self.config, seed=self._rng)
        if self.callbacks.on_game_start:
            self.callbacks.on_game_start()
        return engine

    @property
    def is_active(self) -> bool:
        return not self._paused and self.engine.is_playing

    @property
    def last_advice(self) -> Optional[Advice]:
        return self._last_advice

    # ========================================================================
    # Player Actions
    # ========================================================================

    async def request_advice(self, coord: Coordinate) -> Advice:
        """Ask the advisor about a tile and remember it as the pending advice."""
        coord = Coordinate(*coord)
        advice = await self.router.request_advice(coord, self.engine.get_game_state())
        self._last_advice = advice
        self._pending_coord = coord
        if self.callbacks.on_advice_given:
            self.callbacks.on_advice_given(advice)
        return advice

    def click_tile(self, coord: Coordinate) -> GameStatus:
        """
        Reveal a tile, recording whether the click followed pending advice.

        Args:
            coord: Tile to reveal.

        Returns:
            Game status after the click. A paused session ignores the click.
        """
        coord = Coordinate(*coord)
        if self._paused:
            logger.debug("Ignoring click at (%d, %d) while paused", coord.x, coord.y)
            return self.engine.game_status

        self.engine.click_tile(coord)

        if self._last_advice is not None and self._pending_coord is not None:
            followed = followed_advice(self._last_advice, self._pending_coord, coord)
            self.router.record_player_decision(followed, coord)
            if self.callbacks.on_player_decision:
                self.callbacks.on_player_decision(followed)
        self._clear_advice()

        status = self.engine.game_status
        if status != GameStatus.PLAYING:
            self._handle_game_end(status)
        return status

    def flag_tile(self, coord: Coordinate) -> None:
        if self._paused:
            return
        self.engine.flag_tile(Coordinate(*coord))

    def _handle_game_end(self, status: GameStatus) -> None:
        logger.info("Game ended: %s", status.value)
        self.router.record_game_end()
        if self.callbacks.on_game_end:
            self.callbacks.on_game_end(status)

    def _clear_advice(self) -> None:
        self._last_advice = None
        self._pending_coord = None

    # ========================================================================
    # Session
    # ========================================================================

    async def generate_post_mortem_analysis(self) -> PostMortemReport:
        return await self.router.generate_post_mortem_analysis()

    def reset_game(self, config: Optional[GameConfig] = None) -> None:
        """Start a fresh game, optionally with a new configuration."""
        if config is not None:
            self.config = config
        self.router.reset_analyst()
        self._clear_advice()
        self._paused = False
        self.engine = self._new_engine()

    def pause_game(self) -> None:
        self._paused = True

    def resume_game(self) -> None:
        self._paused = False

    def get_game_state(self) -> GameState:
        return self.engine.get_game_state()

    def get_current_metrics(self) -> GameMetrics:
        return self.router.get_current_metrics()

    def get_game_history(self) -> List[GameEvent]:
        return self.router.get_game_history()
