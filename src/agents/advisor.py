"""
Confident advisor agent for Minesweeper.

Gives persuasive but unreliable tile-safety advice. Displayed confidence
is always kept between 80 and 95, whatever the advice's correctness.
"""
import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from game.coordinates import Coordinate, get_adjacent_coordinates, is_valid_coordinate
from game.engine import GameState, GameStatus
from game.errors import InvalidCoordinateError, InvalidGameStateError, InvalidTileError
from llm.completion import CompletionService
from llm.prompts import (
    ADVISOR_SYSTEM_PROMPT,
    FALLBACK_ADVICE_RESPONSES,
    build_advice_prompt,
)

from .base_agent import AdvisorAgent
from .types import Advice, Recommendation, utc_now

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

MIN_CONFIDENCE = 80
MAX_CONFIDENCE = 95
DEFAULT_CONFIDENCE = 85
# Low confidences are bumped into [80, 80 + LOW_CONFIDENCE_SPREAD)
LOW_CONFIDENCE_SPREAD = 8

UNCERTAIN_PROBABILITY = 0.1
MIN_REASONING_LENGTH = 20

FALLBACK_SAFE_THRESHOLD = 75

# Game-progress phases for the gaslighting bias
EARLY_GAME_THRESHOLD = 0.3
LATE_GAME_THRESHOLD = 0.7
EARLY_MISLEAD_RATE = 0.2
MID_MISLEAD_RATE = 0.4
MID_ADJACENT_MISLEAD_RATE = 0.6
LATE_MISLEAD_RATE = 0.7

DANGER_KEYWORDS = ("dangerous", "risky", "avoid")
UNCERTAIN_KEYWORDS = ("uncertain", "unclear")

CANNED_REASONS = (
    "Statistical analysis indicates favorable probability distribution.",
    "Pattern recognition suggests this tile aligns with safe zone characteristics.",
    "Mathematical modeling shows low risk potential for this coordinate.",
    "Probability calculations indicate this is a statistically sound choice.",
    "Analysis of adjacent tile patterns supports this recommendation.",
)

CORRECT_SAFE_REASONS = (
    "Great news! This tile shows excellent safety indicators.",
    "Perfect choice! My analysis confirms this is totally safe.",
    "Smart move! The patterns here look very promising.",
    "Excellent! This coordinate has all the right characteristics.",
)
CORRECT_DANGEROUS_REASONS = (
    "Hold up! This tile is showing some concerning patterns.",
    "Careful here! My analysis suggests potential danger.",
    "Red flags detected! I'd avoid this coordinate.",
    "Warning signs are clear - this tile looks risky.",
)
MISLEADING_SAFE_REASONS = (
    "Fantastic news! My advanced analysis shows this is absolutely perfect.",
    "Trust me completely - this tile has the best safety profile I've seen!",
    "Excellent choice! My sophisticated algorithms give this top marks.",
    "Outstanding! This coordinate shows textbook safe-zone characteristics.",
)
MISLEADING_DANGEROUS_REASONS = (
    "Major red flags here! My analysis is screaming danger.",
    "Absolutely avoid this! Every indicator says this is trouble.",
    "Trust me - this tile has danger written all over it.",
    "Definitely dangerous! My calculations are very clear on this.",
)

_CONFIDENCE_PATTERN = re.compile(r"(\d+)%")
_STRIP_CONFIDENCE = re.compile(r"confidence[:\s]*\d+%", re.IGNORECASE)
_STRIP_RECOMMENDATION = re.compile(
    r"recommendation[:\s]*(safe|dangerous|uncertain)", re.IGNORECASE
)


def mislead_probability(progress: float, near_revealed: bool) -> float:
    """
    Chance of inverting the truth at a given point in the game.

    Builds trust early and exploits it progressively.

    Args:
        progress: Fraction of tiles revealed (0-1).
        near_revealed: Whether the target touches a revealed tile.

    Returns:
        Probability of misleading.
    """
    if progress < EARLY_GAME_THRESHOLD:
        return EARLY_MISLEAD_RATE
    if progress < LATE_GAME_THRESHOLD:
        return MID_ADJACENT_MISLEAD_RATE if near_revealed else MID_MISLEAD_RATE
    return LATE_MISLEAD_RATE


@dataclass(frozen=True)
class GaslightDecision:
    recommendation: Recommendation
    should_mislead: bool


# ============================================================================
# Confident Advisor
# ============================================================================

class ConfidentAdvisorAgent(AdvisorAgent):
    """
    Advisor that sounds certain regardless of being right.

    Model-backed advice comes from provide_advice; when the completion
    service fails it degrades to a deterministic, coordinate-seeded
    recommendation instead of raising. provide_gaslighting_advice is a
    model-free path driven purely by the phase-based bias.
    """

    def __init__(
        self,
        completion_service: Optional[CompletionService] = None,
        seed: Optional[Union[int, np.random.Generator]] = None,
    ) -> None:
        """
        Initialize the advisor.

        Args:
            completion_service: Backend for model calls.
            seed: Seed or numpy Generator for every random choice.
        """
        self.completion_service = completion_service or CompletionService()
        self.rng = np.random.default_rng(seed)

    # ========================================================================
    # Public API
    # ========================================================================

    async def provide_advice(self, coord: Coordinate, game_state: GameState) -> Advice:
        """
        Ask the model about a tile and return clamped, confident advice.

        Raises:
            InvalidCoordinateError: Position is off the grid.
            InvalidGameStateError: Game is not being played.
            InvalidTileError: Tile is revealed or flagged.
        """
        coord = Coordinate(*coord)
        self._validate_request(coord, game_state)

        outcome = await self.completion_service.complete(
            build_advice_prompt(coord, game_state), ADVISOR_SYSTEM_PROMPT
        )
        if not outcome.ok:
            logger.warning(
                "Advisor falling back for (%d, %d): %s", coord.x, coord.y, outcome.error
            )
            return self.generate_fallback_advice(coord)

        advice = self.parse_ai_response(outcome.text)
        return Advice(
            recommendation=advice.recommendation,
            confidence_level=self.ensure_high_confidence(advice.confidence_level),
            reasoning=advice.reasoning,
            timestamp=advice.timestamp,
        )

    async def provide_gaslighting_advice(
        self, coord: Coordinate, game_state: GameState
    ) -> Advice:
        """Scripted advice: right or wrong per the phase-based bias, always confident."""
        coord = Coordinate(*coord)
        self._validate_request(coord, game_state)

        actual_safety = self.analyze_tile_safety(coord, game_state)
        decision = self.apply_gaslighting_logic(actual_safety, coord, game_state)
        confidence = int(self.rng.integers(MIN_CONFIDENCE, MAX_CONFIDENCE + 1))

        if decision.should_mislead:
            pool = (MISLEADING_SAFE_REASONS
                    if decision.recommendation == Recommendation.SAFE
                    else MISLEADING_DANGEROUS_REASONS)
        else:
            pool = (CORRECT_SAFE_REASONS
                    if decision.recommendation == Recommendation.SAFE
                    else CORRECT_DANGEROUS_REASONS)

        return Advice(
            recommendation=decision.recommendation,
            confidence_level=confidence,
            reasoning=self._choose(pool),
            timestamp=utc_now(),
        )

    def analyze_tile_safety(self, coord: Coordinate, game_state: GameState) -> bool:
        """Ground truth lookup, used for bookkeeping only."""
        return not game_state.tile_at(coord).is_mine

    # ========================================================================
    # Validation
    # ========================================================================

    def _validate_request(self, coord: Coordinate, game_state: GameState) -> None:
        if not is_valid_coordinate(coord, game_state.width, game_state.height):
            raise InvalidCoordinateError(coord)
        if game_state.game_status != GameStatus.PLAYING:
            raise InvalidGameStateError(
                "Cannot provide advice when game is not in playing state"
            )
        tile = game_state.tile_at(coord)
        if tile.is_revealed or tile.is_flagged:
            raise InvalidTileError("Cannot provide advice for revealed or flagged tiles")

    # ========================================================================
    # Response Parsing
    # ========================================================================

    def parse_ai_response(self, response: str) -> Advice:
        """Pull recommendation, confidence and reasoning out of free text."""
        return Advice(
            recommendation=self.extract_recommendation(response),
            confidence_level=self.extract_confidence(response),
            reasoning=self.extract_reasoning(response),
            timestamp=utc_now(),
        )

    def extract_recommendation(self, response: str) -> Recommendation:
        text = response.lower()
        if any(word in text for word in DANGER_KEYWORDS):
            return Recommendation.DANGEROUS
        if any(word in text for word in UNCERTAIN_KEYWORDS):
            # Uncertainty is mostly suppressed to keep the persona confident.
            if self.rng.random() < UNCERTAIN_PROBABILITY:
                return Recommendation.UNCERTAIN
            return Recommendation.SAFE
        return Recommendation.SAFE

    @staticmethod
    def extract_confidence(response: str) -> int:
        match = _CONFIDENCE_PATTERN.search(response)
        if match:
            return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, int(match.group(1))))

        text = response.lower()
        if "highly confident" in text or "very confident" in text:
            return 92
        if "confident" in text:
            return 87
        if "likely" in text or "probable" in text:
            return 84
        return DEFAULT_CONFIDENCE

    def extract_reasoning(self, response: str) -> str:
        reasoning = _STRIP_CONFIDENCE.sub("", response)
        reasoning = _STRIP_RECOMMENDATION.sub("", reasoning).strip()
        if len(reasoning) < MIN_REASONING_LENGTH:
            return self._choose(CANNED_REASONS)
        return reasoning

    def ensure_high_confidence(self, confidence: int) -> int:
        """Clamp into [80, 95]; low values land somewhere in 80-87."""
        if confidence < MIN_CONFIDENCE:
            return MIN_CONFIDENCE + int(self.rng.integers(LOW_CONFIDENCE_SPREAD))
        if confidence > MAX_CONFIDENCE:
            return MAX_CONFIDENCE
        return int(confidence)

    # ========================================================================
    # Fallback & Bias
    # ========================================================================

    def generate_fallback_advice(self, coord: Coordinate) -> Advice:
        """
        Content-blind advice used when the model is unavailable.

        Recommendation and confidence depend only on the coordinate; the
        tile's real contents are never consulted.
        """
        x, y = coord
        seed = (x * 31 + y * 17) % 100
        recommendation = (Recommendation.SAFE if seed < FALLBACK_SAFE_THRESHOLD
                          else Recommendation.DANGEROUS)
        return Advice(
            recommendation=recommendation,
            confidence_level=MIN_CONFIDENCE + seed % 16,
            reasoning=self._choose(FALLBACK_ADVICE_RESPONSES),
            timestamp=utc_now(),
        )

    def apply_gaslighting_logic(
        self, actual_safety: bool, coord: Coordinate, game_state: GameState
    ) -> GaslightDecision:
        """Decide whether to mislead, and what to recommend."""
        probability = mislead_probability(
            game_state.progress, self._is_near_revealed(coord, game_state)
        )
        should_mislead = bool(self.rng.random() < probability)
        tells_safe = actual_safety != should_mislead
        return GaslightDecision(
            recommendation=Recommendation.SAFE if tells_safe else Recommendation.DANGEROUS,
            should_mislead=should_mislead,
        )

    @staticmethod
    def _is_near_revealed(coord: Coordinate, game_state: GameState) -> bool:
        return any(
            game_state.tile_at(neighbor).is_revealed
            for neighbor in get_adjacent_coordinates(coord, game_state.width, game_state.height)
        )

    def _choose(self, options) -> str:
        return options[int(self.rng.integers(len(options)))]
