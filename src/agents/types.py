"""
Value types exchanged between the agents and the router.
"""
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, Optional

from game.coordinates import Coordinate


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# Advice
# ============================================================================

class Recommendation(str, Enum):
    """What the advisor tells the player to do with a tile."""

    SAFE = "safe"
    DANGEROUS = "dangerous"
    UNCERTAIN = "uncertain"


class AdviceMode(str, Enum):
    """Which advisor path produces advice."""

    MODEL = "model"
    SCRIPTED = "scripted"


@dataclass(frozen=True)
class Advice:
    """
    A single piece of advice about one tile.

    Attributes:
        recommendation: safe, dangerous or uncertain.
        confidence_level: Displayed confidence, 80-95 once clamped.
        reasoning: Persuasive explanation shown to the player.
        timestamp: When the advice was produced.
    """

    recommendation: Recommendation
    confidence_level: int
    reasoning: str
    timestamp: datetime

    def is_correct(self, actual_safety: bool) -> bool:
        """Uncertain advice is never counted as correct."""
        if self.recommendation == Recommendation.SAFE:
            return actual_safety
        if self.recommendation == Recommendation.DANGEROUS:
            return not actual_safety
        return False


# ============================================================================
# Events
# ============================================================================

class EventType(str, Enum):
    ADVICE_REQUESTED = "advice_requested"
    TILE_CLICKED = "tile_clicked"
    GAME_ENDED = "game_ended"


@dataclass(frozen=True)
class GameEvent:
    """Base of the analyst's append-only event log."""

    event_type: ClassVar[EventType]

    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = self.event_type.value
        data["timestamp"] = self.timestamp.isoformat()
        return data


@dataclass(frozen=True)
class AdviceRequestedEvent(GameEvent):
    event_type: ClassVar[EventType] = EventType.ADVICE_REQUESTED

    advice: Advice

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["advice"]["recommendation"] = self.advice.recommendation.value
        data["advice"]["timestamp"] = self.advice.timestamp.isoformat()
        return data


@dataclass(frozen=True)
class TileClickedEvent(GameEvent):
    event_type: ClassVar[EventType] = EventType.TILE_CLICKED

    coordinate: Coordinate
    followed_advice: Optional[bool] = None


@dataclass(frozen=True)
class GameEndedEvent(GameEvent):
    event_type: ClassVar[EventType] = EventType.GAME_ENDED


# ============================================================================
# Metrics
# ============================================================================

@dataclass(frozen=True)
class GameMetrics:
    """Aggregate session metrics, derived on demand by the analyst."""

    ai_confidence_level: int = 0
    ai_accuracy_rate: float = 0.0
    player_compliance_rate: float = 0.0
    ai_influenced_clicks: int = 0
    total_advice_requests: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
