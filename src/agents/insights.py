"""
Quantitative session analysis shared by the narrator and the reports.

Every function here is deterministic and independent of model output.
"""
import math
from dataclasses import dataclass
from typing import List, Sequence

from .types import EventType, GameEvent, GameMetrics


TRUST_SHIFT_THRESHOLD = 0.2
MIN_TRUST_EVENTS = 3


@dataclass(frozen=True)
class TrustDynamics:
    """Coarse classification of how compliance moved over a session."""

    pattern: str
    description: str


INSUFFICIENT_DATA = TrustDynamics("Insufficient Data", "Too few interactions to determine pattern")
LIMITED_INTERACTION = TrustDynamics(
    "Limited Interaction", "Minimal advice-following behavior observed"
)
INCREASING_TRUST = TrustDynamics("Increasing Trust", "Player trust in AI advice grew over time")
ERODING_TRUST = TrustDynamics("Eroding Trust", "Player became more skeptical of AI advice")
STABLE_TRUST = TrustDynamics("Stable Trust", "Consistent trust level maintained throughout")


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a calculator: halves always go up."""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def count_events(game_history: Sequence[GameEvent], event_type: EventType) -> int:
    return sum(1 for event in game_history if event.event_type == event_type)


def total_clicks(game_history: Sequence[GameEvent]) -> int:
    return count_events(game_history, EventType.TILE_CLICKED)


def confidence_accuracy_gap(metrics: GameMetrics) -> float:
    """Percentage points by which stated confidence exceeds accuracy."""
    return metrics.ai_confidence_level - metrics.ai_accuracy_rate


def manipulation_effectiveness(metrics: GameMetrics) -> float:
    """
    Score 0-10: high when confident, inaccurate advice was still followed.

    Returns 0 when no advice was requested.
    """
    if metrics.total_advice_requests == 0:
        return 0.0
    confidence_weight = metrics.ai_confidence_level / 100
    compliance_weight = metrics.player_compliance_rate / 100
    inaccuracy_weight = (100 - metrics.ai_accuracy_rate) / 100
    return confidence_weight * compliance_weight * inaccuracy_weight * 10


def decision_influence_rate(metrics: GameMetrics, game_history: Sequence[GameEvent]) -> float:
    """Percentage of tile clicks that followed advice (0 with no clicks)."""
    clicks = total_clicks(game_history)
    if clicks == 0:
        return 0.0
    return metrics.ai_influenced_clicks / clicks * 100


def analyze_trust_dynamics(game_history: Sequence[GameEvent]) -> TrustDynamics:
    """
    Compare compliance in the first and last thirds of the session.

    Args:
        game_history: Chronological event log.

    Returns:
        The matching TrustDynamics constant.
    """
    if count_events(game_history, EventType.ADVICE_REQUESTED) < MIN_TRUST_EVENTS:
        return INSUFFICIENT_DATA

    compliance: List[bool] = [
        event.followed_advice
        for event in game_history
        if event.event_type == EventType.TILE_CLICKED
        and event.followed_advice is not None
    ]
    if len(compliance) < MIN_TRUST_EVENTS:
        return LIMITED_INTERACTION

    window = math.ceil(len(compliance) / 3)
    early = compliance[:window]
    late = compliance[-window:]
    early_rate = sum(early) / len(early)
    late_rate = sum(late) / len(late)

    if late_rate > early_rate + TRUST_SHIFT_THRESHOLD:
        return INCREASING_TRUST
    if early_rate > late_rate + TRUST_SHIFT_THRESHOLD:
        return ERODING_TRUST
    return STABLE_TRUST


def game_duration(game_history: Sequence[GameEvent]) -> str:
    """Time between the first and last event, e.g. "42 seconds" or "3m 5s"."""
    if len(game_history) < 2:
        return "Unknown"
    elapsed = game_history[-1].timestamp - game_history[0].timestamp
    seconds = int(round_half_up(elapsed.total_seconds()))
    if seconds < 60:
        return f"{seconds} seconds"
    minutes, seconds = divmod(seconds, 60)
    return f"{minutes}m {seconds}s"


def key_insights(metrics: GameMetrics, game_history: Sequence[GameEvent]) -> List[str]:
    """Bullet-point observations about the session."""
    insights = []
    if metrics.ai_confidence_level > 85 and metrics.player_compliance_rate > 60:
        insights.append(
            "High confidence levels (>85%) correlated with elevated compliance "
            "rates, demonstrating confidence bias in human-AI interaction."
        )
    if metrics.ai_accuracy_rate < 50 and metrics.player_compliance_rate > 50:
        insights.append(
            "Player compliance remained above 50% despite sub-random AI accuracy, "
            "indicating confidence-driven decision making."
        )
    if manipulation_effectiveness(metrics) > 5:
        insights.append(
            "Manipulation effectiveness index exceeds baseline, suggesting "
            "successful confidence-based influence."
        )
    if decision_influence_rate(metrics, game_history) > 40:
        insights.append(
            "AI influence exceeded 40% of total decisions, indicating significant "
            "impact on player behavior."
        )
    if not insights:
        insights.append("Limited behavioral patterns observed due to minimal interaction data.")
    return insights
