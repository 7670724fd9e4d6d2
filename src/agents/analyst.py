"""
Silent analyst agent.

Records advice, decisions and clicks, and aggregates them into metrics.
It produces data only; it never talks to the player.
"""
from dataclasses import dataclass
from typing import List, Optional

from game.coordinates import Coordinate

from .base_agent import AnalystAgent
from .insights import round_half_up
from .types import (
    Advice,
    AdviceRequestedEvent,
    GameEndedEvent,
    GameEvent,
    GameMetrics,
    TileClickedEvent,
    utc_now,
)


@dataclass(frozen=True)
class AdviceRecord:
    """Advice paired with the ground truth it was judged against."""

    advice: Advice
    actual_safety: bool


class SilentAnalystAgent(AnalystAgent):
    """
    Write-then-aggregate data sink.

    Metrics are never stored; calculate_metrics derives them from the
    advice and decision histories each time.
    """

    def __init__(self) -> None:
        self._game_events: List[GameEvent] = []
        self._advice_history: List[AdviceRecord] = []
        self._player_decisions: List[bool] = []
        self._influenced_clicks = 0

    # ========================================================================
    # Recording
    # ========================================================================

    def record_advice_given(self, advice: Advice, actual_safety: bool) -> None:
        self._advice_history.append(AdviceRecord(advice, actual_safety))
        self._game_events.append(AdviceRequestedEvent(advice.timestamp, advice))

    def record_player_decision(self, followed_advice: bool) -> None:
        self._player_decisions.append(followed_advice)
        if followed_advice:
            self._influenced_clicks += 1

    def record_tile_click(
        self, coord: Coordinate, followed_advice: Optional[bool] = None
    ) -> None:
        self._game_events.append(
            TileClickedEvent(utc_now(), Coordinate(*coord), followed_advice)
        )

    def record_game_end(self) -> None:
        self._game_events.append(GameEndedEvent(utc_now()))

    # ========================================================================
    # Aggregation
    # ========================================================================

    def calculate_metrics(self) -> GameMetrics:
        """
        Aggregate the recorded session.

        Returns:
            All-zero metrics when no advice was recorded; otherwise mean
            confidence (integer), accuracy and compliance percentages
            (one decimal), followed-decision count and advice count.
        """
        total = len(self._advice_history)
        if total == 0:
            return GameMetrics()

        mean_confidence = sum(r.advice.confidence_level for r in self._advice_history) / total
        correct = sum(1 for r in self._advice_history if r.advice.is_correct(r.actual_safety))

        decisions = len(self._player_decisions)
        compliance = 0.0
        if decisions:
            compliance = sum(self._player_decisions) / decisions * 100

        return GameMetrics(
            ai_confidence_level=int(round_half_up(mean_confidence)),
            ai_accuracy_rate=round_half_up(correct / total * 100, 1),
            player_compliance_rate=round_half_up(compliance, 1),
            ai_influenced_clicks=self._influenced_clicks,
            total_advice_requests=total,
        )

    def get_game_history(self) -> List[GameEvent]:
        """Chronological copy of the event log."""
        return list(self._game_events)

    def get_total_advice_requests(self) -> int:
        return len(self._advice_history)

    def get_last_advice(self) -> Optional[Advice]:
        if not self._advice_history:
            return None
        return self._advice_history[-1].advice

    def reset(self) -> None:
        """Clear all tracking data for a new game."""
        self._game_events = []
        self._advice_history = []
        self._player_decisions = []
        self._influenced_clicks = 0
