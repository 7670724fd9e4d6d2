"""
Post-mortem narrator agent.

Turns the analyst's metrics and event log into a clinical report on how
the advisor's confidence shaped the player's choices.
"""
import logging
from typing import List, Optional

from llm.completion import CompletionService
from llm.prompts import NARRATOR_SYSTEM_PROMPT, build_post_mortem_prompt

from .base_agent import NarratorAgent
from .insights import (
    analyze_trust_dynamics,
    confidence_accuracy_gap,
    decision_influence_rate,
    game_duration,
    key_insights,
    manipulation_effectiveness,
    total_clicks,
)
from .types import GameEvent, GameMetrics

logger = logging.getLogger(__name__)

DISCLAIMER = (
    "*This analysis represents an exploration of human-AI trust dynamics "
    "and is not a psychological assessment.*"
)


class PostMortemNarratorAgent(NarratorAgent):
    """Writes the post-game report, with or without a working model."""

    def __init__(self, completion_service: Optional[CompletionService] = None) -> None:
        self.completion_service = completion_service or CompletionService()

    async def generate_analysis(
        self, metrics: GameMetrics, game_history: List[GameEvent]
    ) -> str:
        """
        Produce the post-mortem report.

        Args:
            metrics: Aggregate session metrics.
            game_history: Chronological event log; may be empty.

        Returns:
            Model analysis followed by quantitative sections, or a
            deterministic report when the model is unavailable.

        Raises:
            ValueError: If metrics or game_history is missing.
        """
        if metrics is None or game_history is None:
            raise ValueError("Invalid metrics or game history provided")

        prompt = build_post_mortem_prompt(metrics, game_history, game_duration(game_history))
        outcome = await self.completion_service.complete(prompt, NARRATOR_SYSTEM_PROMPT)
        if not outcome.ok:
            logger.warning("Narrator using deterministic analysis: %s", outcome.error)
            return self.generate_fallback_analysis(metrics, game_history)
        return self.enhance_analysis(outcome.text, metrics, game_history)

    # ========================================================================
    # Report Sections
    # ========================================================================

    def enhance_analysis(
        self, analysis: str, metrics: GameMetrics, game_history: List[GameEvent]
    ) -> str:
        gap = confidence_accuracy_gap(metrics)
        trust = analyze_trust_dynamics(game_history)
        sections = [
            analysis,
            "",
            "## Quantitative Analysis",
            f"Confidence-Accuracy Differential: {gap:.1f} percentage points",
            f"Manipulation Effectiveness Index: {manipulation_effectiveness(metrics):.2f}",
            f"Trust Erosion Pattern: {trust.pattern}",
            f"Decision Influence Rate: {decision_influence_rate(metrics, game_history):.1f}%",
            "",
            "## Behavioral Observations",
            "\n".join(f"• {insight}" for insight in key_insights(metrics, game_history)),
            "",
            "## Conclusion",
            self.clinical_conclusion(metrics, gap),
        ]
        return "\n".join(sections)

    @staticmethod
    def clinical_conclusion(metrics: GameMetrics, gap: float) -> str:
        conclusions = []
        if gap > 30:
            conclusions.append(
                "The substantial confidence-accuracy gap demonstrates the power of "
                "authoritative presentation in AI systems."
            )
        if metrics.player_compliance_rate > 70:
            conclusions.append(
                "High compliance rates indicate successful exploitation of human "
                "tendency to trust confident AI assertions."
            )
        if metrics.ai_accuracy_rate < 40:
            conclusions.append(
                "Despite poor accuracy, the AI maintained influence through "
                "consistent confident delivery."
            )
        conclusions.append(
            "This experiment illustrates how AI confidence can override human "
            "caution, regardless of actual competence."
        )
        return " ".join(conclusions)

    def generate_fallback_analysis(
        self, metrics: GameMetrics, game_history: List[GameEvent]
    ) -> str:
        """Deterministic report built only from the numbers."""
        gap = confidence_accuracy_gap(metrics)
        score = manipulation_effectiveness(metrics)
        influence = "significant" if metrics.player_compliance_rate > 50 else "limited"
        level = "elevated" if score > 5 else "moderate"
        return "\n".join([
            "## Post-Mortem Analysis",
            "",
            "**Confidence vs. Accuracy Assessment**",
            f"The AI maintained {metrics.ai_confidence_level}% confidence while achieving "
            f"{metrics.ai_accuracy_rate}% accuracy, creating a {gap:.1f} percentage point "
            "gap between perceived and actual competence.",
            "",
            "**Player Behavior Analysis**",
            f"Player compliance rate of {metrics.player_compliance_rate}% indicates "
            f"{influence} influence of AI confidence on decision-making. The AI influenced "
            f"{metrics.ai_influenced_clicks} out of {total_clicks(game_history)} total clicks.",
            "",
            "**Manipulation Effectiveness**",
            f"Manipulation effectiveness index: {score:.2f}. This {level} score demonstrates "
            "the impact of confident AI delivery on human trust dynamics.",
            "",
            "**Conclusion**",
            "This session demonstrates how authoritative AI presentation can influence "
            "human decision-making independent of actual accuracy. The confidence-accuracy "
            "differential illustrates the psychological power of certain AI communication, "
            "regardless of underlying competence.",
            "",
            DISCLAIMER,
        ])
