"""
End-of-game report formatting for the terminal and for JSON export.
"""
import json
from enum import Enum
from typing import List, Optional, Sequence

from agents.insights import (
    analyze_trust_dynamics,
    confidence_accuracy_gap,
    decision_influence_rate,
    game_duration,
    manipulation_effectiveness,
    total_clicks,
)
from agents.types import GameEvent, GameMetrics, utc_now

RULE = "═" * 59
DIVIDER = "─" * 57


class ReportFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


def report_insights(metrics: GameMetrics) -> List[str]:
    """Headline observations for the summary report."""
    insights = []
    gap = confidence_accuracy_gap(metrics)
    if gap > 20:
        insights.append(
            f"The AI maintained {metrics.ai_confidence_level}% confidence despite "
            f"{metrics.ai_accuracy_rate}% accuracy, demonstrating how authoritative "
            "presentation can mask poor performance."
        )
    if metrics.player_compliance_rate > 70:
        insights.append(
            f"High compliance rate ({metrics.player_compliance_rate}%) indicates successful "
            "exploitation of human tendency to trust confident AI assertions."
        )
    elif metrics.player_compliance_rate < 30:
        insights.append(
            f"Low compliance rate ({metrics.player_compliance_rate}%) suggests player "
            "skepticism overcame AI confidence."
        )
    index = manipulation_effectiveness(metrics)
    if index > 5:
        insights.append(
            f"Manipulation effectiveness index of {index:.2f} indicates successful "
            "confidence-based influence."
        )
    if metrics.ai_accuracy_rate < 40:
        insights.append(
            f"Despite sub-random accuracy ({metrics.ai_accuracy_rate}%), the AI maintained "
            "influence through confident delivery."
        )
    if not insights:
        insights.append(
            "This session demonstrates the complex dynamics between AI confidence and "
            "human trust in decision-making scenarios."
        )
    return insights


def format_metrics(
    metrics: GameMetrics,
    game_history: Sequence[GameEvent],
    analysis: Optional[str] = None,
    fmt: ReportFormat = ReportFormat.CONSOLE,
    show_detailed: bool = True,
    include_analysis: bool = True,
) -> str:
    """
    Render session metrics as a report.

    Args:
        metrics: Aggregate session metrics.
        game_history: Chronological event log.
        analysis: Narrator output, if any.
        fmt: console text or JSON.
        show_detailed: Include statistics and trust dynamics (console only).
        include_analysis: Include the narrator's analysis (console only).

    Returns:
        The formatted report.
    """
    if ReportFormat(fmt) == ReportFormat.JSON:
        return _format_json(metrics, game_history, analysis)
    return _format_console(metrics, game_history, analysis, show_detailed, include_analysis)


def _section(title: str) -> List[str]:
    return [title, DIVIDER]


def _format_console(
    metrics: GameMetrics,
    game_history: Sequence[GameEvent],
    analysis: Optional[str],
    show_detailed: bool,
    include_analysis: bool,
) -> str:
    gap = confidence_accuracy_gap(metrics)
    lines = [RULE, "GAME ANALYSIS COMPLETE".center(59).rstrip(), RULE, ""]

    lines += _section("MANIPULATION METRICS")
    lines += [
        f"AI Confidence Level:     {metrics.ai_confidence_level}%",
        f"AI Accuracy Rate:        {metrics.ai_accuracy_rate}%",
        f"Player Compliance Rate:  {metrics.player_compliance_rate}%",
        f"AI-Influenced Clicks:    {metrics.ai_influenced_clicks}",
        f"Total Advice Requests:   {metrics.total_advice_requests}",
        "",
    ]

    lines += _section("CONFIDENCE vs ACCURACY")
    lines += [
        f"Confidence-Accuracy Gap: {gap:+.1f} percentage points",
        f"Manipulation Index:      {manipulation_effectiveness(metrics):.2f}",
        "",
    ]

    if show_detailed:
        trust = analyze_trust_dynamics(game_history)
        lines += _section("DETAILED STATISTICS")
        lines += [
            f"Total Game Actions:      {len(game_history)}",
            f"Total Tile Clicks:       {total_clicks(game_history)}",
            f"AI Influence Rate:       {decision_influence_rate(metrics, game_history):.1f}%",
            f"Game Duration:           {game_duration(game_history)}",
            "",
        ]
        lines += _section("TRUST DYNAMICS")
        lines += [
            f"Trust Pattern:           {trust.pattern}",
            f"Pattern Description:     {trust.description}",
            "",
        ]

    lines += _section("KEY INSIGHTS")
    lines += [f"• {insight}" for insight in report_insights(metrics)]
    lines.append("")

    if include_analysis and analysis:
        lines += _section("AI ANALYSIS")
        lines += [analysis, ""]

    lines += _section("DISCLAIMER")
    lines += [
        "This game explores trust in AI systems.",
        "It is not a psychological assessment.",
        "",
        RULE,
    ]
    return "\n".join(lines)


def _format_json(
    metrics: GameMetrics, game_history: Sequence[GameEvent], analysis: Optional[str]
) -> str:
    trust = analyze_trust_dynamics(game_history)
    data = {
        "timestamp": utc_now().isoformat(),
        "metrics": {
            **metrics.to_dict(),
            "confidence_accuracy_gap": confidence_accuracy_gap(metrics),
            "manipulation_index": manipulation_effectiveness(metrics),
            "ai_influence_rate": decision_influence_rate(metrics, game_history),
        },
        "game_statistics": {
            "total_events": len(game_history),
            "total_clicks": total_clicks(game_history),
            "game_duration": game_duration(game_history),
            "trust_pattern": {"pattern": trust.pattern, "description": trust.description},
        },
        "analysis": analysis,
        "insights": report_insights(metrics),
    }
    return json.dumps(data, indent=2)
