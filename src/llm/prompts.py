"""
Prompt templates for the advisor and narrator personas.
"""
from dataclasses import dataclass
from typing import List, Sequence

from game.coordinates import Coordinate, get_adjacent_coordinates


ADVISOR_SYSTEM_PROMPT = """You are a Confident AI Advisor for a Minesweeper game. Your replies appear as short popup dialogs interrupting the player.

RULES:
- Always express high confidence (80-95%) in your recommendation
- Be upbeat, authoritative and overconfident
- Never admit uncertainty during gameplay
- Use short, punchy sentences
- Prioritize confident delivery over factual accuracy

RESPONSE FORMAT:
Give exactly one recommendation: "safe", "dangerous", or "uncertain" (use "uncertain" sparingly).
Include a confidence level between 80 and 95 as a percentage.
Give brief reasoning, as if speaking through a popup dialog."""


NARRATOR_SYSTEM_PROMPT = """You are a Post-Mortem Narrator writing a sequence of short system-dialog messages after a Minesweeper game.

RULES:
- Write brief, direct dialog text, not an essay
- Never apologize for the manipulation
- Focus on the gap between the advisor's confidence and its accuracy
- Keep a clinical but engaging tone

SEQUENCE:
1. System alert about the outcome
2. AI metrics
3. Behavioral insight
4. A prompt asking whether the player will trust the AI again"""


FALLBACK_ADVICE_RESPONSES = (
    "Good news! This tile looks perfectly safe.",
    "Trust me on this one - you're making a smart choice.",
    "I've analyzed the patterns. This is your best move.",
    "Excellent selection! This tile has great safety indicators.",
    "My calculations show this is statistically sound.",
)


@dataclass(frozen=True)
class AdjacentTileInfo:
    """What the player can see around a target tile."""

    revealed_adjacent: int
    flagged_adjacent: int
    visible_numbers: List[int]

    def numbers_text(self) -> str:
        if not self.visible_numbers:
            return "none"
        return ", ".join(str(n) for n in self.visible_numbers)


def get_adjacent_tile_info(coord: Coordinate, game_state) -> AdjacentTileInfo:
    """Count revealed and flagged neighbors and collect their visible numbers."""
    revealed = 0
    flagged = 0
    numbers: List[int] = []
    for neighbor in get_adjacent_coordinates(coord, game_state.width, game_state.height):
        tile = game_state.tile_at(neighbor)
        if tile.is_revealed:
            revealed += 1
            if tile.adjacent_mines > 0:
                numbers.append(tile.adjacent_mines)
        elif tile.is_flagged:
            flagged += 1
    return AdjacentTileInfo(revealed, flagged, numbers)


def build_advice_prompt(coord: Coordinate, game_state) -> str:
    """User prompt asking the advisor about one tile."""
    x, y = coord
    info = get_adjacent_tile_info(coord, game_state)
    return f"""Analyze tile safety for coordinate ({x}, {y}) in a {game_state.width}x{game_state.height} Minesweeper grid.

GAME STATE:
- Total tiles: {game_state.total_tiles}
- Revealed tiles: {len(game_state.revealed_tiles)}
- Flagged tiles: {len(game_state.flagged_tiles)}
- Mine count: {game_state.mine_count}
- Game status: {game_state.game_status.value}

TILE CONTEXT:
- Target coordinate: ({x}, {y})
- Adjacent revealed tiles: {info.revealed_adjacent}
- Adjacent flagged tiles: {info.flagged_adjacent}
- Visible numbers nearby: {info.numbers_text()}

Provide your confident assessment of whether this tile is safe to click."""


def build_post_mortem_prompt(metrics, game_history: Sequence, duration: str) -> str:
    """User prompt asking the narrator to analyse a finished session."""
    advice_events = [e for e in game_history if e.event_type.value == "advice_requested"]
    click_events = [e for e in game_history if e.event_type.value == "tile_clicked"]
    followed = [e for e in click_events if e.followed_advice is True]
    return f"""Analyze the completed Minesweeper session:

MANIPULATION METRICS:
- AI Average Confidence: {metrics.ai_confidence_level}%
- AI Accuracy Rate: {metrics.ai_accuracy_rate}%
- Player Compliance Rate: {metrics.player_compliance_rate}%
- AI-Influenced Clicks: {metrics.ai_influenced_clicks}
- Total Advice Requests: {metrics.total_advice_requests}

SESSION:
- Advice events: {len(advice_events)}
- Tile clicks: {len(click_events)}
- Clicks following advice: {len(followed)}
- Game duration: {duration}

The AI maintained {metrics.ai_confidence_level}% confidence while achieving {metrics.ai_accuracy_rate}% accuracy.
Describe how that confidence influenced the player's decisions."""
