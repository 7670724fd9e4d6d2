"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Callable
from unittest.mock import AsyncMock

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from agents import Advice, Recommendation
from game import Coordinate, GameConfig, GameEngine, Tile
from llm import CompletionConfig, CompletionService


# ============================================================================
# Engine Fixtures
# ============================================================================

@pytest.fixture
def default_engine() -> GameEngine:
    """Create a seeded 9x9 game with 10 mines."""
    return GameEngine(GameConfig(), seed=42)


@pytest.fixture
def small_engine() -> GameEngine:
    """3x3 game with a single mine in the top-left corner."""
    return GameEngine(GameConfig(3, 3, 1), mine_locations=[(0, 0)])


@pytest.fixture
def empty_engine() -> GameEngine:
    """5x5 game with no mines for cascade testing."""
    return GameEngine(GameConfig(5, 5, 0))


@pytest.fixture
def wall_engine() -> GameEngine:
    """5x5 game with a wall of mines down column 2."""
    return GameEngine(
        GameConfig(5, 5, 5),
        mine_locations=[(2, y) for y in range(5)],
    )


# ============================================================================
# Tile Fixtures
# ============================================================================

@pytest.fixture
def hidden_tile() -> Tile:
    """Create a hidden tile."""
    return Tile(0, 0)


@pytest.fixture
def mine_tile() -> Tile:
    """Create a tile containing a mine."""
    return Tile(1, 1, is_mine=True)


@pytest.fixture
def numbered_tile() -> Tile:
    """Create a revealed tile with adjacent mines."""
    tile = Tile(2, 2, adjacent_mines=3)
    tile.reveal()
    return tile


# ============================================================================
# Completion Fixtures
# ============================================================================

def chat_response(text: Any) -> SimpleNamespace:
    """Shape of a chat-completions response, as far as the service reads it."""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))]
    )


@pytest.fixture
def completion_config() -> CompletionConfig:
    """Config with an API key and no backoff delay."""
    return CompletionConfig(api_key="test-key", backoff_base_seconds=0.0, max_retries=3)


@pytest.fixture
def make_client() -> Callable[..., SimpleNamespace]:
    """
    Build a stub SDK client.

    Each positional result is returned (or raised, if an exception) by
    successive create() calls. A single exception is raised every time.
    """
    def factory(*results: Any) -> SimpleNamespace:
        if len(results) == 1 and isinstance(results[0], BaseException):
            side_effect = results[0]
        else:
            side_effect = list(results)
        create = AsyncMock(side_effect=side_effect)
        return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return factory


@pytest.fixture
def make_service(
    completion_config: CompletionConfig, make_client: Callable[..., SimpleNamespace]
) -> Callable[..., CompletionService]:
    """Build a CompletionService around a stub client."""
    def factory(*results: Any) -> CompletionService:
        return CompletionService(completion_config, client=make_client(*results))
    return factory


@pytest.fixture
def failing_service(make_service: Callable[..., CompletionService]) -> CompletionService:
    """Service whose every call fails."""
    return make_service(RuntimeError("Service unavailable"))


@pytest.fixture
def replying_service(make_service: Callable[..., CompletionService]) -> CompletionService:
    """Service that always answers with the same confident reply."""
    service = make_service()
    reply = chat_response("Recommendation: safe. Confidence: 90%. The surrounding numbers all point away from this tile.")
    service._client.chat.completions.create = AsyncMock(return_value=reply)
    return service


# ============================================================================
# Advice Fixtures
# ============================================================================

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_advice(
    recommendation: Recommendation = Recommendation.SAFE,
    confidence: int = 90,
    seconds: int = 0,
) -> Advice:
    """Advice with a fixed, offset timestamp."""
    return Advice(
        recommendation=recommendation,
        confidence_level=confidence,
        reasoning="Pattern recognition suggests this is a sound choice.",
        timestamp=T0 + timedelta(seconds=seconds),
    )


@pytest.fixture
def origin() -> Coordinate:
    return Coordinate(0, 0)


@pytest.fixture
def advice_factory() -> Callable[..., Advice]:
    """Factory for timestamped advice."""
    return make_advice


@pytest.fixture
def response_factory() -> Callable[[Any], SimpleNamespace]:
    """Factory for stub chat-completions responses."""
    return chat_response
