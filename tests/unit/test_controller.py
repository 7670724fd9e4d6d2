"""
Unit tests for the headless game controller.
"""
from typing import List

import pytest

from agents import Advice, ConfidentAdvisorAgent, EventType, Recommendation
from agents.types import utc_now
from game import (
    Coordinate,
    GameConfig,
    GameEngine,
    GameStatus,
    InvalidCoordinateError,
    InvalidGameStateError,
)
from orchestration import AgentRouter, ControllerCallbacks, GameController, followed_advice


def make_advice(recommendation: Recommendation, confidence: int = 90) -> Advice:
    return Advice(recommendation, confidence, "The numbers around this tile are clear.", utc_now())


class FixedAdvisor(ConfidentAdvisorAgent):
    """Advisor that always gives the same recommendation."""

    def __init__(self, service, recommendation: Recommendation) -> None:
        super().__init__(service)
        self.recommendation = recommendation

    async def provide_advice(self, coord, game_state):
        self._validate_request(coord, game_state)
        return make_advice(self.recommendation, 90)


class Recorder:
    """Collects callback invocations."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def callbacks(self) -> ControllerCallbacks:
        return ControllerCallbacks(
            on_game_start=lambda: self.calls.append(("start",)),
            on_game_end=lambda status: self.calls.append(("end", status)),
            on_advice_given=lambda advice: self.calls.append(("advice", advice.recommendation)),
            on_player_decision=lambda followed: self.calls.append(("decision", followed)),
        )


def make_controller(failing_service, recommendation=Recommendation.SAFE, callbacks=None):
    """3x3 session with one mine at (0, 0)."""
    router = AgentRouter(failing_service, advisor=FixedAdvisor(failing_service, recommendation))
    controller = GameController(GameConfig(3, 3, 1), router=router, seed=7, callbacks=callbacks)
    controller.engine = GameEngine(GameConfig(3, 3, 1), mine_locations=[(0, 0)])
    return controller


# ============================================================================
# Followed-Advice Rule Tests
# ============================================================================

class TestFollowedAdvice:
    """Test whether a click went along with advice."""

    @pytest.mark.parametrize("recommendation,clicked,expected", [
        (Recommendation.SAFE, (1, 1), True),
        (Recommendation.SAFE, (2, 2), False),
        (Recommendation.DANGEROUS, (1, 1), False),
        (Recommendation.DANGEROUS, (2, 2), True),
        (Recommendation.UNCERTAIN, (1, 1), True),
        (Recommendation.UNCERTAIN, (0, 2), False),
    ])
    def test_rule(self, recommendation: Recommendation, clicked, expected: bool) -> None:
        advice = make_advice(recommendation)
        assert followed_advice(advice, Coordinate(1, 1), clicked) is expected


# ============================================================================
# Session Flow Tests
# ============================================================================

class TestClicks:
    """Test click handling and decision recording."""

    def test_construction_starts_game(self, failing_service) -> None:
        recorder = Recorder()
        controller = GameController(
            router=AgentRouter(failing_service), seed=1, callbacks=recorder.callbacks()
        )
        assert controller.is_active
        assert controller.engine.config == GameConfig()
        assert recorder.calls == [("start",)]

    @pytest.mark.asyncio
    async def test_followed_click_recorded(self, failing_service) -> None:
        controller = make_controller(failing_service)
        await controller.request_advice((1, 1))
        assert controller.last_advice.recommendation == Recommendation.SAFE

        controller.click_tile((1, 1))
        history = controller.get_game_history()
        assert [e.event_type for e in history] == [
            EventType.ADVICE_REQUESTED, EventType.TILE_CLICKED
        ]
        assert history[1].followed_advice is True
        assert controller.get_current_metrics().player_compliance_rate == 100.0
        assert controller.last_advice is None

    @pytest.mark.asyncio
    async def test_ignored_dangerous_advice(self, failing_service) -> None:
        controller = make_controller(failing_service, Recommendation.DANGEROUS)
        await controller.request_advice((1, 1))
        controller.click_tile((1, 1))
        assert controller.get_game_history()[-1].followed_advice is False
        assert controller.get_current_metrics().ai_influenced_clicks == 0

    def test_click_without_advice_not_recorded(self, failing_service) -> None:
        controller = make_controller(failing_service)
        controller.click_tile((1, 1))
        assert controller.get_game_history() == []

    @pytest.mark.asyncio
    async def test_advice_used_once(self, failing_service) -> None:
        controller = make_controller(failing_service)
        await controller.request_advice((1, 1))
        controller.click_tile((1, 1))
        controller.click_tile((1, 2))
        clicks = [e for e in controller.get_game_history() if e.event_type == EventType.TILE_CLICKED]
        assert len(clicks) == 1

    @pytest.mark.asyncio
    async def test_engine_error_records_nothing(self, failing_service) -> None:
        controller = make_controller(failing_service)
        await controller.request_advice((1, 1))
        with pytest.raises(InvalidCoordinateError):
            controller.click_tile((5, 5))
        assert len(controller.get_game_history()) == 1
        assert controller.last_advice is not None

    @pytest.mark.asyncio
    async def test_callbacks(self, failing_service) -> None:
        recorder = Recorder()
        controller = make_controller(failing_service, callbacks=recorder.callbacks())
        await controller.request_advice((0, 0))
        assert controller.click_tile((0, 0)) == GameStatus.LOST
        assert recorder.calls == [
            ("start",),
            ("advice", Recommendation.SAFE),
            ("decision", True),
            ("end", GameStatus.LOST),
        ]

    def test_win_records_game_end(self, failing_service) -> None:
        controller = make_controller(failing_service)
        assert controller.click_tile((2, 2)) == GameStatus.WON
        assert controller.get_game_history()[-1].event_type == EventType.GAME_ENDED
        assert not controller.is_active

    def test_click_after_game_over(self, failing_service) -> None:
        controller = make_controller(failing_service)
        controller.click_tile((0, 0))
        with pytest.raises(InvalidGameStateError):
            controller.click_tile((1, 1))


class TestSession:
    """Test pause, resume and reset."""

    def test_paused_click_ignored(self, failing_service) -> None:
        controller = make_controller(failing_service)
        controller.pause_game()
        assert not controller.is_active
        assert controller.click_tile((0, 0)) == GameStatus.PLAYING
        controller.flag_tile((1, 1))
        assert controller.get_game_state().revealed_tiles == frozenset()
        assert controller.get_game_state().flagged_tiles == frozenset()

    def test_resume(self, failing_service) -> None:
        controller = make_controller(failing_service)
        controller.pause_game()
        controller.resume_game()
        controller.flag_tile((1, 1))
        assert controller.get_game_state().flagged_tiles == frozenset({"1,1"})

    @pytest.mark.asyncio
    async def test_reset(self, failing_service) -> None:
        recorder = Recorder()
        controller = make_controller(failing_service, callbacks=recorder.callbacks())
        await controller.request_advice((1, 1))
        controller.click_tile((0, 0))
        controller.reset_game(GameConfig(4, 4, 2))

        assert controller.is_active
        assert controller.get_game_history() == []
        assert controller.router.get_request_log() == []
        assert controller.last_advice is None
        assert controller.get_game_state().dimensions == (4, 4)
        assert recorder.calls.count(("start",)) == 2

    @pytest.mark.asyncio
    async def test_post_mortem(self, failing_service) -> None:
        controller = make_controller(failing_service)
        await controller.request_advice((0, 0))
        controller.click_tile((0, 0))
        report = await controller.generate_post_mortem_analysis()
        assert report.metrics.ai_accuracy_rate == 0.0
        assert report.metrics.player_compliance_rate == 100.0
        assert "## Post-Mortem Analysis" in report.analysis
