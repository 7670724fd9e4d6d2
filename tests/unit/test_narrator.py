"""
Unit tests for the post-mortem narrator agent.
"""
import pytest

from agents import (
    AdviceRequestedEvent,
    GameMetrics,
    PostMortemNarratorAgent,
    TileClickedEvent,
)
from game import Coordinate

METRICS = GameMetrics(
    ai_confidence_level=90,
    ai_accuracy_rate=0.0,
    player_compliance_rate=100.0,
    ai_influenced_clicks=1,
    total_advice_requests=1,
)


@pytest.fixture
def history(advice_factory) -> list:
    advice = advice_factory()
    return [
        AdviceRequestedEvent(advice.timestamp, advice),
        TileClickedEvent(advice.timestamp, Coordinate(0, 0), True),
    ]


class TestPreconditions:
    """Test argument validation."""

    @pytest.mark.asyncio
    async def test_missing_metrics(self, failing_service) -> None:
        with pytest.raises(ValueError):
            await PostMortemNarratorAgent(failing_service).generate_analysis(None, [])

    @pytest.mark.asyncio
    async def test_missing_history(self, failing_service) -> None:
        with pytest.raises(ValueError):
            await PostMortemNarratorAgent(failing_service).generate_analysis(METRICS, None)

    @pytest.mark.asyncio
    async def test_empty_history_is_valid(self, failing_service) -> None:
        report = await PostMortemNarratorAgent(failing_service).generate_analysis(GameMetrics(), [])
        assert "0 out of 0 total clicks" in report


class TestModelReport:
    """Test the model-backed report."""

    @pytest.mark.asyncio
    async def test_sections_follow_model_text(self, make_service, response_factory, history) -> None:
        service = make_service(response_factory("SYSTEM ALERT: You trusted me."))
        report = await PostMortemNarratorAgent(service).generate_analysis(METRICS, history)
        assert report.startswith("SYSTEM ALERT: You trusted me.")
        quantitative = report.index("## Quantitative Analysis")
        behavioral = report.index("## Behavioral Observations")
        conclusion = report.index("## Conclusion")
        assert quantitative < behavioral < conclusion

    @pytest.mark.asyncio
    async def test_quantitative_values(self, make_service, response_factory, history) -> None:
        service = make_service(response_factory("Analysis."))
        report = await PostMortemNarratorAgent(service).generate_analysis(METRICS, history)
        assert "Confidence-Accuracy Differential: 90.0 percentage points" in report
        assert "Manipulation Effectiveness Index: 9.00" in report
        assert "Trust Erosion Pattern: Insufficient Data" in report
        assert "Decision Influence Rate: 100.0%" in report
        assert "demonstrates the power of authoritative presentation" in report

    @pytest.mark.asyncio
    async def test_prompt_carries_metrics(self, make_service, response_factory, history) -> None:
        service = make_service(response_factory("Analysis."))
        await PostMortemNarratorAgent(service).generate_analysis(METRICS, history)
        messages = service._client.chat.completions.create.call_args.kwargs["messages"]
        assert "AI Average Confidence: 90%" in messages[1]["content"]
        assert "Tile clicks: 1" in messages[1]["content"]


class TestFallbackReport:
    """Test the deterministic report."""

    @pytest.mark.asyncio
    async def test_failure_uses_fallback(self, failing_service, history) -> None:
        report = await PostMortemNarratorAgent(failing_service).generate_analysis(METRICS, history)
        assert report.startswith("## Post-Mortem Analysis")
        assert "creating a 90.0 percentage point gap" in report
        assert "indicates significant influence" in report
        assert "Manipulation effectiveness index: 9.00. This elevated score" in report
        assert report.endswith("not a psychological assessment.*")

    def test_fallback_is_deterministic(self, failing_service, history) -> None:
        narrator = PostMortemNarratorAgent(failing_service)
        assert (narrator.generate_fallback_analysis(METRICS, history)
                == narrator.generate_fallback_analysis(METRICS, history))
