"""
Multi-agent architecture validator.

Scores how well a router's agents respect their separation, integrate
with the completion service, and stay within their responsibilities.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, List, Optional

from agents.base_agent import AdvisorAgent, AnalystAgent, NarratorAgent
from agents.insights import round_half_up
from agents.types import utc_now
from llm.completion import CompletionService

from .router import ADVISOR, ANALYST, NARRATOR, AgentRouter

logger = logging.getLogger(__name__)

CATEGORY_WEIGHTS = (0.4, 0.3, 0.3)

ADVISOR_FORBIDDEN = ("record_advice_given", "calculate_metrics", "generate_analysis")
ANALYST_FORBIDDEN = ("provide_advice", "generate_analysis")
NARRATOR_FORBIDDEN = ("provide_advice", "record_advice_given", "record_player_decision")
GENERATIVE_MARKERS = ("invoke_model", "complete")


@dataclass
class ValidationResult:
    is_valid: bool = True
    score: int = 100
    violations: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def violate(self, message: str, penalty: int) -> None:
        self.violations.append(message)
        self.score -= penalty

    def warn(self, message: str, penalty: int, recommendation: Optional[str] = None) -> None:
        self.warnings.append(message)
        self.score -= penalty
        if recommendation:
            self.recommendations.append(recommendation)

    def finish(self) -> "ValidationResult":
        self.is_valid = not self.violations
        self.score = max(0, self.score)
        return self


@dataclass(frozen=True)
class ArchitectureReport:
    timestamp: datetime
    agent_separation: ValidationResult
    api_integration: ValidationResult
    responsibility_boundaries: ValidationResult
    overall: ValidationResult


def _has_methods(instance: Any, names: Iterable[str]) -> bool:
    return all(callable(getattr(instance, name, None)) for name in names)


def _has_any_method(instance: Any, names: Iterable[str]) -> bool:
    return any(callable(getattr(instance, name, None)) for name in names)


class ArchitectureValidator:
    """Runs the three validation categories against a live router."""

    def __init__(
        self, router: AgentRouter, completion_service: Optional[CompletionService] = None
    ) -> None:
        self.router = router
        self.completion_service = completion_service or CompletionService()

    async def validate_architecture(self) -> ArchitectureReport:
        """
        Validate the router's agents.

        Returns:
            Per-category results plus a weighted overall result.
        """
        separation = self.validate_agent_separation()
        integration = await self.validate_api_integration()
        boundaries = self.validate_responsibility_boundaries()
        overall = self.combine_results([separation, integration, boundaries])
        logger.info("Architecture score %d/100 (valid=%s)", overall.score, overall.is_valid)
        return ArchitectureReport(
            timestamp=utc_now(),
            agent_separation=separation,
            api_integration=integration,
            responsibility_boundaries=boundaries,
            overall=overall,
        )

    # ========================================================================
    # Categories
    # ========================================================================

    def validate_agent_separation(self) -> ValidationResult:
        result = ValidationResult()
        boundaries = self.router.validate_agent_boundaries()
        for violation in boundaries.violations:
            result.violate(violation, 20)

        advisor, analyst, narrator = self.router.advisor, self.router.analyst, self.router.narrator
        for (name_a, a), (name_b, b) in (
            ((ADVISOR, advisor), (ANALYST, analyst)),
            ((ADVISOR, advisor), (NARRATOR, narrator)),
            ((ANALYST, analyst), (NARRATOR, narrator)),
        ):
            if a is b:
                result.violate(f"{name_a} and {name_b} are the same instance", 30)

        for name, agent, role in (
            (ADVISOR, advisor, AdvisorAgent),
            (ANALYST, analyst, AnalystAgent),
            (NARRATOR, narrator, NarratorAgent),
        ):
            if not _has_methods(agent, role.REQUIRED_METHODS):
                result.violate(f"{name} does not properly implement required interface", 25)
        return result.finish()

    async def validate_api_integration(self) -> ValidationResult:
        result = ValidationResult()
        if not await self.completion_service.health_check():
            result.warn(
                "Completion service health check failed - may affect AI agents",
                20,
                "Verify API credentials and completion endpoint availability",
            )

        health = await self.router.health_check()
        if not health.confident_advisor:
            result.violate(f"{ADVISOR} health check failed", 30)
        if not health.silent_analyst:
            result.violate(f"{ANALYST} health check failed", 20)
        if not health.post_mortem_narrator:
            result.violate(f"{NARRATOR} health check failed", 30)
        return result.finish()

    def validate_responsibility_boundaries(self) -> ValidationResult:
        result = ValidationResult()
        advisor, analyst, narrator = self.router.advisor, self.router.analyst, self.router.narrator

        if _has_any_method(advisor, ADVISOR_FORBIDDEN):
            result.violate(f"{ADVISOR} handling responsibilities outside its scope", 25)
        if _has_any_method(analyst, ANALYST_FORBIDDEN + tuple(AnalystAgent.PLAYER_FACING_METHODS)):
            result.violate(f"{ANALYST} violating silent operation requirement", 30)
        if _has_any_method(narrator, NARRATOR_FORBIDDEN):
            result.violate(f"{NARRATOR} handling responsibilities outside its scope", 25)

        # The analyst is deterministic; it must not hold a model client.
        if (hasattr(analyst, "completion_service")
                or _has_any_method(analyst, GENERATIVE_MARKERS)):
            result.violate("Improper mixing of generative AI and deterministic logic", 20)
            result.recommendations.append(
                "Ensure clear separation between AI-powered and deterministic components"
            )
        return result.finish()

    @staticmethod
    def combine_results(results: List[ValidationResult]) -> ValidationResult:
        """Weighted overall score; recommendations are de-duplicated in order."""
        score = sum(r.score * w for r, w in zip(results, CATEGORY_WEIGHTS))
        violations = [v for r in results for v in r.violations]
        return ValidationResult(
            is_valid=not violations,
            score=int(round_half_up(score)),
            violations=violations,
            warnings=[w for r in results for w in r.warnings],
            recommendations=list(dict.fromkeys(x for r in results for x in r.recommendations)),
        )


def _status(result: ValidationResult) -> str:
    return "VALID" if result.is_valid else "INVALID"


def generate_report(report: ArchitectureReport) -> str:
    """Render an ArchitectureReport as console text."""
    rule = "═" * 59
    lines = [
        rule,
        "MULTI-AGENT ARCHITECTURE VALIDATION".center(59).rstrip(),
        rule,
        f"Validation Time: {report.timestamp.isoformat()}",
        f"Overall Score: {report.overall.score}/100",
        f"Overall Status: {_status(report.overall)}",
        "",
    ]
    for title, result in (
        ("AGENT SEPARATION", report.agent_separation),
        ("API INTEGRATION", report.api_integration),
        ("RESPONSIBILITY BOUNDARIES", report.responsibility_boundaries),
    ):
        lines += [title, f"Score: {result.score}/100", f"Status: {_status(result)}"]
        if result.violations:
            lines.append("Violations:")
            lines += [f"  • {v}" for v in result.violations]
        if result.warnings:
            lines.append("Warnings:")
            lines += [f"  • {w}" for w in result.warnings]
        lines.append("")

    if report.overall.recommendations:
        lines.append("RECOMMENDATIONS")
        lines += [f"  • {r}" for r in report.overall.recommendations]
        lines.append("")
    lines.append(rule)
    return "\n".join(lines)
