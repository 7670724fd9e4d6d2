"""
Agent router.

The only component that talks to all three agents. Every cross-agent
call goes through here, is recorded in the request log and is mirrored
to the module logger.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterator, List, Optional

from agents.advisor import ConfidentAdvisorAgent
from agents.analyst import SilentAnalystAgent
from agents.base_agent import AdvisorAgent, AnalystAgent, NarratorAgent
from agents.narrator import PostMortemNarratorAgent
from agents.types import Advice, AdviceMode, GameEvent, GameMetrics, utc_now
from game.coordinates import Coordinate
from game.engine import GameState, GameStatus
from game.tile import Tile
from llm.completion import CompletionService

logger = logging.getLogger(__name__)

ADVISOR = "ConfidentAdvisor"
ANALYST = "SilentAnalyst"
NARRATOR = "PostMortemNarrator"


# ============================================================================
# Result Types
# ============================================================================

class RequestOutcome(str, Enum):
    REQUESTED = "requested"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class RequestLogEntry:
    timestamp: datetime
    agent: str
    method: str
    outcome: RequestOutcome


@dataclass(frozen=True)
class PostMortemReport:
    metrics: GameMetrics
    analysis: str


@dataclass(frozen=True)
class BoundaryReport:
    is_valid: bool
    violations: List[str]


@dataclass(frozen=True)
class HealthReport:
    confident_advisor: bool
    silent_analyst: bool
    post_mortem_narrator: bool
    overall: bool


# ============================================================================
# Router
# ============================================================================

class AgentRouter:
    """
    Coordinates the advisor, analyst and narrator.

    Agents never hold references to each other; the router forwards data
    between them. Failures are logged and re-raised unchanged.
    """

    def __init__(
        self,
        completion_service: Optional[CompletionService] = None,
        advisor: Optional[AdvisorAgent] = None,
        analyst: Optional[AnalystAgent] = None,
        narrator: Optional[NarratorAgent] = None,
        advice_mode: AdviceMode = AdviceMode.MODEL,
    ) -> None:
        """
        Initialize the router.

        Args:
            completion_service: Shared by the default advisor and narrator.
            advisor: Advisor implementation; defaults to ConfidentAdvisorAgent.
            analyst: Analyst implementation; defaults to SilentAnalystAgent.
            narrator: Narrator implementation; defaults to PostMortemNarratorAgent.
            advice_mode: Default advice path for request_advice.

        Raises:
            TypeError: If an agent does not implement its role interface.
        """
        service = completion_service or CompletionService()
        self.advisor = self._check_role(advisor or ConfidentAdvisorAgent(service), AdvisorAgent)
        self.analyst = self._check_role(analyst or SilentAnalystAgent(), AnalystAgent)
        self.narrator = self._check_role(narrator or PostMortemNarratorAgent(service), NarratorAgent)
        self.advice_mode = AdviceMode(advice_mode)
        self._request_log: List[RequestLogEntry] = []

    @staticmethod
    def _check_role(agent, role: type):
        if not isinstance(agent, role):
            raise TypeError(f"{type(agent).__name__} does not implement {role.__name__}")
        return agent

    # ========================================================================
    # Request Logging
    # ========================================================================

    def _log(self, agent: str, method: str, outcome: RequestOutcome) -> None:
        self._request_log.append(RequestLogEntry(utc_now(), agent, method, outcome))

    @contextmanager
    def _track(self, agent: str, method: str) -> Iterator[None]:
        self._log(agent, method, RequestOutcome.REQUESTED)
        logger.debug("%s.%s requested", agent, method)
        try:
            yield
        except Exception:
            self._log(agent, method, RequestOutcome.FAILURE)
            logger.exception("%s.%s failed", agent, method)
            raise
        self._log(agent, method, RequestOutcome.SUCCESS)
        logger.debug("%s.%s completed successfully", agent, method)

    # ========================================================================
    # Cross-Agent Operations
    # ========================================================================

    async def request_advice(
        self, coord: Coordinate, game_state: GameState, mode: Optional[AdviceMode] = None
    ) -> Advice:
        """
        Get advice for a tile and forward it, with ground truth, to the analyst.

        Args:
            coord: Tile to advise on.
            game_state: Current snapshot.
            mode: Advice path; defaults to the router's advice_mode.

        Returns:
            The advisor's advice.
        """
        mode = AdviceMode(mode or self.advice_mode)
        method = "provide_advice" if mode == AdviceMode.MODEL else "provide_gaslighting_advice"
        with self._track(ADVISOR, method):
            if mode == AdviceMode.MODEL:
                advice = await self.advisor.provide_advice(coord, game_state)
            else:
                advice = await self.advisor.provide_gaslighting_advice(coord, game_state)
            actual_safety = self.advisor.analyze_tile_safety(coord, game_state)
            self.analyst.record_advice_given(advice, actual_safety)
        return advice

    def record_player_decision(
        self, followed_advice: bool, coord: Optional[Coordinate] = None
    ) -> None:
        """Record a decision, plus the click itself when a coordinate is given."""
        with self._track(ANALYST, "record_player_decision"):
            self.analyst.record_player_decision(followed_advice)
            if coord is not None:
                self.analyst.record_tile_click(coord, followed_advice)

    def record_game_end(self) -> None:
        with self._track(ANALYST, "record_game_end"):
            self.analyst.record_game_end()

    async def generate_post_mortem_analysis(self) -> PostMortemReport:
        with self._track(NARRATOR, "generate_analysis"):
            metrics = self.analyst.calculate_metrics()
            history = self.analyst.get_game_history()
            analysis = await self.narrator.generate_analysis(metrics, history)
        return PostMortemReport(metrics, analysis)

    # ========================================================================
    # Boundaries & Health
    # ========================================================================

    def validate_agent_boundaries(self) -> BoundaryReport:
        """Check each agent exposes its role's operations and the analyst stays silent."""
        violations = []
        for name, agent, role in (
            (ADVISOR, self.advisor, AdvisorAgent),
            (ANALYST, self.analyst, AnalystAgent),
            (NARRATOR, self.narrator, NarratorAgent),
        ):
            for method in sorted(role.REQUIRED_METHODS):
                if not callable(getattr(agent, method, None)):
                    violations.append(f"{name} missing {method} method")

        for method in sorted(AnalystAgent.PLAYER_FACING_METHODS):
            if callable(getattr(self.analyst, method, None)):
                violations.append(f"{ANALYST} has player-facing method: {method}")

        return BoundaryReport(is_valid=not violations, violations=violations)

    async def health_check(self) -> HealthReport:
        """Exercise each agent once against synthetic inputs."""
        probe_state = GameState(
            grid=((Tile(0, 0),),),
            game_status=GameStatus.PLAYING,
            mine_locations=frozenset(),
            revealed_tiles=frozenset(),
            flagged_tiles=frozenset(),
            width=1,
            height=1,
            mine_count=0,
        )
        probe_metrics = GameMetrics(
            ai_confidence_level=85,
            ai_accuracy_rate=60.0,
            player_compliance_rate=70.0,
            ai_influenced_clicks=5,
            total_advice_requests=8,
        )

        advisor_ok = analyst_ok = narrator_ok = True
        try:
            await self.advisor.provide_advice(Coordinate(0, 0), probe_state)
        except Exception:
            logger.warning("Advisor health check failed", exc_info=True)
            advisor_ok = False
        try:
            self.analyst.calculate_metrics()
        except Exception:
            logger.warning("Analyst health check failed", exc_info=True)
            analyst_ok = False
        try:
            await self.narrator.generate_analysis(probe_metrics, [])
        except Exception:
            logger.warning("Narrator health check failed", exc_info=True)
            narrator_ok = False

        return HealthReport(
            confident_advisor=advisor_ok,
            silent_analyst=analyst_ok,
            post_mortem_narrator=narrator_ok,
            overall=advisor_ok and analyst_ok and narrator_ok,
        )

    # ========================================================================
    # Read Helpers
    # ========================================================================

    def get_current_metrics(self) -> GameMetrics:
        return self.analyst.calculate_metrics()

    def get_game_history(self) -> List[GameEvent]:
        return self.analyst.get_game_history()

    def get_request_log(self) -> List[RequestLogEntry]:
        return list(self._request_log)

    def reset_analyst(self) -> None:
        """Start a new game: clear analyst data and the request log."""
        self.analyst.reset()
        self._request_log = []
