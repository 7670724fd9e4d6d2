"""
Orchestration module.

Routes calls between the agents and drives a game session:
- AgentRouter: Sole coordinator of the advisor, analyst and narrator
- GameController: Headless session facade over engine and router
- format_metrics: Console and JSON end-of-game reports
- ArchitectureValidator: Scores agent separation and boundaries
"""
from .router import (
    AgentRouter,
    BoundaryReport,
    HealthReport,
    PostMortemReport,
    RequestLogEntry,
    RequestOutcome,
)
from .controller import ControllerCallbacks, GameController, followed_advice
from .report import ReportFormat, format_metrics
from .validator import (
    ArchitectureReport,
    ArchitectureValidator,
    ValidationResult,
    generate_report,
)

__all__ = [
    "AgentRouter",
    "BoundaryReport",
    "HealthReport",
    "PostMortemReport",
    "RequestLogEntry",
    "RequestOutcome",
    "ControllerCallbacks",
    "GameController",
    "followed_advice",
    "ReportFormat",
    "format_metrics",
    "ArchitectureReport",
    "ArchitectureValidator",
    "ValidationResult",
    "generate_report",
]
