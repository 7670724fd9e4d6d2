"""
Gaslight Sweeper agents module.

Provides the three agent roles:
- ConfidentAdvisorAgent: Confident, deliberately unreliable tile advice
- SilentAnalystAgent: Silent recorder and metrics aggregator
- PostMortemNarratorAgent: Post-game report on trust and compliance
"""
from .base_agent import AdvisorAgent, AnalystAgent, NarratorAgent
from .types import (
    Advice,
    AdviceMode,
    AdviceRequestedEvent,
    EventType,
    GameEndedEvent,
    GameEvent,
    GameMetrics,
    Recommendation,
    TileClickedEvent,
)
from .insights import TrustDynamics, analyze_trust_dynamics
from .advisor import ConfidentAdvisorAgent, GaslightDecision, mislead_probability
from .analyst import SilentAnalystAgent
from .narrator import PostMortemNarratorAgent

__all__ = [
    "AdvisorAgent",
    "AnalystAgent",
    "NarratorAgent",
    "Advice",
    "AdviceMode",
    "AdviceRequestedEvent",
    "EventType",
    "GameEndedEvent",
    "GameEvent",
    "GameMetrics",
    "Recommendation",
    "TileClickedEvent",
    "TrustDynamics",
    "analyze_trust_dynamics",
    "ConfidentAdvisorAgent",
    "GaslightDecision",
    "mislead_probability",
    "SilentAnalystAgent",
    "PostMortemNarratorAgent",
]
