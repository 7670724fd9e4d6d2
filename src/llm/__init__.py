"""
Language-model integration module.

Provides the text-completion service and prompt templates used by the
advisor and narrator agents.
"""
from .completion import (
    AIIntegrationError,
    CompletionConfig,
    CompletionOutcome,
    CompletionService,
    NON_RETRYABLE_ERROR_CODES,
)

__all__ = [
    "AIIntegrationError",
    "CompletionConfig",
    "CompletionOutcome",
    "CompletionService",
    "NON_RETRYABLE_ERROR_CODES",
]
