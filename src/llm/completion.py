"""
Text-completion service.

Single choke-point for every model call made by the advisor and the
narrator. Talks to any OpenAI-compatible chat-completions endpoint,
retries transient failures with exponential backoff and reports the
final result either as a string (invoke_model, raising on failure) or
as an explicit CompletionOutcome (complete, never raising).
"""
from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional, TypeVar

import openai
from openai import AsyncOpenAI

from game.errors import GameError

logger = logging.getLogger(__name__)

T = TypeVar("T")

FallbackContext = Literal["advisor", "narrator"]

# Provider errors that will not succeed on retry (auth / validation).
NON_RETRYABLE_ERROR_CODES = frozenset({
    "AuthenticationError",
    "PermissionDeniedError",
    "BadRequestError",
    "NotFoundError",
    "UnprocessableEntityError",
    "UnauthorizedOperation",
    "InvalidParameterValue",
    "ValidationException",
    "AccessDeniedException",
})

_FALLBACK_RESPONSES: Dict[str, str] = {
    "advisor": "This tile appears statistically safe based on standard probability analysis.",
    "narrator": (
        "Analysis unavailable. The AI system encountered technical "
        "difficulties during post-game evaluation."
    ),
}


class AIIntegrationError(GameError):
    """Raised when the completion backend cannot produce a usable reply."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message, "AI_INTEGRATION_ERROR")
        self.cause = cause


@dataclass
class CompletionConfig:
    model: str = os.getenv("SWEEPER_LLM_MODEL", "gpt-4o-mini")
    api_key: Optional[str] = os.getenv("OPENAI_API_KEY")
    base_url: Optional[str] = os.getenv("OPENAI_BASE_URL")
    max_retries: int = int(os.getenv("SWEEPER_LLM_MAX_RETRIES", "3"))
    timeout_seconds: float = float(os.getenv("SWEEPER_LLM_TIMEOUT_SECONDS", "60"))
    # Delay before retry n is backoff_base_seconds * 2 ** (n - 1)
    backoff_base_seconds: float = float(os.getenv("SWEEPER_LLM_BACKOFF_SECONDS", "1.0"))
    max_tokens: int = 1000
    temperature: float = 0.7
    top_p: float = 0.9

    def __post_init__(self) -> None:
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if self.backoff_base_seconds < 0:
            raise ValueError("backoff_base_seconds cannot be negative")


@dataclass(frozen=True)
class CompletionOutcome:
    """Result of a completion call: either text or the failure cause."""

    text: Optional[str] = None
    error: Optional[AIIntegrationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, text: str) -> "CompletionOutcome":
        return cls(text=text)

    @classmethod
    def failure(cls, error: AIIntegrationError) -> "CompletionOutcome":
        return cls(error=error)


class CompletionService:
    """
    Async client for chat completions with retry and backoff.

    The SDK client is built on first use, so a missing API key becomes an
    AIIntegrationError on the first call instead of failing construction.
    """

    def __init__(
        self,
        config: Optional[CompletionConfig] = None,
        client: Optional[Any] = None,
    ) -> None:
        self.config = config or CompletionConfig()
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            try:
                # Retries are handled here, not by the SDK.
                self._client = AsyncOpenAI(
                    api_key=self.config.api_key,
                    base_url=self.config.base_url,
                    timeout=self.config.timeout_seconds,
                    max_retries=0,
                )
            except openai.OpenAIError as exc:
                raise AIIntegrationError("Failed to initialize completion client", exc) from exc
        return self._client

    async def invoke_model(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """
        Send a prompt and return the model's reply text.

        Args:
            prompt: User message; must not be blank.
            system_prompt: Optional system message.

        Returns:
            Reply text.

        Raises:
            AIIntegrationError: On empty prompt, timeout, network or provider
                error after retries, or a malformed response.
        """
        if not prompt or not prompt.strip():
            raise AIIntegrationError("Prompt cannot be empty")

        messages: List[Dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        client = self._get_client()

        async def create() -> Any:
            return await asyncio.wait_for(
                client.chat.completions.create(
                    model=self.config.model,
                    messages=messages,
                    max_tokens=self.config.max_tokens,
                    temperature=self.config.temperature,
                    top_p=self.config.top_p,
                ),
                timeout=self.config.timeout_seconds,
            )

        try:
            response = await self._retry_with_backoff(create)
        except Exception as exc:
            raise self._to_integration_error(exc) from exc

        return self._extract_text(response)

    async def complete(
        self, prompt: str, system_prompt: Optional[str] = None
    ) -> CompletionOutcome:
        """Like invoke_model, but reports failure as a value."""
        try:
            return CompletionOutcome.success(await self.invoke_model(prompt, system_prompt))
        except AIIntegrationError as exc:
            logger.warning("Completion failed: %s", exc.message)
            return CompletionOutcome.failure(exc)

    async def _retry_with_backoff(self, operation: Callable[[], Awaitable[T]]) -> T:
        attempts = self.config.max_retries
        for attempt in range(1, attempts + 1):
            try:
                return await operation()
            except Exception as exc:
                if self.is_non_retryable_error(exc) or attempt == attempts:
                    raise
                delay = self.config.backoff_base_seconds * 2 ** (attempt - 1)
                logger.info(
                    "Completion attempt %d/%d failed (%s); retrying in %.1fs",
                    attempt, attempts, type(exc).__name__, delay,
                )
                await asyncio.sleep(delay)
        raise AssertionError("unreachable")

    @staticmethod
    def is_non_retryable_error(error: BaseException) -> bool:
        """Check whether a provider error is an auth or validation failure."""
        code = getattr(error, "code", None)
        message = str(error)
        return any(
            type(error).__name__ == name or code == name or name in message
            for name in NON_RETRYABLE_ERROR_CODES
        )

    @staticmethod
    def _to_integration_error(error: BaseException) -> AIIntegrationError:
        if isinstance(error, AIIntegrationError):
            return error
        # APITimeoutError subclasses APIConnectionError; check it first.
        if isinstance(error, (openai.APITimeoutError, asyncio.TimeoutError)):
            message = "Completion API request timed out"
        elif isinstance(error, openai.APIConnectionError):
            message = "Network error connecting to completion API"
        elif str(error):
            message = f"Completion API error: {error}"
        else:
            message = f"Completion API error: {type(error).__name__}"
        return AIIntegrationError(message, error)

    @staticmethod
    def _extract_text(response: Any) -> str:
        if response is None:
            raise AIIntegrationError("Empty response from completion API")
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, KeyError, TypeError) as exc:
            raise AIIntegrationError("Invalid response format from completion API", exc) from exc
        if not isinstance(content, str) or not content.strip():
            raise AIIntegrationError("Invalid response format from completion API")
        return content.strip()

    def get_fallback_response(self, context: FallbackContext) -> str:
        """Last-resort canned text for the given agent context."""
        return _FALLBACK_RESPONSES[context]

    async def health_check(self) -> bool:
        """Attempt a trivial completion."""
        outcome = await self.complete("Test connection", 'Respond with "OK" only.')
        return outcome.ok
