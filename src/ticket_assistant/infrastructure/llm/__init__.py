"""
LLM Client Infrastructure
==========================

Wrapper for the hosted model provider, providing a clean interface for chat
completions.

Gemini is reached through its OpenAI-compatible endpoint, so any provider
exposing the OpenAI chat API can be swapped in via ``LLM_BASE_URL``.
"""

import json
import time
from typing import List, Optional
from abc import ABC, abstractmethod

from openai import AsyncOpenAI

from ticket_assistant.config import Settings, settings as default_settings
from ticket_assistant.core import LLMException, ConfigurationException
from ticket_assistant.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class ChatCompletionResult:
    """Result of a chat completion."""

    def __init__(
        self,
        content: str,
        model: str,
        prompt_tokens: int,
        completion_tokens: int,
        latency_ms: int
    ):
        self.content = content
        self.model = model
        self.prompt_tokens = prompt_tokens
        self.completion_tokens = completion_tokens
        self.total_tokens = prompt_tokens + completion_tokens
        self.latency_ms = latency_ms


class ILLMClient(ABC):
    """
    Interface for LLM client operations.

    Only the operation the application needs is defined.
    """

    @abstractmethod
    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.3,
        max_tokens: int = 1000,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        """Generate chat completion."""


class OpenAICompatibleLLMClient(ILLMClient):
    """
    Chat client for any OpenAI-compatible endpoint (Gemini by default).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None
    ):
        self._api_key = api_key or default_settings.gemini_api_key
        if not self._api_key:
            raise ConfigurationException("Gemini API key not configured")

        self._client = AsyncOpenAI(
            api_key=self._api_key,
            base_url=base_url or default_settings.llm_base_url
        )
        self._model = model or default_settings.gemini_model

    @property
    def model(self) -> str:
        return self._model

    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.3,
        max_tokens: int = 1000,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        """
        Generate a chat completion.

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Sampling temperature (0-1)
            max_tokens: Maximum tokens to generate
            operation: Operation label for logs (e.g. ``triage``)

        Returns:
            ChatCompletionResult with generated text

        Raises:
            LLMException: If completion fails
        """
        start_time = time.perf_counter()

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except Exception as e:
            raise LLMException(f"Chat completion failed: {e}") from e

        latency_ms = int((time.perf_counter() - start_time) * 1000)

        if not response.choices:
            raise LLMException("Chat completion returned no choices")

        content = response.choices[0].message.content or ""
        usage = response.usage
        prompt_tokens = usage.prompt_tokens if usage else 0
        completion_tokens = usage.completion_tokens if usage else 0

        logger.info(
            "LLM call completed",
            extra={
                "operation": operation,
                "model": self._model,
                "latency_ms": latency_ms,
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens
            }
        )

        return ChatCompletionResult(
            content=content,
            model=self._model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=latency_ms
        )


class MockLLMClient(ILLMClient):
    """
    Mock LLM client for local runs and testing.

    Returns predictable responses without calling external APIs.
    """

    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.3,
        max_tokens: int = 1000,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        """Return a fenced triage JSON answer."""
        mock_response = {
            "summary": "Mock: the user reports an application issue.",
            "priority": "medium",
            "helpfulNotes": "Mock: reproduce locally and check the server logs.",
            "relatedSkills": ["Node.js"]
        }
        content = f"```json\n{json.dumps(mock_response, indent=2)}\n```"

        return ChatCompletionResult(
            content=content,
            model="mock-model",
            prompt_tokens=100,
            completion_tokens=len(content.split()),
            latency_ms=1
        )


def build_llm_client(config: Settings) -> Optional[ILLMClient]:
    """
    Pick the client for the current configuration.

    Returns None when no provider is configured; triage then always
    uses its keyword fallback.
    """
    if config.mock_llm:
        return MockLLMClient()
    if not config.gemini_api_key:
        logger.warning("Gemini API key not configured - triage will use keyword fallback")
        return None
    return OpenAICompatibleLLMClient(
        api_key=config.gemini_api_key,
        model=config.gemini_model,
        base_url=config.llm_base_url
    )
