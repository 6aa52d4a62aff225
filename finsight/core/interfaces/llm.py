"""
Abstract interface for the model gateway.

Defines the contract that the OpenAI and Anthropic gateways fulfil.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

T = TypeVar("T")


class ModelProvider(str, Enum):
    """Supported model provider types."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"


@dataclass(frozen=True)
class ErrorClassification:
    """Outcome of classifying a gateway failure."""

    retryable: bool
    kind: str


class IModelGateway(ABC):
    """
    Provider-agnostic access to a text-completion model.

    Implementations: OpenAIGateway, AnthropicGateway
    """

    provider: ModelProvider

    @abstractmethod
    async def invoke(
        self,
        prompt: str,
        currency: str,
        timeout: float | None = None,
    ) -> str:
        """
        Send a prompt and return the raw reply text.

        Args:
            prompt: Fully rendered user prompt
            currency: Currency code used to build the system message
            timeout: Per-call timeout in seconds, defaults to configuration

        Returns:
            Raw reply text containing a JSON object

        Raises:
            LLMError subclasses, classified by kind and retryability
        """
        pass

    @abstractmethod
    def classify(self, error: BaseException) -> ErrorClassification:
        """Classify an error raised by invoke()."""
        pass

    @abstractmethod
    async def retry(
        self,
        operation: Callable[[], Awaitable[T]],
        max_retries: int | None = None,
    ) -> T:
        """
        Run an operation with exponential backoff.

        Terminal errors propagate immediately; after the last attempt
        the last error propagates.
        """
        pass
