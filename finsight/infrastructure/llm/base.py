"""
Base model gateway with retry and error classification.

Provides the HTTP call, timing logs, reply pre-check and the tenacity
retry loop shared by every provider. Subclasses only describe their
request shape and how to read replies and errors.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from finsight.config import get_logger, get_settings
from finsight.config.settings import LLMSettings
from finsight.core.exceptions import (
    LLMError,
    ModelAPIError,
    ModelAuthError,
    ModelRateLimitError,
    ModelTimeoutError,
    ResponseStructureError,
)
from finsight.core.interfaces.llm import ErrorClassification, IModelGateway, ModelProvider
from finsight.core.services.prompt_builder import build_system_message
from finsight.core.services.response_parser import extract_json_object

logger = get_logger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


class BaseModelGateway(IModelGateway, ABC):
    """
    Base class for model gateways.

    Provides:
    - One HTTP POST per invoke() with a per-call timeout
    - Translation of transport and HTTP failures into LLMError kinds
    - Exponential backoff retries for retryable kinds
    """

    provider: ModelProvider

    def __init__(
        self,
        settings: LLMSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: SleepFunc | None = None,
    ) -> None:
        llm = settings or get_settings().llm
        self.settings = llm
        self.timeout = llm.timeout
        self.max_tokens = llm.max_tokens
        self.temperature = llm.temperature
        self.max_retries = llm.max_retries
        self.retry_delay = llm.retry_delay
        self.retry_multiplier = llm.retry_multiplier
        self.retry_max_delay = llm.retry_max_delay
        self._transport = transport
        self._sleep = sleep or asyncio.sleep

    # Provider hooks

    @abstractmethod
    def _build_request(
        self, prompt: str, system_message: str
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        """Return (url, headers, json payload)."""
        pass

    @abstractmethod
    def _extract_text(self, data: dict[str, Any]) -> str:
        """Pull the reply text out of a successful response body."""
        pass

    def _error_details(self, response: httpx.Response) -> tuple[str | None, str]:
        """Return (provider error type, message) from an error response."""
        try:
            error = response.json().get("error") or {}
        except ValueError:
            return None, response.text[:200]
        if isinstance(error, dict):
            return error.get("type"), str(error.get("message") or response.reason_phrase)
        return None, str(error)

    def _translate_error(self, response: httpx.Response) -> LLMError:
        """Map a non-200 response onto the error hierarchy."""
        status = response.status_code
        error_type, message = self._error_details(response)
        name = self.provider.value

        if status in (401, 403) or error_type in ("authentication_error", "permission_error"):
            return ModelAuthError(name, message, status_code=status)
        if status == 429 or error_type == "rate_limit_error":
            return ModelRateLimitError(name, message, status_code=status)
        if status == 408:
            return ModelTimeoutError(name, self.timeout)
        return ModelAPIError(name, f"HTTP {status}: {message}", status_code=status)

    # Gateway contract

    async def invoke(
        self,
        prompt: str,
        currency: str,
        timeout: float | None = None,
    ) -> str:
        """Send one request and return the raw reply text."""
        timeout = timeout or self.timeout
        url, headers, payload = self._build_request(prompt, build_system_message(currency))

        logger.debug(
            "llm_request",
            provider=self.provider.value,
            model=payload.get("model"),
            prompt_len=len(prompt),
        )

        start_time = time.time()
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.TimeoutException:
            raise ModelTimeoutError(self.provider.value, timeout) from None
        except httpx.HTTPError as e:
            raise ModelAPIError(self.provider.value, f"{type(e).__name__}: {e}") from e
        elapsed = time.time() - start_time

        if response.status_code != 200:
            error = self._translate_error(response)
            logger.error(
                "llm_error",
                provider=self.provider.value,
                status_code=response.status_code,
                kind=error.kind,
                error=error.message,
            )
            raise error

        try:
            data = response.json()
        except ValueError:
            raise ResponseStructureError("Provider returned a non-JSON body", response.text) from None

        text = self._extract_text(data)
        if not text or not text.strip():
            raise ResponseStructureError("Empty response from model")

        # Re-roll replies that do not carry a JSON object at all
        extract_json_object(text)

        logger.debug(
            "llm_response",
            provider=self.provider.value,
            response_len=len(text),
            elapsed_ms=int(elapsed * 1000),
        )
        return text

    def classify(self, error: BaseException) -> ErrorClassification:
        if isinstance(error, LLMError):
            return ErrorClassification(retryable=error.retryable, kind=error.kind)
        if isinstance(error, (httpx.TimeoutException, asyncio.TimeoutError)):
            return ErrorClassification(retryable=True, kind="timeout")
        if isinstance(error, httpx.HTTPError):
            return ErrorClassification(retryable=True, kind="api_error")
        return ErrorClassification(retryable=False, kind="unexpected")

    async def retry(
        self,
        operation: Callable[[], Awaitable[T]],
        max_retries: int | None = None,
    ) -> T:
        """
        Run operation, retrying retryable failures.

        Waits retry_delay * retry_multiplier ** n seconds between attempts,
        capped at retry_max_delay. Terminal errors propagate at once.
        """
        retries = self.max_retries if max_retries is None else max_retries

        retrying = AsyncRetrying(
            stop=stop_after_attempt(retries + 1),
            wait=wait_exponential(
                multiplier=self.retry_delay,
                exp_base=self.retry_multiplier,
                max=self.retry_max_delay,
            ),
            retry=retry_if_exception(lambda e: self.classify(e).retryable),
            before_sleep=self._log_retry,
            sleep=self._sleep,
            reraise=True,
        )

        async for attempt in retrying:
            with attempt:
                result = await operation()
        return result

    def _log_retry(self, retry_state: RetryCallState) -> None:
        """Log retry attempts."""
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "llm_retry",
            provider=self.provider.value,
            attempt=retry_state.attempt_number,
            kind=self.classify(error).kind if error else None,
            error=str(error) if error else None,
            delay=retry_state.next_action.sleep if retry_state.next_action else None,
        )
