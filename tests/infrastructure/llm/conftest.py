"""Fixtures for model gateway tests."""

import httpx
import pytest

from finsight.config.settings import LLMSettings


@pytest.fixture
def llm_settings() -> LLMSettings:
    return LLMSettings(
        provider="openai",
        openai_api_key="sk-test",
        anthropic_api_key="ak-test",
        timeout=5,
        max_retries=2,
        retry_delay=1.0,
        retry_multiplier=2.0,
        retry_max_delay=10.0,
    )


@pytest.fixture
def sleeps() -> list[float]:
    """Delays requested by the retry loop."""
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def _sleep(delay: float) -> None:
        sleeps.append(delay)

    return _sleep


@pytest.fixture
def openai_body(valid_reply):
    def _body(content: str | None = None) -> dict:
        return {"choices": [{"message": {"role": "assistant", "content": content or valid_reply}}]}

    return _body


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def mock_transport(recorded_requests):
    """Build a MockTransport that records requests and replies via handler."""

    def _transport(handler) -> httpx.MockTransport:
        def _handle(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        return httpx.MockTransport(_handle)

    return _transport
