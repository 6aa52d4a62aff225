"""
Anthropic gateway.

Calls the Messages API. There is no JSON mode, so the prompt carries
an explicit JSON-only instruction.
"""

from typing import Any

import httpx

from finsight.config.settings import LLMSettings
from finsight.core.exceptions import LLMError, ModelRateLimitError, ResponseStructureError
from finsight.core.interfaces.llm import ModelProvider
from finsight.infrastructure.llm.base import BaseModelGateway

JSON_ONLY_INSTRUCTION = (
    "IMPORTANT: You must respond with valid JSON only. "
    "Do not include any text before or after the JSON object."
)

OVERLOADED_STATUS = 529


class AnthropicGateway(BaseModelGateway):
    """Anthropic Messages API over HTTP."""

    provider = ModelProvider.ANTHROPIC

    def __init__(self, settings: LLMSettings | None = None, **kwargs: Any) -> None:
        super().__init__(settings, **kwargs)
        self.api_key = self.settings.anthropic_api_key or ""
        self.model = self.settings.anthropic_model
        self.base_url = self.settings.anthropic_base_url.rstrip("/")
        self.api_version = self.settings.anthropic_version

    def _build_request(
        self, prompt: str, system_message: str
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": self.api_version,
            "content-type": "application/json",
        }
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "system": system_message,
            "messages": [
                {"role": "user", "content": f"{prompt}\n\n{JSON_ONLY_INSTRUCTION}"},
            ],
        }
        return f"{self.base_url}/messages", headers, payload

    def _extract_text(self, data: dict[str, Any]) -> str:
        blocks = data.get("content")
        if not isinstance(blocks, list):
            raise ResponseStructureError("Empty or invalid response from Anthropic")
        return "".join(
            block.get("text", "")
            for block in blocks
            if isinstance(block, dict) and block.get("type") == "text"
        )

    def _translate_error(self, response: httpx.Response) -> LLMError:
        error_type, message = self._error_details(response)
        if response.status_code == OVERLOADED_STATUS or error_type == "overloaded_error":
            return ModelRateLimitError(
                self.provider.value, message, status_code=response.status_code
            )
        return super()._translate_error(response)
