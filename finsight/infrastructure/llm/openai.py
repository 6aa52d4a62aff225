"""
OpenAI gateway.

Calls the Chat Completions endpoint in JSON mode.
"""

from typing import Any

from finsight.config.settings import LLMSettings
from finsight.core.exceptions import ResponseStructureError
from finsight.core.interfaces.llm import ModelProvider
from finsight.infrastructure.llm.base import BaseModelGateway


class OpenAIGateway(BaseModelGateway):
    """OpenAI Chat Completions over HTTP."""

    provider = ModelProvider.OPENAI

    def __init__(self, settings: LLMSettings | None = None, **kwargs: Any) -> None:
        super().__init__(settings, **kwargs)
        self.api_key = self.settings.openai_api_key or ""
        self.model = self.settings.openai_model
        self.base_url = self.settings.openai_base_url.rstrip("/")

    def _build_request(
        self, prompt: str, system_message: str
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_message},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "response_format": {"type": "json_object"},
        }
        return f"{self.base_url}/chat/completions", headers, payload

    def _extract_text(self, data: dict[str, Any]) -> str:
        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            raise ResponseStructureError("Empty or invalid response from OpenAI") from None
