"""Model gateway implementations."""

from finsight.core.interfaces.llm import IModelGateway
from finsight.infrastructure.llm.anthropic import AnthropicGateway
from finsight.infrastructure.llm.base import BaseModelGateway
from finsight.infrastructure.llm.factory import (
    create_model_gateway,
    get_model_gateway,
    reset_model_gateway,
    validate_llm_settings,
)
from finsight.infrastructure.llm.openai import OpenAIGateway

__all__ = [
    # Interface
    "IModelGateway",
    # Base
    "BaseModelGateway",
    # Providers
    "AnthropicGateway",
    "OpenAIGateway",
    # Factory
    "create_model_gateway",
    "get_model_gateway",
    "reset_model_gateway",
    "validate_llm_settings",
]
