"""
Model gateway factory.

Creates the configured gateway after validating its settings.
"""

from finsight.config import get_logger, get_settings
from finsight.config.settings import LLMSettings
from finsight.core.exceptions import ConfigurationError
from finsight.core.interfaces.llm import IModelGateway, ModelProvider

logger = get_logger(__name__)


def validate_llm_settings(settings: LLMSettings) -> None:
    """
    Check that the selected provider can be called.

    Raises:
        ConfigurationError: Unknown provider or missing API key
    """
    try:
        provider = ModelProvider(settings.provider)
    except ValueError:
        raise ConfigurationError(
            f"Unknown LLM provider: {settings.provider}",
            code="INVALID_PROVIDER",
            details={"provider": settings.provider},
        ) from None

    if not settings.api_key:
        env_var = f"LLM_{provider.value.upper()}_API_KEY"
        raise ConfigurationError(
            f"API key is required for {provider.value}. Set {env_var}.",
            code="MISSING_API_KEY",
            details={"provider": provider.value, "env_var": env_var},
        )


def create_model_gateway(settings: LLMSettings | None = None, **kwargs) -> IModelGateway:
    """
    Build a gateway for the configured provider.

    Args:
        settings: LLM settings (default from global settings)
        **kwargs: Passed to the gateway (transport, sleep)

    Returns:
        IModelGateway instance
    """
    settings = settings or get_settings().llm
    validate_llm_settings(settings)

    if settings.provider == ModelProvider.OPENAI.value:
        from finsight.infrastructure.llm.openai import OpenAIGateway

        gateway: IModelGateway = OpenAIGateway(settings, **kwargs)
    else:
        from finsight.infrastructure.llm.anthropic import AnthropicGateway

        gateway = AnthropicGateway(settings, **kwargs)

    logger.info(
        "model_gateway_created",
        provider=settings.provider,
        model=settings.model_name,
    )
    return gateway


# Singleton
_gateway: IModelGateway | None = None


def get_model_gateway() -> IModelGateway:
    """Get or create the gateway for the configured provider."""
    global _gateway
    if _gateway is None:
        _gateway = create_model_gateway()
    return _gateway


def reset_model_gateway() -> None:
    """Reset the gateway singleton (for testing)."""
    global _gateway
    _gateway = None
