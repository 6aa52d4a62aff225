"""
Structured logging configuration using structlog.

JSON lines outside development, colored console output in development.
Provider credentials are masked before any renderer sees an event, and
dates, Decimals and enums from the domain models render as plain strings.
"""

import logging
import re
import sys
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from finsight.config.settings import get_settings

MASK = "***"

SECRET_KEYS = frozenset({"api_key", "authorization", "x-api-key", "openai_api_key", "anthropic_api_key"})

# Bearer tokens and sk-/sk-ant- style keys echoed back in provider errors
SECRET_PATTERN = re.compile(r"(Bearer\s+)?\bsk-[A-Za-z0-9_\-]{4,}")

NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add application and model provider context to log events."""
    settings = get_settings()
    event_dict["app"] = settings.app_name
    event_dict["version"] = settings.app_version
    event_dict["environment"] = settings.environment
    event_dict.setdefault("llm_provider", settings.llm.provider)
    return event_dict


def mask_secrets(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace credential fields and key-shaped substrings with a mask."""
    for key, value in event_dict.items():
        if key.lower() in SECRET_KEYS and value:
            event_dict[key] = MASK
        elif isinstance(value, str):
            event_dict[key] = SECRET_PATTERN.sub(MASK, value)
    return event_dict


def render_domain_values(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Render dates, Decimals and enums as plain strings."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
        elif isinstance(value, (date, datetime)):
            event_dict[key] = value.isoformat()
        elif isinstance(value, Decimal):
            event_dict[key] = str(value)
    return event_dict


def build_processors(environment: str) -> list[Processor]:
    """Processor chain for an environment, ending in its renderer."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        render_domain_values,
        mask_secrets,
    ]

    if environment == "development":
        return processors + [structlog.dev.ConsoleRenderer(colors=True)]

    return processors + [
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging() -> None:
    """Configure structlog and the stdlib root logger for the service."""
    settings = get_settings()

    structlog.configure(
        processors=build_processors(settings.environment),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
