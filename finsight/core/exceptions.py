"""
Domain exceptions for Finsight.

Model errors carry a ``kind`` and a ``retryable`` flag so the gateway's
retry loop and the generator's fallback ladder can act on them without
knowing which provider raised them.
"""

from typing import Any


class FinsightError(Exception):
    """Base exception for all Finsight errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(FinsightError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class UnsupportedCurrencyError(ValidationError):
    """Currency code is not one of the supported currencies."""

    def __init__(self, currency: str, allowed: list[str]):
        super().__init__(
            field="currency",
            message=f"Unsupported currency '{currency}'. Allowed: {', '.join(allowed)}",
            value=currency,
        )
        self.details["allowed"] = allowed


# Storage Exceptions
class StorageError(FinsightError):
    """Base exception for storage operations."""

    pass


class PersistenceError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class InsightNotFoundError(StorageError):
    """Insight not found for this user."""

    def __init__(self, insight_id: str):
        super().__init__(
            f"Insight not found: {insight_id}",
            code="INSIGHT_NOT_FOUND",
            details={"insight_id": insight_id},
        )


# Model Exceptions
class LLMError(FinsightError):
    """Base exception for model gateway failures."""

    kind = "api_error"
    retryable = True

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        provider: str | None = None,
        status_code: int | None = None,
    ):
        details = dict(details or {})
        details.setdefault("kind", self.kind)
        details.setdefault("retryable", self.retryable)
        if provider:
            details["provider"] = provider
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, code=code, details=details)
        self.provider = provider
        self.status_code = status_code


class ModelAuthError(LLMError):
    """Provider rejected the credentials."""

    kind = "authentication"
    retryable = False

    def __init__(self, provider: str, reason: str | None = None, status_code: int | None = None):
        super().__init__(
            f"Authentication failed for {provider}" + (f": {reason}" if reason else ""),
            code="AUTHENTICATION_ERROR",
            provider=provider,
            status_code=status_code,
        )


class ModelRateLimitError(LLMError):
    """Provider throttled the request."""

    kind = "rate_limit"

    def __init__(self, provider: str, reason: str | None = None, status_code: int | None = 429):
        super().__init__(
            f"Rate limit exceeded for {provider}" + (f": {reason}" if reason else ""),
            code="RATE_LIMIT",
            provider=provider,
            status_code=status_code,
        )


class ModelTimeoutError(LLMError):
    """Provider call exceeded its timeout."""

    kind = "timeout"

    def __init__(self, provider: str, timeout: float | None = None):
        super().__init__(
            f"Request to {provider} timed out"
            + (f" after {timeout:g} seconds" if timeout else ""),
            code="TIMEOUT",
            details={"timeout": timeout},
            provider=provider,
            status_code=408,
        )


class ModelAPIError(LLMError):
    """Any other provider or transport failure."""

    kind = "api_error"

    def __init__(self, provider: str, reason: str, status_code: int | None = None):
        super().__init__(
            f"{provider} API error: {reason}",
            code="API_ERROR",
            provider=provider,
            status_code=status_code,
        )


class ResponseStructureError(LLMError):
    """Model reply is empty, not JSON, or missing required fields."""

    kind = "invalid_response"

    def __init__(self, reason: str, response: str | None = None):
        super().__init__(
            reason,
            code="INVALID_RESPONSE",
            details={"reason": reason, "response_preview": (response or "")[:200]},
        )


# Generation Exceptions
class FallbackExhaustedError(FinsightError):
    """Generation and every fallback step failed."""

    def __init__(self, reason: str | None = None):
        super().__init__(
            "Insight generation failed",
            code="AI_SERVICE_ERROR",
            details={"reason": reason},
        )


class ExportFormatNotImplementedError(FinsightError):
    """Export format is recognised but not implemented."""

    def __init__(self, export_format: str):
        super().__init__(
            f"{export_format.upper()} export is not implemented yet",
            code="NOT_IMPLEMENTED",
            details={"format": export_format},
        )


class ConfigurationError(FinsightError):
    """Configuration error."""

    pass
