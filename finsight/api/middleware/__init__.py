"""API middleware."""

from finsight.api.middleware.error_handler import ErrorHandlerMiddleware, setup_exception_handlers
from finsight.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware", "setup_exception_handlers"]
