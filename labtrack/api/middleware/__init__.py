"""API middleware."""

from labtrack.api.middleware.error_handler import ErrorHandlerMiddleware
from labtrack.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
