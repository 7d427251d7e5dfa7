"""Middleware infrastructure."""

from voicebridge.infrastructure.middleware.error_handler import error_handler_middleware
from voicebridge.infrastructure.middleware.request_context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware", "error_handler_middleware"]
