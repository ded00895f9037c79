"""Middleware infrastructure."""

from users_api.infrastructure.middleware.error_handler import error_handler_middleware
from users_api.infrastructure.middleware.request_context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware", "error_handler_middleware"]
