"""Telemetry infrastructure (logging, tracing, metrics)."""

from users_api.infrastructure.telemetry.logging import (
    ContextLogger,
    clear_request_context,
    configure_logging,
    get_logger,
    request_id_var,
    set_request_context,
    user_id_var,
)
from users_api.infrastructure.telemetry.metrics import (
    record_app_error,
    record_http_request,
    record_user_operation,
    set_service_info,
)

__all__ = [
    # Logging
    "ContextLogger",
    "configure_logging",
    "get_logger",
    "set_request_context",
    "clear_request_context",
    "request_id_var",
    "user_id_var",
    # Metrics
    "set_service_info",
    "record_http_request",
    "record_user_operation",
    "record_app_error",
]
