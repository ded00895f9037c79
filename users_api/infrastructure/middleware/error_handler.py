"""Exception handlers rendering domain errors as JSON responses."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from users_api.application.validation import field_errors
from users_api.domain.errors import (
    AppError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from users_api.infrastructure.telemetry import get_logger, record_app_error

logger = get_logger(__name__)

STORE_ERROR_MESSAGE = "An unexpected storage error occurred"

# First matching class wins
STATUS_BY_ERROR: tuple[tuple[type[AppError], int], ...] = (
    (NotFoundError, 404),
    (ValidationError, 400),
    (ConflictError, 409),
    (AuthenticationError, 401),
)


def status_for(error: AppError) -> int:
    """HTTP status for an application error; unmapped errors are 500."""
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return 500


def _error_body(
    code: str, message: str, details: dict[str, Any], retryable: bool
) -> dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "retryable": retryable,
        }
    }


def _render(request: Request, exc: AppError) -> JSONResponse:
    status_code = status_for(exc)
    record_app_error(exc.code)

    log_extra = {
        "error_code": exc.code,
        "error_details": exc.details,
        "path": request.url.path,
        "status_code": status_code,
    }
    if status_code >= 500:
        logger.error(f"Request failed: {exc.message}", extra=log_extra, exc_info=exc)
    else:
        logger.warning(f"Request rejected: {exc.message}", extra=log_extra)

    if isinstance(exc, StoreError):
        body = _error_body(exc.code, STORE_ERROR_MESSAGE, {}, exc.retryable)
    else:
        body = _error_body(exc.code, exc.message, exc.details, exc.retryable)
    return JSONResponse(status_code=status_code, content=body)


def error_handler_middleware(app: FastAPI) -> None:
    """Register the application-wide exception handlers on ``app``."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return _render(request, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed bodies, wrong field types and out-of-range query values."""
        error = ValidationError(
            message="Request data is invalid",
            details={"fields": field_errors(exc.errors())},
        )
        return _render(request, error)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            extra={"path": request.url.path, "error_type": type(exc).__name__},
        )
        return JSONResponse(
            status_code=500,
            content=_error_body("INTERNAL_ERROR", "An unexpected error occurred", {}, False),
        )
