"""Input validation for user payloads."""

from users_api.application.validation.user_validation import (
    CreateUserPayload,
    UpdateUserPayload,
    field_errors,
    validate_create,
    validate_update,
)

__all__ = [
    "CreateUserPayload",
    "UpdateUserPayload",
    "field_errors",
    "validate_create",
    "validate_update",
]
