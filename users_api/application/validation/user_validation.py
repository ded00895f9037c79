"""Validation contracts for user create and update payloads.

Payloads are pydantic models; every violated field is collected into one
domain ``ValidationError`` whose ``details["fields"]`` maps field names to
human-readable messages.
"""

from collections.abc import Iterable, Mapping
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    ValidationInfo,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from users_api.domain.entities import UserStatus
from users_api.domain.errors import ValidationError

MAX_FIELD_LENGTH = 255

UserText = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_FIELD_LENGTH),
]

# loc prefixes FastAPI adds for request parts
_REQUEST_PARTS = frozenset({"body", "query", "path", "header", "cookie"})


class CreateUserPayload(BaseModel):
    """Input for registering a user."""

    model_config = ConfigDict(frozen=True)

    email: EmailStr
    name: UserText
    username: UserText
    password: str = Field(min_length=1, max_length=MAX_FIELD_LENGTH, repr=False)
    password_confirmation: str = Field(repr=False)

    @field_validator("email", mode="before")
    @classmethod
    def _strip_email(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password_confirmation")
    @classmethod
    def _confirmation_matches(cls, value: str, info: ValidationInfo) -> str:
        password = info.data.get("password")
        # An invalid password is already reported on its own field
        if password is not None and value != password:
            raise PydanticCustomError(
                "password_mismatch", "The password confirmation does not match."
            )
        return value


class UpdateUserPayload(BaseModel):
    """Partial input for updating a user; only sent fields are applied.

    Unknown keys are ignored. A sent field may not be null.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: UserText | None = None
    username: UserText | None = None
    status: UserStatus | None = None

    @field_validator("name", "username", "status", mode="before")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        if value is None:
            raise PydanticCustomError("null_value", "Field may not be null")
        return value

    @property
    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)

    def is_empty(self) -> bool:
        return not self.model_fields_set


def _field_name(loc: tuple[int | str, ...]) -> str:
    parts = [str(part) for part in loc if not isinstance(part, int)]
    if len(parts) > 1 and parts[0] in _REQUEST_PARTS:
        parts = parts[1:]
    return ".".join(parts) or "body"


def _message(field: str, error: Mapping[str, Any]) -> str:
    kind = error["type"]
    if kind in ("missing", "null_value", "string_too_short"):
        return f"The {field} field is required."
    if kind == "string_type":
        return f"The {field} must be a string."
    if kind == "string_too_long":
        limit = error.get("ctx", {}).get("max_length", MAX_FIELD_LENGTH)
        return f"The {field} may not be greater than {limit} characters."
    if kind == "enum":
        return f"The selected {field} is invalid. Allowed: {', '.join(UserStatus.values())}."
    if kind == "value_error" and field == "email":
        return "The email must be a valid email address."
    return error["msg"]


def field_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, list[str]]:
    """Group pydantic error entries into field name -> messages."""
    fields: dict[str, list[str]] = {}
    for error in errors:
        name = _field_name(tuple(error["loc"]))
        fields.setdefault(name, []).append(_message(name, error))
    return fields


def validate_create(data: Mapping[str, Any]) -> CreateUserPayload:
    """Validate raw create input.

    Raises:
        ValidationError: listing every violated field
    """
    try:
        return CreateUserPayload.model_validate(dict(data))
    except PydanticValidationError as e:
        raise ValidationError(
            message="User registration data is invalid",
            details={"fields": field_errors(e.errors())},
        ) from e


def validate_update(data: Mapping[str, Any]) -> UpdateUserPayload:
    """Validate raw partial update input.

    Raises:
        ValidationError: listing every violated field
    """
    try:
        return UpdateUserPayload.model_validate(dict(data))
    except PydanticValidationError as e:
        raise ValidationError(
            message="User update data is invalid",
            details={"fields": field_errors(e.errors())},
        ) from e
