"""Query criteria for listing users."""

from dataclasses import dataclass

from users_api.domain.entities.user import UserStatus


@dataclass(frozen=True)
class UserFilter:
    """Predicate over user fields; unset criteria match everything."""

    status: UserStatus | None = None
    email: str | None = None
    username: str | None = None
    search: str | None = None  # case-insensitive substring of name
    limit: int = 100
    offset: int = 0
