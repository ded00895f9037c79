"""Domain entities - pure Python dataclasses representing business objects."""

from users_api.domain.entities.filters import UserFilter
from users_api.domain.entities.user import User, UserStatus

__all__ = [
    "User",
    "UserStatus",
    "UserFilter",
]
