"""SQLAlchemy database models."""

from users_api.infrastructure.database.models.base import Base, TimestampMixin
from users_api.infrastructure.database.models.user import UserModel

__all__ = [
    "Base",
    "TimestampMixin",
    "UserModel",
]
