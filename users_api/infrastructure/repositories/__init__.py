"""Repository implementations."""

from users_api.infrastructure.repositories.base import BaseRepository
from users_api.infrastructure.repositories.user_repository import UserRepositoryImpl

__all__ = [
    "BaseRepository",
    "UserRepositoryImpl",
]
