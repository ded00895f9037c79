"""Domain protocols - abstract interfaces for infrastructure implementations."""

from users_api.domain.protocols.repositories import UserRepository
from users_api.domain.protocols.security import PasswordHasher

__all__ = [
    "UserRepository",
    "PasswordHasher",
]
