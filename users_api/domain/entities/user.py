"""User entity."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID


class UserStatus(str, Enum):
    """Lifecycle status of a user record."""

    ACTIVE = "active"
    PASSIVE = "passive"
    PENDING = "pending"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


@dataclass
class User:
    """A registered user of the system."""

    id: UUID
    email: str
    name: str
    username: str
    password_hash: str = field(repr=False)
    status: UserStatus = UserStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if not self.email:
            raise ValueError("User email is required")
        if not self.username:
            raise ValueError("User username is required")
        if not isinstance(self.status, UserStatus):
            self.status = UserStatus(self.status)
