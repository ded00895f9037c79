"""User database model."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlalchemy import Enum, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from users_api.domain.entities.user import User, UserStatus
from users_api.infrastructure.database.models.base import Base, TimestampMixin

EMAIL_CONSTRAINT = "users_email_unique"
USERNAME_CONSTRAINT = "users_username_unique"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class UserModel(Base, TimestampMixin):
    """SQLAlchemy model for users table."""

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[UserStatus] = mapped_column(
        Enum(
            UserStatus,
            name="user_status",
            values_callable=lambda enum: [member.value for member in enum],
            validate_strings=True,
        ),
        nullable=False,
        default=UserStatus.PENDING,
    )

    __table_args__ = (
        UniqueConstraint("email", name=EMAIL_CONSTRAINT),
        UniqueConstraint("username", name=USERNAME_CONSTRAINT),
    )

    def to_entity(self) -> User:
        """Convert to domain entity."""
        return User(
            id=self.id,
            email=self.email,
            name=self.name,
            username=self.username,
            password_hash=self.password_hash,
            status=self.status,
            created_at=_as_utc(self.created_at),
            updated_at=_as_utc(self.updated_at),
        )

    @classmethod
    def from_entity(cls, entity: User) -> "UserModel":
        """Create from domain entity."""
        return cls(
            id=entity.id,
            email=entity.email,
            name=entity.name,
            username=entity.username,
            password_hash=entity.password_hash,
            status=entity.status,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
