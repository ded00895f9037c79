"""Repository protocols - abstract interfaces for data access."""

from typing import Any, Protocol
from uuid import UUID

from users_api.domain.entities import User, UserFilter


class UserRepository(Protocol):
    """Abstract interface for the identity store.

    Implementations enforce email/username uniqueness atomically and signal
    violations with ConflictError. Storage failures surface as StoreError.
    """

    async def insert(self, user: User) -> User:
        """Persist a new user. Raises ConflictError on a uniqueness violation."""
        ...

    async def find_by_id(self, user_id: UUID) -> User | None:
        """Get user by ID."""
        ...

    async def find_all(self, user_filter: UserFilter | None = None) -> list[User]:
        """List users matching the filter, oldest first."""
        ...

    async def update_fields(self, user_id: UUID, changes: dict[str, Any]) -> User:
        """Apply changes to an existing user.

        Raises NotFoundError if absent, ConflictError on a uniqueness violation.
        """
        ...

    async def delete_by_id(self, user_id: UUID) -> None:
        """Remove a user. Raises NotFoundError if absent."""
        ...
