"""User repository implementation."""

from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from users_api.domain.entities import User, UserFilter
from users_api.domain.errors import UserNotFoundError
from users_api.infrastructure.database.models.user import (
    EMAIL_CONSTRAINT,
    USERNAME_CONSTRAINT,
    UserModel,
)
from users_api.infrastructure.repositories.base import BaseRepository

# Columns callers may change through update_fields
UPDATABLE_FIELDS = frozenset({"name", "username", "status", "updated_at"})


class UserRepositoryImpl(BaseRepository[UserModel, User]):
    """SQLAlchemy implementation of UserRepository."""

    model_class = UserModel
    conflict_constraints = {EMAIL_CONSTRAINT: "email", USERNAME_CONSTRAINT: "username"}

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def insert(self, user: User) -> User:
        """Persist a new user."""
        model = UserModel.from_entity(user)

        async def _insert() -> UserModel:
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)
            return model

        created = await self._run("insert", _insert)
        return created.to_entity()

    async def find_by_id(self, user_id: UUID) -> User | None:
        """Get user by ID."""
        model = await self._get_model(user_id)
        if model is None:
            return None
        return model.to_entity()

    async def find_all(self, user_filter: UserFilter | None = None) -> list[User]:
        """List users matching the filter, oldest first."""
        user_filter = user_filter or UserFilter()
        stmt = select(UserModel)

        if user_filter.status is not None:
            stmt = stmt.where(UserModel.status == user_filter.status)
        if user_filter.email is not None:
            stmt = stmt.where(UserModel.email == user_filter.email.strip().lower())
        if user_filter.username is not None:
            stmt = stmt.where(UserModel.username == user_filter.username)
        if user_filter.search:
            stmt = stmt.where(
                func.lower(UserModel.name).contains(user_filter.search.lower(), autoescape=True)
            )

        stmt = (
            stmt.order_by(UserModel.created_at, UserModel.id)
            .offset(user_filter.offset)
            .limit(user_filter.limit)
        )

        result = await self._run("find_all", lambda: self.session.execute(stmt))
        return [model.to_entity() for model in result.scalars().all()]

    async def update_fields(self, user_id: UUID, changes: dict[str, Any]) -> User:
        """Apply changes to an existing user."""
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        model = await self._get_model(user_id)
        if model is None:
            raise UserNotFoundError(
                message=f"User {user_id} not found",
                details={"user_id": str(user_id)},
            )

        for key, value in changes.items():
            setattr(model, key, value)

        async def _update() -> UserModel:
            await self.session.flush()
            await self.session.refresh(model)
            return model

        updated = await self._run("update_fields", _update)
        return updated.to_entity()

    async def delete_by_id(self, user_id: UUID) -> None:
        """Remove a user."""
        model = await self._get_model(user_id)
        if model is None:
            raise UserNotFoundError(
                message=f"User {user_id} not found",
                details={"user_id": str(user_id)},
            )

        async def _delete() -> None:
            await self.session.delete(model)
            await self.session.flush()

        await self._run("delete_by_id", _delete)
