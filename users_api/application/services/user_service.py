"""User service - owns identity, validation and status rules for user records."""

import asyncio
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from users_api.application.validation import (
    CreateUserPayload,
    UpdateUserPayload,
    validate_create,
    validate_update,
)
from users_api.domain.entities import User, UserFilter, UserStatus
from users_api.domain.errors import (
    AuthenticationError,
    InvalidIdentifierError,
    UserNotFoundError,
)
from users_api.domain.protocols import PasswordHasher, UserRepository
from users_api.infrastructure.telemetry import get_logger
from users_api.infrastructure.telemetry.metrics import record_user_operation

logger = get_logger(__name__)


class UserService:
    """Service for managing user records.

    Every operation reads and writes through the repository within its own
    scope; nothing is cached between calls. Uniqueness is left to the store,
    which reports violations as ConflictError.
    """

    def __init__(
        self,
        repository: UserRepository,
        hasher: PasswordHasher,
        default_status: UserStatus = UserStatus.PENDING,
    ):
        self.repository = repository
        self.hasher = hasher
        self.default_status = default_status

    async def create(self, payload: CreateUserPayload | Mapping[str, Any]) -> User:
        """Register a new user.

        Args:
            payload: Validated create payload, or raw input to validate

        Returns:
            Created user with a new id and the default status

        Raises:
            ValidationError: If the payload fails structural checks
            ConflictError: If email or username is already taken
        """
        if not isinstance(payload, CreateUserPayload):
            payload = validate_create(payload)

        # Hashing runs in a worker thread
        password_hash = await asyncio.to_thread(self.hasher.hash, payload.password)

        now = datetime.now(UTC)
        user = User(
            id=uuid4(),
            email=payload.email,
            name=payload.name,
            username=payload.username,
            password_hash=password_hash,
            status=self.default_status,
            created_at=now,
            updated_at=now,
        )

        created = await self.repository.insert(user)
        record_user_operation("create")

        logger.info(
            "User created",
            extra={"user_id": str(created.id), "status": created.status.value},
        )

        return created

    async def get(self, user_id: UUID | str) -> User:
        """Get a user by ID.

        Raises:
            ValidationError: If the id is malformed
            UserNotFoundError: If no such user exists
        """
        uid = parse_user_id(user_id)
        user = await self.repository.find_by_id(uid)
        if user is None:
            raise UserNotFoundError(
                message=f"User {uid} not found",
                details={"user_id": str(uid)},
            )
        return user

    async def find(self, user_filter: UserFilter | None = None) -> list[User]:
        """List users matching an optional filter.

        An empty list is a normal result; deciding whether that is an error
        is left to the caller.
        """
        return await self.repository.find_all(user_filter or UserFilter())

    async def update(
        self,
        user_id: UUID | str,
        payload: UpdateUserPayload | Mapping[str, Any],
    ) -> User:
        """Apply the present fields of a partial payload.

        Status may move between any two variants.

        Raises:
            ValidationError: If the id or any present field is invalid
            UserNotFoundError: If no such user exists
            ConflictError: If the new username belongs to another user
        """
        uid = parse_user_id(user_id)
        if not isinstance(payload, UpdateUserPayload):
            payload = validate_update(payload)

        if payload.is_empty():
            return await self.get(uid)

        changes = dict(payload.changes)
        changes["updated_at"] = datetime.now(UTC)

        updated = await self.repository.update_fields(uid, changes)
        record_user_operation("update")

        logger.info(
            "User updated",
            extra={"user_id": str(uid), "fields": sorted(payload.changes)},
        )

        return updated

    async def delete(self, user_id: UUID | str) -> None:
        """Remove a user permanently.

        Raises:
            ValidationError: If the id is malformed
            UserNotFoundError: If no such user exists
        """
        uid = parse_user_id(user_id)
        await self.repository.delete_by_id(uid)
        record_user_operation("delete")

        logger.info("User deleted", extra={"user_id": str(uid)})

    async def authorized_user(self, caller_identity: UUID | str | None) -> User:
        """Return the record of the already-authenticated caller.

        Raises:
            AuthenticationError: If no identity was resolved upstream
            UserNotFoundError: If the identity maps to no stored user
        """
        if caller_identity is None or not str(caller_identity).strip():
            raise AuthenticationError(message="Authentication required")

        user = None
        try:
            uid = parse_user_id(caller_identity)
        except InvalidIdentifierError:
            uid = None
        if uid is not None:
            user = await self.repository.find_by_id(uid)

        if user is None:
            # An authenticated identity without a record means upstream and
            # the store disagree.
            logger.error(
                "Authenticated identity has no user record",
                extra={"caller_identity": str(caller_identity)},
            )
            raise UserNotFoundError(
                message="Authorized user not found",
                details={"user_id": str(caller_identity)},
            )

        return user


def parse_user_id(value: UUID | str) -> UUID:
    """Parse a user identifier.

    Raises:
        InvalidIdentifierError: If the value is not a UUID
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except (ValueError, TypeError, AttributeError) as e:
        raise InvalidIdentifierError(
            message="User id must be a valid UUID",
            details={"fields": {"id": ["The id must be a valid UUID."]}},
        ) from e
