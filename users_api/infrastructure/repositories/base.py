"""Base repository with common persistence helpers."""

import re
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from users_api.domain.errors import ConflictError, StoreError
from users_api.infrastructure.database.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)
EntityType = TypeVar("EntityType")
ResultType = TypeVar("ResultType")

UNIQUE_VIOLATION = "23505"

_PG_UNIQUE = re.compile(r'unique constraint "([^"]+)"')
_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: (.+)$", re.MULTILINE)


class BaseRepository(Generic[ModelType, EntityType]):
    """Base repository translating SQLAlchemy failures into domain errors.

    Subclasses should set:
    - model_class: The SQLAlchemy model class (with to_entity/from_entity)
    - conflict_constraints: Unique constraint name -> column reported in ConflictError
    """

    model_class: type[ModelType]
    conflict_constraints: dict[str, str] = {}

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, id: UUID) -> ModelType | None:
        return await self._run("get", lambda: self.session.get(self.model_class, id))

    async def _run(
        self,
        operation: str,
        action: Callable[[], Awaitable[ResultType]],
    ) -> ResultType:
        """Run a store call, mapping constraint and driver errors.

        A uniqueness violation rolls the session back, leaving it usable for
        the caller's next unit of work.
        """
        try:
            return await action()
        except IntegrityError as e:
            await self.session.rollback()
            if not self._is_unique_violation(e):
                raise self._store_error(operation) from e
            field_name = self._conflicting_field(e)
            raise ConflictError(
                message=(
                    f"The {field_name} has already been taken"
                    if field_name
                    else "Record conflicts with an existing one"
                ),
                details={"fields": {field_name: ["has already been taken"]}} if field_name else {},
                field_name=field_name,
            ) from e
        except SQLAlchemyError as e:
            raise self._store_error(operation) from e

    def _store_error(self, operation: str) -> StoreError:
        return StoreError(
            message=f"Storage operation '{operation}' failed",
            operation=operation,
            details={"table": self.model_class.__tablename__},
        )

    def _conflicting_field(self, error: IntegrityError) -> str | None:
        constraint = _constraint_name(error)
        if constraint is not None:
            return self.conflict_constraints.get(constraint)
        # SQLite does not name the constraint, only the columns
        match = _SQLITE_UNIQUE.search(str(error.orig))
        if match is None:
            return None
        table = self.model_class.__tablename__
        fields = set(self.conflict_constraints.values())
        for column in match.group(1).split(","):
            owner, _, name = column.strip().rpartition(".")
            if owner == table and name in fields:
                return name
        return None

    @staticmethod
    def _is_unique_violation(error: IntegrityError) -> bool:
        sqlstate = getattr(error.orig, "sqlstate", None) or getattr(error.orig, "pgcode", None)
        if sqlstate is not None:
            return sqlstate == UNIQUE_VIOLATION
        return _SQLITE_UNIQUE.search(str(error.orig)) is not None


def _constraint_name(error: IntegrityError) -> str | None:
    """Constraint named by the driver, or by the first line of a Postgres message."""
    orig = error.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        name = getattr(candidate, "constraint_name", None)
        if name:
            return name
    match = _PG_UNIQUE.search(str(orig).partition("\n")[0])
    return match.group(1) if match else None
