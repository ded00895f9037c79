"""Users API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from users_api.application.services import UserService
from users_api.application.validation import CreateUserPayload, UpdateUserPayload
from users_api.config import Settings, get_settings
from users_api.domain.entities import User, UserFilter, UserStatus
from users_api.domain.errors import NotFoundError
from users_api.infrastructure.auth import AuthContext, get_optional_auth
from users_api.infrastructure.database import get_db
from users_api.infrastructure.repositories import UserRepositoryImpl
from users_api.infrastructure.security import PasslibPasswordHasher

router = APIRouter(prefix="/users")


# Response models
class UserResponse(BaseModel):
    """Public representation of a user."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str
    username: str
    status: UserStatus
    created_at: str
    updated_at: str


class UserEnvelope(BaseModel):
    user: UserResponse


class UserCollectionEnvelope(BaseModel):
    users: list[UserResponse]


def get_user_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> UserService:
    """Compose a UserService for the request's database session."""
    return UserService(
        repository=UserRepositoryImpl(db),
        hasher=PasslibPasswordHasher(rounds=settings.password_hash_rounds),
        default_status=settings.default_user_status,
    )


# Endpoints
@router.post("", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: CreateUserPayload,
    service: UserService = Depends(get_user_service),
) -> UserEnvelope:
    """Register a new user."""
    user = await service.create(payload)
    return UserEnvelope(user=user_to_response(user))


@router.get("/me", response_model=UserEnvelope)
async def get_authorized_user(
    service: UserService = Depends(get_user_service),
    auth: AuthContext | None = Depends(get_optional_auth),
) -> UserEnvelope:
    """Get the authenticated caller's own user record."""
    user = await service.authorized_user(auth.caller_identity if auth else None)
    return UserEnvelope(user=user_to_response(user))


@router.get("/{user_id}", response_model=UserEnvelope)
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> UserEnvelope:
    """Get a user by ID."""
    user = await service.get(user_id)
    return UserEnvelope(user=user_to_response(user))


@router.get("", response_model=UserCollectionEnvelope)
async def find_users(
    status_filter: UserStatus | None = Query(None, alias="status"),
    email: str | None = None,
    username: str | None = None,
    search: str | None = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    service: UserService = Depends(get_user_service),
) -> UserCollectionEnvelope:
    """List users, optionally filtered.

    An empty result is reported as not found.
    """
    user_filter = UserFilter(
        status=status_filter,
        email=email,
        username=username,
        search=search,
        limit=limit,
        offset=offset,
    )

    users = await service.find(user_filter)
    if not users:
        raise NotFoundError(message="Users with given filter not found.")

    return UserCollectionEnvelope(users=[user_to_response(u) for u in users])


@router.patch("/{user_id}", response_model=UserEnvelope)
async def update_user(
    user_id: str,
    payload: UpdateUserPayload,
    service: UserService = Depends(get_user_service),
) -> UserEnvelope:
    """Update the sent fields of a user."""
    user = await service.update(user_id, payload)
    return UserEnvelope(user=user_to_response(user))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> Response:
    """Delete a user."""
    await service.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def user_to_response(user: User) -> UserResponse:
    """Convert user entity to response model."""
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        username=user.username,
        status=user.status,
        created_at=user.created_at.isoformat(),
        updated_at=user.updated_at.isoformat(),
    )

