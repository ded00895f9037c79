"""Authentication context for request handling."""

from dataclasses import dataclass, field
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from users_api.config import Settings, get_settings
from users_api.infrastructure.auth.tokens import verify_access_token
from users_api.infrastructure.telemetry import set_request_context

optional_bearer = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    """Authenticated caller identity resolved from the bearer token."""

    caller_identity: str
    raw_token: str = field(repr=False)
    claims: dict[str, Any] = field(default_factory=dict)


async def get_optional_auth(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer),
    settings: Settings = Depends(get_settings),
) -> AuthContext | None:
    """FastAPI dependency resolving the caller identity, if any.

    Returns None when no Authorization header is sent. A token that is sent
    but fails verification raises an AuthenticationError.
    """
    if credentials is None:
        return None

    token = credentials.credentials
    claims = verify_access_token(token, settings)
    set_request_context(user_id=claims["sub"])

    return AuthContext(caller_identity=claims["sub"], raw_token=token, claims=claims)
