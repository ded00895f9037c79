"""Authentication infrastructure - bearer token resolution."""

from users_api.infrastructure.auth.context import AuthContext, get_optional_auth
from users_api.infrastructure.auth.tokens import create_access_token, verify_access_token

__all__ = [
    "AuthContext",
    "get_optional_auth",
    "create_access_token",
    "verify_access_token",
]
