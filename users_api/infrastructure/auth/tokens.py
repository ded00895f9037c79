"""Bearer token issuing and verification (HS256 JWT)."""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from users_api.config import Settings, get_settings
from users_api.domain.errors import TokenExpiredError, TokenInvalidError
from users_api.infrastructure.telemetry import get_logger

logger = get_logger(__name__)


def create_access_token(
    subject: str,
    settings: Settings | None = None,
    expires_in: timedelta | None = None,
    **claims: Any,
) -> str:
    """Issue a signed access token whose ``sub`` is the caller identity."""
    settings = settings or get_settings()
    now = datetime.now(UTC)
    if expires_in is None:
        expires_in = timedelta(minutes=settings.access_token_expire_minutes)

    payload = {**claims, "sub": subject, "iat": now, "exp": now + expires_in}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str, settings: Settings | None = None) -> dict[str, Any]:
    """Verify a token and return its claims.

    Raises:
        TokenExpiredError: If the token has expired
        TokenInvalidError: If the signature or claims are invalid
    """
    settings = settings or get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        logger.warning("Access token expired")
        raise TokenExpiredError(message="Token has expired") from e
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid access token", extra={"error": str(e)})
        raise TokenInvalidError(message="Invalid token") from e

    if not isinstance(claims.get("sub"), str) or not claims["sub"]:
        raise TokenInvalidError(message="Invalid token: missing subject")

    return claims
