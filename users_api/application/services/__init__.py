"""Application services."""

from users_api.application.services.user_service import UserService, parse_user_id

__all__ = ["UserService", "parse_user_id"]
