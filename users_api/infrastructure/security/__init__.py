"""Security infrastructure - password hashing."""

from users_api.infrastructure.security.passwords import PasslibPasswordHasher

__all__ = ["PasslibPasswordHasher"]
