"""Security protocols."""

from typing import Protocol


class PasswordHasher(Protocol):
    """Derives and checks password hashes."""

    def hash(self, password: str) -> str:
        ...

    def verify(self, password: str, password_hash: str) -> bool:
        ...
