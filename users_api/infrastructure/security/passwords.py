"""Password hashing backed by passlib."""

from passlib.context import CryptContext


class PasslibPasswordHasher:
    """PasswordHasher using PBKDF2-SHA256 through a passlib CryptContext."""

    def __init__(self, rounds: int = 29000):
        self._context = CryptContext(
            schemes=["pbkdf2_sha256"],
            deprecated="auto",
            pbkdf2_sha256__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """Hash a plain-text password."""
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a plain-text password against a stored hash."""
        return self._context.verify(password, password_hash)
