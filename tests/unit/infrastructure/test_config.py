"""Tests for application settings."""

from users_api.config import Settings, get_settings
from users_api.domain.entities import UserStatus


class TestSettings:
    """Test Settings loading."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("DEFAULT_USER_STATUS", raising=False)

        settings = Settings(_env_file=None)

        assert settings.environment == "development"
        assert settings.default_user_status is UserStatus.PENDING
        assert settings.database_url.startswith("postgresql+asyncpg://")
        assert not settings.is_production
        assert not settings.is_sqlite

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_USER_STATUS", "active")
        monkeypatch.setenv("ENVIRONMENT", "production")

        settings = Settings(_env_file=None)

        assert settings.default_user_status is UserStatus.ACTIVE
        assert settings.is_production

    def test_sync_url(self):
        settings = Settings(
            _env_file=None,
            database_url="postgresql+asyncpg://u:p@db:5432/users",
        )

        assert settings.database_url_sync == "postgresql://u:p@db:5432/users"

    def test_sqlite_detection(self):
        settings = Settings(_env_file=None, database_url="sqlite+aiosqlite:///users.db")

        assert settings.is_sqlite
        assert settings.database_url_sync == "sqlite:///users.db"

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
