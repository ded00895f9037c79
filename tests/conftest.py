"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from users_api.application.services import UserService
from users_api.application.validation import CreateUserPayload
from users_api.config import Settings, get_settings
from users_api.infrastructure.database import close_db, create_tables, init_db
from users_api.infrastructure.database.connection import get_session_factory
from users_api.infrastructure.repositories import UserRepositoryImpl
from users_api.infrastructure.security import PasslibPasswordHasher
from users_api.main import create_app

TEST_HASH_ROUNDS = 1000


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Clear cached settings so each test sees its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Test settings backed by a throwaway SQLite database."""
    return Settings(
        environment="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'users.db'}",
        jwt_secret="test-secret",
        password_hash_rounds=TEST_HASH_ROUNDS,
        log_level="DEBUG",
        log_format="text",
        otel_enabled=False,
    )


@pytest_asyncio.fixture
async def engine(settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    """Initialise the global engine and create the schema."""
    await close_db()
    engine = await init_db(settings)
    await create_tables(engine)
    yield engine
    await close_db()


@pytest_asyncio.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """A session on the test database."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


@pytest.fixture
def hasher() -> PasslibPasswordHasher:
    return PasslibPasswordHasher(rounds=TEST_HASH_ROUNDS)


@pytest.fixture
def user_service(db_session: AsyncSession, hasher: PasslibPasswordHasher) -> UserService:
    """UserService wired to the real repository on the test database."""
    return UserService(repository=UserRepositoryImpl(db_session), hasher=hasher)


@pytest.fixture
def make_payload():
    """Build a valid create payload, overriding selected fields."""

    def _make(**overrides: str) -> CreateUserPayload:
        data = {
            "email": "a@example.com",
            "name": "A",
            "username": "a1",
            "password": "p",
            "password_confirmation": "p",
        }
        data.update(overrides)
        return CreateUserPayload(**data)

    return _make


@pytest_asyncio.fixture
async def client(settings: Settings, engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to an app built from the test settings."""
    app = create_app(settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
