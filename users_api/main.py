"""Application factory and console entry point."""

from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from fastapi import FastAPI

from users_api import __version__
from users_api.config import Settings, get_settings
from users_api.infrastructure.database import close_db, create_tables, init_db
from users_api.infrastructure.middleware import (
    RequestContextMiddleware,
    error_handler_middleware,
)
from users_api.infrastructure.telemetry import configure_logging, get_logger, set_service_info
from users_api.infrastructure.telemetry.tracing import (
    configure_tracing,
    instrument_fastapi,
    instrument_sqlalchemy,
    shutdown_tracing,
)
from users_api.presentation.http import api_router, metrics_router

logger = get_logger(__name__)


def _lifespan(settings: Settings) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Open the identity store on startup and release it on shutdown."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        engine = await init_db(settings)
        if settings.otel_enabled:
            instrument_sqlalchemy(engine.sync_engine)
        if settings.auto_create_tables:
            await create_tables(engine)
        logger.info(
            "Users API started",
            extra={
                "version": settings.version,
                "environment": settings.environment,
                "schema_created": settings.auto_create_tables,
            },
        )
        try:
            yield
        finally:
            await close_db()
            if settings.otel_enabled:
                shutdown_tracing()
            logger.info("Users API stopped")

    return lifespan


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the users API.

    Args:
        settings: Settings to run with; defaults to the environment's. Route
            dependencies on ``get_settings`` resolve to the same instance.
    """
    settings = settings or get_settings()

    configure_logging(
        level=settings.log_level,
        format_type=settings.log_format,
        service_name=settings.otel_service_name,
    )
    if settings.otel_enabled:
        configure_tracing(
            service_name=settings.otel_service_name,
            service_version=settings.version,
            environment=settings.environment,
            otlp_endpoint=settings.otlp_endpoint or None,
        )
    set_service_info(version=settings.version, environment=settings.environment)

    docs_enabled = not settings.is_production
    app = FastAPI(
        title="Users API",
        description="Registration, lookup, listing, update and deletion of user records",
        version=__version__,
        lifespan=_lifespan(settings),
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
    )
    app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(RequestContextMiddleware)
    error_handler_middleware(app)
    if settings.otel_enabled:
        instrument_fastapi(app)

    app.include_router(api_router)
    if settings.prometheus_enabled:
        app.include_router(metrics_router)

    return app


app = create_app()


def run() -> None:
    """Serve ``users_api.main:app`` with uvicorn (``users-api`` command)."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("users_api.main:app", host=settings.host, port=settings.port, log_config=None)
