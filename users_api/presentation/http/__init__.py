"""HTTP presentation layer - REST API routes."""

from fastapi import APIRouter

from users_api.presentation.http.health import router as health_router
from users_api.presentation.http.metrics import router as metrics_router
from users_api.presentation.http.users import router as users_router

API_PREFIX = "/api/v1"

# Main API router
api_router = APIRouter()

# Include sub-routers
api_router.include_router(health_router, tags=["Health"])
api_router.include_router(users_router, prefix=API_PREFIX, tags=["User"])

__all__ = ["api_router", "metrics_router", "API_PREFIX"]
