"""API router factory with core endpoints."""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from attendance.utils.db import db_manager
from attendance.utils.redis import redis_manager

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def create_dashboard_router() -> APIRouter:
    """Create router with the browser dashboard.

    Returns:
        APIRouter with dashboard page, fragments and event stream.
    """
    from attendance.api.dashboard import router as dashboard_router

    return dashboard_router


def create_api_router() -> APIRouter:
    """Create router with JSON endpoints.

    All routes are mounted under the /api prefix.

    Returns:
        APIRouter with health checks and subject endpoints.
    """
    from attendance.api.subjects import router as subjects_router

    router = APIRouter(prefix=API_PREFIX)

    @router.get("/health", tags=["Health"], status_code=status.HTTP_200_OK)
    async def health_check(request: Request) -> dict:
        """Health check endpoint - basic application health.

        Returns:
            Health status response, degraded if startup failed.
        """
        if getattr(request.app.state, "startup_error", None):
            return {"status": "degraded", "service": "attendance"}
        return {"status": "healthy", "service": "attendance"}

    @router.get(
        "/health/db",
        tags=["Health"],
        status_code=status.HTTP_200_OK,
        response_model=None,
    )
    async def health_check_db() -> JSONResponse:
        """Deep health check - database and Redis connectivity.

        Returns:
            Health status with connectivity information.
        """
        try:
            await db_manager.verify_connection()
            await redis_manager.verify_connection()
            return JSONResponse(
                status_code=status.HTTP_200_OK,
                content={
                    "status": "healthy",
                    "database": "connected",
                    "redis": "connected",
                },
            )
        except Exception as e:
            logger.error(f"Dependency health check failed: {e}")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unhealthy", "error": str(e)},
            )

    router.include_router(subjects_router)

    return router
