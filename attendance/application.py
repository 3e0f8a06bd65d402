"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from attendance.api import create_api_router, create_dashboard_router
from attendance.config import get_settings
from attendance.context import INIT_FAILED
from attendance.middleware import AnonymousSessionMiddleware
from attendance.utils.db import close_db, init_db
from attendance.utils.exception_handlers import register_exception_handlers
from attendance.utils.redis import close_redis, init_redis
from attendance.utils.templates import STATIC_DIR

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events.

    A failed startup does not stop the server: the failure is kept on
    ``app.state.startup_error`` and every dashboard request shows it.
    """
    app.state.startup_error = None
    try:
        await init_db()
        await init_redis()
    except Exception as e:
        logger.critical(f"Failed to initialize attendance store: {e}", exc_info=True)
        app.state.startup_error = INIT_FAILED
    yield
    await close_redis()
    await close_db()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        description="Personal attendance tracking and advisory dashboard",
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
    )
    app.state.startup_error = None

    app.add_middleware(AnonymousSessionMiddleware)
    register_exception_handlers(app)

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.include_router(create_dashboard_router())
    app.include_router(create_api_router())

    return app
