"""Tests for application factory and lifespan."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI

from attendance.application import create_app, lifespan
from attendance.context import INIT_FAILED


class TestApplication:
    """Tests for create_app."""

    def test_create_app_includes_routes(self):
        app = create_app()
        routes = [route.path for route in app.routes]

        assert "/" in routes
        assert "/dashboard/events" in routes
        assert "/api/health" in routes
        assert "/api/subjects" in routes
        assert "/api/subjects/stream" in routes

    def test_startup_error_initially_unset(self):
        assert create_app().state.startup_error is None


class TestLifespan:
    """Tests for startup and shutdown."""

    @pytest.mark.asyncio
    async def test_successful_startup(self):
        app = FastAPI()
        with (
            patch("attendance.application.init_db", new_callable=AsyncMock) as init_db,
            patch("attendance.application.init_redis", new_callable=AsyncMock) as init_redis,
            patch("attendance.application.close_db", new_callable=AsyncMock) as close_db,
            patch("attendance.application.close_redis", new_callable=AsyncMock) as close_redis,
        ):
            async with lifespan(app):
                assert app.state.startup_error is None
                init_db.assert_awaited_once()
                init_redis.assert_awaited_once()

            close_db.assert_awaited_once()
            close_redis.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_startup_is_recorded_not_raised(self):
        app = FastAPI()
        with (
            patch(
                "attendance.application.init_db",
                new_callable=AsyncMock,
                side_effect=OSError("connection refused"),
            ),
            patch("attendance.application.init_redis", new_callable=AsyncMock) as init_redis,
            patch("attendance.application.close_db", new_callable=AsyncMock),
            patch("attendance.application.close_redis", new_callable=AsyncMock),
        ):
            async with lifespan(app):
                assert app.state.startup_error == INIT_FAILED
                init_redis.assert_not_called()
