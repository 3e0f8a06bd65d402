"""Pytest configuration and shared fixtures."""

import os
from typing import AsyncGenerator, Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

# Must be set before anything reads settings
os.environ.setdefault("API_TITLE", "Attendance Test")
os.environ.setdefault("API_VERSION", "0.1.0-test")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DB_HOST", "localhost")
os.environ.setdefault("DB_USER", "test_user")
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("DB_NAME", "test_db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from attendance.application import create_app  # noqa: E402
from attendance.config import Settings, get_settings  # noqa: E402
from attendance.context import DashboardContext  # noqa: E402
from attendance.core.summary import SubjectRecord  # noqa: E402
from attendance.services.subject_store import SubjectStore  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """Re-read environment for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings built from the test environment."""
    return get_settings()


@pytest.fixture
def app(settings: Settings) -> Generator[FastAPI, None, None]:
    """Create FastAPI application instance for testing."""
    app = create_app()
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async client talking to the app in-process (lifespan not run)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def records() -> list[SubjectRecord]:
    """Two subjects in display order."""
    return [
        SubjectRecord(id="s-1", name="Chemistry", type="Lab", conducted=10, present=5),
        SubjectRecord(id="s-2", name="physics", type="Lecture", conducted=40, present=30),
    ]


@pytest.fixture
def mock_store(records: list[SubjectRecord]) -> MagicMock:
    """Subject store with every operation mocked."""
    store = MagicMock(spec=SubjectStore)
    store.snapshot = AsyncMock(return_value=records)
    store.subscribe = AsyncMock()
    store.create = AsyncMock(return_value="s-new")
    store.update_field = AsyncMock()
    store.delete = AsyncMock()
    return store


@pytest.fixture
def mock_notices() -> MagicMock:
    """Error notice board with no message stored."""
    notices = MagicMock()
    notices.set = AsyncMock()
    notices.get = AsyncMock(return_value=None)
    notices.clear = AsyncMock()
    return notices


@pytest.fixture
def dashboard_ctx(mock_store: MagicMock, mock_notices: MagicMock) -> DashboardContext:
    """Ready dashboard context for identity "user-1"."""
    return DashboardContext(user_id="user-1", store=mock_store, notices=mock_notices)
