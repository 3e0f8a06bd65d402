"""Unit tests for anonymous session middleware."""

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from attendance.middleware.session import (
    COOKIE_NAME,
    AnonymousSessionMiddleware,
    make_session_token,
    read_session_token,
    sign_user_id,
)


def cookie_value(set_cookie: str) -> str:
    return set_cookie.split(";", 1)[0].split("=", 1)[1]


@pytest.fixture
def session_app() -> FastAPI:
    """Minimal app echoing the resolved identity."""
    app = FastAPI()
    app.add_middleware(AnonymousSessionMiddleware)

    @app.get("/whoami")
    async def whoami(request: Request) -> dict:
        return {"user_id": request.state.user_id}

    @app.get("/api/health")
    async def health(request: Request) -> dict:
        return {"user_id": request.state.user_id}

    return app


@pytest.fixture
async def session_client(session_app: FastAPI):
    transport = ASGITransport(app=session_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestSessionToken:
    """Tests for session token signing and reading."""

    def test_sign_user_id_returns_hex_digest(self):
        signature = sign_user_id("user-1", "secret")

        assert len(signature) == 64
        assert all(c in "0123456789abcdef" for c in signature)

    def test_token_round_trip(self):
        token = make_session_token("user-1", "secret")

        assert read_session_token(token, "secret") == "user-1"

    def test_wrong_key_rejected(self):
        token = make_session_token("user-1", "secret")

        assert read_session_token(token, "other-secret") is None

    def test_tampered_identity_rejected(self):
        signature = sign_user_id("user-1", "secret")

        assert read_session_token(f"user-2.{signature}", "secret") is None

    @pytest.mark.parametrize("token", [None, "", "no-signature", ".abc"])
    def test_malformed_tokens_rejected(self, token):
        assert read_session_token(token, "secret") is None


class TestExcludedPaths:
    """Tests for path classification."""

    def test_static_and_health_excluded(self):
        assert AnonymousSessionMiddleware.is_excluded_path("/static/dashboard.css")
        assert AnonymousSessionMiddleware.is_excluded_path("/api/health/db")

    def test_dashboard_and_api_not_excluded(self):
        assert not AnonymousSessionMiddleware.is_excluded_path("/")
        assert not AnonymousSessionMiddleware.is_excluded_path("/api/subjects")


class TestAnonymousSessionMiddleware:
    """Tests for identity resolution on requests."""

    @pytest.mark.asyncio
    async def test_new_visitor_gets_identity_and_cookie(self, session_client, settings):
        response = await session_client.get("/whoami")

        user_id = response.json()["user_id"]
        assert user_id
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{COOKIE_NAME}=")
        assert read_session_token(cookie_value(set_cookie), settings.secret_key) == user_id

    @pytest.mark.asyncio
    async def test_valid_cookie_restores_identity(self, session_client, settings):
        token = make_session_token("returning-user", settings.secret_key)

        response = await session_client.get(
            "/whoami", headers={"Cookie": f"{COOKIE_NAME}={token}"}
        )

        assert response.json() == {"user_id": "returning-user"}
        assert "set-cookie" not in response.headers

    @pytest.mark.asyncio
    async def test_forged_cookie_replaced(self, session_client):
        token = make_session_token("victim", "guessed-secret")

        response = await session_client.get(
            "/whoami", headers={"Cookie": f"{COOKIE_NAME}={token}"}
        )

        assert response.json()["user_id"] != "victim"
        assert "set-cookie" in response.headers

    @pytest.mark.asyncio
    async def test_excluded_path_has_no_identity(self, session_client):
        response = await session_client.get("/api/health")

        assert response.json() == {"user_id": None}
        assert "set-cookie" not in response.headers

    @pytest.mark.asyncio
    async def test_missing_secret_key_leaves_identity_unset(
        self, session_client, monkeypatch
    ):
        from attendance.config import get_settings

        monkeypatch.setenv("SECRET_KEY", "")
        get_settings.cache_clear()

        response = await session_client.get("/whoami")

        assert response.json() == {"user_id": None}
        assert "set-cookie" not in response.headers
