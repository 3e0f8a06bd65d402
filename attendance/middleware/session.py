"""Anonymous identity middleware based on a signed session cookie."""

import hashlib
import hmac
import logging
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from attendance.config import get_settings

logger = logging.getLogger(__name__)

COOKIE_NAME = "attendance_session"


def sign_user_id(user_id: str, secret_key: str) -> str:
    """Sign an identity using HMAC.

    Args:
        user_id: Identity to sign.
        secret_key: Secret used as HMAC key.

    Returns:
        Hex-encoded HMAC digest.
    """
    return hmac.new(secret_key.encode(), user_id.encode(), hashlib.sha256).hexdigest()


def make_session_token(user_id: str, secret_key: str) -> str:
    """Build the cookie value ``{user_id}.{signature}``."""
    return f"{user_id}.{sign_user_id(user_id, secret_key)}"


def read_session_token(token: Optional[str], secret_key: str) -> Optional[str]:
    """Return the identity stored in a session token.

    Args:
        token: Cookie value, possibly missing or tampered with.
        secret_key: Secret used as HMAC key.

    Returns:
        Identity if the signature is valid, None otherwise.
    """
    if not token or "." not in token:
        return None
    user_id, _, signature = token.rpartition(".")
    if not user_id:
        return None
    expected = sign_user_id(user_id, secret_key)
    if not hmac.compare_digest(signature, expected):
        return None
    return user_id


class AnonymousSessionMiddleware(BaseHTTPMiddleware):
    """Establishes an anonymous identity for every browser and API request.

    A valid cookie restores the existing identity. Otherwise a new one is
    minted and the cookie is set on the response (anonymous sign-in).
    The identity is placed on ``request.state.user_id``; it stays None when
    no secret key is configured, which downstream handlers report as an
    authentication failure.
    """

    # Path prefixes that need no identity
    EXCLUDED_PREFIXES: tuple[str, ...] = ("/static/", "/api/health")

    @classmethod
    def is_excluded_path(cls, path: str) -> bool:
        return path.startswith(cls.EXCLUDED_PREFIXES)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Resolve or mint the identity, then call the next handler."""
        request.state.user_id = None

        if self.is_excluded_path(request.url.path):
            return await call_next(request)

        settings = get_settings()
        if not settings.secret_key:
            logger.error(
                "Anonymous sign-in unavailable: SECRET_KEY is not configured",
                extra={"path": request.url.path},
            )
            return await call_next(request)

        token = request.cookies.get(COOKIE_NAME)
        user_id = read_session_token(token, settings.secret_key)
        minted = user_id is None

        if minted:
            user_id = str(uuid.uuid4())
            logger.info(
                "Anonymous identity created",
                extra={"user_id": user_id, "had_cookie": bool(token)},
            )

        request.state.user_id = user_id
        response = await call_next(request)

        if minted:
            response.set_cookie(
                key=COOKIE_NAME,
                value=make_session_token(user_id, settings.secret_key),
                httponly=True,
                secure=not settings.is_development,
                samesite="lax",
                max_age=settings.session_max_age,
            )

        return response
