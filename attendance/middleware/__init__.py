"""Middleware components for the application."""

from attendance.middleware.session import AnonymousSessionMiddleware

__all__ = ["AnonymousSessionMiddleware"]
