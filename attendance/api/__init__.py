"""API endpoints package."""

from attendance.api.router import create_api_router, create_dashboard_router

__all__ = ["create_api_router", "create_dashboard_router"]
