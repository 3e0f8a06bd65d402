"""FastAPI application entry point."""

from attendance.application import create_app
from attendance.config import get_settings
from attendance.utils.logging import setup_logging

# Setup logging before creating app
setup_logging()

# Create application instance
app = create_app()


def run() -> None:
    """Serve the dashboard with uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "attendance.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
