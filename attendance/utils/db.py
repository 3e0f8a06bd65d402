"""Database connection manager with proper lifecycle management."""

import asyncio
import logging
from pathlib import Path
from typing import AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from attendance.config import get_settings
from attendance.exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()


def get_db_url() -> str:
    """Build database URL from settings."""
    return get_settings().db_url


class DatabaseManager:
    """Database manager handling engine and session factory lifecycle.

    The engine is created lazily on first use and disposed on shutdown.
    """

    def __init__(self) -> None:
        """Initialize manager without an engine."""
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    def init_engine(self) -> AsyncEngine:
        """Initialize and return the async engine.

        Returns:
            Engine instance, created once and reused.
        """
        if self._engine is not None:
            return self._engine

        settings = get_settings()
        self._engine = create_async_engine(
            settings.db_url,
            echo=settings.debug,
            pool_pre_ping=True,  # Verify connections before using
        )
        self._session_factory = async_sessionmaker(
            self._engine, class_=AsyncSession, expire_on_commit=False
        )

        logger.info(
            "Database engine initialized",
            extra={"host": settings.db_host, "database": settings.db_name},
        )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get session factory, initializing the engine if needed."""
        if self._session_factory is None:
            self.init_engine()
        return self._session_factory

    async def verify_connection(self) -> bool:
        """Verify database connection is working.

        Returns:
            True if connection is successful.

        Raises:
            DatabaseConnectionError: If connection fails.
        """
        try:
            engine = self.init_engine()
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (DBAPIError, SQLAlchemyError, OSError) as e:
            logger.error(f"Database connection verification failed: {e}")
            raise DatabaseConnectionError(f"Failed to connect to database: {e}") from e

    async def run_migrations(self) -> None:
        """Run database migrations using Alembic."""
        from alembic import command
        from alembic.config import Config

        project_root = Path(__file__).resolve().parents[2]
        alembic_ini_path = project_root / "alembic.ini"

        if not alembic_ini_path.exists():
            raise FileNotFoundError(
                f"Alembic configuration file not found at {alembic_ini_path}"
            )

        alembic_cfg = Config(str(alembic_ini_path))
        alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
        alembic_cfg.set_main_option("sqlalchemy.url", get_db_url())
        alembic_cfg.attributes["configure_logger"] = False

        # Alembic is synchronous; env.py runs its own event loop
        await asyncio.to_thread(command.upgrade, alembic_cfg, "head")

    async def close(self) -> None:
        """Dispose engine and clean up."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
            self._engine = None
            self._session_factory = None


# Global database manager instance
db_manager = DatabaseManager()


async def init_db() -> None:
    """Run migrations and verify the database connection.

    Raises:
        DatabaseConnectionError: If the database cannot be reached.
    """
    logger.info("Initializing database...")
    await db_manager.run_migrations()
    await db_manager.verify_connection()
    logger.info("Database initialized successfully")


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Yield a database session for a single request."""
    async with db_manager.session_factory() as session:
        yield session


async def close_db() -> None:
    """Close database connections."""
    await db_manager.close()
