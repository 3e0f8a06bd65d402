"""Application configuration."""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        """Initialize settings from environment variables."""
        # API Settings
        self.api_title: str = os.getenv("API_TITLE", "Attendance Dashboard")
        self.api_version: str = os.getenv("API_VERSION", "0.1.0")
        self.debug: bool = os.getenv("DEBUG", "False").lower() == "true"
        self.environment: str = os.getenv("ENVIRONMENT", "development").lower()
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

        # Server Settings
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT", "8000"))

        # Database Settings
        self.db_host: str = os.getenv("DB_HOST", "localhost")
        self.db_port: int = int(os.getenv("DB_PORT", "5432"))
        self.db_user: str = os.getenv("DB_USER", "postgres")
        self.db_password: str = os.getenv("DB_PASSWORD", "")
        self.db_name: str = os.getenv("DB_NAME", "attendance")

        # Redis Settings
        self.redis_host: str = os.getenv("REDIS_HOST", "localhost")
        self.redis_port: int = int(os.getenv("REDIS_PORT", "6379"))
        self.redis_db: int = int(os.getenv("REDIS_DB", "0"))

        # Session Settings
        self.secret_key: str = os.getenv("SECRET_KEY", "")
        self.session_max_age: int = int(os.getenv("SESSION_MAX_AGE", str(86400 * 365)))
        self.error_notice_ttl: int = int(os.getenv("ERROR_NOTICE_TTL", "3600"))

    @property
    def is_production(self) -> bool:
        """Check whether the application runs in production."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check whether the application runs in development."""
        return self.environment == "development"

    @property
    def db_url(self) -> str:
        """Build async database URL."""
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def redis_url(self) -> str:
        """Build Redis connection URL."""
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
