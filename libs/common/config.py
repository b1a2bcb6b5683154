from decimal import Decimal
from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    # Application
    ENVIRONMENT: Literal["local", "development", "production", "test"] = "local"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./harvesthub.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    AUTO_CREATE_TABLES: bool = True

    # Sessions
    SESSION_SECRET: str = "dev-session-secret-change-me"
    SESSION_TTL_MINUTES: int = 60 * 8
    REMEMBER_ME_TTL_DAYS: int = 30

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # Shipping / currency
    INR_EXCHANGE_RATE: Decimal = Decimal("83.50")
    SHIPPING_FALLBACK_FEE: Decimal = Decimal("0.60")

    # Notifications
    NOTIFICATION_TTL_SECONDS: int = 3
    NOTIFICATION_BUFFER_SIZE: int = 50

    # External services
    SMS_GATEWAY_URL: Optional[str] = None
    SMS_GATEWAY_TOKEN: Optional[str] = None
    AI_DEFAULT_MODEL: str = "gemini/gemini-2.5-flash"
    AI_TIMEOUT_SECONDS: float = 30.0

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str]) -> str:
        if isinstance(v, str):
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+psycopg://", 1)
            if v.startswith("sqlite://") and not v.startswith("sqlite+"):
                return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
