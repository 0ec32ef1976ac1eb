from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    project_name: str = "Site Check-in API"
    project_version: str = "1.0.0"
    environment: str = Field(
        default="development",
        description="Deployment environment name",
        validation_alias=AliasChoices("ENV", "ENVIRONMENT", "NODE_ENV"),
    )
    log_level: str = Field(default="INFO", description="Logging level")

    # Database
    database_url: str = Field(
        default="postgresql+psycopg2://postgres@localhost:5432/checkin",
        description="SQLAlchemy database URL",
    )
    auto_create_tables: bool = Field(
        default=True,
        description="Run metadata.create_all on startup (idempotent)",
    )
    db_pool_size: int = Field(default=5, description="Base DB connection pool size")
    db_max_overflow: int = Field(default=10, description="Additional DB connections beyond pool size")
    db_pool_timeout: int = Field(default=30, description="Seconds to wait for a DB connection")
    db_pool_recycle: int = Field(default=1800, description="Recycle DB connections after N seconds")

    # Admin credential
    admin_user: str = Field(default="admin", description="Shared administrator username")
    admin_pass: str = Field(
        default="changeme",
        description="Shared administrator password, hashed once at startup",
        validation_alias=AliasChoices("ADMIN_PASS", "ADMIN_PASSWORD"),
    )

    # Admin session cookie
    session_minutes: int = Field(default=120, description="Rolling admin session lifetime in minutes")
    session_cookie_name: str = Field(default="checkin_sid", description="Admin session cookie name")

    # Location taxonomy override (JSON file with companies + areas)
    taxonomy_file: str | None = Field(default=None, description="Path to a taxonomy JSON file")

    @field_validator("database_url")
    @classmethod
    def normalize_database_url(cls, value: str) -> str:
        # Hosted Postgres providers hand out postgres:// URLs
        if value.startswith("postgres://"):
            return "postgresql+psycopg2://" + value[len("postgres://"):]
        return value

    @field_validator("session_minutes")
    @classmethod
    def clamp_session_minutes(cls, value: int) -> int:
        if value <= 0:
            return 120
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
