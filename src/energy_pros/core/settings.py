"""Application settings and configuration.

This module defines all configuration options for the Energy Pros application.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Energy Pros", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Session signing secret
    secret_key: str = Field(alias="SECRET_KEY")

    # Database configuration
    database_url: str = Field(default="sqlite:///./energy_pros.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    storage_backend: Literal["sql", "memory"] = Field(default="sql", alias="STORAGE_BACKEND")
    auto_create_tables: bool = Field(default=False, alias="AUTO_CREATE_TABLES")

    # Session cookie carrying a signed token
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    session_cookie_name: str = Field(default="energy_pros_session", alias="SESSION_COOKIE_NAME")
    session_max_age_seconds: int = Field(default=60 * 60 * 24, alias="SESSION_MAX_AGE_SECONDS")
    session_cookie_secure: bool = Field(default=False, alias="SESSION_COOKIE_SECURE")

    # Registration
    invite_required: bool = Field(default=True, alias="INVITE_REQUIRED")
    seed_demo_data: bool = Field(default=False, alias="SEED_DEMO_DATA")
    demo_user_password: str = Field(default="password123", alias="DEMO_USER_PASSWORD")
    seed_invite_codes: list[str] = Field(
        default=["WELCOME2024", "ENERGY-PRO", "GRIDCODE-01"],
        alias="SEED_INVITE_CODES",
    )

    # Hashtags and analytics
    common_hashtags: list[str] = Field(
        default=["job", "event", "gridcode", "question", "news"],
        alias="COMMON_HASHTAGS",
    )
    trending_default_limit: int = Field(default=5, alias="TRENDING_DEFAULT_LIMIT")
    profile_view_dedup_seconds: int = Field(default=3600, alias="PROFILE_VIEW_DEDUP_SECONDS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["Content-Type", "Authorization"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()  # type: ignore[call-arg]
