from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Settings of the SaaS Platform API process: OpenAPI metadata, CORS, startup
    migration and seeding, logging and token issuance.

    Connection and retry settings live in saas_platform.db.config.Settings.
    Every field is read from the environment or a local .env file.
    """

    # FastAPI metadata
    APP_NAME: str = Field(default="SaaS Platform API")
    APP_DESCRIPTION: str = Field(
        default=(
            "Back-office API for a multi-tenant SaaS platform. "
            "Manages tenants, customers, users and user-role assignments."
        )
    )
    APP_VERSION: str = Field(default="1.0.0")

    # CORS
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Comma-separated list or JSON array of allowed origins. Default: *",
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True)
    CORS_ALLOW_METHODS: List[str] = Field(default_factory=lambda: ["*"])
    CORS_ALLOW_HEADERS: List[str] = Field(default_factory=lambda: ["*"])

    # Startup behavior
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(
        default=True,
        description="Upgrade the schema to the latest Alembic revision when the app starts.",
    )
    AUTO_SEED: bool = Field(
        default=False,
        description="Create the demo tenant and its admin user after migrations.",
    )
    SEED_TENANT_CODE: str = Field(default="DEMO", description="Code of the demo tenant")
    SEED_ADMIN_USERNAME: str = Field(default="admin")
    SEED_ADMIN_EMAIL: str = Field(default="admin@demo.example.com")
    SEED_ADMIN_PASSWORD: str = Field(default="ChangeMe123!", min_length=8, max_length=72)

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Root log level name (DEBUG, INFO, WARNING, ...)")

    # Auth
    JWT_SECRET_KEY: str = Field(default="change-me-in-production")
    JWT_ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=30, ge=1)
    REFRESH_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 24 * 7, ge=1)

    # Environment label
    ENVIRONMENT: Optional[str] = Field(
        default=None, description="Environment label (dev/test/prod)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("CORS_ORIGINS", "CORS_ALLOW_METHODS", "CORS_ALLOW_HEADERS", mode="before")
    @classmethod
    def _parse_cors_list(cls, v):
        """
        Accept a JSON array or a comma-separated string; empty means '*'.
        """
        if v is None:
            return ["*"]
        if isinstance(v, str):
            parts = [p.strip() for p in v.split(",") if p.strip()]
            return parts or ["*"]
        if isinstance(v, list):
            return v or ["*"]
        return ["*"]

    @field_validator("LOG_LEVEL")
    @classmethod
    def _check_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


# PUBLIC_INTERFACE
def get_app_settings() -> AppSettings:
    """Return a new AppSettings instance populated from environment variables."""
    return AppSettings()
