"""Application configuration using Pydantic Settings.

This module centralizes runtime configuration. Values are resolved, highest
priority first, from:

1. Explicit keyword arguments (e.g. CLI overrides)
2. Environment variables with the ``APP_`` prefix (e.g. ``APP_DATABASE_URL``)
3. A ``.env`` file, if present
4. ``application.properties`` (e.g. ``database.url``)
5. The defaults below

A ``Settings`` instance is an immutable snapshot. The entry point builds it
once and passes it to the components that need it; values are never re-read.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from app_bootstrap.constants import SCHEMA_RESOURCE
from app_bootstrap.properties import PropertiesSettingsSource

LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "WARNING", "ERROR"}


class Settings(BaseSettings):
    """Runtime application settings.

    Attributes map to environment variables using the ``APP_`` prefix
    (case-insensitive) and to property keys with dots instead of underscores.
    For example, ``database_init_schema`` <- ``APP_DATABASE_INIT_SCHEMA`` or
    ``database.init.schema``.
    """

    # Database connection
    database_url: str = Field(
        default="",
        description="SQLAlchemy database URL",
    )  # fmt: skip
    database_username: str = Field(
        default="",
        description="Database user, applied to the URL when non-empty",
    )  # fmt: skip
    database_password: str = Field(
        default="",
        description="Database password, applied to the URL when non-empty",
    )  # fmt: skip

    # Connection pool
    database_pool_size: int = Field(
        default=10,
        ge=1,
        description="Maximum number of pooled connections",
    )  # fmt: skip
    database_pool_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Seconds to wait for a free pooled connection",
    )  # fmt: skip
    database_connect_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts to reach an unreachable database before giving up",
    )  # fmt: skip

    # Schema bootstrap
    database_init_schema: bool = Field(
        default=False,
        description="Run the schema script when the application is ready",
    )  # fmt: skip
    database_schema_script: str = Field(
        default=SCHEMA_RESOURCE,
        description="Schema script: a file path or a bundled resource name",
    )  # fmt: skip
    database_schema_read_errors: Literal["ignore", "fail"] = Field(
        default="ignore",
        description="What to do when the schema script cannot be read",
    )  # fmt: skip

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Application log level",
    )
    sql_log: bool = Field(
        default=False,
        description="Enable SQL statement logging",
    )  # fmt: skip

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | None) -> str:
        """Normalize and validate log level."""
        if v is None:
            return "INFO"

        v_upper = str(v).upper()
        if v_upper not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {', '.join(sorted(LOG_LEVELS))}")

        return v_upper

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
        frozen=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            PropertiesSettingsSource(settings_cls),
            file_secret_settings,
        )


def load_settings(**overrides: object) -> Settings:
    """Build the settings snapshot, ignoring overrides that are None.

    Args:
        **overrides: Field values taking precedence over every other source
    """
    return Settings(**{key: value for key, value in overrides.items() if value is not None})


__all__ = ["Settings", "load_settings"]
