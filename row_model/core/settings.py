"""Package settings.

Values are read from ``ROW_MODEL_*`` environment variables (or a ``.env``
file) the first time :func:`get_settings` is called.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RowModelSettings(BaseSettings):
    """Conventions and switches used by the metadata engine.

    Fields
    ------
    id_attribute          : Attribute holding the primary key
    created_at_attribute  : Attribute stamped on first save
    updated_at_attribute  : Attribute stamped on every save
    cache_metadata        : Cache table names and column sets per type
    log_level             : structlog level used by configure_logging
    log_json              : Render logs as JSON instead of console output
    """

    model_config = SettingsConfigDict(
        env_prefix="ROW_MODEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    id_attribute: str = "id"
    created_at_attribute: str = "created_at"
    updated_at_attribute: str = "updated_at"
    cache_metadata: bool = True
    log_level: str = Field(default="WARNING", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_json: bool = False


@lru_cache(maxsize=1)
def get_settings() -> RowModelSettings:
    """Return the process-wide settings instance."""
    return RowModelSettings()


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
