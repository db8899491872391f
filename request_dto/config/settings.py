from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import LoggingSettings
from .resolver import ResolverSettings


__all__ = ["Settings", "get_settings"]


class Settings(BaseSettings):
    """
    Configuration settings for request DTO resolution.

    Settings are loaded from environment variables prefixed with
    ``REQUEST_DTO_`` and from a ``.env`` file. Nested sections use ``__``,
    e.g. ``REQUEST_DTO_LOGGING__LEVEL=DEBUG``.
    """

    model_config = SettingsConfigDict(
        env_prefix="REQUEST_DTO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    resolver: ResolverSettings = Field(
        default_factory=ResolverSettings,
        description="Resolver behaviour configuration",
    )


@lru_cache
def get_settings() -> Settings:
    """Return process-wide settings, loaded once."""
    return Settings()
