"""Configuration module for request DTO resolution."""

from .logging import LoggingSettings
from .resolver import ResolverSettings
from .settings import Settings, get_settings


__all__ = ["LoggingSettings", "ResolverSettings", "Settings", "get_settings"]
