"""structlog configuration for request DTO resolution."""

import logging
from typing import Any

import structlog

from request_dto.config.logging import LoggingSettings


def setup_logging(settings: LoggingSettings | None = None) -> None:
    """Configure structlog for the application.

    Args:
        settings: Logging settings; defaults are used when omitted
    """
    settings = settings or LoggingSettings()
    level = getattr(logging, settings.level)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
    ]
    if settings.show_time:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors.append(structlog.processors.StackInfoRenderer())

    if settings.format == "json":
        processors.extend(
            [
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ]
        )
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger bound to the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        structlog bound logger
    """
    return structlog.get_logger(name)
