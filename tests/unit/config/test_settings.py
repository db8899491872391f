"""Tests for settings loading and logging setup."""

from collections.abc import Iterator

import pytest
import structlog
from structlog.testing import capture_logs

from request_dto.config import LoggingSettings, Settings
from request_dto.core.logging import get_logger, setup_logging


@pytest.fixture
def restore_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


class TestSettings:
    """Test environment driven configuration."""

    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.logging.level == "INFO"
        assert settings.logging.format == "console"
        assert settings.resolver.reject_missing_required_params is False
        assert settings.resolver.cache_plans is True

    def test_nested_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REQUEST_DTO_LOGGING__LEVEL", "debug")
        monkeypatch.setenv("REQUEST_DTO_RESOLVER__REJECT_MISSING_REQUIRED_PARAMS", "true")

        settings = Settings()

        assert settings.logging.level == "DEBUG"
        assert settings.resolver.reject_missing_required_params is True

    def test_invalid_log_level_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid log level"):
            LoggingSettings(level="LOUD")

    def test_invalid_log_format_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid log format"):
            LoggingSettings(format="xml")


class TestSetupLogging:
    """Test structlog configuration."""

    @pytest.mark.usefixtures("restore_structlog")
    def test_json_format_configures_json_renderer(self) -> None:
        setup_logging(LoggingSettings(level="WARNING", format="json"))

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    @pytest.mark.usefixtures("restore_structlog")
    def test_level_filters_lower_events(self) -> None:
        setup_logging(LoggingSettings(level="WARNING"))
        logger = get_logger("test")

        with capture_logs() as logs:
            logger.info("dropped")
            logger.warning("kept")

        assert [log["event"] for log in logs] == ["kept"]
