"""Unit tests for fruitstand.infra.logging."""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest
import structlog

from fruitstand.infra.logging import (
    REDACTED_VALUE,
    LoggingSettings,
    SensitiveDataProcessor,
    configure_logging,
    get_logger,
    get_logging_settings,
)


class TestLoggingSettings:
    @pytest.mark.unit
    def test_default_values(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            settings = LoggingSettings()
            assert settings.log_level == "INFO"
            assert settings.environment == "development"
            assert settings.use_json_logs is False

    @pytest.mark.unit
    def test_use_json_logs_production(self) -> None:
        assert LoggingSettings(environment="production").use_json_logs is True

    @pytest.mark.unit
    def test_normalizes_and_converts_level(self) -> None:
        settings = LoggingSettings(log_level="debug")
        assert settings.log_level == "DEBUG"
        assert settings.log_level_int == logging.DEBUG

    @pytest.mark.unit
    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValueError, match="log_level must be one of"):
            LoggingSettings(log_level="LOUD")

    @pytest.mark.unit
    def test_from_env_vars(self) -> None:
        env = {"LOG_LEVEL": "WARNING", "ENVIRONMENT": "production"}
        with patch.dict("os.environ", env, clear=True):
            settings = LoggingSettings()
            assert settings.log_level == "WARNING"
            assert settings.environment == "production"


class TestSensitiveDataProcessor:
    @pytest.mark.unit
    def test_redacts_exact_and_substring_matches(self) -> None:
        event_dict: dict[str, object] = {
            "event": "connect",
            "password": "hunter2",
            "DATABASE_URL": "postgresql://u:p@h/db",
            "refresh_token": "abc",
        }
        result = SensitiveDataProcessor()(None, "info", event_dict)
        assert result["password"] == REDACTED_VALUE
        assert result["DATABASE_URL"] == REDACTED_VALUE
        assert result["refresh_token"] == REDACTED_VALUE

    @pytest.mark.unit
    def test_preserves_non_sensitive(self) -> None:
        event_dict: dict[str, object] = {"event": "fruit_created", "fruit_id": 3}
        result = SensitiveDataProcessor()(None, "info", event_dict)
        assert result["fruit_id"] == 3


class TestConfigureLogging:
    @pytest.mark.unit
    def test_configure_with_default_settings(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            get_logging_settings.cache_clear()
            configure_logging()
        assert structlog.is_configured()
        get_logging_settings.cache_clear()

    @pytest.mark.unit
    def test_production_uses_json_renderer(self) -> None:
        configure_logging(LoggingSettings(log_level="DEBUG", environment="production"))
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)


class TestGetLogger:
    @pytest.mark.unit
    def test_bound_logger_logs(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingSettings(log_level="DEBUG", environment="production"))
        get_logger("fruitstand.test").info("fruit_created", fruit_id=1)
        out = capsys.readouterr().out
        assert '"event": "fruit_created"' in out
        assert '"logger": "fruitstand.test"' in out
