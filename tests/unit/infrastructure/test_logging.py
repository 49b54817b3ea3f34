# tests/unit/infrastructure/test_logging.py
"""Unit tests for structured logging setup."""

import pytest
import structlog

from agent_template.infrastructure.observability.logging import (
    _service_info,
    configure_logging,
    get_logger,
)


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.mark.unit
class TestLogging:
    def test_service_info_processor(self):
        """Test service and environment are added without overriding."""
        processor = _service_info("Agent Template", "test")

        event = processor(None, "info", {"event": "hello", "environment": "custom"})

        assert event["service"] == "Agent Template"
        assert event["environment"] == "custom"

    @pytest.mark.parametrize("log_format", ["json", "console"])
    def test_configure_logging(self, test_settings, log_format, capsys):
        """Test both renderers emit entries with bound context."""
        settings = test_settings.model_copy(update={"log_format": log_format, "log_level": 20})
        configure_logging(settings)

        structlog.contextvars.bind_contextvars(request_id="req-1")
        get_logger("tests").info("Agent created", agent_id="a1")

        output = capsys.readouterr().out
        assert "Agent created" in output
        assert "req-1" in output
        assert "a1" in output

    def test_level_filtering(self, test_settings, capsys):
        """Test entries below the configured level are dropped."""
        configure_logging(test_settings)

        get_logger("tests").info("hidden")

        assert "hidden" not in capsys.readouterr().out
