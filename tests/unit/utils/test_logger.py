"""
Unit tests for logger utilities.

Tests ContextAwareLogger formatting, the correlation id filter and
configure_logging / get_logger.
"""

import logging
from unittest.mock import Mock

from clarity_ppm_core.exceptions import clear_correlation_id, set_correlation_id
from clarity_ppm_core.utils.logger import (
    ContextAwareLogger,
    CorrelationIdFilter,
    configure_logging,
    get_logger,
)


class TestContextAwareLogger:
    """Test ContextAwareLogger functionality."""

    def setup_method(self):
        self.mock_logger = Mock(spec=logging.Logger)
        self.context_logger = ContextAwareLogger(self.mock_logger)

    def test_message_without_extras(self):
        self.context_logger.info("Test message")
        self.mock_logger.info.assert_called_once_with("Test message", extra={})

    def test_extras_are_appended_to_message(self):
        """Extras are rendered as key=value pairs and still passed through."""
        extra = {"method": "GET", "url": "https://clarity.example.com/ppm/rest/v1/projects"}
        self.context_logger.debug("Clarity request", extra=extra)

        self.mock_logger.debug.assert_called_once_with(
            "Clarity request | method=GET | url=https://clarity.example.com/ppm/rest/v1/projects",
            extra=extra,
        )

    def test_each_level_uses_matching_method(self):
        self.context_logger.warning("Careful", extra={"item_index": 2})
        self.context_logger.error("Broken")

        self.mock_logger.warning.assert_called_once_with(
            "Careful | item_index=2", extra={"item_index": 2}
        )
        self.mock_logger.error.assert_called_once_with("Broken", extra={})


class TestCorrelationIdFilter:
    """Test CorrelationIdFilter."""

    def _record(self):
        return logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)

    def test_adds_current_correlation_id(self):
        set_correlation_id("batch-123")
        record = self._record()

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "batch-123"

    def test_without_correlation_id(self):
        clear_correlation_id()
        record = self._record()

        assert CorrelationIdFilter().filter(record) is True
        assert not hasattr(record, "correlation_id")


class TestConfigureLogging:
    """Test configure_logging and get_logger."""

    def test_get_logger_falls_back_to_package_logger(self):
        logger = get_logger()
        assert isinstance(logger, ContextAwareLogger)
        assert logger.logger.name == "clarity_ppm_core"

    def test_configure_installs_single_handler(self):
        configure_logging(name="clarity_test_logger", log_level="DEBUG")
        configured = configure_logging(name="clarity_test_logger", log_level="WARNING")

        underlying = logging.getLogger("clarity_test_logger")
        assert len(underlying.handlers) == 1
        assert underlying.level == logging.WARNING
        assert any(isinstance(f, CorrelationIdFilter) for f in underlying.handlers[0].filters)
        assert get_logger() is configured
