"""
Logging for the Clarity PPM core.

Uses ContextAwareLogger for console logs, with extras rendered as
pipe-delimited key=value pairs after the message so they survive hosts that
replace formatters.
"""

import logging
import sys
from typing import Optional, Union

from ..config import get_config

_adapter_logger = None


class ContextAwareLogger:
    """
    Logger wrapper that formats extra attributes in message while preserving them.

    This ensures extras appear in console output even when the host
    overrides the formatters.
    """

    def __init__(self, logger):
        """Initialize with an existing logger."""
        self.logger = logger

    def _log_with_formatted_extra(self, level, msg, **kwargs):
        """
        Log with extra data formatted into the message.

        Args:
            level: Logging level method to use
            msg: Log message
            **kwargs: Additional arguments including 'extra'
        """
        extra = kwargs.pop("extra", {})

        if extra:
            extra_str = " | ".join([f"{k}={v}" for k, v in extra.items()])
            full_msg = f"{msg} | {extra_str}"
        else:
            full_msg = msg

        log_method = getattr(self.logger, level)
        log_method(full_msg, extra=extra)

    def info(self, msg, **kwargs):
        """Log at INFO level with formatted extra."""
        self._log_with_formatted_extra("info", msg, **kwargs)

    def error(self, msg, **kwargs):
        """Log at ERROR level with formatted extra."""
        self._log_with_formatted_extra("error", msg, **kwargs)

    def warning(self, msg, **kwargs):
        """Log at WARNING level with formatted extra."""
        self._log_with_formatted_extra("warning", msg, **kwargs)

    def debug(self, msg, **kwargs):
        """Log at DEBUG level with formatted extra."""
        self._log_with_formatted_extra("debug", msg, **kwargs)


class CorrelationIdFilter(logging.Filter):
    """
    Logging filter that adds the current batch correlation id to log records.
    """

    def filter(self, record):
        """
        Add correlation_id to the log record if one is set for this thread.

        Args:
            record: LogRecord to modify

        Returns:
            True to include the record in the log output
        """
        # Lazy import to avoid circular dependency
        from ..exceptions import get_correlation_id

        correlation_id = get_correlation_id()
        if correlation_id and not hasattr(record, "correlation_id"):
            record.correlation_id = correlation_id

        return True


def _resolve_level(log_level: Optional[Union[int, str]]) -> int:
    if log_level is None:
        log_level = get_config().logging.level
    if isinstance(log_level, str):
        return getattr(logging, log_level.upper(), logging.INFO)
    return log_level


def configure_logging(
    name: str = "clarity_ppm_core",
    log_level: Optional[Union[int, str]] = None,
) -> ContextAwareLogger:
    """
    Configure console logging for the adapter.

    Args:
        name: Logger name
        log_level: Logging level (default: from config.logging.level)

    Returns:
        The configured logger wrapped with ContextAwareLogger
    """
    global _adapter_logger

    level = _resolve_level(log_level)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(get_config().logging.format))
    console_handler.addFilter(CorrelationIdFilter())
    logger.addHandler(console_handler)

    wrapped_logger = ContextAwareLogger(logger)
    wrapped_logger.debug("Adapter logger configured", extra={"logger_name": name})

    _adapter_logger = wrapped_logger
    return wrapped_logger


def get_logger(
    log_level: Optional[Union[int, str]] = None,
) -> ContextAwareLogger:
    """
    Get the adapter logger.

    Falls back to a wrapped package logger when configure_logging() has not
    been called, leaving handler setup to the host.

    Args:
        log_level: Optional log level to set on the fallback logger

    Returns:
        Logger instance
    """
    if _adapter_logger is not None:
        return _adapter_logger

    logger = logging.getLogger("clarity_ppm_core")
    if log_level is not None:
        logger.setLevel(_resolve_level(log_level))

    return ContextAwareLogger(logger)


def reset_logging() -> None:
    """Forget the configured logger so get_logger() falls back again."""
    global _adapter_logger
    _adapter_logger = None
