"""
Consolidated exception system with error codes, context, and correlation support.

Every error raised by the adapter derives from BaseError so callers can catch
ClarityPpmError at the item boundary and still get a code, a status and the
original cause.
"""

import threading
import traceback
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Sequence

# Thread-local storage for correlation ID
_thread_local = threading.local()


class ErrorCode(str, Enum):
    """Standardized error codes."""

    # System errors (1xxx)
    INTERNAL_ERROR = "1000"
    CONNECTION_ERROR = "1002"
    CONFIGURATION_ERROR = "1003"

    # Validation errors (2xxx)
    VALIDATION_FAILED = "2000"
    INVALID_FORMAT = "2001"
    MISSING_REQUIRED = "2002"

    # Authentication errors (3xxx)
    NOT_AUTHENTICATED = "3006"

    # External service errors (5xxx)
    EXTERNAL_API_ERROR = "5002"


class BaseError(Exception):
    """Base exception with context, error codes, logging, and error chaining."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        cause: Optional[Exception] = None,
        **context: Any,
    ):
        """
        Initialize base error with rich context.

        Args:
            message: Human-readable error message
            error_code: Standardized error code from ErrorCode enum
            status_code: HTTP-style status code classifying the error
            cause: Original exception that caused this error
            **context: Additional context information
        """
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.error_id = str(uuid.uuid4())
        self.context = context

        correlation_id = get_correlation_id()
        if correlation_id:
            self.context["correlation_id"] = correlation_id

        self.context["error_id"] = self.error_id

        if cause:
            self.context["cause"] = {
                "type": type(cause).__name__,
                "message": str(cause),
                "traceback": traceback.format_exception(type(cause), cause, cause.__traceback__),
            }

        self._log_error()

        super().__init__(message)

    def _log_error(self) -> None:
        """Log error with appropriate level based on status code."""
        # Lazy import: the logger reads config, which must not import this module's users
        from .utils.logger import get_logger

        logger = get_logger()

        log_data = {
            "error_id": self.error_id,
            "error_code": self.error_code.value,
            "status_code": self.status_code,
            "error_message": self.message,
            "timestamp": self.timestamp,
            "context": {k: v for k, v in self.context.items() if k not in ["cause", "traceback"]},
        }

        if "correlation_id" in self.context:
            log_data["correlation_id"] = self.context["correlation_id"]

        if self.status_code >= 500:
            logger.error(f"Error {self.error_code.value}: {self.message}", extra=log_data)
        elif self.status_code >= 400:
            logger.warning(f"Client error {self.error_code.value}: {self.message}", extra=log_data)
        else:
            logger.info(f"Error {self.error_code.value}: {self.message}", extra=log_data)


# Adapter-level base so callers can catch everything raised by this package
ClarityPpmError = BaseError


class ConfigError(BaseError):
    """A credential or configuration value needed for the call is missing."""

    def __init__(
        self,
        message: str,
        missing_fields: Optional[Sequence[str]] = None,
        cause: Optional[Exception] = None,
        **context: Any,
    ):
        if missing_fields:
            context["missing_fields"] = list(missing_fields)
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, 500, cause, **context)


class NotAuthenticatedError(BaseError):
    """A session token was requested before a successful login."""

    def __init__(self, message: str = "Not authenticated. Call login() first.", **context: Any):
        super().__init__(message, ErrorCode.NOT_AUTHENTICATED, 401, **context)


class ValidationError(BaseError):
    """Validation errors raised locally before any request is sent."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_FAILED,
        cause: Optional[Exception] = None,
        **context: Any,
    ):
        """Initialize validation error with field context."""
        if field:
            context["field"] = field
        super().__init__(message, error_code, 400, cause, **context)


class TransportError(BaseError):
    """
    Raised by a transport when the HTTP exchange fails.

    Carries the backend status code (if a response arrived) and the decoded
    response payload so the error normalizer can inspect the backend's shape.
    """

    def __init__(
        self,
        message: str,
        http_status: Optional[int] = None,
        payload: Any = None,
        cause: Optional[Exception] = None,
        **context: Any,
    ):
        self.http_status = http_status
        self.payload = payload
        if http_status is not None:
            context["http_status"] = http_status
        super().__init__(message, ErrorCode.CONNECTION_ERROR, 502, cause, **context)


class BackendRequestError(BaseError):
    """A call to the Clarity PPM backend failed. Never retried internally."""

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        method: Optional[str] = None,
        url: Optional[str] = None,
        **context: Any,
    ):
        if method:
            context["method"] = method
        if url:
            context["url"] = url
        http_status = getattr(cause, "http_status", None)
        if http_status is not None:
            context["http_status"] = http_status
        self.http_status = http_status
        super().__init__(message, ErrorCode.EXTERNAL_API_ERROR, 502, cause, **context)


def missing_required_fields(operation: str, missing: Sequence[str]) -> ValidationError:
    """
    Factory for required-field validation errors.

    Args:
        operation: Operation being validated (e.g., 'create')
        missing: Missing field names, in the order they were required

    Returns:
        Configured ValidationError instance
    """
    return ValidationError(
        f"Missing required fields for {operation} operation: {', '.join(missing)}",
        error_code=ErrorCode.MISSING_REQUIRED,
        operation=operation,
        missing_fields=list(missing),
    )


def validation_failed(
    field: str, value: Any, reason: str, cause: Optional[Exception] = None
) -> ValidationError:
    """
    Factory for validation errors.

    Args:
        field: Field that failed validation
        value: The invalid value
        reason: Why validation failed
        cause: Original exception if any

    Returns:
        Configured ValidationError instance
    """
    return ValidationError(
        f"Validation failed for {field}: {reason}",
        field=field,
        error_code=ErrorCode.INVALID_FORMAT,
        cause=cause,
        value=str(value),
        reason=reason,
    )


# Correlation ID management
def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current thread."""
    _thread_local.correlation_id = correlation_id


def get_correlation_id() -> Optional[str]:
    """Get the current thread's correlation ID."""
    return getattr(_thread_local, "correlation_id", None)


def clear_correlation_id() -> None:
    """Clear the current thread's correlation ID."""
    if hasattr(_thread_local, "correlation_id"):
        delattr(_thread_local, "correlation_id")
