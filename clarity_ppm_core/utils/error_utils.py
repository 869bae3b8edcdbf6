"""
Error message extraction for Clarity PPM responses.

The backend, the transport and plain Python exceptions all describe failures
differently. extract_error_message() reduces any of them to one string using a
fixed priority cascade: the first rule that matches wins.
"""

from collections.abc import Mapping
from typing import Any, Optional

from ..constants import UNKNOWN_ERROR_MESSAGE, ResponseKey


def _message_from_mapping(error: Mapping) -> Optional[str]:
    backend_errors = error.get(ResponseKey.ERRORS)
    if isinstance(backend_errors, list) and backend_errors:
        first = backend_errors[0]
        if isinstance(first, Mapping):
            message = first.get("errorMessage") or first.get("errorCode")
            if message:
                return str(message)

    if error.get("message"):
        return str(error["message"])

    nested = error.get("error")
    if nested:
        if isinstance(nested, str):
            return nested
        if isinstance(nested, Mapping) and nested.get("message"):
            return str(nested["message"])

    return None


def extract_error_message(error: Any) -> str:
    """
    Extract a meaningful error message from a Clarity error shape.

    Args:
        error: A decoded error body, a TransportError carrying one, or any exception

    Returns:
        The first message found, or "An unknown error occurred"
    """
    if isinstance(error, Mapping):
        return _message_from_mapping(error) or UNKNOWN_ERROR_MESSAGE

    if isinstance(error, BaseException):
        payload = getattr(error, "payload", None)
        if isinstance(payload, Mapping):
            message = _message_from_mapping(payload)
            if message:
                return message
        message = getattr(error, "message", None) or str(error)
        return message or UNKNOWN_ERROR_MESSAGE

    return UNKNOWN_ERROR_MESSAGE
