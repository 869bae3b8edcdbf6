"""Utility modules for the Clarity PPM core."""

from .error_utils import extract_error_message
from .field_utils import (
    format_clarity_date,
    is_blank,
    simplify_response,
    validate_required_fields,
)
from .filter_utils import build_filter_expression, combine_filter_expressions
from .json_utils import loads, parse_json_parameter

# Logging utilities
from .logger import (
    ContextAwareLogger,
    CorrelationIdFilter,
    configure_logging,
    get_logger,
)

__all__ = [
    "extract_error_message",
    "format_clarity_date",
    "is_blank",
    "simplify_response",
    "validate_required_fields",
    "build_filter_expression",
    "combine_filter_expressions",
    "loads",
    "parse_json_parameter",
    "ContextAwareLogger",
    "CorrelationIdFilter",
    "configure_logging",
    "get_logger",
]
