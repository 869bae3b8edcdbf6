"""
Field helpers shared by operation handlers.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Sequence, Union

from ..constants import ResponseKey
from ..exceptions import missing_required_fields, validation_failed


def is_blank(value: Any) -> bool:
    """True for values the backend treats as not supplied."""
    return value is None or value == ""


def validate_required_fields(
    data: Mapping[str, Any], required_fields: Sequence[str], operation: str
) -> None:
    """
    Validate required fields for a create/update operation.

    Args:
        data: Values about to be sent
        required_fields: Field names that must be present and non-empty
        operation: Operation name used in the error message

    Raises:
        ValidationError: Naming every missing field, in the order given
    """
    missing = [field for field in required_fields if is_blank(data.get(field))]
    if missing:
        raise missing_required_fields(operation, missing)


def format_clarity_date(value: Union[str, datetime]) -> str:
    """
    Normalize a date to the ISO-8601 UTC form Clarity accepts.

    Naive values are taken as UTC. Output has millisecond precision,
    e.g. ``2024-01-15T00:00:00.000Z``.

    Raises:
        ValidationError: If the value cannot be parsed as a date
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise validation_failed("date", value, f"Invalid date format: {value}", cause=e)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime("%Y-%m-%dT%H:%M:%S.") + f"{parsed.microsecond // 1000:03d}Z"


def simplify_response(
    response: Mapping[str, Any],
) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
    """
    Strip Clarity envelope metadata from a response.

    Envelopes collapse to their result list. Single records lose every
    underscore-prefixed key except ``_internalId``.
    """
    results = response.get(ResponseKey.RESULTS)
    if results is not None:
        return list(results)

    return {
        key: value
        for key, value in response.items()
        if not key.startswith("_") or key == ResponseKey.INTERNAL_ID
    }
