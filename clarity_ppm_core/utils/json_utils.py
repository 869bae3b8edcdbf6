import json
from typing import Any, Dict, Union

from ..exceptions import validation_failed


def loads(s: Union[str, bytes, bytearray], **kwargs) -> Any:
    """Standard JSON loads function."""
    return json.loads(s, **kwargs)


def parse_json_parameter(name: str, value: Any) -> Dict[str, Any]:
    """
    Turn a JSON-string parameter into a mapping.

    Mappings are passed through as a copy so hosts that already decoded the
    value are supported.

    Raises:
        ValidationError: If the value is not a JSON object
    """
    if isinstance(value, dict):
        return dict(value)
    if not isinstance(value, (str, bytes, bytearray)):
        raise validation_failed(name, value, "expected a JSON object string")
    try:
        parsed = loads(value)
    except ValueError as e:
        raise validation_failed(name, value, f"invalid JSON ({e})", cause=e)
    if not isinstance(parsed, dict):
        raise validation_failed(name, value, "expected a JSON object")
    return parsed
