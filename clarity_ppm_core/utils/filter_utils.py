"""
Filter expression building for Clarity PPM list endpoints.

Clarity list endpoints take a `filter` query parameter in its own small
expression language, e.g. ``(isActive = true) and (status = 'APPROVED')``.
"""

from typing import Any, List, Mapping, Optional

FILTER_CONNECTIVE = " and "


def _render_clause(field: str, value: Any) -> Optional[str]:
    # bool is checked before numbers because bool is an int subclass
    if isinstance(value, bool):
        return f"({field} = {'true' if value else 'false'})"
    if isinstance(value, str):
        # Embedded quotes are not escaped
        return f"({field} = '{value}')"
    if isinstance(value, float) and value.is_integer():
        return f"({field} = {int(value)})"
    if isinstance(value, (int, float)):
        return f"({field} = {value})"
    return None


def build_filter_expression(filters: Mapping[str, Any]) -> str:
    """
    Build a filter expression string from structured filter values.

    None and empty-string values are dropped, as are values that are not a
    string, boolean or number. Clause order follows the mapping's order.

    Args:
        filters: Field name to scalar value

    Returns:
        The combined expression, or "" when no clause remains
    """
    conditions: List[str] = []

    for key, value in filters.items():
        if value is None or value == "":
            continue
        clause = _render_clause(key, value)
        if clause:
            conditions.append(clause)

    return FILTER_CONNECTIVE.join(conditions)


def combine_filter_expressions(*expressions: Optional[str]) -> str:
    """Join the non-empty expressions with the filter connective."""
    return FILTER_CONNECTIVE.join(expr for expr in expressions if expr)
