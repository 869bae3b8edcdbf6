"""
Query assembly for get and list operations.
"""

from typing import Any, Dict, Mapping, Sequence

from ..utils.filter_utils import build_filter_expression
from .operation_plan import EXPAND, FIELDS, LINKS, SORT, FilterKey

RAW_FILTER_KEY = "filter"


def build_options_query(options: Mapping[str, Any], allowed: Sequence[str]) -> Dict[str, Any]:
    """
    Translate the ``options`` bag into query parameters.

    Only options listed in ``allowed`` are used; empty values are skipped.

    Args:
        options: Caller options (fields, expand, links, sort)
        allowed: Option names the operation accepts

    Returns:
        Query parameters, e.g. ``{"fields": "code,name", "expand": "(tasks)"}``
    """
    query: Dict[str, Any] = {}

    if FIELDS in allowed and options.get(FIELDS):
        query[FIELDS] = options[FIELDS]
    if EXPAND in allowed and options.get(EXPAND):
        query[EXPAND] = f"({options[EXPAND]})"
    if LINKS in allowed and options.get(LINKS):
        query[LINKS] = True
    if SORT in allowed and options.get(SORT):
        query[SORT] = options[SORT]

    return query


def select_filter_values(
    filters: Mapping[str, Any], filter_keys: Sequence[FilterKey]
) -> Dict[str, Any]:
    """Pick the structured filter values an operation accepts, in key order."""
    selected: Dict[str, Any] = {}
    for key in filter_keys:
        value = filters.get(key.name)
        if key.keep_falsy:
            if value is not None:
                selected[key.name] = value
        elif value:
            selected[key.name] = value
    return selected


def build_list_filter(filters: Mapping[str, Any], filter_keys: Sequence[FilterKey]) -> str:
    """
    Filter expression for a list call.

    A raw ``filter`` expression supplied by the caller replaces the
    structured keys entirely.
    """
    raw = filters.get(RAW_FILTER_KEY)
    if raw:
        return raw
    return build_filter_expression(select_filter_values(filters, filter_keys))
