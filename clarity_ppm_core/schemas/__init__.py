"""Pydantic schemas for credentials, requests and batch items."""

from .credential_schemas import REQUIRED_FIELDS_BY_AUTH_TYPE, ClarityCredentials
from .item_schemas import ItemResult, WorkItem
from .request_schemas import HttpRequest, PagedResponse, RequestDescriptor

__all__ = [
    "REQUIRED_FIELDS_BY_AUTH_TYPE",
    "ClarityCredentials",
    "ItemResult",
    "WorkItem",
    "HttpRequest",
    "PagedResponse",
    "RequestDescriptor",
]
