"""Clarity PPM REST client adapter."""

from .adapter import ClarityPpmAdapter
from .client import AuthResolver, PaginationWalker, RequestExecutor, RequestsTransport, Transport
from .config import AppConfig, get_config, reset_config, set_config
from .constants import AuthType, HttpMethod, OperationType, ResourceType, TimesheetStatus
from .dispatch import OPERATION_PLANS, OperationDispatcher
from .exceptions import (
    BackendRequestError,
    ClarityPpmError,
    ConfigError,
    NotAuthenticatedError,
    TransportError,
    ValidationError,
)
from .schemas import ClarityCredentials, ItemResult, WorkItem

__version__ = "0.1.0"

__all__ = [
    "ClarityPpmAdapter",
    "AuthResolver",
    "PaginationWalker",
    "RequestExecutor",
    "RequestsTransport",
    "Transport",
    "AppConfig",
    "get_config",
    "reset_config",
    "set_config",
    "AuthType",
    "HttpMethod",
    "OperationType",
    "ResourceType",
    "TimesheetStatus",
    "OPERATION_PLANS",
    "OperationDispatcher",
    "BackendRequestError",
    "ClarityPpmError",
    "ConfigError",
    "NotAuthenticatedError",
    "TransportError",
    "ValidationError",
    "ClarityCredentials",
    "ItemResult",
    "WorkItem",
]
