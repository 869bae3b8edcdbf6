"""HTTP client layer: transport, authentication, request execution and paging."""

from .auth import AuthResolver, SessionTokenManager, basic_auth_value
from .pagination import PaginationWalker
from .request_executor import CredentialProvider, RequestExecutor
from .transport import RequestsTransport, Transport, encode_query

__all__ = [
    "AuthResolver",
    "SessionTokenManager",
    "basic_auth_value",
    "PaginationWalker",
    "CredentialProvider",
    "RequestExecutor",
    "RequestsTransport",
    "Transport",
    "encode_query",
]
