"""
Single-request execution against the Clarity PPM REST API.

Every call made by the adapter goes through RequestExecutor.execute(): it
resolves credentials, attaches authentication headers, leaves empty bodies
and queries off the call, and turns any transport failure into a
BackendRequestError with a normalized message. Nothing is retried here.
"""

from typing import Any, Callable, Dict, Optional, Union

from ..constants import ApiPath, Headers, HttpMethod, LogContextKey
from ..exceptions import BackendRequestError, ClarityPpmError, TransportError
from ..schemas.credential_schemas import ClarityCredentials
from ..schemas.request_schemas import HttpRequest, RequestDescriptor
from ..utils.error_utils import extract_error_message
from ..utils.logger import get_logger
from .auth import AuthResolver
from .transport import Transport

CredentialProvider = Callable[[], ClarityCredentials]


class RequestExecutor:
    """Executes one HTTP request with authentication and error normalization."""

    def __init__(
        self,
        credential_provider: CredentialProvider,
        transport: Transport,
        auth_resolver: Optional[AuthResolver] = None,
    ):
        """
        Args:
            credential_provider: Returns the credentials for this connection
            transport: Sends resolved requests
            auth_resolver: Optional pre-built resolver (shares a session token)
        """
        self.credential_provider = credential_provider
        self.transport = transport
        self._auth_resolver = auth_resolver
        self.logger = get_logger()

    @property
    def auth(self) -> AuthResolver:
        """The auth resolver, built from the provider's credentials on first use."""
        if self._auth_resolver is None:
            self._auth_resolver = AuthResolver(self.credential_provider(), self.transport)
        return self._auth_resolver

    def build_request(self, descriptor: RequestDescriptor, uri: Optional[str] = None) -> HttpRequest:
        """Resolve a descriptor into a transport request with headers and absolute URL."""
        credentials = self.auth.credentials
        headers: Dict[str, str] = {Headers.CONTENT_TYPE: Headers.JSON}
        headers.update(self.auth.resolve_headers())

        return HttpRequest(
            method=descriptor.method,
            url=uri or f"{credentials.host}{ApiPath.BASE}{descriptor.path}",
            headers=headers,
            body=descriptor.body_or_none(),
            query=descriptor.query_or_none(),
        )

    def execute(
        self,
        method: Union[HttpMethod, str],
        path: str,
        body: Optional[Dict[str, Any]] = None,
        query: Optional[Dict[str, Any]] = None,
        uri: Optional[str] = None,
    ) -> Any:
        """
        Make an authenticated request to the Clarity PPM REST API.

        Args:
            method: HTTP method
            path: Path below /ppm/rest/v1
            body: JSON body (omitted when empty)
            query: Query parameters (omitted when empty)
            uri: Absolute URL overriding host + path

        Returns:
            The decoded response body, unchanged

        Raises:
            BackendRequestError: If the transport or backend reports a failure
            ConfigError: If the credentials are incomplete
            NotAuthenticatedError: For token auth outside a session
        """
        descriptor = RequestDescriptor(
            method=HttpMethod(method), path=path, body=body or {}, query=query or {}
        )
        request = self.build_request(descriptor, uri=uri)

        self.logger.debug(
            f"Clarity request {request.method.value} {request.url}",
            extra={
                LogContextKey.METHOD.value: request.method.value,
                LogContextKey.URL.value: request.url,
            },
        )

        try:
            return self.transport.send(request)
        except TransportError as e:
            raise self._backend_error(request, e)
        except ClarityPpmError:
            raise
        except Exception as e:
            # Host-supplied transports may raise their own exception types
            raise self._backend_error(request, e)

    @staticmethod
    def _backend_error(request: HttpRequest, cause: Exception) -> BackendRequestError:
        return BackendRequestError(
            extract_error_message(cause),
            cause=cause,
            method=request.method.value,
            url=request.url,
        )

    def test_connection(self) -> Any:
        """Credential check: fetch the current user's profile."""
        return self.execute(HttpMethod.GET, ApiPath.USER_PROFILE)
