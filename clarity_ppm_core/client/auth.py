"""
Authentication for the Clarity PPM REST API.

Three schemes are supported:

  1. API key -- a JWT sent as a Bearer token together with the client id header.
  2. Basic -- username and password on every call.
  3. Session token -- one login call exchanges Basic credentials for a token,
     which is then sent verbatim as the Authorization header until logout.

    POST /ppm/rest/v1/auth/login      Authorization: Basic <b64(user:pass)>
    Response: {"authToken": "..."}
    DELETE /ppm/rest/v1/auth/logout   Authorization: <token>

Only the session-token scheme performs network I/O. Its token is owned by a
single SessionTokenManager and is never persisted.
"""

import base64
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from ..constants import ApiPath, AuthType, Headers, HttpMethod, ResponseKey
from ..exceptions import BackendRequestError, ConfigError, NotAuthenticatedError
from ..schemas.credential_schemas import ClarityCredentials
from ..schemas.request_schemas import HttpRequest
from ..utils.error_utils import extract_error_message
from ..utils.logger import get_logger
from .transport import Transport


def basic_auth_value(username: str, password: str) -> str:
    """Authorization header value for HTTP Basic auth."""
    encoded = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


def require_credential_fields(credentials: ClarityCredentials) -> None:
    """
    Check the fields the selected auth type needs.

    Raises:
        ConfigError: Naming every missing field
    """
    missing = credentials.missing_fields()
    if missing:
        raise ConfigError(
            f"Missing credential fields for {credentials.auth_type.value} authentication: "
            f"{', '.join(missing)}",
            missing_fields=missing,
            auth_type=credentials.auth_type.value,
        )


class SessionTokenManager:
    """
    Owns the session token for token-based authentication.

    Use session() to scope a token to a block of work; login() and logout()
    are available for hosts that manage the lifetime themselves.
    """

    def __init__(self, credentials: ClarityCredentials, transport: Transport):
        self.credentials = credentials
        self.transport = transport
        self._token: Optional[str] = None
        self.logger = get_logger()

    def login(self) -> str:
        """
        Exchange Basic credentials for a session token.

        Returns:
            The token string

        Raises:
            ConfigError: If username or password is missing
            BackendRequestError: If the login call fails or returns no token
        """
        require_credential_fields(self.credentials)
        url = f"{self.credentials.base_url}{ApiPath.LOGIN}"
        request = HttpRequest(
            method=HttpMethod.POST,
            url=url,
            headers={
                Headers.AUTHORIZATION: basic_auth_value(
                    self.credentials.username, self.credentials.password
                ),
                Headers.CONTENT_TYPE: Headers.JSON,
            },
        )

        self.logger.debug("Logging in to Clarity PPM", extra={"url": url})

        try:
            response = self.transport.send(request)
        except Exception as e:
            raise BackendRequestError(
                extract_error_message(e), cause=e, method=HttpMethod.POST.value, url=url
            )

        token = response.get(ResponseKey.AUTH_TOKEN) if isinstance(response, dict) else None
        if not token:
            raise BackendRequestError(
                "Login response did not contain an auth token",
                method=HttpMethod.POST.value,
                url=url,
            )

        self._token = token
        self.logger.info("Clarity PPM session opened", extra={"host": self.credentials.host})
        return token

    def logout(self) -> None:
        """
        End the session.

        The held token is cleared even when the logout call fails; the
        failure is then raised as BackendRequestError. No-op when not logged in.
        """
        if not self._token:
            return

        url = f"{self.credentials.base_url}{ApiPath.LOGOUT}"
        request = HttpRequest(
            method=HttpMethod.DELETE,
            url=url,
            headers={
                Headers.AUTHORIZATION: self._token,
                Headers.CONTENT_TYPE: Headers.JSON,
            },
        )

        try:
            self.transport.send(request)
        except Exception as e:
            raise BackendRequestError(
                extract_error_message(e), cause=e, method=HttpMethod.DELETE.value, url=url
            )
        finally:
            self._token = None

        self.logger.info("Clarity PPM session closed", extra={"host": self.credentials.host})

    def get_token(self) -> str:
        """
        The current session token.

        Raises:
            NotAuthenticatedError: If login() has not succeeded
        """
        if not self._token:
            raise NotAuthenticatedError(host=self.credentials.host)
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    @contextmanager
    def session(self) -> Iterator[str]:
        """
        Log in for the duration of a block and always release the token.

        A logout failure after a clean block propagates. After a failing
        block it is logged and the block's own exception propagates.
        """
        token = self.login()
        try:
            yield token
        except BaseException:
            self._release_after_failure()
            raise
        self.logout()

    def _release_after_failure(self) -> None:
        try:
            self.logout()
        except BackendRequestError as e:
            self.logger.warning(
                "Logout failed while unwinding a failed session",
                extra={"host": self.credentials.host, "error_message": e.message},
            )


class AuthResolver:
    """Turns credentials into the headers attached to every request."""

    def __init__(
        self,
        credentials: ClarityCredentials,
        transport: Optional[Transport] = None,
        token_manager: Optional[SessionTokenManager] = None,
    ):
        self.credentials = credentials
        self.token_manager = token_manager
        if (
            self.token_manager is None
            and credentials.auth_type == AuthType.SESSION_TOKEN
            and transport is not None
        ):
            self.token_manager = SessionTokenManager(credentials, transport)

    def resolve_headers(self) -> Dict[str, str]:
        """
        Produce the authentication headers for one request.

        Raises:
            ConfigError: If a field required by the auth type is missing
            NotAuthenticatedError: For token auth before a successful login
        """
        require_credential_fields(self.credentials)
        auth_type = self.credentials.auth_type

        if auth_type == AuthType.API_KEY:
            return {
                Headers.AUTHORIZATION: f"Bearer {self.credentials.api_key}",
                Headers.CLIENT_ID: self.credentials.client_id,
            }

        if auth_type == AuthType.BASIC:
            return {
                Headers.AUTHORIZATION: basic_auth_value(
                    self.credentials.username, self.credentials.password
                )
            }

        if self.token_manager is None:
            raise NotAuthenticatedError(
                "Session token authentication needs a transport to log in",
                host=self.credentials.host,
            )
        return {Headers.AUTHORIZATION: self.token_manager.get_token()}

    @contextmanager
    def session(self) -> Iterator[None]:
        """Scope a login session around a block; no-op for stateless schemes."""
        if self.token_manager is None or self.credentials.auth_type != AuthType.SESSION_TOKEN:
            yield
            return
        with self.token_manager.session():
            yield
