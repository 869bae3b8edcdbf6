"""
HTTP transports for the Clarity PPM client.

A transport takes a fully resolved HttpRequest and returns the decoded JSON
body, or raises TransportError. The rest of the client never touches the
HTTP library directly, so hosts can plug in their own transport.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from ..config import get_config
from ..exceptions import TransportError
from ..schemas.request_schemas import HttpRequest


class Transport(ABC):
    """Sends one request and returns the decoded response body."""

    @abstractmethod
    def send(self, request: HttpRequest) -> Any:
        """
        Send a request.

        Returns:
            The decoded JSON body ({} when the response has no content)

        Raises:
            TransportError: On connection failure or a non-2xx status
        """


def encode_query(query: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Render query values the way the backend expects (lowercase booleans)."""
    if not query:
        return None
    encoded: Dict[str, Any] = {}
    for key, value in query.items():
        if isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        else:
            encoded[key] = value
    return encoded


def _decode_body(response: requests.Response) -> Any:
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return response.text


class RequestsTransport(Transport):
    """Transport backed by a requests.Session."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[int] = None,
        verify_ssl: Optional[bool] = None,
    ):
        http_config = get_config().http
        self._session = session or requests.Session()
        self.timeout = timeout if timeout is not None else http_config.timeout_seconds
        self.verify_ssl = verify_ssl if verify_ssl is not None else http_config.verify_ssl

    def send(self, request: HttpRequest) -> Any:
        try:
            response = self._session.request(
                request.method.value,
                request.url,
                headers=request.headers,
                json=request.body,
                params=encode_query(request.query),
                timeout=self.timeout,
                verify=self.verify_ssl,
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            response = e.response
            raise TransportError(
                str(e),
                http_status=response.status_code if response is not None else None,
                payload=_decode_body(response) if response is not None else None,
                cause=e,
            )
        except requests.RequestException as e:
            raise TransportError(str(e), cause=e)

        return _decode_body(response)

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()
