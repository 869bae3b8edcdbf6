"""
Clarity PPM adapter - the entry point for host integrations.

Wires credentials, transport, authentication, request execution, pagination
and dispatch together:

```python
adapter = ClarityPpmAdapter(
    {"host": "https://clarity.example.com", "authType": "basic",
     "username": "admin", "password": "secret"}
)
results = adapter.run(
    [{"resource": "project", "operation": "getMany",
      "parameters": {"returnAll": True, "filters": {"isActive": True}}}],
    continue_on_fail=True,
)
```
"""

from typing import Any, Callable, List, Mapping, Optional, Sequence, Union

from .client.auth import AuthResolver
from .client.pagination import PaginationWalker
from .client.request_executor import RequestExecutor
from .client.transport import RequestsTransport, Transport
from .dispatch.dispatcher import OperationDispatcher, WorkItemInput
from .exceptions import ClarityPpmError
from .schemas.credential_schemas import ClarityCredentials
from .schemas.item_schemas import ItemResult
from .utils.logger import get_logger

CredentialSource = Union[
    ClarityCredentials, Mapping[str, Any], Callable[[], ClarityCredentials]
]


def _credential_provider(source: CredentialSource) -> Callable[[], ClarityCredentials]:
    if isinstance(source, ClarityCredentials):
        return lambda: source
    if isinstance(source, Mapping):
        credentials = ClarityCredentials.model_validate(dict(source))
        return lambda: credentials
    if callable(source):
        return source
    raise TypeError(f"Unsupported credential source: {type(source).__name__}")


class ClarityPpmAdapter:
    """One configured connection to a Clarity PPM instance."""

    def __init__(
        self,
        credentials: CredentialSource,
        transport: Optional[Transport] = None,
        page_size: Optional[int] = None,
        max_pages: Optional[int] = None,
    ):
        """
        Args:
            credentials: Credentials, a mapping of credential fields, or a provider callable
            transport: HTTP transport (a RequestsTransport by default)
            page_size: Override for the configured page size
            max_pages: Override for the configured page ceiling
        """
        self.credential_provider = _credential_provider(credentials)
        self.transport = transport or RequestsTransport()
        self.auth = AuthResolver(self.credential_provider(), self.transport)
        self.executor = RequestExecutor(self.credential_provider, self.transport, self.auth)
        self.walker = PaginationWalker(self.executor, page_size=page_size, max_pages=max_pages)
        self.dispatcher = OperationDispatcher(self.executor, self.walker)
        self.logger = get_logger()

    @classmethod
    def from_env(cls, transport: Optional[Transport] = None) -> "ClarityPpmAdapter":
        """Build an adapter from CLARITY_* environment variables."""
        return cls(ClarityCredentials.from_env(), transport=transport)

    def run(
        self, items: Sequence[WorkItemInput], continue_on_fail: bool = False
    ) -> List[ItemResult]:
        """
        Run a batch inside one authentication session.

        For session-token auth the batch logs in first and always logs out;
        the other schemes need no session.
        """
        with self.auth.session():
            return self.dispatcher.run(items, continue_on_fail=continue_on_fail)

    def test_credentials(self) -> bool:
        """
        Check that the credentials can reach the API.

        Fetches the user profile inside a session. Failures are logged
        and reported as False.
        """
        try:
            with self.auth.session():
                self.executor.test_connection()
        except ClarityPpmError as e:
            self.logger.warning(
                "Clarity PPM credential test failed",
                extra={"host": self.auth.credentials.host, "error_message": e.message},
            )
            return False
        return True
