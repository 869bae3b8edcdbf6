"""
Request and response shapes exchanged with the Clarity PPM backend.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..constants import HttpMethod, ResponseKey


class RequestDescriptor(BaseModel):
    """One logical call against the REST API, relative to the API base path."""

    method: HttpMethod = Field(description="HTTP method")
    path: str = Field(description="Path below /ppm/rest/v1, e.g. /projects/5")
    body: Dict[str, Any] = Field(default_factory=dict, description="JSON body")
    query: Dict[str, Any] = Field(default_factory=dict, description="Query parameters")

    def body_or_none(self) -> Optional[Dict[str, Any]]:
        """The body, or None when empty so it is left off the call."""
        return dict(self.body) if self.body else None

    def query_or_none(self) -> Optional[Dict[str, Any]]:
        """The query, or None when empty so it is left off the call."""
        return dict(self.query) if self.query else None


class HttpRequest(BaseModel):
    """A fully resolved request handed to a transport."""

    method: HttpMethod
    url: str
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[Dict[str, Any]] = None
    query: Optional[Dict[str, Any]] = None


class PagedResponse(BaseModel):
    """A list-endpoint response reduced to its records and paging signal."""

    results: List[Any] = Field(default_factory=list)
    total_count: Optional[int] = None
    next_cursor_present: bool = False
    is_envelope: bool = True

    @classmethod
    def from_raw(cls, response: Any) -> "PagedResponse":
        """
        Interpret a raw decoded response.

        An envelope carries a ``_results`` list; anything else is treated as a
        single bare record that ends pagination.
        """
        if isinstance(response, dict) and isinstance(response.get(ResponseKey.RESULTS), list):
            return cls(
                results=list(response[ResponseKey.RESULTS]),
                total_count=response.get(ResponseKey.TOTAL_COUNT),
                next_cursor_present=bool(response.get(ResponseKey.NEXT)),
                is_envelope=True,
            )
        return cls(results=[response], next_cursor_present=False, is_envelope=False)
