"""
Offset pagination over Clarity PPM list endpoints.

List endpoints answer with an envelope:

    {"_results": [...], "_next": "<url>" | null, "_totalCount": 240, ...}

fetch_all() walks pages by advancing ``offset`` by ``limit`` for as long as
``_next`` is truthy. A response without ``_results`` is a single record and
ends the walk immediately.
"""

from typing import Any, Dict, List, Optional, Union

from ..config import get_config
from ..constants import HttpMethod, LogContextKey
from ..schemas.request_schemas import PagedResponse
from ..utils.logger import get_logger
from .request_executor import RequestExecutor


class PaginationWalker:
    """Materializes full or bounded result sets from list endpoints."""

    def __init__(
        self,
        executor: RequestExecutor,
        page_size: Optional[int] = None,
        max_pages: Optional[int] = None,
    ):
        """
        Args:
            executor: Executes each page request
            page_size: Default limit per page (config pagination.page_size)
            max_pages: Optional ceiling on pages per walk (config pagination.max_pages).
                None keeps walking until the backend stops signalling more pages.
        """
        pagination_config = get_config().pagination
        self.executor = executor
        self.page_size = page_size or pagination_config.page_size
        self.max_pages = max_pages if max_pages is not None else pagination_config.max_pages
        self.logger = get_logger()

    def fetch_all(
        self,
        method: Union[HttpMethod, str],
        path: str,
        body: Optional[Dict[str, Any]] = None,
        query: Optional[Dict[str, Any]] = None,
    ) -> List[Any]:
        """
        Fetch every record by walking offset pages.

        Args:
            method: HTTP method
            path: List endpoint path
            body: Optional body sent with each page request
            query: Query parameters; ``limit`` is honoured when set

        Returns:
            All records in page order
        """
        page_query: Dict[str, Any] = dict(query or {})
        limit = page_query.get("limit") or self.page_size
        page_query["limit"] = limit
        page_query["offset"] = 0

        records: List[Any] = []
        pages = 0

        while True:
            response = self.executor.execute(method, path, body, dict(page_query))
            page = PagedResponse.from_raw(response)
            pages += 1

            records.extend(page.results)
            if not page.is_envelope:
                break

            self.logger.debug(
                f"Fetched page {pages} of {path}",
                extra={
                    LogContextKey.OFFSET.value: page_query["offset"],
                    LogContextKey.LIMIT.value: limit,
                    "records": len(page.results),
                },
            )

            page_query["offset"] += limit
            if not page.next_cursor_present:
                break

            if self.max_pages is not None and pages >= self.max_pages:
                self.logger.warning(
                    f"Stopped paging {path} at the configured page ceiling",
                    extra={"max_pages": self.max_pages, "records": len(records)},
                )
                break

        return records

    def fetch_page(
        self,
        method: Union[HttpMethod, str],
        path: str,
        limit: int,
        body: Optional[Dict[str, Any]] = None,
        query: Optional[Dict[str, Any]] = None,
    ) -> List[Any]:
        """
        Fetch at most ``limit`` records with a single call.

        Returns:
            The envelope's results, or the bare response as a one-element list
        """
        page_query: Dict[str, Any] = dict(query or {})
        page_query["limit"] = limit

        response = self.executor.execute(method, path, body, page_query)
        return PagedResponse.from_raw(response).results
