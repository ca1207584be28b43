"""Link-header pagination over GitHub listing endpoints.

Two modes:
- fetch_all(): follow ``rel="next"`` until a page comes back empty or no
  next relation is present, accumulating mapped items in upstream order.
- fetch_page(): a single caller-chosen page plus the total-page metadata
  derived from that response's Link header.

No retries happen here; upstream errors propagate unchanged, except that
fetch_page() reports a 404 as an empty page (the namespace resolver's
fallback signal).
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from gh_activity.connectors.github.client import (
    GitHubClient,
    GitHubClientError,
    NotFoundError,
)
from gh_activity.connectors.github.links import parse_link_header
from gh_activity.models import UpstreamPage

logger = logging.getLogger("gh_activity.github.pager")

T = TypeVar("T")

ItemMapper = Callable[[dict[str, Any]], T]


class PaginationLimitExceeded(GitHubClientError):
    """Raised when an upstream keeps advertising ``next`` past max_pages."""


class UpstreamPager:
    """Drives sequential GETs against a paged GitHub listing."""

    DEFAULT_PER_PAGE = 100  # Maximum items per page GitHub allows
    DEFAULT_MAX_PAGES = 10000

    def __init__(self, client: GitHubClient, max_pages: int = DEFAULT_MAX_PAGES) -> None:
        """
        Args:
            client: Shared GitHubClient
            max_pages: Safety ceiling on pages followed by fetch_all()
        """
        self._client = client
        self._max_pages = max_pages

    async def fetch_all(
        self,
        path: str,
        mapper: ItemMapper,
        params: dict[str, Any] | None = None,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> list[T]:
        """Fetch every page of a listing and return the mapped items.

        Args:
            path: API path of the first page
            mapper: Converts one raw JSON object to a model
            params: Extra query parameters for the first request
            per_page: Items requested per page

        Returns:
            Mapped items across all pages, in upstream order

        Raises:
            PaginationLimitExceeded: More than max_pages pages were advertised
            GitHubClientError: Any upstream failure (including 404)
        """
        items: list[T] = []
        current_path = path
        current_params: dict[str, Any] | None = {
            **(params or {}),
            "per_page": per_page,
            "page": 1,
        }

        pages = 0
        while True:
            if pages >= self._max_pages:
                logger.error(
                    "pagination_limit_exceeded",
                    extra={"path": path, "max_pages": self._max_pages, "items": len(items)},
                )
                raise PaginationLimitExceeded(
                    f"{path} advertised more than {self._max_pages} pages"
                )

            response = await self._client.get(current_path, params=current_params)
            pages += 1
            if not response.body:
                break

            items.extend(mapper(raw) for raw in response.body)

            cursor = parse_link_header(response.link)
            if not cursor.has_next:
                break
            next_url = cursor.next_url
            if not self._client.owns_url(next_url):
                logger.warning(
                    "Rejecting Link header URL not matching base_url: %.100s",
                    next_url,
                )
                break

            # Parameters are embedded in the Link URL
            current_path = next_url
            current_params = None

            logger.debug("Paginating: page %d, %d items so far", pages, len(items))

        logger.debug(
            "pagination_completed",
            extra={"path": path, "pages": pages, "items": len(items)},
        )
        return items

    async def fetch_page(
        self,
        path: str,
        mapper: ItemMapper,
        page: int,
        per_page: int,
        params: dict[str, Any] | None = None,
    ) -> UpstreamPage[T]:
        """Fetch exactly one page with its Link-header metadata.

        Args:
            path: API path of the listing
            mapper: Converts one raw JSON object to a model
            page: 1-indexed upstream page number
            per_page: Items per page
            params: Extra query parameters

        Returns:
            UpstreamPage; empty with total_pages=0 when upstream answers 404

        Raises:
            GitHubClientError: Any upstream failure other than 404
        """
        try:
            response = await self._client.get(
                path,
                params={**(params or {}), "per_page": per_page, "page": page},
            )
        except NotFoundError:
            logger.info("listing_not_found", extra={"path": path, "page": page})
            return UpstreamPage(items=(), total_pages=0, current_page=page, has_next=False)

        cursor = parse_link_header(response.link)
        return UpstreamPage(
            items=tuple(mapper(raw) for raw in response.body),
            total_pages=cursor.total_pages,
            current_page=page,
            has_next=cursor.has_next,
        )
