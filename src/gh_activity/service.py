"""Activity service orchestrating repository discovery and commit aggregation.

Wires NamespaceResolver (repository listing), the in-process paginator and
ActivityAggregator (concurrent commit fetching) into the flows the REST and
CLI layers expose. Inputs are assumed validated by the caller
(page >= 0, 1 <= size <= 100, 1 <= limit <= 100).
"""

import logging

from gh_activity.aggregator import ActivityAggregator, WorkerPool
from gh_activity.config import ActivityConfig
from gh_activity.connectors.github.client import GitHubClient
from gh_activity.connectors.github.commits import CommitFetcher
from gh_activity.connectors.github.namespace import NamespaceResolver
from gh_activity.connectors.github.pager import UpstreamPager
from gh_activity.models import (
    PageResult,
    RepositoryActivity,
    RepositorySummary,
    UpstreamPage,
)
from gh_activity.pagination import page_bounds, paginate
from gh_activity.timing import timed_operation

logger = logging.getLogger("gh_activity.service")


class ActivityService:
    """Repository activity for a GitHub user or organization."""

    def __init__(self, resolver: NamespaceResolver, aggregator: ActivityAggregator) -> None:
        self._resolver = resolver
        self._aggregator = aggregator

    @classmethod
    def build(
        cls,
        client: GitHubClient,
        pool: WorkerPool,
        config: ActivityConfig,
    ) -> "ActivityService":
        """Assemble the default component graph around a shared client and pool."""
        pager = UpstreamPager(client, max_pages=config.github_max_pages)
        resolver = NamespaceResolver(pager, per_page=config.github_per_page)
        aggregator = ActivityAggregator(CommitFetcher(client), pool)
        return cls(resolver, aggregator)

    async def fetch_activity(self, username: str, limit: int) -> list[RepositoryActivity]:
        """Recent commits for every repository of ``username``."""
        logger.info(
            "fetch_activity_started", extra={"username": username, "limit": limit}
        )
        with timed_operation("fetch_activity", logger, extra={"username": username}):
            repos = await self._resolver.resolve_all(username)
            logger.debug(
                "repositories_fetched",
                extra={"username": username, "repositories": len(repos)},
            )
            return await self._aggregator.aggregate(username, repos, limit)

    async def fetch_activity_page(
        self,
        username: str,
        limit: int,
        page: int,
        size: int,
    ) -> PageResult[RepositoryActivity]:
        """One page of repositories with their recent commits.

        Commits are fetched only for the repositories on the requested page.
        """
        extra = {"username": username, "limit": limit, "page": page, "size": size}
        logger.info("fetch_activity_page_started", extra=extra)
        with timed_operation("fetch_activity_page", logger, extra=extra):
            repos = await self._resolver.resolve_all(username)
            repo_page = paginate(repos, page, size)
            if repo_page.is_empty:
                if repos:
                    logger.warning(
                        "page_out_of_range",
                        extra={**extra, "total_elements": len(repos)},
                    )
                return PageResult(
                    content=(),
                    page_number=page,
                    page_size=size,
                    total_elements=repo_page.total_elements,
                )

            start, end = page_bounds(page, size, len(repos))
            logger.debug(
                "processing_page",
                extra={**extra, "start": start, "end": end - 1, "total_elements": len(repos)},
            )
            activities = await self._aggregator.aggregate(
                username, repo_page.content, limit
            )
            return PageResult(
                content=tuple(activities),
                page_number=page,
                page_size=size,
                total_elements=repo_page.total_elements,
            )

    async def list_repositories(
        self,
        username: str,
        page: int,
        size: int,
    ) -> PageResult[RepositorySummary]:
        """Every repository of ``username``, sliced into a zero-indexed page."""
        repos = await self._resolver.resolve_all(username)
        return paginate(repos, page, size)

    async def list_repositories_by_page(
        self,
        username: str,
        page: int,
        per_page: int,
    ) -> UpstreamPage[RepositorySummary]:
        """A single upstream page (1-indexed) with upstream page metadata."""
        result = await self._resolver.resolve_page(username, page, per_page)
        logger.info(
            "repositories_page_fetched",
            extra={
                "username": username,
                "page": page,
                "repositories": len(result.items),
                "total_pages": result.total_pages,
            },
        )
        return result
