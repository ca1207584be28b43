"""Concurrent fan-out/fan-in of per-repository commit fetches.

A WorkerPool bounds how many commit fetches run at once across every
in-flight aggregation. Build one per process (app lifespan or CLI run) and
pass it to each ActivityAggregator; a pool of size 1 runs fetches strictly
one after another, which tests use for deterministic scheduling.

aggregate() is a join barrier: it returns only after every dispatched fetch
has finished. Results come back in input order regardless of completion
order; if any fetch failed, the first failure (in input order) is raised
and no partial result is returned.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol, TypeVar

from gh_activity.metrics import (
    aggregation_duration_seconds,
    repositories_aggregated_total,
    worker_pool_in_flight,
)
from gh_activity.models import CommitRecord, RepositoryActivity, RepositorySummary

logger = logging.getLogger("gh_activity.aggregator")

T = TypeVar("T")


class CommitSource(Protocol):
    async def fetch_recent(self, owner: str, repo: str, limit: int) -> list[CommitRecord]:
        ...


class WorkerPool:
    """Fixed-capacity pool of concurrent execution slots.

    Submissions beyond capacity wait for a free slot instead of running.
    """

    DEFAULT_SIZE = 10

    def __init__(self, size: int = DEFAULT_SIZE) -> None:
        if size < 1:
            raise ValueError("WorkerPool size must be >= 1")
        self.size = size
        self._semaphore = asyncio.Semaphore(size)
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        return self._in_flight

    async def run(self, func: Callable[..., Awaitable[T]], *args) -> T:
        """Run ``func(*args)`` once a slot is free."""
        async with self._semaphore:
            self._in_flight += 1
            worker_pool_in_flight.inc()
            try:
                return await func(*args)
            finally:
                self._in_flight -= 1
                worker_pool_in_flight.dec()


class ActivityAggregator:
    """Pairs each repository with its most recent commits."""

    def __init__(self, commit_fetcher: CommitSource, pool: WorkerPool) -> None:
        self._commit_fetcher = commit_fetcher
        self._pool = pool

    async def aggregate(
        self,
        owner: str,
        repos: Sequence[RepositorySummary],
        per_repo_limit: int,
    ) -> list[RepositoryActivity]:
        """Fetch commits for every repository concurrently.

        Args:
            owner: Owner used in the commits path of every repository
            repos: Repositories in the order the result must follow
            per_repo_limit: Maximum commits per repository

        Returns:
            One RepositoryActivity per input repository, in input order

        Raises:
            GitHubClientError: The first failed fetch (in input order), after
                all fetches have finished
        """
        if not repos:
            return []

        start = time.perf_counter()
        results = await asyncio.gather(
            *(
                self._pool.run(self._fetch_one, owner, repo, per_repo_limit)
                for repo in repos
            ),
            return_exceptions=True,
        )
        aggregation_duration_seconds.observe(time.perf_counter() - start)

        failures = [
            (repo, r) for repo, r in zip(repos, results) if isinstance(r, BaseException)
        ]
        if failures:
            repo, error = failures[0]
            logger.error(
                "aggregation_failed",
                extra={
                    "owner": owner,
                    "repositories": len(repos),
                    "failed": len(failures),
                    "first_failure": repo.name,
                    "error": str(error),
                    "error_type": type(error).__name__,
                },
            )
            raise error

        repositories_aggregated_total.inc(len(repos))
        logger.debug(
            "aggregation_completed",
            extra={"owner": owner, "repositories": len(repos)},
        )
        return list(results)

    async def _fetch_one(
        self, owner: str, repo: RepositorySummary, limit: int
    ) -> RepositoryActivity:
        commits = await self._commit_fetcher.fetch_recent(owner, repo.name, limit)
        return RepositoryActivity(repository=repo, commits=tuple(commits))
