"""Recent-commit listing for a single repository."""

import logging

from gh_activity.connectors.github.client import ConflictError, GitHubClient
from gh_activity.connectors.github.mappers import map_commit
from gh_activity.metrics import empty_repositories_total
from gh_activity.models import CommitRecord

logger = logging.getLogger("gh_activity.github.commits")

# Body of the 409 GitHub returns when listing commits of a repository with no commits
EMPTY_REPOSITORY_MESSAGE = "Git Repository is empty"

MAX_PER_PAGE = 100


class CommitFetcher:
    """Fetches up to ``limit`` most recent commits of one repository.

    Only the first upstream page is read, so ``limit`` is effectively capped
    at 100.
    """

    def __init__(self, client: GitHubClient) -> None:
        self._client = client

    async def fetch_recent(self, owner: str, repo: str, limit: int) -> list[CommitRecord]:
        """List the newest commits, most recent first.

        Args:
            owner: Repository owner (user or organization)
            repo: Repository name
            limit: Maximum commits returned

        Returns:
            At most ``limit`` commits in upstream order; empty for a
            repository with no commits yet

        Raises:
            GitHubClientError: Any upstream failure other than the
                empty-repository 409
        """
        per_page = min(MAX_PER_PAGE, max(1, limit))
        try:
            response = await self._client.get(
                f"/repos/{owner}/{repo}/commits",
                params={"per_page": per_page},
            )
        except ConflictError as e:
            if EMPTY_REPOSITORY_MESSAGE in e.body or EMPTY_REPOSITORY_MESSAGE in str(e):
                empty_repositories_total.inc()
                logger.debug(
                    "empty_repository", extra={"owner": owner, "repo": repo}
                )
                return []
            raise

        return [map_commit(raw) for raw in response.body[: max(0, limit)]]
