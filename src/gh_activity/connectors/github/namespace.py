"""Repository discovery across GitHub's user and organization namespaces.

An identifier is first listed under ``/users/{id}/repos``; when that yields
no repositories the identical call is retried once under
``/orgs/{id}/repos``. The heuristic cannot tell an account with zero
repositories from an organization name, so an empty user listing always
costs one extra organization request.
"""

import logging

from gh_activity.connectors.github.client import NotFoundError
from gh_activity.connectors.github.mappers import map_repository
from gh_activity.connectors.github.pager import UpstreamPager
from gh_activity.metrics import namespace_fallbacks_total
from gh_activity.models import RepositorySummary, UpstreamPage

logger = logging.getLogger("gh_activity.github.namespace")

USER_NAMESPACE = "users"
ORG_NAMESPACE = "orgs"


def listing_path(namespace: str, identifier: str) -> str:
    return f"/{namespace}/{identifier}/repos"


class NamespaceResolver:
    """Lists an identifier's repositories with user -> organization fallback."""

    SORT = "updated"

    def __init__(self, pager: UpstreamPager, per_page: int = UpstreamPager.DEFAULT_PER_PAGE) -> None:
        self._pager = pager
        self._per_page = per_page

    async def resolve_all(self, identifier: str) -> list[RepositorySummary]:
        """Every repository of a user, or of an organization when the user listing is empty."""
        repos = await self._list_all(USER_NAMESPACE, identifier)
        if repos:
            return repos

        self._record_fallback(identifier, "all")
        return await self._list_all(ORG_NAMESPACE, identifier)

    async def resolve_page(
        self,
        identifier: str,
        page: int,
        per_page: int,
    ) -> UpstreamPage[RepositorySummary]:
        """One upstream page of repositories, with the same fallback rule.

        The fallback is taken whenever the user page has zero items, whatever
        total_pages it reported.
        """
        result = await self._pager.fetch_page(
            listing_path(USER_NAMESPACE, identifier),
            map_repository,
            page=page,
            per_page=per_page,
            params={"sort": self.SORT},
        )
        if not result.is_empty:
            return result

        self._record_fallback(identifier, "page")
        return await self._pager.fetch_page(
            listing_path(ORG_NAMESPACE, identifier),
            map_repository,
            page=page,
            per_page=per_page,
            params={"sort": self.SORT},
        )

    async def _list_all(self, namespace: str, identifier: str) -> list[RepositorySummary]:
        try:
            return await self._pager.fetch_all(
                listing_path(namespace, identifier),
                map_repository,
                params={"sort": self.SORT},
                per_page=self._per_page,
            )
        except NotFoundError:
            logger.info(
                "namespace_not_found",
                extra={"namespace": namespace, "identifier": identifier},
            )
            return []

    @staticmethod
    def _record_fallback(identifier: str, mode: str) -> None:
        namespace_fallbacks_total.labels(mode=mode).inc()
        logger.info(
            "namespace_fallback",
            extra={"identifier": identifier, "mode": mode, "namespace": ORG_NAMESPACE},
        )
