"""Unit tests for user -> organization namespace fallback."""

from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from gh_activity.connectors.github.client import NotFoundError, UpstreamServerError
from gh_activity.connectors.github.namespace import NamespaceResolver, listing_path
from gh_activity.connectors.github.pager import UpstreamPager
from gh_activity.models import RepositorySummary, UpstreamPage


def _repo(name: str) -> RepositorySummary:
    return RepositorySummary(name=name, full_name=f"acme/{name}")


@pytest.fixture
def pager():
    return Mock(spec=UpstreamPager)


def test_listing_path():
    assert listing_path("users", "octocat") == "/users/octocat/repos"
    assert listing_path("orgs", "github") == "/orgs/github/repos"


class TestResolveAll:
    @pytest.mark.asyncio
    async def test_user_with_repos_skips_org(self, pager):
        pager.fetch_all = AsyncMock(return_value=[_repo("a"), _repo("b")])

        repos = await NamespaceResolver(pager).resolve_all("octocat")

        assert [r.name for r in repos] == ["a", "b"]
        pager.fetch_all.assert_awaited_once()
        assert pager.fetch_all.await_args.args[0] == "/users/octocat/repos"
        assert pager.fetch_all.await_args.kwargs["params"] == {"sort": "updated"}

    @pytest.mark.asyncio
    async def test_empty_user_falls_back_to_org_once(self, pager):
        pager.fetch_all = AsyncMock(side_effect=[[], [_repo("x"), _repo("y"), _repo("z")]])

        repos = await NamespaceResolver(pager).resolve_all("acme")

        assert [r.name for r in repos] == ["x", "y", "z"]
        paths = [call.args[0] for call in pager.fetch_all.await_args_list]
        assert paths == ["/users/acme/repos", "/orgs/acme/repos"]

    @pytest.mark.asyncio
    async def test_both_empty_is_empty_result(self, pager):
        pager.fetch_all = AsyncMock(return_value=[])

        repos = await NamespaceResolver(pager).resolve_all("ghost")

        assert repos == []
        assert pager.fetch_all.await_count == 2

    @pytest.mark.asyncio
    async def test_user_not_found_falls_back(self, pager):
        pager.fetch_all = AsyncMock(
            side_effect=[NotFoundError("404", status_code=404), [_repo("x")]]
        )

        repos = await NamespaceResolver(pager).resolve_all("acme")

        assert [r.name for r in repos] == ["x"]

    @pytest.mark.asyncio
    async def test_org_not_found_is_empty(self, pager):
        pager.fetch_all = AsyncMock(side_effect=NotFoundError("404", status_code=404))

        assert await NamespaceResolver(pager).resolve_all("nobody") == []
        assert pager.fetch_all.await_count == 2

    @pytest.mark.asyncio
    async def test_other_errors_propagate_without_fallback(self, pager):
        pager.fetch_all = AsyncMock(side_effect=UpstreamServerError("boom", status_code=500))

        with pytest.raises(UpstreamServerError):
            await NamespaceResolver(pager).resolve_all("octocat")
        pager.fetch_all.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_per_page_forwarded(self, pager):
        pager.fetch_all = AsyncMock(return_value=[_repo("a")])

        await NamespaceResolver(pager, per_page=25).resolve_all("octocat")

        assert pager.fetch_all.await_args.kwargs["per_page"] == 25


class TestResolvePage:
    @pytest.mark.asyncio
    async def test_user_page(self, pager):
        page = UpstreamPage(items=(_repo("a"),), total_pages=4, current_page=2, has_next=True)
        pager.fetch_page = AsyncMock(return_value=page)

        result = await NamespaceResolver(pager).resolve_page("octocat", 2, 30)

        assert result is page
        pager.fetch_page.assert_awaited_once()
        assert pager.fetch_page.await_args.kwargs["page"] == 2
        assert pager.fetch_page.await_args.kwargs["per_page"] == 30

    @pytest.mark.asyncio
    async def test_empty_user_page_falls_back_regardless_of_total_pages(self, pager):
        empty = UpstreamPage(items=(), total_pages=9, current_page=12, has_next=False)
        org = UpstreamPage(items=(_repo("o"),), total_pages=12, current_page=12, has_next=False)
        pager.fetch_page = AsyncMock(side_effect=[empty, org])

        result = await NamespaceResolver(pager).resolve_page("acme", 12, 10)

        assert result is org
        paths = [call.args[0] for call in pager.fetch_page.await_args_list]
        assert paths == ["/users/acme/repos", "/orgs/acme/repos"]

    @pytest.mark.asyncio
    async def test_both_empty(self, pager):
        pager.fetch_page = AsyncMock(return_value=UpstreamPage(current_page=1))

        result = await NamespaceResolver(pager).resolve_page("ghost", 1, 30)

        assert result.is_empty
        assert result.total_pages == 0
        assert pager.fetch_page.await_count == 2


@pytest.mark.asyncio
async def test_org_fallback_over_http(mock_transport_client, repo_payload):
    """A 404 user namespace resolves through exactly one organization request."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path.startswith("/users/"):
            return httpx.Response(404, json={"message": "Not Found"})
        return httpx.Response(200, json=[repo_payload("x", owner="acme"), repo_payload("y", owner="acme")])

    client = mock_transport_client(handler)
    async with client:
        resolver = NamespaceResolver(UpstreamPager(client))
        repos = await resolver.resolve_all("acme")

    assert [r.full_name for r in repos] == ["acme/x", "acme/y"]
    assert [r.url.path for r in requests] == ["/users/acme/repos", "/orgs/acme/repos"]
