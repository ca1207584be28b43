"""Unit tests for CommitFetcher."""

import httpx
import pytest

from gh_activity.connectors.github.client import ConflictError, UpstreamServerError
from gh_activity.connectors.github.commits import CommitFetcher


def _commits_handler(commits: list[dict], requests: list[httpx.Request]):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=commits)

    return handler


@pytest.mark.asyncio
async def test_limit_truncates_newest_first(mock_transport_client, commit_payload):
    requests: list[httpx.Request] = []
    payload = [commit_payload(f"sha{i}", message=f"commit {i}") for i in range(8)]
    client = mock_transport_client(_commits_handler(payload, requests))

    async with client:
        commits = await CommitFetcher(client).fetch_recent("octocat", "hello", 5)

    assert [c.sha for c in commits] == ["sha0", "sha1", "sha2", "sha3", "sha4"]
    assert requests[0].url.path == "/repos/octocat/hello/commits"
    assert requests[0].url.params["per_page"] == "5"
    assert "page" not in requests[0].url.params


@pytest.mark.asyncio
async def test_fewer_commits_than_limit(mock_transport_client, commit_payload):
    client = mock_transport_client(
        _commits_handler([commit_payload("only")], [])
    )
    async with client:
        commits = await CommitFetcher(client).fetch_recent("octocat", "hello", 20)

    assert [c.sha for c in commits] == ["only"]


@pytest.mark.asyncio
async def test_per_page_capped_at_100(mock_transport_client):
    requests: list[httpx.Request] = []
    client = mock_transport_client(_commits_handler([], requests))

    async with client:
        await CommitFetcher(client).fetch_recent("octocat", "hello", 500)

    assert requests[0].url.params["per_page"] == "100"


@pytest.mark.asyncio
async def test_empty_repository_is_empty_list(mock_transport_client):
    client = mock_transport_client(
        lambda request: httpx.Response(409, json={"message": "Git Repository is empty."})
    )
    async with client:
        commits = await CommitFetcher(client).fetch_recent("octocat", "empty", 10)

    assert commits == []


@pytest.mark.asyncio
async def test_other_conflicts_propagate(mock_transport_client):
    client = mock_transport_client(
        lambda request: httpx.Response(409, json={"message": "Merge conflict"})
    )
    async with client:
        with pytest.raises(ConflictError):
            await CommitFetcher(client).fetch_recent("octocat", "hello", 10)


@pytest.mark.asyncio
async def test_server_error_propagates(mock_transport_client):
    client = mock_transport_client(
        lambda request: httpx.Response(500, json={"message": "Server Error"})
    )
    async with client:
        with pytest.raises(UpstreamServerError):
            await CommitFetcher(client).fetch_recent("octocat", "hello", 10)
