"""End-to-end activity pipeline over httpx.MockTransport.

Exercises the real client, pager, namespace resolver, commit fetcher,
aggregator and paginator together against a fake GitHub.
"""

import json

import httpx
import pytest

from gh_activity.aggregator import WorkerPool
from gh_activity.config import ActivityConfig
from gh_activity.connectors.github.client import GitHubClient
from gh_activity.service import ActivityService

BASE = "https://api.github.com"


class FakeGitHub:
    """Minimal GitHub REST fake: paged repo listings and commit listings."""

    def __init__(self, repo_payload, commit_payload, user_repos=0, org_repos=0, empty=()):
        self.repo_payload = repo_payload
        self.commit_payload = commit_payload
        self.user_repos = user_repos
        self.org_repos = org_repos
        self.empty = set(empty)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.path.strip("/").split("/")

        if parts[0] in ("users", "orgs") and parts[-1] == "repos":
            count = self.user_repos if parts[0] == "users" else self.org_repos
            if count == 0 and parts[0] == "users":
                return httpx.Response(404, json={"message": "Not Found"})
            return self._repo_page(request, parts[0], parts[1], count)

        if parts[0] == "repos" and parts[-1] == "commits":
            repo = parts[2]
            if repo in self.empty:
                return httpx.Response(409, json={"message": "Git Repository is empty."})
            per_page = int(request.url.params["per_page"])
            body = [
                self.commit_payload(
                    f"{repo}-{i}",
                    message=f"Change {i} in {repo}\n\ndetails",
                    date=f"2024-01-{28 - i:02d}T10:00:00Z",
                )
                for i in range(min(per_page, 8))
            ]
            return httpx.Response(200, json=body)

        return httpx.Response(404, json={"message": "Not Found"})

    def _repo_page(self, request, namespace, owner, count):
        page = int(request.url.params.get("page", "1"))
        per_page = int(request.url.params.get("per_page", "30"))
        last = max(1, -(-count // per_page))
        start = (page - 1) * per_page
        body = [
            self.repo_payload(f"repo-{i:03d}", owner=owner)
            for i in range(start, min(start + per_page, count))
        ]
        links = []
        path = f"{BASE}/{namespace}/{owner}/repos"
        if page < last:
            links.append(f'<{path}?per_page={per_page}&page={page + 1}>; rel="next"')
        if last > 1:
            links.append(f'<{path}?per_page={per_page}&page={last}>; rel="last"')
        headers = {"Link": ", ".join(links)} if links else {}
        return httpx.Response(200, json=body, headers=headers)


async def _run_page(fake, page, size, limit, per_page=100):
    config = ActivityConfig(_env_file=None, github_per_page=per_page, worker_pool_size=4)
    client = GitHubClient.from_config(config, transport=httpx.MockTransport(fake))
    async with client:
        service = ActivityService.build(client, WorkerPool(config.worker_pool_size), config)
        return await service.fetch_activity_page("octocat", limit, page, size)


@pytest.mark.asyncio
async def test_paged_activity_across_upstream_pages(repo_payload, commit_payload):
    fake = FakeGitHub(repo_payload, commit_payload, user_repos=237)

    result = await _run_page(fake, page=2, size=10, limit=3)

    assert result.total_elements == 237
    assert result.total_pages == 24
    assert [a.repository.name for a in result.content] == [f"repo-{i:03d}" for i in range(20, 30)]
    assert all(len(a.commits) == 3 for a in result.content)
    assert result.content[0].commits[0].sha == "repo-020-0"

    listing = [r for r in fake.requests if r.url.path.endswith("/repos")]
    commit_calls = [r for r in fake.requests if r.url.path.endswith("/commits")]
    assert len(listing) == 3
    assert len(commit_calls) == 10


@pytest.mark.asyncio
async def test_organization_fallback_and_empty_repository(repo_payload, commit_payload):
    fake = FakeGitHub(repo_payload, commit_payload, org_repos=3, empty={"repo-001"})

    result = await _run_page(fake, page=0, size=10, limit=5)

    assert [a.repository.full_name for a in result.content] == [
        "octocat/repo-000",
        "octocat/repo-001",
        "octocat/repo-002",
    ]
    assert result.content[1].commits == ()
    assert len(result.content[0].commits) == 5
    paths = [r.url.path for r in fake.requests if r.url.path.endswith("/repos")]
    assert paths == ["/users/octocat/repos", "/orgs/octocat/repos"]


@pytest.mark.asyncio
async def test_unknown_identifier_is_empty_page(repo_payload, commit_payload):
    fake = FakeGitHub(repo_payload, commit_payload)

    result = await _run_page(fake, page=0, size=20, limit=5)

    assert result.is_empty
    assert result.total_elements == 0
    assert not any(r.url.path.endswith("/commits") for r in fake.requests)


@pytest.mark.asyncio
async def test_identical_runs_serialize_identically(repo_payload, commit_payload):
    first = await _run_page(FakeGitHub(repo_payload, commit_payload, user_repos=57), 1, 25, 4, per_page=20)
    second = await _run_page(FakeGitHub(repo_payload, commit_payload, user_repos=57), 1, 25, 4, per_page=20)

    assert json.dumps(first.to_dict(), sort_keys=True) == json.dumps(second.to_dict(), sort_keys=True)
    assert first.number_of_elements == 25
