"""Shared pytest fixtures for gh-activity tests.

Fixture Organization:
    - Client fixtures: GitHubClient instances that never touch the network
    - Payload factories: raw GitHub REST JSON objects for repos and commits
    - Transport fixtures: GitHubClient over httpx.MockTransport
"""

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from gh_activity.config import reset_config
from gh_activity.connectors.github.client import GitHubClient


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    """Isolate every test from the developer's environment and .env file."""
    for key in (
        "GITHUB_TOKEN",
        "GITHUB_BASE_URL",
        "WORKER_POOL_SIZE",
        "LOG_LEVEL",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def github_client():
    """GitHubClient with a test token (HTTP calls are patched per test)."""
    return GitHubClient(token="ghp_test_token_123")


def make_repo_payload(name: str, owner: str = "octocat", **overrides: Any) -> dict[str, Any]:
    """Raw repository object as returned by /users/{u}/repos."""
    payload = {
        "id": sum(map(ord, name)),
        "name": name,
        "full_name": f"{owner}/{name}",
        "private": False,
        "fork": False,
        "html_url": f"https://github.com/{owner}/{name}",
        "default_branch": "main",
    }
    payload.update(overrides)
    return payload


def make_commit_payload(sha: str, message: str = "Initial commit", date: str = "2024-01-01T12:00:00Z") -> dict[str, Any]:
    """Raw commit object as returned by /repos/{o}/{r}/commits."""
    return {
        "sha": sha,
        "html_url": f"https://github.com/octocat/hello/commit/{sha}",
        "commit": {
            "message": message,
            "author": {
                "name": "The Octocat",
                "email": "octocat@github.com",
                "date": date,
            },
        },
    }


@pytest.fixture
def repo_payload() -> Callable[..., dict[str, Any]]:
    return make_repo_payload


@pytest.fixture
def commit_payload() -> Callable[..., dict[str, Any]]:
    return make_commit_payload


@pytest.fixture
def mock_transport_client():
    """Factory: GitHubClient backed by httpx.MockTransport(handler)."""
    def _make(handler: Callable[[httpx.Request], httpx.Response], token: str | None = None) -> GitHubClient:
        return GitHubClient(token=token, transport=httpx.MockTransport(handler))

    return _make
