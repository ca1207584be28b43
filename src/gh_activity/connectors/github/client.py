"""GitHub REST API client.

Provides an async httpx-based transport for GitHub REST API v3 with optional
token auth. Every call is a single GET: the client does not retry and does
not follow pagination itself (see pager.py). Upstream failures surface as
distinct GitHubClientError subclasses so callers can tell a missing
namespace (404), an empty repository (409), rate limiting (429 / exhausted
403) and server errors (5xx) apart.

Reference: https://docs.github.com/en/rest
Rate limits: https://docs.github.com/en/rest/using-the-rest-api/rate-limits-for-the-rest-api
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import httpx

from gh_activity.metrics import (
    endpoint_label,
    upstream_rate_limit_remaining,
    upstream_requests_total,
)

logger = logging.getLogger("gh_activity.github.client")


class GitHubClientError(Exception):
    """Raised when a GitHub API request fails.

    Attributes:
        status_code: HTTP status of the failed response (None for transport
            failures)
        body: Raw response text, kept for callers that match on it
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NotFoundError(GitHubClientError):
    """Upstream 404 (unknown user, organization or repository)."""


class ConflictError(GitHubClientError):
    """Upstream 409 (e.g. commits listing of an empty repository)."""


class RateLimitExceeded(GitHubClientError):
    """Raised when GitHub rate limit is exhausted (429, or 403 with no quota left)."""

    def __init__(
        self,
        reset_at: datetime,
        retry_after: int | None = None,
        message: str = "Rate limit exceeded",
        status_code: int | None = 429,
        body: str = "",
    ):
        self.reset_at = reset_at
        self.retry_after = retry_after
        super().__init__(
            f"{message}. Resets at {reset_at.isoformat()}",
            status_code=status_code,
            body=body,
        )


class UpstreamServerError(GitHubClientError):
    """Upstream 5xx."""


class TransportError(GitHubClientError):
    """Network-level failure (timeout, connection refused, DNS)."""


class MalformedResponseError(GitHubClientError):
    """Response body was not the JSON array of objects a listing endpoint returns."""


@dataclass(frozen=True)
class UpstreamResponse:
    """Status, headers and decoded JSON array of one upstream response."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: list[dict[str, Any]] = field(default_factory=list)

    @property
    def link(self) -> str | None:
        return self.headers.get("link")


class GitHubClient:
    """GitHub REST API client using httpx with optional Bearer token auth.

    Uses a long-lived httpx.AsyncClient with connection pooling, so one
    instance can serve many concurrent requests.

    Attributes:
        base_url: GitHub API base URL (default: https://api.github.com)
        _rate_limit_remaining: Tracked from X-RateLimit-Remaining header
        _rate_limit_reset: Tracked from X-RateLimit-Reset header

    Example:
        >>> async with GitHubClient(token="ghp_token") as client:
        ...     response = await client.get("/users/octocat/repos", params={"per_page": 100})
        ...     names = [repo["name"] for repo in response.body]
    """

    BASE_URL = "https://api.github.com"
    API_VERSION = "2022-11-28"
    USER_AGENT = "gh-activity/1.2"

    CONNECT_TIMEOUT = 5.0  # seconds
    READ_TIMEOUT = 30.0  # seconds
    WRITE_TIMEOUT = 5.0  # seconds
    POOL_TIMEOUT = 5.0  # seconds

    # Fallback wait when a rate-limit response carries no usable headers
    DEFAULT_RETRY_AFTER = 60  # seconds

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        api_version: str = API_VERSION,
        user_agent: str = USER_AGENT,
        timeout: httpx.Timeout | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize GitHub client.

        Args:
            token: GitHub Personal Access Token; omitted or blank means
                unauthenticated requests
            base_url: GitHub API base URL (default: https://api.github.com)
            api_version: X-GitHub-Api-Version header value
            user_agent: User-Agent header value
            timeout: httpx timeout (default: 5s connect, 30s read)
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")

        self._rate_limit_remaining: int | None = None
        self._rate_limit_reset: float | None = None

        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": api_version,
            "User-Agent": user_agent,
        }
        if token and token.strip():
            headers["Authorization"] = f"Bearer {token.strip()}"

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout
            or httpx.Timeout(
                connect=self.CONNECT_TIMEOUT,
                read=self.READ_TIMEOUT,
                write=self.WRITE_TIMEOUT,
                pool=self.POOL_TIMEOUT,
            ),
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: Any, transport: httpx.AsyncBaseTransport | None = None) -> "GitHubClient":
        """Build a client from an ActivityConfig."""
        return cls(
            token=config.get_token(),
            base_url=config.github_base_url,
            api_version=config.github_api_version,
            user_agent=config.github_user_agent,
            timeout=httpx.Timeout(
                connect=config.github_connect_timeout,
                read=config.github_read_timeout,
                write=config.github_write_timeout,
                pool=config.github_pool_timeout,
            ),
            transport=transport,
        )

    async def __aenter__(self) -> "GitHubClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit -- close httpx client."""
        await self.close()

    async def close(self) -> None:
        """Close the httpx client and release connections."""
        await self._client.aclose()

    def owns_url(self, url: str) -> bool:
        """True if an absolute URL points at this client's API base."""
        return url.startswith(self.base_url + "/")

    # --- Core HTTP ---

    async def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> UpstreamResponse:
        """Issue one GET and decode the JSON array body.

        Args:
            path: API path (e.g. /users/octocat/repos) or an absolute URL
                taken from a Link header
            params: Query parameters (omit when the URL already carries them)

        Returns:
            UpstreamResponse with lower-cased header names

        Raises:
            NotFoundError: 404
            ConflictError: 409
            RateLimitExceeded: 429, or 403 with X-RateLimit-Remaining: 0
            UpstreamServerError: 5xx
            GitHubClientError: Any other non-2xx status
            TransportError: Timeouts and connection failures
            MalformedResponseError: Body is not a JSON array of objects
        """
        endpoint = endpoint_label(path)
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            upstream_requests_total.labels(endpoint=endpoint, status="error").inc()
            logger.warning("GitHub request failed: %s %s", path, e)
            raise TransportError(f"HTTP error: {e}") from e

        upstream_requests_total.labels(
            endpoint=endpoint, status=str(response.status_code)
        ).inc()
        self._update_rate_limits(response)

        if response.status_code >= 400:
            self._raise_for_status(response)

        headers = {k.lower(): v for k, v in response.headers.items()}
        return UpstreamResponse(
            status_code=response.status_code,
            headers=headers,
            body=self._decode_body(response, path),
        )

    def _decode_body(
        self, response: httpx.Response, path: str
    ) -> list[dict[str, Any]]:
        if not response.content:
            return []
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"GitHub API returned non-JSON body for {path}",
                status_code=response.status_code,
                body=response.text,
            ) from e
        if data is None:
            return []
        if not isinstance(data, list):
            raise MalformedResponseError(
                f"GitHub API returned {type(data).__name__}, expected a list",
                status_code=response.status_code,
                body=response.text,
            )
        if not all(isinstance(item, dict) for item in data):
            raise MalformedResponseError(
                f"GitHub API returned non-object items for {path}",
                status_code=response.status_code,
                body=response.text,
            )
        return data

    def _raise_for_status(self, response: httpx.Response) -> None:
        status = response.status_code
        text = response.text
        message = self._error_message(response)

        if status == 429 or (
            status == 403 and response.headers.get("X-RateLimit-Remaining") == "0"
        ):
            retry_after = self._retry_after_seconds(response)
            reset_at = datetime.fromtimestamp(time.time() + retry_after, tz=timezone.utc)
            logger.warning(
                "Rate limit hit (status %d). Retry after %ds", status, retry_after
            )
            raise RateLimitExceeded(
                reset_at,
                retry_after=retry_after,
                message=f"GitHub API error {status}: {message}",
                status_code=status,
                body=text,
            )

        if status == 404:
            raise NotFoundError(
                f"GitHub API error 404: {message}", status_code=status, body=text
            )
        if status == 409:
            raise ConflictError(
                f"GitHub API error 409: {message}", status_code=status, body=text
            )
        if status >= 500:
            raise UpstreamServerError(
                f"GitHub API server error {status}: {message}",
                status_code=status,
                body=text,
            )
        raise GitHubClientError(
            f"GitHub API error {status}: {message}", status_code=status, body=text
        )

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            error_body = response.json() if response.content else {}
        except (ValueError, UnicodeDecodeError):
            error_body = {}
        if isinstance(error_body, dict) and error_body.get("message"):
            return str(error_body["message"])
        return response.text

    def _retry_after_seconds(self, response: httpx.Response) -> int:
        retry_after = response.headers.get("Retry-After")
        if retry_after is not None:
            try:
                return max(0, int(retry_after))
            except ValueError:
                logger.warning("Non-numeric Retry-After header: %r", retry_after)

        reset = response.headers.get("X-RateLimit-Reset")
        if reset is not None:
            try:
                return max(0, int(float(reset) - time.time()))
            except ValueError:
                logger.warning("Non-numeric X-RateLimit-Reset header: %r", reset)

        return self.DEFAULT_RETRY_AFTER

    # --- Rate limit tracking ---

    def _update_rate_limits(self, response: httpx.Response) -> None:
        """Update rate limit tracking from response headers.

        Args:
            response: httpx response with rate limit headers
        """
        remaining = response.headers.get("X-RateLimit-Remaining")
        if remaining is not None:
            try:
                self._rate_limit_remaining = int(remaining)
                upstream_rate_limit_remaining.set(self._rate_limit_remaining)
            except ValueError:
                logger.warning(
                    "Non-numeric X-RateLimit-Remaining header: %r", remaining
                )

        reset = response.headers.get("X-RateLimit-Reset")
        if reset is not None:
            try:
                self._rate_limit_reset = float(reset)
            except ValueError:
                logger.warning("Non-numeric X-RateLimit-Reset header: %r", reset)

        if (
            self._rate_limit_remaining is not None
            and self._rate_limit_remaining % 500 == 0
        ):
            logger.info(
                "Rate limit status: %d remaining, resets at %s",
                self._rate_limit_remaining,
                (
                    datetime.fromtimestamp(
                        self._rate_limit_reset, tz=timezone.utc
                    ).isoformat()
                    if self._rate_limit_reset
                    else "unknown"
                ),
            )

    def get_rate_limit_status(self) -> dict[str, Any]:
        """Get current rate limit status for metrics/logging.

        Returns:
            Dict with primary_remaining and primary_reset
        """
        return {
            "primary_remaining": self._rate_limit_remaining,
            "primary_reset": self._rate_limit_reset,
        }
