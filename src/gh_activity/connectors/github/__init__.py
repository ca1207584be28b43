"""GitHub integration package.

Provides the async REST transport, Link header parsing, the upstream pager,
namespace (user -> organization) resolution and per-repository commit
fetching used by the activity service.
"""

from .client import (
    ConflictError,
    GitHubClient,
    GitHubClientError,
    MalformedResponseError,
    NotFoundError,
    RateLimitExceeded,
    TransportError,
    UpstreamResponse,
    UpstreamServerError,
)
from .commits import EMPTY_REPOSITORY_MESSAGE, CommitFetcher
from .links import PageCursor, parse_link_header
from .mappers import map_commit, map_repository
from .namespace import ORG_NAMESPACE, USER_NAMESPACE, NamespaceResolver
from .pager import PaginationLimitExceeded, UpstreamPager

__all__ = [
    "EMPTY_REPOSITORY_MESSAGE",
    "ORG_NAMESPACE",
    "USER_NAMESPACE",
    "CommitFetcher",
    "ConflictError",
    "GitHubClient",
    "GitHubClientError",
    "MalformedResponseError",
    "NamespaceResolver",
    "NotFoundError",
    "PageCursor",
    "PaginationLimitExceeded",
    "RateLimitExceeded",
    "TransportError",
    "UpstreamPager",
    "UpstreamResponse",
    "UpstreamServerError",
    "map_commit",
    "map_repository",
    "parse_link_header",
]
