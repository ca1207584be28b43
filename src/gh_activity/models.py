"""Data models for repository activity.

Value objects built from GitHub REST payloads plus the page wrappers used by
the in-process paginator (PageResult) and the single upstream page listing
(UpstreamPage). All models are frozen dataclasses.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, TypeVar

__all__ = [
    "CommitRecord",
    "PageResult",
    "RepositoryActivity",
    "RepositorySummary",
    "UpstreamPage",
]

T = TypeVar("T")


@dataclass(frozen=True)
class RepositorySummary:
    """Identity and metadata for one repository."""

    name: str = ""
    full_name: str = ""
    is_private: bool = False
    is_fork: bool = False
    html_url: str = ""
    default_branch: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "fullName": self.full_name,
            "isPrivate": self.is_private,
            "fork": self.is_fork,
            "htmlUrl": self.html_url,
            "defaultBranch": self.default_branch,
        }


@dataclass(frozen=True)
class CommitRecord:
    """One commit as listed by the upstream commits endpoint.

    ``timestamp`` is the author date (timezone-aware) or None when the
    payload carried no date.
    """

    sha: str = ""
    message: str = ""
    author_name: str = ""
    author_email: str = ""
    timestamp: datetime | None = None
    html_url: str = ""

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]

    def to_dict(self) -> dict[str, Any]:
        return {
            "sha": self.sha,
            "message": self.message,
            "authorName": self.author_name,
            "authorEmail": self.author_email,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "htmlUrl": self.html_url,
        }


@dataclass(frozen=True)
class RepositoryActivity:
    """A repository paired with its most recent commits (newest first)."""

    repository: RepositorySummary
    commits: tuple[CommitRecord, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "repository": self.repository.to_dict(),
            "commits": [commit.to_dict() for commit in self.commits],
        }


@dataclass(frozen=True)
class PageResult(Generic[T]):
    """A zero-indexed window over an ordered sequence.

    ``page_number``, ``page_size`` and ``total_elements`` are reported as
    given, even when the page lies past the end of the sequence (in which
    case ``content`` is empty).
    """

    content: tuple[T, ...]
    page_number: int
    page_size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_elements / self.page_size)

    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages - 1

    @property
    def has_previous(self) -> bool:
        return self.page_number > 0

    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @property
    def is_empty(self) -> bool:
        return not self.content

    def to_dict(self) -> dict[str, Any]:
        """Render as a JSON-ready dict (items rendered via their to_dict)."""
        return {
            "content": [
                item.to_dict() if hasattr(item, "to_dict") else item
                for item in self.content
            ],
            "pageNumber": self.page_number,
            "pageSize": self.page_size,
            "totalElements": self.total_elements,
            "totalPages": self.total_pages,
            "numberOfElements": self.number_of_elements,
            "hasNext": self.has_next,
            "hasPrevious": self.has_previous,
            "empty": self.is_empty,
        }


@dataclass(frozen=True)
class UpstreamPage(Generic[T]):
    """One upstream listing page plus the metadata from its Link header.

    ``current_page`` is 1-indexed, as upstream pages are.
    """

    items: tuple[T, ...] = field(default_factory=tuple)
    total_pages: int = 0
    current_page: int = 1
    has_next: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.items

    def to_dict(self) -> dict[str, Any]:
        return {
            "repos": [
                item.to_dict() if hasattr(item, "to_dict") else item
                for item in self.items
            ],
            "totalPages": self.total_pages,
            "currentPage": self.current_page,
            "hasNext": self.has_next,
        }
