"""Map GitHub REST JSON objects to activity models.

Pure functions. Missing or null keys map to empty/default values; a payload
is never rejected for being incomplete.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from gh_activity.models import CommitRecord, RepositorySummary

logger = logging.getLogger("gh_activity.github.mappers")


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a GitHub ISO 8601 timestamp ("2024-01-01T12:00:00Z").

    Values without an offset are taken as UTC. Returns None for missing or
    unparseable values.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("unparseable_timestamp", extra={"value": value})
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def map_repository(raw: dict[str, Any]) -> RepositorySummary:
    """Map one item of a ``/users/{u}/repos`` or ``/orgs/{o}/repos`` listing."""
    return RepositorySummary(
        name=_text(raw.get("name")),
        full_name=_text(raw.get("full_name")),
        is_private=raw.get("private") is True,
        is_fork=raw.get("fork") is True,
        html_url=_text(raw.get("html_url")),
        default_branch=_text(raw.get("default_branch")),
    )


def map_commit(raw: dict[str, Any]) -> CommitRecord:
    """Map one item of a ``/repos/{owner}/{repo}/commits`` listing."""
    commit = _mapping(raw.get("commit"))
    author = _mapping(commit.get("author"))
    return CommitRecord(
        sha=_text(raw.get("sha")),
        message=_text(commit.get("message")),
        author_name=_text(author.get("name")),
        author_email=_text(author.get("email")),
        timestamp=parse_timestamp(author.get("date")),
        html_url=_text(raw.get("html_url")),
    )
