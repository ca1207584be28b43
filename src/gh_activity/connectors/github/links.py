"""RFC 5988 Link header parsing for GitHub pagination.

Format: <https://api.github.com/...?page=2>; rel="next", <...?page=5>; rel="last"

Parsing is best effort: malformed entries are skipped, never raised on, so a
bad header degrades to "no next page" and zero total pages.
"""

import re
from dataclasses import dataclass, field

__all__ = ["PageCursor", "parse_link_header", "page_number"]

_LINK_ENTRY = re.compile(r'<([^>]*)>\s*;\s*rel\s*=\s*"?([^",;]+)"?')
# A real "page" query parameter, not the tail of "per_page"
_PAGE_PARAM = re.compile(r"[?&]page=(\d+)")
_PAGE_FALLBACK = re.compile(r"page=(\d+)")


@dataclass(frozen=True)
class PageCursor:
    """Relations from one response's Link header.

    Rebuilt from every upstream response; never persisted.
    """

    relations: dict[str, str] = field(default_factory=dict)

    @property
    def next_url(self) -> str | None:
        return self.relations.get("next")

    @property
    def last_url(self) -> str | None:
        return self.relations.get("last")

    @property
    def has_next(self) -> bool:
        return self.next_url is not None

    @property
    def total_pages(self) -> int:
        """Page number of the ``last`` relation, or 0 when unknown."""
        if self.last_url is None:
            return 0
        return page_number(self.last_url)


def page_number(url: str) -> int:
    """Extract the ``page`` query parameter from a URL (0 when absent)."""
    match = _PAGE_PARAM.search(url) or _PAGE_FALLBACK.search(url)
    if match is None:
        return 0
    return int(match.group(1))


def parse_link_header(value: str | None) -> PageCursor:
    """Parse a Link header into named relations.

    If a relation appears more than once the last occurrence wins.

    Args:
        value: Raw Link header value, or None when the header is absent

    Returns:
        PageCursor (empty when the header is absent or unparseable)
    """
    if not value:
        return PageCursor()

    relations: dict[str, str] = {}
    # finditer rather than split(","): URLs may contain commas
    for match in _LINK_ENTRY.finditer(value):
        url, rel = match.group(1).strip(), match.group(2).strip()
        # rel may hold several space-separated names, e.g. rel="next last"
        for name in rel.split():
            relations[name] = url
    return PageCursor(relations=relations)
