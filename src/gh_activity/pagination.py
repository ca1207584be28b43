"""In-process pagination of an already-fetched ordered collection."""

from collections.abc import Sequence
from typing import TypeVar

from gh_activity.models import PageResult

T = TypeVar("T")


def page_bounds(page_number: int, page_size: int, total: int) -> tuple[int, int]:
    """Half-open ``[start, end)`` index range of a page, clamped to ``total``."""
    start = page_number * page_size
    return start, min(start + page_size, total)


def paginate(items: Sequence[T], page_number: int, page_size: int) -> PageResult[T]:
    """Slice a zero-indexed page out of ``items``.

    Callers validate ``page_number >= 0`` and ``page_size >= 1``. A page past
    the end is not an error: it comes back with empty content and the
    requested page number/size and true total.
    """
    total = len(items)
    start, end = page_bounds(page_number, page_size, total)
    if start >= total:
        content: tuple[T, ...] = ()
    else:
        content = tuple(items[start:end])
    return PageResult(
        content=content,
        page_number=page_number,
        page_size=page_size,
        total_elements=total,
    )
