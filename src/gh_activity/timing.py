"""Duration logging for the activity service flows.

ActivityService wraps each flow (``fetch_activity``, ``fetch_activity_page``)
in timed_operation so every request leaves one ``<flow>_completed`` or
``<flow>_failed`` record carrying the caller's username, paging arguments and
the wall time spent on repository discovery plus commit aggregation.
"""

import logging
import time
from contextlib import contextmanager
from typing import Optional


@contextmanager
def timed_operation(
    operation: str,
    logger: logging.Logger,
    level: int = logging.INFO,
    extra: Optional[dict] = None,
):
    """Log how long the enclosed block took.

    Upstream errors are logged as ``{operation}_failed`` with their type and
    then propagate unchanged, so the API error handlers still see them.

    Args:
        operation: Flow name, e.g. "fetch_activity_page"
        logger: Logger of the calling module
        level: Level of the ``_completed`` record
        extra: Request context (username, page, size, limit)

    Example:
        >>> with timed_operation("fetch_activity", logger, extra={"username": "octocat"}):
        ...     repos = await resolver.resolve_all("octocat")
    """
    context = dict(extra or {})
    started = time.perf_counter()

    def elapsed_ms() -> float:
        return round((time.perf_counter() - started) * 1000, 2)

    try:
        yield
    except Exception as e:
        logger.error(
            f"{operation}_failed",
            extra={
                **context,
                "duration_ms": elapsed_ms(),
                "status": "failed",
                "error": str(e),
                "error_type": type(e).__name__,
            },
        )
        raise

    logger.log(
        level,
        f"{operation}_completed",
        extra={**context, "duration_ms": elapsed_ms(), "status": "success"},
    )
