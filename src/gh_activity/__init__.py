"""gh-activity - aggregated repository and commit activity for GitHub accounts.

Given a user or organization name, discovers every accessible repository
(user namespace first, organization namespace as fallback), fetches each
repository's most recent commits concurrently over a bounded worker pool,
and pages the combined result.

Python Version: 3.10+ required
"""

# Logging Configuration - configure before other imports
from .logging_config import StructuredFormatter, configure_logging

configure_logging()

from .__version__ import __version__
from .aggregator import ActivityAggregator, WorkerPool
from .config import ActivityConfig, get_config, reset_config
from .models import (
    CommitRecord,
    PageResult,
    RepositoryActivity,
    RepositorySummary,
    UpstreamPage,
)
from .pagination import paginate
from .service import ActivityService

__all__ = [
    "ActivityAggregator",
    "ActivityConfig",
    "ActivityService",
    "CommitRecord",
    "PageResult",
    "RepositoryActivity",
    "RepositorySummary",
    "StructuredFormatter",
    "UpstreamPage",
    "WorkerPool",
    "__version__",
    "configure_logging",
    "get_config",
    "paginate",
    "reset_config",
]
