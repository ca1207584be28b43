"""
Prometheus metrics definitions for gh-activity.

Counters, gauges and histograms for upstream traffic, namespace fallback,
and commit aggregation. Naming: snake_case with a gh_activity_ prefix.
"""

from prometheus_client import Counter, Gauge, Histogram

# ==============================================================================
# COUNTERS
# ==============================================================================

upstream_requests_total = Counter(
    "gh_activity_upstream_requests_total",
    "Total requests sent to the GitHub REST API",
    ["endpoint", "status"],
    # endpoint: repos, commits, other
    # status: HTTP status code, or "error" for transport failures
)

namespace_fallbacks_total = Counter(
    "gh_activity_namespace_fallbacks_total",
    "Repository listings retried under the organization namespace",
    ["mode"],
    # mode: all, page
)

empty_repositories_total = Counter(
    "gh_activity_empty_repositories_total",
    "Commit listings answered with 409 'Git Repository is empty'",
)

repositories_aggregated_total = Counter(
    "gh_activity_repositories_aggregated_total",
    "Repositories whose recent commits were aggregated",
)

# ==============================================================================
# GAUGES
# ==============================================================================

worker_pool_in_flight = Gauge(
    "gh_activity_worker_pool_in_flight",
    "Commit fetches currently holding a worker pool slot",
)

upstream_rate_limit_remaining = Gauge(
    "gh_activity_upstream_rate_limit_remaining",
    "Primary rate limit quota left, from the last X-RateLimit-Remaining header",
)

# ==============================================================================
# HISTOGRAMS
# ==============================================================================

aggregation_duration_seconds = Histogram(
    "gh_activity_aggregation_duration_seconds",
    "Wall time of one fan-out/fan-in commit aggregation",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
)


def endpoint_label(path: str) -> str:
    """Collapse a request path into a low-cardinality metric label."""
    if "/commits" in path:
        return "commits"
    if path.rstrip("/").endswith("/repos") or "/repos?" in path:
        return "repos"
    return "other"
