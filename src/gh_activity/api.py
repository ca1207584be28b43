"""gh-activity REST API.

FastAPI service exposing repository activity:
- GET /api/github/activity/{username}   paginated repositories + recent commits
- GET /api/github/repo/{username}       paginated repository listing
- GET /api/github/repo/{username}/page  one upstream page of repositories
- GET /api/health/status                liveness
- /metrics                              Prometheus exposition

Query parameter bounds are enforced here; the service layer trusts them.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import make_asgi_app

from gh_activity.__version__ import __version__
from gh_activity.aggregator import WorkerPool
from gh_activity.config import ActivityConfig, get_config
from gh_activity.connectors.github.client import GitHubClient, GitHubClientError, RateLimitExceeded
from gh_activity.logging_config import configure_logging
from gh_activity.service import ActivityService

logger = logging.getLogger("gh_activity.api")


def _error_body(status: int, error: str, message: str, **extra: Any) -> dict[str, Any]:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": status,
        "error": error,
        "message": message,
        **extra,
    }


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(
        "upstream_rate_limited",
        extra={"path": request.url.path, "retry_after": exc.retry_after},
    )
    headers = {"Retry-After": str(exc.retry_after)} if exc.retry_after is not None else None
    return JSONResponse(
        status_code=429,
        content=_error_body(
            429,
            "Rate limit exceeded",
            str(exc),
            retryAfter=exc.retry_after,
        ),
        headers=headers,
    )


async def upstream_error_handler(request: Request, exc: GitHubClientError) -> JSONResponse:
    logger.error(
        "upstream_error",
        extra={
            "path": request.url.path,
            "upstream_status": exc.status_code,
            "error_type": type(exc).__name__,
            "error": str(exc),
        },
    )
    return JSONResponse(
        status_code=502,
        content=_error_body(502, "Upstream Error", str(exc)),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=_error_body(400, "Validation Error", str(exc.errors())),
    )


def create_app(
    config: ActivityConfig | None = None,
    service: ActivityService | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Settings (default: get_config())
        service: Pre-built service; when omitted the lifespan builds one
            around a shared GitHubClient and WorkerPool and closes the client
            on shutdown
    """
    config = config or get_config()
    configure_logging(config.log_level, config.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if service is not None:
            app.state.service = service
            yield
            return

        pool = WorkerPool(config.worker_pool_size)
        async with GitHubClient.from_config(config) as client:
            app.state.service = ActivityService.build(client, pool, config)
            logger.info(
                "service_started",
                extra={
                    "base_url": client.base_url,
                    "worker_pool_size": pool.size,
                },
            )
            yield
            logger.info("service_stopped", extra=client.get_rate_limit_status())

    app = FastAPI(
        title="gh-activity",
        description="Aggregated repository and commit activity for GitHub accounts",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(GitHubClientError, upstream_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.mount("/metrics", make_asgi_app())

    @app.get("/api/github/activity/{username}", tags=["GitHub"])
    async def get_activity(
        request: Request,
        username: str,
        page: int = Query(0, ge=0),
        size: int = Query(config.default_page_size, ge=1, le=100),
        limit: int = Query(config.default_commit_limit, ge=1, le=100),
    ) -> dict[str, Any]:
        result = await request.app.state.service.fetch_activity_page(
            username, limit, page, size
        )
        logger.info(
            "activity_served",
            extra={
                "username": username,
                "page": page,
                "repositories": result.number_of_elements,
                "total_pages": result.total_pages,
            },
        )
        return result.to_dict()

    @app.get("/api/github/repo/{username}", tags=["GitHub"])
    async def get_repositories(
        request: Request,
        username: str,
        page: int = Query(0, ge=0),
        size: int = Query(10, ge=1, le=100),
    ) -> dict[str, Any]:
        result = await request.app.state.service.list_repositories(username, page, size)
        return result.to_dict()

    @app.get("/api/github/repo/{username}/page", tags=["GitHub"])
    async def get_repositories_by_page(
        request: Request,
        username: str,
        page: int = Query(1, ge=1),
        per_page: int = Query(30, ge=1, le=100),
    ) -> dict[str, Any]:
        result = await request.app.state.service.list_repositories_by_page(
            username, page, per_page
        )
        return result.to_dict()

    @app.get("/api/health/status", tags=["Health"], response_class=PlainTextResponse)
    async def health_status() -> str:
        logger.debug("health_checked")
        return "Health OK"

    return app


def main() -> None:
    """Serve the API with uvicorn using host/port from configuration."""
    import uvicorn

    config = get_config()
    uvicorn.run(
        create_app(config),
        host=config.api_host,
        port=config.api_port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
