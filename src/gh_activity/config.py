"""Configuration management with pydantic-settings for gh-activity.

Loads from (in order of precedence):
1. Environment variables (highest priority)
2. .env file in the working directory
3. Default values (lowest priority)

The config object is frozen after load so it can be shared freely between
concurrent requests.
"""

import logging
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("gh_activity.config")

__all__ = [
    "DEFAULT_BASE_URL",
    "VALID_LOG_LEVELS",
    "ActivityConfig",
    "get_config",
    "reset_config",
]

DEFAULT_BASE_URL = "https://api.github.com"
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ActivityConfig(BaseSettings):
    """Configuration for the repository activity aggregator.

    Attributes:
        github_base_url: GitHub REST API base URL
        github_token: Optional PAT; requests are anonymous when blank
        github_api_version: Value of the X-GitHub-Api-Version header
        github_user_agent: User-Agent sent upstream
        github_connect_timeout: httpx connect timeout (seconds)
        github_read_timeout: httpx read timeout (seconds)
        github_write_timeout: httpx write timeout (seconds)
        github_pool_timeout: httpx pool timeout (seconds)
        github_per_page: Page size for exhaustive repository listings
        github_max_pages: Safety ceiling on upstream pages per listing
        worker_pool_size: Capacity of the shared commit-fetch worker pool
        default_page_size: Repositories per page when the caller omits size
        default_commit_limit: Commits per repository when the caller omits limit
        api_host: Bind host for the REST service
        api_port: Bind port for the REST service
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format (json for production, text for development)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        validate_default=True,
        frozen=True,
        extra="ignore",
    )

    # --- Upstream (GitHub REST API) ---
    github_base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="GitHub REST API base URL (GitHub Enterprise: https://host/api/v3)",
    )
    github_token: SecretStr = Field(
        default=SecretStr(""),
        description="GitHub PAT. Blank means unauthenticated (60 requests/hour).",
    )
    github_api_version: str = Field(
        default="2022-11-28",
        description="X-GitHub-Api-Version header value",
    )
    github_user_agent: str = Field(
        default="gh-activity/1.2",
        description="User-Agent header value",
    )
    github_connect_timeout: float = Field(default=5.0, gt=0, le=120)
    github_read_timeout: float = Field(default=30.0, gt=0, le=300)
    github_write_timeout: float = Field(default=5.0, gt=0, le=120)
    github_pool_timeout: float = Field(default=5.0, gt=0, le=120)
    github_per_page: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Items per upstream page when listing every repository",
    )
    github_max_pages: int = Field(
        default=10000,
        ge=1,
        description="Upper bound on pages followed by one exhaustive listing",
    )

    # --- Aggregation ---
    worker_pool_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Concurrent commit fetches shared across all requests",
    )
    default_page_size: int = Field(default=20, ge=1, le=100)
    default_commit_limit: int = Field(default=20, ge=1, le=100)

    # --- REST service ---
    api_host: str = Field(default="127.0.0.1")
    api_port: int = Field(default=8080, ge=1, le=65535)

    # --- Logging ---
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json", pattern="^(json|text)$")

    @field_validator("github_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(VALID_LOG_LEVELS)}, got {v!r}"
            )
        return level

    def get_token(self) -> str | None:
        """Return the configured token, or None when blank."""
        token = self.github_token.get_secret_value().strip()
        return token or None


@lru_cache(maxsize=1)
def get_config() -> ActivityConfig:
    """Get global configuration singleton.

    First call loads from environment + .env file, subsequent calls return the
    cached instance.

    Raises:
        ValidationError: If configuration values are invalid.
    """
    return ActivityConfig()


def reset_config() -> None:
    """Reset configuration singleton (test helper)."""
    get_config.cache_clear()
