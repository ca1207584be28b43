#!/usr/bin/env python3
"""GitHub activity CLI.

Prints the repositories of a GitHub user (or organization) with their most
recent commits.

Usage:
    github_activity.py --username octocat               # all repositories
    github_activity.py --username octocat --limit 5     # 5 commits per repository
    github_activity.py --username octocat --page 0 --size 10
    github_activity.py --username octocat --json        # machine-readable output
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from gh_activity.aggregator import WorkerPool
from gh_activity.config import get_config
from gh_activity.connectors.github.client import GitHubClient, GitHubClientError
from gh_activity.logging_config import configure_logging
from gh_activity.service import ActivityService


def print_activity(username: str, activities, limit: int) -> None:
    """Render repository activity as plain text."""
    print(f"Username: {username} | Repositories: {len(activities)} | Limit: {limit}")
    for activity in activities:
        repo = activity.repository
        print(f"Repo: {repo.full_name} ({repo.html_url}) commits={len(activity.commits)}")
        for commit in activity.commits:
            timestamp = commit.timestamp.isoformat() if commit.timestamp else ""
            print(f"  - {commit.sha} | {timestamp} | {commit.summary}")


async def run(config, args) -> int:
    """Fetch and print activity. Returns the process exit code."""
    pool = WorkerPool(config.worker_pool_size)
    async with GitHubClient.from_config(config) as client:
        service = ActivityService.build(client, pool, config)
        try:
            if args.page is not None:
                result = await service.fetch_activity_page(
                    args.username, args.limit, args.page, args.size
                )
                activities = list(result.content)
                payload = result.to_dict()
            else:
                activities = await service.fetch_activity(args.username, args.limit)
                payload = [activity.to_dict() for activity in activities]
        except GitHubClientError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

    if args.json:
        print(json.dumps(payload, indent=2))
    else:
        print_activity(args.username, activities, args.limit)
        if args.page is not None:
            print(
                f"Page {result.page_number + 1} of {result.total_pages} "
                f"({result.total_elements} repositories)"
            )
    return 0


def _bounded(low: int, high: int | None = None):
    def parse(value: str) -> int:
        number = int(value)
        if number < low or (high is not None and number > high):
            upper = f"..{high}" if high is not None else "+"
            raise argparse.ArgumentTypeError(f"must be in {low}{upper}")
        return number

    return parse


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    config = get_config()
    configure_logging(config.log_level, config.log_format)

    parser = argparse.ArgumentParser(
        description="Show recent commit activity for a GitHub user or organization",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --username octocat                  # every repository, 20 commits each
  %(prog)s --username octocat --limit 5        # 5 commits per repository
  %(prog)s --username github --page 1 --size 10

Configuration:
  Set in environment or .env:
    GITHUB_TOKEN=ghp_your_token_here      # optional, raises rate limits
    WORKER_POOL_SIZE=10
    LOG_LEVEL=DEBUG                       # package log level
    LOG_FORMAT=text                       # json (default) or text
        """,
    )
    parser.add_argument("--username", required=True, help="GitHub user or organization")
    parser.add_argument(
        "--limit",
        type=_bounded(1, 100),
        default=config.default_commit_limit,
        help="Commits per repository (1-100)",
    )
    parser.add_argument(
        "--page",
        type=_bounded(0),
        default=None,
        help="Zero-indexed page of repositories (default: all repositories)",
    )
    parser.add_argument(
        "--size",
        type=_bounded(1, 100),
        default=config.default_page_size,
        help="Repositories per page (1-100), used with --page",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")

    args = parser.parse_args(argv)
    if not args.username.strip():
        parser.error("--username must not be blank")

    return asyncio.run(run(config, args))


if __name__ == "__main__":
    sys.exit(main())
