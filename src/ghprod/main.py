"""Application entry point and orchestration for ghprod."""

from __future__ import annotations

import asyncio
import logging
import os
import sys

from .cli import parse_args
from .config import load_config
from .errors import ApiError, ConfigurationError, RetrievalError
from .github_client import GitHubClient
from .report import render_metric, user_summary
from .retriever import fetch_all

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_UNEXPECTED_ERROR = 1
EXIT_CONFIGURATION_ERROR = 2
EXIT_API_ERROR = 4


def configure_logging() -> None:
    """Initialize process-wide logging from ``GHPROD_LOG_LEVEL`` (default WARNING)."""
    level_name = os.getenv("GHPROD_LOG_LEVEL", "WARNING").strip().upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def orchestrate() -> int:
    """Run a single report end to end and return a process exit code."""
    try:
        args = parse_args()
        config = load_config(
            owner=args.owner,
            repo=args.repo,
            api_secret=args.api_secret,
            terminal_state=args.pull_request_terminating_state,
            page_delay_seconds=args.page_delay,
        )

        client = GitHubClient(config=config)
        try:
            logger.info(
                "Fetching all PRs",
                extra={"owner": config.owner, "repo": config.repo},
            )
            pull_requests = asyncio.run(
                fetch_all(
                    config.owner,
                    config.repo,
                    client,
                    page_delay_seconds=config.page_delay_seconds,
                )
            )
        finally:
            client.close()

        if args.metric is not None:
            output = render_metric(args.metric, args.user, pull_requests, config.terminal_state)
        else:
            output = user_summary(
                config.owner,
                config.repo,
                args.user,
                pull_requests,
                config.terminal_state,
            )

        print(output)
        return EXIT_SUCCESS
    except ConfigurationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_CONFIGURATION_ERROR
    except (RetrievalError, ApiError) as exc:
        cause = f" (caused by: {exc.__cause__})" if exc.__cause__ is not None else ""
        print(f"ERROR: {exc}{cause}", file=sys.stderr)
        return EXIT_API_ERROR
    except Exception:
        logger.exception("Unexpected error while generating report")
        return EXIT_UNEXPECTED_ERROR


def main() -> None:
    """Console script entry point."""
    configure_logging()
    raise SystemExit(orchestrate())


if __name__ == "__main__":
    main()
