"""Exhaustive, rate-limited retrieval of a repository's pull request history.

ghprod frontloads all data retrieval: the full history is fetched once per run
and every metric is computed over that in-memory list afterwards.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Protocol

import requests

from .config import UNAUTHENTICATED_PAGE_DELAY_SECONDS
from .errors import ApiError, RetrievalError
from .models import Page, PullRequest

logger = logging.getLogger(__name__)


class PullRequestSource(Protocol):
    """The two client operations the retriever relies on."""

    def list_pull_requests(self, owner: str, repo: str) -> Page:
        ...

    def get_page(self, cursor: str) -> Page:
        ...


async def fetch_all(
    owner: str,
    repo: str,
    client: PullRequestSource,
    page_delay_seconds: float = UNAUTHENTICATED_PAGE_DELAY_SECONDS,
) -> List[PullRequest]:
    """Return every pull request (open, closed and merged) of ``owner/repo``.

    Pages are followed until one arrives without a next cursor. Before each
    follow-up request the task sleeps for ``page_delay_seconds``; the delay is
    fixed and does not look at rate-limit headers. Page order and intra-page
    order are preserved in the result.

    Client calls are blocking, so they run in a worker thread and the event
    loop is only ever suspended cooperatively.

    Raises:
        ValueError: If ``owner`` or ``repo`` is empty.
        RetrievalError: If any page request fails. Nothing already buffered
            is returned and no retry is attempted.
    """
    if not owner or not repo:
        raise ValueError("owner and repo must be non-empty")

    pull_requests: List[PullRequest] = []
    num_pages = 0
    cursor: Optional[str] = None

    try:
        page = await asyncio.to_thread(client.list_pull_requests, owner, repo)

        while True:
            num_pages += 1
            logger.info("Fetched page %d", num_pages, extra={"owner": owner, "repo": repo})

            if not page.items and page.next_cursor is not None:
                logger.warning(
                    "Received empty page that still has a next cursor",
                    extra={"owner": owner, "repo": repo, "page": num_pages},
                )
            pull_requests.extend(page.items)

            cursor = page.next_cursor
            if cursor is None:
                break

            logger.debug("Sleeping for %s seconds...", page_delay_seconds)
            await asyncio.sleep(page_delay_seconds)

            page = await asyncio.to_thread(client.get_page, cursor)
    except (ApiError, requests.RequestException) as exc:
        raise RetrievalError(
            f"Failed to retrieve pull requests for {owner}/{repo} (page {num_pages + 1})"
        ) from exc

    logger.info(
        "Retrieved %d PRs",
        len(pull_requests),
        extra={"owner": owner, "repo": repo, "pages": num_pages},
    )

    return pull_requests
