"""GitHub REST API client for pull request retrieval."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from .config import Config
from .errors import ApiError
from .models import Page, PullRequest

logger = logging.getLogger(__name__)


class GitHubClient:
    """Small, typed client for the GitHub pull request list API.

    The client performs exactly one HTTP request per call and never retries;
    pacing between pages is the caller's responsibility.
    """

    _BASE_URL = "https://api.github.com"
    _API_VERSION = "2022-11-28"
    _PULL_REQUEST_PAGE_SIZE = 100

    def __init__(self, config: Config, timeout_seconds: int = 30) -> None:
        """Initialize a GitHub API client.

        Args:
            config: Validated runtime configuration. ``config.token`` is optional;
                without it requests are made anonymously.
            timeout_seconds: Per-request timeout in seconds.
        """
        self._timeout_seconds = timeout_seconds

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": self._API_VERSION,
            }
        )
        if config.token:
            self._session.headers["Authorization"] = f"Bearer {config.token}"

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self._session.close()

    def _build_url(self, path: str) -> str:
        """Build a fully qualified API URL from a path below the API root."""
        return f"{self._BASE_URL}/{path.lstrip('/')}"

    def _parse_datetime(self, value: Optional[str]) -> Optional[datetime]:
        """Parse GitHub ISO8601 timestamps into timezone-aware datetimes."""
        if not value:
            return None

        normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
        parsed = datetime.fromisoformat(normalized)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed

    def _parse_count(self, value: Any) -> Optional[int]:
        """Parse an optional line count, keeping ``None`` distinct from ``0``."""
        if value is None:
            return None
        return int(value)

    def _get_page(self, url: str, params: Optional[Dict[str, Any]] = None) -> Page:
        """Execute a single GET request and parse it into a ``Page``.

        Raises:
            ApiError: If the request fails, returns HTTP >= 400, or does not
                return a well-formed JSON list of pull requests.
        """
        try:
            response = self._session.get(url, params=params, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise ApiError(f"GitHub request failed: GET {url}") from exc

        if response.status_code >= 400:
            raise ApiError(
                "GitHub API request failed: "
                f"GET {url} returned {response.status_code} - {response.text}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiError(f"GitHub API returned invalid JSON: GET {url}") from exc

        if not isinstance(payload, list):
            raise ApiError(f"GitHub API returned unexpected payload shape: GET {url}")

        next_link = response.links.get("next") or {}
        next_cursor = next_link.get("url") or None

        logger.debug(
            "Fetched pull request page",
            extra={"url": url, "items": len(payload), "has_next": next_cursor is not None},
        )

        return Page(items=[self._parse_pull_request(item) for item in payload], next_cursor=next_cursor)

    def _parse_pull_request(self, item: Any) -> PullRequest:
        """Convert one raw pull request payload into a ``PullRequest``.

        Raises:
            ApiError: If the item is not an object, the identity or creation
                timestamp is missing, or a field has an unparseable value.
        """
        if not isinstance(item, dict):
            raise ApiError(f"GitHub pull request payload is not an object: payload={item!r}")

        try:
            number = item.get("number")
            created_at = self._parse_datetime(item.get("created_at"))

            if number is None or created_at is None:
                raise ApiError(
                    f"GitHub pull request payload is missing required fields: payload={item}"
                )

            # user is null for deleted accounts
            user = item.get("user") or {}
            login = user.get("login")

            return PullRequest(
                number=int(number),
                author=str(login) if login else None,
                created_at=created_at,
                merged_at=self._parse_datetime(item.get("merged_at")),
                closed_at=self._parse_datetime(item.get("closed_at")),
                additions=self._parse_count(item.get("additions")),
                deletions=self._parse_count(item.get("deletions")),
            )
        except (TypeError, ValueError, AttributeError) as exc:
            raise ApiError(f"GitHub pull request payload is malformed: payload={item}") from exc

    def list_pull_requests(self, owner: str, repo: str) -> Page:
        """Fetch the first page of all pull requests (open, closed and merged)."""
        params: Dict[str, Any] = {
            "state": "all",
            "per_page": self._PULL_REQUEST_PAGE_SIZE,
        }
        return self._get_page(self._build_url(f"repos/{owner}/{repo}/pulls"), params=params)

    def get_page(self, cursor: str) -> Page:
        """Fetch the page identified by an opaque cursor from a previous ``Page``."""
        return self._get_page(cursor)
