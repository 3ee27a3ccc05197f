"""Tests for GitHub API client behavior with mocked HTTP."""

import sys
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ghprod.config import Config
from ghprod.errors import ApiError
from ghprod.github_client import GitHubClient
from ghprod.models import TerminalState


def _build_client(token: str | None = "gh-token") -> GitHubClient:
    config = Config(
        owner="octo",
        repo="repo",
        token=token,
        terminal_state=TerminalState.MERGED,
        page_delay_seconds=0,
    )
    return GitHubClient(config=config)


def _response(
    status_code: int,
    payload=None,
    text: str = "",
    links: dict | None = None,
):
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.links = links or {}
    response.json.return_value = payload if payload is not None else []
    return response


def _pr_item(number: int, login: str | None = "alice", **fields) -> dict:
    item = {
        "number": number,
        "user": {"login": login} if login is not None else None,
        "created_at": "2026-01-01T00:00:00Z",
        "merged_at": None,
        "closed_at": None,
    }
    item.update(fields)
    return item


def test_authorization_header_only_sent_with_token():
    """Verify the bearer token is attached only when one is configured."""
    assert _build_client()._session.headers["Authorization"] == "Bearer gh-token"
    assert "Authorization" not in _build_client(token=None)._session.headers


def test_list_pull_requests_requests_all_states_with_max_page_size():
    """Verify the first page asks for every state at 100 items per page."""
    client = _build_client()
    client._session.get = Mock(return_value=_response(200, payload=[_pr_item(1)]))

    client.list_pull_requests("octo", "repo")

    args, kwargs = client._session.get.call_args
    assert args[0] == "https://api.github.com/repos/octo/repo/pulls"
    assert kwargs["params"] == {"state": "all", "per_page": 100}
    assert kwargs["timeout"] == 30


def test_list_pull_requests_parses_items_and_next_cursor():
    """Verify payload fields and the Link next URL are mapped into a Page."""
    client = _build_client()
    next_url = "https://api.github.com/repositories/1/pulls?state=all&per_page=100&page=2"
    payload = [
        _pr_item(
            7,
            merged_at="2026-01-05T12:00:00Z",
            closed_at="2026-01-05T12:00:00Z",
            additions=12,
            deletions=3,
        ),
        _pr_item(8, login=None),
    ]
    client._session.get = Mock(
        return_value=_response(200, payload=payload, links={"next": {"url": next_url, "rel": "next"}})
    )

    page = client.list_pull_requests("octo", "repo")

    assert page.next_cursor == next_url
    merged, orphaned = page.items
    assert merged.number == 7
    assert merged.author == "alice"
    assert merged.created_at == datetime(2026, 1, 1, tzinfo=timezone.utc)
    assert merged.merged_at == datetime(2026, 1, 5, 12, tzinfo=timezone.utc)
    assert merged.additions == 12
    assert merged.deletions == 3
    assert orphaned.author is None
    assert orphaned.merged_at is None
    assert orphaned.additions is None
    assert orphaned.deletions is None


def test_get_page_without_next_link_has_no_cursor():
    """Verify the last page reports no cursor and is fetched from the cursor URL as-is."""
    client = _build_client()
    client._session.get = Mock(return_value=_response(200, payload=[]))

    page = client.get_page("https://api.github.com/repositories/1/pulls?page=3")

    assert page.items == []
    assert page.next_cursor is None
    args, kwargs = client._session.get.call_args
    assert args[0] == "https://api.github.com/repositories/1/pulls?page=3"
    assert kwargs["params"] is None


def test_http_error_raises_api_error_without_retry():
    """Verify HTTP errors (including rate limiting) fail immediately."""
    client = _build_client()
    client._session.get = Mock(return_value=_response(403, text="API rate limit exceeded"))

    with pytest.raises(ApiError, match="403"):
        client.list_pull_requests("octo", "repo")

    assert client._session.get.call_count == 1


def test_transport_error_raises_api_error_with_cause():
    """Verify transport failures are wrapped in ApiError."""
    client = _build_client()
    client._session.get = Mock(side_effect=requests.ConnectionError("unreachable"))

    with pytest.raises(ApiError) as exc_info:
        client.get_page("https://api.github.com/repositories/1/pulls?page=2")

    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)


def test_invalid_json_raises_api_error():
    """Verify non-JSON bodies are reported as ApiError."""
    client = _build_client()
    response = _response(200)
    response.json.side_effect = ValueError("no json")
    client._session.get = Mock(return_value=response)

    with pytest.raises(ApiError):
        client.list_pull_requests("octo", "repo")


def test_unexpected_payload_shape_raises_api_error():
    """Verify an object payload (for example an error document) is rejected."""
    client = _build_client()
    client._session.get = Mock(return_value=_response(200, payload={"message": "Not Found"}))

    with pytest.raises(ApiError):
        client.list_pull_requests("octo", "repo")


def test_missing_created_at_raises_api_error():
    """Verify a PR without a creation timestamp is treated as a malformed response."""
    client = _build_client()
    client._session.get = Mock(return_value=_response(200, payload=[_pr_item(1, created_at=None)]))

    with pytest.raises(ApiError):
        client.list_pull_requests("octo", "repo")


@pytest.mark.parametrize(
    "item",
    [
        _pr_item(1, created_at="not-a-date"),
        _pr_item(1, additions="n/a"),
        _pr_item("one"),
        {**_pr_item(1), "user": "ghost"},
        _pr_item(1, merged_at=12345),
        "garbage",
        None,
    ],
)
def test_malformed_pull_request_fields_raise_api_error(item):
    """Verify unparseable fields or non-object items are reported as ApiError."""
    client = _build_client()
    client._session.get = Mock(return_value=_response(200, payload=[item]))

    with pytest.raises(ApiError):
        client.list_pull_requests("octo", "repo")
