"""Configuration parsing and validation for ghprod."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError
from .models import TerminalState

# GitHub allows 60 requests/hour unauthenticated and 5000/hour with a token.
UNAUTHENTICATED_PAGE_DELAY_SECONDS = 60.0
AUTHENTICATED_PAGE_DELAY_SECONDS = 3600.0 / 5000


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used by ghprod."""

    owner: str
    repo: str
    token: Optional[str]
    terminal_state: TerminalState
    page_delay_seconds: float


def load_config(
    owner: str,
    repo: str,
    api_secret: Optional[str] = None,
    terminal_state: Optional[TerminalState] = None,
    page_delay_seconds: Optional[float] = None,
) -> Config:
    """Build and validate application configuration.

    Args:
        owner: Repository owner (user or organization login).
        repo: Repository name.
        api_secret: Explicit GitHub token; falls back to ``GITHUB_TOKEN``.
        terminal_state: Which event marks a PR as done (default: merged).
        page_delay_seconds: Delay between page requests. When omitted it is
            derived from whether a token is available.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If owner/repo are blank or the delay is negative or
            not finite.
    """
    owner = (owner or "").strip()
    repo = (repo or "").strip()
    if not owner or not repo:
        raise ConfigurationError("Both a repository owner and a repository name are required.")

    token: Optional[str] = (api_secret or os.getenv("GITHUB_TOKEN", "")).strip() or None

    if page_delay_seconds is None:
        page_delay_seconds = (
            AUTHENTICATED_PAGE_DELAY_SECONDS if token else UNAUTHENTICATED_PAGE_DELAY_SECONDS
        )
    elif not math.isfinite(page_delay_seconds) or page_delay_seconds < 0:
        raise ConfigurationError(
            "Invalid value for 'page_delay_seconds': expected a finite number greater than or equal to 0."
        )

    return Config(
        owner=owner,
        repo=repo,
        token=token,
        terminal_state=terminal_state or TerminalState.MERGED,
        page_delay_seconds=float(page_delay_seconds),
    )
