"""Domain models for GitHub pull request metrics.

These dataclasses model only the subset of API payload fields that the metrics
need. Every field other than ``number`` and ``created_at`` is optional because
the API omits it for deleted accounts, open PRs, or list responses without
detailed stats.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True, slots=True)
class PullRequest:
    """Represents one pull request as returned by the GitHub list endpoint."""

    number: int
    author: Optional[str]
    created_at: datetime
    merged_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    additions: Optional[int] = None
    deletions: Optional[int] = None


@dataclass(frozen=True, slots=True)
class Page:
    """Represents one page of pull requests and the cursor to the next one."""

    items: List[PullRequest] = field(default_factory=list)
    next_cursor: Optional[str] = None


class TerminalState(Enum):
    """Which timestamp marks a pull request as done.

    Some projects never merge successful PRs through GitHub and close them
    instead (for example when a merge bot lands the change), so the caller
    chooses which event counts as completion.
    """

    MERGED = "merged"
    CLOSED = "closed"

    @classmethod
    def parse(cls, value: str) -> TerminalState:
        """Parse a user-supplied terminal state name, case-insensitively.

        Raises:
            ValueError: If ``value`` is not a recognised spelling.
        """
        normalized = value.strip().lower()
        if normalized in ("merged", "merge", "m"):
            return cls.MERGED
        if normalized in ("closed", "close", "c"):
            return cls.CLOSED
        raise ValueError(f"Unknown terminating state: {value!r}")


class Metric(Enum):
    """A single statistic that can be requested instead of the full summary."""

    MEAN_PR_DURATION = "mean_pr_duration"
    MEDIAN_PR_DURATION = "median_pr_duration"
    MEAN_NET_CHANGE = "mean_net_change"
    TOTAL_PULL_REQUESTS = "total_num_prs"
