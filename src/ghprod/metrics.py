"""Per-contributor metrics over an already-retrieved pull request list.

Every function here is pure: inputs are never mutated and nothing is fetched.
Missing data is reported as ``None`` rather than raised, and ``None`` is kept
distinct from a computed zero (a user with no PRs has a count of ``0`` but no
mean duration).

Durations are reported in days as unrounded floats.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from .models import PullRequest, TerminalState

SECONDS_PER_DAY = 60 * 60 * 24


def _terminal_timestamp(pr: PullRequest, state: TerminalState) -> Optional[datetime]:
    if state is TerminalState.MERGED:
        return pr.merged_at
    return pr.closed_at


def is_terminated(pr: PullRequest, state: TerminalState = TerminalState.MERGED) -> bool:
    """Return whether ``pr`` has reached ``state``.

    Only the timestamp belonging to ``state`` is consulted; a closed but
    unmerged PR is terminated under ``CLOSED`` and not under ``MERGED``.
    """
    return _terminal_timestamp(pr, state) is not None


def terminated(
    pull_requests: Sequence[PullRequest],
    state: TerminalState = TerminalState.MERGED,
) -> List[PullRequest]:
    """Return the subset of ``pull_requests`` that have reached ``state``."""
    return [pr for pr in pull_requests if is_terminated(pr, state)]


def by_author(user: str, pull_requests: Sequence[PullRequest]) -> List[PullRequest]:
    """Return the PRs authored by ``user``, preserving order.

    PRs whose author account no longer exists never match.
    """
    return [pr for pr in pull_requests if pr.author is not None and pr.author == user]


def duration(
    pr: PullRequest,
    state: TerminalState = TerminalState.MERGED,
    *,
    now: Optional[datetime] = None,
) -> timedelta:
    """Return the time from creation until ``state`` was reached.

    PRs that have not reached ``state`` yet report their age so far, measured
    against ``now`` (default: the current UTC time).
    """
    end_time = _terminal_timestamp(pr, state)
    if end_time is None:
        end_time = now if now is not None else datetime.now(timezone.utc)
    return end_time - pr.created_at


def net_change(pr: PullRequest) -> Optional[int]:
    """Return lines added minus lines removed.

    When only one of the counts is known the other is treated as zero. When
    neither is known there is no net change and ``None`` is returned.
    """
    if pr.additions is not None and pr.deletions is not None:
        return pr.additions - pr.deletions
    if pr.additions is not None:
        return pr.additions
    if pr.deletions is not None:
        return -pr.deletions
    return None


def count(user: str, pull_requests: Sequence[PullRequest]) -> int:
    """Return the number of PRs authored by ``user``."""
    return len(by_author(user, pull_requests))


def _durations_in_days(
    user: str,
    pull_requests: Sequence[PullRequest],
    state: TerminalState,
    now: Optional[datetime],
) -> List[float]:
    if now is None:
        now = datetime.now(timezone.utc)
    return [
        duration(pr, state, now=now).total_seconds() / SECONDS_PER_DAY
        for pr in by_author(user, pull_requests)
    ]


def mean_duration(
    user: str,
    pull_requests: Sequence[PullRequest],
    state: TerminalState = TerminalState.MERGED,
    *,
    now: Optional[datetime] = None,
) -> Optional[float]:
    """Return the mean number of days ``user``'s PRs take to reach ``state``.

    PRs that are still open contribute their current age. Returns ``None``
    when ``user`` has no PRs at all.
    """
    days = _durations_in_days(user, pull_requests, state, now)
    if not days:
        return None
    return sum(days) / len(days)


def median_duration(
    user: str,
    pull_requests: Sequence[PullRequest],
    state: TerminalState = TerminalState.MERGED,
    *,
    now: Optional[datetime] = None,
) -> Optional[float]:
    """Return the median number of days ``user``'s PRs take to reach ``state``.

    Durations are sorted first. With ``n`` values (0-based indices) the median
    is ``days[n // 2]`` for odd ``n`` and the mean of ``days[n // 2 - 1]`` and
    ``days[n // 2]`` for even ``n``. Returns ``None`` when ``user`` has no PRs.
    """
    days = sorted(_durations_in_days(user, pull_requests, state, now))
    n = len(days)

    if n == 0:
        return None

    middle = n // 2
    if n % 2 == 1:
        return days[middle]
    return (days[middle - 1] + days[middle]) / 2


def mean_net_change(
    user: str,
    pull_requests: Sequence[PullRequest],
    state: TerminalState = TerminalState.MERGED,
) -> Optional[float]:
    """Return the average net change per PR authored by ``user``.

    Only PRs that reached ``state`` and have a known net change are summed,
    but the sum is divided by the total number of ``user``'s PRs, so open or
    abandoned work pulls the average towards zero. Returns ``None`` when
    ``user`` has no PRs.

    GitHub's pull request list endpoint does not include ``additions`` or
    ``deletions``, so for data fetched by ``fetch_all`` every net change is
    unknown and the result is ``0.0`` whenever ``user`` has PRs. A non-zero
    value needs PRs that carry detailed stats.
    """
    users_prs = by_author(user, pull_requests)
    if not users_prs:
        return None

    total = 0
    for pr in terminated(users_prs, state):
        change = net_change(pr)
        if change is not None:
            total += change

    return total / len(users_prs)
