"""Human-readable rendering of already-computed contributor metrics."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from .metrics import by_author, count, mean_duration, mean_net_change, median_duration, terminated
from .models import Metric, PullRequest, TerminalState

NULL_MARKER = "(null)"


def format_value(value: Optional[float]) -> str:
    """Format an optional metric value with two decimals, or ``(null)``."""
    if value is None:
        return NULL_MARKER
    return f"{value:.2f}"


def render_metric(
    metric: Metric,
    user: str,
    pull_requests: Sequence[PullRequest],
    state: TerminalState = TerminalState.MERGED,
    *,
    now: Optional[datetime] = None,
) -> str:
    """Compute and format a single metric for ``user``."""
    if metric is Metric.TOTAL_PULL_REQUESTS:
        return str(count(user, pull_requests))
    if metric is Metric.MEAN_PR_DURATION:
        return format_value(mean_duration(user, pull_requests, state, now=now))
    if metric is Metric.MEDIAN_PR_DURATION:
        return format_value(median_duration(user, pull_requests, state, now=now))
    if metric is Metric.MEAN_NET_CHANGE:
        return format_value(mean_net_change(user, pull_requests, state))
    raise ValueError(f"Unsupported metric: {metric!r}")


def user_summary(
    owner: str,
    repo: str,
    user: str,
    pull_requests: Sequence[PullRequest],
    state: TerminalState = TerminalState.MERGED,
    *,
    now: Optional[datetime] = None,
) -> str:
    """Generate a multi-line summary of ``user``'s contributions to ``owner/repo``.

    Lines for metrics without a value are omitted rather than printed as
    placeholders.

    The net change line relies on per-PR line counts, which the GitHub list
    endpoint leaves out; for such data it always reads "doesn't change the
    size of the codebase" (see :func:`ghprod.metrics.mean_net_change`).
    """
    lines = [f"=== {user}'s contributions to {owner}/{repo} ==="]

    num_prs = count(user, pull_requests)
    if num_prs == 0:
        lines.append("There's not much here...")
        return "\n".join(lines)

    done_prs = len(terminated(by_author(user, pull_requests), state))
    if done_prs == num_prs:
        lines.append(f"{user} has {num_prs} PRs in total (all of which are completed)")
    else:
        lines.append(f"{user} has {num_prs} PRs in total ({done_prs} of these are completed)")

    mean = mean_duration(user, pull_requests, state, now=now)
    if mean is not None:
        lines.append(f"{user}'s PRs take {format_value(mean)} days to complete on average")

    change = mean_net_change(user, pull_requests, state)
    if change is not None:
        if change < 0:
            lines.append(
                f"{user} reduces the size of the codebase by {format_value(abs(change))} lines on average"
            )
        elif change > 0:
            lines.append(
                f"{user} increases the size of the codebase by {format_value(change)} lines on average"
            )
        else:
            lines.append(f"{user} doesn't change the size of the codebase on average!")

    return "\n".join(lines)
