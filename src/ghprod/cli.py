"""Command-line argument parsing for ghprod."""

from __future__ import annotations

import argparse
import math
from typing import Optional, Sequence

from .models import Metric, TerminalState


def _non_negative_float(value: str) -> float:
    """Parse and validate a finite, non-negative number of seconds.

    Raises:
        argparse.ArgumentTypeError: If value is not a finite number or is negative.
    """
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a number") from exc

    if not math.isfinite(parsed):
        raise argparse.ArgumentTypeError("must be a finite number")

    if parsed < 0:
        raise argparse.ArgumentTypeError("must be greater than or equal to 0")

    return parsed


def _terminal_state(value: str) -> TerminalState:
    try:
        return TerminalState.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be one of: merged, closed") from exc


def _metric(value: str) -> Metric:
    try:
        return Metric(value)
    except ValueError as exc:
        choices = ", ".join(metric.value for metric in Metric)
        raise argparse.ArgumentTypeError(f"must be one of: {choices}") from exc


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for a contributor report.

    Returns:
        Parsed CLI arguments containing owner, repository, optional API secret,
        terminating state, page delay, subcommand, user and optional metric.
    """
    parser = argparse.ArgumentParser(
        prog="ghprod",
        description="Report a contributor's pull request productivity for a GitHub repository.",
    )

    parser.add_argument("owner", help="Repository owner (user or organization).")
    parser.add_argument("repo", help="Repository name.")
    parser.add_argument(
        "-a",
        "--api-secret",
        default=None,
        help="GitHub token (default: the GITHUB_TOKEN environment variable, if set).",
    )
    parser.add_argument(
        "-p",
        "--pull-request-terminating-state",
        type=_terminal_state,
        default=None,
        help="Event that marks a PR as done: 'merged' (default) or 'closed'.",
    )
    parser.add_argument(
        "--page-delay",
        type=_non_negative_float,
        default=None,
        help=(
            "Seconds to wait between page requests "
            "(default: 60 without a token, 0.72 with one)."
        ),
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    solo = subparsers.add_parser("solo", help="Report on a single contributor.")
    solo.add_argument("user", help="GitHub login of the contributor.")
    solo.add_argument(
        "metric",
        nargs="?",
        type=_metric,
        default=None,
        help=(
            "Print only this metric ("
            + ", ".join(metric.value for metric in Metric)
            + "); omit for a full summary."
        ),
    )

    return parser.parse_args(argv)
