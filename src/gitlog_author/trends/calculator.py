"""Rolling and comparative contribution trends for one author."""

import math
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence, Tuple

from ..cancellation import CancelToken, check_cancelled
from ..exceptions import ErrorCode, ValidationError
from ..git.authors import AuthorResolver
from ..git.models import Commit, parse_iso_date
from ..logging_config import get_logger
from ..metrics.commit_types import categorize_commit
from ..metrics.rounding import round_half_up
from ..metrics.velocity import time_bucket
from .models import TrendMetrics, TrendPeriod, TrendTimeDistribution, TrendWindow
from .periods import add_months, format_iso, get_period, to_utc

logger = get_logger(__name__)

# Periods the CLI can report on (yearly is available programmatically)
CLI_PERIODS = ("daily", "weekly", "monthly")

# Default number of periods shown when no --since is given
DEFAULT_PERIOD_COUNTS = {"daily": 7, "weekly": 4, "monthly": 6}

DAYS_PER_MONTH = 30.44


def calculate_trend_metrics(commits: Sequence[Commit]) -> TrendMetrics:
    """Time-of-day counts (UTC hour) and message-only commit type counts."""
    distribution = TrendTimeDistribution()
    commit_types: Counter = Counter()

    for commit in commits:
        bucket = time_bucket(to_utc(commit.timestamp).hour)
        setattr(distribution, bucket, getattr(distribution, bucket) + 1)
        commit_types.update(categorize_commit(commit.subject))

    total = len(commits)
    if total:
        distribution.morning_percent = round_half_up(distribution.morning / total * 100)
        distribution.afternoon_percent = round_half_up(distribution.afternoon / total * 100)
        distribution.evening_percent = round_half_up(distribution.evening / total * 100)

    return TrendMetrics(
        commit_count=total,
        time_distribution=distribution,
        commit_types=dict(commit_types),
    )


class TrendCalculator:
    """Buckets an author's commits into calendar periods.

    Every period is an independent resolver query; repeated lookups are
    only shared through the resolver's commit detail cache.
    """

    def __init__(self, resolver: AuthorResolver):
        self.resolver = resolver

    def get_trends(
        self,
        author: str,
        period: str,
        date: Optional[datetime] = None,
        include_dirs: Sequence[str] = (),
        exclude_dirs: Sequence[str] = (),
        cancel_token: Optional[CancelToken] = None,
    ) -> TrendPeriod:
        config = get_period(period)
        reference = date or datetime.now(timezone.utc)
        start = config.start_of(reference)
        end = config.end_of(reference)

        commits = self.resolver.resolve_commits(
            author,
            since=format_iso(start),
            until=format_iso(end),
            include_dirs=include_dirs,
            exclude_dirs=exclude_dirs,
            cancel_token=cancel_token,
        )
        # git's --since/--until work in whole seconds
        commits = [c for c in commits if start <= to_utc(c.timestamp) <= end]
        logger.debug(f"{period} trend {format_iso(start)}: {len(commits)} commits")

        return TrendPeriod(
            period=period,
            start_date=format_iso(start),
            end_date=format_iso(end),
            metrics=calculate_trend_metrics(commits),
        )

    def get_rolling_trends(
        self,
        author: str,
        period: str,
        count: int,
        end_date: Optional[datetime] = None,
        include_dirs: Sequence[str] = (),
        exclude_dirs: Sequence[str] = (),
        cancel_token: Optional[CancelToken] = None,
    ) -> List[TrendPeriod]:
        """``count`` periods walking backward from ``end_date``, newest first."""
        config = get_period(period)
        if count < 0:
            raise ValidationError(
                "Invalid date range: period count must not be negative",
                code=ErrorCode.INVALID_DATE_RANGE,
                details={"count": count},
            )

        end = to_utc(end_date or datetime.now(timezone.utc))
        trends = []
        for i in range(count):
            check_cancelled(cancel_token)
            trends.append(
                self.get_trends(
                    author,
                    period,
                    config.step_back(end, i),
                    include_dirs,
                    exclude_dirs,
                    cancel_token,
                )
            )
        return trends

    def compare_trends(
        self,
        author: str,
        period: str,
        date_a: datetime,
        date_b: datetime,
        include_dirs: Sequence[str] = (),
        exclude_dirs: Sequence[str] = (),
    ) -> Tuple[TrendPeriod, TrendPeriod]:
        return (
            self.get_trends(author, period, date_a, include_dirs, exclude_dirs),
            self.get_trends(author, period, date_b, include_dirs, exclude_dirs),
        )


def _parse_window_date(value: str, name: str) -> datetime:
    try:
        return to_utc(parse_iso_date(value.strip()))
    except ValueError:
        raise ValidationError(
            f"Invalid {name} date for a trend report: {value!r} (expected YYYY-MM-DD)",
            code=ErrorCode.INVALID_DATE_FORMAT,
            details={name: value},
        ) from None


def plan_trend_window(
    period: str,
    since: Optional[str] = None,
    until: Optional[str] = None,
    now: Optional[datetime] = None,
) -> TrendWindow:
    """Work out the date range and number of periods for ``--trend``.

    Without ``since`` the window covers the last 7 days, 4 weeks or 6
    months ending at ``until`` (default now). With ``since`` the count is
    derived from the day span.
    """
    if period not in CLI_PERIODS:
        raise ValidationError(
            f"Invalid trend period. Must be one of: {', '.join(CLI_PERIODS)}",
            code=ErrorCode.INVALID_TREND_PERIOD,
            details={"period": period},
        )

    end = _parse_window_date(until, "until") if until else to_utc(now or datetime.now(timezone.utc))

    if not since:
        count = DEFAULT_PERIOD_COUNTS[period]
        if period == "daily":
            start = end - timedelta(days=count - 1)
        elif period == "weekly":
            start = end - timedelta(days=count * 7 - 1)
        else:
            start = add_months(end, -(count - 1))
        return TrendWindow(start=start, end=end, count=count)

    start = _parse_window_date(since, "since")
    if start > end:
        raise ValidationError(
            "Invalid date range: start date must be before end date",
            code=ErrorCode.INVALID_DATE_RANGE,
            details={"since": since, "until": until},
        )

    days = math.ceil((end - start).total_seconds() / 86400)
    if period == "daily":
        count = days
    elif period == "weekly":
        count = math.ceil(days / 7)
    else:
        count = math.ceil(days / DAYS_PER_MONTH)
    return TrendWindow(start=start, end=end, count=max(1, count))
