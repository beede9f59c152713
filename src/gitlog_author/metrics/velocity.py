"""Velocity metrics over one author's commit set."""

import math
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ..cancellation import CancelToken, check_cancelled
from ..exceptions import ErrorCode, GitCommandError
from ..git.authors import AuthorResolver
from ..git.models import Commit
from ..logging_config import get_logger
from .commit_types import calculate_type_metrics
from .models import ImpactMetrics, TimeDistribution, VelocityMetrics
from .rounding import round_half_up
from .stats import analyze_file_impact, group_paths, parse_git_stats, rank_directories, rank_files

logger = get_logger(__name__)

SECONDS_PER_DAY = 86400


def time_bucket(hour: int) -> str:
    """morning [5, 12), afternoon [12, 17), evening otherwise."""
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    return "evening"


def local_hour(moment: datetime) -> int:
    """Hour of day in the running machine's timezone."""
    return moment.astimezone().hour


def commits_per_day(timestamps: Sequence[datetime]) -> float:
    span = (max(timestamps) - min(timestamps)).total_seconds() / SECONDS_PER_DAY
    days = max(1, math.ceil(span))
    return round_half_up(len(timestamps) / days, 2)


def commit_stat_details(resolver: AuthorResolver, commit: Commit) -> str:
    """``--stat`` output of a commit, empty for commits that touch nothing."""
    try:
        return resolver.get_commit_details(commit.hash)
    except GitCommandError as e:
        if e.code is ErrorCode.COMMIT_NOT_FOUND:
            logger.debug(f"No stat details for {commit.short_hash}")
            return ""
        raise


class VelocityCalculator:
    """Compute VelocityMetrics for a commit set.

    Stat details come from the resolver (and therefore the shared cache),
    fetched concurrently in batches like commit messages.
    """

    def __init__(
        self,
        resolver: AuthorResolver,
        batch_size: int = 50,
        batch_pause: float = 0.05,
        max_workers: int = 8,
    ):
        self.resolver = resolver
        self.batch_size = batch_size
        self.batch_pause = batch_pause
        self.max_workers = max_workers

    def _details(self, commit: Commit) -> str:
        return commit_stat_details(self.resolver, commit)

    def _fetch_all_details(
        self, commits: Sequence[Commit], cancel_token: Optional[CancelToken]
    ) -> List[str]:
        details: List[str] = []
        workers = max(1, min(self.max_workers, self.batch_size))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            for start in range(0, len(commits), self.batch_size):
                check_cancelled(cancel_token)
                if start and self.batch_pause:
                    time.sleep(self.batch_pause)
                details.extend(pool.map(self._details, commits[start:start + self.batch_size]))
        return details

    def calculate(
        self,
        commits: Sequence[Commit],
        include_dirs: Sequence[str] = (),
        exclude_dirs: Sequence[str] = (),
        cancel_token: Optional[CancelToken] = None,
    ) -> VelocityMetrics:
        if not commits:
            return VelocityMetrics()

        all_details = self._fetch_all_details(commits, cancel_token)

        total_changes = 0
        file_totals: Dict[str, int] = {}
        directory_totals: Dict[str, int] = {}
        buckets = {"morning": 0, "afternoon": 0, "evening": 0}
        typed_commits = []

        for commit, details in zip(commits, all_details):
            stats = parse_git_stats(details)
            if stats:
                total_changes += stats.total_changes

            impact = analyze_file_impact(details, include_dirs, exclude_dirs)
            if impact:
                for path, changes in impact.file_changes.items():
                    file_totals[path] = file_totals.get(path, 0) + changes
                for directory, changes in impact.directory_changes.items():
                    directory_totals[directory] = directory_totals.get(directory, 0) + changes
            typed_commits.append((commit.subject, [f.path for f in impact.top_files] if impact else []))

            buckets[time_bucket(local_hour(commit.timestamp))] += 1

        count = len(commits)
        directory_impact = rank_directories(directory_totals)

        return VelocityMetrics(
            total_lines_changed=total_changes,
            average_commit_size=round_half_up(total_changes / count),
            commits_per_day=commits_per_day([c.timestamp for c in commits]),
            time_distribution=TimeDistribution(
                morning=round_half_up(buckets["morning"] / count * 100, 1),
                afternoon=round_half_up(buckets["afternoon"] / count * 100, 1),
                evening=round_half_up(buckets["evening"] / count * 100, 1),
            ),
            impact=ImpactMetrics(
                top_files=rank_files(file_totals),
                directory_impact=directory_impact,
                grouped_directories=group_paths(directory_impact),
            ),
            type_metrics=calculate_type_metrics(typed_commits),
        )
