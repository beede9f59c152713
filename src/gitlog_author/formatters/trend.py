"""Rolling contribution trend report."""

from collections import Counter
from datetime import datetime
from typing import List, Optional, Sequence

from ..git.models import parse_iso_date
from ..metrics.rounding import round_half_up
from ..trends.models import TrendPeriod, TrendWindow
from ..trends.periods import get_period
from .base import BaseReport, ReportScope, format_local_date


def period_heading(period: str, start: datetime) -> str:
    if period == "daily":
        return f"{start:%A}, {start:%B} {start.day}, {start.year}"
    if period == "weekly":
        return f"Week of {start:%B} {start.day}, {start.year}"
    if period == "monthly":
        return f"{start:%B} {start.year}"
    return str(start.year)


class TrendReport(BaseReport):
    def __init__(
        self,
        author: str,
        period: str,
        trends: Sequence[TrendPeriod],
        window: TrendWindow,
        scope: Optional[ReportScope] = None,
    ):
        super().__init__(author, scope)
        self.period = period
        self.trends = trends
        self.window = window
        self.report_type = f"{period}_trend"

    def title(self) -> str:
        return f"{self.period.capitalize()} Contribution Trend for {self.author}"

    def body_lines(self) -> List[str]:
        return self.overview_lines() + self.breakdown_lines()

    def overview_lines(self) -> List[str]:
        total = sum(t.metrics.commit_count for t in self.trends)
        lines = [
            "## Overview",
            f"- Period: {format_local_date(self.window.start)} to {format_local_date(self.window.end)}",
            f"- Total Commits: {total}",
        ]

        most_active = max(self.trends, key=lambda t: t.metrics.commit_count, default=None)
        if most_active is not None and most_active.metrics.commit_count > 0:
            label = get_period(self.period).label
            started = parse_iso_date(most_active.start_date)
            lines.append(
                f"- Most Active {label}: {format_local_date(started)} "
                f"({most_active.metrics.commit_count} commits)"
            )

        all_types: Counter = Counter()
        for trend in self.trends:
            all_types.update(trend.metrics.commit_types)
        if all_types and total:
            primary, count = all_types.most_common(1)[0]
            lines.append(f"- Primary Contribution Type: {primary.value} ({round_half_up(count / total * 100)}%)")

        lines.append("")
        return lines

    def breakdown_lines(self) -> List[str]:
        lines = [f"## {self.period.capitalize()} Breakdown", ""]
        for trend in self.trends:
            metrics = trend.metrics
            lines.append(f"### {period_heading(self.period, parse_iso_date(trend.start_date))}")
            lines.extend([f"Commits: {metrics.commit_count}", ""])
            if not metrics.commit_count:
                continue

            td = metrics.time_distribution
            lines.extend([
                "Time Distribution:",
                f"- 🌅 Morning (5:00-11:59): {td.morning_percent}%",
                f"- 🌞 Afternoon (12:00-16:59): {td.afternoon_percent}%",
                f"- 🌙 Evening (17:00-4:59): {td.evening_percent}%",
                "",
            ])

            if metrics.commit_types:
                lines.append("Commit Types:")
                ranked = sorted(metrics.commit_types.items(), key=lambda item: -item[1])
                lines.extend(f"- {commit_type.value}: {count}" for commit_type, count in ranked)
                lines.append("")
        return lines
