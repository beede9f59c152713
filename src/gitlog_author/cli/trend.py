"""--trend mode: rolling daily/weekly/monthly contribution report."""

from typing import Optional

from ..cancellation import CancelToken
from ..formatters import ReportScope, TrendReport
from ..trends import plan_trend_window
from ._common import Services, console, report_written


def run_trend_report(
    services: Services,
    author: str,
    period: str,
    scope: ReportScope,
    cancel_token: Optional[CancelToken] = None,
) -> None:
    window = plan_trend_window(period, scope.since, scope.until)
    console.print(
        f"[blue]Generating {period} trend for author:[/blue] [bold]{author}[/bold] "
        f"[dim]({window.count} periods)[/dim]"
    )

    trends = services.trends.get_rolling_trends(
        author,
        period,
        window.count,
        end_date=window.end,
        include_dirs=scope.include_dirs,
        exclude_dirs=scope.exclude_dirs,
        cancel_token=cancel_token,
    )

    report = TrendReport(author, period, trends, window, scope)
    report_written("trend", services.writer.write(report))
