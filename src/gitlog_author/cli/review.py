"""--review mode: risk-annotated review packet of recent commits."""

from typing import Optional

from ..cancellation import CancelToken
from ..formatters import ReportScope, ReviewReport
from ..logging_config import get_logger
from ..review import RiskAssessor
from ._common import Services, console, report_written

logger = get_logger(__name__)

DEFAULT_REVIEW_SINCE = "1 day ago"
DEFAULT_REVIEW_UNTIL = "now"


def run_review(
    services: Services,
    author: str,
    scope: ReportScope,
    cancel_token: Optional[CancelToken] = None,
) -> None:
    since = scope.since or DEFAULT_REVIEW_SINCE
    until = scope.until or DEFAULT_REVIEW_UNTIL
    scope = ReportScope(since, until, scope.include_dirs, scope.exclude_dirs)

    console.print(f"[blue]Preparing review for[/blue] [bold]{author}[/bold]")
    console.print(f"[blue]Time range:[/blue] {since} to {until}\n")

    commits = services.resolver.resolve_commits(
        author,
        since=since,
        until=until,
        include_dirs=scope.include_dirs,
        exclude_dirs=scope.exclude_dirs,
        cancel_token=cancel_token,
    )
    if not commits:
        console.print("[yellow]No commits found in the specified time range[/yellow]")
        return

    stream = services.changes.should_stream(commits, services.config.stream_mode)
    logger.debug(f"Reconstructing {len(commits)} change sets (stream={stream})")
    change_sets = services.changes.batch_process(commits, stream=stream, cancel_token=cancel_token)

    report = ReviewReport(author, commits, change_sets, RiskAssessor(), scope)
    report_written("review", services.writer.write(report))
    services.cache.clear()
