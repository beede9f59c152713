"""Default mode: commit log report plus productivity metrics."""

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional, Sequence

from ..cancellation import CancelToken, check_cancelled
from ..formatters import CommitLogReport, MetricsReport, ReportScope
from ..git.models import Commit
from ..logging_config import get_logger
from ..metrics import commit_stat_details
from ..progress import add_task, advance
from ._common import Services, console, report_written

logger = get_logger(__name__)


def collect_commit_details(
    services: Services, commits: Sequence[Commit], cancel_token: Optional[CancelToken] = None
) -> Dict[str, str]:
    """Stat details for every commit, fetched in fixed-size chunks."""
    chunk_size = services.config.report_chunk_size
    details: Dict[str, str] = {}

    def _collect(progress):
        task = add_task(progress, "Processing commits", total=len(commits))
        with ThreadPoolExecutor(max_workers=chunk_size) as pool:
            for start in range(0, len(commits), chunk_size):
                check_cancelled(cancel_token)
                chunk = commits[start:start + chunk_size]
                results = pool.map(lambda c: commit_stat_details(services.resolver, c), chunk)
                for commit, text in zip(chunk, results):
                    details[commit.hash] = text
                advance(progress, task, len(chunk))
        return details

    return services.reporter.run(_collect)


def run_author_report(
    services: Services,
    author: str,
    scope: ReportScope,
    skip_metrics: bool = False,
    cancel_token: Optional[CancelToken] = None,
) -> None:
    console.print(f"[blue]Fetching commits for author:[/blue] [bold]{author}[/bold]")
    commits = services.resolver.resolve_commits(
        author,
        since=scope.since,
        until=scope.until,
        include_dirs=scope.include_dirs,
        exclude_dirs=scope.exclude_dirs,
        cancel_token=cancel_token,
    )
    console.print(f"[green]✓[/green] Found [bold]{len(commits)}[/bold] commits")

    if not commits:
        console.print(f"[yellow]No commits found for author:[/yellow] {author}")
        return

    if not skip_metrics:
        console.print("[blue]Calculating productivity metrics...[/blue]")
        metrics = services.velocity.calculate(
            commits, scope.include_dirs, scope.exclude_dirs, cancel_token
        )
        report_written("metrics", services.writer.write(MetricsReport(author, metrics, scope)))

    details = collect_commit_details(services, commits, cancel_token)
    report = CommitLogReport(author, commits, details, scope)
    report_written("commits", services.writer.write(report))
    logger.debug(f"Cache after author report: {services.cache.stats()}")
