"""The gitlog-author command: validate options, then dispatch to a report mode."""

from pathlib import Path
from typing import Optional

import click
import typer

from ..cancellation import CancelToken
from ..exceptions import ErrorCode, GitLogError, ValidationError
from ..git import ensure_repository, fetch_latest_changes
from ..logging_config import setup_logging
from ..trends import CLI_PERIODS
from . import app
from ._common import build_scope, build_services, console, err_console, resolve_config


@app.command()
def generate(
    author: Optional[str] = typer.Argument(
        None,
        help="Author name or email to filter commits by",
        show_default=False,
    ),
    since: Optional[str] = typer.Option(
        None,
        "--since",
        help="Show commits more recent than a date (e.g. 2024-01-01, '1 week ago')",
    ),
    until: Optional[str] = typer.Option(
        None,
        "--until",
        help="Show commits older than a date",
    ),
    verify: bool = typer.Option(
        False,
        "--verify",
        help="Show repository authors matching AUTHOR and exit",
    ),
    list_all: bool = typer.Option(
        False,
        "--list-authors",
        help="List every author in the repository and exit",
    ),
    no_metrics: bool = typer.Option(
        False,
        "--no-metrics",
        help="Skip the productivity metrics report",
    ),
    trend: Optional[str] = typer.Option(
        None,
        "--trend",
        help="Generate a rolling trend report: daily | weekly | monthly",
    ),
    review: bool = typer.Option(
        False,
        "--review",
        help="Generate a risk-annotated code review packet (default: last day)",
    ),
    include_dirs: Optional[str] = typer.Option(
        None,
        "--include-dirs",
        help="Only count changes under these directories (comma-separated)",
    ),
    exclude_dirs: Optional[str] = typer.Option(
        None,
        "--exclude-dirs",
        help="Ignore changes under these directories (comma-separated)",
    ),
    skip_fetch: bool = typer.Option(
        False,
        "--skip-fetch",
        help="Do not fetch from remotes before reporting",
    ),
    stream: Optional[str] = typer.Option(
        None,
        "--stream",
        help="Review diff parsing: auto | true | false",
        click_type=click.Choice(["auto", "true", "false"], case_sensitive=False),
    ),
    context: Optional[int] = typer.Option(
        None,
        "--context",
        help="Context lines around review diff hunks",
        min=0,
        max=100,
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "-o",
        "--output-dir",
        help="Directory for generated reports (default: git-logs)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log git invocations and cache activity",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors and hide progress bars",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Append a debug trace of git calls to this file",
        dir_okay=False,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Generate Markdown reports of one author's git history.

    Writes a commit log and productivity metrics by default, or a trend
    report, a code review packet, or author listings depending on options.

    [bold cyan]Examples:[/bold cyan]

      gitlog-author "John Doe"

      gitlog-author john@example.com --since "1 week ago"

      gitlog-author "John Doe" --since 2023-01-01 --until 2023-12-31

      gitlog-author John --verify

      gitlog-author --list-authors

      gitlog-author "John Doe" --trend weekly --include-dirs src,lib

      gitlog-author "John Doe" --review --context 3
    """
    from .. import __version__

    if version:
        console.print(f"[bold cyan]gitlog-author[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    logger = setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)
    cancel_token = CancelToken()

    try:
        if not list_all and not (author and author.strip()):
            message = "Author name or email is required"
            if verify:
                message += " with --verify"
            raise ValidationError(message, ErrorCode.INVALID_AUTHOR)
        if trend is not None and trend not in CLI_PERIODS:
            raise ValidationError(
                f"Invalid trend period. Must be one of: {', '.join(CLI_PERIODS)}",
                ErrorCode.INVALID_TREND_PERIOD,
                {"period": trend},
            )
        scope = build_scope(since, until, include_dirs, exclude_dirs)

        settings = resolve_config(
            config=config,
            output_dir=output_dir,
            skip_fetch=skip_fetch,
            stream=stream.lower() if stream else None,
            context=context,
            verbose=verbose,
            quiet=quiet,
        )
        services = build_services(settings)

        if not settings.skip_fetch:
            console.print("[blue]Fetching latest changes...[/blue]")
            fetch_latest_changes(services.executor)

        ensure_repository(services.executor)

        if list_all:
            from .authors import list_authors

            list_authors(services)
        elif verify:
            from .authors import verify_author

            verify_author(services, author, since, until, cancel_token)
        elif trend:
            from .trend import run_trend_report

            run_trend_report(services, author, trend, scope, cancel_token)
        elif review:
            from .review import run_review

            run_review(services, author, scope, cancel_token)
        else:
            from .author import run_author_report

            run_author_report(services, author, scope, no_metrics, cancel_token)

    except typer.Exit:
        raise

    except GitLogError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        cancel_token.cancel("interrupted by user")
        logger.info("Interrupted by user")
        console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error")
        err_console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            err_console.print_exception()
        raise typer.Exit(1)
