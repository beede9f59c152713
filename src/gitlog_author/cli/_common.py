"""Shared CLI helpers."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from ..cache import LRUCache
from ..config import GitLogConfig, load_config
from ..diff import ChangeSetService
from ..exceptions import ErrorCode, ValidationError
from ..formatters import ReportScope, ReportWriter
from ..git import AuthorResolver, GitExecutor
from ..metrics import VelocityCalculator
from ..progress import ProgressReporter, SilentReporter
from ..trends import TrendCalculator

console = Console()
err_console = Console(stderr=True)


@dataclass
class Services:
    """Everything one invocation needs, sharing a single executor and cache."""

    config: GitLogConfig
    executor: GitExecutor
    cache: LRUCache
    resolver: AuthorResolver
    changes: ChangeSetService
    velocity: VelocityCalculator
    trends: TrendCalculator
    writer: ReportWriter

    @property
    def reporter(self):
        if self.config.verbosity == "quiet":
            return SilentReporter()
        return ProgressReporter(console)


def resolve_config(
    config: Optional[Path] = None,
    output_dir: Optional[str] = None,
    skip_fetch: bool = False,
    stream: Optional[str] = None,
    context: Optional[int] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> GitLogConfig:
    """Build configuration from CLI options."""
    overrides = {
        "output_dir": output_dir,
        "stream_mode": stream,
        "diff_context_lines": context,
        "verbose": verbose,
        "quiet": quiet,
    }
    if skip_fetch:
        overrides["skip_fetch"] = True
    return load_config(config_file=config, **overrides)


def build_services(config: GitLogConfig, repo_path: str = ".") -> Services:
    executor = GitExecutor(repo_path, timeout=config.git_timeout_seconds)
    cache = LRUCache(config.cache_size)
    resolver = AuthorResolver(
        executor,
        cache,
        batch_size=config.batch_size,
        batch_pause=config.batch_pause_seconds,
        max_workers=config.max_workers,
    )
    return Services(
        config=config,
        executor=executor,
        cache=cache,
        resolver=resolver,
        changes=ChangeSetService(
            executor,
            cache,
            batch_size=config.diff_batch_size,
            context_lines=config.diff_context_lines,
            single_diff_limit_mb=config.stream_single_diff_mb,
            total_diff_limit_mb=config.stream_total_diff_mb,
        ),
        velocity=VelocityCalculator(
            resolver,
            batch_size=config.batch_size,
            batch_pause=config.batch_pause_seconds,
            max_workers=config.max_workers,
        ),
        trends=TrendCalculator(resolver),
        writer=ReportWriter(config.output_dir),
    )


def parse_dir_list(value: Optional[str], option: str) -> List[str]:
    """Split a ``a,b`` directory option; embedded whitespace is rejected."""
    if not value:
        return []
    dirs = [d.strip("/") for d in value.split(",")]
    for d in dirs:
        if not d or any(ch.isspace() for ch in d):
            raise ValidationError(
                f"Invalid directory list for {option}: {value!r} "
                "(comma-separated paths without spaces)",
                ErrorCode.INVALID_ARGS,
                {option: value},
            )
    return dirs


def build_scope(
    since: Optional[str],
    until: Optional[str],
    include_dirs: Optional[str],
    exclude_dirs: Optional[str],
) -> ReportScope:
    """Validate the directory options and bundle them with the date range."""
    include = parse_dir_list(include_dirs, "--include-dirs")
    exclude = parse_dir_list(exclude_dirs, "--exclude-dirs")
    if include and exclude:
        raise ValidationError(
            "Cannot use both --include-dirs and --exclude-dirs at the same time",
            ErrorCode.INVALID_ARGS,
        )
    return ReportScope(since=since, until=until, include_dirs=include, exclude_dirs=exclude)


def report_written(kind: str, path: Path) -> None:
    console.print(f"[green]✓[/green] Generated {kind} file: {path}")
