"""Progress reporting: wraps Rich or runs silently."""

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)


class ProgressReporter:
    """Rich progress bar wrapper."""

    def __init__(self, console: Console):
        self.console = console

    def run(self, callback):
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=False,
        ) as progress:
            return callback(progress)


class SilentReporter:
    """No-op reporter for tests and --quiet mode."""

    def run(self, callback):
        return callback(None)


def advance(progress, task_id, amount: int = 1) -> None:
    """Advance ``task_id`` when a progress display is active."""
    if progress is not None and task_id is not None:
        progress.advance(task_id, amount)


def add_task(progress, description: str, total: int):
    if progress is None:
        return None
    return progress.add_task(description, total=total)
