"""CLI entry point."""

import typer

from ._common import console

app = typer.Typer(
    name="gitlog-author",
    help="Generate Markdown reports of one author's git history",
    add_completion=False,
    rich_markup_mode="rich",
)


def main() -> None:
    app()


# Import the command to register it
from .generate import generate as _generate  # noqa: F401, E402

__all__ = ["app", "console", "main"]
