"""Author discovery modes: --list-authors and --verify."""

from typing import Optional

from rich.table import Table

from ..cancellation import CancelToken
from ..git import find_matching_authors
from ._common import Services, console


def list_authors(services: Services) -> None:
    console.print("[blue]Fetching all authors...[/blue]")
    authors = services.resolver.list_authors()
    if not authors:
        console.print("[yellow]No commits found in this repository[/yellow]")
        return

    table = Table(title="Authors in this repository", show_header=True, pad_edge=True)
    table.add_column("Commits", justify="right", style="green")
    table.add_column("Author")
    for author in authors:
        table.add_row(f"{author.commit_count:>4}", f"{author.name} <{author.email}>")

    console.print()
    console.print(table)
    console.print(f"\n[bold]Total authors: {len(authors)}[/bold]")


def verify_author(
    services: Services,
    query: str,
    since: Optional[str] = None,
    until: Optional[str] = None,
    cancel_token: Optional[CancelToken] = None,
) -> None:
    """Show which repository authors a query would match."""
    console.print(f"[blue]Verifying author:[/blue] [bold]{query}[/bold]")
    authors = services.resolver.list_authors()
    if not authors:
        console.print("[yellow]No commits found in this repository[/yellow]")
        return

    matching = find_matching_authors(authors, query)
    if not matching:
        console.print(f"[yellow]No matching authors found for:[/yellow] {query}")
        return

    console.print("\n[bold]Matching authors:[/bold]\n")
    for author in matching:
        console.print(
            f"[green]✓[/green] {author.name} <{author.email}> "
            f"([bold]{author.commit_count}[/bold] commits)"
        )

    if since or until:
        console.print("\n[bold]Date range verification:[/bold]")
        if since:
            console.print(f"From: {since}")
        if until:
            console.print(f"To: {until}")
        console.print()
        for author in matching:
            commits = services.resolver.resolve_commits(
                author.name, since=since, until=until, cancel_token=cancel_token
            )
            if commits:
                console.print(
                    f"[green]✓[/green] {author.name}: [bold]{len(commits)}[/bold] commits in this period"
                )
            else:
                console.print(f"[yellow]○[/yellow] {author.name}: No commits in this period")

    total = sum(a.commit_count for a in matching)
    console.print(f"\n[bold]Total commits by matching authors:[/bold] {total}")
