"""Commit log report: every commit with its message and ``--stat`` summary."""

from typing import List, Mapping, Optional, Sequence

from ..git.models import Commit
from .base import BaseReport, ReportScope, escape_markdown, format_local_datetime


class CommitLogReport(BaseReport):
    report_type = "commits"

    def __init__(
        self,
        author: str,
        commits: Sequence[Commit],
        details: Mapping[str, str],
        scope: Optional[ReportScope] = None,
    ):
        super().__init__(author, scope)
        self.commits = commits
        self.details = details

    def title(self) -> str:
        return f"Git Log for {self.author}"

    def body_lines(self) -> List[str]:
        lines = ["## Commits", ""]
        for commit in self.commits:
            lines.extend(self.commit_lines(commit))
        return lines

    def commit_lines(self, commit: Commit) -> List[str]:
        lines = [
            f"### {escape_markdown(commit.subject)}",
            f"**Date:** {format_local_datetime(commit.timestamp)}",
            f"**Hash:** `{commit.hash}`",
            "",
        ]

        body = commit.body.strip()
        if body:
            lines.append("**Description:**")
            lines.extend(f"> {escape_markdown(line, '_*`#>').strip()}" for line in body.splitlines())
            lines.append("")

        details = self.details.get(commit.hash, "").strip()
        if details:
            lines.extend(["**Changes:**", "```", details, "```", ""])

        lines.extend(["---", ""])
        return lines
