"""Base report interface and the Markdown file writer."""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

from ..logging_config import get_logger
from ..trends.periods import format_iso

logger = get_logger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def sanitize_filename(name: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", name)


def report_timestamp(now: Optional[datetime] = None) -> str:
    """ISO timestamp usable in a filename, e.g. ``2024-02-06T10-00-00-000Z``."""
    return re.sub(r"[:.]", "-", format_iso(now or datetime.now(timezone.utc)))


def escape_markdown(text: str, chars: str = "_*`#") -> str:
    """Backslash-escape each of ``chars`` in ``text``."""
    return re.sub(f"([{re.escape(chars)}])", r"\\\1", text)


def format_local_datetime(moment: datetime) -> str:
    """``2/6/2024, 10:00:00 AM UTC`` in the machine's timezone."""
    local = moment.astimezone()
    hour = local.hour % 12 or 12
    return f"{local.month}/{local.day}/{local.year}, {hour}:{local:%M:%S %p} {local:%Z}".rstrip()


def format_local_date(moment: datetime) -> str:
    return f"{moment.month}/{moment.day}/{moment.year}"


@dataclass
class ReportScope:
    """Date range and directory filters a report was generated for."""

    since: Optional[str] = None
    until: Optional[str] = None
    include_dirs: Sequence[str] = ()
    exclude_dirs: Sequence[str] = ()


def header_lines(
    title: str, scope: ReportScope, generated_at: Optional[datetime] = None
) -> List[str]:
    lines = [
        f"# {title}",
        "",
        f"Generated on: {format_local_datetime(generated_at or datetime.now(timezone.utc))}",
        "",
    ]

    if scope.since or scope.until:
        lines.append("## Date Range")
        if scope.since:
            lines.append(f"From: {scope.since}")
        if scope.until:
            lines.append(f"To: {scope.until}")
        lines.append("")

    if scope.include_dirs or scope.exclude_dirs:
        lines.append("## Directory Scope")
        if scope.include_dirs:
            lines.append("Including only:")
            lines.extend(f"- `{d}`" for d in scope.include_dirs)
        if scope.exclude_dirs:
            lines.append("Excluding:")
            lines.extend(f"- `{d}`" for d in scope.exclude_dirs)
        lines.append("")

    return lines


class BaseReport(ABC):
    """A Markdown report about one author."""

    report_type: str = "report"

    def __init__(self, author: str, scope: Optional[ReportScope] = None):
        self.author = author
        self.scope = scope or ReportScope()

    @abstractmethod
    def title(self) -> str:
        """First-level heading of the report."""

    @abstractmethod
    def body_lines(self) -> List[str]:
        """Report content below the shared header."""

    def format(self, generated_at: Optional[datetime] = None) -> str:
        lines = header_lines(self.title(), self.scope, generated_at)
        lines.extend(self.body_lines())
        return "\n".join(lines) + "\n"


class ReportWriter:
    """Writes reports as ``{author}_{type}_{timestamp}.md`` under ``output_dir``."""

    def __init__(self, output_dir: str = "git-logs"):
        self.output_dir = Path(output_dir)

    def generate_filename(self, author: str, report_type: str, now: Optional[datetime] = None) -> Path:
        return self.output_dir / f"{sanitize_filename(author)}_{report_type}_{report_timestamp(now)}.md"

    def write(self, report: BaseReport, now: Optional[datetime] = None) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.generate_filename(report.author, report.report_type, now)
        path.write_text(report.format(now), encoding="utf-8")
        logger.debug(f"Wrote {report.report_type} report to {path}")
        return path
