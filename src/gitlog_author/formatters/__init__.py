"""Markdown report formatters for gitlog-author."""

from .base import BaseReport, ReportScope, ReportWriter, escape_markdown, sanitize_filename
from .commit_log import CommitLogReport
from .metrics import MetricsReport
from .review import ReviewReport, format_diff_for_markdown
from .trend import TrendReport

__all__ = [
    "BaseReport",
    "ReportScope",
    "ReportWriter",
    "escape_markdown",
    "sanitize_filename",
    "CommitLogReport",
    "MetricsReport",
    "ReviewReport",
    "format_diff_for_markdown",
    "TrendReport",
]
