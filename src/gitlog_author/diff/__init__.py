"""Unified diff reconstruction into added/modified/deleted/renamed change sets."""

from .models import ChangeSet, ChangeType, Hunk, flatten_hunks
from .parser import DiffScanner, ScanState, categorize, parse_diff_stream, parse_diff_text
from .service import ChangeSetService

__all__ = [
    "ChangeSet",
    "ChangeType",
    "Hunk",
    "flatten_hunks",
    "DiffScanner",
    "ScanState",
    "categorize",
    "parse_diff_stream",
    "parse_diff_text",
    "ChangeSetService",
]
