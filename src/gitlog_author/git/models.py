"""Data models for git history queries."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Commit:
    hash: str  # full hex id
    date: str  # ISO-8601 author date, with offset
    subject: str = ""
    body: str = ""

    @property
    def timestamp(self) -> datetime:
        return parse_iso_date(self.date)

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


@dataclass(frozen=True)
class Author:
    name: str
    email: str
    commit_count: int  # non-merge commits across all refs


def parse_iso_date(value: str) -> datetime:
    """Parse git's strict ISO dates, accepting a trailing ``Z``."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)
