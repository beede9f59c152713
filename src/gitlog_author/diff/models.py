"""Data models for reconstructed diff change sets."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Tuple

Hunk = List[str]  # raw diff lines, first one is the "@@ ... @@" marker

RENAME_ARROW = " → "


class ChangeType(Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


@dataclass
class ChangeSet:
    """Files touched by one commit (or one ref-to-ref diff), by change type.

    Every map preserves the order files appear in the diff. Renamed entries
    are keyed ``"old → new"``.
    """

    added: Dict[str, List[Hunk]] = field(default_factory=dict)
    modified: Dict[str, List[Hunk]] = field(default_factory=dict)
    deleted: Dict[str, List[Hunk]] = field(default_factory=dict)
    renamed: Dict[str, List[Hunk]] = field(default_factory=dict)

    def bucket(self, change_type: ChangeType) -> Dict[str, List[Hunk]]:
        return getattr(self, change_type.value)

    def add_file(self, change_type: ChangeType, path: str) -> None:
        self.bucket(change_type).setdefault(path, [])

    def add_hunk(self, change_type: ChangeType, path: str, hunk: Hunk) -> None:
        self.bucket(change_type).setdefault(path, []).append(hunk)

    def files(self) -> Iterator[Tuple[ChangeType, str, List[Hunk]]]:
        """Iterate ``(change_type, path, hunks)`` in added/modified/deleted/renamed order."""
        for change_type in ChangeType:
            for path, hunks in self.bucket(change_type).items():
                yield change_type, path, hunks

    def counts(self) -> Dict[ChangeType, int]:
        return {change_type: len(self.bucket(change_type)) for change_type in ChangeType}

    @property
    def is_empty(self) -> bool:
        return not any(self.bucket(change_type) for change_type in ChangeType)


def flatten_hunks(hunks: List[Hunk]) -> List[str]:
    return [line for hunk in hunks for line in hunk]
