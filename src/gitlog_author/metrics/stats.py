"""Parse ``git show --stat`` output into change counts and impact tables."""

import posixpath
import re
from typing import Dict, List, Optional, Sequence

from ..patterns import in_scope, should_include_file
from .models import DiffStats, DirectoryImpact, DirectoryNode, FileImpact, FileImpactSummary
from .rounding import round_half_up

TOP_FILES_LIMIT = 5

_SUMMARY_RE = re.compile(r"\d+ files? changed")
_FILES_RE = re.compile(r"(\d+) files? changed")
_INSERTIONS_RE = re.compile(r"(\d+) insertions?\(\+\)")
_DELETIONS_RE = re.compile(r"(\d+) deletions?\(-\)")
_STAT_LINE_RE = re.compile(r"^(.+?)\s+\|\s+(\d+)")
_BRACE_RENAME_RE = re.compile(r"\{([^{}]*?) => ([^{}]*?)\}")


def parse_git_stats(stats_output: Optional[str]) -> Optional[DiffStats]:
    """Parse the ``N files changed, N insertions(+), N deletions(-)`` line.

    Missing clauses count as 0. Returns None when there is no summary line.
    """
    if not stats_output:
        return None

    summary = next(
        (line for line in stats_output.strip().splitlines() if _SUMMARY_RE.search(line)), None
    )
    if summary is None:
        return None

    def _number(pattern: "re.Pattern[str]") -> int:
        match = pattern.search(summary)
        return int(match.group(1)) if match else 0

    return DiffStats(
        files_changed=_number(_FILES_RE),
        insertions=_number(_INSERTIONS_RE),
        deletions=_number(_DELETIONS_RE),
    )


def resolve_stat_path(path: str) -> str:
    """Reduce git's rename notation (``a => b``, ``dir/{a => b}/f``) to the new path."""
    path = path.strip()
    if "=>" not in path:
        return path
    path = _BRACE_RENAME_RE.sub(lambda m: m.group(2), path)
    if " => " in path:
        path = path.split(" => ", 1)[1]
    return re.sub(r"/{2,}", "/", path).strip("/")


def directory_of(path: str) -> str:
    return posixpath.dirname(path) or "."


def analyze_file_impact(
    stats_output: Optional[str],
    include_dirs: Sequence[str] = (),
    exclude_dirs: Sequence[str] = (),
) -> Optional[FileImpactSummary]:
    """Per-file and per-directory change counts for one commit.

    Only in-scope source files count. Directory percentages are relative to
    the busiest directory. Returns None when nothing counted.
    """
    if not stats_output:
        return None

    file_changes: Dict[str, int] = {}
    directory_changes: Dict[str, int] = {}

    for raw_line in stats_output.splitlines():
        line = raw_line.strip()
        if not line or _SUMMARY_RE.search(line):
            continue
        match = _STAT_LINE_RE.match(line)
        if not match:
            continue

        path = resolve_stat_path(match.group(1))
        if not in_scope(path, include_dirs, exclude_dirs) or not should_include_file(path):
            continue

        changes = int(match.group(2))
        file_changes[path] = file_changes.get(path, 0) + changes
        directory = directory_of(path)
        directory_changes[directory] = directory_changes.get(directory, 0) + changes

    if sum(directory_changes.values()) == 0:
        return None

    return FileImpactSummary(
        top_files=rank_files(file_changes),
        directory_impact=rank_directories(directory_changes),
        file_changes=file_changes,
        directory_changes=directory_changes,
    )


def rank_files(file_changes: Dict[str, int], limit: int = TOP_FILES_LIMIT) -> List[FileImpact]:
    ranked = sorted(file_changes.items(), key=lambda item: -item[1])
    return [FileImpact(path, changes) for path, changes in ranked[:limit]]


def rank_directories(directory_changes: Dict[str, int]) -> List[DirectoryImpact]:
    """All directories, busiest first, with percentage of the busiest one."""
    if not directory_changes:
        return []
    max_changes = max(directory_changes.values())
    ranked = sorted(directory_changes.items(), key=lambda item: -item[1])
    return [
        DirectoryImpact(
            directory,
            changes,
            round_half_up(changes / max_changes * 100, 1) if max_changes else 0.0,
        )
        for directory, changes in ranked
    ]


def group_paths(directory_impact: Sequence[DirectoryImpact], total: Optional[int] = None) -> Dict[str, DirectoryNode]:
    """Fold a flat directory list into a tree keyed by path segment.

    Each directory's changes are added to its own node and to every
    ancestor, so the top-level nodes sum to the flat list's total.
    Percentages are relative to ``total`` (default: that same sum).
    """
    if total is None:
        total = sum(d.changes for d in directory_impact)

    roots: Dict[str, DirectoryNode] = {}
    for entry in directory_impact:
        level = roots
        current_path = ""
        for segment in entry.directory.split("/"):
            current_path = f"{current_path}/{segment}" if current_path else segment
            node = level.get(segment)
            if node is None:
                node = level[segment] = DirectoryNode(path=current_path)
            node.changes += entry.changes
            level = node.children

    _apply_percentages(roots, total)
    return roots


def _apply_percentages(nodes: Dict[str, DirectoryNode], total: int) -> None:
    for node in nodes.values():
        node.percentage = round_half_up(node.changes / total * 100, 1) if total else 0.0
        _apply_percentages(node.children, total)
