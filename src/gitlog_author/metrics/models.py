"""Data models for velocity, impact and commit type metrics."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


class CommitType(Enum):
    FEATURE = "FEATURE"
    BUG_FIX = "BUG_FIX"
    REFACTOR = "REFACTOR"
    DOCS = "DOCS"
    TEST = "TEST"
    CONFIG = "CONFIG"
    UNKNOWN = "UNKNOWN"


@dataclass
class TypeShare:
    type: CommitType
    count: int
    percentage: float  # of all category occurrences, 2 decimals


@dataclass
class CommitTypeMetrics:
    type_breakdown: List[TypeShare] = field(default_factory=list)  # count desc, then name
    primary_contribution_type: CommitType = CommitType.UNKNOWN


@dataclass
class DiffStats:
    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0

    @property
    def total_changes(self) -> int:
        return self.insertions + self.deletions


@dataclass
class FileImpact:
    path: str
    changes: int


@dataclass
class DirectoryImpact:
    directory: str
    changes: int
    percentage: float  # relative to the largest directory, 1 decimal


@dataclass
class DirectoryNode:
    path: str  # full path from the repository root
    changes: int = 0
    percentage: float = 0.0  # relative to the grand total, 1 decimal
    children: Dict[str, "DirectoryNode"] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclass
class FileImpactSummary:
    """Impact of a single commit's ``--stat`` output."""

    top_files: List[FileImpact]
    directory_impact: List[DirectoryImpact]
    file_changes: Dict[str, int]
    directory_changes: Dict[str, int]


@dataclass
class TimeDistribution:
    morning: float = 0.0  # [05:00, 12:00)
    afternoon: float = 0.0  # [12:00, 17:00)
    evening: float = 0.0  # 17:00 to 04:59


@dataclass
class ImpactMetrics:
    top_files: List[FileImpact] = field(default_factory=list)
    directory_impact: List[DirectoryImpact] = field(default_factory=list)
    grouped_directories: Dict[str, DirectoryNode] = field(default_factory=dict)


@dataclass
class VelocityMetrics:
    total_lines_changed: int = 0
    average_commit_size: int = 0
    commits_per_day: float = 0.0
    time_distribution: TimeDistribution = field(default_factory=TimeDistribution)
    impact: ImpactMetrics = field(default_factory=ImpactMetrics)
    type_metrics: CommitTypeMetrics = field(default_factory=CommitTypeMetrics)
