"""
gitlog-author - per-author git history reports

Resolves a free-text author query to that author's commits and renders
Markdown reports: a commit log, velocity and impact metrics, calendar
trends, and a risk-annotated code review packet.
"""

__version__ = "0.1.0"

from .cache import LRUCache
from .config import GitLogConfig, load_config
from .diff import ChangeSet, ChangeSetService, ChangeType, categorize
from .git import AuthorResolver, Commit, GitExecutor
from .metrics import VelocityCalculator, calculate_type_metrics, categorize_commit
from .review import RiskAssessor, RiskLevel
from .trends import TrendCalculator

__all__ = [
    "LRUCache",
    "GitLogConfig",
    "load_config",
    "ChangeSet",
    "ChangeSetService",
    "ChangeType",
    "categorize",
    "AuthorResolver",
    "Commit",
    "GitExecutor",
    "VelocityCalculator",
    "calculate_type_metrics",
    "categorize_commit",
    "RiskAssessor",
    "RiskLevel",
    "TrendCalculator",
]
