"""Velocity, impact and commit type metrics."""

from .commit_types import COMMIT_TYPE_RULES, calculate_type_metrics, categorize_commit, is_test_file
from .rounding import round_half_up
from .models import (
    CommitType,
    CommitTypeMetrics,
    DiffStats,
    DirectoryImpact,
    DirectoryNode,
    FileImpact,
    FileImpactSummary,
    ImpactMetrics,
    TimeDistribution,
    TypeShare,
    VelocityMetrics,
)
from .stats import analyze_file_impact, group_paths, parse_git_stats, resolve_stat_path
from .velocity import VelocityCalculator, commit_stat_details, commits_per_day, local_hour, time_bucket

__all__ = [
    "COMMIT_TYPE_RULES",
    "calculate_type_metrics",
    "categorize_commit",
    "is_test_file",
    "CommitType",
    "CommitTypeMetrics",
    "DiffStats",
    "DirectoryImpact",
    "DirectoryNode",
    "FileImpact",
    "FileImpactSummary",
    "ImpactMetrics",
    "TimeDistribution",
    "TypeShare",
    "VelocityMetrics",
    "analyze_file_impact",
    "group_paths",
    "parse_git_stats",
    "resolve_stat_path",
    "round_half_up",
    "VelocityCalculator",
    "commit_stat_details",
    "commits_per_day",
    "local_hour",
    "time_bucket",
]
