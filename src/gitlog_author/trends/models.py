"""Data models for period-bucketed contribution trends."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict

from ..metrics.models import CommitType


@dataclass
class TrendTimeDistribution:
    morning: int = 0
    afternoon: int = 0
    evening: int = 0
    morning_percent: int = 0
    afternoon_percent: int = 0
    evening_percent: int = 0


@dataclass
class TrendMetrics:
    commit_count: int = 0
    time_distribution: TrendTimeDistribution = field(default_factory=TrendTimeDistribution)
    commit_types: Dict[CommitType, int] = field(default_factory=dict)


@dataclass
class TrendPeriod:
    period: str  # daily | weekly | monthly | yearly
    start_date: str  # ISO-8601 UTC, millisecond precision
    end_date: str  # inclusive
    metrics: TrendMetrics = field(default_factory=TrendMetrics)


@dataclass
class TrendWindow:
    """Date range and number of rolling steps for a trend report."""

    start: datetime
    end: datetime
    count: int
