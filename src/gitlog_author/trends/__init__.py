"""Calendar-period contribution trends."""

from .calculator import (
    CLI_PERIODS,
    DEFAULT_PERIOD_COUNTS,
    TrendCalculator,
    calculate_trend_metrics,
    plan_trend_window,
)
from .models import TrendMetrics, TrendPeriod, TrendTimeDistribution, TrendWindow
from .periods import PERIODS, Period, add_months, format_iso, get_period, to_utc

__all__ = [
    "CLI_PERIODS",
    "DEFAULT_PERIOD_COUNTS",
    "TrendCalculator",
    "calculate_trend_metrics",
    "plan_trend_window",
    "TrendMetrics",
    "TrendPeriod",
    "TrendTimeDistribution",
    "TrendWindow",
    "PERIODS",
    "Period",
    "add_months",
    "format_iso",
    "get_period",
    "to_utc",
]
