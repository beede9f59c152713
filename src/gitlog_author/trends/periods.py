"""Calendar periods in UTC: alignment, stepping and formatting."""

import calendar
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from typing import Callable, Dict

from ..exceptions import ErrorCode, ValidationError

_END_OF_DAY = time(23, 59, 59, 999000)


def to_utc(moment: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def format_iso(moment: datetime) -> str:
    """``2024-02-06T00:00:00.000Z``, millisecond precision in UTC."""
    moment = to_utc(moment)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def _day_start(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time(0), tzinfo=timezone.utc)


def _day_end(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), _END_OF_DAY, tzinfo=timezone.utc)


def add_months(moment: datetime, months: int) -> datetime:
    """Shift by calendar months, clamping the day to the target month's length."""
    index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def add_years(moment: datetime, years: int) -> datetime:
    year = moment.year + years
    day = min(moment.day, calendar.monthrange(year, moment.month)[1])
    return moment.replace(year=year, day=day)


# ── Alignment ───────────────────────────────────────────────────────


def _daily_start(moment: datetime) -> datetime:
    return _day_start(to_utc(moment))


def _daily_end(moment: datetime) -> datetime:
    return _day_end(to_utc(moment))


def _days_since_sunday(moment: datetime) -> int:
    # weekday(): Monday is 0, Sunday is 6
    return (moment.weekday() + 1) % 7


def _weekly_start(moment: datetime) -> datetime:
    moment = to_utc(moment)
    return _day_start(moment - timedelta(days=_days_since_sunday(moment)))


def _weekly_end(moment: datetime) -> datetime:
    moment = to_utc(moment)
    return _day_end(moment + timedelta(days=6 - _days_since_sunday(moment)))


def _monthly_start(moment: datetime) -> datetime:
    return _day_start(to_utc(moment).replace(day=1))


def _monthly_end(moment: datetime) -> datetime:
    moment = to_utc(moment)
    last_day = calendar.monthrange(moment.year, moment.month)[1]
    return _day_end(moment.replace(day=last_day))


def _yearly_start(moment: datetime) -> datetime:
    return _day_start(to_utc(moment).replace(month=1, day=1))


def _yearly_end(moment: datetime) -> datetime:
    return _day_end(to_utc(moment).replace(month=12, day=31))


@dataclass(frozen=True)
class Period:
    name: str
    label: str  # "Day", "Week", ...
    start_of: Callable[[datetime], datetime]
    end_of: Callable[[datetime], datetime]
    step_back: Callable[[datetime, int], datetime]


PERIODS: Dict[str, Period] = {
    "daily": Period(
        "daily", "Day", _daily_start, _daily_end,
        lambda d, i: d - timedelta(days=i),
    ),
    "weekly": Period(
        "weekly", "Week", _weekly_start, _weekly_end,
        lambda d, i: d - timedelta(days=7 * i),
    ),
    "monthly": Period(
        "monthly", "Month", _monthly_start, _monthly_end,
        lambda d, i: add_months(d, -i),
    ),
    "yearly": Period(
        "yearly", "Year", _yearly_start, _yearly_end,
        lambda d, i: add_years(d, -i),
    ),
}


def get_period(name: str) -> Period:
    period = PERIODS.get(name)
    if period is None:
        raise ValidationError(
            f"Invalid period: {name}. Must be one of: {', '.join(PERIODS)}",
            code=ErrorCode.INVALID_TREND_PERIOD,
            details={"period": name},
        )
    return period
