"""Calendar and rounding helpers shared by the aggregation services."""

from __future__ import annotations

import calendar
import math
from datetime import datetime, timedelta

SECONDS_PER_DAY = 24 * 60 * 60


def month_start(value: datetime) -> datetime:
    return datetime(value.year, value.month, 1)


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """Return ``[start, end)`` for a calendar month."""
    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    return start, end


def previous_month(year: int, month: int) -> tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def month_end(value: datetime) -> datetime:
    """Last instant of ``value``'s month."""
    _, end = month_bounds(value.year, value.month)
    return end - timedelta(microseconds=1)


def add_months(value: datetime, months: int) -> datetime:
    """Shift by whole months, clamping the day to the target month's length."""
    index = value.month - 1 + months
    year = value.year + index // 12
    month = index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def ceil_days(delta: timedelta) -> int:
    """Whole days in ``delta``, rounding partial days up (negative deltas toward zero)."""
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def half_up(value: float) -> int:
    """Round halves toward positive infinity (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def percent(part: float, whole: float) -> int:
    """``part / whole`` as a rounded percentage; 0 when ``whole`` is not positive."""
    if whole <= 0:
        return 0
    return half_up(part / whole * 100)
