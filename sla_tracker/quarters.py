"""
Quarter Calendar
Author: CloudOps-SRE-Toolkit
Description: Calendar-quarter boundaries and duration helpers used as SLA reporting windows
"""

import re
import math
from datetime import datetime, timedelta, timezone, tzinfo
from typing import List, Optional, Tuple

from .models import QuarterInfo

_LABEL_PATTERN = re.compile(r'^(\d{4})-Q([1-4])$')


def _check_quarter(quarter: int):
    if quarter not in (1, 2, 3, 4):
        raise ValueError(f"Quarter must be between 1 and 4, got {quarter}")


def quarter_of(date: datetime) -> int:
    """Get quarter number (1-4) from a date"""
    return (date.month - 1) // 3 + 1


def quarter_start(year: int, quarter: int, tz: tzinfo = timezone.utc) -> datetime:
    """First instant of the quarter"""
    _check_quarter(quarter)
    return datetime(year, (quarter - 1) * 3 + 1, 1, tzinfo=tz)


def quarter_end(year: int, quarter: int, tz: tzinfo = timezone.utc) -> datetime:
    """Last millisecond of the quarter, 1ms before the next quarter starts"""
    _check_quarter(quarter)
    if quarter == 4:
        next_start = quarter_start(year + 1, 1, tz)
    else:
        next_start = quarter_start(year, quarter + 1, tz)
    return next_start - timedelta(milliseconds=1)


def quarter_bounds(year: int, quarter: int, tz: tzinfo = timezone.utc) -> Tuple[datetime, datetime]:
    return quarter_start(year, quarter, tz), quarter_end(year, quarter, tz)


def total_minutes(start: datetime, end: datetime) -> float:
    """Length of a window in (fractional) minutes, measured in elapsed UTC time"""
    return (end.astimezone(timezone.utc) - start.astimezone(timezone.utc)).total_seconds() / 60


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def duration_minutes(start: datetime, end: datetime) -> int:
    """Length of a window rounded half up to whole minutes"""
    return round_half_up(total_minutes(start, end))


def quarter_total_minutes(year: int, quarter: int, tz: tzinfo = timezone.utc) -> float:
    return total_minutes(*quarter_bounds(year, quarter, tz))


def format_quarter_label(year: int, quarter: int) -> str:
    return f"{year}-Q{quarter}"


def quarter_label(date: datetime) -> str:
    """Get quarter label (e.g. "2025-Q1") for a date"""
    return format_quarter_label(date.year, quarter_of(date))


def parse_quarter_label(label: str) -> Optional[Tuple[int, int]]:
    """Parse "2025-Q1" into (2025, 1); None when the label does not match"""
    match = _LABEL_PATTERN.match(label.strip())
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def quarter_info(year: int, quarter: int, tz: tzinfo = timezone.utc) -> QuarterInfo:
    start, end = quarter_bounds(year, quarter, tz)
    return QuarterInfo(
        year=year,
        quarter=quarter,
        label=format_quarter_label(year, quarter),
        start=start,
        end=end
    )


def is_date_in_quarter(date: datetime, year: int, quarter: int, tz: tzinfo = timezone.utc) -> bool:
    start, end = quarter_bounds(year, quarter, tz)
    return start <= date <= end


def previous_quarter(year: int, quarter: int) -> Tuple[int, int]:
    if quarter == 1:
        return year - 1, 4
    return year, quarter - 1


def next_quarter(year: int, quarter: int) -> Tuple[int, int]:
    if quarter == 4:
        return year + 1, 1
    return year, quarter + 1


def quarters_between(start: datetime, end: datetime, tz: tzinfo = timezone.utc) -> List[QuarterInfo]:
    """All quarters touched by [start, end], oldest first"""
    quarters = []
    local_start = start.astimezone(tz)
    year, quarter = local_start.year, quarter_of(local_start)

    while quarter_start(year, quarter, tz) <= end:
        quarters.append(quarter_info(year, quarter, tz))
        year, quarter = next_quarter(year, quarter)

    return quarters


def recent_quarters(now: datetime, count: int = 8, tz: tzinfo = timezone.utc) -> List[QuarterInfo]:
    """The current quarter and the ones before it, newest first (8 = two years)"""
    local_now = now.astimezone(tz)
    year, quarter = local_now.year, quarter_of(local_now)

    quarters = []
    for _ in range(count):
        quarters.append(quarter_info(year, quarter, tz))
        year, quarter = previous_quarter(year, quarter)

    return quarters


def format_duration(minutes: int) -> str:
    """Human-readable duration: 45m, 2h 5m, 1d 2h"""
    minutes = int(minutes)
    if minutes < 60:
        return f"{minutes}m"

    hours, remaining_minutes = divmod(minutes, 60)
    if hours < 24:
        return f"{hours}h {remaining_minutes}m" if remaining_minutes else f"{hours}h"

    days, remaining_hours = divmod(hours, 24)
    if remaining_hours:
        return f"{days}d {remaining_hours}h"
    return f"{days}d"
