"""
Month bucketing helpers

Builds the ordered, zero-filled month skeleton that the monthly sales
timeline is counted into.
"""
from __future__ import annotations
from datetime import datetime
from typing import Dict, Iterable, NamedTuple
import pandas as pd
from dateutil.relativedelta import relativedelta


class DateRange(NamedTuple):
    start: datetime
    end: datetime


def month_key(date: datetime) -> str:
    """Format a date as its "YYYY-MM" bucket key"""
    return f"{date.year:04d}-{date.month:02d}"


def _to_month_period(date: datetime) -> pd.Period:
    # Built from fields so tz-aware datetimes don't trigger pandas' tz-drop warning
    return pd.Period(year=date.year, month=date.month, freq="M")


def get_date_range(dates: Iterable[datetime], now: datetime | None = None) -> DateRange:
    """
    Earliest and latest of a set of dates

    Args:
        dates: Absolute dates (any order)
        now: Used for both bounds when dates is empty

    Returns:
        DateRange(start, end)
    """
    ordered = sorted(dates)
    if not ordered:
        now = now or datetime.now()
        return DateRange(now, now)
    return DateRange(ordered[0], ordered[-1])


def generate_period(start: datetime, end: datetime) -> Dict[str, int]:
    """
    Zero-initialized month skeleton from start's month to end's month, inclusive

    >>> generate_period(datetime(2024, 1, 15), datetime(2024, 3, 2))
    {'2024-01': 0, '2024-02': 0, '2024-03': 0}
    """
    months = pd.period_range(
        start=_to_month_period(start),
        end=_to_month_period(end),
        freq="M",
    )
    return {str(period): 0 for period in months}


def trailing_period(now: datetime | None = None, months: int = 12) -> Dict[str, int]:
    """Skeleton for the last `months` months, ending with now's month"""
    if months < 1:
        return {}
    now = now or datetime.now()
    return generate_period(now - relativedelta(months=months - 1), now)
