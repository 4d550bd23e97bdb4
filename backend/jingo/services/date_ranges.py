"""
Calendar boundaries used by stats and dashboard queries

All boundaries are timezone-aware UTC.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil.relativedelta import relativedelta


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def start_of_day(now: Optional[datetime] = None) -> datetime:
    now = now or utc_now()
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_month(now: Optional[datetime] = None) -> datetime:
    return start_of_day(now).replace(day=1)


def start_of_last_month(now: Optional[datetime] = None) -> datetime:
    return start_of_month(now) - relativedelta(months=1)


def start_of_year(now: Optional[datetime] = None) -> datetime:
    return start_of_month(now).replace(month=1)


def period_start(period: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Start of a reporting period

    week: now - 7 days, month: the 1st of this month, year: Jan 1,
    all: None (no lower bound)
    """
    now = now or utc_now()
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return start_of_month(now)
    if period == "year":
        return start_of_year(now)
    if period == "all":
        return None
    raise ValueError(f"Unknown period: {period}")
