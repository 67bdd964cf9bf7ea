"""Resolve a requested calendar date to the trading day queried upstream.

FX markets publish no fresh closes on weekends, so Saturday and Sunday roll
back to the preceding Friday. Dates are read in a fixed UTC-4 offset, an
approximation of New York time that ignores DST. Midnight at that offset is
converted to UTC before the weekday is read.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import TypedDict

NEW_YORK_OFFSET = timezone(timedelta(hours=-4))

SATURDAY = 5
SUNDAY = 6


class ResolvedDate(TypedDict):
    iso: str
    mdy: str


def to_mmddyyyy(day: date) -> str:
    """Format date as MM/DD/YYYY for WSJ request parameters."""
    return day.strftime("%m/%d/%Y")


def prior_business_day_if_weekend(day: date) -> date:
    weekday = day.weekday()
    if weekday == SATURDAY:
        return day - timedelta(days=1)
    if weekday == SUNDAY:
        return day - timedelta(days=2)
    return day


def utc_day(iso: str) -> date:
    """Calendar day in UTC of midnight New York time on *iso*.

    Midnight at UTC-4 is 04:00 UTC on the same day.
    """
    local_midnight = datetime.combine(date.fromisoformat(iso), time.min, NEW_YORK_OFFSET)
    return local_midnight.astimezone(timezone.utc).date()


def resolve_trading_day(iso: str) -> ResolvedDate:
    """Resolve an ISO date (YYYY-MM-DD) to the trading day to query.

    Raises ValueError if *iso* is not a valid calendar date.
    """
    day = prior_business_day_if_weekend(utc_day(iso))
    return ResolvedDate(iso=day.isoformat(), mdy=to_mmddyyyy(day))
