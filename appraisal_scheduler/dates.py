"""Calendar-date helpers: normalization, day arithmetic, anniversaries and the local date."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pandas as pd
import pytz


def to_calendar_date(value) -> date:
    """
    Reduce a date-like value to a plain calendar date.

    Accepts ``date``, ``datetime``, ``pd.Timestamp`` or an ISO string. Any
    time-of-day or UTC offset is dropped without conversion, so the wall-clock
    date that was entered is the date that is kept.
    """
    if value is None:
        raise ValueError("Date value is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    ts = pd.Timestamp(value)
    if pd.isna(ts):
        raise ValueError(f"Not a date: {value!r}")
    return ts.date()


def optional_calendar_date(value) -> date | None:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    if not isinstance(value, (date, datetime)) and pd.isna(value):
        return None
    return to_calendar_date(value)


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=int(days))


def first_anniversary(day: date) -> date:
    # 29 Feb rolls back to 28 Feb
    return (pd.Timestamp(day) + pd.DateOffset(years=1)).date()


def local_today(tz, now: datetime | None = None) -> date:
    """Current date in ``tz`` (a pytz timezone). Naive ``now`` is taken as UTC."""
    if now is None:
        now = datetime.now(tz)
    elif now.tzinfo is None:
        now = pytz.utc.localize(now).astimezone(tz)
    else:
        now = now.astimezone(tz)
    return now.date()
