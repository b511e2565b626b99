"""Calendar helpers shared by the usage aggregator and the chart data.

Date-only strings from the API ("2025-01-03") are calendar days, not
instants. They are always read through :func:`parse_local_date`, which builds
a naive :class:`datetime.date` without passing through UTC, so a day can never
shift to its neighbour because of the Home Assistant time zone.
"""
from __future__ import annotations

import calendar
import logging
from collections.abc import Iterable
from datetime import date

from homeassistant.util import dt as dt_util

from .models import DailyUsageRecord, MonthlyUsageRecord

_LOGGER = logging.getLogger(__name__)

_MONTH_NAMES = {name.lower(): index for index, name in enumerate(calendar.month_name) if name}
_MONTH_ABBREVIATIONS = {name.lower(): index for index, name in enumerate(calendar.month_abbr) if name}


def local_today() -> date:
    """Return today's date in the configured Home Assistant time zone."""
    return dt_util.now().date()


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(month: int, year: int) -> int:
    """Return the number of days in ``month`` (1-12) of ``year``."""
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    if month == 2:
        return 29 if is_leap_year(year) else 28
    if month in (4, 6, 9, 11):
        return 30
    return 31


def is_current_month(month: int, year: int, today: date | None = None) -> bool:
    today = today or local_today()
    return today.month == month and today.year == year


def is_current_year(year: int, today: date | None = None) -> bool:
    today = today or local_today()
    return today.year == year


def parse_local_date(value: object) -> date | None:
    """Parse a "YYYY-MM-DD" string into a calendar date.

    Anything after the first ten characters (a time or offset) is ignored.
    Returns None for values that are not a valid date.
    """
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value) < 10:
        return None
    return dt_util.parse_date(value[:10])


def month_number(label: str) -> int | None:
    """Map an English month name or abbreviation to 1-12."""
    if not label:
        return None
    key = label.strip().lower()
    return _MONTH_NAMES.get(key) or _MONTH_ABBREVIATIONS.get(key)


def _has_data(consumption: float | None) -> bool:
    # Presence, not magnitude: zero counts, negative or missing does not.
    return consumption is not None and consumption >= 0


def last_day_with_data(days: Iterable[DailyUsageRecord] | None) -> int | None:
    """Return the day of month of the chronologically last record."""
    if not days:
        return None

    present = [
        record
        for record in days
        if getattr(record, "day", None) is not None and _has_data(record.consumption)
    ]
    if not present:
        _LOGGER.debug("No daily records with data")
        return None

    present.sort(key=lambda record: record.day)
    return present[-1].day.day


def last_month_with_data(months: Iterable[MonthlyUsageRecord] | None) -> str | None:
    """Return the label of the last month record that has data."""
    if not months:
        return None

    present = [record for record in months if record.month and _has_data(record.consumption)]
    if not present:
        return None
    return present[-1].month
