"""Normalise usage pages into dense, annotated chart series."""
from __future__ import annotations

import calendar
import logging
from collections.abc import Iterable, Sequence
from datetime import date
from enum import StrEnum

from .date_utils import (
    days_in_month,
    is_current_month,
    is_current_year,
    last_day_with_data,
    last_month_with_data,
    local_today,
    month_number,
)
from .models import (
    ChartDataPoint,
    DailyUsagePage,
    DailyUsageRecord,
    DataCompletenessInfo,
    MonthlyUsagePage,
    MonthlyUsageRecord,
    MonthlyUsageSummary,
)

_LOGGER = logging.getLogger(__name__)

UsageData = MonthlyUsagePage | MonthlyUsageSummary | DailyUsagePage


class ViewType(StrEnum):
    """Chart granularity."""

    MONTHLY = "monthly"
    DAILY = "daily"


_EMPTY_COMPLETENESS = DataCompletenessInfo(total_days=0, days_with_data=0, is_current_period=False)


def _round(value: float | None) -> float:
    return round(value or 0.0, 2)


def _resolve_month_label(label: str, current_year: int) -> tuple[str, int, int | None]:
    """Return (display name, year, month number) for a month label."""
    if "-" in label:
        year_part, _, month_part = label.partition("-")
        try:
            year, month = int(year_part), int(month_part)
        except ValueError:
            return label, current_year, None
        if not 1 <= month <= 12:
            return label, year, None
        return calendar.month_name[month], year, month

    # Bare month names belong to the current year.
    return label, current_year, month_number(label)


def format_monthly_chart_data(
    months: Sequence[MonthlyUsageRecord] | None,
    today: date | None = None,
) -> list[ChartDataPoint]:
    """One point per month; only the in-progress month is marked partial."""
    if not isinstance(months, (list, tuple)):
        return []

    today = today or local_today()

    points: list[ChartDataPoint] = []
    for record in months:
        display, year, month = _resolve_month_label(record.month, today.year)
        points.append(
            ChartDataPoint(
                day=display,
                consumption=_round(record.consumption),
                is_partial=year == today.year and month == today.month,
            )
        )
    return points


def generate_full_month_data(
    days: Iterable[DailyUsageRecord] | None,
    month: int,
    year: int,
    today: date | None = None,
) -> list[ChartDataPoint]:
    """Return one point for every calendar day of the month, in order."""
    today = today or local_today()
    total_days = days_in_month(month, year)
    this_month = is_current_month(month, year, today)

    by_day: dict[int, DailyUsageRecord] = {}
    for record in days or ():
        by_day[record.day.day] = record

    points: list[ChartDataPoint] = []
    for day_number in range(1, total_days + 1):
        record = by_day.get(day_number)
        points.append(
            ChartDataPoint(
                day=day_number,
                consumption=_round(record.consumption) if record else 0.0,
                has_data=record is not None,
                is_future=this_month and day_number > today.day,
                is_today=this_month and day_number == today.day,
            )
        )
    return points


def _effective_period(
    data: UsageData,
    selected_month: int | None,
    selected_year: int | None,
) -> tuple[int, int] | None:
    month = selected_month or getattr(data, "month", None)
    year = selected_year or getattr(data, "year", None)
    if not month or not year or not 1 <= month <= 12:
        _LOGGER.debug("No usable month/year for daily view: month=%s year=%s", month, year)
        return None
    return month, year


def get_data_completeness_info(
    data: UsageData | None,
    view_type: ViewType | str,
    selected_month: int | None = None,
    selected_year: int | None = None,
    today: date | None = None,
) -> DataCompletenessInfo:
    """Summarise how much of the displayed period has data.

    For the daily view ``days_with_data`` is the last day of the month that has
    data, not the number of days present.
    """
    if not data:
        return _EMPTY_COMPLETENESS

    today = today or local_today()

    if view_type == ViewType.MONTHLY:
        months = getattr(data, "months", None) or ()
        year = getattr(data, "year", None)
        return DataCompletenessInfo(
            total_days=12,
            days_with_data=len(months),
            is_current_period=year is not None and is_current_year(year, today),
            last_data_day=last_month_with_data(months),
        )

    period = _effective_period(data, selected_month, selected_year)
    if period is None:
        return _EMPTY_COMPLETENESS
    month, year = period

    last_day = last_day_with_data(getattr(data, "days", None))
    return DataCompletenessInfo(
        total_days=days_in_month(month, year),
        days_with_data=last_day or 0,
        is_current_period=is_current_month(month, year, today),
        last_data_day=last_day,
    )


def format_chart_data(
    data: UsageData | None,
    view_type: ViewType | str,
    selected_month: int | None = None,
    selected_year: int | None = None,
    today: date | None = None,
) -> list[ChartDataPoint]:
    """Format a usage page for the requested view.

    ``selected_month``/``selected_year`` override the period embedded in a
    daily page.
    """
    if not data:
        return []

    if view_type == ViewType.MONTHLY:
        return format_monthly_chart_data(getattr(data, "months", None), today)

    period = _effective_period(data, selected_month, selected_year)
    if period is None:
        return []
    month, year = period
    return generate_full_month_data(getattr(data, "days", None), month, year, today)


def summarize_consumption(points: Iterable[ChartDataPoint]) -> float:
    return round(sum(point.consumption for point in points), 2)
