from datetime import date

import pytest

from custom_components.light_energy.date_utils import (
    days_in_month,
    is_current_month,
    is_current_year,
    last_day_with_data,
    last_month_with_data,
    month_number,
    parse_local_date,
)
from custom_components.light_energy.models import DailyUsageRecord, MonthlyUsageRecord


@pytest.mark.parametrize(
    ("month", "year", "expected"),
    [
        (2, 2024, 29),
        (2, 2023, 28),
        (2, 2000, 29),
        (2, 1900, 28),
        (1, 2025, 31),
        (4, 2025, 30),
        (12, 2025, 31),
    ],
)
def test_days_in_month(month, year, expected):
    assert days_in_month(month, year) == expected


def test_days_in_month_rejects_invalid_month():
    with pytest.raises(ValueError):
        days_in_month(13, 2025)


def test_current_month_and_year():
    today = date(2025, 1, 20)
    assert is_current_month(1, 2025, today)
    assert not is_current_month(2, 2025, today)
    assert not is_current_month(1, 2024, today)
    assert is_current_year(2025, today)
    assert not is_current_year(2024, today)


def test_current_month_implies_current_year():
    today = date(2025, 6, 1)
    for year in (2024, 2025, 2026):
        for month in range(1, 13):
            if is_current_month(month, year, today):
                assert is_current_year(year, today)


def test_parse_local_date_keeps_calendar_day():
    assert parse_local_date("2025-01-01") == date(2025, 1, 1)
    assert parse_local_date("2025-12-31T23:30:00-08:00") == date(2025, 12, 31)


@pytest.mark.parametrize("value", ["", "not-a-date", "2025-13-01", "2025-02-30", None, 20250101])
def test_parse_local_date_rejects_malformed(value):
    assert parse_local_date(value) is None


def test_month_number():
    assert month_number("January") == 1
    assert month_number("sep") == 9
    assert month_number(" December ") == 12
    assert month_number("Smarch") is None


def test_last_day_with_data_uses_latest_date():
    days = [
        DailyUsageRecord(day=date(2025, 1, 3), consumption=2.0),
        DailyUsageRecord(day=date(2025, 1, 1), consumption=1.0),
    ]
    assert last_day_with_data(days) == 3


def test_last_day_with_data_counts_zero_consumption():
    days = [
        DailyUsageRecord(day=date(2025, 1, 1), consumption=1.0),
        DailyUsageRecord(day=date(2025, 1, 9), consumption=0.0),
    ]
    assert last_day_with_data(days) == 9


def test_last_day_with_data_ignores_negative_consumption():
    days = [
        DailyUsageRecord(day=date(2025, 1, 1), consumption=1.0),
        DailyUsageRecord(day=date(2025, 1, 9), consumption=-1.0),
    ]
    assert last_day_with_data(days) == 1


def test_last_day_with_data_empty():
    assert last_day_with_data([]) is None
    assert last_day_with_data(None) is None


def test_last_month_with_data():
    months = [
        MonthlyUsageRecord(month="January", consumption=10.0),
        MonthlyUsageRecord(month="February", consumption=0.0),
        MonthlyUsageRecord(month="March", consumption=-1.0),
    ]
    assert last_month_with_data(months) == "February"
    assert last_month_with_data([]) is None
