from datetime import date

import pytest

from custom_components.light_energy.api import RequestError
from custom_components.light_energy.models import MonthlyUsagePage, MonthlyUsageRecord
from custom_components.light_energy.usage import async_trailing_n_months_summary

TODAY = date(2024, 12, 15)


def _year(year: int, *, count: int = 12, units: str = "kWh", previous: str | None = None) -> MonthlyUsagePage:
    months = tuple(
        MonthlyUsageRecord(month=f"{year}-{month:02d}", consumption=float(month))
        for month in range(1, count + 1)
    )
    return MonthlyUsagePage(year=year, units=units, months=months, previous=previous)


class FakeUsageClient:
    def __init__(self, pages: dict[int, MonthlyUsagePage]) -> None:
        self.pages = pages
        self.calls: list[str] = []

    async def async_get_monthly_usage(self, account_uuid, location_uuid, year):
        self.calls.append(year)
        page = self.pages[int(year)]
        if isinstance(page, Exception):
            raise page
        return page


async def test_walks_back_one_year_to_fill_window():
    client = FakeUsageClient(
        {
            2024: _year(2024, units="Wh", previous="2023"),
            2023: _year(2023, units="kWh", previous="2022"),
        }
    )

    summary = await async_trailing_n_months_summary(client, "acct", "loc", 15, today=TODAY)

    assert client.calls == ["2024", "2023"]
    assert len(summary.months) == 15
    assert summary.months[0].month == "2023-10"
    assert summary.months[-1].month == "2024-12"
    assert summary.units == "kWh"


async def test_stops_when_history_is_exhausted():
    client = FakeUsageClient(
        {
            2024: _year(2024, previous="2023"),
            2023: _year(2023, count=0),
        }
    )

    summary = await async_trailing_n_months_summary(client, "acct", "loc", 15, today=TODAY)

    assert client.calls == ["2024", "2023"]
    assert [record.month for record in summary.months] == [f"2024-{m:02d}" for m in range(1, 13)]


async def test_empty_year_with_previous_marker_keeps_walking():
    client = FakeUsageClient(
        {
            2024: _year(2024, count=3, previous="2023"),
            2023: _year(2023, count=0, previous="2022"),
            2022: _year(2022),
        }
    )

    summary = await async_trailing_n_months_summary(client, "acct", "loc", 6, today=TODAY)

    assert client.calls == ["2024", "2023", "2022"]
    assert [record.month for record in summary.months] == [
        "2022-10",
        "2022-11",
        "2022-12",
        "2024-01",
        "2024-02",
        "2024-03",
    ]


async def test_missing_previous_marker_halts_traversal():
    client = FakeUsageClient({2024: _year(2024, count=5)})

    summary = await async_trailing_n_months_summary(client, "acct", "loc", 12, today=TODAY)

    assert client.calls == ["2024"]
    assert len(summary.months) == 5


async def test_current_year_alone_satisfies_window():
    client = FakeUsageClient({2024: _year(2024, previous="2023")})

    summary = await async_trailing_n_months_summary(client, "acct", "loc", 3, today=TODAY)

    assert client.calls == ["2024"]
    assert [record.month for record in summary.months] == ["2024-10", "2024-11", "2024-12"]


async def test_fetch_failure_propagates():
    client = FakeUsageClient(
        {
            2024: _year(2024, count=2, previous="2023"),
            2023: RequestError("boom", status=500),
        }
    )

    with pytest.raises(RequestError):
        await async_trailing_n_months_summary(client, "acct", "loc", 12, today=TODAY)
    assert client.calls == ["2024", "2023"]


async def test_rejects_non_positive_window():
    client = FakeUsageClient({})

    with pytest.raises(ValueError):
        await async_trailing_n_months_summary(client, "acct", "loc", 0, today=TODAY)
    assert client.calls == []
