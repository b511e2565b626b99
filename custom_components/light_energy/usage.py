"""Trailing window of monthly usage assembled from yearly pages."""
from __future__ import annotations

import logging
from datetime import date
from typing import Protocol

from .const import DEFAULT_UNITS
from .date_utils import local_today
from .models import MonthlyUsagePage, MonthlyUsageSummary

_LOGGER = logging.getLogger(__name__)


class MonthlyUsageSource(Protocol):
    """Anything that can return one year of monthly usage."""

    async def async_get_monthly_usage(
        self, account_uuid: str, location_uuid: str, year: int | str
    ) -> MonthlyUsagePage:
        ...


def _month_count(pages: list[MonthlyUsagePage]) -> int:
    return sum(len(page.months) for page in pages)


async def async_trailing_n_months_summary(
    client: MonthlyUsageSource,
    account_uuid: str,
    location_uuid: str,
    n: int,
    *,
    today: date | None = None,
) -> MonthlyUsageSummary:
    """Return the most recent ``n`` months of usage, oldest first.

    Starts at the current year and walks back one year at a time while fewer
    than ``n`` months are collected and the last page reports an earlier year
    (a truthy ``previous`` marker). Pages are fetched one after another since
    each page decides whether another is needed.

    Errors from ``client`` propagate unchanged; nothing collected before the
    failure is returned.
    """
    if n < 1:
        raise ValueError(f"Number of months must be positive, got {n}")

    today = today or local_today()

    pages = [await client.async_get_monthly_usage(account_uuid, location_uuid, str(today.year))]
    total = _month_count(pages)

    while total < n and pages[-1].previous:
        year = pages[-1].year - 1
        _LOGGER.debug(
            "Trailing window has %d of %d months, fetching %s for location %s",
            total,
            n,
            year,
            location_uuid,
        )
        pages.append(await client.async_get_monthly_usage(account_uuid, location_uuid, str(year)))
        total = _month_count(pages)

    pages.reverse()
    months = [record for page in pages for record in page.months]
    units = pages[0].units if pages else DEFAULT_UNITS

    _LOGGER.debug(
        "Trailing window for location %s: %d pages, %d months, keeping %d",
        location_uuid,
        len(pages),
        len(months),
        min(n, len(months)),
    )

    return MonthlyUsageSummary(units=units, months=tuple(months[-n:]))
