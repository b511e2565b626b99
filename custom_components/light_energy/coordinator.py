"""DataUpdateCoordinator for Light Energy."""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryAuthFailed
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed
from homeassistant.util import dt as dt_util

from .api import LightApiAuthError, LightApiClient, LightApiError
from .chart_data import (
    ViewType,
    format_chart_data,
    get_data_completeness_info,
    summarize_consumption,
)
from .const import DEFAULT_TRAILING_MONTHS, DEFAULT_UPDATE_INTERVAL, DOMAIN
from .data_validation import DataValidationError
from .models import (
    ChartDataPoint,
    DailyUsagePage,
    Invoice,
    LocationUsageSnapshot,
    MonthlyUsageSummary,
)
from .usage import async_trailing_n_months_summary

_LOGGER = logging.getLogger(__name__)


def _last_complete_month(points: list[ChartDataPoint]) -> float | None:
    for point in reversed(points):
        if not point.is_partial:
            return point.consumption
    return None


def build_usage_snapshot(
    location_uuid: str,
    trailing: MonthlyUsageSummary,
    daily: DailyUsagePage,
    invoices: list[Invoice] | None = None,
    *,
    today: date,
    now: datetime | None = None,
) -> LocationUsageSnapshot:
    """Combine the fetched pages into what the sensors display."""
    monthly_points = format_chart_data(trailing, ViewType.MONTHLY, today=today)
    daily_points = format_chart_data(daily, ViewType.DAILY, today=today)

    return LocationUsageSnapshot(
        location_uuid=location_uuid,
        units=trailing.units,
        trailing=trailing,
        daily=daily,
        monthly_points=monthly_points,
        daily_points=daily_points,
        daily_completeness=get_data_completeness_info(daily, ViewType.DAILY, today=today),
        trailing_consumption=summarize_consumption(monthly_points),
        current_month_consumption=summarize_consumption(daily_points),
        last_month_consumption=_last_complete_month(monthly_points),
        latest_invoice=invoices[0] if invoices else None,
        last_updated=now,
    )


async def async_fetch_usage_snapshot(
    client: LightApiClient,
    account_uuid: str,
    location_uuid: str,
    trailing_months: int = DEFAULT_TRAILING_MONTHS,
    *,
    now: datetime | None = None,
) -> LocationUsageSnapshot:
    """Fetch every page for one location and build its snapshot.

    Auth failures surface as ``ConfigEntryAuthFailed`` so Home Assistant starts
    reauth; other API or payload errors surface as ``UpdateFailed``. Invoices
    are optional and a failed invoice fetch leaves ``latest_invoice`` empty.
    """
    now = now or dt_util.now()
    today = now.date()

    _LOGGER.debug(
        "Update start | location=%s | trailing_months=%s",
        location_uuid,
        trailing_months,
    )

    try:
        trailing = await async_trailing_n_months_summary(
            client,
            account_uuid,
            location_uuid,
            trailing_months,
            today=today,
        )
        daily = await client.async_get_daily_usage(account_uuid, location_uuid, today.month, today.year)
    except LightApiAuthError as err:
        _LOGGER.error("Authentication failed: %s", err)
        raise ConfigEntryAuthFailed(f"Authentication failed: {err}") from err
    except LightApiError as err:
        _LOGGER.error("API error during update: %s", err)
        raise UpdateFailed(f"API error: {err}") from err
    except DataValidationError as err:
        _LOGGER.error("Invalid usage data during update: %s", err)
        raise UpdateFailed(f"Invalid usage data: {err}") from err

    try:
        invoices = await client.async_get_invoices(account_uuid)
    except (LightApiError, DataValidationError) as err:
        _LOGGER.debug("Invoice fetch failed for account %s: %s", account_uuid, err, exc_info=True)
        invoices = []

    snapshot = build_usage_snapshot(
        location_uuid,
        trailing,
        daily,
        invoices,
        today=today,
        now=now,
    )
    _LOGGER.debug(
        "Update done | months=%d trailing=%s current_month=%s completeness=%s",
        len(trailing.months),
        snapshot.trailing_consumption,
        snapshot.current_month_consumption,
        snapshot.daily_completeness,
    )
    return snapshot


class LightEnergyCoordinator(DataUpdateCoordinator[LocationUsageSnapshot]):
    """Fetch the trailing window and the current month for one location."""

    def __init__(
        self,
        hass: HomeAssistant,
        client: LightApiClient,
        *,
        account_uuid: str,
        location_uuid: str,
        trailing_months: int = DEFAULT_TRAILING_MONTHS,
        update_interval: timedelta = DEFAULT_UPDATE_INTERVAL,
    ) -> None:
        self.client = client
        self.account_uuid = account_uuid
        self.location_uuid = location_uuid
        self.trailing_months = trailing_months

        super().__init__(
            hass,
            _LOGGER,
            name=DOMAIN,
            update_interval=update_interval,
        )

    async def _async_update_data(self) -> LocationUsageSnapshot:
        return await async_fetch_usage_snapshot(
            self.client,
            self.account_uuid,
            self.location_uuid,
            self.trailing_months,
        )
