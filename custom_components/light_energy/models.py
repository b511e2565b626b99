"""Data models used by the Light Energy integration."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True, slots=True)
class MonthlyUsageRecord:
    """Usage totals for one month as returned by the API.

    ``month`` is either an English month name ("January") or "YYYY-MM".
    """

    month: str
    consumption: float
    generation: float = 0.0
    vehicle_charging: float = 0.0
    eligible_vehicle_charging: float = 0.0


@dataclass(frozen=True, slots=True)
class MonthlyUsagePage:
    """One calendar year of monthly usage."""

    year: int
    units: str
    months: tuple[MonthlyUsageRecord, ...] = ()
    previous: str | None = None
    next: str | None = None


@dataclass(frozen=True, slots=True)
class MonthlyUsageSummary:
    """The most recent months of usage, oldest first."""

    units: str
    months: tuple[MonthlyUsageRecord, ...] = ()


@dataclass(frozen=True, slots=True)
class DailyUsageRecord:
    """Usage totals for a single day."""

    day: date
    consumption: float
    generation: float = 0.0
    vehicle_charging: float = 0.0
    eligible_vehicle_charging: float = 0.0

    @property
    def date_string(self) -> str:
        return self.day.isoformat()


@dataclass(frozen=True, slots=True)
class DailyUsagePage:
    """Sparse daily usage for one month; only days with data are present."""

    month: int
    year: int
    units: str
    days: tuple[DailyUsageRecord, ...] = ()
    previous: str | None = None
    next: str | None = None


@dataclass(frozen=True, slots=True)
class ChartDataPoint:
    """A single bar of a usage chart."""

    day: str | int
    consumption: float
    is_partial: bool | None = None
    is_future: bool | None = None
    is_today: bool | None = None
    has_data: bool | None = None


@dataclass(frozen=True, slots=True)
class DataCompletenessInfo:
    """How much of the displayed period has data."""

    total_days: int
    days_with_data: int
    is_current_period: bool
    last_data_day: str | int | None = None


@dataclass(slots=True)
class CachedToken:
    """Account token held by the token cache."""

    token: str
    expires_at: datetime | None
    account_uuid: str


@dataclass(frozen=True, slots=True)
class AccountLocation:
    """A service location attached to an account."""

    uuid: str
    address_1: str
    city: str
    state: str
    postal_code: str
    utility_number: str = ""
    address_2: str = ""
    is_service_active: bool = False
    has_usage_history: bool = False
    plan_name: str | None = None

    @property
    def display_name(self) -> str:
        parts = [self.address_1, self.address_2, self.city, self.state]
        return ", ".join(part for part in parts if part) or f"Location {self.uuid}"


@dataclass(frozen=True, slots=True)
class AccountInfo:
    """The enrolled account and its locations."""

    uuid: str
    first_name: str
    last_name: str
    email: str
    locations: tuple[AccountLocation, ...] = ()

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True, slots=True)
class Invoice:
    """A bill issued for the account."""

    number: str
    invoice_date: date
    payment_due_date: date | None
    billing_period_start: date | None
    billing_period_end: date | None
    total_cents: int
    total_kwh: float
    avg_cents_per_kwh: float
    pdf: str | None = None
    paid_at: str | None = None

    @property
    def total(self) -> float:
        return round(self.total_cents / 100, 2)


@dataclass(slots=True)
class LocationUsageSnapshot:
    """Everything the sensors need for one location."""

    location_uuid: str
    units: str
    trailing: MonthlyUsageSummary
    daily: DailyUsagePage
    monthly_points: list[ChartDataPoint] = field(default_factory=list)
    daily_points: list[ChartDataPoint] = field(default_factory=list)
    daily_completeness: DataCompletenessInfo | None = None
    trailing_consumption: float = 0.0
    current_month_consumption: float = 0.0
    last_month_consumption: float | None = None
    latest_invoice: Invoice | None = None
    last_updated: datetime | None = None
