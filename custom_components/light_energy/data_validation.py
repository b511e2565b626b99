"""Validation of Light API payloads into typed models.

Numeric fields arrive as decimal strings ("123.45"). They are parsed here,
once, and the rest of the integration only sees floats.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

from .const import DEFAULT_UNITS
from .date_utils import parse_local_date
from .models import (
    AccountInfo,
    AccountLocation,
    DailyUsagePage,
    DailyUsageRecord,
    Invoice,
    MonthlyUsagePage,
    MonthlyUsageRecord,
)

_LOGGER = logging.getLogger(__name__)

_USAGE_FIELDS = ("consumption", "generation", "vehicle_charging", "eligible_vehicle_charging")


class DataValidationError(Exception):
    """Exception raised when a payload cannot be validated."""


class MalformedRecordError(DataValidationError):
    """Raised for a single record whose date or numeric field does not parse."""


def parse_decimal(value: Any, field_name: str = "value") -> float:
    """Parse a decimal string; missing or empty values count as zero."""
    if value is None or value == "":
        return 0.0
    if isinstance(value, bool):
        raise MalformedRecordError(f"Invalid {field_name}: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as err:
        raise MalformedRecordError(f"Invalid {field_name}: {value!r}") from err
    if math.isnan(number) or math.isinf(number):
        raise MalformedRecordError(f"Invalid {field_name}: {value!r}")
    return number


def _parse_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _marker(value: Any) -> str | None:
    return str(value) if value else None


def _usage_values(data: Mapping[str, Any]) -> dict[str, float]:
    return {name: parse_decimal(data.get(name), name) for name in _USAGE_FIELDS}


def validate_monthly_record(data: Any) -> MonthlyUsageRecord:
    """Validate a single month entry."""
    if not isinstance(data, Mapping):
        raise MalformedRecordError("Monthly usage entry must be a mapping")

    month = data.get("month")
    if not month or not isinstance(month, str):
        raise MalformedRecordError(f"Monthly usage entry missing month label: {data}")

    return MonthlyUsageRecord(month=month.strip(), **_usage_values(data))


def validate_daily_record(data: Any) -> DailyUsageRecord:
    """Validate a single day entry."""
    if not isinstance(data, Mapping):
        raise MalformedRecordError("Daily usage entry must be a mapping")

    day = parse_local_date(data.get("date"))
    if day is None:
        raise MalformedRecordError(f"Invalid date in daily usage entry: {data.get('date')!r}")

    return DailyUsageRecord(day=day, **_usage_values(data))


def _validate_entries(entries: Any, validator, kind: str) -> list:
    if entries is None:
        return []
    if not isinstance(entries, list):
        _LOGGER.warning("Expected a list of %s entries, got %s", kind, type(entries).__name__)
        return []

    validated = []
    for index, entry in enumerate(entries):
        try:
            validated.append(validator(entry))
        except MalformedRecordError as err:
            _LOGGER.debug("Skipping %s entry %d: %s", kind, index, err)
            continue
    return validated


def validate_monthly_usage_page(payload: Any, year: int | None = None) -> MonthlyUsagePage:
    """Validate the monthly usage response for one year."""
    if not isinstance(payload, Mapping):
        raise DataValidationError(f"Monthly usage must be a mapping, got {type(payload).__name__}")

    page_year = _parse_int(payload.get("year"))
    if page_year is None:
        page_year = year
    if page_year is None:
        raise DataValidationError("Monthly usage is missing its year")

    months = _validate_entries(payload.get("months"), validate_monthly_record, "monthly usage")

    return MonthlyUsagePage(
        year=page_year,
        units=str(payload.get("units") or DEFAULT_UNITS),
        months=tuple(months),
        previous=_marker(payload.get("previous")),
        next=_marker(payload.get("next")),
    )


def validate_daily_usage_page(
    payload: Any,
    month: int | None = None,
    year: int | None = None,
) -> DailyUsagePage:
    """Validate the daily usage response for one month."""
    if not isinstance(payload, Mapping):
        raise DataValidationError(f"Daily usage must be a mapping, got {type(payload).__name__}")

    page_month = _parse_int(payload.get("month")) or month
    page_year = _parse_int(payload.get("year")) or year
    if page_month is None or page_year is None:
        raise DataValidationError("Daily usage is missing its month or year")
    if not 1 <= page_month <= 12:
        raise DataValidationError(f"Daily usage month out of range: {page_month}")

    days = _validate_entries(payload.get("days"), validate_daily_record, "daily usage")

    return DailyUsagePage(
        month=page_month,
        year=page_year,
        units=str(payload.get("units") or DEFAULT_UNITS),
        days=tuple(days),
        previous=_marker(payload.get("previous")),
        next=_marker(payload.get("next")),
    )


def validate_location(data: Any) -> AccountLocation:
    if not isinstance(data, Mapping):
        raise MalformedRecordError("Location must be a mapping")

    uuid = data.get("uuid")
    if not uuid:
        raise MalformedRecordError("Location is missing its uuid")

    return AccountLocation(
        uuid=str(uuid),
        address_1=str(data.get("address_1") or "").strip(),
        address_2=str(data.get("address_2") or "").strip(),
        city=str(data.get("city") or "").strip(),
        state=str(data.get("state") or "").strip(),
        postal_code=str(data.get("postal_code") or "").strip(),
        utility_number=str(data.get("utility_number") or ""),
        is_service_active=bool(data.get("is_service_active")),
        has_usage_history=bool(data.get("has_usage_history")),
        plan_name=data.get("plan_name") or None,
    )


def validate_account(payload: Any) -> AccountInfo:
    """Validate the ``/account`` response."""
    if not isinstance(payload, Mapping):
        raise DataValidationError("Account data must be a mapping")

    uuid = payload.get("uuid")
    if not uuid:
        raise DataValidationError("Account data is missing its uuid")

    locations = _validate_entries(payload.get("locations"), validate_location, "location")

    return AccountInfo(
        uuid=str(uuid),
        first_name=str(payload.get("first_name") or "").strip(),
        last_name=str(payload.get("last_name") or "").strip(),
        email=str(payload.get("email") or "").strip().lower(),
        locations=tuple(locations),
    )


def validate_invoice(data: Any) -> Invoice:
    if not isinstance(data, Mapping):
        raise MalformedRecordError("Invoice must be a mapping")

    number = data.get("number")
    invoice_date = parse_local_date(data.get("invoice_date"))
    if not number or invoice_date is None:
        raise MalformedRecordError(f"Invoice missing number or date: {data.get('number')!r}")

    total_cents = _parse_int(data.get("total_cents"))
    if total_cents is None:
        total_cents = round(parse_decimal(data.get("total"), "total") * 100)

    return Invoice(
        number=str(number),
        invoice_date=invoice_date,
        payment_due_date=parse_local_date(data.get("payment_due_date")),
        billing_period_start=parse_local_date(data.get("billing_period_start")),
        billing_period_end=parse_local_date(data.get("billing_period_end")),
        total_cents=total_cents,
        total_kwh=parse_decimal(data.get("total_kwh"), "total_kwh"),
        avg_cents_per_kwh=parse_decimal(data.get("avg_cents_per_kwh"), "avg_cents_per_kwh"),
        pdf=data.get("pdf") or None,
        paid_at=data.get("paid_at") or None,
    )


def validate_invoices(payload: Any) -> list[Invoice]:
    """Validate the invoices response, newest invoice first."""
    if isinstance(payload, Mapping):
        entries = payload.get("data")
    elif isinstance(payload, list):
        entries = payload
    else:
        raise DataValidationError(f"Invoices must be a mapping or list, got {type(payload).__name__}")

    invoices = _validate_entries(entries, validate_invoice, "invoice")
    invoices.sort(key=lambda invoice: invoice.invoice_date, reverse=True)
    return invoices
