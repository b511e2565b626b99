from datetime import date

import pytest

from custom_components.light_energy.data_validation import (
    DataValidationError,
    MalformedRecordError,
    parse_decimal,
    validate_account,
    validate_daily_usage_page,
    validate_invoices,
    validate_monthly_usage_page,
)


def test_parse_decimal():
    assert parse_decimal("123.45") == 123.45
    assert parse_decimal(None) == 0.0
    assert parse_decimal("") == 0.0
    for value in ("abc", "nan", True):
        with pytest.raises(MalformedRecordError):
            parse_decimal(value)


def test_monthly_page_parses_decimal_strings():
    payload = {
        "year": 2025,
        "units": "kWh",
        "months": [
            {
                "month": "January",
                "consumption": "512.30",
                "generation": "10.5",
                "vehicle_charging": "0",
                "eligible_vehicle_charging": "",
            },
            {"month": "February", "consumption": "not-a-number"},
            {"consumption": "1.0"},
            {"month": "March"},
        ],
        "previous": "/usage/monthly?year=2024",
        "next": None,
    }

    page = validate_monthly_usage_page(payload)

    assert page.year == 2025
    assert [record.month for record in page.months] == ["January", "March"]
    assert page.months[0].consumption == 512.3
    assert page.months[0].generation == 10.5
    assert page.months[0].eligible_vehicle_charging == 0.0
    assert page.months[1].consumption == 0.0
    assert page.previous == "/usage/monthly?year=2024"
    assert page.next is None


def test_monthly_page_falls_back_to_requested_year():
    page = validate_monthly_usage_page({"months": []}, year=2023)

    assert page.year == 2023
    assert page.units == "kWh"
    assert page.months == ()
    assert page.previous is None


def test_monthly_page_rejects_bad_shapes():
    with pytest.raises(DataValidationError):
        validate_monthly_usage_page(["January"])
    with pytest.raises(DataValidationError):
        validate_monthly_usage_page({"months": []})


def test_daily_page_skips_malformed_dates():
    payload = {
        "month": 1,
        "year": 2025,
        "units": "kWh",
        "days": [
            {"date": "2025-01-01", "consumption": "1.5"},
            {"date": "2025-01-32", "consumption": "2.0"},
            {"date": "01/03/2025", "consumption": "2.0"},
            {"date": "2025-01-04", "consumption": "0"},
        ],
    }

    page = validate_daily_usage_page(payload)

    assert [record.day for record in page.days] == [date(2025, 1, 1), date(2025, 1, 4)]
    assert page.days[0].date_string == "2025-01-01"


def test_daily_page_rejects_out_of_range_month():
    with pytest.raises(DataValidationError):
        validate_daily_usage_page({"month": 13, "year": 2025, "days": []})


def test_account_locations():
    payload = {
        "uuid": "acct-1",
        "first_name": "John",
        "last_name": "Doe",
        "email": "John@Example.com ",
        "locations": [
            {
                "uuid": "loc-1",
                "address_1": "1 Main St",
                "city": "Austin",
                "state": "TX",
                "postal_code": "78701",
                "utility_number": "123",
                "is_service_active": True,
                "has_usage_history": True,
            },
            {"address_1": "no uuid"},
        ],
    }

    account = validate_account(payload)

    assert account.name == "John Doe"
    assert account.email == "john@example.com"
    assert len(account.locations) == 1
    assert account.locations[0].display_name == "1 Main St, Austin, TX"
    assert account.locations[0].has_usage_history


def test_invoices_sorted_newest_first():
    payload = {
        "data": [
            {"number": "INV-1", "invoice_date": "2025-01-05", "total_cents": 10234, "total_kwh": "800.5", "avg_cents_per_kwh": "12.8"},
            {"number": "INV-2", "invoice_date": "2025-02-05", "total": "95.10", "total_kwh": "700", "avg_cents_per_kwh": "13.6"},
            {"number": "INV-3"},
        ],
        "has_more": False,
    }

    invoices = validate_invoices(payload)

    assert [invoice.number for invoice in invoices] == ["INV-2", "INV-1"]
    assert invoices[0].total_cents == 9510
    assert invoices[1].total == 102.34
    assert invoices[1].total_kwh == 800.5
