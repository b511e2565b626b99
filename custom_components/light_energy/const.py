"""Constants for the Light Energy integration."""
from __future__ import annotations

from datetime import timedelta
from typing import Final

from homeassistant.const import Platform

DOMAIN: Final = "light_energy"
PLATFORMS: Final = [Platform.SENSOR]

CONF_API_SECRET: Final = "api_secret"
CONF_API_URL: Final = "api_url"
CONF_ACCOUNT_UUID: Final = "account_uuid"
CONF_LOCATION_UUID: Final = "location_uuid"
CONF_LOCATION_NAME: Final = "location_name"
CONF_UPDATE_INTERVAL: Final = "update_interval"
CONF_TRAILING_MONTHS: Final = "trailing_months"

DATA_CLIENT: Final = "client"
DATA_COORDINATOR: Final = "coordinator"
DATA_TOKEN_CACHE: Final = "token_cache"

DEFAULT_API_URL: Final = "https://api.light.dev"
API_VERSION_PATH: Final = "/v1"
API_TIMEOUT: Final = 30

DEFAULT_UNITS: Final = "kWh"
TOKEN_EXPIRY_BUFFER: Final = timedelta(minutes=5)

DEFAULT_UPDATE_INTERVAL: Final = timedelta(hours=1)
MINIMUM_UPDATE_INTERVAL: Final = timedelta(minutes=30)

DEFAULT_TRAILING_MONTHS: Final = 12
MAXIMUM_TRAILING_MONTHS: Final = 36

STEP_SELECT_LOCATION: Final = "select_location"

SENSOR_KIND_TRAILING_CONSUMPTION: Final = "trailing_consumption"
SENSOR_KIND_CURRENT_MONTH_CONSUMPTION: Final = "current_month_consumption"
SENSOR_KIND_LAST_MONTH_CONSUMPTION: Final = "last_month_consumption"
SENSOR_KIND_DAYS_WITH_DATA: Final = "days_with_data"
SENSOR_KIND_LATEST_INVOICE: Final = "latest_invoice"
