"""Config flow for the Light Energy integration."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.data_entry_flow import FlowResult
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .api import LightApiAuthError, LightApiClient, LightApiError
from .const import (
    CONF_ACCOUNT_UUID,
    CONF_API_SECRET,
    CONF_API_URL,
    CONF_LOCATION_NAME,
    CONF_LOCATION_UUID,
    CONF_TRAILING_MONTHS,
    CONF_UPDATE_INTERVAL,
    DEFAULT_API_URL,
    DEFAULT_TRAILING_MONTHS,
    DEFAULT_UPDATE_INTERVAL,
    DOMAIN,
    MAXIMUM_TRAILING_MONTHS,
    MINIMUM_UPDATE_INTERVAL,
    STEP_SELECT_LOCATION,
)
from .data_validation import DataValidationError
from .models import AccountLocation
from .token_cache import TokenCache

_LOGGER = logging.getLogger(__name__)


def _user_schema(defaults: Mapping[str, Any]) -> vol.Schema:
    return vol.Schema(
        {
            vol.Required(CONF_API_SECRET): str,
            vol.Required(CONF_ACCOUNT_UUID, default=defaults.get(CONF_ACCOUNT_UUID, "")): str,
            vol.Optional(CONF_API_URL, default=defaults.get(CONF_API_URL, DEFAULT_API_URL)): str,
        }
    )


def usable_locations(locations: tuple[AccountLocation, ...]) -> list[AccountLocation]:
    """Locations worth offering; fall back to all when none report history."""
    with_history = [location for location in locations if location.has_usage_history]
    return with_history or list(locations)


class LightEnergyConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle configuration of the integration."""

    VERSION = 1

    def __init__(self) -> None:
        self._stored_user_input: dict[str, Any] = {}
        self._locations: list[AccountLocation] = []
        self._reauth_entry: config_entries.ConfigEntry | None = None

    async def async_step_user(self, user_input: dict[str, Any] | None = None) -> FlowResult:
        errors: dict[str, str] = {}

        if user_input is None:
            return self.async_show_form(step_id="user", data_schema=_user_schema({}))

        account_uuid = user_input[CONF_ACCOUNT_UUID].strip()
        client = LightApiClient(
            async_get_clientsession(self.hass),
            api_secret=user_input[CONF_API_SECRET],
            token_cache=TokenCache(),
            api_url=user_input.get(CONF_API_URL) or DEFAULT_API_URL,
        )

        try:
            valid = await client.async_test_credentials(account_uuid)
            account = await client.async_get_account(account_uuid) if valid else None
        except LightApiAuthError:
            errors["base"] = "invalid_auth"
        except (LightApiError, DataValidationError) as err:
            _LOGGER.debug("Unable to reach the Light API: %s", err)
            errors["base"] = "cannot_connect"
        else:
            if account is None:
                errors["base"] = "invalid_auth"
            else:
                locations = usable_locations(account.locations)
                if not locations:
                    errors["base"] = "no_locations"
                else:
                    self._stored_user_input = {**user_input, CONF_ACCOUNT_UUID: account_uuid}
                    self._locations = locations
                    return await self.async_step_select_location()

        return self.async_show_form(
            step_id="user",
            data_schema=_user_schema(user_input),
            errors=errors,
        )

    async def async_step_select_location(self, user_input: dict[str, Any] | None = None) -> FlowResult:
        if not self._locations:
            return self.async_abort(reason="no_locations")

        choices = {location.uuid: location.display_name for location in self._locations}

        if user_input is None:
            return self.async_show_form(
                step_id=STEP_SELECT_LOCATION,
                data_schema=vol.Schema(
                    {
                        vol.Required(CONF_LOCATION_UUID, default=self._locations[0].uuid): vol.In(choices),
                    }
                ),
            )

        location_uuid = user_input[CONF_LOCATION_UUID]
        data = {
            **self._stored_user_input,
            CONF_LOCATION_UUID: location_uuid,
            CONF_LOCATION_NAME: choices.get(location_uuid, location_uuid),
        }

        if self._reauth_entry:
            self.hass.config_entries.async_update_entry(self._reauth_entry, data=data)
            await self.hass.config_entries.async_reload(self._reauth_entry.entry_id)
            return self.async_abort(reason="reauth_successful")

        await self.async_set_unique_id(f"{data[CONF_ACCOUNT_UUID]}_{location_uuid}")
        self._abort_if_unique_id_configured()
        return self.async_create_entry(title=data[CONF_LOCATION_NAME], data=data)

    async def async_step_reauth(self, entry_data: Mapping[str, Any]) -> FlowResult:
        entry_id = self.context.get("entry_id")
        if entry_id:
            self._reauth_entry = self.hass.config_entries.async_get_entry(entry_id)
        return await self.async_step_user(dict(entry_data))

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: config_entries.ConfigEntry) -> config_entries.OptionsFlow:
        return LightEnergyOptionsFlow(config_entry)


class LightEnergyOptionsFlow(config_entries.OptionsFlow):
    """Handle options for the integration."""

    def __init__(self, entry: config_entries.ConfigEntry) -> None:
        self._entry = entry

    async def async_step_init(self, user_input: Mapping[str, Any] | None = None) -> FlowResult:
        if user_input is not None:
            return self.async_create_entry(title="", data=dict(user_input))

        default_minutes = int(
            self._entry.options.get(
                CONF_UPDATE_INTERVAL,
                DEFAULT_UPDATE_INTERVAL.total_seconds() // 60,
            )
        )
        default_months = int(self._entry.options.get(CONF_TRAILING_MONTHS, DEFAULT_TRAILING_MONTHS))

        interval_options = {
            30: "30 minutes",
            60: "60 minutes",
            180: "3 hours",
            360: "6 hours",
        }

        minimum_minutes = int(MINIMUM_UPDATE_INTERVAL.total_seconds() / 60)
        if minimum_minutes not in interval_options:
            interval_options[minimum_minutes] = f"{minimum_minutes} minutes"

        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(
                {
                    vol.Required(CONF_UPDATE_INTERVAL, default=default_minutes): vol.In(interval_options),
                    vol.Required(CONF_TRAILING_MONTHS, default=default_months): vol.All(
                        vol.Coerce(int), vol.Range(min=1, max=MAXIMUM_TRAILING_MONTHS)
                    ),
                }
            ),
        )
