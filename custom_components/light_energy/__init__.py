"""The Light Energy integration."""
from __future__ import annotations

import logging
from datetime import timedelta

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .api import LightApiClient
from .const import (
    CONF_ACCOUNT_UUID,
    CONF_API_SECRET,
    CONF_API_URL,
    CONF_LOCATION_UUID,
    CONF_TRAILING_MONTHS,
    CONF_UPDATE_INTERVAL,
    DATA_CLIENT,
    DATA_COORDINATOR,
    DATA_TOKEN_CACHE,
    DEFAULT_API_URL,
    DEFAULT_TRAILING_MONTHS,
    DEFAULT_UPDATE_INTERVAL,
    DOMAIN,
    MINIMUM_UPDATE_INTERVAL,
    PLATFORMS,
)
from .coordinator import LightEnergyCoordinator
from .token_cache import TokenCache

_LOGGER = logging.getLogger(__name__)


def _update_interval(entry: ConfigEntry) -> timedelta:
    minutes = entry.options.get(CONF_UPDATE_INTERVAL)
    if minutes is None:
        return DEFAULT_UPDATE_INTERVAL
    return max(timedelta(minutes=int(minutes)), MINIMUM_UPDATE_INTERVAL)


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Light Energy from a config entry."""
    _LOGGER.debug("Setting up Light Energy integration for entry %s", entry.entry_id)

    token_cache = TokenCache()
    client = LightApiClient(
        async_get_clientsession(hass),
        api_secret=entry.data[CONF_API_SECRET],
        token_cache=token_cache,
        api_url=entry.data.get(CONF_API_URL) or DEFAULT_API_URL,
    )

    coordinator = LightEnergyCoordinator(
        hass,
        client,
        account_uuid=entry.data[CONF_ACCOUNT_UUID],
        location_uuid=entry.data[CONF_LOCATION_UUID],
        trailing_months=int(entry.options.get(CONF_TRAILING_MONTHS, DEFAULT_TRAILING_MONTHS)),
        update_interval=_update_interval(entry),
    )

    await coordinator.async_config_entry_first_refresh()

    hass.data.setdefault(DOMAIN, {})
    hass.data[DOMAIN][entry.entry_id] = {
        DATA_CLIENT: client,
        DATA_COORDINATOR: coordinator,
        DATA_TOKEN_CACHE: token_cache,
    }

    entry.async_on_unload(entry.add_update_listener(async_reload_entry))
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    _LOGGER.info(
        "Light Energy integration setup complete for location %s (%s month window)",
        coordinator.location_uuid,
        coordinator.trailing_months,
    )
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)

    if unload_ok:
        entry_data = hass.data[DOMAIN].pop(entry.entry_id)
        entry_data[DATA_TOKEN_CACHE].clear_token()
        if not hass.data[DOMAIN]:
            hass.data.pop(DOMAIN)
        _LOGGER.debug("Light Energy integration unloaded for entry %s", entry.entry_id)

    return unload_ok


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload config entry."""
    await hass.config_entries.async_reload(entry.entry_id)
