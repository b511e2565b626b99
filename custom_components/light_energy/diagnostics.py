"""Diagnostics support for the Light Energy integration."""
from __future__ import annotations

from dataclasses import asdict

from homeassistant.components.diagnostics import async_redact_data
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from .const import CONF_ACCOUNT_UUID, CONF_API_SECRET, DATA_COORDINATOR, DATA_TOKEN_CACHE, DOMAIN

TO_REDACT = {CONF_API_SECRET, CONF_ACCOUNT_UUID}


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict:
    """Return diagnostics for a config entry."""
    runtime = hass.data[DOMAIN][entry.entry_id]
    coordinator = runtime[DATA_COORDINATOR]
    token_cache = runtime[DATA_TOKEN_CACHE]
    snapshot = coordinator.data

    payload: dict[str, object] = {
        "last_update_success": coordinator.last_update_success,
        "token_cached": token_cache.expires_at is not None,
        "token_expires_at": token_cache.expires_at.isoformat() if token_cache.expires_at else None,
        "config": async_redact_data(dict(entry.data), TO_REDACT),
        "options": dict(entry.options),
    }

    if snapshot is not None:
        completeness = snapshot.daily_completeness
        payload["usage"] = {
            "units": snapshot.units,
            "months": [record.month for record in snapshot.trailing.months],
            "trailing_consumption": snapshot.trailing_consumption,
            "current_month": f"{snapshot.daily.year}-{snapshot.daily.month:02d}",
            "current_month_days": len(snapshot.daily.days),
            "current_month_consumption": snapshot.current_month_consumption,
            "completeness": asdict(completeness) if completeness else None,
            "last_updated": snapshot.last_updated.isoformat() if snapshot.last_updated else None,
        }

    return payload
