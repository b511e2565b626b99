"""Sensor platform for Light Energy usage tracking."""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CURRENCY_DOLLAR, UnitOfEnergy, UnitOfTime
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import (
    CONF_LOCATION_NAME,
    DATA_COORDINATOR,
    DOMAIN,
    SENSOR_KIND_CURRENT_MONTH_CONSUMPTION,
    SENSOR_KIND_DAYS_WITH_DATA,
    SENSOR_KIND_LAST_MONTH_CONSUMPTION,
    SENSOR_KIND_LATEST_INVOICE,
    SENSOR_KIND_TRAILING_CONSUMPTION,
)
from .coordinator import LightEnergyCoordinator
from .models import ChartDataPoint, LocationUsageSnapshot

_LOGGER = logging.getLogger(__name__)

ENERGY_UNITS = {
    "wh": UnitOfEnergy.WATT_HOUR,
    "kwh": UnitOfEnergy.KILO_WATT_HOUR,
    "mwh": UnitOfEnergy.MEGA_WATT_HOUR,
}

FRIENDLY_SENSOR_NAMES = {
    SENSOR_KIND_TRAILING_CONSUMPTION: "Light Trailing Consumption",
    SENSOR_KIND_CURRENT_MONTH_CONSUMPTION: "Light Current Month Consumption",
    SENSOR_KIND_LAST_MONTH_CONSUMPTION: "Light Last Month Consumption",
    SENSOR_KIND_DAYS_WITH_DATA: "Light Days With Data",
    SENSOR_KIND_LATEST_INVOICE: "Light Latest Invoice",
}


@dataclass(frozen=True, kw_only=True)
class LightEnergySensorDescription(SensorEntityDescription):
    """Describe a Light Energy sensor."""

    metric: str = ""


SENSOR_DESCRIPTIONS: tuple[LightEnergySensorDescription, ...] = (
    LightEnergySensorDescription(
        key=SENSOR_KIND_TRAILING_CONSUMPTION,
        translation_key=SENSOR_KIND_TRAILING_CONSUMPTION,
        device_class=SensorDeviceClass.ENERGY,
        state_class=SensorStateClass.TOTAL,
        native_unit_of_measurement=UnitOfEnergy.KILO_WATT_HOUR,
        metric="trailing_consumption",
    ),
    LightEnergySensorDescription(
        key=SENSOR_KIND_CURRENT_MONTH_CONSUMPTION,
        translation_key=SENSOR_KIND_CURRENT_MONTH_CONSUMPTION,
        device_class=SensorDeviceClass.ENERGY,
        state_class=SensorStateClass.TOTAL,
        native_unit_of_measurement=UnitOfEnergy.KILO_WATT_HOUR,
        metric="current_month_consumption",
    ),
    LightEnergySensorDescription(
        key=SENSOR_KIND_LAST_MONTH_CONSUMPTION,
        translation_key=SENSOR_KIND_LAST_MONTH_CONSUMPTION,
        device_class=SensorDeviceClass.ENERGY,
        state_class=SensorStateClass.TOTAL,
        native_unit_of_measurement=UnitOfEnergy.KILO_WATT_HOUR,
        metric="last_month_consumption",
    ),
    LightEnergySensorDescription(
        key=SENSOR_KIND_DAYS_WITH_DATA,
        translation_key=SENSOR_KIND_DAYS_WITH_DATA,
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=UnitOfTime.DAYS,
        metric="days_with_data",
    ),
    LightEnergySensorDescription(
        key=SENSOR_KIND_LATEST_INVOICE,
        translation_key=SENSOR_KIND_LATEST_INVOICE,
        device_class=SensorDeviceClass.MONETARY,
        native_unit_of_measurement=CURRENCY_DOLLAR,
        metric="latest_invoice",
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up Light Energy sensors for a config entry."""
    runtime = hass.data[DOMAIN][entry.entry_id]
    coordinator: LightEnergyCoordinator = runtime[DATA_COORDINATOR]

    async_add_entities(
        LightEnergySensor(coordinator=coordinator, entry=entry, description=description)
        for description in SENSOR_DESCRIPTIONS
    )


def _points_as_attributes(points: list[ChartDataPoint]) -> list[dict[str, object]]:
    return [
        {key: value for key, value in asdict(point).items() if value is not None}
        for point in points
    ]


def energy_unit(units: str | None) -> UnitOfEnergy | None:
    """Map the units label reported by the API to a Home Assistant energy unit."""
    if not units:
        return None
    return ENERGY_UNITS.get(units.strip().lower())


def sensor_value(snapshot: LocationUsageSnapshot, metric: str) -> float | int | None:
    """Return the state for ``metric`` from a snapshot."""
    if metric == "trailing_consumption":
        return snapshot.trailing_consumption
    if metric == "current_month_consumption":
        return snapshot.current_month_consumption
    if metric == "last_month_consumption":
        return snapshot.last_month_consumption
    if metric == "days_with_data":
        completeness = snapshot.daily_completeness
        return completeness.days_with_data if completeness else None
    if metric == "latest_invoice":
        return snapshot.latest_invoice.total if snapshot.latest_invoice else None
    return None


def sensor_attributes(snapshot: LocationUsageSnapshot, metric: str) -> dict[str, object] | None:
    """Return extra state attributes for ``metric`` from a snapshot."""
    attributes: dict[str, object] = {"location_uuid": snapshot.location_uuid, "units": snapshot.units}
    if snapshot.last_updated:
        attributes["last_updated"] = snapshot.last_updated.isoformat()

    if metric == "trailing_consumption":
        attributes["months"] = _points_as_attributes(snapshot.monthly_points)
        attributes["month_count"] = len(snapshot.trailing.months)
    elif metric == "current_month_consumption":
        attributes["month"] = snapshot.daily.month
        attributes["year"] = snapshot.daily.year
        attributes["days"] = _points_as_attributes(snapshot.daily_points)
    elif metric == "days_with_data":
        completeness = snapshot.daily_completeness
        if completeness is None:
            return attributes
        attributes.update(
            {
                "total_days": completeness.total_days,
                "is_current_period": completeness.is_current_period,
                "last_data_day": completeness.last_data_day,
            }
        )
    elif metric == "latest_invoice":
        invoice = snapshot.latest_invoice
        if invoice is None:
            return attributes
        attributes.update(
            {
                "number": invoice.number,
                "invoice_date": invoice.invoice_date.isoformat(),
                "payment_due_date": invoice.payment_due_date.isoformat() if invoice.payment_due_date else None,
                "total_kwh": invoice.total_kwh,
                "avg_cents_per_kwh": invoice.avg_cents_per_kwh,
                "paid": invoice.paid_at is not None,
            }
        )
    return attributes


class LightEnergySensor(CoordinatorEntity[LightEnergyCoordinator], SensorEntity):
    """Sensor exposing one figure from the latest usage snapshot."""

    _attr_has_entity_name = False

    def __init__(
        self,
        coordinator: LightEnergyCoordinator,
        entry: ConfigEntry,
        *,
        description: LightEnergySensorDescription,
    ) -> None:
        super().__init__(coordinator)
        self.entity_description = description
        self._location_uuid = coordinator.location_uuid
        self._unknown_units: str | None = None
        self._location_name = entry.data.get(CONF_LOCATION_NAME) or f"Location {coordinator.location_uuid}"
        self._attr_unique_id = f"{entry.entry_id}_{coordinator.location_uuid}_{description.key}"
        self._attr_name = FRIENDLY_SENSOR_NAMES.get(
            description.key,
            f"Light {description.key.replace('_', ' ').title()}",
        )

    @property
    def available(self) -> bool:
        return self.coordinator.data is not None and super().available

    @property
    def native_value(self) -> float | int | None:
        if not self.coordinator.data:
            return None
        return sensor_value(self.coordinator.data, self.entity_description.metric)

    @property
    def native_unit_of_measurement(self) -> str | None:
        fallback = self.entity_description.native_unit_of_measurement
        snapshot = self.coordinator.data
        if self.entity_description.device_class != SensorDeviceClass.ENERGY or not snapshot:
            return fallback

        unit = energy_unit(snapshot.units)
        if unit is None:
            if snapshot.units != self._unknown_units:
                _LOGGER.warning(
                    "Unrecognised energy units %r for location %s; reporting %s",
                    snapshot.units,
                    self._location_uuid,
                    fallback,
                )
                self._unknown_units = snapshot.units
            return fallback
        return unit

    @property
    def extra_state_attributes(self) -> dict[str, object] | None:
        if not self.coordinator.data:
            return None
        return sensor_attributes(self.coordinator.data, self.entity_description.metric)

    @property
    def device_info(self) -> dict[str, object]:
        return {
            "identifiers": {(DOMAIN, self._location_uuid)},
            "name": self._location_name,
            "manufacturer": "Light",
        }
