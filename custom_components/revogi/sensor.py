"""Sensor platform for revogi."""

import logging
from typing import Any, Optional

from homeassistant.components.sensor import SensorDeviceClass, SensorEntity, SensorStateClass  # type: ignore
from homeassistant.config_entries import ConfigEntry  # type: ignore
from homeassistant.core import HomeAssistant  # type: ignore
from homeassistant.helpers.entity_platform import AddEntitiesCallback  # type: ignore
from homeassistant.helpers.update_coordinator import CoordinatorEntity  # type: ignore

from .const import DOMAIN, PORT_SENSOR_TYPES, get_port_device_info

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up Revogi sensor platform."""
    coordinator = hass.data[DOMAIN][entry.entry_id]

    entities = []
    for device in coordinator.get_devices():
        if device.stats is None:
            _LOGGER.debug("No telemetry for %s, skipping sensors", device.sn)
            continue
        for port in range(1, device.stats.port_count + 1):
            for sensor_type in PORT_SENSOR_TYPES:
                entities.append(RevogiPortSensor(coordinator, device.sn, port, sensor_type))

    _LOGGER.debug("Created %d Revogi sensors", len(entities))
    async_add_entities(entities)


class RevogiPortSensor(CoordinatorEntity, SensorEntity):
    """Per-port power or current sensor."""

    def __init__(self, coordinator, sn: str, port: int, sensor_type: str):
        """Initialize the sensor."""
        super().__init__(coordinator)
        self._sn = sn
        self._port = port
        self._sensor_type = sensor_type
        sensor = PORT_SENSOR_TYPES[sensor_type]
        self._attr_name = sensor["name"]
        self._attr_unique_id = f"{sn}_port_{port}_{sensor_type}"
        self._attr_native_unit_of_measurement = sensor["unit"]
        self._attr_icon = sensor["icon"]
        self._attr_state_class = SensorStateClass.MEASUREMENT

    @property
    def device_info(self):
        """Return device information for this port device."""
        return get_port_device_info(self._sn, self._port, self.coordinator.get_device(self._sn))

    @property
    def device_class(self) -> Optional[SensorDeviceClass]:
        if self._sensor_type == "watt":
            return SensorDeviceClass.POWER
        if self._sensor_type == "amp":
            return SensorDeviceClass.CURRENT
        return None

    @property
    def native_value(self) -> Any:
        """Return the raw reading reported by the strip."""
        device = self.coordinator.get_device(self._sn)
        if device is None or device.stats is None:
            return None

        if self._sensor_type == "watt":
            return device.stats.port_watts(self._port)
        elif self._sensor_type == "amp":
            return device.stats.port_amps(self._port)
        return None
