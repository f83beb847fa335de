"""Binary sensor platform for revogi."""

import logging
from typing import Any, Optional

from homeassistant.components.binary_sensor import BinarySensorDeviceClass, BinarySensorEntity  # type: ignore
from homeassistant.config_entries import ConfigEntry  # type: ignore
from homeassistant.core import HomeAssistant  # type: ignore
from homeassistant.helpers.entity_platform import AddEntitiesCallback  # type: ignore
from homeassistant.helpers.update_coordinator import CoordinatorEntity  # type: ignore

from .const import DOMAIN, get_port_device_info, get_strip_device_info

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up Revogi binary sensor platform."""
    coordinator = hass.data[DOMAIN][entry.entry_id]

    entities = []
    for device in coordinator.get_devices():
        entities.append(RevogiOnlineSensor(coordinator, device.sn))

        if device.stats is not None:
            for port in range(1, device.stats.port_count + 1):
                entities.append(RevogiPortInUseSensor(coordinator, device.sn, port))

    async_add_entities(entities)


class RevogiOnlineSensor(CoordinatorEntity, BinarySensorEntity):
    """Cloud connectivity of a strip."""

    def __init__(self, coordinator, sn: str):
        super().__init__(coordinator)
        self._sn = sn
        self._attr_name = "Online"
        self._attr_unique_id = f"{sn}_online"
        self._attr_device_class = BinarySensorDeviceClass.CONNECTIVITY

    @property
    def device_info(self):
        """Return device information for the strip."""
        return get_strip_device_info(self._sn, self.coordinator.get_device(self._sn))

    @property
    def is_on(self) -> Optional[bool]:
        device = self.coordinator.get_device(self._sn)
        if device is None or device.stats is None:
            return False
        return device.stats.is_online


class RevogiPortInUseSensor(CoordinatorEntity, BinarySensorEntity):
    """On while a port draws more than its configured usage threshold."""

    def __init__(self, coordinator, sn: str, port: int):
        super().__init__(coordinator)
        self._sn = sn
        self._port = port
        self._attr_name = "In Use"
        self._attr_unique_id = f"{sn}_port_{port}_in_use"
        self._attr_device_class = BinarySensorDeviceClass.POWER

    @property
    def device_info(self):
        """Return device information for this port device."""
        return get_port_device_info(self._sn, self._port, self.coordinator.get_device(self._sn))

    @property
    def _device_config(self):
        return self.coordinator.client.config.device_config(self._sn)

    @property
    def is_on(self) -> Optional[bool]:
        device = self.coordinator.get_device(self._sn)
        if device is None or device.stats is None:
            return None
        return self._device_config.in_use(self._port, device.stats.port_watts(self._port))

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        return {"usage_threshold": self._device_config.usage.get(self._port, 0)}
