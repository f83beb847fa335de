"""Switch platform for revogi."""

import asyncio
import logging
from typing import Any, Optional

from homeassistant.components.switch import SwitchDeviceClass, SwitchEntity  # type: ignore
from homeassistant.config_entries import ConfigEntry  # type: ignore
from homeassistant.core import HomeAssistant  # type: ignore
from homeassistant.exceptions import HomeAssistantError  # type: ignore
from homeassistant.helpers.entity_platform import AddEntitiesCallback  # type: ignore
from homeassistant.helpers.update_coordinator import CoordinatorEntity  # type: ignore

from pyrevogi.exceptions import RevogiError

from .const import (
    COMMAND_SETTLE_DELAY,
    DOMAIN,
    MASTER_PORT,
    PLUG_ICON,
    get_port_device_info,
    get_strip_device_info,
)

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up Revogi switch platform."""
    coordinator = hass.data[DOMAIN][entry.entry_id]

    entities = []
    for device in coordinator.get_devices():
        # Master switch on the strip device
        entities.append(RevogiMasterSwitch(coordinator, device.sn))

        port_count = device.stats.port_count if device.stats else len(device.pname)
        for port in range(1, port_count + 1):
            entities.append(RevogiPortSwitch(coordinator, device.sn, port))

    async_add_entities(entities)


class RevogiBaseSwitch(CoordinatorEntity, SwitchEntity):
    """Base class for Revogi switches."""

    def __init__(self, coordinator, sn: str, port: int, unique_id: str):
        """Initialize the switch."""
        super().__init__(coordinator)
        self._sn = sn
        self._port = port
        self._attr_unique_id = unique_id
        self._attr_device_class = SwitchDeviceClass.OUTLET
        self._attr_icon = PLUG_ICON

    @property
    def _device(self):
        return self.coordinator.get_device(self._sn)

    @property
    def available(self) -> bool:
        device = self._device
        return (
            super().available
            and device is not None
            and device.stats is not None
            and device.stats.is_online
        )

    async def _async_set_power(self, on: bool) -> None:
        try:
            await self.hass.async_add_executor_job(
                self.coordinator.client.set_power, self._sn, self._port, on
            )
        except RevogiError as err:
            _LOGGER.error("Error switching port %s of %s: %s", self._port, self._sn, err)
            raise HomeAssistantError(f"Failed to switch port {self._port} of {self._sn}: {err}") from err

        _LOGGER.debug("Switched port %s of %s %s", self._port, self._sn, "on" if on else "off")
        await asyncio.sleep(COMMAND_SETTLE_DELAY)
        await self.coordinator.async_request_refresh()

    async def async_turn_on(self, **kwargs) -> None:
        """Turn the port on."""
        await self._async_set_power(True)

    async def async_turn_off(self, **kwargs) -> None:
        """Turn the port off."""
        await self._async_set_power(False)


class RevogiPortSwitch(RevogiBaseSwitch):
    """Revogi port switch."""

    def __init__(self, coordinator, sn: str, port: int):
        super().__init__(coordinator, sn, port, f"{sn}_port_{port}_switch")
        device = coordinator.get_device(sn)
        self._attr_name = device.port_name(port) if device else f"Port {port}"

    @property
    def device_info(self):
        """Return device information for this port device."""
        return get_port_device_info(self._sn, self._port, self._device)

    @property
    def is_on(self) -> Optional[bool]:
        device = self._device
        if device is None or device.stats is None:
            return None
        return device.stats.port_state(self._port)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return extra state attributes."""
        device = self._device
        if device is None or device.stats is None:
            return {}

        attrs = {"port": self._port, "serial": self._sn}
        pinned = self.coordinator.client.config.device_config(self._sn).pinned_state(self._port)
        if pinned is not None:
            attrs["pinned_state"] = "on" if pinned else "off"
        return attrs


class RevogiMasterSwitch(RevogiBaseSwitch):
    """Revogi master switch (controls all ports)."""

    def __init__(self, coordinator, sn: str):
        super().__init__(coordinator, sn, MASTER_PORT, f"{sn}_master")
        self._attr_name = "Master Switch"

    @property
    def device_info(self):
        """Return device information for the strip."""
        return get_strip_device_info(self._sn, self._device)

    @property
    def is_on(self) -> Optional[bool]:
        """Return true if any port is on."""
        device = self._device
        if device is None or device.stats is None:
            return None
        return any(device.stats.switch)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        device = self._device
        if device is None or device.stats is None:
            return {}

        total = device.stats.port_count
        on = sum(1 for state in device.stats.switch if state)
        return {"total_ports": total, "ports_on": on, "ports_off": total - on}
