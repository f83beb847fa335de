"""
Component to integrate with Revogi cloud power strips.
"""
import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

from homeassistant.config_entries import ConfigEntry  # type: ignore
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME  # type: ignore
from homeassistant.core import HomeAssistant  # type: ignore
from homeassistant.exceptions import ConfigEntryAuthFailed  # type: ignore
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed  # type: ignore

from pyrevogi import Config, Device, RevogiClient
from pyrevogi.exceptions import (
    RevogiAuthenticationError,
    RevogiError,
    RevogiRetryBudgetExhausted,
)
from pyrevogi.models import device_configs_from_dict

from .const import (
    CONF_COOLDOWN,
    CONF_DEVICES,
    CONF_MAX_RETRIES,
    CONF_POLL_INTERVAL,
    DEFAULT_COOLDOWN,
    DEFAULT_MAX_RETRIES,
    DEFAULT_POLL_INTERVAL,
    DOMAIN,
    PLATFORMS,
)

_LOGGER = logging.getLogger(__name__)


def restore_pinned_states(client: RevogiClient, devices: List[Device]) -> None:
    """Switch pinned ports back on every device and patch the polled stats to match.

    A device whose command fails is logged and left as polled.
    """
    for device in devices:
        try:
            changed = client.enforce_pinned_states(device)
        except RevogiError as err:
            _LOGGER.warning("Could not restore pinned ports on %s: %s", device.sn, err)
            continue
        device_config = client.config.device_config(device.sn)
        for port in changed:
            device.stats.switch[port - 1] = int(device_config.pinned_state(port))


class RevogiUpdateCoordinator(DataUpdateCoordinator):
    """Revogi data update coordinator."""

    def __init__(self, hass: HomeAssistant, client: RevogiClient) -> None:
        """Initialize the coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            name=DOMAIN,
            update_interval=timedelta(seconds=client.config.poll_interval),
        )
        self.client = client

    async def _async_update_data(self) -> Dict[str, Any]:
        """Fetch devices and stats from the Revogi cloud."""
        try:
            _LOGGER.debug("Fetching devices from Revogi")
            devices = await self.hass.async_add_executor_job(self.client.refresh_devices)
        except (RevogiAuthenticationError, RevogiRetryBudgetExhausted) as err:
            raise ConfigEntryAuthFailed(f"Revogi login failed: {err}") from err
        except RevogiError as err:
            raise UpdateFailed(f"Error updating Revogi data: {err}") from err

        await self.hass.async_add_executor_job(restore_pinned_states, self.client, devices)

        _LOGGER.debug("Updated Revogi data: %d devices", len(devices))
        return {"devices": {device.sn: device for device in devices}}

    def get_device(self, sn: str) -> Optional[Device]:
        if not self.data:
            return None
        return self.data["devices"].get(sn)

    def get_devices(self) -> List[Device]:
        if not self.data:
            return []
        return list(self.data["devices"].values())


def build_config(entry: ConfigEntry) -> Config:
    """Create the client configuration from a config entry."""
    options = {**entry.data, **entry.options}
    return Config(
        username=options[CONF_USERNAME],
        password=options[CONF_PASSWORD],
        poll_interval=options.get(CONF_POLL_INTERVAL, DEFAULT_POLL_INTERVAL),
        max_retries=options.get(CONF_MAX_RETRIES, DEFAULT_MAX_RETRIES),
        cooldown_seconds=options.get(CONF_COOLDOWN, DEFAULT_COOLDOWN),
        devices=device_configs_from_dict(options.get(CONF_DEVICES)),
    )


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Revogi from a config entry."""
    config = build_config(entry)
    _LOGGER.info("Setting up Revogi for %s", config.username)

    client = RevogiClient(config)
    coordinator = RevogiUpdateCoordinator(hass, client)

    await coordinator.async_config_entry_first_refresh()

    _LOGGER.info("Revogi initialized with %d devices", len(coordinator.get_devices()))

    hass.data.setdefault(DOMAIN, {})
    hass.data[DOMAIN][entry.entry_id] = coordinator

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    entry.async_on_unload(entry.add_update_listener(async_reload_entry))

    return True


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload after the options changed."""
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        coordinator = hass.data[DOMAIN].pop(entry.entry_id)
        await hass.async_add_executor_job(coordinator.client.close)

    return unload_ok
