"""Config flow for Revogi integration."""
from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol
from homeassistant import config_entries, exceptions  # type: ignore
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME  # type: ignore
from homeassistant.core import HomeAssistant, callback  # type: ignore
from homeassistant.data_entry_flow import FlowResult  # type: ignore
import homeassistant.helpers.config_validation as cv  # type: ignore

from pyrevogi import Config, DeviceConfig, RevogiClient
from pyrevogi.exceptions import (
    RevogiAuthenticationError,
    RevogiError,
    RevogiTransportError,
)
from pyrevogi.models import device_configs_from_dict
from pyrevogi.utils import format_port_list, format_port_map, parse_port_list, parse_port_map

from .const import (
    CONF_COOLDOWN,
    CONF_DEVICES,
    CONF_MAX_RETRIES,
    CONF_POLL_INTERVAL,
    DEFAULT_COOLDOWN,
    DEFAULT_MAX_RETRIES,
    DEFAULT_NAME,
    DEFAULT_POLL_INTERVAL,
    DOMAIN,
)

_LOGGER = logging.getLogger(__name__)

CONF_SERIAL = "serial"
CONF_PINNED_ON = "pinned_on"
CONF_PINNED_OFF = "pinned_off"
CONF_USAGE = "usage"

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_USERNAME): cv.string,
        vol.Required(CONF_PASSWORD): cv.string,
        vol.Optional(CONF_POLL_INTERVAL, default=DEFAULT_POLL_INTERVAL): vol.All(
            vol.Coerce(int), vol.Range(min=5)
        ),
        vol.Optional(CONF_MAX_RETRIES, default=DEFAULT_MAX_RETRIES): vol.All(
            vol.Coerce(int), vol.Range(min=0, max=10)
        ),
        vol.Optional(CONF_COOLDOWN, default=DEFAULT_COOLDOWN): vol.All(
            vol.Coerce(int), vol.Range(min=0, max=60)
        ),
    }
)


async def validate_input(hass: HomeAssistant, data: dict[str, Any]) -> dict[str, Any]:
    """Validate the credentials by logging in.

    Data has the keys from STEP_USER_DATA_SCHEMA with values provided by the user.
    """
    client = RevogiClient(Config(username=data[CONF_USERNAME], password=data[CONF_PASSWORD]))

    try:
        await hass.async_add_executor_job(client.login)
        devices = await hass.async_add_executor_job(client.get_devices)
    except RevogiAuthenticationError as err:
        _LOGGER.error("Authentication error: %s", err)
        raise InvalidAuth from err
    except RevogiTransportError as err:
        _LOGGER.error("Connection error: %s", err)
        raise CannotConnect from err
    except RevogiError as err:
        _LOGGER.error("Revogi error: %s", err)
        raise CannotConnect from err
    finally:
        await hass.async_add_executor_job(client.close)

    return {
        "title": f"{DEFAULT_NAME} ({data[CONF_USERNAME]})",
        "device_count": len(devices),
    }


class ConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Revogi."""

    VERSION = 1

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> RevogiOptionsFlow:
        """Get the options flow for this handler."""
        return RevogiOptionsFlow(config_entry)

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}

        if user_input is not None:
            try:
                info = await validate_input(self.hass, user_input)
            except CannotConnect:
                errors["base"] = "cannot_connect"
            except InvalidAuth:
                errors["base"] = "invalid_auth"
            except Exception:  # pylint: disable=broad-except
                _LOGGER.exception("Unexpected exception")
                errors["base"] = "unknown"
            else:
                await self.async_set_unique_id(user_input[CONF_USERNAME].lower())
                self._abort_if_unique_id_configured()

                return self.async_create_entry(
                    title=info["title"],
                    data=user_input,
                    description_placeholders={"device_count": str(info["device_count"])},
                )

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
            errors=errors,
        )

    async def async_step_reauth(self, entry_data: dict[str, Any]) -> FlowResult:
        """Handle a rejected login reported by the coordinator."""
        return await self.async_step_reauth_confirm()

    async def async_step_reauth_confirm(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Ask for a new password."""
        entry = self.hass.config_entries.async_get_entry(self.context["entry_id"])
        errors: dict[str, str] = {}

        if user_input is not None:
            data = {**entry.data, CONF_PASSWORD: user_input[CONF_PASSWORD]}
            try:
                await validate_input(self.hass, data)
            except CannotConnect:
                errors["base"] = "cannot_connect"
            except InvalidAuth:
                errors["base"] = "invalid_auth"
            except Exception:  # pylint: disable=broad-except
                _LOGGER.exception("Unexpected exception")
                errors["base"] = "unknown"
            else:
                return self.async_update_reload_and_abort(
                    entry, data=data, reason="reauth_successful"
                )

        return self.async_show_form(
            step_id="reauth_confirm",
            data_schema=vol.Schema({vol.Required(CONF_PASSWORD): cv.string}),
            errors=errors,
        )


class RevogiOptionsFlow(config_entries.OptionsFlow):
    """Edit polling settings and the per-strip port overrides."""

    def __init__(self, config_entry: config_entries.ConfigEntry) -> None:
        """Initialize options flow."""
        self._entry = config_entry
        self._options: dict[str, Any] = dict(config_entry.options)
        self._serial: str = ""

    def _current(self, key: str, default: Any) -> Any:
        return self._options.get(key, self._entry.data.get(key, default))

    def _known_serials(self) -> list[str]:
        coordinator = self.hass.data.get(DOMAIN, {}).get(self._entry.entry_id)
        if coordinator is None:
            return []
        return sorted(device.sn for device in coordinator.get_devices())

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Pick the polling settings and the strip to configure."""
        errors: dict[str, str] = {}

        if user_input is not None:
            user_input = dict(user_input)
            self._serial = user_input.pop(CONF_SERIAL).strip()
            if self._serial:
                self._options.update(user_input)
                return await self.async_step_device()
            errors[CONF_SERIAL] = "invalid_serial"

        serials = self._known_serials()
        data_schema = vol.Schema(
            {
                vol.Required(CONF_SERIAL, default=serials[0] if serials else ""): (
                    vol.In(serials) if serials else cv.string
                ),
                vol.Optional(
                    CONF_POLL_INTERVAL,
                    default=self._current(CONF_POLL_INTERVAL, DEFAULT_POLL_INTERVAL),
                ): vol.All(vol.Coerce(int), vol.Range(min=5)),
                vol.Optional(
                    CONF_MAX_RETRIES,
                    default=self._current(CONF_MAX_RETRIES, DEFAULT_MAX_RETRIES),
                ): vol.All(vol.Coerce(int), vol.Range(min=0, max=10)),
                vol.Optional(
                    CONF_COOLDOWN,
                    default=self._current(CONF_COOLDOWN, DEFAULT_COOLDOWN),
                ): vol.All(vol.Coerce(int), vol.Range(min=0, max=60)),
            }
        )

        return self.async_show_form(step_id="init", data_schema=data_schema, errors=errors)

    async def async_step_device(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Edit the pinned ports and usage thresholds of one strip.

        Ports are comma separated ("1, 3"); thresholds are port:watts pairs ("2:15").
        """
        errors: dict[str, str] = {}
        devices = dict(self._options.get(CONF_DEVICES) or {})
        current = device_configs_from_dict(devices).get(self._serial, DeviceConfig())

        if user_input is not None:
            try:
                pinned_on = parse_port_list(user_input.get(CONF_PINNED_ON, ""))
                pinned_off = parse_port_list(user_input.get(CONF_PINNED_OFF, ""))
                usage = parse_port_map(user_input.get(CONF_USAGE, ""))
            except ValueError as err:
                _LOGGER.debug("Invalid port override: %s", err)
                errors["base"] = "invalid_ports"
            else:
                if set(pinned_on) & set(pinned_off):
                    errors["base"] = "pinned_conflict"
                else:
                    state = {port: 1 for port in pinned_on}
                    state.update({port: 0 for port in pinned_off})
                    device_config = DeviceConfig(state=state, usage=usage)
                    if device_config == DeviceConfig():
                        devices.pop(self._serial, None)
                    else:
                        devices[self._serial] = device_config.to_dict()
                    self._options[CONF_DEVICES] = devices
                    _LOGGER.info("Updated overrides for %s", self._serial)
                    return self.async_create_entry(title="", data=self._options)

        data_schema = vol.Schema(
            {
                vol.Optional(
                    CONF_PINNED_ON, default=format_port_list(current.pinned_ports(True))
                ): cv.string,
                vol.Optional(
                    CONF_PINNED_OFF, default=format_port_list(current.pinned_ports(False))
                ): cv.string,
                vol.Optional(CONF_USAGE, default=format_port_map(current.usage)): cv.string,
            }
        )

        return self.async_show_form(
            step_id="device",
            data_schema=data_schema,
            errors=errors,
            description_placeholders={"serial": self._serial},
        )


class CannotConnect(exceptions.HomeAssistantError):
    """Error to indicate we cannot connect."""


class InvalidAuth(exceptions.HomeAssistantError):
    """Error to indicate there is invalid auth."""
