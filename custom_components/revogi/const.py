"""Constants for revogi."""

from typing import Dict, Final, List, TypedDict

from homeassistant.const import UnitOfElectricCurrent, UnitOfPower

# Base component constants
DOMAIN: Final[str] = "revogi"
VERSION: Final[str] = "1.0.0"
PLATFORMS: Final[List[str]] = ["binary_sensor", "sensor", "switch"]
MANUFACTURER: Final[str] = "Revogi"

# Icons
PLUG_ICON: Final[str] = "mdi:power-socket-eu"

# Defaults
DEFAULT_NAME: Final[str] = "Revogi"
DEFAULT_POLL_INTERVAL: Final[int] = 30
DEFAULT_MAX_RETRIES: Final[int] = 3
DEFAULT_COOLDOWN: Final[int] = 5

# Configuration options
CONF_POLL_INTERVAL: Final[str] = "poll_interval"
CONF_MAX_RETRIES: Final[str] = "max_retries"
CONF_COOLDOWN: Final[str] = "cooldown"
CONF_DEVICES: Final[str] = "devices"

# Delay before refreshing after a switch command
COMMAND_SETTLE_DELAY: Final[float] = 1.0

MASTER_PORT: Final[int] = 0


class _SensorTypeDict(TypedDict):
    name: str
    unit: str
    icon: str


PORT_SENSOR_TYPES: Final[Dict[str, _SensorTypeDict]] = {
    "watt": {
        "name": "Power",
        "unit": UnitOfPower.WATT,
        "icon": "mdi:lightbulb-outline",
    },
    "amp": {
        "name": "Current",
        "unit": UnitOfElectricCurrent.MILLIAMPERE,
        "icon": "mdi:current-ac",
    },
}


def get_strip_device_info(sn: str, device=None):
    """Get device info for a power strip; falls back to the serial before the first poll."""
    if device is None:
        return {
            "identifiers": {(DOMAIN, sn)},
            "name": f"Revogi {sn}",
            "manufacturer": MANUFACTURER,
        }
    return {
        "identifiers": {(DOMAIN, sn)},
        "name": device.name or f"Revogi {sn}",
        "manufacturer": MANUFACTURER,
        "model": device.socket_type or "Smart Strip",
        "sw_version": device.ver or "Unknown",
    }


def get_port_device_info(sn: str, port: int, device=None):
    """Get device info for a single port of a power strip."""
    info = {
        "identifiers": {(DOMAIN, f"{sn}_port_{port}")},
        "name": f"Port {port}",
        "manufacturer": MANUFACTURER,
        "model": f"Revogi Port {port}",
        "via_device": (DOMAIN, sn),
    }
    if device is not None:
        info["name"] = device.port_name(port)
        info["sw_version"] = device.ver or "Unknown"
    return info
