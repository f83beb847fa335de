"""
Revogi API Data Models

Data classes representing Revogi devices, telemetry and command envelopes.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional

from .exceptions import RevogiMalformedResponseError, RevogiUnexpectedResultError

POWER_RESULT_VERB = "send2"


class PortState(IntEnum):
    """Switch state of a single port."""
    OFF = 0
    ON = 1


@dataclass(frozen=True)
class Command:
    """A single vendor call: command code plus JSON payload."""
    code: int
    payload: Any
    requires_session: bool = True


@dataclass
class Envelope:
    """Generic response wrapper returned for every command."""
    status_code: int
    data: Any
    response_code: int = 0
    correlation: str = ""

    @property
    def raw_data(self) -> str:
        return json.dumps(self.data)


@dataclass
class LoginData:
    """Login result payload."""
    user_id: str = ""
    domain: str = ""
    name: str = ""
    regid: str = ""
    avatar: str = ""
    message: str = ""
    url: str = ""
    token: str = ""


@dataclass
class DeviceStats:
    """Per-port telemetry of a power strip."""
    sn: str = ""
    softver: str = ""
    online: int = 0
    amp: List[int] = field(default_factory=list)
    watt: List[int] = field(default_factory=list)
    switch: List[int] = field(default_factory=list)

    @property
    def is_online(self) -> bool:
        return self.online == 1

    @property
    def port_count(self) -> int:
        return len(self.switch)

    def port_state(self, port: int) -> Optional[bool]:
        """Return True if the port is switched on, None if unknown."""
        value = _port_value(self.switch, port)
        return None if value is None else value == PortState.ON

    def port_watts(self, port: int) -> Optional[int]:
        return _port_value(self.watt, port)

    def port_amps(self, port: int) -> Optional[int]:
        return _port_value(self.amp, port)


@dataclass
class Device:
    """A registered power strip. ``sn`` is the identity key."""
    sn: str = ""
    name: str = ""
    ver: str = ""
    nver: str = ""
    pname: List[str] = field(default_factory=list)
    line: int = 0
    socket_type: str = ""
    ip: str = ""
    mac: str = ""
    date_added: str = ""
    gateway_ip: str = ""
    protect: int = 0
    sak: str = ""
    register: int = 0
    stats: Optional[DeviceStats] = None

    @property
    def is_registered(self) -> bool:
        return self.register == 1

    def port_name(self, port: int) -> str:
        if 1 <= port <= len(self.pname):
            return self.pname[port - 1]
        return f"Port {port}"


@dataclass
class DevicesResult:
    """Payload of the device query command."""
    dev: List[Device] = field(default_factory=list)
    url: str = ""


@dataclass
class DeviceConfig:
    """Per-device overrides.

    state: port -> pinned switch state (0 or 1)
    usage: port -> wattage above which the port counts as in use
    """
    state: Dict[int, int] = field(default_factory=dict)
    usage: Dict[int, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeviceConfig":
        """Build from stored options, where JSON turned port keys into strings."""
        try:
            return cls(
                state={int(port): int(value) for port, value in (data.get("state") or {}).items()},
                usage={int(port): int(value) for port, value in (data.get("usage") or {}).items()},
            )
        except (AttributeError, TypeError, ValueError) as err:
            raise ValueError(f"Invalid device override {data!r}: {err}") from err

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        """Stored options form, with string port keys."""
        return {
            "state": {str(port): int(value) for port, value in sorted(self.state.items())},
            "usage": {str(port): int(value) for port, value in sorted(self.usage.items())},
        }

    def pinned_ports(self, on: bool) -> List[int]:
        return sorted(port for port in self.state if self.pinned_state(port) is on)

    def pinned_state(self, port: int) -> Optional[bool]:
        if port not in self.state:
            return None
        return self.state[port] == PortState.ON

    def in_use(self, port: int, watts: Optional[int]) -> Optional[bool]:
        if watts is None:
            return None
        return watts > self.usage.get(port, 0)

    def ports_out_of_state(self, stats: DeviceStats) -> Dict[int, bool]:
        """Map each pinned port whose reported state differs to its pinned state."""
        drift = {}
        for port in sorted(self.state):
            wanted = self.pinned_state(port)
            actual = stats.port_state(port)
            if actual is not None and actual != wanted:
                drift[port] = wanted
        return drift


@dataclass(frozen=True)
class Config:
    """Client configuration, fixed for the lifetime of a client."""
    username: str
    password: str
    poll_interval: int = 30
    max_retries: int = 3
    cooldown_seconds: float = 5
    devices: Dict[str, DeviceConfig] = field(default_factory=dict)
    logger: Optional[logging.Logger] = None

    def device_config(self, sn: str) -> DeviceConfig:
        return self.devices.get(sn) or DeviceConfig()


def device_configs_from_dict(data: Optional[Dict[str, Any]]) -> Dict[str, DeviceConfig]:
    """Parse ``{serial: {"state": {...}, "usage": {...}}}`` overrides."""
    return {sn: DeviceConfig.from_dict(raw) for sn, raw in (data or {}).items()}


def _port_value(values: List[int], port: int) -> Optional[int]:
    if 1 <= port <= len(values):
        return values[port - 1]
    return None


def _require_object(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise RevogiMalformedResponseError(f"Invalid {what} payload: {data!r}")
    return data


# Response parsing helpers
def parse_login_data(data: Any) -> LoginData:
    """Parse the data field of a login response."""
    data = _require_object(data, "login")
    return LoginData(
        user_id=str(data.get("user_id", "")),
        domain=str(data.get("domain", "") or ""),
        name=str(data.get("name", "")),
        regid=str(data.get("regid", "")),
        avatar=str(data.get("avatar", "")),
        message=str(data.get("message", "")),
        url=str(data.get("url", "")),
        token=str(data.get("token", "") or ""),
    )


def parse_device(data: Any) -> Device:
    """Parse one entry of the device list."""
    data = _require_object(data, "device")
    try:
        return Device(
            sn=str(data.get("sn", "")),
            name=str(data.get("name", "")),
            ver=str(data.get("ver", "")),
            nver=str(data.get("nver", "")),
            pname=[str(name) for name in data.get("pname") or []],
            line=int(data.get("line", 0)),
            socket_type=str(data.get("socket_type", "")),
            ip=str(data.get("ip", "")),
            mac=str(data.get("mac", "")),
            date_added=str(data.get("dateAdd", "")),
            gateway_ip=str(data.get("gateway_ip", "")),
            protect=int(data.get("protect", 0)),
            sak=str(data.get("sak", "")),
            register=int(data.get("register", 0)),
        )
    except (TypeError, ValueError) as err:
        raise RevogiMalformedResponseError(f"Failed to parse device {data}: {err}") from err


def parse_devices_result(data: Any) -> DevicesResult:
    """Parse the data field of a device query response."""
    data = _require_object(data, "device list")
    devices = data.get("dev") or []
    if not isinstance(devices, list):
        raise RevogiMalformedResponseError(f"Invalid device list: {devices!r}")
    return DevicesResult(
        dev=[parse_device(item) for item in devices],
        url=str(data.get("url", "")),
    )


def parse_device_stats(data: Any) -> DeviceStats:
    """Parse one entry of a device stats response."""
    data = _require_object(data, "device stats")
    try:
        return DeviceStats(
            sn=str(data.get("sn", "")),
            softver=str(data.get("softver", "")),
            online=int(data.get("online", 0)),
            amp=[int(v) for v in data.get("amp") or []],
            watt=[int(v) for v in data.get("watt") or []],
            switch=[int(v) for v in data.get("switch") or []],
        )
    except (TypeError, ValueError) as err:
        raise RevogiMalformedResponseError(f"Failed to parse device stats {data}: {err}") from err


def parse_device_stats_list(data: Any) -> List[DeviceStats]:
    """Parse the data field of a device stats response."""
    if not isinstance(data, list):
        raise RevogiMalformedResponseError(f"Invalid device stats list: {data!r}")
    return [parse_device_stats(item) for item in data]


def parse_power_result(data: Any, serial: str) -> None:
    """Check the echo of a power command.

    The device answers ``"send2:<serial>"``; anything else is rejected.
    """
    if not isinstance(data, str):
        raise RevogiUnexpectedResultError(json.dumps(data))
    verb, _, echoed = data.partition(":")
    if verb != POWER_RESULT_VERB or echoed != serial:
        raise RevogiUnexpectedResultError(data)
