"""
Revogi API Endpoints

Command codes and command builders for the Revogi cloud relay.
"""

from .models import Command, PortState

API_HOST = "server.revogi.net"
API_PATH = "/services/ajax.html"
PROTOCOL = "3"

STATUS_OK = 200
STATUS_UNAUTHORIZED = 401
STATUS_SERVER_ERROR = 500


class RevogiEndpoints:
    """Revogi command codes and payload builders."""

    LOGIN = 101
    DEVICE_QUERY = 500
    DEVICE_STATS = 511
    POWER_SET = 200

    ALL_DEVICES = "all"

    @staticmethod
    def url(domain: str = "") -> str:
        """Endpoint URL for a session domain, or the default host."""
        return f"https://{domain or API_HOST}{API_PATH}"

    @staticmethod
    def login(username: str, password: str) -> Command:
        return Command(
            RevogiEndpoints.LOGIN,
            {"username": username, "password": password},
            requires_session=False,
        )

    @staticmethod
    def device_query(serial: str = ALL_DEVICES) -> Command:
        """Query one device by serial, or every device with "all"."""
        return Command(RevogiEndpoints.DEVICE_QUERY, {"protocol": PROTOCOL, "dev": serial})

    @staticmethod
    def device_stats(serial: str) -> Command:
        return Command(RevogiEndpoints.DEVICE_STATS, {"protocol": PROTOCOL, "sn": [serial]})

    @staticmethod
    def power_set(serial: str, port: int, on: bool) -> Command:
        """Switch a port; port 0 addresses every port of the strip."""
        state = PortState.ON if on else PortState.OFF
        return Command(
            RevogiEndpoints.POWER_SET,
            {"protocol": PROTOCOL, "sn": serial, "port": port, "state": int(state)},
        )
