"""
Revogi API Client

Main client class for controlling Revogi power strips through the cloud relay.
"""

import logging
import time
from typing import List, Optional

from .endpoints import (
    STATUS_OK,
    STATUS_SERVER_ERROR,
    STATUS_UNAUTHORIZED,
    RevogiEndpoints,
)
from .exceptions import (
    RevogiAuthenticationError,
    RevogiError,
    RevogiNotFoundError,
    RevogiRetryBudgetExhausted,
    RevogiServerBusyError,
    RevogiUnexpectedStatusError,
)
from .http_client import RevogiHttpClient, decode_envelope, encode_command
from .models import (
    Command,
    Config,
    Device,
    DeviceStats,
    Envelope,
    parse_device_stats_list,
    parse_devices_result,
    parse_power_result,
)
from .session import Authenticator, Session
from .utils import validate_port, validate_serial

logger = logging.getLogger(__name__)


class RevogiClient:
    """
    Client for the Revogi cloud relay.

    Every call goes through ``send``, which renews an expired session
    transparently (bounded by ``Config.max_retries``), applies the cooldown
    on server errors and raises a typed error for anything else.
    """

    def __init__(self, config: Config, http_client: Optional[RevogiHttpClient] = None):
        """
        Initialize Revogi client.

        Args:
            config: Credentials, retry budget, cooldown and per-device overrides
            http_client: Transport used to post commands
        """
        self.config = config
        self._http = http_client or RevogiHttpClient()
        self._logger = config.logger or logger

        self._session = Session()
        # Serializes commands and logins; shared with the session
        self._command_lock = self._session.lock
        self._authenticator = Authenticator(self._session, self._transmit, self._logger)

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        self._http.close()

    @property
    def session(self) -> Session:
        return self._session

    # Session Methods

    def login(self) -> None:
        """Log in with the configured credentials."""
        with self._command_lock:
            self._authenticator.login(self.config.username, self.config.password)

    def _budget_exhausted(self) -> RevogiRetryBudgetExhausted:
        return RevogiRetryBudgetExhausted(
            f"reached max token renewal attempts ({self.config.max_retries})"
        )

    def _renew_session(self, reason: str = "token expired") -> None:
        max_retries = self.config.max_retries
        if self._session.retry_count >= max_retries:
            raise self._budget_exhausted()

        self._logger.warning("%s. attempting to renew", reason)
        try:
            self._authenticator.login(self.config.username, self.config.password)
        except RevogiError as err:
            failures = self._session.record_failed_renewal()
            self._logger.warning("Session renewal failed (%d/%d): %s", failures, max_retries, err)
            raise RevogiAuthenticationError(f"renew failed: {err}") from err

    # Command Dispatch

    def _transmit(self, command: Command) -> Envelope:
        url = RevogiEndpoints.url(self._session.domain)
        form = encode_command(command, self._session.token)
        self._logger.debug("Sending command %d to %s", command.code, url)
        return decode_envelope(self._http.post_form(url, form))

    def send(self, command: Command) -> Envelope:
        """
        Send a command and return its successful envelope.

        A missing or expired token is renewed from the same budget: at most
        ``max_retries`` failed logins before RevogiRetryBudgetExhausted.

        Raises:
            RevogiTransportError: HTTP failure, never retried here
            RevogiMalformedResponseError: undecodable body
            RevogiAuthenticationError: session renewal failed
            RevogiRetryBudgetExhausted: renewal budget used up
            RevogiServerBusyError: status 500, after the cooldown sleep
            RevogiUnexpectedStatusError: any other status
        """
        with self._command_lock:
            if command.requires_session and not self._session.has_token:
                self._renew_session("no session token")

            max_retries = self.config.max_retries
            for attempt in range(max_retries + 1):
                envelope = self._transmit(command)

                if envelope.status_code == STATUS_OK:
                    return envelope

                if envelope.status_code == STATUS_UNAUTHORIZED and command.requires_session:
                    if attempt == max_retries:
                        break
                    self._renew_session()
                    continue

                if envelope.status_code == STATUS_SERVER_ERROR:
                    self._logger.warning(
                        "Server error on command %d, cooling down for %ss",
                        command.code,
                        self.config.cooldown_seconds,
                    )
                    time.sleep(self.config.cooldown_seconds)
                    raise RevogiServerBusyError(f"server busy: {envelope.raw_data}")

                raise RevogiUnexpectedStatusError(envelope.status_code, envelope.raw_data)

            raise self._budget_exhausted()

    # Device Information Methods

    def get_device(self, serial: str) -> Device:
        """Get a single device; an empty Device if the account has none with that serial."""
        validate_serial(serial)
        envelope = self.send(RevogiEndpoints.device_query(serial))
        devices = parse_devices_result(envelope.data).dev
        return devices[0] if devices else Device()

    def get_devices(self) -> List[Device]:
        envelope = self.send(RevogiEndpoints.device_query())
        return parse_devices_result(envelope.data).dev

    def get_device_stats(self, serial: str) -> DeviceStats:
        validate_serial(serial)
        envelope = self.send(RevogiEndpoints.device_stats(serial))
        stats = parse_device_stats_list(envelope.data)
        if not stats:
            raise RevogiNotFoundError(f"no stats returned for device {serial}")
        return stats[0]

    def refresh_devices(self) -> List[Device]:
        """List every device with its current stats attached."""
        devices = self.get_devices()
        for device in devices:
            try:
                device.stats = self.get_device_stats(device.sn)
            except RevogiNotFoundError:
                self._logger.debug("No stats for device %s", device.sn)
                device.stats = None
        return devices

    # Port Management Methods

    def set_power(self, serial: str, port: int, on: bool) -> bool:
        """Switch a port on or off. Port 0 switches the whole strip."""
        validate_serial(serial)
        if not validate_port(port):
            raise ValueError(f"Invalid port: {port}")

        envelope = self.send(RevogiEndpoints.power_set(serial, port, on))
        parse_power_result(envelope.data, serial)
        self._logger.debug("Port %d of %s switched %s", port, serial, "on" if on else "off")
        return True

    def turn_on(self, serial: str, port: int) -> bool:
        """Turn on specific port."""
        return self.set_power(serial, port, True)

    def turn_off(self, serial: str, port: int) -> bool:
        """Turn off specific port."""
        return self.set_power(serial, port, False)

    def enforce_pinned_states(self, device: Device) -> List[int]:
        """Switch pinned ports back to their configured state; return the ports changed."""
        if device.stats is None:
            return []

        drift = self.config.device_config(device.sn).ports_out_of_state(device.stats)
        for port, on in drift.items():
            self._logger.info("Restoring pinned state of port %d on %s", port, device.sn)
            self.set_power(device.sn, port, on)
        return list(drift)
