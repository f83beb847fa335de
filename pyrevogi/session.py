"""
Revogi session state and login.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable

from .endpoints import STATUS_OK, RevogiEndpoints
from .exceptions import RevogiAuthenticationError
from .models import Command, Envelope, parse_login_data
from .utils import mask_token

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Domain override and token of the current login."""
    domain: str = ""
    token: str = ""
    retry_count: int = 0
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    def update(self, domain: str, token: str) -> None:
        """Replace domain and token together; a successful login clears the retry counter."""
        with self.lock:
            self.domain = domain
            self.token = token
            self.retry_count = 0

    def record_failed_renewal(self) -> int:
        with self.lock:
            self.retry_count += 1
            return self.retry_count


class Authenticator:
    """Runs the login command and stores its result in a Session."""

    def __init__(
        self,
        session: Session,
        transmit: Callable[[Command], Envelope],
        log: logging.Logger = logger,
    ):
        self._session = session
        self._transmit = transmit
        self._logger = log

    def login(self, username: str, password: str) -> None:
        """
        Log in and populate the session.

        Raises:
            RevogiAuthenticationError: login rejected or no token returned
            RevogiTransportError: the request itself failed
            RevogiMalformedResponseError: the body could not be decoded
        """
        self._logger.debug("Logging in as %s", username)
        envelope = self._transmit(RevogiEndpoints.login(username, password))

        if envelope.status_code != STATUS_OK:
            raise RevogiAuthenticationError(
                f"login rejected with code {envelope.status_code}: {envelope.raw_data}"
            )

        login_data = parse_login_data(envelope.data)
        if not login_data.token:
            raise RevogiAuthenticationError("login response did not contain a token")

        self._session.update(login_data.domain, login_data.token)
        self._logger.info(
            "Logged in to Revogi as %s (domain: %s, token: %s)",
            username,
            login_data.domain or "default",
            mask_token(login_data.token),
        )
