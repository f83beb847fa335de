"""
Revogi API Exceptions

Custom exception classes for the Revogi cloud API client.
"""

from typing import Optional


class RevogiError(Exception):
    """Base exception for all Revogi API errors."""
    pass


class RevogiTransportError(RevogiError):
    """Raised when the HTTP request fails or returns a non-2xx status."""
    pass


class RevogiMalformedResponseError(RevogiError):
    """Raised when a response body is not a well-formed envelope."""
    pass


class RevogiAuthenticationError(RevogiError):
    """Raised when login is rejected or returns no session token."""
    pass


class RevogiRetryBudgetExhausted(RevogiError):
    """Raised when session renewal has been attempted max_retries times."""
    pass


class RevogiServerBusyError(RevogiError):
    """Raised after the cooldown that follows a status 500 envelope."""
    pass


class RevogiUnexpectedStatusError(RevogiError):
    """Raised for any other non-success envelope status."""

    def __init__(self, code: int, raw_data: Optional[str] = None):
        super().__init__(f"unexpected json response code: {code}, body: {raw_data}")
        self.code = code
        self.raw_data = raw_data


class RevogiUnexpectedResultError(RevogiError):
    """Raised when a power command is not echoed back as expected."""

    def __init__(self, raw: str):
        super().__init__(f"unexpected result: {raw}")
        self.raw = raw


class RevogiNotFoundError(RevogiError):
    """Raised when a query returns no rows."""
    pass
