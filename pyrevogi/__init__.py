"""
Revogi Cloud API Client Library

A Python client library for controlling Revogi power strips through the
Revogi cloud relay (server.revogi.net).
"""

__version__ = "1.0.0"

from .client import RevogiClient
from .endpoints import RevogiEndpoints
from .http_client import RevogiHttpClient
from .models import (
    Command,
    Config,
    Device,
    DeviceConfig,
    DeviceStats,
    Envelope,
)
from .session import Session
from .exceptions import (
    RevogiError,
    RevogiTransportError,
    RevogiMalformedResponseError,
    RevogiAuthenticationError,
    RevogiRetryBudgetExhausted,
    RevogiServerBusyError,
    RevogiUnexpectedStatusError,
    RevogiUnexpectedResultError,
    RevogiNotFoundError,
)

__all__ = [
    "RevogiClient",
    "RevogiEndpoints",
    "RevogiHttpClient",
    "Command",
    "Config",
    "Device",
    "DeviceConfig",
    "DeviceStats",
    "Envelope",
    "Session",
    "RevogiError",
    "RevogiTransportError",
    "RevogiMalformedResponseError",
    "RevogiAuthenticationError",
    "RevogiRetryBudgetExhausted",
    "RevogiServerBusyError",
    "RevogiUnexpectedStatusError",
    "RevogiUnexpectedResultError",
    "RevogiNotFoundError",
]
