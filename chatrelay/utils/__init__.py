"""Utility functions package."""

from .exceptions import (
    RelayError,
    ConfigurationError,
    DeliveryError,
    ConnectionClosedError,
    NotConnectedError,
)
from .log import get_logger

__all__ = [
    "RelayError",
    "ConfigurationError",
    "DeliveryError",
    "ConnectionClosedError",
    "NotConnectedError",
    "get_logger",
]
