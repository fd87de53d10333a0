"""Custom exceptions for the chat relay."""

from typing import Optional


class RelayError(Exception):
    """Base exception for chat relay errors."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigurationError(RelayError):
    """Raised when a configuration value cannot be used."""

    pass


class DeliveryError(RelayError):
    """Raised when a message cannot be delivered to one connection."""

    def __init__(
        self,
        message: str,
        connection_id: Optional[str] = None,
        error_code: Optional[str] = "delivery_failed",
    ):
        self.connection_id = connection_id
        super().__init__(message, error_code)


class ConnectionClosedError(DeliveryError):
    """Raised when sending on a connection that is already closed."""

    def __init__(self, connection_id: Optional[str] = None):
        super().__init__(
            f"Connection {connection_id} is closed",
            connection_id=connection_id,
            error_code="connection_closed",
        )


class NotConnectedError(RelayError):
    """Raised when a client is used before it has connected."""

    pass
