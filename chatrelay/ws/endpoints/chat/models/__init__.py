"""Models for the chat relay endpoint."""

from .connection import Connection, ConnectionState, RelayStatus
from .message import Message

__all__ = [
    "Connection",
    "ConnectionState",
    "RelayStatus",
    "Message",
]
