"""Connection models for the broadcast relay."""

import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from fastapi import WebSocket, status
from pydantic import BaseModel

from chatrelay.utils.exceptions import ConnectionClosedError, DeliveryError


class ConnectionState(str, Enum):
    """Connection lifecycle states."""

    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class Connection:
    """One client's live channel to the relay."""

    def __init__(self, websocket: WebSocket, connection_id: Optional[str] = None):
        self.id = connection_id or uuid.uuid4().hex
        self.websocket = websocket
        self.state = ConnectionState.CONNECTING
        self.connected_at: Optional[datetime] = None

    def __repr__(self) -> str:
        return f"Connection(id={self.id!r}, state={self.state.value})"

    @property
    def remote(self) -> str:
        """Peer address label for log lines."""
        client = getattr(self.websocket, "client", None)
        if client is None:
            return "unknown"
        return f"{client.host}:{client.port}"

    @property
    def is_open(self) -> bool:
        return self.state == ConnectionState.OPEN

    async def open(self) -> None:
        """Complete the handshake: Connecting -> Open."""
        if self.state != ConnectionState.CONNECTING:
            raise ConnectionClosedError(self.id)
        await self.websocket.accept()
        self.state = ConnectionState.OPEN
        self.connected_at = datetime.now()

    def mark_closed(self) -> None:
        self.state = ConnectionState.CLOSED

    async def send(self, text: str) -> None:
        """Send one text frame, raising DeliveryError on failure."""
        if not self.is_open:
            raise ConnectionClosedError(self.id)
        try:
            await self.websocket.send_text(text)
        except Exception as e:
            raise DeliveryError(
                f"Failed to send to connection {self.id}: {e}", connection_id=self.id
            ) from e

    async def close(
        self, code: int = status.WS_1000_NORMAL_CLOSURE, reason: str = ""
    ) -> None:
        """Close the socket and move to Closed."""
        was_open = self.is_open
        self.mark_closed()
        if was_open:
            await self.websocket.close(code=code, reason=reason)


class RelayStatus(BaseModel):
    """Connection information for status reporting."""

    connections: int
    connection_ids: List[str]
