"""Broadcast relay: the registry of open connections and the fan-out."""

import asyncio
from typing import Dict, List, Union

from fastapi import status

from ..models import Connection, Message, RelayStatus
from chatrelay.utils.log import get_logger


class BroadcastRelay:
    """Forwards every inbound message to every open connection, sender included.

    Mutations (register/unregister) never await, so on a single event loop
    they cannot interleave with each other. A broadcast iterates a snapshot
    of the registry, so connections may come and go while it is in flight.
    """

    def __init__(self):
        self._connections: Dict[str, Connection] = {}  # connection_id -> connection
        self.logger = get_logger(__name__)

    def reset(self) -> None:
        """Drop all connections without closing them - useful for testing."""
        self._connections.clear()
        self.logger.info("Broadcast relay reset")

    @property
    def connections(self) -> List[Connection]:
        return list(self._connections.values())

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def is_registered(self, connection: Connection) -> bool:
        return self._connections.get(connection.id) is connection

    def register(self, connection: Connection) -> None:
        """Add a connection to the active set."""
        self._connections[connection.id] = connection
        self.logger.connect(
            f"Connected {connection.id} from {connection.remote} "
            f"({self.connection_count} connected)"
        )

    def unregister(self, connection: Connection) -> None:
        """Remove a connection from the active set. Unknown connections are ignored."""
        if not self.is_registered(connection):
            return
        del self._connections[connection.id]
        connection.mark_closed()
        self.logger.disconnect(
            f"Disconnected {connection.id} from {connection.remote} "
            f"({self.connection_count} connected)"
        )

    async def relay(self, sender: Connection, message: Union[Message, str]) -> int:
        """Deliver a message verbatim to every registered connection.

        Returns the number of connections the text was delivered to. Failures
        on individual recipients are logged and never raised.
        """
        if isinstance(message, str):
            message = Message(sender_id=sender.id, text=message)

        if not self.is_registered(sender):
            self.logger.debug(f"Dropping message from unregistered {sender.id}")
            return 0

        recipients = self.connections
        results = await asyncio.gather(
            *(self._deliver(recipient, message.text) for recipient in recipients)
        )
        delivered = sum(results)

        self.logger.debug(
            f"Relayed message from {sender.id} to {delivered}/{len(recipients)} connections"
        )
        return delivered

    async def _deliver(self, recipient: Connection, text: str) -> bool:
        # Closed between the snapshot and now
        if not recipient.is_open:
            return False
        try:
            await recipient.send(text)
            return True
        except Exception as e:
            self.logger.failure(f"Delivery to {recipient.id} failed: {e}")
            return False

    async def close_all(
        self, code: int = status.WS_1001_GOING_AWAY, reason: str = "Relay shutdown"
    ) -> None:
        """Close and unregister every connection."""
        connections = self.connections
        for connection in connections:
            try:
                await connection.close(code=code, reason=reason)
            except Exception as e:
                self.logger.warning(f"Error closing {connection.id}: {e}")
            finally:
                self.unregister(connection)

        if connections:
            self.logger.info(f"Closed {len(connections)} connections on shutdown")

    def status(self) -> RelayStatus:
        return RelayStatus(
            connections=self.connection_count,
            connection_ids=list(self._connections.keys()),
        )
