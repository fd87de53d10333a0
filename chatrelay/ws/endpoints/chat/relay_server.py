"""WebSocket endpoint that feeds client messages into the broadcast relay."""

import traceback
from typing import Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from chatrelay.config import WS_PATH
from chatrelay.utils.log import get_logger
from .manager import BroadcastRelay
from .models import Connection, Message


class ChatWebSocketServer:
    """Accepts chat connections and relays each text frame to everyone."""

    def __init__(self, relay: Optional[BroadcastRelay] = None, path: str = WS_PATH):
        self.relay = relay or BroadcastRelay()
        self.path = path
        self.logger = get_logger(__name__)
        self.router = APIRouter()

        self._setup_routes()

    def _setup_routes(self) -> None:
        """Setup WebSocket routes."""

        @self.router.websocket(self.path)
        async def chat_websocket(websocket: WebSocket):
            """WebSocket endpoint for chat clients."""
            await self._handle_websocket_connection(websocket)

    async def _handle_websocket_connection(self, websocket: WebSocket) -> None:
        """Handle individual WebSocket connection lifecycle."""

        connection = Connection(websocket)
        try:
            await connection.open()
            self.relay.register(connection)

            await self._message_processing_loop(connection)

        except WebSocketDisconnect as e:
            self.logger.debug(f"WebSocket {connection.id} closed with code {e.code}")
        except Exception as e:
            self.logger.error(
                f"Unexpected error in WebSocket handler for {connection.id}: {e}\n"
                f"{traceback.format_exc()}"
            )
        finally:
            # Always ensure cleanup
            self.relay.unregister(connection)

    async def _message_processing_loop(self, connection: Connection) -> None:
        """Main message processing loop."""

        while True:
            data = await connection.websocket.receive_text()
            await self.relay.relay(
                connection, Message(sender_id=connection.id, text=data)
            )


# Create server instance and export router
server = ChatWebSocketServer()
relay = server.relay
router = server.router
