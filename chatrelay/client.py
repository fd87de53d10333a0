"""Chat client: a connection handle plus the log of received messages."""

import inspect
from typing import Callable, List, Optional

import websockets

from chatrelay.utils.exceptions import NotConnectedError
from chatrelay.utils.log import get_logger


class ChatClient:
    """WebSocket chat client for the broadcast relay.

    Every message the relay forwards, including this client's own, is
    appended to ``messages`` as it is received.
    """

    def __init__(self, server_url: str):
        self.server_url = server_url
        self.websocket = None
        self.messages: List[str] = []
        self.logger = get_logger(__name__)

    @property
    def connected(self) -> bool:
        return self.websocket is not None

    async def __aenter__(self) -> "ChatClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()

    async def connect(self) -> None:
        """Open the WebSocket connection to the relay."""
        self.websocket = await websockets.connect(self.server_url)
        self.logger.debug(f"Connected to {self.server_url}")

    async def disconnect(self) -> None:
        """Close the WebSocket connection."""
        if self.websocket is not None:
            await self.websocket.close()
            self.websocket = None

    async def send(self, text: str) -> bool:
        """Send text to the relay. Empty or blank input is declined."""
        if not text or not text.strip():
            return False
        if not self.connected:
            raise NotConnectedError("Cannot send message: not connected")

        await self.websocket.send(text)
        return True

    async def receive(self) -> str:
        """Wait for the next relayed message and record it."""
        if not self.connected:
            raise NotConnectedError("Cannot receive message: not connected")

        message = await self.websocket.recv()
        if isinstance(message, bytes):
            message = message.decode("utf-8")
        self.messages.append(message)
        return message

    async def listen(self, callback: Optional[Callable[[str], object]] = None) -> None:
        """Receive messages until the connection closes."""
        try:
            while self.connected:
                message = await self.receive()
                if callback is not None:
                    result = callback(message)
                    if inspect.isawaitable(result):
                        await result
        except websockets.exceptions.ConnectionClosed:
            self.logger.debug("Connection closed")
            self.websocket = None
