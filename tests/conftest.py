"""Shared fixtures for the relay tests."""

from collections import namedtuple

import pytest

from chatrelay.ws.endpoints.chat.manager import BroadcastRelay
from chatrelay.ws.endpoints.chat.models import Connection

Address = namedtuple("Address", ["host", "port"])


class FakeWebSocket:
    """Records what the relay sends; optionally fails or runs a hook on send."""

    def __init__(self, port: int = 50000, fail_with: Exception = None, on_send=None):
        self.client = Address("127.0.0.1", port)
        self.accepted = False
        self.sent = []
        self.closed_with = None
        self.fail_with = fail_with
        self.on_send = on_send

    async def accept(self):
        self.accepted = True

    async def send_text(self, text):
        if self.on_send is not None:
            self.on_send()
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(text)

    async def close(self, code=1000, reason=""):
        self.closed_with = (code, reason)


@pytest.fixture
def relay():
    return BroadcastRelay()


@pytest.fixture
def open_connection():
    """Factory for connections that have completed the handshake."""
    ports = iter(range(50000, 60000))

    async def _open(**kwargs):
        connection = Connection(FakeWebSocket(port=next(ports), **kwargs))
        await connection.open()
        return connection

    return _open
