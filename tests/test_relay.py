"""Tests for the broadcast relay."""

import logging

import pytest
from pydantic import ValidationError

from chatrelay.utils.exceptions import ConnectionClosedError, DeliveryError
from chatrelay.ws.endpoints.chat.models import ConnectionState, Message


@pytest.mark.asyncio
async def test_register_unregister_sequence(relay, open_connection):
    """Active set is registered minus unregistered, and unregister is idempotent."""
    a = await open_connection()
    b = await open_connection()
    c = await open_connection()
    never_registered = await open_connection()

    for connection in (a, b, c):
        relay.register(connection)
    relay.unregister(b)
    relay.unregister(b)
    relay.unregister(never_registered)

    assert set(relay.connections) == {a, c}
    assert relay.connection_count == 2
    assert b.state == ConnectionState.CLOSED
    assert not relay.is_registered(b)


@pytest.mark.asyncio
async def test_relay_delivers_once_to_everyone_including_sender(relay, open_connection):
    connections = [await open_connection() for _ in range(3)]
    for connection in connections:
        relay.register(connection)

    delivered = await relay.relay(connections[0], "hi")

    assert delivered == 3
    for connection in connections:
        assert connection.websocket.sent == ["hi"]


@pytest.mark.asyncio
async def test_relay_forwards_text_verbatim(relay, open_connection):
    a = await open_connection()
    relay.register(a)

    payload = '  {"not": "parsed"} é '
    await relay.relay(a, Message(sender_id=a.id, text=payload))

    assert a.websocket.sent == [payload]


@pytest.mark.asyncio
async def test_relay_forwards_empty_text(relay, open_connection):
    a = await open_connection()
    relay.register(a)

    assert await relay.relay(a, "") == 1
    assert a.websocket.sent == [""]


@pytest.mark.asyncio
async def test_failing_recipient_is_isolated(relay, open_connection):
    a = await open_connection()
    broken = await open_connection(fail_with=RuntimeError("socket gone"))
    c = await open_connection()
    for connection in (a, broken, c):
        relay.register(connection)

    delivered = await relay.relay(a, "hi")

    assert delivered == 2
    assert a.websocket.sent == ["hi"]
    assert c.websocket.sent == ["hi"]
    assert broken.websocket.sent == []


@pytest.mark.asyncio
async def test_recipient_disconnecting_mid_broadcast(relay, open_connection):
    """A connection leaving during a broadcast does not disturb the others."""
    c = await open_connection()
    a = await open_connection(on_send=lambda: relay.unregister(c))
    b = await open_connection()
    for connection in (a, b, c):
        relay.register(connection)

    delivered = await relay.relay(a, "hi")

    assert delivered == 2
    assert a.websocket.sent == ["hi"]
    assert b.websocket.sent == ["hi"]
    assert c.websocket.sent == []
    assert set(relay.connections) == {a, b}


@pytest.mark.asyncio
async def test_unregistered_sender_is_dropped(relay, open_connection):
    a = await open_connection()
    stranger = await open_connection()
    relay.register(a)

    assert await relay.relay(stranger, "hi") == 0
    assert a.websocket.sent == []
    assert stranger.websocket.sent == []


@pytest.mark.asyncio
async def test_no_history_for_late_joiners(relay, open_connection):
    a = await open_connection()
    relay.register(a)
    await relay.relay(a, "hi")

    b = await open_connection()
    relay.register(b)
    await relay.relay(a, "bye")

    assert a.websocket.sent == ["hi", "bye"]
    assert b.websocket.sent == ["bye"]


@pytest.mark.asyncio
async def test_disconnected_peer_receives_nothing(relay, open_connection):
    a = await open_connection()
    b = await open_connection()
    relay.register(a)
    relay.register(b)
    relay.unregister(b)

    assert await relay.relay(a, "hi") == 1
    assert a.websocket.sent == ["hi"]
    assert b.websocket.sent == []


@pytest.mark.asyncio
async def test_close_all(relay, open_connection):
    a = await open_connection()
    b = await open_connection()
    relay.register(a)
    relay.register(b)

    async def broken_close(code=1000, reason=""):
        raise RuntimeError("already closed")

    b.websocket.close = broken_close

    await relay.close_all()

    assert relay.connection_count == 0
    assert a.websocket.closed_with == (1001, "Relay shutdown")
    assert a.state == ConnectionState.CLOSED
    assert b.state == ConnectionState.CLOSED


@pytest.mark.asyncio
async def test_status(relay, open_connection):
    a = await open_connection()
    relay.register(a)

    status = relay.status()

    assert status.connections == 1
    assert status.connection_ids == [a.id]


@pytest.mark.asyncio
async def test_connect_and_disconnect_are_logged(relay, open_connection, caplog):
    a = await open_connection()

    with caplog.at_level(logging.INFO):
        relay.register(a)
        relay.unregister(a)

    levels = [record.levelname for record in caplog.records]
    assert "CONNECT" in levels
    assert "DISCONNECT" in levels


@pytest.mark.asyncio
async def test_connection_lifecycle(open_connection):
    connection = await open_connection()

    assert connection.state == ConnectionState.OPEN
    assert connection.websocket.accepted
    assert connection.connected_at is not None
    assert connection.remote.startswith("127.0.0.1:")

    await connection.close()
    assert connection.state == ConnectionState.CLOSED

    with pytest.raises(ConnectionClosedError):
        await connection.send("hi")
    with pytest.raises(ConnectionClosedError):
        await connection.open()


@pytest.mark.asyncio
async def test_connection_send_failure_is_wrapped(open_connection):
    connection = await open_connection(fail_with=RuntimeError("boom"))

    with pytest.raises(DeliveryError) as exc_info:
        await connection.send("hi")

    assert exc_info.value.connection_id == connection.id
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_message_is_immutable():
    message = Message(sender_id="abc", text="hi")

    with pytest.raises(ValidationError):
        message.text = "changed"


@pytest.mark.asyncio
async def test_unregister_unknown_connection_is_a_no_op(relay, open_connection):
    a = await open_connection()
    stranger = await open_connection()
    relay.register(a)

    relay.unregister(stranger)

    assert stranger.state == ConnectionState.OPEN
    assert relay.connections == [a]
