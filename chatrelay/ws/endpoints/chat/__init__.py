"""Broadcast chat WebSocket endpoint."""

from .relay_server import ChatWebSocketServer, relay, router, server

__all__ = ["ChatWebSocketServer", "relay", "router", "server"]
