"""Broadcast chat relay over WebSockets."""

__version__ = "0.1.0"
